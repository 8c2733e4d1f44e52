import unittest
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from engine.tax_tables import TAX_FACTS_2024_SINGLE
from services.tax_service import (
    IncomeInputError, InvalidIncomeError, MissingIncomeError,
    build_tax_facts_payload, build_tax_payload, parse_income,
)


class TestParseIncome(unittest.TestCase):
    def test_missing(self):
        with self.assertRaises(MissingIncomeError) as ctx:
            parse_income(None)
        self.assertEqual(str(ctx.exception), "Missing income parameter")

    def test_valid_values(self):
        cases = {
            '50000': 50000.0,
            ' 50000 ': 50000.0,
            '1234.56': 1234.56,
            '.5': 0.5,
            '5.': 5.0,
            '1e3': 1000.0,
            '+7': 7.0,
            '0': 0.0,
            '-0': 0.0,
            '': 0.0,
            '   ': 0.0,
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(parse_income(raw), expected)

    def test_invalid_values(self):
        for raw in ['abc', '-5', '-0.01', 'inf', 'Infinity', 'nan', '1e999', '1,000', '1_000', '12abc', '.']:
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidIncomeError) as ctx:
                    parse_income(raw)
                self.assertEqual(str(ctx.exception), "Income must be a non-negative number")

    def test_errors_share_base_class(self):
        self.assertTrue(issubclass(MissingIncomeError, IncomeInputError))
        self.assertTrue(issubclass(InvalidIncomeError, IncomeInputError))


class TestBuildPayload(unittest.TestCase):
    def test_merges_tax_facts_and_result(self):
        payload = build_tax_payload(50000.0, TAX_FACTS_2024_SINGLE)
        data = payload.model_dump(by_alias=True)

        self.assertEqual(data['taxYear'], 2024)
        self.assertEqual(data['filingStatus'], 'single')
        self.assertEqual(data['standardDeduction'], 14600)
        self.assertEqual(data['income'], 50000)
        self.assertEqual(data['taxableIncome'], 35400)
        self.assertAlmostEqual(data['totalTaxOwed'], 4016, places=9)
        self.assertEqual(data['marginalTaxRate'], 0.12)
        self.assertAlmostEqual(data['effectiveTaxRate'], 0.08032, places=12)
        self.assertEqual(
            set(data['bracketDetails'][0]),
            {'bracketRate', 'startingRange', 'endingRange', 'incomeInThisBracket', 'taxForThisBracket'},
        )

    def test_top_bracket_has_null_ending_range(self):
        payload = build_tax_payload(1000000.0, TAX_FACTS_2024_SINGLE)
        self.assertIsNone(payload.bracket_details[-1].ending_range)
        self.assertEqual(payload.bracket_details[-1].starting_range, 609350)

    def test_tax_facts_payload(self):
        data = build_tax_facts_payload(TAX_FACTS_2024_SINGLE).model_dump(by_alias=True)
        self.assertEqual(data['standardDeduction'], 14600)
        self.assertEqual(len(data['brackets']), 7)
        self.assertEqual(data['brackets'][0], {'rate': 0.10, 'max': 11600})
        self.assertIsNone(data['brackets'][-1]['max'])


if __name__ == '__main__':
    unittest.main()
