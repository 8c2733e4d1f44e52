import logging
import re

import numpy as np

from engine.tax_tables import TaxFacts
from engine.taxes import TaxCalculator, TaxResult
from schemas.tax import BracketDetailOut, BracketOut, TaxFactsOut, TaxResponse

logger = logging.getLogger(__name__)

_NUMBER_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')


class IncomeInputError(ValueError):
    """Client supplied an unusable income value"""


class MissingIncomeError(IncomeInputError):
    def __init__(self):
        super().__init__("Missing income parameter")


class InvalidIncomeError(IncomeInputError):
    def __init__(self):
        super().__init__("Income must be a non-negative number")


def parse_income(raw) -> float:
    """
    Parse the raw income query parameter.

    A blank value counts as zero. Anything else must be a plain, finite,
    non-negative decimal number.
    """
    if raw is None:
        raise MissingIncomeError()

    text = str(raw).strip()
    if text == '':
        return 0.0

    if not _NUMBER_PATTERN.match(text):
        raise InvalidIncomeError()

    value = float(text)
    if not np.isfinite(value) or value < 0:
        raise InvalidIncomeError()

    return value + 0.0  # -0 -> 0


def result_to_response(income: float, tax_facts: TaxFacts, result: TaxResult) -> TaxResponse:
    details = [
        BracketDetailOut(
            bracket_rate=d.rate,
            starting_range=d.lower_bound,
            ending_range=d.upper_bound,
            income_in_this_bracket=d.income_in_bracket,
            tax_for_this_bracket=d.tax_in_bracket,
        )
        for d in result.bracket_details
    ]
    return TaxResponse(
        tax_year=tax_facts.tax_year,
        filing_status=tax_facts.filing_status,
        standard_deduction=tax_facts.standard_deduction,
        income=income,
        taxable_income=result.taxable_income,
        bracket_details=details,
        total_tax_owed=result.total_tax_owed,
        effective_tax_rate=result.effective_tax_rate,
        marginal_tax_rate=result.marginal_tax_rate,
    )


def build_tax_payload(income: float, tax_facts: TaxFacts) -> TaxResponse:
    """
    Service to run the bracket calculation and merge in the tax facts.
    """
    result = TaxCalculator(tax_facts).calculate(income)
    logger.debug(
        "income=%s taxable=%s total_tax=%s brackets=%d",
        income, result.taxable_income, result.total_tax_owed, len(result.bracket_details),
    )
    return result_to_response(income, tax_facts, result)


def build_tax_facts_payload(tax_facts: TaxFacts) -> TaxFactsOut:
    return TaxFactsOut(
        tax_year=tax_facts.tax_year,
        filing_status=tax_facts.filing_status,
        standard_deduction=tax_facts.standard_deduction,
        brackets=[BracketOut(rate=b.rate, max=b.upper_bound) for b in tax_facts.brackets],
    )
