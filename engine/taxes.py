import numpy as np
from dataclasses import dataclass
from typing import List, Optional

from engine.tax_tables import TaxBracket, TaxFacts


@dataclass(frozen=True)
class BracketDetail:
    rate: float
    lower_bound: float
    upper_bound: Optional[float]  # None for the top bracket
    income_in_bracket: float
    tax_in_bracket: float


@dataclass(frozen=True)
class TaxResult:
    taxable_income: float
    bracket_details: List[BracketDetail]
    total_tax_owed: float
    effective_tax_rate: float
    marginal_tax_rate: float


def calculate_tax_details(gross_income, standard_deduction, brackets) -> TaxResult:
    """
    Progressive tax on gross income after a flat standard deduction.

    Args:
        gross_income: non-negative income, validated by the caller
        standard_deduction: flat amount subtracted before brackets apply
        brackets: TaxBracket sequence, ascending, last one unbounded

    Returns:
        TaxResult with one BracketDetail per bracket that received income.
    """
    taxable_income = max(0, gross_income - standard_deduction)

    remaining_income = taxable_income
    lower_bound = 0
    total_tax = 0
    marginal_rate = 0
    details = []

    for bracket in brackets:
        upper_bound = np.inf if bracket.upper_bound is None else bracket.upper_bound
        income_slice = max(0, min(remaining_income, upper_bound - lower_bound))

        if income_slice > 0:
            tax_for_slice = income_slice * bracket.rate
            details.append(BracketDetail(
                rate=bracket.rate,
                lower_bound=lower_bound,
                upper_bound=bracket.upper_bound,
                income_in_bracket=income_slice,
                tax_in_bracket=tax_for_slice,
            ))
            total_tax += tax_for_slice
            remaining_income -= income_slice
            marginal_rate = bracket.rate

        # Boundary amounts belong to the lower bracket
        lower_bound = upper_bound
        if remaining_income <= 0:
            break

    effective_rate = total_tax / gross_income if gross_income > 0 else 0

    return TaxResult(
        taxable_income=taxable_income,
        bracket_details=details,
        total_tax_owed=total_tax,
        effective_tax_rate=effective_rate,
        marginal_tax_rate=marginal_rate,
    )


class TaxCalculator:
    """
    Handles federal tax calculations for one tax-facts table.
    """

    def __init__(self, tax_facts: TaxFacts):
        self.tax_facts = tax_facts
        self.std_deduction = tax_facts.standard_deduction
        self.brackets: List[TaxBracket] = list(tax_facts.brackets)

    def calculate(self, income) -> TaxResult:
        return calculate_tax_details(income, self.std_deduction, self.brackets)
