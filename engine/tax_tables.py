from dataclasses import dataclass
from typing import Optional, Tuple


class BracketTableError(ValueError):
    """Raised when a tax-facts table is malformed."""


@dataclass(frozen=True)
class TaxBracket:
    rate: float
    upper_bound: Optional[float]  # None means no ceiling


@dataclass(frozen=True)
class TaxFacts:
    tax_year: int
    filing_status: str
    standard_deduction: float
    brackets: Tuple[TaxBracket, ...]


# Single filer, 2024 tax facts from IRS.gov
TAX_FACTS_2024_SINGLE = TaxFacts(
    tax_year=2024,
    filing_status='single',
    standard_deduction=14600,
    brackets=(
        TaxBracket(rate=0.10, upper_bound=11600),
        TaxBracket(rate=0.12, upper_bound=47150),
        TaxBracket(rate=0.22, upper_bound=100525),
        TaxBracket(rate=0.24, upper_bound=191950),
        TaxBracket(rate=0.32, upper_bound=243725),
        TaxBracket(rate=0.35, upper_bound=609350),
        TaxBracket(rate=0.37, upper_bound=None),
    ),
)


def validate_brackets(brackets):
    """
    Check that a bracket table covers 0 to infinity without gaps.

    Brackets must be non-empty, ascending by upper bound, with rates in
    (0, 1] and exactly one unbounded entry in last position.
    """
    if not brackets:
        raise BracketTableError("Bracket table is empty")

    previous_bound = 0
    last_index = len(brackets) - 1
    for i, bracket in enumerate(brackets):
        if not 0 < bracket.rate <= 1:
            raise BracketTableError(f"Bracket {i}: rate {bracket.rate} outside (0, 1]")

        if bracket.upper_bound is None:
            if i != last_index:
                raise BracketTableError(f"Bracket {i}: only the last bracket may be unbounded")
            continue

        if i == last_index:
            raise BracketTableError("Last bracket must have no upper bound")
        if bracket.upper_bound <= previous_bound:
            raise BracketTableError(
                f"Bracket {i}: upper bound {bracket.upper_bound} is not above {previous_bound}"
            )
        previous_bound = bracket.upper_bound


def validate_tax_facts(facts: TaxFacts):
    if facts.standard_deduction < 0:
        raise BracketTableError(f"Standard deduction {facts.standard_deduction} is negative")
    validate_brackets(facts.brackets)


def get_tax_facts() -> TaxFacts:
    """Active tax-facts table"""
    return TAX_FACTS_2024_SINGLE
