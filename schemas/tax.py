from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BracketDetailOut(CamelModel):
    bracket_rate: float = Field(gt=0, le=1)
    starting_range: float = Field(ge=0)
    ending_range: Optional[float] = None
    income_in_this_bracket: float = Field(gt=0)
    tax_for_this_bracket: float = Field(ge=0)


class TaxResponse(CamelModel):
    """Tax facts merged with the calculation result"""
    # Tax facts
    tax_year: int
    filing_status: str
    standard_deduction: float = Field(ge=0)
    income: float = Field(ge=0)

    # Result
    taxable_income: float = Field(ge=0)
    bracket_details: List[BracketDetailOut] = []
    total_tax_owed: float = Field(ge=0)
    effective_tax_rate: float = Field(ge=0, le=1)
    marginal_tax_rate: float = Field(ge=0, le=1)


class BracketOut(BaseModel):
    rate: float
    max: Optional[float] = None


class TaxFactsOut(CamelModel):
    tax_year: int
    filing_status: str
    standard_deduction: float
    brackets: List[BracketOut]


class BracketRow(CamelModel):
    rate_label: str
    income_in_this_bracket: float
    tax_for_this_bracket: float
    take_home: float
    share_percent: float
    income_text: str
    tax_text: str
    share_text: str


class BreakdownResponse(CamelModel):
    """View model for the summary, bracket table and chart"""
    tax: TaxResponse
    summary: Dict[str, Any]
    table: List[BracketRow]
    chart: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: str
