import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from engine.tax_tables import get_tax_facts
from schemas.tax import BreakdownResponse, ErrorResponse, TaxFactsOut, TaxResponse
from services.presentation import build_breakdown
from services.tax_service import (
    IncomeInputError, build_tax_facts_payload, build_tax_payload, parse_income,
)

logger = logging.getLogger(__name__)

router = APIRouter()

INPUT_ERROR_RESPONSES = {400: {"model": ErrorResponse}}


def input_error_response(error: IncomeInputError, raw_income) -> JSONResponse:
    logger.warning("Rejected income %r: %s", raw_income, error)
    return JSONResponse(status_code=400, content={"error": str(error)})


@router.get("/api", response_model=TaxResponse, responses=INPUT_ERROR_RESPONSES)
async def calculate_tax_endpoint(income: Optional[str] = None):
    """
    Federal tax breakdown for a single filer.
    """
    try:
        income_value = parse_income(income)
    except IncomeInputError as e:
        return input_error_response(e, income)

    try:
        return build_tax_payload(income_value, get_tax_facts())
    except Exception as e:
        logger.exception("Tax calculation failed for income %s", income_value)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/tax-facts", response_model=TaxFactsOut)
async def tax_facts_endpoint():
    """Standard deduction and brackets in use"""
    return build_tax_facts_payload(get_tax_facts())


@router.get("/api/breakdown", response_model=BreakdownResponse, responses=INPUT_ERROR_RESPONSES)
async def breakdown_endpoint(income: Optional[str] = None):
    """
    Summary, bracket table and chart configuration for the front end.
    """
    try:
        income_value = parse_income(income)
    except IncomeInputError as e:
        return input_error_response(e, income)

    try:
        payload = build_tax_payload(income_value, get_tax_facts())
        return build_breakdown(payload)
    except Exception as e:
        logger.exception("Breakdown failed for income %s", income_value)
        raise HTTPException(status_code=500, detail=str(e))
