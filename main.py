"""
Federal Bracket Tax Calculator - FastAPI Backend
Features:
- Progressive bracket tax for a single filer (2024 tax facts)
- Per-bracket breakdown with effective and marginal rates
- Summary, bracket table and stacked bar chart for the front end
"""
import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

import config
from api.tax import router as tax_router
from engine.tax_tables import get_tax_facts, validate_tax_facts
from services.presentation import build_breakdown
from services.tax_service import IncomeInputError, build_tax_payload, parse_income

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# A malformed table is a configuration defect: refuse to start
validate_tax_facts(get_tax_facts())

app = FastAPI(
    title="Bracket Tax API",
    description="US federal progressive income tax breakdown for a single filer",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount static files
if os.path.exists(config.STATIC_DIR):
    app.mount("/static", StaticFiles(directory=config.STATIC_DIR), name="static")

# Templates
templates = None
if os.path.exists(config.TEMPLATES_DIR):
    templates = Jinja2Templates(directory=config.TEMPLATES_DIR)

app.include_router(tax_router)


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Home page, rendering the breakdown when an income is given"""
    if templates is None:
        return HTMLResponse(content="<h1>Bracket Tax API</h1><p>Use /docs for API documentation</p>")

    raw_income = request.query_params.get("income")
    context = {"income": raw_income or "", "breakdown": None, "error": None}

    if raw_income is not None:
        try:
            payload = build_tax_payload(parse_income(raw_income), get_tax_facts())
            context["breakdown"] = build_breakdown(payload)
        except IncomeInputError as e:
            logger.warning("Rejected income %r: %s", raw_income, e)
            context["error"] = str(e)

    return templates.TemplateResponse(request, "index.html", context)


@app.get("/health")
async def health_check():
    """Health check endpoint for deployment"""
    return {"status": "healthy", "service": "bracket-tax-api"}


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    logger.info("Server running on %s", config.PORT)
    uvicorn.run("main:app", host=config.HOST, port=config.PORT)
