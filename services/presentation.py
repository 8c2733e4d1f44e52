"""
Formatting for the tax breakdown page: summary figures, the per-bracket
table and the stacked bar chart configuration (Chart.js).
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

import pandas as pd

from schemas.tax import BracketDetailOut, BracketRow, BreakdownResponse, TaxResponse

logger = logging.getLogger(__name__)

CHART_COLORS = {
    'tax': '#FF9B8B',
    'net': '#69F5C3',
    'ticks': 'rgba(234,243,255,0.85)',
    'grid': 'rgba(234,243,255,0.12)',
    'border': 'rgba(234,243,255,0.25)',
}


def round_half_up(value) -> Decimal:
    """Nearest whole number, halves away from zero, any magnitude"""
    return Decimal(str(value or 0)).to_integral_value(rounding=ROUND_HALF_UP)


def to_money(amount) -> str:
    """Whole US dollars, e.g. $12,345"""
    rounded = round_half_up(amount)
    if rounded < 0:
        return f"-${rounded.copy_abs():,.0f}"
    return f"${rounded.copy_abs():,.0f}"


def to_percent_text(fraction) -> str:
    return f"{float(fraction or 0) * 100:.1f}%"


def rate_label(rate) -> str:
    return f"{round_half_up(rate * 100):,.0f}%"


def build_summary(payload: TaxResponse) -> Dict[str, Any]:
    income = payload.income
    money_kept = income - payload.total_tax_owed
    percent_kept = money_kept / income if income > 0 else 0
    effective_dollars = income * payload.effective_tax_rate
    marginal_dollars = income * payload.marginal_tax_rate

    return {
        'taxYear': payload.tax_year,
        'filingStatus': payload.filing_status,
        'moneyKept': money_kept,
        'percentKept': percent_kept,
        'effectiveDollars': effective_dollars,
        'marginalDollars': marginal_dollars,
        'text': {
            'standardDeduction': to_money(payload.standard_deduction),
            'taxableIncome': to_money(payload.taxable_income),
            'totalTaxOwed': to_money(payload.total_tax_owed),
            'moneyKept': to_money(money_kept),
            'percentKept': to_percent_text(percent_kept),
            'effectiveRate': to_percent_text(payload.effective_tax_rate),
            'effectiveDollars': to_money(effective_dollars),
            'marginalRate': to_percent_text(payload.marginal_tax_rate),
            'marginalDollars': to_money(marginal_dollars),
        },
    }


def build_bracket_table(details: List[BracketDetailOut], taxable_income: float) -> List[BracketRow]:
    """One row per taxed bracket, with its share of taxable income"""
    if not details:
        return []

    df = pd.DataFrame([d.model_dump() for d in details])
    df['take_home'] = (df['income_in_this_bracket'] - df['tax_for_this_bracket']).clip(lower=0)
    if taxable_income > 0:
        df['share_percent'] = df['income_in_this_bracket'] / taxable_income * 100
    else:
        df['share_percent'] = 0.0

    rows = []
    for _, row in df.iterrows():
        rows.append(BracketRow(
            rate_label=rate_label(row['bracket_rate']),
            income_in_this_bracket=float(row['income_in_this_bracket']),
            tax_for_this_bracket=float(row['tax_for_this_bracket']),
            take_home=float(row['take_home']),
            share_percent=float(row['share_percent']),
            income_text=to_money(row['income_in_this_bracket']),
            tax_text=to_money(row['tax_for_this_bracket']),
            share_text=f"{row['share_percent']:.1f}%",
        ))
    return rows


class TaxChart:
    """
    Render state for one stacked bar chart.

    Each page or request owns its own instance; nothing is shared.
    """

    def __init__(self, colors: Optional[Dict[str, str]] = None):
        self.colors = dict(colors or CHART_COLORS)
        self.config: Optional[Dict[str, Any]] = None

    @property
    def is_rendered(self) -> bool:
        return self.config is not None

    def clear(self):
        self.config = None

    def render(self, details: List[BracketDetailOut], taxable_income: float) -> Optional[Dict[str, Any]]:
        if not details or taxable_income <= 0:
            self.clear()
            return None

        labels = [rate_label(d.bracket_rate) for d in details]
        tax_paid = [d.tax_for_this_bracket for d in details]
        take_home = [max(0, d.income_in_this_bracket - d.tax_for_this_bracket) for d in details]
        colors = self.colors

        dataset_style = {'stack': 'slice', 'borderColor': colors['border'], 'borderWidth': 1, 'borderRadius': 6}
        axis_style = {'ticks': {'color': colors['ticks']}, 'grid': {'color': colors['grid'], 'borderColor': colors['border']}}

        self.config = {
            'type': 'bar',
            'data': {
                'labels': labels,
                'datasets': [
                    {'label': 'Tax Paid', 'data': tax_paid, 'backgroundColor': colors['tax'], **dataset_style},
                    {'label': 'Take-Home Income', 'data': take_home, 'backgroundColor': colors['net'], **dataset_style},
                ],
            },
            'options': {
                'responsive': True,
                'maintainAspectRatio': True,
                'aspectRatio': 16 / 9,
                'elements': {'bar': {'borderSkipped': False, 'minBarLength': 6}},
                'plugins': {'legend': {'position': 'bottom', 'labels': {'color': colors['ticks']}}},
                'scales': {
                    'x': {'stacked': True, 'offset': True, 'categoryPercentage': 0.5, 'barPercentage': 0.75, **axis_style},
                    'y': {
                        'stacked': True,
                        'beginAtZero': True,
                        'suggestedMax': max(1, taxable_income) * 1.15,
                        'grace': '10%',
                        **axis_style,
                    },
                },
                'normalized': True,
            },
        }
        return self.config


def build_breakdown(payload: TaxResponse, chart: Optional[TaxChart] = None) -> BreakdownResponse:
    """Summary, table and chart for one calculation"""
    chart = chart or TaxChart()
    chart.render(payload.bracket_details, payload.taxable_income)
    return BreakdownResponse(
        tax=payload,
        summary=build_summary(payload),
        table=build_bracket_table(payload.bracket_details, payload.taxable_income),
        chart=chart.config,
    )
