from typing import Optional
import os

from openai import OpenAI

from dealengine.config import config
from dealengine.metrics import ReturnMetrics
from dealengine.schema import DealBase

DEAL_TYPES = {
    "rental": "Rental",
    "commercial": "Commercial Multifamily",
    "flip": "Fix and Flip",
}


def _na(value: Optional[float], suffix: str = "") -> str:
    return "N/A" if value is None else f"{value:.2f}{suffix}"


def build_financial_summary(deal: DealBase, metrics: ReturnMetrics) -> str:
    """Plain-text block of the deal inputs and computed metrics for the prompt."""
    lines = [
        f"Purchase Price: {deal.purchase_price:.2f}, Rehab: {deal.rehab_cost:.2f}, Down Payment: {deal.down_payment:.2f}",
        f"Interest Rate: {deal.interest_rate_pct}%, Loan Term: {deal.loan_term_years} years",
        f"Year 1 NOI: {metrics.noi:.2f}, Monthly Cash Flow: {metrics.monthly_cash_flow:.2f}",
        f"Cap Rate: {metrics.cap_rate_pct:.2f}%, Cash-on-Cash Return: {metrics.coc_return_pct:.2f}%",
        f"Total Cash Invested: {metrics.total_cash_invested:.2f}",
    ]
    if deal.holding_period_years is not None:
        lines.append(
            f"Holding Period: {deal.holding_period_years} years, "
            f"Unlevered IRR: {_na(metrics.unlevered_irr_pct, '%')}, "
            f"Equity Multiple: {_na(metrics.equity_multiple, 'x')}, "
            f"Net Sale Proceeds: {_na(metrics.net_sale_proceeds)}"
        )
    return "\n".join(lines)


def generate_deal_assessment(
    deal: DealBase,
    metrics: ReturnMetrics,
    market_conditions: str,
    api_key: Optional[str] = None,
    client: Optional[OpenAI] = None,
    model: Optional[str] = None,
) -> str:
    """Generate an AI assessment of a deal's profitability, risks and rewards.

    If a client is passed, it will be used directly (useful for tests).
    Otherwise, a client will be constructed using the provided api_key,
    the configured key, or the OPENAI_API_KEY environment variable.
    """
    if client is None:
        resolved_api_key = api_key or config.OPENAI_API_KEY or os.getenv("OPENAI_API_KEY")
        if not resolved_api_key:
            raise ValueError("Missing OpenAI API key. Provide api_key or set OPENAI_API_KEY.")
        client = OpenAI(api_key=resolved_api_key)

    prompt = f"""
    You are a real estate investment expert. Analyze the deal based on the
    provided information and provide an assessment of its profitability,
    risks, and rewards.

    Deal Type: {DEAL_TYPES.get(deal.kind, deal.kind)}
    Financial Data:
    {build_financial_summary(deal, metrics)}
    Market Conditions: {market_conditions}

    Provide a detailed assessment.
    """

    response = client.chat.completions.create(
        model=model or config.OPENAI_MODEL,
        messages=[
            {"role": "system", "content": "You are a professional real estate investment analyst."},
            {"role": "user", "content": prompt},
        ],
    )
    return response.choices[0].message.content
