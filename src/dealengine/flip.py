from dataclasses import dataclass

from dealengine.engine import loan_amount
from dealengine.schema import FlipDeal


@dataclass(frozen=True)
class FlipMetrics:
    acquisition_costs: float
    holding_costs: float
    financing_costs: float
    selling_costs: float
    total_cash_invested: float
    total_project_costs: float
    net_profit: float
    roi_pct: float


def analyze_flip(deal: FlipDeal) -> FlipMetrics:
    """
    Buy, rehab, hold for a few months, sell at ARV.
    Financing is interest-only simple interest over the holding months.
    """
    price = deal.purchase_price
    loan = loan_amount(deal)

    acquisition = deal.closing_costs_pct / 100.0 * price
    holding = (
        deal.property_taxes_pct / 100.0 * price / 12.0
        + deal.insurance_pct / 100.0 * price / 12.0
    ) * deal.holding_months + deal.other_holding_costs
    financing = (
        loan * deal.interest_rate_pct / 100.0 * deal.holding_months / 12.0
        if deal.loan_term_years > 0 else 0.0
    )

    total_cash_invested = deal.down_payment + deal.rehab_cost + acquisition + holding + financing
    total_project_costs = price + deal.rehab_cost + acquisition + holding + financing
    selling = deal.selling_costs_pct / 100.0 * deal.arv

    net_profit = deal.arv - total_project_costs - selling
    roi = net_profit / total_cash_invested * 100.0 if total_cash_invested > 0 else 0.0

    return FlipMetrics(
        acquisition_costs=acquisition,
        holding_costs=holding,
        financing_costs=financing,
        selling_costs=selling,
        total_cash_invested=total_cash_invested,
        total_project_costs=total_project_costs,
        net_profit=net_profit,
        roi_pct=roi,
    )
