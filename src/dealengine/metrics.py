from dataclasses import dataclass
from typing import List, Optional

from dealengine.engine import ProFormaYearEntry, loan_amount
from dealengine.irr import solve_irr
from dealengine.schema import DealBase


@dataclass(frozen=True)
class ReturnMetrics:
    monthly_cash_flow: float
    cap_rate_pct: float
    coc_return_pct: float
    noi: float
    total_cash_invested: float

    # year-1 lender ratios
    dscr: Optional[float] = None            # None when there is no debt
    debt_yield_pct: float = 0.0
    expense_ratio_pct: float = 0.0

    # exit path, None unless a holding period was evaluated
    unlevered_irr_pct: Optional[float] = None
    equity_multiple: Optional[float] = None
    net_sale_proceeds: Optional[float] = None
    sale_price: Optional[float] = None


def total_cash_invested(deal: DealBase) -> float:
    return deal.down_payment + deal.purchase_price * deal.closing_costs_pct / 100.0 + deal.rehab_cost


def going_in_cap_rate_pct(proforma: List[ProFormaYearEntry], deal: DealBase) -> float:
    if not proforma or deal.purchase_price <= 0:
        return 0.0
    return proforma[0].noi / deal.purchase_price * 100.0


def exit_cap_rate_pct(proforma: List[ProFormaYearEntry], deal: DealBase) -> float:
    """Exit cap rate, falling back to the going-in cap rate when none is given."""
    if deal.exit_cap_rate_pct is not None:
        return deal.exit_cap_rate_pct
    return going_in_cap_rate_pct(proforma, deal)


def sale_price(proforma: List[ProFormaYearEntry], deal: DealBase, holding_years: int) -> float:
    # forward NOI: one more year of income growth past the exit year
    exit_noi = proforma[holding_years - 1].noi * (1 + deal.annual_income_growth_pct / 100.0)
    cap = exit_cap_rate_pct(proforma, deal)
    if cap <= 0:
        return 0.0
    return exit_noi / (cap / 100.0)


def equity_cashflows(proforma: List[ProFormaYearEntry], deal: DealBase, holding_years: int, net_proceeds: float) -> List[float]:
    """[-invested, cf_1, ..., cf_h + net sale proceeds]"""
    flows = [-total_cash_invested(deal)]
    flows.extend(e.cash_flow_before_tax for e in proforma[:holding_years])
    flows[-1] += net_proceeds
    return flows


def summarize(proforma: List[ProFormaYearEntry], deal: DealBase) -> ReturnMetrics:
    invested = total_cash_invested(deal)

    if not proforma:
        return ReturnMetrics(
            monthly_cash_flow=0.0,
            cap_rate_pct=0.0,
            coc_return_pct=0.0,
            noi=0.0,
            total_cash_invested=invested,
        )

    year1 = proforma[0]
    monthly_cash_flow = year1.cash_flow_before_tax / 12.0
    coc = year1.cash_flow_before_tax / invested * 100.0 if invested > 0 else 0.0
    cap = going_in_cap_rate_pct(proforma, deal)

    dscr = year1.noi / year1.debt_service if year1.debt_service > 0 else None
    principal = loan_amount(deal)
    debt_yield = year1.noi / principal * 100.0 if principal > 0 else 0.0
    expense_ratio = (
        year1.operating_expenses / year1.effective_gross_income * 100.0
        if year1.effective_gross_income > 0 else 0.0
    )

    exit_fields = {}
    holding = deal.holding_period_years
    if holding is not None and holding <= len(proforma):
        price = sale_price(proforma, deal, holding)
        payoff = max(proforma[holding - 1].loan_balance, 0.0)
        net_proceeds = price - price * deal.selling_costs_pct / 100.0 - payoff

        flows = equity_cashflows(proforma, deal, holding, net_proceeds)
        irr = solve_irr(flows)

        returned = sum(e.cash_flow_before_tax for e in proforma[:holding]) + net_proceeds
        exit_fields = {
            "unlevered_irr_pct": irr * 100.0 if irr is not None else None,
            "equity_multiple": returned / invested if invested > 0 else 0.0,
            "net_sale_proceeds": net_proceeds,
            "sale_price": price,
        }

    return ReturnMetrics(
        monthly_cash_flow=monthly_cash_flow,
        cap_rate_pct=cap,
        coc_return_pct=coc,
        noi=year1.noi,
        total_cash_invested=invested,
        dscr=dscr,
        debt_yield_pct=debt_yield,
        expense_ratio_pct=expense_ratio,
        **exit_fields,
    )
