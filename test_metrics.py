import pytest

from dealengine.engine import project
from dealengine.irr import npv
from dealengine.metrics import equity_cashflows, exit_cap_rate_pct, summarize, total_cash_invested


def test_total_cash_invested(rental_deal):
    # 50,000 down + 7,500 closing + 10,000 rehab
    assert total_cash_invested(rental_deal) == pytest.approx(67_500.0)


def test_no_holding_period_leaves_exit_metrics_unset(rental_deal):
    m = summarize(project(rental_deal), rental_deal)
    assert m.unlevered_irr_pct is None
    assert m.equity_multiple is None
    assert m.net_sale_proceeds is None
    assert m.sale_price is None


def test_exit_path(rental_exit_deal):
    deal = rental_exit_deal
    proforma = project(deal)
    m = summarize(proforma, deal)

    exit_year = proforma[4]
    sale = exit_year.noi * 1.03 / 0.07
    proceeds = sale - sale * 0.06 - exit_year.loan_balance
    assert m.sale_price == pytest.approx(sale)
    assert m.net_sale_proceeds == pytest.approx(proceeds)

    returned = sum(e.cash_flow_before_tax for e in proforma[:5]) + proceeds
    assert m.equity_multiple == pytest.approx(returned / 67_500)
    assert m.equity_multiple > 1

    assert m.unlevered_irr_pct is not None
    assert 0 < m.unlevered_irr_pct < 100

    flows = equity_cashflows(proforma, deal, 5, proceeds)
    assert len(flows) == 6
    assert flows[0] == pytest.approx(-67_500.0)
    assert npv(m.unlevered_irr_pct / 100, flows) == pytest.approx(0.0, abs=1.0)


def test_holding_period_beyond_projection_is_skipped(rental_exit_deal):
    proforma = project(rental_exit_deal, years=3)
    m = summarize(proforma, rental_exit_deal)
    assert m.unlevered_irr_pct is None
    assert m.equity_multiple is None


def test_exit_cap_falls_back_to_going_in_cap(rental_exit_deal):
    deal = rental_exit_deal.model_copy(update={"exit_cap_rate_pct": None})
    proforma = project(deal)
    m = summarize(proforma, deal)
    assert exit_cap_rate_pct(proforma, deal) == pytest.approx(m.cap_rate_pct)
    assert m.sale_price == pytest.approx(proforma[4].noi * 1.03 / (m.cap_rate_pct / 100))


def test_zero_exit_cap_means_no_sale_price(rental_exit_deal):
    deal = rental_exit_deal.model_copy(update={"exit_cap_rate_pct": 0.0})
    m = summarize(project(deal), deal)
    assert m.sale_price == 0.0
    assert m.net_sale_proceeds < 0


def test_empty_projection_gives_zeroed_metrics(rental_exit_deal):
    deal = rental_exit_deal.model_copy(update={"purchase_price": 0.0})
    m = summarize(project(deal), deal)
    assert m.noi == 0.0
    assert m.monthly_cash_flow == 0.0
    assert m.cap_rate_pct == 0.0
    assert m.coc_return_pct == 0.0
    assert m.unlevered_irr_pct is None


def test_zero_investment_guards(rental_exit_deal):
    deal = rental_exit_deal.model_copy(update={
        "down_payment": 0.0,
        "closing_costs_pct": 0.0,
        "rehab_cost": 0.0,
    })
    m = summarize(project(deal), deal)
    assert m.total_cash_invested == 0.0
    assert m.coc_return_pct == 0.0
    assert m.equity_multiple == 0.0


def test_losing_deal_has_negative_or_undefined_irr(rental_exit_deal):
    deal = rental_exit_deal.model_copy(update={
        "gross_monthly_income": 900.0,
        "tax_insurance_basis": "value",
        "exit_cap_rate_pct": 12.0,
    })
    proforma = project(deal)
    assert all(e.cash_flow_before_tax < 0 for e in proforma)
    m = summarize(proforma, deal)
    assert m.unlevered_irr_pct is None or m.unlevered_irr_pct < 0


def test_lender_ratios(rental_deal):
    proforma = project(rental_deal)
    m = summarize(proforma, rental_deal)
    y1 = proforma[0]
    assert m.dscr == pytest.approx(y1.noi / y1.debt_service)
    assert m.debt_yield_pct == pytest.approx(y1.noi / 217_500 * 100)
    assert m.expense_ratio_pct == pytest.approx(5_728.80 / 25_080 * 100)


def test_no_debt_has_no_dscr(rental_deal):
    deal = rental_deal.model_copy(update={
        "down_payment": 250_000.0,
        "closing_costs_pct": 0.0,
        "rehab_cost": 0.0,
    })
    m = summarize(project(deal), deal)
    assert m.dscr is None
    assert m.debt_yield_pct == 0.0


def test_commercial_ten_year_hold(commercial_deal):
    m = summarize(project(commercial_deal), commercial_deal)
    assert m.noi == pytest.approx(620_100.0)
    assert m.cap_rate_pct == pytest.approx(620_100.0 / 5_000_000 * 100)
    assert m.unlevered_irr_pct is not None
    assert m.equity_multiple > 1
