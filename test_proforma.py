import numpy_financial as npf
import pytest

from dealengine.engine import initial_property_value, loan_amount, project, projection_frame
from dealengine.metrics import summarize


def _expected_debt_service(principal, rate_pct, years):
    return -npf.pmt(rate_pct / 100 / 12, years * 12, principal) * 12


def test_golden_rental_year_one(rental_deal):
    proforma = project(rental_deal)
    m = summarize(proforma, rental_deal)

    # loan = 250,000 + 10,000 + 7,500 closing - 50,000 down
    assert loan_amount(rental_deal) == pytest.approx(217_500.0)

    # GPR 26,400; vacancy 1,320; opex 26,400 * 21.7% = 5,728.80
    y1 = proforma[0]
    assert y1.gross_potential_rent == pytest.approx(26_400.0)
    assert y1.vacancy_loss == pytest.approx(1_320.0)
    assert y1.operating_expenses == pytest.approx(5_728.80)
    assert round(m.noi, 2) == 19_351.20
    assert round(m.cap_rate_pct, 2) == 7.74

    annual_cf = 19_351.20 - _expected_debt_service(217_500, 6.5, 30)
    assert round(m.monthly_cash_flow, 2) == round(annual_cf / 12, 2)
    assert round(m.coc_return_pct, 2) == round(annual_cf / 67_500 * 100, 2)

    # hand figures: ~$237.85 a month, ~4.23% cash on cash
    assert m.monthly_cash_flow == pytest.approx(237.85, abs=0.05)
    assert m.coc_return_pct == pytest.approx(4.23, abs=0.01)


def test_ten_year_horizon(rental_deal):
    proforma = project(rental_deal)
    assert [e.year for e in proforma] == list(range(1, 11))


def test_noi_identity_is_exact(commercial_deal, rental_deal):
    for deal in (rental_deal, commercial_deal):
        for e in project(deal):
            assert e.effective_gross_income == e.gross_potential_rent - e.vacancy_loss
            assert e.noi == e.effective_gross_income - e.operating_expenses
            assert e.cash_flow_before_tax == e.noi - e.debt_service
            assert e.equity == e.property_value - max(e.loan_balance, 0.0)


def test_growth_applies_year_over_year(rental_deal):
    deal = rental_deal.model_copy(update={"annual_expense_growth_pct": 2})
    y1, y2 = project(deal)[:2]
    assert y2.gross_potential_rent == pytest.approx(y1.gross_potential_rent * 1.03)
    assert y2.operating_expenses == pytest.approx(y1.operating_expenses * 1.02)
    assert y2.property_value == pytest.approx(y1.property_value * 1.03)
    assert y2.debt_service == y1.debt_service
    assert y2.loan_balance < y1.loan_balance


def test_initial_value_is_post_rehab(rental_deal):
    assert project(rental_deal)[0].property_value == pytest.approx(260_000.0)
    deal = rental_deal.model_copy(update={"arv_override": 300_000.0})
    assert initial_property_value(deal) == 300_000.0
    assert project(deal)[0].property_value == pytest.approx(300_000.0)


def test_not_computable_inputs_give_empty_projection(rental_deal):
    assert project(rental_deal.model_copy(update={"purchase_price": 0.0})) == []
    assert project(rental_deal.model_copy(update={"loan_term_years": 0})) == []


def test_projection_is_idempotent(rental_deal, commercial_deal):
    for deal in (rental_deal, commercial_deal):
        assert project(deal) == project(deal)


def test_loan_basis_excluding_rehab_and_closing(rental_deal):
    deal = rental_deal.model_copy(update={"include_rehab_and_closing_in_loan": False})
    assert loan_amount(deal) == pytest.approx(200_000.0)
    ds = project(deal)[0].debt_service
    assert ds == pytest.approx(_expected_debt_service(200_000, 6.5, 30))
    assert ds < project(rental_deal)[0].debt_service


def test_loan_amount_floors_at_zero(rental_deal):
    deal = rental_deal.model_copy(update={"down_payment": 400_000.0})
    assert loan_amount(deal) == 0.0
    y1 = project(deal)[0]
    assert y1.debt_service == 0.0
    assert y1.cash_flow_before_tax == y1.noi


def test_expense_rates_on_effective_income(rental_deal):
    deal = rental_deal.model_copy(update={"expense_rate_basis": "effective"})
    y1 = project(deal)[0]
    # rates applied after vacancy: 25,080 * 21.7%
    assert y1.operating_expenses == pytest.approx(25_080 * 0.217)
    assert y1.noi > project(rental_deal)[0].noi


def test_taxes_and_insurance_on_value(rental_deal):
    deal = rental_deal.model_copy(update={"tax_insurance_basis": "value"})
    y1 = project(deal)[0]
    assert y1.operating_expenses == pytest.approx(26_400 * 0.20 + 260_000 * 0.017)


def test_commercial_unit_mix_and_line_items(commercial_deal):
    y1 = project(commercial_deal)[0]
    # (12,000 + 32,000 + 22,000) * 12 + 500 * 12
    assert y1.gross_potential_rent == pytest.approx(798_000.0)
    assert y1.vacancy_loss == pytest.approx(39_900.0)
    assert y1.operating_expenses == pytest.approx(138_000.0)
    assert y1.noi == pytest.approx(620_100.0)
    assert loan_amount(commercial_deal) == pytest.approx(4_100_000.0)


def test_negative_noi_is_valid_output(rental_deal):
    deal = rental_deal.model_copy(update={"gross_monthly_income": 100.0, "tax_insurance_basis": "value"})
    y1 = project(deal)[0]
    assert y1.noi < 0
    assert y1.cash_flow_before_tax < 0


def test_flip_projection_carries_costs_only(flip_deal):
    y1 = project(flip_deal)[0]
    assert y1.gross_potential_rent == 0.0
    assert y1.operating_expenses == pytest.approx(180_000 * 0.017)
    assert y1.property_value == pytest.approx(280_000.0)
    # flip loan excludes rehab and closing
    assert loan_amount(flip_deal) == pytest.approx(135_000.0)


def test_custom_horizon(rental_deal):
    assert len(project(rental_deal, years=3)) == 3


def test_projection_frame(rental_deal):
    df = projection_frame(project(rental_deal))
    assert list(df.index) == list(range(1, 11))
    assert df.index.name == "Year"
    assert df.loc[1, "NetOperatingIncome"] == pytest.approx(19_351.20)
    assert (df["LoanBalance"] >= 0).all()


def test_projection_frame_empty():
    df = projection_frame([])
    assert df.empty
    assert "NetOperatingIncome" in df.columns
