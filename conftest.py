import pytest

from dealengine.schema import CommercialDeal, FlipDeal, LineItem, RentalDeal, UnitMixEntry


@pytest.fixture
def rental_deal():
    # hand-checked golden scenario
    return RentalDeal(
        purchase_price=250_000,
        closing_costs_pct=3,
        rehab_cost=10_000,
        down_payment=50_000,
        interest_rate_pct=6.5,
        loan_term_years=30,
        gross_monthly_income=2_200,
        property_taxes_pct=1.2,
        insurance_pct=0.5,
        maintenance_pct=5,
        vacancy_pct=5,
        cap_ex_pct=5,
        management_fee_pct=8,
        other_expenses_pct=2,
        annual_income_growth_pct=3,
        annual_appreciation_pct=3,
    )


@pytest.fixture
def rental_exit_deal(rental_deal):
    return rental_deal.model_copy(update={
        "annual_expense_growth_pct": 2,
        "holding_period_years": 5,
        "selling_costs_pct": 6,
        "exit_cap_rate_pct": 7,
    })


@pytest.fixture
def commercial_deal():
    return CommercialDeal(
        purchase_price=5_000_000,
        closing_costs_pct=2,
        rehab_cost=250_000,
        unit_mix=[
            UnitMixEntry(unit_type="Studio", unit_count=10, rent_per_unit=1_200),
            UnitMixEntry(unit_type="1BR", unit_count=20, rent_per_unit=1_600),
            UnitMixEntry(unit_type="2BR", unit_count=10, rent_per_unit=2_200),
        ],
        other_income_line_items=[LineItem(name="Laundry", monthly_amount=500)],
        operating_expense_line_items=[
            LineItem(name="Property Taxes", monthly_amount=4_000),
            LineItem(name="Insurance", monthly_amount=1_500),
            LineItem(name="Repairs & Maintenance", monthly_amount=2_500),
            LineItem(name="Management Fee", monthly_amount=3_500),
        ],
        vacancy_pct=5,
        down_payment=1_250_000,
        interest_rate_pct=7.5,
        loan_term_years=30,
        annual_income_growth_pct=3,
        annual_expense_growth_pct=2,
        annual_appreciation_pct=4,
        selling_costs_pct=5,
        holding_period_years=10,
        exit_cap_rate_pct=6.5,
    )


@pytest.fixture
def flip_deal():
    return FlipDeal(
        purchase_price=180_000,
        arv=280_000,
        rehab_cost=40_000,
        closing_costs_pct=2,
        holding_months=6,
        interest_rate_pct=8,
        loan_term_years=1,
        down_payment=45_000,
        property_taxes_pct=1.2,
        insurance_pct=0.5,
        other_holding_costs=1_000,
        selling_costs_pct=6,
    )
