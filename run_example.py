import sys, pathlib
root = pathlib.Path(__file__).resolve().parent
sys.path.insert(0, str(root / "src"))

from dealengine.engine import project, projection_frame
from dealengine.metrics import summarize
from dealengine.schema import RentalDeal

# Minimal rental deal for a smoke test
deal = RentalDeal(
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

proforma = project(deal)
print(projection_frame(proforma).round(2).to_string())

m = summarize(proforma, deal)
print('\nYear 1 NOI:', round(m.noi, 2))
print('Cap rate (%):', round(m.cap_rate_pct, 2))
print('Monthly cash flow:', round(m.monthly_cash_flow, 2))
print('CoC return (%):', round(m.coc_return_pct, 2))
