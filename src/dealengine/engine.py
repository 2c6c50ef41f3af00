from dataclasses import dataclass, asdict
from typing import List, Optional

import pandas as pd

from dealengine.amortization import compute_annual_debt_service, amortize_one_year
from dealengine.config import config
from dealengine.logging_utils import get_logger
from dealengine.schema import CommercialDeal, DealBase, FlipDeal, RentalDeal

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProFormaYearEntry:
    year: int
    gross_potential_rent: float
    vacancy_loss: float
    effective_gross_income: float
    operating_expenses: float
    noi: float
    debt_service: float
    cash_flow_before_tax: float
    property_value: float
    loan_balance: float     # raw year-end balance, may dip below zero
    equity: float           # property_value - max(loan_balance, 0)


def loan_amount(deal: DealBase) -> float:
    if deal.include_rehab_and_closing_in_loan:
        closing_costs = deal.purchase_price * deal.closing_costs_pct / 100.0
        amount = deal.purchase_price + deal.rehab_cost + closing_costs - deal.down_payment
    else:
        amount = deal.purchase_price - deal.down_payment
    return max(amount, 0.0)


def initial_property_value(deal: DealBase) -> float:
    if isinstance(deal, FlipDeal):
        return deal.arv
    if deal.arv_override is not None:
        return deal.arv_override
    return deal.purchase_price + deal.rehab_cost


def _vacancy_pct(deal: DealBase) -> float:
    return getattr(deal, "vacancy_pct", 0.0)


def _seed_gross_rent(deal: DealBase) -> float:
    if isinstance(deal, RentalDeal):
        return deal.gross_monthly_income * 12
    if isinstance(deal, CommercialDeal):
        rent = sum(u.unit_count * u.rent_per_unit * 12 for u in deal.unit_mix)
        other = sum(item.monthly_amount for item in deal.other_income_line_items) * 12
        return rent + other
    return 0.0


def _seed_operating_expenses(deal: DealBase, gross_potential_rent: float, property_value: float) -> float:
    if isinstance(deal, RentalDeal):
        base = gross_potential_rent
        if deal.expense_rate_basis == "effective":
            base = gross_potential_rent * (1 - deal.vacancy_pct / 100.0)
        return base * deal.income_rates_pct() / 100.0 + property_value * deal.value_rates_pct() / 100.0
    if isinstance(deal, CommercialDeal):
        return sum(item.monthly_amount for item in deal.operating_expense_line_items) * 12
    if isinstance(deal, FlipDeal):
        # carrying costs while the property is held
        return deal.purchase_price * (deal.property_taxes_pct + deal.insurance_pct) / 100.0
    return 0.0


def project(deal: DealBase, years: Optional[int] = None) -> List[ProFormaYearEntry]:
    """Build the yearly pro forma for a deal.

    Returns an empty list while the deal is not yet computable (no purchase
    price or no loan term).
    """
    years = config.PROJECTION_YEARS if years is None else years

    if deal.purchase_price <= 0 or deal.loan_term_years <= 0:
        logger.debug("deal not computable", extra={"context": {"kind": deal.kind}})
        return []

    principal = loan_amount(deal)
    debt_service = compute_annual_debt_service(principal, deal.interest_rate_pct, deal.loan_term_years)

    gross_rent = _seed_gross_rent(deal)
    property_value = initial_property_value(deal)
    opex = _seed_operating_expenses(deal, gross_rent, property_value)
    vacancy_pct = _vacancy_pct(deal)
    balance = principal

    income_growth = 1 + deal.annual_income_growth_pct / 100.0
    expense_growth = 1 + deal.annual_expense_growth_pct / 100.0
    appreciation = 1 + deal.annual_appreciation_pct / 100.0

    proforma = []
    for year in range(1, years + 1):
        vacancy_loss = gross_rent * vacancy_pct / 100.0
        egi = gross_rent - vacancy_loss
        noi = egi - opex

        year_end_balance = amortize_one_year(balance, deal.interest_rate_pct, debt_service)

        proforma.append(ProFormaYearEntry(
            year=year,
            gross_potential_rent=gross_rent,
            vacancy_loss=vacancy_loss,
            effective_gross_income=egi,
            operating_expenses=opex,
            noi=noi,
            debt_service=debt_service,
            cash_flow_before_tax=noi - debt_service,
            property_value=property_value,
            loan_balance=year_end_balance,
            equity=property_value - max(year_end_balance, 0.0),
        ))

        gross_rent *= income_growth
        opex *= expense_growth
        property_value *= appreciation
        balance = year_end_balance

    return proforma


COLUMNS = {
    "gross_potential_rent": "GrossPotentialRent",
    "vacancy_loss": "VacancyLoss",
    "effective_gross_income": "EffectiveGrossIncome",
    "operating_expenses": "OperatingExpenses",
    "noi": "NetOperatingIncome",
    "debt_service": "DebtService",
    "cash_flow_before_tax": "CashFlowBeforeTax",
    "property_value": "PropertyValue",
    "loan_balance": "LoanBalance",
    "equity": "Equity",
}


def projection_frame(proforma: List[ProFormaYearEntry]) -> pd.DataFrame:
    """Pro forma as a table, one row per year. Loan balance is floored for display."""
    if not proforma:
        return pd.DataFrame(columns=list(COLUMNS.values()), index=pd.Index([], name="Year"))

    df = pd.DataFrame([asdict(e) for e in proforma]).set_index("year")
    df.index.name = "Year"
    df = df.rename(columns=COLUMNS)
    df["LoanBalance"] = df["LoanBalance"].clip(lower=0.0)
    return df
