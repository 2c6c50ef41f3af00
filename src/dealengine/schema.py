from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from typing import Annotated, List, Literal, Optional, Union


class UnitMixEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    unit_type: str = Field(..., min_length=1, description="Unit type label (e.g. Studio, 1BR)")
    unit_count: int = Field(..., ge=0, description="Number of units of this type")
    rent_per_unit: float = Field(..., ge=0, description="Monthly rent per unit ($/MO)")


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Line item name")
    monthly_amount: float = Field(..., ge=0, description="Monthly amount ($/MO)")


class DealBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Acquisition

    purchase_price: float = Field(..., ge=0, description="Purchase price ($)")
    rehab_cost: float = Field(0.0, ge=0, description="Rehab budget ($)")
    closing_costs_pct: float = Field(0.0, ge=0, le=100, description="Closing costs (% of purchase price)")
    arv_override: Optional[float] = Field(None, ge=0, description="Explicit time-zero property value ($)")

    # Financing

    down_payment: float = Field(0.0, ge=0, description="Down payment ($)")
    interest_rate_pct: float = Field(0.0, ge=0, le=100, description="Nominal annual interest rate (%)")
    loan_term_years: int = Field(30, ge=0, description="Loan term (years)")
    include_rehab_and_closing_in_loan: bool = Field(True, description="Roll rehab and closing costs into the loan")

    # Growth

    annual_income_growth_pct: float = Field(0.0, ge=0, le=100, description="Annual income growth (%)")
    annual_expense_growth_pct: float = Field(0.0, ge=0, le=100, description="Annual expense growth (%)")
    annual_appreciation_pct: float = Field(0.0, ge=0, le=100, description="Annual appreciation (%)")

    # Exit

    holding_period_years: Optional[int] = Field(None, ge=1, le=10, description="Holding period (years)")
    selling_costs_pct: float = Field(0.0, ge=0, le=100, description="Selling costs (% of sale price)")
    exit_cap_rate_pct: Optional[float] = Field(None, ge=0, le=100, description="Exit cap rate (%), going-in cap rate when omitted")


class RentalDeal(DealBase):
    kind: Literal["rental"] = "rental"

    gross_monthly_income: float = Field(..., ge=0, description="Gross monthly income ($/MO)")

    property_taxes_pct: float = Field(0.0, ge=0, le=100, description="Property taxes (% of income)")
    insurance_pct: float = Field(0.0, ge=0, le=100, description="Insurance (% of income)")
    maintenance_pct: float = Field(0.0, ge=0, le=100, description="Repairs & maintenance (% of income)")
    vacancy_pct: float = Field(0.0, ge=0, le=100, description="Vacancy (% of gross potential rent)")
    cap_ex_pct: float = Field(0.0, ge=0, le=100, description="Capital expenditures (% of income)")
    management_fee_pct: float = Field(0.0, ge=0, le=100, description="Management fee (% of income)")
    other_expenses_pct: float = Field(0.0, ge=0, le=100, description="Other expenses (% of income)")

    # "gross": rates apply to gross potential rent; "effective": to rent after vacancy
    expense_rate_basis: Literal["gross", "effective"] = "gross"
    # "value": taxes and insurance are a percent of the time-zero property value
    tax_insurance_basis: Literal["income", "value"] = "income"

    def income_rates_pct(self) -> float:
        """Sum of the expense rates charged against income."""
        total = self.maintenance_pct + self.cap_ex_pct + self.management_fee_pct + self.other_expenses_pct
        if self.tax_insurance_basis == "income":
            total += self.property_taxes_pct + self.insurance_pct
        return total

    def value_rates_pct(self) -> float:
        """Sum of the expense rates charged against property value."""
        if self.tax_insurance_basis == "value":
            return self.property_taxes_pct + self.insurance_pct
        return 0.0


class CommercialDeal(DealBase):
    kind: Literal["commercial"] = "commercial"

    unit_mix: List[UnitMixEntry] = Field(..., min_length=1, description="Unit mix")
    other_income_line_items: List[LineItem] = Field(default_factory=list, description="Other monthly income")
    operating_expense_line_items: List[LineItem] = Field(default_factory=list, description="Monthly operating expenses")
    vacancy_pct: float = Field(0.0, ge=0, le=100, description="Vacancy (% of gross potential rent)")


class FlipDeal(DealBase):
    kind: Literal["flip"] = "flip"

    arv: float = Field(..., ge=0, description="After-repair value ($)")
    holding_months: int = Field(..., ge=1, description="Holding length (months)")
    property_taxes_pct: float = Field(0.0, ge=0, le=100, description="Annual property taxes (% of purchase price)")
    insurance_pct: float = Field(0.0, ge=0, le=100, description="Annual insurance (% of purchase price)")
    other_holding_costs: float = Field(0.0, ge=0, description="Other holding costs, lump sum ($)")
    include_rehab_and_closing_in_loan: bool = Field(False, description="Roll rehab and closing costs into the loan")


DealInputs = Annotated[Union[RentalDeal, CommercialDeal, FlipDeal], Field(discriminator="kind")]

_deal_adapter = TypeAdapter(DealInputs)


def parse_deal(data: dict) -> Union[RentalDeal, CommercialDeal, FlipDeal]:
    """Validate a raw mapping (e.g. a JSON scenario) into the matching deal variant."""
    return _deal_adapter.validate_python(data)
