import numpy as np
import numpy_financial as npf
import pandas as pd


def compute_annual_debt_service(loan_amount: float, annual_interest_rate_pct: float, term_years: int) -> float:
    """
    Level-payment annuity, compounded monthly, reported as an annual total:
    M = P * [ r(1+r)^n / ((1+r)^n - 1) ]
    P = loan principal
    r = monthly interest rate
    n = number of payments (months)
    """
    r = annual_interest_rate_pct / 100.0 / 12.0
    n = int(term_years) * 12

    if n <= 0 or loan_amount <= 0:
        return 0.0

    # interest-free loan repays straight-line over the term
    if r == 0:
        return loan_amount / term_years

    growth = (1 + r) ** n
    monthly_payment = loan_amount * (r * growth) / (growth - 1)
    return monthly_payment * 12.0


def amortize_one_year(starting_balance: float, annual_interest_rate_pct: float, annual_debt_service: float) -> float:
    """Run twelve monthly payments against a balance and return the year-end balance.

    The balance is not floored; callers floor at the point of use.
    """
    r = annual_interest_rate_pct / 100.0 / 12.0
    if r == 0:
        return 0.0

    monthly_payment = annual_debt_service / 12.0
    balance = starting_balance
    for _ in range(12):
        interest = balance * r
        principal = monthly_payment - interest
        balance -= principal
    return balance


def amortization_table(loan_amount: float, annual_interest_rate_pct: float, term_years: int) -> pd.DataFrame:
    """Monthly interest / principal split for the full term, one row per payment."""
    nper = int(term_years * 12)
    if nper <= 0 or loan_amount <= 0:
        return pd.DataFrame(columns=["Year", "Interest", "Principal", "Payment", "Balance"])

    rate = annual_interest_rate_pct / 100.0 / 12.0
    per = np.arange(1, nper + 1)

    # npf returns payments as negatives
    ip = -npf.ipmt(rate, per, nper, loan_amount)
    pp = -npf.ppmt(rate, per, nper, loan_amount)

    df = pd.DataFrame(index=pd.Index(per, name="Month"))
    df["Year"] = np.ceil(per / 12).astype(int)
    df["Interest"] = ip
    df["Principal"] = pp
    df["Payment"] = ip + pp
    df["Balance"] = loan_amount - np.cumsum(pp)
    return df
