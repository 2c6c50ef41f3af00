from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from itertools import product
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from dealengine.engine import project
from dealengine.logging_utils import get_logger
from dealengine.metrics import ReturnMetrics, exit_cap_rate_pct, summarize
from dealengine.schema import DealBase

logger = get_logger(__name__)


# -----------------------------
# Sweep definitions
# -----------------------------

REL_DELTAS = [-0.10, -0.05, 0.0, 0.05, 0.10]     # scale the current value

ABS_DELTAS = {                                    # percent points added to the current value
    "vacancy_pct": [-2.0, -1.0, 0.0, 1.0, 2.0],
    "annual_income_growth_pct": [-1.0, -0.5, 0.0, 0.5, 1.0],
    "exit_cap_rate_pct": [-0.5, -0.25, 0.0, 0.25, 0.5],
    "interest_rate_pct": [-1.0, -0.5, 0.0, 0.5, 1.0],
}

ASSUMPTIONS_REL = [
    "purchase_price",
    "down_payment",
]

ASSUMPTIONS_ABS = list(ABS_DELTAS)

SWEEP_VARIABLES = ASSUMPTIONS_REL + ASSUMPTIONS_ABS

METRICS = {
    "irr": "unlevered_irr_pct",
    "equity_multiple": "equity_multiple",
    "coc_return": "coc_return_pct",
    "monthly_cash_flow": "monthly_cash_flow",
    "cap_rate": "cap_rate_pct",
    "noi": "noi",
}


@dataclass(frozen=True)
class SensitivityCell:
    value_a: float
    value_b: float
    value: Optional[float]      # None renders as "N/A"


@dataclass(frozen=True)
class SensitivityGrid:
    variable_a: str
    variable_b: str
    metric: str
    range_a: List[float]
    range_b: List[float]
    rows: List[List[SensitivityCell]]


# -----------------------------
# Helpers
# -----------------------------

def _check_variable(deal: DealBase, variable: str) -> None:
    if variable not in SWEEP_VARIABLES:
        raise ValueError(f"Unknown sensitivity variable: {variable!r}")
    if variable not in type(deal).model_fields:
        raise ValueError(f"{deal.kind} deals have no {variable!r} to sweep")


def _check_metric(metric: str) -> None:
    if metric not in METRICS:
        raise ValueError(f"Unknown sensitivity metric: {metric!r}")


def base_value(deal: DealBase, variable: str) -> float:
    if variable == "exit_cap_rate_pct":
        return exit_cap_rate_pct(project(deal), deal)
    return float(getattr(deal, variable))


def sweep_values(deal: DealBase, variable: str) -> List[float]:
    """The five values a variable takes around its current value."""
    _check_variable(deal, variable)
    base = base_value(deal, variable)
    if variable in ASSUMPTIONS_REL:
        return [base * (1 + d) for d in REL_DELTAS]
    return [max(0.0, base + d) for d in ABS_DELTAS[variable]]


def clone_with(deal: DealBase, overrides: Dict[str, float]) -> DealBase:
    """Return a copy of the deal with some fields changed."""
    return deal.model_copy(update=overrides)


def eval_metrics(deal: DealBase) -> ReturnMetrics:
    """Project the deal and compute its return metrics."""
    return summarize(project(deal), deal)


def metric_value(metrics: ReturnMetrics, metric: str) -> Optional[float]:
    return getattr(metrics, METRICS[metric])


# -----------------------------
# Grid
# -----------------------------

def build_grid(
    deal: DealBase,
    variable_a: str,
    variable_b: str,
    metric: str,
    max_workers: Optional[int] = None,
) -> SensitivityGrid:
    """
    Re-evaluate the deal over the cross product of two swept variables.

    Each row fixes variable_a and sweeps variable_b. Every cell is computed
    from scratch, so cells can run on a thread pool when max_workers > 1.
    """
    _check_metric(metric)
    if variable_a == variable_b:
        raise ValueError("Sensitivity grid needs two different variables")
    range_a = sweep_values(deal, variable_a)
    range_b = sweep_values(deal, variable_b)

    pairs: List[Tuple[float, float]] = list(product(range_a, range_b))

    def _cell(pair: Tuple[float, float]) -> SensitivityCell:
        a_val, b_val = pair
        res = eval_metrics(clone_with(deal, {variable_a: a_val, variable_b: b_val}))
        return SensitivityCell(value_a=a_val, value_b=b_val, value=metric_value(res, metric))

    if max_workers and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            cells = list(pool.map(_cell, pairs))
    else:
        cells = [_cell(p) for p in pairs]

    width = len(range_b)
    rows = [cells[i:i + width] for i in range(0, len(cells), width)]

    logger.info(
        "sensitivity grid built",
        extra={"context": {"variable_a": variable_a, "variable_b": variable_b, "metric": metric, "cells": len(cells)}},
    )
    return SensitivityGrid(
        variable_a=variable_a,
        variable_b=variable_b,
        metric=metric,
        range_a=range_a,
        range_b=range_b,
        rows=rows,
    )


def grid_frame(grid: SensitivityGrid) -> pd.DataFrame:
    """Grid as a table: variable_a down the index, variable_b across the columns, NaN for N/A."""
    values = [[np.nan if c.value is None else c.value for c in row] for row in grid.rows]
    return pd.DataFrame(
        values,
        index=pd.Index(grid.range_a, name=grid.variable_a),
        columns=pd.Index(grid.range_b, name=grid.variable_b),
        dtype=float,
    )


# -----------------------------
# One-at-a-time ranking
# -----------------------------

def run_sensitivity_sweep(deal: DealBase, metric: str) -> pd.DataFrame:
    """Sweep every applicable variable on its own, one row per (variable, value)."""
    _check_metric(metric)
    rows = []
    for field in SWEEP_VARIABLES:
        if field not in type(deal).model_fields:
            continue
        for value in sweep_values(deal, field):
            res = eval_metrics(clone_with(deal, {field: value}))
            v = metric_value(res, metric)
            rows.append({
                "Assumption": field,
                "Value": value,
                metric: np.nan if v is None else v,
            })
    return pd.DataFrame(rows)


def rank_sensitivities(deal: DealBase, metric: str) -> pd.DataFrame:
    """
    Rank assumptions from most to least sensitive by the spread of the
    metric across each one's sweep.
    """
    sweep = run_sensitivity_sweep(deal, metric)
    summary = sweep.groupby("Assumption")[metric].agg(Low="min", High="max")
    summary["Range"] = summary["High"] - summary["Low"]
    ranked = summary.sort_values("Range", ascending=False)
    return ranked.reset_index()
