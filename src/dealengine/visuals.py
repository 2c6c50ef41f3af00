import os
from typing import List, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from matplotlib.backends.backend_pdf import PdfPages

from dealengine.config import config
from dealengine.engine import ProFormaYearEntry, projection_frame
from dealengine.logging_utils import get_logger
from dealengine.metrics import ReturnMetrics
from dealengine.schema import DealBase
from dealengine.sensitivity import SensitivityGrid, grid_frame, rank_sensitivities

logger = get_logger(__name__)


def _fmt(value: Optional[float], suffix: str = "") -> str:
    if value is None:
        return "N/A"
    return f"{value:,.2f}{suffix}"


def metrics_table(metrics: ReturnMetrics) -> pd.DataFrame:
    rows = {
        "Monthly Cash Flow ($)": _fmt(metrics.monthly_cash_flow),
        "NOI ($)": _fmt(metrics.noi),
        "Cap Rate": _fmt(metrics.cap_rate_pct, "%"),
        "Cash-on-Cash Return": _fmt(metrics.coc_return_pct, "%"),
        "Total Cash Invested ($)": _fmt(metrics.total_cash_invested),
        "DSCR": _fmt(metrics.dscr),
        "Debt Yield": _fmt(metrics.debt_yield_pct, "%"),
        "Expense Ratio": _fmt(metrics.expense_ratio_pct, "%"),
        "Unlevered IRR": _fmt(metrics.unlevered_irr_pct, "%"),
        "Equity Multiple": _fmt(metrics.equity_multiple, "x"),
        "Net Sale Proceeds ($)": _fmt(metrics.net_sale_proceeds),
    }
    return pd.DataFrame(rows.items(), columns=["Metric", "Value"])


def create_visual_report(
    deal: DealBase,
    proforma: List[ProFormaYearEntry],
    metrics: ReturnMetrics,
    grid: Optional[SensitivityGrid] = None,
    output_file: Optional[str] = None,
) -> str:
    """Generate a multi-page PDF report with cash flow visuals, the pro forma, metrics, and sensitivity."""
    if output_file is None:
        os.makedirs(config.OUTPUT_DIR, exist_ok=True)
        output_file = os.path.join(config.OUTPUT_DIR, "report.pdf")

    df = projection_frame(proforma)

    with PdfPages(output_file) as pdf:

        # -----------------------------
        # Cash Flow Graph
        # -----------------------------
        plt.figure(figsize=(10, 6))
        if not df.empty:
            df[["NetOperatingIncome", "CashFlowBeforeTax"]].plot(kind="bar", ax=plt.gca())
        plt.title("Annual NOI and Cash Flow")
        plt.ylabel("Amount ($)")
        plt.xlabel("Year")
        plt.grid(True, axis="y")
        pdf.savefig()
        plt.close()

        # -----------------------------
        # Pro Forma Table
        # -----------------------------
        table_df = df.T.map(lambda v: f"{v:,.0f}") if not df.empty else df.T
        plt.figure(figsize=(14, 5))
        plt.axis("off")
        if not table_df.empty:
            table = plt.table(
                cellText=table_df.values,
                rowLabels=table_df.index,
                colLabels=[f"Year {y}" for y in table_df.columns],
                loc="center",
                cellLoc="right",
            )
            table.auto_set_font_size(False)
            table.set_fontsize(7)
            table.scale(1.0, 1.3)
        plt.title("10-Year Pro Forma", pad=20)
        pdf.savefig()
        plt.close()

        # -----------------------------
        # Return Metrics Summary Table
        # -----------------------------
        metrics_df = metrics_table(metrics)

        plt.figure(figsize=(8, len(metrics_df) * 0.4 + 1))
        plt.axis("off")
        table = plt.table(
            cellText=metrics_df.values,
            colLabels=metrics_df.columns,
            loc="center",
            cellLoc="left",
        )
        table.auto_set_font_size(False)
        table.set_fontsize(10)
        table.scale(1.2, 1.2)
        plt.title("Return Metrics Summary", pad=20)
        pdf.savefig()
        plt.close()

        # -----------------------------
        # Sensitivity Heatmap
        # -----------------------------
        if grid is not None:
            heat = grid_frame(grid)
            heat.index = [f"{v:,.2f}" for v in heat.index]
            heat.columns = [f"{v:,.2f}" for v in heat.columns]
            plt.figure(figsize=(9, 7))
            sns.heatmap(heat, annot=True, fmt=".2f", cmap="RdYlGn", cbar=True)
            plt.title(f"Sensitivity of {grid.metric}")
            plt.ylabel(grid.variable_a)
            plt.xlabel(grid.variable_b)
            pdf.savefig()
            plt.close()

        # -----------------------------
        # Sensitivity Tornado Chart
        # -----------------------------
        metric = grid.metric if grid is not None else "coc_return"
        ranked = rank_sensitivities(deal, metric).sort_values("Range")

        plt.figure(figsize=(10, 6))
        plt.barh(ranked["Assumption"], ranked["Range"], color="steelblue")
        plt.title(f"Sensitivity Analysis ({metric} range)")
        plt.xlabel("Impact")
        plt.ylabel("Assumption")
        plt.grid(axis="x")
        pdf.savefig()
        plt.close()

    logger.info("report written", extra={"context": {"path": output_file}})
    return output_file
