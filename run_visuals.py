import sys, pathlib
from pathlib import Path
root = pathlib.Path(__file__).resolve().parent
sys.path.insert(0, str(root / "src"))

import argparse
import json as _json

from dealengine.engine import project
from dealengine.metrics import summarize
from dealengine.schema import parse_deal
from dealengine.sensitivity import build_grid
from dealengine.visuals import create_visual_report

parser = argparse.ArgumentParser(description="PDF report for a scenario")
parser.add_argument("scenario", nargs="?", default=str(Path("scenarios") / "rental.json"))
args = parser.parse_args()

scenario = Path(args.scenario)
if not scenario.exists():
    print("Scenario file not found:", scenario)
    raise SystemExit(1)

with scenario.open('r', encoding='utf-8') as fh:
    data = _json.load(fh)

deal = parse_deal(data)

proforma = project(deal)
metrics = summarize(proforma, deal)
grid = None
if hasattr(deal, "vacancy_pct"):
    grid = build_grid(deal, "vacancy_pct", "exit_cap_rate_pct", "equity_multiple")

path = create_visual_report(deal, proforma, metrics, grid)
print("Report generated:", path)
