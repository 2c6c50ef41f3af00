import sys, pathlib
from pathlib import Path
root = pathlib.Path(__file__).resolve().parent
sys.path.insert(0, str(root / "src"))

import argparse
import json as _json

from dealengine.schema import parse_deal
from dealengine.sensitivity import METRICS, SWEEP_VARIABLES, build_grid, grid_frame, rank_sensitivities

parser = argparse.ArgumentParser(description="Two-variable sensitivity grid for a scenario")
parser.add_argument("scenario", nargs="?", default=str(Path("scenarios") / "rental.json"))
parser.add_argument("--a", dest="variable_a", default="vacancy_pct", choices=SWEEP_VARIABLES)
parser.add_argument("--b", dest="variable_b", default="exit_cap_rate_pct", choices=SWEEP_VARIABLES)
parser.add_argument("--metric", default="irr", choices=list(METRICS))
parser.add_argument("--workers", type=int, default=None, help="Evaluate grid cells on a thread pool")
args = parser.parse_args()

scenario = Path(args.scenario)
if not scenario.exists():
    print("Scenario file not found:", scenario)
    raise SystemExit(1)

with scenario.open('r', encoding='utf-8') as fh:
    data = _json.load(fh)

deal = parse_deal(data)

grid = build_grid(deal, args.variable_a, args.variable_b, args.metric, max_workers=args.workers)
grid_df = grid_frame(grid)
rank_df = rank_sensitivities(deal, args.metric)

out_dir = Path('outputs')
out_dir.mkdir(parents=True, exist_ok=True)

grid_path = out_dir / 'sensitivity_grid.csv'
rank_path = out_dir / 'sensitivity_summary.csv'

grid_df.to_csv(grid_path, index=True, na_rep="N/A")
rank_df.to_csv(rank_path, index=False)

print(grid_df.round(2).to_string(na_rep="N/A"))
print("Wrote", grid_path)
print("Wrote", rank_path)
