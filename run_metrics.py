import sys, pathlib
from pathlib import Path
root = pathlib.Path(__file__).resolve().parent
sys.path.insert(0, str(root / "src"))

import argparse
import json as _json
from dataclasses import asdict

from dealengine.engine import project
from dealengine.flip import analyze_flip
from dealengine.metrics import summarize
from dealengine.schema import FlipDeal, parse_deal

parser = argparse.ArgumentParser(description="Compute return metrics for a scenario")
parser.add_argument("scenario", nargs="?", default=str(Path("scenarios") / "rental.json"))
args = parser.parse_args()

scenario = Path(args.scenario)
if not scenario.exists():
    print("Scenario file not found:", scenario)
    raise SystemExit(1)

with scenario.open('r', encoding='utf-8') as fh:
    data = _json.load(fh)

deal = parse_deal(data)

out = asdict(summarize(project(deal), deal))
if isinstance(deal, FlipDeal):
    out["flip"] = asdict(analyze_flip(deal))

out_dir = Path('outputs')
out_dir.mkdir(parents=True, exist_ok=True)
with (out_dir / 'metrics.json').open('w', encoding='utf-8') as fh:
    _json.dump(out, fh, indent=2, default=str)

print("Wrote metrics to", out_dir / 'metrics.json')
print(_json.dumps(out, indent=2, default=str))
