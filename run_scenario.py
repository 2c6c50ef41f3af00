import sys, pathlib
from pathlib import Path
root = pathlib.Path(__file__).resolve().parent
sys.path.insert(0, str(root / "src"))

import argparse
import json as _json

from dealengine.amortization import amortization_table
from dealengine.engine import loan_amount, project, projection_frame
from dealengine.schema import parse_deal

parser = argparse.ArgumentParser(description="Write the pro forma and amortization schedule for a scenario")
parser.add_argument("scenario", nargs="?", default=str(Path("scenarios") / "rental.json"))
args = parser.parse_args()

scenario = Path(args.scenario)
if not scenario.exists():
    print("Scenario file not found:", scenario)
    raise SystemExit(1)

with scenario.open('r', encoding='utf-8') as fh:
    data = _json.load(fh)

deal = parse_deal(data)
print('Loaded deal:')
print(_json.dumps(deal.model_dump(), indent=2, default=str))

df = projection_frame(project(deal))
amort = amortization_table(loan_amount(deal), deal.interest_rate_pct, deal.loan_term_years)

out_dir = Path('outputs')
out_dir.mkdir(parents=True, exist_ok=True)
df.to_csv(out_dir / 'proforma.csv', index=True)
amort.to_csv(out_dir / 'amortization.csv', index=True)
print('\nWrote', out_dir / 'proforma.csv')
print('Wrote', out_dir / 'amortization.csv')
print('\nHead:')
print(df.head().round(2).to_string())
