import sys, pathlib
from pathlib import Path
root = pathlib.Path(__file__).resolve().parent
sys.path.insert(0, str(root / "src"))

import json as _json
import os
import argparse

from dealengine.ai import report_generator
from dealengine.engine import project
from dealengine.metrics import summarize
from dealengine.schema import parse_deal


def main():
    parser = argparse.ArgumentParser(description="Generate an AI deal assessment for a scenario")
    parser.add_argument("scenario", nargs="?", default=str(Path("scenarios") / "rental.json"))
    parser.add_argument("--market", default="Stable rental demand, modest rent growth.", help="Market conditions to describe to the model")
    parser.add_argument("--api-key", dest="api_key", default=os.getenv("OPENAI_API_KEY"), help="OpenAI API key (falls back to OPENAI_API_KEY env var)")
    parser.add_argument("--offline", action="store_true", help="Write the prompt data only, without calling OpenAI")
    args = parser.parse_args()

    scenario = Path(args.scenario)
    if not scenario.exists():
        print("Scenario file not found:", scenario)
        raise SystemExit(1)

    with scenario.open('r', encoding='utf-8') as fh:
        data = _json.load(fh)

    deal = parse_deal(data)
    metrics = summarize(project(deal), deal)

    if args.offline:
        report = "\n".join([
            "Financial Data:",
            report_generator.build_financial_summary(deal, metrics),
            "",
            "Market Conditions:",
            args.market,
        ])
    else:
        try:
            report = report_generator.generate_deal_assessment(deal, metrics, args.market, api_key=args.api_key)
        except Exception as e:
            print("❌ Failed to generate AI assessment:", str(e))
            print("Hint: set OPENAI_API_KEY environment variable or pass --api-key.")
            raise

    out_dir = Path('outputs')
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / 'ai_report.txt'
    with out_path.open('w', encoding='utf-8') as fh:
        fh.write(report)

    print("\n=== AI Assessment (saved to outputs/ai_report.txt) ===\n")
    print(report)


if __name__ == "__main__":
    main()
