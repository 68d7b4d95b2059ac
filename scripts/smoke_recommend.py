#!/usr/bin/env python3
"""
Recommendation Smoke Test Script

Posts one recommendation request to a running gateway (see demo_endpoint.py)
and prints the result, without going through the Streamlit form.

Usage:
    python scripts/smoke_recommend.py
    python scripts/smoke_recommend.py --initiative reduce_denials --buying-job vendor_selection \\
        --primary risk_compliance --secondary finance technology \\
        --trigger "Denials up 15% this quarter."
"""

import argparse
import json
import logging
import os
import sys

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

from cram_demand.ui.form import (
    AUDIENCE_OPTIONS,
    BUYING_JOB_OPTIONS,
    ENGINE_OPTIONS,
    PRIORITY_OPTIONS,
    GatewayClient,
    RecommendationForm,
    SubmissionError,
)

load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_result(result: dict) -> None:
    """Pretty print the recommendation result."""
    print("\n" + "=" * 60)
    print("SUMMARY: " + result["trigger_context_summary"])
    print("=" * 60)

    for asset in sorted(result["recommended_assets"], key=lambda a: a["rank"]):
        print(f"\n--- #{asset['rank']} {asset['asset_type']} ---")
        print(f"  Channel:    {asset['primary_channel']}")
        print(f"  Format:     {asset['format']}")
        print(f"  Confidence: {asset['confidence']}")
        print(f"  Use case:   {asset['use_case']}")
        for reason in asset["why_recommended"]:
            print(f"    - {reason}")

    spec = result["top_asset_build_spec"]
    print(f"\nTop asset outline ({len(spec['outline'])} sections):")
    for index, section in enumerate(spec["outline"], 1):
        print(f"  {index}. {section['section_title']}: {section['section_goal']}")


def main():
    parser = argparse.ArgumentParser(description="Send one request to the recommendation gateway")
    parser.add_argument("--url", default=os.getenv("GATEWAY_URL", "http://localhost:8000"),
                        help="Gateway base URL (default: GATEWAY_URL or http://localhost:8000)")
    parser.add_argument("--initiative", default="reduce_denials", help="Initiative id from the knowledge base")
    parser.add_argument("--buying-job", default="vendor_selection", choices=[o for o, _ in BUYING_JOB_OPTIONS])
    parser.add_argument("--primary", default="risk_compliance", choices=[o for o, _ in ENGINE_OPTIONS])
    parser.add_argument("--secondary", nargs="*", default=[], choices=[o for o, _ in ENGINE_OPTIONS])
    parser.add_argument("--audience", default="executive", choices=[o for o, _ in AUDIENCE_OPTIONS])
    parser.add_argument("--priority", default="high", choices=[o for o, _ in PRIORITY_OPTIONS])
    parser.add_argument("--trigger", default="Denials up 15% this quarter.", help="Trigger context")
    parser.add_argument("--raw", action="store_true", help="Print the raw JSON instead of a summary")
    args = parser.parse_args()

    form = RecommendationForm(
        initiative_id=args.initiative,
        buying_job_id=args.buying_job,
        primary_engine=args.primary,
        secondary_engines=list(args.secondary),
        audience_type=args.audience,
        strategic_priority=args.priority,
        trigger_context=args.trigger,
    )

    message = form.validate()
    if message:
        print(f"\n⚠️  {message}")
        sys.exit(2)

    logger.info(f"Posting recommendation request to {args.url}")
    try:
        result = GatewayClient(args.url).recommend(form.to_payload())
    except SubmissionError as e:
        print(f"\n❌ {e}")
        sys.exit(1)

    if args.raw:
        print(json.dumps(result, indent=2))
    else:
        print_result(result)


if __name__ == "__main__":
    main()
