"""Command-line interface: extract entities and relationships from text.

Example:
    export RELEXT_URL=https://gateway.watsonplatform.net/relationship-extraction-beta/api
    export RELEXT_USER=... RELEXT_PASS=...
    relext --relationships --locations "John Smith works for IBM."
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Sequence

from relext.client import ExtractionClient
from relext.config import ApiCredentials, ExtractionOptions
from relext.errors import UsageError
from relext.models import ExtractionResult


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relext",
        description="Find entities and relationships in text using the Watson Relationship Extraction service.",
    )
    parser.add_argument("text", help="Text to analyze, or '-' to read it from stdin")
    parser.add_argument(
        "--mentions",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Return entities with their mentions (default: on)",
    )
    parser.add_argument("--relationships", action="store_true", help="Return relationships between entities")
    parser.add_argument("--locations", action="store_true", help="Add character offsets to mentions")
    parser.add_argument("--no-scores", action="store_true", help="Leave out confidence scores")
    parser.add_argument("--ids", action="store_true", help="Include entity and mention ids")
    parser.add_argument("--dataset", default=None, help="Extraction dataset (service default: ie-en-news)")
    parser.add_argument("--url", default=os.environ.get("RELEXT_URL"), help="Service URL [env: RELEXT_URL]")
    parser.add_argument("--user", default=os.environ.get("RELEXT_USER"), help="Service user [env: RELEXT_USER]")
    parser.add_argument(
        "--password", default=os.environ.get("RELEXT_PASS"), help="Service password [env: RELEXT_PASS]"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    text = sys.stdin.read() if args.text == "-" else args.text

    options = ExtractionOptions(
        include_mentions=args.mentions,
        include_relationships=args.relationships,
        include_locations=args.locations,
        include_scores=not args.no_scores,
        include_ids=args.ids,
        dataset=args.dataset,
        api=ApiCredentials(url=args.url, user=args.user, password=args.password),
    )

    outcome: dict[str, int] = {}

    def done(err: BaseException | None, result: ExtractionResult | None) -> None:
        if err is not None:
            print(f"relext: {err}", file=sys.stderr)
            outcome["status"] = 1
            return
        print(json.dumps(result.to_dict(), indent=2))
        outcome["status"] = 0

    try:
        ExtractionClient().extract(text, options, done)
    except UsageError as err:
        print(f"relext: {err}", file=sys.stderr)
        return 2
    return outcome["status"]


if __name__ == "__main__":
    sys.exit(main())
