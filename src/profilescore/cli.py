"""
profilescore CLI entrypoint.

Scores a saved OpenTripPlanner profile response from a file (or stdin) and prints the
ranked itineraries. All scoring logic lives in `profilescore.scoring.profile_score`.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from profilescore.config.overrides import apply_scoring_overrides
from profilescore.config.settings import get_settings
from profilescore.core.log import get_log
from profilescore.core.logging import configure_logging
from profilescore.scoring.explain import breakdown_lines, one_line_summary
from profilescore.scoring.profile_score import ProfileScore


def _parse_pairs(pairs: list[str], *, flag: str) -> dict[str, float]:
    """Parse `KEY=VALUE` CLI arguments into a dict of floats."""
    out: dict[str, float] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid {flag} '{pair}', expected KEY=VALUE")
        key, value = pair.split("=", 1)
        out[key.strip()] = float(value)
    return out


def _positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return n


def _load_options(path: str) -> list[dict[str, Any]]:
    """Read a profile response: a list of options or an object with an `options` list."""
    if path == "-":
        data = json.load(sys.stdin)
    else:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

    if isinstance(data, dict):
        data = data.get("options")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of options or an object with an 'options' list")
    return data


def _cmd_score(args: argparse.Namespace) -> int:
    """Handle the `score` subcommand."""
    settings = get_settings()

    try:
        options = _load_options(args.file)
        overrides: dict[str, Any] = {}
        if args.factor:
            overrides["factors"] = _parse_pairs(args.factor, flag="--factor")
        if args.rate:
            overrides["rates"] = _parse_pairs(args.rate, flag="--rate")
        if args.bike_calories_once:
            overrides["count_bike_calories_per_mode"] = False
        scoring = apply_scoring_overrides(settings.scoring, overrides)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    scorer = ProfileScore(
        count_bike_calories_per_mode=scoring.count_bike_calories_per_mode,
        base_factors=scoring.factors,
        base_rates=scoring.rates,
    )

    if args.single:
        results = [scorer.process_option(o) for o in options]
    else:
        results = scorer.process_options(options)
    get_log("cli").info("Scored %d itineraries from %d options", len(results), len(options))

    if args.top is not None:
        results = results[: args.top]

    if args.json:
        print(json.dumps(results, ensure_ascii=False, indent=2))
        return 0

    for i, o in enumerate(results, start=1):
        print(f"{i:>2}. {one_line_summary(o)}")
        if args.explain:
            for line in breakdown_lines(scorer.explain(o)):
                print(f"    - {line}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the profilescore CLI."""
    parser = argparse.ArgumentParser(prog="profilescore")
    parser.add_argument("--log-level", default=None, help="Overrides app.log_level (e.g. DEBUG, VERBOSE)")
    sub = parser.add_subparsers(dest="command", required=True)

    sc = sub.add_parser("score", help="Score and rank the options of an OTP profile response.")
    sc.add_argument("file", help="JSON file with the profile response, or '-' for stdin")
    sc.add_argument("--factor", action="append", default=[], help="Override a time factor: KEY=VALUE")
    sc.add_argument("--rate", action="append", default=[], help="Override a rate: KEY=VALUE")
    sc.add_argument(
        "--bike-calories-once",
        action="store_true",
        help="Credit bike calories once even when both bicycle and bicycle_rent are present",
    )
    sc.add_argument("--single", action="store_true", help="Score each option as-is (first access/egress only)")
    sc.add_argument("--top", type=_positive_int, default=None, help="Only print the N best results")
    sc.add_argument("--explain", action="store_true", help="Print the score terms under each result")
    sc.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    sc.set_defaults(func=_cmd_score)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m profilescore.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
