"""Performance budget CI gate.

Evaluates a JSON performance snapshot (``PerformanceData`` shape, camelCase or
snake_case keys) against an environment budget and prints either a
human-readable report or JSON (via ``--json``).

Budget selection: ``--env`` beats the ``PERFGOV_ENV`` environment variable;
the default is development. ``--budget`` applies overrides from a JSON file
on top of the selected environment budget.

Exit codes: 0 when within budget, 1 on violations, 2 on unreadable input.

Example:
  perfgov-budget-check snapshot.json --env production --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from perfgov import settings
from perfgov.budgets import (
    BudgetEvaluator,
    PerformanceData,
    budget_from_dict,
    build_report,
    select_budget,
)
from perfgov.errors import PerfGovError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Check a performance snapshot against its budget")
    p.add_argument("snapshot", help="JSON file holding the measured performance snapshot")
    p.add_argument(
        "--env",
        default=None,
        help=f"Budget environment (production|development|test); defaults to ${settings.ENV_VAR}",
    )
    p.add_argument("--budget", help="JSON file with threshold overrides for the selected budget")
    p.add_argument("--json", action="store_true", help="Emit JSON instead of human-readable text")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _load_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    env = settings.resolve_environment(args.env)
    try:
        data = PerformanceData.from_dict(_load_json(args.snapshot))
        budget = select_budget(env)
        if args.budget:
            budget = budget_from_dict(_load_json(args.budget), base=budget)
    except (OSError, ValueError, PerfGovError) as exc:
        print(f"Unable to read input: {exc}", file=sys.stderr)
        return 2

    result = BudgetEvaluator(budget).evaluate(data)
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(build_report(result))
    return 0 if result.passed else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
