"""Momentary CLI — runs one manifest → execute → dissolve cycle and prints the result.

Invariants:
    - Logging configured from settings before any task is manifested
    - The task is always dissolved before the process exits
    - Exit code 0 on a value result, 1 on an error result, 2 on invalid input

Design Decisions:
    - In-memory broker seeded from flags: the CLI owns no state beyond one run
    - argparse over a CLI framework: one command, a handful of flags
"""

import argparse
import asyncio
import json
import logging
import sys

from momentary.config import get_settings
from momentary.core.errors import MomentaryError
from momentary.infrastructure.observability import setup_logging
from momentary.infrastructure.state_broker import InMemoryStateBroker
from momentary.schemas.task import CalculationResult, parse_intent, parse_options
from momentary.services.manifest_task import manifested

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="momentary",
        description="Run one ephemeral calculation and dissolve it.",
    )
    parser.add_argument("operation", help="add, subtract, multiply or divide")
    parser.add_argument("operands", nargs="+", type=float)
    parser.add_argument("--precision", type=int, default=None)
    parser.add_argument("--max-lifetime-ms", type=int, default=None)
    return parser


async def run_once(
    operation: str, operands: list[float],
    precision: int | None = None, max_lifetime_ms: int | None = None,
) -> CalculationResult:
    settings = get_settings()
    intent = parse_intent(operation, operands)
    options = parse_options(max_lifetime_ms)
    seed = {}
    if precision is not None:
        seed[settings.preferences_path] = {"precision": precision}
    broker = InMemoryStateBroker(seed)
    async with manifested(intent, options, settings=settings) as task:
        return await task.execute(broker)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    try:
        result = asyncio.run(run_once(
            args.operation, args.operands, args.precision, args.max_lifetime_ms,
        ))
    except MomentaryError as e:
        logger.error(f"Run failed: {e.message}", extra={"error_code": e.code})
        print(json.dumps(e.to_dict()))
        return 2
    print(json.dumps(result.to_dict()))
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
