#!/usr/bin/env python3
# examples/errors.py
"""
Demonstrates how resolved values and the different failure kinds surface.

    python examples/errors.py ok async      -> resolved: ok/async
    python examples/errors.py nok sync      -> rejected: nok/sync (exit 42)
    python examples/errors.py validation sync
    python examples/errors.py no_handler
    python examples/errors.py               -> interactive loop
"""
from __future__ import annotations

import asyncio
import sys

from cmdtree import Rejected, command, program

app = program()


def sync_nok():
    raise RuntimeError("nok/sync")


async def async_nok():
    raise RuntimeError("nok/async")


async def async_ok():
    return "ok/async"


async def async_validation(required):
    return "call without arguments"


app.add(
    command("ok", "Print message to stdout from handler")
    .add(command("sync", "Print sync message").action(lambda: "ok/sync"))
    .add(command("async", "Print async message").action(async_ok))
).add(
    command("nok", "Throw various errors")
    .add(command("sync", "Throw sync error").action(sync_nok))
    .add(command("async", "Throw async error").action(async_nok))
).add(
    command("validation", "Validation errors")
    .add(
        command("sync", "Test validation error with sync handler")
        .argument("required")
        .action(lambda required: "call without arguments")
    )
    .add(
        command("async", "Test validation error with async handler")
        .argument("required")
        .action(async_validation)
    )
).add(
    command("no_handler", "Test missing command handler")
)


async def main() -> int:
    outcome = await app.run_or_repl()
    if outcome is None:
        return 0
    if isinstance(outcome, Rejected):
        # Print the message only (no traceback) and exit with a meaningful status
        print("rejected:", outcome.message, file=sys.stderr)
        return 42 if not app.is_repl() else 0
    print("resolved:", outcome.value)
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
