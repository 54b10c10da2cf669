#!/usr/bin/env python3
"""Command-line front end for shell automation.

Results go to stdout as JSON (``null`` on timeout) so a loop can do:

    answer=$(chef ask "What next?")
    idx=$(chef choice "Pick one:" "API Architect" "Test Master" --columns 2)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Iterable

from chef.bot import DEFAULT_STOP_WORD, Chef
from chef.config import get_chef_config
from chef.errors import ChefConfigError
from chef.utils import load_env

DEFAULT_COLLECT_TIMEOUT_MS = 180_000


def _configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.getenv("CHEF_LOG_LEVEL", "WARNING").upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("aiohttp").setLevel(max(level, logging.INFO))


def _parse_args(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="chef", description="Ask questions via Telegram")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("ask", help="Ask a free-text question and print the reply")
    p.add_argument("prompt")
    p.add_argument("--timeout", type=float, default=None, help="Seconds to wait")

    p = sub.add_parser("confirm", help="Ask a yes/no question")
    p.add_argument("prompt")
    p.add_argument("--timeout", type=float, default=None, help="Seconds to wait")

    p = sub.add_parser("choice", help="Ask the operator to pick one option")
    p.add_argument("prompt")
    p.add_argument("options", nargs="+")
    p.add_argument("--columns", type=int, default=4)
    p.add_argument("--timeout", type=float, default=None, help="Seconds to wait")

    p = sub.add_parser("notify", help="Send a message without waiting")
    p.add_argument("message", nargs="+")

    sub.add_parser("mark", help="Drop every queued message")
    sub.add_parser("gather", help="Print messages received since the last mark")

    p = sub.add_parser("collect", help="Collect replies until a stop word")
    p.add_argument("prompt")
    p.add_argument("stop_word", nargs="?", default=DEFAULT_STOP_WORD)
    p.add_argument("timeout_ms", nargs="?", type=int, default=DEFAULT_COLLECT_TIMEOUT_MS)

    p = sub.add_parser("question", help="Post options with a recommendation, don't wait")
    p.add_argument("prompt")
    p.add_argument("options_json", help='JSON list, e.g. \'["Yes", "Later"]\'')
    p.add_argument("recommended", nargs="?", type=int, default=0)

    return parser.parse_args(list(argv))


def _load_options(raw: str) -> list[str]:
    try:
        options = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"options must be a JSON list: {e}") from e
    if not isinstance(options, list) or not options:
        raise ValueError("options must be a non-empty JSON list")
    return [str(o) for o in options]


async def run_command(chef: Chef, args: argparse.Namespace) -> str:
    """Run one subcommand and return what should be printed."""
    cmd = args.cmd
    if cmd == "ask":
        return json.dumps(await chef.ask(args.prompt, timeout=args.timeout), ensure_ascii=False)
    if cmd == "confirm":
        return json.dumps(await chef.confirm(args.prompt, timeout=args.timeout))
    if cmd == "choice":
        result = await chef.choice(
            args.prompt, args.options, columns=args.columns, timeout=args.timeout
        )
        return json.dumps(result)
    if cmd == "notify":
        await chef.notify(" ".join(args.message))
        return "✓"
    if cmd == "mark":
        await chef.mark()
        return "✓"
    if cmd == "gather":
        return json.dumps(await chef.gather(), ensure_ascii=False)
    if cmd == "collect":
        collected = await chef.collect(
            args.prompt, stop_word=args.stop_word, timeout=args.timeout_ms / 1000
        )
        return json.dumps(collected, ensure_ascii=False)
    if cmd == "question":
        await chef.question(args.prompt, _load_options(args.options_json), args.recommended)
        return "✓"
    raise ValueError(f"Unknown command: {cmd}")


async def _run(args: argparse.Namespace) -> str:
    # chat lookup stays lazy so a network failure prints null, not a traceback
    chef = Chef(get_chef_config())
    try:
        return await run_command(chef, args)
    finally:
        await chef.close()


def main(argv: Iterable[str]) -> int:
    args = _parse_args(argv)
    _configure_logging(args.verbose)
    load_env()

    try:
        output = asyncio.run(_run(args))
    except ChefConfigError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130

    print(output)
    return 0


def run() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
