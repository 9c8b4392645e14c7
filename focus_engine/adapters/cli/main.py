"""CLI JSON-lines adapter — reads a query from argv/stdin, prints stream events as JSON."""

from __future__ import annotations

import asyncio
import json
import sys

from focus_engine import create_engine
from focus_engine.engine.errors import UnknownFocusMode
from focus_engine.engine.models import EventType, SearchRequest

USAGE = "Usage: focus-cli [--mode=<focusMode>] <text>  OR  echo '{\"query\":\"...\"}' | focus-cli"


async def run_cli(text: str, focus_mode: str = "webSearch") -> int:
    engine = create_engine()
    try:
        events = engine.handle(SearchRequest(focus_mode=focus_mode, query=text))
    except UnknownFocusMode as exc:
        print(json.dumps({"type": "error", "data": str(exc)}), flush=True)
        return 2
    exit_code = 0
    async for event in events:
        print(json.dumps(event.to_wire(), default=str), flush=True)
        if event.type == EventType.ERROR:
            exit_code = 1
    return exit_code


def main() -> None:
    args = sys.argv[1:]
    focus_mode = "webSearch"
    if args and args[0].startswith("--mode="):
        focus_mode = args.pop(0).split("=", 1)[1]

    if args:
        text = " ".join(args)
    else:
        raw = sys.stdin.read().strip()
        if not raw:
            print(USAGE, file=sys.stderr)
            sys.exit(1)
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            text = raw
        else:
            if isinstance(data, dict):
                text = data.get("query", raw)
                focus_mode = data.get("focusMode", focus_mode)
            else:
                text = raw

    sys.exit(asyncio.run(run_cli(text, focus_mode)))


if __name__ == "__main__":
    main()
