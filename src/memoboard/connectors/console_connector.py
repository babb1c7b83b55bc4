# src/memoboard/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
import threading
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

ReadLine = Callable[[str], Awaitable[str]]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    If stdout is not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def _read_stdin(prompt: str) -> str:
    """
    input() on a daemon thread, so the event loop keeps serving timers and
    in-flight requests.

    Not asyncio.to_thread: asyncio.run() joins default-executor threads on
    shutdown, and a thread blocked in input() would hold Ctrl+C until Enter.
    An abandoned daemon reader dies with the process.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def deliver(result: str | None, exc: BaseException | None) -> None:
        if fut.done():
            return
        if exc is not None:
            fut.set_exception(exc)
        else:
            fut.set_result(result or "")

    def worker() -> None:
        try:
            line, exc = input(prompt), None
        except (EOFError, KeyboardInterrupt) as e:
            line, exc = None, e
        # The loop may already be closed if the app exited while we were blocked.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(deliver, line, exc)

    threading.Thread(target=worker, name="console-stdin", daemon=True).start()
    return await fut


async def run_console_loop(state: AppState, *, read_line: ReadLine | None = None) -> None:
    read = read_line or _read_stdin
    is_tty = read_line is None

    logger.info("Console connector started (backend=%s).", state.api.fetch.base_url)
    _print_ts("[CONSOLE] Use /login <token> to start, /help for commands, /exit to quit.\n")

    while True:
        try:
            user_input = (await read(">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if is_tty:
            _rewrite_prev_line(f"[{_ts_local()}] >>> {user_input}")

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, user_input, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /help to list them."

        _print_ts(reply)

    logger.info("Console connector finished.")
