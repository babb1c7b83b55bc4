# src/memoboard/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..api.errors import ClientError, PolicyExhausted, RequestFailure, UnexpectedResponse
from ..core.board import NEW_MEMO_TITLE, BoardError
from ..core.state import AppState

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


def failure_message(e: Exception) -> str:
    """User-facing one-liner for errors a command is expected to hit."""
    if isinstance(e, ClientError):
        if e.status_code in (401, 403):
            return f"Rejected by the server (HTTP {e.status_code}). Check your access token with /login."
        if e.status_code == 404:
            return "Not found on the server (HTTP 404)."
        return f"Request rejected (HTTP {e.status_code})."
    if isinstance(e, PolicyExhausted):
        return f"Server unavailable, gave up after {e.attempts} attempt(s)."
    if isinstance(e, UnexpectedResponse):
        return f"Unexpected response from the server ({e})."
    if isinstance(e, RequestFailure):
        return f"Server unavailable: {e}"
    return str(e)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /login, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Request failures and board-state errors become the reply; anything
        else propagates to the connector.
        """
        if not line.startswith("/"):
            return None

        name, _, rest = line[1:].partition(" ")
        name = name.strip().lower()
        if not name:
            return "Empty command. Use /help to list available commands."

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        # Editor commands take the rest of the line verbatim, everything else is split.
        args = [rest.strip()] if name in _RAW_ARG_COMMANDS and rest.strip() else rest.split()

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                result = cast(CommandHandler3, handler)(state, args, emit)
            else:
                result = cast(CommandHandler2, handler)(state, args)
            if inspect.isawaitable(result):
                result = await result
        except (RequestFailure, BoardError) as e:
            logger.info("/%s failed: %s", name, e)
            return failure_message(e)

        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


_RAW_ARG_COMMANDS = frozenset({"new", "title", "content"})

registry = CommandRegistry()


def _parse_id(args: list[str], usage: str) -> int:
    if not args:
        raise BoardError(f"Usage: {usage}")
    try:
        return int(args[0])
    except ValueError:
        raise BoardError(f"Not a number: {args[0]!r}. Usage: {usage}") from None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    policy = state.api.fetch.default_policy
    delay = "backoff" if policy.retry_delay is None else f"{policy.retry_delay:g}s"
    board = state.board
    return (
        "Status:\n"
        f"  Backend: {state.api.fetch.base_url}\n"
        f"  Logged in: {'yes' if state.tokens.has_token else 'no'}\n"
        f"  Retries: {policy.retry_times} (delay: {delay})\n"
        f"  Expanded category: {board.expanded_category_id if board.expanded_category_id is not None else '-'}\n"
        f"  Selected memo: {board.active_memo_id if board.active_memo_id is not None else '-'}"
    )


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /login <token>  -> store the access token and load categories
    """
    if not args:
        return "Usage: /login <access-token>"

    if emit:
        emit("Logging in...")
    if not await state.board.login(args[0]):
        return "Login already in progress."

    cats = state.board.categories
    if cats.rejected_count:
        return "Logged in, but loading categories failed. Use /categories to retry."
    return "Logged in.\n" + _format_categories(state)


def _format_categories(state: AppState) -> str:
    cats = state.board.categories.value or []
    if not cats:
        return "No categories found."
    expanded = state.board.expanded_category_id
    lines = ["Categories:"]
    for c in cats:
        marker = "v" if c.id == expanded else ">"
        lines.append(f"  {marker} [{c.id}] {c.name}")
    return "\n".join(lines)


def _format_memos(state: AppState) -> str:
    memos = state.board.memos.value or []
    if not memos:
        return "No memos found."
    active = state.board.active_memo_id
    lines = ["Memos:"]
    for m in memos:
        marker = "*" if m.id == active else "-"
        lines.append(f"  {marker} [{m.id}] {m.title}")
    return "\n".join(lines)


def _format_memo(state: AppState) -> str:
    memo = state.board.selected
    if memo is None:
        return "No memo selected."
    return f"Memo [{memo.id}] in category {memo.category_id}\n  Title: {memo.title}\n  Content: {memo.content}"


def _require_login(state: AppState) -> None:
    if not state.board.is_open:
        raise BoardError("Not logged in. Use /login <access-token> first.")


async def cmd_categories(state: AppState, args: list[str]) -> str:
    """
    /categories  -> reload and list categories
    """
    _require_login(state)
    await state.board.refresh_categories()
    return _format_categories(state)


async def cmd_open(state: AppState, args: list[str]) -> str:
    """
    /open <category-id>  -> expand a category (or collapse it if already expanded)
    """
    _require_login(state)
    category_id = _parse_id(args, "/open <category-id>")
    if not await state.board.toggle_category(category_id):
        return f"Category {category_id} collapsed."
    return _format_memos(state)


async def cmd_memo(state: AppState, args: list[str]) -> str:
    """
    /memo            -> show the selected memo
    /memo <memo-id>  -> select and load a memo
    """
    _require_login(state)
    if not args:
        return _format_memo(state)
    await state.board.select_memo(_parse_id(args, "/memo <memo-id>"))
    return _format_memo(state)


async def cmd_new(state: AppState, args: list[str]) -> str:
    _require_login(state)
    title = args[0] if args else NEW_MEMO_TITLE
    memo = await state.board.create_memo(title)
    if memo is None:
        return "Already creating a memo."
    return f"Created memo [{memo.id}].\n" + _format_memos(state)


def cmd_title(state: AppState, args: list[str]) -> str:
    _require_login(state)
    if not args:
        return "Usage: /title <text>"
    state.board.edit_selected(title=args[0])
    return "Title updated locally. Use /save to send it."


def cmd_content(state: AppState, args: list[str]) -> str:
    _require_login(state)
    if not args:
        return "Usage: /content <text>"
    state.board.edit_selected(content=args[0])
    return "Content updated locally. Use /save to send it."


async def cmd_save(state: AppState, args: list[str]) -> str:
    _require_login(state)
    memo = await state.board.save_selected()
    if memo is None:
        return "Save skipped (another save is in progress)."
    return f"Saved memo [{memo.id}]."


async def cmd_delete(state: AppState, args: list[str]) -> str:
    _require_login(state)
    memo = state.board.selected
    if not await state.board.delete_selected():
        return "Delete skipped (another delete is in progress)."
    return f"Deleted memo [{memo.id if memo else '?'}].\n" + _format_memos(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show backend, login and retry settings.")
registry.register("login", cmd_login, help_text="Set the access token: /login <uuid>.")
registry.register("categories", cmd_categories, help_text="Reload and list categories.", aliases=["cats"])
registry.register("open", cmd_open, help_text="Expand/collapse a category: /open <id>.")
registry.register("memo", cmd_memo, help_text="Show the selected memo or select one: /memo [id].")
registry.register("new", cmd_new, help_text="Create a memo in the expanded category: /new [title].")
registry.register("title", cmd_title, help_text="Edit the selected memo's title: /title <text>.")
registry.register("content", cmd_content, help_text="Edit the selected memo's content: /content <text>.")
registry.register("save", cmd_save, help_text="Send local edits of the selected memo.")
registry.register("delete", cmd_delete, help_text="Delete the selected memo.", aliases=["rm"])
