"""
Level-based log notifier.

A `Log` forwards every message to a console sink (a stdlib logger named
`<application>:<name>`). Messages at `info` or above are also "saved": they are
tracked on an optional analytics sink as event `log:<level>` and posted to an
optional HTTP reporter (`POST /log`), both with the payload `{"text", "type"}`.

Levels, low to high severity: silly, debug, verbose, info, warn, error.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any, Protocol

import httpx

from profilescore.config.settings import get_settings

logger = logging.getLogger(__name__)

LEVELS: tuple[str, ...] = ("silly", "debug", "verbose", "info", "warn", "error")
INFO_INDEX = LEVELS.index("info")

SILLY = 5
VERBOSE = 15

# Stdlib numeric level used by the console sink for each notifier level.
STDLIB_LEVELS: dict[str, int] = {
    "silly": SILLY,
    "debug": logging.DEBUG,
    "verbose": VERBOSE,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def register_levels() -> None:
    """Give the two non-standard levels readable names in formatted records."""
    logging.addLevelName(SILLY, "SILLY")
    logging.addLevelName(VERBOSE, "VERBOSE")


class AnalyticsSink(Protocol):
    def track(self, event: str, properties: dict[str, Any]) -> None: ...


class HttpLogReporter:
    """POSTs saved log records to `<base_url>/log`."""

    def __init__(self, base_url: str, *, timeout_seconds: float = 5, client: httpx.Client | None = None):
        self.url = base_url.rstrip("/") + "/log"
        self.timeout_seconds = timeout_seconds
        self._client = client

    def post(self, payload: dict[str, Any]) -> None:
        # A failing reporter must never break the caller; the console sink already has the text.
        try:
            if self._client is not None:
                self._client.post(self.url, json=payload).raise_for_status()
                return
            with httpx.Client(timeout=self.timeout_seconds) as client:
                client.post(self.url, json=payload).raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Log report to %s failed: %s", self.url, str(exc))


def format_text(*args: Any) -> str:
    """printf-style formatting when the first argument is a format string, else space-joined."""
    if not args:
        return ""
    head, rest = args[0], args[1:]
    if isinstance(head, str) and rest and "%" in head:
        try:
            return head % rest
        except (TypeError, ValueError):
            logger.debug("Placeholder mismatch in %r; joining arguments instead", head)
    return " ".join(str(a) for a in args)


def format_error(exc: BaseException) -> str:
    """Render an exception's message, location (`file:line[:column]`) and stack trace."""
    text = f"{type(exc).__name__}: {exc}\n"

    tb = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    if tb:
        frame = tb[-1]
        text += frame.filename or ""
        text += f":{frame.lineno}" if frame.lineno else ""
        colno = getattr(frame, "colno", None)
        text += f":{colno}" if colno else ""
        text += "\n" + "".join(traceback.format_list(tb)).rstrip("\n")
    return text


class Log:
    """Callable notifier: `log("info", "fetched %s", n)` or `log.info("fetched %s", n)`."""

    def __init__(
        self,
        name: str,
        *,
        application: str | None = None,
        analytics: AnalyticsSink | None = None,
        reporter: HttpLogReporter | None = None,
    ):
        self.name = name
        self.console = logging.getLogger(f"{application or get_settings().app.name}:{name}")
        self.analytics = analytics
        self.reporter = reporter

    def __call__(self, level: Any, *args: Any) -> None:
        if level not in LEVELS:
            text = format_text(level, *args)
            level = "verbose"
        else:
            text = format_text(*args)
        self._emit(level, text)

    def _emit(self, level: str, text: str) -> None:
        self.console.log(STDLIB_LEVELS[level], text)

        if LEVELS.index(level) < INFO_INDEX:
            return

        payload = {"text": text, "type": level}
        if self.analytics is not None:
            self.analytics.track(f"log:{level}", payload)
        if self.reporter is not None:
            self.reporter.post(payload)

    def silly(self, *args: Any) -> None:
        self._emit("silly", format_text(*args))

    def debug(self, *args: Any) -> None:
        self._emit("debug", format_text(*args))

    def verbose(self, *args: Any) -> None:
        self._emit("verbose", format_text(*args))

    def info(self, *args: Any) -> None:
        self._emit("info", format_text(*args))

    def warn(self, *args: Any) -> None:
        self._emit("warn", format_text(*args))

    def error(self, *args: Any) -> None:
        self._emit("error", format_text(*args))


def get_log(
    name: str,
    *,
    analytics: AnalyticsSink | None = None,
    reporter: HttpLogReporter | None = None,
) -> Log:
    """Build a `Log` for `name`, wiring the HTTP reporter from settings when none is given."""
    settings = get_settings()
    if reporter is None and settings.log.report_url:
        reporter = HttpLogReporter(settings.log.report_url, timeout_seconds=settings.log.timeout_seconds)
    return Log(name, application=settings.app.name, analytics=analytics, reporter=reporter)
