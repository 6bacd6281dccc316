"""Diagnostic logging of HTTP attempts, outcomes and retries.

A pure observer: it never raises and never influences control flow. Records go
through the standard ``logging`` module under the ``iamcli.http`` logger, so
handlers and formatting come from ``setup_logging``.
"""

import logging
from enum import IntEnum
from typing import Optional, Union

import httpx

logger = logging.getLogger("iamcli.http")

REDACTED_HEADERS = frozenset({"authorization"})


class LogLevel(IntEnum):
    """Verbosity of the diagnostic logger."""
    NONE = 0
    ERROR = 1
    INFO = 2
    DEBUG = 3

    @classmethod
    def parse(cls, value: Union[str, int, "LogLevel", None], default: Optional["LogLevel"] = None) -> "LogLevel":
        """Parses 'none'/'error'/'info'/'debug' (any case) or an int."""
        if default is None:
            default = cls.INFO
        if value is None:
            return default
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return default
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            logger.warning(f"Unknown diagnostic log level '{value}', using {default.name.lower()}")
            return default

    def to_logging_level(self) -> int:
        """Equivalent level for the standard ``logging`` module."""
        return {
            LogLevel.NONE: logging.CRITICAL,
            LogLevel.ERROR: logging.ERROR,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
        }[self]


class DiagnosticLogger:
    """Records requests, responses and retries at a configurable verbosity."""

    def __init__(self, level: LogLevel = LogLevel.INFO, log: Optional[logging.Logger] = None):
        self.level = level
        self._log = log or logger

    @property
    def enabled(self) -> bool:
        return self.level > LogLevel.NONE

    def error(self, msg: str, *args) -> None:
        if self.level >= LogLevel.ERROR:
            self._log.error(msg, *args)

    def info(self, msg: str, *args) -> None:
        if self.level >= LogLevel.INFO:
            self._log.info(msg, *args)

    def debug(self, msg: str, *args) -> None:
        if self.level >= LogLevel.DEBUG:
            self._log.debug(msg, *args)

    def log_request(self, request: httpx.Request, attempt: int = 0) -> None:
        """At debug, dumps headers and body; at info, method and URL only."""
        if self.level >= LogLevel.DEBUG:
            try:
                self.debug("HTTP Request (attempt %d):\n%s", attempt, dump_request(request))
            except Exception as e:
                self.error("Failed to dump request: %s", e)
        elif self.level >= LogLevel.INFO:
            self.info("HTTP Request: %s %s", request.method, request.url)

    def log_response(self, response: httpx.Response) -> None:
        """At debug, dumps headers and body; at info, status and reason only."""
        if self.level >= LogLevel.DEBUG:
            try:
                self.debug("HTTP Response:\n%s", dump_response(response))
            except Exception as e:
                self.error("Failed to dump response: %s", e)
        elif self.level >= LogLevel.INFO:
            self.info("HTTP Response: %d %s", response.status_code, response.reason_phrase)

    def log_retry(self, attempt: int, cause: Optional[BaseException], delay: Optional[float] = None) -> None:
        """Records retry number ``attempt`` (1-based) and the outcome that triggered it."""
        if self.level < LogLevel.INFO:
            return
        if delay is None:
            self.info("Retry attempt %d after: %s", attempt, cause)
        else:
            self.info("Retry attempt %d in %.3fs after: %s", attempt, delay, cause)


def _format_headers(headers: httpx.Headers) -> str:
    lines = []
    for name, value in headers.multi_items():
        if name.lower() in REDACTED_HEADERS:
            scheme = value.split(" ", 1)[0] if " " in value else ""
            value = f"{scheme} [REDACTED]".strip()
        lines.append(f"{name}: {value}")
    return "\n".join(lines)


def dump_request(request: httpx.Request) -> str:
    """Renders a request as wire-like text with credentials redacted."""
    body = request.content.decode("utf-8", errors="replace") if request.content else ""
    return f"{request.method} {request.url} HTTP/1.1\n{_format_headers(request.headers)}\n\n{body}"


def dump_response(response: httpx.Response) -> str:
    """Renders a response as wire-like text."""
    return (
        f"{response.http_version} {response.status_code} {response.reason_phrase}\n"
        f"{_format_headers(response.headers)}\n\n{response.text}"
    )
