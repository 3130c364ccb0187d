"""
Channel-aware structured logging for DrapeKit.

Every logger belongs to one channel:
- PIPELINE: pass start/end, timing, final status
- DECODE: which tier recovered the output, salvage
- VALIDATE: defaults, truncations, enum repairs
- CLASSIFY: icon/area diversity repairs
- SYSTEM: anything else

Verbosity is one of silent < info < verbose < debug. Warnings and errors
are emitted at every level except silent.

Environment:
- DRAPEKIT_LOG_LEVEL: silent/info/verbose/debug (default info)
- DRAPEKIT_LOG_FORMAT: console/json (default console)
- DRAPEKIT_LOG_CHANNELS: comma-separated channel filter (default all)

Output goes to stderr so the CLI can print documents on stdout.
"""

import logging
import os
import sys
import time
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Iterable, Optional, Union

import structlog


class LogLevel(IntEnum):
    SILENT = 0
    INFO = 1
    VERBOSE = 2
    DEBUG = 3

    @classmethod
    def from_string(cls, s: str) -> "LogLevel":
        """Parse a level name; stdlib names and unknown values map to INFO."""
        try:
            return cls[s.strip().upper()]
        except KeyError:
            return cls.INFO


class LogChannel(str, Enum):
    PIPELINE = "PIPELINE"
    DECODE = "DECODE"
    VALIDATE = "VALIDATE"
    CLASSIFY = "CLASSIFY"
    SYSTEM = "SYSTEM"

    @classmethod
    def all(cls) -> list["LogChannel"]:
        return list(cls)

    @classmethod
    def from_string(cls, s: str) -> Optional["LogChannel"]:
        try:
            return cls(s.strip().upper())
        except ValueError:
            return None


ChannelSpec = Union[LogChannel, str]

# Pass-name prefix -> channel
_PASS_CHANNELS = {
    "p00": LogChannel.PIPELINE,
    "p10": LogChannel.DECODE,
    "p20": LogChannel.VALIDATE,
    "p30": LogChannel.CLASSIFY,
}

_STDLIB_LEVELS = {
    LogLevel.SILENT: logging.CRITICAL + 10,
    LogLevel.INFO: logging.INFO,
    LogLevel.VERBOSE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
}


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class LogConfig:
    level: LogLevel = LogLevel.INFO
    format: str = "console"
    channels: set[LogChannel] = field(default_factory=lambda: set(LogChannel.all()))
    configured: bool = False


_config = LogConfig()


def _parse_channels(channels: Iterable[ChannelSpec]) -> set[LogChannel]:
    parsed = set()
    for ch in channels:
        if isinstance(ch, LogChannel):
            parsed.add(ch)
        elif ch and ch.strip():
            channel = LogChannel.from_string(ch)
            if channel is not None:
                parsed.add(channel)
    return parsed


def configure_logging(
    level: Union[LogLevel, str, None] = None,
    format: Optional[str] = None,
    channels: Optional[list[ChannelSpec]] = None,
    force: bool = False,
) -> None:
    """
    Configure structlog and the channel filter.

    Arguments left as None fall back to the DRAPEKIT_LOG_* environment
    variables. Without `force`, only the first call has an effect.
    """
    if _config.configured and not force:
        return

    if level is None:
        level = os.environ.get("DRAPEKIT_LOG_LEVEL", "info")
    if isinstance(level, str):
        level = LogLevel.from_string(level)

    if channels is None:
        channels = os.environ.get("DRAPEKIT_LOG_CHANNELS", "").split(",")
        selected = _parse_channels(channels) or set(LogChannel.all())
    else:
        selected = _parse_channels(channels)

    _config.level = level
    _config.format = format or os.environ.get("DRAPEKIT_LOG_FORMAT", "console")
    _config.channels = selected

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=_STDLIB_LEVELS[level],
        force=True,
    )

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if _config.format == "json":
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _config.configured = True


def get_current_config() -> dict:
    """Current configuration, for tests and debugging."""
    return {
        "level": _config.level.name,
        "format": _config.format,
        "channels": sorted(ch.value for ch in _config.channels),
    }


# =============================================================================
# Loggers
# =============================================================================

class ChannelLogger:
    """
    A structlog logger bound to one channel (and optionally one pass).

    info/verbose/debug respect the configured level; warning/error are
    dropped only when logging is silent.
    """

    def __init__(self, channel: LogChannel, name: Optional[str] = None, pass_name: Optional[str] = None):
        self.channel = channel
        self.pass_name = pass_name
        self._fields = {"channel": channel.value}
        if pass_name:
            self._fields["pass"] = pass_name
        # Lazy proxy: resolved against the configuration in force at first use
        self._logger = structlog.get_logger(name or f"drapekit.{channel.value.lower()}")

    def _should_log(self, msg_level: LogLevel) -> bool:
        return self.channel in _config.channels and _config.level >= msg_level

    def info(self, event: str, **kwargs: Any) -> None:
        if self._should_log(LogLevel.INFO):
            self._logger.info(event, **self._fields, **kwargs)

    def verbose(self, event: str, **kwargs: Any) -> None:
        if self._should_log(LogLevel.VERBOSE):
            self._logger.debug(event, detail="verbose", **self._fields, **kwargs)

    def debug(self, event: str, **kwargs: Any) -> None:
        if self._should_log(LogLevel.DEBUG):
            self._logger.debug(event, detail="debug", **self._fields, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        if _config.level is not LogLevel.SILENT:
            self._logger.warning(event, **self._fields, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        if _config.level is not LogLevel.SILENT:
            self._logger.error(event, **self._fields, **kwargs)


def get_logger(channel: ChannelSpec = LogChannel.SYSTEM) -> ChannelLogger:
    """Get a logger for a channel (unknown channel names map to SYSTEM)."""
    configure_logging()
    if isinstance(channel, str) and not isinstance(channel, LogChannel):
        channel = LogChannel.from_string(channel) or LogChannel.SYSTEM
    return ChannelLogger(channel)


def get_pass_logger(pass_name: str, channel: Optional[LogChannel] = None) -> ChannelLogger:
    """Get a logger for a pipeline pass; the channel follows the pass number."""
    configure_logging()
    channel = channel or _PASS_CHANNELS.get(pass_name[:3], LogChannel.PIPELINE)
    return ChannelLogger(channel, name=f"drapekit.{pass_name}", pass_name=pass_name)


# =============================================================================
# TransformLogger
# =============================================================================

class TransformLogger:
    """
    Pipeline-level logging for one request.

    Binds the request ID into structlog's context variables for the
    duration of the run and times each pass.
    """

    def __init__(self, request_id: str):
        self.request_id = request_id
        self._log = get_logger(LogChannel.PIPELINE)
        self._started = time.perf_counter()
        self._pass_started: dict[str, float] = {}
        structlog.contextvars.bind_contextvars(request_id=request_id)

    def pass_start(self, pass_name: str) -> None:
        self._pass_started[pass_name] = time.perf_counter()
        self._log.verbose("pass_started", pass_name=pass_name)

    def pass_end(self, pass_name: str, **metrics: Any) -> None:
        started = self._pass_started.pop(pass_name, time.perf_counter())
        self._log.info(
            "pass_completed",
            pass_name=pass_name,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            **metrics,
        )

    def pass_failed(self, pass_name: str, code: str, message: str) -> None:
        """A pass rejected the model output (bad generation, not a bug)."""
        self._log.warning("pass_rejected_input", pass_name=pass_name, code=code, error=message)

    def pass_error(self, pass_name: str, error: Exception) -> None:
        """A pass raised something unexpected."""
        self._log.error(
            "pass_failed",
            pass_name=pass_name,
            error=str(error),
            error_type=type(error).__name__,
        )

    def transform_complete(self, status: str, **metrics: Any) -> None:
        self._log.info(
            "transform_complete",
            status=status,
            total_duration_ms=round((time.perf_counter() - self._started) * 1000, 2),
            **metrics,
        )
        structlog.contextvars.unbind_contextvars("request_id")
