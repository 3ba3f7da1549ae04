"""Logging for the FoodStream API process and the client core it hosts.

``configure_logging()`` runs once at start-up (``app.py``). structlog renders
through stdlib logging: console output plus rotating files under ``LOG_DIR``.
The client-core packages (checkout sequencing, tracking loops) get their own
level from ``CLIENT_LOG_LEVEL`` so they can be traced without turning on
backend debug output. Modules log with ``structlog.get_logger(__name__)``.
"""

import logging
import logging.handlers
import os
import sys
import uuid
from dataclasses import dataclass
from pathlib import Path

import structlog

CLIENT_LOGGERS = ("checkout", "tracking", "shared")
QUIET_LOGGERS = ("protean", "httpx", "httpcore", "asyncio", "uvicorn.access")

_ENV_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_STRUCTURED_ENVS = ("production", "staging")


def _environment() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or os.getenv("ENV") or "development").lower()


@dataclass(frozen=True)
class LogConfig:
    environment: str = "development"
    level: str = "DEBUG"
    client_level: str = "DEBUG"
    log_dir: Path | None = Path("logs")

    @property
    def structured(self) -> bool:
        """JSON lines for log shipping; human-readable console output elsewhere."""
        return self.environment in _STRUCTURED_ENVS

    @classmethod
    def from_env(cls) -> "LogConfig":
        environment = _environment()
        level = os.getenv("LOG_LEVEL", _ENV_LEVELS.get(environment, "INFO")).upper()
        log_dir = os.getenv("LOG_DIR", "logs")
        return cls(
            environment=environment,
            level=level,
            client_level=os.getenv("CLIENT_LOG_LEVEL", level).upper(),
            log_dir=Path(log_dir) if log_dir else None,
        )


def get_log_level() -> str:
    """``LOG_LEVEL`` if set, else the level for the environment name."""
    return LogConfig.from_env().level


def _file_handler(log_dir: Path, filename: str, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=log_dir / filename,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(config: LogConfig) -> None:
    root = logging.getLogger()
    root.handlers = []
    root.setLevel(config.level)
    root.addHandler(logging.StreamHandler(sys.stdout))

    # An empty LOG_DIR keeps output on the console only
    if config.log_dir is not None:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        root.addHandler(_file_handler(config.log_dir, "foodstream.log", config.level))
        root.addHandler(_file_handler(config.log_dir, "foodstream_error.log", logging.ERROR))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    for name in CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(config.client_level)


def add_component(logger, method_name, event_dict):
    """Tag each event with the side that emitted it: ``client`` or ``backend``."""
    package = event_dict.get("logger", "").split(".", 1)[0]
    event_dict["component"] = "client" if package in CLIENT_LOGGERS else "backend"
    return event_dict


def build_processors(config: LogConfig) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_component,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if config.structured:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        # exc_info stays raw here so rich can render the traceback
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=5),
            )
        )
    return processors


def setup_structlog(config: LogConfig) -> None:
    structlog.configure(
        processors=build_processors(config),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(config: LogConfig | None = None) -> LogConfig:
    """Configure stdlib and structlog for the process; returns the config applied."""
    config = config or LogConfig.from_env()
    setup_stdlib_logging(config)
    setup_structlog(config)
    return config


def bind_request(request_id: str | None = None) -> str:
    """Start a fresh log context for one HTTP request and return its id.

    The caller's ``X-Request-ID`` is reused when present.
    """
    structlog.contextvars.clear_contextvars()
    request_id = request_id or uuid.uuid4().hex
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id
