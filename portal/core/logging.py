from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from core.config import PORTAL_DIR
from core.session import get_current_user_ref


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [user=%(user)s] %(message)s"

# Third-party loggers pinned to WARNING whatever the app level is.
# httpx logs one INFO line per upstream call.
_QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "multipart")


class RequestUserFilter(logging.Filter):
    """Tags every record with the id of the user the request acts for ("-" outside requests)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "user"):
            record.user = get_current_user_ref() or "-"
        return True


def resolve_level(environment: str, override: str | None = None) -> int:
    if override:
        level = logging.getLevelName(override.strip().upper())
        if isinstance(level, int):
            return level
    env = (environment or "development").lower().strip()
    return logging.INFO if env == "production" else logging.DEBUG


def setup_logging(*, environment: str, level: str | None = None, log_dir: str | Path | None = None) -> None:
    """Configure portal logging.

    Console output always; production also writes a rotating `portal.log`
    under `log_dir` (default `portal/logs`). Does nothing when the root
    logger already has handlers, e.g. under uvicorn reload or pytest.
    """

    root = logging.getLogger()
    if root.handlers:
        return

    env = (environment or "development").lower().strip()
    resolved = resolve_level(env, level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    user_filter = RequestUserFilter()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if env == "production":
        target = Path(log_dir) if log_dir else PORTAL_DIR / "logs"
        target.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                target / "portal.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setLevel(resolved)
        handler.setFormatter(formatter)
        handler.addFilter(user_filter)

    logging.basicConfig(level=resolved, handlers=handlers)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(resolved)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
