"""
Logging setup for the RiskLens API

Handlers on the root logger:
- console, at the environment level
- <log_dir>/<app>.log: INFO and above, rolled over at midnight, 30 days kept
- <log_dir>/<app>_error.log: ERROR and above, 10MB x 5
- <log_dir>/<app>_debug.log: everything, development only, 10MB x 3

Call setup_logging() once from main.py; modules just use
logging.getLogger(__name__).
"""
import logging
import logging.handlers
from pathlib import Path


LEVELS = {
    "development": logging.DEBUG,
    "test": logging.WARNING,
    "production": logging.INFO,
}

# Third-party loggers that drown out the analytics at DEBUG
QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "httpx", "httpcore", "langsmith")

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MB = 1024 * 1024


def _sized_handler(path: Path, level: int, backups: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=10 * MB, backupCount=backups, encoding="utf-8")
    handler.setLevel(level)
    return handler


def _daily_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        path, when="midnight", interval=1, backupCount=30, encoding="utf-8"
    )
    handler.suffix = "%Y-%m-%d"
    handler.setLevel(level)
    return handler


def setup_logging(environment: str = "development", log_dir: str = "logs", app_name: str = "risklens") -> None:
    """
    Configure the root logger. Safe to call again; existing handlers are replaced.

    Args:
        environment: "development" | "test" | "production"; unknown values log at INFO
        log_dir: directory for the log files, created if missing
        app_name: prefix of the log file names
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    level = LEVELS.get(environment, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    root.addHandler(console)

    file_handlers = [
        _daily_handler(log_path / f"{app_name}.log", logging.INFO),
        _sized_handler(log_path / f"{app_name}_error.log", logging.ERROR, backups=5),
    ]
    if environment == "development":
        file_handlers.append(_sized_handler(log_path / f"{app_name}_debug.log", logging.DEBUG, backups=3))

    file_formatter = logging.Formatter(FILE_FORMAT, DATE_FORMAT)
    for handler in file_handlers:
        handler.setFormatter(file_formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"🔧 Logging initialized: environment={environment}, level={logging.getLevelName(level)}, dir={log_path.absolute()}"
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
