from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import uvicorn

from nodeview.app import create_app
from nodeview.config import LoggingConfig, load_config
from nodeview.errors import ConfigError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("nodeview")


def configure_file_logging(config: LoggingConfig) -> RotatingFileHandler | None:
    """Attach a rotating file handler to the root logger when LOG_FILE is set."""

    if not config.file:
        return None

    root = logging.getLogger()
    # Avoid adding duplicate handlers if called twice
    for handler in root.handlers:
        if isinstance(handler, RotatingFileHandler):
            return handler

    log_path = Path(config.file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=config.max_size_mb * 1024 * 1024,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(file_handler)
    return file_handler


def main() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, handlers=[logging.StreamHandler()])

    try:
        config = load_config()
    except ConfigError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    logging.getLogger().setLevel(config.logging.level)
    configure_file_logging(config.logging)

    logger.info("Serving on port %s", config.port)
    uvicorn.run(create_app(config), host=config.bind_host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
