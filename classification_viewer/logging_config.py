from __future__ import annotations

"""Central logging configuration for the classification viewer.

Import and call :func:`setup_logging` at application start-up.
"""

import copy
import logging
import logging.config
import os

from classification_viewer.config import ConfigManager

__all__ = ["setup_logging"]

_MINIMAL_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> None:
    """Configure logging for the application using configuration from YAML files."""
    log_dir = os.environ.get("CLASSVIEW_LOG_DIR", "logs")
    log_file = os.path.join(log_dir, "app.log")

    try:
        os.makedirs(log_dir, exist_ok=True)
        # dictConfig consumes the mapping it is given
        logging_config = copy.deepcopy(ConfigManager().get_logging_config())

        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            # Update the filename dynamically
            if "handlers" in logging_config and "file" in logging_config["handlers"]:
                logging_config["handlers"]["file"]["filename"] = log_file

            logging.config.dictConfig(logging_config)
            logging.getLogger(__name__).debug("Logging initialised from config files")
        else:
            _setup_minimal_logging()
    except (OSError, ValueError, TypeError, AttributeError, ImportError) as exc:
        # dictConfig reports a bad schema as ValueError/TypeError
        print(f"Error loading logging config: {exc}")
        _setup_minimal_logging()

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {"format": _MINIMAL_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "simple",
                "level": "INFO",
            },
        },
        "root": {
            "level": "INFO",
            "handlers": ["console"],
        },
    }
    logging.config.dictConfig(minimal_config)
    logging.warning("Logging initialised with minimal fallback (config error)")


def _apply_debug_overrides() -> None:
    """Force DEBUG on the loggers listed in ``CLASSVIEW_DEBUG_MODULES``.

    Example: ``CLASSVIEW_DEBUG_MODULES=classification_viewer.ui.controllers``
    """
    extra_modules = os.environ.get("CLASSVIEW_DEBUG_MODULES", "").strip()
    targets = [m.strip() for m in extra_modules.split(",") if m.strip()]
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        has_debug_handler = any(h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter(_MINIMAL_FORMAT))
            logger.addHandler(handler)
        logger.info("Debug override active for logger '%s'", name)
