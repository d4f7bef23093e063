"""Logging setup shared by the whole package.

Modules obtain loggers with ``get_logger(__name__)``; the CLI calls
``configure_logging`` once to attach a rich handler.
"""

import logging

from rich.logging import RichHandler

ROOT_LOGGER_NAME = "ui_codegen"


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the package root logger."""
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(level: int | str = logging.WARNING, use_rich: bool = True) -> None:
    """Configure the package root logger.

    Args:
        level: Logging level name or number.
        use_rich: Render records through ``rich`` instead of a plain stream handler.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)

    # Replace handlers installed by a previous call
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if use_rich:
        handler: logging.Handler = RichHandler(
            rich_tracebacks=True, show_path=False, markup=False
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    root.addHandler(handler)
