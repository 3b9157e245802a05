import logging

from rich.console import Console
from rich.logging import RichHandler

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# logger name -> (level when DEBUG, level otherwise)
_LIBRARY_LEVELS: dict[str, tuple[int, int]] = {
    "twitchio": (logging.DEBUG, logging.INFO),
    "twitchio.http": (logging.DEBUG, logging.WARNING),
    "twitchio.websockets": (logging.DEBUG, logging.WARNING),
    "httpx": (logging.INFO, logging.WARNING),
    "aiohttp": (logging.WARNING, logging.WARNING),
    "uvicorn.access": (logging.INFO, logging.WARNING),
    "asyncio": (logging.ERROR, logging.ERROR),
}


def _rich_handler() -> RichHandler:
    handler = RichHandler(
        console=Console(force_terminal=True, width=120),
        show_time=True,
        show_level=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        tracebacks_width=120,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%Y-%m-%d %H:%M:%S]"))
    return handler


def setup_logging(log_level: str = "INFO") -> None:
    """Configure root logging for either process.

    ``force=True`` replaces handlers uvicorn or aiohttp may have installed.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        logging.basicConfig(level=level, handlers=[_rich_handler()], force=True)
    except Exception as e:
        logging.basicConfig(
            level=level, format=PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", force=True
        )
        logging.getLogger(__name__).warning(
            f"Rich logging setup failed: {e}, using standard logging"
        )

    debug = level == logging.DEBUG
    for name, (debug_level, normal_level) in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(debug_level if debug else normal_level)
