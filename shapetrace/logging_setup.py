import logging

TRACE = 5

_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

logging.addLevelName(TRACE, "TRACE")


def parse_level(verbose: str) -> int:
    """Unknown names fall back to INFO."""
    return _LEVELS.get((verbose or "").strip().lower(), logging.INFO)


def setup_logging(verbose: str = "info") -> None:
    logging.basicConfig(
        level=parse_level(verbose),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        force=True,
    )
