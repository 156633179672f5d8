import logging, json, sys, time, os

DEFAULT_LEVEL = logging.INFO


def resolve_level(level=None) -> int:
    """Level from the argument or KODER_LOG_LEVEL; unknown names fall back to INFO."""
    if level is None:
        level = os.getenv("KODER_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else DEFAULT_LEVEL


def _json_formatter() -> logging.Formatter:
    formatter = logging.Formatter(
        fmt=json.dumps({
            "ts": "%(asctime)s",
            "level": "%(levelname)s",
            "name": "%(name)s",
            "msg": "%(message)s"
        }),
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    formatter.converter = time.gmtime  # UTC
    return formatter


def get_logger(name="koder", level=None, to_file=None):
    """Structured JSON logger shared by all koder components."""
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    if not logger.handlers:
        formatter = _json_formatter()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
