import logging

_DEF_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# HTTP client loggers that are chatty at INFO/DEBUG
_NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "openai")

_configured = False


def configure(level: int = logging.INFO, force: bool = False) -> None:
    """Configure root logging once; `force` replaces an earlier setup (the CLI's --debug)."""
    global _configured
    if _configured and not force:
        return
    logging.basicConfig(level=level, format=_DEF_FORMAT, force=force)
    noisy_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)
    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    if not _configured:
        configure()
    return logging.getLogger(name or "shell_assistant")
