import logging
import sys

FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def configure_logging(level: str = "INFO"):
    levelno = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(FORMAT)
    # console handler
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.setLevel(levelno)
    # avoid duplicate handlers
    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        root.addHandler(handler)
    # add optional file handler (append)
    from .config import LOG_FILE
    has_file = any(isinstance(h, logging.FileHandler) for h in root.handlers)
    if LOG_FILE and not has_file:
        try:
            fh = logging.FileHandler(LOG_FILE)
        except OSError:
            logging.getLogger("logging_config").exception("Could not open log file %s", LOG_FILE)
        else:
            fh.setFormatter(formatter)
            root.addHandler(fh)
    # reduce noisy third-party libs
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("watchfiles").setLevel(logging.WARNING)
