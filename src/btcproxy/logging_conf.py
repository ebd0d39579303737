import logging, sys

from btcproxy.config import settings

def setup_logging():
    logger = logging.getLogger("btcproxy")
    if logger.handlers:
        return logger
    level = logging.INFO if settings.ENV != "dev" else logging.DEBUG
    handler = logging.StreamHandler(sys.stdout)
    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    handler.setFormatter(fmt)
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
