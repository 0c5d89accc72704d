import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # aiohttp access/client chatter drowns the poll loop at DEBUG
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
