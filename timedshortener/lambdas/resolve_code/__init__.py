from timedshortener.utils.logging import initialize_logging


initialize_logging()
