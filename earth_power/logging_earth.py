import logging
from pathlib import Path

from earth_power.utils import get_timestamp

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(logger_name, log_dir=None, log_level=logging.INFO):
    """
    Create and return a logger object.

    Messages always go to the console. If `log_dir` is given they are also
    written to `<log_dir>/<logger_name>_<timestamp>.log`.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)

    # Calling twice for the same name must not double up the output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = get_timestamp(for_filename=True)
        log_file_path = log_dir / f'{logger_name}_{timestamp}.log'
        handler = logging.FileHandler(log_file_path, mode="a")
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Set up stream handler to write logging messages to the console
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
