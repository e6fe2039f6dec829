import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure root logging for command-line use.

    Library code never calls this; it only creates named loggers.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        log_file: Also write records to this file when given

    Returns:
        logging.Logger: The root logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    return logging.getLogger()


def get_logger(component: str) -> logging.Logger:
    """Named logger following the ``NIMQ-<Component>`` convention."""
    return logging.getLogger(f"NIMQ-{component}")
