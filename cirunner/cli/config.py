import logging
import sys
from typing import TextIO


def setup_logging(*, level: int = logging.INFO, stream: TextIO | None = None) -> None:
    """
    Configure logging for the application.

    Configures the root logger to output logs to ``stream`` (stdout by default)
    with a custom format. Existing handlers are replaced so that repeated CLI
    invocations can change the level.

    Parameters:
        level (int): Root logger level.
        stream (TextIO, optional): Destination stream for log records.
    """
    stream_handler = logging.StreamHandler(stream or sys.stdout)
    logging.basicConfig(
        handlers=[stream_handler],
        format=(
            "{asctime:^} | {levelname: ^8} | {filename: ^14} {lineno: <4} | {message}"
        ),
        style="{",
        datefmt="%d.%m.%Y %H:%M:%S",
        level=level,
        force=True,
    )


def get_logger(name: str = None) -> logging.Logger:
    """
    Retrieve a logger instance with the given name.

    Parameters:
        name (str, optional): The name of the logger. Defaults to None for the root logger.

    Returns:
        logging.Logger: The configured logger.
    """
    return logging.getLogger(name)
