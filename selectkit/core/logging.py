"""
Logging Configuration

selectkit modules log through `logging.getLogger(__name__)` and never install
handlers themselves. Applications (and the CLI) call configure_logging().
"""

import logging
from typing import Optional, Union

from selectkit.core.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(level: Optional[Union[str, int]] = None) -> None:
    """
    Configure root logging for selectkit output.

    Args:
        level: Log level name or number (default: settings.log_level)
    """
    if level is None:
        level = settings.log_level
    if isinstance(level, str):
        level = level.upper()

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT
    )
    logging.getLogger("selectkit").setLevel(level)
