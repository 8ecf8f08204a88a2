"""
PTCGP Data simple utilities
"""

import logging
import os
import time
from typing import Any, Dict, Mapping

from . import constants

LOGGER = logging.getLogger(__name__)


def init_logger() -> None:
    """
    Initialize the main system logger
    """
    constants.LOG_PATH.mkdir(parents=True, exist_ok=True)

    start_time = time.strftime("%Y-%m-%d_%H.%M.%S")

    logging.basicConfig(
        level=(
            logging.DEBUG
            if os.environ.get("PTCGP_DEBUG", "").lower() in ["true", "1"]
            else logging.INFO
        ),
        format="[%(levelname)s] %(asctime)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(
                str(constants.LOG_PATH.joinpath(f"ptcgp_{start_time}.log")),
                encoding="utf-8",
            ),
        ],
    )


def without_keys(record: Mapping[str, Any], *keys: str) -> Dict[str, Any]:
    """
    Shallow copy of a record with some keys removed
    :param record: Record to copy
    :param keys: Keys to drop
    :return: New dict
    """
    return {key: value for key, value in record.items() if key not in keys}
