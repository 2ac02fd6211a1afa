# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for crossrel.

The one-time setup every CLI command goes through before doing real work:
  1. Validate the environment (Python version)
  2. Initialize the logger and push the configured level to every crossrel logger
  3. Log the host the release is being produced on
"""

import logging
from pathlib import Path
from typing import Optional

from crossrel.config.schema import GlobalConfig
from crossrel.logging.logger import ROOT_LOGGER_NAME, get_logger, set_log_level
from crossrel.runtime.environment import check_minimum_python, get_system_info


def bootstrap(config: GlobalConfig, log_level: Optional[str] = None) -> logging.Logger:
    """
    Run the bootstrap sequence.

    Args:
        config: The validated global configuration.
        log_level: Level from the command line; wins over config.log_level.

    Returns:
        The runtime logger.
    """
    check_minimum_python()

    level = log_level or config.log_level
    log_file = Path(config.log_file) if config.log_file is not None else None

    logger = get_logger(f"{ROOT_LOGGER_NAME}.runtime", log_level=level, log_file=log_file)
    set_log_level(level)

    system_info = get_system_info()
    logger.debug(
        "crossrel bootstrap complete",
        extra={
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
        },
    )
    return logger
