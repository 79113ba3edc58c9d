# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import sys
import logging

def setup_logging(level=logging.INFO, log_file=None):
    """
    Configures the logger of the 'halfedge_mesh' namespace
    level: logging level (e.g. logging.DEBUG, logging.INFO)
    log_file: optional path to also write the log to
    """

    logger = logging.getLogger("halfedge_mesh")
    logger.setLevel(level)

    # Calling this again must not duplicate the output
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized.")

    return logger
