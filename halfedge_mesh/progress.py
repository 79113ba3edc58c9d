# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

import logging

logger = logging.getLogger(__name__)

class Progress:
    """
    Task name and progress counters of the currently running mesh operation,
    meant to be polled by a UI or a log
    """

    def __init__(self):
        self.value = 0
        self.maximum = 1
        self.text = ""

    def begin(self, text, count=1):
        self.value = 0
        self.maximum = count
        self.text = text
        logger.debug("%s (%s)", text, count)

    def advance(self):
        # This appears to be slightly faster than the += operator
        self.value = self.value + 1

    @property
    def relative(self):
        return (self.value / self.maximum if self.maximum > 0 else 1.0)
