# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

import time
import logging

logger = logging.getLogger(__name__)


class Timer(object):
    """
    Simple Timer object; logs elapsed time at debug level.
    """

    def __init__(self, name=None):
        self.name = name
        self.elapsed = None

    def __enter__(self):
        self.tstart = time.time()
        return self

    def __exit__(self, type_, value, traceback):
        self.elapsed = time.time() - self.tstart
        if self.name:
            logger.debug("[%s] Elapsed: %.3fs", self.name, self.elapsed)
        else:
            logger.debug("Elapsed: %.3fs", self.elapsed)


def format_elapsed(seconds):
    """
    Format seconds as h:mm:ss
    """
    m, s = divmod(seconds, 60)
    h, m = divmod(m, 60)
    return "%d:%02d:%02d" % (h, m, s)
