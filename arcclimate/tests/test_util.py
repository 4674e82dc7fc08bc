"""
Tests for the util module.
"""

import logging

from arcclimate.util import Timer, format_elapsed


class TestTimer:

    def test_elapsed_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="arcclimate.util"):
            with Timer("stage") as t:
                pass
        assert t.elapsed >= 0
        assert "[stage] Elapsed" in caplog.text


class TestFormatElapsed:

    def test_format(self):
        assert format_elapsed(0) == "0:00:00"
        assert format_elapsed(3725.4) == "1:02:05"
