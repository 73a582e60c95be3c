"""
Unit tests for the CLI logging setup.
"""

import logging
import sys
import unittest

from svarchiv.logging_config import setup_logging


class TestSetupLogging(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        self._handlers = root.handlers[:]
        self._level = root.level
        self._urllib3_level = logging.getLogger("urllib3").level

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.handlers[:] = self._handlers
        root.setLevel(self._level)
        logging.getLogger("urllib3").setLevel(self._urllib3_level)

    def test_single_stderr_handler(self) -> None:
        setup_logging("debug")
        setup_logging("debug")

        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertIs(root.handlers[0].stream, sys.stderr)

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging("chatty")
        self.assertEqual(logging.getLogger().level, logging.INFO)

    def test_urllib3_is_quieted(self) -> None:
        setup_logging(logging.DEBUG)
        self.assertEqual(logging.getLogger("urllib3").level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
