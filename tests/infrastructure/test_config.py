import dataclasses
import logging
import os
import unittest
from unittest import TestCase, mock

import numpy as np

from keygrad.infrastructure._config import (
    LOGGER_NAME,
    Settings,
    get_logger,
    get_settings,
    load_settings,
)


class TestLoadSettings(TestCase):

    def test_defaults_with_empty_environment(self):
        """An empty environment should yield the default settings."""
        s = load_settings({})
        self.assertEqual(s, Settings())
        self.assertEqual(s.log_level, "WARNING")
        self.assertEqual(s.numpy_dtype, np.dtype(np.float32))

    def test_reads_log_level_case_insensitively(self):
        """KEYGRAD_LOG_LEVEL should be matched case-insensitively."""
        s = load_settings({"KEYGRAD_LOG_LEVEL": "debug"})
        self.assertEqual(s.log_level, "DEBUG")

    def test_unknown_log_level_falls_back_to_warning(self):
        """An unknown level name should fall back to WARNING."""
        s = load_settings({"KEYGRAD_LOG_LEVEL": "chatty"})
        self.assertEqual(s.log_level, "WARNING")

    def test_reads_default_dtype(self):
        """KEYGRAD_DEFAULT_DTYPE should select the tensor dtype."""
        s = load_settings({"KEYGRAD_DEFAULT_DTYPE": "float64"})
        self.assertEqual(s.numpy_dtype, np.dtype(np.float64))

    def test_rejects_unsupported_dtype(self):
        """An unsupported dtype name should raise ValueError."""
        with self.assertRaises(ValueError):
            load_settings({"KEYGRAD_DEFAULT_DTYPE": "int8"})

    def test_settings_are_frozen(self):
        """Settings should be immutable."""
        s = Settings()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            s.log_level = "DEBUG"  # type: ignore[misc]


class TestGetSettingsAndLogger(TestCase):

    def setUp(self) -> None:
        get_settings.cache_clear()

    def tearDown(self) -> None:
        get_settings.cache_clear()
        get_logger()

    def test_get_settings_reads_os_environ(self):
        """get_settings() should read os.environ after a cache clear."""
        with mock.patch.dict(os.environ, {"KEYGRAD_LOG_LEVEL": "ERROR"}):
            get_settings.cache_clear()
            self.assertEqual(get_settings().log_level, "ERROR")

    def test_logger_level_follows_settings_and_has_one_handler(self):
        """get_logger() should apply the level and attach a single handler."""
        with mock.patch.dict(os.environ, {"KEYGRAD_LOG_LEVEL": "DEBUG"}):
            get_settings.cache_clear()
            logger = get_logger()
            get_logger()
        self.assertEqual(logger.name, LOGGER_NAME)
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)

    def test_logger_ignores_bad_dtype_setting(self):
        """get_logger() should not fail on a dtype it never uses."""
        env = {"KEYGRAD_LOG_LEVEL": "INFO", "KEYGRAD_DEFAULT_DTYPE": "float16"}
        with mock.patch.dict(os.environ, env):
            get_settings.cache_clear()
            logger = get_logger()
            self.assertEqual(logger.level, logging.INFO)
            with self.assertRaises(ValueError):
                get_settings()


if __name__ == "__main__":
    unittest.main()
