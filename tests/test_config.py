import os
import unittest

from rabit.config import DEFAULT_PROFILE, ConfigError, load_config


class ConfigTests(unittest.TestCase):
    def test_defaults(self):
        config = load_config(env={"XDG_CONFIG_HOME": "/tmp/xdg"})

        self.assertEqual(config.data_path, os.path.join("/tmp/xdg", "rabit", "habit.json"))
        self.assertEqual(config.week_start, "mon")
        self.assertEqual(config.profile, DEFAULT_PROFILE)
        self.assertIsNone(config.db_url)
        self.assertIsNone(config.log_file)

    def test_home_fallback(self):
        config = load_config(env={})

        self.assertTrue(config.data_path.endswith(os.path.join(".config", "rabit", "habit.json")))

    def test_environment(self):
        env = {
            "RABIT_FILE": "/tmp/habits.json",
            "RABIT_WEEK_START": "SUN",
            "RABIT_DB_URL": "postgresql://localhost/rabit",
            "RABIT_PROFILE": "work",
            "RABIT_LOG_FILE": "/tmp/rabit.log",
        }

        config = load_config(env=env)

        self.assertEqual(config.data_path, "/tmp/habits.json")
        self.assertEqual(config.week_start, "sun")
        self.assertEqual(config.db_url, "postgresql://localhost/rabit")
        self.assertEqual(config.profile, "work")
        self.assertEqual(config.log_file, "/tmp/rabit.log")

    def test_database_url_wins(self):
        env = {"DATABASE_URL": "postgresql://a/db", "RABIT_DB_URL": "postgresql://b/db"}

        self.assertEqual(load_config(env=env).db_url, "postgresql://a/db")

    def test_flags_override_environment(self):
        env = {"RABIT_FILE": "/tmp/env.json", "RABIT_WEEK_START": "sun"}

        config = load_config(data_path="/tmp/flag.json", week_start="wed", env=env)

        self.assertEqual(config.data_path, "/tmp/flag.json")
        self.assertEqual(config.week_start, "wed")

    def test_invalid_week_start(self):
        with self.assertRaises(ConfigError):
            load_config(env={"RABIT_WEEK_START": "funday"})


if __name__ == "__main__":
    unittest.main()
