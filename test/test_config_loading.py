"""Tests for layered config parsing, validation and default merging."""

import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from PackageSearch.config import load_config, load_config_with_defaults, parse_config_dict
from PackageSearch.core.query import Weights


def _base_raw_config() -> dict:
    return {
        "log": {"level": "info", "to_file": False, "dir": "log"},
        "search": {
            "size": 25,
            "max_size": 250,
            "weights": {"quality": 1.95, "popularity": 3.3, "maintenance": 2.05},
        },
        "elasticsearch": {"url": "http://localhost:9200", "api_key_env": "TEST_ES_API_KEY"},
        "couchdb": {"url": "http://localhost:5984", "database": "npms"},
    }


_BASE_YAML = """
log:
  level: INFO

search:
  size: 25
  score_effect: 15.3

elasticsearch:
  url: http://localhost:9200

couchdb:
  url: http://localhost:5984
"""


class TestConfigParsing(unittest.TestCase):
    def test_parse_success_nested_access(self) -> None:
        with patch.dict(os.environ, {"TEST_ES_API_KEY": " key "}, clear=False):
            cfg = parse_config_dict(_base_raw_config())

        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertEqual(cfg.runtime.keep, 20)
        self.assertEqual(cfg.search.size, 25)
        self.assertEqual(cfg.search.weights, Weights(1.95, 3.3, 2.05))
        self.assertEqual(cfg.search.unknown_qualifiers, "fold")
        self.assertEqual(cfg.search.zero_weights, "fallback")
        self.assertIsNone(cfg.search.timeout)
        self.assertEqual(cfg.elasticsearch.search_index, "npms-current")
        self.assertEqual(cfg.elasticsearch.api_key, "key")
        self.assertEqual(cfg.couchdb.database, "npms")

    def test_missing_api_key_env_is_empty(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            cfg = parse_config_dict(_base_raw_config())
        self.assertEqual(cfg.elasticsearch.api_key, "")

    def test_compiler_settings_follow_config(self) -> None:
        raw = _base_raw_config()
        raw["search"].update(
            {
                "size": 10,
                "unknown_qualifiers": "REJECT",
                "zero_weights": "reject",
                "exact_match_constant": 5000,
                "field_boosts": {"package.name": 8},
            }
        )

        settings = parse_config_dict(raw).search.compiler_settings()

        self.assertEqual(settings.defaults.size, 10)
        self.assertEqual(settings.unknown_qualifiers, "reject")
        self.assertEqual(settings.zero_weights, "reject")
        self.assertEqual(settings.exact_match_constant, 5000.0)
        self.assertEqual(dict(settings.field_boosts), {"package.name": 8.0})

    def test_missing_backend_section(self) -> None:
        raw = _base_raw_config()
        del raw["couchdb"]
        with self.assertRaisesRegex(ValueError, "couchdb"):
            parse_config_dict(raw)

    def test_invalid_values_report_key(self) -> None:
        cases = [
            (("search", "max_size"), 300, ValueError, "search\\.max_size"),
            (("search", "size"), 0, ValueError, "search\\.size"),
            (("search", "score_effect"), 30, ValueError, "search\\.score_effect"),
            (("search", "unknown_qualifiers"), "ignore", ValueError, "search\\.unknown_qualifiers"),
            (("search", "size"), "ten", TypeError, "search\\.size"),
            (("elasticsearch", "url"), "localhost:9200", ValueError, "elasticsearch\\.url"),
            (("couchdb", "timeout"), 0, ValueError, "couchdb\\.timeout"),
            (("log", "level"), "LOUD", ValueError, "log\\.level"),
            (("log", "keep"), -1, ValueError, "log\\.keep"),
        ]
        for (section, key), value, error, pattern in cases:
            with self.subTest(key=f"{section}.{key}"):
                raw = _base_raw_config()
                raw[section][key] = value
                with self.assertRaisesRegex(error, pattern):
                    parse_config_dict(raw)

    def test_zero_default_weights_rejected(self) -> None:
        raw = _base_raw_config()
        raw["search"]["weights"] = {"quality": 0, "popularity": 0, "maintenance": 0}
        with self.assertRaisesRegex(ValueError, "search\\.weights"):
            parse_config_dict(raw)


class TestConfigFiles(unittest.TestCase):
    def test_override_merges_with_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            default_path = Path(tmp) / "default.yml"
            default_path.write_text(_BASE_YAML, encoding="utf-8")
            override_path = Path(tmp) / "override.yml"
            override_path.write_text("log:\n  level: DEBUG\nsearch:\n  size: 10\n", encoding="utf-8")

            cfg = load_config_with_defaults(override_path, default_path=default_path)

        self.assertEqual(cfg.runtime.level, "DEBUG")
        self.assertEqual(cfg.search.size, 10)
        self.assertEqual(cfg.search.score_effect, 15.3)
        self.assertEqual(cfg.elasticsearch.url, "http://localhost:9200")

    def test_shipped_default_config_is_valid(self) -> None:
        cfg = load_config(REPO_ROOT / "config" / "default.yml")

        self.assertEqual(cfg.search.size, 25)
        self.assertEqual(cfg.search.max_size, 250)
        self.assertEqual(cfg.search.suggestions_max_size, 100)
        self.assertEqual(cfg.search.weights, Weights(1.95, 3.3, 2.05))

    def test_non_mapping_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.yml"
            path.write_text("- a\n- b\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_config(path)


if __name__ == "__main__":
    unittest.main()
