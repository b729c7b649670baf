import json
import tempfile
import unittest
from pathlib import Path

from file_dupes.config import DEFAULT_CONFIG, build_config, read_config
from file_dupes.errors import UsageError


class TestConfig(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def write_config(self, contents) -> Path:
        path = self.root / "config.json"
        path.write_text(contents if isinstance(contents, str) else json.dumps(contents))
        return path

    def test_read_config(self):
        log_file = self.root / "run.log"
        config = read_config(self.write_config({"on_error": "skip", "workers": 3, "log_file": str(log_file)}))
        self.assertEqual(config, {"on_error": "skip", "workers": 3, "log_file": log_file})

        with self.assertRaises(FileNotFoundError):
            read_config(self.root / "missing.json")

    def test_read_config_rejects_bad_files(self):
        bad_configs = [
            "{not json",
            [1, 2],
            {"colour": "never"},
            {"on_error": "retry"},
            {"color": "sometimes"},
            {"workers": 0},
            {"workers": True},
            {"workers": "4"},
            {"verbose": "yes"},
            {"log_file": str(self.root / "no" / "such" / "dir.log")}
        ]
        for bad in bad_configs:
            with self.subTest(config=bad):
                with self.assertRaises(UsageError):
                    read_config(self.write_config(bad))

    def test_usage_error_is_value_error(self):
        with self.assertRaises(ValueError):
            read_config(self.write_config({"workers": -3}))

    def test_build_config_precedence(self):
        self.assertEqual(build_config(), DEFAULT_CONFIG)

        config_file = self.write_config({"on_error": "skip", "workers": 2})
        config = build_config(config_file)
        self.assertEqual(config["on_error"], "skip")
        self.assertEqual(config["workers"], 2)
        self.assertEqual(config["color"], "auto")

        # Flags win over the config file; `None` means "not given".
        config = build_config(config_file, workers=8, on_error=None)
        self.assertEqual(config["workers"], 8)
        self.assertEqual(config["on_error"], "skip")

        with self.assertRaises(UsageError):
            build_config(workers=-1)

        with self.assertRaises(TypeError):
            build_config(threads=2)

if __name__ == "__main__":
    unittest.main()
