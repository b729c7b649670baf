"""
Reads and validates scan settings.

Settings come from three places, each overriding the one before it: the
defaults in `DEFAULT_CONFIG`, an optional JSON config file, and command line
flags. A config file looks like:

    {
        "on_error": "skip",
        "workers": 4,
        "color": "never",
        "log_file": "/var/log/file-dupes/last-run.log",
        "verbose": false
    }
"""

import json
from pathlib import Path
from typing import Any, Optional

from file_dupes.errors import UsageError

ON_ERROR_CHOICES = ("abort", "skip")
COLOR_CHOICES = ("auto", "always", "never")

DEFAULT_CONFIG = {
    "on_error": "abort",
    "workers": 1,
    "color": "auto",
    "log_file": None,
    "verbose": False
}

def read_config(config_file: Path) -> dict:
    """
    Reads and validates the given `config_file` path. Returns a dict holding
    only the keys the file sets.

    Raises:
        FileNotFoundError:
          Nothing exists at `config_file`.
        UsageError:
          The file isn't valid JSON, isn't a JSON object, or has an unknown
          key or bad value.
    """
    config_file = Path(config_file)
    if not config_file.is_file():
        raise FileNotFoundError(f"Config file specified doesn't exist: {config_file}")

    with config_file.open(mode="rt", encoding="utf8") as f:
        try:
            config = json.load(f)
        except json.JSONDecodeError as err:
            raise UsageError(f"Config file isn't valid JSON: {err}") from err

    if not isinstance(config, dict):
        raise UsageError("Config file must contain a JSON object.")

    unknown = set(config) - set(DEFAULT_CONFIG)
    if unknown:
        raise UsageError(f"Unknown keys in config file: {', '.join(sorted(unknown))}")

    return validate_config(config)

def validate_config(config: dict) -> dict:
    """Checks the type and range of every setting in `config`."""
    if "on_error" in config and config["on_error"] not in ON_ERROR_CHOICES:
        raise UsageError(f"on_error must be one of {', '.join(ON_ERROR_CHOICES)}.")

    if "color" in config and config["color"] not in COLOR_CHOICES:
        raise UsageError(f"color must be one of {', '.join(COLOR_CHOICES)}.")

    if "workers" in config:
        workers = config["workers"]
        # bool is an int subclass, but `true` is not a worker count.
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise UsageError("workers must be a positive integer.")

    if "verbose" in config and not isinstance(config["verbose"], bool):
        raise UsageError("verbose must be true or false.")

    if config.get("log_file") is not None:
        log_file = config["log_file"]
        if not isinstance(log_file, (str, Path)) or not str(log_file):
            raise UsageError("log_file must be a path.")
        log_file = Path(log_file)
        if not log_file.parent.is_dir():
            raise UsageError(f"Folder for log_file doesn't exist: {log_file.parent}")
        config = dict(config, log_file=log_file)

    return config

def build_config(config_file: Optional[Path]=None, **overrides: Any) -> dict:
    """
    Merges the defaults, `config_file` (if given) and any `overrides` that
    aren't `None`.
    """
    config = dict(DEFAULT_CONFIG)
    if config_file is not None:
        config.update(read_config(config_file))

    flags = {key: value for key, value in overrides.items() if value is not None}
    unknown = set(flags) - set(DEFAULT_CONFIG)
    if unknown:
        raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")
    config.update(validate_config(flags))
    return config
