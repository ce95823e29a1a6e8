"""YAML configuration loading for mailwright.

The packaged ``mailwright.conf.yml`` always provides the defaults. A user
file is then deep-merged on top of it, looked up in this order:

1. the ``filename`` / ``path`` passed explicitly,
2. the ``MAILWRIGHT_CONFIG`` environment variable,
3. ``./mailwright.conf.yml``,
4. ``~/.config/mailwright/mailwright.conf.yml``.

String values support ``${VAR}`` and ``${VAR:-default}`` substitution.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from box import Box

from mailwright.config.exceptions import ConfigFileNotFoundError, ConfigFormatError

log = logging.getLogger(__name__)

CONFIG_FILENAME = "mailwright.conf.yml"
CONFIG_ENV_VAR = "MAILWRIGHT_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / CONFIG_FILENAME

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([a-zA-Z_][a-zA-Z0-9_]*)(?::-([^}]*))?\}")

_config_cache: Box | None = None


def _expand_env_vars(value: str, source: str) -> str:
    """Expand environment variables in a string value.

    Args:
        value: String potentially containing ``${VAR}`` patterns.
        source: Source file for error messages.

    Returns:
        String with environment variables expanded.

    Raises:
        ConfigFormatError: If a required variable is not set.

    Examples:
        >>> os.environ["MW_DOC_HOST"] = "mail.example.com"
        >>> _expand_env_vars("${MW_DOC_HOST}", "doc")
        'mail.example.com'
        >>> _expand_env_vars("${MW_MISSING:-25}", "doc")
        '25'
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default_value = match.group(2)

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if default_value is not None:
            return default_value
        raise ConfigFormatError(source, f"environment variable '{var_name}' is not set")

    return _ENV_VAR_PATTERN.sub(replacer, value)


def _expand_env_vars_recursive(data: Any, source: str) -> Any:
    """Apply ``_expand_env_vars`` to every string in dicts and lists."""
    if isinstance(data, dict):
        return {k: _expand_env_vars_recursive(v, source) for k, v in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars_recursive(item, source) for item in data]
    if isinstance(data, str):
        return _expand_env_vars(data, source)
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated recursively with ``override``.

    Examples:
        >>> _deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}})
        {'a': {'b': 1, 'c': 3}}
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML file into a plain dict."""
    try:
        with path.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ConfigFormatError(str(path), str(exc)) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFormatError(str(path), "top-level element must be a mapping")
    return _expand_env_vars_recursive(data, str(path))


def _discover_user_config(filename: str) -> Path | None:
    """Return the first user configuration file found, if any."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path).expanduser()
        if not candidate.is_file():
            raise ConfigFileNotFoundError(str(candidate))
        return candidate

    for directory in (Path.cwd(), Path.home() / ".config" / "mailwright"):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


def load_from_file(path: str | Path) -> Box:
    """Load a single YAML file without defaults or discovery.

    Args:
        path: File to read.

    Returns:
        The file content as a ``Box``.

    Raises:
        ConfigFileNotFoundError: If the file does not exist.
        ConfigFormatError: If the file is not valid YAML.
    """
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise ConfigFileNotFoundError(str(file_path))
    return Box(_read_yaml(file_path))


def load_config(filename: str = CONFIG_FILENAME, path: str | Path | None = None) -> Box:
    """Load the packaged defaults merged with the user configuration.

    The result is cached and returned by later ``get_config()`` calls.

    Args:
        filename: Name looked up during discovery.
        path: Explicit file to merge instead of discovering one.

    Returns:
        Merged configuration.

    Raises:
        ConfigFileNotFoundError: If ``path`` or ``MAILWRIGHT_CONFIG`` points to a missing file.
        ConfigFormatError: If a file is not valid YAML.
    """
    global _config_cache  # pylint: disable=global-statement

    data = _read_yaml(DEFAULT_CONFIG_PATH)

    if path is not None:
        user_path: Path | None = Path(path).expanduser()
        if not user_path.is_file():
            raise ConfigFileNotFoundError(str(user_path))
    else:
        user_path = _discover_user_config(filename)

    if user_path is not None:
        log.debug("Loading configuration from %s", user_path)
        data = _deep_merge(data, _read_yaml(user_path))

    _config_cache = Box(data)
    return _config_cache


def get_config() -> Box:
    """Return the cached configuration, loading it on first use."""
    if _config_cache is None:
        return load_config()
    return _config_cache


def clear_config() -> None:
    """Drop the cached configuration."""
    global _config_cache  # pylint: disable=global-statement
    _config_cache = None


__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG_PATH",
    "clear_config",
    "get_config",
    "load_config",
    "load_from_file",
]
