"""
Configuration loader for mediaplayerctl.

Loads a single JSON config file.  Search order:
  1. $MEDIAPLAYERCTL_CONFIG                 (explicit override)
  2. ~/.config/mediaplayerctl/config.json   (per user)
  3. /etc/mediaplayerctl/config.json        (system wide)

Nothing is required: with no file at all the built-in defaults apply.
The tool only ever reads these files.

Usage:
    from .config import cfg

    level   = cfg("log", "level", default="WARNING")
    timeout = cfg("dbus", "timeout")
"""

import json
import logging
import os

logger = logging.getLogger(__name__)

_config: dict | None = None

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _search_paths() -> list[str]:
    paths = []
    override = os.environ.get("MEDIAPLAYERCTL_CONFIG")
    if override:
        paths.append(override)
    paths.append(os.path.expanduser("~/.config/mediaplayerctl/config.json"))
    paths.append("/etc/mediaplayerctl/config.json")
    return paths


def _validate(config: dict, path: str) -> None:
    """Warn about suspicious config values."""
    for section in ("log", "dbus"):
        if section in config and not isinstance(config[section], dict):
            logger.warning("Config %s: '%s' must be an object, ignoring it", path, section)
    log = config.get("log")
    if not isinstance(log, dict):
        log = {}
    level = log.get("level")
    if level is not None and str(level).upper() not in LOG_LEVELS:
        logger.warning("Config %s: unknown log.level '%s'", path, level)
    bus = config.get("dbus")
    if not isinstance(bus, dict):
        bus = {}
    timeout = bus.get("timeout")
    if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
        logger.warning("Config %s: dbus.timeout must be a positive number, got %r", path, timeout)


def load_config() -> dict:
    """Load config from the first JSON file found. Cached after first call."""
    global _config
    if _config is not None:
        return _config

    for path in _search_paths():
        try:
            with open(path, encoding="utf-8") as f:
                loaded = json.load(f)
        except FileNotFoundError:
            continue
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("Invalid JSON in %s: %s", path, e)
            continue
        except OSError as e:
            logger.error("Cannot read config %s: %s", path, e)
            continue
        if not isinstance(loaded, dict):
            logger.error("Config %s: top level must be an object", path)
            continue
        _config = loaded
        logger.debug("Config loaded from %s", path)
        _validate(_config, path)
        return _config

    _config = {}
    return _config


def cfg(section: str, key: str | None = None, *, default=None):
    """Read a config value.

    cfg("log")                        → config["log"]
    cfg("dbus", "timeout")            → config["dbus"]["timeout"]
    cfg("log", "level", default="WARNING")  → config["log"]["level"] or "WARNING"
    """
    config = load_config()
    val = config.get(section)
    if key is None:
        return val if val is not None else default
    if isinstance(val, dict):
        return val.get(key, default)
    return default


def reload_config():
    """Force re-read from disk (for testing)."""
    global _config
    _config = None
    return load_config()
