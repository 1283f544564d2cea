import copy
import os

import structlog
import yaml

from .constants import CONFIG_FILE, DEFAULT_SETTINGS

logger = structlog.get_logger('settings')

# Environment variable -> (section, key, cast)
ENV_OVERRIDES = {
    "DATABASE_URL": ("database", "url", str),
    "REDIS_URL": ("redis", "url", str),
    "JWT_SECRET": ("auth", "jwt_secret", str),
    "JWT_EXPIRES_MINUTES": ("auth", "jwt_expires_minutes", int),
    "LOG_LEVEL": ("logging", "level", str),
    "LOG_FORMAT": ("logging", "format", str),
    "CACHE_INVALIDATE_SEARCH_ON_WRITE": (
        "cache",
        "invalidate_search_on_write",
        lambda v: str(v).lower() in ("1", "true", "yes", "on"),
    ),
}

# Cache variable
_cached_settings = None


def _deep_merge(base, overrides):
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_settings(force=False, config_file=None):
    """
    Load settings from the YAML file merged over the defaults,
    then apply environment overrides.
    """
    global _cached_settings

    if _cached_settings and not force:
        return _cached_settings

    settings = copy.deepcopy(DEFAULT_SETTINGS)
    config_file = config_file or CONFIG_FILE

    if os.path.exists(config_file):
        logger.debug(f"Reading configuration file: {config_file}")
        with open(config_file, "r") as yaml_file:
            file_settings = yaml.safe_load(yaml_file) or {}
        _deep_merge(settings, file_settings)

    for env_name, (section, key, cast) in ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw is None or raw == "":
            continue
        try:
            settings[section][key] = cast(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid value for {env_name}")

    _cached_settings = settings
    return settings
