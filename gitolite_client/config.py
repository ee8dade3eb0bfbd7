import os
from typing import Any

import toml
from pydantic import BaseModel

from gitolite_client.filesystem import (
    DEFAULT_INCLUDES,
    DEFAULT_PATHS,
)

CONFIG_ENV_VAR = "GITOLITE_CONFIG"

_config: dict[str, Any] | None = None


class ConfigNotFound(Exception):
    pass


class GitoliteSettings(BaseModel):
    root: str
    admin_repo_url: str | None = None
    author: str | None = None
    paths: dict[str, str] = DEFAULT_PATHS
    includes: dict[str, str] = DEFAULT_INCLUDES


def get_config() -> dict[str, Any] | None:
    return _config


def init(config: dict[str, Any]) -> dict[str, Any]:
    global _config  # noqa: PLW0603
    _config = config
    return _config


def init_from_toml(configfile: str | None = None) -> dict[str, Any]:
    configfile = configfile or os.environ.get(CONFIG_ENV_VAR)
    if not configfile:
        raise ConfigNotFound(f"no config file given and {CONFIG_ENV_VAR} is not set")
    return init(toml.load(configfile))


def get_gitolite_settings() -> GitoliteSettings:
    config = get_config()
    if not config or "gitolite" not in config:
        raise ConfigNotFound("[gitolite] section not found in config")
    return GitoliteSettings(**config["gitolite"])
