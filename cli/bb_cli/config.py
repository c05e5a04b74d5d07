from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from bitbucket_client.config_types import DEFAULT_BASE_URL

APP_NAME = "bb"
CONFIG_FILENAME = "config.toml"
ENV_CONFIG_PATH = "BB_CONFIG_PATH"
DEFAULT_PROFILE = "default"


class ConfigError(Exception):
    """Profile lookup or config file error."""


@dataclass
class Profile:
    base_url: str = DEFAULT_BASE_URL
    token: str = ""
    username: str = ""

    @property
    def auth_mode(self) -> str:
        return "basic" if self.username.strip() else "bearer"


@dataclass
class AppConfig:
    current: str = ""
    profiles: dict[str, Profile] = field(default_factory=dict)


def config_path() -> str:
    explicit = os.getenv(ENV_CONFIG_PATH, "").strip()
    if explicit:
        return explicit
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, mode=0o700, exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    profiles: dict[str, Any] = {}
    for name, p in cfg.profiles.items():
        entry = {"base_url": p.base_url, "token": p.token}
        if p.username:
            entry["username"] = p.username
        profiles[name] = entry
    return {"current": cfg.current, "profiles": profiles}


def from_toml(data: dict[str, Any]) -> AppConfig:
    current = str(data.get("current") or "").strip()
    profiles: dict[str, Profile] = {}
    profiles_raw = data.get("profiles") or {}
    if not isinstance(profiles_raw, dict):
        raise ConfigError("decode config: 'profiles' must be a table")
    for name, v in profiles_raw.items():
        if not isinstance(v, dict):
            continue
        profiles[str(name)] = Profile(
            base_url=str(v.get("base_url") or "").strip(),
            token=str(v.get("token") or ""),
            username=str(v.get("username") or "").strip(),
        )
    return AppConfig(current=current, profiles=profiles)


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return AppConfig()
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"decode config: {e}") from e
    except OSError as e:
        raise ConfigError(f"read config: {e}") from e
    return from_toml(data)


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    # O_CREAT mode does not apply to an existing file
    os.chmod(path, 0o600)
    return path


def set_profile(
        cfg: AppConfig,
        name: str,
        token: str,
        base_url: str | None = None,
        username: str | None = None,
) -> str:
    """Insert or replace a profile and make it current."""
    name = (name or "").strip() or DEFAULT_PROFILE
    cfg.profiles[name] = Profile(
        base_url=(base_url or "").strip() or DEFAULT_BASE_URL,
        token=token,
        username=(username or "").strip(),
    )
    cfg.current = name
    return name


def remove_profile(cfg: AppConfig, name: str | None) -> tuple[str, bool]:
    """Delete a profile (the current one when name is blank).

    Returns the targeted name and whether anything was removed. When the
    current profile goes away the alphabetically first remaining one becomes
    current.
    """
    target = (name or "").strip() or cfg.current
    if not target:
        return "", False
    if target not in cfg.profiles:
        return target, False
    del cfg.profiles[target]
    if cfg.current == target:
        cfg.current = sorted(cfg.profiles)[0] if cfg.profiles else ""
    return target, True


def active_profile(cfg: AppConfig, override: str | None = None) -> tuple[Profile, str]:
    name = (override or "").strip() or cfg.current
    if not name:
        raise ConfigError("no active profile")
    p = cfg.profiles.get(name)
    if p is None:
        raise ConfigError(f'profile "{name}" not found')
    if not p.base_url:
        p = Profile(base_url=DEFAULT_BASE_URL, token=p.token, username=p.username)
    return p, name
