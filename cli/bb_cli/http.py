from __future__ import annotations

from bitbucket_client import BitbucketClient
from bitbucket_client.config_types import ClientConfig

from .config import ConfigError, Profile, active_profile, load_config
from .version import user_agent


def profile_from_config(profile: str | None) -> Profile:
    cfg = load_config()
    try:
        p, _ = active_profile(cfg, profile)
    except ConfigError as e:
        raise ConfigError(f"resolve profile: {e}") from e
    if not p.token.strip():
        raise ConfigError("profile has no token configured")
    return p


def make_client(profile: str | None) -> BitbucketClient:
    p = profile_from_config(profile)
    return BitbucketClient(
        ClientConfig(
            base_url=p.base_url,
            token=p.token,
            username=p.username or None,
            user_agent=user_agent(),
        )
    )
