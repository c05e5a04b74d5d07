from __future__ import annotations
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://api.bitbucket.org/2.0"
DEFAULT_USER_AGENT = "bb-cli/dev"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    token: str | None = None
    username: str | None = None
    user_agent: str = DEFAULT_USER_AGENT
    timeout_s: float | None = None

    def __post_init__(self) -> None:
        base_url = (self.base_url or "").strip() or DEFAULT_BASE_URL
        object.__setattr__(self, "base_url", base_url.rstrip("/"))
        object.__setattr__(self, "username", (self.username or "").strip() or None)
        object.__setattr__(self, "user_agent", self.user_agent or DEFAULT_USER_AGENT)

    @property
    def auth_mode(self) -> str:
        if not self.token:
            return "none"
        if self.username:
            return "basic"
        return "bearer"
