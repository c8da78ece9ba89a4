from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loginbench.credentials.types import Credential

DEFAULT_START_URL = "https://signin-dev-pfllnx-as.azurewebsites.net"
DEFAULT_LOGINS = 40
DEFAULT_CONCURRENCY = 2
DEFAULT_GRACE_PERIOD = 5.0


@dataclass(frozen=True)
class RunConfig:
    start_url: str | None = DEFAULT_START_URL
    logins: int = DEFAULT_LOGINS
    concurrency: int = DEFAULT_CONCURRENCY
    users: tuple[Credential, ...] = field(default_factory=tuple)
    output: str | None = None
    screenshot: bool = False
    seed: int | None = None
    grace_period: float = DEFAULT_GRACE_PERIOD

    def merged(self, **overrides: object) -> RunConfig:
        """Return a copy with every override that is not None applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def validate(self) -> RunConfig:
        if not self.start_url or not self.start_url.strip():
            raise ConfigError("A start url is required")

        if self.logins < 1:
            raise ConfigError(f"Number of logins must be at least 1, got {self.logins}")

        if self.concurrency < 1:
            raise ConfigError(
                f"Concurrency must be at least 1, got {self.concurrency}"
            )

        if len(self.users) < 1:
            raise ConfigError("Must specify at least 1 user")

        if self.grace_period <= 0:
            raise ConfigError(
                f"Grace period must be positive, got {self.grace_period}"
            )

        return self


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
