from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from loginbench.credentials.types import Credential

if TYPE_CHECKING:
    from .artifacts import ArtifactRecorder


@dataclass(frozen=True)
class SessionTiming:
    start_time: float
    finish_time: float


class SessionError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class SessionDriver(Protocol):
    async def drive(
        self, target_url: str, credential: Credential, artifacts: ArtifactRecorder
    ) -> SessionTiming: ...
