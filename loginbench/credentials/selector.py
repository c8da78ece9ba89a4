from __future__ import annotations

import random
from typing import Iterable, Protocol, Sequence, TypeVar

from loginbench.config.types import ConfigError

from .types import Credential

T = TypeVar("T")


class RandomSource(Protocol):
    def choice(self, seq: Sequence[T]) -> T: ...


class EmptyCredentialPoolError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args or ("Must specify at least 1 user",))


class CredentialSelector:
    """
    Picks one credential per task, uniformly at random and with replacement.

    The pool is copied on construction and never mutated afterwards, so a
    single selector can be shared by every task of a run.
    """

    def __init__(
        self, pool: Iterable[Credential], rng: RandomSource | None = None
    ) -> None:
        self._pool: tuple[Credential, ...] = tuple(pool)
        if len(self._pool) < 1:
            raise EmptyCredentialPoolError()
        self._rng: RandomSource = rng if rng is not None else random.Random()

    @classmethod
    def seeded(
        cls, pool: Iterable[Credential], seed: int | None
    ) -> CredentialSelector:
        return cls(pool, random.Random(seed))

    @property
    def pool(self) -> tuple[Credential, ...]:
        return self._pool

    def __len__(self) -> int:
        return len(self._pool)

    def pick(self) -> Credential:
        if len(self._pool) == 1:
            return self._pool[0]
        return self._rng.choice(self._pool)
