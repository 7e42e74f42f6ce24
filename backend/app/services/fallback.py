"""Ordered fallback over several data sources."""

from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Iterable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Hit(Generic[T]):
    value: T
    source: str


def is_present(value) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, tuple, list, dict)):
        return len(value) > 0
    return True


def first_present(*candidates: T, default: T = None) -> T:
    """Return the first candidate that is neither ``None`` nor empty."""
    return next((c for c in candidates if is_present(c)), default)


class FallbackChain(Generic[T]):
    """Run named async strategies in order; the first non-empty result wins.

    Strategies after the winning one are never called.
    """

    def __init__(self, strategies: Iterable[tuple[str, Callable[..., Awaitable[T | None]]]]):
        self._strategies = list(strategies)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._strategies]

    async def first(self, *args, **kwargs) -> Hit[T] | None:
        for name, strategy in self._strategies:
            value = await strategy(*args, **kwargs)
            if is_present(value):
                return Hit(value, name)
        return None
