from typing import Any, Iterable, NoReturn, Optional, TypeVar

T = TypeVar("T")


def maybe_head(v: Iterable[T]) -> Optional[T]:
    """First element, or None if exhausted. Consumes it when `v` is an iterator"""
    try:
        return next(iter(v))
    except StopIteration:
        return None


def assert_never(v: Any) -> NoReturn:
    """For exhaustive enumm checks etc"""
    raise TypeError(v)
