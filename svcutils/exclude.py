import bisect
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

T = TypeVar('T')


def _contains(ordered: list, value: Any) -> bool:
    i = bisect.bisect_left(ordered, value)
    return i < len(ordered) and ordered[i] == value


def exclude(items: list[T], to_remove: Iterable[T]) -> None:
    '''
    Remove, in place, every element of ``items`` that also occurs in
    ``to_remove``. Elements only need to be ordered, not hashable; the
    order of the kept elements is preserved.
    '''
    removed = sorted(to_remove)
    items[:] = [item for item in items if not _contains(removed, item)]


def exclude_by(items: list[T], to_remove: Iterable[T], key: Callable[[T], Any]) -> None:
    '''
    Like `exclude`, comparing ``key(item)`` instead of the items.
    '''
    removed = sorted(key(item) for item in to_remove)
    items[:] = [item for item in items if not _contains(removed, key(item))]
