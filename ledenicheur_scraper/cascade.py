"""
"Try each strategy in order, keep the first non-empty result."

Every field on the site has several ways to be found; the extractors
describe them as ordered lists of small callables and let these helpers
walk the list.
"""

from typing import Awaitable, Callable, Iterable, Optional, TypeVar

T = TypeVar("T")


def first_non_empty(strategies: Iterable[Callable[[], Optional[T]]]
                    ) -> Optional[T]:
    for strategy in strategies:
        result = strategy()
        if result:
            return result
    return None


async def first_result(
        strategies: Iterable[Callable[[], Awaitable[Optional[T]]]]
) -> Optional[T]:
    for strategy in strategies:
        result = await strategy()
        if result:
            return result
    return None
