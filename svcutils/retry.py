'''
**svcutils.retry**
---------------

Retry combinators for fallible operations. The async `retry` re-invokes a
producer (a callable returning a *fresh* awaitable every call) until it
succeeds or the attempts run out, sleeping a uniformly random delay between
attempts. `retry_sync` is the blocking twin for call sites without an event
loop, and `retry_policy` is the decorator form.

An ``attempts`` value of ``0`` means retry forever.

Raises
------
The last exception raised by the producer once all attempts are exhausted.
'''

import asyncio
import functools
import logging
import random
import time
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)

RetryOn = tuple[type[BaseException], ...]


def pick_delay_ms(delay_from_ms: int, delay_to_ms: int) -> int:
    '''
    Pick a uniformly random delay in ``[delay_from_ms, delay_to_ms)``.
    An empty or inverted range collapses to ``delay_from_ms``.

    Returns
    -------
    int
    '''
    if delay_to_ms <= delay_from_ms:
        return max(0, delay_from_ms)
    return random.randrange(delay_from_ms, delay_to_ms)


def _next_attempts(attempts: int, exc: BaseException) -> int:
    if attempts != 0:
        attempts -= 1
        logger.warning(f'Retrying after failure ({exc!r}), {attempts} attempts left')
    else:
        logger.warning(f'Retrying after failure ({exc!r}), inf attempts left')
    return attempts


async def retry(
    attempts: int,
    delay_from_ms: int,
    delay_to_ms: int,
    producer: Callable[[], Awaitable[R]],
    *,
    retry_on: RetryOn = (Exception,),
) -> R:
    '''
    Await ``producer()`` until it succeeds.

    Parameters
    ----------
    attempts : int
        Maximum number of invocations, ``0`` for unbounded
    delay_from_ms : int
        Lower bound (inclusive) of the delay between attempts
    delay_to_ms : int
        Upper bound (exclusive) of the delay between attempts
    producer : Callable[[], Awaitable[R]]
        Returns a new pending operation on every call
    retry_on : tuple[type[BaseException], ...], optional
        Exceptions that trigger another attempt, anything else
        propagates immediately, by default (Exception,)

    Returns
    -------
    R
    '''
    while True:
        try:
            return await producer()
        except retry_on as exc:
            if attempts == 1:
                raise
            attempts = _next_attempts(attempts, exc)

        await asyncio.sleep(pick_delay_ms(delay_from_ms, delay_to_ms) / 1000)


def retry_sync(
    attempts: int,
    delay_from_ms: int,
    delay_to_ms: int,
    func: Callable[[], R],
    *,
    retry_on: RetryOn = (Exception,),
) -> R:
    '''
    Blocking variant of `retry`, the delay is a `time.sleep`.
    '''
    while True:
        try:
            return func()
        except retry_on as exc:
            if attempts == 1:
                raise
            attempts = _next_attempts(attempts, exc)

        time.sleep(pick_delay_ms(delay_from_ms, delay_to_ms) / 1000)


class retry_policy:
    '''
    Decorator that retries an async function with `retry`.

    >>> @retry_policy(attempts=3, delay_from_ms=100, delay_to_ms=300)
    ... async def fetch(): ...
    '''

    def __init__(
        self,
        *,
        attempts: int = 3,
        delay_from_ms: int = 250,
        delay_to_ms: int = 500,
        retry_on: RetryOn = (Exception,),
    ) -> None:
        self.attempts: int = attempts
        self.delay_from_ms: int = delay_from_ms
        self.delay_to_ms: int = delay_to_ms
        self.retry_on: RetryOn = retry_on

    async def call_with_retries(
        self,
        func: Callable[P, Awaitable[R]],
        *args: P.args,
        **kwargs: P.kwargs
    ) -> R:
        return await retry(
            self.attempts,
            self.delay_from_ms,
            self.delay_to_ms,
            lambda: func(*args, **kwargs),
            retry_on=self.retry_on,
        )

    def __call__(self, func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            return await self.call_with_retries(func, *args, **kwargs)

        return wrapper
