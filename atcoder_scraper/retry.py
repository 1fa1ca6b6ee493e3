from typing import Any, Awaitable, Callable, Generator, TypeVar

import backoff

T = TypeVar("T")

RetryObserver = Callable[[int, Exception], None]


def linear(base: float = 1.0) -> Generator[float | None, Any, None]:
    """Wait generator for ``backoff``: base, 2*base, 3*base, ..."""
    # backoff primes the generator with an initial send(None)
    yield None
    n = 1
    while True:
        yield base * n
        n += 1


async def retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int,
    base_delay: float,
    on_retry: RetryObserver | None = None,
) -> T:
    """Run ``operation`` up to ``max_attempts`` times.

    After failed attempt ``n`` (other than the last) ``on_retry(n, error)`` is
    called and the next attempt starts ``base_delay * n`` seconds later. Once
    attempts are exhausted the last error is re-raised unchanged.
    """

    def _observe(details: dict[str, Any]) -> None:
        if on_retry is not None:
            on_retry(details["tries"], details["exception"])

    @backoff.on_exception(
        linear,
        Exception,
        max_tries=max_attempts,
        jitter=None,
        on_backoff=_observe,
        logger=None,
        base=base_delay,
    )
    async def _attempt() -> T:
        return await operation()

    return await _attempt()
