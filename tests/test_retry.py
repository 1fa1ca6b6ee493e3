import asyncio
import itertools

import pytest

from atcoder_scraper.retry import linear, retry


@pytest.fixture
def sleeps(mocker):
    waits: list[float] = []

    async def fake_sleep(seconds, *args, **kwargs):
        waits.append(seconds)

    mocker.patch("backoff._async.asyncio.sleep", new=fake_sleep)
    return waits


def flaky(failures: int, value="ok"):
    calls = {"n": 0}

    async def op():
        calls["n"] += 1
        if calls["n"] <= failures:
            raise ConnectionError(f"boom {calls['n']}")
        return value

    return op, calls


def test_linear_wait_generator():
    gen = linear(base=1.5)
    gen.send(None)
    assert list(itertools.islice(gen, 4)) == [1.5, 3.0, 4.5, 6.0]


def test_retry_waits_grow_linearly(sleeps):
    op, calls = flaky(2)
    seen = []

    result = asyncio.run(
        retry(
            op,
            max_attempts=3,
            base_delay=1.0,
            on_retry=lambda n, e: seen.append((n, str(e))),
        )
    )

    assert result == "ok"
    assert calls["n"] == 3
    assert sleeps == [1.0, 2.0]
    assert seen == [(1, "boom 1"), (2, "boom 2")]


def test_retry_succeeds_first_time_without_waiting(sleeps):
    op, calls = flaky(0, value=42)
    observer_calls = []

    assert asyncio.run(
        retry(op, max_attempts=3, base_delay=1.0, on_retry=lambda *a: observer_calls.append(a))
    ) == 42
    assert calls["n"] == 1
    assert sleeps == []
    assert observer_calls == []


def test_retry_reraises_last_error(sleeps):
    op, calls = flaky(10)
    seen = []

    with pytest.raises(ConnectionError, match="boom 3"):
        asyncio.run(
            retry(op, max_attempts=3, base_delay=2.0, on_retry=lambda n, e: seen.append(n))
        )

    assert calls["n"] == 3
    assert sleeps == [2.0, 4.0]
    # the observer is not told about the final failure
    assert seen == [1, 2]


def test_retry_single_attempt(sleeps):
    op, calls = flaky(1)

    with pytest.raises(ConnectionError):
        asyncio.run(retry(op, max_attempts=1, base_delay=1.0))

    assert calls["n"] == 1
    assert sleeps == []
