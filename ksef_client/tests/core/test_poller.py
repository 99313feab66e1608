from collections.abc import Callable

import pytest

from ksef_client.core.poller import NOT_READY, Fatal, Ready, poll_until
from ksef_client.exceptions import (
    AuthenticationError,
    NetworkError,
    NotFoundError,
    PollTimeoutError,
    RateLimitError,
    ServerError,
)


def scripted(*outcomes: object) -> Callable:
    """Action returning (or raising) the given outcomes in order."""
    remaining = list(outcomes)

    async def action() -> object:
        action.calls += 1
        outcome = remaining.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    action.calls = 0
    return action


@pytest.mark.asyncio
async def test_returns_value_on_first_ready(recording_sleep: Callable) -> None:
    action = scripted(Ready("done"))

    result = await poll_until(action, max_attempts=5, interval=2.0, sleep=recording_sleep)

    assert result == "done"
    assert action.calls == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_waits_fixed_interval_between_attempts(recording_sleep: Callable) -> None:
    action = scripted(NOT_READY, NOT_READY, Ready(200))

    result = await poll_until(action, max_attempts=10, interval=1.5, sleep=recording_sleep)

    assert result == 200
    assert action.calls == 3
    assert recording_sleep.delays == [1.5, 1.5]


@pytest.mark.asyncio
async def test_fatal_stops_without_waiting(recording_sleep: Callable) -> None:
    error = AuthenticationError("Invalid token", code=400)
    action = scripted(Fatal(error))

    with pytest.raises(AuthenticationError) as exc_info:
        await poll_until(action, max_attempts=10, interval=1.0, sleep=recording_sleep)

    assert exc_info.value is error
    assert action.calls == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_times_out_after_exactly_max_attempts(recording_sleep: Callable) -> None:
    action = scripted(*[NOT_READY] * 4)

    with pytest.raises(PollTimeoutError) as exc_info:
        await poll_until(
            action, max_attempts=4, interval=0.5, sleep=recording_sleep, operation="invoice status"
        )

    assert action.calls == 4
    assert recording_sleep.delays == [0.5, 0.5, 0.5]
    assert exc_info.value.attempts == 4
    assert "invoice status did not complete after 4 attempts" in str(exc_info.value)


@pytest.mark.asyncio
async def test_transient_errors_consume_attempts(recording_sleep: Callable) -> None:
    action = scripted(NetworkError("reset"), ServerError("busy", code=503), Ready("ok"))

    result = await poll_until(action, max_attempts=3, interval=1.0, sleep=recording_sleep)

    assert result == "ok"
    assert action.calls == 3
    assert recording_sleep.delays == [1.0, 1.0]


@pytest.mark.asyncio
async def test_rate_limit_is_transient_and_honours_retry_after(recording_sleep: Callable) -> None:
    action = scripted(
        RateLimitError("slow down", retry_after=5),
        RateLimitError("slow down"),
        Ready("ok"),
    )

    result = await poll_until(action, max_attempts=3, interval=2.0, sleep=recording_sleep)

    assert result == "ok"
    assert recording_sleep.delays == [5.0, 2.0]


@pytest.mark.asyncio
async def test_short_retry_after_keeps_interval(recording_sleep: Callable) -> None:
    action = scripted(RateLimitError("slow down", retry_after=1), Ready("ok"))

    await poll_until(action, max_attempts=2, interval=2.0, sleep=recording_sleep)

    assert recording_sleep.delays == [2.0]


@pytest.mark.asyncio
async def test_timeout_chains_last_transient_error(recording_sleep: Callable) -> None:
    network_error = NetworkError("unreachable")
    action = scripted(NOT_READY, network_error)

    with pytest.raises(PollTimeoutError) as exc_info:
        await poll_until(action, max_attempts=2, interval=0, sleep=recording_sleep)

    assert exc_info.value.__cause__ is network_error


@pytest.mark.asyncio
async def test_non_transient_error_propagates_immediately(recording_sleep: Callable) -> None:
    action = scripted(NotFoundError("gone"), Ready("never"))

    with pytest.raises(NotFoundError):
        await poll_until(action, max_attempts=5, interval=1.0, sleep=recording_sleep)

    assert action.calls == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_custom_retry_on_extends_transient_errors(recording_sleep: Callable) -> None:
    action = scripted(NotFoundError("not registered yet"), Ready("registered"))

    result = await poll_until(
        action,
        max_attempts=3,
        interval=1.0,
        retry_on=(NotFoundError, NetworkError),
        sleep=recording_sleep,
    )

    assert result == "registered"
    assert recording_sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_single_attempt_never_sleeps(recording_sleep: Callable) -> None:
    action = scripted(NOT_READY)

    with pytest.raises(PollTimeoutError):
        await poll_until(action, max_attempts=1, interval=3.0, sleep=recording_sleep)

    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_rejects_non_result_values(recording_sleep: Callable) -> None:
    action = scripted("done")

    with pytest.raises(TypeError):
        await poll_until(action, max_attempts=2, interval=0, sleep=recording_sleep)


@pytest.mark.asyncio
@pytest.mark.parametrize(("max_attempts", "interval"), [(0, 1.0), (3, -1.0)])
async def test_rejects_invalid_bounds(max_attempts: int, interval: float) -> None:
    action = scripted(Ready(1))

    with pytest.raises(ValueError):
        await poll_until(action, max_attempts=max_attempts, interval=interval)

    assert action.calls == 0
