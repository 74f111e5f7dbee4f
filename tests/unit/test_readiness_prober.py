"""
Unit tests for the bounded-retry readiness prober.
"""
import pytest
from mwstack.MANAGERS.readiness_prober import ReadinessProber
from mwstack.MODELS.readiness_probe import ReadinessProbe
from mwstack.MODELS.errors import ReadinessTimeout


class FlakyCheck:
    """Fails until the given attempt, then passes. succeed_on=None never passes."""

    def __init__(self, succeed_on=None):
        self.succeed_on = succeed_on
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.succeed_on is not None and self.calls >= self.succeed_on


@pytest.mark.parametrize("max_attempts", [1, 3, 10])
def test_always_failing_check_uses_exactly_max_attempts(max_attempts, sleeps):
    check = FlakyCheck()
    probe = ReadinessProbe(name="database", check=check, interval=2.0, max_attempts=max_attempts)

    with pytest.raises(ReadinessTimeout) as exc:
        ReadinessProber(sleep=sleeps.append).wait_until_ready(probe)

    assert check.calls == max_attempts
    assert exc.value.attempts == max_attempts
    assert sleeps == [2.0] * (max_attempts - 1)


@pytest.mark.parametrize("k", [1, 2, 5])
def test_check_passing_on_attempt_k_uses_k_attempts(k, sleeps):
    check = FlakyCheck(succeed_on=k)
    probe = ReadinessProbe(name="database", check=check, interval=0.5, max_attempts=5)

    attempts = ReadinessProber(sleep=sleeps.append).wait_until_ready(probe)

    assert attempts == k
    assert check.calls == k
    assert sleeps == [0.5] * (k - 1)


def test_timeout_message_carries_hint(sleeps):
    probe = ReadinessProbe(name="database", check=lambda: False, max_attempts=2, hint="Check credentials.")
    with pytest.raises(ReadinessTimeout, match="database did not become ready after 2 attempts. Check credentials."):
        ReadinessProber(sleep=sleeps.append).wait_until_ready(probe)


def test_progress_is_reported(sleeps, capsys):
    probe = ReadinessProbe(name="database", check=FlakyCheck(succeed_on=3), max_attempts=5)
    ReadinessProber(sleep=sleeps.append).wait_until_ready(probe)
    out = capsys.readouterr().out
    assert "(1/5)" in out
    assert "(2/5)" in out
    assert "(3/5)" not in out


def test_check_errors_propagate(sleeps):
    def broken():
        raise FileNotFoundError("docker")

    probe = ReadinessProbe(name="database", check=broken, max_attempts=3)
    with pytest.raises(FileNotFoundError):
        ReadinessProber(sleep=sleeps.append).wait_until_ready(probe)
    assert sleeps == []


def test_max_attempts_must_be_positive():
    with pytest.raises(ValueError):
        ReadinessProbe(name="database", check=lambda: True, max_attempts=0)
