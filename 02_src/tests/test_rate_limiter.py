"""Tests for RateLimiter."""

from birdbot.ratelimit import RateLimiter


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestRateLimiter:
    """Tests for the fixed-window throttle."""

    def test_fifteen_requests_allowed(self):
        """Test that exactly 15 requests in a window pass."""
        limiter = RateLimiter(clock=FakeClock())
        results = [limiter.is_limited(1) for _ in range(15)]
        assert results == [False] * 15

    def test_sixteenth_request_limited(self):
        """Test that the 16th request in the same window is limited."""
        limiter = RateLimiter(clock=FakeClock())
        for _ in range(15):
            limiter.is_limited(1)
        assert limiter.is_limited(1) is True
        assert limiter.is_limited(1) is True

    def test_chats_are_independent(self):
        """Test that one chat's usage never limits another."""
        limiter = RateLimiter(clock=FakeClock())
        for _ in range(20):
            limiter.is_limited(1)
        assert limiter.is_limited(2) is False
        assert limiter.window(2).count == 1

    def test_window_expiry_starts_fresh(self):
        """Test that the first request after expiry resets the count to 1."""
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        for _ in range(16):
            limiter.is_limited(1)

        clock.now += 61
        assert limiter.is_limited(1) is False
        assert limiter.window(1).count == 1

    def test_window_not_reset_before_expiry(self):
        """Test that the count does not partially reset inside a window."""
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        for _ in range(15):
            limiter.is_limited(1)

        # Exactly at the reset instant the window is still open
        clock.now += 60
        assert limiter.is_limited(1) is True

    def test_custom_budget(self):
        """Test a smaller budget and window."""
        clock = FakeClock()
        limiter = RateLimiter(window_seconds=10, max_requests=2, clock=clock)
        assert limiter.is_limited(5) is False
        assert limiter.is_limited(5) is False
        assert limiter.is_limited(5) is True

    def test_reset_clears_windows(self):
        """Test that reset forgets all chats."""
        limiter = RateLimiter(clock=FakeClock())
        limiter.is_limited(1)
        limiter.reset()
        assert limiter.window(1) is None
