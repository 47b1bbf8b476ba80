"""Tests for the sliding-window rate limiter"""

from resume_ingest.services.rate_limiter import RateLimiter, client_identifier


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestRateLimiter:

    def setup_method(self):
        self.clock = FakeClock()
        self.limiter = RateLimiter(window_seconds=60, clock=self.clock)

    def test_sixth_request_in_window_is_rejected(self):
        results = [self.limiter.check("1.2.3.4", limit=5) for _ in range(6)]
        assert [r.allowed for r in results] == [True] * 5 + [False]
        assert [r.remaining for r in results[:5]] == [4, 3, 2, 1, 0]
        assert results[5].remaining == 0

    def test_allowed_again_after_window(self):
        for _ in range(5):
            self.limiter.check("1.2.3.4", limit=5)
        assert not self.limiter.check("1.2.3.4", limit=5).allowed

        self.clock.now += 61
        result = self.limiter.check("1.2.3.4", limit=5)
        assert result.allowed
        assert result.remaining == 4

    def test_reset_seconds_counts_down_to_oldest_expiry(self):
        self.limiter.check("client", limit=1)
        self.clock.now += 20
        result = self.limiter.check("client", limit=1)
        assert not result.allowed
        assert result.reset_seconds == 40

    def test_rejected_requests_do_not_extend_the_window(self):
        self.limiter.check("client", limit=1)
        for _ in range(3):
            self.clock.now += 10
            self.limiter.check("client", limit=1)
        self.clock.now += 31
        assert self.limiter.check("client", limit=1).allowed

    def test_clients_are_independent(self):
        for _ in range(5):
            self.limiter.check("a", limit=5)
        assert not self.limiter.check("a", limit=5).allowed
        assert self.limiter.check("b", limit=5).allowed
        assert self.limiter.active_clients == 2

    def test_reset(self):
        self.limiter.check("a", limit=1)
        self.limiter.reset("a")
        assert self.limiter.check("a", limit=1).allowed
        self.limiter.reset()
        assert self.limiter.active_clients == 0


class TestClientIdentifier:

    def test_first_forwarded_hop(self):
        assert client_identifier({"x-forwarded-for": "10.0.0.1, 172.16.0.1"}) == "10.0.0.1"

    def test_real_ip_fallback(self):
        assert client_identifier({"x-real-ip": "10.0.0.2"}) == "10.0.0.2"

    def test_unknown_bucket(self):
        assert client_identifier({}) == "unknown"
