from security.rate_limiter import RateLimiter


def test_allows_up_to_limit():
    limiter = RateLimiter(max_calls=2, window=60)
    assert limiter.allow(1, now=0)
    assert limiter.allow(1, now=1)
    assert not limiter.allow(1, now=2)


def test_users_are_independent():
    limiter = RateLimiter(max_calls=1, window=60)
    assert limiter.allow(1, now=0)
    assert limiter.allow(2, now=0)


def test_window_slides():
    limiter = RateLimiter(max_calls=1, window=10)
    assert limiter.allow(1, now=0)
    assert not limiter.allow(1, now=5)
    assert limiter.allow(1, now=11)


def test_reset():
    limiter = RateLimiter(max_calls=1, window=60)
    limiter.allow(1, now=0)
    limiter.reset()
    assert limiter.allow(1, now=1)
