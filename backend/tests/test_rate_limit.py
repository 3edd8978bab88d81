from recipe_scout.core.rate_limit import SlidingWindowLimiter


def test_allows_up_to_max_then_blocks(clock):
    limiter = SlidingWindowLimiter(max_requests=3, window_s=60, clock=clock)
    assert [limiter.hit("1.2.3.4") for _ in range(4)] == [True, True, True, False]
    # other clients have their own window
    assert limiter.hit("5.6.7.8") is True


def test_window_slides(clock):
    limiter = SlidingWindowLimiter(max_requests=2, window_s=60, clock=clock)
    limiter.hit("ip")
    clock.advance(30)
    limiter.hit("ip")
    assert limiter.hit("ip") is False
    clock.advance(31)            # first hit left the window
    assert limiter.hit("ip") is True
    assert limiter.hit("ip") is False


def test_prune_drops_idle_clients(clock):
    limiter = SlidingWindowLimiter(max_requests=2, window_s=60, clock=clock)
    limiter.hit("a")
    limiter.hit("b")
    clock.advance(61)
    limiter.prune()
    assert len(limiter) == 0
