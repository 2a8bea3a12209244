import pytest

from JsonShare.core.errors import BotDetected, RateLimited
from JsonShare.core.guards import BotFilter, RateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_rate_limiter_fixed_window():
    clock = FakeClock()
    limiter = RateLimiter(limit=2, window_seconds=60, clock=clock)
    limiter.hit("1.2.3.4")
    limiter.hit("1.2.3.4")
    with pytest.raises(RateLimited) as excinfo:
        limiter.hit("1.2.3.4")
    assert excinfo.value.retry_after == 60
    assert excinfo.value.headers == {"Retry-After": "60"}

    # other clients have their own budget
    limiter.hit("5.6.7.8")

    clock.now += 45
    with pytest.raises(RateLimited) as excinfo:
        limiter.hit("1.2.3.4")
    assert excinfo.value.retry_after == 15

    clock.now += 15
    limiter.hit("1.2.3.4")


def test_rate_limiter_disabled():
    limiter = RateLimiter(limit=0, window_seconds=60)
    assert not limiter.enabled
    for _ in range(500):
        limiter.hit("1.2.3.4")


def test_rate_limiter_reset():
    limiter = RateLimiter(limit=1, window_seconds=60)
    limiter.hit("a")
    limiter.reset()
    limiter.hit("a")


@pytest.mark.parametrize(
    "agent",
    [
        "Googlebot/2.1 (+http://www.google.com/bot.html)",
        "Baiduspider",
        "Mozilla/5.0 (compatible; Yahoo! Slurp)",
        "SiteCRAWLER 1.0",
        "my-scraper",
    ],
)
def test_bot_filter_rejects_markers(agent):
    bots = BotFilter(["bot", "spider", "crawl", "slurp", "scrape"])
    assert bots.is_bot(agent)
    with pytest.raises(BotDetected):
        bots.check(agent)


@pytest.mark.parametrize(
    "agent",
    [None, "", "Mozilla/5.0 (X11; Linux x86_64) Firefox/128.0", "curl/8.5.0"],
)
def test_bot_filter_allows_browsers(agent):
    bots = BotFilter(["bot", "spider", "crawl", "slurp", "scrape"])
    assert not bots.is_bot(agent)
    bots.check(agent)


def test_rate_limiter_sweeps_idle_clients_once_per_window():
    clock = FakeClock()
    limiter = RateLimiter(limit=5, window_seconds=60, clock=clock)
    for i in range(10):
        limiter.hit(f"10.0.0.{i}")
    assert limiter.tracked_clients == 10

    clock.now += 30
    limiter.hit("10.0.0.99")
    assert limiter.tracked_clients == 11

    clock.now += 30
    limiter.hit("10.0.0.99")
    # only the client whose window is still open survives the sweep
    assert limiter.tracked_clients == 1


def test_rate_limiter_expired_window_restarts_without_sweep():
    clock = FakeClock()
    limiter = RateLimiter(limit=1, window_seconds=60, clock=clock)
    clock.now += 50
    limiter.hit("a")
    clock.now += 20
    # 70s after the last sweep, 20s into a's window: sweep runs, a stays
    with pytest.raises(RateLimited):
        limiter.hit("a")
    clock.now += 40
    limiter.hit("a")
