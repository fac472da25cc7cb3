"""Tests for the wrapping counter window."""

from meteolink.sensor.window import WrappingCounterWindow
from tests.fakes import HOUR_BASE_MS

HOUR = 3600


def make_window(clock) -> WrappingCounterWindow:
    return WrappingCounterWindow(HOUR, clock)


def put_series(window, clock, values, spacing=1.0):
    for value in values:
        window.put(value)
        clock.advance(spacing)


class TestTotal:
    def test_empty_window_is_zero(self, clock):
        assert make_window(clock).total() == 0

    def test_single_sample_is_zero(self, clock):
        window = make_window(clock)
        window.put(42)
        assert window.total() == 0

    def test_increase_without_wrap(self, clock):
        window = make_window(clock)
        put_series(window, clock, [10, 250])
        assert window.total() == 240

    def test_wraparound(self, clock):
        window = make_window(clock)
        put_series(window, clock, [250, 10])
        assert window.total() == 16

    def test_result_is_earliest_against_latest_not_a_sum(self, clock):
        window = make_window(clock)
        put_series(window, clock, [250, 10, 20])
        # 256 - 250 + 20, the intermediate sample does not add up
        assert window.total() == 26

    def test_intermediate_peak_is_overwritten(self, clock):
        window = make_window(clock)
        put_series(window, clock, [10, 250, 20])
        assert window.total() == 10

    def test_unchanged_counter(self, clock):
        window = make_window(clock)
        put_series(window, clock, [77, 77, 77])
        assert window.total() == 0

    def test_timestamp_collision_keeps_latest(self, clock):
        window = make_window(clock)
        window.put(10)
        window.put(50)
        assert len(window) == 1
        clock.advance(1)
        window.put(60)
        assert window.total() == 10


class TestEviction:
    def test_expired_samples_do_not_contribute(self, clock):
        window = make_window(clock)
        window.put(5)
        clock.advance(1800)
        window.put(15)
        clock.advance(1801)
        window.put(25)
        assert window.total() == 10
        assert len(window) == 2

    def test_all_but_one_expired(self, clock):
        window = make_window(clock)
        window.put(10)
        clock.advance(HOUR + 1)
        window.put(30)
        assert window.total() == 0
        assert len(window) == 1

    def test_sample_exactly_one_period_old_is_kept(self, clock):
        window = make_window(clock)
        window.put(10)
        clock.advance(HOUR)
        window.put(20)
        assert window.total() == 10

    def test_put_never_evicts(self, clock):
        window = make_window(clock)
        window.put(1)
        clock.advance(2 * HOUR)
        window.put(2)
        assert len(window) == 2
        window.total()
        assert len(window) == 1

    def test_eviction_regardless_of_insertion_order(self, clock):
        window = make_window(clock)
        clock.set_ms(HOUR_BASE_MS + 2_000_000)
        window.put(40)
        clock.set_ms(HOUR_BASE_MS + 100_000)
        window.put(30)
        clock.set_ms(HOUR_BASE_MS + 50_000)
        window.put(200)

        clock.set_ms(HOUR_BASE_MS + 3_700_000)
        assert window.total() == 10
        assert len(window) == 2
