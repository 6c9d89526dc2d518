import pytest

from primedlistening.utils.duration_policy import hold_duration
from primedlistening.utils.settings import PrimedSettings


def test_ten_chars_uses_per_char_rate(settings):
    assert hold_duration(10, settings) == pytest.approx(0.60)


def test_short_line_uses_floor(settings):
    assert hold_duration(3, settings) == pytest.approx(0.50)


@pytest.mark.parametrize("ppc", [0.01, 0.06, 5.0])
def test_below_min_chars_never_holds(ppc):
    s = PrimedSettings(pause_per_char=ppc, min_pause=0.5, min_chars=2)
    assert hold_duration(1, s) is None
    assert hold_duration(0, s) is None


def test_monotonic_in_chars_and_rate(settings):
    previous = 0.0
    for chars in range(settings.min_chars, 200):
        value = hold_duration(chars, settings)
        assert value >= settings.min_pause
        assert value >= previous
        previous = value

    slow = PrimedSettings(pause_per_char=0.10)
    assert hold_duration(40, slow) >= hold_duration(40, settings)
