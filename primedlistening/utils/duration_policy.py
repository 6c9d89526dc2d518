from typing import Optional


def hold_duration(visible_chars: int, settings) -> Optional[float]:
    """Seconds to hold a line of `visible_chars`, or None if it is too short to pause on."""
    if visible_chars < settings.min_chars:
        return None
    return max(settings.min_pause, visible_chars * settings.pause_per_char)
