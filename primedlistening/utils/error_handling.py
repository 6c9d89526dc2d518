"""
Error handling and retry utilities.
Settings persistence is the only I/O the app does during playback, so failures
there are retried briefly and then reported, never raised into the player.
"""
import time
import functools
from typing import Any, Callable, Optional, Tuple, Type


class RetryConfig:
    """How often a settings write is retried and how long to wait in between."""

    def __init__(self,
                 max_attempts: int = 2,
                 initial_delay: float = 0.05,
                 max_delay: float = 0.5,
                 backoff: float = 2.0):
        self.max_attempts = max(1, max_attempts)
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff = backoff

    def get_delay(self, attempt: int) -> float:
        """Wait before retry number attempt + 1, capped at max_delay."""
        return min(self.initial_delay * self.backoff ** attempt, self.max_delay)


def with_retry(config: Optional[RetryConfig] = None,
               exceptions: Tuple[Type[Exception], ...] = (OSError,),
               log_callback: Optional[Callable] = None):
    """
    Retry the decorated call on the given exceptions, re-raising the last one.

    Each failed attempt except the last is reported through log_callback
    before sleeping.
    """
    config = config or RetryConfig()
    log = log_callback or (lambda _msg: None)

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    attempt += 1
                    if attempt >= config.max_attempts:
                        log(f"[Retry] {func.__name__} gave up after {attempt} attempt(s): {e}")
                        raise
                    delay = config.get_delay(attempt - 1)
                    log(f"[Retry] Attempt {attempt}/{config.max_attempts} failed: {e}. Retrying in {delay:.2f}s...")
                    time.sleep(delay)

        return wrapper
    return decorator


class ErrorRecovery:
    """Fallbacks for values that cannot be used as given."""

    @staticmethod
    def recover_setting_value(key: str,
                              raw: str,
                              default: Any,
                              log_callback: Optional[Callable] = None) -> Any:
        """
        Coerce a raw config value to the type of its default.

        Returns:
            The converted value, or the default if conversion fails
        """
        try:
            if isinstance(default, bool):
                return raw.strip().lower() in ("1", "yes", "true", "on")
            if isinstance(default, int):
                return int(float(raw))
            if isinstance(default, float):
                return float(raw)
            return raw
        except (TypeError, ValueError):
            if log_callback:
                log_callback(f"[Recovery] Invalid value {raw!r} for '{key}'. Using default {default!r}")
            return default

    @staticmethod
    def clamp(value: float, minimum: float, log_callback: Optional[Callable] = None, name: str = "value") -> float:
        """Clamp a numeric adjustment to its floor instead of rejecting it."""
        if value < minimum:
            if log_callback:
                log_callback(f"[Recovery] {name} {value:.4f} below minimum, clamped to {minimum:.4f}")
            return minimum
        return value
