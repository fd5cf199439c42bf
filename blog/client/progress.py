"""Reading progress for post pages, with frame-rate throttling."""

import time
from collections.abc import Callable
from dataclasses import dataclass

FRAME_INTERVAL = 1 / 60


@dataclass(frozen=True)
class ScrollMetrics:
    """Layout numbers sampled on a scroll event (all in pixels)."""

    scroll_top: float
    content_top: float
    content_height: float
    window_height: float


def compute_progress(metrics: ScrollMetrics) -> float:
    """Percentage of the post body scrolled past, clamped to [0, 100]."""
    scroll_distance = metrics.scroll_top - metrics.content_top
    scrollable_distance = metrics.content_height - metrics.window_height

    if scroll_distance <= 0:
        return 0.0
    if scroll_distance >= scrollable_distance:
        return 100.0
    return scroll_distance / scrollable_distance * 100


def progress_style(percent: float) -> str:
    """Inline style for the progress bar element."""
    return f"width: {percent:g}%"


class ReadingProgress:
    """Throttled progress tracker.

    ``on_scroll`` may be called for every scroll event; the percentage is
    recomputed at most once per *interval*. Skipped samples are kept as
    pending and applied by the next due event or by ``flush``. Whoever feeds
    scroll events must call ``flush`` once scrolling stops, otherwise the last
    sample is never applied.
    """

    def __init__(
        self,
        interval: float = FRAME_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._interval = interval
        self._clock = clock
        self._last_update: float | None = None
        self._pending: ScrollMetrics | None = None
        self.percent = 0.0

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def on_scroll(self, metrics: ScrollMetrics) -> float | None:
        """Record a scroll sample; return the new percentage if one was computed."""
        self._pending = metrics
        now = self._clock()
        if self._last_update is not None and now - self._last_update < self._interval:
            return None
        return self._apply(now)

    def flush(self) -> float:
        """Apply any pending sample immediately and return the current percentage."""
        if self._pending is not None:
            self._apply(self._clock())
        return self.percent

    def _apply(self, now: float) -> float:
        self.percent = compute_progress(self._pending)
        self._pending = None
        self._last_update = now
        return self.percent
