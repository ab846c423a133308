"""Daily provider quota tracking."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from diet_tracker.domain.recognition import QuotaState
from diet_tracker.services.key_value import KeyValueStore

QUOTA_DATE_KEY = "food_api_quota_date"
QUOTA_USED_KEY = "food_api_quota_used"

_logger = logging.getLogger(__name__)


@dataclass
class QuotaTracker:
    """Counts provider calls per calendar day.

    Storage failures fail open: the tracker reports a full quota so that a
    broken store never blocks recognition.
    """

    store: KeyValueStore
    daily_limit: int = 150
    today: Callable[[], date] = field(default=date.today)

    def check_and_maybe_reset(self) -> QuotaState:
        """Return today's usage, resetting the counter on a new day."""
        current = self.today()
        try:
            if self._stored_date() != current.isoformat():
                self.store.set(QUOTA_DATE_KEY, current.isoformat())
                self.store.set(QUOTA_USED_KEY, 0)
                return QuotaState(date=current, used_count=0)
            return QuotaState(date=current, used_count=self._stored_count())
        except Exception as exc:
            _logger.warning("Quota check failed, allowing request: %s", exc)
            return QuotaState(date=current, used_count=0)

    def is_exceeded(self) -> bool:
        """Return True when today's usage has reached the daily limit."""
        return self.check_and_maybe_reset().used_count >= self.daily_limit

    def increment(self) -> None:
        """Record one unit of quota usage for today."""
        current = self.today()
        try:
            if self._stored_date() != current.isoformat():
                self.store.set(QUOTA_DATE_KEY, current.isoformat())
                self.store.set(QUOTA_USED_KEY, 1)
                return
            self.store.set(QUOTA_USED_KEY, self._stored_count() + 1)
        except Exception as exc:
            _logger.warning("Quota increment failed: %s", exc)

    def remaining(self) -> int:
        """Return how many calls are left today."""
        try:
            if self._stored_date() != self.today().isoformat():
                return self.daily_limit
            used = self._stored_count()
        except Exception as exc:
            _logger.warning("Quota lookup failed, reporting full quota: %s", exc)
            return self.daily_limit
        return min(max(self.daily_limit - used, 0), self.daily_limit)

    def _stored_date(self) -> str:
        value = self.store.get(QUOTA_DATE_KEY)
        return value if isinstance(value, str) else ""

    def _stored_count(self) -> int:
        value = self.store.get(QUOTA_USED_KEY)
        if isinstance(value, bool) or not isinstance(value, int | float | str):
            return 0
        try:
            return max(int(value), 0)
        except ValueError:
            return 0
