"""Named ranking presets over fixed time windows.

| Preset                      | Window          | Threshold | Applies                              |
|-----------------------------|-----------------|-----------|--------------------------------------|
| popular-last-month          | now-1 month     | >= 2      | popular, highest_rated, min_reviews  |
| popular-last-6-months       | now-6 months    | >= 5      | popular, highest_rated, min_reviews  |
| highest-rated-last-month    | now-1 month     | >= 2      | highest_rated, popular, min_reviews  |
| highest-rated-last-6-months | now-6 months    | >= 5      | highest_rated, popular, min_reviews  |

The last ordering applied is the primary sort key, so the "highest rated"
presets end up ordered by review count.  That inversion is kept as-is.
"""

import logging
from enum import Enum
from typing import Optional

from app.core.clock import Clock
from app.ranking.composer import highest_rated, min_reviews, popular
from app.ranking.query import RankingQuery
from app.ranking.window import months_before

logger = logging.getLogger(__name__)


class RankingPreset(str, Enum):
    POPULAR_LAST_MONTH = "popular-last-month"
    POPULAR_LAST_6_MONTHS = "popular-last-6-months"
    HIGHEST_RATED_LAST_MONTH = "highest-rated-last-month"
    HIGHEST_RATED_LAST_6_MONTHS = "highest-rated-last-6-months"


class RankingPresets:
    """Builds preset plans, reading the clock once per call."""

    def __init__(self, clock: Clock):
        self.clock = clock

    def popular_last_month(self, query: Optional[RankingQuery] = None) -> RankingQuery:
        return self._popular_first(query or RankingQuery(), months=1, threshold=2)

    def popular_last_6_months(self, query: Optional[RankingQuery] = None) -> RankingQuery:
        return self._popular_first(query or RankingQuery(), months=6, threshold=5)

    def highest_rated_last_month(self, query: Optional[RankingQuery] = None) -> RankingQuery:
        return self._highest_rated_first(query or RankingQuery(), months=1, threshold=2)

    def highest_rated_last_6_months(self, query: Optional[RankingQuery] = None) -> RankingQuery:
        return self._highest_rated_first(query or RankingQuery(), months=6, threshold=5)

    def build(self, preset: RankingPreset | str, query: Optional[RankingQuery] = None) -> RankingQuery:
        """Resolve a preset by name.  Raises ``ValueError`` for unknown names."""
        builders = {
            RankingPreset.POPULAR_LAST_MONTH: self.popular_last_month,
            RankingPreset.POPULAR_LAST_6_MONTHS: self.popular_last_6_months,
            RankingPreset.HIGHEST_RATED_LAST_MONTH: self.highest_rated_last_month,
            RankingPreset.HIGHEST_RATED_LAST_6_MONTHS: self.highest_rated_last_6_months,
        }
        return builders[RankingPreset(preset)](query)

    def _popular_first(self, query: RankingQuery, months: int, threshold: int) -> RankingQuery:
        now = self.clock.now()
        start = months_before(now, months)
        logger.debug("Popular-first window %s..%s (min %d reviews)", start, now, threshold)
        query = popular(query, start, now)
        query = highest_rated(query, start, now)
        return min_reviews(query, threshold)

    def _highest_rated_first(self, query: RankingQuery, months: int, threshold: int) -> RankingQuery:
        now = self.clock.now()
        start = months_before(now, months)
        logger.debug("Highest-rated-first window %s..%s (min %d reviews)", start, now, threshold)
        query = highest_rated(query, start, now)
        query = popular(query, start, now)
        return min_reviews(query, threshold)
