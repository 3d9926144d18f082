from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.orm import Session
from data.store import Store
from models.analytics import AnalyticsSummary, VariationStats
import logging

logger = logging.getLogger(__name__)

_ONE_DECIMAL = Decimal("0.1")


def percentage(count: int, total: int) -> float:
    """Share of total as a percentage, rounded half-up to one decimal. 0 when total is 0."""
    if total <= 0:
        return 0.0
    share = Decimal(100 * count) / Decimal(total)
    return float(share.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def summarize_counts(counts: dict[str, int]) -> AnalyticsSummary:
    count_a = counts.get("A", 0)
    count_b = counts.get("B", 0)
    total = count_a + count_b

    return AnalyticsSummary(
        variation_a=VariationStats(count=count_a, percentage=percentage(count_a, total)),
        variation_b=VariationStats(count=count_b, percentage=percentage(count_b, total)),
        total_views=total,
    )


def summarize(db: Session, test_id: str) -> AnalyticsSummary:
    """View counts and shares per variation for one test."""
    counts = Store(db).count_views_by_variation(test_id)
    logger.debug("view counts for test %s: %s", test_id, counts)
    return summarize_counts(counts)
