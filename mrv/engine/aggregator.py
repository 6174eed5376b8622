"""
Emission aggregation: scope totals, category totals and a six-month trend.
"""

import math
from collections import defaultdict
from datetime import datetime
from typing import Iterable, Optional

from mrv.core.constants import TREND_MONTHS
from mrv.models.contracts import AggregatedSummary, MonthlyTrendPoint
from mrv.models.enums import EmissionCategory
from mrv.utils.time import month_key, trailing_months


def _category_key(category) -> str:
    if isinstance(category, EmissionCategory):
        return category.value
    return str(category or EmissionCategory.OTHER.value)


def _scope_of(record) -> int:
    return record.scope if record.scope in (1, 2, 3) else 3


def _co2_of(record) -> float:
    return max(float(record.co2_kg or 0.0), 0.0)


def aggregate(records: Iterable, now: Optional[datetime] = None) -> AggregatedSummary:
    """
    Reduce emission records to an AggregatedSummary.

    Records need `scope`, `category`, `co2_kg` and optionally `created_at`.
    Records without a usable `created_at`, or dated outside the trailing
    window, count toward scope and category totals but not the trend.
    Sums use math.fsum, so the result does not depend on record order.

    Args:
        records: Emission records for one subject
        now: Reference time for the trailing window (defaults to UTC now)

    Returns:
        AggregatedSummary
    """
    records = list(records)
    by_scope = defaultdict(list)
    by_category = defaultdict(list)

    for record in records:
        co2 = _co2_of(record)
        by_scope[_scope_of(record)].append(co2)
        by_category[_category_key(record.category)].append(co2)

    months = trailing_months(now, TREND_MONTHS)
    buckets = {ym: defaultdict(list) for ym in months}

    for record in records:
        created_at = getattr(record, "created_at", None)
        if not isinstance(created_at, datetime):
            continue
        bucket = buckets.get((created_at.year, created_at.month))
        if bucket is None:
            continue
        bucket[_scope_of(record)].append(_co2_of(record))

    trend = [
        MonthlyTrendPoint(
            month=month_key(year, month),
            scope1=math.fsum(buckets[(year, month)][1]),
            scope2=math.fsum(buckets[(year, month)][2]),
            scope3=math.fsum(buckets[(year, month)][3]),
        )
        for year, month in months
    ]

    scope1 = math.fsum(by_scope[1])
    scope2 = math.fsum(by_scope[2])
    scope3 = math.fsum(by_scope[3])

    return AggregatedSummary(
        scope1=scope1,
        scope2=scope2,
        scope3=scope3,
        total=scope1 + scope2 + scope3,
        by_category={key: math.fsum(values) for key, values in sorted(by_category.items())},
        monthly_trend=trend,
        record_count=len(records),
    )
