"""Current-vs-previous decoration of aggregates."""
from dataclasses import fields

from app.schemas.insights import DecoratedAggregate, DecoratedMetric
from app.services.aggregator import Aggregate


def with_delta(current: int | float, previous: int | float) -> DecoratedMetric:
    """Absolute and percent change. A zero baseline yields 0% (no change) or 100%."""
    delta = current - previous
    if previous == 0:
        delta_pct = 0.0 if current == 0 else 100.0
    else:
        delta_pct = (delta / previous) * 100
    return DecoratedMetric(value=current, delta=delta, delta_pct=delta_pct)


def decorate(current: Aggregate, previous: Aggregate) -> DecoratedAggregate:
    return DecoratedAggregate(**{
        f.name: with_delta(getattr(current, f.name), getattr(previous, f.name))
        for f in fields(Aggregate)
    })
