import logging

from health.services.fallback import AggregateResult, aggregator, collect
from health.services.filters import SurveillanceFilters


@aggregator('things', {'items': []})
def broken(filters):
    raise RuntimeError('database unavailable')


@aggregator('count', 0)
def working(n):
    return n * 2


def test_success_is_not_degraded():
    result = working(4)
    assert result == AggregateResult(name='count', value=8)


def test_failure_serves_fresh_copy_of_fallback(caplog, monkeypatch):
    # the 'health' logger does not propagate to the root handler in settings
    monkeypatch.setattr(logging.getLogger('health'), 'propagate', True)
    with caplog.at_level(logging.ERROR, logger='health.services.fallback'):
        first = broken(SurveillanceFilters(ward='Ward 5'))
    assert first.degraded
    assert first.value == {'items': []}
    assert 'database unavailable' in first.error

    first.value['items'].append('mutated')
    assert broken(SurveillanceFilters()).value == {'items': []}

    record = caplog.records[0]
    assert record.aggregator == 'things'
    assert record.filters['ward'] == 'Ward 5'


def test_compute_exposes_the_raw_function():
    assert working.compute(5) == 10
    assert working.aggregator_name == 'count'


def test_collect_splits_values_and_degraded_names():
    values, degraded = collect([working(1), broken(None)])
    assert values == {'count': 2, 'things': {'items': []}}
    assert degraded == ['things']
