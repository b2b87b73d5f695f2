"""
Explicit degraded-result wrapper for dashboard aggregators.

An aggregator decorated with :func:`aggregator` never raises: it returns
an :class:`AggregateResult` whose ``degraded`` flag tells the caller
whether ``value`` is real data or a fresh copy of the declared fallback.
Failures are logged with the aggregator name and the active filter set.
"""
from __future__ import annotations

import copy
import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)


@dataclass
class AggregateResult:
    name: str
    value: Any
    degraded: bool = False
    error: Optional[str] = None


def _filters_context(args, kwargs) -> Optional[dict]:
    filters = kwargs.get('filters')
    if filters is None:
        for arg in args:
            if hasattr(arg, 'as_dict'):
                filters = arg
                break
    if filters is None:
        return None
    return filters.as_dict() if hasattr(filters, 'as_dict') else dict(filters)


def aggregator(name: str, fallback: Any) -> Callable[[Callable[..., Any]], Callable[..., AggregateResult]]:
    """Wrap ``fn`` so that it returns an :class:`AggregateResult`.

    The undecorated function stays reachable as ``wrapper.compute`` for
    callers that want exceptions to propagate.
    """
    def decorator(fn: Callable[..., Any]) -> Callable[..., AggregateResult]:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs) -> AggregateResult:
            try:
                value = fn(*args, **kwargs)
            except Exception as exc:
                filters = _filters_context(args, kwargs)
                logger.exception(
                    "aggregator %s failed, serving fallback", name,
                    extra={'aggregator': name, 'filters': filters},
                )
                return AggregateResult(name=name, value=copy.deepcopy(fallback), degraded=True, error=str(exc))
            return AggregateResult(name=name, value=value)

        wrapper.compute = fn  # type: ignore[attr-defined]
        wrapper.aggregator_name = name  # type: ignore[attr-defined]
        return wrapper
    return decorator


def collect(results: Iterable[AggregateResult]) -> tuple[dict, list[str]]:
    """Split results into a name -> value mapping and the degraded names."""
    values: dict[str, Any] = {}
    degraded: list[str] = []
    for result in results:
        values[result.name] = result.value
        if result.degraded:
            degraded.append(result.name)
    return values, degraded
