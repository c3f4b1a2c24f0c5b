"""Application layer for the insights bounded context."""

from insights.application.aggregator import CrossTenantAggregator
from insights.application.observability import AggregatorProbe, DefaultAggregatorProbe

__all__ = ["AggregatorProbe", "CrossTenantAggregator", "DefaultAggregatorProbe"]
