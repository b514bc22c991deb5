"""
Prometheus metrics for the product lifecycle.
Exported through the ``/metrics`` ASGI app mounted in ``donation_api.main``.
"""

from prometheus_client import Counter

LIFECYCLE_TRANSITIONS = Counter(
    "product_lifecycle_transitions_total",
    "Successful product lifecycle transitions",
    ["transition"],
)

LIFECYCLE_REJECTIONS = Counter(
    "product_lifecycle_rejections_total",
    "Lifecycle operations refused because of state or ownership",
    ["transition", "reason"],
)

__all__ = ["LIFECYCLE_TRANSITIONS", "LIFECYCLE_REJECTIONS"]
