"""Chat reply pipeline.

Public Interface:
    - build_history: Prior turns (plus optional summary) as provider contents
    - RecipeEnrichment: Classify -> conditionally enrich side-call
    - aggregate_reply: Ordered StreamEvent sequence for one turn
"""

from .aggregator import aggregate_reply
from .enrichment import RecipeEnrichment
from .history import build_history
from .history import summary_to_json

__all__ = [
    "RecipeEnrichment",
    "aggregate_reply",
    "build_history",
    "summary_to_json",
]
