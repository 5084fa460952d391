"""PlanWise Core - JSON extraction, shape coercion and plan normalization."""

from planwise.core.envelope import aggregate_confidence, build_envelope
from planwise.core.models import (
    Activity,
    BehaviorPlan,
    CanonicalPlan,
    DataCollection,
    GeneralPlan,
    Measurement,
    PlanType,
    Reinforcement,
    ReplacementBehavior,
    SuggestionEntry,
)

__all__ = [
    "Activity",
    "BehaviorPlan",
    "CanonicalPlan",
    "DataCollection",
    "GeneralPlan",
    "Measurement",
    "PlanType",
    "Reinforcement",
    "ReplacementBehavior",
    "SuggestionEntry",
    "aggregate_confidence",
    "build_envelope",
]
