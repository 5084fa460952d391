"""Plan normalizers - map free-form AI output onto canonical plans."""

from planwise.core.plans.behavior import BehaviorPlanNormalizer, normalize_behavior
from planwise.core.plans.general import GeneralPlanNormalizer, normalize_general
from planwise.core.plans.suggestions import normalize_suggestions

__all__ = [
    "BehaviorPlanNormalizer",
    "GeneralPlanNormalizer",
    "normalize_behavior",
    "normalize_general",
    "normalize_suggestions",
]
