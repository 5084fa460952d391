"""Base plan normalizer shared by the general and behavior plans."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from planwise.core.coercion import first_present, get_path, is_number, text_at
from planwise.core.models import BehaviorPlan, GeneralPlan, SuggestionEntry

PlanT = TypeVar("PlanT", GeneralPlan, BehaviorPlan)

NO_VALID_OUTPUT_MESSAGE = "لا توجد مخرجات AI صالحة؛ تم إرجاع ملخص افتراضي."


class PlanNormalizer(ABC, Generic[PlanT]):
    """
    Map arbitrary AI output onto a canonical plan.

    Subclasses declare their alias tables as class data and implement
    `_extract`. Normalizers never raise: anything that is not an object
    yields the fallback plan.
    """

    BACKFILL_LIMIT = 6

    CONFIDENCE_PATHS = ("confidence", "confidence_score", "meta.model_provided_confidence")
    NOTES_PATHS = ("_notes", "notes", "meta.notes")

    @abstractmethod
    def empty_plan(self) -> PlanT:
        """A plan with every field at its default."""
        ...

    @abstractmethod
    def _extract(self, parsed: Mapping[str, Any]) -> PlanT:
        """Build the plan from a parsed object."""
        ...

    def normalize(self, parsed: Any, fallback_note: str = "") -> PlanT:
        """
        Normalize parsed AI output.

        Args:
            parsed: Output of the JSON extractor (any JSON value)
            fallback_note: Summary used when `parsed` is not an object

        Returns:
            Fully populated canonical plan
        """
        if not isinstance(parsed, Mapping):
            plan = self.empty_plan()
            plan.summary = fallback_note or ""
            plan.suggestions = [SuggestionEntry(text=NO_VALID_OUTPUT_MESSAGE)]
            return plan
        return self._extract(parsed)

    def _meta(self, parsed: Mapping[str, Any]) -> dict[str, Any]:
        """Model-reported confidence and free-form notes."""
        confidence = None
        for path in self.CONFIDENCE_PATHS:
            value = get_path(parsed, path)
            if is_number(value):
                confidence = value
                break
        return {
            "model_provided_confidence": confidence,
            "notes": text_at(parsed, self.NOTES_PATHS),
        }

    @staticmethod
    def _probe(parsed: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
        return first_present(parsed, keys)
