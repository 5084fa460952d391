"""Response envelope - the payload returned by the analyze endpoint."""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from planwise.core.coercion import is_number
from planwise.core.models import CanonicalPlan, PlanType, SuggestionEntry
from planwise.core.plans.suggestions import suggestion_texts


def aggregate_confidence(
    suggestions: Iterable[SuggestionEntry],
    model_confidence: Any = None,
) -> float | None:
    """
    Overall confidence for a plan.

    Mean of the per-suggestion confidences that are set; otherwise the
    model-reported confidence; otherwise None.
    """
    values = [s.confidence for s in suggestions if is_number(s.confidence)]
    if values:
        return sum(values) / len(values)
    if is_number(model_confidence):
        return model_confidence
    return None


def iso_timestamp(moment: datetime | None = None) -> str:
    """UTC timestamp with millisecond precision and a Z suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def build_envelope(
    raw: Any,
    plan: CanonicalPlan,
    *,
    used_curriculum: bool,
    analysis_type: PlanType,
    sent_at: datetime | None = None,
) -> dict[str, Any]:
    """
    Assemble the analyze response.

    Returns:
        {"ai": {raw, normalized, suggestions, customizations},
         "meta": {sentAt, usedCurriculum, analysisType}}
    """
    normalized = plan.model_dump()
    meta = dict(normalized.get("meta") or {})
    meta["confidence_overall"] = aggregate_confidence(
        plan.suggestions, meta.get("model_provided_confidence")
    )
    normalized["meta"] = meta

    return {
        "ai": {
            "raw": raw,
            "normalized": normalized,
            "suggestions": suggestion_texts(plan.suggestions),
            "customizations": suggestion_texts(plan.customizations),
        },
        "meta": {
            "sentAt": iso_timestamp(sent_at),
            "usedCurriculum": used_curriculum,
            "analysisType": analysis_type.value,
        },
    }
