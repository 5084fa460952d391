"""General teaching-plan normalizer."""

from collections.abc import Mapping
from typing import Any

from planwise.core.coercion import Split, first_text, text_at, to_activities, to_string_list
from planwise.core.models import Activity, GeneralPlan, Measurement, Reinforcement
from planwise.core.plans.base import PlanNormalizer
from planwise.core.plans.suggestions import TEXT_KEYS, normalize_suggestions, suggestion_texts

DEFAULT_SMART_GOAL = "خطة بناءً على الملاحظة."


class GeneralPlanNormalizer(PlanNormalizer[GeneralPlan]):
    """
    Normalize AI output into the canonical teaching plan.

    Alias keys are tried in order per field; the first non-empty one wins.
    """

    TEXT_FIELDS: dict[str, tuple[str, ...]] = {
        "summary": ("summary", "smart_goal", "overview"),
        "smart_goal": ("smart_goal", "summary", "goal"),
        "teaching_strategy": ("teaching_strategy", "strategy", "customization", "teaching"),
        "parent_instructions": ("parent_instructions", "caregiver_instructions", "home_instructions"),
    }

    LIST_FIELDS: dict[str, tuple[str, ...]] = {
        "task_analysis_steps": ("task_analysis_steps", "task_analysis", "steps", "tasks"),
        "subgoals": ("subgoals", "goals", "suggestions", "phases"),
        "execution_plan": ("execution_plan", "execution", "steps_plan"),
        "generalization_plan": ("generalization_plan", "generalization", "generalise"),
        "accommodations": ("accommodations", "accommodation", "adaptations"),
    }

    ACTIVITY_KEYS: tuple[str, ...] = ("activities", "activities_list", "tasks_list")

    # (first-part paths, second-part paths); dotted paths read nested objects
    REINFORCEMENT_PATHS = (
        ("reinforcement.type", "reinforcement.name", "reinforce"),
        ("reinforcement.schedule", "reinforce_schedule", "reinforcement_schedule"),
    )
    MEASUREMENT_PATHS = (
        ("measurement.type", "measurement.method", "measurement_type"),
        ("measurement.sheet", "measurement_tool"),
    )

    SUGGESTION_KEYS: dict[str, tuple[str, ...]] = {
        "suggestions": ("suggestions",),
        "customizations": ("customizations",),
    }

    def empty_plan(self) -> GeneralPlan:
        return GeneralPlan()

    def _extract(self, parsed: Mapping[str, Any]) -> GeneralPlan:
        fields: dict[str, Any] = {
            name: first_text(parsed, keys) for name, keys in self.TEXT_FIELDS.items()
        }
        fields.update(
            {
                name: to_string_list(self._probe(parsed, keys), Split.LINES, TEXT_KEYS)
                for name, keys in self.LIST_FIELDS.items()
            }
        )
        fields.update(
            {
                name: normalize_suggestions(self._probe(parsed, keys), Split.LINES)
                for name, keys in self.SUGGESTION_KEYS.items()
            }
        )

        plan = GeneralPlan(
            **fields,
            activities=[
                Activity(**a) for a in to_activities(self._probe(parsed, self.ACTIVITY_KEYS))
            ],
            reinforcement=Reinforcement(
                type=text_at(parsed, self.REINFORCEMENT_PATHS[0]),
                schedule=text_at(parsed, self.REINFORCEMENT_PATHS[1]),
            ),
            measurement=Measurement(
                type=text_at(parsed, self.MEASUREMENT_PATHS[0]),
                sheet=text_at(parsed, self.MEASUREMENT_PATHS[1]),
            ),
            meta=self._meta(parsed),
        )
        return self._backfill(plan)

    def _backfill(self, plan: GeneralPlan) -> GeneralPlan:
        """
        Recover required fields from equivalent ones.

        Order matters: task steps, then goal, then strategy.
        """
        customizations = suggestion_texts(plan.customizations)
        suggestions = suggestion_texts(plan.suggestions)

        if not plan.task_analysis_steps:
            source = customizations or suggestions
            plan.task_analysis_steps = source[: self.BACKFILL_LIMIT]

        if not plan.smart_goal:
            plan.smart_goal = plan.summary or DEFAULT_SMART_GOAL

        if not plan.teaching_strategy and customizations:
            plan.teaching_strategy = customizations[0]

        return plan


_normalizer = GeneralPlanNormalizer()


def normalize_general(parsed: Any, fallback_note: str = "") -> GeneralPlan:
    """Normalize parsed AI output into a `GeneralPlan`."""
    return _normalizer.normalize(parsed, fallback_note)
