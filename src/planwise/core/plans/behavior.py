"""
Behavior-plan (BIP) normalizer.

Upstream models follow the BIP schema loosely, so beyond alias probing this
normalizer recovers antecedents and consequences from keyword matches in
the rest of the output, back-fills strategies from suggestions, and
deduplicates every list field. Missing fields resolve to empty values,
never to errors.
"""

import logging
from collections.abc import Mapping
from typing import Any

from planwise.core.coercion import (
    Shape,
    Split,
    dedupe,
    first_text,
    get_path,
    shape_of,
    text_at,
    to_int,
    to_pair,
    to_string_list,
)
from planwise.core.models import BehaviorPlan, DataCollection, ReplacementBehavior
from planwise.core.plans.base import PlanNormalizer
from planwise.core.plans.heuristics import (
    ANTECEDENT_KEYWORDS,
    CONSEQUENCE_KEYWORDS,
    collect_strings,
    filter_by_keywords,
    sentences_of,
)
from planwise.core.plans.suggestions import (
    dedupe_suggestions,
    normalize_suggestions,
    suggestion_texts,
)

logger = logging.getLogger(__name__)

SEVERE = "شديد"
DEFAULT_REVIEW_DAYS = 14


class BehaviorPlanNormalizer(PlanNormalizer[BehaviorPlan]):
    """Normalize AI output into the canonical behavioral intervention plan."""

    TEXT_FIELDS: dict[str, tuple[str, ...]] = {
        "summary": ("summary", "behavior_goal", "smart_goal", "overview"),
        "behavior_goal": ("behavior_goal", "smart_goal", "summary"),
        "function_analysis": (
            "function_analysis",
            "behavior_function",
            "hypothesized_function",
            "function",
        ),
        "parent_instructions": ("parent_instructions", "caregiver_instructions", "home_instructions"),
    }

    LIST_FIELDS: dict[str, tuple[str, ...]] = {
        "antecedents": ("antecedents", "antecedent", "preceding", "before"),
        "consequences": ("consequences", "consequence", "following", "after"),
        "antecedent_strategies": (
            "antecedent_strategies",
            "antecedentStrategies",
            "prevention",
            "proactive",
            "prep",
        ),
        "consequence_strategies": (
            "consequence_strategies",
            "consequenceStrategies",
            "response_strategies",
            "reactive",
            "reinforcement",
        ),
    }

    SUGGESTION_KEYS: dict[str, tuple[str, ...]] = {
        "suggestions": ("suggestions", "recommendations", "advice"),
        "customizations": ("customizations", "tweaks", "modifications"),
    }

    REPLACEMENT_SKILL_KEYS = ("skill", "name", "label")
    REPLACEMENT_MODALITY_KEYS = ("modality", "medium")

    DATA_COLLECTION_PATHS = (
        ("data_collection.metric", "data_collection.measure", "measurement.type", "metric"),
        ("data_collection.tool", "data_collection.instrument", "measurement.sheet", "tool"),
    )

    REVIEW_PATHS = ("review_after_days", "meta.review_after_days", "review")

    def empty_plan(self) -> BehaviorPlan:
        return BehaviorPlan()

    def _extract(self, parsed: Mapping[str, Any]) -> BehaviorPlan:
        fields: dict[str, Any] = {
            name: first_text(parsed, keys) for name, keys in self.TEXT_FIELDS.items()
        }
        fields.update(
            {
                name: to_string_list(self._probe(parsed, keys), Split.SENTENCES)
                for name, keys in self.LIST_FIELDS.items()
            }
        )
        fields.update(
            {
                name: normalize_suggestions(self._probe(parsed, keys), Split.SENTENCES)
                for name, keys in self.SUGGESTION_KEYS.items()
            }
        )

        plan = BehaviorPlan(
            **fields,
            replacement_behavior=self._replacement_behavior(parsed),
            data_collection=DataCollection(
                metric=text_at(parsed, self.DATA_COLLECTION_PATHS[0]),
                tool=text_at(parsed, self.DATA_COLLECTION_PATHS[1]),
            ),
            review_after_days=self._review_after_days(parsed),
            safety_flag=self._safety_flag(parsed),
            meta=self._meta(parsed),
        )

        self._recover_from_keywords(plan, parsed)
        self._backfill_strategies(plan)
        return self._dedupe(plan)

    def _replacement_behavior(self, parsed: Mapping[str, Any]) -> ReplacementBehavior:
        """
        Object, "skill | modality" string, or flat top-level keys.

        An array holds no pair and yields empty parts.
        """
        value = parsed.get("replacement_behavior")
        if shape_of(value) in (Shape.OBJECT, Shape.STRING, Shape.SEQUENCE):
            skill, modality = to_pair(
                value, self.REPLACEMENT_SKILL_KEYS, self.REPLACEMENT_MODALITY_KEYS
            )
        else:
            skill = first_text(parsed, ("replacement", "replacement_skill"))
            modality = first_text(parsed, ("replacement_modality",))
        return ReplacementBehavior(skill=skill, modality=modality)

    def _review_after_days(self, parsed: Mapping[str, Any]) -> int:
        for path in self.REVIEW_PATHS:
            value = get_path(parsed, path)
            if value is not None and not isinstance(value, bool):
                days = to_int(value, 0)
                if days > 0:
                    return days
        return DEFAULT_REVIEW_DAYS

    def _safety_flag(self, parsed: Mapping[str, Any]) -> bool:
        """Any one of the three signals raises the flag."""
        return (
            bool(parsed.get("safety_flag"))
            or bool(get_path(parsed, "meta.safety_flag"))
            or parsed.get("severity") == SEVERE
        )

    def _recover_from_keywords(self, plan: BehaviorPlan, parsed: Mapping[str, Any]) -> None:
        """Fill empty antecedents/consequences from keyword-tagged sentences."""
        if plan.antecedents and plan.consequences:
            return

        sentences = sentences_of(collect_strings(parsed))

        if not plan.antecedents:
            candidates = filter_by_keywords(sentences, ANTECEDENT_KEYWORDS)
            if candidates:
                logger.debug("Recovered %d antecedents from keywords", len(candidates))
                plan.antecedents = candidates

        if not plan.consequences:
            candidates = filter_by_keywords(sentences, CONSEQUENCE_KEYWORDS)
            if not candidates and plan.summary:
                candidates = filter_by_keywords(sentences_of([plan.summary]), CONSEQUENCE_KEYWORDS)
            if candidates:
                logger.debug("Recovered %d consequences from keywords", len(candidates))
                plan.consequences = candidates

    def _backfill_strategies(self, plan: BehaviorPlan) -> None:
        if not plan.antecedent_strategies:
            plan.antecedent_strategies = suggestion_texts(plan.suggestions)[: self.BACKFILL_LIMIT]
        if not plan.consequence_strategies:
            plan.consequence_strategies = suggestion_texts(plan.customizations)[
                : self.BACKFILL_LIMIT
            ]

    def _dedupe(self, plan: BehaviorPlan) -> BehaviorPlan:
        plan.antecedents = dedupe(plan.antecedents)
        plan.consequences = dedupe(plan.consequences)
        plan.antecedent_strategies = dedupe(plan.antecedent_strategies)
        plan.consequence_strategies = dedupe(plan.consequence_strategies)
        plan.suggestions = dedupe_suggestions(plan.suggestions)
        plan.customizations = dedupe_suggestions(plan.customizations)
        return plan


_normalizer = BehaviorPlanNormalizer()


def normalize_behavior(parsed: Any, fallback_note: str = "") -> BehaviorPlan:
    """Normalize parsed AI output into a `BehaviorPlan`."""
    return _normalizer.normalize(parsed, fallback_note)
