"""Core domain models and contracts for PlanWise.

These models define the canonical record shapes consumed by the frontend:
- General teaching plan
- Behavioral intervention plan (BIP)
- Suggestion entries shared by both
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from planwise.core.coercion import is_number


# =============================================================================
# Enums
# =============================================================================


class PlanType(str, Enum):
    """Which canonical plan the AI output is normalized into."""

    GENERAL = "general"
    BEHAVIOR = "behavior"

    @classmethod
    def resolve(cls, analysis_type: Any = None, plan_type: Any = None) -> "PlanType":
        """
        Pick the plan type from the two request flags.

        `planType: "behavioral"` wins over `analysisType`; anything that is
        not a behavior flag falls back to the general plan.
        """
        if plan_type == "behavioral":
            return cls.BEHAVIOR
        if isinstance(analysis_type, str) and analysis_type.strip().lower() in {
            "behavior",
            "behavioral",
        }:
            return cls.BEHAVIOR
        return cls.GENERAL


# =============================================================================
# Shared entries
# =============================================================================


class SuggestionEntry(BaseModel):
    """A suggestion or customization with its rationale."""

    text: str
    rationale: str = ""
    confidence: float | None = None


class Activity(BaseModel):
    """One activity of a teaching plan."""

    type: str = ""
    name: str = ""


class Reinforcement(BaseModel):
    type: str = ""
    schedule: str = ""


class Measurement(BaseModel):
    type: str = ""
    sheet: str = ""


class ReplacementBehavior(BaseModel):
    skill: str = ""
    modality: str = ""


class DataCollection(BaseModel):
    metric: str = ""
    tool: str = ""


# =============================================================================
# Canonical plans
# =============================================================================


class GeneralPlan(BaseModel):
    """
    Canonical teaching plan.

    Every field always has a value of the right type, whatever the
    upstream model returned.
    """

    smart_goal: str = ""
    summary: str = ""
    teaching_strategy: str = ""
    task_analysis_steps: list[str] = Field(default_factory=list)
    subgoals: list[str] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)
    execution_plan: list[str] = Field(default_factory=list)
    reinforcement: Reinforcement = Field(default_factory=Reinforcement)
    measurement: Measurement = Field(default_factory=Measurement)
    generalization_plan: list[str] = Field(default_factory=list)
    accommodations: list[str] = Field(default_factory=list)
    suggestions: list[SuggestionEntry] = Field(default_factory=list)
    customizations: list[SuggestionEntry] = Field(default_factory=list)
    parent_instructions: str = ""
    meta: dict[str, Any] = Field(default_factory=dict)


class BehaviorPlan(BaseModel):
    """Canonical behavioral intervention plan (BIP)."""

    behavior_goal: str = ""
    summary: str = ""
    antecedents: list[str] = Field(default_factory=list)
    consequences: list[str] = Field(default_factory=list)
    function_analysis: str = ""
    antecedent_strategies: list[str] = Field(default_factory=list)
    replacement_behavior: ReplacementBehavior = Field(default_factory=ReplacementBehavior)
    consequence_strategies: list[str] = Field(default_factory=list)
    data_collection: DataCollection = Field(default_factory=DataCollection)
    review_after_days: int = 14
    safety_flag: bool = False
    suggestions: list[SuggestionEntry] = Field(default_factory=list)
    customizations: list[SuggestionEntry] = Field(default_factory=list)
    parent_instructions: str = ""
    meta: dict[str, Any] = Field(default_factory=dict)


CanonicalPlan = GeneralPlan | BehaviorPlan


# =============================================================================
# Request Models
# =============================================================================


class AnalyzeRequest(BaseModel):
    """
    Body of POST /api/analyze.

    Field names follow the frontend's camelCase. Values of the wrong type
    are coerced or dropped instead of rejected.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text_note: str | None = Field(default=None, alias="textNote")
    current_activity: str | None = Field(default=None, alias="currentActivity")
    energy_level: str | None = Field(default=None, alias="energyLevel")
    tags: list[str] = Field(default_factory=list)
    session_duration: float = Field(default=0, alias="sessionDuration")
    curriculum_query: str | None = Field(default=None, alias="curriculumQuery")
    audio_url: str | None = Field(default=None, alias="audioUrl")
    analysis_type: str = Field(default="general", alias="analysisType")
    plan_type: str | None = Field(default=None, alias="planType")
    messages_for_model: list[dict[str, Any]] | None = Field(
        default=None, alias="messagesForModel"
    )

    @field_validator(
        "text_note",
        "current_activity",
        "energy_level",
        "curriculum_query",
        "audio_url",
        "plan_type",
        mode="before",
    )
    @classmethod
    def coerce_optional_text(cls, v: Any) -> str | None:
        if isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return None

    @field_validator("analysis_type", mode="before")
    @classmethod
    def coerce_analysis_type(cls, v: Any) -> str:
        return v if isinstance(v, str) and v else "general"

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [v] if v.strip() else []
        if isinstance(v, list):
            return [str(t) for t in v if t is not None and str(t).strip()]
        return []

    @field_validator("session_duration", mode="before")
    @classmethod
    def coerce_session_duration(cls, v: Any) -> float:
        if isinstance(v, bool):
            return 0
        if isinstance(v, (int, float)):
            return v if is_number(v) else 0
        if isinstance(v, str):
            try:
                value = float(v)
            except ValueError:
                return 0
            return value if is_number(value) else 0
        return 0

    @field_validator("messages_for_model", mode="before")
    @classmethod
    def coerce_messages(cls, v: Any) -> list[dict[str, Any]] | None:
        if not isinstance(v, list):
            return None
        messages = [m for m in v if isinstance(m, dict)]
        return messages or None

    @property
    def has_input(self) -> bool:
        """A note or an audio URL is required to analyze anything."""
        return bool(self.text_note) or bool(self.audio_url)


class AssessmentLookupRequest(BaseModel):
    """Body of POST /api/assessments/by-name."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    child_name: str | None = Field(default=None, alias="childName")
    name: str | None = None
    return_all: bool = Field(default=False, alias="all")

    @field_validator("child_name", "name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str | None:
        if v is None or isinstance(v, (dict, list)):
            return None
        return str(v)

    @field_validator("return_all", mode="before")
    @classmethod
    def coerce_all(cls, v: Any) -> bool:
        return bool(v)

    @property
    def lookup_name(self) -> str:
        return (self.child_name or self.name or "").strip()
