"""
PlanWise Analyzer - Main analysis pipeline.

The analyzer is responsible for:
1. Validating the observation note
2. Picking the plan type and relevant curriculum
3. Building the prompt messages
4. Calling the AI workflow
5. Recovering JSON from the workflow answer
6. Normalizing it into a canonical plan and wrapping the response envelope
"""

import logging
from datetime import datetime
from typing import Any

from planwise.config import Settings, get_settings
from planwise.core.envelope import build_envelope
from planwise.core.models import AnalyzeRequest, PlanType
from planwise.core.normalizer import JSONNormalizer
from planwise.core.plans import BehaviorPlanNormalizer, GeneralPlanNormalizer
from planwise.curriculum import CurriculumMatch, find_relevant, load_curriculum
from planwise.errors import MissingInputError, UnparseableOutputError
from planwise.prompts import build_messages, build_note_content
from planwise.workflow.base import WorkflowClient, WorkflowRequest

logger = logging.getLogger(__name__)

MESSAGE_PREVIEW_CHARS = 800
FALLBACK_NOTE_CHARS = 400


class Analyzer:
    """
    Runs one observation note through the workflow and back.

    Workflow failures propagate as `WorkflowError`; a response without any
    recoverable JSON raises `UnparseableOutputError`. Anything the
    workflow does return is always normalized into a complete plan.
    """

    NORMALIZERS = {
        PlanType.GENERAL: GeneralPlanNormalizer,
        PlanType.BEHAVIOR: BehaviorPlanNormalizer,
    }

    def __init__(self, workflow: WorkflowClient, settings: Settings | None = None):
        self.workflow = workflow
        self.settings = settings or get_settings()
        self.normalizer = JSONNormalizer()
        self.plan_normalizers = {plan_type: cls() for plan_type, cls in self.NORMALIZERS.items()}

    async def analyze(
        self,
        request: AnalyzeRequest,
        sent_at: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Analyze a note and return the response envelope.

        Args:
            request: Parsed analyze request
            sent_at: Timestamp for the envelope (defaults to now)

        Returns:
            {"ai": {...}, "meta": {...}} envelope
        """
        if not request.has_input:
            raise MissingInputError("لا يوجد نص أو رابط صوتي للتحليل")

        plan_type = PlanType.resolve(request.analysis_type, request.plan_type)
        match = self._match_curriculum(request)

        logger.info(
            "Analyze request: type=%s note_chars=%d tags=%d curriculum=%s",
            plan_type.value,
            len(request.text_note or ""),
            len(request.tags),
            match.used,
        )

        messages = self._messages(request, plan_type, match)
        if logger.isEnabledFor(logging.DEBUG):
            for message in messages:
                logger.debug(
                    "Message [%s]: %s",
                    message.get("role"),
                    str(message.get("content", ""))[:MESSAGE_PREVIEW_CHARS],
                )

        response = await self.workflow.run(
            WorkflowRequest(
                text_note=request.text_note,
                analysis_type=plan_type.value,
                messages=messages,
                current_activity=request.current_activity,
                energy_level=request.energy_level,
                tags=request.tags,
                session_duration=request.session_duration,
                curriculum_query=request.curriculum_query,
            )
        )

        parsed = self.normalizer.unwrap(response.payload, response.raw_text)
        if parsed is None:
            logger.error(
                "Unparseable %s response (status %s): %s",
                self.workflow.name,
                response.status_code,
                response.raw_text[:MESSAGE_PREVIEW_CHARS],
            )
            raise UnparseableOutputError(response.raw_text, match.used)

        plan = self.plan_normalizers[plan_type].normalize(parsed, self._fallback_note(parsed))
        return build_envelope(
            parsed,
            plan,
            used_curriculum=match.used,
            analysis_type=plan_type,
            sent_at=sent_at,
        )

    def _match_curriculum(self, request: AnalyzeRequest) -> CurriculumMatch:
        curriculum = load_curriculum(self.settings.curriculum_path)
        if not curriculum:
            return CurriculumMatch()
        return find_relevant(curriculum, request.curriculum_query or request.text_note)

    def _messages(
        self,
        request: AnalyzeRequest,
        plan_type: PlanType,
        match: CurriculumMatch,
    ) -> list[dict[str, Any]]:
        # Client-built messages take precedence
        if request.messages_for_model:
            return request.messages_for_model

        note_content = build_note_content(
            request.text_note,
            current_activity=request.current_activity,
            energy_level=request.energy_level,
            tags=request.tags,
            session_duration=request.session_duration,
        )
        return build_messages(plan_type, note_content, match.excerpt)

    @staticmethod
    def _fallback_note(parsed: dict[str, Any]) -> str:
        for key in ("summary", "behavior_goal", "smart_goal"):
            value = parsed.get(key)
            if isinstance(value, str) and value:
                return value[:FALLBACK_NOTE_CHARS]
        return ""
