"""Tests for request models and plan type resolution."""

import pytest

from planwise.core.models import AnalyzeRequest, AssessmentLookupRequest, PlanType


class TestPlanType:
    @pytest.mark.parametrize(
        "analysis_type,plan_type,expected",
        [
            ("general", None, PlanType.GENERAL),
            ("behavior", None, PlanType.BEHAVIOR),
            ("Behavioral", None, PlanType.BEHAVIOR),
            ("general", "behavioral", PlanType.BEHAVIOR),
            (None, None, PlanType.GENERAL),
            ("sensory", "general", PlanType.GENERAL),
        ],
    )
    def test_resolve(self, analysis_type, plan_type, expected) -> None:
        assert PlanType.resolve(analysis_type, plan_type) is expected


class TestAnalyzeRequest:
    def test_camel_case_fields(self) -> None:
        request = AnalyzeRequest.model_validate(
            {
                "textNote": "ملاحظة",
                "currentActivity": "رسم",
                "energyLevel": "عال",
                "tags": ["a"],
                "sessionDuration": 20,
                "curriculumQuery": "colors",
                "analysisType": "behavior",
            }
        )

        assert request.text_note == "ملاحظة"
        assert request.session_duration == 20
        assert request.analysis_type == "behavior"
        assert request.has_input

    def test_defaults(self) -> None:
        request = AnalyzeRequest.model_validate({})

        assert request.tags == []
        assert request.session_duration == 0
        assert request.analysis_type == "general"
        assert request.messages_for_model is None
        assert not request.has_input

    def test_lenient_coercion(self) -> None:
        request = AnalyzeRequest.model_validate(
            {
                "textNote": 42,
                "tags": "single",
                "sessionDuration": "nan",
                "analysisType": None,
                "messagesForModel": [],
                "unknown": "ignored",
            }
        )

        assert request.text_note == "42"
        assert request.tags == ["single"]
        assert request.session_duration == 0
        assert request.analysis_type == "general"
        assert request.messages_for_model is None

    def test_messages_keep_objects_only(self) -> None:
        request = AnalyzeRequest.model_validate(
            {"messagesForModel": ["bad", {"role": "user", "content": "hi"}]}
        )

        assert request.messages_for_model == [{"role": "user", "content": "hi"}]


class TestAssessmentLookupRequest:
    def test_child_name_preferred(self) -> None:
        lookup = AssessmentLookupRequest.model_validate({"childName": " سارة ", "name": "x"})

        assert lookup.lookup_name == "سارة"
        assert lookup.return_all is False

    def test_name_and_all(self) -> None:
        lookup = AssessmentLookupRequest.model_validate({"name": "سارة", "all": 1})

        assert lookup.lookup_name == "سارة"
        assert lookup.return_all is True

    def test_blank(self) -> None:
        assert AssessmentLookupRequest.model_validate({"childName": {"x": 1}}).lookup_name == ""


def test_oversized_session_duration() -> None:
    request = AnalyzeRequest.model_validate({"textNote": "x", "sessionDuration": 10**400})

    assert request.session_duration == 0
