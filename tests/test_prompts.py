"""Tests for prompt building."""

from planwise.core.models import PlanType
from planwise.prompts import BEHAVIOR_TEMPLATE, GENERAL_TEMPLATE, build_messages, build_note_content


class TestBuildNoteContent:
    def test_all_fields(self) -> None:
        content = build_note_content(
            "رمى القلم",
            current_activity="كتابة",
            energy_level="منخفض",
            tags=["غضب", "انتقال"],
            session_duration=30.0,
        )

        assert content.splitlines() == [
            "Child activity: كتابة",
            "Energy level: منخفض",
            "Tags: غضب, انتقال",
            "Session duration: 30 دقيقة",
            "Note text: رمى القلم",
        ]

    def test_defaults(self) -> None:
        content = build_note_content(None)

        assert "Child activity: غير محدد" in content
        assert "Tags: لا يوجد" in content
        assert "Session duration: 0 دقيقة" in content

    def test_fractional_duration(self) -> None:
        assert "Session duration: 12.5 دقيقة" in build_note_content("x", session_duration=12.5)


class TestBuildMessages:
    def test_general_messages(self) -> None:
        messages = build_messages(PlanType.GENERAL, "Note text: hi")

        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[0]["content"] == GENERAL_TEMPLATE.system
        assert messages[2]["content"] == GENERAL_TEMPLATE.example_assistant
        assert messages[3]["content"].endswith("Note text: hi")

    def test_behavior_messages(self) -> None:
        messages = build_messages(PlanType.BEHAVIOR, "Note text: hi")

        assert messages[0]["content"] == BEHAVIOR_TEMPLATE.system
        assert messages[1]["content"] == BEHAVIOR_TEMPLATE.example_user

    def test_curriculum_appended_to_system(self) -> None:
        messages = build_messages(PlanType.GENERAL, "n", "Title: Colors\nMatch cards")

        assert messages[0]["content"].endswith("\n\nRelevant curriculum:\nTitle: Colors\nMatch cards")
