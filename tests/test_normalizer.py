"""Tests for the JSON Normalizer."""

import pytest

from planwise.core.normalizer import JSONNormalizer, extract_json, unwrap_workflow_output


class TestJSONNormalizer:
    """Test JSON extraction from model output."""

    @pytest.fixture
    def normalizer(self) -> JSONNormalizer:
        return JSONNormalizer()

    def test_valid_json_passes_through(self, normalizer: JSONNormalizer) -> None:
        """Valid JSON should pass through unchanged."""
        raw = '{"summary": "ok", "confidence": 0.9}'
        result = normalizer.normalize(raw)

        assert result.success
        assert result.data == {"summary": "ok", "confidence": 0.9}
        assert result.repairs_applied is None

    def test_finds_json_object_in_text(self, normalizer: JSONNormalizer) -> None:
        """Should find JSON object embedded in prose."""
        raw = 'here is your answer: {"summary":"ok"} thanks'

        result = normalizer.normalize(raw)

        assert result.success
        assert result.data == {"summary": "ok"}
        assert result.repairs_applied == ["extracted_json_structure"]

    def test_extracts_from_markdown_code_block(self, normalizer: JSONNormalizer) -> None:
        raw = """Here is the plan:

```json
{"smart_goal": "يطابق الألوان", "steps": ["أ", "ب"]}
```
"""
        result = normalizer.normalize(raw)

        assert result.success
        assert result.data["steps"] == ["أ", "ب"]

    def test_nested_objects_survive(self, normalizer: JSONNormalizer) -> None:
        raw = 'Result: {"reinforcement": {"type": "token"}, "x": 1} done'

        result = normalizer.normalize(raw)

        assert result.data == {"reinforcement": {"type": "token"}, "x": 1}

    def test_multiple_objects_fail(self, normalizer: JSONNormalizer) -> None:
        """The widest span covers both objects and does not parse."""
        raw = 'first {"a": 1} then {"b": 2}'

        result = normalizer.normalize(raw)

        assert not result.success
        assert result.error

    def test_no_json_fails(self, normalizer: JSONNormalizer) -> None:
        result = normalizer.normalize("the workflow crashed")

        assert not result.success
        assert result.data is None

    @pytest.mark.parametrize("raw", [None, "", 42, {"summary": "ok"}, ["a"]])
    def test_non_string_or_empty_fails(self, normalizer: JSONNormalizer, raw) -> None:
        result = normalizer.normalize(raw)

        assert not result.success
        assert result.error == "Empty or non-string input"

    def test_extract_json_helper(self) -> None:
        assert extract_json('noise {"summary":"ok"} noise') == {"summary": "ok"}
        assert extract_json("nothing here") is None
        assert extract_json(None) is None


    def test_deep_nesting_fails_cleanly(self, normalizer: JSONNormalizer) -> None:
        deep = "[" * 100000 + "]" * 100000

        result = normalizer.normalize(deep)

        assert not result.success
        assert extract_json(deep) is None
        assert unwrap_workflow_output(deep, deep) is None


class TestUnwrapWorkflowOutput:
    """Test resolving the plan object out of workflow envelopes."""

    def test_bare_object(self) -> None:
        assert unwrap_workflow_output({"summary": "ok"}) == {"summary": "ok"}

    def test_output_string(self) -> None:
        payload = {"output": 'Sure! {"summary": "ok"}'}

        assert unwrap_workflow_output(payload) == {"summary": "ok"}

    def test_output_object(self) -> None:
        payload = {"output": {"summary": "ok"}}

        assert unwrap_workflow_output(payload) == {"summary": "ok"}

    def test_array_with_output(self) -> None:
        payload = [{"output": '{"summary": "ok"}'}]

        assert unwrap_workflow_output(payload) == {"summary": "ok"}

    def test_array_with_body(self) -> None:
        payload = [{"body": '{"summary": "ok"}'}]

        assert unwrap_workflow_output(payload) == {"summary": "ok"}

    def test_array_with_plan(self) -> None:
        payload = [{"summary": "ok"}, {"summary": "ignored"}]

        assert unwrap_workflow_output(payload) == {"summary": "ok"}

    def test_string_payload(self) -> None:
        assert unwrap_workflow_output('text {"summary": "ok"} text') == {"summary": "ok"}

    def test_falls_back_to_raw_text(self) -> None:
        payload = {"output": "no json in here"}
        raw_text = 'prefix {"summary": "from raw"} suffix'

        assert unwrap_workflow_output(payload, raw_text) == {"summary": "from raw"}

    def test_envelope_kept_when_output_has_no_json(self) -> None:
        payload = {"output": "Agent stopped due to max iterations."}
        raw_text = '{"output": "Agent stopped due to max iterations."}'

        assert unwrap_workflow_output(payload, raw_text) == payload

    def test_nothing_usable(self) -> None:
        assert unwrap_workflow_output("plain text", "plain text") is None
        assert unwrap_workflow_output([], "") is None
        assert unwrap_workflow_output(["a", "b"]) is None
        assert unwrap_workflow_output({}) is None

    def test_output_holding_array_envelope(self) -> None:
        payload = {"output": '[{"output": "{\\"summary\\": \\"deep\\"}"}]'}

        assert unwrap_workflow_output(payload) == {"summary": "deep"}
