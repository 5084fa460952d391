"""
JSON Normalizer - Extract JSON from workflow/model output.

The upstream workflow is asked for JSON only, but it frequently wraps the
object in prose or in its own envelope ({output: ...}, [{output: ...}]).

Flow:
1. Try direct JSON parse
2. Take the widest {...} span in the text and parse that
3. Give up (the caller supplies a fallback)
"""

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class NormalizerResult:
    """Result of JSON extraction attempt."""

    success: bool
    data: Any = None
    error: str | None = None
    repairs_applied: list[str] | None = None


class JSONNormalizer:
    """Extract a JSON value from raw model output."""

    # Greedy: first "{" to last "}". With several top-level objects the
    # span covers all of them and fails to parse.
    JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

    # Envelope nesting the workflow is known to produce is at most
    # array -> {output: "<json text>"} -> plan
    MAX_UNWRAP_DEPTH = 4

    def normalize(self, raw_output: Any) -> NormalizerResult:
        """
        Attempt to extract a JSON value from raw model output.

        Args:
            raw_output: Raw string output from the workflow

        Returns:
            NormalizerResult with success status and parsed data or error
        """
        if not isinstance(raw_output, str) or not raw_output:
            return NormalizerResult(success=False, error="Empty or non-string input")

        # Step 1: Try direct parse
        result = self._try_parse(raw_output)
        if result.success:
            return result

        # Step 2: Find JSON object span in text
        extracted = self._find_json_structure(raw_output)
        if extracted is None:
            return NormalizerResult(success=False, error=result.error)

        result = self._try_parse(extracted)
        if result.success:
            result.repairs_applied = ["extracted_json_structure"]
            return result

        return NormalizerResult(
            success=False,
            error=f"Failed to extract JSON: {result.error}",
            repairs_applied=["extracted_json_structure"],
        )

    def unwrap(self, payload: Any, raw_text: str | None = None) -> dict[str, Any] | None:
        """
        Resolve the plan object out of a workflow response.

        Handles the shapes the workflow returns:
        - {"output": "<json text>"} or {"output": {...}}
        - [{"output": ...}] / [{"body": "<json text>"}] / [{...plan...}]
        - a bare plan object
        - a string holding JSON (possibly wrapped in prose)

        Falls back to extracting from the raw response text, and finally to
        the parsed top-level object of that text even when it holds no plan.

        Returns:
            The plan object, or None when nothing usable was found
        """
        plan = self._resolve(payload, depth=0)
        if plan is None and raw_text:
            plan = self._resolve(raw_text, depth=0)
        if plan is None and raw_text:
            # Keep the envelope itself, e.g. {"output": "<prose>"}
            plan = self._top_level_object(raw_text)
        if plan is None:
            logger.warning("Workflow response holds no JSON object")
        return plan

    def _resolve(self, value: Any, depth: int) -> dict[str, Any] | None:
        if depth > self.MAX_UNWRAP_DEPTH:
            return None

        if isinstance(value, str):
            result = self.normalize(value)
            if not result.success:
                return None
            return self._resolve(result.data, depth + 1)

        if isinstance(value, Mapping):
            output = value.get("output")
            if isinstance(output, (str, Mapping)) and output:
                return self._resolve(output, depth + 1)
            return dict(value) if value else None

        if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            first = value[0] if value else None
            if not isinstance(first, Mapping):
                return None
            if first.get("output"):
                return self._resolve(first["output"], depth + 1)
            if isinstance(first.get("body"), str):
                return self._resolve(first["body"], depth + 1)
            return dict(first) if first else None

        return None

    def _top_level_object(self, text: str) -> dict[str, Any] | None:
        result = self.normalize(text)
        if result.success and isinstance(result.data, Mapping):
            return dict(result.data)
        return None

    def _try_parse(self, text: str) -> NormalizerResult:
        """Attempt to parse text as JSON."""
        try:
            return NormalizerResult(success=True, data=json.loads(text))
        except (json.JSONDecodeError, RecursionError) as e:
            return NormalizerResult(success=False, error=str(e))

    def _find_json_structure(self, text: str) -> str | None:
        """Find the widest JSON object span in text."""
        match = self.JSON_OBJECT_PATTERN.search(text)
        if match:
            return match.group()
        return None


_default_normalizer = JSONNormalizer()


def extract_json(text: Any) -> Any:
    """Parsed JSON value found in `text`, or None."""
    return _default_normalizer.normalize(text).data


def unwrap_workflow_output(payload: Any, raw_text: str | None = None) -> dict[str, Any] | None:
    """Plan object found in a workflow response, or None."""
    return _default_normalizer.unwrap(payload, raw_text)
