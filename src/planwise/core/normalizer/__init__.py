"""JSON Normalizer - Extract JSON from workflow output."""

from planwise.core.normalizer.normalizer import (
    JSONNormalizer,
    NormalizerResult,
    extract_json,
    unwrap_workflow_output,
)

__all__ = ["JSONNormalizer", "NormalizerResult", "extract_json", "unwrap_workflow_output"]
