"""PlanWise exception hierarchy."""


class PlanwiseError(Exception):
    """Base exception for PlanWise failures surfaced to API callers."""


class MissingInputError(PlanwiseError):
    """The request has neither a text note nor an audio URL."""


class UnparseableOutputError(PlanwiseError):
    """The workflow answered, but no JSON object could be recovered."""

    def __init__(self, raw_text: str, used_curriculum: bool = False):
        super().__init__("workflow response not parseable as JSON")
        self.raw_text = raw_text
        self.used_curriculum = used_curriculum
