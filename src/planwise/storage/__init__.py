"""PlanWise Storage Layer - Assessment records."""

from planwise.storage.assessments import AssessmentsStore, normalize_arabic_name

__all__ = ["AssessmentsStore", "normalize_arabic_name"]
