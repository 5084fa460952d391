"""PlanWise - AI plan normalization backend for caregiver observation notes."""

__version__ = "0.1.0"
