"""PlanWise Engine - Analysis pipeline."""

from planwise.engine.analyzer import Analyzer

__all__ = ["Analyzer"]
