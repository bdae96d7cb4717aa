"""Coaching prompt context and service wrapper."""

from .context_builder import build_coach_context
from .coach import CoachService, CompletionFn

__all__ = ["build_coach_context", "CoachService", "CompletionFn"]
