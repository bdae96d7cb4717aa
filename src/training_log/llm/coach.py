"""Coaching text service.

Text generation itself is an injected ``complete(system, prompt)`` callable;
this module only builds prompts and turns provider failures into friendly
fallback messages.
"""

import logging
from typing import Callable, List, Optional

from ..exceptions import CoachRateLimitError, CoachServiceError
from ..models.profile import UserProfile
from ..models.sessions import Session
from .context_builder import build_coach_context

logger = logging.getLogger(__name__)

CompletionFn = Callable[[str, str], str]

COACH_SYSTEM_PROMPT = (
    "You are an experienced endurance running coach. Be concise and specific, "
    "base every recommendation on the athlete's data and never recommend "
    "training through pain."
)

RATE_LIMIT_MESSAGE = "AI limit reached: the coach is taking a break. Please try again later."
UNAVAILABLE_MESSAGE = "Coaching service unavailable. Focus on consistency and recovery today."


class CoachService:
    """Generates coaching feedback through an injected completion function."""

    def __init__(self, complete: CompletionFn, system_prompt: str = COACH_SYSTEM_PROMPT):
        self._complete = complete
        self.system_prompt = system_prompt

    def _ask(self, prompt: str, fallback: str) -> str:
        try:
            text = self._complete(self.system_prompt, prompt)
        except CoachRateLimitError as e:
            logger.warning(f"Coach rate limited (retry after {e.retry_after}s)")
            return RATE_LIMIT_MESSAGE
        except CoachServiceError as e:
            logger.warning(f"Coach service error: {e.message}")
            return fallback
        return (text or "").strip() or fallback

    def analyze_session(self, session: Session, profile: Optional[UserProfile] = None) -> str:
        """Three-sentence feedback on one session."""
        context = build_coach_context(profile=profile, sessions=[session])
        prompt = (
            f"{context}\n\n"
            f"Session notes: {session.notes or 'none'}\n"
            "Give brief 3-sentence feedback on quality, pacing (relative to HR if "
            "available) and recovery needs."
        )
        return self._ask(prompt, "Could not generate analysis.")

    def weekly_insights(self, sessions: List[Session], profile: Optional[UserProfile] = None) -> str:
        """Key insights over the recent sessions plus one actionable tip."""
        context = build_coach_context(profile=profile, sessions=sessions)
        preferred = profile.preferred_race if profile else "5000m"
        prompt = (
            f"{context}\n\n"
            "Analyze the training trend over the last week: balance of intensity and "
            "volume, training load trend, heart rate response and signs of "
            f"overtraining. Is the athlete hitting the systems needed for the {preferred}?\n"
            "Answer with 3 key insights and 1 actionable tip for next week."
        )
        return self._ask(prompt, UNAVAILABLE_MESSAGE)

    def ask(self, question: str, context: str = "") -> str:
        """Free-form coaching question with optional prebuilt context."""
        prompt = f"{context}\n\nQuestion: {question}" if context else question
        return self._ask(prompt, UNAVAILABLE_MESSAGE)
