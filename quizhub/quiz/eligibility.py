"""
Quiz visibility and attempt eligibility for the user quiz listing.

For every quiz a user can see, the listing reports the user's latest attempt,
how many attempts they have submitted, whether one is still in progress, and
whether they may start another one.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from quizhub.quiz.models import AttemptStatus
from quizhub.quiz.serializers import attempt_to_dict, quiz_to_dict


class AttemptLimit:
    """
    Upper bound on submitted attempts.

    ``AttemptLimit(None)`` is unlimited. Any integer, including 0, is a real
    bound and is compared numerically.
    """

    __slots__ = ("maximum",)

    def __init__(self, maximum: Optional[int]):
        self.maximum = maximum

    @property
    def unlimited(self) -> bool:
        return self.maximum is None

    def allows(self, submitted_count: int) -> bool:
        if self.unlimited:
            return True
        return submitted_count < self.maximum

    def __eq__(self, other):
        return isinstance(other, AttemptLimit) and other.maximum == self.maximum

    def __repr__(self) -> str:
        return "AttemptLimit(unlimited)" if self.unlimited else f"AttemptLimit({self.maximum})"


@dataclass(frozen=True)
class AttemptSummary:
    submitted_count: int
    has_active_attempt: bool
    can_take_quiz: bool


def summarize_attempts(attempts: Iterable, limit: AttemptLimit) -> AttemptSummary:
    """
    Derive a user's standing on one quiz from their attempts on it.

    Only submitted attempts use up the limit. An attempt still in progress
    blocks a new one no matter how much of the limit is left.
    """
    statuses = [attempt.status for attempt in attempts]
    submitted_count = statuses.count(AttemptStatus.SUBMITTED)
    has_active_attempt = AttemptStatus.IN_PROGRESS in statuses
    can_take_quiz = limit.allows(submitted_count) and not has_active_attempt
    return AttemptSummary(
        submitted_count=submitted_count,
        has_active_attempt=has_active_attempt,
        can_take_quiz=can_take_quiz,
    )


def resolve_user_quizzes(store, user_id: int) -> list[dict]:
    """
    Build the quiz listing for ``user_id``, newest quiz first.

    Reads through ``store`` only. Any store error propagates so the caller can
    fail the whole request instead of returning a partial list.
    """
    views = []
    for quiz in store.find_quizzes_visible_to(user_id):
        attempts = store.find_attempts(user_id, quiz.id)
        latest = store.find_latest_attempt(user_id, quiz.id)
        summary = summarize_attempts(attempts, AttemptLimit(quiz.max_attempts))

        view = quiz_to_dict(quiz)
        view.update({
            "userAttempt": attempt_to_dict(latest) if latest is not None else None,
            "userAttemptCount": summary.submitted_count,
            "hasActiveAttempt": summary.has_active_attempt,
            "canTakeQuiz": summary.can_take_quiz,
        })
        views.append(view)
    return views
