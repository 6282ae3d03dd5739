"""
Quiz persistence.

``QuizStore`` is the only place that queries quizzes, assignments and
attempts. Database errors leave it as ``StoreFailure`` (the session is rolled
back first) and unknown quiz ids as ``QuizNotFound``.
"""
from contextlib import contextmanager

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from quizhub import db
from quizhub.auth.models import User
from quizhub.common.access import Role
from quizhub.common.errors import QuizNotFound, StoreFailure, ValidationError
from quizhub.quiz.models import Quiz, QuizAttempt, QuizStatus, QuizUser


class QuizStore:

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    @contextmanager
    def _store_errors(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreFailure(f"Failed to {action}") from e

    # ---- user side (read only) ----

    def find_quizzes_visible_to(self, user_id: int) -> list[Quiz]:
        """
        Active quizzes the user may see, newest first.

        A quiz is visible when it has no assignments, when the user is
        assigned to it, or when the user already has an attempt on it.
        """
        with self._store_errors("load quizzes"):
            return (
                self.session.query(Quiz)
                .filter(Quiz.status == QuizStatus.ACTIVE)
                .filter(or_(
                    ~Quiz.assignments.any(),
                    Quiz.assignments.any(QuizUser.user_id == user_id),
                    Quiz.attempts.any(QuizAttempt.user_id == user_id),
                ))
                .order_by(Quiz.created_at.desc(), Quiz.id.desc())
                .all()
            )

    def find_attempts(self, user_id: int, quiz_id: int) -> list[QuizAttempt]:
        with self._store_errors("load attempts"):
            return (
                self.session.query(QuizAttempt)
                .filter_by(user_id=user_id, quiz_id=quiz_id)
                .order_by(QuizAttempt.created_at.desc(), QuizAttempt.id.desc())
                .all()
            )

    def find_latest_attempt(self, user_id: int, quiz_id: int):
        """Most recent attempt of any status, or None."""
        with self._store_errors("load latest attempt"):
            return (
                self.session.query(QuizAttempt)
                .filter_by(user_id=user_id, quiz_id=quiz_id)
                .order_by(QuizAttempt.created_at.desc(), QuizAttempt.id.desc())
                .first()
            )

    # ---- admin side ----

    def list_quizzes(self) -> list[Quiz]:
        with self._store_errors("load quizzes"):
            return self.session.query(Quiz).order_by(Quiz.created_at.desc(), Quiz.id.desc()).all()

    def get_quiz(self, quiz_id: int) -> Quiz:
        with self._store_errors("load quiz"):
            quiz = self.session.get(Quiz, quiz_id)
        if quiz is None:
            raise QuizNotFound()
        return quiz

    def create_quiz(self, fields: dict, created_by: int = None) -> Quiz:
        quiz = Quiz(created_by=created_by, **fields)
        with self._store_errors("create quiz"):
            self.session.add(quiz)
            self.session.commit()
        return quiz

    def update_quiz(self, quiz_id: int, fields: dict) -> Quiz:
        quiz = self.get_quiz(quiz_id)
        with self._store_errors("update quiz"):
            for name, value in fields.items():
                setattr(quiz, name, value)
            self.session.commit()
        return quiz

    def delete_quiz(self, quiz_id: int) -> None:
        quiz = self.get_quiz(quiz_id)
        with self._store_errors("delete quiz"):
            self.session.delete(quiz)
            self.session.commit()

    def assign_users(self, quiz_id: int, user_ids: list[int]) -> Quiz:
        """Replace the quiz's assignment list. An empty list opens the quiz to everyone."""
        quiz = self.get_quiz(quiz_id)
        wanted = set(user_ids)
        with self._store_errors("assign users"):
            found = {
                row.id for row in
                self.session.query(User.id).filter(User.id.in_(sorted(wanted)), User.role == Role.USER)
            } if wanted else set()
            missing = wanted - found
            if missing:
                raise ValidationError(f"Unknown user ids: {', '.join(str(i) for i in sorted(missing))}")

            current = {a.user_id: a for a in quiz.assignments}
            for user_id, assignment in current.items():
                if user_id not in wanted:
                    quiz.assignments.remove(assignment)
            for user_id in sorted(wanted - current.keys()):
                quiz.assignments.append(QuizUser(user_id=user_id))
            self.session.commit()
        return quiz
