"""
Test cases for QuizStore queries against the database.
"""
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from quizhub.common.access import Role
from quizhub.common.errors import QuizNotFound, StoreFailure, ValidationError
from quizhub.quiz.models import AttemptStatus, QuizStatus
from quizhub.quiz.store import QuizStore


def visible_ids(app, user_id):
    with app.app_context():
        return [quiz.id for quiz in QuizStore().find_quizzes_visible_to(user_id)]


class TestVisibility:
    """Test cases for find_quizzes_visible_to."""

    @pytest.mark.parametrize("status", [QuizStatus.DRAFT, QuizStatus.CLOSED])
    def test_inactive_quizzes_are_hidden(self, app, factory, status):
        user_id = factory.user()
        quiz_id = factory.quiz(status=status)
        # Not even an assignment or an attempt makes an inactive quiz visible
        factory.quiz(status=status, assigned_to=[user_id])
        factory.attempt(user_id, quiz_id)
        assert visible_ids(app, user_id) == []

    def test_unrestricted_quiz_is_visible_to_every_user(self, app, factory):
        quiz_id = factory.quiz()
        for _ in range(3):
            assert visible_ids(app, factory.user()) == [quiz_id]

    def test_restricted_quiz_is_visible_to_assigned_user(self, app, factory):
        assigned = factory.user()
        quiz_id = factory.quiz(assigned_to=[assigned])
        assert visible_ids(app, assigned) == [quiz_id]

    def test_restricted_quiz_is_hidden_from_others(self, app, factory):
        assigned = factory.user()
        outsider = factory.user()
        factory.quiz(assigned_to=[assigned])
        assert visible_ids(app, outsider) == []

    def test_restricted_quiz_is_visible_after_an_attempt(self, app, factory):
        assigned = factory.user()
        outsider = factory.user()
        quiz_id = factory.quiz(assigned_to=[assigned])
        factory.attempt(outsider, quiz_id, status=AttemptStatus.IN_PROGRESS)
        assert visible_ids(app, outsider) == [quiz_id]

    def test_other_users_attempts_do_not_grant_visibility(self, app, factory):
        assigned = factory.user()
        outsider = factory.user()
        quiz_id = factory.quiz(assigned_to=[assigned])
        factory.attempt(assigned, quiz_id)
        assert visible_ids(app, outsider) == []

    def test_newest_quiz_first(self, app, factory):
        user_id = factory.user()
        first = factory.quiz(title="first")
        second = factory.quiz(title="second")
        third = factory.quiz(title="third")
        assert visible_ids(app, user_id) == [third, second, first]


class TestAttempts:
    """Test cases for find_attempts and find_latest_attempt."""

    def test_attempts_are_scoped_to_user_and_quiz(self, app, factory):
        user_id = factory.user()
        other_user = factory.user()
        quiz_id = factory.quiz()
        other_quiz = factory.quiz()
        mine = factory.attempt(user_id, quiz_id)
        factory.attempt(other_user, quiz_id)
        factory.attempt(user_id, other_quiz)

        with app.app_context():
            assert [a.id for a in QuizStore().find_attempts(user_id, quiz_id)] == [mine]

    def test_latest_attempt_ignores_status(self, app, factory):
        user_id = factory.user()
        quiz_id = factory.quiz()
        factory.attempt(user_id, quiz_id, status=AttemptStatus.SUBMITTED)
        latest = factory.attempt(user_id, quiz_id, status=AttemptStatus.IN_PROGRESS)

        with app.app_context():
            assert QuizStore().find_latest_attempt(user_id, quiz_id).id == latest

    def test_latest_attempt_is_none_without_attempts(self, app, factory):
        user_id = factory.user()
        quiz_id = factory.quiz()
        with app.app_context():
            assert QuizStore().find_latest_attempt(user_id, quiz_id) is None


class TestAdminOperations:
    """Test cases for the write side of the store."""

    def test_get_missing_quiz_raises_not_found(self, app):
        with app.app_context():
            with pytest.raises(QuizNotFound):
                QuizStore().get_quiz(404)

    def test_update_missing_quiz_raises_not_found(self, app):
        with app.app_context():
            with pytest.raises(QuizNotFound):
                QuizStore().update_quiz(404, {'title': 'x'})

    def test_delete_cascades_attempts_and_assignments(self, app, factory):
        from quizhub import db
        from quizhub.quiz.models import QuizAttempt, QuizUser

        user_id = factory.user()
        quiz_id = factory.quiz(assigned_to=[user_id], questions=2)
        factory.attempt(user_id, quiz_id)

        with app.app_context():
            QuizStore().delete_quiz(quiz_id)
            assert db.session.query(QuizAttempt).count() == 0
            assert db.session.query(QuizUser).count() == 0

    def test_assign_users_replaces_the_list(self, app, factory):
        a, b, c = factory.user(), factory.user(), factory.user()
        quiz_id = factory.quiz(assigned_to=[a, b])

        with app.app_context():
            quiz = QuizStore().assign_users(quiz_id, [b, c])
            assert quiz.assigned_user_ids() == sorted([b, c])

    def test_assign_empty_list_opens_quiz(self, app, factory):
        a, outsider = factory.user(), factory.user()
        quiz_id = factory.quiz(assigned_to=[a])

        with app.app_context():
            QuizStore().assign_users(quiz_id, [])
        assert visible_ids(app, outsider) == [quiz_id]

    def test_assign_rejects_unknown_and_admin_ids(self, app, factory):
        admin_id = factory.user(role=Role.ADMIN)
        quiz_id = factory.quiz()

        with app.app_context():
            with pytest.raises(ValidationError) as exc:
                QuizStore().assign_users(quiz_id, [admin_id, 9999])
            assert str(admin_id) in exc.value.message
            assert "9999" in exc.value.message


class TestStoreFailure:
    """Database errors leave the store as StoreFailure."""

    def test_query_error_becomes_store_failure(self):
        session = Mock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))
        store = QuizStore(session)

        with pytest.raises(StoreFailure) as exc:
            store.find_quizzes_visible_to(1)

        assert isinstance(exc.value.__cause__, OperationalError)
        session.rollback.assert_called_once()

    def test_store_failure_response_is_generic(self, app):
        with app.test_request_context():
            response, status = StoreFailure("Failed to load attempts").to_response()
        assert status == 500
        assert response.get_json() == {'message': 'Internal server error'}
