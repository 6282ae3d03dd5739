"""
Pytest configuration and fixtures for testing.

Every test gets its own application bound to a fresh in-memory SQLite
database. Rows are created through ``factory`` (which returns ids, since
objects detach once its app context closes) and requests go through
``client``; ``login_as`` puts a user into the client's session the way
Flask-Login stores it.
"""
import os
from datetime import datetime, timedelta

import pytest

os.environ['FLASK_ENV'] = 'testing'
os.environ['SECRET_KEY'] = 'test-secret-key-for-quizhub'
os.environ['DATABASE_URL'] = 'sqlite:///:memory:'

from quizhub import create_app, db
from quizhub.auth.models import User
from quizhub.auth.utils import hash_password
from quizhub.common.access import Role
from quizhub.quiz.models import AttemptStatus, Question, Quiz, QuizAttempt, QuizStatus, QuizUser


BASE_TIME = datetime(2025, 1, 1, 12, 0, 0)


class Factory:
    """Creates rows in the test database and returns their ids."""

    def __init__(self, app):
        self.app = app
        self._counter = 0

    def _tick(self) -> datetime:
        self._counter += 1
        return BASE_TIME + timedelta(minutes=self._counter)

    def user(self, role=Role.USER, email=None, password=None) -> int:
        with self.app.app_context():
            self._counter += 1
            user = User(
                email=email or f"user{self._counter}@test.com",
                full_name=f"Test User {self._counter}",
                role=role,
                # Hashing is slow; only do it for users that log in for real
                password_hash=hash_password(password) if password else "!",
            )
            db.session.add(user)
            db.session.commit()
            return user.id

    def quiz(self, title="Quiz", status=QuizStatus.ACTIVE, max_attempts=None,
             assigned_to=(), questions=0, created_at=None) -> int:
        with self.app.app_context():
            quiz = Quiz(
                title=title,
                status=status,
                max_attempts=max_attempts,
                created_at=created_at or self._tick(),
            )
            for user_id in assigned_to:
                quiz.assignments.append(QuizUser(user_id=user_id))
            db.session.add(quiz)
            db.session.flush()
            for index in range(questions):
                db.session.add(Question(quiz_id=quiz.id, question_text=f"Q{index + 1}", order_index=index))
            db.session.commit()
            return quiz.id

    def attempt(self, user_id, quiz_id, status=AttemptStatus.SUBMITTED, created_at=None, score=None) -> int:
        with self.app.app_context():
            attempt = QuizAttempt(
                user_id=user_id,
                quiz_id=quiz_id,
                status=status,
                created_at=created_at or self._tick(),
                score=score,
            )
            if status == AttemptStatus.SUBMITTED:
                attempt.submitted_at = attempt.created_at
            db.session.add(attempt)
            db.session.commit()
            return attempt.id


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app()
    app.config['TESTING'] = True
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def factory(app):
    return Factory(app)


@pytest.fixture
def login_as(client):
    """Return a function that logs ``client`` in as the given user id."""
    def _login(user_id):
        with client.session_transaction() as sess:
            sess['_user_id'] = str(user_id)
            sess['_fresh'] = True
        return client
    return _login


@pytest.fixture
def admin_client(factory, login_as):
    return login_as(factory.user(role=Role.ADMIN))


@pytest.fixture
def user_id(factory):
    return factory.user(role=Role.USER)


@pytest.fixture
def user_client(user_id, login_as):
    return login_as(user_id)
