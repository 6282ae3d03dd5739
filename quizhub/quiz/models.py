"""
Database models for quiz functionality.

A quiz is open to every user unless it has rows in ``quiz_users``, in which
case only the listed users (and anyone who already attempted it) can see it.
"""
from datetime import datetime
from quizhub import db


class QuizStatus:
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"

    ALL = (DRAFT, ACTIVE, CLOSED)


class DifficultyLevel:
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"

    ALL = (EASY, MEDIUM, HARD)


class AttemptStatus:
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"

    ALL = (IN_PROGRESS, SUBMITTED)


class Quiz(db.Model):
    """
    Model for quizzes managed by administrators.

    ``max_attempts`` is nullable: NULL means the number of submitted attempts
    is unlimited.
    """
    __tablename__ = "quizzes"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    time_limit = db.Column(db.Integer, nullable=True)  # Minutes
    difficulty = db.Column(db.String(20), nullable=False, default=DifficultyLevel.MEDIUM)
    status = db.Column(db.String(20), nullable=False, default=QuizStatus.ACTIVE, index=True)
    negative_marking = db.Column(db.Boolean, nullable=False, default=False)
    negative_points = db.Column(db.Float, nullable=False, default=0.5)
    random_order = db.Column(db.Boolean, nullable=False, default=False)
    max_attempts = db.Column(db.Integer, nullable=True)
    start_time = db.Column(db.DateTime, nullable=True)
    end_time = db.Column(db.DateTime, nullable=True)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    assignments = db.relationship("QuizUser", backref="quiz", cascade="all, delete-orphan")
    questions = db.relationship("Question", backref="quiz", lazy="dynamic", cascade="all, delete-orphan", order_by="Question.order_index")
    attempts = db.relationship("QuizAttempt", backref="quiz", lazy="dynamic", cascade="all, delete-orphan")

    __table_args__ = (
        db.Index('ix_quizzes_status_created', 'status', 'created_at'),
    )

    def __repr__(self) -> str:
        return f"<Quiz {self.id}: {self.title}>"

    def get_question_count(self) -> int:
        return self.questions.count()

    def get_attempt_count(self) -> int:
        """Attempts by all users, any status."""
        return self.attempts.count()

    def assigned_user_ids(self) -> list[int]:
        return sorted(a.user_id for a in self.assignments)


class QuizUser(db.Model):
    """Explicit grant of a quiz to a user."""
    __tablename__ = "quiz_users"

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id", ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='CASCADE'), nullable=False, index=True)
    assigned_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", foreign_keys=[user_id])

    __table_args__ = (
        db.UniqueConstraint('quiz_id', 'user_id', name='uq_quiz_user'),
    )

    def __repr__(self) -> str:
        return f"<QuizUser quiz={self.quiz_id} user={self.user_id}>"


class Question(db.Model):
    """Quiz question. Only counted here; authoring happens elsewhere."""
    __tablename__ = "quiz_questions"

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id", ondelete='CASCADE'), nullable=False, index=True)
    question_text = db.Column(db.Text, nullable=False)
    points = db.Column(db.Numeric(5, 2), nullable=False, default=1.0)
    order_index = db.Column(db.Integer, nullable=False, default=0, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.Index('ix_quiz_questions_quiz_order', 'quiz_id', 'order_index'),
    )

    def __repr__(self) -> str:
        return f"<Question {self.id}: quiz {self.quiz_id}>"


class QuizAttempt(db.Model):
    """
    Model for tracking user quiz attempts.
    """
    __tablename__ = "quiz_attempts"

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id", ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='CASCADE'), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=AttemptStatus.IN_PROGRESS, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    submitted_at = db.Column(db.DateTime, nullable=True)
    score = db.Column(db.Numeric(5, 2), nullable=True)  # Percentage score

    # Relationships
    user = db.relationship("User", foreign_keys=[user_id], backref="quiz_attempts")

    __table_args__ = (
        db.Index('ix_quiz_attempts_quiz_user', 'quiz_id', 'user_id'),
        db.Index('ix_quiz_attempts_user_status', 'user_id', 'status'),
    )

    def __repr__(self) -> str:
        return f"<QuizAttempt {self.id}: User {self.user_id}, Quiz {self.quiz_id}, {self.status}>"
