"""
User routes for quiz functionality.

Users can list the quizzes available to them together with their attempt
history and whether they may start a new attempt.
"""
from flask import jsonify, current_app
from flask_login import current_user

from quizhub import db
from quizhub.common.decorators import user_required
from quizhub.common.errors import QuizHubError, error_response
from quizhub.quiz import user_quiz_bp
from quizhub.quiz.eligibility import resolve_user_quizzes
from quizhub.quiz.store import QuizStore


@user_quiz_bp.route('', methods=['GET'])
@user_required
def list_user_quizzes():
    """
    List active quizzes visible to the current user, newest first.

    Each quiz carries userAttempt, userAttemptCount, hasActiveAttempt and
    canTakeQuiz for the caller.
    """
    user_id = current_user.id
    try:
        quizzes = resolve_user_quizzes(QuizStore(), user_id)
        current_app.logger.debug(f"list_user_quizzes: {len(quizzes)} quizzes for user {user_id}")
        return jsonify(quizzes), 200

    except QuizHubError as e:
        current_app.logger.exception(f"Error fetching user quizzes for user {user_id}")
        return e.to_response()
    except Exception:
        current_app.logger.exception(f"Error fetching user quizzes for user {user_id}")
        db.session.rollback()
        return error_response("Internal server error", 500)
