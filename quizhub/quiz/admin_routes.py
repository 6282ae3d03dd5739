"""
Admin routes for quiz management.

Admins can:
- List, create, view, update and delete quizzes
- Restrict a quiz to an explicit list of users
"""
import math
from datetime import datetime

from flask import jsonify, request, current_app
from flask_login import current_user

from quizhub import db
from quizhub.common.decorators import admin_required
from quizhub.common.errors import QuizHubError, ValidationError, error_response
from quizhub.quiz import admin_quiz_bp
from quizhub.quiz.models import DifficultyLevel, QuizStatus
from quizhub.quiz.serializers import quiz_to_dict
from quizhub.quiz.store import QuizStore


def _text(value, name):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string")
    return value.strip() or None


def _flag(value, name):
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be true or false")
    return value


def _optional_int(value, name):
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a whole number")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{name} must be a whole number")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{name} must be a whole number")
    if number < 0:
        raise ValidationError(f"{name} cannot be negative")
    return number


def _choice(value, name, allowed, default):
    if not value:
        return default
    if value not in allowed:
        raise ValidationError(f"Invalid {name}. Must be one of: {', '.join(allowed)}")
    return value


def _points(value):
    if value is None or value == '':
        return 0.5
    if isinstance(value, bool):
        raise ValidationError("negativePoints must be a number")
    try:
        points = float(value)
    except (TypeError, ValueError):
        raise ValidationError("negativePoints must be a number")
    if not math.isfinite(points):
        raise ValidationError("negativePoints must be a finite number")
    return points


def _timestamp(value, name):
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        raise ValidationError(f"{name} must be an ISO-8601 date")


# Request key -> (model attribute, parser). Parsers also supply the create defaults.
FIELD_PARSERS = {
    'title': ('title', lambda v: _text(v, 'title')),
    'description': ('description', lambda v: _text(v, 'description')),
    'timeLimit': ('time_limit', lambda v: _optional_int(v, 'timeLimit')),
    'difficulty': ('difficulty', lambda v: _choice(v, 'difficulty', DifficultyLevel.ALL, DifficultyLevel.MEDIUM)),
    'status': ('status', lambda v: _choice(v, 'status', QuizStatus.ALL, QuizStatus.ACTIVE)),
    'negativeMarking': ('negative_marking', lambda v: _flag(v, 'negativeMarking')),
    'negativePoints': ('negative_points', _points),
    'randomOrder': ('random_order', lambda v: _flag(v, 'randomOrder')),
    'maxAttempts': ('max_attempts', lambda v: _optional_int(v, 'maxAttempts')),
    'startTime': ('start_time', lambda v: _timestamp(v, 'startTime')),
    'endTime': ('end_time', lambda v: _timestamp(v, 'endTime')),
}


def parse_quiz_fields(data: dict, partial: bool) -> dict:
    """
    Turn a camelCase request body into model attributes.

    With ``partial`` only the keys present in ``data`` are returned (update).
    Otherwise every field is returned, missing ones taking their defaults (create).
    """
    fields = {}
    for key, (attribute, parse) in FIELD_PARSERS.items():
        if partial and key not in data:
            continue
        fields[attribute] = parse(data.get(key))

    if ('title' in fields or not partial) and not fields.get('title'):
        raise ValidationError("Quiz title is required")
    return fields


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _failure(action: str, error: Exception):
    """Log a failed admin operation and build its response."""
    if isinstance(error, QuizHubError):
        if error.status_code >= 500:
            current_app.logger.exception(f"Error {action}")
        else:
            current_app.logger.warning(f"Rejected {action}: {error.message}")
        return error.to_response()
    current_app.logger.exception(f"Error {action}")
    db.session.rollback()
    return error_response("Internal server error", 500)


@admin_quiz_bp.route('', methods=['GET'])
@admin_required
def list_quizzes():
    """List every quiz, newest first."""
    try:
        quizzes = QuizStore().list_quizzes()
        return jsonify([quiz_to_dict(quiz) for quiz in quizzes]), 200
    except Exception as e:
        return _failure("listing quizzes", e)


@admin_quiz_bp.route('', methods=['POST'])
@admin_required
def create_quiz():
    """
    Create a quiz.

    Request body:
    {
        "title": "Quiz Title",
        "description": "Optional description",
        "timeLimit": 30,             // Optional, minutes
        "difficulty": "MEDIUM",      // Optional, EASY | MEDIUM | HARD
        "status": "ACTIVE",          // Optional, DRAFT | ACTIVE | CLOSED
        "negativeMarking": false,
        "negativePoints": 0.5,
        "randomOrder": false,
        "maxAttempts": 3,            // Optional, null or "" for unlimited
        "startTime": "2025-01-01T09:00:00",
        "endTime": null
    }
    """
    try:
        fields = parse_quiz_fields(_json_body(), partial=False)
        quiz = QuizStore().create_quiz(fields, created_by=current_user.id)
        current_app.logger.info(f"Quiz created: ID={quiz.id}, Title={quiz.title}, by user {current_user.id}")
        return jsonify(quiz_to_dict(quiz, include_assignments=True)), 201
    except Exception as e:
        return _failure("creating quiz", e)


@admin_quiz_bp.route('/<int:quiz_id>', methods=['GET'])
@admin_required
def get_quiz(quiz_id):
    """Get one quiz with its question/attempt counts and assigned users."""
    try:
        quiz = QuizStore().get_quiz(quiz_id)
        return jsonify(quiz_to_dict(quiz, include_assignments=True)), 200
    except Exception as e:
        return _failure(f"fetching quiz {quiz_id}", e)


@admin_quiz_bp.route('/<int:quiz_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_quiz(quiz_id):
    """Update the quiz fields present in the request body."""
    try:
        fields = parse_quiz_fields(_json_body(), partial=True)
        quiz = QuizStore().update_quiz(quiz_id, fields)
        current_app.logger.info(f"Quiz updated: ID={quiz.id}, fields={sorted(fields)}")
        return jsonify(quiz_to_dict(quiz, include_assignments=True)), 200
    except Exception as e:
        return _failure(f"updating quiz {quiz_id}", e)


@admin_quiz_bp.route('/<int:quiz_id>', methods=['DELETE'])
@admin_required
def delete_quiz(quiz_id):
    """Delete a quiz together with its questions, attempts and assignments."""
    try:
        QuizStore().delete_quiz(quiz_id)
        current_app.logger.info(f"Quiz deleted: ID={quiz_id}")
        return jsonify({'message': 'Quiz deleted successfully'}), 200
    except Exception as e:
        return _failure(f"deleting quiz {quiz_id}", e)


@admin_quiz_bp.route('/<int:quiz_id>/users', methods=['PUT'])
@admin_required
def assign_quiz_users(quiz_id):
    """
    Replace the users a quiz is restricted to.

    Request body: {"userIds": [2, 5]}. An empty list opens the quiz to all users.
    """
    try:
        user_ids = _json_body().get('userIds')
        if not isinstance(user_ids, list) or any(
            isinstance(i, bool) or not isinstance(i, int) for i in user_ids
        ):
            raise ValidationError("userIds must be a list of user ids")
        quiz = QuizStore().assign_users(quiz_id, user_ids)
        current_app.logger.info(f"Quiz {quiz_id} assigned to users {quiz.assigned_user_ids()}")
        return jsonify(quiz_to_dict(quiz, include_assignments=True)), 200
    except Exception as e:
        return _failure(f"assigning users to quiz {quiz_id}", e)
