"""JSON shapes for quizzes and attempts. Keys are camelCase to match the web client."""


def _isoformat(value):
    return value.isoformat() if value else None


def quiz_to_dict(quiz, include_assignments: bool = False) -> dict:
    data = {
        'id': quiz.id,
        'title': quiz.title,
        'description': quiz.description,
        'timeLimit': quiz.time_limit,
        'difficulty': quiz.difficulty,
        'status': quiz.status,
        'negativeMarking': quiz.negative_marking,
        'negativePoints': quiz.negative_points,
        'randomOrder': quiz.random_order,
        'maxAttempts': quiz.max_attempts,
        'startTime': _isoformat(quiz.start_time),
        'endTime': _isoformat(quiz.end_time),
        'createdBy': quiz.created_by,
        'createdAt': _isoformat(quiz.created_at),
        'updatedAt': _isoformat(quiz.updated_at),
        '_count': {
            'quizQuestions': quiz.get_question_count(),
            'quizAttempts': quiz.get_attempt_count(),
        },
    }
    if include_assignments:
        data['quizUsers'] = quiz.assigned_user_ids()
    return data


def attempt_to_dict(attempt) -> dict:
    return {
        'id': attempt.id,
        'quizId': attempt.quiz_id,
        'userId': attempt.user_id,
        'status': attempt.status,
        'score': float(attempt.score) if attempt.score is not None else None,
        'createdAt': _isoformat(attempt.created_at),
        'submittedAt': _isoformat(attempt.submitted_at),
    }
