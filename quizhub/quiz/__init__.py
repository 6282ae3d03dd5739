"""
Quiz module.

Administrators manage quizzes through the admin API; users list the quizzes
they can see, with their attempt history and whether they may attempt again.
"""
from flask import Blueprint
from quizhub.config import config

admin_quiz_bp = Blueprint('admin_quiz', __name__, url_prefix=config.ADMIN_QUIZ_API_PREFIX)
user_quiz_bp = Blueprint('user_quiz', __name__, url_prefix=config.USER_QUIZ_API_PREFIX)

from quizhub.quiz import admin_routes  # noqa: E402,F401
from quizhub.quiz import user_routes  # noqa: E402,F401
