"""
Duet Backend — API Routes Package
===================================

Route Inventory:
    - health.py:         GET  /health
    - users.py:          /api/users ...
    - relationships.py:  /api/relationships ...
    - content.py:        /api/categories, /api/topics, /api/sub-topics, /api/questions
    - user_answers.py:   /api/user-answers ...
    - journals.py:       /api/journals ..., /api/journal-create
    - progress.py:       /api/user-progress/...
    - streaks.py:        /api/streak/...
    - results.py:        /api/results/...
    - home.py:           /api/home, /api/home/random-subtopics, /api/daily-questions

Routes stay thin: parse the request, call one service method, wrap the
result in the `{"success": true, "data": ...}` envelope. Errors are raised
as DuetError subclasses and rendered by the handlers in main.py.
"""

from typing import Any, Dict

from app.schemas.common import ErrorResponse

_ERROR_DESCRIPTIONS = {
    400: "Invalid request",
    404: "Not found",
    409: "Conflicts with an existing resource",
    422: "Request failed schema validation",
    500: "Server error",
}


def error_responses(*codes: int) -> Dict[int, Dict[str, Any]]:
    """OpenAPI `responses=` entries for the given error status codes."""
    return {
        code: {"description": _ERROR_DESCRIPTIONS[code], "model": ErrorResponse}
        for code in codes
    }
