"""Shared request helpers for the JSON API blueprints."""

from typing import Any, Dict, Optional

import bleach
from flask import current_app, request
from werkzeug.exceptions import BadRequest

from services.quote_service import QuoteService


# Maximum lengths for free-text fields
MAX_NAME_LENGTH = 120


def sanitize_text(text: Any, max_length: Optional[int] = MAX_NAME_LENGTH) -> str:
    """Sanitize user input text."""
    if not text:
        return ""
    text = str(text).strip()
    text = bleach.clean(text, tags=[], strip=True)
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def json_body() -> Dict[str, Any]:
    """
    Return the request's JSON object.

    Raises:
        BadRequest: If the body is missing, malformed or not an object
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def get_quote_service() -> QuoteService:
    return current_app.config["QUOTE_SERVICE"]
