"""JSON generation endpoints.

Each handler accepts one JSON body, performs the completion call(s) and
answers with the generated text or ``{"error": ...}``. Provider rate limits
map to 429, exhausted credits to 402 and everything else to 500 carrying the
error text. Pre-flight ``OPTIONS`` requests are answered by Flask with an
empty body; Flask-CORS adds the cross-origin headers.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Dict

from flask import current_app, jsonify, request
from flask_login import current_user

from ..llm_client import UNKNOWN_ERROR_MESSAGE, GenerationError
from ..services.episode_generation import coerce_previous_episodes, generate_episode
from ..services.novel_generation import DEFAULT_GENRE, generate_novel
from ..services.story_coaching import coerce_episode_summaries, suggest_next_directions
from . import bp

LOGIN_REQUIRED_MESSAGE = "로그인이 필요합니다."


@bp.before_request
def require_session():
    if request.method == "OPTIONS":
        return None
    if not current_user.is_authenticated:
        return jsonify({"error": LOGIN_REQUIRED_MESSAGE}), 401
    return None


def json_function(name: str) -> Callable:
    """Map the errors raised by a handler onto JSON error responses."""

    def decorator(handler: Callable[[Dict[str, Any]], Dict[str, Any]]):
        @wraps(handler)
        def wrapper():
            try:
                payload = _read_payload()
                body = handler(payload)
            except GenerationError as exc:
                current_app.logger.error("Error in %s function: %s", name, exc)
                return jsonify({"error": str(exc)}), exc.status_code
            except Exception as exc:
                current_app.logger.exception("Error in %s function", name)
                return jsonify({"error": str(exc) or UNKNOWN_ERROR_MESSAGE}), 500
            return jsonify(body)

        return wrapper

    return decorator


@bp.route("/generate-episode", methods=["POST"])
@json_function("generate-episode")
def generate_episode_function(payload: Dict[str, Any]) -> Dict[str, Any]:
    result = generate_episode(
        _require_text(payload, "synopsis"),
        _require_int(payload, "episodeNumber"),
        payload.get("length"),
        direction=payload.get("direction") or None,
        previous_episodes=coerce_previous_episodes(payload.get("previousEpisodes")),
    )
    return {"episode": result.text}


@bp.route("/generate-novel", methods=["POST"])
@json_function("generate-novel")
def generate_novel_function(payload: Dict[str, Any]) -> Dict[str, Any]:
    result = generate_novel(
        _require_text(payload, "synopsis"),
        payload.get("episodeCount"),
        payload.get("length"),
        genre=payload.get("genre") or DEFAULT_GENRE,
    )
    return {"novel": result.novel}


@bp.route("/suggest-next", methods=["POST"])
@json_function("suggest-next")
def suggest_next_function(payload: Dict[str, Any]) -> Dict[str, Any]:
    suggestions = suggest_next_directions(
        _require_text(payload, "synopsis"),
        coerce_episode_summaries(payload.get("episodes")),
    )
    return {"suggestions": suggestions}


def _read_payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise GenerationError("Request body must be a JSON object.")
    return payload


def _require_text(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise GenerationError(f"{key} is required.")
    return value


def _require_int(payload: Dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise GenerationError(f"{key} must be an integer.")
    return value
