from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from flask import current_app

from ..llm_client import GenerationRequestError
from ..prompts import build_author_system_prompt, describe_length, render_user_prompt
from . import generation

DEFAULT_GENRE = "로맨스 판타지"
MIN_EPISODE_COUNT = 1
MAX_EPISODE_COUNT = 10
EPISODE_COUNT_MESSAGE = "에피소드 수는 1~10 사이로 입력해주세요."
ROLLING_CONTEXT_LENGTH = 500
NOVEL_SEPARATOR = "\n\n" + "=" * 50 + "\n\n"


@dataclass
class NovelGenerationResult:
    episodes: List[str] = field(default_factory=list)

    @property
    def novel(self) -> str:
        return NOVEL_SEPARATOR.join(self.episodes)


def coerce_episode_count(value: Any) -> int:
    """Return ``value`` as an episode count, rejecting anything outside 1..10."""

    if isinstance(value, bool):
        raise GenerationRequestError(EPISODE_COUNT_MESSAGE)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError as exc:
            raise GenerationRequestError(EPISODE_COUNT_MESSAGE) from exc
    if not isinstance(value, int):
        raise GenerationRequestError(EPISODE_COUNT_MESSAGE)
    if value < MIN_EPISODE_COUNT or value > MAX_EPISODE_COUNT:
        raise GenerationRequestError(EPISODE_COUNT_MESSAGE)
    return value


def generate_novel(
    synopsis: str,
    episode_count: Any,
    length: Optional[str],
    *,
    genre: str = DEFAULT_GENRE,
) -> NovelGenerationResult:
    """Generate ``episode_count`` consecutive episodes in one pass.

    Episodes are requested strictly one after another: each prompt carries a
    rolling context made of the first 500 characters of every earlier episode.
    """

    count = coerce_episode_count(episode_count)
    current_app.logger.info(
        "Generating novel: genre=%s episodes=%s length=%s", genre, count, length
    )

    system_prompt = build_author_system_prompt(length)
    result = NovelGenerationResult()
    previous_context = ""

    for number in range(1, count + 1):
        if number == 1:
            user_prompt = render_user_prompt(
                "novel_first_episode",
                episode_count=count,
                genre=genre,
                synopsis=synopsis,
            )
        else:
            user_prompt = render_user_prompt(
                "novel_next_episode",
                previous_number=number - 1,
                previous_context=previous_context,
                episode_number=number,
                synopsis=synopsis,
                length=describe_length(length),
            )

        text = generation.request_completion(system_prompt, user_prompt)
        result.episodes.append(text)
        previous_context += f"\n\n{text[:ROLLING_CONTEXT_LENGTH]}...\n"
        current_app.logger.info("Episode %s generated successfully", number)

    return result
