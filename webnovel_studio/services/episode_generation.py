from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from flask import current_app

from ..llm_client import GenerationError
from ..prompts import build_author_system_prompt, describe_length, render_user_prompt
from . import generation

CONTEXT_EXCERPT_LENGTH = 300


@dataclass
class PreviousEpisode:
    episode_number: int
    title: str
    content: str


@dataclass
class EpisodeGenerationResult:
    text: str


def generate_episode(
    synopsis: str,
    episode_number: int,
    length: Optional[str],
    *,
    direction: Optional[str] = None,
    previous_episodes: Sequence[Any] = (),
) -> EpisodeGenerationResult:
    """Write one episode continuing ``previous_episodes``.

    ``previous_episodes`` may hold :class:`PreviousEpisode` values or stored
    ``Episode`` rows; only ``episode_number``, ``title`` and ``content`` are
    read.
    """

    current_app.logger.info(
        "Generating episode: number=%s length=%s has_direction=%s",
        episode_number,
        length,
        bool(direction),
    )
    system_prompt, user_prompt = build_episode_prompts(
        synopsis,
        episode_number,
        length,
        direction=direction,
        previous_episodes=previous_episodes,
    )
    text = generation.request_completion(system_prompt, user_prompt)
    return EpisodeGenerationResult(text=text)


def build_episode_prompts(
    synopsis: str,
    episode_number: int,
    length: Optional[str],
    *,
    direction: Optional[str] = None,
    previous_episodes: Sequence[Any] = (),
) -> tuple[str, str]:
    system_prompt = build_author_system_prompt(length)

    if episode_number == 1:
        return system_prompt, render_user_prompt("first_episode", synopsis=synopsis)

    direction = (direction or "").strip()
    user_prompt = render_user_prompt(
        "next_episode",
        previous_context=build_previous_context(previous_episodes),
        episode_number=episode_number,
        synopsis=synopsis,
        direction_block=f"\n작가의 방향 설정: {direction}\n" if direction else "",
        direction_rule="- 작가가 제시한 방향을 반영하여 작성하세요\n" if direction else "",
        length=describe_length(length),
    )
    return system_prompt, user_prompt


def build_previous_context(previous_episodes: Iterable[Any]) -> str:
    return "\n\n".join(
        f'{episode.episode_number}화 "{episode.title}":\n'
        f"{(episode.content or '')[:CONTEXT_EXCERPT_LENGTH]}..."
        for episode in previous_episodes
    )


def coerce_previous_episodes(items: Any) -> list[PreviousEpisode]:
    """Convert the JSON ``previousEpisodes`` list into :class:`PreviousEpisode` values.

    A missing list counts as no previous episodes.
    """

    if items is None:
        return []
    if not isinstance(items, list):
        raise GenerationError("previousEpisodes must be a list.")

    episodes = []
    for item in items:
        if not isinstance(item, Mapping):
            raise GenerationError("previousEpisodes entries must be objects.")
        episodes.append(
            PreviousEpisode(
                episode_number=item.get("episode_number"),
                title=str(item.get("title") or ""),
                content=str(item.get("content") or ""),
            )
        )
    return episodes
