"""Next-episode direction suggestions for the story coaching panel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from flask import current_app

from ..llm_client import GenerationError
from ..prompts import build_coach_system_prompt, render_user_prompt
from . import generation

SUMMARY_LENGTH = 300
SUGGESTION_MARKER = "**제안"


@dataclass
class EpisodeSummary:
    episode_number: int
    title: str
    summary: str


@dataclass
class Suggestion:
    title: str
    content: str = ""

    @property
    def direction(self) -> str:
        return self.content.strip()


def summarize_episodes(episodes: Iterable[Any]) -> List[EpisodeSummary]:
    return [
        EpisodeSummary(
            episode_number=episode.episode_number,
            title=episode.title,
            summary=(episode.content or "")[:SUMMARY_LENGTH],
        )
        for episode in episodes
    ]


def coerce_episode_summaries(items: Any) -> List[EpisodeSummary]:
    if not isinstance(items, list):
        raise GenerationError("episodes must be a list.")

    summaries = []
    for item in items:
        if not isinstance(item, Mapping):
            raise GenerationError("episodes entries must be objects.")
        summaries.append(
            EpisodeSummary(
                episode_number=item.get("episode_number"),
                title=str(item.get("title") or ""),
                summary=str(item.get("summary") or ""),
            )
        )
    return summaries


def suggest_next_directions(synopsis: str, episodes: Sequence[EpisodeSummary]) -> str:
    """Ask the coach for three directions for the episode after ``episodes``."""

    current_app.logger.info("Suggesting next episode: episode_count=%s", len(episodes))
    episode_context = "\n".join(
        f'{episode.episode_number}화 "{episode.title}": {episode.summary}' for episode in episodes
    )
    user_prompt = render_user_prompt(
        "suggest_next",
        synopsis=synopsis,
        episode_context=episode_context,
        next_number=len(episodes) + 1,
    )
    return generation.request_completion(build_coach_system_prompt(), user_prompt)


def parse_suggestions(text: Optional[str]) -> List[Suggestion]:
    """Split the coach's answer into suggestion cards.

    A line starting with ``**제안`` opens a new suggestion whose title is the
    line without its ``**`` emphasis. Every following non-empty line is added
    to that suggestion's content until the next marker. Text before the first
    marker is ignored, so an answer without markers yields no cards.
    """

    suggestions: List[Suggestion] = []
    current: Optional[Suggestion] = None

    for line in (text or "").split("\n"):
        if line.startswith(SUGGESTION_MARKER):
            if current is not None:
                suggestions.append(current)
            current = Suggestion(title=line.replace("**", ""))
        elif current is not None and line.strip():
            current.content += line + "\n"

    if current is not None:
        suggestions.append(current)

    return suggestions
