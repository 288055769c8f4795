"""Service layer helpers for AI-assisted writing workflows."""

from __future__ import annotations

from .episode_generation import (  # noqa: F401
    EpisodeGenerationResult,
    PreviousEpisode,
    generate_episode,
)
from .manuscript import EpisodeDraft, split_episode_text, split_novel_title  # noqa: F401
from .novel_generation import NovelGenerationResult, generate_novel  # noqa: F401
from .story_coaching import Suggestion, parse_suggestions, suggest_next_directions  # noqa: F401

__all__ = [
    "EpisodeDraft",
    "EpisodeGenerationResult",
    "NovelGenerationResult",
    "PreviousEpisode",
    "Suggestion",
    "generate_episode",
    "generate_novel",
    "parse_suggestions",
    "split_episode_text",
    "split_novel_title",
    "suggest_next_directions",
]
