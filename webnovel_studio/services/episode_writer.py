from __future__ import annotations

import enum
from datetime import datetime
from typing import Iterable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..extensions import db
from ..models import SUMMARY_LENGTH, Episode, Novel

MISSING_DRAFT_MESSAGE = "먼저 에피소드를 생성해주세요."


class EpisodeSaveError(RuntimeError):
    """Raised when a generated episode cannot be stored."""


class WriterState(str, enum.Enum):
    LOADING = "loading"
    IDLE = "idle"
    GENERATING = "generating"
    IDLE_WITH_DRAFT = "idle-with-draft"
    SAVING = "saving"


def next_episode_number(episodes: Iterable[Episode]) -> int:
    return len(list(episodes)) + 1


def save_episode(novel: Novel, episode_number: int, title: str, content: str) -> Episode:
    """Store a generated episode and move the novel's episode count to ``episode_number``.

    Both writes share one transaction. A failure rolls back the episode
    together with the count update.
    """

    title = (title or "").strip()
    content = _normalize_newlines(content or "").strip()
    if not title or not content:
        raise EpisodeSaveError(MISSING_DRAFT_MESSAGE)
    if episode_number < 1:
        raise EpisodeSaveError("회차 번호는 1 이상이어야 합니다.")

    episode = Episode(
        novel_id=novel.id,
        episode_number=episode_number,
        title=title,
        content=content,
        summary=content[:SUMMARY_LENGTH],
    )
    db.session.add(episode)
    novel.current_episode_count = episode_number
    novel.updated_at = datetime.utcnow()

    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise EpisodeSaveError(f"{episode_number}화가 이미 저장되어 있습니다.") from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise EpisodeSaveError(str(exc)) from exc

    return episode


def _normalize_newlines(value: str) -> str:
    return value.replace("\r\n", "\n").replace("\r", "\n")
