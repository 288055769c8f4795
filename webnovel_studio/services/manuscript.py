"""Helpers for reading the header lines of generated manuscripts.

Generated episodes follow a loose convention: an optional ``제목: <title>``
line naming the novel, a ``<N>화: <episode title>`` line, a blank line and
then the body. The helpers here scan for those markers and degrade to an
empty title plus the full text when a marker is missing; they never raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

NOVEL_TITLE_MARKER = "제목:"
DEFAULT_NOVEL_TITLE = "생성된 웹소설"


@dataclass
class EpisodeDraft:
    title: str
    content: str

    @property
    def is_complete(self) -> bool:
        return bool(self.title.strip() and self.content.strip())


def episode_marker(episode_number: int) -> str:
    return f"{episode_number}화:"


def split_episode_text(text: Optional[str], episode_number: int) -> EpisodeDraft:
    """Separate the episode title line from the body of ``text``.

    The scan looks for the first line containing ``"<episode_number>화:"``.
    Everything up to and including that line is header noise; the body starts
    at the next non-blank line.
    """

    marker = episode_marker(episode_number)
    lines = (text or "").split("\n")
    title = ""
    body_start = 0

    for index, line in enumerate(lines):
        if marker in line:
            title = line.replace(marker, "", 1).strip()
            body_start = index + 1
            while body_start < len(lines) and not lines[body_start].strip():
                body_start += 1
            break

    content = "\n".join(lines[body_start:]).strip()
    return EpisodeDraft(title=title, content=content)


def split_novel_title(text: Optional[str]) -> tuple[str, str]:
    """Return ``(title, body)`` for a generated novel.

    Only the very first line may carry the ``제목:`` marker. Without it the
    title is empty and the body is the untouched text.
    """

    novel = text or ""
    lines = novel.split("\n")
    if lines[0].startswith(NOVEL_TITLE_MARKER):
        title = lines[0].replace(NOVEL_TITLE_MARKER, "", 1).strip()
        return title, "\n".join(lines[1:]).strip()
    return "", novel
