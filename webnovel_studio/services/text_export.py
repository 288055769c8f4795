"""Helpers for exporting novels to plain text downloads."""
from __future__ import annotations

import re
from typing import Iterable, Optional

DEFAULT_FILENAME = "웹소설.txt"

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\r\n]+')


def _clean(value: Optional[str]) -> str:
    """Return ``value`` stripped of leading/trailing whitespace."""

    if not value:
        return ""
    return str(value).strip()


def render_novel_text(novel: object, episodes: Iterable[object]) -> str:
    """Render ``novel`` and its ``episodes`` using the generated-text conventions."""

    title = _clean(getattr(novel, "title", "")) or "제목 없음"
    synopsis = _clean(getattr(novel, "synopsis", ""))

    lines: list[str] = [f"제목: {title}"]
    if synopsis:
        lines.extend(["", "전체 줄거리:", synopsis])

    for episode in episodes:
        lines.append("")
        lines.append(
            f"{getattr(episode, 'episode_number', '?')}화: "
            f"{_clean(getattr(episode, 'title', '')) or '제목 없음'}"
        )

        content = _clean(getattr(episode, "content", ""))
        if content:
            lines.extend(["", content])
        else:
            lines.extend(["", "(본문이 없습니다.)"])

    return "\n".join(lines).rstrip() + "\n"


def export_filename(title: Optional[str]) -> str:
    cleaned = _UNSAFE_FILENAME_CHARS.sub(" ", _clean(title)).strip()
    if not cleaned:
        return DEFAULT_FILENAME
    return f"{cleaned}.txt"


__all__ = ["DEFAULT_FILENAME", "export_filename", "render_novel_text"]
