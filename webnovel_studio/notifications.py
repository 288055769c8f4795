"""Flash helpers shared by the screens."""

from __future__ import annotations

from typing import Optional

from flask import flash

GENERIC_ERROR_MESSAGE = "오류가 발생했습니다."


def error_text(exc: Optional[BaseException]) -> str:
    message = str(exc).strip() if exc is not None else ""
    return message or GENERIC_ERROR_MESSAGE


def notify(title: str, description: Optional[str] = None, category: str = "success") -> None:
    flash(f"{title}: {description}" if description else title, category)


def notify_failure(title: str, exc: Optional[BaseException] = None) -> None:
    notify(title, error_text(exc), "danger")
