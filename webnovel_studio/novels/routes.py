from __future__ import annotations

from io import BytesIO
from typing import Optional

from flask import current_app, redirect, render_template, request, send_file, url_for
from flask_login import current_user, login_required
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..llm_client import GenerationError
from ..models import Episode, Novel
from ..notifications import notify, notify_failure
from ..services.episode_generation import generate_episode
from ..services.episode_writer import (
    EpisodeSaveError,
    WriterState,
    next_episode_number,
    save_episode,
)
from ..services.manuscript import EpisodeDraft, split_episode_text
from ..services.story_coaching import (
    Suggestion,
    parse_suggestions,
    suggest_next_directions,
    summarize_episodes,
)
from ..services.text_export import export_filename, render_novel_text
from . import bp
from .forms import (
    EpisodeDraftForm,
    EpisodeGenerationForm,
    NovelForm,
    StoryCoachingForm,
    SuggestionForm,
)


@bp.route("/new", methods=["GET", "POST"])
@login_required
def create():
    form = NovelForm()
    if form.validate_on_submit():
        novel = Novel(
            user_id=current_user.id,
            title=form.title.data.strip(),
            synopsis=form.synopsis.data.strip(),
        )
        try:
            db.session.add(novel)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception("Failed to create novel for user %s", current_user.id)
            notify_failure("작품 생성 실패", exc)
        else:
            notify("작품 생성 완료", "이제 첫 에피소드를 작성해보세요!")
            return redirect(url_for("novels.detail", novel_id=novel.id))
    elif form.is_submitted():
        notify("입력 필요", "모든 필드를 입력해주세요.", "danger")

    return render_template("novels/create.html", form=form)


@bp.route("/<int:novel_id>")
@login_required
def detail(novel_id: int):
    novel, episodes = _load_novel_with_episodes(novel_id)
    if novel is None:
        return _novel_not_found()

    return render_template(
        "novels/detail.html",
        novel=novel,
        episodes=episodes,
        next_number=next_episode_number(episodes),
    )


@bp.route("/<int:novel_id>/export.txt")
@login_required
def export(novel_id: int):
    novel, episodes = _load_novel_with_episodes(novel_id)
    if novel is None:
        return _novel_not_found()

    payload = render_novel_text(novel, episodes).encode("utf-8")
    return send_file(
        BytesIO(payload),
        mimetype="text/plain; charset=utf-8",
        as_attachment=True,
        download_name=export_filename(novel.title),
    )


@bp.route("/<int:novel_id>/episodes/<int:episode_id>")
@login_required
def episode_detail(novel_id: int, episode_id: int):
    novel, episodes = _load_novel_with_episodes(novel_id)
    if novel is None:
        return _novel_not_found()

    episode = next((e for e in episodes if e.id == episode_id), None)
    if episode is None:
        return render_template("errors/404.html", message="에피소드를 찾을 수 없습니다"), 404

    return render_template("novels/episode.html", novel=novel, episode=episode)


@bp.route("/<int:novel_id>/episodes/new", methods=["GET", "POST"])
@login_required
def write_episode(novel_id: int):
    state = WriterState.LOADING
    novel, previous_episodes = _load_novel_with_episodes(novel_id)
    if novel is None:
        return _novel_not_found()

    episode_number = request.args.get("number", type=int) or 1

    generation_form = EpisodeGenerationForm(prefix="generate")
    draft_form = EpisodeDraftForm(prefix="draft")
    coaching_form = StoryCoachingForm(prefix="coach")
    suggestion_form = SuggestionForm(prefix="adopt")

    draft = EpisodeDraft(title=draft_form.title.data or "", content=draft_form.content.data or "")
    state = _transition(novel, state, _resting_state(draft))
    suggestions: list[Suggestion] = []

    if request.method == "GET":
        direction = request.args.get("direction")
        if direction:
            generation_form.direction.data = direction

    if generation_form.submit.data and generation_form.validate_on_submit():
        state = _transition(novel, state, WriterState.GENERATING)
        try:
            result = generate_episode(
                novel.synopsis,
                episode_number,
                generation_form.length.data,
                direction=generation_form.direction.data or None,
                previous_episodes=previous_episodes,
            )
        except GenerationError as exc:
            notify_failure("생성 실패", exc)
            state = _transition(novel, state, _resting_state(draft))
        except Exception as exc:  # pragma: no cover
            current_app.logger.exception("Unexpected error while generating episode %s", episode_number)
            notify_failure("생성 실패", exc)
            state = _transition(novel, state, _resting_state(draft))
        else:
            draft = split_episode_text(result.text, episode_number)
            draft_form.title.data = draft.title
            draft_form.content.data = draft.content
            notify("생성 완료", "에피소드가 생성되었습니다!")
            state = _transition(novel, state, WriterState.IDLE_WITH_DRAFT)

    elif draft_form.submit.data and draft_form.validate_on_submit():
        state = _transition(novel, state, WriterState.SAVING)
        try:
            save_episode(novel, episode_number, draft.title, draft.content)
        except EpisodeSaveError as exc:
            notify_failure("저장 실패", exc)
            state = _transition(novel, state, _resting_state(draft))
        else:
            _transition(novel, state, WriterState.IDLE)
            notify("저장 완료", f"{episode_number}화가 저장되었습니다!")
            return redirect(url_for("novels.detail", novel_id=novel.id))

    elif coaching_form.submit.data and coaching_form.validate_on_submit():
        if not previous_episodes:
            return redirect(url_for("novels.write_episode", novel_id=novel.id, number=episode_number))
        suggestions = _request_suggestions(novel, previous_episodes)

    elif suggestion_form.submit.data and suggestion_form.validate_on_submit():
        generation_form.direction.data = (suggestion_form.direction.data or "").strip()

    return render_template(
        "novels/episode_writer.html",
        novel=novel,
        previous_episodes=previous_episodes,
        episode_number=episode_number,
        generation_form=generation_form,
        draft_form=draft_form,
        coaching_form=coaching_form,
        suggestion_form=suggestion_form,
        draft=draft,
        state=state,
        suggestions=suggestions,
    )


def _request_suggestions(novel: Novel, previous_episodes: list[Episode]) -> list[Suggestion]:
    try:
        text = suggest_next_directions(novel.synopsis, summarize_episodes(previous_episodes))
    except GenerationError as exc:
        notify_failure("추천 실패", exc)
        return []
    except Exception as exc:  # pragma: no cover
        current_app.logger.exception("Unexpected error while suggesting directions for novel %s", novel.id)
        notify_failure("추천 실패", exc)
        return []

    notify("추천 완료", "다음 화 전개 방향을 확인해보세요!")
    return parse_suggestions(text)


def _resting_state(draft: EpisodeDraft) -> WriterState:
    return WriterState.IDLE_WITH_DRAFT if draft.content else WriterState.IDLE


def _transition(novel: Novel, current: WriterState, target: WriterState) -> WriterState:
    current_app.logger.debug("Episode writer for novel %s: %s -> %s", novel.id, current.value, target.value)
    return target


def _load_novel_with_episodes(novel_id: int) -> tuple[Optional[Novel], list[Episode]]:
    try:
        novel = Novel.query.filter_by(id=novel_id, user_id=current_user.id).first()
        episodes = (
            Episode.query.filter_by(novel_id=novel_id)
            .order_by(Episode.episode_number.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Failed to load novel %s", novel_id)
        notify_failure("불러오기 실패", exc)
        return None, []

    if novel is None:
        return None, []
    return novel, episodes


def _novel_not_found():
    return render_template("errors/404.html", message="작품을 찾을 수 없습니다"), 404
