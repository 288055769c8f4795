from __future__ import annotations

from io import BytesIO

from flask import current_app, redirect, render_template, send_file, url_for
from flask_login import login_required

from ..llm_client import GenerationError
from ..notifications import notify, notify_failure
from ..services.manuscript import DEFAULT_NOVEL_TITLE, split_novel_title
from ..services.novel_generation import generate_novel
from ..services.text_export import DEFAULT_FILENAME
from . import bp
from .forms import NovelDownloadForm, NovelGeneratorForm


@bp.route("/", methods=["GET", "POST"])
@login_required
def index():
    form = NovelGeneratorForm()
    download_form = NovelDownloadForm(prefix="download")
    novel_text = ""

    if form.validate_on_submit():
        try:
            result = generate_novel(
                form.synopsis.data.strip(),
                form.episode_count.data,
                form.length.data,
            )
        except GenerationError as exc:
            notify_failure("생성 실패", exc)
        except Exception as exc:  # pragma: no cover
            current_app.logger.exception("Unexpected error while generating novel")
            notify_failure("생성 실패", exc)
        else:
            novel_text = result.novel
            notify("생성 완료", "웹소설이 성공적으로 생성되었습니다!")
    elif form.is_submitted():
        for field_name, errors in form.errors.items():
            label = "잘못된 입력" if field_name == "episode_count" else "입력 필요"
            for error in errors:
                notify(label, error, "danger")

    title, body = split_novel_title(novel_text)
    download_form.novel.data = novel_text

    return render_template(
        "generator/index.html",
        form=form,
        download_form=download_form,
        novel_text=novel_text,
        novel_title=title or DEFAULT_NOVEL_TITLE,
        novel_body=body,
    )


@bp.route("/download", methods=["POST"])
@login_required
def download():
    form = NovelDownloadForm(prefix="download")
    novel_text = (form.novel.data or "") if form.validate_on_submit() else ""
    if not novel_text.strip():
        notify("다운로드 실패", "먼저 웹소설을 생성해주세요.", "danger")
        return redirect(url_for("generator.index"))

    payload = novel_text.replace("\r\n", "\n").encode("utf-8")
    return send_file(
        BytesIO(payload),
        mimetype="text/plain; charset=utf-8",
        as_attachment=True,
        download_name=DEFAULT_FILENAME,
    )
