from flask_wtf import FlaskForm
from wtforms import HiddenField, IntegerField, SelectField, SubmitField, TextAreaField
from wtforms.validators import InputRequired, NumberRange, Optional

from ..prompts import DEFAULT_LENGTH, LENGTH_CHOICES
from ..services.novel_generation import (
    EPISODE_COUNT_MESSAGE,
    MAX_EPISODE_COUNT,
    MIN_EPISODE_COUNT,
)


class NovelGeneratorForm(FlaskForm):
    episode_count = IntegerField(
        "에피소드 수",
        default=1,
        validators=[
            InputRequired(EPISODE_COUNT_MESSAGE),
            NumberRange(min=MIN_EPISODE_COUNT, max=MAX_EPISODE_COUNT, message=EPISODE_COUNT_MESSAGE),
        ],
    )
    synopsis = TextAreaField("전체 줄거리", validators=[InputRequired("모든 필드를 입력해주세요.")])
    length = SelectField("분량", choices=LENGTH_CHOICES, default=DEFAULT_LENGTH)
    submit = SubmitField("웹소설 생성하기")


class NovelDownloadForm(FlaskForm):
    novel = HiddenField(validators=[Optional()])
    submit = SubmitField("다운로드")
