from flask_wtf import FlaskForm
from wtforms import HiddenField, SelectField, StringField, SubmitField, TextAreaField
from wtforms.validators import InputRequired, Length, Optional

from ..prompts import DEFAULT_LENGTH, LENGTH_CHOICES

REQUIRED_MESSAGE = "모든 필드를 입력해주세요."


class NovelForm(FlaskForm):
    title = StringField("작품 제목", validators=[InputRequired(REQUIRED_MESSAGE), Length(max=200)])
    synopsis = TextAreaField(
        "전체 줄거리",
        validators=[InputRequired(REQUIRED_MESSAGE)],
        description="전체 줄거리는 AI가 각 에피소드를 작성할 때 참고합니다",
    )
    submit = SubmitField("작품 만들기")


class EpisodeGenerationForm(FlaskForm):
    length = SelectField("분량", choices=LENGTH_CHOICES, default=DEFAULT_LENGTH)
    direction = TextAreaField("전개 방향 (선택)", validators=[Optional(), Length(max=2000)])
    submit = SubmitField("에피소드 생성하기")


class EpisodeDraftForm(FlaskForm):
    title = HiddenField(validators=[Optional()])
    content = HiddenField(validators=[Optional()])
    submit = SubmitField("저장하기")


class StoryCoachingForm(FlaskForm):
    submit = SubmitField("전개 추천받기")


class SuggestionForm(FlaskForm):
    direction = HiddenField(validators=[Optional()])
    submit = SubmitField("이 방향으로 쓰기")
