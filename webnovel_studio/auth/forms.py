from flask_wtf import FlaskForm
from wtforms import PasswordField, StringField, SubmitField
from wtforms.validators import Email, InputRequired, Length, ValidationError

from ..models import User


class RegistrationForm(FlaskForm):
    email = StringField(
        "이메일",
        validators=[
            InputRequired("이메일을 입력해주세요."),
            Email("올바른 이메일 주소를 입력해주세요."),
            Length(max=255),
        ],
    )
    password = PasswordField(
        "비밀번호",
        validators=[
            InputRequired("비밀번호를 입력해주세요."),
            Length(min=6, max=128, message="비밀번호는 6자 이상이어야 합니다."),
        ],
    )
    submit = SubmitField("회원가입")

    def validate_email(self, field: StringField) -> None:
        if User.query.filter_by(email=field.data.lower()).first():
            raise ValidationError("이미 가입된 이메일입니다.")


class LoginForm(FlaskForm):
    email = StringField(
        "이메일",
        validators=[
            InputRequired("이메일을 입력해주세요."),
            Email("올바른 이메일 주소를 입력해주세요."),
            Length(max=255),
        ],
    )
    password = PasswordField("비밀번호", validators=[InputRequired("비밀번호를 입력해주세요.")])
    submit = SubmitField("로그인")
