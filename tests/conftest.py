import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from webnovel_studio import create_app
from webnovel_studio.config import TestConfig
from webnovel_studio.extensions import db
from webnovel_studio.models import Novel, User
from webnovel_studio.services import generation

PASSWORD = "password123"


class DummyCompletionClient:
    """Replays canned completions and records every prompt pair it receives."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def app_instance():
    app = create_app(TestConfig)
    app.config["WTF_CSRF_ENABLED"] = False
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    yield app
    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture
def user(app_instance):
    return make_user("writer@example.com")


@pytest.fixture
def novel(user):
    novel = Novel(owner=user, title="황태자의 계약 연인", synopsis="몰락한 백작가의 영애가 황태자와 계약 약혼을 한다.")
    db.session.add(novel)
    db.session.commit()
    return novel


@pytest.fixture
def fake_llm(monkeypatch):
    def install(*responses):
        dummy = DummyCompletionClient(responses)
        monkeypatch.setattr(generation, "_get_completion_client", lambda: dummy)
        return dummy

    return install


def make_user(email: str) -> User:
    user = User(email=email)
    user.set_password(PASSWORD)
    db.session.add(user)
    db.session.commit()
    return user


def login(client, user):
    return client.post(
        "/login",
        data={"email": user.email, "password": PASSWORD},
        follow_redirects=True,
    )
