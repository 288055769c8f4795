from conftest import PASSWORD, login

from webnovel_studio.models import User
from webnovel_studio.session import SessionIdentity, get_session_observer


def test_register_signs_in_and_lands_on_list(client):
    response = client.post(
        "/register",
        data={"email": "New@Example.com", "password": "secret1"},
        follow_redirects=True,
    )

    html = response.get_data(as_text=True)
    assert "회원가입 성공!: 이제 웹소설을 만들 수 있습니다." in html
    assert "내 작품" in html
    assert User.query.filter_by(email="new@example.com").count() == 1


def test_register_rejects_duplicate_email_and_short_password(client, user):
    response = client.post(
        "/register",
        data={"email": user.email, "password": "123"},
        follow_redirects=True,
    )

    html = response.get_data(as_text=True)
    assert "이미 가입된 이메일입니다." in html
    assert "비밀번호는 6자 이상이어야 합니다." in html
    assert User.query.count() == 1


def test_login_with_wrong_password_fails(client, user):
    response = client.post("/login", data={"email": user.email, "password": "wrong-pass"})

    assert "로그인 실패: 이메일 또는 비밀번호가 올바르지 않습니다." in response.get_data(as_text=True)


def test_login_ignores_external_next_url(client, user):
    response = client.post(
        "/login?next=https://evil.example.com/",
        data={"email": user.email, "password": PASSWORD},
    )

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/")
    assert "evil" not in response.headers["Location"]


def test_anonymous_root_redirects_to_login(client):
    response = client.get("/")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/login")


def test_session_observer_publishes_sign_in_and_out(app_instance, client, user):
    observer = get_session_observer(app_instance)
    events = []
    unsubscribe = observer.subscribe(lambda event, identity: events.append((event, identity)))

    login(client, user)
    assert observer.current == SessionIdentity(user_id=user.id, email=user.email)

    client.get("/logout")
    unsubscribe()
    login(client, user)

    assert events == [
        ("SIGNED_IN", SessionIdentity(user_id=user.id, email=user.email)),
        ("SIGNED_OUT", None),
    ]
    assert observer.current == SessionIdentity(user_id=user.id, email=user.email)


def test_closed_observer_stops_listening(app_instance, client, user):
    observer = get_session_observer(app_instance)
    observer.close()

    login(client, user)

    assert observer.current is None
