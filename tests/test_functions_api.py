import pytest
from conftest import login

from webnovel_studio.llm_client import PaymentRequired, RateLimitExceeded
from webnovel_studio.services.novel_generation import NOVEL_SEPARATOR


@pytest.fixture
def signed_in(client, user):
    login(client, user)
    return client


def test_anonymous_calls_are_rejected(client, fake_llm):
    dummy = fake_llm()

    response = client.post("/functions/v1/generate-episode", json={"synopsis": "줄거리", "episodeNumber": 1})

    assert response.status_code == 401
    assert response.get_json() == {"error": "로그인이 필요합니다."}
    assert dummy.calls == []


def test_preflight_returns_cors_headers(client):
    response = client.options(
        "/functions/v1/generate-novel",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization, content-type",
        },
    )

    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert "content-type" in response.headers["Access-Control-Allow-Headers"].lower()


def test_generate_episode_returns_text(signed_in, fake_llm):
    dummy = fake_llm("2화: 계약\n\n본문")

    response = signed_in.post(
        "/functions/v1/generate-episode",
        json={
            "synopsis": "줄거리",
            "episodeNumber": 2,
            "length": "short",
            "direction": "무도회",
            "previousEpisodes": [{"episode_number": 1, "title": "시작", "content": "첫 화 본문"}],
        },
    )

    assert response.status_code == 200
    assert response.get_json() == {"episode": "2화: 계약\n\n본문"}
    assert '1화 "시작":\n첫 화 본문...' in dummy.calls[0][1]


def test_generate_novel_joins_episodes(signed_in, fake_llm):
    fake_llm("1화: 시작\n\n본문", "2화: 계약\n\n본문")

    response = signed_in.post(
        "/functions/v1/generate-novel",
        json={"genre": "로맨스 판타지", "synopsis": "줄거리", "episodeCount": 2, "length": "medium"},
    )

    assert response.status_code == 200
    assert response.get_json() == {"novel": f"1화: 시작\n\n본문{NOVEL_SEPARATOR}2화: 계약\n\n본문"}


def test_generate_novel_accepts_ten_episodes(signed_in, fake_llm):
    dummy = fake_llm(*[f"{n}화: 제목\n\n본문" for n in range(1, 11)])

    response = signed_in.post(
        "/functions/v1/generate-novel",
        json={"synopsis": "줄거리", "episodeCount": 10, "length": "short"},
    )

    assert response.status_code == 200
    assert response.get_json()["novel"].count(NOVEL_SEPARATOR) == 9
    assert len(dummy.calls) == 10


def test_generate_novel_rejects_out_of_range_count(signed_in, fake_llm):
    dummy = fake_llm()

    response = signed_in.post(
        "/functions/v1/generate-novel",
        json={"synopsis": "줄거리", "episodeCount": 11, "length": "medium"},
    )

    assert response.status_code == 400
    assert response.get_json() == {"error": "에피소드 수는 1~10 사이로 입력해주세요."}
    assert dummy.calls == []


def test_suggest_next_returns_raw_text(signed_in, fake_llm):
    dummy = fake_llm("**제안 1: 무도회**\n내용")

    response = signed_in.post(
        "/functions/v1/suggest-next",
        json={"synopsis": "줄거리", "episodes": [{"episode_number": 1, "title": "시작", "summary": "요약"}]},
    )

    assert response.get_json() == {"suggestions": "**제안 1: 무도회**\n내용"}
    assert "다음 2화를 위한" in dummy.calls[0][1]


@pytest.mark.parametrize(
    "error, status, message",
    [
        (RateLimitExceeded(), 429, "요청 한도를 초과했습니다. 잠시 후 다시 시도해주세요."),
        (PaymentRequired(), 402, "크레딧이 부족합니다. 크레딧을 충전해주세요."),
        (ValueError("boom"), 500, "boom"),
    ],
)
def test_gateway_errors_map_to_status(signed_in, fake_llm, error, status, message):
    fake_llm(error)

    response = signed_in.post("/functions/v1/suggest-next", json={"synopsis": "줄거리", "episodes": []})

    assert response.status_code == status
    assert response.get_json() == {"error": message}


def test_malformed_body_is_a_server_error(signed_in, fake_llm):
    fake_llm()

    response = signed_in.post("/functions/v1/generate-episode", data="not json", content_type="application/json")

    assert response.status_code == 500
    assert "error" in response.get_json()
