from types import SimpleNamespace

import httpx
import openai
import pytest

from webnovel_studio.llm_client import (
    COMPLETION_FAILED_MESSAGE,
    ChatCompletionClient,
    CompletionFailed,
    GenerationError,
    GenerationRequestError,
    PaymentRequired,
    RateLimitExceeded,
)
from webnovel_studio.services import generation
from webnovel_studio.services.episode_generation import PreviousEpisode, generate_episode
from webnovel_studio.services.novel_generation import NOVEL_SEPARATOR, generate_novel
from webnovel_studio.services.story_coaching import EpisodeSummary, suggest_next_directions


def _status_error(status: int) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://gateway.test/v1/chat/completions")
    response = httpx.Response(status, request=request, json={"error": "nope"})
    return openai.APIStatusError("gateway error", response=response, body={"error": "nope"})


def _client_with(create) -> ChatCompletionClient:
    client = ChatCompletionClient("google/gemini-2.5-flash", "test-key", base_url="https://gateway.test/v1")
    client._client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client


def test_complete_sends_system_and_user_messages():
    captured = {}

    def create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="1화: 시작\n\n본문"))])

    text = _client_with(create).complete("system", "user")

    assert text == "1화: 시작\n\n본문"
    assert captured["model"] == "google/gemini-2.5-flash"
    assert captured["temperature"] == 0.8
    assert captured["messages"] == [
        {"role": "system", "content": "system"},
        {"role": "user", "content": "user"},
    ]


@pytest.mark.parametrize(
    "status, error_class, status_code",
    [
        (429, RateLimitExceeded, 429),
        (402, PaymentRequired, 402),
        (503, CompletionFailed, 500),
    ],
)
def test_complete_maps_gateway_status(status, error_class, status_code):
    def create(**_):
        raise _status_error(status)

    with pytest.raises(error_class) as excinfo:
        _client_with(create).complete("system", "user")

    assert excinfo.value.status_code == status_code


def test_unexpected_status_uses_generic_failure_message():
    def create(**_):
        raise _status_error(500)

    with pytest.raises(CompletionFailed, match=COMPLETION_FAILED_MESSAGE):
        _client_with(create).complete("system", "user")


def test_client_requires_api_key():
    with pytest.raises(GenerationError, match="LLM_API_KEY"):
        ChatCompletionClient("google/gemini-2.5-flash", "  ")


def test_completion_client_is_cached_per_app(app_instance):
    first = generation._get_completion_client()

    assert generation._get_completion_client() is first
    assert first.model_name == app_instance.config["LLM_MODEL"]


def test_missing_api_key_fails_before_any_call(app_instance):
    app_instance.config["LLM_API_KEY"] = None

    with pytest.raises(GenerationError, match="LLM_API_KEY is not configured"):
        generation.request_completion("system", "user")


def test_first_episode_ignores_direction(app_instance, fake_llm):
    dummy = fake_llm("제목: 계약 연인\n1화: 시작\n\n본문")

    result = generate_episode("줄거리", 1, "short", direction="무도회 장면")

    assert result.text.startswith("제목: 계약 연인")
    system_prompt, user_prompt = dummy.calls[0]
    assert "1,000자 내외" in system_prompt
    assert "1화를 작성해주세요" in user_prompt
    assert "무도회 장면" not in user_prompt


def test_next_episode_embeds_previous_excerpts_and_direction(app_instance, fake_llm):
    dummy = fake_llm("3화: 재회\n\n본문")
    previous = [
        PreviousEpisode(episode_number=1, title="시작", content="가" * 400),
        PreviousEpisode(episode_number=2, title="계약", content="짧은 본문"),
    ]

    generate_episode("줄거리", 3, "medium", direction="황태자가 질투한다", previous_episodes=previous)

    _, user_prompt = dummy.calls[0]
    assert f'1화 "시작":\n{"가" * 300}...\n\n2화 "계약":\n짧은 본문...' in user_prompt
    assert "이어서 3화를 작성해주세요" in user_prompt
    assert "작가의 방향 설정: 황태자가 질투한다" in user_prompt
    assert "- 작가가 제시한 방향을 반영하여 작성하세요" in user_prompt
    assert "분량: 2,500자 내외" in user_prompt


def test_next_episode_without_direction_omits_direction_rule(app_instance, fake_llm):
    dummy = fake_llm("2화: 계약\n\n본문")

    generate_episode("줄거리", 2, None, previous_episodes=[PreviousEpisode(1, "시작", "본문")])

    _, user_prompt = dummy.calls[0]
    assert "작가의 방향 설정" not in user_prompt
    assert "작가가 제시한 방향" not in user_prompt


def test_generate_novel_runs_sequentially_with_rolling_context(app_instance, fake_llm):
    first = "제목: 계약 연인\n1화: 시작\n\n" + "나" * 600
    dummy = fake_llm(first, "2화: 계약\n\n본문 둘", "3화: 무도회\n\n본문 셋")

    result = generate_novel("줄거리", 3, "long")

    assert len(dummy.calls) == 3
    assert "3화 중 1화를 작성해주세요" in dummy.calls[0][1]
    assert "장르: 로맨스 판타지" in dummy.calls[0][1]
    assert f"\n\n{first[:500]}...\n" in dummy.calls[1][1]
    assert "다음은 2화까지의 줄거리입니다" in dummy.calls[2][1]
    assert "2화: 계약\n\n본문 둘"[:500] in dummy.calls[2][1]
    assert result.novel == NOVEL_SEPARATOR.join([first, "2화: 계약\n\n본문 둘", "3화: 무도회\n\n본문 셋"])


@pytest.mark.parametrize("count", [0, 11, "abc", True, None, 2.5])
def test_generate_novel_rejects_episode_count_before_calling(app_instance, fake_llm, count):
    dummy = fake_llm()

    with pytest.raises(GenerationRequestError) as excinfo:
        generate_novel("줄거리", count, "medium")

    assert excinfo.value.status_code == 400
    assert str(excinfo.value) == "에피소드 수는 1~10 사이로 입력해주세요."
    assert dummy.calls == []


@pytest.mark.parametrize("count", [1, 10])
def test_generate_novel_accepts_count_boundaries(app_instance, fake_llm, count):
    dummy = fake_llm(*[f"{n}화: 제목\n\n본문" for n in range(1, count + 1)])

    result = generate_novel("줄거리", count, "medium")

    assert len(dummy.calls) == count
    assert len(result.episodes) == count


def test_generate_novel_stops_at_first_failure(app_instance, fake_llm):
    dummy = fake_llm("1화: 시작\n\n본문", RateLimitExceeded(), "unused")

    with pytest.raises(RateLimitExceeded):
        generate_novel("줄거리", 3, "medium")

    assert len(dummy.calls) == 2


def test_suggest_next_lists_episode_summaries(app_instance, fake_llm):
    dummy = fake_llm("**제안 1: 무도회**\n내용")
    summaries = [
        EpisodeSummary(episode_number=1, title="시작", summary="첫 화 요약"),
        EpisodeSummary(episode_number=2, title="계약", summary="둘째 화 요약"),
    ]

    text = suggest_next_directions("줄거리", summaries)

    assert text == "**제안 1: 무도회**\n내용"
    system_prompt, user_prompt = dummy.calls[0]
    assert "스토리 코치" in system_prompt
    assert '1화 "시작": 첫 화 요약\n2화 "계약": 둘째 화 요약' in user_prompt
    assert "다음 3화를 위한 전개 방향을 3가지 제안해주세요" in user_prompt
