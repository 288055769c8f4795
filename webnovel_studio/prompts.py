"""Central configuration for the prompts sent to the completion gateway."""

from __future__ import annotations

from typing import Optional

DEFAULT_LENGTH = "medium"

LENGTH_DESCRIPTORS = {
    "short": "1,000자 내외",
    "medium": "2,500자 내외",
    "long": "5,000자 이상",
}

LENGTH_CHOICES = [
    ("short", "짧게 (1,000자)"),
    ("medium", "보통 (2,500자)"),
    ("long", "길게 (5,000자+)"),
]

SYSTEM_PROMPTS = {
    "webnovel_author": {
        "base": (
            "당신은 카카오페이지의 베스트셀러 로맨스 판타지 작가입니다. 웹소설을 전문적으로 "
            "집필하는 작가로서, 독자들을 사로잡는 매력적인 스토리를 만듭니다."
        ),
        "guidelines": (
            "작성 가이드라인:\n"
            "- 로맨스 판타지 장르의 핵심 요소 포함 (사랑, 마법, 판타지 세계관)\n"
            "- 한국 웹소설 특유의 흡입력 있는 문체 사용\n"
            "- 생생한 묘사와 감정선 표현\n"
            "- 대화와 지문의 적절한 배합\n"
            "- 다음 회차가 궁금하게 만드는 엔딩\n"
            "- 분량: {length}"
        ),
    },
    "story_coach": {
        "base": (
            "당신은 로맨스 판타지 소설 전문 스토리 코치입니다. 작가가 다음 화를 쓸 수 있도록 "
            "구체적이고 매력적인 전개 방향을 제안합니다."
        ),
    },
}

FIRST_EPISODE_EXAMPLE = (
    "예시:\n"
    "제목: 황태자의 계약 연인\n"
    "1화: 이세계로의 초대\n"
    "\n"
    "평범한 회사원이었던 나는..."
)

FIRST_EPISODE_FORMAT = (
    "**중요:** 제목과 본문을 명확히 구분하여 작성해주세요.\n"
    "- 첫 줄에 \"제목: [소설 제목]\" 형식으로 제목을 작성\n"
    "- 두 번째 줄에 \"1화: [에피소드 제목]\" 형식으로 에피소드 제목 작성\n"
    "- 한 줄 띄운 후 본문 시작\n"
    "- 본문은 문단 구분을 명확히 하여 작성\n"
    "- 1화는 이야기의 시작이므로 주인공과 세계관을 소개하고 갈등을 제시하세요"
)

USER_PROMPTS = {
    "first_episode": (
        "다음 조건으로 로맨스 판타지 웹소설 1화를 작성해주세요:\n\n"
        "전체 줄거리: {synopsis}\n\n"
        f"{FIRST_EPISODE_FORMAT}\n\n"
        f"{FIRST_EPISODE_EXAMPLE}"
    ),
    "next_episode": (
        "다음은 이전 에피소드들의 줄거리입니다:\n\n"
        "{previous_context}\n\n"
        "이어서 {episode_number}화를 작성해주세요:\n\n"
        "전체 줄거리: {synopsis}\n"
        "{direction_block}\n\n"
        "**중요:** 형식을 지켜주세요.\n"
        "- 첫 줄에 \"{episode_number}화: [에피소드 제목]\" 형식으로 에피소드 제목 작성\n"
        "- 한 줄 띄운 후 본문 시작\n"
        "- 이전 화의 내용을 자연스럽게 이어가세요\n"
        "{direction_rule}"
        "- 분량: {length}"
    ),
    "novel_first_episode": (
        "다음 조건으로 로맨스 판타지 웹소설 {episode_count}화 중 1화를 작성해주세요:\n\n"
        "장르: {genre}\n"
        "전체 줄거리: {synopsis}\n\n"
        f"{FIRST_EPISODE_FORMAT}\n\n"
        f"{FIRST_EPISODE_EXAMPLE}"
    ),
    "novel_next_episode": (
        "다음은 {previous_number}화까지의 줄거리입니다:\n\n"
        "{previous_context}\n\n"
        "이어서 {episode_number}화를 작성해주세요:\n\n"
        "전체 줄거리: {synopsis}\n\n"
        "**중요:** 형식을 지켜주세요.\n"
        "- 첫 줄에 \"{episode_number}화: [에피소드 제목]\" 형식으로 에피소드 제목 작성\n"
        "- 한 줄 띄운 후 본문 시작\n"
        "- 이전 화의 내용을 자연스럽게 이어가세요\n"
        "- 분량: {length}"
    ),
    "suggest_next": (
        "다음은 지금까지의 작품 정보입니다:\n\n"
        "전체 줄거리: {synopsis}\n\n"
        "지금까지 작성된 에피소드:\n"
        "{episode_context}\n\n"
        "다음 {next_number}화를 위한 전개 방향을 3가지 제안해주세요. "
        "각 제안은 다음 형식으로 작성해주세요:\n\n"
        "**제안 1: [제목]**\n"
        "[구체적인 전개 내용 2-3문장]\n"
        "- 핵심 포인트 1\n"
        "- 핵심 포인트 2\n\n"
        "각 제안은 로맨스 판타지 장르의 매력을 살리고, 이전 화의 흐름을 자연스럽게 이어가며, "
        "독자의 흥미를 끌 수 있는 전개여야 합니다."
    ),
}


def describe_length(length: Optional[str]) -> str:
    """Return the character-count descriptor for a length tier.

    Unknown or missing tiers use the ``medium`` descriptor.
    """

    return LENGTH_DESCRIPTORS.get(length or "", LENGTH_DESCRIPTORS[DEFAULT_LENGTH])


def build_author_system_prompt(length: Optional[str]) -> str:
    entry = SYSTEM_PROMPTS["webnovel_author"]
    guidelines = entry["guidelines"].format(length=describe_length(length))
    return f"{entry['base']}\n\n{guidelines}"


def build_coach_system_prompt() -> str:
    return SYSTEM_PROMPTS["story_coach"]["base"]


def render_user_prompt(name: str, **values: object) -> str:
    return USER_PROMPTS[name].format(**values)
