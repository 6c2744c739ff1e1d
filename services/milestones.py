"""
목표 마일스톤 생성

외부 LLM에 목표 제목을 넘겨 3~5개의 마일스톤을 받아옵니다.
LLM은 신뢰할 수 없는 의존성으로 취급합니다:
- 타임아웃, 예외, 형식이 맞지 않는 응답은 모두 실패로 처리
- 실패하거나 생성기가 없으면 제목 기반 기본 마일스톤 3개로 대체

사용 예:
    from services.milestones import LLMMilestoneGenerator, resolve_milestones

    generator = LLMMilestoneGenerator(llm=create_llm())
    texts = await resolve_milestones(generator, "Run a marathon", timeout=15.0)
"""

import asyncio
import logging
from typing import Any, List, Optional, Protocol, Sequence

from pydantic import BaseModel, Field, ValidationError, field_validator

from services.exceptions import MilestoneGenerationError

logger = logging.getLogger(__name__)

MIN_MILESTONES = 3
MAX_MILESTONES = 5
MAX_MILESTONE_LENGTH = 200

MILESTONE_SYSTEM_PROMPT = (
    "You are a supportive self-improvement coach. "
    "You turn a personal goal into short, concrete, actionable milestones."
)

MILESTONE_USER_PROMPT = (
    'Based on the user goal "{title}", break it down into 3-5 actionable milestones. '
    "Each milestone must be a single short sentence."
)


class MilestonePlan(BaseModel):
    """LLM structured output 스키마"""

    milestones: List[str] = Field(
        ...,
        min_length=MIN_MILESTONES,
        max_length=MAX_MILESTONES,
        description="3 to 5 short, actionable milestone descriptions in order",
    )

    @field_validator("milestones")
    @classmethod
    def check_milestone_text(cls, v: List[str]) -> List[str]:
        """공백 제거 후 빈 문자열이나 너무 긴 문장은 거부"""
        cleaned = [text.strip() for text in v]
        for text in cleaned:
            if not text:
                raise ValueError("milestone text must not be empty")
            if len(text) > MAX_MILESTONE_LENGTH:
                raise ValueError(f"milestone text longer than {MAX_MILESTONE_LENGTH} characters")
        return cleaned


class MilestoneGenerator(Protocol):
    """마일스톤 생성기 인터페이스"""

    async def generate(self, title: str) -> Sequence[str]:
        ...


def fallback_milestones(title: str) -> List[str]:
    """네트워크 없이 제목만으로 만드는 기본 마일스톤 3개"""
    return [
        f'Define what "{title}" means specifically.',
        f'Identify first step for "{title}".',
        f'Schedule time to work on "{title}".',
    ]


def validate_milestones(raw: Any) -> List[str]:
    """
    생성 결과 형식 검증

    Args:
        raw: MilestonePlan, dict, 또는 문자열 리스트

    Returns:
        검증된 마일스톤 문자열 리스트

    Raises:
        MilestoneGenerationError: 형식이 맞지 않는 경우
    """
    try:
        if isinstance(raw, MilestonePlan):
            plan = MilestonePlan.model_validate(raw.model_dump())
        elif isinstance(raw, dict):
            plan = MilestonePlan.model_validate(raw)
        else:
            plan = MilestonePlan(milestones=raw)
    except ValidationError as e:
        raise MilestoneGenerationError(f"Malformed milestone output: {e}") from e
    return plan.milestones


class LLMMilestoneGenerator:
    """LangChain ChatModel 기반 마일스톤 생성기"""

    def __init__(self, llm, callbacks: Optional[List[Any]] = None):
        """
        Args:
            llm: LangChain ChatModel 인스턴스 (utils.llm_factory.create_llm 결과)
            callbacks: LangChain 콜백 리스트 (예: Langfuse CallbackHandler)
        """
        self._structured_llm = llm.with_structured_output(MilestonePlan)
        self._callbacks = callbacks or []

    async def generate(self, title: str) -> List[str]:
        messages = [
            {"role": "system", "content": MILESTONE_SYSTEM_PROMPT},
            {"role": "user", "content": MILESTONE_USER_PROMPT.format(title=title)},
        ]
        config = {"callbacks": self._callbacks} if self._callbacks else None
        result = await self._structured_llm.ainvoke(messages, config=config)
        return validate_milestones(result)


async def resolve_milestones(
    generator: Optional[MilestoneGenerator],
    title: str,
    timeout: float,
) -> List[str]:
    """
    마일스톤 확보 (절대 예외를 던지지 않음)

    생성기가 없거나, 타임아웃/예외/형식 오류가 발생하면 기본 마일스톤을 반환합니다.
    """
    if generator is None:
        logger.info("[milestones] generator not configured, using fallback plan")
        return fallback_milestones(title)

    try:
        raw = await asyncio.wait_for(generator.generate(title), timeout=timeout)
        return validate_milestones(raw)
    except asyncio.TimeoutError:
        logger.warning("[milestones] generation timed out after %.1fs, using fallback plan", timeout)
    except MilestoneGenerationError as e:
        logger.warning("[milestones] %s, using fallback plan", e)
    except Exception:
        logger.exception("[milestones] generation failed, using fallback plan")
    return fallback_milestones(title)
