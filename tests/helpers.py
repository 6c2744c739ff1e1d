"""
테스트 공용 헬퍼 (고정 시계, 가짜 마일스톤 생성기, JWT 발급)
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import List

import jwt

from config.settings import (
    AuthConfig,
    DatabaseConfig,
    LangfuseConfig,
    LLMConfig,
    Settings,
)

TEST_JWT_SECRET = "test-secret-key-with-enough-length-for-hs256"
ALICE = "user-alice"
BOB = "user-bob"


class FixedClock:
    """테스트용 시계 (advance로 시간 이동)"""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


class StaticMilestoneGenerator:
    """고정된 마일스톤을 반환하는 생성기"""

    def __init__(self, milestones):
        self.milestones = milestones
        self.calls: List[str] = []

    async def generate(self, title: str):
        self.calls.append(title)
        return self.milestones


class FailingMilestoneGenerator:
    """항상 예외를 던지는 생성기"""

    async def generate(self, title: str):
        raise RuntimeError("LLM service unavailable")


class SlowMilestoneGenerator:
    """타임아웃보다 오래 걸리는 생성기"""

    async def generate(self, title: str):
        await asyncio.sleep(5)
        return ["never", "returned", "milestones"]


def make_token(user_id: str, secret: str = TEST_JWT_SECRET, **claims) -> str:
    payload = {"sub": user_id, "exp": datetime.now(timezone.utc) + timedelta(hours=1)}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def make_settings(timeout: float = 2.0) -> Settings:
    return Settings(
        database=DatabaseConfig(database_url_override="sqlite://"),
        llm=LLMConfig(milestone_generation_enabled=False, milestone_timeout_seconds=timeout),
        auth=AuthConfig(jwt_secret_key=TEST_JWT_SECRET, jwt_algorithm="HS256", jwt_audience=None),
        langfuse=LangfuseConfig(langfuse_secret_key=None, langfuse_public_key=None),
    )
