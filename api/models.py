"""
Pydantic models for FastAPI endpoints

핵심 원칙:
1. JSON 필드명은 camelCase (targetDate, progressLog ...), 입력은 snake_case도 허용
2. progress / completed / progressLog는 서버가 계산 (요청에 있어도 무시)
3. 제목 길이 등 도메인 검증은 서비스 계층에서 수행
"""

import datetime as dt
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from services.schemas import GoalRecord, GoalSummary, Milestone, ProgressEntry


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GoalCreateRequest(CamelModel):
    """목표 생성 요청"""
    title: str = Field(..., description="목표 제목 (공백 제외 3자 이상)")
    target_date: Optional[str] = Field(default=None, description="목표 기한 (ISO 날짜)")


class GoalUpdateRequest(CamelModel):
    """마일스톤 갱신 요청 (전체 교체)"""
    plan: List[Milestone] = Field(..., min_length=1, description="마일스톤 리스트 (최소 1개)")


class GoalResponse(CamelModel):
    """목표 응답"""
    id: str = Field(..., description="목표 ID (UUID)")
    user_id: str = Field(..., description="소유 사용자 ID")
    title: str = Field(..., description="목표 제목")
    target_date: Optional[dt.date] = Field(default=None, description="목표 기한")
    plan: List[Milestone] = Field(..., description="마일스톤 리스트")
    progress: int = Field(..., description="진행률 (0~100)")
    completed: bool = Field(..., description="달성 여부")
    progress_log: List[ProgressEntry] = Field(default_factory=list, description="일별 진행률 기록")
    created_at: dt.datetime = Field(..., description="생성 시각")
    updated_at: dt.datetime = Field(..., description="수정 시각")

    @classmethod
    def from_record(cls, record: GoalRecord) -> "GoalResponse":
        return cls.model_validate(record.model_dump())


class GoalSummaryResponse(CamelModel):
    """목표 요약 응답"""
    total: int = Field(..., description="전체 목표 수")
    completed: int = Field(..., description="달성한 목표 수")
    in_progress: int = Field(..., description="진행 중인 목표 수")
    average_progress: int = Field(..., description="평균 진행률 (0~100)")

    @classmethod
    def from_summary(cls, summary: GoalSummary) -> "GoalSummaryResponse":
        return cls.model_validate(summary.model_dump())


class ErrorResponse(BaseModel):
    """에러 응답"""
    error: str = Field(..., description="에러 메시지")
    details: Optional[list] = Field(default=None, description="필드별 상세 정보")
