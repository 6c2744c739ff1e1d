"""
목표(Goal) 도메인 타입

DB의 JSON 컬럼(plan, progress_log)은 이 모델들을 통해서만 읽고 씁니다.
저장된 값이 스키마와 맞지 않으면 그대로 신뢰하지 않고 CorruptGoalDataError를 발생시킵니다.
"""

import datetime as dt
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from services.exceptions import CorruptGoalDataError


class Milestone(BaseModel):
    """마일스톤 - 목표를 구성하는 단계 하나"""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1, description="마일스톤 내용")
    completed: bool = Field(..., strict=True, description="완료 여부")


class ProgressEntry(BaseModel):
    """진행률 기록 - 하루에 하나"""

    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(..., description="기록 날짜 (UTC 기준)")
    percent: int = Field(..., ge=0, le=100, description="해당 날짜의 진행률")


class GoalRecord(BaseModel):
    """서비스 계층이 반환하는 목표 레코드"""

    id: str
    user_id: str
    title: str
    target_date: Optional[dt.date] = None
    plan: List[Milestone]
    progress: int = Field(..., ge=0, le=100)
    completed: bool
    progress_log: List[ProgressEntry] = Field(default_factory=list)
    created_at: dt.datetime
    updated_at: dt.datetime


class GoalSummary(BaseModel):
    """사용자 목표 전체 요약 (진행 현황 화면용)"""

    total: int
    completed: int
    in_progress: int
    average_progress: int


_plan_adapter = TypeAdapter(List[Milestone])
_log_adapter = TypeAdapter(List[ProgressEntry])


def load_plan(raw: Any, goal_id: Optional[str] = None) -> List[Milestone]:
    """JSON 컬럼 값을 마일스톤 리스트로 변환"""
    try:
        return _plan_adapter.validate_python(raw)
    except ValidationError as e:
        raise CorruptGoalDataError(goal_id, "plan", e) from e


def load_progress_log(raw: Any, goal_id: Optional[str] = None) -> List[ProgressEntry]:
    """JSON 컬럼 값을 진행률 기록 리스트로 변환"""
    if raw is None:
        return []
    try:
        return _log_adapter.validate_python(raw)
    except ValidationError as e:
        raise CorruptGoalDataError(goal_id, "progress_log", e) from e


def dump_plan(plan: List[Milestone]) -> List[dict]:
    return _plan_adapter.dump_python(plan, mode="json")


def dump_progress_log(log: List[ProgressEntry]) -> List[dict]:
    return _log_adapter.dump_python(log, mode="json")


def to_goal_record(db_goal) -> GoalRecord:
    """ORM Goal 객체를 검증된 GoalRecord로 변환"""
    plan = load_plan(db_goal.plan, db_goal.id)
    progress_log = load_progress_log(db_goal.progress_log, db_goal.id)
    try:
        return GoalRecord(
            id=db_goal.id,
            user_id=db_goal.user_id,
            title=db_goal.title,
            target_date=db_goal.target_date,
            plan=plan,
            progress=db_goal.progress,
            completed=db_goal.completed,
            progress_log=progress_log,
            created_at=db_goal.created_at,
            updated_at=db_goal.updated_at,
        )
    except ValidationError as e:
        raise CorruptGoalDataError(db_goal.id, "goal", e) from e
