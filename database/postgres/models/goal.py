"""
Dream Coach - PostgreSQL 데이터베이스 모델 정의
SQLAlchemy ORM을 사용한 Goals 테이블 정의
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Date, Boolean, JSON
from sqlalchemy.dialects.postgresql import JSONB
from database.postgres.models.base import Base

# PostgreSQL에서는 JSONB, 그 외(SQLite 테스트 등)에서는 일반 JSON 사용
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _new_goal_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Goal(Base):
    """목표 테이블 - 사용자의 목표와 마일스톤, 진행률을 저장"""

    __tablename__ = "goals"

    id = Column(String(36), primary_key=True, default=_new_goal_id, comment="목표 고유 식별자 (UUID)")
    user_id = Column(String(64), nullable=False, index=True, comment="소유 사용자 ID")
    title = Column(String(255), nullable=False, comment="목표 제목")
    target_date = Column(Date, nullable=True, comment="목표 기한 (참고용)")
    plan = Column(JSONType, nullable=False, default=list, comment="마일스톤 리스트 [{text, completed}]")
    progress = Column(Integer, nullable=False, default=0, comment="진행률 (0~100)")
    completed = Column(Boolean, nullable=False, default=False, comment="달성 여부")
    progress_log = Column(JSONType, nullable=False, default=list, comment="일별 진행률 기록 [{date, percent}]")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, comment="목표 생성 시각")
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, comment="마지막 수정 시각")

    def __repr__(self):
        return f"<Goal(id={self.id}, user_id={self.user_id}, title='{self.title}', progress={self.progress})>"
