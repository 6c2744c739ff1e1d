"""
데이터베이스 연결 및 세션 관리

엔진과 세션 팩토리는 앱 시작 시 명시적으로 생성하여 주입합니다.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.postgres.models import Base


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """엔진 생성"""
    if database_url.startswith("sqlite"):
        # SQLite(개발/테스트용): 스레드 간 공유 허용, 인메모리 DB는 단일 커넥션 유지
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)

    return create_engine(
        database_url,
        echo=echo,  # 실제 쿼리 로깅이 필요할 경우 True로 변경
        pool_pre_ping=True,  # 연결 유효성 검사
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """세션 팩토리 생성"""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    """모든 테이블 생성 (없는 테이블만)"""
    Base.metadata.create_all(bind=engine)


def session_scope(session_factory: sessionmaker):
    """데이터베이스 세션 생성 (의존성 주입용)"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
