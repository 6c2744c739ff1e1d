"""
FastAPI Backend for Dream Coach Goals

핵심:
1. create_app()에서 설정, DB 세션 팩토리, 마일스톤 생성기를 명시적으로 주입
2. 모든 요청은 Bearer JWT에서 사용자 ID를 꺼내 서비스에 전달
3. 서비스 예외는 예외 핸들러에서 HTTP 상태 코드로 변환
   - 검증 실패 400, 인증 실패 401, 없음/다른 사용자 404, DB 오류 500
"""

import logging
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.orm import Session, sessionmaker

from api.auth import get_current_user_id
from api.models import (
    ErrorResponse,
    GoalCreateRequest,
    GoalResponse,
    GoalSummaryResponse,
    GoalUpdateRequest,
)
from config.settings import Settings, get_settings
from database.postgres.core.connection import (
    create_db_engine,
    create_session_factory,
    init_db,
    session_scope,
)
from services.exceptions import (
    GoalNotFoundError,
    GoalPersistenceError,
    InvalidGoalInputError,
)
from services.goal_service import Clock, GoalService, utc_now
from services.milestones import LLMMilestoneGenerator, MilestoneGenerator
from utils.llm_factory import create_llm, create_llm_callbacks

# Load .env
project_root = Path(__file__).resolve().parent.parent
load_dotenv(project_root / ".env")

logger = logging.getLogger(__name__)

SERVICE_NAME = "Dream Coach Goals API"
SERVICE_VERSION = "0.1.0"

_UNSET = object()


# ============================================================================
# Dependencies
# ============================================================================

def get_db(request: Request):
    """요청마다 DB 세션 생성 (app.state의 세션 팩토리 사용)"""
    yield from session_scope(request.app.state.session_factory)


def get_goal_service(request: Request) -> GoalService:
    return request.app.state.goal_service


def build_milestone_generator(settings: Settings) -> Optional[MilestoneGenerator]:
    """설정에 따라 LLM 마일스톤 생성기 생성 (미설정 시 None -> 기본 마일스톤)"""
    if not settings.llm.is_configured:
        logger.info("[app] milestone generation disabled, fallback plan only")
        return None
    try:
        llm = create_llm(settings.llm, temperature=0.3)
        callbacks = create_llm_callbacks(settings.langfuse)
    except Exception:
        logger.exception("[app] failed to initialize LLM, fallback plan only")
        return None
    return LLMMilestoneGenerator(llm, callbacks=callbacks)


# ============================================================================
# Exception Handlers
# ============================================================================

async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def handle_request_validation(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid input", "details": jsonable_encoder(exc.errors())},
    )


async def handle_invalid_goal_input(request: Request, exc: InvalidGoalInputError):
    logger.info("[goals] rejected input on %s: %s", request.url.path, exc.details)
    return JSONResponse(
        status_code=400,
        content={"error": exc.message, "details": jsonable_encoder(exc.details)},
    )


async def handle_goal_not_found(request: Request, exc: GoalNotFoundError):
    return JSONResponse(status_code=404, content={"error": "Goal not found"})


async def handle_goal_persistence(request: Request, exc: GoalPersistenceError):
    logger.error("[goals] persistence failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


# ============================================================================
# Application Factory
# ============================================================================

def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None,
    milestone_generator=_UNSET,
    clock: Clock = utc_now,
) -> FastAPI:
    """
    FastAPI 앱 생성

    Args:
        settings: 설정 (None이면 환경변수/.env에서 로드)
        session_factory: DB 세션 팩토리 (None이면 설정의 DB URL로 생성)
        milestone_generator: 마일스톤 생성기 (생략 시 설정 기반 생성, None이면 기본 마일스톤만 사용)
        clock: 현재 시각 함수 (진행률 기록 날짜 기준)

    Raises:
        ValueError: JWT 서명 키가 비어 있거나 예시 값일 때
    """
    settings = settings or get_settings()
    settings.auth.validate_startup()

    logging.basicConfig(
        level=settings.api.log_level,
        format="[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
    )

    engine = None
    if session_factory is None:
        engine = create_db_engine(settings.database.database_url, echo=settings.database.database_echo)
        session_factory = create_session_factory(engine)

    if milestone_generator is _UNSET:
        milestone_generator = build_milestone_generator(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """앱 시작 시 테이블 생성, 종료 시 커넥션 풀 정리"""
        if engine is not None:
            logger.info("[app] ensuring database tables exist")
            init_db(engine)
        logger.info("[app] %s started", SERVICE_NAME)

        yield

        logger.info("[app] %s shutting down", SERVICE_NAME)
        if engine is not None:
            engine.dispose()

    app = FastAPI(
        title=SERVICE_NAME,
        description="Goal tracking with AI-generated milestones",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.goal_service = GoalService(
        milestone_generator=milestone_generator,
        generation_timeout=settings.llm.milestone_timeout_seconds,
        clock=clock,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(InvalidGoalInputError, handle_invalid_goal_input)
    app.add_exception_handler(GoalNotFoundError, handle_goal_not_found)
    app.add_exception_handler(GoalPersistenceError, handle_goal_persistence)

    register_routes(app)
    return app


# ============================================================================
# API Endpoints
# ============================================================================

def _error_responses(*status_codes: int) -> dict:
    descriptions = {
        400: "Invalid input",
        401: "Unauthorized",
        404: "Goal not found",
        500: "Internal Server Error",
    }
    return {
        code: {"model": ErrorResponse, "description": descriptions[code]}
        for code in status_codes
    }


def register_routes(app: FastAPI) -> None:

    @app.get("/")
    async def root():
        """Health check"""
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
        }

    @app.post(
        "/goals",
        response_model=GoalResponse,
        status_code=201,
        responses=_error_responses(400, 401, 500),
    )
    async def create_goal(
        body: GoalCreateRequest,
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: GoalService = Depends(get_goal_service),
    ):
        """
        목표 생성

        마일스톤은 LLM으로 생성하며, 실패 시 기본 마일스톤 3개를 사용합니다.
        """
        record = await service.create_goal(db, user_id, body.title, body.target_date)
        return GoalResponse.from_record(record)

    @app.get("/goals", response_model=List[GoalResponse], responses=_error_responses(401, 500))
    def list_goals(
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: GoalService = Depends(get_goal_service),
    ):
        """내 목표 목록 (최신순)"""
        return [GoalResponse.from_record(record) for record in service.list_goals(db, user_id)]

    @app.get("/goals/summary", response_model=GoalSummaryResponse, responses=_error_responses(401, 500))
    def goals_summary(
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: GoalService = Depends(get_goal_service),
    ):
        """내 목표 요약 (전체/달성/진행 중, 평균 진행률)"""
        return GoalSummaryResponse.from_summary(service.summarize(db, user_id))

    @app.get("/goals/{goal_id}", response_model=GoalResponse, responses=_error_responses(400, 401, 404, 500))
    def get_goal(
        goal_id: uuid.UUID,
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: GoalService = Depends(get_goal_service),
    ):
        """목표 조회 (다른 사용자의 목표는 404)"""
        return GoalResponse.from_record(service.get_goal(db, str(goal_id), user_id))

    @app.put("/goals/{goal_id}", response_model=GoalResponse, responses=_error_responses(400, 401, 404, 500))
    def update_goal(
        goal_id: uuid.UUID,
        body: GoalUpdateRequest,
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: GoalService = Depends(get_goal_service),
    ):
        """
        마일스톤 갱신

        progress / progressLog / completed는 서버에서 다시 계산합니다.
        다른 사용자의 목표는 GET과 동일하게 404를 반환합니다.
        """
        record = service.update_plan(db, str(goal_id), user_id, body.plan)
        return GoalResponse.from_record(record)


if __name__ == "__main__":
    import uvicorn

    api_config = get_settings().api

    # 개발 서버 실행
    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host=api_config.api_host,
        port=api_config.api_port,
        reload=True,
        log_level=api_config.log_level.lower(),
    )
