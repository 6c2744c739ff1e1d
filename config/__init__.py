"""
Dream Coach Config Package

Pydantic 기반 통합 설정 관리

사용 예:
    from config import get_settings

    settings = get_settings()
    connection_url = settings.database.database_url
    port = settings.database.postgres_port  # int 타입 보장
"""

from config.settings import (
    Settings,
    DatabaseConfig,
    LLMConfig,
    AuthConfig,
    LangfuseConfig,
    APIConfig,
    get_settings,
)

__all__ = [
    # 설정 클래스
    "Settings",
    "DatabaseConfig",
    "LLMConfig",
    "AuthConfig",
    "LangfuseConfig",
    "APIConfig",
    # 설정 인스턴스 팩토리
    "get_settings",
]

__version__ = "0.1.0"
