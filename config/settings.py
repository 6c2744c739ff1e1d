"""
Dream Coach 프로젝트 통합 설정 관리

Pydantic BaseSettings를 사용하여 타입 안전성과 자동 검증을 제공합니다.

사용 예:
    from config.settings import get_settings

    settings = get_settings()
    db_url = settings.database.database_url
    timeout = settings.llm.milestone_timeout_seconds  # float 타입 보장
"""

from functools import lru_cache
from typing import Literal, Optional, List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 예시/기본값으로 알려진 서명 키 (배포 금지)
PLACEHOLDER_SECRETS = {"change-me", "changeme", "secret", "your-secret-key"}


class DatabaseConfig(BaseSettings):
    """PostgreSQL 데이터베이스 설정"""

    postgres_user: str = Field(default="postgres", description="PostgreSQL 사용자명")
    postgres_password: str = Field(default="postgres", description="PostgreSQL 비밀번호")
    postgres_db: str = Field(default="dream_coach", description="데이터베이스 이름")
    postgres_host: str = Field(default="localhost", description="PostgreSQL 호스트")
    postgres_port: int = Field(default=5432, description="PostgreSQL 포트")
    database_url_override: Optional[str] = Field(
        default=None,
        validation_alias="DATABASE_URL",
        description="전체 연결 URL (설정 시 위 값들을 무시, 예: sqlite:///./dev.db)"
    )
    database_echo: bool = Field(default=False, description="SQL 쿼리 로깅 여부")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def database_url(self) -> str:
        """데이터베이스 연결 URL 생성"""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


class LLMConfig(BaseSettings):
    """LLM 설정 (마일스톤 생성용)"""

    llm_provider: Literal["openai", "vllm", "ollama"] = Field(
        default="openai",
        description="LLM 제공자: 'openai', 'vllm', 'ollama'"
    )
    llm_model_name: str = Field(default="gpt-4o-mini", description="기본 모델 이름")
    llm_temperature: float = Field(default=0.7, description="기본 temperature")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API Key")
    vllm_base_url: str = Field(default="localhost:8002/v1", description="vLLM 서버 URL")
    vllm_api_key: str = Field(default="EMPTY", description="vLLM API Key")
    ollama_base_url: str = Field(default="http://localhost:11434", description="Ollama 서버 URL")

    milestone_generation_enabled: bool = Field(
        default=True,
        description="AI 마일스톤 생성 사용 여부 (False면 항상 기본 마일스톤 사용)"
    )
    milestone_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="마일스톤 생성 타임아웃 (초)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_configured(self) -> bool:
        """마일스톤 생성에 필요한 설정이 모두 있는지 확인"""
        if not self.milestone_generation_enabled:
            return False
        if self.llm_provider == "openai":
            return bool(self.openai_api_key)
        return True


class AuthConfig(BaseSettings):
    """인증 설정 (호스팅 인증 서비스가 발급한 JWT 검증용)"""

    jwt_secret_key: str = Field(default="", description="JWT 서명 키 (필수)")
    jwt_algorithm: str = Field(default="HS256", description="JWT 알고리즘")
    jwt_audience: Optional[str] = Field(
        default=None,
        description="JWT audience (Supabase는 'authenticated')"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def validate_startup(self) -> None:
        """
        서명 키 확인

        Raises:
            ValueError: 키가 비어 있거나 예시 값(change-me 등)일 때
        """
        if not self.jwt_secret_key or self.jwt_secret_key.strip().lower() in PLACEHOLDER_SECRETS:
            raise ValueError("JWT_SECRET_KEY is missing or uses a placeholder value")


class LangfuseConfig(BaseSettings):
    """Langfuse Observability 설정 (선택)"""

    langfuse_secret_key: Optional[str] = Field(default=None, description="Langfuse Secret Key")
    langfuse_public_key: Optional[str] = Field(default=None, description="Langfuse Public Key")
    langfuse_base_url: str = Field(
        default="http://localhost:3000",
        description="Langfuse 서버 URL (self-hosted)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def enabled(self) -> bool:
        return bool(self.langfuse_secret_key and self.langfuse_public_key)


class APIConfig(BaseSettings):
    """FastAPI 서버 설정"""

    api_host: str = Field(default="0.0.0.0", description="서버 호스트")
    api_port: int = Field(default=8000, description="서버 포트")
    log_level: str = Field(default="INFO", description="로그 레벨")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="허용 origin 목록")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """로그 레벨 대문자로 정규화"""
        if isinstance(v, str):
            return v.upper()
        return v


class Settings:
    """
    통합 설정 클래스

    모든 설정 카테고리를 하나로 묶어 제공합니다.
    테스트에서는 개별 설정 객체를 직접 넘겨 덮어쓸 수 있습니다.
    """

    def __init__(
        self,
        api: Optional[APIConfig] = None,
        database: Optional[DatabaseConfig] = None,
        llm: Optional[LLMConfig] = None,
        auth: Optional[AuthConfig] = None,
        langfuse: Optional[LangfuseConfig] = None,
    ):
        self.api = api or APIConfig()
        self.database = database or DatabaseConfig()
        self.llm = llm or LLMConfig()
        self.auth = auth or AuthConfig()
        self.langfuse = langfuse or LangfuseConfig()

    def print_config(self):
        """설정 정보 출력 (민감 정보 마스킹)"""
        print("=" * 60)
        print("Dream Coach 설정 정보")
        print("=" * 60)

        print("\n[API]")
        print(f"  Host: {self.api.api_host}:{self.api.api_port}")
        print(f"  Log level: {self.api.log_level}")

        print("\n[Database]")
        if self.database.database_url_override:
            print(f"  URL override: {self.database.database_url_override.split('://')[0]}://...")
        else:
            print(f"  Host: {self.database.postgres_host}:{self.database.postgres_port}")
            print(f"  Database: {self.database.postgres_db}")
            print(f"  User: {self.database.postgres_user}")

        print("\n[LLM]")
        print(f"  Provider: {self.llm.llm_provider}")
        print(f"  Model: {self.llm.llm_model_name}")
        print(f"  Milestone generation: {'on' if self.llm.is_configured else 'off (fallback only)'}")
        print(f"  Timeout: {self.llm.milestone_timeout_seconds}s")

        print("\n[Auth]")
        print(f"  Algorithm: {self.auth.jwt_algorithm}")
        print(f"  Audience: {self.auth.jwt_audience or '-'}")

        print("\n[Langfuse]")
        print(f"  Enabled: {self.langfuse.enabled}")
        print(f"  Base URL: {self.langfuse.langfuse_base_url}")

        print("=" * 60)


@lru_cache
def get_settings() -> Settings:
    """전역 설정 인스턴스 반환 (최초 호출 시 한 번만 생성)"""
    return Settings()


if __name__ == "__main__":
    get_settings().print_config()
