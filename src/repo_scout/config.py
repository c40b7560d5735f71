"""설정 관리 모듈."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # GitHub
    github_token: str | None = Field(default=None, description="GitHub API 토큰")
    github_api_base: str = Field(
        default="https://api.github.com",
        description="GitHub API 기본 URL",
    )

    # 스캔 정책
    scan_languages: list[str] = Field(
        default=["JavaScript", "Python", "Java", "TypeScript", "Go"],
        description="스캔할 언어 목록 (순서대로 스캔)",
    )
    repos_per_language: int = Field(
        default=600,
        ge=1,
        description="언어별 스캔 시도 최대 저장소 수",
    )
    min_stars: int = Field(default=50, ge=0, description="최소 스타 수")
    page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="검색 페이지 크기 (GitHub 최대 100)",
    )

    # 주기 및 지연
    scan_interval_hours: float = Field(
        default=12.0,
        gt=0,
        description="정기 스캔 주기 (시간)",
    )
    item_delay: float = Field(default=0.5, ge=0, description="저장소 간 대기 (초)")
    language_delay: float = Field(default=5.0, ge=0, description="언어 간 대기 (초)")
    rate_limit_default_wait: float = Field(
        default=60.0,
        ge=0,
        description="리셋 헤더가 없을 때 rate limit 대기 시간 (초)",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP 요청 타임아웃 (초)",
    )

    readme_excerpt_limit: int = Field(
        default=10_000,
        ge=0,
        description="저장할 README 최대 길이 (문자)",
    )

    # Supabase
    supabase_url: str | None = Field(default=None, description="Supabase URL")
    supabase_key: str | None = Field(default=None, description="Supabase anon key")
    supabase_table: str = Field(
        default="catalog_records",
        description="카탈로그 테이블 이름",
    )

    log_level: str = Field(default="INFO", description="로그 레벨")


settings = Settings()
