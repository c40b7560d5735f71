"""데이터 모델 정의."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """저장소 카테고리."""

    authentication = "authentication"
    api = "api"
    database = "database"
    ui = "ui"
    framework = "framework"
    cli = "cli"
    testing = "testing"
    general = "general"


class DocumentationQuality(str, Enum):
    """문서화 품질 등급."""

    excellent = "excellent"
    good = "good"
    basic = "basic"
    poor = "poor"


class Complexity(str, Enum):
    """복잡도 등급."""

    high = "high"
    medium = "medium"
    low = "low"


class RepositorySummary(BaseModel):
    """검색 API가 반환한 저장소 요약 (읽기 전용)."""

    model_config = ConfigDict(frozen=True)

    external_id: int = Field(description="GitHub 저장소 ID")
    name: str = Field(description="저장소 이름")
    qualified_name: str = Field(description="저장소 전체 이름 (owner/repo)")
    description: str | None = Field(default=None, description="저장소 설명")
    language: str | None = Field(default=None, description="주 프로그래밍 언어")
    popularity: int = Field(default=0, ge=0, description="스타 수")
    topics: tuple[str, ...] = Field(default=(), description="토픽 태그")


class RepositoryAnalysis(BaseModel):
    """휴리스틱 분석 결과."""

    category: Category = Field(description="카테고리")
    features: list[str] = Field(default_factory=list, description="감지된 기능 태그")
    has_documentation: bool = Field(description="README가 500자를 넘는지 여부")
    documentation_quality: DocumentationQuality = Field(description="문서화 품질")
    complexity: Complexity = Field(description="복잡도")
    production_ready: bool = Field(description="프로덕션 사용 가능 여부")


class CatalogRecord(BaseModel):
    """카탈로그에 저장되는 저장소 레코드."""

    external_id: int = Field(description="GitHub 저장소 ID (중복 제거 키)")
    name: str = Field(description="저장소 이름")
    qualified_name: str = Field(description="저장소 전체 이름 (owner/repo)")
    description: str | None = Field(default=None, description="저장소 설명")
    language: str | None = Field(default=None, description="주 프로그래밍 언어")
    popularity: int = Field(default=0, ge=0, description="스타 수")
    topics: list[str] = Field(default_factory=list, description="토픽 태그")
    document_excerpt: str = Field(description="README 앞부분")
    analysis: RepositoryAnalysis = Field(description="분석 결과")
    utility_score: float = Field(ge=0, le=10, description="유용성 점수 (0-10)")

    # 저장소가 채운다
    first_seen_at: datetime | None = Field(default=None, description="최초 저장 시각")
    last_scanned_at: datetime | None = Field(
        default=None, description="마지막 스캔 시각"
    )

    @property
    def category(self) -> Category:
        return self.analysis.category


class ScanState(BaseModel):
    """프로세스 수명 동안 유지되는 스캔 상태 (저장하지 않음)."""

    is_running: bool = False
    started_at: datetime | None = None
    completed_at: datetime | None = None
    total_processed: int = 0
    next_scheduled_at: datetime | None = None


class ScanStatus(ScanState):
    """외부에 노출하는 스캔 상태 스냅샷."""

    next_scan_in: str | None = Field(
        default=None, description="다음 스캔까지 남은 시간 (예: '3h 12m')"
    )
