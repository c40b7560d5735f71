"""스캔 오케스트레이터.

언어 목록을 순서대로 스캔한다. 동시에 두 개의 스캔이 실행되지 않도록
``ScanState.is_running``으로 막는다 (단일 이벤트 루프에서 검사와 설정 사이에
await가 없으므로 원자적이다).
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from repo_scout.config import Settings
from repo_scout.enrichers import ReadmeEnricher
from repo_scout.models import ScanState, ScanStatus
from repo_scout.sources import GitHubClient, GitHubSearchSource, Source
from repo_scout.storage import CatalogStore, InMemoryStorage, SupabaseStorage

logger = logging.getLogger(__name__)


def format_remaining(until: datetime | None) -> str | None:
    """남은 시간을 'Xh Ym' 형식으로 표시한다."""
    if until is None:
        return None
    seconds = max(int((until - datetime.now(UTC)).total_seconds()), 0)
    hours, remainder = divmod(seconds, 3600)
    return f"{hours}h {remainder // 60}m"


class ScanOrchestrator:
    """언어별 스캔을 순차 실행하고 실행 통계를 기록한다."""

    def __init__(
        self,
        source: Source,
        enricher: ReadmeEnricher,
        languages: Sequence[str],
        quota: int = 600,
        language_delay: float = 5.0,
    ) -> None:
        """
        Args:
            source: 언어별 저장소 소스
            enricher: 저장소 처리기
            languages: 스캔할 언어 (순서 유지)
            quota: 언어별 최대 처리 시도 수
            language_delay: 언어 사이 대기 시간 (초)
        """
        self.source = source
        self.enricher = enricher
        self.languages = list(languages)
        self.quota = quota
        self.language_delay = language_delay
        self.state = ScanState()
        self._stop_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self.state.is_running

    def cancel(self) -> None:
        """진행 중인 스캔을 다음 페이지/저장소/언어 경계에서 멈추게 한다."""
        if self.state.is_running:
            logger.info("Cancelling in-flight scan")
            self._stop_event.set()

    def schedule_next(self, at: datetime | None) -> None:
        """다음 예정 스캔 시각을 기록한다. None이면 예약 없음."""
        self.state.next_scheduled_at = at

    def status(self) -> ScanStatus:
        """현재 스캔 상태 스냅샷을 반환한다."""
        return ScanStatus(
            **self.state.model_dump(),
            next_scan_in=format_remaining(self.state.next_scheduled_at),
        )

    async def run_scan(self) -> int | None:
        """전체 언어를 한 번 스캔한다.

        Returns:
            이번 실행에서 처리를 시도한 저장소 수. 이미 실행 중이면 None.
        """
        if self.state.is_running:
            logger.warning("Scan already in progress, skipping")
            return None

        self.state.is_running = True
        self.state.started_at = datetime.now(UTC)
        self._stop_event.clear()
        processed = 0

        logger.info(
            f"Starting scan: {len(self.languages)} languages, "
            f"{self.quota} repos per language"
        )

        try:
            for index, language in enumerate(self.languages):
                if self._stop_event.is_set():
                    logger.info("Scan cancelled")
                    break

                logger.info(f"Scanning {language} repositories...")
                try:
                    count = await self.source.fetch(
                        language,
                        self.quota,
                        self.enricher.enrich,
                        stop_event=self._stop_event,
                    )
                except Exception:
                    logger.exception(f"Scan failed for {language}, continuing")
                else:
                    processed += count
                    self.state.total_processed += count

                if index < len(self.languages) - 1:
                    await asyncio.sleep(self.language_delay)

            self.state.completed_at = datetime.now(UTC)
            duration = (self.state.completed_at - self.state.started_at).total_seconds()
            logger.info(f"Scan completed in {duration / 60:.1f} minutes")
            logger.info(f"Total repos scanned: {self.state.total_processed}")
        finally:
            self.state.is_running = False

        return processed


def create_orchestrator(settings: Settings, client: GitHubClient) -> ScanOrchestrator:
    """설정으로 오케스트레이터를 구성한다."""
    storage: CatalogStore
    supabase = SupabaseStorage(
        url=settings.supabase_url,
        key=settings.supabase_key,
        table=settings.supabase_table,
    )
    if supabase.is_configured:
        storage = supabase
    else:
        logger.warning("Supabase not configured, records are kept in memory only")
        storage = InMemoryStorage()

    source = GitHubSearchSource(
        client,
        min_stars=settings.min_stars,
        page_size=settings.page_size,
        item_delay=settings.item_delay,
    )
    enricher = ReadmeEnricher(
        client,
        storage,
        excerpt_limit=settings.readme_excerpt_limit,
    )
    return ScanOrchestrator(
        source,
        enricher,
        languages=settings.scan_languages,
        quota=settings.repos_per_language,
        language_delay=settings.language_delay,
    )


def create_client(settings: Settings) -> GitHubClient:
    """설정으로 GitHub 클라이언트를 만든다."""
    return GitHubClient(
        token=settings.github_token,
        base_url=settings.github_api_base,
        timeout=settings.request_timeout,
        default_wait=settings.rate_limit_default_wait,
    )
