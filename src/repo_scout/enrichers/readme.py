"""README 기반 저장소 enrichment 모듈."""

import base64
import binascii
import logging
from enum import Enum

from repo_scout.analyzers import score_repository
from repo_scout.exceptions import FetchError, StorageError
from repo_scout.models import CatalogRecord, RepositorySummary
from repo_scout.sources.client import GitHubClient
from repo_scout.storage.base import CatalogStore

logger = logging.getLogger(__name__)


class EnrichResult(str, Enum):
    """저장소 하나의 처리 결과."""

    stored = "stored"
    skipped = "skipped"
    failed = "failed"


class ReadmeEnricher:
    """README를 가져와 분석하고 카탈로그에 저장한다.

    README가 없는 저장소는 카탈로그에 넣지 않는다.
    """

    def __init__(
        self,
        client: GitHubClient,
        storage: CatalogStore,
        excerpt_limit: int = 10_000,
    ) -> None:
        """
        Args:
            client: GitHub API 클라이언트
            storage: 카탈로그 저장소
            excerpt_limit: 저장할 README 최대 길이 (문자)
        """
        self.client = client
        self.storage = storage
        self.excerpt_limit = excerpt_limit

    async def fetch_readme(self, repo_name: str) -> str | None:
        """GitHub API에서 README를 가져온다. 없거나 실패하면 None."""
        try:
            data = await self.client.get_json(f"/repos/{repo_name}/readme")
        except FetchError as e:
            logger.debug(f"No README for {repo_name}: {e}")
            return None

        if not isinstance(data, dict):
            return None
        content = data.get("content")
        if not content or not isinstance(content, str):
            return None

        try:
            return base64.b64decode(content).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError):
            logger.debug(f"Undecodable README for {repo_name}")
            return None

    def build_record(self, repo: RepositorySummary, readme: str) -> CatalogRecord:
        """요약 정보와 README로 카탈로그 레코드를 만든다."""
        analysis, score = score_repository(repo, readme)
        return CatalogRecord(
            external_id=repo.external_id,
            name=repo.name,
            qualified_name=repo.qualified_name,
            description=repo.description,
            language=repo.language,
            popularity=repo.popularity,
            topics=list(repo.topics),
            document_excerpt=readme[: self.excerpt_limit],
            analysis=analysis,
            utility_score=score,
        )

    async def enrich(self, repo: RepositorySummary) -> EnrichResult:
        """저장소 하나를 처리한다. 실패해도 예외를 던지지 않는다."""
        try:
            readme = await self.fetch_readme(repo.qualified_name)
            if readme is None:
                return EnrichResult.skipped

            record = self.build_record(repo, readme)
            await self.storage.upsert_record(record)
        except StorageError as e:
            logger.error(f"Error processing {repo.qualified_name}: {e}")
            return EnrichResult.failed
        except Exception:
            # 저장소 하나의 실패가 언어 전체 스캔을 멈추지 않게 한다
            logger.exception(f"Unexpected error processing {repo.qualified_name}")
            return EnrichResult.failed

        return EnrichResult.stored
