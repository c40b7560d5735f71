"""Supabase 스토리지 모듈."""

import logging
from datetime import UTC, datetime
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from repo_scout.exceptions import StorageError
from repo_scout.models import CatalogRecord

logger = logging.getLogger(__name__)


class SupabaseStorage:
    """Supabase에 카탈로그 레코드를 저장한다."""

    def __init__(
        self,
        url: str | None,
        key: str | None,
        table: str = "catalog_records",
    ) -> None:
        """
        Args:
            url: Supabase 프로젝트 URL
            key: Supabase anon key
            table: 카탈로그 테이블 이름
        """
        self.table = table
        self.client: Client | None = None
        if url and key:
            self.client = create_client(url, key)

    @property
    def is_configured(self) -> bool:
        """Supabase가 설정되었는지 확인한다."""
        return self.client is not None

    def _update_data(self, record: CatalogRecord, now: str) -> dict[str, Any]:
        """재스캔 시 갱신하는 컬럼."""
        return {
            "popularity": record.popularity,
            "document_excerpt": record.document_excerpt,
            "analysis": record.analysis.model_dump(mode="json"),
            "category": record.category.value,
            "utility_score": record.utility_score,
            "last_scanned_at": now,
        }

    def _insert_data(self, record: CatalogRecord, now: str) -> dict[str, Any]:
        """최초 저장 시 기록하는 전체 컬럼."""
        data = self._update_data(record, now)
        data.update(
            {
                "external_id": record.external_id,
                "name": record.name,
                "qualified_name": record.qualified_name,
                "description": record.description,
                "language": record.language,
                "topics": record.topics,
                "first_seen_at": now,
            }
        )
        return data

    async def upsert_record(self, record: CatalogRecord) -> bool:
        """레코드를 저장하고 새로 추가되었는지 반환한다."""
        if not self.client:
            raise StorageError("Supabase is not configured")

        now = datetime.now(UTC).isoformat()

        try:
            # 기존 레코드 확인
            existing = (
                self.client.table(self.table)
                .select("id")
                .eq("external_id", record.external_id)
                .execute()
            )

            if existing.data:
                # first_seen_at, external_id는 변경하지 않는다
                self.client.table(self.table).update(
                    self._update_data(record, now)
                ).eq("id", existing.data[0]["id"]).execute()
                return False

            self.client.table(self.table).insert(
                self._insert_data(record, now)
            ).execute()
        except (APIError, httpx.HTTPError) as e:
            raise StorageError(
                f"Failed to save {record.qualified_name}: {e}"
            ) from e

        logger.info(f"New record: {record.qualified_name}")
        return True

    async def query(
        self,
        language: str | None = None,
        category: str | None = None,
        search: str | None = None,
        limit: int = 50,
    ) -> list[CatalogRecord]:
        """카탈로그를 조회한다.

        Args:
            language: 언어 필터
            category: 카테고리 필터
            search: 이름/설명 부분 일치 검색어
            limit: 최대 조회 개수
        """
        if not self.client:
            return []

        request = self.client.table(self.table).select("*")
        if language:
            request = request.eq("language", language)
        if category:
            request = request.eq("category", category)
        if search:
            pattern = f"%{search}%"
            request = request.or_(
                f"name.ilike.{pattern},description.ilike.{pattern}"
            )

        try:
            response = request.order("utility_score", desc=True).limit(limit).execute()
        except (APIError, httpx.HTTPError) as e:
            raise StorageError(f"Failed to query catalog: {e}") from e

        return [CatalogRecord.model_validate(row) for row in response.data or []]
