"""카탈로그 저장소 프로토콜 정의."""

from typing import Protocol

from repo_scout.models import CatalogRecord


class CatalogStore(Protocol):
    """external_id 기준으로 upsert하는 카탈로그 저장소."""

    async def upsert_record(self, record: CatalogRecord) -> bool:
        """레코드를 저장한다. 새로 추가되었으면 True를 반환한다.

        Raises:
            StorageError: 저장 실패
        """
        ...

    async def query(
        self,
        language: str | None = None,
        category: str | None = None,
        search: str | None = None,
        limit: int = 50,
    ) -> list[CatalogRecord]:
        """조건에 맞는 레코드를 유용성 점수 내림차순으로 조회한다."""
        ...
