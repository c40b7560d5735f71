"""프로세스 내 메모리 스토리지 (드라이런, 테스트용)."""

from datetime import UTC, datetime

from repo_scout.models import CatalogRecord


class InMemoryStorage:
    """external_id를 키로 레코드를 메모리에 보관한다."""

    def __init__(self) -> None:
        self.records: dict[int, CatalogRecord] = {}

    async def upsert_record(self, record: CatalogRecord) -> bool:
        """레코드를 저장하고 새로 추가되었는지 반환한다."""
        now = datetime.now(UTC)
        existing = self.records.get(record.external_id)

        if existing:
            self.records[record.external_id] = existing.model_copy(
                update={
                    "popularity": record.popularity,
                    "document_excerpt": record.document_excerpt,
                    "analysis": record.analysis,
                    "utility_score": record.utility_score,
                    "last_scanned_at": now,
                }
            )
            return False

        self.records[record.external_id] = record.model_copy(
            update={"first_seen_at": now, "last_scanned_at": now}
        )
        return True

    async def query(
        self,
        language: str | None = None,
        category: str | None = None,
        search: str | None = None,
        limit: int = 50,
    ) -> list[CatalogRecord]:
        """조건에 맞는 레코드를 유용성 점수 내림차순으로 반환한다."""
        results = list(self.records.values())
        if language:
            results = [r for r in results if r.language == language]
        if category:
            results = [r for r in results if r.category.value == category]
        if search:
            needle = search.lower()
            results = [
                r
                for r in results
                if needle in r.name.lower() or needle in (r.description or "").lower()
            ]

        results.sort(key=lambda r: r.utility_score, reverse=True)
        return results[:limit]
