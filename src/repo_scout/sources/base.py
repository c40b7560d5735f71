"""소스 프로토콜 정의."""

import asyncio
from typing import Protocol

from repo_scout.sources.github import RepositoryHandler


class Source(Protocol):
    """데이터 소스 프로토콜."""

    async def fetch(
        self,
        language: str,
        quota: int,
        handler: RepositoryHandler,
        stop_event: asyncio.Event | None = None,
    ) -> int:
        """언어별 저장소를 handler에 넘기고 시도한 개수를 반환한다."""
        ...
