"""GitHub 저장소 검색 소스."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from repo_scout.exceptions import FetchError
from repo_scout.models import RepositorySummary
from repo_scout.sources.client import GitHubClient

logger = logging.getLogger(__name__)

RepositoryHandler = Callable[[RepositorySummary], Awaitable[object]]

# 진행 상황 로그 간격
PROGRESS_LOG_INTERVAL = 50


class GitHubSearchSource:
    """언어별 인기 저장소를 페이지 단위로 수집한다."""

    SEARCH_PATH = "/search/repositories"

    def __init__(
        self,
        client: GitHubClient,
        min_stars: int = 50,
        page_size: int = 100,
        item_delay: float = 0.5,
    ) -> None:
        """
        Args:
            client: GitHub API 클라이언트
            min_stars: 최소 스타 수 필터
            page_size: 페이지 크기 (최대 100)
            item_delay: 저장소 처리 사이 대기 시간 (초)
        """
        self.client = client
        self.min_stars = min_stars
        self.page_size = page_size
        self.item_delay = item_delay

    def _build_params(self, language: str, page: int) -> dict[str, str | int]:
        """검색 쿼리 파라미터를 생성한다."""
        return {
            "q": f"language:{language} stars:>{self.min_stars}",
            "sort": "stars",
            "order": "desc",
            "per_page": self.page_size,
            "page": page,
        }

    def _parse_repository(self, item: dict[str, Any]) -> RepositorySummary | None:
        """검색 결과 아이템을 RepositorySummary로 변환한다."""
        try:
            return RepositorySummary(
                external_id=item["id"],
                name=item["name"],
                qualified_name=item["full_name"],
                description=item.get("description"),
                language=item.get("language"),
                popularity=item.get("stargazers_count") or 0,
                topics=tuple(item.get("topics") or ()),
            )
        except (KeyError, ValidationError) as e:
            logger.warning(f"Skipping malformed search item: {e}")
            return None

    async def fetch_page(
        self, language: str, page: int
    ) -> tuple[list[RepositorySummary], int]:
        """검색 결과 한 페이지를 가져온다.

        rate limit은 클라이언트가 같은 페이지를 재요청하여 처리한다.

        Returns:
            (변환된 저장소 목록, 응답에 담긴 원본 아이템 수)

        Raises:
            FetchError: 페이지 요청 실패
        """
        data = await self.client.get_json(
            self.SEARCH_PATH, params=self._build_params(language, page)
        )
        items: list[dict[str, Any]] = data.get("items") or []

        repositories = []
        for item in items:
            repo = self._parse_repository(item)
            if repo:
                repositories.append(repo)
        return repositories, len(items)

    async def fetch(
        self,
        language: str,
        quota: int,
        handler: RepositoryHandler,
        stop_event: asyncio.Event | None = None,
    ) -> int:
        """언어별로 최대 ``quota``개의 저장소를 인기순으로 순회하며 handler에 넘긴다.

        Args:
            language: 언어 필터 (예: Go)
            quota: 처리 시도할 최대 저장소 수
            handler: 저장소마다 호출할 비동기 함수
            stop_event: 설정되면 다음 페이지/저장소 전에 중단한다.

        Returns:
            처리를 시도한 저장소 수 (저장 성공 여부와 무관)
        """
        scanned = 0
        page = 1

        while scanned < quota:
            if stop_event and stop_event.is_set():
                break

            try:
                repositories, item_count = await self.fetch_page(language, page)
            except FetchError as e:
                logger.error(f"Error scanning {language} page {page}: {e}")
                break

            # 변환에 모두 실패한 페이지는 소진이 아니다
            if item_count == 0:
                logger.info(f"No more {language} repos to scan")
                break

            for repo in repositories:
                if scanned >= quota:
                    break
                if stop_event and stop_event.is_set():
                    break

                await handler(repo)
                scanned += 1

                if scanned % PROGRESS_LOG_INTERVAL == 0:
                    logger.info(f"{language}: {scanned}/{quota} repos scanned")

                await asyncio.sleep(self.item_delay)

            page += 1

        logger.info(f"{language}: {scanned} repos scanned")
        return scanned
