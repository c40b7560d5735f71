"""GitHubSearchSource 테스트."""

import asyncio
import logging
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from helpers import make_client, search_item
from repo_scout.models import RepositorySummary
from repo_scout.sources.github import GitHubSearchSource


def _paged_handler(
    pages: dict[int, httpx.Response], requests: list[httpx.Request]
):
    """페이지 번호별 응답을 돌려주는 핸들러를 만든다."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        page = int(request.url.params["page"])
        return pages.get(page, httpx.Response(200, json={"items": []}))

    return handler


def _page(*items: dict) -> httpx.Response:
    return httpx.Response(200, json={"total_count": 1000, "items": list(items)})


class _Recorder:
    """handler 호출을 기록한다."""

    def __init__(self) -> None:
        self.seen: list[RepositorySummary] = []

    async def __call__(self, repo: RepositorySummary) -> None:
        self.seen.append(repo)


class TestGitHubSearchSource:
    """GitHubSearchSource 테스트."""

    def test_build_params(self) -> None:
        """검색 쿼리는 언어, 최소 스타, 인기순 정렬을 포함한다."""
        source = GitHubSearchSource(make_client(lambda r: _page()), min_stars=50)
        params = source._build_params("Go", 3)
        assert params == {
            "q": "language:Go stars:>50",
            "sort": "stars",
            "order": "desc",
            "per_page": 100,
            "page": 3,
        }

    def test_parse_repository(self) -> None:
        """검색 아이템이 RepositorySummary로 변환된다."""
        source = GitHubSearchSource(make_client(lambda r: _page()))
        repo = source._parse_repository(search_item(42, "acme/rocket", stars=1234))
        assert repo is not None
        assert repo.external_id == 42
        assert repo.name == "rocket"
        assert repo.qualified_name == "acme/rocket"
        assert repo.popularity == 1234
        assert repo.topics == ("go", "tool")

    def test_parse_repository_malformed(self) -> None:
        """필수 필드가 없는 아이템은 건너뛴다."""
        source = GitHubSearchSource(make_client(lambda r: _page()))
        assert source._parse_repository({"name": "broken"}) is None

    @pytest.mark.asyncio
    async def test_fetch_stops_at_quota(self) -> None:
        """quota에 도달하면 페이지 중간이라도 멈춘다."""
        requests: list[httpx.Request] = []
        pages = {
            1: _page(search_item(1, "a/one"), search_item(2, "a/two")),
            2: _page(search_item(3, "a/three"), search_item(4, "a/four")),
        }
        source = GitHubSearchSource(
            make_client(_paged_handler(pages, requests)), page_size=2, item_delay=0
        )
        recorder = _Recorder()

        async with source.client:
            count = await source.fetch("Go", 3, recorder)

        assert count == 3
        assert [r.external_id for r in recorder.seen] == [1, 2, 3]
        assert [r.url.params["page"] for r in requests] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_fetch_stops_when_results_exhausted(self) -> None:
        """빈 페이지가 오면 quota를 채우지 못해도 종료한다."""
        requests: list[httpx.Request] = []
        pages = {1: _page(search_item(1, "a/one"), search_item(2, "a/two"))}
        source = GitHubSearchSource(
            make_client(_paged_handler(pages, requests)), item_delay=0
        )
        recorder = _Recorder()

        async with source.client:
            count = await source.fetch("Go", 600, recorder)

        assert count == 2
        assert len(requests) == 2

    @pytest.mark.asyncio
    async def test_fetch_stops_on_failure_without_raising(self) -> None:
        """페이지 요청이 실패하면 예외 없이 지금까지의 개수를 반환한다."""
        requests: list[httpx.Request] = []
        pages = {
            1: _page(search_item(1, "a/one")),
            2: httpx.Response(500),
            3: _page(search_item(3, "a/three")),
        }
        source = GitHubSearchSource(
            make_client(_paged_handler(pages, requests)), page_size=1, item_delay=0
        )
        recorder = _Recorder()

        async with source.client:
            count = await source.fetch("Go", 10, recorder)

        assert count == 1
        assert len(requests) == 2

    @pytest.mark.asyncio
    async def test_fetch_retries_same_page_after_throttle(self) -> None:
        """rate limit이면 리셋 시각까지 기다린 뒤 같은 페이지를 다시 요청한다."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if len(requests) == 1:
                return httpx.Response(403, headers={"X-RateLimit-Reset": "1002"})
            return _page(search_item(1, "a/one"))

        source = GitHubSearchSource(make_client(handler), item_delay=0)
        recorder = _Recorder()

        with (
            patch("repo_scout.sources.client.time.time", return_value=1000.0),
            patch(
                "repo_scout.sources.client.asyncio.sleep", new_callable=AsyncMock
            ) as mock_sleep,
        ):
            async with source.client:
                count = await source.fetch("Go", 1, recorder)

        assert count == 1
        waited = mock_sleep.await_args_list[0].args[0]
        assert waited >= 2.0
        assert [r.url.params["page"] for r in requests] == ["1", "1"]
        assert requests[0].url == requests[1].url

    @pytest.mark.asyncio
    async def test_skipped_items_consume_quota(self) -> None:
        """handler 결과와 무관하게 시도한 저장소는 quota를 소모한다."""
        pages = {1: _page(*(search_item(i, f"a/r{i}") for i in range(1, 6)))}
        source = GitHubSearchSource(
            make_client(_paged_handler(pages, [])), item_delay=0
        )
        handler = AsyncMock(return_value="skipped")

        async with source.client:
            count = await source.fetch("Go", 3, handler)

        assert count == 3
        assert handler.await_count == 3

    @pytest.mark.asyncio
    async def test_fetch_honors_stop_event(self) -> None:
        """stop_event가 설정되어 있으면 요청하지 않는다."""
        requests: list[httpx.Request] = []
        source = GitHubSearchSource(
            make_client(_paged_handler({}, requests)), item_delay=0
        )
        stop_event = asyncio.Event()
        stop_event.set()

        async with source.client:
            count = await source.fetch("Go", 10, _Recorder(), stop_event=stop_event)

        assert count == 0
        assert requests == []

    @pytest.mark.asyncio
    async def test_fetch_pauses_between_items(self) -> None:
        """저장소 처리 사이에 item_delay만큼 쉰다."""
        pages = {1: _page(search_item(1, "a/one"), search_item(2, "a/two"))}
        source = GitHubSearchSource(
            make_client(_paged_handler(pages, [])), item_delay=0.5
        )

        with patch(
            "repo_scout.sources.github.asyncio.sleep", new_callable=AsyncMock
        ) as mock_sleep:
            async with source.client:
                await source.fetch("Go", 2, _Recorder())

        assert mock_sleep.await_count == 2
        mock_sleep.assert_awaited_with(0.5)

    @pytest.mark.asyncio
    async def test_malformed_page_is_not_exhaustion(self) -> None:
        """아이템이 모두 잘못된 페이지가 와도 다음 페이지를 계속 요청한다."""
        requests: list[httpx.Request] = []
        pages = {
            1: _page({"name": "broken"}, {"id": 9}),
            2: _page(search_item(3, "a/three")),
        }
        source = GitHubSearchSource(
            make_client(_paged_handler(pages, requests)), page_size=2, item_delay=0
        )
        recorder = _Recorder()

        async with source.client:
            count = await source.fetch("Go", 10, recorder)

        assert count == 1
        assert [r.external_id for r in recorder.seen] == [3]
        assert [r.url.params["page"] for r in requests] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_fetch_logs_progress_every_50(self, caplog) -> None:
        """50개를 처리할 때마다 진행 상황을 남긴다."""
        pages = {1: _page(*(search_item(i, f"a/r{i}") for i in range(1, 61)))}
        source = GitHubSearchSource(
            make_client(_paged_handler(pages, [])), item_delay=0
        )

        with caplog.at_level(logging.INFO, logger="repo_scout.sources.github"):
            async with source.client:
                await source.fetch("Go", 60, _Recorder())

        messages = [r.getMessage() for r in caplog.records]
        assert "Go: 50/60 repos scanned" in messages
        assert not any(m.startswith("Go: 60/60") for m in messages)
