"""GitHub API 클라이언트 (rate limit 대기 포함)."""

import asyncio
import logging
import time
from types import TracebackType
from typing import Any, Self

import httpx

from repo_scout.exceptions import FetchError, RateLimitError

logger = logging.getLogger(__name__)

# GitHub는 rate limit 초과 시 403 또는 429를 반환한다
THROTTLE_STATUS_CODES = frozenset({403, 429})


class GitHubClient:
    """GitHub REST API를 호출하고 rate limit 응답을 분류한다."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        default_wait: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            token: GitHub API 토큰. None이면 인증 없이 요청한다.
            base_url: API 기본 URL
            timeout: 요청별 타임아웃 (초)
            default_wait: 리셋 헤더가 없을 때 대기 시간 (초)
            transport: 테스트용 httpx 트랜스포트
        """
        self.base_url = base_url
        self.timeout = timeout
        self.default_wait = default_wait
        self.headers = {"Accept": "application/vnd.github.v3+json"}
        if token:
            self.headers["Authorization"] = f"token {token}"
        else:
            logger.warning("No GitHub token provided, rate limits will be strict")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self._transport,
            follow_redirects=True,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _wait_seconds(self, response: httpx.Response) -> float:
        """응답 헤더에서 재시도까지 기다릴 시간을 계산한다.

        secondary rate limit은 ``Retry-After``만 의미가 있으므로 먼저 본다.
        """
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return max(float(retry_after), 0.0)
            except ValueError:
                pass

        reset = response.headers.get("X-RateLimit-Reset")
        if reset:
            try:
                return max(float(reset) - time.time(), 0.0)
            except ValueError:
                pass

        return self.default_wait

    async def request(
        self, path: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """GET 요청을 한 번 보낸다.

        Raises:
            RateLimitError: 403/429 응답. ``wait_seconds`` 만큼 기다린 뒤 재시도해야 한다.
            FetchError: 그 외 2xx가 아닌 응답 또는 네트워크 오류
        """
        if self._client is None:
            raise RuntimeError("GitHubClient must be used as an async context manager")

        try:
            response = await self._client.get(path, params=params)
        except httpx.RequestError as e:
            raise FetchError(f"Request to {path} failed: {e}") from e

        if response.status_code in THROTTLE_STATUS_CODES:
            raise RateLimitError(
                f"Rate limited on {path} ({response.status_code})",
                wait_seconds=self._wait_seconds(response),
            )

        if not response.is_success:
            raise FetchError(
                f"GitHub API error on {path}: {response.status_code}",
                status_code=response.status_code,
            )

        return response

    async def get_json(
        self, path: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """JSON 응답을 가져온다. rate limit이면 리셋 시각까지 기다린 뒤 같은 요청을 재시도한다.

        Raises:
            FetchError: rate limit 외의 실패
        """
        while True:
            try:
                response = await self.request(path, params)
            except RateLimitError as e:
                logger.warning(f"Rate limit hit, waiting {e.wait_seconds:.0f}s...")
                await asyncio.sleep(e.wait_seconds)
                continue

            try:
                data: dict[str, Any] = response.json()
            except ValueError as e:
                raise FetchError(f"Invalid JSON from {path}") from e
            return data
