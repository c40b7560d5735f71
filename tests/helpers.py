"""테스트용 GitHub API 응답 헬퍼."""

import base64
from collections.abc import Callable
from typing import Any

import httpx

from repo_scout.sources.client import GitHubClient


def search_item(repo_id: int, full_name: str, stars: int = 100) -> dict[str, Any]:
    """검색 API 응답의 저장소 아이템을 만든다."""
    owner, name = full_name.split("/")
    return {
        "id": repo_id,
        "name": name,
        "full_name": full_name,
        "description": f"{name} description",
        "language": "Go",
        "stargazers_count": stars,
        "topics": ["go", "tool"],
        "owner": {"login": owner},
    }


def readme_payload(text: str) -> dict[str, str]:
    """README API 응답 본문을 만든다."""
    return {
        "encoding": "base64",
        "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
    }


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> GitHubClient:
    """MockTransport를 사용하는 GitHubClient를 만든다."""
    return GitHubClient(
        token="test-token",
        base_url="https://api.github.test",
        transport=httpx.MockTransport(handler),
    )
