"""데이터 소스 모듈."""

from repo_scout.sources.base import Source
from repo_scout.sources.client import GitHubClient
from repo_scout.sources.github import GitHubSearchSource

__all__ = ["GitHubClient", "GitHubSearchSource", "Source"]
