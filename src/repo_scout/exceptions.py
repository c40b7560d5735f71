"""예외 정의."""


class RepoScoutError(Exception):
    """repo-scout 기본 예외."""


class RateLimitError(RepoScoutError):
    """GitHub가 rate limit 응답을 반환했다."""

    def __init__(self, message: str, wait_seconds: float) -> None:
        super().__init__(message)
        self.wait_seconds = wait_seconds


class FetchError(RepoScoutError):
    """rate limit 외의 요청 실패 (네트워크 오류, 2xx 외 응답)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StorageError(RepoScoutError):
    """카탈로그 저장 실패."""
