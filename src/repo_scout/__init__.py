"""GitHub 저장소 카탈로그 스캐너."""

__version__ = "0.1.0"
