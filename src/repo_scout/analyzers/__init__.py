"""저장소 분석 모듈."""

from repo_scout.analyzers.heuristic import (
    analyze_repository,
    calculate_utility_score,
    score_repository,
)

__all__ = ["analyze_repository", "calculate_utility_score", "score_repository"]
