"""키워드 기반 저장소 분석 및 유용성 점수 계산.

모든 함수는 부수 효과가 없고, 같은 입력에 항상 같은 결과를 반환한다.
"""

from repo_scout.models import (
    Category,
    Complexity,
    DocumentationQuality,
    RepositoryAnalysis,
    RepositorySummary,
)

# 카테고리 판정 규칙. 순서대로 검사하며 처음 일치한 카테고리를 사용한다.
CATEGORY_RULES: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (Category.authentication, ("auth", "authentication")),
    (Category.api, ("api", "rest")),
    (Category.database, ("database", "orm")),
    (Category.ui, ("ui", "component")),
    (Category.framework, ("framework",)),
    (Category.cli, ("cli", "command")),
    (Category.testing, ("testing", "test")),
)

FEATURE_TERMS: tuple[str, ...] = ("typescript", "async", "security", "performance")

MAX_SCORE = 10.0
BASE_SCORE = 5.0

POPULARITY_BONUSES: tuple[tuple[int, float], ...] = (
    (10_000, 2.0),
    (1_000, 1.0),
    (100, 0.5),
)

QUALITY_BONUSES: dict[DocumentationQuality, float] = {
    DocumentationQuality.excellent: 1.5,
    DocumentationQuality.good: 1.0,
    DocumentationQuality.basic: 0.5,
}

FEATURE_BONUS = 0.2
PRODUCTION_READY_BONUS = 1.0


def detect_category(readme_lower: str) -> Category:
    """소문자 README에서 카테고리를 판정한다."""
    for category, terms in CATEGORY_RULES:
        if any(term in readme_lower for term in terms):
            return category
    return Category.general


def detect_features(readme_lower: str) -> list[str]:
    """소문자 README에서 기능 태그를 감지한다."""
    return [term for term in FEATURE_TERMS if term in readme_lower]


def assess_documentation_quality(readme: str) -> DocumentationQuality:
    """README 길이와 설치/사용법 섹션 유무로 문서화 품질을 평가한다."""
    length = len(readme)
    readme_lower = readme.lower()
    has_install = "install" in readme_lower
    has_usage = "usage" in readme_lower or "example" in readme_lower

    if length > 3000 and has_install and has_usage:
        return DocumentationQuality.excellent
    if length > 1500 and (has_install or has_usage):
        return DocumentationQuality.good
    if length > 500:
        return DocumentationQuality.basic
    return DocumentationQuality.poor


def assess_complexity(readme: str) -> Complexity:
    """README 길이로 복잡도를 추정한다."""
    length = len(readme)
    if length > 5000:
        return Complexity.high
    if length > 2000:
        return Complexity.medium
    return Complexity.low


def analyze_repository(repo: RepositorySummary, readme: str) -> RepositoryAnalysis:
    """저장소 메타데이터와 README로 분석 결과를 만든다."""
    readme_lower = readme.lower()

    return RepositoryAnalysis(
        category=detect_category(readme_lower),
        features=detect_features(readme_lower),
        has_documentation=len(readme) > 500,
        documentation_quality=assess_documentation_quality(readme),
        complexity=assess_complexity(readme),
        production_ready="production" in readme_lower or repo.popularity > 1000,
    )


def calculate_utility_score(popularity: int, analysis: RepositoryAnalysis) -> float:
    """인기도와 분석 결과로 유용성 점수를 계산한다 (5.0 ~ 10.0)."""
    score = BASE_SCORE

    for threshold, bonus in POPULARITY_BONUSES:
        if popularity > threshold:
            score += bonus
            break

    score += QUALITY_BONUSES.get(analysis.documentation_quality, 0.0)
    score += len(analysis.features) * FEATURE_BONUS

    if analysis.production_ready:
        score += PRODUCTION_READY_BONUS

    return min(score, MAX_SCORE)


def score_repository(
    repo: RepositorySummary, readme: str
) -> tuple[RepositoryAnalysis, float]:
    """분석과 점수 계산을 한 번에 수행한다."""
    analysis = analyze_repository(repo, readme)
    return analysis, calculate_utility_score(repo.popularity, analysis)
