"""공용 테스트 픽스처."""

from collections.abc import Callable

import pytest

from repo_scout.models import RepositorySummary


@pytest.fixture
def make_summary() -> Callable[..., RepositorySummary]:
    """RepositorySummary 팩토리를 반환한다."""

    def _make(
        external_id: int = 1,
        qualified_name: str = "acme/widget",
        popularity: int = 100,
        description: str | None = "A widget",
    ) -> RepositorySummary:
        return RepositorySummary(
            external_id=external_id,
            name=qualified_name.split("/")[1],
            qualified_name=qualified_name,
            description=description,
            language="Go",
            popularity=popularity,
            topics=("go",),
        )

    return _make
