"""저장소 enrichment 모듈."""

from repo_scout.enrichers.readme import EnrichResult, ReadmeEnricher

__all__ = ["EnrichResult", "ReadmeEnricher"]
