"""CLI 엔트리포인트."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from repo_scout.analyzers import score_repository
from repo_scout.config import settings
from repo_scout.models import CatalogRecord, RepositorySummary
from repo_scout.scanner import create_client, create_orchestrator
from repo_scout.scheduler import configure_logging, serve
from repo_scout.storage import SupabaseStorage

console = Console()

app = typer.Typer(
    name="repo-scout",
    help="GitHub 인기 저장소를 스캔하고 유용성 점수를 매겨 카탈로그에 저장합니다.",
    no_args_is_help=True,
)


def _score_style(score: float) -> str:
    if score >= 8:
        return "green"
    if score >= 6.5:
        return "yellow"
    return "dim"


def _render_records(records: list[CatalogRecord]) -> None:
    """카탈로그 레코드를 Rich 테이블로 렌더링한다."""
    if not records:
        console.print("\n[yellow]조건에 맞는 저장소가 없습니다.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("#", style="dim", width=3)
    table.add_column("저장소", style="bold")
    table.add_column("언어", width=12)
    table.add_column("⭐ Stars", justify="right", width=10)
    table.add_column("카테고리", width=14)
    table.add_column("문서", width=10)
    table.add_column("점수", justify="center", width=8)

    for i, record in enumerate(records, 1):
        style = _score_style(record.utility_score)
        table.add_row(
            str(i),
            f"[link=https://github.com/{record.qualified_name}]"
            f"{record.qualified_name}[/link]",
            record.language or "-",
            f"{record.popularity:,}",
            record.category.value,
            record.analysis.documentation_quality.value,
            f"[{style}]{record.utility_score:.1f}[/]",
        )

    console.print(table)


async def _scan(languages: list[str] | None, quota: int | None) -> int | None:
    """수동 스캔을 한 번 실행한다."""
    async with create_client(settings) as client:
        orchestrator = create_orchestrator(settings, client)
        if languages:
            orchestrator.languages = languages
        if quota:
            orchestrator.quota = quota

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(
                f"{', '.join(orchestrator.languages)} 저장소 스캔 중...", total=None
            )
            return await orchestrator.run_scan()


@app.command()
def scan(
    languages: Annotated[
        list[str] | None,
        typer.Option(
            "--lang",
            "-l",
            help="스캔할 언어 (여러 번 지정 가능, 기본값은 설정값)",
        ),
    ] = None,
    quota: Annotated[
        int | None,
        typer.Option("--quota", "-q", min=1, help="언어별 최대 저장소 수"),
    ] = None,
) -> None:
    """스캔을 한 번 실행합니다."""
    configure_logging()
    try:
        processed = asyncio.run(_scan(languages, quota))
    except KeyboardInterrupt:
        console.print("\n[dim]중단됨[/dim]")
        raise typer.Exit(0) from None
    except Exception as e:
        console.print(f"[red]오류 발생: {e}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]✓[/green] 스캔 완료: {processed or 0}개 저장소 처리")


@app.command("serve")
def serve_command(
    interval: Annotated[
        float | None,
        typer.Option("--interval", "-i", min=0.01, help="스캔 주기 (시간)"),
    ] = None,
) -> None:
    """시작 즉시, 이후 주기적으로 스캔하는 서비스를 실행합니다."""
    configure_logging()
    try:
        asyncio.run(serve(interval))
    except Exception as e:
        console.print(f"[red]오류 발생: {e}[/red]")
        raise typer.Exit(1) from e


@app.command()
def search(
    language: Annotated[
        str | None, typer.Option("--lang", "-l", help="언어 필터")
    ] = None,
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="카테고리 필터")
    ] = None,
    query: Annotated[
        str | None, typer.Option("--query", "-s", help="이름/설명 검색어")
    ] = None,
    limit: Annotated[int, typer.Option("--limit", "-n", min=1, help="최대 개수")] = 50,
) -> None:
    """카탈로그를 유용성 점수 순으로 조회합니다."""
    storage = SupabaseStorage(
        url=settings.supabase_url,
        key=settings.supabase_key,
        table=settings.supabase_table,
    )
    if not storage.is_configured:
        console.print("[red]Supabase가 설정되지 않았습니다.[/red]")
        raise typer.Exit(1)

    try:
        records = asyncio.run(
            storage.query(
                language=language, category=category, search=query, limit=limit
            )
        )
    except Exception as e:
        console.print(f"[red]오류 발생: {e}[/red]")
        raise typer.Exit(1) from e

    _render_records(records)


@app.command()
def analyze(
    readme: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="README 파일"),
    ],
    stars: Annotated[int, typer.Option("--stars", min=0, help="스타 수")] = 0,
) -> None:
    """로컬 README 파일을 분석하고 유용성 점수를 출력합니다."""
    text = readme.read_text(encoding="utf-8", errors="replace")
    repo = RepositorySummary(
        external_id=0,
        name=readme.stem,
        qualified_name=f"local/{readme.stem}",
        popularity=stars,
    )
    analysis, score = score_repository(repo, text)

    features = ", ".join(analysis.features) or "-"
    content = (
        f"카테고리: {analysis.category.value}\n"
        f"기능: {features}\n"
        f"문서 품질: {analysis.documentation_quality.value}\n"
        f"복잡도: {analysis.complexity.value}\n"
        f"프로덕션 준비: {'예' if analysis.production_ready else '아니오'}"
    )
    console.print(
        Panel(
            content,
            title=f"[bold]{readme.name}[/bold]  [{_score_style(score)}]{score:.1f}/10[/]",
            border_style="blue",
        )
    )


if __name__ == "__main__":
    app()
