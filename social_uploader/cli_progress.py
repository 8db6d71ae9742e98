"""Console rendering helpers for the social-upload CLI."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .orchestrator.models import BatchResult
from .scheduler.models import ScheduledJob
from .services.analytics import AnalyticsSnapshot

RECENT_BATCHES = 5

console = Console()


def _echo(message: str) -> None:
    console.print(message)


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else escape(str(value))
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]social-upload[/bold green]",
        subtitle="[dim]multi-platform uploader[/dim]",
        border_style="blue",
    )
    console.print(panel)


def render_batch_result(result: BatchResult) -> None:
    """Print status, successes and failures of a batch."""
    status_style = "green" if result.status == "completed" else "red"
    _echo(f"\n🎯 Upload completed with status: [{status_style}]{result.status}[/{status_style}]")

    if result.failed:
        _echo("\n[red]❌ Failed uploads:[/red]")
        for failure in result.failed:
            _echo(f"  - {escape(str(failure))}")

    if result.skipped:
        _echo("\n[yellow]⏭ Skipped:[/yellow]")
        for skipped in result.skipped:
            _echo(f"  - {escape(str(skipped))}")

    if result.success_count:
        _echo("\n[green]✅ Successful uploads:[/green]")
        for platform, urls in result.results.items():
            if not urls:
                continue
            _echo(f"  {escape(platform)}:")
            for url in urls:
                _echo(f"    - {escape(url)}")


def render_analytics(snapshot: AnalyticsSnapshot) -> None:
    _echo("\n📈 [bold]Upload Analytics[/bold]")
    _echo(f"Total uploads: {snapshot.total_uploads}")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Platform")
    table.add_column("Success", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Success rate", justify="right")
    table.add_column("Last success")

    platforms = sorted(set(snapshot.successful_uploads) | set(snapshot.failed_uploads))
    for platform in platforms:
        perf = snapshot.platform_performance.get(platform, {})
        table.add_row(
            escape(platform),
            str(snapshot.successful_uploads.get(platform, 0)),
            str(snapshot.failed_uploads.get(platform, 0)),
            f"{perf.get('success_rate', 0.0):.0%}",
            escape(perf.get("last_success") or "-"),
        )
    if platforms:
        console.print(table)

    if snapshot.upload_history:
        _echo("\nRecent upload batches:")
        for batch in snapshot.upload_history[-RECENT_BATCHES:]:
            _echo(f"  {escape(str(batch.get('timestamp')))}: {batch.get('clips_count', 0)} clips")


def render_jobs(jobs: Iterable[ScheduledJob]) -> None:
    jobs = list(jobs)
    if not jobs:
        _echo("No scheduled jobs found")
        return

    table = Table(title="📅 Scheduled Jobs", show_header=True, header_style="bold cyan")
    table.add_column("Job")
    table.add_column("Clip")
    table.add_column("Platforms")
    table.add_column("Time")
    table.add_column("Status")
    for job in jobs:
        table.add_row(
            escape(job.id),
            escape(job.clip.title),
            escape(", ".join(job.clip.platforms)),
            job.schedule_time.strftime("%Y-%m-%d %H:%M"),
            job.status.value,
        )
    console.print(table)


def render_missing_credentials(missing: List[str]) -> None:
    if not missing:
        _echo("[green]✅ All configured platform credentials are set[/green]")
        return
    _echo("[red]Missing credentials:[/red]")
    for credential in missing:
        _echo(f"  - {escape(credential)}")


class UploadEventPrinter:
    """Event listeners printing real-time feedback."""

    def on_upload_success(self, platform: Optional[str], clip: str, url: str) -> None:
        _echo(f"[green]✅ {escape(str(platform))}:[/green] {escape(url)}")

    def on_upload_failed(self, platform: Optional[str], clip: str, error: str) -> None:
        _echo(f"[red]❌ {escape(str(platform or clip))}:[/red] {escape(str(error))}")

    def on_batch_complete(self, results: Dict[str, List[str]], failed: List[str]) -> None:
        total_success = sum(len(urls) for urls in results.values())
        _echo(f"\n📊 Batch completed - Success: {total_success}, Failed: {len(failed)}")

    def on_job_completed(self, job: ScheduledJob) -> None:
        _echo(f"[green]✅ Scheduled job completed:[/green] {escape(job.clip.title)}")

    def on_job_failed(self, job: ScheduledJob) -> None:
        _echo(f"[red]❌ Scheduled job failed:[/red] {escape(job.clip.title)} - {escape(str(job.error))}")


def jobs_pending(jobs: Iterable[ScheduledJob]) -> bool:
    return any(not job.status.is_terminal for job in jobs)
