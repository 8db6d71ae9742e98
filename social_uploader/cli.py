"""Command line interface for social_uploader."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

from rich.logging import RichHandler

from .cli_progress import (
    UploadEventPrinter,
    jobs_pending,
    render_analytics,
    render_batch_result,
    render_configuration_summary,
    render_jobs,
    render_missing_credentials,
)
from .errors import ConfigurationError
from .models import Privacy, UploadConfig
from .orchestrator.core import SocialMediaUploader
from .orchestrator.file_collector import FileCollector
from .orchestrator.models import BatchResult
from .platforms.credentials import load_credentials, missing_credentials
from .scheduler.scheduler import parse_time_of_day
from .services.analytics import AnalyticsRecorder
from .services.analytics_store import JsonAnalyticsStore
from .utils.events import (
    BATCH_COMPLETE,
    JOB_COMPLETED,
    JOB_FAILED,
    UPLOAD_FAILED,
    UPLOAD_SUCCESS,
)

DEFAULT_FOLDER = "clips"
RUN_LOG_NAME = "uploader.log"
ERROR_LOG_NAME = "uploader_errors.log"
JOB_POLL_SECONDS = 1.0
SCHEDULE_PLATFORM_FLAGS = ("youtube", "instagram", "tiktok")

_LOG_PATHS: Tuple[Optional[str], Optional[str]] = (None, None)


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _get_log_paths() -> Tuple[Optional[str], Optional[str]]:
    """(run log, error log) paths configured by the last _setup_logging call."""
    return _LOG_PATHS


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    File logs (run log at INFO, error log at ERROR) are always written to
    SOCIAL_UPLOADER_LOG_DIR (default: current directory). The console stays
    silent unless --debug or --log-level is provided.
    Returns a string describing effective console mode.
    """
    global _LOG_PATHS

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    log_dir = Path(os.getenv("SOCIAL_UPLOADER_LOG_DIR") or ".")
    log_dir.mkdir(parents=True, exist_ok=True)
    run_log = log_dir / RUN_LOG_NAME
    error_log = log_dir / ERROR_LOG_NAME

    file_formatter = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    run_handler = logging.FileHandler(run_log, encoding="utf-8")
    run_handler.setLevel(logging.INFO)
    run_handler.setFormatter(file_formatter)
    error_handler = logging.FileHandler(error_log, encoding="utf-8")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(file_formatter)
    root_logger.addHandler(run_handler)
    root_logger.addHandler(error_handler)
    _LOG_PATHS = (str(run_log), str(error_log))

    if silent or (not debug and not log_level):
        root_logger.setLevel(logging.INFO)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, log_level.upper(), logging.INFO)

    console_handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)
    root_logger.setLevel(min(level, logging.INFO))
    return logging.getLevelName(level)


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_env_file(path: Path, override: bool = False) -> None:
    if not path.exists():
        raise CLIError(f"env file not found: {path}")
    if not path.is_file():
        raise CLIError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


def _split_csv(value: Optional[str]) -> Optional[list]:
    if value is None:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


def _parse_schedule_time(value: str) -> datetime:
    for fmt in ("%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    raise CLIError(f"invalid schedule time {value!r}, expected YYYY-MM-DD HH:MM")


def _platform_schedule(args: argparse.Namespace) -> Dict[str, str]:
    schedule = {}
    for platform in SCHEDULE_PLATFORM_FLAGS:
        value = getattr(args, f"{platform}_time")
        if value:
            try:
                parse_time_of_day(value)
            except ValueError as exc:
                raise CLIError(str(exc)) from exc
            schedule[platform] = value
    return schedule


def _default_platform_schedule(config: UploadConfig) -> Dict[str, str]:
    """Configured upload times for the platforms this run targets."""
    return {platform: at for platform, at in config.upload_schedule if platform in config.platforms}


def _build_config(args: argparse.Namespace) -> UploadConfig:
    overrides = {}
    platforms = _split_csv(args.platforms)
    if platforms:
        overrides["platforms"] = tuple(platforms)
    if args.delay is not None:
        if args.delay < 0:
            raise CLIError("--delay must not be negative")
        overrides["stagger_uploads"] = args.delay > 0
        overrides["stagger_minutes"] = args.delay / 60
    try:
        return UploadConfig.from_env(**overrides)
    except ConfigurationError as exc:
        raise CLIError(str(exc)) from exc


def _subscribe_printer(uploader: SocialMediaUploader) -> None:
    printer = UploadEventPrinter()
    uploader.on(UPLOAD_SUCCESS, printer.on_upload_success)
    uploader.on(UPLOAD_FAILED, printer.on_upload_failed)
    uploader.on(BATCH_COMPLETE, printer.on_batch_complete)
    uploader.on(JOB_COMPLETED, printer.on_job_completed)
    uploader.on(JOB_FAILED, printer.on_job_failed)


async def _wait_for_jobs(uploader: SocialMediaUploader) -> None:
    while jobs_pending(uploader.get_scheduled_jobs()):
        await asyncio.sleep(JOB_POLL_SECONDS)


async def _run_scheduler_forever(uploader: SocialMediaUploader) -> int:
    uploader.start_scheduler()
    print("Scheduler running. Press Ctrl+C to stop.")
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        print("\n🛑 Stopping scheduler...")
        uploader.stop_scheduler()


def _exit_code(result: BatchResult) -> int:
    return 0 if result.status == "completed" and not result.failed else 1


async def _run_upload(args: argparse.Namespace, config: UploadConfig) -> int:
    options = {
        "description": args.description,
        "tags": _split_csv(args.tags),
        "privacy": args.privacy,
        "platforms": _split_csv(args.platforms),
    }
    platform_schedule = _platform_schedule(args) if args.schedule else {}
    schedule_time = _parse_schedule_time(args.time) if args.schedule and args.time else None
    if args.schedule and not (schedule_time or platform_schedule):
        platform_schedule = _default_platform_schedule(config)
    if args.schedule and not (schedule_time or platform_schedule):
        raise CLIError("--schedule needs --time, a --<platform>-time option or an upload_schedule entry")

    async with SocialMediaUploader(config) as uploader:
        _subscribe_printer(uploader)

        if args.start_scheduler and not args.file:
            return await _run_scheduler_forever(uploader)

        if args.file:
            file_path = Path(args.file).expanduser()
            title = args.title or FileCollector.title_from_filename(file_path)

            if schedule_time or platform_schedule:
                print(f"🕐 Scheduling upload: {title}")
                scheduled = await uploader.upload_single_clip(
                    file_path,
                    title,
                    schedule_time=schedule_time,
                    platform_schedule=platform_schedule or None,
                    **options,
                )
                if isinstance(scheduled, BatchResult):
                    render_batch_result(scheduled)
                    return 1
                job_ids = scheduled if isinstance(scheduled, list) else [scheduled]
                print(f"Scheduled job ID(s): {', '.join(job_ids)}")
                if args.list_jobs:
                    render_jobs(uploader.get_scheduled_jobs())

                uploader.start_scheduler()
                await _wait_for_jobs(uploader)
                uploader.stop_scheduler()
                render_jobs(uploader.get_scheduled_jobs())
                failed = [
                    job for job in uploader.get_scheduled_jobs()
                    if job.error or (job.result and job.result.failed)
                ]
                return 1 if failed else 0

            result = await uploader.upload_single_clip(file_path, title, **options)
        else:
            result = await uploader.upload_from_folder(args.folder or DEFAULT_FOLDER)

        render_batch_result(result)
        return _exit_code(result)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="social-upload",
        description="Upload video clips to YouTube, Instagram, TikTok, LinkedIn and Twitter.",
        epilog=(
            "examples:\n"
            '  social-upload --file "my_video.mp4" --title "Amazing Content"\n'
            '  social-upload --folder clips --delay 300\n'
            '  social-upload --schedule --file video.mp4 --youtube-time 09:00 --instagram-time 12:00\n'
            '  social-upload --schedule --file video.mp4 --time "2025-01-15 14:30"'
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--file", help="Upload single video file")
    source.add_argument("--folder", help=f"Upload all videos from folder (default: {DEFAULT_FOLDER})")

    parser.add_argument("--title", help="Video title for single file upload")
    parser.add_argument("--description", help="Video description")
    parser.add_argument("--tags", help="Comma-separated tags")
    parser.add_argument(
        "--privacy",
        choices=[privacy.value for privacy in Privacy],
        help="Privacy level",
    )
    parser.add_argument("--platforms", help="Comma-separated platform list")

    parser.add_argument("--schedule", action="store_true", help="Enable scheduled upload")
    parser.add_argument("--time", help="Schedule time (YYYY-MM-DD HH:MM)")
    for platform in SCHEDULE_PLATFORM_FLAGS:
        parser.add_argument(
            f"--{platform}-time",
            dest=f"{platform}_time",
            help=f"Schedule {platform} upload (HH:MM)",
        )
    parser.add_argument("--delay", type=float, default=None, help="Delay between clips in seconds")

    parser.add_argument("--check-credentials", action="store_true", help="Validate API credentials")
    parser.add_argument("--analytics", action="store_true", help="Show upload statistics")
    parser.add_argument("--start-scheduler", action="store_true", help="Start background scheduler")
    parser.add_argument("--list-jobs", action="store_true", help="Show scheduled jobs")

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print results")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument("--version", action="version", version="social-upload (from social_uploader)")
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    try:
        config = _build_config(args)

        if args.check_credentials:
            missing = missing_credentials(load_credentials(), config.platforms)
            render_missing_credentials(missing)
            return 1 if missing else 0

        if args.analytics:
            recorder = AnalyticsRecorder(JsonAnalyticsStore(config.analytics_file))
            render_analytics(recorder.snapshot())
            return 0

        if args.list_jobs and not (args.schedule or args.start_scheduler):
            # Jobs live in the scheduling process only
            render_jobs([])
            return 0

        if not args.silent:
            render_configuration_summary(
                {
                    "Source": args.file or args.folder or DEFAULT_FOLDER,
                    "Platforms": ", ".join(config.platforms),
                    "Stagger": f"{config.stagger_minutes:g} min" if config.stagger_uploads else "off",
                    "Max Retries": config.max_retries,
                    "Rate Limit": f"{config.rate_limit_requests}/{config.rate_limit_window:g}s",
                    "Analytics": str(config.analytics_file),
                    "Env File": str(used_env_file) if used_env_file else "-",
                    "Logging": effective_log_mode,
                }
            )

        return asyncio.run(_run_upload(args, config))
    except CLIError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
