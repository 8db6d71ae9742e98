"""Tests for the SocialMediaUploader facade."""
from datetime import datetime, timedelta, timezone

import pytest
from conftest import FakeNow, FakePlatform, RecordingSleep

from social_uploader import SocialMediaUploader
from social_uploader.orchestrator.file_collector import FileCollector
from social_uploader.platforms.registry import PlatformRegistry
from social_uploader.scheduler import JobStatus
from social_uploader.services.analytics_store import JsonAnalyticsStore
from social_uploader.utils.events import JOB_COMPLETED, UPLOAD_SUCCESS

START = datetime(2024, 3, 1, 8, 0, 0)
YOUTUBE_CREDS = {"CLIENT_ID": "id", "CLIENT_SECRET": "secret", "REDIRECT_URI": "http://localhost"}


@pytest.fixture
def platform():
    return FakePlatform(["abc"])


@pytest.fixture
def now():
    return FakeNow(START)


@pytest.fixture
def uploader(quiet_config, platform, now):
    return SocialMediaUploader(
        quiet_config(platforms=("fake",)),
        credentials={},
        registry=PlatformRegistry({"fake": platform}),
        persist_analytics=False,
        sleep=RecordingSleep(),
        now=now,
    )


class TestSingleClip:
    @pytest.mark.asyncio
    async def test_upload_now(self, uploader, platform, video_file):
        async with uploader:
            result = await uploader.upload_single_clip(video_file, "My Video")

        assert result.status == "completed"
        assert result.results == {"fake": ["https://fake.example/abc"]}
        assert platform.uploaded[0].title == "My Video"

    @pytest.mark.asyncio
    async def test_metadata_options_forwarded(self, uploader, platform, video_file):
        async with uploader:
            await uploader.upload_single_clip(
                video_file, "Tagged", tags=["one"], privacy="unlisted", description="desc"
            )

        clip = platform.uploaded[0]
        assert clip.tags == ["one"]
        assert clip.privacy.value == "unlisted"
        assert clip.description == "desc"

    @pytest.mark.asyncio
    async def test_missing_file_returns_error(self, uploader, platform, tmp_path):
        async with uploader:
            result = await uploader.upload_single_clip(tmp_path / "missing.mp4", "Missing")

        assert result.status == "error"
        assert result.error.startswith("File not found")
        assert platform.upload_calls == 0

    @pytest.mark.asyncio
    async def test_schedule_at_time(self, uploader, video_file):
        async with uploader:
            job_id = await uploader.upload_single_clip(
                video_file, "Later", schedule_time=START + timedelta(hours=2)
            )
            jobs = uploader.get_scheduled_jobs()

        assert isinstance(job_id, str)
        assert [job.id for job in jobs] == [job_id]
        assert jobs[0].schedule_time == START + timedelta(hours=2)

    @pytest.mark.asyncio
    async def test_platform_schedule(self, uploader, video_file):
        async with uploader:
            job_ids = await uploader.upload_single_clip(
                video_file, "Multi", platform_schedule={"youtube": "09:00", "tiktok": "07:00"}
            )
            jobs = [uploader.scheduler.get_job(i) for i in job_ids]

        assert [job.clip.platforms for job in jobs] == [["youtube"], ["tiktok"]]
        assert jobs[0].schedule_time == datetime(2024, 3, 1, 9, 0)
        assert jobs[1].schedule_time == datetime(2024, 3, 2, 7, 0)

    @pytest.mark.asyncio
    async def test_invalid_platform_schedule_returns_error(self, uploader, video_file):
        async with uploader:
            result = await uploader.upload_single_clip(
                video_file, "Bad", platform_schedule={"youtube": "noon"}
            )
            assert uploader.get_scheduled_jobs() == []

        assert result.status == "error"

    @pytest.mark.asyncio
    async def test_timezone_aware_schedule_time_returns_error(self, uploader, video_file):
        async with uploader:
            result = await uploader.upload_single_clip(
                video_file, "Aware", schedule_time=datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
            )
            assert uploader.get_scheduled_jobs() == []

        assert result.status == "error"
        assert "scheduler clock" in result.error

    @pytest.mark.asyncio
    async def test_schedule_upload_requires_a_time(self, uploader, video_file):
        async with uploader:
            with pytest.raises(ValueError):
                uploader.schedule_upload(uploader.build_clip(video_file, "No time"))


class TestFolderUpload:
    @pytest.mark.asyncio
    async def test_uploads_every_video(self, uploader, platform, tmp_path):
        folder = tmp_path / "clips"
        folder.mkdir()
        for name in ("b_second.mp4", "a_first.mp4", "notes.txt"):
            (folder / name).write_bytes(b"\x00" * 64)
        (folder / "nested").mkdir()
        (folder / "nested" / "deep.mp4").write_bytes(b"\x00")

        async with uploader:
            result = await uploader.upload_from_folder(folder)

        assert result.success_count == 2
        assert [clip.title for clip in platform.uploaded] == ["A First", "B Second"]

    @pytest.mark.asyncio
    async def test_missing_folder(self, uploader, tmp_path):
        async with uploader:
            result = await uploader.upload_from_folder(tmp_path / "nope")
        assert result.status == "error"
        assert result.error.startswith("Folder not found")

    @pytest.mark.asyncio
    async def test_empty_folder(self, uploader, tmp_path):
        async with uploader:
            result = await uploader.upload_from_folder(tmp_path)
        assert result.error == f"No video files found in {tmp_path}"

    def test_title_from_filename(self):
        assert FileCollector.title_from_filename("my_cool_clip.mp4") == "My Cool Clip"


class TestEventsAndScheduler:
    @pytest.mark.asyncio
    async def test_on_routes_events(self, uploader, now, video_file):
        seen = []
        async with uploader:
            uploader.on(UPLOAD_SUCCESS, lambda **p: seen.append(("upload", p["platform"])))
            uploader.on(JOB_COMPLETED, lambda **p: seen.append(("job", p["job"].status)))

            uploader.schedule_upload(uploader.build_clip(video_file, "Job"), START)
            await uploader.scheduler.tick()

        assert seen == [("upload", "fake"), ("job", JobStatus.COMPLETED)]

    @pytest.mark.asyncio
    async def test_start_and_stop_scheduler(self, uploader):
        async with uploader:
            uploader.start_scheduler()
            assert uploader.scheduler.is_running
            uploader.stop_scheduler()
            assert not uploader.scheduler.is_running

    @pytest.mark.asyncio
    async def test_exit_stops_scheduler(self, uploader):
        async with uploader:
            uploader.start_scheduler()
        assert not uploader.scheduler.is_running


class TestAnalyticsAndCredentials:
    @pytest.mark.asyncio
    async def test_get_analytics(self, uploader, video_file):
        async with uploader:
            await uploader.upload_single_clip(video_file, "Counted")
            stats = uploader.get_analytics()

        assert stats.total_uploads == 1
        assert stats.successful_uploads == {"fake": 1}

    @pytest.mark.asyncio
    async def test_analytics_persisted(self, quiet_config, platform, tmp_path, video_file):
        path = tmp_path / "analytics.json"
        config = quiet_config(platforms=("fake",), analytics_file=path)

        async with SocialMediaUploader(
            config, credentials={}, registry=PlatformRegistry({"fake": platform})
        ) as uploader:
            await uploader.upload_single_clip(video_file, "Saved")

        assert JsonAnalyticsStore(path).load()["total_uploads"] == 1

    def test_validate_credentials(self, quiet_config):
        uploader = SocialMediaUploader(
            quiet_config(platforms=("youtube", "instagram")),
            credentials={"youtube": YOUTUBE_CREDS},
            persist_analytics=False,
        )
        assert uploader.validate_credentials() == [
            "INSTAGRAM ACCESS_TOKEN",
            "INSTAGRAM BUSINESS_ACCOUNT_ID",
        ]

    @pytest.mark.asyncio
    async def test_default_registry(self, quiet_config, video_file):
        async with SocialMediaUploader(
            quiet_config(platforms=("youtube",)),
            credentials={"youtube": YOUTUBE_CREDS},
            persist_analytics=False,
        ) as uploader:
            result = await uploader.upload_single_clip(video_file, "Real adapter")

        [url] = result.results["youtube"]
        assert url.startswith("https://youtube.com/watch?v=yt_")
