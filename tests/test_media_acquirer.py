import shutil

import pytest

from conftest import FakeDownloader
from scribehub.errors import DownloadError, MediaIOError, ValidationError
from scribehub.models.job import Job
from scribehub.services.media_acquirer import MediaAcquirer


@pytest.fixture
def downloader(tmp_path):
    return FakeDownloader(tmp_path / "tmp", title='  "My Video: Part 1!". ')


@pytest.mark.anyio
async def test_acquire_names_file_after_job_id(file_handler, downloader):
    job = Job(id="job-1", source_url="https://example.com/watch?v=1")

    file_name = await MediaAcquirer(file_handler, downloader).acquire(job)

    assert file_name == "job-1_SCRB_My_Video_Part_1_"
    assert file_handler.path_for(file_name).read_bytes() == b"media-bytes"
    assert downloader.cleaned == [downloader.workdir / "job-1.download"]
    assert not (downloader.workdir / "job-1.download").exists()


@pytest.mark.anyio
async def test_reacquire_overwrites_same_file(file_handler, downloader):
    job = Job(id="job-1", source_url="https://example.com/watch?v=1")
    acquirer = MediaAcquirer(file_handler, downloader)
    first = await acquirer.acquire(job)

    downloader.payload = b"second"
    second = await acquirer.acquire(job)

    assert first == second
    assert file_handler.path_for(second).read_bytes() == b"second"
    assert len(list(file_handler.upload_dir.iterdir())) == 1


@pytest.mark.anyio
async def test_download_failure_keeps_cause(file_handler, tmp_path):
    cause = RuntimeError("HTTP Error 403: Forbidden")
    acquirer = MediaAcquirer(file_handler, FakeDownloader(tmp_path / "tmp", error=cause))

    with pytest.raises(DownloadError) as exc_info:
        await acquirer.acquire(Job(id="job-1", source_url="https://example.com/v"))

    assert exc_info.value.__cause__ is cause
    assert list(file_handler.upload_dir.iterdir()) == []


@pytest.mark.anyio
async def test_requires_url_and_id(file_handler, downloader):
    acquirer = MediaAcquirer(file_handler, downloader)

    with pytest.raises(ValidationError):
        await acquirer.acquire(Job(id="job-1"))
    with pytest.raises(ValidationError):
        await acquirer.acquire(Job(id="", source_url="https://example.com/v"))


@pytest.mark.anyio
async def test_write_failure_is_media_error(file_handler, downloader):
    shutil.rmtree(file_handler.upload_dir)

    with pytest.raises(MediaIOError):
        await MediaAcquirer(file_handler, downloader).acquire(Job(id="job-1", source_url="https://example.com/v"))

    assert not (downloader.workdir / "job-1.download").exists()
