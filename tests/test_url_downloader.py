import pytest
import yt_dlp

from scribehub.errors import DownloadError
from scribehub.services import url_downloader
from scribehub.services.url_downloader import URLDownloader


class FakeYoutubeDL:
    error = None

    def __init__(self, opts):
        self.opts = opts

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def extract_info(self, url, download=True):
        if self.error:
            raise self.error
        path = self.opts["outtmpl"].replace("%(ext)s", "webm")
        with open(path, "wb") as f:
            f.write(b"media")
        return {"title": "Some Talk", "ext": "webm"}

    def prepare_filename(self, info):
        return self.opts["outtmpl"].replace("%(ext)s", info["ext"])


@pytest.fixture
def downloader(tmp_path, monkeypatch):
    async def not_direct(url):
        return False

    instance = URLDownloader(tmp_path / "downloads")
    monkeypatch.setattr(instance, "_is_direct_media_url", not_direct)
    monkeypatch.setattr(url_downloader.yt_dlp, "YoutubeDL", FakeYoutubeDL)
    FakeYoutubeDL.error = None
    return instance


@pytest.mark.anyio
async def test_ytdlp_download_returns_path_and_title(downloader):
    media = await downloader.download("https://www.youtube.com/watch?v=1", "job-1")

    assert media.path == downloader.temp_dir / "job-1.webm"
    assert media.title == "Some Talk"
    assert await downloader.cleanup_download(media.path) is True
    assert not media.path.exists()


@pytest.mark.anyio
async def test_ytdlp_failure_is_download_error(downloader):
    FakeYoutubeDL.error = yt_dlp.utils.DownloadError("ERROR: Video unavailable")

    with pytest.raises(DownloadError) as exc_info:
        await downloader.download("https://www.youtube.com/watch?v=gone", "job-1")

    assert exc_info.value.details == {"url": "https://www.youtube.com/watch?v=gone"}


def test_title_and_extension_helpers(tmp_path):
    downloader = URLDownloader(tmp_path)

    assert downloader._title_from_url("https://cdn.example.com/media/My%20Talk.mp3") == "My Talk"
    assert downloader._title_from_url("https://cdn.example.com/") == "cdn.example.com"
    assert downloader._get_extension_from_mime("audio/mpeg") == ".mp3"
    assert downloader._get_extension_from_mime("application/octet-stream") == ".tmp"
