
import pytest
from PIL import Image

import regression.capture as capture_module
from regression.capture import PageCapture, write_jpeg_copy


def _png(path, mode="RGBA", size=(40, 30)):
    Image.new(mode, size, color=(200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)).save(path)
    return path


def test_write_jpeg_copy_converts_alpha(tmp_path):
    png = _png(tmp_path / "shot.png")
    jpeg = write_jpeg_copy(png, tmp_path / "shot.jpg", quality=90)

    with Image.open(jpeg) as image:
        assert image.format == "JPEG"
        assert image.mode == "RGB"
        assert image.size == (40, 30)


class _FakePage:
    def __init__(self, log):
        self.log = log

    def goto(self, url):
        self.log.append(("goto", url))

    def wait_for_selector(self, selector, state=None):
        self.log.append(("wait", selector, state))

    def screenshot(self, path, full_page, type):
        self.log.append(("screenshot", full_page, type))
        _png(path, mode="RGB")


class _FakeBrowser:
    def __init__(self, log):
        self.log = log

    def new_context(self, **kwargs):
        self.log.append(("context", kwargs))
        return self

    def new_page(self):
        return _FakePage(self.log)

    def close(self):
        self.log.append(("close",))


class _FakePlaywright:
    def __init__(self, log):
        self.log = log
        self.chromium = self

    def launch(self, headless):
        self.log.append(("launch", headless))
        return _FakeBrowser(self.log)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def browser_log(monkeypatch):
    log = []
    monkeypatch.setattr(capture_module, "sync_playwright", lambda: _FakePlaywright(log))
    return log


def test_capture_full_page_png_and_jpeg(tmp_path, browser_log):
    png = tmp_path / "snaps" / "homepage.png"
    jpg = tmp_path / "snaps" / "homepage.jpg"

    result = PageCapture(viewport_width=1280, viewport_height=720).capture(
        "https://example.test", png, jpg
    )

    assert result == png
    assert png.exists() and jpg.exists()
    assert ("launch", True) in browser_log
    assert ("goto", "https://example.test") in browser_log
    assert ("wait", "body", "visible") in browser_log
    assert ("screenshot", True, "png") in browser_log
    assert browser_log[-1] == ("close",)
    context = next(entry[1] for entry in browser_log if entry[0] == "context")
    assert context["viewport"] == {"width": 1280, "height": 720}
    assert context["device_scale_factor"] == 1.0
    assert context["is_mobile"] is False


def test_capture_removes_stale_files(tmp_path, browser_log):
    png = tmp_path / "homepage.png"
    jpg = tmp_path / "homepage.jpg"
    png.write_bytes(b"stale")
    jpg.write_bytes(b"stale")

    PageCapture().capture("https://example.test", png, jpg)

    assert png.read_bytes() != b"stale"
    assert jpg.read_bytes() != b"stale"
    with Image.open(jpg) as image:
        assert image.format == "JPEG"


def test_from_config_uses_capture_settings(monkeypatch):
    monkeypatch.setenv("VISREG_HEADLESS", "false")
    monkeypatch.setenv("VISREG_VIEWPORT_WIDTH", "800")
    from config import Config

    capture = PageCapture.from_config(Config())
    assert capture._headless is False
    assert capture._viewport == {"width": 800, "height": 720}
