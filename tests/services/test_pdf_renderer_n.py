# tests/services/test_pdf_renderer_n.py

"""
PdfRenderer(헤드리스 브라우저 기반 PDF 변환기)에 대한 단위 테스트 모듈입니다.

실제 Chromium 대신 가짜 브라우저를 주입하여 다음을 검증합니다.
- 브라우저는 첫 요청에서 한 번만 실행되고 close() 전까지 재사용됩니다.
- 페이지는 성공/실패와 관계없이 항상 닫힙니다.
- 실패 단계가 CertificateRenderError.stage로 전달됩니다.
- 동시에 열린 페이지 수가 max_concurrent_pages를 넘지 않습니다.
"""

import asyncio

import pytest

from app.core.exceptions import CertificateRenderError
from app.services.pdf_renderer import BrowserState, PdfRenderer


class FakePage:
    def __init__(self, browser: "FakeBrowser"):
        self.browser = browser
        self.closed = False
        self.content = None
        self.pdf_options = None

    async def set_content(self, html, wait_until=None):
        if self.browser.fail_stage == "set_content":
            raise RuntimeError("navigation timeout")
        self.content = html
        self.wait_until = wait_until

    async def pdf(self, **options):
        self.browser.active += 1
        self.browser.peak = max(self.browser.peak, self.browser.active)
        try:
            await asyncio.sleep(0.01)
            if self.browser.fail_stage == "pdf":
                raise RuntimeError("printing failed")
            self.pdf_options = options
            return b"%PDF-" + self.content.encode()
        finally:
            self.browser.active -= 1

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, fail_stage=None):
        self.fail_stage = fail_stage
        self.pages = []
        self.closed = False
        self.active = 0
        self.peak = 0

    async def new_page(self):
        if self.fail_stage == "new_page":
            raise RuntimeError("target closed")
        page = FakePage(self)
        self.pages.append(page)
        return page

    async def close(self):
        self.closed = True


class FakePlaywright:
    def __init__(self):
        self.stopped = False

    async def stop(self):
        self.stopped = True


class FakeLauncher:
    def __init__(self, fail_stage=None, launch_error=None):
        self.calls = 0
        self.args = None
        self.fail_stage = fail_stage
        self.launch_error = launch_error
        self.browser = None
        self.playwright = None

    async def __call__(self, args):
        self.calls += 1
        self.args = list(args)
        if self.launch_error:
            raise self.launch_error
        self.playwright = FakePlaywright()
        self.browser = FakeBrowser(self.fail_stage)
        return self.playwright, self.browser


@pytest.mark.asyncio
async def test_render_pdf_launches_browser_lazily_and_reuses_it():
    """[성공] 브라우저는 첫 렌더링에서 한 번만 실행되고 이후 재사용됩니다."""
    launcher = FakeLauncher()
    renderer = PdfRenderer(launcher=launcher, browser_args=["--no-sandbox"], max_concurrent_pages=2)
    assert renderer.state == BrowserState.UNINITIALIZED
    assert launcher.calls == 0

    first = await renderer.render_pdf("<p>one</p>")
    second = await renderer.render_pdf("<p>two</p>")

    assert first == b"%PDF-<p>one</p>"
    assert second == b"%PDF-<p>two</p>"
    assert launcher.calls == 1
    assert launcher.args == ["--no-sandbox"]
    assert renderer.state == BrowserState.RUNNING
    assert all(page.closed for page in launcher.browser.pages)


@pytest.mark.asyncio
async def test_render_pdf_page_options():
    launcher = FakeLauncher()
    renderer = PdfRenderer(launcher=launcher, page_format="A4", page_margin="0.5in")

    await renderer.render_pdf("<p>x</p>")

    page = launcher.browser.pages[0]
    assert page.wait_until == "networkidle"
    assert page.pdf_options == {
        "format": "A4",
        "print_background": True,
        "margin": {"top": "0.5in", "right": "0.5in", "bottom": "0.5in", "left": "0.5in"},
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("stage", ["set_content", "pdf"])
async def test_render_pdf_closes_page_on_failure(stage):
    """[실패] 콘텐츠 로드/PDF 생성이 실패해도 페이지는 닫히고 오류는 호출자에게 전달됩니다."""
    launcher = FakeLauncher(fail_stage=stage)
    renderer = PdfRenderer(launcher=launcher)

    with pytest.raises(CertificateRenderError) as exc_info:
        await renderer.render_pdf("<p>x</p>")

    assert exc_info.value.stage == stage
    assert len(launcher.browser.pages) == 1
    assert launcher.browser.pages[0].closed is True
    # 브라우저는 그대로 유지됩니다. (자동 재시작/정리 없음)
    assert renderer.state == BrowserState.RUNNING
    assert launcher.browser.closed is False


@pytest.mark.asyncio
async def test_render_pdf_new_page_failure():
    launcher = FakeLauncher(fail_stage="new_page")
    renderer = PdfRenderer(launcher=launcher)

    with pytest.raises(CertificateRenderError) as exc_info:
        await renderer.render_pdf("<p>x</p>")

    assert exc_info.value.stage == "new_page"


@pytest.mark.asyncio
async def test_launch_failure_keeps_renderer_uninitialized():
    launcher = FakeLauncher(launch_error=RuntimeError("Executable doesn't exist"))
    renderer = PdfRenderer(launcher=launcher)

    with pytest.raises(CertificateRenderError) as exc_info:
        await renderer.render_pdf("<p>x</p>")

    assert exc_info.value.stage == "launch"
    assert "Executable doesn't exist" in str(exc_info.value)
    assert renderer.state == BrowserState.UNINITIALIZED


@pytest.mark.asyncio
async def test_close_tears_down_browser_and_allows_relaunch():
    """[성공] close()는 브라우저와 드라이버를 종료하고 다음 요청에서 다시 실행됩니다."""
    launcher = FakeLauncher()
    renderer = PdfRenderer(launcher=launcher)
    await renderer.render_pdf("<p>x</p>")
    first_browser, first_playwright = launcher.browser, launcher.playwright

    await renderer.close()

    assert renderer.state == BrowserState.UNINITIALIZED
    assert first_browser.closed is True
    assert first_playwright.stopped is True

    await renderer.render_pdf("<p>y</p>")
    assert launcher.calls == 2
    assert renderer.state == BrowserState.RUNNING


@pytest.mark.asyncio
async def test_close_without_browser_is_noop():
    renderer = PdfRenderer(launcher=FakeLauncher())
    await renderer.close()
    assert renderer.state == BrowserState.UNINITIALIZED


@pytest.mark.asyncio
async def test_concurrent_pages_are_bounded():
    """[성공] 동시에 렌더링되는 페이지 수는 max_concurrent_pages를 넘지 않습니다."""
    launcher = FakeLauncher()
    renderer = PdfRenderer(launcher=launcher, max_concurrent_pages=2)

    results = await asyncio.gather(*(renderer.render_pdf(f"<p>{i}</p>") for i in range(6)))

    assert len(results) == 6
    assert launcher.calls == 1
    assert launcher.browser.peak == 2
    assert all(page.closed for page in launcher.browser.pages)
