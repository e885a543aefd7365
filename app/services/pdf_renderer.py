# app/services/pdf_renderer.py

"""
헤드리스 Chromium(Playwright)으로 완성된 HTML 문서를 PDF 바이트로 변환하는 서비스입니다.

- 브라우저는 첫 요청 시 한 번만 실행되고(lazy) 애플리케이션 종료 시 닫힙니다.
- 요청마다 새 페이지를 열고, 성공/실패와 관계없이 반드시 닫습니다.
- 동시에 열 수 있는 페이지 수는 세마포어로 제한됩니다.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from playwright.async_api import async_playwright

from app.core.config import settings
from app.core.exceptions import CertificateRenderError

logger = logging.getLogger(__name__)

# (playwright 핸들, browser) 쌍을 반환하는 비동기 팩토리
BrowserLauncher = Callable[[Sequence[str]], Awaitable[Tuple[Any, Any]]]


class BrowserState(str, Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"


async def _launch_chromium(args: Sequence[str]) -> Tuple[Any, Any]:
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(headless=True, args=list(args))
    except Exception:
        await playwright.stop()
        raise
    return playwright, browser


class PdfRenderer:
    """
    프로세스 전체에서 공유하는 PDF 렌더러입니다. app.state.pdf_renderer에 보관됩니다.

    Args:
        launcher: 브라우저 실행 함수. 테스트에서는 가짜 브라우저를 주입합니다.
        browser_args: Chromium 실행 인자 (기본: settings.PDF_BROWSER_ARGS).
        max_concurrent_pages: 동시에 렌더링할 수 있는 최대 페이지 수.
    """

    def __init__(
        self,
        launcher: Optional[BrowserLauncher] = None,
        browser_args: Optional[Sequence[str]] = None,
        max_concurrent_pages: Optional[int] = None,
        page_format: Optional[str] = None,
        page_margin: Optional[str] = None,
    ):
        self._launcher = launcher or _launch_chromium
        self._browser_args: List[str] = list(
            browser_args if browser_args is not None else settings.PDF_BROWSER_ARGS
        )
        self.max_concurrent_pages = max_concurrent_pages or settings.PDF_MAX_CONCURRENT_PAGES
        self.page_format = page_format or settings.PDF_PAGE_FORMAT
        self.page_margin = page_margin or settings.PDF_PAGE_MARGIN

        self._playwright: Any = None
        self._browser: Any = None
        self._lock = asyncio.Lock()
        self._semaphore = asyncio.Semaphore(self.max_concurrent_pages)
        self.state = BrowserState.UNINITIALIZED

    # =========================================================================
    # 1. 브라우저 수명 주기
    # =========================================================================
    async def _ensure_browser(self) -> Any:
        async with self._lock:
            if self.state == BrowserState.RUNNING and self._browser is not None:
                return self._browser
            logger.info("Launching headless browser with args: %s", self._browser_args)
            try:
                self._playwright, self._browser = await self._launcher(self._browser_args)
            except Exception as exc:
                logger.exception("Headless browser launch failed: %s", exc)
                raise CertificateRenderError("launch", str(exc)) from exc
            self.state = BrowserState.RUNNING
            return self._browser

    async def close(self) -> None:
        """브라우저와 Playwright 드라이버를 종료하고 초기 상태로 되돌립니다."""
        async with self._lock:
            browser, playwright = self._browser, self._playwright
            self._browser = None
            self._playwright = None
            self.state = BrowserState.UNINITIALIZED
            if browser is not None:
                try:
                    await browser.close()
                    logger.info("Headless browser closed.")
                except Exception as exc:
                    logger.warning("Error while closing headless browser: %s", exc)
            if playwright is not None:
                try:
                    await playwright.stop()
                except Exception as exc:
                    logger.warning("Error while stopping Playwright driver: %s", exc)

    # =========================================================================
    # 2. 렌더링
    # =========================================================================
    def _pdf_options(self) -> Dict[str, Any]:
        margin = self.page_margin
        return {
            "format": self.page_format,
            "print_background": True,
            "margin": {"top": margin, "right": margin, "bottom": margin, "left": margin},
        }

    async def render_pdf(self, html: str) -> bytes:
        """
        완성된 HTML 문서를 PDF로 변환합니다.

        Raises:
            CertificateRenderError: 브라우저 실행, 페이지 생성, 콘텐츠 로드, PDF 생성 중
                어느 단계에서든 실패한 경우. `stage` 속성에 실패 단계가 담깁니다.
        """
        browser = await self._ensure_browser()
        async with self._semaphore:
            stage = "new_page"
            page = None
            try:
                page = await browser.new_page()
                logger.debug("PDF page created.")

                stage = "set_content"
                await page.set_content(html, wait_until="networkidle")
                logger.debug("PDF page content loaded (%d chars).", len(html))

                stage = "pdf"
                pdf_bytes = await page.pdf(**self._pdf_options())
                logger.info("PDF generated (%d bytes).", len(pdf_bytes))
                return pdf_bytes
            except Exception as exc:
                logger.exception("PDF rendering failed at stage '%s': %s", stage, exc)
                raise CertificateRenderError(stage, str(exc)) from exc
            finally:
                if page is not None:
                    try:
                        await page.close()
                        logger.debug("PDF page closed.")
                    except Exception as exc:
                        logger.warning("Error while closing PDF page: %s", exc)
