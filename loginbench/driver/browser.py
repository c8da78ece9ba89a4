from __future__ import annotations

import logging
import time
from typing import Any, Callable

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from loginbench.credentials.types import Credential

from .artifacts import ArtifactRecorder
from .types import SessionError, SessionTiming

LOG = logging.getLogger(__name__)

VIEWPORT = {"width": 1024, "height": 768}
NAVIGATION_TIMEOUT_MS = 60_000

USERNAME_SELECTOR = "#username"
PASSWORD_SELECTOR = "#password"
SUBMIT_SELECTOR = "button"


class BrowserSessionDriver:
    """
    Performs one login in a fresh headless Chromium instance.

    The timed window starts once the start page has loaded and ends when the
    browser has been redirected back to the start URL.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS,
        clock: Callable[[], float] = time.time,
    ):
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self.clock = clock

    async def drive(
        self, target_url: str, credential: Credential, artifacts: ArtifactRecorder
    ) -> SessionTiming:
        async with async_playwright() as pw:
            LOG.debug("Launching browser")
            browser = await pw.chromium.launch(headless=self.headless)
            page = None
            try:
                page = await browser.new_page(viewport=VIEWPORT)
                page.set_default_navigation_timeout(self.navigation_timeout_ms)
                return await login(page, target_url, credential, artifacts, self.clock)
            except PlaywrightTimeoutError as exc:
                await _capture_error(page, artifacts)
                raise SessionError(f"Navigation timeout - {exc.message}") from exc
            except PlaywrightError as exc:
                await _capture_error(page, artifacts)
                raise SessionError(exc.message) from exc
            except SessionError:
                await _capture_error(page, artifacts)
                raise
            finally:
                await browser.close()


async def login(
    page: Any,
    target_url: str,
    credential: Credential,
    artifacts: ArtifactRecorder,
    clock: Callable[[], float] = time.time,
) -> SessionTiming:
    LOG.debug("Navigate to %s", target_url)
    await page.goto(target_url)
    await artifacts.capture(page, "001-StartPage")
    start_time = clock()

    LOG.debug("Complete login form as %s", credential.username)
    await (await _find(page, USERNAME_SELECTOR)).type(credential.username)
    await (await _find(page, PASSWORD_SELECTOR)).type(credential.password)
    await artifacts.capture(page, "002-CredentialsEntered")

    submit = await _find(page, SUBMIT_SELECTOR)
    async with page.expect_navigation():
        await submit.click()
        await artifacts.capture(page, "003-LoginClicked")
    await artifacts.capture(page, "004-AfterRedirect")

    url = page.url
    if not url.lower().startswith(target_url.lower()):
        raise SessionError(f"Ended on wrong page - {url}")

    return SessionTiming(start_time, clock())


async def _find(page: Any, selector: str) -> Any:
    element = await page.query_selector(selector)
    if element is None:
        raise SessionError(f"Missing form control '{selector}' on {page.url}")
    return element


async def _capture_error(page: Any, artifacts: ArtifactRecorder) -> None:
    if page is None:
        return
    try:
        await artifacts.capture(page, "999-Errored")
    except (PlaywrightError, OSError) as exc:
        LOG.warning("Could not capture error screenshot: %s", exc)
