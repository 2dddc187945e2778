import html
import logging
import re
from typing import Callable, Protocol

import requests
from bs4 import BeautifulSoup
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .config import Settings
from .errors import CaptionNotFoundError, FetchFailedError
from .shortcode import build_post_url

logger = logging.getLogger(__name__)

OG_DESCRIPTION_RE = re.compile(r'<meta property="og:description" content="([^"]+)"')

# text inside these tags is never a caption candidate
_INVISIBLE_TAGS = ["script", "style", "noscript", "template", "head"]


class CaptionFetcher(Protocol):
    collapse_whitespace: bool

    def fetch(self, shortcode: str) -> str:
        ...


class HttpCaptionFetcher:
    """Plain GET of the post page, caption read from the og:description meta tag."""

    collapse_whitespace = False

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.settings = settings
        self.session = session or requests.Session()

    def fetch(self, shortcode: str) -> str:
        url = build_post_url(shortcode, self.settings.post_url_template)
        logger.info("Fetching %s", url)
        try:
            response = self.session.get(
                url,
                headers={"User-Agent": self.settings.user_agent},
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as e:
            logger.warning("Request for %s failed: %s", url, e)
            raise FetchFailedError() from e

        if not response.ok:
            logger.warning("Request for %s returned status %s", url, response.status_code)
            raise FetchFailedError(
                f"Could not retrieve caption: the page returned status {response.status_code}."
            )

        match = OG_DESCRIPTION_RE.search(response.text)
        if not match:
            raise CaptionNotFoundError()
        return match.group(1)


class BrowserSession:
    """A headless Chromium page. close() releases the page, browser and driver."""

    def __init__(self, user_agent: str):
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=True)
            self._page = self._browser.new_page(user_agent=user_agent)
        except Exception:
            self._playwright.stop()
            raise

    def goto(self, url: str, timeout_ms: int) -> None:
        self._page.goto(url, wait_until="networkidle", timeout=timeout_ms)

    def content(self) -> str:
        return self._page.content()

    def close(self) -> None:
        try:
            self._browser.close()
        finally:
            self._playwright.stop()


def caption_from_html(page: str) -> str | None:
    """
    og:description content, else the longest visible text node.

    The result keeps its character references undecoded, like the HTTP
    fetcher's, so normalization decodes it exactly once. BeautifulSoup
    decodes what it parses, so its results are escaped again.
    """
    match = OG_DESCRIPTION_RE.search(page)
    if match:
        return match.group(1)

    soup = BeautifulSoup(page, "html.parser")
    meta = soup.find("meta", attrs={"property": "og:description"})
    if meta and meta.get("content"):
        return html.escape(meta["content"])

    for tag in soup(_INVISIBLE_TAGS):
        tag.decompose()
    texts = [t for t in soup.stripped_strings if t]
    if not texts:
        return None
    logger.warning("og:description missing, using longest text node")
    return html.escape(max(texts, key=len))


class BrowserCaptionFetcher:
    """Renders the post page in a headless browser before reading the caption."""

    collapse_whitespace = True

    def __init__(self, settings: Settings, session_factory: Callable[[], BrowserSession] | None = None):
        self.settings = settings
        self.session_factory = session_factory or (lambda: BrowserSession(settings.user_agent))

    def fetch(self, shortcode: str) -> str:
        url = build_post_url(shortcode, self.settings.post_url_template)
        logger.info("Rendering %s", url)
        try:
            session = self.session_factory()
        except PlaywrightError as e:
            logger.warning("Could not start browser: %s", e)
            raise FetchFailedError() from e

        try:
            session.goto(url, self.settings.render_timeout_ms)
            page = session.content()
        except PlaywrightError as e:
            # TimeoutError is a subclass of Error
            logger.warning("Rendering %s failed: %s", url, e)
            raise FetchFailedError() from e
        finally:
            session.close()

        caption = caption_from_html(page)
        if not caption:
            raise CaptionNotFoundError()
        return caption


def build_fetcher(settings: Settings) -> CaptionFetcher:
    if settings.fetch_strategy == "browser":
        return BrowserCaptionFetcher(settings)
    return HttpCaptionFetcher(settings)
