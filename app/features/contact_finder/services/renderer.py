"""
Dynamic Renderer

Headless-browser primitives used only when the static probe finds nothing.
Orchestration talks to the abstract `Renderer`; `SeleniumRenderer` is the
Chrome-backed implementation.

All methods block and are meant to be called from a worker thread.
"""
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.chrome.webdriver import WebDriver
from selenium.webdriver.support.ui import WebDriverWait

from app.features.contact_finder.errors import NavigationError
from app.features.contact_finder.services.email_extractor import (
    DEFAULT_DENYLIST,
    DEFAULT_IGNORED_SUFFIXES,
    extract_emails,
)
from app.features.contact_finder.services.link_classifier import is_navigable
from app.platform.logger import get_logger

logger = get_logger(__name__)

_OUTER_HTML_JS = "return document.documentElement ? document.documentElement.outerHTML : '';"
_MAILTO_HREFS_JS = (
    "return Array.from(document.querySelectorAll('a[href^=\"mailto:\" i]'), a => a.href);"
)
_ANCHOR_HREFS_JS = "return Array.from(document.querySelectorAll('a[href]'), a => a.href);"
_READY_STATE_JS = "return document.readyState;"


class RenderSession:
    """
    One isolated browser instance, reused for a site's main page and its
    sub-links. `close()` is idempotent and safe to call from any thread; it
    also wakes up a pending settle wait.
    """

    def __init__(self, driver: Optional[WebDriver] = None):
        self.driver = driver
        self.current_url: Optional[str] = None
        self._closed = threading.Event()
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to `seconds`; True if the session was closed meanwhile."""
        if seconds <= 0:
            return self.closed
        return self._closed.wait(seconds)

    def close(self) -> None:
        with self._lock:
            if self._closed.is_set():
                return
            self._closed.set()
            driver, self.driver = self.driver, None
        if driver is not None:
            try:
                driver.quit()
            except Exception as e:
                logger.warning(f"Error while closing browser session: {e}")


class Renderer(ABC):
    """Operation set the orchestrator needs from a rendering engine."""

    @abstractmethod
    def open(self, url: str, on_launch: Optional[Callable[[RenderSession], None]] = None) -> RenderSession:
        """Launch a browser, navigate to `url` and wait for it to settle."""

    @abstractmethod
    def navigate(self, session: RenderSession, url: str) -> None:
        """Load another URL in an existing session, same wait semantics as open()."""

    @abstractmethod
    def extract_emails(self, session: RenderSession) -> List[str]:
        """Emails in the live DOM's markup and mailto: anchors."""

    @abstractmethod
    def extract_links(self, session: RenderSession) -> List[str]:
        """Absolute hrefs of every navigable anchor in the live DOM."""

    def close(self, session: Optional[RenderSession]) -> None:
        if session is not None:
            session.close()


class SeleniumRenderer(Renderer):
    def __init__(
        self,
        navigation_timeout: float = 60.0,
        settle_delay: float = 60.0,
        chromedriver_path: Optional[str] = None,
        headless: bool = True,
        user_agent: Optional[str] = None,
        denylist: Sequence[str] = DEFAULT_DENYLIST,
        ignored_suffixes: Sequence[str] = DEFAULT_IGNORED_SUFFIXES,
    ):
        self.navigation_timeout = navigation_timeout
        self.settle_delay = settle_delay
        self.chromedriver_path = chromedriver_path
        self.headless = headless
        self.user_agent = user_agent
        self.denylist = tuple(denylist)
        self.ignored_suffixes = tuple(ignored_suffixes)

    def build_driver(self) -> WebDriver:
        chrome_options = Options()
        if self.headless:
            chrome_options.add_argument('--headless=new')
        chrome_options.add_argument('--no-sandbox')
        chrome_options.add_argument('--disable-dev-shm-usage')
        chrome_options.add_argument('--disable-gpu')
        chrome_options.add_argument('--disable-blink-features=AutomationControlled')
        if self.user_agent:
            chrome_options.add_argument(f'--user-agent={self.user_agent}')

        if self.chromedriver_path:
            driver_service = Service(executable_path=self.chromedriver_path)
            driver = webdriver.Chrome(service=driver_service, options=chrome_options)
        else:
            driver = webdriver.Chrome(options=chrome_options)

        driver.set_page_load_timeout(self.navigation_timeout)
        driver.set_script_timeout(self.navigation_timeout)
        return driver

    def open(self, url: str, on_launch: Optional[Callable[[RenderSession], None]] = None) -> RenderSession:
        try:
            driver = self.build_driver()
        except WebDriverException as e:
            raise NavigationError(url, f"browser failed to launch: {e.msg or e}") from e

        session = RenderSession(driver)
        try:
            if on_launch is not None:
                on_launch(session)
            self.navigate(session, url)
        except BaseException:
            session.close()
            raise
        return session

    def navigate(self, session: RenderSession, url: str) -> None:
        driver = self._driver(session, url)
        logger.info(f"Navigating to {url}")
        try:
            driver.get(url)
            WebDriverWait(driver, self.navigation_timeout).until(
                lambda d: d.execute_script(_READY_STATE_JS) == "complete"
            )
        except TimeoutException as e:
            raise NavigationError(url, f"timed out after {self.navigation_timeout:g}s") from e
        except WebDriverException as e:
            raise NavigationError(url, self._describe(session, e)) from e
        except Exception as e:
            # quit() from a cancel request surfaces as urllib3/connection errors
            if session.closed:
                raise NavigationError(url, "session closed") from e
            raise

        if session.wait(self.settle_delay):
            raise NavigationError(url, "session closed")
        session.current_url = url

    def extract_emails(self, session: RenderSession) -> List[str]:
        markup = self._evaluate(session, _OUTER_HTML_JS) or ""
        mailto_targets = self._evaluate(session, _MAILTO_HREFS_JS) or []
        return extract_emails(
            markup,
            [target for target in mailto_targets if isinstance(target, str)],
            denylist=self.denylist,
            ignored_suffixes=self.ignored_suffixes,
        )

    def extract_links(self, session: RenderSession) -> List[str]:
        hrefs = self._evaluate(session, _ANCHOR_HREFS_JS) or []
        links = {}
        for href in hrefs:
            if is_navigable(href):
                links.setdefault(href.strip(), None)
        return list(links)

    def _evaluate(self, session: RenderSession, script: str):
        url = session.current_url or "(blank)"
        driver = self._driver(session, url)
        try:
            return driver.execute_script(script)
        except WebDriverException as e:
            raise NavigationError(url, f"DOM evaluation failed: {self._describe(session, e)}") from e
        except Exception as e:
            if session.closed:
                raise NavigationError(url, "session closed") from e
            raise

    @staticmethod
    def _driver(session: RenderSession, url: str) -> WebDriver:
        driver = session.driver
        if driver is None or session.closed:
            raise NavigationError(url, "session closed")
        return driver

    @staticmethod
    def _describe(session: RenderSession, exc: WebDriverException) -> str:
        if session.closed:
            return "session closed"
        message = (exc.msg or str(exc)).strip()
        return message.splitlines()[0] if message else type(exc).__name__
