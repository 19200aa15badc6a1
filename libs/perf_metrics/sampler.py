"""
Page Metrics Sampler - Read Chrome performance counters through Playwright.

Playwright has no ``page.metrics()``, so the counters are read over a
DevTools Protocol session. Chromium only.
"""

import logging
from typing import Optional

from playwright.async_api import CDPSession, Page

from libs.perf_metrics.metrics import Snapshot

logger = logging.getLogger(__name__)


class PageMetricsSampler:
    """
    Callable sampler bound to one page.

    Usage:
        async with PageMetricsSampler(page) as sample:
            snapshot = await sample()
    """

    def __init__(self, page: Page):
        self.page = page
        self._session: Optional[CDPSession] = None

    async def _get_session(self) -> CDPSession:
        if self._session is None:
            self._session = await self.page.context.new_cdp_session(self.page)
            await self._session.send("Performance.enable")
            logger.debug("[PageMetricsSampler] CDP Performance domain enabled")
        return self._session

    async def sample(self) -> Snapshot:
        """Take one snapshot of every tracked counter."""
        session = await self._get_session()
        response = await session.send("Performance.getMetrics")
        return Snapshot.from_cdp(response)

    async def __call__(self) -> Snapshot:
        return await self.sample()

    async def close(self) -> None:
        """Detach the CDP session, if one was opened."""
        if self._session is None:
            return
        session, self._session = self._session, None
        try:
            await session.send("Performance.disable")
        except Exception as e:
            # Target already gone; detaching still releases the session
            logger.warning(f"[PageMetricsSampler] Performance.disable failed: {e}")
        finally:
            await session.detach()
            logger.debug("[PageMetricsSampler] CDP session detached")

    async def __aenter__(self) -> "PageMetricsSampler":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
