"""Visitor-side notice ticker: polls the public notices and rotates through them."""

import asyncio
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from clinic_api.core.calendar import as_utc, utc_now
from clinic_api.schemas.ticker import TickerNotificationResponse

logger = structlog.get_logger(__name__)

_notices_adapter = TypeAdapter(list[TickerNotificationResponse])


class NotificationTicker:
    """
    Client for ``GET /api/ticker/notifications`` that behaves like the site ticker.

    The ticker is ``hidden`` while it has nothing to show and ``visible``
    otherwise. With more than one notice it advances every
    ``ROTATE_INTERVAL`` seconds unless paused. Dismissals last for the life
    of the instance only.
    """

    NOTICES_PATH = "/api/ticker/notifications"
    # 30 minutes
    REFRESH_INTERVAL = 1800
    ROTATE_INTERVAL = 8

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None
        self._clock = clock
        self._notices: list[TickerNotificationResponse] = []
        self._dismissed: set[UUID] = set()
        self._tasks: list[asyncio.Task] = []
        self.index = 0
        self.paused = False

    @property
    def notices(self) -> list[TickerNotificationResponse]:
        """Notices currently in rotation."""
        return [notice for notice in self._notices if notice.id not in self._dismissed]

    @property
    def state(self) -> str:
        """``visible`` when there is a notice to show, else ``hidden``."""
        return "visible" if self.notices else "hidden"

    @property
    def current(self) -> TickerNotificationResponse | None:
        """Notice on screen, if any."""
        notices = self.notices
        if not notices:
            return None
        return notices[self.index % len(notices)]

    def _displayable(
        self,
        notices: list[TickerNotificationResponse],
    ) -> list[TickerNotificationResponse]:
        now = as_utc(self._clock())
        shown = [
            notice
            for notice in notices
            if notice.is_active and notice.start_date <= now <= notice.end_date
        ]
        return sorted(shown, key=lambda notice: notice.priority, reverse=True)

    async def refresh(self) -> list[TickerNotificationResponse]:
        """
        Fetch notices from the API.

        On any failure the previous list is kept and the error logged.

        Returns:
            Notices in rotation after the refresh
        """
        client = self._client or httpx.AsyncClient(timeout=10.0)
        try:
            response = await client.get(f"{self.base_url}{self.NOTICES_PATH}")
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError("Malformed response body")
            if not payload.get("success"):
                raise ValueError(payload.get("message") or "Unsuccessful response")
            fetched = _notices_adapter.validate_python(payload.get("data") or [])
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.warning("ticker_refresh_failed", error=str(e))
            return self.notices
        finally:
            if self._client is None:
                await client.aclose()

        self._notices = self._displayable(fetched)
        if self.index >= len(self.notices):
            self.index = 0

        logger.debug("ticker_refreshed", count=len(self.notices))
        return self.notices

    def advance(self) -> None:
        """Move to the next notice when rotating is allowed."""
        count = len(self.notices)
        if count > 1 and not self.paused:
            self.index = (self.index + 1) % count

    def pause(self) -> None:
        """Stop rotating (pointer hovering over the ticker)."""
        self.paused = True

    def resume(self) -> None:
        """Resume rotating."""
        self.paused = False

    def show(self, index: int) -> None:
        """
        Jump to a notice.

        Raises:
            IndexError: If there is no notice at ``index``
        """
        if not 0 <= index < len(self.notices):
            raise IndexError(f"No notice at position {index}")
        self.index = index

    def dismiss(self, notice_id: UUID | None = None) -> None:
        """Hide a notice (the current one by default) for this session."""
        if notice_id is None:
            current = self.current
            if current is None:
                return
            notice_id = current.id

        self._dismissed.add(notice_id)
        if self.index >= len(self.notices):
            self.index = 0

    async def _refresh_loop(self) -> None:
        while True:
            try:
                await self.refresh()
            except Exception:
                # The loop outlives any single failed poll
                logger.exception("ticker_refresh_crashed")
            await asyncio.sleep(self.REFRESH_INTERVAL)

    async def _rotate_loop(self) -> None:
        while True:
            await asyncio.sleep(self.ROTATE_INTERVAL)
            self.advance()

    def start(self) -> None:
        """Fetch now, then keep refreshing and rotating in the background."""
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._refresh_loop()),
            asyncio.create_task(self._rotate_loop()),
        ]

    async def stop(self) -> None:
        """Cancel background work and close the owned HTTP client."""
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "NotificationTicker":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=10.0)
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
