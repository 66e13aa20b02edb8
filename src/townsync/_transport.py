"""HTTP transport for the sheet CSV export."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import aiohttp

from townsync.config import SyncConfig
from townsync.exceptions import FetchError

_logger = logging.getLogger(__name__)


class SheetSource(Protocol):
    """Structural source interface used by the sync controller.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpSheetSource`) concrete.
    """

    async def fetch_text(self) -> str:
        ...


class HttpSheetSource:
    """Fetches the CSV export with a plain GET."""

    def __init__(self, config: SyncConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    @property
    def url(self) -> str:
        return self._config.source_url

    def _timeout(self) -> aiohttp.ClientTimeout:
        # total=None disables aiohttp's default five minute cap.
        return aiohttp.ClientTimeout(total=self._config.request_timeout)

    async def fetch_text(self) -> str:
        """GET the export and return its body as text.

        Raises
        ------
        FetchError
            On connection failure, timeout or a non-2xx status.
        """
        url = self._config.source_url
        headers = {
            "accept": "text/csv, text/plain;q=0.9, */*;q=0.1",
            "user-agent": self._config.user_agent,
        }

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout()) as resp:
                text = await resp.text(encoding=self._config.encoding, errors="replace")
                if not 200 <= resp.status < 300:
                    raise FetchError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except FetchError:
            raise
        except asyncio.TimeoutError as exc:
            raise FetchError(f"Request to {url} timed out", url=url) from exc
        except aiohttp.ClientError as exc:
            raise FetchError(f"Request to {url} failed: {exc}", url=url) from exc

        _logger.debug("Fetched %d characters from %s", len(text), url)
        return text
