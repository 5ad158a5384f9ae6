"""ICS calendar adapter - HTTP fetch of calendar feeds."""

import logging

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "daybook/1.0"


class IcsCalendarAdapter:
    """
    ICS feed adapter.

    Implements CalendarSource protocol. Returns the feed text untouched;
    any failure is logged and reported as None so a dead calendar never
    blocks the journal.
    """

    def __init__(self, timeout: int = 30, session: requests.Session | None = None):
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT})

    def fetch(self, url: str) -> str | None:
        """Fetch ICS text from a URL."""
        try:
            resp = self._session.get(url, timeout=self.timeout)
        except requests.Timeout:
            logger.warning(f"Calendar fetch timed out after {self.timeout}s: {url}")
            return None
        except requests.RequestException as e:
            logger.warning(f"Failed to fetch calendar {url}: {e}")
            return None

        if not resp.ok:
            logger.warning(f"Calendar fetch failed with status {resp.status_code}: {url}")
            return None
        return resp.text
