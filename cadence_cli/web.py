"""
Page Fetcher
────────────
Fetches a single web page for the optional AI-assisted path and reduces it to
readable text. One GET, no retries.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

import httpx
from bs4 import BeautifulSoup

from cadence_cli.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

_STRUCTURED_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "p", "li"]


@dataclass
class PageContent:
    url: str
    status_code: int
    title: str = ""
    description: str = ""
    body: str = ""
    all_text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def main_content(self) -> str:
        return self.all_text or self.body


def normalize_url(url: str) -> str:
    if not url.startswith(("http://", "https://")):
        return "https://" + url
    return url


def extract_structured_text(soup: BeautifulSoup) -> str:
    """Headings, paragraphs over 20 chars and list items, in document order."""
    texts = []
    for element in soup.find_all(_STRUCTURED_TAGS):
        text = element.get_text().strip()
        if element.name == "p":
            if len(text) > 20:
                texts.append(text)
        elif text:
            texts.append(text)
    return "\n".join(texts)


class Fetcher:
    def __init__(self, timeout: float = DEFAULT_TIMEOUT, client: Optional[httpx.Client] = None):
        self.timeout = timeout or DEFAULT_TIMEOUT
        self._client = client or httpx.Client(timeout=self.timeout, follow_redirects=True)

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def fetch(self, url: str) -> PageContent:
        url = normalize_url(url)
        logger.debug("Fetching %s", url)

        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(f"failed to fetch URL: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise FetchError(f"unexpected status code: {response.status_code}")

        try:
            soup = BeautifulSoup(response.text, "html.parser")
        except Exception as exc:  # html.parser surfaces several unrelated error types
            raise FetchError(f"failed to parse HTML: {exc}") from exc

        content = PageContent(
            url=url,
            status_code=response.status_code,
            headers=dict(response.headers),
        )

        if soup.title is not None:
            content.title = soup.title.get_text().strip()

        meta = soup.find("meta", attrs={"name": "description"})
        if meta is not None:
            content.description = meta.get("content", "")

        for tag in soup.find_all(["script", "style"]):
            tag.decompose()

        body = soup.body
        content.body = (body.get_text() if body is not None else "").strip()
        content.all_text = extract_structured_text(soup)

        return content
