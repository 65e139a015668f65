"""Web reading and web search tools."""

from __future__ import annotations

import html as html_lib
import re
from typing import Callable, List, Optional, Tuple
from urllib.parse import unquote

import httpx

from ...logger import get_logger

logger = get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/118.0.5993.90 Safari/537.36"
)
DEFAULT_TIMEOUT = httpx.Timeout(30.0)

# Elements whose whole body is noise for the model.
_DROP_BLOCKS = re.compile(
    r"<(script|style|svg|nav|header|form|head)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
_DROP_TAGS = re.compile(r"<!DOCTYPE[^>]*>|<!--.*?-->|<(meta|link|input|path)\b[^>]*>", re.IGNORECASE | re.DOTALL)
_IMG = re.compile(r"<img\b[^>]*\bsrc\s*=\s*(['\"])([^'\"]*)\1[^>]*>", re.IGNORECASE | re.DOTALL)
_ANCHOR = re.compile(r"<a\b[^>]*\bhref\s*=\s*(['\"])([^'\"]*)\1[^>]*>", re.IGNORECASE | re.DOTALL)
# Layout tags are dropped but their text is kept; links and images survive in reduced form.
_LAYOUT_TAGS = re.compile(
    r"</?(html|body|p|i|b|u|ul|ol|li|div|strong|span|pre|table|thead|tbody|tfoot|tr|td|th)\b[^>]*>",
    re.IGNORECASE,
)
_ANY_TAG = re.compile(r"<[^>]+>")


def new_http_client() -> httpx.Client:
    return httpx.Client(headers={"User-Agent": USER_AGENT}, follow_redirects=True, timeout=DEFAULT_TIMEOUT)


def strip_html(markup: str) -> str:
    """Reduce an HTML page to text plus bare ``<a href>`` and ``<img src>`` tags."""
    text = _DROP_BLOCKS.sub("", markup)
    text = _DROP_TAGS.sub("", text)
    text = _IMG.sub(r'<img src="\2">', text)
    text = _ANCHOR.sub(r'<a href="\2">', text)
    text = _LAYOUT_TAGS.sub("", text)
    text = re.sub(r">\s+<", "><", text)
    text = re.sub(r"[ \t]+", " ", text)
    lines = (line.strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def read_website(url: str, max_content_length: int, client: Optional[httpx.Client] = None) -> Tuple[str, int]:
    """Fetch a page and return its reduced HTML, capped at ``max_content_length`` characters."""
    owns_client = client is None
    http = client or new_http_client()
    try:
        response = http.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        return f"HTTP {exc.response.status_code} while reading {url}", 1
    except httpx.HTTPError as exc:
        return f"Error reading website: {exc}", -1
    finally:
        if owns_client:
            http.close()

    content = strip_html(response.text)
    return content[:max_content_length] + "\n", 0


def web_search(query: str, searxng_instance: str = "", client: Optional[httpx.Client] = None) -> Tuple[str, int]:
    """Search the web, trying SearXNG (if configured), then DuckDuckGo, then Wiby.

    Returns:
        One ``url : snippet`` line per hit, or ``No results found.``.
    """
    owns_client = client is None
    http = client or new_http_client()
    backends: List[Tuple[str, Callable[[httpx.Client, str], str]]] = []
    if searxng_instance:
        backends.append(("searxng", lambda c, q: _search_searxng(c, searxng_instance, q)))
    backends.append(("duckduckgo", _search_duckduckgo))
    backends.append(("wiby", _search_wiby))

    exit_code = 0
    try:
        for name, backend in backends:
            try:
                results = backend(http, query)
            except (httpx.HTTPError, ValueError) as exc:
                logger.info("Search backend %s failed: %s", name, exc)
                exit_code = -1
                continue
            if results.strip():
                return results, 0
            logger.debug("Search backend %s returned no results.", name)
    finally:
        if owns_client:
            http.close()

    return "No results found.", exit_code


def _search_searxng(client: httpx.Client, instance: str, query: str) -> str:
    response = client.get(f"{instance.rstrip('/')}/search", params={"q": query, "format": "json"})
    response.raise_for_status()
    payload = response.json()
    hits = (payload.get("results") or []) if isinstance(payload, dict) else None
    if not isinstance(hits, list):
        raise ValueError(f"unexpected SearXNG response: {type(payload).__name__}")
    lines = []
    for hit in hits:
        if not isinstance(hit, dict):
            continue
        url = hit.get("url") or ""
        if url:
            lines.append(f"{url} : {hit.get('title') or ''} - {hit.get('content') or ''}")
    return "\n".join(lines)


_DDG_SNIPPET = re.compile(r'<a class="result__snippet" href="([^"]+)">(.+?)</a>', re.IGNORECASE | re.DOTALL)
_DDG_TARGET = re.compile(r"uddg=([^&]+)")


def _search_duckduckgo(client: httpx.Client, query: str) -> str:
    response = client.get("https://duckduckgo.com/html/", params={"q": query})
    response.raise_for_status()
    lines = []
    for href, snippet in _DDG_SNIPPET.findall(response.text):
        target = _DDG_TARGET.search(href)
        if not target:
            continue
        url = unquote(target.group(1))
        # Ad links go through the y.js tracker.
        if "duckduckgo.com/y.js" in url:
            continue
        lines.append(f"{url} : {html_lib.unescape(_ANY_TAG.sub('', snippet))}")
    return "\n".join(lines)


def _search_wiby(client: httpx.Client, query: str) -> str:
    response = client.get("https://wiby.me/json/", params={"q": query})
    response.raise_for_status()
    hits = response.json()
    if not isinstance(hits, list):
        raise ValueError(f"unexpected Wiby response: {type(hits).__name__}")
    lines = []
    for hit in hits:
        if not isinstance(hit, dict):
            continue
        url = hit.get("URL") or ""
        if url:
            lines.append(f"{url} : {hit.get('Title') or ''} - {hit.get('Snippet') or ''}")
    return "\n".join(lines)
