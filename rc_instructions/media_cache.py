r"""Fetch-once cache for instruction media.

Rendering layers can hand a :class:`MediaCache` to :func:`resolve_media_url`
so repeated renders of the same step reuse downloaded media instead of
hitting the network again. The parsers never touch the cache; without one,
URLs resolve to themselves.

Example
-------
>>> from rc_instructions.media_cache import MediaCache, resolve_media_url
>>> resolve_media_url("https://example.invalid/demo.mp4")
'https://example.invalid/demo.mp4'
>>> cache = MediaCache()  # doctest: +SKIP
>>> cache.fetch_once("https://example.invalid/demo.mp4")  # doctest: +SKIP
CachedMedia(url='https://example.invalid/demo.mp4', ...)
"""

from __future__ import annotations

import base64
import dataclasses as dc
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import MediaFetchError

logger = logging.getLogger(__name__)

DEFAULT_MIME = "application/octet-stream"


@dc.dataclass(frozen=True, slots=True)
class CachedMedia:
    """Downloaded media held in memory.

    Attributes
    ----------
    url : str
        The URL the content was fetched from.
    content : bytes
        Response body.
    mime : str
        Media type reported by the server, without parameters.
    """

    url: str
    content: bytes = dc.field(repr=False)
    mime: str = DEFAULT_MIME

    @property
    def data_uri(self) -> str:
        """Return the content as a base64 ``data:`` URI."""
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.mime};base64,{encoded}"


def _build_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=3,
        connect=3,
        read=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class MediaCache:
    """Download each media URL at most once and keep the result.

    Failed downloads are remembered as ``None`` so a broken URL is not
    retried on every render. The cache is safe to share between threads;
    concurrent requests for the same URL share a single download.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float = 30.0,
        max_workers: int = 2,
    ) -> None:
        """Initialise the cache.

        Parameters
        ----------
        session : requests.Session, optional
            Session used for downloads; defaults to one with retrying
            adapters mounted for HTTP and HTTPS.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``30.0``.
        max_workers : int, optional
            Threads used to warm the cache in the background from
            :meth:`resolve`. Defaults to ``2``.
        """
        self._session = session or _build_session()
        self.timeout = timeout
        self._max_workers = max_workers
        self._entries: dict[str, CachedMedia | None] = {}
        self._url_locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None
        self._warming: dict[str, Future[CachedMedia | None]] = {}

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, url: str) -> CachedMedia | None:
        """Return the cached entry for ``url`` without downloading."""
        with self._lock:
            return self._entries.get(url.strip())

    def fetch(self, url: str) -> CachedMedia:
        """Download ``url`` unconditionally.

        Raises
        ------
        MediaFetchError
            If the request fails or the server answers with an error status.
        """
        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            msg = f"Failed to fetch instruction media '{url}': {exc}"
            raise MediaFetchError(msg) from exc
        content_type = response.headers.get("Content-Type") or DEFAULT_MIME
        mime = content_type.split(";", 1)[0].strip() or DEFAULT_MIME
        return CachedMedia(url=url, content=response.content, mime=mime)

    def fetch_once(self, url: str) -> CachedMedia | None:
        """Return the cached entry for ``url``, downloading it the first time.

        Returns ``None`` for blank URLs and for URLs whose download failed.
        """
        key = url.strip() if url else ""
        if not key:
            return None
        with self._lock:
            if key in self._entries:
                logger.debug("media cache hit: %s", key)
                return self._entries[key]
            url_lock = self._url_locks.setdefault(key, threading.Lock())

        with url_lock:
            with self._lock:
                if key in self._entries:
                    return self._entries[key]
            logger.debug("media cache miss: %s", key)
            try:
                entry: CachedMedia | None = self.fetch(key)
            except MediaFetchError as exc:
                logger.warning("%s", exc)
                entry = None
            with self._lock:
                self._entries[key] = entry
                self._url_locks.pop(key, None)
            return entry

    def warm(self, url: str) -> Future[CachedMedia | None] | None:
        """Start downloading ``url`` in the background if it is not cached."""
        key = url.strip() if url else ""
        if not key:
            return None
        with self._lock:
            if key in self._entries:
                return None
            if key in self._warming:
                return self._warming[key]
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="instruction-media",
                )
            future = self._executor.submit(self.fetch_once, key)
            self._warming[key] = future
        future.add_done_callback(lambda _: self._finish_warming(key))
        return future

    def _finish_warming(self, key: str) -> None:
        with self._lock:
            self._warming.pop(key, None)

    def resolve(self, url: str, *, warm: bool = True) -> str:
        """Return the cached ``data:`` URI for ``url`` or ``url`` itself.

        On a miss the URL is returned unchanged and, when ``warm`` is set, a
        background download is started so the next render hits the cache.
        """
        if not url:
            return url
        key = url.strip()
        entry = self.get(key)
        if entry is not None:
            return entry.data_uri
        if warm:
            self.warm(key)
        return key

    def clear(self) -> None:
        """Forget every cached entry, including remembered failures."""
        with self._lock:
            self._entries.clear()

    def close(self) -> None:
        """Stop background downloads and close the HTTP session."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        self._session.close()

    def __enter__(self) -> MediaCache:
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()


def resolve_media_url(url: str, cache: MediaCache | None = None) -> str:
    """Resolve ``url`` through ``cache``; without a cache return it unchanged."""
    if cache is None:
        return url
    return cache.resolve(url)


__all__ = ["CachedMedia", "MediaCache", "resolve_media_url"]
