"""Fetch remote images for embedding, degrading to ``None`` on failure.

A failed fetch, a timeout, a non-success status or a body that does not
decode as an image all yield ``None``. One bad image never affects the
others, and no retry is attempted within a generation run.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field
from io import BytesIO
from typing import Iterable, Iterator, Optional

import httpx
from PIL import Image

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 15.0
_DEFAULT_WORKERS = 8


# ---------------------------------------------------------------------------
# Resolved image
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResolvedImage:
    """Image bytes plus the pixel size read from them."""

    url: str
    data: bytes = field(repr=False)
    width: int
    height: int
    content_type: Optional[str] = None

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height if self.height else 1.0

    def stream(self) -> BytesIO:
        """A fresh stream for each embed; writers consume what they read."""
        return BytesIO(self.data)

    def fit(self, box_width: float, box_height: float) -> tuple[float, float, float, float]:
        """Largest ``(dx, dy, w, h)`` inside the box keeping aspect ratio.

        ``dx``/``dy`` centre the image within the box.
        """
        ratio = self.aspect_ratio
        if box_width / box_height > ratio:
            h = box_height
            w = h * ratio
        else:
            w = box_width
            h = w / ratio
        return (box_width - w) / 2, (box_height - h) / 2, w, h


@dataclass
class ImageSet:
    """Images resolved for one request, keyed by reference."""

    images: dict[str, Optional[ResolvedImage]] = field(default_factory=dict)

    def get(self, reference: Optional[str]) -> Optional[ResolvedImage]:
        if not reference:
            return None
        return self.images.get(reference)

    @property
    def resolved_count(self) -> int:
        return sum(1 for img in self.images.values() if img is not None)

    @property
    def failed(self) -> list[str]:
        return [ref for ref, img in self.images.items() if img is None]


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class ImageResolver:
    """Downloads images over HTTP with parallel outstanding requests.

    Pass *client* to reuse an existing ``httpx.Client`` (tests inject one
    with a mock transport); otherwise one client is opened per batch.
    """

    def __init__(
        self,
        timeout: float = _DEFAULT_TIMEOUT,
        max_workers: int = _DEFAULT_WORKERS,
        client: httpx.Client | None = None,
    ) -> None:
        self.timeout = timeout
        self.max_workers = max(1, max_workers)
        self._client = client

    # -- public API ----------------------------------------------------------

    def resolve(self, reference: Optional[str]) -> Optional[ResolvedImage]:
        """Fetch a single image, or ``None``."""
        if not _is_remote(reference):
            return None
        with self._open_client() as client:
            return self._fetch(client, reference)

    def resolve_many(self, references: Iterable[Optional[str]]) -> ImageSet:
        """Fetch all *references* concurrently; returns when all are done."""
        unique = list(dict.fromkeys(ref for ref in references if ref))
        images: dict[str, Optional[ResolvedImage]] = {
            ref: None for ref in unique if not _is_remote(ref)
        }
        remote = [ref for ref in unique if _is_remote(ref)]
        if not remote:
            return ImageSet(images)

        workers = min(self.max_workers, len(remote))
        with self._open_client() as client:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="image") as pool:
                futures = {ref: pool.submit(self._fetch, client, ref) for ref in remote}
                for ref, future in futures.items():
                    images[ref] = future.result()

        result = ImageSet(images)
        logger.info(
            "Resolved %d/%d images", result.resolved_count, len(unique),
        )
        return result

    # -- private -------------------------------------------------------------

    @contextmanager
    def _open_client(self) -> Iterator[httpx.Client]:
        if self._client is not None:
            yield self._client
            return
        with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
            yield client

    @staticmethod
    def _fetch(client: httpx.Client, url: str) -> Optional[ResolvedImage]:
        try:
            resp = client.get(url)
            resp.raise_for_status()
            data = resp.content
            with Image.open(BytesIO(data)) as img:
                width, height = img.size
            logger.debug("Fetched image %s (%dx%d)", url, width, height)
            return ResolvedImage(
                url=url,
                data=data,
                width=width,
                height=height,
                content_type=resp.headers.get("content-type"),
            )
        except Exception as exc:
            logger.warning("Failed to fetch image %s: %s", url, exc)
            return None


def _is_remote(reference: Optional[str]) -> bool:
    if not reference:
        return False
    return reference.strip().lower().startswith(("http://", "https://"))
