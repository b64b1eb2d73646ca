"""Abstract base class for document generators."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, Generic, Optional, TypeVar

from ..config import EngineConfig
from ..core.errors import InputError
from ..core.formatting import document_filename
from ..core.images import ImageSet, ResolvedImage
from ..core.models import DocumentKind, DocumentRequest, GenerationResult
from .themes import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=DocumentRequest)


class BaseGenerator(ABC, Generic[RequestT]):
    """Every generator inherits from this class.

    Generators accept an optional ``Theme`` for colors/fonts, an
    optional ``ImageSet`` of images already resolved for the request and
    an optional ``EngineConfig`` for studio branding. ``render`` builds
    the whole document in memory and returns its bytes.
    """

    kind: ClassVar[DocumentKind]                     # set by subclasses
    request_model: ClassVar[type[DocumentRequest]]   # set by subclasses

    def __init__(
        self,
        theme: Theme | None = None,
        images: ImageSet | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.theme = theme or DEFAULT_THEME
        self.images = images or ImageSet()
        self.config = config or EngineConfig()

    @abstractmethod
    def render(self, request: RequestT) -> bytes:
        """Build the document and return its bytes."""
        ...

    def generate(self, request: RequestT) -> GenerationResult:
        """Render *request* into a ``GenerationResult``; never raises.

        ``InputError`` messages are returned as-is. Any other failure is
        logged with its traceback and reported as
        ``"Failed to generate <kind>: <error>"``.
        """
        try:
            data = self.render(request)
        except InputError as exc:
            logger.warning("%s: %s", self.kind.value, exc)
            return GenerationResult.failure(self.kind, str(exc))
        except Exception as exc:
            logger.exception("%s generation failed", self.kind.value)
            return GenerationResult.failure(
                self.kind, f"Failed to generate {self.kind.value}: {str(exc) or type(exc).__name__}"
            )
        return GenerationResult.ok(self.kind, data, self.filename(request))

    # -- Helpers ---------------------------------------------------------

    def filename(self, request: RequestT) -> str:
        return document_filename(
            self.kind.filename_prefix,
            request.client.name,
            self.kind.output_format.extension,
        )

    def image(self, reference: Optional[str]) -> Optional[ResolvedImage]:
        return self.images.get(reference)
