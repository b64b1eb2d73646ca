"""Generation orchestrator: validate → resolve images → render → package.

``DocumentEngine.render`` is the error boundary. Input problems,
rendering failures and anything unexpected come back as a failed
``GenerationResult``; no exception escapes and no partial buffer is
ever returned.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from pydantic import ValidationError

from .config import EngineConfig
from .core.errors import InputError
from .core.images import ImageResolver, ImageSet
from .core.models import DocumentKind, DocumentRequest, GenerationResult
from .generators.base import BaseGenerator
from .generators.budget_deck import BudgetDeckGenerator
from .generators.presentation_deck import PresentationDeckGenerator
from .generators.proposal_pdf import ProposalPdfGenerator
from .generators.proposal_word import ProposalWordGenerator
from .generators.schedule_deck import ScheduleDeckGenerator
from .generators.schedule_pdf import SchedulePdfGenerator
from .generators.shopping_deck import ShoppingListDeckGenerator
from .generators.technical_deck import TechnicalDeckGenerator
from .generators.themes import Theme, get_theme
from .generators.workbook import BudgetWorkbookGenerator, ItemsWorkbookGenerator

logger = logging.getLogger(__name__)

# Map kind enum → generator class
GENERATORS: dict[DocumentKind, type[BaseGenerator]] = {
    DocumentKind.PRESENTATION: PresentationDeckGenerator,
    DocumentKind.SHOPPING_LIST: ShoppingListDeckGenerator,
    DocumentKind.BUDGET_DECK: BudgetDeckGenerator,
    DocumentKind.TECHNICAL_DECK: TechnicalDeckGenerator,
    DocumentKind.SCHEDULE_DECK: ScheduleDeckGenerator,
    DocumentKind.BUDGET_WORKBOOK: BudgetWorkbookGenerator,
    DocumentKind.ITEMS_WORKBOOK: ItemsWorkbookGenerator,
    DocumentKind.PROPOSAL_PDF: ProposalPdfGenerator,
    DocumentKind.SCHEDULE_PDF: SchedulePdfGenerator,
    DocumentKind.PROPOSAL_WORD: ProposalWordGenerator,
}

RequestInput = Union[DocumentRequest, Mapping[str, Any]]


def _describe_validation(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        where = ".".join(str(p) for p in err.get("loc", ())) or "request"
        parts.append(f"{where}: {err.get('msg', 'invalid value')}")
    return "Invalid request: " + "; ".join(parts)


class DocumentEngine:
    """Builds any document kind from an in-memory request.

    Usage::

        engine = DocumentEngine()
        result = engine.render(DocumentKind.BUDGET_DECK, {"client": "Ana", "items": [...]})
        if result.success:
            send(result.data, result.filename, result.mime_type)
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        resolver: ImageResolver | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.resolver = resolver or ImageResolver(
            timeout=self.config.image_timeout,
            max_workers=self.config.image_workers,
        )

    # -- public API ----------------------------------------------------------

    def render(self, kind: DocumentKind | str, request: RequestInput) -> GenerationResult:
        """Generate one document. Never raises."""
        try:
            kind = DocumentKind(kind)
        except ValueError:
            return GenerationResult.failure(None, f"Unknown document kind: {kind!r}")

        generator_cls = GENERATORS[kind]
        try:
            parsed = self._parse(generator_cls, request)
            theme = self._theme(parsed)
        except ValidationError as exc:
            message = _describe_validation(exc)
            logger.warning("%s: %s", kind.value, message)
            return GenerationResult.failure(kind, message)
        except InputError as exc:
            logger.warning("%s: %s", kind.value, exc)
            return GenerationResult.failure(kind, str(exc))

        try:
            images = self._resolve_images(parsed)
        except Exception as exc:
            logger.exception("%s image resolution failed", kind.value)
            return GenerationResult.failure(kind, f"Failed to generate {kind.value}: {exc}")

        generator = generator_cls(theme=theme, images=images, config=self.config)
        result = generator.generate(parsed)
        if result.success:
            logger.info("Generated %s (%d bytes)", result.filename, len(result.data or b""))
        return result

    def presentation(self, request: RequestInput) -> GenerationResult:
        return self.render(DocumentKind.PRESENTATION, request)

    def shopping_list(self, request: RequestInput) -> GenerationResult:
        return self.render(DocumentKind.SHOPPING_LIST, request)

    def budget_deck(self, request: RequestInput) -> GenerationResult:
        return self.render(DocumentKind.BUDGET_DECK, request)

    def technical_deck(self, request: RequestInput) -> GenerationResult:
        return self.render(DocumentKind.TECHNICAL_DECK, request)

    def schedule_deck(self, request: RequestInput) -> GenerationResult:
        return self.render(DocumentKind.SCHEDULE_DECK, request)

    def budget_workbook(self, request: RequestInput) -> GenerationResult:
        return self.render(DocumentKind.BUDGET_WORKBOOK, request)

    def items_workbook(self, request: RequestInput) -> GenerationResult:
        return self.render(DocumentKind.ITEMS_WORKBOOK, request)

    def proposal_pdf(self, request: RequestInput) -> GenerationResult:
        return self.render(DocumentKind.PROPOSAL_PDF, request)

    def proposal_word(self, request: RequestInput) -> GenerationResult:
        return self.render(DocumentKind.PROPOSAL_WORD, request)

    def schedule_pdf(self, request: RequestInput) -> GenerationResult:
        return self.render(DocumentKind.SCHEDULE_PDF, request)

    # -- private -------------------------------------------------------------

    @staticmethod
    def _parse(generator_cls: type[BaseGenerator], request: RequestInput) -> DocumentRequest:
        model = generator_cls.request_model
        if isinstance(request, model):
            return request
        if isinstance(request, DocumentRequest):
            raise InputError(
                f"{generator_cls.kind.value} expects {model.__name__}, got {type(request).__name__}"
            )
        if not isinstance(request, Mapping):
            raise InputError(f"Request must be a mapping or {model.__name__}")
        return model.model_validate(dict(request))

    def _theme(self, request: DocumentRequest) -> Theme:
        name = request.theme or self.config.theme
        try:
            return get_theme(name)
        except KeyError as exc:
            raise InputError(str(exc.args[0])) from exc

    def _resolve_images(self, request: DocumentRequest) -> ImageSet:
        refs = request.image_references()
        if not refs:
            return ImageSet()
        return self.resolver.resolve_many(refs)
