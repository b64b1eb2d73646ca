"""Pydantic models for document generation requests and results.

Items are a tagged union over three variants (budget, shopping,
technical) sharing one base. Requests bundle client metadata, per-kind
flags and the item or image collections. ``GenerationResult`` is the
only shape handed back to callers.
"""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .categories import Category

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class OutputFormat(str, Enum):
    """Binary container produced by a generator."""
    PPTX = "pptx"
    XLSX = "xlsx"
    PDF = "pdf"
    DOCX = "docx"

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self]

    @property
    def extension(self) -> str:
        return self.value


_MIME_TYPES = {
    OutputFormat.PPTX: "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    OutputFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    OutputFormat.PDF: "application/pdf",
    OutputFormat.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class DocumentKind(str, Enum):
    """Every document the engine can build."""
    PRESENTATION = "presentation"
    SHOPPING_LIST = "shopping_list"
    BUDGET_DECK = "budget_deck"
    TECHNICAL_DECK = "technical_deck"
    SCHEDULE_DECK = "schedule_deck"
    BUDGET_WORKBOOK = "budget_workbook"
    ITEMS_WORKBOOK = "items_workbook"
    PROPOSAL_PDF = "proposal_pdf"
    SCHEDULE_PDF = "schedule_pdf"
    PROPOSAL_WORD = "proposal_word"

    @property
    def output_format(self) -> OutputFormat:
        return _KIND_FORMATS[self]

    @property
    def filename_prefix(self) -> str:
        return _KIND_PREFIXES[self]


_KIND_FORMATS = {
    DocumentKind.PRESENTATION: OutputFormat.PPTX,
    DocumentKind.SHOPPING_LIST: OutputFormat.PPTX,
    DocumentKind.BUDGET_DECK: OutputFormat.PPTX,
    DocumentKind.TECHNICAL_DECK: OutputFormat.PPTX,
    DocumentKind.SCHEDULE_DECK: OutputFormat.PPTX,
    DocumentKind.BUDGET_WORKBOOK: OutputFormat.XLSX,
    DocumentKind.ITEMS_WORKBOOK: OutputFormat.XLSX,
    DocumentKind.PROPOSAL_PDF: OutputFormat.PDF,
    DocumentKind.SCHEDULE_PDF: OutputFormat.PDF,
    DocumentKind.PROPOSAL_WORD: OutputFormat.DOCX,
}

_KIND_PREFIXES = {
    DocumentKind.PRESENTATION: "apresentacao",
    DocumentKind.SHOPPING_LIST: "lista-compras",
    DocumentKind.BUDGET_DECK: "orcamento",
    DocumentKind.TECHNICAL_DECK: "detalhamento",
    DocumentKind.SCHEDULE_DECK: "cronograma",
    DocumentKind.BUDGET_WORKBOOK: "orcamento",
    DocumentKind.ITEMS_WORKBOOK: "lista-itens",
    DocumentKind.PROPOSAL_PDF: "proposta",
    DocumentKind.SCHEDULE_PDF: "cronograma",
    DocumentKind.PROPOSAL_WORD: "proposta",
}


class GroupBy(str, Enum):
    """Grouping key for item collections."""
    CATEGORY = "category"
    ROOM = "room"


class ImageSection(str, Enum):
    """Named image collections of a client presentation, in deck order."""
    PHOTOS_BEFORE = "photos_before"
    MOODBOARD = "moodboard"
    REFERENCES = "references"
    FLOOR_PLAN = "floor_plan"
    RENDERS = "renders"


class ServiceType(str, Enum):
    """Studio service packages with a fixed delivery schedule."""
    DECOREXPRESS = "decorexpress"
    PROJETEXPRESS = "projetexpress"
    PRODUZEXPRESS = "produzexpress"
    CONSULTEXPRESS = "consultexpress"


class Modality(str, Enum):
    ONLINE = "online"
    PRESENCIAL = "presencial"


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

class Dimensions(BaseModel):
    """Physical size in centimetres."""
    width: Optional[float] = Field(default=None, ge=0)
    height: Optional[float] = Field(default=None, ge=0)
    depth: Optional[float] = Field(default=None, ge=0)


class ItemBase(BaseModel):
    """Fields shared by every item variant.

    ``line_total`` is deliberately absent: it is derived from
    ``unit_price`` and ``quantity`` by :func:`studiodocs.core.defaults.line_total_of`.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    number: int = Field(ge=1)
    name: str = Field(min_length=1)
    category: Category = Category.OUTROS
    room: Optional[str] = None
    unit_price: Optional[float] = Field(default=None, ge=0)
    quantity: Optional[float] = Field(default=None, ge=0)
    supplier: Optional[str] = None
    link: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> Any:
        if isinstance(value, Category):
            return value
        if value is None or value == "":
            return Category.OUTROS
        try:
            return Category(value)
        except ValueError:
            logger.debug("Unknown category %r mapped to 'outros'", value)
            return Category.OUTROS


class BudgetItem(ItemBase):
    """A priced line of a budget."""
    kind: Literal["budget"] = "budget"
    unit: Optional[str] = None
    notes: Optional[str] = None


class ShoppingItem(ItemBase):
    """An entry of a client shopping list."""
    kind: Literal["shopping"] = "shopping"
    unit: Optional[str] = None
    drawing_url: Optional[str] = None


class TechnicalItem(ItemBase):
    """A piece detailed for execution: size, material, finish."""
    kind: Literal["technical"] = "technical"
    dimensions: Optional[Dimensions] = None
    material: Optional[str] = None
    finish: Optional[str] = None
    notes: Optional[str] = None
    drawing_url: Optional[str] = None


DocumentItem = Annotated[
    Union[BudgetItem, ShoppingItem, TechnicalItem],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class ClientInfo(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    project_type: Optional[str] = None
    room: Optional[str] = None


class DocumentRequest(BaseModel):
    """Fields common to every request.

    ``client`` may be given as a bare name string.
    """

    client: ClientInfo
    project_name: Optional[str] = None
    logo_url: Optional[str] = None
    theme: Optional[str] = None

    @field_validator("client", mode="before")
    @classmethod
    def _client_from_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"name": value}
        return value

    def image_references(self) -> list[str]:
        """Every remote image this request wants embedded."""
        return [self.logo_url] if self.logo_url else []


def _check_unique_numbers(items: list[ItemBase]) -> None:
    seen: set[int] = set()
    for item in items:
        if item.number in seen:
            raise ValueError(f"duplicate item number {item.number}")
        seen.add(item.number)


class SectionImage(BaseModel):
    url: str
    display_order: int = 0
    width: Optional[int] = None
    height: Optional[int] = None


class SectionImages(BaseModel):
    section: ImageSection
    images: list[SectionImage] = Field(default_factory=list)

    def ordered(self) -> list[SectionImage]:
        return sorted(self.images, key=lambda img: img.display_order)


class PresentationRequest(DocumentRequest):
    """Client presentation deck: photo, moodboard and render sections."""
    sections: list[SectionImages] = Field(default_factory=list)
    include_photos_before: bool = True
    include_moodboard: bool = True
    include_references: bool = True
    include_floor_plan: bool = True
    include_renders: bool = True

    def images_for(self, section: ImageSection) -> list[SectionImage]:
        """Images of *section* sorted by display order (all blocks merged)."""
        found = [img for block in self.sections if block.section == section for img in block.images]
        return sorted(found, key=lambda img: img.display_order)

    def is_included(self, section: ImageSection) -> bool:
        return {
            ImageSection.PHOTOS_BEFORE: self.include_photos_before,
            ImageSection.MOODBOARD: self.include_moodboard,
            ImageSection.REFERENCES: self.include_references,
            ImageSection.FLOOR_PLAN: self.include_floor_plan,
            ImageSection.RENDERS: self.include_renders,
        }[section]

    def image_references(self) -> list[str]:
        refs = super().image_references()
        for section in ImageSection:
            if self.is_included(section):
                refs.extend(img.url for img in self.images_for(section))
        return refs


class ShoppingListRequest(DocumentRequest):
    items: list[ShoppingItem] = Field(default_factory=list)
    group_by: GroupBy = GroupBy.CATEGORY
    include_images: bool = True
    include_prices: bool = False

    @model_validator(mode="after")
    def _unique_numbers(self) -> "ShoppingListRequest":
        _check_unique_numbers(self.items)
        return self

    def image_references(self) -> list[str]:
        refs = super().image_references()
        if self.include_images:
            refs.extend(item.image_url for item in self.items if item.image_url)
        return refs


class BudgetRequest(DocumentRequest):
    """Budget deck and budget workbook input."""
    items: list[BudgetItem] = Field(default_factory=list)
    #: Categories the budget declares; those without items still get a zero subtotal row.
    categories: list[Category] = Field(default_factory=list)
    include_suppliers: bool = True
    include_category_summary: bool = True
    include_formulas: bool = True

    @model_validator(mode="after")
    def _unique_numbers(self) -> "BudgetRequest":
        _check_unique_numbers(self.items)
        return self


class TechnicalRequest(DocumentRequest):
    items: list[TechnicalItem] = Field(default_factory=list)
    group_by_room: bool = True
    include_drawings: bool = True

    @model_validator(mode="after")
    def _unique_numbers(self) -> "TechnicalRequest":
        _check_unique_numbers(self.items)
        return self

    def image_references(self) -> list[str]:
        refs = super().image_references()
        for item in self.items:
            if item.image_url:
                refs.append(item.image_url)
            if self.include_drawings and item.drawing_url:
                refs.append(item.drawing_url)
        return refs


class ProposalLine(BaseModel):
    label: str
    value: str


class ProposalSection(BaseModel):
    title: str
    content: str = ""
    items: list[ProposalLine] = Field(default_factory=list)


class ProposalRequest(DocumentRequest):
    """Commercial proposal, rendered as PDF or Word."""
    project_type: str = ""
    service_type: str = ""
    description: Optional[str] = None
    total_value: float = Field(default=0.0, ge=0)
    payment_terms: Optional[str] = None
    issue_date: date = Field(default_factory=date.today)
    valid_until: Optional[date] = None
    sections: list[ProposalSection] = Field(default_factory=list)
    include_terms: bool = True
    include_signature: bool = True


class ScheduleRequest(DocumentRequest):
    """Delivery schedule for one service package."""
    service_type: ServiceType
    modality: Modality = Modality.ONLINE
    rooms: int = Field(default=1, ge=1, le=10)
    start_date: date


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

class GenerationResult(BaseModel):
    """Outcome of one generation call.

    ``data`` is present exactly when ``success`` is true; a failed call
    carries only ``error``.
    """

    kind: Optional[DocumentKind] = None
    success: bool = True
    data: Optional[bytes] = Field(default=None, repr=False)
    filename: Optional[str] = None
    mime_type: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _data_matches_success(self) -> "GenerationResult":
        if self.success and self.data is None:
            raise ValueError("a successful result must carry data")
        if not self.success and self.data is not None:
            raise ValueError("a failed result must not carry data")
        return self

    @classmethod
    def ok(cls, kind: DocumentKind, data: bytes, filename: str) -> "GenerationResult":
        return cls(
            kind=kind,
            success=True,
            data=data,
            filename=filename,
            mime_type=kind.output_format.mime_type,
        )

    @classmethod
    def failure(cls, kind: DocumentKind | None, error: str) -> "GenerationResult":
        return cls(kind=kind, success=False, error=error)

    def save(self, directory: str | Path) -> Path:
        """Write the buffer into *directory* under its filename."""
        if not self.success or self.data is None or not self.filename:
            raise ValueError(f"Nothing to save: {self.error or 'empty result'}")
        target = Path(directory)
        target.mkdir(parents=True, exist_ok=True)
        path = target / self.filename
        path.write_bytes(self.data)
        return path
