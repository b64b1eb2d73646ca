"""studiodocs: document generation for interior design studios.

Turns budgets, shopping lists, technical detailing, proposals and
delivery schedules into slide decks, workbooks, PDFs and Word files.

Usage::

    from studiodocs import DocumentEngine, DocumentKind

    result = DocumentEngine().render(DocumentKind.BUDGET_WORKBOOK, request)
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import EngineConfig
from .core.models import DocumentKind, GenerationResult, OutputFormat
from .engine import DocumentEngine

__all__ = [
    "DocumentEngine",
    "DocumentKind",
    "EngineConfig",
    "GenerationResult",
    "OutputFormat",
    "__version__",
]
