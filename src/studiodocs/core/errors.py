"""Exception types raised inside the generation engine.

Callers of :class:`studiodocs.engine.DocumentEngine` never see these:
the engine converts them into a failed ``GenerationResult``.
"""

from __future__ import annotations


class StudioDocsError(Exception):
    """Base class for all engine errors."""


class InputError(StudioDocsError):
    """The request is missing data a document cannot be built without."""
