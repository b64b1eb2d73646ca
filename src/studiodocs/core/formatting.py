"""Locale formatting (pt-BR) and deterministic filenames."""

from __future__ import annotations

import re
import unicodedata
from datetime import date

_MONTHS = [
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
]

# Monday first, matching date.weekday()
WEEKDAYS = ["SEGUNDA", "TERÇA", "QUARTA", "QUINTA", "SEXTA", "SÁBADO", "DOMINGO"]

_SLUG_DROP_RE = re.compile(r"[^a-z0-9\s_-]")
_SLUG_SEP_RE = re.compile(r"[\s_-]+")


def format_currency(value: float) -> str:
    """Brazilian Real: ``1234.5`` → ``R$ 1.234,50``."""
    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.2f}"
    # 1,234.50 -> 1.234,50
    text = text.replace(",", "\x00").replace(".", ",").replace("\x00", ".")
    return f"{sign}R$ {text}"


def format_percent(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}".replace(".", ",") + "%"


def format_date(d: date) -> str:
    return d.strftime("%d/%m/%Y")


def format_day_month(d: date) -> str:
    return d.strftime("%d/%m")


def format_date_long(d: date) -> str:
    """``17 de outubro de 2026``."""
    return f"{d.day} de {_MONTHS[d.month - 1]} de {d.year}"


def weekday_label(d: date) -> str:
    return WEEKDAYS[d.weekday()]


def truncate_text(text: str, limit: int) -> str:
    """Cut *text* to *limit* characters, ending with ``...`` when cut."""
    if len(text) <= limit:
        return text
    return text[: max(limit - 3, 0)] + "..."


def slugify(name: str) -> str:
    """ASCII, lower-case, single ``-`` separators.

    ``"João & Maria  Santos"`` → ``"joao-maria-santos"``.
    """
    ascii_name = (
        unicodedata.normalize("NFKD", name)
        .encode("ascii", "ignore")
        .decode("ascii")
        .lower()
    )
    ascii_name = _SLUG_DROP_RE.sub("", ascii_name)
    slug = _SLUG_SEP_RE.sub("-", ascii_name).strip("-")
    return slug or "documento"


def document_filename(prefix: str, client_name: str, extension: str) -> str:
    """``<prefix>-<slug>.<extension>``."""
    return f"{prefix}-{slugify(client_name)}.{extension}"
