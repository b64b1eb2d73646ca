"""Shared fixtures: sample requests and an in-process image server."""

from __future__ import annotations

from datetime import date
from io import BytesIO

import httpx
import pytest
from PIL import Image

from studiodocs.core.images import ImageResolver
from studiodocs.core.models import (
    BudgetItem,
    BudgetRequest,
    ProposalRequest,
    ProposalSection,
    ShoppingItem,
    ShoppingListRequest,
    TechnicalItem,
    TechnicalRequest,
)

IMAGE_HOST = "https://img.test"


def _png(width: int = 40, height: int = 20, color=(30, 58, 95)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return _png()


@pytest.fixture
def image_transport(png_bytes):
    """Serves ``/ok*`` as PNG, ``/missing*`` as 404, ``/broken*`` as non-image bytes.

    ``/down*`` raises a connection error.
    """
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        requested.append(path)
        if path.startswith("/ok"):
            return httpx.Response(200, content=png_bytes, headers={"content-type": "image/png"})
        if path.startswith("/missing"):
            return httpx.Response(404)
        if path.startswith("/broken"):
            return httpx.Response(200, content=b"<html>not an image</html>")
        raise httpx.ConnectError("connection refused", request=request)

    transport = httpx.MockTransport(handler)
    transport.requested = requested
    return transport


@pytest.fixture
def resolver(image_transport):
    client = httpx.Client(transport=image_transport)
    yield ImageResolver(client=client, max_workers=4)
    client.close()


@pytest.fixture
def budget_items() -> list[BudgetItem]:
    return [
        BudgetItem(number=1, name="Sofá 3 lugares", category="mobiliario", room="Sala",
                   unit_price=4000, quantity=1, supplier="Tok&Stok"),
        BudgetItem(number=2, name="Poltrona", category="mobiliario", room="Sala",
                   unit_price=2000, quantity=2),
        BudgetItem(number=3, name="Pendente", category="iluminacao", room="Cozinha",
                   unit_price=500, quantity=4),
        BudgetItem(number=4, name="Instalação elétrica", category="eletrica"),
    ]


@pytest.fixture
def budget_request(budget_items) -> BudgetRequest:
    return BudgetRequest(
        client="Ana Souza",
        project_name="Apartamento Jardins",
        items=budget_items,
        categories=["mobiliario", "iluminacao", "eletrica", "cortinas"],
    )


@pytest.fixture
def shopping_request() -> ShoppingListRequest:
    items = [
        ShoppingItem(number=i, name=f"Item {i}", category="decoracao" if i % 2 else "mobiliario",
                     room="Sala" if i < 4 else None, unit_price=100.0 * i, quantity=1,
                     image_url=f"{IMAGE_HOST}/ok/{i}.png")
        for i in range(1, 7)
    ]
    return ShoppingListRequest(client="Ana Souza", items=items)


@pytest.fixture
def technical_request() -> TechnicalRequest:
    return TechnicalRequest(
        client={"name": "Bruno Lima", "address": "Rua das Flores, 10"},
        items=[
            TechnicalItem(number=1, name="Armário cozinha", category="marcenaria", room="Cozinha",
                          dimensions={"width": 240, "height": 90, "depth": 60},
                          material="MDF", finish="Laca branca",
                          image_url=f"{IMAGE_HOST}/ok/armario.png",
                          drawing_url=f"{IMAGE_HOST}/missing/armario.dwg.png"),
            TechnicalItem(number=2, name="Bancada", category="marmoraria", room="Cozinha",
                          dimensions={"width": 180.5}, material="Quartzo"),
            TechnicalItem(number=3, name="Painel TV", category="marcenaria", notes="Cabos embutidos"),
        ],
    )


@pytest.fixture
def proposal_request() -> ProposalRequest:
    return ProposalRequest(
        client={"name": "Carla Dias", "email": "carla@example.com", "phone": "(11) 99999-0000"},
        project_type="Residencial",
        service_type="DecorExpress",
        description="Projeto de decoração da sala e cozinha integradas.",
        total_value=12500.0,
        payment_terms="50% na assinatura e 50% na entrega.",
        issue_date=date(2026, 10, 17),
        sections=[
            ProposalSection(title="Escopo", content="Projeto 3D da sala.",
                            items=[{"label": "Ambientes", "value": "2"}]),
        ],
    )
