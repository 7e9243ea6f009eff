"""Service catalog and quote API schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CatalogItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    price: Decimal
    description: str = ""


class ServiceLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    price: Decimal


class QuoteRequest(BaseModel):
    service_ids: list[str] = Field(..., min_length=1, max_length=20)


class QuoteResponse(BaseModel):
    """Priced selection: total, deposit due up front and currency."""

    model_config = ConfigDict(from_attributes=True)

    lines: list[ServiceLineResponse]
    total: Decimal
    deposit: int
    currency: str
