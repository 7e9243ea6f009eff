"""Service catalog API. Public: the brief form prices selections before sign-in."""

from typing import Annotated

from fastapi import APIRouter, Depends

from portal.api.v1.dependencies import get_catalog_service
from portal.application.use_cases.catalog import CatalogService
from portal.schemas.catalog import CatalogItemResponse, QuoteRequest, QuoteResponse

router = APIRouter()

CatalogSvc = Annotated[CatalogService, Depends(get_catalog_service)]


@router.get("/services", response_model=list[CatalogItemResponse])
def list_services(catalog: CatalogSvc):
    return [CatalogItemResponse.model_validate(item) for item in catalog.list_services()]


@router.post("/quote", response_model=QuoteResponse)
def quote(body: QuoteRequest, catalog: CatalogSvc):
    """Total and deposit for the selected services."""
    return QuoteResponse.model_validate(catalog.quote(body.service_ids))
