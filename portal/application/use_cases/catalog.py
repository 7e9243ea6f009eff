"""Catalog use case: list services and price a selection."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from portal.application.dtos.project import Quote
from portal.domain.catalog import SERVICE_CATALOG, CatalogItem
from portal.domain.exceptions import ValidationException
from portal.domain.lifecycle import DEFAULT_DEPOSIT_RATE, deposit_amount


class CatalogService:
    """Fixed service catalog with server-side pricing."""

    def __init__(
        self,
        entries: Iterable[CatalogItem] = SERVICE_CATALOG,
        deposit_rate: float = DEFAULT_DEPOSIT_RATE,
        currency: str = "TND",
    ) -> None:
        self._entries = {entry.id: entry for entry in entries}
        self.deposit_rate = deposit_rate
        self.currency = currency

    def list_services(self) -> list[CatalogItem]:
        return list(self._entries.values())

    def quote(self, service_ids: Iterable[str]) -> Quote:
        """Price the selected services (duplicates count once, order kept).

        Raises:
            ValidationException: Empty selection or unknown service id.
        """
        selected: list[str] = []
        for service_id in service_ids:
            if service_id not in selected:
                selected.append(service_id)
        if not selected:
            raise ValidationException("Select at least one service", field="service_ids")
        unknown = [s for s in selected if s not in self._entries]
        if unknown:
            raise ValidationException(
                f"Unknown service: {', '.join(unknown)}", field="service_ids"
            )
        lines = tuple(self._entries[s].to_line() for s in selected)
        total = sum((line.price for line in lines), Decimal("0"))
        return Quote(
            lines=lines,
            total=total,
            deposit=deposit_amount(total, self.deposit_rate),
            currency=self.currency,
        )
