"""Service catalog offered in the project builder."""

from dataclasses import dataclass
from decimal import Decimal

from portal.domain.entities.project import ServiceLine


@dataclass(frozen=True)
class CatalogItem:
    """A purchasable service with its fixed price."""

    id: str
    title: str
    price: Decimal
    description: str = ""

    def to_line(self) -> ServiceLine:
        return ServiceLine(id=self.id, title=self.title, price=self.price)


SERVICE_CATALOG: tuple[CatalogItem, ...] = (
    CatalogItem(
        id="logo",
        title="Logo Design",
        price=Decimal("1500"),
        description="Primary logo with variations for light and dark backgrounds.",
    ),
    CatalogItem(
        id="identity",
        title="Brand Identity",
        price=Decimal("3500"),
        description="Logo, palette, typography and a short brand guide.",
    ),
    CatalogItem(
        id="social",
        title="Social Media Kit",
        price=Decimal("2000"),
        description="Profile assets and post templates for social channels.",
    ),
)
