from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

CURRENCY_GBP = "gbp"


@dataclass(frozen=True)
class PaidService:
    id: str
    name: str
    description: str
    amount: int  # pence
    pretty_price: str
    currency: str = CURRENCY_GBP


@dataclass(frozen=True)
class FixedPriceOffer:
    product: str
    amount: int  # pence
    currency: str = CURRENCY_GBP


PAID_SERVICES = MappingProxyType(
    {
        "website-5": PaidService(
            id="website-5",
            name="5-page website",
            description="Home, Services, About, Contact + 1 extra page.",
            amount=40 * 100,
            pretty_price="£40",
        ),
        "website-50": PaidService(
            id="website-50",
            name="50-page website",
            description="Up to 50 pages for services, locations and blogs.",
            amount=300 * 100,
            pretty_price="£300",
        ),
        "audit": PaidService(
            id="audit",
            name="Website audit",
            description="Video review of your existing site with clear fixes to get more local enquiries.",
            amount=30 * 100,
            pretty_price="£30",
        ),
        "ads": PaidService(
            id="ads",
            name="Priority advertising (first month)",
            description="Featured at the top of relevant SaltaireGuide.uk pages with a highlighted badge.",
            amount=30 * 100,
            pretty_price="£30",
        ),
    }
)

CHRISTMAS_PACK = FixedPriceOffer(product="saltaire_christmas_pack", amount=400)
CHRISTMAS_CUSTOM_PLAN = FixedPriceOffer(product="saltaire_christmas_custom_plan", amount=4000)


def get_paid_service_by_id(service_id: object) -> PaidService | None:
    if not isinstance(service_id, str):
        return None
    return PAID_SERVICES.get(service_id)
