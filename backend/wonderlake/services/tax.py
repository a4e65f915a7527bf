"""Property tax impact estimates for annexation into the village.

All rates are per $100 of Equalized Assessed Value (EAV).
"""
from dataclasses import asdict, dataclass

VILLAGE_NAME = "Village of Wonder Lake"
VILLAGE_LEVY_RATE = 0.2847


@dataclass(frozen=True)
class TaxingBody:
    id: str
    name: str
    short_name: str
    rate: float
    description: str
    color: str


TAXING_BODIES: tuple[TaxingBody, ...] = (
    TaxingBody("elem_school", "Elementary School District", "Elem School", 3.2145,
               "Funds K-8 education including teachers, facilities, and programs", "#3b82f6"),
    TaxingBody("high_school", "High School District", "High School", 2.4872,
               "Supports high school education, athletics, and extracurricular activities", "#8b5cf6"),
    TaxingBody("community_college", "McHenry County College", "MCC", 0.4521,
               "Community college providing higher education and workforce training", "#06b6d4"),
    TaxingBody("county", "McHenry County", "County", 0.5834,
               "County services including roads, courts, health department, and sheriff", "#10b981"),
    TaxingBody("township", "Greenwood Township", "Township", 0.1892,
               "Local road maintenance, general assistance, and assessor services", "#f59e0b"),
    TaxingBody("fire", "Fire Protection District", "Fire District", 0.8234,
               "Fire protection, emergency medical services, and rescue operations", "#ef4444"),
    TaxingBody("park", "Park District", "Parks", 0.3156,
               "Parks, recreation programs, and community facilities", "#22c55e"),
    TaxingBody("library", "Library District", "Library", 0.2347,
               "Public library services, programs, and resources", "#a855f7"),
    TaxingBody("other", "Other Taxing Bodies", "Other", 0.1823,
               "Conservation, mosquito abatement, and other special districts", "#6b7280"),
)

VILLAGE_LEVY_BODY = TaxingBody(
    "village", VILLAGE_NAME, "Village", VILLAGE_LEVY_RATE,
    "Municipal services including water, roads, police, and village administration", "#0ea5e9",
)

TOTAL_NON_VILLAGE_RATE = sum(body.rate for body in TAXING_BODIES)


def levy_amount(eav: float, rate: float = VILLAGE_LEVY_RATE) -> float:
    return eav / 100 * rate


def estimate_post_annexation_tax(eav: float, current_tax: float) -> dict:
    """Current bill plus the village levy on the same EAV."""
    village_levy = levy_amount(eav)
    return {
        "current_tax": current_tax,
        "estimated_post_annexation_tax": current_tax + village_levy,
        "village_levy_amount": village_levy,
        "village_levy_rate": VILLAGE_LEVY_RATE,
        "eav": eav,
        "difference": village_levy,
        "percent_increase": (village_levy / current_tax * 100) if current_tax > 0 else 0.0,
        "monthly_increase": village_levy / 12,
    }


def tax_breakdown(eav: float, current_tax: float) -> dict:
    """Split the bill across taxing bodies before and after annexation.

    Body rates are scaled so that together they reproduce the property's
    actual effective rate when a current tax amount is known.
    """
    if current_tax > 0 and eav > 0:
        current_rate = current_tax / eav * 100
    else:
        current_rate = TOTAL_NON_VILLAGE_RATE
    multiplier = current_rate / TOTAL_NON_VILLAGE_RATE

    village_levy = levy_amount(eav)
    total_post_annexation = current_tax + village_levy

    bodies = []
    for body in TAXING_BODIES:
        adjusted_rate = body.rate * multiplier
        amount = levy_amount(eav, adjusted_rate)
        entry = asdict(body)
        entry.update(
            rate=adjusted_rate,
            amount=amount,
            percentage=(amount / total_post_annexation * 100) if total_post_annexation > 0 else 0.0,
        )
        bodies.append(entry)

    village = asdict(VILLAGE_LEVY_BODY)
    village.update(
        amount=village_levy,
        percentage=(village_levy / total_post_annexation * 100) if total_post_annexation > 0 else 0.0,
    )

    return {
        "taxing_bodies": bodies,
        "village_levy_body": village,
        "total_current_rate": current_rate,
        "total_post_annexation_rate": current_rate + VILLAGE_LEVY_RATE,
    }


def village_tax_info() -> dict:
    return {
        "village_name": VILLAGE_NAME,
        "levy_rate": VILLAGE_LEVY_RATE,
        "levy_rate_description": f"${VILLAGE_LEVY_RATE} per $100 of EAV",
        "data_source": "McHenry County Tax Extension Records",
        "last_updated": "2024",
        "mchenry_county_portal_url": "https://mchenryil.devnetwedge.com/search",
        "notes": [
            "This is the municipal portion only - does not include other taxing districts",
            "Rate based on 2024 tax levy data for properties within Village limits",
            "Your actual rate may vary based on specific location and applicable districts",
            "Look up your EAV and current taxes on the McHenry County Property Tax Inquiry portal",
        ],
    }


def taxing_bodies_info() -> dict:
    return {
        "taxing_bodies": [asdict(body) for body in TAXING_BODIES],
        "village_levy_rate": VILLAGE_LEVY_RATE,
        "total_non_village_rate": TOTAL_NON_VILLAGE_RATE,
        "data_source": "McHenry County Tax Extension Records (2024)",
        "disclaimer": (
            "Rates shown are averages for the Wonder Lake area. "
            "Your actual rates may vary based on specific taxing districts."
        ),
    }
