from app.core.constants import (
    CHILD_PRICE_RATIO,
    DEFAULT_ADULT_PRICE,
    INSURANCE_PER_TRAVELER,
    TAXES_AND_FEES,
)


def estimate_price(
    adults: int,
    children: int = 0,
    infants: int = 0,
    has_insurance: bool = False,
    price_per_adult: float = DEFAULT_ADULT_PRICE,
):
    """
    Estimate shown on the booking form.

    Children pay half the adult price and infants travel free. Insurance is
    charged per adult and child. The backend computes the amount actually
    charged.
    """
    adults = max(int(adults or 0), 0)
    children = max(int(children or 0), 0)

    package_price = adults * price_per_adult + children * price_per_adult * CHILD_PRICE_RATIO
    travel_insurance = INSURANCE_PER_TRAVELER * (adults + children) if has_insurance else 0

    return {
        "package_price": package_price,
        "travel_insurance": travel_insurance,
        "taxes_fees": TAXES_AND_FEES,
        "total_amount": package_price + travel_insurance + TAXES_AND_FEES,
    }
