ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"
ROLE_AGENT = "TRAVEL_AGENT"
ROLES = [ROLE_USER, ROLE_ADMIN, ROLE_AGENT]

BOOKING_PENDING = "PENDING"
BOOKING_CONFIRMED = "CONFIRMED"
BOOKING_CANCELLED = "CANCELLED"
BOOKING_COMPLETED = "COMPLETED"
BOOKING_STATUSES = [BOOKING_PENDING, BOOKING_CONFIRMED, BOOKING_CANCELLED, BOOKING_COMPLETED]
CANCELLABLE_STATUSES = {BOOKING_PENDING, BOOKING_CONFIRMED}

PAYMENT_PAID_STATUSES = {"PAID", "SUCCESS", "COMPLETED", "CAPTURED"}

ASSISTANCE_PENDING = "Pending"
ASSISTANCE_RESOLVED = "Resolved"
ASSISTANCE_STATUSES = [ASSISTANCE_PENDING, ASSISTANCE_RESOLVED]

# Booking estimate
DEFAULT_ADULT_PRICE = 1500
CHILD_PRICE_RATIO = 0.5
INSURANCE_PER_TRAVELER = 25
TAXES_AND_FEES = 50

PAYMENT_METHODS = ["card", "upi", "netbanking"]
GATEWAY_PAYMENT_METHOD = "RAZORPAY"

BANKS = [
    "State Bank of India",
    "HDFC Bank",
    "ICICI Bank",
    "Axis Bank",
    "Kotak Mahindra Bank",
    "Punjab National Bank",
    "Bank of Baroda",
]

FALLBACK_INSURANCE_PLANS = [
    {
        "insuranceId": 1,
        "packageType": "Small",
        "coverageDetails": (
            "Basic coverage for personal accidents and theft "
            "(Medical expenses up to Rs 50,000, Lost luggage up to Rs 5,000)."
        ),
        "provider": "SafeGuard Insurance Co.",
        "status": "PREDEFINED_AVAILABLE",
        "price": 599,
    },
    {
        "insuranceId": 2,
        "packageType": "Medium",
        "coverageDetails": (
            "Standard coverage including accidents, theft, and fire "
            "(Medical expenses up to Rs 1,00,000, Lost luggage up to Rs 10,000, "
            "Trip cancellation up to Rs 20,000)."
        ),
        "provider": "ShieldsSecure Insurance Ltd.",
        "status": "PREDEFINED_AVAILABLE",
        "price": 899,
    },
    {
        "insuranceId": 3,
        "packageType": "Large",
        "coverageDetails": (
            "Premium coverage with full protection and roadside assistance "
            "(Medical expenses up to Rs 2,00,000, Lost luggage up to Rs 20,000, "
            "Trip cancellation up to Rs 50,000, Emergency evacuation)."
        ),
        "provider": "TitanCover Assurance Group",
        "status": "PREDEFINED_AVAILABLE",
        "price": 1000,
    },
]

# Shown when the package service cannot be reached
SAMPLE_PACKAGES = [
    {
        "packageId": 1,
        "title": "Goa Beach Escape",
        "description": "<p>Sun, sand and seafood on the beaches of North Goa.</p>",
        "destination": "Goa",
        "duration": 4,
        "price": 15000,
        "includeService": "Hotel stay, Breakfast, Airport transfers",
        "excludeService": "Flights, Personal expenses",
        "highlights": "Baga Beach, Fort Aguada, Dudhsagar Falls",
        "mainImage": "",
        "images": [],
        "active": True,
    },
    {
        "packageId": 2,
        "title": "Kerala Backwaters",
        "description": "<p>Houseboat cruise through the Alleppey backwaters.</p>",
        "destination": "Kerala",
        "duration": 5,
        "price": 22000,
        "includeService": "Houseboat, All meals, Sightseeing",
        "excludeService": "Flights, Tips",
        "highlights": "Alleppey, Munnar tea gardens, Kathakali show",
        "mainImage": "",
        "images": [],
        "active": True,
    },
    {
        "packageId": 3,
        "title": "Himalayan Retreat",
        "description": "<p>Mountain views and monasteries around Manali.</p>",
        "destination": "Manali",
        "duration": 6,
        "price": 18500,
        "includeService": "Hotel stay, Breakfast and dinner, Local transport",
        "excludeService": "Adventure activities, Personal expenses",
        "highlights": "Rohtang Pass, Solang Valley, Hadimba Temple",
        "mainImage": "",
        "images": [],
        "active": True,
    },
]

FAQS = [
    {
        "question": "How do I change my booking dates?",
        "answer": "Open My Bookings on your dashboard and pick the booking to modify. "
                  "Date changes depend on availability and may carry extra fees.",
    },
    {
        "question": "What is the cancellation policy?",
        "answer": "More than 30 days before travel: full refund. 7-30 days: 50% penalty. "
                  "Within 7 days: non-refundable. Your package terms take precedence.",
    },
    {
        "question": "I haven't received my booking confirmation.",
        "answer": "Confirmations reach your registered e-mail within minutes of payment. "
                  "Check the spam folder, then submit this issue with your booking details.",
    },
    {
        "question": "How can I add extra services to my package?",
        "answer": "Airport transfers, excursions and meal upgrades are arranged on request. "
                  "Submit this request with the services you need.",
    },
    {
        "question": "My payment failed, but the amount was deducted.",
        "answer": "Failed payments are usually reversed by your bank within 3-5 business days. "
                  "If not, submit this issue with the transaction details.",
    },
    {
        "question": "I need to update my personal information (e.g., passport details).",
        "answer": "Contact details can be edited under Profile on your dashboard. "
                  "Name corrections on confirmed bookings need an assistance request.",
    },
    {
        "question": "How do I apply a discount code or voucher?",
        "answer": "Enter the code at checkout before paying. If it is rejected, check that it is "
                  "valid for your package and submit this request.",
    },
    {
        "question": "What travel documents do I need for my trip?",
        "answer": "A valid passport is required for international travel and some destinations "
                  "need a visa. Check with the destination embassy well in advance.",
    },
    {
        "question": "Can I get an invoice or receipt for my booking?",
        "answer": "Yes. Download the receipt from the booking confirmation page once the "
                  "payment is confirmed.",
    },
]
