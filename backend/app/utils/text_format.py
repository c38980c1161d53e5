from datetime import date, datetime
from typing import Optional

from bs4 import BeautifulSoup


def html_to_text(html: Optional[str]) -> str:
    # Package descriptions are authored as HTML by agents
    if not html:
        return ""
    return BeautifulSoup(html, "html.parser").get_text(separator=" ").strip()


def split_list(value) -> list:
    """Backend stores includes / excludes / highlights as comma separated text."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


def format_inr(amount) -> str:
    if amount is None or amount == "":
        return "N/A"

    value = float(amount)
    sign = "-" if value < 0 else ""
    rupees, paise = f"{abs(value):.2f}".split(".")

    # 12,34,567 grouping
    head, tail = rupees[:-3], rupees[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join(groups + [tail]) if groups else tail

    return f"{sign}₹{grouped}.{paise}"


def format_date(value) -> str:
    if not value:
        return "N/A"
    if isinstance(value, (date, datetime)):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value)[:10])
        except ValueError:
            return str(value)
    return f"{parsed.day} {parsed.strftime('%B %Y')}"


def build_receipt(booking: dict, today: Optional[date] = None) -> str:
    today = today or date.today()
    payment = booking.get("payment") or {}

    insurance = "No"
    if booking.get("hasInsurance"):
        insurance = f"Yes ({booking.get('insurancePlan') or 'Selected'})"

    lines = [
        "AVENTRA TRAVEL - BOOKING RECEIPT",
        "",
        f"Booking ID: {booking.get('bookingId')}",
        f"Date: {format_date(today)}",
        "",
        "Customer Details:",
        f"Name: {booking.get('contactFullName') or 'N/A'}",
        f"Email: {booking.get('contactEmail') or 'N/A'}",
        f"Phone: {booking.get('contactPhone') or 'N/A'}",
        "",
        "Travel Details:",
        f"Start Date: {format_date(booking.get('startDate'))}",
        f"End Date: {format_date(booking.get('endDate'))}",
        "Travelers: {} Adults, {} Children, {} Infants".format(
            booking.get("adults") or 0,
            booking.get("children") or 0,
            booking.get("infants") or 0,
        ),
        "",
        "Payment Details:",
        f"Amount: {format_inr(payment.get('amount')) if payment else 'N/A'}",
        f"Payment ID: {payment.get('razorpayPaymentId') or 'N/A'}",
        f"Status: {payment.get('status') or 'N/A'}",
        "",
        f"Insurance: {insurance}",
        "",
        "Thank you for choosing Aventra Travel!",
    ]
    return "\n".join(lines) + "\n"
