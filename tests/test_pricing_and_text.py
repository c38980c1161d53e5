import unittest
from datetime import date

from app.utils.pricing import estimate_price
from app.utils.text_format import build_receipt, format_date, format_inr, html_to_text, split_list


class EstimatePriceTests(unittest.TestCase):
    def test_two_adults_one_child_with_insurance(self):
        estimate = estimate_price(2, 1, 0, True, 1500)
        self.assertEqual(estimate["package_price"], 3750)
        self.assertEqual(estimate["travel_insurance"], 75)
        self.assertEqual(estimate["taxes_fees"], 50)
        self.assertEqual(estimate["total_amount"], 2 * 1500 + 750 + 25 * 3 + 50)

    def test_infants_travel_free_and_are_not_insured(self):
        with_infants = estimate_price(1, 0, 3, True)
        without = estimate_price(1, 0, 0, True)
        self.assertEqual(with_infants, without)

    def test_no_insurance(self):
        estimate = estimate_price(1)
        self.assertEqual(estimate["travel_insurance"], 0)
        self.assertEqual(estimate["total_amount"], 1550)

    def test_package_price_per_adult(self):
        estimate = estimate_price(2, 2, 0, False, 15000)
        self.assertEqual(estimate["package_price"], 45000)


class FormatTests(unittest.TestCase):
    def test_inr_uses_indian_grouping(self):
        self.assertEqual(format_inr(100000), "₹1,00,000.00")
        self.assertEqual(format_inr(12345678.5), "₹1,23,45,678.50")
        self.assertEqual(format_inr(999), "₹999.00")

    def test_inr_missing_amount(self):
        self.assertEqual(format_inr(None), "N/A")
        self.assertEqual(format_inr(""), "N/A")

    def test_date(self):
        self.assertEqual(format_date("2025-03-15"), "15 March 2025")
        self.assertEqual(format_date("2025-03-15T10:30:00"), "15 March 2025")
        self.assertEqual(format_date(None), "N/A")

    def test_html_to_text(self):
        self.assertEqual(html_to_text("<p>Sun</p><p>sand</p>"), "Sun sand")
        self.assertEqual(html_to_text(None), "")

    def test_split_list(self):
        self.assertEqual(split_list("Hotel, Breakfast ,, Transfers"), ["Hotel", "Breakfast", "Transfers"])
        self.assertEqual(split_list(None), [])


class ReceiptTests(unittest.TestCase):
    BOOKING = {
        "bookingId": 41,
        "contactFullName": "Asha Rao",
        "contactEmail": "asha@example.com",
        "contactPhone": "9876543210",
        "startDate": "2025-03-15",
        "endDate": "2025-03-20",
        "adults": 2,
        "children": 1,
        "infants": 0,
        "hasInsurance": True,
        "insurancePlan": "Medium",
        "payment": {"amount": 4774, "razorpayPaymentId": "pay_123", "status": "PAID"},
    }

    def test_receipt_sections(self):
        receipt = build_receipt(self.BOOKING, today=date(2025, 3, 1))
        lines = receipt.splitlines()

        self.assertEqual(lines[0], "AVENTRA TRAVEL - BOOKING RECEIPT")
        self.assertIn("Booking ID: 41", lines)
        self.assertIn("Date: 1 March 2025", lines)
        self.assertIn("Travelers: 2 Adults, 1 Children, 0 Infants", lines)
        self.assertIn("Amount: ₹4,774.00", lines)
        self.assertIn("Payment ID: pay_123", lines)
        self.assertIn("Insurance: Yes (Medium)", lines)
        self.assertEqual(lines[-1], "Thank you for choosing Aventra Travel!")

    def test_receipt_without_payment_or_insurance(self):
        receipt = build_receipt({"bookingId": 9}, today=date(2025, 3, 1))
        self.assertIn("Amount: N/A", receipt)
        self.assertIn("Payment ID: N/A", receipt)
        self.assertIn("Insurance: No", receipt)


if __name__ == "__main__":
    unittest.main()
