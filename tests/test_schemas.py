import unittest

from pydantic import ValidationError

from app.schemas.assistance import AssistanceRequestForm, ISSUE_REQUIRED_MESSAGE, USER_AND_ISSUE_REQUIRED_MESSAGE
from app.schemas.booking import TERMS_MESSAGE, TRAVELER_NAMES_MESSAGE, BookingForm, is_submittable
from app.schemas.common import validation_errors
from app.schemas.payment import CardDetails, NetBankingDetails, UpiDetails
from app.schemas.review import REVIEW_REQUIRED_MESSAGE, ReviewForm
from app.schemas.user import (
    ALL_FIELDS_REQUIRED_MESSAGE,
    CONTACT_MESSAGE,
    PASSWORD_COMPLEXITY_MESSAGE,
    PASSWORD_LENGTH_MESSAGE,
    PASSWORD_MISMATCH_MESSAGE,
    UserForm,
    validate_registration,
)


def registration(**overrides):
    data = {
        "name": "Asha Rao",
        "email": "asha@example.com",
        "password": "Travel@2025",
        "confirm_password": "Travel@2025",
        "contact_number": "9876543210",
    }
    data.update(overrides)
    return data


class RegistrationTests(unittest.TestCase):
    def test_valid_registration(self):
        form, errors = validate_registration(registration())
        self.assertEqual(errors, {})
        self.assertEqual(form.email, "asha@example.com")

    def test_weak_password_and_mismatch_are_both_reported(self):
        form, errors = validate_registration(registration(password="password1", confirm_password="password2"))
        self.assertIsNone(form)
        self.assertEqual(errors["password"], PASSWORD_COMPLEXITY_MESSAGE)
        self.assertEqual(errors["confirm_password"], PASSWORD_MISMATCH_MESSAGE)

    def test_short_password(self):
        _, errors = validate_registration(registration(password="Ab1@", confirm_password="Ab1@"))
        self.assertEqual(errors["password"], PASSWORD_LENGTH_MESSAGE)
        self.assertNotIn("confirm_password", errors)

    def test_contact_number_rules(self):
        _, errors = validate_registration(registration(contact_number="0123456789"))
        self.assertEqual(errors["contact_number"], CONTACT_MESSAGE)
        _, errors = validate_registration(registration(contact_number="98765"))
        self.assertEqual(errors["contact_number"], CONTACT_MESSAGE)

    def test_missing_fields(self):
        _, errors = validate_registration(registration(name=""))
        self.assertEqual(errors["form"], ALL_FIELDS_REQUIRED_MESSAGE)


class UserFormTests(unittest.TestCase):
    def test_payload_omits_blank_password(self):
        form = UserForm(name="Ravi", email="ravi@example.com", contact_number="9876543210", role="TRAVEL_AGENT")
        payload = form.to_payload()
        self.assertEqual(payload["userRole"], "TRAVEL_AGENT")
        self.assertNotIn("userPassword", payload)

    def test_unknown_role(self):
        with self.assertRaises(ValidationError) as ctx:
            UserForm(name="Ravi", email="ravi@example.com", contact_number="9876543210", role="ROOT")
        self.assertIn("role", validation_errors(ctx.exception))


def booking_data(**overrides):
    data = {
        "start_date": "2025-03-15",
        "end_date": "2025-03-20",
        "adults": 2,
        "children": 1,
        "infants": 1,
        "traveler_names": ["Asha", "Ravi", "Meera"],
        "full_name": "Asha Rao",
        "email": "asha@example.com",
        "phone": "9876543210",
        "has_insurance": False,
        "accept_terms": True,
    }
    data.update(overrides)
    return data


class BookingFormTests(unittest.TestCase):
    def test_submittable(self):
        self.assertTrue(is_submittable(booking_data()))

    def test_not_submittable_without_terms(self):
        self.assertFalse(is_submittable(booking_data(accept_terms=False)))

    def test_not_submittable_without_adults(self):
        self.assertFalse(is_submittable(booking_data(adults=0, children=0, traveler_names=[])))

    def test_not_submittable_with_blank_traveler_name(self):
        self.assertFalse(is_submittable(booking_data(traveler_names=["Asha", "", "Meera"])))
        self.assertFalse(is_submittable(booking_data(traveler_names=["Asha", "Ravi"])))

    def test_not_submittable_without_contact(self):
        self.assertFalse(is_submittable(booking_data(phone="  ")))

    def test_infants_need_no_name(self):
        form = BookingForm(**booking_data(infants=2))
        self.assertEqual(form.traveler_names, ["Asha", "Ravi", "Meera"])

    def test_validation_messages(self):
        with self.assertRaises(ValidationError) as ctx:
            BookingForm(**booking_data(accept_terms=False, traveler_names=["Asha"]))
        errors = validation_errors(ctx.exception)
        self.assertEqual(errors["accept_terms"], TERMS_MESSAGE)
        self.assertEqual(errors["traveler_names"], TRAVELER_NAMES_MESSAGE)

    def test_end_date_before_start(self):
        with self.assertRaises(ValidationError) as ctx:
            BookingForm(**booking_data(end_date="2025-03-10"))
        self.assertIn("end_date", validation_errors(ctx.exception))


class PaymentDetailTests(unittest.TestCase):
    def test_card_errors(self):
        with self.assertRaises(ValidationError) as ctx:
            CardDetails(card_number="1234", cvv="1")
        errors = validation_errors(ctx.exception)
        self.assertEqual(errors["card_number"], "Please enter a valid 16-digit card number")
        self.assertEqual(errors["expiry_month"], "Please enter expiry date")
        self.assertEqual(errors["cvv"], "Please enter a valid CVV")
        self.assertEqual(errors["cardholder_name"], "Please enter cardholder name")

    def test_card_number_spaces_are_ignored(self):
        card = CardDetails(
            card_number="4111 1111 1111 1111",
            expiry_month="12",
            expiry_year="29",
            cvv="123",
            cardholder_name="Asha Rao",
        )
        self.assertEqual(card.card_number, "4111111111111111")

    def test_upi(self):
        with self.assertRaises(ValidationError) as ctx:
            UpiDetails(upi_id="asha")
        self.assertEqual(validation_errors(ctx.exception)["upi_id"], "Please enter a valid UPI ID (e.g., name@bank)")
        self.assertEqual(UpiDetails(upi_id="asha@okbank").upi_id, "asha@okbank")

    def test_net_banking(self):
        with self.assertRaises(ValidationError) as ctx:
            NetBankingDetails(account_number="123", ifsc_code="SBIN")
        errors = validation_errors(ctx.exception)
        self.assertEqual(errors["bank_name"], "Please select a bank")
        self.assertEqual(errors["account_number"], "Please enter a valid account number")
        self.assertEqual(errors["ifsc_code"], "Please enter a valid 11-character IFSC code")


class AssistanceAndReviewFormTests(unittest.TestCase):
    def test_issue_required(self):
        with self.assertRaises(ValidationError) as ctx:
            AssistanceRequestForm(user_id=7, issue_description="   ")
        self.assertEqual(validation_errors(ctx.exception)["issue_description"], ISSUE_REQUIRED_MESSAGE)

    def test_user_required(self):
        with self.assertRaises(ValidationError) as ctx:
            AssistanceRequestForm(issue_description="Refund please")
        self.assertEqual(validation_errors(ctx.exception)["user_id"], USER_AND_ISSUE_REQUIRED_MESSAGE)

    def test_review_needs_rating_and_comment(self):
        with self.assertRaises(ValidationError) as ctx:
            ReviewForm(package_id=1, rating=0, comment="")
        errors = validation_errors(ctx.exception)
        self.assertEqual(errors["rating"], REVIEW_REQUIRED_MESSAGE)
        self.assertEqual(errors["comment"], REVIEW_REQUIRED_MESSAGE)


if __name__ == "__main__":
    unittest.main()
