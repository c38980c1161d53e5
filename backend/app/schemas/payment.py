from pydantic import BaseModel, ConfigDict, field_validator

from app.schemas.common import field_error, required_text


class CardDetails(BaseModel):
    model_config = ConfigDict(validate_default=True)

    card_number: str = ""
    expiry_month: str = ""
    expiry_year: str = ""
    cvv: str = ""
    cardholder_name: str = ""

    @field_validator("card_number")
    @classmethod
    def valid_card_number(cls, value):
        digits = (value or "").replace(" ", "")
        if len(digits) < 16 or not digits.isdigit():
            raise field_error("Please enter a valid 16-digit card number")
        return digits

    @field_validator("expiry_month", "expiry_year")
    @classmethod
    def expiry_required(cls, value):
        return required_text(value, "Please enter expiry date")

    @field_validator("cvv")
    @classmethod
    def valid_cvv(cls, value):
        if len((value or "").strip()) < 3:
            raise field_error("Please enter a valid CVV")
        return value.strip()

    @field_validator("cardholder_name")
    @classmethod
    def cardholder_required(cls, value):
        return required_text(value, "Please enter cardholder name")


class UpiDetails(BaseModel):
    model_config = ConfigDict(validate_default=True)

    upi_id: str = ""

    @field_validator("upi_id")
    @classmethod
    def valid_upi(cls, value):
        value = (value or "").strip()
        if "@" not in value:
            raise field_error("Please enter a valid UPI ID (e.g., name@bank)")
        return value


class NetBankingDetails(BaseModel):
    model_config = ConfigDict(validate_default=True)

    bank_name: str = ""
    account_number: str = ""
    ifsc_code: str = ""

    @field_validator("bank_name")
    @classmethod
    def bank_required(cls, value):
        return required_text(value, "Please select a bank")

    @field_validator("account_number")
    @classmethod
    def valid_account(cls, value):
        value = (value or "").strip()
        if len(value) < 10:
            raise field_error("Please enter a valid account number")
        return value

    @field_validator("ifsc_code")
    @classmethod
    def valid_ifsc(cls, value):
        value = (value or "").strip()
        if len(value) != 11:
            raise field_error("Please enter a valid 11-character IFSC code")
        return value.upper()


PAYMENT_DETAIL_FORMS = {
    "card": CardDetails,
    "upi": UpiDetails,
    "netbanking": NetBankingDetails,
}
