import re
from datetime import date
from typing import Annotated, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

from storefront.services.exceptions import ReservationValidationError

PRODUCT_FIELD = re.compile(r"^products\[(?P<product_id>[^\]]+)\]$")

MAX_QUANTITY = 10000

Quantity = Annotated[int, Field(ge=0, le=MAX_QUANTITY)]


class ReservationForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    contact_number: str = Field(..., pattern=r"^[0-9]{11}$")
    email: EmailStr
    coupon: Optional[str] = Field(None, max_length=50)
    pick_up_date: date
    products: Dict[int, Quantity]

    @field_validator("coupon", mode="before")
    @classmethod
    def blank_coupon_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("email")
    @classmethod
    def email_max_length(cls, value):
        if len(value) > 255:
            raise ValueError("The email may not be greater than 255 characters.")
        return value

    @field_validator("pick_up_date")
    @classmethod
    def pick_up_date_not_in_past(cls, value):
        if value < date.today():
            raise ValueError("The pick up date must be today or a later date.")
        return value


def read_form_data(form):
    """Flatten ``products[<id>]=<qty>`` form fields into a ``products`` mapping."""
    data = {}
    products = {}
    for key, value in form.items():
        match = PRODUCT_FIELD.match(key)
        if match:
            products[match.group("product_id")] = value
        else:
            data[key] = value
    if products:
        data["products"] = products
    return data


def validation_errors(exc: ValidationError):
    errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "form"
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, []).append(message)
    return errors


def parse_reservation_form(data) -> ReservationForm:
    try:
        return ReservationForm.model_validate(data)
    except ValidationError as exc:
        raise ReservationValidationError(validation_errors(exc)) from exc
