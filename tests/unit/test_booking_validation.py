import pytest

from intellipark.api.schemas.parking import CreateInvoiceRequest
from intellipark.application.validation import (
    is_valid_email,
    is_valid_plate,
    is_valid_slot,
    validate_booking_request,
)
from intellipark.domain.errors import MissingFieldError, TariffMismatchError, ValidationError
from intellipark.domain.value_objects.tariff import Tariff

TARIFF = Tariff()


def _request(**overrides):
    fields = {
        "slot": "05",
        "name": "Ana Reyes",
        "email": "ana@example.com",
        "plate": "NBC451",
        "vehicle": "SUV",
        "amount": 50,
        "time": "09:00",
    }
    fields.update(overrides)
    return CreateInvoiceRequest(**fields)


def test_valid_website_request_passes():
    validate_booking_request(_request(), TARIFF)


def test_presence_is_checked_first():
    with pytest.raises(MissingFieldError) as exc:
        validate_booking_request(_request(email="", plate="bad"), TARIFF)
    assert exc.value.message == "Missing email parameter"


def test_zero_amount_counts_as_missing():
    with pytest.raises(MissingFieldError) as exc:
        validate_booking_request(_request(amount=0), TARIFF)
    assert exc.value.field == "amount"


def test_website_requires_time_before_name():
    with pytest.raises(MissingFieldError) as exc:
        validate_booking_request(_request(time=None, name=None), TARIFF)
    assert exc.value.field == "time"


def test_walk_in_skips_name_and_time():
    validate_booking_request(_request(type="walk-in", name=None, time=None), TARIFF)


def test_tariff_error_carries_expected_amount():
    with pytest.raises(TariffMismatchError) as exc:
        validate_booking_request(_request(vehicle="Motorcycle", amount=50), TARIFF)
    assert exc.value.expected_amount == 30
    assert exc.value.status_code == 400


def test_email_checked_before_plate():
    with pytest.raises(ValidationError) as exc:
        validate_booking_request(_request(email="ana@", plate="123ABC"), TARIFF)
    assert exc.value.field == "email"


@pytest.mark.parametrize(
    "email, expected",
    [
        ("ana@example.com", True),
        ("a.b+c@sub.example.ph", True),
        ("ana@example", False),
        ("ana example@x.com", False),
        ("ana@example.com\n", False),
    ],
)
def test_email_shape(email, expected):
    assert is_valid_email(email) is expected


@pytest.mark.parametrize(
    "plate, expected",
    [
        ("ABC123", True),
        ("abc123", True),
        ("AB1234", False),
        ("ABC1234", False),
        ("ABC123\n", False),
    ],
)
def test_plate_shape(plate, expected):
    assert is_valid_plate(plate) is expected


@pytest.mark.parametrize(
    "slot, expected",
    [
        ("01", True),
        ("A-12", True),
        ("lot_b3", True),
        ("reservations", False),
        ("RESERVATIONS", False),
        ("walk-in-bookings", False),
        ("reservations/01", False),
        ("01/", False),
        ("..", False),
    ],
)
def test_slot_shape(slot, expected):
    assert is_valid_slot(slot) is expected


def test_slot_checked_before_tariff():
    with pytest.raises(ValidationError) as exc:
        validate_booking_request(_request(slot="tickets/T1", amount=999), TARIFF)
    assert exc.value.field == "slot"
