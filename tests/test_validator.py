from datetime import date, datetime

import pytest

from cepquery.exceptions import (
    CriterionTooLongError,
    InvalidAmountError,
    InvalidBankCodeError,
    InvalidClabeError,
    InvalidCriterionTypeError,
    InvalidDateFormatError,
    InvalidFormFlagError,
    MissingFieldError,
    ValidationError,
)
from cepquery.models import LookupCriteria
from cepquery.validator import Validator


def make_criteria(**overrides) -> LookupCriteria:
    values = dict(
        date="15-01-2024",
        criterion_type="T",
        criterion="1234567890",
        sender_bank_code="40012",
        receiver_bank_code="40002",
        beneficiary_account="012345678901234567",
        amount="1500.00",
    )
    values.update(overrides)
    return LookupCriteria(**values)


def test_valid_criteria_pass_unchanged():
    criteria = make_criteria()
    result = Validator.validate(criteria)

    assert result is criteria
    assert result == make_criteria()


def test_slash_date_is_rewritten_in_place():
    criteria = make_criteria(date="05/11/2023")
    Validator.validate(criteria)
    assert criteria.date == "05-11-2023"


def test_no_calendar_check_on_dates():
    # Day/month ranges are not checked, only the shape
    criteria = make_criteria(date="31-02-2024")
    assert Validator.validate(criteria).date == "31-02-2024"


@pytest.mark.parametrize("bad_date", ["2024-01-15", "15.01.2024", "1-1-2024", "15-01-24", "15/01-2024"])
def test_invalid_date_formats(bad_date):
    with pytest.raises(InvalidDateFormatError) as exc:
        Validator.validate(make_criteria(date=bad_date))
    assert exc.value.field == "fecha"


@pytest.mark.parametrize("attr,form_name", list(LookupCriteria.FORM_FIELDS.items()))
def test_missing_fields(attr, form_name):
    with pytest.raises(MissingFieldError) as exc:
        Validator.validate(make_criteria(**{attr: ""}))
    assert exc.value.field == form_name
    assert form_name in str(exc.value)


def test_missing_field_reported_before_other_errors():
    # Bad criterion type and a missing amount: the missing field wins
    with pytest.raises(MissingFieldError):
        Validator.validate(make_criteria(criterion_type="X", amount=""))


def test_invalid_criterion_type():
    with pytest.raises(InvalidCriterionTypeError):
        Validator.validate(make_criteria(criterion_type="t"))


@pytest.mark.parametrize("length", [8, 9, 30])
def test_reference_longer_than_seven_rejected(length):
    with pytest.raises(CriterionTooLongError) as exc:
        Validator.validate(make_criteria(criterion_type="R", criterion="1" * length))
    assert exc.value.max_length == 7
    assert "Reference number" in str(exc.value)


def test_reference_of_seven_accepted():
    Validator.validate(make_criteria(criterion_type="R", criterion="1234567"))


@pytest.mark.parametrize("length", [31, 40])
def test_tracking_key_longer_than_thirty_rejected(length):
    with pytest.raises(CriterionTooLongError) as exc:
        Validator.validate(make_criteria(criterion_type="T", criterion="A" * length))
    assert "Tracking key" in str(exc.value)


def test_tracking_key_of_thirty_accepted():
    Validator.validate(make_criteria(criterion_type="T", criterion="A" * 30))


@pytest.mark.parametrize("account", ["01234567890123456X", "0123 5678901234567", "ABCDEFGHIJKLMNOPQR"])
def test_eighteen_char_account_must_be_digits(account):
    assert len(account) == 18
    with pytest.raises(InvalidClabeError):
        Validator.validate(make_criteria(beneficiary_account=account))


@pytest.mark.parametrize("account", ["4152313412345678", "5512345678", "ABC", "01234567890123456789X"])
def test_other_account_lengths_are_not_checked(account):
    # Card and phone numbers go through untouched
    Validator.validate(make_criteria(beneficiary_account=account))


@pytest.mark.parametrize("amount", ["1,500.00", "1500", "0.5", ".5", "1,000,000"])
def test_valid_amounts(amount):
    criteria = Validator.validate(make_criteria(amount=amount))
    assert criteria.amount == amount  # commas are only ignored for the check


@pytest.mark.parametrize("amount", ["abc", "1.500.00", "$100", "1 500"])
def test_invalid_amounts(amount):
    with pytest.raises(InvalidAmountError):
        Validator.validate(make_criteria(amount=amount))


@pytest.mark.parametrize("field", ["sender_bank_code", "receiver_bank_code"])
def test_non_numeric_bank_codes(field):
    with pytest.raises(InvalidBankCodeError) as exc:
        Validator.validate(make_criteria(**{field: "BBVA"}))
    assert exc.value.field in ("emisor", "receptor")


def test_all_errors_share_validation_base():
    with pytest.raises(ValidationError):
        Validator.validate(make_criteria(amount="nope"))


def test_from_form_accepts_cep_field_names():
    criteria = LookupCriteria.from_form({
        "fecha": "15/01/2024",
        "tipoCriterio": "R",
        "criterio": "1234567",
        "emisor": 40012,
        "receptor": "40002",
        "cuenta": "5512345678",
        "monto": "99.90",
    })
    Validator.validate(criteria)

    assert criteria.date == "15-01-2024"
    assert criteria.sender_bank_code == "40012"
    assert criteria.to_form()["tipoConsulta"] == 0
    assert criteria.to_form(download=True)["tipoConsulta"] == 1


def test_format_date_variants():
    assert Validator.format_date(date(2024, 1, 15)) == "15-01-2024"
    assert Validator.format_date(datetime(2023, 12, 31, 23, 59)) == "31-12-2023"
    assert Validator.format_date("2024-03-07") == "07-03-2024"
    assert Validator.format_date("07/03/2024") == "07-03-2024"
    assert Validator.format_date("07-03-2024") == "07-03-2024"
    assert Validator.format_date("next tuesday") == "next tuesday"


@pytest.mark.parametrize("day", [date(2020, 2, 29), date(1999, 12, 31), date(2024, 1, 1)])
def test_formatted_dates_always_validate(day):
    criteria = make_criteria(date=Validator.format_date(day))
    assert Validator.validate(criteria).date == day.strftime("%d-%m-%Y")


@pytest.mark.parametrize("bad_date", ["１５-01-2024", "١٥/٠١/٢٠٢٤", "15-01-２０２４"])
def test_non_ascii_digits_in_date_rejected(bad_date):
    with pytest.raises(InvalidDateFormatError):
        Validator.validate(make_criteria(date=bad_date))


@pytest.mark.parametrize("field", ["sender_bank_code", "receiver_bank_code"])
@pytest.mark.parametrize("code", ["٤٠٠١٢", "４００１２"])
def test_non_ascii_digits_in_bank_codes_rejected(field, code):
    with pytest.raises(InvalidBankCodeError):
        Validator.validate(make_criteria(**{field: code}))


@pytest.mark.parametrize("amount", ["１５００.００", "١٥٠٠"])
def test_non_ascii_digits_in_amount_rejected(amount):
    with pytest.raises(InvalidAmountError):
        Validator.validate(make_criteria(amount=amount))


def test_non_ascii_digits_in_clabe_rejected():
    account = "０１２３４５６７８９０１２３４５６７"
    assert len(account) == 18
    with pytest.raises(InvalidClabeError):
        Validator.validate(make_criteria(beneficiary_account=account))


@pytest.mark.parametrize("form_name", ["receptorParticipante", "tipoConsulta"])
def test_from_form_rejects_non_integer_flags(form_name):
    with pytest.raises(InvalidFormFlagError) as exc:
        LookupCriteria.from_form({"fecha": "15-01-2024", form_name: "uno"})

    assert isinstance(exc.value, ValidationError)
    assert exc.value.field == form_name
