import re
from datetime import date, datetime
from typing import Union

from cepquery.exceptions import (
    CriterionTooLongError,
    InvalidAmountError,
    InvalidBankCodeError,
    InvalidClabeError,
    InvalidCriterionTypeError,
    InvalidDateFormatError,
    MissingFieldError,
)
from cepquery.models import LookupCriteria


class Validator:
    """
    Pre-submission checks for CEP lookup criteria.

    Rules run in a fixed order and the first failure is raised, so nothing
    reaches the network unless the whole form is acceptable.
    """

    _slash_date_pattern = re.compile(r"\A\d{2}/\d{2}/\d{4}\Z", re.ASCII)
    _dash_date_pattern = re.compile(r"\A\d{2}-\d{2}-\d{4}\Z", re.ASCII)
    _iso_date_pattern = re.compile(r"\A(\d{4})-(\d{2})-(\d{2})\Z", re.ASCII)
    _clabe_pattern = re.compile(r"\A\d{18}\Z", re.ASCII)
    # Same shape PHP's is_numeric accepts: optional sign, digits and/or decimals, exponent
    _numeric_pattern = re.compile(r"\A\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*\Z", re.ASCII)

    MAX_CRITERION_LENGTH = {"R": 7, "T": 30}
    CLABE_LENGTH = 18

    @staticmethod
    def _is_numeric(value: str) -> bool:
        return bool(Validator._numeric_pattern.match(value))

    @staticmethod
    def _validate_required(criteria: LookupCriteria) -> None:
        for attr, form_name in LookupCriteria.FORM_FIELDS.items():
            value = getattr(criteria, attr)
            if value is None or value == "":
                raise MissingFieldError(form_name)

    @staticmethod
    def _validate_criterion(criteria: LookupCriteria) -> None:
        if criteria.criterion_type not in Validator.MAX_CRITERION_LENGTH:
            raise InvalidCriterionTypeError(criteria.criterion_type)

        max_length = Validator.MAX_CRITERION_LENGTH[criteria.criterion_type]
        if len(criteria.criterion) > max_length:
            raise CriterionTooLongError(criteria.criterion_type, max_length, criteria.criterion)

    @staticmethod
    def _normalize_date(criteria: LookupCriteria) -> None:
        # No calendar check: 31-02-2024 is accepted, the CEP site decides.
        if Validator._slash_date_pattern.match(criteria.date):
            criteria.date = criteria.date.replace("/", "-")
        elif not Validator._dash_date_pattern.match(criteria.date):
            raise InvalidDateFormatError(criteria.date)

    @staticmethod
    def _validate_account(account: str) -> None:
        """
        Only 18 character values are treated as a CLABE. Debit card and phone
        number identifiers of other lengths are forwarded untouched.
        """
        if len(account) == Validator.CLABE_LENGTH and not Validator._clabe_pattern.match(account):
            raise InvalidClabeError(account)

    @staticmethod
    def validate(criteria: LookupCriteria) -> LookupCriteria:
        """
        Validates ``criteria`` and rewrites its date to the dashed ``dd-mm-yyyy`` form.

        The same instance is mutated and returned.

        Raises:
            ValidationError: the specific subclass for the first rule that failed.
        """
        Validator._validate_required(criteria)
        Validator._validate_criterion(criteria)
        Validator._normalize_date(criteria)
        Validator._validate_account(criteria.beneficiary_account)

        if not Validator._is_numeric(criteria.amount.replace(",", "")):
            raise InvalidAmountError(criteria.amount)

        for attr in ("sender_bank_code", "receiver_bank_code"):
            value = getattr(criteria, attr)
            if not Validator._is_numeric(value):
                raise InvalidBankCodeError(LookupCriteria.FORM_FIELDS[attr], value)

        return criteria

    @staticmethod
    def format_date(value: Union[str, date, datetime]) -> str:
        """
        Formats a date for the CEP form (``dd-mm-yyyy``).

        ``date``/``datetime`` objects and ``yyyy-mm-dd`` strings are converted,
        ``dd/mm/yyyy`` strings get dashes, anything else is returned as given.
        """
        if isinstance(value, (date, datetime)):
            return value.strftime("%d-%m-%Y")

        iso_match = Validator._iso_date_pattern.match(value)
        if iso_match:
            try:
                return datetime.strptime(value, "%Y-%m-%d").strftime("%d-%m-%Y")
            except ValueError:
                return value

        if Validator._slash_date_pattern.match(value):
            return value.replace("/", "-")

        return value
