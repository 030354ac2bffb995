"""
cepquery: query Banxico's CEP service for SPEI transfer receipts and turn its
HTML, XML and JSON answers into structured Python data.
"""

from .banks import BankDirectory
from .client import CEPQueryService
from .config import CEPSettings
from .exceptions import (
    CEPError,
    CriterionTooLongError,
    HttpRequestFailedError,
    InvalidAmountError,
    InvalidBankCodeError,
    InvalidBankListFormatError,
    InvalidClabeError,
    InvalidCriterionTypeError,
    InvalidDateFormatError,
    InvalidFormatError,
    InvalidFormFlagError,
    MissingFieldError,
    ValidationError,
    XmlParseError,
)
from .models import (
    Bank,
    DownloadFormat,
    LookupCriteria,
    NotFound,
    PaymentDetails,
    Table,
    TableRow,
    TextMessage,
)
from .parser import HtmlResultParser, XmlPaymentParser
from .sanitizer import LogSanitizer
from .validator import Validator

__all__ = [
    "CEPQueryService",
    "CEPSettings",
    "Validator",
    "LogSanitizer",
    "HtmlResultParser",
    "XmlPaymentParser",
    "BankDirectory",
    "LookupCriteria",
    "NotFound",
    "TextMessage",
    "Table",
    "TableRow",
    "Bank",
    "PaymentDetails",
    "DownloadFormat",
    "CEPError",
    "ValidationError",
    "MissingFieldError",
    "InvalidCriterionTypeError",
    "CriterionTooLongError",
    "InvalidDateFormatError",
    "InvalidClabeError",
    "InvalidAmountError",
    "InvalidBankCodeError",
    "InvalidFormatError",
    "InvalidFormFlagError",
    "HttpRequestFailedError",
    "InvalidBankListFormatError",
    "XmlParseError",
]
