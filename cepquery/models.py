from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union


@dataclass
class LookupCriteria:
    """
    Search criteria submitted to the CEP lookup form.

    Attributes:
        date (str):
            Operation date, ``dd-mm-yyyy`` once validated (``dd/mm/yyyy`` is accepted on input).
        criterion_type (str):
            ``T`` for a tracking key (clave de rastreo) or ``R`` for a numeric reference.
        criterion (str):
            The tracking key or reference itself.
        sender_bank_code (str):
            Numeric institution code of the issuing bank (emisor).
        receiver_bank_code (str):
            Numeric institution code of the receiving bank (receptor).
        beneficiary_account (str):
            Beneficiary CLABE, debit card or phone number.
        amount (str):
            Transferred amount, commas allowed as thousands separators.
        receiver_participant (int):
            ``receptorParticipante`` flag sent with downloads.
        query_type (Optional[int]):
            ``tipoConsulta`` override for downloads, which send 1 when None.
    """

    date: str = ""
    criterion_type: str = ""
    criterion: str = ""
    sender_bank_code: str = ""
    receiver_bank_code: str = ""
    beneficiary_account: str = ""
    amount: str = ""
    receiver_participant: int = 0
    query_type: Optional[int] = None

    # Python attribute -> CEP form field
    FORM_FIELDS = {
        "date": "fecha",
        "criterion_type": "tipoCriterio",
        "criterion": "criterio",
        "sender_bank_code": "emisor",
        "receiver_bank_code": "receptor",
        "beneficiary_account": "cuenta",
        "amount": "monto",
    }

    @staticmethod
    def _form_int(form_name: str, value: Any) -> int:
        from cepquery.exceptions import InvalidFormFlagError

        try:
            return int(value)
        except (TypeError, ValueError):
            raise InvalidFormFlagError(form_name, value) from None

    @classmethod
    def from_form(cls, data: Mapping[str, Any]) -> "LookupCriteria":
        """
        Builds criteria from a mapping keyed by either the CEP form names
        (``fecha``, ``criterio``...) or the attribute names.
        """
        kwargs: Dict[str, Any] = {}
        for attr, form_name in cls.FORM_FIELDS.items():
            value = data.get(form_name, data.get(attr))
            kwargs[attr] = "" if value is None else str(value)

        participant = data.get("receptorParticipante", data.get("receiver_participant"))
        if participant is not None:
            kwargs["receiver_participant"] = cls._form_int("receptorParticipante", participant)

        query_type = data.get("tipoConsulta", data.get("query_type"))
        if query_type is not None:
            kwargs["query_type"] = cls._form_int("tipoConsulta", query_type)

        return cls(**kwargs)

    def to_form(self, download: bool = False) -> Dict[str, Any]:
        """
        Returns the form payload expected by ``/cep/valida.do`` or, with
        ``download=True``, by ``/cep/descarga.do``.

        Lookups always send 0 for both flags; only downloads honour
        ``receiver_participant`` and ``query_type``.
        """
        participant, query_type = 0, 0
        if download:
            participant = self.receiver_participant
            query_type = self.query_type if self.query_type is not None else 1

        return {
            "captcha": "",
            "criterio": self.criterion,
            "cuenta": self.beneficiary_account,
            "emisor": self.sender_bank_code,
            "fecha": self.date,
            "monto": self.amount,
            "receptor": self.receiver_bank_code,
            "receptorParticipante": participant,
            "tipoConsulta": query_type,
            "tipoCriterio": self.criterion_type,
        }


@dataclass
class NotFound:
    """The CEP service returned no usable content."""

    def to_dict(self) -> None:
        return None


@dataclass
class TextMessage:
    """
    Non tabular reply from the CEP page, e.g. "operation not found".
    """

    content: str

    def to_dict(self) -> dict:
        return {"type": "text", "content": self.content}


@dataclass
class TableRow:
    label: str
    value: str


@dataclass
class Table:
    """
    Label/value table extracted from a successful lookup.

    Attributes:
        summary (Optional[str]):
            Banner text shown above the table, if any.
        headers (List[str]):
            Always ``["label", "value"]``.
        rows (List[TableRow]):
            Never empty; a table without rows is reported as a TextMessage instead.
    """

    rows: List[TableRow]
    summary: Optional[str] = None
    headers: List[str] = field(default_factory=lambda: ["label", "value"])

    def to_dict(self) -> dict:
        return {
            "type": "table",
            "summary": self.summary,
            "headers": list(self.headers),
            "rows": [asdict(row) for row in self.rows],
        }


QueryResult = Union[NotFound, TextMessage, Table]


@dataclass
class Bank:
    """
    Institution listed by the CEP ``instituciones.do`` endpoint.
    """

    code: str
    name: str

    def to_dict(self) -> dict:
        return asdict(self)


class _Record:
    """Mixin for detail records that render absent fields as an empty dict."""

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> dict:
        if self.is_empty():
            return {}
        return asdict(self)


@dataclass
class OperationInfo(_Record):
    """
    Attributes read from the root element of a CEP receipt.
    """

    date: Optional[str] = None
    time: Optional[str] = None
    spei_key: Optional[str] = None
    tracking_key: Optional[str] = None
    certificate_number: Optional[str] = None


@dataclass
class BeneficiaryInfo(_Record):
    bank: Optional[str] = None
    name: Optional[str] = None
    account_type: Optional[str] = None
    account: Optional[str] = None
    rfc: Optional[str] = None
    curp: Optional[str] = None
    concept: Optional[str] = None
    iva: Optional[str] = None
    amount: Optional[str] = None


@dataclass
class SenderInfo(_Record):
    bank: Optional[str] = None
    name: Optional[str] = None
    account_type: Optional[str] = None
    account: Optional[str] = None
    rfc: Optional[str] = None
    curp: Optional[str] = None


@dataclass
class PaymentDetails:
    """
    Structured representation of a CEP XML payment receipt.

    Attributes:
        operation (OperationInfo):
            Date, time, SPEI key, tracking key and certificate number of the transfer.
        beneficiary (BeneficiaryInfo):
            Receiving party. All fields are None when the receipt has no Beneficiario element.
        sender (SenderInfo):
            Ordering party. All fields are None when the receipt has no Ordenante element.
    """

    operation: OperationInfo = field(default_factory=OperationInfo)
    beneficiary: BeneficiaryInfo = field(default_factory=BeneficiaryInfo)
    sender: SenderInfo = field(default_factory=SenderInfo)

    def to_dict(self) -> dict:
        return {
            "operation": asdict(self.operation),
            "beneficiary": self.beneficiary.to_dict(),
            "sender": self.sender.to_dict(),
        }


class DownloadFormat(str, Enum):
    XML = "XML"
    PDF = "PDF"
    ZIP = "ZIP"

    @classmethod
    def parse(cls, value: Union[str, "DownloadFormat"]) -> "DownloadFormat":
        """
        Resolves a case-insensitive format name, raising InvalidFormatError otherwise.
        """
        from cepquery.exceptions import InvalidFormatError

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidFormatError(value) from None
