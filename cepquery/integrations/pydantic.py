from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, model_serializer

from cepquery.models import (
    Bank,
    NotFound,
    PaymentDetails,
    Table,
    TextMessage,
)


class PydanticOperation(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: Optional[str] = None
    time: Optional[str] = None
    spei_key: Optional[str] = None
    tracking_key: Optional[str] = None
    certificate_number: Optional[str] = None


class _PydanticRecord(BaseModel):
    """Party record that dumps as an empty object when none of its fields is set."""

    model_config = ConfigDict(from_attributes=True)

    @model_serializer(mode="wrap")
    def serialize_record(self, handler):
        data = handler(self)
        if all(value is None for value in data.values()):
            return {}
        return data


class PydanticBeneficiary(_PydanticRecord):
    bank: Optional[str] = None
    name: Optional[str] = None
    account_type: Optional[str] = None
    account: Optional[str] = None
    rfc: Optional[str] = None
    curp: Optional[str] = None
    concept: Optional[str] = None
    iva: Optional[str] = None
    amount: Optional[str] = None


class PydanticSender(_PydanticRecord):
    bank: Optional[str] = None
    name: Optional[str] = None
    account_type: Optional[str] = None
    account: Optional[str] = None
    rfc: Optional[str] = None
    curp: Optional[str] = None


class PydanticPaymentDetails(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    operation: PydanticOperation
    beneficiary: PydanticBeneficiary
    sender: PydanticSender


class PydanticBank(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    name: str


class PydanticTableRow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    value: str


class PydanticNotFound(BaseModel):
    """Dumps as null, like NotFound.to_dict()."""

    @model_serializer
    def serialize_as_null(self) -> None:
        return None


class PydanticTextMessage(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: Literal["text"] = "text"
    content: str


class PydanticTable(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: Literal["table"] = "table"
    summary: Optional[str] = None
    headers: List[str]
    rows: List[PydanticTableRow]


PydanticQueryResult = Union[PydanticNotFound, PydanticTextMessage, PydanticTable]


def from_dataclass(
    obj: Union[PaymentDetails, Bank, NotFound, TextMessage, Table],
) -> BaseModel:
    """
    Converts a core cepquery dataclass into its Pydantic equivalent.
    """
    if isinstance(obj, PaymentDetails):
        return PydanticPaymentDetails.model_validate(obj)
    if isinstance(obj, Bank):
        return PydanticBank.model_validate(obj)
    if isinstance(obj, Table):
        return PydanticTable.model_validate(obj)
    if isinstance(obj, TextMessage):
        return PydanticTextMessage.model_validate(obj)
    if isinstance(obj, NotFound):
        return PydanticNotFound()

    raise TypeError(f"Unsupported model: {type(obj).__name__}")
