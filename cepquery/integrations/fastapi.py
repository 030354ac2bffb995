import json

from fastapi import HTTPException, Request

from cepquery.exceptions import ValidationError, XmlParseError
from cepquery.integrations.pydantic import PydanticPaymentDetails, from_dataclass
from cepquery.models import LookupCriteria
from cepquery.parser import XmlPaymentParser
from cepquery.validator import Validator


async def get_payment_details(request: Request) -> PydanticPaymentDetails:
    """
    FastAPI dependency that parses an uploaded CEP XML receipt
    and returns the extracted payment details.
    """
    body = await request.body()
    if not body.strip():
        raise HTTPException(status_code=400, detail="Empty payload")

    try:
        details = XmlPaymentParser(body).parse()
    except XmlParseError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "XML parsing failed", "errors": [e.details]},
        )

    return from_dataclass(details)


async def get_lookup_criteria(request: Request) -> LookupCriteria:
    """
    FastAPI dependency reading a JSON object of CEP form fields
    (``fecha``, ``tipoCriterio``, ``criterio``...) into validated criteria.
    """
    try:
        data = json.loads(await request.body())
    except ValueError:
        raise HTTPException(status_code=400, detail="Body must be a JSON object")

    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Body must be a JSON object")

    try:
        return Validator.validate(LookupCriteria.from_form(data))
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "field": e.field},
        )
