import json
from typing import List, Optional, Sequence, Union

from cepquery.exceptions import InvalidBankListFormatError
from cepquery.models import Bank


class BankDirectory:
    """
    Reads the institution catalogue served by ``/cep/instituciones.do``.

    The endpoint answers ``{"instituciones": [["40012", "BBVA MEXICO"], ...]}``.
    """

    @staticmethod
    def parse(raw: Union[str, bytes]) -> List[Bank]:
        """
        Converts the raw JSON body into Bank records, keeping server order.

        Raises:
            InvalidBankListFormatError: body is not JSON, or ``instituciones`` is
            absent or contains something other than ``[code, name]`` pairs.
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise InvalidBankListFormatError(str(e)) from e

        if not isinstance(data, dict) or not isinstance(data.get("instituciones"), list):
            raise InvalidBankListFormatError("missing 'instituciones' array")

        banks = []
        for i, item in enumerate(data["instituciones"]):
            if not isinstance(item, (list, tuple)) or len(item) < 2:
                raise InvalidBankListFormatError(f"entry {i} is not a [code, name] pair")
            banks.append(Bank(code=str(item[0]), name=str(item[1])))
        return banks

    @staticmethod
    def find_by_name(banks: Sequence[Bank], query: str) -> Optional[Bank]:
        """
        Case-insensitive substring search; the first bank in list order wins.
        """
        needle = query.strip().lower()
        for bank in banks:
            if needle in bank.name.lower():
                return bank
        return None
