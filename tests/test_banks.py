import pytest

from cepquery.banks import BankDirectory
from cepquery.exceptions import InvalidBankListFormatError
from cepquery.models import Bank

MOCK_INSTITUCIONES = """{
    "instituciones": [
        ["40002", "BANAMEX"],
        ["40012", "BBVA BANCOMER"],
        ["40014", "SANTANDER"],
        ["40072", "BANORTE"],
        [90646, "STP"]
    ],
    "overrideCaptcha": false
}"""


def test_parse_keeps_server_order():
    banks = BankDirectory.parse(MOCK_INSTITUCIONES)

    assert [b.code for b in banks] == ["40002", "40012", "40014", "40072", "90646"]
    assert banks[1] == Bank(code="40012", name="BBVA BANCOMER")
    assert banks[1].to_dict() == {"code": "40012", "name": "BBVA BANCOMER"}


def test_parse_accepts_bytes():
    banks = BankDirectory.parse(MOCK_INSTITUCIONES.encode("utf-8"))
    assert len(banks) == 5


def test_parse_empty_list():
    assert BankDirectory.parse('{"instituciones": []}') == []


@pytest.mark.parametrize("raw", [
    "",
    "<html>Servicio no disponible</html>",
    "[]",
    '{"bancos": []}',
    '{"instituciones": "40012"}',
    '{"instituciones": [["40012"]]}',
    '{"instituciones": ["40012"]}',
])
def test_parse_invalid_formats(raw):
    with pytest.raises(InvalidBankListFormatError) as exc:
        BankDirectory.parse(raw)
    assert "Invalid instituciones format" in str(exc.value)


def test_find_by_name_is_case_insensitive_substring():
    banks = [Bank(code="40012", name="BBVA BANCOMER")]
    assert BankDirectory.find_by_name(banks, "bbva") == Bank(code="40012", name="BBVA BANCOMER")
    assert BankDirectory.find_by_name(banks, "  Bancomer ").code == "40012"


def test_find_by_name_first_match_wins():
    banks = BankDirectory.parse(MOCK_INSTITUCIONES)
    # "BAN" appears in BANAMEX, BBVA BANCOMER and BANORTE
    assert BankDirectory.find_by_name(banks, "ban").code == "40002"


def test_find_by_name_no_match():
    banks = BankDirectory.parse(MOCK_INSTITUCIONES)
    assert BankDirectory.find_by_name(banks, "HSBC") is None
    assert BankDirectory.find_by_name([], "bbva") is None
