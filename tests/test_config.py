import pydantic
import pytest

from cepquery.config import CEPSettings


def test_defaults():
    settings = CEPSettings()
    assert settings.base_url == "https://www.banxico.org.mx"
    assert settings.timeout == 60.0
    assert settings.timezone == "America/Mexico_City"
    assert settings.verify_ssl is True


def test_from_env_reads_url_and_millisecond_timeout():
    settings = CEPSettings.from_env({
        "BANXICO_CEP_URL": "https://cep.example.test/cep/",
        "BANXICO_CEP_TIMEOUT": "30000",
    })
    assert settings.base_url == "https://cep.example.test"
    assert settings.timeout == 30.0


def test_from_env_without_variables_uses_defaults():
    assert CEPSettings.from_env({}) == CEPSettings()


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("BANXICO_CEP_TIMEOUT", "1500")
    monkeypatch.delenv("BANXICO_CEP_URL", raising=False)
    assert CEPSettings.from_env().timeout == 1.5


def test_timeout_must_be_positive():
    with pytest.raises(pydantic.ValidationError):
        CEPSettings(timeout=0)
