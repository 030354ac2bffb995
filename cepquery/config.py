import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/142.0.0.0 Safari/537.36"
)


class CEPSettings(BaseModel):
    """
    Connection settings for the Banxico CEP site.

    ``timeout`` is in seconds and is handed to the HTTP client untouched.
    """

    base_url: str = "https://www.banxico.org.mx"
    timeout: float = Field(default=60.0, gt=0)
    timezone: str = "America/Mexico_City"
    verify_ssl: bool = True
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CEPSettings":
        """
        Reads ``BANXICO_CEP_URL`` and ``BANXICO_CEP_TIMEOUT`` (milliseconds).
        """
        env = os.environ if environ is None else environ
        values = {}

        url = env.get("BANXICO_CEP_URL")
        if url:
            url = url.rstrip("/")
            if url.endswith("/cep"):
                url = url[: -len("/cep")]
            values["base_url"] = url

        timeout_ms = env.get("BANXICO_CEP_TIMEOUT")
        if timeout_ms:
            values["timeout"] = float(timeout_ms) / 1000

        return cls(**values)
