import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from zoneinfo import ZoneInfo

import httpx

from cepquery.banks import BankDirectory
from cepquery.config import CEPSettings
from cepquery.exceptions import HttpRequestFailedError
from cepquery.models import Bank, DownloadFormat, LookupCriteria, PaymentDetails, QueryResult
from cepquery.parser import HtmlResultParser, XmlPaymentParser
from cepquery.sanitizer import LogSanitizer
from cepquery.validator import Validator

logger = logging.getLogger(__name__)

LogSink = Callable[[str, str, Dict[str, Any]], None]

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "error": logging.ERROR,
}

# Raw bodies are cut to this many characters before being logged
_LOG_BODY_LIMIT = 2000


class CEPQueryService:
    """
    Client for Banxico's CEP (Comprobante Electrónico de Pago) site.

    Every operation opens its own HTTP session: a warm-up ``GET /cep/`` sets the
    session cookies that the following submission needs, so the two requests
    share one cookie jar and always run in that order. Nothing is retried and
    nothing is cached between calls.

    Args:
        settings: connection settings; defaults to ``CEPSettings()``.
        logger: optional ``(level, message, context)`` callable receiving every
            log event. Sensitive fields are masked before it is called.
        transport: optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        settings: Optional[CEPSettings] = None,
        logger: Optional[LogSink] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sanitizer: Optional[LogSanitizer] = None,
    ):
        self.settings = settings or CEPSettings()
        self.log_sink = logger
        self.transport = transport
        self.sanitizer = sanitizer or LogSanitizer()

    # -- plumbing ---------------------------------------------------------

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.settings.base_url,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            follow_redirects=True,
            transport=self.transport,
            headers={
                "User-Agent": self.settings.user_agent,
                "Accept": "*/*",
                "X-Requested-With": "XMLHttpRequest",
            },
        )

    def _form_headers(self) -> Dict[str, str]:
        base = self.settings.base_url.rstrip("/")
        return {
            "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
            "Origin": base,
            "Referer": f"{base}/cep/",
            "Sec-Fetch-Site": "same-origin",
            "Sec-Fetch-Mode": "cors",
            "Sec-Fetch-Dest": "empty",
        }

    def _timeout(self, options: Optional[Mapping[str, Any]]) -> float:
        if options and options.get("timeout") is not None:
            return float(options["timeout"])
        return self.settings.timeout

    def _log(self, level: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        context = context or {}
        logger.log(_LEVELS.get(level, logging.INFO), message, extra={"context": context})
        if self.log_sink is not None:
            self.log_sink(level, message, context)

    def _warm_up(self, client: httpx.Client, timeout: float) -> None:
        response = client.get("/cep/", timeout=timeout)
        response.raise_for_status()

    @staticmethod
    def _to_criteria(criteria: Union[LookupCriteria, Mapping[str, Any]]) -> LookupCriteria:
        if isinstance(criteria, LookupCriteria):
            return criteria
        return LookupCriteria.from_form(criteria)

    # -- public API -------------------------------------------------------

    def query_payment(
        self,
        criteria: Union[LookupCriteria, Mapping[str, Any]],
        options: Optional[Mapping[str, Any]] = None,
    ) -> QueryResult:
        """
        Submits the lookup form and interprets the HTML answer.

        Raises:
            ValidationError: criteria rejected, no request was sent.
            HttpRequestFailedError: a request failed or returned an error status.
        """
        criteria = Validator.validate(self._to_criteria(criteria))
        timeout = self._timeout(options)
        payload = criteria.to_form()

        try:
            with self._client() as client:
                self._warm_up(client, timeout)

                self._log("debug", "Sending CEP request", {
                    "payload": self.sanitizer.sanitize(payload),
                })

                response = client.post(
                    "/cep/valida.do",
                    data=payload,
                    headers=self._form_headers(),
                    timeout=timeout,
                )
                response.raise_for_status()
                html = response.text
        except httpx.HTTPError as e:
            self._log("error", "CEP HTTP request failed", {
                "error": str(e),
                "formData": self.sanitizer.sanitize(payload),
            })
            raise HttpRequestFailedError("CEP HTTP request failed", str(e)) from e

        self._log("debug", "Raw CEP response (truncated)", {"html": html[:_LOG_BODY_LIMIT]})

        result = HtmlResultParser(html).parse()

        data = result.to_dict()
        self._log("info", "CEP response parsed", {
            "has_data": data is not None,
            "data_type": data["type"] if data else "null",
        })
        return result

    def download_payment_file(
        self,
        criteria: Union[LookupCriteria, Mapping[str, Any]],
        format: Union[str, DownloadFormat] = DownloadFormat.XML,
        options: Optional[Mapping[str, Any]] = None,
    ) -> bytes:
        """
        Downloads the payment receipt as XML, PDF or ZIP and returns the raw bytes.

        The CEP site expects ``/cep/descarga.do`` as a GET request that still
        carries the form-encoded payload in its body.

        Raises:
            ValidationError: criteria rejected, no request was sent.
            InvalidFormatError: ``format`` is not XML, PDF or ZIP, no request was sent.
            HttpRequestFailedError: a request failed or returned an error status.
        """
        criteria = Validator.validate(self._to_criteria(criteria))
        fmt = DownloadFormat.parse(format)
        timeout = self._timeout(options)
        payload = criteria.to_form(download=True)

        try:
            with self._client() as client:
                self._warm_up(client, timeout)

                self._log("debug", f"Downloading {fmt.value} file", {
                    "payload": self.sanitizer.sanitize(payload),
                    "format": fmt.value,
                })

                response = client.request(
                    "GET",
                    "/cep/descarga.do",
                    params={"formato": fmt.value},
                    data=payload,
                    headers=self._form_headers(),
                    timeout=timeout,
                )
                response.raise_for_status()
                content = response.content
        except httpx.HTTPError as e:
            self._log("error", "Download file request failed", {
                "error": str(e),
                "format": fmt.value,
            })
            raise HttpRequestFailedError(f"Failed to download {fmt.value} file", str(e)) from e

        self._log("info", f"{fmt.value} file downloaded successfully", {"size": len(content)})
        return content

    def get_payment_details(
        self,
        criteria: Union[LookupCriteria, Mapping[str, Any]],
        options: Optional[Mapping[str, Any]] = None,
    ) -> PaymentDetails:
        """Downloads the XML receipt and extracts operation, beneficiary and sender data."""
        xml_content = self.download_payment_file(criteria, DownloadFormat.XML, options)
        return self.parse_payment_xml(xml_content)

    def parse_payment_xml(self, xml_content: Union[str, bytes]) -> PaymentDetails:
        details = XmlPaymentParser(xml_content).parse()
        self._log("info", "XML payment details parsed successfully", {
            "tracking_key": details.operation.tracking_key or "N/A",
        })
        return details

    def get_bank_options(self) -> List[Bank]:
        """
        Fetches the institutions catalogue for yesterday (local CEP time).

        Raises:
            HttpRequestFailedError: the request failed or returned an error status.
            InvalidBankListFormatError: the body is not the expected JSON document.
        """
        yesterday = datetime.now(ZoneInfo(self.settings.timezone)) - timedelta(days=1)

        try:
            with self._client() as client:
                response = client.get(
                    "/cep/instituciones.do",
                    params={"fecha": Validator.format_date(yesterday)},
                    headers={
                        "Accept": "application/json, text/javascript, */*; q=0.01",
                        "User-Agent": "Mozilla/5.0",
                    },
                )
                response.raise_for_status()
                raw = response.text
        except httpx.HTTPError as e:
            self._log("error", "Failed to get bank options", {"error": str(e)})
            raise HttpRequestFailedError("Failed to get bank options", str(e)) from e

        self._log("debug", "Bank options raw page (truncated)", {"json": raw[:_LOG_BODY_LIMIT]})
        return BankDirectory.parse(raw)

    def get_bank_code_by_name(self, bank_name: str) -> Optional[str]:
        """Returns the code of the first bank whose name contains ``bank_name``, ignoring case."""
        bank = BankDirectory.find_by_name(self.get_bank_options(), bank_name)
        return bank.code if bank else None
