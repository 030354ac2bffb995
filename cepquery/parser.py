import re
from typing import Any, List, Optional, Union

from lxml import etree
from lxml import html as lxml_html

from cepquery.exceptions import XmlParseError
from cepquery.models import (
    BeneficiaryInfo,
    NotFound,
    OperationInfo,
    PaymentDetails,
    QueryResult,
    SenderInfo,
    Table,
    TableRow,
    TextMessage,
)

_TAG_PATTERN = re.compile(r"<[^>]*>")
_XML_DECLARATION_PATTERN = re.compile(r"\A\s*<\?xml\s[^>]*\?>")


def _to_text(data: Union[str, bytes]) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def strip_tags(markup: str) -> str:
    """Removes every ``<...>`` tag and trims the remaining text."""
    return _TAG_PATTERN.sub("", markup).strip()


class HtmlResultParser:
    """
    Turns the HTML fragment returned by ``/cep/valida.do`` into a QueryResult.

    The CEP page is not a stable contract, so parsing walks a chain of
    fallbacks (result table -> container text -> body text -> stripped markup)
    and never raises.
    """

    CONTAINER_XPATH = "//div[@id='consultaMISPEI']"

    # Tried in order; the first query returning a table wins
    TABLE_XPATHS = (
        CONTAINER_XPATH + "//table[@id='xxx' or contains(@class,'styled-table')]",
        CONTAINER_XPATH + "//table",
        "//table",
    )

    TEXT_XPATHS = (
        CONTAINER_XPATH,
        "//div[@class='cuerpo-msg']",
        "//body",
    )

    SUMMARY_XPATH = "string(" + CONTAINER_XPATH + "//div[contains(@class,'info')]/center/strong)"

    def __init__(self, html_data: Union[str, bytes]):
        self.raw = _to_text(html_data).strip()
        self.tree = None

        if self.raw:
            try:
                parser = lxml_html.HTMLParser(encoding="utf-8", recover=True)
                self.tree = lxml_html.document_fromstring(self.raw.encode("utf-8"), parser=parser)
            except (etree.LxmlError, ValueError):
                self.tree = None

    def _find_table(self) -> Optional[Any]:
        for xpath_expr in self.TABLE_XPATHS:
            found = self.tree.xpath(xpath_expr)
            if found:
                return found[0]
        return None

    def _extract_text(self) -> TextMessage:
        for xpath_expr in self.TEXT_XPATHS:
            nodes = self.tree.xpath(xpath_expr)
            if nodes:
                text = nodes[0].text_content().strip()
                if text:
                    return TextMessage(content=text)
        return TextMessage(content=strip_tags(self.raw))

    @staticmethod
    def _cell_text(cell: Any) -> str:
        return (cell.text_content() or "").strip()

    def _extract_rows(self, table: Any) -> List[TableRow]:
        row_nodes = table.xpath(".//tbody//tr")
        if not row_nodes:
            row_nodes = table.xpath(".//tr")

        rows = []
        for row_node in row_nodes:
            cells = row_node.xpath(".//td|.//th")
            if len(cells) < 2:
                continue

            label = self._cell_text(cells[0])
            value = self._cell_text(cells[1])
            if label == "" and value == "":
                continue

            rows.append(TableRow(label=label, value=value))
        return rows

    def parse(self) -> QueryResult:
        if not self.raw:
            return NotFound()

        if self.tree is None:
            content = strip_tags(self.raw)
            return TextMessage(content=content) if content else NotFound()

        table = self._find_table()
        if table is None:
            return self._extract_text()

        rows = self._extract_rows(table)
        if not rows:
            return self._extract_text()

        summary = self.tree.xpath(self.SUMMARY_XPATH).strip()
        return Table(rows=rows, summary=summary or None)


class XmlPaymentParser:
    """
    Extracts payment details from a CEP XML receipt.

    Receipt data lives in attributes, not element text: operation data on the
    root element, beneficiary data on ``Beneficiario`` and sender data on
    ``Ordenante``. A missing attribute is reported as None, never as an error.
    """

    def __init__(self, xml_data: Union[str, bytes]):
        if isinstance(xml_data, str):
            # Already decoded: a declared encoding no longer describes these bytes
            xml_data = _XML_DECLARATION_PATTERN.sub("", xml_data).encode("utf-8")
        self.xml_data = xml_data.strip()

    def _load(self) -> Any:
        if not self.xml_data:
            raise XmlParseError("Document is empty")

        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            return etree.fromstring(self.xml_data, parser=parser)
        except etree.XMLSyntaxError as e:
            raise XmlParseError(str(e)) from e

    @staticmethod
    def _child(root: Any, name: str) -> Optional[Any]:
        found = root.xpath(f"./*[local-name()='{name}']")
        return found[0] if found else None

    @staticmethod
    def _stripped(element: Any, attribute: str) -> Optional[str]:
        value = element.get(attribute)
        return value.strip() if value is not None else None

    def parse(self) -> PaymentDetails:
        """
        Raises:
            XmlParseError: the document is empty or not well-formed.
        """
        root = self._load()

        operation = OperationInfo(
            date=root.get("FechaOperacion"),
            time=root.get("Hora"),
            spei_key=root.get("ClaveSPEI"),
            tracking_key=root.get("claveRastreo"),
            certificate_number=root.get("numeroCertificado"),
        )

        beneficiary = BeneficiaryInfo()
        node = self._child(root, "Beneficiario")
        if node is not None:
            beneficiary = BeneficiaryInfo(
                bank=self._stripped(node, "BancoReceptor"),
                name=node.get("Nombre"),
                account_type=node.get("TipoCuenta"),
                account=node.get("Cuenta"),
                rfc=node.get("RFC"),
                curp=node.get("CURP"),
                concept=node.get("Concepto"),
                iva=node.get("IVA"),
                amount=node.get("MontoPago"),
            )

        sender = SenderInfo()
        node = self._child(root, "Ordenante")
        if node is not None:
            sender = SenderInfo(
                bank=self._stripped(node, "BancoEmisor"),
                name=node.get("Nombre"),
                account_type=node.get("TipoCuenta"),
                account=node.get("Cuenta"),
                rfc=node.get("RFC"),
                curp=node.get("CURP"),
            )

        return PaymentDetails(operation=operation, beneficiary=beneficiary, sender=sender)
