import argparse
import json
import logging
import sys

from cepquery.client import CEPQueryService
from cepquery.config import CEPSettings
from cepquery.exceptions import CEPError
from cepquery.integrations.pydantic import from_dataclass
from cepquery.models import LookupCriteria
from cepquery.parser import HtmlResultParser, XmlPaymentParser


def _criteria_from_args(args) -> LookupCriteria:
    return LookupCriteria(
        date=args.date,
        criterion_type=args.type,
        criterion=args.criterion,
        sender_bank_code=args.sender,
        receiver_bank_code=args.receiver,
        beneficiary_account=args.account,
        amount=args.amount,
    )


def _service(args) -> CEPQueryService:
    settings = CEPSettings.from_env()
    if args.timeout is not None:
        settings = settings.model_copy(update={"timeout": args.timeout})
    return CEPQueryService(settings=settings)


def _read(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def handle_query(args):
    """Handles the 'query' subcommand: looks up a transfer and prints the result."""
    result = _service(args).query_payment(_criteria_from_args(args))
    print(from_dataclass(result).model_dump_json(indent=2))


def handle_download(args):
    """Handles the 'download' subcommand: saves the receipt in the requested format."""
    content = _service(args).download_payment_file(_criteria_from_args(args), args.format)
    with open(args.output, "wb") as f:
        f.write(content)
    print(f"✅ Saved {len(content)} bytes to {args.output}")


def handle_details(args):
    details = _service(args).get_payment_details(_criteria_from_args(args))
    print(from_dataclass(details).model_dump_json(indent=2))


def handle_banks(args):
    banks = _service(args).get_bank_options()
    print(json.dumps([bank.to_dict() for bank in banks], indent=2, ensure_ascii=False))


def handle_bank_code(args):
    code = _service(args).get_bank_code_by_name(args.name)
    if code is None:
        print(f"No bank matches '{args.name}'", file=sys.stderr)
        sys.exit(1)
    print(code)


def handle_parse_xml(args):
    """Handles the 'parse-xml' subcommand: parses a saved XML receipt offline."""
    details = XmlPaymentParser(_read(args.file)).parse()
    print(from_dataclass(details).model_dump_json(indent=2))


def handle_parse_html(args):
    """Handles the 'parse-html' subcommand: parses a saved lookup response offline."""
    result = HtmlResultParser(_read(args.file)).parse()
    print(from_dataclass(result).model_dump_json(indent=2))


def _add_criteria_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--date", required=True, help="Operation date (dd-mm-yyyy or dd/mm/yyyy).")
    parser.add_argument("--type", required=True, choices=["T", "R"], help="T = tracking key, R = reference.")
    parser.add_argument("--criterion", required=True, help="Tracking key or reference number.")
    parser.add_argument("--sender", required=True, help="Issuing bank code.")
    parser.add_argument("--receiver", required=True, help="Receiving bank code.")
    parser.add_argument("--account", required=True, help="Beneficiary CLABE, card or phone number.")
    parser.add_argument("--amount", required=True, help="Transferred amount.")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="cepquery",
        description="cepquery CLI - Query Banxico CEP for SPEI transfer receipts."
    )
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    query_parser = subparsers.add_parser("query", help="Look up a transfer and print the result.")
    _add_criteria_arguments(query_parser)
    query_parser.set_defaults(func=handle_query)

    download_parser = subparsers.add_parser("download", help="Download the receipt file.")
    _add_criteria_arguments(download_parser)
    download_parser.add_argument("--format", default="XML", help="XML, PDF or ZIP (default: XML).")
    download_parser.add_argument("--output", required=True, help="Destination file path.")
    download_parser.set_defaults(func=handle_download)

    details_parser = subparsers.add_parser("details", help="Download the XML receipt and print its details.")
    _add_criteria_arguments(details_parser)
    details_parser.set_defaults(func=handle_details)

    banks_parser = subparsers.add_parser("banks", help="List participating institutions.")
    banks_parser.set_defaults(func=handle_banks)

    code_parser = subparsers.add_parser("bank-code", help="Find an institution code by name.")
    code_parser.add_argument("name", help="Full or partial bank name.")
    code_parser.set_defaults(func=handle_bank_code)

    xml_parser = subparsers.add_parser("parse-xml", help="Parse a saved XML receipt.")
    xml_parser.add_argument("file", help="Path to the XML receipt.")
    xml_parser.set_defaults(func=handle_parse_xml)

    html_parser = subparsers.add_parser("parse-html", help="Parse a saved CEP lookup response.")
    html_parser.add_argument("file", help="Path to the HTML response.")
    html_parser.set_defaults(func=handle_parse_html)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        args.func(args)
    except (CEPError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
