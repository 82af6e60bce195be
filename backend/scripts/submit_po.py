#!/usr/bin/env python3
"""
Submit a production order to the portal from the command line

Line items come from a JSON file holding an array of objects keyed like the
web form (productNumber, styleName, xs, s, m, total, ...).

Example:
    python scripts/submit_po.py --name "Pat Lee" --email pat@example.com \
        --po-number DBD_287 --po-name "Fall Hoodie Run" --rush \
        --items items.json --pdf DBD_287.pdf
"""
import argparse
import json
import logging
import os
import sys

from dotenv import load_dotenv

from order_portal.client.intake_form import IntakeForm

load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env'))

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# CLI option -> form field
HEADER_OPTIONS = {
    "name": "salespersonName",
    "email": "salespersonEmail",
    "access_code": "accessCode",
    "po_number": "poNumber",
    "po_name": "poName",
    "submit_date": "submitDate",
    "ship_date": "shipDate",
    "status": "status",
    "first_name": "clientFirstName",
    "last_name": "clientLastName",
    "address1": "address1",
    "address2": "address2",
    "city": "city",
    "state": "state",
    "zip": "zip",
    "phone": "phone",
    "notes": "notes",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send a production order and its PO PDF to production")
    parser.add_argument("--url", default=os.getenv("ORDER_PORTAL_URL", "http://localhost:8000"),
                        help="Portal base URL (default: $ORDER_PORTAL_URL or http://localhost:8000)")
    parser.add_argument("--access-code", default=os.getenv("ORDER_PORTAL_CODE", ""))
    parser.add_argument("--pdf", required=True, help="PO PDF to attach")
    parser.add_argument("--items", help="JSON file with an array of line items")
    parser.add_argument("--rush", action="store_true", help="Mark as a rush order")
    for option in HEADER_OPTIONS:
        if option == "access_code":
            continue
        parser.add_argument(f"--{option.replace('_', '-')}", default="")
    return parser


def load_items(form: IntakeForm, path: str) -> None:
    with open(path) as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise ValueError(f"{path} must contain a JSON array of line items")

    # Start from a single empty row and fill one row per entry
    while len(form.items) > 1:
        form.remove_row(len(form.items) - 1)
    for index, row in enumerate(rows):
        if index > 0:
            form.add_row()
        for key, value in row.items():
            form.update_field(index, key, "" if value is None else str(value))


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    form = IntakeForm(base_url=args.url)
    for option, field_name in HEADER_OPTIONS.items():
        form.set_field(field_name, getattr(args, option))
    form.set_rush(args.rush)
    form.attach_file(args.pdf)
    if args.items:
        load_items(form, args.items)

    print(f"Line items: {len(form.items)}, total units: {form.compute_total_units():g}")

    result = form.submit()
    print(result.message)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
