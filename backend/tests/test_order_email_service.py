from __future__ import annotations

import pytest

from conftest import make_attachment, make_form
from order_portal.schemas.submission import LINE_ITEM_COLUMNS, LineItem, OrderForm, Submission
from order_portal.services.order_email_service import OrderEmailService

HOSTILE = "<b>&\"'</b>"
ESCAPED = "&lt;b&gt;&amp;&quot;&#39;&lt;/b&gt;"
ITEM_CELL = '<td style="border:1px solid #e5e7eb;padding:6px;vertical-align:top;">'

TEXT_FIELDS = [
    "salesperson_name",
    "salesperson_email",
    "po_number",
    "po_name",
    "submit_date",
    "ship_date",
    "status",
    "client_first_name",
    "client_last_name",
    "address1",
    "address2",
    "city",
    "state",
    "zip",
    "phone",
    "notes",
]


def submission(form: OrderForm, items=None) -> Submission:
    return Submission(form=form, line_items=items or [], attachment=make_attachment())


@pytest.fixture
def service() -> OrderEmailService:
    return OrderEmailService()


def test_subject_marks_rush_orders(service):
    assert service.build_subject(submission(make_form())) == "[DBD PO] DBD_287 — Fall Hoodie Run (RUSH)"
    assert service.build_subject(submission(make_form(rush_order="false"))) == "[DBD PO] DBD_287 — Fall Hoodie Run"


def test_only_exact_true_is_rush(service):
    assert service.build_subject(submission(make_form(rush_order="True"))).endswith("Fall Hoodie Run")


def test_attachment_name_falls_back_to_po_number(service):
    order = Submission(form=make_form(), attachment=make_attachment(filename=None))
    assert service.attachment_filename(order) == "DBD_287.pdf"

    order = Submission(form=make_form(), attachment=make_attachment(filename="scan.pdf"))
    assert service.attachment_filename(order) == "scan.pdf"


@pytest.mark.parametrize("field", TEXT_FIELDS)
def test_form_fields_are_escaped(service, field):
    marker = f"{field}{HOSTILE}"
    html = service.render_html(submission(make_form(**{field: marker})))

    assert f"{field}{ESCAPED}" in html
    assert marker not in html


@pytest.mark.parametrize("field", [name for name, _ in LINE_ITEM_COLUMNS])
def test_line_item_fields_are_escaped(service, field):
    marker = f"{field}{HOSTILE}"
    html = service.render_html(submission(make_form(), [LineItem(**{field: marker})]))

    assert f"{field}{ESCAPED}" in html
    assert marker not in html


def test_script_tags_are_neutralised(service):
    html = service.render_html(submission(make_form(notes="<script>alert('x')</script>")))

    assert "<script>" not in html
    assert "&lt;script&gt;alert(&#39;x&#39;)&lt;/script&gt;" in html


def test_empty_line_items_render_placeholder_row(service):
    html = service.render_html(submission(make_form()))

    assert html.count("(No line items provided)") == 1
    assert f'colspan="{len(LINE_ITEM_COLUMNS)}"' in html
    assert 'colspan="22"' in html
    assert ITEM_CELL not in html


def test_one_row_per_line_item(service):
    items = [LineItem(product_number="P-1"), LineItem(), LineItem(style_name="Tee")]
    html = service.render_html(submission(make_form(), items))

    assert html.count(ITEM_CELL) == 22 * 3
    assert "(No line items provided)" not in html


def test_column_headers_in_order(service):
    html = service.render_html(submission(make_form()))

    positions = [html.index(f">{label}</th>") for _, label in LINE_ITEM_COLUMNS]
    assert positions == sorted(positions)
    assert len(LINE_ITEM_COLUMNS) == 22


def test_header_tables(service):
    form = make_form(
        client_first_name="Sam",
        client_last_name="",
        submit_date="2024-09-01",
        status="Confirmed",
    )
    html = service.render_html(submission(form))

    assert "New Production Order" in html
    assert ">Yes</td>" in html
    assert ">Sam</td>" in html
    assert ">2024-09-01</td>" in html
    assert html.index("PO Header") < html.index("Client / Ship-To") < html.index("Line Items")


def test_rush_no(service):
    html = service.render_html(submission(make_form(rush_order="false")))
    assert ">No</td>" in html


def test_notes_block_only_when_notes_present(service):
    assert "Notes</h3>" not in service.render_html(submission(make_form()))

    html = service.render_html(submission(make_form(notes="Fold and bag\nShip with invoice")))
    assert "Notes</h3>" in html
    assert "Fold and bag\nShip with invoice" in html
    assert "white-space:pre-wrap" in html
    assert html.index("Line Items") < html.index("Notes</h3>") < html.index("Submitted by")


def test_footer_names_salesperson(service):
    html = service.render_html(submission(make_form()))
    assert "Submitted by Pat Lee (pat@x.com)." in html
