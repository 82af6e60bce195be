"""
Order Email Service - renders a production order as an HTML email

Every value that comes from the intake form is escaped before it is placed in
the document; the output is delivered as an email body.
"""
import logging
from typing import List, Tuple

from order_portal.schemas.submission import LINE_ITEM_COLUMNS, LineItem, Submission

logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "[DBD PO]"
NO_LINE_ITEMS = "(No line items provided)"

CELL_STYLE = "border:1px solid #e5e7eb;padding:6px;vertical-align:top;"
HEADER_CELL_STYLE = "border:1px solid #e5e7eb;padding:6px;background:#f8fafc;text-align:left;"
KEY_CELL_STYLE = "padding:6px 10px;border:1px solid #e5e7eb;background:#f8fafc;font-weight:600;"
VALUE_CELL_STYLE = "padding:6px 10px;border:1px solid #e5e7eb;"
SECTION_STYLE = "margin:18px 0 6px 0;"


class OrderEmailService:
    """Build subject and HTML body for a production order email"""

    def build_subject(self, submission: Submission) -> str:
        form = submission.form
        subject = f"{SUBJECT_PREFIX} {form.po_number} — {form.po_name}"
        if form.is_rush:
            subject += " (RUSH)"
        return subject

    def attachment_filename(self, submission: Submission) -> str:
        """Uploaded file name, or one derived from the PO number"""
        return submission.attachment.filename or f"{submission.form.po_number}.pdf"

    def render_html(self, submission: Submission) -> str:
        form = submission.form

        po_header = [
            ("PO Number", form.po_number),
            ("PO Name", form.po_name),
            ("Rush Order", "Yes" if form.is_rush else "No"),
            ("Submit Date", form.submit_date),
            ("Ship Date", form.ship_date),
            ("Status", form.status),
        ]
        ship_to = [
            ("Client", form.client_name),
            ("Phone", form.phone),
            ("Address 1", form.address1),
            ("Address 2", form.address2),
            ("City", form.city),
            ("State", form.state),
            ("Zip", form.zip),
        ]

        notes_html = ""
        if form.notes:
            notes_html = f"""
        <h3 style="{SECTION_STYLE}">Notes</h3>
        <div style="border:1px solid #e5e7eb;padding:10px;border-radius:10px;white-space:pre-wrap;">{self._escape_html(form.notes)}</div>
        """

        html_email = f"""
      <div style="font-family:ui-sans-serif,system-ui,-apple-system,Segoe UI,Roboto,Helvetica,Arial;line-height:1.4;">
        <h2 style="margin:0 0 8px 0;">New Production Order</h2>
        <p style="margin:0 0 14px 0;color:#334155;">
          Submitted via the DBD Order Portal. PO PDF attached.
        </p>

        <h3 style="{SECTION_STYLE}">PO Header</h3>
        {self._format_key_value_table(po_header)}

        <h3 style="{SECTION_STYLE}">Client / Ship-To</h3>
        {self._format_key_value_table(ship_to)}

        <h3 style="{SECTION_STYLE}">Line Items</h3>
        {self._format_line_items_table(submission.line_items)}
        {notes_html}
        <p style="margin:18px 0 0 0;color:#475569;font-size:12px;">
          Submitted by {self._escape_html(form.salesperson_name)} ({self._escape_html(form.salesperson_email)}).
        </p>
      </div>
    """

        logger.debug(f"Rendered order email for PO {form.po_number} with {len(submission.line_items)} line items")
        return html_email

    def _format_key_value_table(self, rows: List[Tuple[str, str]]) -> str:
        table_html = '<table cellpadding="0" cellspacing="0" style="border-collapse:collapse;font-size:13px;">'
        for key, value in rows:
            table_html += f"""
          <tr>
            <td style="{KEY_CELL_STYLE}">{self._escape_html(key)}</td>
            <td style="{VALUE_CELL_STYLE}">{self._escape_html(value)}</td>
          </tr>"""
        table_html += "\n        </table>"
        return table_html

    def _format_line_items_table(self, items: List[LineItem]) -> str:
        header_cells = "".join(
            f'<th style="{HEADER_CELL_STYLE}">{self._escape_html(label)}</th>'
            for _, label in LINE_ITEM_COLUMNS
        )

        rows = []
        for item in items:
            cells = "".join(
                f'<td style="{CELL_STYLE}">{self._escape_html(getattr(item, name))}</td>'
                for name, _ in LINE_ITEM_COLUMNS
            )
            rows.append(f"<tr>{cells}</tr>")

        if not rows:
            rows.append(
                f'<tr><td colspan="{len(LINE_ITEM_COLUMNS)}" style="border:1px solid #e5e7eb;padding:6px;">{NO_LINE_ITEMS}</td></tr>'
            )
        body_rows = "".join(rows)

        return f"""
        <table cellpadding="0" cellspacing="0" style="border-collapse:collapse;width:100%;font-size:12px;">
          <thead><tr>{header_cells}</tr></thead>
          <tbody>{body_rows}</tbody>
        </table>
        """

    def _escape_html(self, text: str) -> str:
        """Escape HTML special characters"""
        if not text:
            return ''
        return (str(text)
                .replace('&', '&amp;')
                .replace('<', '&lt;')
                .replace('>', '&gt;')
                .replace('"', '&quot;')
                .replace("'", '&#39;'))
