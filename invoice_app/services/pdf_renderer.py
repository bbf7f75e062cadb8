"""
Single-page A5 invoice / quotation layout drawn with ReportLab's canvas.

The payload is whatever the print endpoint received, not a stored invoice, so
every field is optional and falls back to "N/A" or 0.
"""

import random
from dataclasses import dataclass
from datetime import date, timedelta
from io import BytesIO

from reportlab.lib.colors import HexColor, black, red
from reportlab.lib.pagesizes import A5
from reportlab.pdfgen import canvas

from .invoice_service import payment_term_for, summarize_totals, to_decimal

W, H = A5  # 419.53 x 595.28
MARGIN = 20
CONTENT_W = W - 2 * MARGIN
LINE = 11

TABLE_COLUMNS = (
    ("#", MARGIN + 6),
    ("Name", MARGIN + 24),
    ("Quantity", MARGIN + 200),
    ("Unit Price", MARGIN + 255),
    ("Total", MARGIN + 325),
)
RULE_GREY = HexColor("#B0B0B0")

DEFAULT_COMPANY = {
    "COMPANY_NAME": "Orgalasser Cutting Wedding Cards &",
    "COMPANY_SUBTITLE": "Graphic Items Pvt. Ltd",
    "COMPANY_REGISTRATION": "PV00204620",
    "COMPANY_ADDRESS": "325/D Summer park, Batagama South, Kandana, 11320, Sri Lanka.",
    "COMPANY_PHONES": "Tel: 0112236311 | Mob: 0714421095 / 0716520030",
    "COMPANY_EMAIL": "orgalaser@gmail.com",
    "COMPANY_LEGAL_NAME": "Orgalaser Cutting Wedding Cards & Graphic Items Pvt. Ltd.",
    "BANK_NAME": "Commercial Bank of Ceylon PLC",
    "BANK_ACCOUNT_NUMBER": "1000666319",
    "BANK_CODE": "031",
    "SALESPERSON": "Mr. Yuvindu",
    "CURRENCY": "LKR",
}


@dataclass(frozen=True)
class RenderedDocument:
    number: str
    filename: str
    content: bytes


def document_number(today, rng=None):
    """``OLH{YYYYMMDD}-{0..99}``, generated once per print."""
    rng = rng or random
    return f"OLH{today.strftime('%Y%m%d')}-{rng.randint(0, 99)}"


def _text(value, default="N/A"):
    if value is None:
        return default
    value = str(value).strip()
    return value or default


def _truncate(c, text, font, size, width):
    if c.stringWidth(text, font, size) <= width:
        return text
    while text and c.stringWidth(text + "...", font, size) > width:
        text = text[:-1]
    return text + "..."


class InvoiceLayout:
    def __init__(self, buffer, payload, company, number, today):
        self.c = canvas.Canvas(buffer, pagesize=A5)
        self.payload = payload
        self.company = company
        self.number = number
        self.today = today
        self.currency = company.get("CURRENCY", "LKR")
        self.y = H - MARGIN
        document_type = _text(payload.get("Document_Type"), "Invoice")
        self.c.setTitle(f"{document_type} {number}")
        self.c.setAuthor(company.get("COMPANY_LEGAL_NAME", ""))

    def money(self, value):
        return f"{self.currency} {to_decimal(value):,.2f}"

    def centered(self, text, font="Helvetica", size=8, gap=LINE):
        self.c.setFont(font, size)
        self.c.drawCentredString(W / 2, self.y, text)
        self.y -= gap

    def header(self):
        self.centered(self.company["COMPANY_NAME"], "Helvetica-Bold", 12, 13)
        self.centered(self.company["COMPANY_SUBTITLE"], "Helvetica-Bold", 10, 11)
        self.centered(self.company["COMPANY_REGISTRATION"], "Helvetica-Bold", 8, 14)
        self.centered(self.company["COMPANY_ADDRESS"])
        self.centered(self.company["COMPANY_PHONES"])
        self.centered(f"Email: {self.company['COMPANY_EMAIL']}", gap=18)
        self.centered(_text(self.payload.get("Document_Type"), "Invoice"), "Helvetica-Bold", 12, 16)

    def metadata(self):
        customer_type = self.payload.get("Customer_Type")
        term = payment_term_for(customer_type)
        due = self.today + timedelta(days=0 if customer_type == "In-store" else 15)

        left = [
            f"Invoice Number: {self.number}",
            f"Invoice Date: {self.today.isoformat()}",
            f"Due Date: {due.isoformat()}",
        ]
        if self.payload.get("Purchasing_Order"):
            left.append(f"Purchasing Order: {_text(self.payload.get('Purchasing_Order'))}")
        right = [
            f"Payment Term: {term}",
            f"Payment Method: {_text(self.payload.get('Payment_Method'), 'Not Specified')}",
            f"Salesperson: {self.company['SALESPERSON']}",
            f"Customer Type: {_text(customer_type)}",
        ]

        self.c.setFont("Helvetica", 8)
        top = self.y
        for offset, line in enumerate(left):
            self.c.drawString(MARGIN, top - offset * 12, line)
        for offset, line in enumerate(right):
            self.c.drawRightString(W - MARGIN, top - offset * 12, line)
        self.y = top - max(len(left), len(right)) * 12 - 8

    def billing(self):
        self.c.setFont("Helvetica-Bold", 8)
        self.c.drawString(MARGIN, self.y, "Billing Address")
        self.c.setFont("Helvetica", 8)
        self.c.drawString(MARGIN, self.y - LINE, _text(self.payload.get("Customer_Name"), "Unknown Customer"))
        self.c.drawString(MARGIN, self.y - 2 * LINE, _text(self.payload.get("Address"), "Unknown"))
        self.c.drawRightString(
            W - MARGIN, self.y - LINE, f"Customer Mobile: {_text(self.payload.get('Customer_Mobile'))}"
        )
        self.c.drawRightString(
            W - MARGIN, self.y - 2 * LINE, f"TAX ID: {_text(self.payload.get('TAX_ID'))}"
        )
        self.y -= 3 * LINE + 8

    def items_table(self):
        header_top = self.y
        self.c.rect(MARGIN, header_top - 14, CONTENT_W, 20, stroke=1, fill=0)
        self.c.setFont("Helvetica-Bold", 8)
        for title, x in TABLE_COLUMNS:
            self.c.drawString(x, header_top - 7, title)
        self.y = header_top - 28

        items = self.payload.get("Items") or []
        if not isinstance(items, list):
            items = []
        self.c.setFont("Helvetica", 7)
        for index, item in enumerate(items, start=1):
            if not isinstance(item, dict):
                item = {}
            quantity = to_decimal(item.get("Quantity"))
            rate = to_decimal(item.get("Rate"))
            description = _truncate(
                self.c, _text(item.get("Item_Description")), "Helvetica", 7, 170
            )
            self.c.drawString(TABLE_COLUMNS[0][1], self.y, str(index))
            self.c.drawString(TABLE_COLUMNS[1][1], self.y, description)
            self.c.drawString(TABLE_COLUMNS[2][1], self.y, f"{quantity.normalize():f}")
            self.c.drawString(TABLE_COLUMNS[3][1], self.y, self.money(rate))
            self.c.drawString(TABLE_COLUMNS[4][1], self.y, self.money(quantity * rate))
            self.y -= 16
        self.c.line(MARGIN, self.y + 6, W - MARGIN, self.y + 6)
        self.y -= 12

    def totals(self):
        summary = summarize_totals(
            self.payload.get("Total_Amount"),
            self.payload.get("Discount_Price"),
            self.payload.get("Advance_Payment"),
        )
        rows = [
            ("Subtotal:", self.money(summary.subtotal)),
            ("Discount:", f"{summary.discount_percent:.2f} %"),
            ("Total:", self.money(summary.net_total)),
            ("Paid:", self.money(summary.advance_payment)),
            ("Balance Due:", self.money(summary.balance_due)),
        ]
        label_x = W - MARGIN - 140
        top = self.y
        for offset, (label, value) in enumerate(rows):
            line_y = top - offset * 14
            self.c.setFont("Helvetica-Bold", 8)
            self.c.drawString(label_x, line_y, label)
            self.c.setFont("Helvetica", 8)
            self.c.drawRightString(W - MARGIN, line_y, value)

        self.c.setStrokeColor(RULE_GREY)
        balance_y = top - 4 * 14
        self.c.line(label_x, balance_y + 10, W - MARGIN, balance_y + 10)
        self.c.line(label_x, balance_y - 4, W - MARGIN, balance_y - 4)
        self.c.line(label_x, balance_y - 6, W - MARGIN, balance_y - 6)
        self.c.setStrokeColor(black)

        # Notes sit to the left of the totals block
        self.c.setFont("Helvetica-Oblique", 8)
        self.c.setFillColor(red)
        self.c.drawString(MARGIN, top, "This is not a VAT invoice.")
        self.c.setFillColor(black)
        self.c.setFont("Helvetica-Oblique", 7)
        self.c.drawString(
            MARGIN, top - 12, "If you have any questions concerning this Invoice"
        )
        self.c.drawString(MARGIN, top - 21, "please be kind to inform us.")
        self.y = balance_y - 24

    def bank_details(self):
        self.c.setFont("Helvetica", 7)
        lines = [
            f"Bank Name: {self.company['BANK_NAME']}",
            f"Account Name: {self.company['COMPANY_LEGAL_NAME']}",
            f"Account Number: {self.company['BANK_ACCOUNT_NUMBER']}",
            f"Bank Code: {self.company['BANK_CODE']}",
        ]
        for line in lines:
            self.c.drawString(MARGIN, self.y, line)
            self.y -= 10
        self.y -= 10

    def footer(self):
        self.centered(
            f"Please make all cheques payable to {self.company['COMPANY_LEGAL_NAME']}",
            "Helvetica-Bold", 7, 14,
        )
        self.centered(
            "This is a computer generated advice and does not require manual signature.",
            size=7, gap=9,
        )
        self.centered(
            "We look forward to the opportunity of being of service to you", size=7, gap=9
        )
        self.centered("Thank you for your business!", size=7, gap=9)

    def render(self):
        self.header()
        self.metadata()
        self.billing()
        self.items_table()
        self.totals()
        self.bank_details()
        self.footer()
        self.c.showPage()
        self.c.save()


def render_invoice_pdf(payload, company=None, today=None, rng=None):
    """Render ``payload`` to PDF bytes. No validation and no persistence."""
    if not isinstance(payload, dict):
        payload = {}
    merged = dict(DEFAULT_COMPANY)
    merged.update({key: value for key, value in (company or {}).items() if key in DEFAULT_COMPANY})
    today = today or date.today()
    number = document_number(today, rng)

    buffer = BytesIO()
    InvoiceLayout(buffer, payload, merged, number, today).render()
    return RenderedDocument(
        number=number,
        filename=f"invoice_{number}.pdf",
        content=buffer.getvalue(),
    )
