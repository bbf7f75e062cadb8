from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from flask import current_app
from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from ..errors import NotFoundError, ValidationFailed
from ..models import (
    Customer,
    InstoreCustomer,
    Invoice,
    InvoiceItem,
    ProductionCustomer,
    WeddingCustomer,
)
from .customer_service import serialize_customer
from .identifiers import generate_document_id
from .validation import (
    CUSTOMER_VARIANTS,
    parse_business_date,
    validate_invoice,
    validate_payment_update,
)

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class TotalsSummary:
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    net_total: Decimal
    advance_payment: Decimal
    balance_due: Decimal


def to_decimal(value, default=Decimal("0")):
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        return Decimal(str(value))
    except ArithmeticError:
        return default


def compute_total_amount(items):
    """Sum of Line_Total across the items. Any client-sent total is ignored."""
    return sum((to_decimal(item.get("Line_Total")) for item in items), Decimal("0"))


def payment_term_for(customer_type):
    variant = CUSTOMER_VARIANTS.get(customer_type)
    return variant.payment_term if variant else "15 days"


def summarize_totals(total_amount, discount_percent=0, advance_payment=0):
    subtotal = to_decimal(total_amount)
    discount = to_decimal(discount_percent)
    advance = to_decimal(advance_payment)
    discount_amount = subtotal * discount / HUNDRED
    net_total = subtotal - discount_amount
    return TotalsSummary(
        subtotal=subtotal,
        discount_percent=discount,
        discount_amount=discount_amount,
        net_total=net_total,
        advance_payment=advance,
        balance_due=net_total - advance,
    )


def _money(value):
    return float(value) if value is not None else None


def serialize_item(item):
    return {
        "Item_Description": item.item_description,
        "Quantity": item.quantity,
        "Rate": _money(item.rate),
        "Line_Total": _money(item.line_total),
    }


def serialize_invoice(invoice, include_customer=True):
    data = {
        "id": invoice.id,
        "Document_Type": invoice.document_type,
        "Document_ID": invoice.document_id,
        "Customer_ID": invoice.customer_id,
        "Date": invoice.date.isoformat() if invoice.date else None,
        "Items": [serialize_item(item) for item in invoice.items],
        "Total_Amount": _money(invoice.total_amount),
        "Purchasing_Order": invoice.purchasing_order,
        "Payment_Term": invoice.payment_term,
        "Payment_Method": invoice.payment_method,
        "Discount_Price": _money(invoice.discount_price),
        "Advance_Payment": _money(invoice.advance_payment),
        "Payment_Status": invoice.payment_status,
        "Created_At": invoice.created_at.isoformat() if invoice.created_at else None,
        "Updated_At": invoice.updated_at.isoformat() if invoice.updated_at else None,
    }
    if include_customer:
        data["Customer"] = (
            serialize_customer(invoice.customer) if invoice.customer else None
        )
    return data


def _warn_on_line_total_mismatch(items):
    for index, item in enumerate(items):
        expected = to_decimal(item["Quantity"]) * to_decimal(item["Rate"])
        supplied = to_decimal(item["Line_Total"])
        if expected != supplied:
            current_app.logger.warning(
                f"Item at index {index}: Line_Total {supplied} differs from "
                f"Quantity x Rate ({expected}); keeping the submitted value"
            )


def _resolve_customer_id(raw):
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise NotFoundError("Customer not found. Please check the customer ID.")


def create_invoice(session, data):
    errors = validate_invoice(data)
    if errors:
        raise ValidationFailed(errors)

    customer = session.get(Customer, _resolve_customer_id(data["Customer_ID"]))
    if customer is None:
        raise NotFoundError("Customer not found. Please check the customer ID.")

    raw_date = data.get("Date", data.get("invoiceDateInput"))
    business_date = parse_business_date(raw_date) if raw_date else datetime.now()

    items = data["Items"]
    _warn_on_line_total_mismatch(items)

    now = datetime.now()
    invoice = Invoice(
        document_type=data["Document_Type"],
        document_id=generate_document_id(session, data["Document_Type"], business_date),
        customer_id=customer.id,
        date=business_date,
        total_amount=compute_total_amount(items),
        purchasing_order=(data.get("Purchasing_Order") or None),
        payment_term=payment_term_for(customer.customer_type),
        payment_method=(data.get("Payment_Method") or None),
        discount_price=to_decimal(data.get("Discount_Price")),
        advance_payment=to_decimal(data.get("Advance_Payment")),
        payment_status="Unpaid",
        created_at=now,
        updated_at=now,
    )
    for position, item in enumerate(items):
        invoice.items.append(
            InvoiceItem(
                position=position,
                item_description=item["Item_Description"].strip(),
                quantity=int(item["Quantity"]),
                rate=to_decimal(item["Rate"]),
                line_total=to_decimal(item["Line_Total"]),
            )
        )

    session.add(invoice)
    session.flush()
    current_app.logger.info(
        f"Created {invoice.document_type} {invoice.document_id} "
        f"for customer {customer.id} totalling {invoice.total_amount}"
    )
    return invoice


def _invoice_query():
    return select(Invoice).options(
        selectinload(Invoice.items),
        selectinload(Invoice.customer),
    )


def list_invoices(session):
    return session.scalars(_invoice_query().order_by(Invoice.date, Invoice.id)).all()


def get_invoice(session, invoice_id):
    invoice = session.scalar(_invoice_query().where(Invoice.id == invoice_id))
    if invoice is None:
        raise NotFoundError(
            "Invoice/Quotation not found. Please check the ID and try again."
        )
    return invoice


def search_invoices(session, nickname=None, phone=None):
    """Invoices whose customer nickname or phone number contains the given text."""
    stmt = (
        _invoice_query()
        .join(Customer, Customer.id == Invoice.customer_id)
        .outerjoin(ProductionCustomer, ProductionCustomer.customer_id == Customer.id)
        .outerjoin(WeddingCustomer, WeddingCustomer.customer_id == Customer.id)
        .outerjoin(InstoreCustomer, InstoreCustomer.customer_id == Customer.id)
    )
    if nickname:
        pattern = f"%{nickname.lower()}%"
        stmt = stmt.where(
            or_(
                ProductionCustomer.identifier.ilike(pattern),
                WeddingCustomer.identifier.ilike(pattern),
            )
        )
    if phone:
        pattern = f"%{phone}%"
        stmt = stmt.where(
            or_(
                Customer.phone_number.like(pattern),
                InstoreCustomer.identifier.like(pattern),
            )
        )
    return session.scalars(stmt.order_by(Invoice.date, Invoice.id)).unique().all()


def update_payment(session, invoice_id, data):
    """Only Payment_Status and Advance_Payment may change after creation."""
    errors = validate_payment_update(data)
    if errors:
        raise ValidationFailed(errors)

    invoice = get_invoice(session, invoice_id)
    if data.get("Payment_Status") is not None:
        invoice.payment_status = data["Payment_Status"]
    if data.get("Advance_Payment") is not None:
        invoice.advance_payment = to_decimal(data["Advance_Payment"])
    invoice.updated_at = datetime.now()
    session.flush()
    return invoice
