from datetime import datetime

from sqlalchemy import func, select

from ..errors import ConflictError, NotFoundError, ValidationFailed
from ..models import (
    CUSTOMER_TYPES,
    Customer,
    InstoreCustomer,
    Invoice,
    ProductionCustomer,
    WeddingCustomer,
)
from .validation import CUSTOMER_VARIANTS, validate_customer

INDEX_MODELS = {
    "Production": ProductionCustomer,
    "Wedding Invitation Maker": WeddingCustomer,
    "In-store": InstoreCustomer,
}

DUPLICATE_IDENTIFIER_MESSAGE = (
    "This phone number or nickname is already in use. Please use a unique value."
)


def _blank_to_none(value):
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def _apply_fields(customer, data):
    customer.customer_type = data["Customer_Type"]
    customer.full_name = data["Full_Name"].strip()
    customer.contact_person = _blank_to_none(data.get("Contact_Person"))
    customer.email = _blank_to_none(data.get("Email"))
    customer.phone_number = _blank_to_none(data.get("Phone_Number"))
    customer.address = _blank_to_none(data.get("Address"))
    customer.tax_id = _blank_to_none(data.get("Tax_ID"))
    customer.job_type = data["Job_Type"]
    customer.status = data.get("Status") or "Active"


def external_identifier(data):
    """Nickname or Phone_Number, whichever the customer type uses as its lookup key."""
    variant = CUSTOMER_VARIANTS[data["Customer_Type"]]
    return str(data[variant.identifier_field]).strip()


def _ensure_identifier_free(session, customer_type, identifier, customer_id=None):
    index_model = INDEX_MODELS[customer_type]
    existing = session.get(index_model, identifier)
    if existing is not None and existing.customer_id != customer_id:
        raise ConflictError(DUPLICATE_IDENTIFIER_MESSAGE)


def _drop_index_rows(session, customer):
    for index_row in (
        customer.production_index,
        customer.wedding_index,
        customer.instore_index,
    ):
        if index_row is not None:
            session.delete(index_row)


def serialize_customer(customer):
    data = {
        "id": customer.id,
        "Customer_Type": customer.customer_type,
        "Full_Name": customer.full_name,
        "Contact_Person": customer.contact_person,
        "Email": customer.email,
        "Phone_Number": customer.phone_number,
        "Address": customer.address,
        "Tax_ID": customer.tax_id,
        "Job_Type": customer.job_type,
        "Status": customer.status,
        "Created_At": customer.created_at.isoformat() if customer.created_at else None,
        "Updated_At": customer.updated_at.isoformat() if customer.updated_at else None,
    }
    if customer.customer_type == "In-store":
        index_row = customer.instore_index
        data["Instore_Phone_Number"] = index_row.identifier if index_row else None
    else:
        data["Nickname"] = customer.nickname
    return data


def list_customers(session):
    return session.scalars(select(Customer).order_by(Customer.id)).all()


def get_customer(session, customer_id):
    customer = session.get(Customer, customer_id)
    if customer is None:
        raise NotFoundError("Customer not found. Please check the ID and try again.")
    return customer


def create_customer(session, data):
    errors = validate_customer(data)
    if errors:
        raise ValidationFailed(errors)

    customer_type = data["Customer_Type"]
    identifier = external_identifier(data)
    _ensure_identifier_free(session, customer_type, identifier)

    now = datetime.now()
    customer = Customer(created_at=now, updated_at=now)
    _apply_fields(customer, data)
    session.add(customer)
    session.flush()

    session.add(INDEX_MODELS[customer_type](identifier=identifier, customer_id=customer.id))
    session.flush()
    session.refresh(customer)
    return customer


def update_customer(session, customer_id, data):
    """Replace every field of a customer and re-point its type-index row."""
    errors = validate_customer(data)
    if errors:
        raise ValidationFailed(errors)

    customer = get_customer(session, customer_id)
    customer_type = data["Customer_Type"]
    identifier = external_identifier(data)
    _ensure_identifier_free(session, customer_type, identifier, customer_id=customer.id)

    index_model = INDEX_MODELS[customer_type]
    current = session.scalar(
        select(index_model).where(index_model.customer_id == customer.id)
    )
    index_changed = (
        customer.customer_type != customer_type
        or current is None
        or current.identifier != identifier
    )

    _apply_fields(customer, data)
    customer.updated_at = datetime.now()

    if index_changed:
        _drop_index_rows(session, customer)
        session.flush()
        session.add(index_model(identifier=identifier, customer_id=customer.id))

    session.flush()
    session.refresh(customer)
    return customer


def delete_customer(session, customer_id):
    customer = get_customer(session, customer_id)
    invoice_count = session.scalar(
        select(func.count(Invoice.id)).where(Invoice.customer_id == customer.id)
    )
    if invoice_count:
        raise ValidationFailed(
            f"Customer has {invoice_count} invoice(s)/quotation(s) and cannot be deleted."
        )
    _drop_index_rows(session, customer)
    session.delete(customer)
    session.flush()


def find_customer_by_identifier(session, customer_type, identifier):
    """Resolve a customer through the Nickname / Phone_Number lookup tables."""
    if not customer_type or not identifier:
        raise ValidationFailed(
            "Customer type and identifier (Phone Number or Nickname) are required."
        )
    if customer_type not in CUSTOMER_TYPES:
        raise ValidationFailed(
            "Invalid customer type. Must be In-store, Production, or Wedding Invitation Maker."
        )

    index_row = session.get(INDEX_MODELS[customer_type], str(identifier).strip())
    if index_row is None:
        label = CUSTOMER_VARIANTS[customer_type].identifier_label
        raise NotFoundError(f"No customer found with this {label}.")

    customer = session.get(Customer, index_row.customer_id)
    if customer is None:
        raise NotFoundError("Customer not found.")
    return customer
