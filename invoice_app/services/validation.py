"""
Field-level validation rules for customers, products and invoices.

Every ``validate_*`` function takes the raw JSON payload and returns a list of
human-readable messages. An empty list means the payload passed. Nothing in
here touches the database and nothing raises on malformed input.

Required fields depend on a discriminator (Customer_Type, Product_Category).
Each discriminator value maps to a variant describing exactly which fields it
requires, so the conditional rules live in one table instead of being spread
across predicates.
"""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from numbers import Number
from typing import Dict, List, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from ..models import (
    CUSTOMER_TYPES,
    DOCUMENT_TYPES,
    JOB_TYPES,
    PAYMENT_METHODS,
    PAYMENT_STATUSES,
    PRODUCT_CATEGORIES,
    RECORD_STATUSES,
)

PHONE_PATTERN = re.compile(r"^\d{9,10}$")
TAX_ID_PATTERN = re.compile(r"^\d{9}(-7000)?$")

MATERIAL_TYPES = ("Acrylic", "Leather", "Rexine", "Wood", "Paper")
PRODUCT_TYPES = ("Invitation Card", "Cake Box", "Tag")
STICKER_OPTIONS = ("With Sticker", "Without Sticker")
STICKER_TYPES = ("Normal", "Glitter")
STICKER_COLORS = ("Gold", "Silver", "Green", "Red", "Blue")

FIELD_LABELS = {
    "Customer_Nickname": "Customer nickname",
    "Material_Type": "Material type",
    "Unique_Code": "Unique code",
    "Product_Type": "Product type",
    "Sticker_Option": "Sticker option",
    "Price": "Price",
}


@dataclass(frozen=True)
class CustomerVariant:
    customer_type: str
    identifier_field: str
    identifier_label: str
    payment_term: str


@dataclass(frozen=True)
class ProductVariant:
    category: str
    barcode_prefix: str
    required_fields: Tuple[str, ...]
    priced: bool
    singleton: bool


CUSTOMER_VARIANTS: Dict[str, CustomerVariant] = {
    "Production": CustomerVariant("Production", "Nickname", "nickname", "15 days"),
    "Wedding Invitation Maker": CustomerVariant(
        "Wedding Invitation Maker", "Nickname", "nickname", "15 days"
    ),
    "In-store": CustomerVariant("In-store", "Phone_Number", "phone number", "None"),
}

PRODUCT_VARIANTS: Dict[str, ProductVariant] = {
    "Shoe Laser Cutting": ProductVariant(
        "Shoe Laser Cutting",
        "SLC",
        ("Customer_Nickname", "Material_Type", "Unique_Code", "Price"),
        priced=True,
        singleton=False,
    ),
    "Wedding Invitations": ProductVariant(
        "Wedding Invitations",
        "WI",
        ("Product_Type", "Material_Type", "Sticker_Option", "Price"),
        priced=True,
        singleton=False,
    ),
    "Laser Cutting": ProductVariant(
        "Laser Cutting", "LC", (), priced=False, singleton=True
    ),
}


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def is_number(value) -> bool:
    """True for finite ints and floats. JSON NaN / Infinity and booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, Number):
        return False
    return not isinstance(value, float) or math.isfinite(value)


def _check_choice(errors, data, field, choices, label):
    value = data.get(field)
    if _is_blank(value):
        return
    if value not in choices:
        errors.append(f"{label} must be one of: {', '.join(choices)}")


def parse_business_date(value) -> Optional[datetime]:
    """Parse an ISO date/datetime string. Returns None when it can't be read."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    # Stored as naive local time
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
def validate_customer(data) -> List[str]:
    if not isinstance(data, dict):
        return ["Request body must be a JSON object."]

    errors: List[str] = []
    customer_type = data.get("Customer_Type")

    if _is_blank(customer_type):
        errors.append(
            "Please select a customer type (Production, In-store, or Wedding Invitation Maker)"
        )
    elif customer_type not in CUSTOMER_TYPES:
        errors.append(
            "Invalid customer type. Must be In-store, Production, or Wedding Invitation Maker."
        )

    full_name = data.get("Full_Name")
    if _is_blank(full_name):
        errors.append("Full name is required")
    elif not isinstance(full_name, str):
        errors.append("Full name must be text")

    job_type = data.get("Job_Type")
    if _is_blank(job_type):
        errors.append(
            "Please select a job type (Wedding Invitations, Shoe Laser Cutting, or Laser Cutting)"
        )
    elif job_type not in JOB_TYPES:
        errors.append(f"Job type must be one of: {', '.join(JOB_TYPES)}")

    variant = (
        CUSTOMER_VARIANTS.get(customer_type) if isinstance(customer_type, str) else None
    )
    if variant is not None and _is_blank(data.get(variant.identifier_field)):
        errors.append(
            f"{variant.identifier_label.capitalize()} is required for "
            f"{variant.customer_type} customers"
        )

    phone = data.get("Phone_Number")
    if not _is_blank(phone):
        if not isinstance(phone, str) or not PHONE_PATTERN.match(phone):
            errors.append("Phone number must be 9 or 10 digits")

    email = data.get("Email")
    if not _is_blank(email):
        try:
            validate_email(str(email), check_deliverability=False)
        except EmailNotValidError:
            errors.append("Please enter a valid email address")

    tax_id = data.get("Tax_ID")
    if not _is_blank(tax_id):
        if not isinstance(tax_id, str) or not TAX_ID_PATTERN.match(tax_id):
            errors.append("Tax ID must be 9 digits, optionally followed by -7000")

    _check_choice(errors, data, "Status", RECORD_STATUSES, "Status")
    return errors


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
def validate_product(data) -> List[str]:
    if not isinstance(data, dict):
        return ["Request body must be a JSON object."]

    errors: List[str] = []
    category = data.get("Product_Category")
    if _is_blank(category):
        return [
            "Please select a product category (Shoe Laser Cutting, Wedding Invitations, or Laser Cutting)"
        ]
    if category not in PRODUCT_CATEGORIES:
        return [f"Product category must be one of: {', '.join(PRODUCT_CATEGORIES)}"]

    variant = PRODUCT_VARIANTS[category]
    for field in variant.required_fields:
        if _is_blank(data.get(field)):
            errors.append(f"{FIELD_LABELS[field]} is required for {category} products")

    if category == "Wedding Invitations" and data.get("Sticker_Option") == "With Sticker":
        if _is_blank(data.get("Sticker_Type")):
            errors.append("Sticker type is required when With Sticker is selected")
        if _is_blank(data.get("Sticker_Color")):
            errors.append("Sticker color is required when With Sticker is selected")

    if variant.priced and not _is_blank(data.get("Price")):
        price = data.get("Price")
        if not is_number(price):
            errors.append("Price must be a number")
        elif price <= 0:
            errors.append("Price must be greater than 0")

    _check_choice(errors, data, "Material_Type", MATERIAL_TYPES, "Material type")
    _check_choice(errors, data, "Product_Type", PRODUCT_TYPES, "Product type")
    _check_choice(errors, data, "Sticker_Option", STICKER_OPTIONS, "Sticker option")
    _check_choice(errors, data, "Sticker_Type", STICKER_TYPES, "Sticker type")
    _check_choice(errors, data, "Sticker_Color", STICKER_COLORS, "Sticker color")
    _check_choice(errors, data, "Status", RECORD_STATUSES, "Status")
    return errors


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------
def validate_line_item(item, index: int) -> List[str]:
    prefix = f"Item at index {index}:"
    if not isinstance(item, dict):
        return [f"{prefix} must be an object."]

    errors: List[str] = []
    description = item.get("Item_Description")
    if not isinstance(description, str) or description.strip() == "":
        errors.append(f"{prefix} Item_Description must be a non-empty string.")

    quantity = item.get("Quantity")
    integral = is_number(quantity) and (
        isinstance(quantity, int) or float(quantity).is_integer()
    )
    if not integral or quantity < 1:
        errors.append(
            f"{prefix} Quantity must be an integer greater than or equal to 1."
        )

    rate = item.get("Rate")
    if not is_number(rate) or rate < 0:
        errors.append(f"{prefix} Rate must be a non-negative number.")

    line_total = item.get("Line_Total")
    if not is_number(line_total) or line_total < 0:
        errors.append(f"{prefix} Line_Total must be a non-negative number.")
    return errors


def _check_non_negative(errors, data, field, label):
    value = data.get(field)
    if value is None or value == "":
        return
    if not is_number(value) or value < 0:
        errors.append(f"{label} must be a non-negative number.")


def validate_invoice(data) -> List[str]:
    if not isinstance(data, dict):
        return ["Request body must be a JSON object."]

    errors: List[str] = []
    if data.get("Document_Type") not in DOCUMENT_TYPES:
        errors.append("Document type must be either Invoice or Quotation.")

    if _is_blank(data.get("Customer_ID")):
        errors.append("Customer ID is required.")

    items = data.get("Items")
    if not isinstance(items, list) or len(items) == 0:
        errors.append("At least one item is required in the invoice/quotation.")
    else:
        for index, item in enumerate(items):
            errors.extend(validate_line_item(item, index))

    _check_non_negative(errors, data, "Discount_Price", "Discount")
    _check_non_negative(errors, data, "Advance_Payment", "Advance payment")
    _check_choice(errors, data, "Payment_Method", PAYMENT_METHODS, "Payment method")

    raw_date = data.get("Date", data.get("invoiceDateInput"))
    if not _is_blank(raw_date) and parse_business_date(raw_date) is None:
        errors.append(
            'Invalid date format provided. Please use a valid date string (e.g., "2025-05-27").'
        )
    return errors


def validate_payment_update(data) -> List[str]:
    if not isinstance(data, dict):
        return ["Request body must be a JSON object."]

    # A key that is present must hold a valid value, blanks included
    errors: List[str] = []
    status = data.get("Payment_Status")
    advance = data.get("Advance_Payment")
    if status is None and advance is None:
        errors.append("Provide Payment_Status and/or Advance_Payment to update.")
    if status is not None and status not in PAYMENT_STATUSES:
        errors.append(f"Payment status must be one of: {', '.join(PAYMENT_STATUSES)}")
    if advance is not None and (not is_number(advance) or advance < 0):
        errors.append("Advance payment must be a non-negative number.")
    return errors
