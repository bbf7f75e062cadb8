"""
Identifier generation for products and invoices.

Barcode_ID and Document_ID are generate-then-verify schemes. The probe only
narrows the window; the unique indexes on ``products.barcode_id`` and
``invoices.document_id`` are what actually reject a duplicate that slips
through under concurrent writers.
"""

import random
from datetime import datetime, time

from sqlalchemy import func, select

from ..errors import IdentifierExhaustedError
from ..models import Invoice, Product
from .validation import PRODUCT_VARIANTS

LASER_CUTTING_ID = "LC"
DOCUMENT_PREFIXES = {"Invoice": "OLCI", "Quotation": "OLCQ"}
DEFAULT_BARCODE_ATTEMPTS = 50

_system_random = random.SystemRandom()


def generate_barcode_id(session, category, rng=None, max_attempts=DEFAULT_BARCODE_ATTEMPTS):
    """
    Return an unused ``ORGA-{prefix}-{NNNN}`` barcode for ``category``.

    Laser Cutting is a singleton product and always gets the constant "LC".
    Raises IdentifierExhaustedError after ``max_attempts`` collisions.
    """
    if category == "Laser Cutting":
        return LASER_CUTTING_ID

    variant = PRODUCT_VARIANTS.get(category)
    prefix = variant.barcode_prefix if variant else "UNKNOWN"
    rng = rng or _system_random

    for _ in range(max_attempts):
        candidate = f"ORGA-{prefix}-{rng.randint(0, 9999):04d}"
        taken = session.scalar(
            select(Product.id).where(Product.barcode_id == candidate).limit(1)
        )
        if taken is None:
            return candidate

    raise IdentifierExhaustedError(
        f"Could not find a free {prefix} barcode after {max_attempts} attempts."
    )


def build_product_id(category, fields, auto_generated_id=None):
    if category == "Shoe Laser Cutting":
        return "SLC-{}-{}-{}".format(
            fields["Customer_Nickname"], fields["Material_Type"], fields["Unique_Code"]
        )
    if category == "Wedding Invitations":
        sticker = (
            "With Sticker"
            if fields.get("Sticker_Option") == "With Sticker"
            else "Without Sticker"
        )
        return "WI-{}-{}-{}-{}".format(
            fields["Material_Type"], fields["Product_Type"], sticker, auto_generated_id
        )
    if category == "Laser Cutting":
        return LASER_CUTTING_ID
    raise ValueError(f"Unknown product category: {category}")


def next_auto_generated_id(session):
    """Successor of the highest Wedding Invitations Auto_Generated_ID ("0001" if none)."""
    current = session.scalar(
        select(func.max(Product.auto_generated_id)).where(
            Product.product_category == "Wedding Invitations"
        )
    )
    if not current:
        return "0001"
    return f"{int(current) + 1:04d}"


def day_bounds(business_date):
    start = datetime.combine(business_date.date(), time.min)
    end = datetime.combine(business_date.date(), time(23, 59, 59, 999000))
    return start, end


def generate_document_id(session, document_type, business_date):
    """``{OLCI|OLCQ}_{YYYY-MM-DD}_{NN}``, NN counting same-type documents on that day."""
    prefix = DOCUMENT_PREFIXES[document_type]
    start, end = day_bounds(business_date)
    count = session.scalar(
        select(func.count(Invoice.id)).where(
            Invoice.document_type == document_type,
            Invoice.date >= start,
            Invoice.date <= end,
        )
    )
    return f"{prefix}_{business_date.strftime('%Y-%m-%d')}_{(count or 0) + 1:02d}"
