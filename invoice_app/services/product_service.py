from datetime import datetime
from decimal import Decimal

from sqlalchemy import select

from ..errors import ConflictError, NotFoundError, ValidationFailed
from ..models import Product
from .identifiers import (
    DEFAULT_BARCODE_ATTEMPTS,
    LASER_CUTTING_ID,
    build_product_id,
    generate_barcode_id,
    next_auto_generated_id,
)
from .validation import PRODUCT_VARIANTS, is_number, validate_product

LASER_CUTTING_SINGLETON_MESSAGE = (
    "Only one Laser Cutting product is allowed at a time. "
    "Please delete the existing one first."
)

# Fields that only make sense for some categories; cleared for the others
CATEGORY_FIELDS = {
    "Shoe Laser Cutting": ("Customer_Nickname", "Material_Type", "Unique_Code"),
    "Wedding Invitations": (
        "Product_Type",
        "Material_Type",
        "Sticker_Option",
        "Sticker_Type",
        "Sticker_Color",
    ),
    "Laser Cutting": (),
}


def _decimal_or_none(value):
    if value is None or value == "":
        return None
    return Decimal(str(value))


def _money(value):
    return float(value) if value is not None else None


def serialize_product(product):
    return {
        "id": product.id,
        "Product_Category": product.product_category,
        "Product_ID": product.product_id,
        "Customer_Nickname": product.customer_nickname,
        "Material_Type": product.material_type,
        "Unique_Code": product.unique_code,
        "Product_Type": product.product_type,
        "Sticker_Option": product.sticker_option,
        "Sticker_Type": product.sticker_type,
        "Sticker_Color": product.sticker_color,
        "Auto_Generated_ID": product.auto_generated_id,
        "Price": _money(product.price),
        "Barcode_ID": product.barcode_id,
        "Status": product.status,
        "Created_At": product.created_at.isoformat() if product.created_at else None,
        "Updated_At": product.updated_at.isoformat() if product.updated_at else None,
    }


def _apply_fields(product, data):
    category = data["Product_Category"]
    allowed = CATEGORY_FIELDS[category]

    def pick(field):
        value = data.get(field) if field in allowed else None
        if isinstance(value, str):
            value = value.strip() or None
        return value

    product.product_category = category
    product.customer_nickname = pick("Customer_Nickname")
    product.material_type = pick("Material_Type")
    product.unique_code = pick("Unique_Code")
    product.product_type = pick("Product_Type")
    product.sticker_option = pick("Sticker_Option")
    with_sticker = product.sticker_option == "With Sticker"
    product.sticker_type = pick("Sticker_Type") if with_sticker else None
    product.sticker_color = pick("Sticker_Color") if with_sticker else None
    product.price = (
        _decimal_or_none(data.get("Price")) if PRODUCT_VARIANTS[category].priced else None
    )


def _normalized_fields(data):
    return {
        key: value.strip() if isinstance(value, str) else value
        for key, value in data.items()
    }


def _ensure_laser_cutting_free(session, exclude_id=None):
    stmt = select(Product.id).where(Product.product_category == "Laser Cutting")
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    if session.scalar(stmt.limit(1)) is not None:
        raise ValidationFailed(LASER_CUTTING_SINGLETON_MESSAGE)


def _ensure_product_id_free(session, product_id, exclude_id=None):
    stmt = select(Product.id).where(Product.product_id == product_id)
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    if session.scalar(stmt.limit(1)) is not None:
        raise ConflictError(
            f"Product ID {product_id} is already in use. Please use a unique Product ID."
        )


def list_products(session):
    return session.scalars(select(Product).order_by(Product.id)).all()


def get_product(session, product_id):
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError(
            "Product not found. Please check the product ID and try again."
        )
    return product


def find_by_barcode(session, barcode_id):
    return session.scalar(select(Product).where(Product.barcode_id == barcode_id))


def create_product(session, data, rng=None, max_attempts=DEFAULT_BARCODE_ATTEMPTS):
    errors = validate_product(data)
    if errors:
        raise ValidationFailed(errors)

    fields = _normalized_fields(data)
    category = fields["Product_Category"]
    auto_generated_id = None

    if PRODUCT_VARIANTS[category].singleton:
        _ensure_laser_cutting_free(session)
    if category == "Wedding Invitations":
        auto_generated_id = next_auto_generated_id(session)

    product_id = build_product_id(category, fields, auto_generated_id)
    _ensure_product_id_free(session, product_id)

    now = datetime.now()
    product = Product(
        product_id=product_id,
        auto_generated_id=auto_generated_id,
        barcode_id=generate_barcode_id(session, category, rng=rng, max_attempts=max_attempts),
        status="Active",
        created_at=now,
        updated_at=now,
    )
    _apply_fields(product, fields)
    session.add(product)
    session.flush()
    return product


def update_product(session, product_pk, data, rng=None, max_attempts=DEFAULT_BARCODE_ATTEMPTS):
    """
    Replace a product's fields and re-derive its Product_ID.

    Auto_Generated_ID is carried over from the stored record. The barcode is
    kept as long as the category does not change, since it is already printed
    on labels.
    """
    errors = validate_product(data)
    if errors:
        raise ValidationFailed(errors)

    product = get_product(session, product_pk)
    fields = _normalized_fields(data)
    category = fields["Product_Category"]

    if PRODUCT_VARIANTS[category].singleton:
        _ensure_laser_cutting_free(session, exclude_id=product.id)

    auto_generated_id = None
    if category == "Wedding Invitations":
        auto_generated_id = product.auto_generated_id or next_auto_generated_id(session)

    product_id = build_product_id(category, fields, auto_generated_id)
    _ensure_product_id_free(session, product_id, exclude_id=product.id)

    if product.product_category != category:
        product.barcode_id = generate_barcode_id(
            session, category, rng=rng, max_attempts=max_attempts
        )

    _apply_fields(product, fields)
    product.product_id = product_id
    product.auto_generated_id = auto_generated_id
    product.status = fields.get("Status") or "Active"
    product.updated_at = datetime.now()
    session.flush()
    return product


def delete_product(session, product_pk):
    product = get_product(session, product_pk)
    session.delete(product)
    session.flush()


def _positive_int(value):
    if not is_number(value):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    if value < 1:
        return None
    return int(value)


def _format_amount(value):
    value = Decimal(str(value))
    return format(value.normalize(), "f") if value == value.to_integral() else str(value)


def scan_barcode(session, data, rate_per_minute=60):
    """
    Turn a scanned barcode into one invoice line item.

    "LC" is billed by machine time: rate = rate_per_minute x Duration plus any
    Material_Cost. Catalog barcodes are billed at the product's price.
    """
    if not isinstance(data, dict):
        raise ValidationFailed("Request body must be a JSON object.")

    barcode_id = data.get("Barcode_ID")
    if not isinstance(barcode_id, str) or not barcode_id.strip():
        raise ValidationFailed("Barcode ID is required.")
    barcode_id = barcode_id.strip()

    quantity = _positive_int(data.get("Quantity"))
    if quantity is None:
        raise ValidationFailed("Quantity must be at least 1.")

    if barcode_id == LASER_CUTTING_ID:
        duration = data.get("Duration")
        if not is_number(duration) or duration <= 0:
            raise ValidationFailed(
                "Duration in minutes is required for Laser Cutting and must be greater than 0."
            )
        material_cost = data.get("Material_Cost")
        if not is_number(material_cost):
            material_cost = 0
        material_cost = max(material_cost, 0)

        base_cost = Decimal(str(rate_per_minute)) * Decimal(str(duration))
        rate = base_cost + Decimal(str(material_cost))
        description = f"Laser Cutting ({_format_amount(duration)} minutes"
        if material_cost:
            description += f", Material Cost: LKR {_format_amount(material_cost)}"
        description += ")"
    elif barcode_id.startswith("ORGA-WI-") or barcode_id.startswith("ORGA-SLC-"):
        label = (
            "Wedding Invitation"
            if barcode_id.startswith("ORGA-WI-")
            else "Shoe Laser Cutting"
        )
        product = find_by_barcode(session, barcode_id)
        if product is None:
            raise NotFoundError(f"{label} product not found for this Barcode ID.")
        rate = product.price if product.price is not None else Decimal("0")
        description = f"{label} ({product.product_id})"
    else:
        raise ValidationFailed(
            "Invalid Barcode ID. It must start with LC, ORGA-WI-, or ORGA-SLC-."
        )

    return {
        "Item_Description": description,
        "Quantity": quantity,
        "Rate": float(rate),
        "Line_Total": float(rate * quantity),
    }
