from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    DECIMAL,
    DateTime,
    Enum,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

Base = declarative_base()

CUSTOMER_TYPES = ("Production", "In-store", "Wedding Invitation Maker")
JOB_TYPES = ("Wedding Invitations", "Shoe Laser Cutting", "Laser Cutting")
PRODUCT_CATEGORIES = ("Shoe Laser Cutting", "Wedding Invitations", "Laser Cutting")
RECORD_STATUSES = ("Active", "Inactive")
DOCUMENT_TYPES = ("Invoice", "Quotation")
PAYMENT_METHODS = ("Cash", "Cheque", "Online Transfer", "Credit Card")
PAYMENT_STATUSES = ("Unpaid", "Paid", "Partially Paid")


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = (Index("ix_customers_phone_number", "phone_number"),)

    id = mapped_column(Integer, primary_key=True)
    customer_type = mapped_column(
        Enum(*CUSTOMER_TYPES, name="customer_type"), nullable=False
    )
    full_name = mapped_column(String(255), nullable=False)
    contact_person = mapped_column(String(255))
    email = mapped_column(String(255))
    phone_number = mapped_column(String(10))
    address = mapped_column(String(255))
    tax_id = mapped_column(String(14))
    job_type = mapped_column(Enum(*JOB_TYPES, name="job_type"), nullable=False)
    status = mapped_column(
        Enum(*RECORD_STATUSES, name="customer_status"), nullable=False, default="Active"
    )
    created_at = mapped_column(DateTime, nullable=False, default=datetime.now)
    updated_at = mapped_column(DateTime, nullable=False, default=datetime.now)

    production_index: Mapped[Optional["ProductionCustomer"]] = relationship(
        "ProductionCustomer", uselist=False, back_populates="customer"
    )
    wedding_index: Mapped[Optional["WeddingCustomer"]] = relationship(
        "WeddingCustomer", uselist=False, back_populates="customer"
    )
    instore_index: Mapped[Optional["InstoreCustomer"]] = relationship(
        "InstoreCustomer", uselist=False, back_populates="customer"
    )
    invoices: Mapped[List["Invoice"]] = relationship(
        "Invoice", uselist=True, back_populates="customer"
    )

    @property
    def nickname(self):
        index_row = self.production_index or self.wedding_index
        return index_row.identifier if index_row else None


class ProductionCustomer(Base):
    __tablename__ = "production_customers"
    __table_args__ = (
        ForeignKeyConstraint(
            ["customer_id"], ["customers.id"], ondelete="CASCADE",
            name="fk_production_customer",
        ),
        Index("ix_production_customers_customer_id", "customer_id", unique=True),
        {"comment": "Nickname lookup for Production customers."},
    )

    identifier = mapped_column(String(100), primary_key=True)
    customer_id = mapped_column(Integer, nullable=False)

    customer: Mapped["Customer"] = relationship(
        "Customer", back_populates="production_index"
    )


class WeddingCustomer(Base):
    __tablename__ = "wedding_customers"
    __table_args__ = (
        ForeignKeyConstraint(
            ["customer_id"], ["customers.id"], ondelete="CASCADE",
            name="fk_wedding_customer",
        ),
        Index("ix_wedding_customers_customer_id", "customer_id", unique=True),
        {"comment": "Nickname lookup for Wedding Invitation Maker customers."},
    )

    identifier = mapped_column(String(100), primary_key=True)
    customer_id = mapped_column(Integer, nullable=False)

    customer: Mapped["Customer"] = relationship(
        "Customer", back_populates="wedding_index"
    )


class InstoreCustomer(Base):
    __tablename__ = "instore_customers"
    __table_args__ = (
        ForeignKeyConstraint(
            ["customer_id"], ["customers.id"], ondelete="CASCADE",
            name="fk_instore_customer",
        ),
        Index("ix_instore_customers_customer_id", "customer_id", unique=True),
        {"comment": "Phone number lookup for In-store customers."},
    )

    identifier = mapped_column(String(10), primary_key=True)
    customer_id = mapped_column(Integer, nullable=False)

    customer: Mapped["Customer"] = relationship(
        "Customer", back_populates="instore_index"
    )


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        Index("product_id", "product_id", unique=True),
        Index("barcode_id", "barcode_id", unique=True),
        Index("ix_products_category", "product_category"),
        CheckConstraint("price IS NULL OR price > 0", name="ck_products_price_positive"),
    )

    id = mapped_column(Integer, primary_key=True)
    product_category = mapped_column(
        Enum(*PRODUCT_CATEGORIES, name="product_category"), nullable=False
    )
    product_id = mapped_column(String(255), nullable=False)
    customer_nickname = mapped_column(String(100))
    material_type = mapped_column(String(20))
    unique_code = mapped_column(String(100))
    product_type = mapped_column(String(30))
    sticker_option = mapped_column(String(20))
    sticker_type = mapped_column(String(20))
    sticker_color = mapped_column(String(20))
    auto_generated_id = mapped_column(String(4))
    price = mapped_column(DECIMAL(12, 2))
    barcode_id = mapped_column(String(20), nullable=False)
    status = mapped_column(
        Enum(*RECORD_STATUSES, name="product_status"), nullable=False, default="Active"
    )
    created_at = mapped_column(DateTime, nullable=False, default=datetime.now)
    updated_at = mapped_column(DateTime, nullable=False, default=datetime.now)


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        ForeignKeyConstraint(
            ["customer_id"], ["customers.id"], name="fk_invoice_customer"
        ),
        Index("document_id", "document_id", unique=True),
        Index("ix_invoices_type_date", "document_type", "date"),
        CheckConstraint("total_amount >= 0", name="ck_invoices_total_amount"),
        CheckConstraint("discount_price >= 0", name="ck_invoices_discount_price"),
        CheckConstraint("advance_payment >= 0", name="ck_invoices_advance_payment"),
    )

    id = mapped_column(Integer, primary_key=True)
    document_type = mapped_column(
        Enum(*DOCUMENT_TYPES, name="document_type"), nullable=False
    )
    document_id = mapped_column(String(32), nullable=False)
    customer_id = mapped_column(Integer, nullable=False)
    date = mapped_column(DateTime, nullable=False, default=datetime.now)
    total_amount = mapped_column(DECIMAL(14, 2), nullable=False)
    purchasing_order = mapped_column(String(100))
    payment_term = mapped_column(String(20))
    payment_method = mapped_column(Enum(*PAYMENT_METHODS, name="payment_method"))
    discount_price = mapped_column(DECIMAL(5, 2), nullable=False, default=0)
    advance_payment = mapped_column(DECIMAL(14, 2), nullable=False, default=0)
    payment_status = mapped_column(
        Enum(*PAYMENT_STATUSES, name="payment_status"), nullable=False, default="Unpaid"
    )
    created_at = mapped_column(DateTime, nullable=False, default=datetime.now)
    updated_at = mapped_column(DateTime, nullable=False, default=datetime.now)

    customer: Mapped["Customer"] = relationship("Customer", back_populates="invoices")
    items: Mapped[List["InvoiceItem"]] = relationship(
        "InvoiceItem",
        uselist=True,
        back_populates="invoice",
        order_by="InvoiceItem.position",
        cascade="all, delete-orphan",
    )


class InvoiceItem(Base):
    __tablename__ = "invoice_items"
    __table_args__ = (
        ForeignKeyConstraint(
            ["invoice_id"], ["invoices.id"], ondelete="CASCADE", name="fk_item_invoice"
        ),
        Index("ix_invoice_items_invoice_position", "invoice_id", "position", unique=True),
        CheckConstraint("quantity >= 1", name="ck_invoice_items_quantity"),
        CheckConstraint("rate >= 0", name="ck_invoice_items_rate"),
        CheckConstraint("line_total >= 0", name="ck_invoice_items_line_total"),
    )

    id = mapped_column(Integer, primary_key=True)
    invoice_id = mapped_column(Integer, nullable=False)
    position = mapped_column(Integer, nullable=False)
    item_description = mapped_column(String(500), nullable=False)
    quantity = mapped_column(Integer, nullable=False)
    rate = mapped_column(DECIMAL(14, 2), nullable=False)
    line_total = mapped_column(DECIMAL(14, 2), nullable=False)

    invoice: Mapped["Invoice"] = relationship("Invoice", back_populates="items")
