import click
from flask import current_app
from sqlalchemy import delete

from .extensions import db
from .models import (
    Base,
    Customer,
    InstoreCustomer,
    Invoice,
    InvoiceItem,
    Product,
    ProductionCustomer,
    WeddingCustomer,
)
from .services.customer_service import create_customer
from .services.product_service import create_product

SAMPLE_CUSTOMERS = [
    {
        "Customer_Type": "In-store",
        "Full_Name": "John Doe",
        "Phone_Number": "123456789",
        "Job_Type": "Wedding Invitations",
        "Status": "Active",
    },
    {
        "Customer_Type": "Production",
        "Full_Name": "Jane Smith",
        "Nickname": "JSmith",
        "Job_Type": "Shoe Laser Cutting",
        "Status": "Active",
    },
    {
        "Customer_Type": "Wedding Invitation Maker",
        "Full_Name": "Wedding Co",
        "Nickname": "WeddingCo",
        "Job_Type": "Laser Cutting",
        "Status": "Active",
    },
]

SAMPLE_PRODUCTS = [
    {
        "Product_Category": "Shoe Laser Cutting",
        "Customer_Nickname": "JSmith",
        "Material_Type": "Leather",
        "Unique_Code": "001",
        "Price": 5000,
    },
    {
        "Product_Category": "Wedding Invitations",
        "Product_Type": "Invitation Card",
        "Material_Type": "Wood",
        "Sticker_Option": "With Sticker",
        "Sticker_Type": "Normal",
        "Sticker_Color": "Gold",
        "Price": 2000,
    },
    {"Product_Category": "Laser Cutting"},
]


def init_db():
    Base.metadata.create_all(bind=db.engine)


def seed_db():
    """Wipe every table and load the sample customers and products."""
    for model in (
        InvoiceItem,
        Invoice,
        ProductionCustomer,
        WeddingCustomer,
        InstoreCustomer,
        Customer,
        Product,
    ):
        db.session.execute(delete(model))

    customers = [create_customer(db.session, data) for data in SAMPLE_CUSTOMERS]
    products = [
        create_product(
            db.session,
            data,
            max_attempts=current_app.config.get("BARCODE_MAX_ATTEMPTS", 50),
        )
        for data in SAMPLE_PRODUCTS
    ]
    db.session.commit()
    return customers, products


def register_commands(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables."""
        init_db()
        click.echo("Database tables created.")

    @app.cli.command("seed")
    def seed_command():
        """Replace all data with the sample customers and products."""
        try:
            customers, products = seed_db()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Seeding failed: {e}")
            raise click.ClickException(f"Seeding failed: {e}")
        click.echo(f"Seeded {len(customers)} customers and {len(products)} products.")
        for product in products:
            click.echo(f"  {product.product_id} -> {product.barcode_id}")
