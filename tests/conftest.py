"""
Pytest configuration and shared fixtures for the invoicing backend tests.
"""

import pytest

from main import create_app
from invoice_app.config import TestingConfig
from invoice_app.extensions import db as database
from invoice_app.models import Base
from invoice_app.services.customer_service import create_customer
from invoice_app.services.product_service import create_product


@pytest.fixture
def app():
    """Create a test app with fresh tables on its own in-memory database."""
    if not TestingConfig().is_safe_for_testing:
        pytest.exit(
            f"Refusing to run tests against {TestingConfig.SQLALCHEMY_DATABASE_URI}"
        )

    app = create_app(TestingConfig)

    with app.app_context():
        Base.metadata.create_all(bind=database.engine)
        yield app
        database.session.remove()
        Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def db_session(app):
    return database.session


@pytest.fixture
def instore_data():
    return {
        "Customer_Type": "In-store",
        "Full_Name": "John Doe",
        "Phone_Number": "0771234567",
        "Email": "john@orgalaser.lk",
        "Address": "12 Galle Road, Colombo",
        "Job_Type": "Wedding Invitations",
    }


@pytest.fixture
def production_data():
    return {
        "Customer_Type": "Production",
        "Full_Name": "Jane Smith",
        "Nickname": "JSmith",
        "Tax_ID": "123456789-7000",
        "Job_Type": "Shoe Laser Cutting",
    }


@pytest.fixture
def slc_data():
    return {
        "Product_Category": "Shoe Laser Cutting",
        "Customer_Nickname": "JSmith",
        "Material_Type": "Leather",
        "Unique_Code": "001",
        "Price": 5000,
    }


@pytest.fixture
def wi_data():
    return {
        "Product_Category": "Wedding Invitations",
        "Product_Type": "Invitation Card",
        "Material_Type": "Wood",
        "Sticker_Option": "With Sticker",
        "Sticker_Type": "Normal",
        "Sticker_Color": "Gold",
        "Price": 2000,
    }


@pytest.fixture
def sample_customer(db_session, instore_data):
    """An In-store customer keyed by phone number."""
    customer = create_customer(db_session, instore_data)
    db_session.commit()
    return customer


@pytest.fixture
def sample_production_customer(db_session, production_data):
    """A Production customer keyed by nickname."""
    customer = create_customer(db_session, production_data)
    db_session.commit()
    return customer


@pytest.fixture
def sample_product(db_session, slc_data):
    """A priced Shoe Laser Cutting product."""
    product = create_product(db_session, slc_data)
    db_session.commit()
    return product


@pytest.fixture
def line_items():
    return [
        {
            "Item_Description": "Shoe Laser Cutting (SLC-JSmith-Leather-001)",
            "Quantity": 2,
            "Rate": 5000,
            "Line_Total": 10000,
        },
        {
            "Item_Description": "Laser Cutting (10 minutes)",
            "Quantity": 1,
            "Rate": 600,
            "Line_Total": 600,
        },
    ]
