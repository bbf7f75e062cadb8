# noqa: E402
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# Under pytest only tests/.env.test is read
if "pytest" in sys.modules or os.environ.get("TESTING") == "True":
    test_env_path = Path(__file__).parent.parent / "tests" / ".env.test"
    if test_env_path.exists():
        load_dotenv(test_env_path, override=True)
else:
    load_dotenv()


def is_production_database(db_url: str) -> bool:
    """Check if a database URL appears to be production."""
    if not db_url:
        return False

    dangerous_patterns = [
        "rlwy.net",
        "railway.internal",
        "production",
        "live",
        "amazonaws.com",
        "azure.com",
        "mongodb.net",
    ]

    for pattern in dangerous_patterns:
        if pattern in db_url.lower():
            return True
    return False


def normalize_database_url(url: str) -> str:
    url = (url or "").strip()
    if url.startswith("mysql://"):
        return url.replace("mysql://", "mysql+pymysql://", 1)
    return url


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


class Config:
    SQLALCHEMY_DATABASE_URI = normalize_database_url(
        os.environ.get("DATABASE_URL", "sqlite:///invoice_app.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get("SECRET_KEY", "supersecretdevkey123")
    TESTING = False

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS", "http://localhost:5173,http://192.168.1.5:5173"
        ).split(",")
        if origin.strip()
    ]
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Identifier generation
    BARCODE_MAX_ATTEMPTS = _int_env("BARCODE_MAX_ATTEMPTS", 50)

    # Laser Cutting is billed per minute of machine time (LKR)
    LASER_CUTTING_RATE_PER_MINUTE = _int_env("LASER_CUTTING_RATE_PER_MINUTE", 60)

    # Printed on every invoice / quotation
    COMPANY_NAME = os.environ.get(
        "COMPANY_NAME", "Orgalasser Cutting Wedding Cards &"
    )
    COMPANY_SUBTITLE = os.environ.get("COMPANY_SUBTITLE", "Graphic Items Pvt. Ltd")
    COMPANY_REGISTRATION = os.environ.get("COMPANY_REGISTRATION", "PV00204620")
    COMPANY_ADDRESS = os.environ.get(
        "COMPANY_ADDRESS",
        "325/D Summer park, Batagama South, Kandana, 11320, Sri Lanka.",
    )
    COMPANY_PHONES = os.environ.get(
        "COMPANY_PHONES", "Tel: 0112236311 | Mob: 0714421095 / 0716520030"
    )
    COMPANY_EMAIL = os.environ.get("COMPANY_EMAIL", "orgalaser@gmail.com")
    COMPANY_LEGAL_NAME = os.environ.get(
        "COMPANY_LEGAL_NAME", "Orgalaser Cutting Wedding Cards & Graphic Items Pvt. Ltd."
    )
    BANK_NAME = os.environ.get("BANK_NAME", "Commercial Bank of Ceylon PLC")
    BANK_ACCOUNT_NUMBER = os.environ.get("BANK_ACCOUNT_NUMBER", "1000666319")
    BANK_CODE = os.environ.get("BANK_CODE", "031")
    SALESPERSON = os.environ.get("SALESPERSON", "Mr. Yuvindu")
    CURRENCY = os.environ.get("CURRENCY", "LKR")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = normalize_database_url(
        os.environ.get("TEST_DATABASE_URL", "sqlite://")
    )
    SECRET_KEY = "test-secret-key-for-testing-only"
    LOG_LEVEL = "DEBUG"

    @property
    def is_safe_for_testing(self):
        """Double-check that we're not using production database in tests."""
        return not is_production_database(self.SQLALCHEMY_DATABASE_URI)
