import logging
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# In case pytest tests/ -v -s is run, it will only read .env.test
if "pytest" in sys.modules or os.environ.get("TESTING") == "True":
    test_env_path = Path(__file__).parent.parent / "tests" / ".env.test"
    if test_env_path.exists():
        load_dotenv(test_env_path, override=True)
else:
    load_dotenv()

TESTING = os.environ.get("TESTING") == "True"
FLASK_ENV = os.environ.get("FLASK_ENV")


def _as_bool(value, default=False):
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


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
    ]

    for pattern in dangerous_patterns:
        if pattern in db_url.lower():
            return True
    return False


def is_test_database(db_url: str) -> bool:
    """Check if a database URL appears to be for testing."""
    if not db_url:
        return False

    if db_url.startswith("sqlite"):
        return True

    safe_patterns = ["storefront_test", "localhost", "127.0.0.1", "test"]

    for pattern in safe_patterns:
        if pattern in db_url.lower():
            return True
    return False


def resolve_database_url():
    if TESTING or FLASK_ENV == "testing":
        url = os.environ.get("DATABASE_TEST_URL") or "sqlite://"

        if is_production_database(url):
            raise RuntimeError(
                "Refusing to run tests against a production-looking database"
            )
        if not is_test_database(url):
            logger.warning(
                "Database URL doesn't look like a test database; "
                "consider adding 'test' to the database name"
            )
    else:
        url = os.environ.get("DATABASE_URL")

        if not url:
            if FLASK_ENV == "development":
                url = "sqlite:///storefront_dev.db"
                logger.warning("DATABASE_URL not set, using local sqlite database")
            else:
                raise ValueError(
                    "DATABASE_URL environment variable is required for production"
                )

        if is_production_database(url):
            logger.warning("Using production database - be careful!")

    # PyMySQL is the MySQL driver
    if url.startswith("mysql://"):
        url = url.replace("mysql://", "mysql+pymysql://", 1)
    return url


def _mask(url):
    if url and "@" in url:
        protocol = url.split("://")[0]
        return f"{protocol}://****:****@{url.split('@', 1)[1]}"
    return url


url = resolve_database_url()


class Config:
    SQLALCHEMY_DATABASE_URI = url
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}
    SECRET_KEY = os.environ.get("SECRET_KEY", "supersecretdevkey123")

    TESTING = TESTING
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Staff inbox for new reservation alerts; a `settings` row with key
    # "email" takes precedence at send time.
    STAFF_NOTIFICATION_EMAIL = os.environ.get("STAFF_NOTIFICATION_EMAIL")

    # Email (Resend)
    EMAIL_ENABLED = _as_bool(os.environ.get("EMAIL_ENABLED"), default=not TESTING)
    RESEND_API_KEY = os.environ.get("RESEND_API_KEY")
    RESEND_FROM_EMAIL = os.environ.get("RESEND_FROM_EMAIL", "onboarding@resend.dev")

    # Background notification queue
    NOTIFICATIONS_ASYNC = _as_bool(
        os.environ.get("NOTIFICATIONS_ASYNC"), default=not TESTING
    )
    NOTIFICATION_MAX_ATTEMPTS = int(os.environ.get("NOTIFICATION_MAX_ATTEMPTS", "3"))
    NOTIFICATION_RETRY_SECONDS = int(
        os.environ.get("NOTIFICATION_RETRY_SECONDS", "30")
    )

    TRANSACTION_KEY_MAX_ATTEMPTS = int(
        os.environ.get("TRANSACTION_KEY_MAX_ATTEMPTS", "5")
    )

    # Absolute base for product images; falls back to the request host
    ASSET_BASE_URL = os.environ.get("ASSET_BASE_URL")


def log_config_summary(config):
    logger.info("=" * 70)
    logger.info("CONFIGURATION SUMMARY")
    logger.info("Environment: %s", FLASK_ENV or "production")
    logger.info("Testing Mode: %s", config.get("TESTING"))
    logger.info("Database: %s", _mask(config.get("SQLALCHEMY_DATABASE_URI")))
    logger.info("Staff email: %s", config.get("STAFF_NOTIFICATION_EMAIL"))
    logger.info(
        "Email enabled: %s (async: %s)",
        config.get("EMAIL_ENABLED"),
        config.get("NOTIFICATIONS_ASYNC"),
    )
    logger.info("=" * 70)
