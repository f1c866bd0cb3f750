import base64
import os
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from pathlib import Path

# Settings are read lazily, but they must be in place before anything calls get_settings()
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPER_ADMIN_EMAIL"] = "admin@example.com"
os.environ["IDENTITY_WEBHOOK_SECRET"] = "whsec_" + base64.b64encode(b"storefront-test-webhook-secret").decode()
os.environ["AUTH_JWT_KEY"] = "storefront-test-session-signing-key-0123456789"
os.environ["AUTH_JWT_ALGORITHMS"] = '["HS256"]'
os.environ["ENFORCE_CATALOG_PRICES"] = "false"

import jwt  # noqa: E402
import pytest  # noqa: E402
from svix.webhooks import Webhook  # noqa: E402

from catalog.product.creation import CreateProduct, NewVariant, create_product  # noqa: E402
from identity.auth import reset_session_verifier  # noqa: E402
from identity.user.sync import IdentityProfile, sync_user  # noqa: E402
from identity.webhook import reset_verifier  # noqa: E402
from shared.config import get_settings, reset_settings  # noqa: E402
from shared.database import Database, reset_database, set_database  # noqa: E402

ADMIN_EMAIL = "admin@example.com"


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def _reset_adapters():
    """Every test starts from the environment above with default adapters."""
    reset_settings()
    reset_verifier()
    reset_session_verifier()
    yield
    reset_settings()
    reset_verifier()
    reset_session_verifier()


@pytest.fixture()
def database():
    """A fresh in-memory database installed as the process-wide one."""
    db = Database("sqlite://")
    db.init()
    db.create_all()
    set_database(db)
    yield db
    reset_database()


@pytest.fixture()
def session(database):
    db_session = database.session()
    yield db_session
    db_session.close()


@pytest.fixture()
def make_token():
    def _make_token(user_id: str, expires_in: int = 3600, **claims) -> str:
        settings = get_settings()
        payload = {"sub": user_id, "exp": datetime.now(UTC) + timedelta(seconds=expires_in), **claims}
        return jwt.encode(payload, settings.auth_jwt_key, algorithm=settings.auth_jwt_algorithms[0])

    return _make_token


@pytest.fixture()
def auth_headers(make_token):
    def _auth_headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _auth_headers


@pytest.fixture()
def make_user(session):
    def _make_user(user_id: str = "user_customer", email: str = "shopper@example.com", **fields):
        profile = IdentityProfile(user_id=user_id, email=email, **fields)
        return sync_user(session, profile, ADMIN_EMAIL)

    return _make_user


@pytest.fixture()
def make_product(session):
    def _make_product(
        sku: str = "TEE-BLK",
        slug: str = "black-tee",
        price: str = "19.99",
        variants: list[NewVariant] | None = None,
        **fields,
    ):
        defaults = {
            "name": "Black Tee",
            "description": "Heavyweight cotton tee",
            "cost": Decimal("7.50"),
            "brand_id": "brand-acme",
        }
        defaults.update(fields)
        command = CreateProduct(
            sku=sku,
            slug=slug,
            price=Decimal(price),
            variants=variants if variants is not None else [NewVariant(sku=f"{sku}-M", color_id="black", size_id="m")],
            **defaults,
        )
        return create_product(session, command)

    return _make_product


@pytest.fixture()
def webhook_headers():
    """Svix delivery headers for a body, signed with the configured endpoint secret."""

    def _webhook_headers(body: bytes, msg_id: str = "msg_1", signed_at: datetime | None = None, secret=None):
        signed_at = signed_at or datetime.now(UTC)
        webhook = Webhook(secret or get_settings().identity_webhook_secret)
        return {
            "svix-id": msg_id,
            "svix-timestamp": str(int(signed_at.timestamp())),
            "svix-signature": webhook.sign(msg_id, signed_at, body.decode()),
        }

    return _webhook_headers
