from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.catalog.models import Category, Product

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Sessions and throttle counters live in the cache; start every test clean."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def user():
    return User.objects.create_user(
        username="shopper", email="shopper@example.com", password="testpass123"
    )


@pytest.fixture()
def other_user():
    return User.objects.create_user(username="other", password="testpass123")


@pytest.fixture()
def staff_user():
    return User.objects.create_user(username="staff", password="testpass123", is_staff=True)


@pytest.fixture()
def auth_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture()
def category():
    return Category.objects.create(name="Sparklers", slug="sparklers", display_order=1)


@pytest.fixture()
def product_a(category):
    return Product.objects.create(
        name="Golden Sparkler",
        description="Burns bright gold for sixty seconds.",
        price=Decimal("10.00"),
        category=category,
        image_url="https://example.com/a.png",
    )


@pytest.fixture()
def product_b(category):
    return Product.objects.create(
        name="Silver Sparkler",
        description="Crackling silver sparks for any party.",
        price=Decimal("5.00"),
        category=category,
    )


@pytest.fixture()
def shipping_address():
    return {
        "full_name": "Jane Doe",
        "email": "Jane.Doe@Example.com",
        "address_line1": "1 Main Street",
        "address_line2": "",
        "city": "Springfield",
        "postal_code": "12345",
        "country": "USA",
    }
