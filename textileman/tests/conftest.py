"""
Pytest fixtures for Textileman tests.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from textileman.adapters import reset_notification_sender
from textileman.models import Customer, NotificationRecipient, StockType
from textileman.models.enums import NotificationCategory
from textileman.services import StockLedger
from textileman.services.notifications import update_notification_settings


User = get_user_model()

GRAY_DETAILS = {'factory': 'Surat Mills', 'agent': 'Ramesh', 'order_number': 'GO-101'}


@pytest.fixture(autouse=True)
def fresh_sender():
    """Drop the cached notification sender around every test."""
    reset_notification_sender()
    yield
    reset_notification_sender()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='testuser',
        password='testpass123'
    )


@pytest.fixture
def api_client(user):
    """Authenticated API client."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def customer(db):
    """Wholesale customer with a 100 000 credit limit."""
    return Customer.objects.create(
        customer_name='Sharma Textiles',
        customer_type='Wholesale',
        email='orders@sharma.example',
        phone='+919800000001',
        city='Mumbai',
        address='12 Kalbadevi Road',
        credit_limit=Decimal('100000'),
    )


@pytest.fixture
def make_lot(db):
    """
    Factory for gray stock lots.

    Usage:
        lot = make_lot([('Red', 50)])
        lot = make_lot([('Red', 50), ('Blue', 200)], product='Silk Base', status='processing')
    """
    def _make(variants, product='Cotton Base', status=None, stock_type=StockType.GRAY, details=None):
        return StockLedger.create(
            stock_type=stock_type,
            variants=[{'color': color, 'quantity': qty} for color, qty in variants],
            product=product,
            details=details or GRAY_DETAILS,
            batch_number='B-001',
            quality_grade='A',
            status=status,
        )
    return _make


@pytest.fixture
def recipients(db):
    """Two active recipients and one inactive."""
    return [
        NotificationRecipient.objects.create(name='Owner', number='+919811111111', role='owner'),
        NotificationRecipient.objects.create(name='Manager', number='+919822222222', role='manager'),
        NotificationRecipient.objects.create(name='Former', number='+919833333333', is_active=False),
    ]


@pytest.fixture
def notifications_on(db, recipients):
    """Every notification category enabled."""
    return update_notification_settings(**{c: True for c in NotificationCategory.values})


@pytest.fixture
def today():
    """Return today's date."""
    return date.today()


@pytest.fixture
def next_week():
    """Return the date a week from today."""
    return date.today() + timedelta(days=7)
