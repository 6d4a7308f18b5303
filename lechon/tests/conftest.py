"""
Pytest fixtures for Lechon Slots module tests.
"""

import pytest
from datetime import date, time

from lechon.models import Order, Slot


@pytest.fixture
def staff_user(db, django_user_model):
    """Create a regular staff user without slot permissions."""
    return django_user_model.objects.create_user(
        username='cook',
        email='cook@example.com',
        password='1234',
    )


@pytest.fixture
def auth_client(client, staff_user):
    """Return a client logged in as a regular staff user."""
    client.force_login(staff_user)
    return client


@pytest.fixture
def make_slot(db):
    """Factory for cooking slots."""
    counter = {'n': 0}

    def _make_slot(**kwargs):
        counter['n'] += 1
        kwargs.setdefault('name', f"Pit {counter['n']}")
        kwargs.setdefault('capacity', 1)
        return Slot.objects.create(**kwargs)

    return _make_slot


@pytest.fixture
def make_order(db):
    """Factory for pending orders."""
    counter = {'n': 0}

    def _make_order(**kwargs):
        counter['n'] += 1
        kwargs.setdefault('code', f"LC-{counter['n']:03d}")
        kwargs.setdefault('first_name', 'Maria')
        kwargs.setdefault('last_name', 'Santos')
        kwargs.setdefault('lechon_type', 'whole_pig')
        kwargs.setdefault('date_received', date(2026, 10, 1))
        kwargs.setdefault('time_received', time(8, 30))
        kwargs.setdefault('date_cooked', date(2026, 10, 3))
        kwargs.setdefault('time_cooked', time(16, 0))
        return Order.objects.create(**kwargs)

    return _make_order


@pytest.fixture
def pit(make_slot):
    """Create an empty slot that fits two orders."""
    return make_slot(name='Pit A', capacity=2, slot_type='whole_pig')


@pytest.fixture
def oven(make_slot):
    """Create an empty single-order slot."""
    return make_slot(name='Oven 1', capacity=1, slot_type='chicken')


@pytest.fixture
def order(make_order):
    """Create a basic pending order."""
    return make_order()
