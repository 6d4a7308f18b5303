"""
Module settings.

Defaults come from ``module.SETTINGS``; a project can override any key with
a ``LECHON`` dict in its Django settings.
"""

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .module import SETTINGS


def get_setting(name):
    overrides = getattr(settings, 'LECHON', {}) or {}
    if name in overrides:
        return overrides[name]
    try:
        return SETTINGS[name]
    except KeyError:
        raise ImproperlyConfigured(f"Unknown lechon setting: {name}")


def get_post_cooking_status():
    from .models import Order

    status = get_setting('post_cooking_status')
    if status not in dict(Order.STATUS_CHOICES):
        raise ImproperlyConfigured(
            f"post_cooking_status must be an order status, got {status!r}"
        )
    return status
