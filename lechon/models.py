"""
Lechon Slots Models

Orders and the cooking slots (ovens/pits) that roast them.
Features:
- Slots with a fixed capacity and an ordered list of occupying orders
- Occupancy-derived slot status (available/occupied) next to operator-set
  maintenance states
- Append-only cooking history per slot
- Orders with lechon type, weight, payment and schedule details
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class TimeStampedModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# =============================================================================
# Slots
# =============================================================================

class Slot(TimeStampedModel):
    """
    Physical cooking slot (oven or pit).
    Holds up to ``capacity`` orders at once.
    """

    STATUS_AVAILABLE = 'available'
    STATUS_OCCUPIED = 'occupied'
    STATUS_MAINTENANCE = 'maintenance'
    STATUS_OUT_OF_ORDER = 'out_of_order'

    STATUS_CHOICES = [
        (STATUS_AVAILABLE, _('Available')),
        (STATUS_OCCUPIED, _('Occupied')),
        (STATUS_MAINTENANCE, _('Maintenance')),
        (STATUS_OUT_OF_ORDER, _('Out of Order')),
    ]

    # Statuses recomputed from occupancy; the rest are operator-set
    MANAGED_STATUSES = (STATUS_AVAILABLE, STATUS_OCCUPIED)

    TYPE_CHOICES = [
        ('whole_pig', _('Whole Pig')),
        ('chicken', _('Chicken')),
        ('pig_belly', _('Pig Belly')),
        ('whole_cow', _('Whole Cow')),
        ('multi_purpose', _('Multi Purpose')),
    ]

    name = models.CharField(max_length=50, unique=True, verbose_name=_('Name'))
    slot_type = models.CharField(
        max_length=20, choices=TYPE_CHOICES,
        default='multi_purpose', verbose_name=_('Type'),
    )
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES,
        default=STATUS_AVAILABLE, verbose_name=_('Status'),
    )
    capacity = models.PositiveIntegerField(
        default=1, validators=[MinValueValidator(1)],
        verbose_name=_('Capacity'),
    )
    current_order_ids = models.JSONField(
        default=list, blank=True, editable=False,
        verbose_name=_('Current Orders'),
    )
    notes = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Notes'))

    # Bumped on every write, compared on assignment writes
    version = models.PositiveIntegerField(default=0, editable=False)

    class Meta:
        db_table = 'lechon_slot'
        verbose_name = _('Slot')
        verbose_name_plural = _('Slots')
        ordering = ['name']
        indexes = [
            models.Index(fields=['status'], name='lechon_slot_status_idx'),
            models.Index(fields=['slot_type'], name='lechon_slot_type_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if self._state.adding:
            super().save(*args, **kwargs)
            return

        # Bumped in the database so a stale instance cannot roll it back
        self.version = models.F('version') + 1
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'version' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['version']
        super().save(*args, **kwargs)
        self.refresh_from_db(fields=['version'])

    # ---- Derived ----

    @property
    def occupancy(self):
        return len(self.current_order_ids)

    @property
    def can_accept_orders(self):
        return self.status == self.STATUS_AVAILABLE and self.occupancy < self.capacity

    @property
    def available_capacity(self):
        return max(0, self.capacity - self.occupancy)

    @property
    def is_managed(self):
        return self.status in self.MANAGED_STATUSES

    @property
    def current_orders(self):
        """Occupying orders, in the order they were assigned."""
        by_id = {
            str(order.pk): order
            for order in Order.objects.filter(pk__in=self.current_order_ids)
        }
        return [by_id[oid] for oid in self.current_order_ids if oid in by_id]

    def has_order(self, order_id):
        return str(order_id) in self.current_order_ids


# =============================================================================
# Orders
# =============================================================================

class Order(TimeStampedModel):
    """Customer lechon order."""

    STATUS_PENDING = 'pending'
    STATUS_CONFIRMED = 'confirmed'
    STATUS_PREPARING = 'preparing'
    STATUS_COOKING = 'cooking'
    STATUS_COOKED = 'cooked'
    STATUS_PACKED = 'packed'
    STATUS_PICKED_UP = 'picked_up'
    STATUS_READY = 'ready'
    STATUS_DELIVERED = 'delivered'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_PENDING, _('Pending')),
        (STATUS_CONFIRMED, _('Confirmed')),
        (STATUS_PREPARING, _('Preparing')),
        (STATUS_COOKING, _('Cooking')),
        (STATUS_COOKED, _('Cooked')),
        (STATUS_PACKED, _('Packed')),
        (STATUS_PICKED_UP, _('Picked Up')),
        (STATUS_READY, _('Ready')),
        (STATUS_DELIVERED, _('Delivered')),
        (STATUS_CANCELLED, _('Cancelled')),
    ]

    ORDER_TYPE_CHOICES = [
        ('order', _('Order')),
        ('labor', _('Labor')),
    ]

    LECHON_TYPE_CHOICES = [
        ('whole_pig', _('Whole Pig')),
        ('chicken', _('Chicken')),
        ('pig_belly', _('Pig Belly')),
        ('whole_cow', _('Whole Cow')),
    ]

    # Identification
    code = models.CharField(max_length=20, blank=True, default='', db_index=True, verbose_name=_('Code'))
    first_name = models.CharField(max_length=50, blank=True, default='', verbose_name=_('First Name'))
    last_name = models.CharField(max_length=50, verbose_name=_('Last Name'))

    # Order info
    order_type = models.CharField(
        max_length=10, choices=ORDER_TYPE_CHOICES,
        default='order', verbose_name=_('Order Type'),
    )
    lechon_type = models.CharField(
        max_length=20, choices=LECHON_TYPE_CHOICES,
        verbose_name=_('Lechon Type'),
    )
    number_kilos = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True,
        validators=[MaxValueValidator(Decimal('100'))],
        verbose_name=_('Kilos'),
    )
    special_instructions = models.TextField(max_length=500, blank=True, default='')

    # Financial
    price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        verbose_name=_('Price'),
    )
    down_payment = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))],
        verbose_name=_('Down Payment'),
    )
    is_paid = models.BooleanField(default=False, verbose_name=_('Paid'))

    # Schedule
    date_received = models.DateField(verbose_name=_('Date Received'))
    time_received = models.TimeField(verbose_name=_('Time Received'))
    date_cooked = models.DateField(verbose_name=_('Date Cooked'))
    time_cooked = models.TimeField(verbose_name=_('Time Cooked'))

    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES,
        default=STATUS_PENDING, verbose_name=_('Status'),
    )

    # Slot assignment, written only by SlotService
    slot = models.ForeignKey(
        Slot, on_delete=models.PROTECT,
        null=True, blank=True,
        related_name='occupants', verbose_name=_('Slot'),
    )
    cooking_date = models.DateTimeField(null=True, blank=True, verbose_name=_('Cooking Started'))
    cooked_date = models.DateTimeField(null=True, blank=True, verbose_name=_('Cooking Ended'))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='lechon_orders',
        verbose_name=_('Created By'),
    )

    class Meta:
        db_table = 'lechon_order'
        verbose_name = _('Order')
        verbose_name_plural = _('Orders')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='lechon_order_status_idx'),
            models.Index(fields=['date_cooked'], name='lechon_order_cooked_idx'),
        ]

    def __str__(self):
        if self.code:
            return f"Order {self.code}"
        return f"Order {self.full_name}"

    # ---- Properties ----

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def balance_due(self):
        if self.price is None:
            return Decimal('0.00')
        return max(Decimal('0.00'), self.price - self.down_payment)

    @property
    def is_cooking(self):
        return self.slot_id is not None

    @property
    def cooking_minutes(self):
        if not self.cooking_date:
            return None
        end = self.cooked_date or timezone.now()
        return int((end - self.cooking_date).total_seconds() / 60)


# =============================================================================
# Cooking History
# =============================================================================

class SlotHistory(TimeStampedModel):
    """One cooking session of an order in a slot. Rows are never deleted."""

    slot = models.ForeignKey(
        Slot, on_delete=models.CASCADE,
        related_name='history', verbose_name=_('Slot'),
    )
    order = models.ForeignKey(
        Order, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='cooking_sessions', verbose_name=_('Order'),
    )
    start_cooking = models.DateTimeField(verbose_name=_('Start Cooking'))
    end_cooking = models.DateTimeField(null=True, blank=True, verbose_name=_('End Cooking'))

    class Meta:
        db_table = 'lechon_slot_history'
        verbose_name = _('Cooking Session')
        verbose_name_plural = _('Cooking History')
        ordering = ['start_cooking', 'created_at']
        indexes = [
            models.Index(fields=['slot', 'end_cooking'], name='lechon_hist_open_idx'),
        ]

    def __str__(self):
        return f"{self.slot} / {self.order_id} @ {self.start_cooking:%Y-%m-%d %H:%M}"

    @property
    def is_open(self):
        return self.end_cooking is None

    @property
    def duration_minutes(self):
        if self.end_cooking is None:
            return None
        return int((self.end_cooking - self.start_cooking).total_seconds() / 60)
