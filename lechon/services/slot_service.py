"""
Slot Service

Binds orders to cooking slots. This is the only code that writes the
order <-> slot relationship: slot occupancy, slot status, cooking history
and the order's cooking fields all change together here.
"""

import logging
from typing import Dict, Optional, Tuple

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from ..conf import get_post_cooking_status, get_setting
from ..exceptions import (
    AlreadyAssigned,
    CapacityExceeded,
    InvalidRequest,
    NotAssigned,
    NotFound,
    SlotUnavailable,
    StorageFailure,
)
from ..models import Order, Slot, SlotHistory
from ..signals import order_assigned, order_unassigned

logger = logging.getLogger(__name__)


def derive_status(current_count: int, capacity: int) -> str:
    """Slot status implied by occupancy. Only valid for available/occupied slots."""
    if current_count >= capacity:
        return Slot.STATUS_OCCUPIED
    return Slot.STATUS_AVAILABLE


class SlotService:
    """Service for assigning orders to cooking slots."""

    # ---- Lookups ----

    @staticmethod
    def _get_slot(slot_id, for_update: bool = False) -> Slot:
        queryset = Slot.objects.select_for_update() if for_update else Slot.objects.all()
        try:
            return queryset.get(pk=slot_id)
        except (Slot.DoesNotExist, ValidationError):
            raise NotFound('slot')

    @staticmethod
    def _get_order(order_id, for_update: bool = False) -> Order:
        queryset = Order.objects.select_for_update() if for_update else Order.objects.all()
        try:
            return queryset.get(pk=order_id)
        except (Order.DoesNotExist, ValidationError):
            raise NotFound('order')

    @staticmethod
    def _check_can_accept(slot: Slot) -> None:
        if slot.can_accept_orders:
            return
        if not slot.is_managed:
            raise SlotUnavailable(f"Slot {slot.name} is {slot.status}")
        raise CapacityExceeded(f"Slot {slot.name} is at full capacity ({slot.capacity})")

    @staticmethod
    def _write_slot(slot: Slot, order_ids, now) -> bool:
        """
        Compare-and-set the slot's occupancy.

        The write only lands if nobody changed the slot since it was read,
        so a stale capacity check can never overfill it.
        """
        fields = {
            'current_order_ids': order_ids,
            'version': F('version') + 1,
            'updated_at': now,
        }
        if slot.is_managed:
            status = derive_status(len(order_ids), slot.capacity)
            if status != slot.status:
                fields['status'] = status

        written = Slot.objects.filter(pk=slot.pk, version=slot.version).update(**fields)
        return written == 1

    # ---- Assignment ----

    @staticmethod
    def assign_order(slot_id, order_id) -> Slot:
        """
        Put an order into a slot and start its cooking session.

        Raises:
            InvalidRequest: an id is missing
            NotFound: slot or order does not exist
            SlotUnavailable / CapacityExceeded: slot cannot take another order
            AlreadyAssigned: order is already in a slot
            StorageFailure: the database write failed

        Returns:
            The updated Slot
        """
        if not slot_id or not order_id:
            raise InvalidRequest()

        try:
            with transaction.atomic():
                slot, order = SlotService._claim_slot(slot_id, order_id)
        except DatabaseError as exc:
            logger.exception("Assigning order %s to slot %s failed", order_id, slot_id)
            raise StorageFailure(str(exc)) from exc

        logger.info(
            "Order %s assigned to slot %s (%d/%d)",
            order.pk, slot.name, slot.occupancy, slot.capacity,
        )
        transaction.on_commit(
            lambda: order_assigned.send(sender=Slot, slot=slot, order=order)
        )
        return slot

    @staticmethod
    def _claim_slot(slot_id, order_id) -> Tuple[Slot, Order]:
        attempts = get_setting('assign_max_attempts')

        for attempt in range(1, attempts + 1):
            slot = SlotService._get_slot(slot_id, for_update=True)
            order = SlotService._get_order(order_id, for_update=True)
            SlotService._check_can_accept(slot)
            if order.slot_id is not None:
                raise AlreadyAssigned()

            now = timezone.now()
            order_ids = slot.current_order_ids + [str(order.pk)]
            if SlotService._write_slot(slot, order_ids, now):
                break
            logger.info(
                "Slot %s changed while assigning order %s (attempt %d/%d)",
                slot_id, order_id, attempt, attempts,
            )
        else:
            raise StorageFailure(
                f"Slot {slot_id} kept changing, gave up after {attempts} attempts"
            )

        SlotHistory.objects.create(slot=slot, order=order, start_cooking=now)

        claimed = Order.objects.filter(pk=order.pk, slot__isnull=True).update(
            slot=slot,
            status=Order.STATUS_COOKING,
            cooking_date=now,
            cooked_date=None,
            updated_at=now,
        )
        if not claimed:
            # Another request bound the order first; the transaction rolls back
            raise AlreadyAssigned()

        slot.refresh_from_db()
        order.refresh_from_db()
        return slot, order

    # ---- Unassignment ----

    @staticmethod
    def unassign_order(order_id) -> Order:
        """
        Take an order out of its slot and close its cooking session.

        Raises:
            InvalidRequest: the id is missing
            NotFound: order does not exist
            NotAssigned: order is not in any slot
            StorageFailure: the database write failed

        Returns:
            The updated Order
        """
        if not order_id:
            raise InvalidRequest('Order ID is required')

        post_status = get_post_cooking_status()
        try:
            with transaction.atomic():
                slot, order = SlotService._release_slot(order_id, post_status)
        except DatabaseError as exc:
            logger.exception("Unassigning order %s failed", order_id)
            raise StorageFailure(str(exc)) from exc

        logger.info(
            "Order %s left slot %s (%d/%d)",
            order.pk, slot.name, slot.occupancy, slot.capacity,
        )
        transaction.on_commit(
            lambda: order_unassigned.send(sender=Slot, slot=slot, order=order)
        )
        return order

    @staticmethod
    def _release_slot(order_id, post_status: str) -> Tuple[Slot, Order]:
        order = SlotService._get_order(order_id, for_update=True)
        if order.slot_id is None:
            raise NotAssigned()

        attempts = get_setting('assign_max_attempts')
        order_key = str(order.pk)

        for attempt in range(1, attempts + 1):
            slot = SlotService._get_slot(order.slot_id, for_update=True)
            if slot.has_order(order_key):
                order_ids = [oid for oid in slot.current_order_ids if oid != order_key]
            else:
                logger.warning(
                    "Order %s points at slot %s but is not among its current orders",
                    order_key, slot.name,
                )
                order_ids = list(slot.current_order_ids)

            now = timezone.now()
            if SlotService._write_slot(slot, order_ids, now):
                break
            logger.info(
                "Slot %s changed while releasing order %s (attempt %d/%d)",
                slot.pk, order_key, attempt, attempts,
            )
        else:
            raise StorageFailure(
                f"Slot {order.slot_id} kept changing, gave up after {attempts} attempts"
            )

        SlotService._close_session(slot, order, now)

        released = Order.objects.filter(pk=order.pk, slot=slot).update(
            slot=None,
            status=post_status,
            cooked_date=now,
            updated_at=now,
        )
        if not released:
            # Another request released the order first; the transaction rolls back
            raise NotAssigned()

        slot.refresh_from_db()
        order.refresh_from_db()
        return slot, order

    @staticmethod
    def _close_session(slot: Slot, order: Order, now) -> Optional[SlotHistory]:
        """Close the latest open cooking session of ``order`` in ``slot``."""
        open_sessions = list(
            SlotHistory.objects.filter(
                slot=slot, order=order, end_cooking__isnull=True,
            ).order_by('-start_cooking', '-created_at')
        )
        if not open_sessions:
            logger.warning("No open cooking session for order %s in slot %s", order.pk, slot.name)
            return None
        if len(open_sessions) > 1:
            logger.warning(
                "%d open cooking sessions for order %s in slot %s, closing the latest",
                len(open_sessions), order.pk, slot.name,
            )

        session = open_sessions[0]
        session.end_cooking = now
        session.save(update_fields=['end_cooking', 'updated_at'])
        return session

    # ---- Repair ----

    @staticmethod
    @transaction.atomic
    def reconcile() -> Dict[str, int]:
        """
        Repair drift between slots and orders.

        Slot occupancy is authoritative:
        - ids of deleted orders, or of orders already listed by another
          slot, are dropped from the slot
        - orders listed by a slot are pointed at it, with an open session
        - orders pointing at a slot that does not list them are detached
        - available/occupied statuses are re-derived
        """
        now = timezone.now()
        summary = {'dropped': 0, 'attached': 0, 'detached': 0, 'statuses_fixed': 0}
        claimed = {}

        for slot in Slot.objects.select_for_update().order_by('name'):
            existing = {
                str(pk) for pk in
                Order.objects.filter(pk__in=slot.current_order_ids).values_list('pk', flat=True)
            }
            order_ids = []
            for oid in slot.current_order_ids:
                if oid not in existing or oid in claimed:
                    logger.warning("Dropping order %s from slot %s", oid, slot.name)
                    summary['dropped'] += 1
                    continue
                claimed[oid] = slot
                order_ids.append(oid)

            if len(order_ids) > slot.capacity:
                logger.warning(
                    "Slot %s holds %d orders over capacity %d",
                    slot.name, len(order_ids), slot.capacity,
                )

            status = slot.status
            if slot.is_managed:
                status = derive_status(len(order_ids), slot.capacity)
            if order_ids != slot.current_order_ids or status != slot.status:
                if status != slot.status:
                    summary['statuses_fixed'] += 1
                slot.current_order_ids = order_ids
                slot.status = status
                slot.save(update_fields=['current_order_ids', 'status', 'updated_at'])

        for oid, slot in claimed.items():
            order = Order.objects.get(pk=oid)
            elsewhere = SlotHistory.objects.filter(
                order=order, end_cooking__isnull=True,
            ).exclude(slot=slot).update(end_cooking=now, updated_at=now)
            if elsewhere:
                logger.warning(
                    "Closed %d open cooking sessions of order %s outside slot %s",
                    elsewhere, oid, slot.name,
                )

            has_session = SlotHistory.objects.filter(
                slot=slot, order=order, end_cooking__isnull=True,
            ).exists()
            if order.slot_id == slot.pk and has_session:
                continue

            logger.warning("Re-attaching order %s to slot %s", oid, slot.name)
            order.slot = slot
            order.status = Order.STATUS_COOKING
            order.cooking_date = order.cooking_date or now
            order.cooked_date = None
            order.save(update_fields=['slot', 'status', 'cooking_date', 'cooked_date', 'updated_at'])
            if not has_session:
                SlotHistory.objects.create(slot=slot, order=order, start_cooking=order.cooking_date)
            summary['attached'] += 1

        stray = Order.objects.filter(slot__isnull=False).exclude(pk__in=list(claimed))
        post_status = get_post_cooking_status()
        for order in stray.select_related('slot'):
            logger.warning("Detaching order %s from slot %s", order.pk, order.slot.name)
            SlotHistory.objects.filter(
                slot=order.slot, order=order, end_cooking__isnull=True,
            ).update(end_cooking=now, updated_at=now)
            order.slot = None
            order.status = post_status
            order.cooked_date = now
            order.save(update_fields=['slot', 'status', 'cooked_date', 'updated_at'])
            summary['detached'] += 1

        return summary
