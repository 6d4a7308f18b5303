"""
Lechon Slots Views

JSON API for cooking slots: slot maintenance by operators and the
assign/unassign actions used by staff.
"""

import json
import logging

from django.contrib.auth.decorators import login_required, permission_required
from django.db import transaction
from django.forms.models import model_to_dict
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils.translation import gettext_lazy as _
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .exceptions import NotFound, SlotError, StorageFailure
from .forms import SlotForm
from .models import Slot
from .services import SlotService

logger = logging.getLogger(__name__)


def _json_body(request):
    if not request.body:
        return {}
    data = json.loads(request.body)
    if not isinstance(data, dict):
        raise ValueError('Expected a JSON object')
    return data


def _error_response(error):
    if isinstance(error, NotFound):
        status = 404
    elif isinstance(error, StorageFailure):
        status = 503
    else:
        status = 400
    return JsonResponse({
        'success': False,
        'error': error.message,
        'kind': error.kind,
    }, status=status)


def _invalid_json():
    return JsonResponse({'success': False, 'error': str(_('Invalid JSON'))}, status=400)


def _serialize_slot(slot, with_history=False):
    data = {
        'id': str(slot.pk),
        'name': slot.name,
        'type': slot.slot_type,
        'status': slot.status,
        'capacity': slot.capacity,
        'notes': slot.notes,
        'current_orders': [
            {
                'id': str(order.pk),
                'code': order.code,
                'full_name': order.full_name,
                'status': order.status,
                'cooking_date': order.cooking_date.isoformat() if order.cooking_date else None,
            }
            for order in slot.current_orders
        ],
        'can_accept_orders': slot.can_accept_orders,
        'available_capacity': slot.available_capacity,
        'updated_at': slot.updated_at.isoformat(),
    }
    if with_history:
        data['history'] = [
            {
                'order_id': str(entry.order_id) if entry.order_id else None,
                'start_cooking': entry.start_cooking.isoformat(),
                'end_cooking': entry.end_cooking.isoformat() if entry.end_cooking else None,
            }
            for entry in slot.history.all()
        ]
    return data


# =============================================================================
# Slot maintenance
# =============================================================================

@login_required
@require_GET
def api_slot_detail(request, slot_id):
    slot = get_object_or_404(Slot, pk=slot_id)
    return JsonResponse({'success': True, 'slot': _serialize_slot(slot, with_history=True)})


@login_required
@permission_required('lechon.add_slot', raise_exception=True)
@require_POST
def api_slot_create(request):
    try:
        data = _json_body(request)
    except ValueError:
        return _invalid_json()

    form = SlotForm(data)
    if not form.is_valid():
        return JsonResponse({'success': False, 'errors': form.errors.get_json_data()}, status=400)

    slot = form.save()
    logger.info("Slot %s created (capacity %d)", slot.name, slot.capacity)
    return JsonResponse({
        'success': True,
        'slot_id': str(slot.pk),
        'slot': _serialize_slot(slot),
    }, status=201)


@login_required
@permission_required('lechon.change_slot', raise_exception=True)
@require_POST
def api_slot_update(request, slot_id):
    try:
        data = _json_body(request)
    except ValueError:
        return _invalid_json()

    with transaction.atomic():
        # Assignments wait on this lock, so the capacity check sees the real occupancy
        slot = get_object_or_404(Slot.objects.select_for_update(), pk=slot_id)

        merged = model_to_dict(slot, fields=SlotForm.Meta.fields)
        merged.update({k: v for k, v in data.items() if k in SlotForm.Meta.fields})

        form = SlotForm(merged, instance=slot)
        if not form.is_valid():
            return JsonResponse({'success': False, 'errors': form.errors.get_json_data()}, status=400)

        slot = form.save()

    return JsonResponse({'success': True, 'slot': _serialize_slot(slot)})


@login_required
@permission_required('lechon.delete_slot', raise_exception=True)
@require_POST
def api_slot_delete(request, slot_id):
    slot = get_object_or_404(Slot, pk=slot_id)
    if slot.current_order_ids or slot.occupants.exists():
        return JsonResponse({
            'success': False,
            'error': str(_('Slot still has orders cooking')),
        }, status=400)

    name = slot.name
    slot.delete()
    logger.info("Slot %s deleted", name)
    return JsonResponse({'success': True, 'message': str(_('Slot deleted'))})


# =============================================================================
# Assignment
# =============================================================================

@login_required
@require_POST
def api_assign_order(request):
    try:
        data = _json_body(request)
    except ValueError:
        return _invalid_json()

    try:
        slot = SlotService.assign_order(data.get('slot_id'), data.get('order_id'))
    except SlotError as e:
        return _error_response(e)

    return JsonResponse({
        'success': True,
        'message': str(_('Order assigned to slot and cooking started')),
        'slot': _serialize_slot(slot),
    })


@login_required
@require_http_methods(['POST', 'DELETE'])
def api_unassign_order(request):
    order_id = request.GET.get('order_id') or request.GET.get('orderId')
    if not order_id:
        try:
            order_id = _json_body(request).get('order_id')
        except ValueError:
            return _invalid_json()

    try:
        order = SlotService.unassign_order(order_id)
    except SlotError as e:
        return _error_response(e)

    return JsonResponse({
        'success': True,
        'message': str(_('Order unassigned, cooking ended')),
        'order_id': str(order.pk),
        'status': order.status,
        'cooked_date': order.cooked_date.isoformat(),
    })


@login_required
@permission_required('lechon.change_slot', raise_exception=True)
@require_POST
def api_reconcile(request):
    summary = SlotService.reconcile()
    return JsonResponse({'success': True, 'summary': summary})
