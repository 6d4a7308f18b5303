from django import forms
from django.utils.translation import gettext_lazy as _

from .models import Order, Slot
from .services import derive_status


class SlotForm(forms.ModelForm):
    """Operator edits of a slot. Occupancy is never written through here."""

    UPDATE_FIELDS = ['name', 'slot_type', 'status', 'capacity', 'notes', 'updated_at']

    class Meta:
        model = Slot
        fields = ['name', 'slot_type', 'status', 'capacity', 'notes']
        widgets = {
            'name': forms.TextInput(attrs={
                'class': 'input', 'placeholder': _('Slot name'),
            }),
            'slot_type': forms.Select(attrs={'class': 'select'}),
            'status': forms.Select(attrs={'class': 'select'}),
            'capacity': forms.NumberInput(attrs={
                'class': 'input', 'min': '1',
            }),
            'notes': forms.TextInput(attrs={
                'class': 'input', 'placeholder': _('Notes'),
            }),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Optional in the payload; the model defaults apply when left out
        self.fields['slot_type'].required = False
        self.fields['status'].required = False
        self.fields['capacity'].required = False

    def clean_slot_type(self):
        return self.cleaned_data.get('slot_type') or self.instance.slot_type

    def clean_status(self):
        return self.cleaned_data.get('status') or self.instance.status

    def clean_capacity(self):
        capacity = self.cleaned_data.get('capacity')
        if capacity is None:
            capacity = self.instance.capacity
        if capacity < self.instance.occupancy:
            raise forms.ValidationError(
                _('Capacity cannot be lower than the %(count)d orders currently cooking.'),
                params={'count': self.instance.occupancy},
            )
        return capacity

    def save(self, commit=True):
        slot = super().save(commit=False)
        if not slot._state.adding:
            # Occupancy comes from the row, never from the form's copy
            slot.current_order_ids = Slot.objects.values_list(
                'current_order_ids', flat=True,
            ).get(pk=slot.pk)
        if slot.status in Slot.MANAGED_STATUSES:
            slot.status = derive_status(slot.occupancy, slot.capacity)
        if commit:
            if slot._state.adding:
                slot.save()
            else:
                slot.save(update_fields=self.UPDATE_FIELDS)
        return slot


class OrderAdminForm(forms.ModelForm):
    """Back-office edits of an order. Slot binding stays with SlotService."""

    SERVICE_STATUSES = [Order.STATUS_COOKING, Order.STATUS_COOKED]

    class Meta:
        model = Order
        exclude = ['slot', 'cooking_date', 'cooked_date']

    def clean_status(self):
        status = self.cleaned_data.get('status')
        if status in self.SERVICE_STATUSES and status != self.instance.status:
            raise forms.ValidationError(
                _('Orders start and finish cooking by being assigned to a slot.'),
            )
        return status
