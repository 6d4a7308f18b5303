from django.contrib import admin
from .forms import OrderAdminForm, SlotForm
from .models import Slot, SlotHistory, Order


class SlotHistoryInline(admin.TabularInline):
    model = SlotHistory
    extra = 0
    can_delete = False
    readonly_fields = ['order', 'start_cooking', 'end_cooking']

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Slot)
class SlotAdmin(admin.ModelAdmin):
    form = SlotForm
    list_display = ['name', 'slot_type', 'status', 'capacity', 'occupancy']
    list_filter = ['status', 'slot_type']
    search_fields = ['name', 'notes']
    readonly_fields = ['current_order_ids', 'version']
    inlines = [SlotHistoryInline]

    def get_object(self, request, object_id, from_field=None):
        obj = super().get_object(request, object_id, from_field)
        if obj is not None and request.method == 'POST':
            # The change view runs in a transaction; hold the row until the save
            obj = Slot.objects.select_for_update().get(pk=obj.pk)
        return obj

    def save_model(self, request, obj, form, change):
        if change:
            obj.save(update_fields=SlotForm.UPDATE_FIELDS)
        else:
            obj.save()


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    form = OrderAdminForm
    list_display = ['code', 'full_name', 'lechon_type', 'status', 'slot', 'date_cooked', 'is_paid']
    list_filter = ['status', 'lechon_type', 'order_type', 'is_paid']
    search_fields = ['code', 'first_name', 'last_name']
    readonly_fields = ['slot', 'cooking_date', 'cooked_date']

    def get_readonly_fields(self, request, obj=None):
        fields = list(super().get_readonly_fields(request, obj))
        if obj is not None and obj.slot_id:
            fields.append('status')
        return fields
