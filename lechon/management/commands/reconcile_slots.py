"""Repair drift between slot occupancy and order assignments."""

from django.core.management.base import BaseCommand

from lechon.services import SlotService


class Command(BaseCommand):
    help = "Re-derive order assignments and slot statuses from slot occupancy"

    def handle(self, *args, **options):
        summary = SlotService.reconcile()
        for key in ('dropped', 'attached', 'detached', 'statuses_fixed'):
            self.stdout.write(f"{key}: {summary[key]}")

        if any(summary.values()):
            self.stdout.write(self.style.WARNING("Repaired slot/order drift"))
        else:
            self.stdout.write(self.style.SUCCESS("Slots and orders are consistent"))
