"""
Lechon Slots Signals

Sent by SlotService once an assignment change has been committed.
"""

from django.dispatch import Signal

# Signals this module emits
order_assigned = Signal()  # Provides: slot, order
order_unassigned = Signal()  # Provides: slot, order
