from .slot_service import SlotService, derive_status

__all__ = ['SlotService', 'derive_status']
