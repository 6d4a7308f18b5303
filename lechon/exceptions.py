"""
Slot assignment errors.

Every error carries a stable ``kind`` so API callers can tell them apart
without parsing messages.
"""


class SlotError(Exception):
    kind = 'slot_error'
    default_message = 'Slot operation failed'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self):
        return str(self)


class InvalidRequest(SlotError):
    kind = 'invalid_request'
    default_message = 'Slot ID and Order ID are required'


class NotFound(SlotError):
    kind = 'not_found'

    def __init__(self, entity, message=None):
        self.entity = entity
        super().__init__(message or f"{entity.capitalize()} not found")


class SlotUnavailable(SlotError):
    kind = 'slot_unavailable'
    default_message = 'Slot is not available'


class CapacityExceeded(SlotUnavailable):
    kind = 'capacity_exceeded'
    default_message = 'Slot is at full capacity'


class AlreadyAssigned(SlotError):
    kind = 'already_assigned'
    default_message = 'Order is already assigned to a slot'


class NotAssigned(SlotError):
    kind = 'not_assigned'
    default_message = 'Order is not assigned to any slot'


class StorageFailure(SlotError):
    kind = 'storage_failure'
    default_message = 'Storage operation failed'
