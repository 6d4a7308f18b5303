"""
Lechon Slots Module Configuration

Cooking slot (oven/pit) assignment for lechon orders.
"""
from django.utils.translation import gettext_lazy as _

MODULE_ID = "lechon"
MODULE_NAME = _("Lechon Orders & Cooking Slots")

SETTINGS = {
    # Compare-and-set attempts before an assignment gives up
    "assign_max_attempts": 3,
    # Status an order moves to once it leaves its slot
    "post_cooking_status": "cooked",
}
