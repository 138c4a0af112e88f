"""
Orders Module Configuration

Order lifecycle for restaurants, bars and cafes: pricing, stock
deduction, table occupancy and kitchen/bar event fan-out.
"""
from django.utils.translation import gettext_lazy as _

MODULE_ID = "orders"
MODULE_NAME = _("Orders")
MODULE_VERSION = "1.0.0"
MODULE_CATEGORY = "pos"

MODULE_INDUSTRIES = ["restaurant", "bar", "cafe"]

# Defaults for OrdersSettings, applied when the singleton row is created.
SETTINGS = {
    # "warn": log and deduct anyway, "reject": fail the order
    "ingredient_shortfall_policy": "warn",
    "low_stock_notifications": True,
}

# Max undispatched outbox events handled per dispatch run.
DISPATCH_BATCH_SIZE = 100
