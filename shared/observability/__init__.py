from .setup import setup_observability, configure_logging
from .metrics import (
    marketplace_orders_placed_total,
    marketplace_order_placement_duration_seconds,
    marketplace_products_listed_total,
    marketplace_storage_unavailable_total,
)
