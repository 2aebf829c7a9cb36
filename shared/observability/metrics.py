from prometheus_client import Counter, Histogram

# Business Metrics
marketplace_orders_placed_total = Counter(
    "marketplace_orders_placed_total",
    "Total order placements attempted",
    ["status"]  # Labels: 'completed', 'insufficient_stock', 'not_found', 'failed'
)

marketplace_order_placement_duration_seconds = Histogram(
    "marketplace_order_placement_duration_seconds",
    "Order placement transaction duration in seconds"
)

marketplace_products_listed_total = Counter(
    "marketplace_products_listed_total",
    "Total products put up for sale"
)

marketplace_storage_unavailable_total = Counter(
    "marketplace_storage_unavailable_total",
    "Gateway calls made while storage was not configured",
    ["operation"]
)
