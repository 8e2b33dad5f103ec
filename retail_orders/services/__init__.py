from retail_orders.services.fulfilment_service import record_collection, record_delivery
from retail_orders.services.inventory_service import adjust_stock, create_product
from retail_orders.services.order_service import add_line, create_order, delete_order
from retail_orders.services.sequence_service import allocate, next_value
from retail_orders.services.staff_service import attribute_order, create_staff

__all__ = [
    "add_line",
    "adjust_stock",
    "allocate",
    "attribute_order",
    "create_order",
    "create_product",
    "create_staff",
    "delete_order",
    "next_value",
    "record_collection",
    "record_delivery",
]
