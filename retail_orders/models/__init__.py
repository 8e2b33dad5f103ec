import importlib

from retail_orders.models.fulfilment import Collection, Delivery
from retail_orders.models.inventory import Product
from retail_orders.models.order_products import OrderProduct
from retail_orders.models.orders import Order
from retail_orders.models.sequences import SequenceCounter
from retail_orders.models.staff import Staff, StaffOrder


def import_all_models() -> None:
    for module_name in (
        "retail_orders.models.fulfilment",
        "retail_orders.models.inventory",
        "retail_orders.models.order_products",
        "retail_orders.models.orders",
        "retail_orders.models.sequences",
        "retail_orders.models.staff",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Collection",
    "Delivery",
    "Order",
    "OrderProduct",
    "Product",
    "SequenceCounter",
    "Staff",
    "StaffOrder",
    "import_all_models",
]
