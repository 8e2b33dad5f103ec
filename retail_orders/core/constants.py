ORDER_TYPE_IN_STORE = "InStore"
ORDER_TYPE_COLLECTION = "Collection"
ORDER_TYPE_DELIVERY = "Delivery"
ORDER_TYPES = (ORDER_TYPE_IN_STORE, ORDER_TYPE_COLLECTION, ORDER_TYPE_DELIVERY)

ORDER_COMPLETED_FLAGS = (0, 1)

NAME_MAX_LENGTH = 30

PRICE_PRECISION = 8
PRICE_SCALE = 2

ORDER_SEQUENCE_NAME = "ORDERS_seq"
# Upper bound of the signed 32-bit integer key columns; the sequence never cycles.
SEQUENCE_MAX_VALUE = 2_147_483_647
