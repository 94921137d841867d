"""Constants for Order and OrderLine document field names"""


class OrderFields:
    """Field name constants for Order documents (matches storefront schema)"""
    ID = "id"
    WEBSITE_ID = "website_id"
    USER_ID = "user_id"
    GUEST_NAME = "guest_name"
    GUEST_EMAIL = "guest_email"
    GUEST_PHONE = "guest_phone"
    TOTAL_AMOUNT = "total_amount"
    SHIPPING_ADDRESS = "shipping_address"
    PAYMENT_METHOD = "payment_method"
    PAYMENT_STATUS = "payment_status"
    STATUS = "status"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"

    # MongoDB specific
    MONGO_ID = "_id"


class OrderLineFields:
    """Field name constants for order_items documents"""
    ORDER_ID = "order_id"
    PRODUCT_ID = "product_id"
    QUANTITY = "quantity"
    PRICE = "price"
