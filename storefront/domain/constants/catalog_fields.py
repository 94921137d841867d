"""Constants for the externally owned collections the order service touches"""


class ProductFields:
    ID = "id"
    NAME = "name"
    PRICE = "price"
    STOCK = "stock"
    IMAGE_URL = "image_url"
    WEBSITE_ID = "website_id"


class UserFields:
    ID = "id"
    NAME = "name"
    EMAIL = "email"


class CartFields:
    USER_ID = "user_id"


class WebsiteFields:
    ID = "id"
    NAME = "name"


class CounterFields:
    # Counter documents are keyed by sequence name in _id
    MONGO_ID = "_id"
    VALUE = "value"
