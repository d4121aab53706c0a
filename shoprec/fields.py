"""Column names shared by the polars frames built from orders."""

ORDER_ID = "order_id"
ORDER_ITEM_ID = "id"
PRODUCT_ID = "product_id"
QUANTITY = "quantity"
USER_ID = "user_id"
SCORE = "score"
