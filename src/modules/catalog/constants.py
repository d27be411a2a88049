"""Catalog constants."""

DEFAULT_DISPLAY_ORDER = 99

# Admin form minimums
PRODUCT_NAME_MIN_LENGTH = 3
PRODUCT_DESCRIPTION_MIN_LENGTH = 10
CATEGORY_NAME_MIN_LENGTH = 3
CATEGORY_SLUG_MIN_LENGTH = 3
