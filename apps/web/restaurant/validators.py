"""Validation for menu item variation lists."""

import re
from decimal import Decimal
from typing import Any

from apps.web.core.exceptions import ValidationError
from apps.web.restaurant.models import VariationSize

PRICE_PATTERN = re.compile(r"^\d+(\.\d{1,2})?$")


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float | Decimal) and not isinstance(value, bool)


def validate_variations(variations: Any) -> None:
    """
    Validate the variations offered for a menu item.

    Each entry is a mapping with "size", "price" and "isAvailable". Sizes
    must come from VariationSize and be unique; prices must be
    non-negative with at most 2 decimal places.

    Raises:
        ValidationError: Naming the first offending variation (1-based).
    """
    if not isinstance(variations, list) or not variations:
        raise ValidationError(
            "Variations must be a non-empty array", field="variations"
        )

    seen_sizes: set[str] = set()

    for index, variation in enumerate(variations, start=1):
        if not isinstance(variation, dict):
            raise ValidationError(
                f"Variation {index}: must be an object", field="variations"
            )
        size = variation.get("size")
        price = variation.get("price")

        if not isinstance(size, str):
            raise ValidationError(
                f"Variation {index}: size must be a string", field="variations"
            )
        if size in seen_sizes:
            raise ValidationError(
                f'Variation {index}: duplicate size "{size}"', field="variations"
            )
        seen_sizes.add(size)

        if size not in VariationSize.values:
            raise ValidationError(
                f"Variation {index}: size must be one of: "
                f"{', '.join(VariationSize.values)}",
                field="variations",
            )
        if not _is_number(price) or price < 0:
            raise ValidationError(
                f"Variation {index}: price must be a non-negative number",
                field="variations",
            )
        if not isinstance(variation.get("isAvailable"), bool):
            raise ValidationError(
                f"Variation {index}: isAvailable must be a boolean",
                field="variations",
            )
        if not PRICE_PATTERN.match(_format_price(price)):
            raise ValidationError(
                f"Variation {index}: price format invalid (max 2 decimal places)",
                field="variations",
            )


def _format_price(price: int | float | Decimal) -> str:
    if isinstance(price, Decimal):
        return format(price, "f")
    return str(price)
