"""Tests for the order validation service."""

from decimal import Decimal

import pytest

from apps.web.core.exceptions import ValidationError
from apps.web.orders.serializers import OrderLineRequestSchema
from apps.web.orders.services import validate_menu_items, validate_order_request
from apps.web.orders.services.validation import (
    MIXED_RESTAURANT_MESSAGE,
    NOT_FOUND_MESSAGE,
    RESTAURANT_NOT_FOUND_MESSAGE,
    VARIATION_UNAVAILABLE_MESSAGE,
)
from apps.web.restaurant.models import ParentType, VariationSize
from apps.web.restaurant.services import fetch_menu_items
from apps.web.restaurant.tests.factories import (
    MenuItemFactory,
    SubmenuFactory,
    VariationFactory,
)


def _payload(**overrides):
    payload = {
        "orderItems": [
            {"item": {"id": 1}, "variation": {"size": "Large"}, "quantity": 2}
        ],
        "deliveryAddress": "12 Harbour Street",
        "PaymentMethod": "cash",
    }
    payload.update(overrides)
    return payload


def _line(item_id: int, quantity: int = 1, **variation) -> OrderLineRequestSchema:
    return OrderLineRequestSchema.model_validate(
        {"item": {"id": item_id}, "variation": variation, "quantity": quantity}
    )


def _validate(*lines: OrderLineRequestSchema):
    catalog = fetch_menu_items(line.item.id for line in lines)
    return validate_menu_items(catalog, list(lines))


class TestValidateOrderRequest:
    """Tests for validate_order_request."""

    def test_parses_valid_payload(self) -> None:
        """A complete payload parses into a PlaceOrderRequest."""
        request = validate_order_request(
            _payload(deliveryFee=Decimal("3.50"), timeToDeliver=45, notes="Ring twice")
        )

        assert request.delivery_address == "12 Harbour Street"
        assert request.delivery_fee == Decimal("3.50")
        assert request.time_to_deliver == 45
        assert request.notes == "Ring twice"
        line = request.order_items[0]
        assert line.item.id == 1
        assert line.variation.size == "Large"
        assert line.quantity == 2

    def test_optional_fields_default_to_none(self) -> None:
        """deliveryFee, timeToDeliver and notes may be left out."""
        request = validate_order_request(_payload())

        assert request.delivery_fee is None
        assert request.time_to_deliver is None
        assert request.notes is None

    def test_payment_method_is_case_insensitive(self) -> None:
        """Payment methods match regardless of case and are stored lower-cased."""
        request = validate_order_request(_payload(PaymentMethod="CaRd"))

        assert request.payment_method == "card"

    def test_unknown_payment_method(self) -> None:
        """Methods outside the configured set are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_order_request(_payload(PaymentMethod="bitcoin"))

        assert exc_info.value.field == "PaymentMethod"
        assert exc_info.value.message == (
            "Invalid payment method. Valid options: cash, card, wallet"
        )

    def test_payment_methods_follow_settings(self, settings) -> None:
        """ORDER_PAYMENT_METHODS controls the accepted set."""
        settings.ORDER_PAYMENT_METHODS = ["Cash", "Voucher"]

        request = validate_order_request(_payload(PaymentMethod="voucher"))

        assert request.payment_method == "voucher"
        with pytest.raises(ValidationError):
            validate_order_request(_payload(PaymentMethod="card"))

    def test_body_must_be_object(self) -> None:
        """A JSON array or scalar body is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_order_request([_payload()])

        assert exc_info.value.field == "body"

    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"orderItems": []}, "orderItems"),
            ({"orderItems": "pizza"}, "orderItems"),
            ({"deliveryAddress": "   "}, "deliveryAddress"),
            ({"deliveryAddress": None}, "deliveryAddress"),
            ({"PaymentMethod": None}, "PaymentMethod"),
            ({"deliveryFee": -1}, "deliveryFee"),
            ({"deliveryFee": "3"}, "deliveryFee"),
            ({"deliveryFee": True}, "deliveryFee"),
            ({"deliveryFee": Decimal("0.005")}, "deliveryFee"),
            ({"deliveryFee": Decimal("123456789.00")}, "deliveryFee"),
            ({"timeToDeliver": -5}, "timeToDeliver"),
            ({"timeToDeliver": Decimal("30.5")}, "timeToDeliver"),
            ({"timeToDeliver": "30"}, "timeToDeliver"),
            ({"timeToDeliver": 2_147_483_648}, "timeToDeliver"),
            ({"timeToDeliver": 10**19}, "timeToDeliver"),
        ],
    )
    def test_invalid_field_is_named(self, overrides, field) -> None:
        """The error names the offending field."""
        with pytest.raises(ValidationError) as exc_info:
            validate_order_request(_payload(**overrides))

        assert exc_info.value.field == field
        assert exc_info.value.message.startswith(f"Invalid {field}:")

    def test_missing_required_fields_listed(self) -> None:
        """Every missing field is reported in errors."""
        with pytest.raises(ValidationError) as exc_info:
            validate_order_request({})

        fields = {error["field"] for error in exc_info.value.errors}
        assert fields == {"orderItems", "deliveryAddress", "PaymentMethod"}

    @pytest.mark.parametrize(
        ("drop", "overrides", "field"),
        [
            ("item", {}, "orderItems[1].item"),
            (None, {"quantity": 0}, "orderItems[1].quantity"),
            (None, {"quantity": -2}, "orderItems[1].quantity"),
            (None, {"quantity": 10**19}, "orderItems[1].quantity"),
            (None, {"variation": {}}, "orderItems[1].variation"),
            ("variation", {}, "orderItems[1].variation"),
        ],
    )
    def test_invalid_line_is_named(self, drop, overrides, field) -> None:
        """Line errors point at the line index and key."""
        good = {"item": {"id": 1}, "variation": {"size": "Large"}, "quantity": 1}
        bad = {**good, **overrides}
        if drop:
            del bad[drop]

        with pytest.raises(ValidationError) as exc_info:
            validate_order_request(_payload(orderItems=[good, bad]))

        assert exc_info.value.field == field


@pytest.mark.django_db
class TestValidateMenuItems:
    """Tests for validate_menu_items."""

    def test_prices_available_lines(self, pizza, restaurant) -> None:
        """Accepted lines carry the variation price and size."""
        result = _validate(
            _line(pizza.pk, 2, size="Large"),
            _line(pizza.pk, 1, size="Small"),
        )

        assert result.unavailable_items == []
        assert result.is_acceptable
        assert result.restaurant_id == restaurant.pk
        assert result.items_subtotal == Decimal("27.50")
        assert [
            (line.variation_size, line.price, line.quantity, line.line_total)
            for line in result.accepted_lines
        ] == [
            ("Large", Decimal("10.00"), 2, Decimal("20.00")),
            ("Small", Decimal("7.50"), 1, Decimal("7.50")),
        ]
        assert result.accepted_lines[0].item_name == "Margherita"

    def test_unknown_item(self, pizza) -> None:
        """Missing items are reported and skipped."""
        result = _validate(
            _line(999999, size="Large"), _line(pizza.pk, size="Small")
        )

        assert len(result.unavailable_items) == 1
        missing = result.unavailable_items[0]
        assert missing.item == 999999
        assert missing.name is None
        assert missing.message == NOT_FOUND_MESSAGE
        assert result.items_subtotal == Decimal("7.50")
        assert not result.is_acceptable

    def test_items_from_two_restaurants(self, pizza, restaurant) -> None:
        """Lines from a second restaurant are rejected; the first stay priced."""
        other_item = MenuItemFactory(name="Pad Thai")
        VariationFactory(menu_item=other_item, size=VariationSize.LARGE)

        result = _validate(
            _line(pizza.pk, size="Large"),
            _line(other_item.pk, size="Large"),
            _line(pizza.pk, size="Medium"),
        )

        assert result.restaurant_id == restaurant.pk
        assert [(u.item, u.name, u.message) for u in result.unavailable_items] == [
            (other_item.pk, "Pad Thai", MIXED_RESTAURANT_MESSAGE)
        ]
        assert result.items_subtotal == Decimal("18.25")
        assert len(result.accepted_lines) == 2

    def test_first_resolved_item_fixes_restaurant(self, pizza) -> None:
        """Whichever restaurant resolves first wins, even if it isn't the majority."""
        other_item = MenuItemFactory()
        VariationFactory(menu_item=other_item, size=VariationSize.SMALL)

        result = _validate(
            _line(other_item.pk, size="Small"),
            _line(pizza.pk, size="Small"),
            _line(pizza.pk, size="Large"),
        )

        assert len(result.accepted_lines) == 1
        assert [u.item for u in result.unavailable_items] == [pizza.pk, pizza.pk]

    def test_submenu_items_share_restaurant(self, pizza, menu) -> None:
        """Items on a submenu of the same restaurant mix freely with menu items."""
        submenu = SubmenuFactory(menu=menu)
        garlic_bread = MenuItemFactory(submenu=submenu)
        VariationFactory(
            menu_item=garlic_bread, size=VariationSize.SMALL, price=Decimal("4.00")
        )

        result = _validate(
            _line(pizza.pk, size="Medium"), _line(garlic_bread.pk, size="Small")
        )

        assert result.unavailable_items == []
        assert result.items_subtotal == Decimal("12.25")

    def test_variation_by_id(self, pizza) -> None:
        """Variations can be picked by id."""
        medium = pizza.variations.get(size=VariationSize.MEDIUM)

        result = _validate(_line(pizza.pk, 2, id=medium.pk))

        assert result.accepted_lines[0].variation_size == "Medium"
        assert result.items_subtotal == Decimal("16.50")

    def test_size_label_wins_over_id(self, pizza) -> None:
        """An exact size match is tried before the id."""
        small = pizza.variations.get(size=VariationSize.SMALL)

        result = _validate(_line(pizza.pk, size="Large", id=small.pk))

        assert result.accepted_lines[0].variation_size == "Large"

    def test_falls_back_to_id_when_size_unknown(self, pizza) -> None:
        """An unmatched size still resolves through the id."""
        small = pizza.variations.get(size=VariationSize.SMALL)

        result = _validate(_line(pizza.pk, size="Family", id=small.pk))

        assert result.accepted_lines[0].variation_size == "Small"

    def test_variation_of_another_item_is_not_matched(self, pizza) -> None:
        """Variation ids only match within the ordered item."""
        stray = VariationFactory(size=VariationSize.SMALL)

        result = _validate(_line(pizza.pk, id=stray.pk))

        message = result.unavailable_items[0].message
        assert message == f'Variation "{stray.pk}" not found'

    def test_variation_not_found(self, pizza) -> None:
        """Unknown sizes are reported with the requested label."""
        result = _validate(_line(pizza.pk, size="Family"))

        unavailable = result.unavailable_items[0]
        assert unavailable.name == "Margherita"
        assert unavailable.message == 'Variation "Family" not found'
        assert result.accepted_lines == []

    def test_variation_not_available(self, pizza) -> None:
        """Sold-out variations are reported with their size."""
        pizza.variations.filter(size=VariationSize.LARGE).update(is_available=False)

        result = _validate(_line(pizza.pk, size="Large"))

        unavailable = result.unavailable_items[0]
        assert unavailable.variation == "Large"
        assert unavailable.message == VARIATION_UNAVAILABLE_MESSAGE
        assert result.items_subtotal == Decimal("0")

    def test_dangling_parent(self, pizza, menu) -> None:
        """Items whose menu is gone are unavailable, not a hard failure."""
        orphan = MenuItemFactory(parent_type=ParentType.MENU, parent_id=999999)

        result = _validate(
            _line(orphan.pk, size="Large"), _line(pizza.pk, size="Large")
        )

        assert result.unavailable_items[0].message == RESTAURANT_NOT_FOUND_MESSAGE
        assert result.restaurant_id == menu.restaurant_id
        assert result.items_subtotal == Decimal("10.00")

    def test_nothing_resolved(self) -> None:
        """With no resolvable line there is no restaurant and nothing to place."""
        result = _validate(_line(999999, size="Large"))

        assert result.restaurant_id is None
        assert not result.is_acceptable
