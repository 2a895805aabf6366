"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from barista.domain.exceptions import ValidationError
from barista.domain.model.value_objects import (
    ConversationId,
    DrinkId,
    DrinkSize,
    Money,
    OrderId,
    Quantity,
)


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(1050)
        assert m.cents == 1050
        assert m.currency == "USD"
        assert m.amount == Decimal("10.50")

    def test_of_factory_from_string(self):
        assert Money.of("25.99").cents == 2599

    def test_of_factory_rounds_half_up(self):
        assert Money.of("0.125").cents == 13

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("abc")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(-1)

    def test_float_cents_rejected(self):
        with pytest.raises(ValidationError, match="integer number of cents"):
            Money(1.5)

    def test_bad_currency_rejected(self):
        with pytest.raises(ValidationError, match="3-letter"):
            Money(100, "DOLLARS")

    def test_zero(self):
        assert Money.zero() == Money(0)
        assert Money.zero("EUR").currency == "EUR"

    def test_addition(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")

    def test_subtraction(self):
        assert Money.of("10") - Money.of("3") == Money.of("7")

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(ValidationError, match="negative amount"):
            Money.of("5") - Money.of("10")

    def test_multiplication_by_int(self):
        assert Money.of("7.50") * 3 == Money.of("22.50")

    def test_multiplication_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("1") * 1.5

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(1000, "USD") + Money(500, "EUR")

    def test_comparison_across_currencies_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(1000, "USD") < Money(500, "EUR")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"
        assert str(Money.of("9.5")) == "$9.50"
        assert str(Money(450, "EUR")) == "EUR4.50"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") > Money.of("5")
        assert Money.of("10") >= Money.of("10")
        assert Money.of("10") <= Money.of("10")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(-3)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)

    def test_addition(self):
        assert Quantity(2) + Quantity(3) == Quantity(5)

    def test_str(self):
        assert str(Quantity(7)) == "7"


# ── Identifiers ──────────────────────────────────────────────────────────────


class TestIdentifiers:

    def test_generated_ids_carry_their_prefix(self):
        assert str(ConversationId.generate()).startswith("conv_")
        assert str(OrderId.generate()).startswith("ord_")
        assert str(DrinkId.generate()).startswith("drk_")

    def test_generated_ids_are_unique(self):
        assert OrderId.generate() != OrderId.generate()

    def test_parse_round_trips(self):
        raw = str(ConversationId.generate())
        assert ConversationId.parse(raw) == ConversationId(raw)

    def test_parse_strips_whitespace(self):
        assert OrderId.parse("  ord_abc  ") == OrderId("ord_abc")

    @pytest.mark.parametrize("raw", ["", "   ", "ord_abc", "conv_", "conv_has space", "conv_a/b"])
    def test_malformed_conversation_ids_rejected(self, raw):
        with pytest.raises(ValidationError):
            ConversationId.parse(raw)

    def test_ids_of_different_types_are_not_equal(self):
        assert OrderId("ord_x") != DrinkId("drk_x")


# ── DrinkSize ────────────────────────────────────────────────────────────────


class TestDrinkSize:

    def test_parse_is_case_insensitive(self):
        assert DrinkSize.parse(" Grande ") is DrinkSize.GRANDE

    def test_generic_aliases(self):
        assert DrinkSize.parse("small") is DrinkSize.TALL
        assert DrinkSize.parse("medium") is DrinkSize.GRANDE
        assert DrinkSize.parse("large") is DrinkSize.VENTI

    def test_unknown_size_rejected(self):
        with pytest.raises(ValidationError, match="Valid sizes: tall, grande, venti"):
            DrinkSize.parse("huge")
