from decimal import Decimal

import pytest

from kpreflight.core import ParseError, Quantity, QuantityParseError


class TestQuantityParse:
    """Quantity strings follow the Kubernetes resource quantity grammar."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("4", Decimal(4)),
            ("0", Decimal(0)),
            ("500m", Decimal("0.5")),
            ("1.5", Decimal("1.5")),
            (".5", Decimal("0.5")),
            ("-2", Decimal(-2)),
            ("+3", Decimal(3)),
            ("2k", Decimal(2000)),
            ("16Gi", Decimal(16 * 1024 ** 3)),
            ("128Mi", Decimal(128 * 1024 ** 2)),
            ("1.5Ki", Decimal(1536)),
            ("1e3", Decimal(1000)),
            ("2E-1", Decimal("0.2")),
            ("1E", Decimal(10 ** 18)),
            ("250n", Decimal("0.00000025")),
        ],
    )
    def test_parses_valid_quantities(self, text, expected):
        assert Quantity.parse(text).value == expected

    @pytest.mark.parametrize(
        "text",
        ["", "banana", "4 Gi", "Gi", "1.2.3", "1e", "4GB", " 4", "4i", "."],
    )
    def test_rejects_malformed_quantities(self, text):
        with pytest.raises(QuantityParseError):
            Quantity.parse(text)

    def test_parse_error_is_a_parse_error(self):
        with pytest.raises(ParseError):
            Quantity.parse("banana")

    def test_rejects_non_strings(self):
        with pytest.raises(QuantityParseError):
            Quantity.parse(4)


class TestQuantityArithmetic:

    def test_equal_values_in_different_units_compare_equal(self):
        assert Quantity.parse("4").cmp(Quantity.parse("4000m")) == 0
        assert Quantity.parse("1Ki") == Quantity.parse("1024")

    def test_cmp_is_three_way(self):
        two, four = Quantity.parse("2"), Quantity.parse("4")
        assert two.cmp(four) == -1
        assert four.cmp(two) == 1
        assert four.cmp(four) == 0

    def test_ordering_operators(self):
        values = [Quantity.parse(t) for t in ["8Gi", "512Mi", "1Gi"]]
        assert [str(q) for q in sorted(values)] == ["512Mi", "1Gi", "8Gi"]
        assert Quantity.parse("1Gi") >= Quantity.parse("1024Mi")

    def test_zero_is_additive_identity(self):
        q = Quantity.parse("3")
        assert Quantity.zero() + q == q
        assert Quantity.zero().value == 0

    def test_addition_mixes_units(self):
        total = Quantity.parse("1Gi") + Quantity.parse("512Mi")
        assert total.value == Decimal(1536 * 1024 ** 2)

    def test_cmp_against_non_quantity_raises(self):
        with pytest.raises(TypeError):
            Quantity.parse("4").cmp(4)


def test_str_keeps_parsed_text_and_renders_sums_plainly():
    assert str(Quantity.parse("16Gi")) == "16Gi"
    assert str(Quantity.parse("1Gi") + Quantity.parse("1Gi")) == "2147483648"
    assert str(Quantity.parse("500m") + Quantity.parse("500m")) == "1"
    assert str(Quantity.zero()) == "0"
