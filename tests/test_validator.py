"""Tests for NutriQR array validation and its check order."""

import copy

import pytest

from nutriqr.codec.errors import NutriQRError, NutriQRErrorType
from nutriqr.codec.validator import (
    ValidationIssue,
    find_validation_issue,
    nutrient_total,
    validate_nutriqr_array,
)


@pytest.fixture
def valid_array():
    """Return a valid NutriQR array."""
    return ["8720828249062", "Brand|Product", "g", 100, 1, [50, 10, 5, 20, 10, 1, 4]]


def _with(arr, index, value):
    changed = copy.deepcopy(arr)
    changed[index] = value
    return changed


def _with_nutrients(arr, nutrients):
    return _with(arr, 5, nutrients)


class TestValidArrays:
    """Tests for arrays that satisfy every invariant."""

    def test_valid_array(self, valid_array):
        assert validate_nutriqr_array(valid_array) is None

    def test_empty_gtin_is_valid(self, valid_array):
        assert validate_nutriqr_array(_with(valid_array, 0, "")) is None

    def test_fibre_is_accepted(self, valid_array):
        assert validate_nutriqr_array(_with_nutrients(valid_array, [50, 10, 5, 20, 10, 1, 4, 2])) is None

    @pytest.mark.parametrize("unit", ["g", "ml", "oz", "fl"])
    def test_every_unit_is_accepted(self, valid_array, unit):
        assert validate_nutriqr_array(_with(valid_array, 2, unit)) is None

    def test_float_values_are_accepted(self, valid_array):
        arr = _with(valid_array, 4, 0.25)
        arr = _with_nutrients(arr, [50.5, 10.1, 5.0, 20.2, 10.0, 0.3, 4.4])
        assert validate_nutriqr_array(arr) is None

    def test_zero_nutrients_are_accepted(self, valid_array):
        assert validate_nutriqr_array(_with_nutrients(valid_array, [0, 0, 0, 0, 0, 0, 0])) is None

    def test_escaped_delimiter_in_brand(self, valid_array):
        assert validate_nutriqr_array(_with(valid_array, 1, "Bran\\|d|Product")) is None

    def test_input_is_not_mutated(self, valid_array):
        before = copy.deepcopy(valid_array)
        validate_nutriqr_array(valid_array)
        assert valid_array == before

    def test_validation_is_deterministic(self, valid_array):
        bad = _with_nutrients(valid_array, [50, 10, 5, 20, 25, 1, 4])
        assert validate_nutriqr_array(bad) == validate_nutriqr_array(bad)


class TestSingleInvariantFailures:
    """Each invariant on its own produces its own error kind."""

    @pytest.mark.parametrize(
        "arr",
        [
            [],
            ["8720828249062", "Brand|Product", "g", 100, 1],
            ["8720828249062", "Brand|Product", "g", 100, 1, [50, 10, 5, 20, 10, 1, 4], "extra"],
            "not an array",
            {"gtin13": ""},
            None,
        ],
    )
    def test_invalid_array_length(self, arr):
        assert validate_nutriqr_array(arr) == NutriQRErrorType.INVALID_ARRAY_LENGTH

    @pytest.mark.parametrize(
        "gtin13",
        ["123456789", "12345678901234", "872082824906a", 8720828249062, None, "８７２０８２８２４９０６２", "8720828249062\n"],
    )
    def test_invalid_gtin13(self, valid_array, gtin13):
        assert validate_nutriqr_array(_with(valid_array, 0, gtin13)) == NutriQRErrorType.INVALID_GTIN13

    @pytest.mark.parametrize("brand_product", ["", None, 42, ["Brand", "Product"]])
    def test_empty_brand_product(self, valid_array, brand_product):
        result = validate_nutriqr_array(_with(valid_array, 1, brand_product))
        assert result == NutriQRErrorType.EMPTY_BRAND_PRODUCT

    @pytest.mark.parametrize(
        "brand_product",
        ["BrandProduct", "Brand\\|Product", "Brand|With|Product", "Brand|With|Pipe|Product"],
    )
    def test_missing_delimiter(self, valid_array, brand_product):
        result = validate_nutriqr_array(_with(valid_array, 1, brand_product))
        assert result == NutriQRErrorType.MISSING_DELIMITER

    @pytest.mark.parametrize("brand_product", ["|Product", "Brand|", " | ", "   |Product"])
    def test_empty_manufacturer_or_product(self, valid_array, brand_product):
        result = validate_nutriqr_array(_with(valid_array, 1, brand_product))
        assert result == NutriQRErrorType.EMPTY_MANUFACTURER_OR_PRODUCT

    @pytest.mark.parametrize("unit", ["kg", "G", "", None, 1, "floz"])
    def test_invalid_unit(self, valid_array, unit):
        assert validate_nutriqr_array(_with(valid_array, 2, unit)) == NutriQRErrorType.INVALID_UNIT

    @pytest.mark.parametrize("base", [0, -1, "100", None, True, float("inf"), float("nan"), 10 ** 400])
    def test_invalid_base_quantity(self, valid_array, base):
        result = validate_nutriqr_array(_with(valid_array, 3, base))
        assert result == NutriQRErrorType.INVALID_BASE_QUANTITY

    @pytest.mark.parametrize("factor", [0, -0.5, "1", None, False, float("inf")])
    def test_invalid_portion_factor(self, valid_array, factor):
        result = validate_nutriqr_array(_with(valid_array, 4, factor))
        assert result == NutriQRErrorType.INVALID_PORTION_FACTOR

    @pytest.mark.parametrize(
        "nutrients",
        [
            [50, 10, 5, 20, 10, 1],
            [50, 10, 5, 20, 10, 1, 4, 2, 1],
            [],
            "50,10,5,20,10,1,4",
            None,
        ],
    )
    def test_invalid_nutrients_array(self, valid_array, nutrients):
        result = validate_nutriqr_array(_with_nutrients(valid_array, nutrients))
        assert result == NutriQRErrorType.INVALID_NUTRIENTS_ARRAY

    @pytest.mark.parametrize(
        "nutrients,index",
        [
            ([-1, 10, 5, 20, 10, 1, 4], 0),
            ([50, 10, 5, "20", 10, 1, 4], 3),
            ([50, 10, 5, 20, 10, 1, None], 6),
            ([50, 10, 5, 20, 10, 1, 4, float("nan")], 7),
            ([50, True, 5, 20, 10, 1, 4], 1),
        ],
    )
    def test_invalid_nutrient_value(self, valid_array, nutrients, index):
        issue = find_validation_issue(_with_nutrients(valid_array, nutrients))
        assert issue == ValidationIssue(NutriQRErrorType.INVALID_NUTRIENT_VALUE, index=index)

    def test_sugar_exceeds_carbs(self, valid_array):
        result = validate_nutriqr_array(_with_nutrients(valid_array, [50, 10, 5, 20, 25, 1, 4]))
        assert result == NutriQRErrorType.SUGAR_EXCEEDS_CARBS

    def test_saturated_fat_exceeds_fat(self, valid_array):
        result = validate_nutriqr_array(_with_nutrients(valid_array, [50, 5, 10, 20, 10, 1, 4]))
        assert result == NutriQRErrorType.SATURATED_FAT_EXCEEDS_TOTAL_FAT

    def test_nutrients_exceed_base_quantity(self, valid_array):
        result = validate_nutriqr_array(_with_nutrients(valid_array, [60, 10, 5, 25, 10, 1, 5]))
        assert result == NutriQRErrorType.NUTRIENTS_EXCEED_BASE_QUANTITY


class TestBaseQuantitySum:
    """Tests for the nutrients-vs-base-quantity boundary."""

    def test_total_excludes_saturated_fat_and_sugar(self):
        assert nutrient_total([50, 10, 5, 20, 10, 1, 4]) == 85

    def test_total_includes_fibre(self):
        assert nutrient_total([50, 10, 5, 20, 10, 1, 4, 3]) == 88

    def test_sum_equal_to_base_is_valid(self, valid_array):
        # 60 + 10 + 25 + 1 + 4 = 100
        arr = _with_nutrients(valid_array, [60, 10, 5, 25, 20, 1, 4])
        assert validate_nutriqr_array(arr) is None

    def test_sum_just_above_base_is_invalid(self, valid_array):
        arr = _with_nutrients(valid_array, [60, 10, 5, 25, 20, 1, 4.5])
        assert validate_nutriqr_array(arr) == NutriQRErrorType.NUTRIENTS_EXCEED_BASE_QUANTITY

    def test_fibre_counts_towards_sum(self, valid_array):
        arr = _with_nutrients(valid_array, [60, 10, 5, 25, 20, 1, 4, 1])
        assert validate_nutriqr_array(arr) == NutriQRErrorType.NUTRIENTS_EXCEED_BASE_QUANTITY

    def test_large_saturated_fat_and_sugar_do_not_count(self, valid_array):
        # saturated fat and sugar are at their maximum; the sum is still 100
        arr = _with_nutrients(valid_array, [60, 10, 10, 25, 25, 1, 4])
        assert validate_nutriqr_array(arr) is None


class TestCheckOrder:
    """The first violated invariant decides the error."""

    def test_sugar_reported_before_saturated_fat(self, valid_array):
        arr = _with_nutrients(valid_array, [50, 5, 10, 20, 25, 1, 4])
        assert validate_nutriqr_array(arr) == NutriQRErrorType.SUGAR_EXCEEDS_CARBS

    def test_length_reported_before_everything(self):
        assert validate_nutriqr_array(["bad", "", "kg", -1, 0]) == NutriQRErrorType.INVALID_ARRAY_LENGTH

    def test_gtin_reported_before_brand(self, valid_array):
        arr = _with(_with(valid_array, 0, "123"), 1, "")
        assert validate_nutriqr_array(arr) == NutriQRErrorType.INVALID_GTIN13

    def test_delimiter_reported_before_unit(self, valid_array):
        arr = _with(_with(valid_array, 1, "Brand|With|Pipe|Product"), 2, "kg")
        assert validate_nutriqr_array(arr) == NutriQRErrorType.MISSING_DELIMITER

    def test_base_reported_before_portion_factor(self, valid_array):
        arr = _with(_with(valid_array, 3, 0), 4, 0)
        assert validate_nutriqr_array(arr) == NutriQRErrorType.INVALID_BASE_QUANTITY

    def test_first_bad_nutrient_index_wins(self, valid_array):
        issue = find_validation_issue(_with_nutrients(valid_array, [50, -1, 5, -20, 10, 1, 4]))
        assert issue.index == 1

    def test_saturated_fat_reported_before_sum(self, valid_array):
        arr = _with_nutrients(valid_array, [500, 5, 10, 20, 10, 1, 4])
        assert validate_nutriqr_array(arr) == NutriQRErrorType.SATURATED_FAT_EXCEEDS_TOTAL_FAT


class TestValidationIssue:
    """Tests for ValidationIssue."""

    def test_to_error_without_index(self):
        error = ValidationIssue(NutriQRErrorType.INVALID_UNIT).to_error()

        assert isinstance(error, NutriQRError)
        assert error.error_type == NutriQRErrorType.INVALID_UNIT
        assert error.context == {}

    def test_to_error_with_index(self):
        error = ValidationIssue(NutriQRErrorType.INVALID_NUTRIENT_VALUE, index=2).to_error()

        assert error.context == {"index": 2}
        assert "index 2" in error.message
