import pytest

from bootstrap_estimator import EmptySampleError, InvalidParameterError, estimate
from listing_query import FILTER_COLUMNS, apply_filters, query


def test_empty_filter_selects_everything(five_listings):
    assert len(apply_filters(five_listings, {})) == 5
    assert len(apply_filters(five_listings, None)) == 5


def test_query_without_predicates_matches_direct_estimate(five_listings, config):
    result = query(five_listings, {}, config)
    direct = estimate([10, 20, 30, 40, 50], config.resample_count, config.alpha, random_state=config.seed)
    assert result == direct
    assert result.sample_size == 5
    assert result.is_small_sample


def test_values_within_attribute_are_ored(five_listings):
    matched = apply_filters(five_listings, {"neighborhood": ["A", "C"]})
    assert list(matched["price"]) == [10.0, 20.0, 50.0]


def test_attributes_are_anded(five_listings, config):
    matched = apply_filters(five_listings, {"bedrooms": [2], "superhost": [True]})
    assert list(matched["price"]) == [20.0, 40.0]

    result = query(five_listings, {"bedrooms": [2], "superhost": [True]}, config)
    assert result.sample_size == 2
    assert 20.0 <= result.lower_bound <= result.upper_bound <= 40.0


def test_scalar_value_is_a_single_element_set(five_listings):
    matched = apply_filters(five_listings, {"property_type": "House"})
    assert list(matched["price"]) == [30.0, 50.0]


@pytest.mark.parametrize("attribute,values,expected", [
    ("beds", [3], [40.0, 50.0]),
    ("room_type", ["Private room"], [10.0]),
    ("superhost", [False], [10.0, 30.0]),
])
def test_each_attribute_maps_to_its_column(five_listings, attribute, values, expected):
    assert attribute in FILTER_COLUMNS
    assert list(apply_filters(five_listings, {attribute: values})["price"]) == expected


def test_no_match_raises_empty_sample(five_listings, config):
    with pytest.raises(EmptySampleError):
        query(five_listings, {"neighborhood": ["Nowhere"]}, config)


def test_empty_value_set_matches_nothing(five_listings, config):
    with pytest.raises(EmptySampleError):
        query(five_listings, {"bedrooms": []}, config)


def test_unknown_attribute_is_rejected(five_listings, config):
    with pytest.raises(InvalidParameterError):
        query(five_listings, {"bathrooms": [1]}, config)


def test_missing_column_is_rejected(five_listings, config):
    with pytest.raises(InvalidParameterError):
        query(five_listings.drop(columns=["beds"]), {"beds": [1]}, config)


def test_rows_without_price_are_ignored(five_listings, config):
    df = five_listings.copy()
    df.loc[0, "price"] = float("nan")
    result = query(df, {"neighborhood": ["A"]}, config)
    assert result.sample_size == 1
    assert result.point_estimate == 20.0
