"""
Filtered bootstrap queries over the cleaned listings table
"""

import logging

import pandas as pd

from bootstrap_estimator import EmptySampleError, InvalidParameterError, estimate_with_config

logger = logging.getLogger(__name__)

PRICE_COLUMN = 'price'

# Filter attribute -> column in the cleaned dataset
FILTER_COLUMNS = {
    'neighborhood': 'neighborhood',
    'bedrooms': 'bedrooms',
    'beds': 'beds',
    'property_type': 'property_type',
    'room_type': 'room_type',
    'superhost': 'host_is_superhost',
}


def resolve_column(df, attribute):
    """Map a filter attribute (or a plain column name) to a column of df"""
    column = FILTER_COLUMNS.get(attribute, attribute)
    if column not in df.columns:
        if attribute in FILTER_COLUMNS:
            raise InvalidParameterError(f"Dataset has no '{column}' column for attribute '{attribute}'")
        raise InvalidParameterError(f"Unknown attribute: {attribute}")
    return column


def _accepted_values(values):
    if isinstance(values, (str, bytes)) or not hasattr(values, '__iter__'):
        return [values]
    return list(values)


def apply_filters(df, filter_spec=None):
    """
    Select the rows of df matching every predicate in filter_spec

    Parameters:
    -----------
    df : DataFrame
        Cleaned listings
    filter_spec : dict, optional
        Attribute name -> accepted values. Values within one attribute are
        OR-ed, attributes are AND-ed. None or {} selects every row.

    Returns:
    --------
    DataFrame: Matching rows
    """
    mask = pd.Series(True, index=df.index)
    for attribute, values in (filter_spec or {}).items():
        if attribute not in FILTER_COLUMNS:
            raise InvalidParameterError(
                f"Unknown filter attribute '{attribute}', expected one of {sorted(FILTER_COLUMNS)}")
        column = resolve_column(df, attribute)
        mask &= df[column].isin(_accepted_values(values))

    return df[mask]


def query(df, filter_spec, config, random_state=None, price_column=PRICE_COLUMN):
    """
    Bootstrap the mean price of the listings matching filter_spec

    Raises EmptySampleError when no listing with a price matches.
    """
    matched = apply_filters(df, filter_spec)
    prices = matched[price_column].dropna().to_numpy(dtype=float)
    logger.info(f"Filter {dict(filter_spec or {})} matched {len(prices)} listings")

    if len(prices) == 0:
        raise EmptySampleError(f"No listings match {dict(filter_spec or {})}")

    return estimate_with_config(prices, config, random_state=random_state)
