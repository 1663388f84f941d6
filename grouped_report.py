"""
Bootstrap confidence-interval tables grouped by one listing attribute
"""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from bootstrap_estimator import BootstrapResult, EmptySampleError, estimate_with_config
from listing_query import PRICE_COLUMN, resolve_column

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportRow:
    rank: int
    group: object
    result: BootstrapResult


def rank_results(pairs):
    """
    Sort (key, BootstrapResult) pairs by descending point estimate and dense-rank them

    Equal estimates share a rank; the next distinct estimate gets the next
    integer. Ties keep their input order.
    """
    ordered = sorted(pairs, key=lambda pair: pair[1].point_estimate, reverse=True)

    rows = []
    rank = 0
    previous = None
    for key, result in ordered:
        if previous is None or result.point_estimate != previous:
            rank += 1
            previous = result.point_estimate
        rows.append(ReportRow(rank=rank, group=key, result=result))
    return rows


def group_seeds(seed, count):
    """Independent per-group seeds derived from one config seed"""
    if seed is None:
        return [None] * count
    return [int(s) for s in np.random.SeedSequence(seed).generate_state(count)]


def build_report(df, group_by, config, price_column=PRICE_COLUMN):
    """
    Bootstrap the mean price for every value of group_by

    Parameters:
    -----------
    df : DataFrame
        Cleaned listings
    group_by : str
        Filter attribute name (e.g. 'neighborhood', 'bedrooms') or column
    config : EstimatorConfig
        Resample count, alpha and base seed

    Returns:
    --------
    list of ReportRow, highest estimate first
    """
    column = resolve_column(df, group_by)
    priced = df[df[price_column].notna()]

    groups = [(key, group[price_column].to_numpy(dtype=float))
              for key, group in priced.groupby(column, sort=True, observed=True)]
    groups = [(key, prices) for key, prices in groups if len(prices) > 0]
    logger.info(f"Bootstrapping {len(groups)} groups of '{group_by}' ({config.resample_count} resamples each)")

    pairs = []
    for (key, prices), seed in zip(groups, group_seeds(config.seed, len(groups))):
        try:
            pairs.append((key, estimate_with_config(prices, config, random_state=seed)))
        except EmptySampleError as e:
            logger.warning(f"Skipping {group_by}={key!r}: {e}")

    return rank_results(pairs)


def report_to_frame(rows, group_label='group'):
    """Flatten report rows into a DataFrame, one row per group"""
    records = []
    for row in rows:
        record = {'rank': row.rank, group_label: row.group}
        record.update(row.result.to_dict())
        records.append(record)

    columns = ['rank', group_label, 'point_estimate', 'lower_bound', 'upper_bound',
               'sample_size', 'small_sample']
    return pd.DataFrame(records, columns=columns)
