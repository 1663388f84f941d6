"""
Mean price of listings whose summary mentions a keyword
"""

import logging

from bootstrap_estimator import EmptySampleError, estimate_with_config
from grouped_report import group_seeds, rank_results, report_to_frame
from listing_query import PRICE_COLUMN

logger = logging.getLogger(__name__)

DEFAULT_KEYWORDS = ['view', 'luxury', 'modern', 'spacious', 'cozy', 'private', 'quiet', 'walk', 'downtown', 'parking']


def keyword_mask(df, keyword, text_column='summary'):
    """Rows whose text contains keyword (case-insensitive, plain substring)"""
    return df[text_column].fillna('').astype(str).str.contains(keyword, case=False, regex=False)


def keyword_report(df, keywords, config, text_column='summary', price_column=PRICE_COLUMN):
    """
    Bootstrap the mean price of listings mentioning each keyword

    Keywords no listing mentions are skipped.

    Returns:
    --------
    list of ReportRow keyed by keyword, highest estimate first
    """
    if text_column not in df.columns:
        raise KeyError(f"Dataset has no '{text_column}' column")

    priced = df[df[price_column].notna()]
    keywords = list(dict.fromkeys(keywords))

    pairs = []
    for keyword, seed in zip(keywords, group_seeds(config.seed, len(keywords))):
        prices = priced.loc[keyword_mask(priced, keyword, text_column), price_column].to_numpy(dtype=float)
        try:
            result = estimate_with_config(prices, config, random_state=seed)
        except EmptySampleError:
            logger.warning(f"No listings mention '{keyword}', skipping")
            continue
        logger.info(f"'{keyword}': {result.sample_size} listings, mean ${result.point_estimate:.2f}")
        pairs.append((keyword, result))

    return rank_results(pairs)


def keyword_presence_frame(rows, baseline):
    """Report rows as a DataFrame with the premium over a whole-dataset baseline estimate"""
    frame = report_to_frame(rows, group_label='keyword')
    frame['premium'] = frame['point_estimate'] - baseline.point_estimate
    frame['premium_pct'] = (frame['point_estimate'] / baseline.point_estimate - 1) * 100
    return frame
