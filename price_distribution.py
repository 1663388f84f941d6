"""
Gamma fit of the listing price distribution
"""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy import stats

from bootstrap_estimator import EmptySampleError, InvalidParameterError
from listing_query import PRICE_COLUMN, resolve_column

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GammaFit:
    shape: float
    scale: float
    log_likelihood: float
    ks_statistic: float
    ks_pvalue: float
    sample_size: int

    @property
    def mean(self):
        return self.shape * self.scale

    def pdf(self, x):
        return stats.gamma.pdf(x, self.shape, loc=0, scale=self.scale)


def fit_gamma(prices):
    """
    Maximum-likelihood gamma fit with the location fixed at zero

    Parameters:
    -----------
    prices : array-like of float
        Positive prices

    Returns:
    --------
    GammaFit: Fitted parameters and a Kolmogorov-Smirnov goodness-of-fit test
    """
    values = np.asarray(prices, dtype=float)
    values = values[np.isfinite(values) & (values > 0)]
    if values.size == 0:
        raise EmptySampleError("No positive prices to fit")
    if values.min() == values.max():
        raise InvalidParameterError(f"Cannot fit a gamma to {values.size} identical prices")

    shape, _, scale = stats.gamma.fit(values, floc=0)
    log_likelihood = float(np.sum(stats.gamma.logpdf(values, shape, loc=0, scale=scale)))
    ks = stats.kstest(values, 'gamma', args=(shape, 0, scale))

    return GammaFit(
        shape=float(shape),
        scale=float(scale),
        log_likelihood=log_likelihood,
        ks_statistic=float(ks.statistic),
        ks_pvalue=float(ks.pvalue),
        sample_size=int(values.size),
    )


def compare_group_fits(df, group_by, min_group_size=30, price_column=PRICE_COLUMN):
    """Fit a gamma per group and report how well each fit holds up"""
    column = resolve_column(df, group_by)

    records = []
    for key, group in df.groupby(column, sort=True, observed=True):
        prices = group[price_column].dropna()
        if len(prices) < min_group_size:
            continue
        try:
            fit = fit_gamma(prices)
        except ValueError as e:
            logger.warning(f"Skipping gamma fit for {group_by}={key!r}: {e}")
            continue
        records.append({
            group_by: key,
            'sample_size': fit.sample_size,
            'shape': fit.shape,
            'scale': fit.scale,
            'gamma_mean': fit.mean,
            'ks_statistic': fit.ks_statistic,
            'ks_pvalue': fit.ks_pvalue,
        })

    logger.info(f"Fitted gamma to {len(records)} groups of '{group_by}' with at least {min_group_size} listings")
    return pd.DataFrame(records, columns=[group_by, 'sample_size', 'shape', 'scale', 'gamma_mean',
                                          'ks_statistic', 'ks_pvalue'])
