"""
Non-parametric bootstrap estimate of mean listing price
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from sklearn.utils import check_random_state, resample

logger = logging.getLogger(__name__)

# At or below this many observations an interval is still computed but flagged.
# Inclusive so that a five-value sample such as [10, 20, 30, 40, 50] is flagged.
SMALL_SAMPLE_THRESHOLD = 5

# Upper bound on values drawn per resample() call
MAX_DRAWS_PER_CHUNK = 1_000_000


class BootstrapError(Exception):
    """Base class for bootstrap estimation errors"""


class EmptySampleError(BootstrapError, ValueError):
    """No data matches the given criteria"""


class InvalidParameterError(BootstrapError, ValueError):
    """Estimator or filter parameters are out of range"""


class SmallSampleWarning(UserWarning):
    """At most SMALL_SAMPLE_THRESHOLD observations; treat the interval as low confidence"""


@dataclass(frozen=True)
class EstimatorConfig:
    resample_count: int = 1000
    alpha: float = 0.05
    seed: Optional[int] = None

    def __post_init__(self):
        validate_parameters(self.resample_count, self.alpha)


@dataclass(frozen=True)
class BootstrapResult:
    point_estimate: float
    lower_bound: float
    upper_bound: float
    sample_size: int
    warnings: tuple = field(default=(), compare=False)

    @property
    def is_small_sample(self):
        return any(isinstance(w, SmallSampleWarning) for w in self.warnings)

    def to_dict(self):
        return {
            'point_estimate': self.point_estimate,
            'lower_bound': self.lower_bound,
            'upper_bound': self.upper_bound,
            'sample_size': self.sample_size,
            'small_sample': self.is_small_sample,
        }


def validate_parameters(resample_count, alpha):
    """Raise InvalidParameterError unless resample_count > 0 and 0 < alpha < 1"""
    if isinstance(resample_count, bool) or not isinstance(resample_count, (int, np.integer)):
        raise InvalidParameterError(f"resample_count must be an integer, got {resample_count!r}")
    if resample_count <= 0:
        raise InvalidParameterError(f"resample_count must be positive, got {resample_count}")
    if not 0 < alpha < 1:
        raise InvalidParameterError(f"alpha must be in (0, 1), got {alpha}")


def _resample_means(values, resample_count, random_state):
    """
    Means of resample_count bootstrap samples of len(values) each

    Draws are taken in chunks of whole trials so that large groups don't
    allocate resample_count * n values at once.
    """
    n = len(values)
    trials_per_chunk = max(1, MAX_DRAWS_PER_CHUNK // n)
    means = np.empty(resample_count, dtype=float)

    done = 0
    while done < resample_count:
        trials = min(trials_per_chunk, resample_count - done)
        draws = resample(values, replace=True, n_samples=trials * n, random_state=random_state)
        means[done:done + trials] = draws.reshape(trials, n).mean(axis=1)
        done += trials

    return means


def estimate(observations, resample_count=1000, alpha=0.05, random_state=None):
    """
    Bootstrap point estimate and percentile confidence interval for the mean

    Parameters:
    -----------
    observations : array-like of float
        Observed prices. May be empty, in which case EmptySampleError is raised.
    resample_count : int, default=1000
        Number of bootstrap trials
    alpha : float, default=0.05
        Two-sided interval covers 1 - alpha
    random_state : None, int or numpy.random.RandomState
        Generator owned by this call; pass an int for reproducible results

    Returns:
    --------
    BootstrapResult
    """
    values = np.asarray(observations, dtype=float).ravel()
    if values.size == 0:
        raise EmptySampleError("No data matches the given criteria")
    if not np.isfinite(values).all():
        raise InvalidParameterError("observations must all be finite")

    validate_parameters(resample_count, alpha)

    warnings = ()
    if values.size <= SMALL_SAMPLE_THRESHOLD:
        message = f"Only {values.size} observations; interval is low confidence"
        logger.warning(message)
        warnings = (SmallSampleWarning(message),)

    # every resample of a constant sample is that constant
    if values.min() == values.max():
        value = float(values[0])
        return BootstrapResult(value, value, value, int(values.size), warnings)

    rng = check_random_state(random_state)
    means = _resample_means(values, int(resample_count), rng)

    lower, upper = np.percentile(means, [100 * alpha / 2, 100 * (1 - alpha / 2)])

    return BootstrapResult(
        point_estimate=float(np.mean(means)),
        lower_bound=float(lower),
        upper_bound=float(upper),
        sample_size=int(values.size),
        warnings=warnings,
    )


def estimate_with_config(observations, config, random_state=None):
    """Run estimate() with the parameters of an EstimatorConfig"""
    if random_state is None:
        random_state = config.seed
    return estimate(observations, config.resample_count, config.alpha, random_state)
