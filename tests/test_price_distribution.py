import numpy as np
import pandas as pd
import pytest
from scipy.integrate import trapezoid

from bootstrap_estimator import EmptySampleError, InvalidParameterError
from price_distribution import compare_group_fits, fit_gamma


def test_fit_recovers_gamma_parameters():
    rng = np.random.RandomState(1)
    prices = rng.gamma(3.0, 40.0, size=5000)
    fit = fit_gamma(prices)

    assert fit.shape == pytest.approx(3.0, rel=0.1)
    assert fit.scale == pytest.approx(40.0, rel=0.1)
    assert fit.mean == pytest.approx(prices.mean(), rel=0.02)
    assert fit.sample_size == 5000
    assert fit.ks_pvalue > 0.01


def test_fit_ignores_non_positive_and_missing():
    fit = fit_gamma([np.nan, -3.0, 0.0, 50.0, 60.0, 75.0, 90.0, 120.0])
    assert fit.sample_size == 5


def test_fit_without_prices_raises():
    with pytest.raises(EmptySampleError):
        fit_gamma([np.nan, 0.0])


def test_pdf_is_a_density():
    fit = fit_gamma(np.random.RandomState(2).gamma(2.0, 10.0, size=500))
    x = np.linspace(0.01, 400, 20000)
    assert trapezoid(fit.pdf(x), x) == pytest.approx(1.0, abs=0.01)


def test_compare_group_fits_skips_small_groups(listings):
    small = pd.DataFrame({"price": [10.0, 20.0, 30.0], "neighborhood": ["Tiny"] * 3})
    frame = compare_group_fits(pd.concat([listings, small], ignore_index=True), "neighborhood", min_group_size=30)

    assert sorted(frame["neighborhood"]) == ["Downtown", "Suburb", "Uptown"]
    assert (frame["sample_size"] == 120).all()
    assert frame["ks_pvalue"].between(0, 1).all()


def test_fit_of_identical_prices_raises():
    with pytest.raises(InvalidParameterError):
        fit_gamma([100.0] * 40)


def test_constant_price_group_is_skipped(listings):
    flat = pd.DataFrame({"price": [100.0] * 40, "neighborhood": ["Flat"] * 40})
    frame = compare_group_fits(pd.concat([listings, flat], ignore_index=True), "neighborhood")
    assert sorted(frame["neighborhood"]) == ["Downtown", "Suburb", "Uptown"]

    assert compare_group_fits(flat, "neighborhood").empty
