import os

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pandas as pd
import pytest

from bootstrap_estimator import EstimatorConfig


@pytest.fixture()
def config():
    return EstimatorConfig(resample_count=500, alpha=0.05, seed=7)


@pytest.fixture()
def five_listings():
    return pd.DataFrame({
        "price": [10.0, 20.0, 30.0, 40.0, 50.0],
        "neighborhood": ["A", "A", "B", "B", "C"],
        "bedrooms": [1.0, 2.0, 2.0, 2.0, 3.0],
        "beds": [1.0, 1.0, 2.0, 3.0, 3.0],
        "property_type": ["Apartment", "Apartment", "House", "Apartment", "House"],
        "room_type": ["Private room", "Entire home/apt", "Entire home/apt", "Entire home/apt", "Entire home/apt"],
        "host_is_superhost": [False, True, False, True, True],
        "summary": ["Cozy room", "Great view", "Quiet house with a VIEW", "Modern flat", None],
    })


@pytest.fixture()
def listings():
    """A few hundred synthetic listings across three neighborhoods"""
    rng = np.random.RandomState(0)
    frames = []
    for name, shape, scale in [("Downtown", 4.0, 50.0), ("Uptown", 3.0, 40.0), ("Suburb", 5.0, 20.0)]:
        n = 120
        frames.append(pd.DataFrame({
            "price": rng.gamma(shape, scale, size=n).round(2) + 1,
            "neighborhood": name,
            "bedrooms": rng.randint(0, 4, size=n).astype(float),
            "beds": rng.randint(1, 5, size=n).astype(float),
            "property_type": rng.choice(["Apartment", "House", "Condominium"], size=n),
            "room_type": rng.choice(["Entire home/apt", "Private room"], size=n),
            "host_is_superhost": rng.rand(n) < 0.3,
            "summary": rng.choice(["Lovely view of the bay", "Cozy studio", "Luxury loft downtown", ""], size=n),
        }))
    return pd.concat(frames, ignore_index=True)
