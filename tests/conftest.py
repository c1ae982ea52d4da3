import matplotlib

matplotlib.use("Agg")

import geopandas as gpd
import numpy as np
import pytest
from shapely.geometry import box

LISA = ["Not Significant", "High-High", "Low-Low", "Low-High", "High-Low"]


@pytest.fixture
def tracts():
    """20 unit squares on a 5x4 grid with census-like attributes."""
    n = 20
    rng = np.random.default_rng(42)
    bachelors = rng.uniform(10, 60, n)
    unemployed = rng.uniform(2, 15, n)
    income = 20000 + 800 * bachelors - 500 * unemployed + rng.normal(0, 200, n)
    poverty = rng.uniform(5, 40, n)
    poverty[3] = np.nan
    kmeans = (np.arange(n) % 3 + 1).astype(float)
    kmeans[7] = np.nan

    return gpd.GeoDataFrame(
        {
            "GEOID": [f"17031{i:06d}" for i in range(n)],
            "NAME": [f"Tract {i}" for i in range(n)],
            "median_income": income,
            "pct_bachelors": bachelors,
            "pct_unemployed": unemployed,
            "pct_poverty": poverty,
            "lisa_income": [LISA[i % len(LISA)] for i in range(n)],
            "kmeans_cluster": kmeans,
        },
        geometry=[box(i % 5, i // 5, i % 5 + 1, i // 5 + 1) for i in range(n)],
        crs="EPSG:4326",
    )
