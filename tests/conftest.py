import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def small_loadings():
    # 4 variables x 2 factors, variables 0/2 on factor 1 and 1/3 on factor 2
    return pd.DataFrame(
        [[0.8, 0.1], [0.2, 0.7], [0.75, 0.05], [0.1, 0.65]],
        index=['v0', 'v1', 'v2', 'v3'],
        columns=['F1', 'F2'],
    )


@pytest.fixture
def two_factor_data():
    # Six indicators: x1-x3 driven by one latent factor, x4-x6 by another
    rng = np.random.RandomState(0)
    n = 500
    f1 = rng.normal(size=n)
    f2 = rng.normal(size=n)
    noise = rng.normal(scale=0.4, size=(n, 6))
    return pd.DataFrame({
        'x1': 0.9 * f1 + noise[:, 0],
        'x2': 0.8 * f1 + noise[:, 1],
        'x3': 0.7 * f1 + noise[:, 2],
        'x4': 0.9 * f2 + noise[:, 3],
        'x5': 0.8 * f2 + noise[:, 4],
        'x6': 0.7 * f2 + noise[:, 5],
    })
