"""
Analysis Results Module
=======================

Typed containers for fitted factor analysis and PCA solutions.
"""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd
from sklearn.preprocessing import StandardScaler


@dataclass
class FactorSolution:
    """
    Container for a fitted factor analysis or PCA solution.

    loadings holds one row per variable and one column per factor/component.
    summary holds one row per factor with Eigenvalues, Variance and
    Variance_Cumulative. communalities holds Communality, Uniqueness and
    Complexity per variable.
    """
    method: str
    rotation: str
    loadings: pd.DataFrame
    summary: pd.DataFrame
    communalities: pd.DataFrame
    scores: pd.DataFrame
    model: Any
    scaler: StandardScaler
    std_dev: Optional[np.ndarray] = None

    @property
    def n_factors(self) -> int:
        return self.loadings.shape[1]

    @property
    def factor_names(self) -> list[str]:
        return list(self.loadings.columns)

    @property
    def kind(self) -> str:
        """Plain-English name of the latent dimensions."""
        return 'latent factor' if self.method == 'fa' else 'principal component'

    def to_dataframe(self) -> pd.DataFrame:
        """
        Return loadings and communalities side by side, one row per variable.
        """
        table = self.loadings.join(self.communalities)
        table.index.name = 'Variable'
        return table.reset_index()
