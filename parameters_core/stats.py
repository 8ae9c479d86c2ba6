"""
Descriptive Statistics Module
=============================

Summary description of numeric distributions.
"""

import pandas as pd
import numpy as np
from pandas.api.types import is_bool_dtype, is_numeric_dtype
from scipy import stats as scipy_stats

from . import config
from .exceptions import InvalidArgumentError


def _describe_vector(
    x: pd.Series,
    centrality: str,
    dispersion: bool,
    range: bool
) -> dict:
    """Describe one numeric vector as an ordered dict of statistics."""
    n_missing = int(x.isna().sum())
    values = x.dropna().to_numpy(dtype=float)
    n_obs = len(values)

    out = {}
    if centrality in ('mean', 'all'):
        out['Mean'] = values.mean() if n_obs else np.nan
        if dispersion:
            out['SD'] = values.std(ddof=1) if n_obs > 1 else np.nan
    if centrality in ('median', 'all'):
        out['Median'] = np.median(values) if n_obs else np.nan
        if dispersion:
            out['MAD'] = (
                scipy_stats.median_abs_deviation(values, scale='normal')
                if n_obs else np.nan
            )

    if range:
        out['Min'] = values.min() if n_obs else np.nan
        out['Max'] = values.max() if n_obs else np.nan

    # Bias-corrected (type 2) skewness and excess kurtosis
    out['Skewness'] = scipy_stats.skew(values, bias=False) if n_obs > 2 else np.nan
    out['Kurtosis'] = scipy_stats.kurtosis(values, bias=False) if n_obs > 3 else np.nan

    out['n_Obs'] = n_obs
    out['n_Missing'] = n_missing
    return out


def describe_distribution(
    x,
    centrality: str = None,
    dispersion: bool = True,
    range: bool = True
) -> pd.DataFrame:
    """
    Describe the distribution of a numeric vector or of each numeric column.

    Parameters:
        x: Numeric Series / array, or a DataFrame
        centrality: 'mean', 'median' or 'all'. Defaults to config.DEFAULT_CENTRALITY
        dispersion: Add SD (for the mean) and MAD (for the median)
        range: Add Min and Max

    Returns:
        DataFrame with one row per described variable. DataFrame input gets a
        leading 'Variable' column; non-numeric columns are skipped.
    """
    if centrality is None:
        centrality = config.DEFAULT_CENTRALITY
    centrality = centrality.lower()
    if centrality not in config.CENTRALITY_OPTIONS:
        raise InvalidArgumentError(
            f"centrality must be one of {config.CENTRALITY_OPTIONS}, got '{centrality}'"
        )

    if isinstance(x, pd.DataFrame):
        rows = []
        for col in x.columns:
            if not is_numeric_dtype(x[col]) or is_bool_dtype(x[col]):
                continue
            row = {'Variable': col}
            row.update(_describe_vector(x[col], centrality, dispersion, range))
            rows.append(row)
        columns = ['Variable'] + list(
            _describe_vector(pd.Series([], dtype=float), centrality, dispersion, range)
        )
        return pd.DataFrame(rows, columns=columns)

    x = pd.Series(x)
    if not is_numeric_dtype(x) or is_bool_dtype(x):
        raise InvalidArgumentError(f"Cannot describe a non-numeric vector ({x.dtype})")

    return pd.DataFrame([_describe_vector(x, centrality, dispersion, range)])
