"""
Data Preparation Module
=======================

Loading, standardizing, recoding and group-/de-meaning of tabular data.
"""

import warnings

import pandas as pd
import numpy as np
from pandas.api.types import is_bool_dtype, is_numeric_dtype
from sklearn.preprocessing import StandardScaler

from . import config
from .exceptions import InvalidArgumentError, PartialDataWarning


def load_csv(filepath: str) -> pd.DataFrame:
    """
    Load CSV file with basic validation.

    Parameters:
        filepath: Path to CSV file

    Returns:
        DataFrame with loaded data
    """
    df = pd.read_csv(filepath)
    print(f"Loaded {len(df):,} records with {len(df.columns)} columns from {filepath}")
    return df


def standardize_features(
    df: pd.DataFrame,
    columns: list[str] = None
) -> tuple[np.ndarray, pd.DataFrame, pd.Index, StandardScaler]:
    """
    Z-score normalize selected columns.

    Parameters:
        df: Input DataFrame
        columns: Columns to standardize. Defaults to all numeric columns

    Returns:
        Tuple of (scaled array, scaled DataFrame, valid indices, fitted scaler)
    """
    if columns is None:
        columns = [c for c in df.columns if is_numeric_dtype(df[c]) and not is_bool_dtype(df[c])]

    # Get rows with complete data
    data = df[columns].dropna()
    valid_indices = data.index

    scaler = StandardScaler()
    scaled_array = scaler.fit_transform(data)
    scaled_df = pd.DataFrame(scaled_array, columns=columns, index=valid_indices)

    return scaled_array, scaled_df, valid_indices, scaler


# =============================================================================
# RECODING HELPERS
# =============================================================================
def _levels(x: pd.Series) -> list:
    """Distinct non-missing levels, in category order or sorted."""
    if isinstance(x.dtype, pd.CategoricalDtype):
        return list(x.cat.categories)
    levels = x.dropna().unique().tolist()
    try:
        return sorted(levels)
    except TypeError:
        return sorted(levels, key=str)


def factor_to_numeric(x: pd.Series) -> pd.Series:
    """
    Convert a categorical or string series to numbers.

    Values that already parse as numbers keep their numeric value; otherwise
    levels are numbered 1..n in level order. Missing values stay missing.
    """
    if is_numeric_dtype(x) and not is_bool_dtype(x):
        return x
    if is_bool_dtype(x):
        return x.astype(float)

    parsed = pd.to_numeric(x.astype('object'), errors='coerce')
    if parsed[x.notna()].notna().all():
        return parsed.astype(float)

    codes = {level: i + 1 for i, level in enumerate(_levels(x))}
    return x.astype('object').map(codes).astype(float)


def recode_to_zero(x: pd.Series) -> pd.Series:
    """Shift a (possibly categorical) series so its lowest value is zero."""
    x = factor_to_numeric(x)
    return x - x.min(skipna=True)


def levels_to_codes(x: pd.Series) -> pd.Series:
    """Zero-based integer codes of the distinct levels; missing stays missing."""
    codes = {level: i for i, level in enumerate(_levels(x))}
    return x.astype('object').map(codes).astype(float)


def factor_to_dummy(x: pd.Series) -> pd.DataFrame:
    """
    Expand a categorical series into one 0/1 column per level.

    Numeric input is returned unchanged as a single-column frame.
    """
    if is_numeric_dtype(x) and not is_bool_dtype(x):
        return x.to_frame()

    missing = x.isna()
    dummies = {}
    for level in _levels(x):
        column = (x == level).astype(float)
        column[missing] = np.nan
        dummies[level] = column
    return pd.DataFrame(dummies, index=x.index)


def find_most_common(x: pd.Series):
    """Most frequent non-missing value."""
    counts = x.value_counts(sort=True, dropna=True)
    if counts.empty:
        return None
    return counts.index[0]


# =============================================================================
# GROUP- AND DE-MEANING
# =============================================================================
def demean(
    df: pd.DataFrame,
    select: list[str],
    group: str,
    suffix_demean: str = None,
    suffix_groupmean: str = None
) -> pd.DataFrame:
    """
    Compute group-meaned and de-meaned versions of variables.

    The group mean is the mean of a variable within each level of `group`
    (the between-subject part); the de-meaned value is the observation minus
    its group mean (the within-subject part). Both are typically entered
    together in panel / within-between regression models.

    Selected variables not found in `df` are dropped with a
    PartialDataWarning. Non-numeric variables are recoded to zero-based
    integer codes (also reported with a PartialDataWarning). Missing values
    are excluded from the group means, and a missing observation yields a
    missing de-meaned value.

    Parameters:
        df: Input DataFrame
        select: Variables to group- and de-mean
        group: Column holding the group / cluster ID
        suffix_demean: Suffix for de-meaned columns. Defaults to config.SUFFIX_DEMEAN
        suffix_groupmean: Suffix for group-mean columns. Defaults to config.SUFFIX_GROUPMEAN

    Returns:
        DataFrame with all group-mean columns followed by all de-meaned
        columns, indexed like `df`
    """
    if suffix_demean is None:
        suffix_demean = config.SUFFIX_DEMEAN
    if suffix_groupmean is None:
        suffix_groupmean = config.SUFFIX_GROUPMEAN

    if group not in df.columns:
        raise InvalidArgumentError(f"Group variable '{group}' not found in data")

    if isinstance(select, str):
        select = [select]

    not_found = [col for col in select if col not in df.columns]
    if not_found:
        warnings.warn(
            f"{len(not_found)} variables were not found in the dataset: {', '.join(not_found)}",
            PartialDataWarning,
            stacklevel=2,
        )
    select = [col for col in select if col in df.columns]

    if not select:
        return pd.DataFrame(index=df.index)

    dat = df[select].copy()

    categorical = [
        col for col in select
        if not is_numeric_dtype(dat[col]) or is_bool_dtype(dat[col])
    ]
    for col in categorical:
        dat[col] = levels_to_codes(dat[col])
    if categorical:
        warnings.warn(
            f"Categorical predictors ({', '.join(categorical)}) have been coerced to "
            f"numeric values to compute de- and group-meaned variables.",
            PartialDataWarning,
            stacklevel=2,
        )

    # groupby().mean() skips NaN, so missing values drop out of the divisor
    group_means = dat.groupby(df[group]).transform('mean')
    demeaned = dat - group_means

    group_means.columns = [f"{col}{suffix_groupmean}" for col in select]
    demeaned.columns = [f"{col}{suffix_demean}" for col in select]

    return pd.concat([group_means, demeaned], axis=1)
