"""
Loading Matrix Module
=====================

Reordering and masking of factor / component loading tables.

A loading table is a DataFrame indexed by variable name with one column per
factor or component. Missing cells are NaN. Extra non-loading columns
(labels, communalities) may be present; pass `columns` to name the loading
columns explicitly.
"""

import numbers

import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from . import config
from .exceptions import InvalidArgumentError


def _loading_values(
    loadings: pd.DataFrame,
    columns: list = None
) -> tuple[list, np.ndarray]:
    """Validate a loading table and return (loading columns, float array)."""
    if not isinstance(loadings, pd.DataFrame):
        raise InvalidArgumentError(
            f"Expected a DataFrame of loadings, got {type(loadings).__name__}"
        )
    if loadings.columns.has_duplicates:
        raise InvalidArgumentError("Loading table has duplicate column labels")
    if loadings.index.has_duplicates:
        raise InvalidArgumentError("Loading table has duplicate row labels")

    if columns is None:
        columns = list(loadings.columns)
    else:
        columns = list(columns)
        unknown = [c for c in columns if c not in loadings.columns]
        if unknown:
            raise InvalidArgumentError(f"Unknown loading columns: {unknown}")
        if len(set(columns)) != len(columns):
            raise InvalidArgumentError("Loading columns are listed more than once")

    if len(loadings) == 0 or len(columns) == 0:
        raise InvalidArgumentError(
            f"Loading table must have at least one row and one column "
            f"(got {len(loadings)} x {len(columns)})"
        )

    for col in columns:
        series = loadings[col]
        if not is_numeric_dtype(series) or is_bool_dtype(series):
            raise InvalidArgumentError(f"Loading column '{col}' is not numeric")

    values = loadings[columns].to_numpy(dtype=float, na_value=np.nan)
    if np.isinf(values).any():
        raise InvalidArgumentError("Loadings must be finite or missing")

    return columns, values


def _row_argmax(values: np.ndarray) -> np.ndarray:
    """Column position of each row's largest |value|, -1 for all-missing rows."""
    absolute = np.abs(values)
    missing = np.isnan(absolute)
    # argmax returns the first occurrence, so ties go to the lower column
    positions = np.argmax(np.where(missing, -np.inf, absolute), axis=1)
    positions[missing.all(axis=1)] = -1
    return positions


def cluster_assignment(
    loadings: pd.DataFrame,
    columns: list = None
) -> pd.Series:
    """
    Assign each variable to the factor on which it loads most strongly.

    Parameters:
        loadings: Loading table (variables x factors)
        columns: Loading columns. Defaults to all columns

    Returns:
        Series of column positions indexed like `loadings`. Rows with no
        non-missing loading are assigned -1.
    """
    _, values = _loading_values(loadings, columns)
    return pd.Series(_row_argmax(values), index=loadings.index, name='Cluster')


def sort_loadings(
    loadings: pd.DataFrame,
    columns: list = None
) -> pd.DataFrame:
    """
    Reorder variables so that those loading on the same factor are adjacent.

    Variables are grouped by their strongest factor. Groups appear in the
    order their factor is first encountered scanning the rows top to bottom;
    within a group, rows are ordered by descending absolute loading on that
    factor (stable, so ties keep their original order). Rows with every
    loading missing are placed last, in their original order.

    Parameters:
        loadings: Loading table (variables x factors)
        columns: Loading columns. Defaults to all columns

    Returns:
        New DataFrame with the rows permuted
    """
    _, values = _loading_values(loadings, columns)
    clusters = _row_argmax(values)

    encountered = []
    for cluster in clusters:
        if cluster >= 0 and cluster not in encountered:
            encountered.append(cluster)

    order = []
    for cluster in encountered:
        members = np.flatnonzero(clusters == cluster)
        strength = np.abs(values[members, cluster])
        order.extend(members[np.argsort(-strength, kind='stable')])
    order.extend(np.flatnonzero(clusters == -1))

    return loadings.iloc[order].copy()


def _threshold_mask(values: np.ndarray, threshold) -> np.ndarray:
    """Boolean mask of the cells kept by `threshold`."""
    present = ~np.isnan(values)
    absolute = np.abs(values)

    if isinstance(threshold, str):
        if threshold != config.MAX_ONLY:
            raise InvalidArgumentError(
                f"Unknown threshold mode '{threshold}' (expected '{config.MAX_ONLY}')"
            )
        mask = np.zeros(values.shape, dtype=bool)
        positions = _row_argmax(values)
        rows = np.flatnonzero(positions >= 0)
        mask[rows, positions[rows]] = True
        return mask

    if isinstance(threshold, bool) or not isinstance(threshold, numbers.Real):
        raise InvalidArgumentError(
            f"Threshold must be a number or '{config.MAX_ONLY}', got {threshold!r}"
        )
    if not np.isfinite(threshold) or threshold < 0:
        raise InvalidArgumentError(f"Threshold must be finite and >= 0, got {threshold}")

    if threshold < 1:
        return present & (absolute >= threshold)

    # Count mode: keep the k strongest loadings of each column
    k = int(round(threshold))
    n_rows = values.shape[0]
    if k >= n_rows:
        raise InvalidArgumentError(
            f"Cannot keep {k} loadings per column from only {n_rows} variables"
        )

    mask = np.zeros(values.shape, dtype=bool)
    for j in range(values.shape[1]):
        ranking = np.argsort(np.where(present[:, j], -absolute[:, j], np.inf), kind='stable')
        top = [i for i in ranking[:k] if present[i, j]]
        mask[top, j] = True
    return mask


def filter_loadings(
    loadings: pd.DataFrame,
    threshold,
    columns: list = None
) -> pd.DataFrame:
    """
    Blank out small loadings for display.

    Threshold modes:
        0 <= threshold < 1: cells with |loading| < threshold become NaN
        threshold >= 1: keep the round(threshold) largest |loadings| of each
            column; ties at the cut-off go to the earlier row
        'max': keep only the largest |loading| of each row

    Parameters:
        loadings: Loading table (variables x factors)
        threshold: Numeric threshold, column count, or 'max'
        columns: Loading columns. Defaults to all columns

    Returns:
        New DataFrame of the same shape with filtered cells set to NaN

    Raises:
        InvalidArgumentError: negative or malformed threshold, empty table,
            or a column count not smaller than the number of variables
    """
    columns, values = _loading_values(loadings, columns)
    mask = _threshold_mask(values, threshold)

    filtered = loadings.copy()
    filtered[columns] = np.where(mask, values, np.nan)
    return filtered


def format_loadings(
    loadings: pd.DataFrame,
    digits: int = None,
    columns: list = None
) -> str:
    """
    Render a loading table as text, leaving missing loadings blank.

    Parameters:
        loadings: Loading table
        digits: Decimal places. Defaults to config.DEFAULT_DIGITS
        columns: Loading columns. Defaults to all numeric columns

    Returns:
        Formatted table string
    """
    if digits is None:
        digits = config.DEFAULT_DIGITS
    if columns is None:
        columns = [c for c in loadings.columns if is_numeric_dtype(loadings[c])]

    def _fmt(value):
        return '' if pd.isna(value) else f"{value:.{digits}f}"

    return loadings.to_string(formatters={col: _fmt for col in columns})
