"""
Output Naming and Saving Module
===============================

Dated output directories and consistently named result files.

Naming Pattern: {DATE}-{TEST}-{SUFFIX}.{EXT}
Example: 2024-02-09-efa-loadings.csv
"""

import os
from datetime import date
from pathlib import Path

import pandas as pd

from . import config
from .loadings import filter_loadings, sort_loadings
from .results import FactorSolution


def get_output_dir(test_name: str, base: str = None) -> Path:
    """
    Create and return dated output directory {base}/{DATE}-{test_name}/.

    Parameters:
        test_name: Name of the analysis (lowercase-hyphen)
        base: Base output directory. Defaults to config.DEFAULT_OUTPUT_BASE

    Returns:
        Path to created output directory
    """
    if base is None:
        base = config.DEFAULT_OUTPUT_BASE

    output_dir = Path(base) / f"{date.today().isoformat()}-{test_name}"
    os.makedirs(output_dir, exist_ok=True)
    return output_dir


def build_filename(output_dir: Path, test_name: str, suffix: str, ext: str) -> Path:
    """Build dated filename with pattern: {DATE}-{TEST}-{SUFFIX}.{EXT}"""
    return Path(output_dir) / f"{date.today().isoformat()}-{test_name}-{suffix}.{ext}"


def save_csv(
    df: pd.DataFrame,
    output_dir: Path,
    test_name: str,
    suffix: str,
    index: bool = False
) -> Path:
    """
    Save DataFrame to CSV with dated filename.

    Parameters:
        df: DataFrame to save
        output_dir: Output directory path
        test_name: Test name for filename
        suffix: Descriptive suffix (e.g., 'parameters', 'loadings')
        index: Whether to include index in output

    Returns:
        Path to saved file
    """
    filepath = build_filename(output_dir, test_name, suffix, 'csv')
    df.to_csv(filepath, index=index)
    print(f"Saved: {filepath}")
    return filepath


def save_loadings(
    solution: FactorSolution,
    output_dir: Path,
    test_name: str,
    sort: bool = True,
    threshold=None
) -> Path:
    """
    Save a solution's loadings and communalities as one CSV.

    Parameters:
        solution: Fitted FactorSolution
        output_dir: Output directory path
        test_name: Test name for filename
        sort: Group variables by their strongest factor
        threshold: Optional filter_loadings() threshold; blanked cells are
            written as empty fields

    Returns:
        Path to saved file
    """
    table = solution.to_dataframe().set_index('Variable')
    columns = solution.factor_names

    if sort:
        table = sort_loadings(table, columns)
    if threshold is not None:
        table = filter_loadings(table, threshold, columns)

    return save_csv(table, output_dir, test_name, f'{solution.method}-loadings', index=True)


def save_report(
    text: str,
    output_dir: Path,
    test_name: str,
    suffix: str = 'report'
) -> Path:
    """
    Save text report with dated filename.

    Returns:
        Path to saved file
    """
    filepath = build_filename(output_dir, test_name, suffix, 'txt')
    with open(filepath, 'w') as f:
        f.write(text)
    print(f"Saved: {filepath}")
    return filepath


def list_outputs(output_dir: Path) -> list[str]:
    """List all files in the output directory."""
    if Path(output_dir).exists():
        return sorted(os.listdir(output_dir))
    return []
