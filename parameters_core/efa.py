"""
Factor Analysis and PCA Module
==============================

Factorability testing, factor / component extraction, and summaries of the
resulting loading solutions.
"""

import pandas as pd
import numpy as np
from factor_analyzer import FactorAnalyzer
from factor_analyzer.factor_analyzer import calculate_bartlett_sphericity, calculate_kmo
from factor_analyzer.rotator import Rotator
from sklearn.decomposition import PCA

from . import config
from . import data
from .exceptions import InvalidArgumentError
from .loadings import filter_loadings, format_loadings, sort_loadings
from .results import FactorSolution


def check_factorability(scaled_data: np.ndarray, var_names: list[str]) -> dict:
    """
    Test whether data is suitable for factor analysis.

    Performs:
    - Bartlett's Test of Sphericity: Should be significant (p < 0.05)
    - KMO (Kaiser-Meyer-Olkin): Should be > 0.6, ideally > 0.8

    Parameters:
        scaled_data: Standardized data array (n_samples x n_features)
        var_names: List of variable names

    Returns:
        Dictionary with test results and interpretations
    """
    chi_square, p_value = calculate_bartlett_sphericity(scaled_data)
    kmo_all, kmo_model = calculate_kmo(scaled_data)

    results = {
        'bartlett_chi_square': chi_square,
        'bartlett_p_value': p_value,
        'bartlett_pass': p_value < 0.05,
        'kmo_overall': kmo_model,
        'kmo_label': config.get_kmo_label(kmo_model),
        'kmo_per_variable': dict(zip(var_names, kmo_all)),
    }

    print("\n" + "=" * 60)
    print("FACTORABILITY TESTS")
    print("=" * 60)
    print(f"\nBartlett's Test of Sphericity:")
    print(f"  Chi-square: {chi_square:,.2f}")
    print(f"  p-value: {p_value:.2e}")
    print(f"  Result: {'PASS' if results['bartlett_pass'] else 'FAIL'}")
    print(f"\nKaiser-Meyer-Olkin (KMO) Measure:")
    print(f"  Overall KMO: {kmo_model:.3f} ({results['kmo_label']})")

    return results


def get_factorability_summary(results: dict) -> pd.DataFrame:
    """
    Convert factorability results to a summary DataFrame.

    Parameters:
        results: Output from check_factorability()

    Returns:
        DataFrame with factorability test results
    """
    rows = [
        {'Test': 'Bartlett_Chi_Square', 'Value': results['bartlett_chi_square'], 'Interpretation': ''},
        {'Test': 'Bartlett_p_value', 'Value': results['bartlett_p_value'],
         'Interpretation': 'PASS' if results['bartlett_pass'] else 'FAIL'},
        {'Test': 'KMO_Overall', 'Value': results['kmo_overall'], 'Interpretation': results['kmo_label']},
    ]

    for var, kmo in results['kmo_per_variable'].items():
        rows.append({
            'Test': f'KMO_{var}',
            'Value': kmo,
            'Interpretation': config.get_kmo_label(kmo)
        })

    return pd.DataFrame(rows)


def determine_num_factors(scaled_data: np.ndarray) -> tuple:
    """
    Determine the number of factors using the Kaiser criterion.

    Kaiser criterion: Retain factors with eigenvalue > 1 (at least one).

    Parameters:
        scaled_data: Standardized data array

    Returns:
        Tuple of (eigenvalues array, suggested number of factors)
    """
    eigenvalues = np.linalg.eigvalsh(np.corrcoef(scaled_data, rowvar=False))[::-1]
    kaiser_factors = max(1, int(np.sum(eigenvalues > 1)))

    print(f"\nKaiser Criterion (eigenvalue > 1): {kaiser_factors} factors")
    return eigenvalues, kaiser_factors


def _complexity(loadings: np.ndarray) -> np.ndarray:
    """Hofmann's complexity index per variable."""
    squared = loadings ** 2
    return squared.sum(axis=1) ** 2 / (squared ** 2).sum(axis=1)


def _communality_table(loadings: np.ndarray, var_names: list[str]) -> pd.DataFrame:
    communality = (loadings ** 2).sum(axis=1)
    return pd.DataFrame({
        'Communality': communality,
        'Uniqueness': 1 - communality,
        'Complexity': _complexity(loadings),
    }, index=var_names)


def _variance_table(ss_loadings, total_variance, names) -> pd.DataFrame:
    proportion = np.asarray(ss_loadings) / total_variance
    return pd.DataFrame({
        'Eigenvalues': np.asarray(ss_loadings),
        'Variance': proportion,
        'Variance_Cumulative': np.cumsum(proportion),
    }, index=names)


def _prepare(df: pd.DataFrame, features: list[str]) -> tuple:
    scaled_array, scaled_df, valid_indices, scaler = data.standardize_features(df, features)
    if scaled_array.shape[0] < 2 or scaled_array.shape[1] < 2:
        raise InvalidArgumentError(
            f"Need at least 2 complete observations of 2 variables, "
            f"got {scaled_array.shape[0]} x {scaled_array.shape[1]}"
        )
    return scaled_array, list(scaled_df.columns), valid_indices, scaler


def run_efa(
    df: pd.DataFrame,
    n_factors: int = None,
    rotation: str = None,
    features: list[str] = None
) -> FactorSolution:
    """
    Run Exploratory Factor Analysis with specified rotation.

    Parameters:
        df: Input DataFrame (raw, unstandardized)
        n_factors: Number of factors. Defaults to the Kaiser criterion
        rotation: Rotation method or 'none'. Defaults to config.DEFAULT_ROTATION
        features: Columns to analyze. Defaults to all numeric columns

    Returns:
        FactorSolution with method 'fa'
    """
    if rotation is None:
        rotation = config.DEFAULT_ROTATION

    scaled_array, var_names, valid_indices, scaler = _prepare(df, features)

    if n_factors is None:
        _, n_factors = determine_num_factors(scaled_array)
    if n_factors == 1:
        rotation = 'none'

    fa = FactorAnalyzer(
        n_factors=n_factors,
        rotation=None if rotation == 'none' else rotation
    )
    fa.fit(scaled_array)

    names = [f'Factor_{i+1}' for i in range(n_factors)]
    loadings = pd.DataFrame(fa.loadings_, index=var_names, columns=names)

    ss_loadings, _, _ = fa.get_factor_variance()
    summary = _variance_table(ss_loadings, len(var_names), names)
    communalities = _communality_table(fa.loadings_, var_names)
    scores = pd.DataFrame(fa.transform(scaled_array), index=valid_indices, columns=names)

    print("\n" + "=" * 60)
    print(f"FACTOR ANALYSIS ({n_factors} factors, {rotation} rotation)")
    print("=" * 60)
    print(f"\nTotal variance explained: {summary['Variance_Cumulative'].iloc[-1]*100:.1f}%")

    return FactorSolution(
        method='fa',
        rotation=rotation,
        loadings=loadings,
        summary=summary,
        communalities=communalities,
        scores=scores,
        model=fa,
        scaler=scaler,
    )


def _component_scores(scaled_data: np.ndarray, loadings: np.ndarray) -> np.ndarray:
    """Least-squares component scores for (possibly rotated) loadings."""
    return scaled_data @ loadings @ np.linalg.inv(loadings.T @ loadings)


def principal_components(
    df: pd.DataFrame,
    n_components: int = None,
    rotation: str = None,
    features: list[str] = None
) -> FactorSolution:
    """
    Run Principal Component Analysis on standardized data.

    Loadings are eigenvectors scaled by the square root of their eigenvalue,
    i.e. correlations between variables and components.

    Parameters:
        df: Input DataFrame (raw, unstandardized)
        n_components: Number of components. Defaults to the Kaiser criterion
        rotation: Rotation method or 'none'. Defaults to config.DEFAULT_PCA_ROTATION
        features: Columns to analyze. Defaults to all numeric columns

    Returns:
        FactorSolution with method 'pca'
    """
    if rotation is None:
        rotation = config.DEFAULT_PCA_ROTATION

    scaled_array, var_names, valid_indices, scaler = _prepare(df, features)

    full = PCA().fit(scaled_array)
    if n_components is None:
        n_components = max(1, int(np.sum(full.explained_variance_ > 1)))
    if n_components == 1:
        rotation = 'none'

    pca = PCA(n_components=n_components).fit(scaled_array)
    eigenvalues = pca.explained_variance_
    loadings = pca.components_.T * np.sqrt(eigenvalues)

    if rotation != 'none':
        loadings = Rotator(method=rotation).fit_transform(loadings)
        ss_loadings = (loadings ** 2).sum(axis=0)
    else:
        ss_loadings = eigenvalues

    names = [f'PC{i+1}' for i in range(n_components)]
    summary = _variance_table(ss_loadings, full.explained_variance_.sum(), names)
    scores = pd.DataFrame(
        _component_scores(scaled_array, loadings), index=valid_indices, columns=names
    )

    return FactorSolution(
        method='pca',
        rotation=rotation,
        loadings=pd.DataFrame(loadings, index=var_names, columns=names),
        summary=summary,
        communalities=_communality_table(loadings, var_names),
        scores=scores,
        model=pca,
        scaler=scaler,
        std_dev=np.sqrt(eigenvalues),
    )


def summarize_variance(solution: FactorSolution) -> pd.DataFrame:
    """
    Variance table of a solution, one column per factor/component.

    Rows: Standard Deviation (PCA only), Eigenvalues, Variance,
    Cumulative Variance, Explained Variance (share of the retained variance).
    """
    summary = solution.summary
    rows = {}
    if solution.std_dev is not None:
        rows['Standard Deviation'] = np.asarray(solution.std_dev)
    rows['Eigenvalues'] = summary['Eigenvalues'].to_numpy()
    rows['Variance'] = summary['Variance'].to_numpy()
    rows['Cumulative Variance'] = summary['Variance_Cumulative'].to_numpy()
    rows['Explained Variance'] = (summary['Variance'] / summary['Variance'].sum()).to_numpy()

    return pd.DataFrame(rows, index=summary.index).T


def text_components_variance(solution: FactorSolution) -> str:
    """Describe in one sentence how much variance the solution accounts for."""
    summary = solution.summary
    n = len(summary)

    if n == 1:
        text = f"The unique {solution.kind}"
    else:
        text = f"The {n} {solution.kind}s"

    if solution.rotation != 'none':
        text += f" ({solution.rotation} rotation)"

    text += (
        f" accounted for {summary['Variance_Cumulative'].max() * 100:.2f}%"
        f" of the total variance of the original data"
    )

    if n == 1:
        return text + "."

    parts = ", ".join(
        f"{name} = {variance * 100:.2f}%"
        for name, variance in summary['Variance'].items()
    )
    return f"{text} ({parts})."


def predict(
    solution: FactorSolution,
    newdata: pd.DataFrame = None,
    names: list[str] = None
) -> pd.DataFrame:
    """
    Factor / component scores of the fitted data or of new observations.

    Parameters:
        solution: Fitted FactorSolution
        newdata: New observations with the same variables. Defaults to the
            scores of the fitted data
        names: Optional replacement names for the leading score columns

    Returns:
        DataFrame of scores with a fresh RangeIndex
    """
    if newdata is None:
        scores = solution.scores.copy()
    else:
        var_names = list(solution.loadings.index)
        missing = [v for v in var_names if v not in newdata.columns]
        if missing:
            raise InvalidArgumentError(f"newdata lacks variables: {', '.join(missing)}")
        scaled = solution.scaler.transform(newdata[var_names])
        if solution.method == 'fa':
            values = solution.model.transform(scaled)
        else:
            values = _component_scores(scaled, solution.loadings.to_numpy())
        scores = pd.DataFrame(values, columns=solution.factor_names)

    if names is not None:
        names = list(names)
        if len(names) > scores.shape[1]:
            raise InvalidArgumentError(
                f"Got {len(names)} names for {scores.shape[1]} score columns"
            )
        scores.columns = names + list(scores.columns[len(names):])

    return scores.reset_index(drop=True)


def print_loadings(
    solution: FactorSolution,
    digits: int = None,
    sort: bool = False,
    threshold=None,
    labels: list[str] = None
) -> str:
    """
    Print the loading table of a solution.

    Parameters:
        solution: Fitted FactorSolution
        digits: Decimal places. Defaults to config.DEFAULT_DIGITS
        sort: Group variables by their strongest factor (see sort_loadings)
        threshold: Blank out small loadings (see filter_loadings)
        labels: Optional descriptive label per variable

    Returns:
        The printed text
    """
    table = solution.loadings.copy()
    columns = solution.factor_names

    if labels is not None:
        labels = list(labels)
        if len(labels) != len(table):
            raise InvalidArgumentError(
                f"Got {len(labels)} labels for {len(table)} variables"
            )
        table.insert(0, 'Label', labels)

    if sort:
        table = sort_loadings(table, columns)

    if threshold is not None:
        table = filter_loadings(table, threshold, columns)

    analysis = 'Principal Component Analysis' if solution.method == 'pca' else 'Factor Analysis'
    if solution.rotation == 'none':
        header = f"# Loadings from {analysis} (no rotation)"
    else:
        header = f"# Rotated loadings from {analysis} ({solution.rotation}-rotation)"

    text = "\n".join([
        header,
        "",
        format_loadings(table, digits, columns),
        "",
        text_components_variance(solution),
    ])
    print(text)
    return text
