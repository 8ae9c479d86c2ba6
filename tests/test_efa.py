import numpy as np
import pandas as pd
import pytest

from parameters_core import efa
from parameters_core.data import standardize_features
from parameters_core.exceptions import InvalidArgumentError
from parameters_core.loadings import sort_loadings

GROUPS = ({'x1', 'x2', 'x3'}, {'x4', 'x5', 'x6'})


@pytest.fixture
def fa_solution(two_factor_data):
    return efa.run_efa(two_factor_data, n_factors=2)


@pytest.fixture
def pca_solution(two_factor_data):
    return efa.principal_components(two_factor_data, n_components=2, rotation='varimax')


def test_run_efa_shapes(fa_solution):
    assert fa_solution.method == 'fa'
    assert fa_solution.rotation == 'varimax'
    assert fa_solution.loadings.shape == (6, 2)
    assert list(fa_solution.loadings.index) == ['x1', 'x2', 'x3', 'x4', 'x5', 'x6']
    assert fa_solution.factor_names == ['Factor_1', 'Factor_2']
    assert fa_solution.scores.shape == (500, 2)


def test_run_efa_kaiser_default(two_factor_data):
    solution = efa.run_efa(two_factor_data)
    assert solution.n_factors == 2


def test_run_efa_single_factor_drops_rotation(two_factor_data):
    solution = efa.run_efa(two_factor_data[['x1', 'x2', 'x3']], n_factors=1)
    assert solution.rotation == 'none'


@pytest.mark.parametrize("fixture", ["fa_solution", "pca_solution"])
def test_sorted_loadings_recover_factor_structure(fixture, request):
    solution = request.getfixturevalue(fixture)
    ordered = list(sort_loadings(solution.loadings).index)
    assert {frozenset(ordered[:3]), frozenset(ordered[3:])} == {frozenset(g) for g in GROUPS}


def test_communalities_consistent_with_loadings(fa_solution):
    communality = (fa_solution.loadings ** 2).sum(axis=1)
    assert fa_solution.communalities['Communality'].to_numpy() == pytest.approx(communality.to_numpy())
    assert (fa_solution.communalities['Complexity'] >= 1 - 1e-9).all()


def test_pca_unrotated_matches_eigen_decomposition(two_factor_data):
    solution = efa.principal_components(two_factor_data, n_components=2)
    assert solution.rotation == 'none'
    scaled, _, _, _ = standardize_features(two_factor_data)
    eigenvalues = np.linalg.eigvalsh(np.cov(scaled, rowvar=False))[::-1]
    assert solution.summary['Eigenvalues'].to_numpy() == pytest.approx(eigenvalues[:2])
    assert solution.std_dev == pytest.approx(np.sqrt(eigenvalues[:2]))


def test_pca_scores_are_uncorrelated(two_factor_data):
    solution = efa.principal_components(two_factor_data, n_components=2)
    corr = np.corrcoef(solution.scores.to_numpy(), rowvar=False)
    assert corr[0, 1] == pytest.approx(0.0, abs=1e-8)


def test_summarize_variance_rows(pca_solution, fa_solution):
    table = efa.summarize_variance(pca_solution)
    assert list(table.index) == [
        'Standard Deviation', 'Eigenvalues', 'Variance',
        'Cumulative Variance', 'Explained Variance',
    ]
    assert list(table.columns) == ['PC1', 'PC2']
    assert table.loc['Explained Variance'].sum() == pytest.approx(1.0)

    fa_table = efa.summarize_variance(fa_solution)
    assert 'Standard Deviation' not in fa_table.index


def test_text_components_variance(pca_solution):
    text = efa.text_components_variance(pca_solution)
    assert text.startswith("The 2 principal components (varimax rotation) accounted for")
    assert "PC1 = " in text and text.endswith("%).")


def test_text_components_variance_single(two_factor_data):
    solution = efa.principal_components(two_factor_data, n_components=1)
    text = efa.text_components_variance(solution)
    assert text.startswith("The unique principal component accounted for")
    assert text.endswith("of the total variance of the original data.")


def test_predict_returns_stored_scores(fa_solution):
    scores = efa.predict(fa_solution, names=['Size'])
    assert list(scores.columns) == ['Size', 'Factor_2']
    assert scores.to_numpy() == pytest.approx(fa_solution.scores.to_numpy())


@pytest.mark.parametrize("fixture", ["fa_solution", "pca_solution"])
def test_predict_new_data_matches_fitted_scores(fixture, request, two_factor_data):
    solution = request.getfixturevalue(fixture)
    scores = efa.predict(solution, newdata=two_factor_data.iloc[:10])
    assert scores.to_numpy() == pytest.approx(solution.scores.iloc[:10].to_numpy())


def test_predict_validates_inputs(fa_solution, two_factor_data):
    with pytest.raises(InvalidArgumentError):
        efa.predict(fa_solution, newdata=two_factor_data[['x1', 'x2']])
    with pytest.raises(InvalidArgumentError):
        efa.predict(fa_solution, names=['a', 'b', 'c'])


def test_print_loadings(fa_solution, capsys):
    capsys.readouterr()
    text =efa.print_loadings(fa_solution, sort=True, threshold=0.4,
                              labels=[f'item {i}' for i in range(1, 7)])
    assert text.startswith("# Rotated loadings from Factor Analysis (varimax-rotation)")
    assert 'item 1' in text
    assert 'nan' not in text.lower()
    assert capsys.readouterr().out.strip() == text.strip()


def test_print_loadings_rejects_wrong_label_count(fa_solution):
    with pytest.raises(InvalidArgumentError):
        efa.print_loadings(fa_solution, labels=['only one'])


def test_factorability(two_factor_data):
    scaled, _, _, _ = standardize_features(two_factor_data)
    results = efa.check_factorability(scaled, list(two_factor_data.columns))
    assert results['bartlett_pass']
    summary = efa.get_factorability_summary(results)
    assert summary['Test'].tolist()[:3] == ['Bartlett_Chi_Square', 'Bartlett_p_value', 'KMO_Overall']
    assert len(summary) == 3 + 6


def test_too_little_data_is_rejected():
    with pytest.raises(InvalidArgumentError):
        efa.run_efa(pd.DataFrame({'a': [1.0, 2.0, 3.0]}))


def test_to_dataframe(fa_solution):
    table = fa_solution.to_dataframe()
    assert list(table.columns) == [
        'Variable', 'Factor_1', 'Factor_2', 'Communality', 'Uniqueness', 'Complexity'
    ]
