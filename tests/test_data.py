import warnings

import numpy as np
import pandas as pd
import pytest

from parameters_core.data import (
    demean,
    factor_to_dummy,
    factor_to_numeric,
    find_most_common,
    levels_to_codes,
    recode_to_zero,
    standardize_features,
)
from parameters_core.exceptions import InvalidArgumentError, PartialDataWarning


@pytest.fixture
def panel():
    return pd.DataFrame({
        'ID': [1, 1, 2, 2],
        'x': [10.0, 20.0, 30.0, 50.0],
        'y': [1.0, 3.0, 5.0, 5.0],
    })


def test_demean_basic(panel):
    result = demean(panel, ['x'], 'ID')
    assert list(result.columns) == ['x_GM', 'x_DM']
    assert result['x_GM'].tolist() == [15.0, 15.0, 40.0, 40.0]
    assert result['x_DM'].tolist() == [-5.0, 5.0, -10.0, 10.0]


def test_demean_column_order(panel):
    result = demean(panel, ['y', 'x'], 'ID')
    assert list(result.columns) == ['y_GM', 'x_GM', 'y_DM', 'x_DM']


def test_demean_custom_suffixes(panel):
    result = demean(panel, ['x'], 'ID', suffix_demean='_within', suffix_groupmean='_between')
    assert list(result.columns) == ['x_between', 'x_within']


def test_demean_preserves_index(panel):
    indexed = panel.set_index(pd.Index(['a', 'b', 'c', 'd']))
    result = demean(indexed, ['x'], 'ID')
    assert list(result.index) == ['a', 'b', 'c', 'd']


def test_demean_excludes_missing_from_group_mean():
    df = pd.DataFrame({'ID': [1, 1, 1, 2], 'x': [2.0, np.nan, 4.0, 7.0]})
    result = demean(df, ['x'], 'ID')
    assert result['x_GM'].tolist() == [3.0, 3.0, 3.0, 7.0]
    assert result['x_DM'].iloc[0] == -1.0
    assert np.isnan(result['x_DM'].iloc[1])
    assert result['x_DM'].iloc[3] == 0.0


def test_demean_warns_and_drops_unknown_columns(panel):
    with pytest.warns(PartialDataWarning, match="not found"):
        result = demean(panel, ['x', 'missing'], 'ID')
    assert list(result.columns) == ['x_GM', 'x_DM']


def test_demean_all_unknown_columns(panel):
    with pytest.warns(PartialDataWarning):
        result = demean(panel, ['nope'], 'ID')
    assert result.shape == (4, 0)


def test_demean_coerces_categorical_columns():
    df = pd.DataFrame({
        'ID': [1, 1, 2, 2],
        'sex': pd.Categorical(['m', 'f', 'f', 'f'], categories=['m', 'f']),
        'smoker': ['yes', 'no', 'yes', 'yes'],
    })
    with pytest.warns(PartialDataWarning, match="coerced"):
        result = demean(df, ['sex', 'smoker'], 'ID')

    # category order: m=0, f=1
    assert result['sex_GM'].tolist() == [0.5, 0.5, 1.0, 1.0]
    assert result['sex_DM'].tolist() == [-0.5, 0.5, 0.0, 0.0]
    # sorted levels: no=0, yes=1
    assert result['smoker_GM'].tolist() == [0.5, 0.5, 1.0, 1.0]


def test_demean_numeric_columns_do_not_warn(panel):
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        demean(panel, ['x', 'y'], 'ID')


def test_demean_accepts_single_column_name(panel):
    assert list(demean(panel, 'y', 'ID').columns) == ['y_GM', 'y_DM']


def test_demean_missing_group_column_raises(panel):
    with pytest.raises(InvalidArgumentError):
        demean(panel, ['x'], 'cluster')


def test_demean_does_not_mutate_input(panel):
    before = panel.copy()
    demean(panel, ['x', 'y'], 'ID')
    pd.testing.assert_frame_equal(panel, before)


# ---------------------------------------------------------------------------
# recoding helpers
# ---------------------------------------------------------------------------

def test_levels_to_codes_keeps_missing():
    codes = levels_to_codes(pd.Series(['b', None, 'a', 'b']))
    assert codes.iloc[[0, 2, 3]].tolist() == [1.0, 0.0, 1.0]
    assert np.isnan(codes.iloc[1])


def test_factor_to_numeric_parses_numeric_strings():
    assert factor_to_numeric(pd.Series(['3', '1', '2'])).tolist() == [3.0, 1.0, 2.0]


def test_factor_to_numeric_numbers_levels():
    assert factor_to_numeric(pd.Series(['low', 'high', 'low'])).tolist() == [2.0, 1.0, 2.0]


def test_recode_to_zero():
    assert recode_to_zero(pd.Series([3, 5, 4])).tolist() == [0, 2, 1]
    assert recode_to_zero(pd.Series(['b', 'c', 'b'])).tolist() == [0.0, 1.0, 0.0]


def test_factor_to_dummy():
    dummies = factor_to_dummy(pd.Series(['a', 'b', None, 'a']))
    assert list(dummies.columns) == ['a', 'b']
    assert dummies['a'].iloc[[0, 1, 3]].tolist() == [1.0, 0.0, 1.0]
    assert dummies.iloc[2].isna().all()


def test_find_most_common():
    assert find_most_common(pd.Series(['x', 'y', 'y', None])) == 'y'
    assert find_most_common(pd.Series([], dtype=float)) is None


def test_standardize_features_drops_incomplete_rows():
    df = pd.DataFrame({'a': [1.0, 2.0, 3.0, np.nan], 'b': [2.0, 4.0, 9.0, 1.0], 'label': list('wxyz')})
    scaled, scaled_df, valid, _ = standardize_features(df)
    assert list(scaled_df.columns) == ['a', 'b']
    assert list(valid) == [0, 1, 2]
    assert scaled.mean(axis=0) == pytest.approx([0.0, 0.0])
