"""
Model Parameters Module
=======================

Extract coefficients, standard errors, confidence intervals and test
statistics of a fitted regression model into one standardized table.

Any fitted results object exposing the statsmodels results interface
(params, bse, conf_int(), tvalues, pvalues, df_resid) is supported, e.g.
OLS, WLS, GLM, Logit, Probit, Poisson and mixed-model results.
"""

import pandas as pd
import numpy as np

from . import config
from .exceptions import InvalidArgumentError

_REQUIRED = ('params', 'bse', 'conf_int', 'tvalues', 'pvalues')


def _as_series(values, names) -> pd.Series:
    if isinstance(values, pd.Series):
        return values
    return pd.Series(np.asarray(values), index=names)


def _parameter_names(model) -> list[str]:
    if isinstance(model.params, pd.Series):
        return list(model.params.index)
    names = getattr(getattr(model, 'model', None), 'exog_names', None)
    if names is None or len(names) != len(model.params):
        names = [f'x{i}' for i in range(len(model.params))]
    return list(names)


def _basic_scale(model, n_params: int) -> np.ndarray:
    """sd(x_j) / sd(y) for each parameter, read from the fitted model's data."""
    fitted = getattr(model, 'model', None)
    exog = getattr(fitted, 'exog', None)
    endog = getattr(fitted, 'endog', None)
    if exog is None or endog is None:
        raise InvalidArgumentError(
            f"{type(model).__name__} does not expose model.exog / model.endog"
        )

    exog = np.asarray(exog, dtype=float)
    if exog.ndim == 1:
        exog = exog[:, None]
    if exog.shape[1] != n_params:
        raise InvalidArgumentError(
            f"Cannot standardize: {n_params} parameters but {exog.shape[1]} predictors"
        )

    # constant columns (the intercept) have sd 0 and standardize to 0
    return exog.std(axis=0, ddof=1) / np.asarray(endog, dtype=float).std(ddof=1)


def model_parameters(
    model,
    ci: float = None,
    standardize: str = None,
    exponentiate: bool = False
) -> pd.DataFrame:
    """
    Parameters of a fitted regression model as a DataFrame.

    Parameters:
        model: Fitted statsmodels results object
        ci: Confidence level. Defaults to config.DEFAULT_CI
        standardize: None for raw coefficients, or 'basic' to scale each
            coefficient, SE and CI bound by sd(x) / sd(y)
        exponentiate: Exponentiate coefficients and CI bounds (odds / rate
            ratios for log or logit links). SE, statistic and p are unchanged.

    Returns:
        DataFrame with Parameter, Coefficient, SE, CI_low, CI_high,
        t (or z), df_error, p
    """
    if ci is None:
        ci = config.DEFAULT_CI
    if not 0 < ci < 1:
        raise InvalidArgumentError(f"ci must be between 0 and 1, got {ci}")
    if standardize is not None and standardize not in config.STANDARDIZE_OPTIONS:
        raise InvalidArgumentError(
            f"standardize must be None or one of {config.STANDARDIZE_OPTIONS}, got {standardize!r}"
        )

    missing = [attr for attr in _REQUIRED if not hasattr(model, attr)]
    if missing:
        raise InvalidArgumentError(
            f"{type(model).__name__} does not expose {', '.join(missing)}"
        )

    names = _parameter_names(model)
    coefficients = _as_series(model.params, names)

    conf_int = model.conf_int(alpha=1 - ci)
    conf_int = np.asarray(conf_int, dtype=float)

    statistic = 't' if getattr(model, 'use_t', True) else 'z'

    params = pd.DataFrame({
        'Parameter': names,
        'Coefficient': coefficients.to_numpy(dtype=float),
        'SE': _as_series(model.bse, names).to_numpy(dtype=float),
        'CI_low': conf_int[:, 0],
        'CI_high': conf_int[:, 1],
        statistic: _as_series(model.tvalues, names).to_numpy(dtype=float),
        'df_error': float(getattr(model, 'df_resid', np.nan)),
        'p': _as_series(model.pvalues, names).to_numpy(dtype=float),
    })

    if standardize == 'basic':
        scale = _basic_scale(model, len(params))
        for col in ('Coefficient', 'SE', 'CI_low', 'CI_high'):
            params[col] = params[col] * scale

    if exponentiate:
        for col in ('Coefficient', 'CI_low', 'CI_high'):
            params[col] = np.exp(params[col])

    return params
