"""
Parameters Core Library
=======================

Post-processing of fitted statistical models and small descriptive utilities.

Modules:
    config      - Global configuration parameters
    data        - Data loading, standardization, recoding, demeaning
    loadings    - Sorting and thresholding of loading tables
    efa         - Factor analysis and PCA solutions
    parameters  - Standardized parameter tables of regression models
    stats       - Distribution description
    viz         - Visualization utilities
    output      - Output naming and saving
"""

from . import config
from . import data
from . import loadings
from . import efa
from . import parameters
from . import stats
from . import viz
from . import output

from .data import demean
from .efa import principal_components, print_loadings, run_efa
from .exceptions import InvalidArgumentError, PartialDataWarning
from .loadings import cluster_assignment, filter_loadings, sort_loadings
from .parameters import model_parameters
from .results import FactorSolution
from .stats import describe_distribution

__version__ = '1.0.0'

__all__ = [
    'config',
    'data',
    'loadings',
    'efa',
    'parameters',
    'stats',
    'viz',
    'output',
    'cluster_assignment',
    'demean',
    'describe_distribution',
    'filter_loadings',
    'model_parameters',
    'principal_components',
    'print_loadings',
    'run_efa',
    'sort_loadings',
    'FactorSolution',
    'InvalidArgumentError',
    'PartialDataWarning',
]
