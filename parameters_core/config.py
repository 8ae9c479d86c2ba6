"""
Global Configuration for the Parameters Framework
==================================================

Central location for default parameters used across all modules.
Override these per call by passing explicit arguments.
"""

# =============================================================================
# FACTOR ANALYSIS / PCA CONFIGURATION
# =============================================================================
DEFAULT_ROTATION = 'varimax'
DEFAULT_PCA_ROTATION = 'none'
LOADING_THRESHOLD = 0.5  # Threshold for "high" factor loadings

# Keyword accepted by filter_loadings() to keep only each row's largest loading
MAX_ONLY = 'max'

# =============================================================================
# DISPLAY CONFIGURATION
# =============================================================================
DEFAULT_DIGITS = 2
SUMMARY_DIGITS = 3

# =============================================================================
# PARAMETER TABLE CONFIGURATION
# =============================================================================
DEFAULT_CI = 0.95
STANDARDIZE_OPTIONS = ('basic',)

# =============================================================================
# DEMEANING CONFIGURATION
# =============================================================================
SUFFIX_DEMEAN = '_DM'
SUFFIX_GROUPMEAN = '_GM'

# =============================================================================
# DISTRIBUTION DESCRIPTION
# =============================================================================
DEFAULT_CENTRALITY = 'mean'
CENTRALITY_OPTIONS = ('mean', 'median', 'all')

# =============================================================================
# OUTPUT CONFIGURATION
# =============================================================================
DEFAULT_OUTPUT_BASE = 'outputs'
DEFAULT_DPI = 150

# =============================================================================
# KMO INTERPRETATION LABELS
# =============================================================================
KMO_THRESHOLDS = {
    0.9: "Marvelous",
    0.8: "Meritorious",
    0.7: "Middling",
    0.6: "Mediocre",
    0.5: "Miserable",
    0.0: "Unacceptable",
}


def get_kmo_label(kmo_value: float) -> str:
    """Return human-readable KMO interpretation."""
    for threshold, label in sorted(KMO_THRESHOLDS.items(), reverse=True):
        if kmo_value >= threshold:
            return label
    return "Unacceptable"
