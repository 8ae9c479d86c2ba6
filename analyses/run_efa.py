#!/usr/bin/env python3
"""
EFA / PCA Analysis Script
=========================

Describes a dataset, builds within/between versions of its variables,
extracts factors and principal components, and saves sorted, thresholded
loading tables.

Parameters:
    data_file    - Path to input CSV
    features     - Columns to analyze (None = all numeric columns)
    group        - Grouping column for demeaning (None = skip)
    n_factors    - Number of factors (None = auto-detect via Kaiser)
    threshold    - Loading display threshold (number, count, or 'max')

Outputs:
    - Distribution description (CSV)
    - Group-/de-meaned variables (CSV)
    - Factorability tests (CSV)
    - EFA and PCA loadings (CSV)
    - Loadings heatmap (PNG)
    - Text report (TXT)
"""

import argparse

from parameters_core import config, data, efa, output, stats, viz

# =============================================================================
# PARAMETERS
# =============================================================================
DEFAULTS = {
    'data_file': None,
    'features': None,
    'group': None,
    'n_factors': None,
    'threshold': config.LOADING_THRESHOLD,
    'output_base': config.DEFAULT_OUTPUT_BASE,
}

TEST_NAME = 'efa'


def run_analysis(params: dict) -> dict:
    """
    Run the EFA / PCA pipeline.

    Parameters:
        params: Dictionary with analysis parameters

    Returns:
        Dictionary with all analysis results
    """
    print("=" * 70)
    print("EFA / PCA ANALYSIS")
    print("=" * 70)

    output_dir = output.get_output_dir(TEST_NAME, params['output_base'])

    df = data.load_csv(params['data_file'])
    features = params['features']

    description = stats.describe_distribution(df if features is None else df[features])
    output.save_csv(description, output_dir, TEST_NAME, 'describe')
    features = list(description['Variable'])

    if params['group']:
        features = [f for f in features if f != params['group']]
        demeaned = data.demean(df, features, params['group'])
        output.save_csv(demeaned, output_dir, TEST_NAME, 'demeaned', index=True)

    scaled_array, _, _, _ = data.standardize_features(df, features)
    factorability = efa.check_factorability(scaled_array, features)
    output.save_csv(efa.get_factorability_summary(factorability), output_dir, TEST_NAME, 'factorability')

    fa_solution = efa.run_efa(df, n_factors=params['n_factors'], features=features)
    pca_solution = efa.principal_components(df, features=features)

    report = []
    for solution in (fa_solution, pca_solution):
        output.save_loadings(solution, output_dir, TEST_NAME, threshold=params['threshold'])
        report.append(efa.print_loadings(solution, sort=True, threshold=params['threshold']))
        report.append(efa.summarize_variance(solution).round(config.SUMMARY_DIGITS).to_string())

    viz.setup_style()
    fig = viz.plot_loadings(fa_solution, threshold=params['threshold'])
    viz.save_figure(fig, output.build_filename(output_dir, TEST_NAME, 'loadings', 'png'))

    output.save_report("\n\n".join(report), output_dir, TEST_NAME)

    return {
        'df': df,
        'description': description,
        'efa': fa_solution,
        'pca': pca_solution,
        'output_dir': output_dir,
    }


def _threshold(value: str):
    return value if value == config.MAX_ONLY else float(value)


# =============================================================================
# ENTRY POINT
# =============================================================================
if __name__ == '__main__':
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument('data_file')
    parser.add_argument('--features', nargs='+')
    parser.add_argument('--group')
    parser.add_argument('--n-factors', type=int)
    parser.add_argument('--threshold', type=_threshold, default=DEFAULTS['threshold'])
    parser.add_argument('--output-base', default=DEFAULTS['output_base'])
    args = parser.parse_args()

    params = {**DEFAULTS, **vars(args)}
    run_analysis(params)
