"""Formal pipeline invariants.

This file documents what each stage MUST produce. Use it as a reviewer
anchor and system reference; enforcement lives in the assert_* functions.
"""

PIPELINE_INVARIANTS = {
    "survey": [
        "Observations have x, y, depth, density, present columns",
        "density >= 0 on every row",
        "present == (density > 0) on every row",
        "Coordinates are divided by the same coord_scale as the grid",
    ],

    "grid": [
        "Grid has x, y, depth columns",
        "min(observed depth) <= depth <= max(observed depth)",
        "y > y_cutoff when a cutoff is configured",
    ],

    "fit": [
        "Presence model uses all observations, binomial family, logit link",
        "Magnitude model uses density > 0 only, Gamma family, log link",
        "Fitting failures raise ModelFitError, never a silent fallback",
    ],

    "prediction": [
        "binary_prediction in [0, 1]",
        "positive_prediction >= 0",
        "combined_prediction == binary_prediction * positive_prediction",
    ],

    "profile": [
        "Depth spans the observed range in non-decreasing order",
        "x and y held at the observation means",
        "combined_estimate == binary_estimate * positive_estimate",
        "0 <= combined_estimate <= positive_estimate",
    ],
}
