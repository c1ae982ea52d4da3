import os

import branca.colormap as cm

# ==============================================================================
# DATA SOURCE
# ==============================================================================

# Remote URL or local path of the tract dataset (polygons + census attributes + clusters)
DATA_URL = os.environ.get("CENSUS_DASHBOARD_DATA_URL", "data/census_tracts.geojson")
REQUEST_TIMEOUT = float(os.environ.get("CENSUS_DASHBOARD_TIMEOUT", "30"))

TARGET_CRS = "EPSG:4326"
# Assumed when the file carries no CRS
SOURCE_CRS_FALLBACK = os.environ.get("CENSUS_DASHBOARD_SOURCE_CRS", "EPSG:4326")

ID_COLUMN = "GEOID"
NAME_COLUMN = "NAME"

DEFAULT_CENTER = [41.84, -87.68]
DEFAULT_ZOOM = 10

# ==============================================================================
# VARIABLES
# ==============================================================================

N_DECILES = 10
MISSING_COLOR = "#d9d9d9"

VAR_CONFIG = {
    "Population": [
        {"id": "pop_density", "label": "Population Density", "palette": "YlGnBu_09"},
        {"id": "median_age", "label": "Median Age", "palette": "Purples_09"},
        {"id": "pct_over_65", "label": "% Aged 65+", "palette": "PuRd_09"},
    ],
    "Race & Origin": [
        {"id": "pct_black", "label": "% Black", "palette": "Oranges_09"},
        {"id": "pct_hispanic", "label": "% Hispanic", "palette": "YlOrBr_09"},
        {"id": "pct_foreign_born", "label": "% Foreign Born", "palette": "PuBuGn_09"},
    ],
    "Socioeconomic": [
        {"id": "median_income", "label": "Median Household Income", "palette": "Greens_09"},
        {"id": "pct_poverty", "label": "% Below Poverty", "palette": "Reds_09"},
        {"id": "pct_unemployed", "label": "% Unemployed", "palette": "OrRd_09"},
        {"id": "pct_bachelors", "label": "% Bachelor's or Higher", "palette": "Blues_09"},
    ],
}

DEMOGRAPHIC_CHOICES = {
    item["id"]: item["label"] for group in VAR_CONFIG.values() for item in group
}
# Radio labels carry their group: "Group: Label"
GROUPED_DEMOGRAPHIC_CHOICES = {
    item["id"]: f"{group}: {item['label']}"
    for group, items in VAR_CONFIG.items() for item in items
}
DEFAULT_DEMOGRAPHIC = "median_income"

# Regression: fixed response, user-selected covariates
RESPONSE_VARIABLE = "median_income"
COVARIATE_CHOICES = {
    var_id: label for var_id, label in DEMOGRAPHIC_CHOICES.items() if var_id != RESPONSE_VARIABLE
}
DEFAULT_COVARIATES = ["pct_bachelors", "pct_unemployed"]

# ==============================================================================
# CLUSTERS
# ==============================================================================

CLUSTER_CHOICES = {
    "lisa_income": "Median Income (LISA)",
    "lisa_poverty": "Poverty Rate (LISA)",
    "kmeans_cluster": "Demographic Profile (k-means)",
}

# Standard local Moran cluster map colors
CLUSTER_COLORS = {
    "Not Significant": "#eeeeee",
    "High-High": "#ff0000",
    "Low-Low": "#0000ff",
    "Low-High": "#a7adf9",
    "High-Low": "#f4ada8",
    "Undefined": "#464646",
}
FALLBACK_CLUSTER_COLORS = [
    "#1b9e77", "#d95f02", "#7570b3", "#e7298a",
    "#66a61e", "#e6ab02", "#a6761d", "#666666",
]


def get_layer_colormap(var_id):
    # Unknown variables fall back to a neutral sequential palette
    item = find_variable(var_id)
    palette = item["palette"] if item else "YlGnBu_09"
    return getattr(cm.linear, palette)


def find_variable(var_id):
    for group in VAR_CONFIG.values():
        for item in group:
            if item["id"] == var_id:
                return item
    return None
