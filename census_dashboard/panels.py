"""Bodies of the dashboard outputs.

Each function takes the data and the session's calcs and returns what the
render function shows. A ``DerivationError`` from a calc becomes a visible
placeholder in that panel only.
"""

import sys

import numpy as np
import pandas as pd
from shiny import ui

from census_dashboard.charts import decile_histogram, placeholder_chart
from census_dashboard.config import CLUSTER_CHOICES, COVARIATE_CHOICES, DATA_URL, DEMOGRAPHIC_CHOICES, NAME_COLUMN
from census_dashboard.derive import DerivationError
from census_dashboard.maps import choropleth_map, cluster_map, map_html, outline_map


def error_html(title, detail):
    print(f"{title}: {detail}", file=sys.stderr)
    return ui.HTML(f"<div style='color:red;'><h3>{title}</h3>{detail}</div>")


def error_frame(message):
    return pd.DataFrame({"Error": [str(message)]})


def no_data_message():
    return f"Could not load {DATA_URL}"


def choropleth_panel(data, deciles):
    if data.empty:
        return error_html("Map Error", no_data_message())
    try:
        result = deciles()
        label = DEMOGRAPHIC_CHOICES.get(result.column, result.column)
        return ui.HTML(map_html(choropleth_map(data, result, label)))
    except DerivationError as e:
        # Nothing to shade: keep the tract outlines under the message
        return ui.div(error_html("Map Error", e), ui.HTML(map_html(outline_map(data))))
    except Exception as e:
        return error_html("Map Error", e)


def histogram_panel(data, deciles):
    if data.empty:
        return placeholder_chart(no_data_message())
    try:
        result = deciles()
    except DerivationError as e:
        return placeholder_chart(str(e))
    label = DEMOGRAPHIC_CHOICES.get(result.column, result.column)
    return decile_histogram(data, result, label)


def cluster_panel(data, clusters):
    if data.empty:
        return error_html("Map Error", no_data_message())
    try:
        labels = clusters()
        return ui.HTML(map_html(cluster_map(data, labels, CLUSTER_CHOICES.get(labels.name, labels.name))))
    except Exception as e:
        return error_html("Map Error", e)


def regression_summary_panel(regression):
    try:
        result = regression()
    except DerivationError as e:
        return error_html("Regression Error", e)
    return ui.pre(result.summary_text())


def coefficient_table(regression):
    try:
        result = regression()
    except DerivationError as e:
        return error_frame(e)

    table = result.coefficients.copy()
    labels = {**COVARIATE_CHOICES, "const": "(Intercept)"}
    table["term"] = table["term"].map(lambda t: labels.get(t, t))
    numeric_cols = table.select_dtypes(include=[np.number]).columns
    table[numeric_cols] = table[numeric_cols].round(4)
    return table


def data_table(data):
    if data.empty:
        return error_frame("No Data")

    # Show ALL columns except geometry, name first
    df_show = data.drop(columns=['geometry'], errors='ignore').copy()
    if NAME_COLUMN in df_show.columns:
        cols = [NAME_COLUMN] + [c for c in df_show.columns if c != NAME_COLUMN]
        df_show = df_show[cols]

    numeric_cols = df_show.select_dtypes(include=[np.number]).columns
    df_show[numeric_cols] = df_show[numeric_cols].round(3)
    return pd.DataFrame(df_show)
