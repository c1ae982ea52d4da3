from shiny import App, ui, render, reactive
from shinywidgets import output_widget, render_altair

from census_dashboard.config import (
    CLUSTER_CHOICES,
    COVARIATE_CHOICES,
    DEFAULT_COVARIATES,
    DEFAULT_DEMOGRAPHIC,
    DEMOGRAPHIC_CHOICES,
    GROUPED_DEMOGRAPHIC_CHOICES,
    RESPONSE_VARIABLE,
)
from census_dashboard.data import load_data
from census_dashboard.panels import (
    choropleth_panel,
    cluster_panel,
    coefficient_table,
    data_table,
    histogram_panel,
    regression_summary_panel,
)
from census_dashboard.state import derived_state

# ==============================================================================
# DATA LOADING
# ==============================================================================

# Global Load
full_data = load_data()

# ==============================================================================
# UI
# ==============================================================================

app_ui = ui.page_fluid(
    ui.div(
        ui.h3("Census Tract Explorer", style="margin-top: 10px; margin-bottom: 0px; font-weight: bold;"),
    ),
    ui.markdown(f"""
    Pick a census variable to map it in **deciles**: each tract is placed in one of ten
    equal-frequency classes. The histogram shows where the decile edges fall.
    The **Clusters** tab maps precomputed cluster assignments, and the **Regression** tab
    fits **{DEMOGRAPHIC_CHOICES[RESPONSE_VARIABLE]}** against the covariates you tick.
    """),
    ui.hr(),
    ui.layout_sidebar(
        ui.sidebar(
            ui.h5("Demographics"),
            ui.input_radio_buttons("demographics", None, GROUPED_DEMOGRAPHIC_CHOICES, selected=DEFAULT_DEMOGRAPHIC),
            ui.hr(),
            ui.h5("Regression Covariates"),
            ui.input_checkbox_group("covariates", None, COVARIATE_CHOICES, selected=DEFAULT_COVARIATES),
            ui.hr(),
            ui.h5("Cluster Map"),
            ui.input_radio_buttons("clusters", None, CLUSTER_CHOICES),
            ui.hr(),
            ui.input_action_button("btn_reset", "Reset Selections", class_="btn-secondary", style="width: 100%;"),
            width=320,
        ),
        ui.navset_card_tab(
            ui.nav_panel(
                "Demographics",
                ui.output_ui("choropleth_ui"),
                output_widget("histogram"),
            ),
            ui.nav_panel(
                "Clusters",
                ui.output_ui("cluster_ui"),
            ),
            ui.nav_panel(
                "Regression",
                ui.output_ui("regression_summary"),
                ui.output_data_frame("regression_table"),
            ),
            ui.nav_panel(
                "Data",
                ui.output_data_frame("stat_table"),
            ),
        ),
    ),
)

# ==============================================================================
# SERVER
# ==============================================================================

def server(input, output, session):

    # Each calc reads one input; views re-render only when their calc changes
    state = derived_state(full_data, input.demographics, input.covariates, input.clusters)

    # --- Reset Button ---
    @reactive.effect
    @reactive.event(input.btn_reset)
    def _():
        ui.update_radio_buttons("demographics", selected=DEFAULT_DEMOGRAPHIC)
        ui.update_checkbox_group("covariates", selected=DEFAULT_COVARIATES)
        ui.update_radio_buttons("clusters", selected=next(iter(CLUSTER_CHOICES)))

    # --- Demographics ---
    @render.ui
    def choropleth_ui():
        return choropleth_panel(full_data, state.deciles)

    @render_altair
    def histogram():
        return histogram_panel(full_data, state.deciles)

    # --- Clusters ---
    @render.ui
    def cluster_ui():
        return cluster_panel(full_data, state.clusters)

    # --- Regression ---
    @render.ui
    def regression_summary():
        return regression_summary_panel(state.regression)

    @render.data_frame
    def regression_table():
        return render.DataGrid(coefficient_table(state.regression), selection_mode="none")

    # --- Data Table ---
    @render.data_frame
    def stat_table():
        return render.DataGrid(data_table(full_data), selection_mode="none")


app = App(app_ui, server)
