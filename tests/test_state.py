"""Recompute behaviour of the per-session reactive calcs.

Effects stand in for the views: one per view, counting how often it re-runs.
"""

import pytest
from shiny import reactive

import census_dashboard.state as state_module
from census_dashboard.derive import DerivationError, MissingColumnError, NoPredictorsError
from census_dashboard.state import derived_state


def _inputs(demographics="median_income", covariates=("pct_bachelors",), clusters="lisa_income"):
    return reactive.value(demographics), reactive.value(covariates), reactive.value(clusters)


def _views(state):
    runs = {"choropleth": 0, "histogram": 0, "regression": 0, "clusters": 0}
    seen = {}

    def _read(name, calc):
        runs[name] += 1
        try:
            seen[name] = calc()
        except DerivationError as e:
            seen[name] = e

    @reactive.effect
    def _choropleth():
        _read("choropleth", state.deciles)

    @reactive.effect
    def _histogram():
        _read("histogram", state.deciles)

    @reactive.effect
    def _regression():
        _read("regression", state.regression)

    @reactive.effect
    def _clusters():
        _read("clusters", state.clusters)

    return runs, seen


@pytest.mark.asyncio
async def test_covariate_change_leaves_other_views_alone(tracts):
    demographics, covariates, clusters = _inputs()
    runs, seen = _views(derived_state(tracts, demographics, covariates, clusters))

    await reactive.flush()
    assert runs == {"choropleth": 1, "histogram": 1, "regression": 1, "clusters": 1}

    covariates.set(("pct_bachelors", "pct_unemployed"))
    await reactive.flush()

    assert runs == {"choropleth": 1, "histogram": 1, "regression": 2, "clusters": 1}
    assert seen["regression"].covariates == ["pct_bachelors", "pct_unemployed"]


@pytest.mark.asyncio
async def test_demographic_change_leaves_other_views_alone(tracts):
    demographics, covariates, clusters = _inputs()
    runs, seen = _views(derived_state(tracts, demographics, covariates, clusters))
    await reactive.flush()

    demographics.set("pct_unemployed")
    await reactive.flush()

    assert runs == {"choropleth": 2, "histogram": 2, "regression": 1, "clusters": 1}
    assert seen["choropleth"].column == "pct_unemployed"


@pytest.mark.asyncio
async def test_cluster_change_leaves_other_views_alone(tracts):
    demographics, covariates, clusters = _inputs()
    runs, seen = _views(derived_state(tracts, demographics, covariates, clusters))
    await reactive.flush()

    clusters.set("kmeans_cluster")
    await reactive.flush()

    assert runs == {"choropleth": 1, "histogram": 1, "regression": 1, "clusters": 2}
    assert seen["clusters"].name == "kmeans_cluster"
    assert seen["clusters"].iloc[7] == "Undefined"


@pytest.mark.asyncio
async def test_deciles_computed_once_per_input_change(tracts, monkeypatch):
    calls = []
    original = state_module.decile_buckets

    def counting(data, column):
        calls.append(column)
        return original(data, column)

    monkeypatch.setattr(state_module, "decile_buckets", counting)

    demographics, covariates, clusters = _inputs()
    _views(derived_state(tracts, demographics, covariates, clusters))
    await reactive.flush()
    assert calls == ["median_income"]

    # Same value again is not a change
    demographics.set("median_income")
    await reactive.flush()
    assert calls == ["median_income"]

    demographics.set("pct_poverty")
    await reactive.flush()
    assert calls == ["median_income", "pct_poverty"]


@pytest.mark.asyncio
async def test_errors_reach_only_the_affected_views(tracts):
    demographics, covariates, clusters = _inputs("not_a_column", (), "lisa_rent")
    runs, seen = _views(derived_state(tracts, demographics, covariates, clusters))
    await reactive.flush()

    assert isinstance(seen["choropleth"], MissingColumnError)
    assert isinstance(seen["histogram"], MissingColumnError)
    assert isinstance(seen["regression"], NoPredictorsError)
    assert isinstance(seen["clusters"], MissingColumnError)

    # Recovering one input clears that error and leaves the other views as they are
    covariates.set(("pct_bachelors",))
    await reactive.flush()

    assert runs["choropleth"] == 1
    assert runs["clusters"] == 1
    assert isinstance(seen["choropleth"], MissingColumnError)
    assert seen["regression"].n_obs == 20
