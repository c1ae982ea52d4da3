"""Per-session reactive calcs for the derived columns.

``derived_state`` takes input *accessors* (``input.demographics``, or a
``reactive.value`` in tests) so each calc reads exactly one input. Shiny then
re-runs a calc, and the views reading it, only when that input changes.
Errors raised by a calc are cached like values and re-raised to every reader.
"""

from dataclasses import dataclass
from typing import Callable

from shiny import reactive

from census_dashboard.config import RESPONSE_VARIABLE
from census_dashboard.derive import cluster_labels, decile_buckets, fit_regression


@dataclass
class DerivedState:
    deciles: Callable
    regression: Callable
    clusters: Callable


def derived_state(data, demographics, covariates, clusters, response=RESPONSE_VARIABLE):

    @reactive.calc
    def deciles():
        return decile_buckets(data, demographics())

    @reactive.calc
    def regression():
        return fit_regression(data, response, covariates())

    @reactive.calc
    def cluster_assignments():
        return cluster_labels(data, clusters())

    return DerivedState(deciles=deciles, regression=regression, clusters=cluster_assignments)
