"""Derived columns behind the dashboard views.

Everything here is a plain function of (data, selected input). The reactive
layer in ``state.py`` decides *when* these run; this module decides *what*
they compute and which conditions are reported back to the user.
"""

from dataclasses import dataclass

import mapclassify
import numpy as np
import pandas as pd
import statsmodels.api as sm

from census_dashboard.config import N_DECILES


class DerivationError(ValueError):
    """A selected input cannot be turned into a view; shown in the panel."""


class MissingColumnError(DerivationError):
    def __init__(self, columns):
        if isinstance(columns, str):
            columns = [columns]
        self.columns = list(columns)
        names = ", ".join(f"'{c}'" for c in self.columns)
        super().__init__(f"Column {names} not found in the dataset")


class NoPredictorsError(DerivationError):
    def __init__(self):
        super().__init__("No predictors selected: choose at least one covariate")


class DegenerateRegressionError(DerivationError):
    pass


# ==============================================================================
# DECILES
# ==============================================================================

@dataclass
class DecileResult:
    column: str
    buckets: pd.Series  # Int64, 1..k, <NA> where the value is missing
    bins: np.ndarray  # upper edge of each bucket
    k: int

    @property
    def interior_edges(self):
        return self.bins[:-1]


def decile_buckets(gdf, column, k=N_DECILES):
    if column not in gdf.columns:
        raise MissingColumnError(column)

    values = gdf[column]
    if not pd.api.types.is_numeric_dtype(values):
        raise DerivationError(f"Column '{column}' is not numeric")

    present = values.dropna()
    if present.empty:
        raise DerivationError(f"Column '{column}' has no non-missing values")

    buckets = pd.Series(pd.NA, index=values.index, dtype="Int64")
    n_unique = present.nunique()

    if n_unique < 2:
        buckets.loc[present.index] = 1
        bins = np.array([float(present.iloc[0])])
    else:
        # Ties collapse duplicate edges, so fewer than k buckets may come back
        q = mapclassify.Quantiles(present.to_numpy(dtype=float), k=min(k, n_unique))
        buckets.loc[present.index] = q.yb + 1
        bins = np.asarray(q.bins, dtype=float)

    return DecileResult(column=column, buckets=buckets, bins=bins, k=len(bins))


# ==============================================================================
# REGRESSION
# ==============================================================================

@dataclass
class RegressionResult:
    response: str
    covariates: list
    coefficients: pd.DataFrame
    r_squared: float
    adj_r_squared: float
    f_statistic: float
    f_pvalue: float
    n_obs: int

    def summary_text(self):
        return (
            f"{self.response} ~ {' + '.join(self.covariates)}\n"
            f"R² = {self.r_squared:.3f}, adjusted R² = {self.adj_r_squared:.3f}\n"
            f"F = {self.f_statistic:.2f} (p = {self.f_pvalue:.3g}), n = {self.n_obs}"
        )


def fit_regression(gdf, response, covariates):
    """OLS of ``response`` on ``covariates`` plus intercept, listwise deletion."""
    covariates = list(covariates or [])
    if not covariates:
        raise NoPredictorsError()

    used = [response] + [c for c in covariates if c != response]
    missing = [c for c in used if c not in gdf.columns]
    if missing:
        raise MissingColumnError(missing)

    non_numeric = [c for c in used if not pd.api.types.is_numeric_dtype(gdf[c])]
    if non_numeric:
        raise DerivationError(
            "Column " + ", ".join(f"'{c}'" for c in non_numeric) + " is not numeric"
        )

    # Infinite values count as missing and drop with the rest of the row
    frame = pd.DataFrame(gdf[used]).astype(float).replace([np.inf, -np.inf], np.nan).dropna()
    y = frame[response]
    X = sm.add_constant(frame[covariates], has_constant="add")

    if len(frame) <= X.shape[1]:
        raise DegenerateRegressionError(
            f"Not enough complete observations ({len(frame)}) for {X.shape[1]} parameters"
        )
    if np.linalg.matrix_rank(X.to_numpy(dtype=float)) < X.shape[1]:
        raise DegenerateRegressionError(
            "Covariates are perfectly collinear (or constant): "
            + ", ".join(covariates)
        )

    model = sm.OLS(y, X).fit()
    ci = model.conf_int()
    coefficients = pd.DataFrame({
        "term": X.columns,
        "estimate": model.params.values,
        "std_error": model.bse.values,
        "t_value": model.tvalues.values,
        "p_value": model.pvalues.values,
        "ci_lower": ci[0].values,
        "ci_upper": ci[1].values,
    })

    return RegressionResult(
        response=response,
        covariates=covariates,
        coefficients=coefficients,
        r_squared=float(model.rsquared),
        adj_r_squared=float(model.rsquared_adj),
        f_statistic=float(model.fvalue),
        f_pvalue=float(model.f_pvalue),
        n_obs=int(model.nobs),
    )


# ==============================================================================
# CLUSTERS
# ==============================================================================

def cluster_labels(gdf, column):
    if column not in gdf.columns:
        raise MissingColumnError(column)
    values = gdf[column]
    # Integer cluster ids read back as float when some are missing
    if pd.api.types.is_float_dtype(values) and (values.dropna() % 1 == 0).all():
        values = values.astype("Int64")
    labels = values.astype(object)
    return labels.where(labels.notna(), "Undefined").astype(str)
