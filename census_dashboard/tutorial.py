"""
Choropleth maps, step by step.

A choropleth shades each polygon by a value, but first the values have to be
put into classes, and the classification scheme changes the story a map tells.
This walkthrough draws the same census variable under several schemes:

1. load the tract layer (``data.load_data``) and reproject it for web maps;
2. classify the variable with mapclassify and compare the class tables;
3. draw a static map per scheme (``GeoDataFrame.plot``);
4. draw an interactive web map (``GeoDataFrame.explore``).

Run it from the command line:

    python -m census_dashboard.tutorial --column pct_poverty -k 5 --out maps/
"""

import argparse
import sys
from pathlib import Path

import mapclassify
import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from census_dashboard.config import (
    DATA_URL,
    DEFAULT_DEMOGRAPHIC,
    MISSING_COLOR,
    NAME_COLUMN,
    find_variable,
)
from census_dashboard.data import load_data

# Tutorial scheme name -> mapclassify classifier
SCHEMES = {
    "quantiles": "Quantiles",
    "equal_interval": "EqualInterval",
    "natural_breaks": "NaturalBreaks",
    "std_mean": "StdMean",
    "box_plot": "BoxPlot",
}

# These derive their classes from the data spread, not from k
SCHEMES_WITHOUT_K = {"std_mean", "box_plot"}


def classify(values, scheme, k=5):
    if scheme not in SCHEMES:
        raise ValueError(f"Unknown scheme '{scheme}'. Choose from: {', '.join(SCHEMES)}")
    y = pd.Series(values).dropna().to_numpy(dtype=float)
    classifier = getattr(mapclassify, SCHEMES[scheme])
    if scheme in SCHEMES_WITHOUT_K:
        return classifier(y)
    return classifier(y, k=k)


def describe_classes(values, scheme, k=5):
    """Upper bound and number of features for each class."""
    c = classify(values, scheme, k)
    return pd.DataFrame({
        "class": np.arange(1, len(c.bins) + 1),
        "upper_bound": np.round(c.bins, 3),
        "count": c.counts,
    })


def _cmap(column):
    # Branca palette names ("Greens_09") share the matplotlib colormap name
    item = find_variable(column)
    return item["palette"].split("_")[0] if item else "YlGnBu"


def _label(column):
    item = find_variable(column)
    return item["label"] if item else column


def static_choropleth(gdf, column, scheme, k=5, ax=None):
    if scheme not in SCHEMES:
        raise ValueError(f"Unknown scheme '{scheme}'")
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 8))

    gdf.plot(
        column=column,
        scheme=SCHEMES[scheme],
        k=k,
        cmap=_cmap(column),
        legend=True,
        edgecolor="black",
        linewidth=0.2,
        missing_kwds={"color": MISSING_COLOR, "label": "Missing"},
        ax=ax,
    )
    ax.set_title(f"{_label(column)} ({scheme.replace('_', ' ')})")
    ax.set_axis_off()
    return ax


def interactive_choropleth(gdf, column, scheme="quantiles", k=5):
    if scheme not in SCHEMES:
        raise ValueError(f"Unknown scheme '{scheme}'")
    tooltip = [c for c in (NAME_COLUMN, column) if c in gdf.columns]
    return gdf.explore(
        column=column,
        scheme=SCHEMES[scheme],
        k=k,
        cmap=_cmap(column),
        tooltip=tooltip,
        legend=True,
        style_kwds={"color": "black", "weight": 1},
    )


def main(argv=None):
    parser = argparse.ArgumentParser(description='Draw choropleth maps of a census variable under several classification schemes')
    parser.add_argument('--source', default=DATA_URL,
                        help='URL or path of the tract dataset')
    parser.add_argument('--column', default=DEFAULT_DEMOGRAPHIC,
                        help='Variable to map')
    parser.add_argument('-k', type=int, default=5,
                        help='Number of classes for schemes that take one')
    parser.add_argument('--out', default='tutorial_output',
                        help='Directory for the PNG and HTML maps')
    args = parser.parse_args(argv)

    matplotlib.use("Agg")

    gdf = load_data(args.source)
    if gdf.empty:
        print("No data loaded, nothing to draw.", file=sys.stderr)
        return 1
    if args.column not in gdf.columns:
        print(f"Column '{args.column}' not found. Available: {', '.join(c for c in gdf.columns if c != 'geometry')}", file=sys.stderr)
        return 1

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)

    for scheme in SCHEMES:
        print(f"\n=== {scheme} ===", flush=True)
        print(describe_classes(gdf[args.column], scheme, args.k).to_string(index=False), flush=True)

        ax = static_choropleth(gdf, args.column, scheme, args.k)
        png = out / f"{args.column}_{scheme}.png"
        ax.figure.savefig(png, dpi=150, bbox_inches="tight")
        plt.close(ax.figure)
        print(f"Wrote: {png}", flush=True)

    html = out / f"{args.column}_interactive.html"
    interactive_choropleth(gdf, args.column, "quantiles", args.k).save(str(html))
    print(f"Wrote: {html}", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
