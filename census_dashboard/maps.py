import branca.colormap as cm
import folium

from census_dashboard.config import (
    CLUSTER_COLORS,
    DEFAULT_ZOOM,
    FALLBACK_CLUSTER_COLORS,
    MISSING_COLOR,
    NAME_COLUMN,
    get_layer_colormap,
)
from census_dashboard.data import map_center, to_feature_collection

TOOLTIP_CSS = """
    <style>
        .leaflet-tooltip {
            font-size: 12px !important;
            color: black !important;
            white-space: nowrap;
        }
        .leaflet-tooltip th {
            font-weight: bold !important;
            padding-right: 6px;
        }
    </style>
"""


def create_decile_colormap(var_id, k, caption):
    # Buckets are integers 1..k, so each step is centred on one of them
    base_cmap = get_layer_colormap(var_id).scale(0.5, k + 0.5)
    index = [0.5 + i for i in range(k + 1)]
    colors = [base_cmap(i + 1) for i in range(k)]
    s = cm.StepColormap(colors, index=index, vmin=index[0], vmax=index[-1])
    s.caption = caption
    return s


def base_map(gdf):
    m = folium.Map(location=map_center(gdf), zoom_start=DEFAULT_ZOOM, tiles="OpenStreetMap")
    m.get_root().header.add_child(folium.Element(TOOLTIP_CSS))
    if not gdf.empty:
        minx, miny, maxx, maxy = gdf.total_bounds
        m.fit_bounds([[miny, minx], [maxy, maxx]])
    return m


def _tooltip_fields(gdf, extra):
    fields, aliases = [], []
    if NAME_COLUMN in gdf.columns:
        fields.append(NAME_COLUMN)
        aliases.append("Tract:")
    for field, alias in extra:
        fields.append(field)
        aliases.append(alias)
    return fields, aliases


def outline_map(gdf):
    m = base_map(gdf)
    if gdf.empty:
        return m
    fields, aliases = _tooltip_fields(gdf, [])
    folium.GeoJson(
        to_feature_collection(gdf[fields + ["geometry"]]),
        style_function=lambda x: {
            'fillColor': 'transparent',
            'color': 'black',
            'weight': 2,
            'fillOpacity': 0
        },
        tooltip=folium.GeoJsonTooltip(fields=fields, aliases=aliases) if fields else None,
    ).add_to(m)
    return m


def choropleth_map(gdf, result, label):
    """Polygons filled by decile bucket of ``result.column``."""
    m = base_map(gdf)
    colormap = create_decile_colormap(result.column, result.k, caption=f"{label} (decile)")
    m.add_child(colormap)

    fields, aliases = _tooltip_fields(gdf, [(result.column, f"{label}:"), ("decile", "Decile:")])
    keep = [c for c in fields if c in gdf.columns]
    shaded = gdf[keep + ["geometry"]].copy()
    shaded["decile"] = result.buckets.astype("float64")

    def style(feature):
        bucket = feature['properties'].get('decile')
        return {
            'fillColor': colormap(bucket) if bucket is not None else MISSING_COLOR,
            'color': 'black',
            'weight': 1,
            'fillOpacity': 0.7
        }

    folium.GeoJson(
        to_feature_collection(shaded),
        style_function=style,
        tooltip=folium.GeoJsonTooltip(fields=fields, aliases=aliases),
    ).add_to(m)
    return m


def assign_cluster_colors(categories):
    colors = {}
    fallback = iter(FALLBACK_CLUSTER_COLORS * (len(categories) // len(FALLBACK_CLUSTER_COLORS) + 1))
    for cat in categories:
        colors[cat] = CLUSTER_COLORS[cat] if cat in CLUSTER_COLORS else next(fallback)
    return colors


def _ordered_categories(labels):
    present = set(labels)
    known = [c for c in CLUSTER_COLORS if c in present]
    return known + sorted(present - set(known))


def cluster_legend_html(title, colors):
    rows = "".join(
        f"<div><span style='display:inline-block;width:12px;height:12px;"
        f"background:{color};border:1px solid #555;margin-right:6px;'></span>{cat}</div>"
        for cat, color in colors.items()
    )
    return f"""
        <div style="position: fixed; bottom: 30px; left: 30px; z-index: 9999;
                    background: white; padding: 8px 10px; border: 1px solid #999;
                    border-radius: 4px; font-size: 12px;">
            <b>{title}</b>{rows}
        </div>
    """


def cluster_map(gdf, labels, label):
    """Polygons filled by cluster category; ``labels`` comes from ``derive.cluster_labels``."""
    colors = assign_cluster_colors(_ordered_categories(labels))

    m = base_map(gdf)
    fields, aliases = _tooltip_fields(gdf, [("cluster", "Cluster:")])
    keep = [c for c in fields if c in gdf.columns]
    shaded = gdf[keep + ["geometry"]].copy()
    shaded["cluster"] = labels

    folium.GeoJson(
        to_feature_collection(shaded),
        style_function=lambda feature: {
            'fillColor': colors.get(feature['properties'].get('cluster'), MISSING_COLOR),
            'color': 'black',
            'weight': 1,
            'fillOpacity': 0.8
        },
        tooltip=folium.GeoJsonTooltip(fields=fields, aliases=aliases),
    ).add_to(m)
    m.get_root().html.add_child(folium.Element(cluster_legend_html(label, colors)))
    return m


def map_html(m):
    return m._repr_html_()
