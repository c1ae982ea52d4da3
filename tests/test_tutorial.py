import folium
import pytest

from census_dashboard.tutorial import (
    SCHEMES,
    classify,
    describe_classes,
    interactive_choropleth,
    main,
    static_choropleth,
)


def test_classify_quantiles(tracts):
    c = classify(tracts["median_income"], "quantiles", k=4)
    assert len(c.bins) == 4
    assert list(c.counts) == [5, 5, 5, 5]


def test_classify_unknown_scheme(tracts):
    with pytest.raises(ValueError, match="Unknown scheme"):
        classify(tracts["median_income"], "jenks_caspall_forced")


@pytest.mark.parametrize("scheme", list(SCHEMES))
def test_describe_classes_counts_every_value(tracts, scheme):
    table = describe_classes(tracts["pct_poverty"], scheme, k=4)

    assert list(table.columns) == ["class", "upper_bound", "count"]
    assert table["count"].sum() == 19
    assert table["upper_bound"].is_monotonic_increasing


def test_static_choropleth_draws_legend(tracts):
    ax = static_choropleth(tracts, "median_income", "equal_interval", k=4)

    assert ax.get_title() == "Median Household Income (equal interval)"
    assert ax.get_legend() is not None


def test_interactive_choropleth_returns_map(tracts):
    m = interactive_choropleth(tracts, "median_income", "natural_breaks", k=3)
    assert isinstance(m, folium.Map)


def test_main_writes_maps(tracts, tmp_path, capsys):
    source = tmp_path / "tracts.geojson"
    tracts.to_file(source, driver="GeoJSON")
    out = tmp_path / "maps"

    code = main(["--source", str(source), "--column", "median_income", "-k", "4", "--out", str(out)])

    assert code == 0
    for scheme in SCHEMES:
        assert (out / f"median_income_{scheme}.png").exists()
    assert (out / "median_income_interactive.html").exists()
    assert "=== quantiles ===" in capsys.readouterr().out


def test_main_unknown_column(tracts, tmp_path, capsys):
    source = tmp_path / "tracts.geojson"
    tracts.to_file(source, driver="GeoJSON")

    assert main(["--source", str(source), "--column", "pct_renters"]) == 1
    assert "not found" in capsys.readouterr().err
