import altair as alt
import pandas as pd


def decile_histogram(gdf, result, label, bins=30):
    values = pd.DataFrame({"value": gdf[result.column].dropna().astype(float).to_numpy()})
    edges = pd.DataFrame({
        "edge": result.interior_edges,
        "decile": [f"D{i + 1} | D{i + 2}" for i in range(len(result.interior_edges))],
    })

    hist = alt.Chart(values).mark_bar(color='#6baed6').encode(
        x=alt.X('value:Q', bin=alt.Bin(maxbins=bins), title=label),
        y=alt.Y('count():Q', title='Tracts'),
        tooltip=[alt.Tooltip('count():Q', title='Tracts')]
    )

    rules = alt.Chart(edges).mark_rule(color='#D34D4D', strokeDash=[4, 3]).encode(
        x='edge:Q',
        tooltip=['decile', alt.Tooltip('edge:Q', format=".2f", title='Edge')]
    )

    return (hist + rules).properties(
        title=f"Distribution of {label} with decile edges",
        height=300
    )


def placeholder_chart(message):
    return alt.Chart(pd.DataFrame({"message": [message]})).mark_text(
        color='#d62728', fontSize=14
    ).encode(
        text='message:N'
    ).properties(height=80)
