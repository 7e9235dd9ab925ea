import plotly.express as px
import pandas as pd

# One character per outcome in the ASCII chart
OUTCOME_CHARS = {
    "hit": "H",
    "cold miss": "C",
    "miss": "M",
    "miss eviction": "E",
}


def export_outcome_chart(timeline, path: str):
    if not timeline:
        with open(path, "w") as f:
            f.write("<h1>Cache Outcomes</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(timeline)
    df['set'] = pd.to_numeric(df['set'], errors='coerce')
    df = df.dropna(subset=['set', 'outcome'])
    df['set'] = df['set'].astype(int)

    counts = df.groupby(['set', 'outcome']).size().reset_index(name='count')

    fig = px.bar(
        counts,
        x="set",
        y="count",
        color="outcome",
        hover_data=['set', 'outcome', 'count'],
        title="Cache Access Outcomes per Set",
        labels={"set": "Set Index", "count": "Accesses", "outcome": "Outcome"},
        category_orders={"outcome": list(OUTCOME_CHARS)},
    )

    fig.update_layout(
        barmode="stack",
        font=dict(family="Courier New, monospace", size=12),
        legend_title="Outcome"
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)


def export_outcome_ascii(timeline, width: int = 60):
    if not timeline:
        return "Timeline is empty."

    # Group by set
    set_lanes = {}
    for item in timeline:
        set_lanes.setdefault(item['set'], []).append(item['outcome'])

    max_count = max(len(v) for v in set_lanes.values())
    scale = width / max_count

    chart = "Cache Access Outcomes per Set (ASCII)\n"
    chart += "-" * (width + 20) + "\n"

    for set_index in sorted(set_lanes):
        outcomes = set_lanes[set_index]
        lane = ""
        for outcome, char in OUTCOME_CHARS.items():
            n = outcomes.count(outcome)
            lane += char * int(round(n * scale))
        chart += f"set {set_index:>6} |{lane:<{width}}| {len(outcomes)}\n"

    chart += "-" * (width + 20) + "\n"
    chart += "  ".join(f"{c}={o}" for o, c in OUTCOME_CHARS.items()) + "\n"

    return chart
