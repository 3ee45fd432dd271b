from beltline.charts import build_counts_figure, save_counts_chart
from beltline.monte_carlo import MonteCarloSummary


def _summary(name="Line"):
    return MonteCarloSummary(
        line_name=name,
        runs=3,
        count_mean={"A": 10.0, "B": 12.0, "P": 4.0},
        count_std={"A": 1.0, "B": 2.0, "P": 0.5},
        empty_exits_mean=20.0,
        anomalies=0,
        product_names=["P"],
    )


def test_figure_has_one_bar_per_kind():
    figure = build_counts_figure([_summary()])
    (ax,) = figure.axes
    assert len(ax.patches) == 3
    labels = [label.get_text() for label in ax.get_xticklabels()]
    assert labels == ["A", "B", "P"]


def test_labels_carry_line_names_when_comparing_lines():
    figure = build_counts_figure([_summary("One"), _summary("Two")])
    (ax,) = figure.axes
    assert len(ax.patches) == 6
    assert ax.get_xticklabels()[3].get_text() == "Two: A"


def test_empty_figure_shows_placeholder():
    figure = build_counts_figure([])
    (ax,) = figure.axes
    assert not ax.patches
    assert ax.texts[0].get_text() == "Run a simulation to view results"


def test_chart_is_saved(tmp_path):
    target = save_counts_chart([_summary()], tmp_path / "counts.png")
    assert target.exists()
    assert target.stat().st_size > 0
