import builtins

from beltline import app
from beltline.monte_carlo import MonteCarloSummary


def test_format_summary_lists_each_kind():
    summary = MonteCarloSummary(
        line_name="Reference line",
        runs=1,
        count_mean={"A": 20.0, "B": 18.0, "P": 7.0},
        count_std={"A": 0.0, "B": 0.0, "P": 0.0},
        empty_exits_mean=55.0,
        anomalies=2,
        product_names=["P"],
    )
    text = app.format_summary(summary)
    assert "Component A was untouched" in text
    assert "Finished component P was counted off" in text
    assert "Selection anomalies: 2" in text


def test_main_runs_a_sample_line(monkeypatch, capsys):
    answers = iter(["1", "1", "20", "1", "1", "1", "1", "5", ""])
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(answers))
    app.main()
    output = capsys.readouterr().out
    assert "Belt statistics" in output
    assert "Simulation complete." in output


def test_main_loads_a_line_file(monkeypatch, capsys, tmp_path):
    path = tmp_path / "line.json"
    path.write_text(
        '{"name": "Tiny", "slot_count": 3, "supply": [{"name": "A", "weight": 1}, {"name": "B", "weight": 1}],'
        ' "products": [{"name": "P", "components": ["A", "B"]}], "workers": [{"position": 1}]}',
        encoding="utf-8",
    )
    chart = tmp_path / "chart.png"
    answers = iter(["2", str(path), "10", "2", "2", "1", "", str(chart)])
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(answers))
    app.main()
    output = capsys.readouterr().out
    assert "=== Tiny (2 runs) ===" in output
    assert chart.exists()


def _record_monte_carlo_calls(monkeypatch):
    calls = []
    real = app.run_monte_carlo

    def recording(*args, **kwargs):
        calls.append(kwargs)
        return real(*args, **kwargs)

    monkeypatch.setattr(app, "run_monte_carlo", recording)
    return calls


def test_main_passes_actions_per_step_and_scripted_draws(monkeypatch, capsys):
    calls = _record_monte_carlo_calls(monkeypatch)
    answers = iter(["1", "1", "15", "1", "1", "3", "3", "0.1, 0.5, 0.9", ""])
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(answers))
    app.main()
    assert calls[0]["actions_per_step"] == 3
    assert calls[0]["random_source"] == {"type": "scripted", "values": ["0.1", "0.5", "0.9"], "repeat": True}
    assert calls[0]["base_seed"] is None
    assert "Simulation complete." in capsys.readouterr().out


def test_main_reprompts_for_scripted_draws_outside_unit_interval(monkeypatch, capsys):
    calls = _record_monte_carlo_calls(monkeypatch)
    answers = iter(["1", "1", "5", "1", "2", "3", "1.5", "0.25", ""])
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(answers))
    app.main()
    assert "Invalid draws" in capsys.readouterr().out
    assert calls[0]["random_source"]["values"] == ["0.25"]
    assert calls[0]["actions_per_step"] == 1


def test_main_can_use_operating_system_entropy(monkeypatch, capsys):
    calls = _record_monte_carlo_calls(monkeypatch)
    answers = iter(["1", "1", "10", "2", "1", "1", "2", ""])
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(answers))
    app.main()
    assert calls[0]["random_source"] == {"type": "system"}
    assert "=== Reference line (2 runs) ===" in capsys.readouterr().out


def test_custom_line_has_two_raw_components_and_one_product(monkeypatch):
    answers = iter(["Bench", "4", "X", "30", "Y", "30", "40", "Z", "2", "0", "1", "1", "0"])
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(answers))
    line = app.build_line_from_user()
    assert [entry.name for entry in line.supply] == ["X", "Y", None]
    assert [(recipe.name, recipe.components) for recipe in line.products] == [("Z", ["X", "Y"])]
    assert [worker.position for worker in line.workers] == [1, 2]
    assert line.build_time == 2
