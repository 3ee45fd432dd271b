"""Interactive command-line application for the belt simulator."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from .charts import save_counts_chart
from .entities import ProductionLine, ProductRecipe, SupplyEntry, WorkerPlacement, load_line, reference_line
from .errors import BeltlineError
from .monte_carlo import MonteCarloSummary, run_monte_carlo, summarize_results
from .randomness import RandomSourceFactory
from .simulation import WORKER_POLICIES

logger = logging.getLogger(__name__)

SAMPLE_LINES: Dict[str, ProductionLine] = {}

RANDOM_SOURCES = ["Seeded generator", "Operating system entropy", "Scripted draws"]


def _build_sample_lines() -> None:
    global SAMPLE_LINES
    if SAMPLE_LINES:
        return
    reference = reference_line()
    long_line = ProductionLine(
        name="Long line",
        slot_count=8,
        supply=[SupplyEntry("A", 40), SupplyEntry("B", 40), SupplyEntry(None, 20)],
        products=[ProductRecipe("P", ["A", "B"])],
        workers=[WorkerPlacement(name=f"Worker {idx + 1}", position=1 + idx // 2) for idx in range(12)],
        build_time=reference.build_time,
    )
    SAMPLE_LINES = {reference.name: reference, long_line.name: long_line}


def _input_with_default(prompt: str, default: Optional[str] = None) -> str:
    suffix = f" [{default}]" if default is not None else ""
    response = input(f"{prompt}{suffix}: ").strip()
    if not response and default is not None:
        return default
    return response


def _prompt_int(prompt: str, default: int, minimum: int = 0) -> int:
    while True:
        response = _input_with_default(prompt, f"{default}")
        try:
            value = int(float(response))
            if value < minimum:
                raise ValueError
            return value
        except ValueError:
            print(f"Please enter an integer greater than or equal to {minimum}.")


def _prompt_choice(prompt: str, options: List[str], default: Optional[str] = None) -> str:
    option_map = {str(i + 1): opt for i, opt in enumerate(options)}
    while True:
        for idx, option in enumerate(options, start=1):
            marker = "" if default != option else " (default)"
            print(f"  {idx}. {option}{marker}")
        response = _input_with_default(prompt, None if default is None else str(options.index(default) + 1))
        chosen = option_map.get(response)
        if chosen:
            return chosen
        print("Please select one of the listed options by number.")


def build_line_from_user() -> ProductionLine:
    print("\nConfiguring a custom line...")
    print("Workers have two hands, so a custom line carries two raw components and one product built from both.")
    name = _input_with_default("Line name", "Custom line")
    slot_count = _prompt_int("How many belt slots?", 5, minimum=1)
    supply: List[SupplyEntry] = []
    for default_name in ("A", "B"):
        kind_name = _input_with_default(f"  Name of component {default_name}", default_name)
        weight = _prompt_int(f"  Weight of {kind_name}", 50)
        supply.append(SupplyEntry(kind_name, weight))
    empty_weight = _prompt_int("Weight of an empty slot entering the belt", 50)
    if empty_weight:
        supply.append(SupplyEntry(None, empty_weight))
    product_name = _input_with_default("Name of the finished product", "P")
    build_time = _prompt_int("Steps needed to assemble it", 4, minimum=1)
    workers: List[WorkerPlacement] = []
    for position in range(slot_count):
        count = _prompt_int(f"  Workers at slot {position}", 2 if 0 < position < slot_count - 1 else 0)
        for _ in range(count):
            workers.append(WorkerPlacement(name=f"Worker {len(workers) + 1}", position=position))
    return ProductionLine(
        name=name,
        slot_count=slot_count,
        supply=supply,
        products=[ProductRecipe(product_name, [supply[0].name, supply[1].name])],
        workers=workers,
        build_time=build_time,
    )


def select_line_from_samples() -> ProductionLine:
    _build_sample_lines()
    options = list(SAMPLE_LINES.keys())
    chosen = _prompt_choice("Choose a sample line", options, default=options[0])
    return SAMPLE_LINES[chosen]


def configure_line() -> ProductionLine:
    while True:
        choice = _prompt_choice(
            "Use a sample, load a JSON file or build custom?",
            ["Sample line", "Load from file", "Create manually"],
            default="Sample line",
        )
        try:
            if choice == "Sample line":
                return select_line_from_samples()
            if choice == "Load from file":
                return load_line(_input_with_default("Path to line definition"))
            return build_line_from_user()
        except (BeltlineError, OSError, ValueError) as exc:
            print(f"Could not set up the line: {exc}")


def format_summary(summary: MonteCarloSummary) -> str:
    lines = [f"\n=== {summary.line_name} ({summary.runs} run{'s' if summary.runs != 1 else ''}) ==="]
    lines.append(" Belt statistics")
    for name, value in summary.count_mean.items():
        spread = summary.count_std.get(name, 0.0)
        if name in summary.product_names:
            label = f"Finished component {name} was counted off"
        else:
            label = f"Component {name} was untouched"
        lines.append(f"\t{label:<40}{value:8.2f} ± {spread:.2f}")
    lines.append(f"\t{'Empty slots reached the end':<40}{summary.empty_exits_mean:8.2f}")
    if summary.anomalies:
        lines.append(f"\tSelection anomalies: {summary.anomalies}")
    return "\n".join(lines)


def prompt_random_source() -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
    """Return a base seed for seeded runs, or a random source definition for the factory."""
    choice = _prompt_choice("Where should random draws come from?", RANDOM_SOURCES, default=RANDOM_SOURCES[0])
    if choice == "Seeded generator":
        base_seed_input = _input_with_default("Random seed (leave blank for random)", "")
        return (int(base_seed_input) if base_seed_input else None), None
    if choice == "Operating system entropy":
        return None, {"type": "system"}
    while True:
        response = _input_with_default("Draws in [0, 1), comma separated (replayed in a loop)", "0.1,0.5,0.9")
        definition = {"type": "scripted", "values": [value.strip() for value in response.split(",")], "repeat": True}
        try:
            RandomSourceFactory.from_dict(definition)
            return None, definition
        except (BeltlineError, ValueError) as exc:
            print(f"Invalid draws: {exc}")


def main() -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    print("Welcome to the Conveyor Belt Production Line Simulator!")
    print("Raw components ride the belt while workers pick pairs and assemble finished items.\n")
    line = configure_line()
    print(line.describe())
    steps = _prompt_int("How many steps should the belt run?", 100, minimum=1)
    sims = _prompt_int("Number of simulations?", 1, minimum=1)
    policy = _prompt_choice("How are workers chosen each step?", list(WORKER_POLICIES), default=WORKER_POLICIES[0])
    actions = 1
    if policy == "weighted":
        actions = _prompt_int("Workers drawn per step", 1, minimum=1)
    base_seed, source = prompt_random_source()

    try:
        result = run_monte_carlo(
            line,
            steps=steps,
            simulations=sims,
            base_seed=base_seed,
            worker_policy=policy,
            actions_per_step=actions,
            random_source=source,
        )
    except BeltlineError as exc:
        logger.error("Simulation failed: %s", exc)
        print(f"Simulation failed: {exc}")
        return

    summaries = summarize_results([result])
    for summary in summaries:
        print(format_summary(summary))

    chart_path = _input_with_default("\nSave a chart of the counts to (leave blank to skip)", "")
    if chart_path:
        saved = save_counts_chart(summaries, chart_path)
        print(f"Chart written to {saved}")

    print("\nSimulation complete.")


if __name__ == "__main__":
    main()
