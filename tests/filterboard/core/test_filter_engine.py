from __future__ import annotations

from filterboard.charts.registry import ChartRegistry
from filterboard.core.dataset import Dataset
from filterboard.core.filter_engine import apply_filters, run_filters
from filterboard.core.filter_state import FilterState
from filterboard.core.predicates import MembershipSet, Range

ROWS = [
    {"Region": "EU", "GDP": 100},
    {"Region": "EU", "GDP": 200},
    {"Region": "AS", "GDP": 300},
]


def _dataset() -> Dataset:
    return Dataset.from_records(ROWS, name="gdp")


def _registry(dataset: Dataset) -> ChartRegistry:
    registry = ChartRegistry(api_key="key")
    registry.register("c1", "chart-0")
    registry.register("c2", "chart-1")
    registry.build_charts(
        dataset,
        [
            {"template": "bar", "bindings": {"x": "Region", "y": "GDP"}},
            {"template": "scatter", "bindings": {"x": "GDP", "y": "GDP"}},
        ],
    )
    return registry


def test_unconditional_state_keeps_every_row_in_order():
    ds = _dataset()
    state = FilterState.seed(["Region", "GDP"])

    result = apply_filters(ds, state)

    assert ds.records(result) == ROWS


def test_apply_filters_is_intersection_of_all_predicates():
    ds = _dataset()
    state = FilterState.seed(["Region", "GDP"])
    state.set_predicate("Region", MembershipSet("Region", ("EU", "AS")))
    state.set_predicate("GDP", Range("GDP", 150, 400))

    result = ds.records(apply_filters(ds, state))

    expected = [
        row for row in ROWS
        if all(pred.matches(row) for _, pred in state)
    ]
    assert result == expected == [ROWS[1], ROWS[2]]


def test_apply_filters_is_idempotent():
    ds = _dataset()
    state = FilterState.seed(["Region", "GDP"])
    state.set_predicate("GDP", Range("GDP", 100, 200))

    once = apply_filters(ds, state)
    twice = apply_filters(Dataset(once), state)

    assert ds.records(once) == Dataset(twice).records()


def test_run_filters_pushes_filtered_rows_into_every_chart():
    ds = _dataset()
    registry = _registry(ds)
    state = FilterState.seed(["Region"])
    state.set_predicate("Region", MembershipSet("Region", ("EU",)))

    outcome = run_filters(ds, state, registry)

    assert not outcome.show_notice
    assert outcome.n_rows == 2
    assert outcome.n_total == 3
    assert len(outcome.figures) == 2
    for entry in registry.entries:
        assert entry.options["data"] == {"data": ROWS[:2]}
        # whole options bag is resent, not just the data
        assert entry.options["api_key"] == "key"
        assert entry.visual.options["data"] == {"data": ROWS[:2]}


def test_empty_result_raises_notice_and_leaves_charts_alone():
    ds = _dataset()
    registry = _registry(ds)
    state = FilterState.seed(["Region"])
    state.set_predicate("Region", MembershipSet("Region", ()))

    before = [entry.figure for entry in registry.entries]
    outcome = run_filters(ds, state, registry)

    assert outcome.show_notice
    assert outcome.is_empty
    assert outcome.figures is None
    for entry, figure in zip(registry.entries, before):
        assert entry.options["data"] == {"data": ROWS}
        assert entry.figure is figure
