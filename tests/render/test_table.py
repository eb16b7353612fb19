"""Tests for sort-state resolution and stable row sorting."""

from __future__ import annotations

from site_audit.render import ASC, DESC, Column, Link, TableModel, TableSection, apply_sort, sort_rows


def _section(**kwargs) -> TableSection:
    rows = [
        {"name": "b", "count": 2, "tag": "first"},
        {"name": "a", "count": 1, "tag": "second"},
        {"name": "c", "count": 2, "tag": "third"},
        {"name": "d", "count": 1, "tag": "fourth"},
    ]
    return TableSection(
        key="items",
        title="Items",
        columns=[Column("name", "Name"), Column("count", "Count", numeric=True), Column("tag", "Tag", sortable=False)],
        rows=rows,
        **kwargs,
    )


def test_default_sort_is_first_sortable_column_ascending() -> None:
    section = _section().sorted({})
    assert section.sort is not None
    assert (section.sort.order, section.sort.direction) == ("name", ASC)
    assert [row["name"] for row in section.rows] == ["a", "b", "c", "d"]


def test_configured_default_order_and_direction() -> None:
    section = _section(default_order="count", default_direction=DESC).sorted(None)
    assert (section.sort.order, section.sort.direction) == ("count", DESC)


def test_equal_keys_keep_input_order_in_both_directions() -> None:
    section = _section()
    ascending = section.sorted({"order": "count", "sort": "asc"})
    descending = section.sorted({"order": "count", "sort": "desc"})

    assert [row["tag"] for row in ascending.rows] == ["second", "fourth", "first", "third"]
    assert [row["tag"] for row in descending.rows] == ["first", "third", "second", "fourth"]

    toggled_back = descending.sorted({"order": "count", "sort": "asc"})
    assert [row["tag"] for row in toggled_back.rows] == ["second", "fourth", "first", "third"]


def test_unsortable_and_unknown_keys_fall_back_to_default() -> None:
    for params in ({"order": "tag"}, {"order": "missing", "sort": "sideways"}):
        state = _section().resolve_sort(params)
        assert (state.order, state.direction) == ("name", ASC)


def test_prefixed_params_only_affect_their_section() -> None:
    model = TableModel(
        report_id="demo",
        label="Demo",
        sections=[_section(prefix="first_"), _section(prefix="second_")],
    )
    sorted_model = apply_sort(model, {"second_order": "count", "second_sort": "desc"})

    first, second = sorted_model.sections
    assert first.sort.order == "name"
    assert second.sort.order == "count"
    assert second.sort.direction == DESC
    # The input model is left untouched.
    assert model.sections[0].sort is None


def test_section_without_sortable_columns_keeps_rows() -> None:
    section = TableSection(
        key="kv",
        title="Values",
        columns=[Column("item", "Item", sortable=False)],
        rows=[{"item": "z"}, {"item": "a"}],
    )
    result = section.sorted({"order": "item"})
    assert result.sort is None
    assert [row["item"] for row in result.rows] == ["z", "a"]


def test_sort_rows_handles_links_and_mixed_values() -> None:
    rows = [
        {"value": Link("beta", "/b")},
        {"value": None},
        {"value": Link("Alpha", "/a")},
        {"value": 3},
    ]
    ordered = sort_rows(rows, "value")
    assert [row["value"] for row in ordered] == [3, None, Link("Alpha", "/a"), Link("beta", "/b")]
