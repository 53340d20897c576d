"""Tests for the repeating group ListWidget."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List

import pytest

from htmlwidgets import (
    ConfigurationError,
    FileWidget,
    Form,
    FormConfig,
    IntegerWidget,
    ListWidget,
    TextWidget,
)
from htmlwidgets.const import ADD_TO_LIST_PARAM, REMOVE_FROM_LIST_PARAM

from .models import Address, values


@dataclass
class Tagged:
    L: List[str] = field(default_factory=list)


class Color(IntEnum):
    RED = 1
    GREEN = 2


@dataclass
class Colors:
    L: List[Color] = field(default_factory=list)


@dataclass
class Matrix:
    Rows: List[List[str]] = field(default_factory=list)


def list_form(data, inner=TextWidget, config=None):
    form = Form(data, config=config)
    widget = form.add_widget(ListWidget(inner, "Add", "Remove"), "L", "List")
    return form, widget


class TestListFill:
    def test_add_to_empty_list_with_value(self):
        data = Tagged()
        form, _ = list_form(data)
        form.fill(values((ADD_TO_LIST_PARAM, "L"), ("L.0", "x")))
        assert data.L == ["x"]

    def test_remove_only_row(self):
        data = Tagged(L=["x"])
        form, _ = list_form(data)
        assert not form.fill(values((REMOVE_FROM_LIST_PARAM, "L.0"), ("L.0", "x")))
        assert data.L == []

    def test_add_then_remove(self):
        data = Tagged()
        form, _ = list_form(data)
        form.fill(values((ADD_TO_LIST_PARAM, "L"), ("L.0", "x")))
        form.fill(values((REMOVE_FROM_LIST_PARAM, "L.0")))
        assert data.L == []

    def test_add_appends_empty_row(self):
        data = Tagged(L=["a", "b"])
        form, _ = list_form(data)
        valid = form.fill(values((ADD_TO_LIST_PARAM, "L"), ("L.0", "a"), ("L.1", "b")))
        assert not valid
        assert data.L == ["a", "b", ""]

    def test_add_to_empty_list_without_values(self):
        data = Tagged()
        form, _ = list_form(data)
        form.fill(values((ADD_TO_LIST_PARAM, "L")))
        assert data.L == [""]

    def test_add_for_other_list_is_ignored(self):
        data = Tagged(L=["a"])
        form, _ = list_form(data)
        assert form.fill(values((ADD_TO_LIST_PARAM, "Other"), ("L.0", "a")))
        assert data.L == ["a"]

    def test_plain_submission_is_valid(self):
        data = Tagged()
        form, _ = list_form(data)
        assert form.fill(values(("L.0", "a"), ("L.1", "b")))
        assert data.L == ["a", "b"]

    def test_remove_middle_row(self):
        data = Tagged(L=["a", "b", "c"])
        form, _ = list_form(data)
        form.fill(
            values(
                (REMOVE_FROM_LIST_PARAM, "L.1"), ("L.0", "a"), ("L.1", "b"), ("L.2", "c")
            )
        )
        assert data.L == ["a", "c"]

    def test_missing_rows_are_removed(self):
        data = Tagged(L=["a", "b", "c", "d"])
        form, _ = list_form(data)
        assert form.fill(values(("L.0", "a"), ("L.2", "c")))
        assert data.L == ["a", "c"]

    def test_crop_rows_beyond_submission(self):
        data = Tagged(L=["a", "b", "c"])
        form, _ = list_form(data)
        form.fill(values(("L.0", "A")))
        assert data.L == ["A"]

    def test_empty_submission_clears_list(self):
        data = Tagged(L=["a", "b"])
        form, _ = list_form(data)
        assert form.fill(None)
        assert data.L == []

    def test_more_than_ten_rows(self):
        data = Tagged()
        form, _ = list_form(data)
        submitted = [("L.%d" % index, str(index)) for index in range(12)]
        assert form.fill(values(*submitted))
        assert data.L == [str(index) for index in range(12)]

    def test_submission_longer_than_data_with_remove(self):
        data = Tagged()
        form, _ = list_form(data)
        form.fill(
            values((REMOVE_FROM_LIST_PARAM, "L.0"), ("L.0", "a"), ("L.1", "b"))
        )
        assert data.L == ["b"]

    def test_invalid_child_invalidates_list(self):
        data = Tagged()
        form, widget = list_form(
            data, lambda: TextWidget(min_length=2, validation_error="short")
        )
        assert not form.fill(values(("L.0", "ok"), ("L.1", "x")))
        assert data.L == ["ok", "x"]
        assert [child.errors for child in widget.children] == [[], ["short"]]

    def test_unparsable_integers_keep_rows_contiguous(self):
        data = {"L": []}
        form = Form(data)
        form.add_widget(ListWidget(IntegerWidget), "L")
        assert not form.fill(values(("L.0", "x"), ("L.1", "5")))
        assert data["L"] == [None, 5]

    def test_one_widget_per_row(self):
        data = Tagged()
        form, widget = list_form(data)
        form.fill(values(("L.0", "a"), ("L.1", "b")))
        first, second = widget.children
        assert first is not second
        assert (first.id, second.id) == ("L.0", "L.1")

    def test_nested_in_record(self, person):
        form = Form(person)
        form.add_widget(ListWidget(TextWidget), "Tags")
        person.Tags.append("a")
        form.fill(values(("Tags.0", "b"), ("Tags.1", "c")))
        assert person.Tags == ["b", "c"]

    def test_bound_to_non_sequence(self, person):
        person.Addresses.append(Address())
        form = Form(person)
        form.add_widget(ListWidget(TextWidget), "Addresses.0.Street")
        with pytest.raises(ConfigurationError):
            form.fill(values(("Addresses.0.Street.0", "x")))
        with pytest.raises(ConfigurationError):
            form.render_data()

    def test_enum_rows_grow_with_placeholders(self):
        data = Colors()
        form = Form(data)
        form.add_widget(ListWidget(IntegerWidget), "L")
        assert not form.fill(values((ADD_TO_LIST_PARAM, "L")))
        assert data.L == [None]
        assert form.fill(values(("L.0", "2")))
        assert data.L == [2]

    def test_missing_mapping_key_leaves_data_untouched(self):
        data = {}
        form = Form(data)
        form.add_widget(ListWidget(TextWidget), "L")
        with pytest.raises(ConfigurationError):
            form.fill(values(("L.0", "a")))
        assert data == {}

    def test_nested_lists(self):
        data = Matrix()
        form = Form(data)
        form.add_widget(ListWidget(lambda: ListWidget(TextWidget)), "Rows")
        form.fill(values(("Rows.0.0", "a"), ("Rows.0.1", "b"), ("Rows.1.0", "c")))
        assert data.Rows == [["a", "b"], ["c"]]

    def test_custom_control_params(self):
        data = Tagged()
        config = FormConfig(add_to_list_param="add", remove_from_list_param="remove")
        form, _ = list_form(data, config=config)
        form.fill(values(("add", "L")))
        assert data.L == [""]
        form.fill(values(("remove", "L.0"), ("L.0", "")))
        assert data.L == []

    def test_factory_must_build_widgets(self):
        with pytest.raises(ConfigurationError):
            ListWidget("TextWidget")
        form = Form(Tagged())
        form.add_widget(ListWidget(lambda: "no widget"), "L")
        with pytest.raises(ConfigurationError):
            form.fill(values(("L.0", "a")))


class TestListRender:
    def test_render_nodes(self):
        data = Tagged(L=["a", "b"])
        form, _ = list_form(data)
        node = form.render_data().widgets[0]
        assert node.template == "list"
        assert node.data["AddLabel"] == "Add"
        assert node.data["RemoveLabel"] == "Remove"
        fields = node.data["Fields"]
        assert [child.id for child in fields] == ["L.0", "L.1"]
        assert [child.data for child in fields] == ["a", "b"]
        assert [child.template for child in fields] == ["text", "text"]

    def test_child_errors_survive_removal(self):
        data = Tagged(L=["a", "b", "c"])
        form, _ = list_form(
            data, lambda: TextWidget(min_length=2, validation_error="short")
        )
        form.fill(
            values(
                (REMOVE_FROM_LIST_PARAM, "L.0"), ("L.0", "aa"), ("L.1", "bb"), ("L.2", "c")
            )
        )
        assert data.L == ["bb", "c"]
        fields = form.render_data().widgets[0].data["Fields"]
        assert [child.id for child in fields] == ["L.0", "L.1"]
        assert [child.errors for child in fields] == [[], ["short"]]

    def test_render_without_fill(self):
        form, widget = list_form(Tagged(L=["a"]))
        fields = form.render_data().widgets[0].data["Fields"]
        assert [child.data for child in fields] == ["a"]
        assert len(widget.children) == 1

    def test_external_child_errors(self):
        form, _ = list_form(Tagged(L=["a", "b"]))
        form.add_error("L.1", "taken")
        fields = form.render_data().widgets[0].data["Fields"]
        assert [child.errors for child in fields] == [[], ["taken"]]

    def test_default_labels(self):
        form = Form(Tagged())
        form.add_widget(ListWidget(TextWidget), "L")
        node = form.render_data().widgets[0]
        assert str(node.data["AddLabel"]) == "Add"
        assert str(node.data["RemoveLabel"]) == "Remove"

    def test_file_children_need_multipart(self):
        form = Form(Tagged())
        form.add_widget(ListWidget(FileWidget), "L")
        assert form.render_data().multipart
