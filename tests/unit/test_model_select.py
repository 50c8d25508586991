import pytest

from services.model_select import ModelSelect, deepseek_model_select
from utils.model_catalog import deepseek_models


def test_control_lists_catalog_as_given():
    """The DeepSeek control should expose the catalog listing without reordering it."""
    control = deepseek_model_select("deepseek-chat")

    assert control.to_dict() == {
        "id": "model-select",
        "label": "Model",
        "value": "deepseek-chat",
        "options": deepseek_models,
    }


def test_control_does_not_sort_or_filter_options():
    """Given an unsorted listing, the control should keep its order."""
    control = ModelSelect(value="b", options=["c", "a", "b"])

    assert control.to_dict()["options"] == ["c", "a", "b"]


def test_select_emits_new_model():
    """Given a change, on_change should receive the chosen model id."""
    chosen = []
    control = deepseek_model_select("deepseek-chat", on_change=chosen.append)

    assert control.select("deepseek-reasoner") == "deepseek-reasoner"
    assert chosen == ["deepseek-reasoner"]
    assert control.value == "deepseek-reasoner"


def test_select_rejects_unknown_model():
    """Given a model outside the options, select should raise and not emit."""
    chosen = []
    control = deepseek_model_select("deepseek-chat", on_change=chosen.append)

    with pytest.raises(ValueError):
        control.select("gpt-4o")

    assert chosen == []
    assert control.value == "deepseek-chat"


def test_render_marks_current_value_and_escapes():
    """The HTML rendering should label the select, mark the current option and escape text."""
    control = ModelSelect(value="a<b", options=["a<b", "c"], css_class="settings")

    html = control.render()

    assert '<div class="settings">' in html
    assert '<label for="model-select">Model</label>' in html
    assert '<option value="a&lt;b" selected>a&lt;b</option>' in html
    assert '<option value="c">c</option>' in html
