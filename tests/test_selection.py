from conftest import search_for
from recordpicker.core.binding import BoundValue
from recordpicker.core.gate import is_tagged


async def test_selecting_a_candidate_binds_its_id(binding, element, changes):
    widget = await search_for(binding, "Acm")

    widget.choose(0)

    assert binding.get_value() == BoundValue(id="42", name="Acme")
    assert len(changes) == 1
    assert is_tagged(changes[0])
    assert changes[0].detail["id"] == "42"


async def test_select_then_blur_raises_exactly_one_change(binding, element, changes):
    widget = await search_for(binding, "Acm")

    widget.choose(1)
    element.blur()

    assert binding.get_value() == BoundValue(id="43", name="Acme Widgets")
    assert len(changes) == 1


async def test_focus_and_blur_without_edit_raises_nothing(binding, element, changes):
    await binding.set_value("42")

    element.focus()
    element.blur()

    assert binding.get_value() == BoundValue(id="42", name="Acme")
    assert changes == []
    assert binding.state.previous_value is None


async def test_edit_then_blur_clears_selection(binding, element, changes):
    await binding.set_value("42")

    element.focus()
    element.type("Acm")
    element.blur()

    assert binding.get_value() == BoundValue(id="", name="")
    assert len(changes) == 1
    assert is_tagged(changes[0])


async def test_focus_snapshots_raw_text(binding, element):
    element.value = "Acme"

    element.focus()

    assert binding.state.previous_value == "Acme"


async def test_highlight_previews_label_without_committing(binding, element, changes):
    widget = await search_for(binding, "Acm")

    widget.highlight(1)

    assert element.value == "Acme Widgets"
    assert binding.state.selected_id is None
    assert changes == []


async def test_selecting_no_matches_sentinel_clears_selection(binding, element, changes):
    await binding.set_value("42")

    widget = await search_for(binding, "zzz")
    assert [c.value for c in widget.menu] == [None]

    widget.choose(0)
    element.blur()

    assert binding.get_value() == BoundValue(id="", name="")
    assert len(changes) == 1


async def test_edit_after_selection_clears_selection(binding, element, changes):
    widget = await search_for(binding, "Acm")
    widget.choose(0)

    element.type("Acm")
    element.blur()

    assert binding.get_value() == BoundValue(id="", name="")
    assert len(changes) == 2


async def test_each_interaction_raises_one_change(binding, element, changes):
    widget = await search_for(binding, "Acm")
    widget.choose(0)
    element.blur()

    widget = await search_for(binding, "Glob")
    widget.choose(0)
    element.blur()

    assert [event.detail["id"] for event in changes] == ["42", "7"]


async def test_autocomplete_is_configured_once(binding, element):
    element.focus()
    widget = binding.controller.widget
    element.blur()

    element.focus()

    assert binding.controller.widget is widget
    assert element.listener_count("input") == 1


async def test_autocomplete_uses_debounce_settings(binding, element, settings):
    element.focus()

    widget = binding.controller.widget

    assert widget.min_length == 3
    assert widget.delay == settings.delay


async def test_destroy_deactivates_autocomplete(binding, element):
    element.focus()
    widget = binding.controller.widget

    binding.destroy()

    assert not widget.active
    assert element.listener_count("input") == 0
    assert element.listener_count("blur") == 0


async def test_retyping_focus_time_text_after_selection_clears_selection(binding, element, changes):
    await binding.set_value("42")
    widget = await search_for(binding, "Glob")
    widget.choose(0)

    element.type("Acme")
    element.blur()

    assert binding.get_value() == BoundValue(id="", name="")
    assert len(changes) == 2
