# ===== IMPORTS ===== #

## ===== STANDARD LIBRARY ===== ##
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple, Union
import importlib
import pytest
import sys
import os

# Add src dir to path to allow importing typeassert
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

## ===== THIRD PARTY ===== ##
from typing_extensions import Annotated

## ===== LOCAL ===== ##
from typeassert.config import BUILTIN_ORIGIN, MAX_VALUE_REPR_LENGTH, UNKNOWN_ORIGIN
from typeassert.markers import MISSING
from typeassert.messages import (
    TemplatedMessage, Verbatim, display_name, format_type_for_display,
    format_value, qualified_identity, render, sanitize_reason,
    type_difference_message, type_origin
)

# ===== HELPERS ===== #
class Widget:
    pass

class Gadget:
    class Part:
        pass

def make_widget():
    class Widget:
        pass
    return Widget

def _rendered(message: TemplatedMessage) -> str:
    return render(message.template, message.args)

# ===== DISPLAY NAMES ===== #
def test_display_name_of_class_is_module_qualified():
    assert display_name(Widget) == f"{Widget.__module__}.Widget"
    assert display_name(Gadget.Part) == f"{Gadget.__module__}.Gadget.Part"

def test_display_name_drops_builtins_module():
    assert display_name(int) == "int"
    assert display_name(ValueError) == "ValueError"

@pytest.mark.parametrize("tp, expected", [
    (List[int], "list[int]"),
    (Dict[str, bool], "dict[str, bool]"),
    (Optional[float], "Optional[float]"),
    (Union[int, str], "Union[int, str]"),
    (Tuple[int, ...], "tuple[int, ...]"),
    (Literal[1, "a"], "Literal[1, 'a']"),
    (Callable[[int, str], bool], "Callable[[int, str], bool]"),
    (Any, "Any"),
    (None, "None"),
    (type(None), "None"),
])
def test_format_type_for_display(tp, expected):
    assert format_type_for_display(tp) == expected

def test_annotated_with_unhashable_metadata_is_formatted():
    tp = Annotated[int, {'unit': 'm'}]
    assert format_type_for_display(tp) == "Annotated[int, {'unit': 'm'}]"
    assert format_type_for_display(tp) == "Annotated[int, {'unit': 'm'}]"
    assert type_origin(tp) == BUILTIN_ORIGIN

def test_annotated_with_hashable_metadata_is_formatted():
    assert format_type_for_display(Annotated[Widget, "primary"]) == f"Annotated[{display_name(Widget)}, 'primary']"

def test_nested_classes_are_qualified_inside_generics():
    assert display_name(List[Widget]) == f"list[{Widget.__module__}.Widget]"

@pytest.mark.skipif(sys.version_info < (3, 10), reason="requires Python 3.10+")
def test_pep604_union_formats_like_typing_union():
    assert display_name(eval("int | str")) == "Union[int, str]"
    assert display_name(eval("int | None")) == "Optional[int]"

# ===== ORIGINS ===== #
def test_type_origin_of_builtin():
    assert type_origin(int) == BUILTIN_ORIGIN

def test_type_origin_is_module_file():
    assert type_origin(Widget) == sys.modules[Widget.__module__].__file__

def test_type_origin_of_unimportable_module():
    ghost = type("Widget", (), {"__module__": "shop.models.not_loaded"})
    assert type_origin(ghost) == UNKNOWN_ORIGIN

def test_qualified_identity():
    assert qualified_identity(Widget) == f"{display_name(Widget)}, {type_origin(Widget)}"
    assert qualified_identity(Widget, disambiguate=True).endswith(f", id={id(Widget):#x}")

# ===== VALUES ===== #
@pytest.mark.parametrize("value, expected", [
    ("users", "'users'"),
    (42, "42"),
    (None, "None"),
    (MISSING, "<missing>"),
    (int, "int"),
    (List[int], "list[int]"),
    (Verbatim("schema"), "schema"),
])
def test_format_value(value, expected):
    assert format_value(value) == expected

def test_format_value_truncates_long_values():
    formatted = format_value("x" * (MAX_VALUE_REPR_LENGTH * 2))
    assert len(formatted) == MAX_VALUE_REPR_LENGTH + 3
    assert formatted.endswith("...")

# ===== REASONS ===== #
@pytest.mark.parametrize("reason, args, expected", [
    ("", (), ""),
    ("   ", (), ""),
    ("it is required", (), "because it is required"),
    ("because it is required", (), "because it is required"),
    ("Because it is required", (), "Because it is required"),
    ("  because of padding  ", (), "because of padding"),
    ("{0} needs {1}", ("billing", "it"), "because billing needs it"),
    ("because {0} said so", ("ops",), "because ops said so"),
])
def test_sanitize_reason(reason, args, expected):
    assert sanitize_reason(reason, *args) == expected

def test_sanitize_reason_without_args_leaves_braces_alone():
    assert sanitize_reason("sets like {1, 2} are fine") == "because sets like {1, 2} are fine"

# ===== TEMPLATES ===== #
def test_render_inserts_reason_with_leading_space():
    assert render("Expected {0}{reason}.", [int], "because x") == "Expected int because x."

def test_render_drops_empty_reason():
    assert render("Expected {0}{reason}.", [int]) == "Expected int."

def test_render_reuses_placeholders():
    assert render("({0} = {1}) vs ({0} = {2})", [Verbatim("name"), "a", "b"]) == "(name = 'a') vs (name = 'b')"

def test_render_does_not_rescan_substituted_text():
    message = render("{0}{reason}", [Verbatim("{reason} {1}")], "because {0}")
    assert message == "{reason} {1} because {0}"

def test_render_with_missing_argument_raises():
    with pytest.raises(IndexError):
        render("{0} and {1}", ["only one"])

# ===== TYPE DIFFERENCE ===== #
def test_type_difference_for_same_type_is_empty():
    assert type_difference_message(Widget, Widget) == TemplatedMessage('')

def test_type_difference_uses_display_names():
    message = _rendered(type_difference_message(Widget, Gadget))
    assert message == f"Expected type to be {display_name(Gadget)}, but found {display_name(Widget)}."

def test_type_difference_keeps_reason_token():
    message = type_difference_message(int, str)
    assert render(message.template, message.args, "because y") == "Expected type to be str because y, but found int."

def test_type_difference_disambiguates_colliding_names():
    first, second = make_widget(), make_widget()
    assert display_name(first) == display_name(second)

    message = _rendered(type_difference_message(first, second))
    expected_part = f"[{qualified_identity(second, disambiguate=True)}]"
    actual_part = f"[{qualified_identity(first, disambiguate=True)}]"
    assert message == f"Expected type to be {expected_part}, but found {actual_part}."
    assert expected_part != actual_part

def test_type_difference_disambiguates_types_from_reloaded_module(temp_module):
    module = temp_module("reloaded_shop_models", """
        class Widget:
            pass
    """)
    old_widget = module.Widget
    new_widget = importlib.reload(module).Widget
    assert old_widget is not new_widget

    message = _rendered(type_difference_message(old_widget, new_widget))
    assert module.__file__ in message
    before, _, after = message.partition(", but found ")
    assert before.replace("Expected type to be ", "") != after.rstrip(".")

def test_type_difference_on_dynamic_types_never_prints_identically():
    first = type("Widget", (), {"__module__": "shop.models"})
    second = type("Widget", (), {"__module__": "shop.models"})
    message = _rendered(type_difference_message(first, second))
    assert UNKNOWN_ORIGIN in message
    assert f"{id(first):#x}" in message
    assert f"{id(second):#x}" in message

def test_type_difference_names_each_file_for_same_named_modules(temp_module):
    code = """
        class Widget:
            def describe(self):
                return 'widget'
    """
    vendor_a = temp_module("shop_widgets", code, directory="vendor_a")
    widget_a = vendor_a.Widget
    vendor_b = temp_module("shop_widgets", code, directory="vendor_b")
    widget_b = vendor_b.Widget
    assert vendor_a.__file__ != vendor_b.__file__

    message = _rendered(type_difference_message(widget_a, widget_b))
    assert message == (
        f"Expected type to be [shop_widgets.Widget, {vendor_b.__file__}], "
        f"but found [shop_widgets.Widget, {vendor_a.__file__}]."
    )
    assert "id=" not in message

def test_type_origin_prefers_file_methods_were_compiled_from(temp_module):
    module = temp_module("origin_shop_models", """
        class Widget:
            @property
            def label(self):
                return 'widget'
    """, directory="models")
    assert type_origin(module.Widget) == module.__file__
