import pytest

from lrcpp.codegen.include import ModuleInclude, ModuleIncludeError
from lrcpp.codegen.ir import GenerationError
from lrcpp.codegen.slots import HandlerList, SlotRegistry, slot_marker


# ---------- SlotRegistry ----------

def test_assemble_replaces_every_occurrence():
    reg = SlotRegistry()
    reg.write("NAME", "Calc")
    reg.write("COUNT", 3)
    out = reg.assemble("class {{{NAME}}}; using P = {{{NAME}}}; int n = {{{COUNT}}};")
    assert out == "class Calc; using P = Calc; int n = 3;"


def test_inserted_text_is_not_rescanned():
    reg = SlotRegistry()
    reg.write("BODY", "x = {{{OTHER}}};")
    assert reg.assemble("{{{BODY}}}") == "x = {{{OTHER}}};"


def test_missing_slots_are_listed():
    reg = SlotRegistry()
    reg.write("A", "1")
    with pytest.raises(GenerationError) as exc:
        reg.assemble("{{{A}}} {{{B}}} {{{C}}} {{{B}}}")
    assert "B, C" in str(exc.value)


def test_missing_in():
    reg = SlotRegistry()
    reg.write("A", "")
    assert reg.missing_in("{{{A}}}{{{B}}}") == ["B"]
    assert "A" in reg and "B" not in reg


def test_rewrite_same_value_is_silent():
    reg = SlotRegistry()
    for _ in range(3):
        reg.write("PARSER_CLASS_NAME", "Parser")
    assert reg.overwrites == []
    assert reg.names() == ["PARSER_CLASS_NAME"]


def test_rewrite_different_value_is_recorded_last_wins():
    reg = SlotRegistry()
    reg.write("X", "old")
    reg.write("X", "new")
    assert reg.get("X") == "new"
    assert reg.overwrites == [("X", "old", "new")]


def test_slot_marker():
    assert slot_marker("TABLE") == "{{{TABLE}}}"


# ---------- HandlerList ----------

def test_handler_list_is_one_based():
    hl = HandlerList("_handler", "void")
    assert hl.add("yyparse& parser", "  a();") == 1
    assert hl.add("yyparse& parser", "  b();") == 2
    assert len(hl) == 2
    assert hl.ref(2) == "&_handler2"
    assert hl[1].body == "  a();"
    assert hl.declarations() == [
        "void _handler1(yyparse& parser) {\n  a();\n}",
        "void _handler2(yyparse& parser) {\n  b();\n}",
    ]


@pytest.mark.parametrize("index", [0, 3])
def test_handler_name_out_of_range(index):
    hl = HandlerList("_lexRule", "inline TokenType")
    hl.add("", "")
    hl.add("", "")
    with pytest.raises(GenerationError):
        hl.name(index)


# ---------- ModuleInclude ----------

@pytest.mark.parametrize("text", [
    "using Value = int;",
    "struct Value { int v; };",
    "class Value;",
    "typedef std::shared_ptr<Node> Value;",
])
def test_value_type_detected(text):
    assert ModuleInclude(text).declares_value_type()


@pytest.mark.parametrize("text", ["", "using ValueType = int;", "// Value", "int Value = 0;"])
def test_value_type_missing(text):
    inc = ModuleInclude(text)
    assert not inc.declares_value_type()
    with pytest.raises(ModuleIncludeError) as exc:
        inc.require_value_type()
    assert exc.value.missing == "Value"
    assert "using Value = <...>;" in str(exc.value)


def test_module_include_error_is_a_value_error():
    assert issubclass(ModuleIncludeError, ValueError)


def test_hooks():
    inc = ModuleInclude("using Value = int;\nvoid onParseBegin(const std::string& s) {}\n")
    assert inc.has_hook("onParseBegin")
    assert not inc.has_hook("onParseEnd")
    assert inc.hook_call("onParseBegin", "str") == "onParseBegin(str);"
    assert inc.hook_call("onParseEnd", "result") == ""
