from pathlib import Path

import pytest

from lrcpp.grammar.loader import build_artifacts, load_artifacts
from lrcpp.grammar.model import AUGMENTED_LHS
from lrcpp.lalr.symbols import EOF_NAME

DATA = Path(__file__).with_name("data")
TINY = DATA / "tiny.json"
CALC = DATA / "calc.json"


def test_load_tiny():
    art = load_artifacts(str(TINY))
    g = art.grammar
    assert g.symbols.terminals() == [EOF_NAME, "'a'"]
    assert g.symbols.id_of("S") == 2
    assert art.table.n_states == 4
    assert art.table.row(0) == {1: "s3", 2: "1", 3: "2"}


def test_augmented_production_is_first():
    g = load_artifacts(str(CALC)).grammar
    prods = g.get_productions()
    aug = g.get_augmented_production()
    assert aug is prods[0]
    assert aug.lhs == AUGMENTED_LHS and aug.rhs == ["E"]
    assert [p.number for p in prods] == [0, 1, 2]


def test_eof_is_moved_to_code_zero(calc_doc):
    calc_doc["terminals"] = ["'+'", "$", "NUMBER"]
    sym = build_artifacts(calc_doc).grammar.symbols
    assert sym.id_of("$") == sym.eof_id == 0
    assert sym.terminals() == ["$", "'+'", "NUMBER"]


def test_numeric_column_keys(tiny_doc):
    tiny_doc["table"]["1"] = {"0": "acc"}
    assert build_artifacts(tiny_doc).table.row(1) == {0: "acc"}


def test_propagation_is_decided_per_nonterminal(calc, tiny):
    g = calc.grammar
    assert not any(g.derives_propagating_token(p) for p in g.get_productions())
    g = tiny.grammar
    assert all(g.derives_propagating_token(p) for p in g.get_productions())


def test_propagation_cycle_is_false(make_artifacts):
    art = make_artifacts(
        [("A", ["B"], None), ("B", ["A"], None)], terminals=[], nonterminals=["A", "B"],
    )
    g = art.grammar
    assert not any(g.derives_propagating_token(p) for p in g.get_productions())


@pytest.mark.parametrize("mutate, message", [
    (lambda d: d.pop("table"), "missing required key 'table'"),
    (lambda d: d.update(start="Z"), "not a nonterminal"),
    (lambda d: d.update(terminals="abc"), "must be list"),
    (lambda d: d["table"].update({"x": {}}), "is not a number"),
    (lambda d: d["table"]["0"].update({"B": "s1"}), "unknown column"),
    (lambda d: d["lex"]["rules"].append(["only-one"]), "lex rule #2"),
    (lambda d: d["productions"].append({"lhs": "S", "rhs": ["Q"]}), "unknown symbol 'Q'"),
])
def test_malformed_artifacts(tiny_doc, mutate, message):
    mutate(tiny_doc)
    with pytest.raises(ValueError, match=message):
        build_artifacts(tiny_doc)


def test_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="invalid JSON"):
        load_artifacts(str(path))


def test_computed_action_does_not_propagate(make_artifacts):
    art = make_artifacts(
        [("A", ["NUMBER"], "$$ = std::stoi($1)"), ("B", ["NUMBER"], " $$ = $1 ; ")],
        terminals=["NUMBER"], nonterminals=["A", "B"], tokens=["NUMBER"],
    )
    g = art.grammar
    prods = g.get_productions()
    assert not g.derives_propagating_token(prods[1])
    assert g.derives_propagating_token(prods[2])


def test_null_lex_handler_is_empty(tiny_doc):
    tiny_doc["lex"]["rules"].append(["b", None])
    rule = build_artifacts(tiny_doc).grammar.get_lex_grammar().get_rules()[-1]
    assert rule.get_raw_handler() == ""
