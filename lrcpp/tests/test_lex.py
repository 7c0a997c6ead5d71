import pytest

from lrcpp.lex import INITIAL, LexGrammar, LexRule


def _indices(lex, groups):
    return {c: [lex.get_rule_index(r) for r in rules] for c, rules in groups.items()}


def test_rule_index_is_declaration_order():
    rules = [LexRule("a", "A"), LexRule("a", "A"), LexRule("b", "B")]
    lex = LexGrammar(rules)
    # 내용이 같아도 규칙마다 별도의 인덱스
    assert [lex.get_rule_index(r) for r in rules] == [0, 1, 2]


def test_foreign_rule_has_no_index():
    lex = LexGrammar([LexRule("a", "A")])
    with pytest.raises(KeyError):
        lex.get_rule_index(LexRule("a", "A"))


def test_initial_is_always_present():
    lex = LexGrammar([LexRule("a", "A")])
    assert lex.get_start_conditions() == [INITIAL]
    assert not lex.is_exclusive(INITIAL)
    assert _indices(lex, lex.get_rules_by_start_conditions()) == {INITIAL: [0]}


def test_grouping_by_start_conditions(calc):
    lex = calc.grammar.get_lex_grammar()
    assert lex.get_start_conditions() == [INITIAL, "comment"]
    assert lex.is_exclusive("comment")
    assert _indices(lex, lex.get_rules_by_start_conditions()) == {
        INITIAL: [0, 1, 2, 4],
        "comment": [3, 4],
    }


def test_unconditioned_rules_join_inclusive_conditions():
    rules = [LexRule("a", "A"), LexRule("b", "B", ("str",)), LexRule("c", "C", ("x",))]
    lex = LexGrammar(rules, {"str": False, "x": True})
    assert _indices(lex, lex.get_rules_by_start_conditions()) == {
        INITIAL: [0],
        "str": [0, 1],
        "x": [2],
    }


def test_duplicate_condition_listed_once():
    lex = LexGrammar([LexRule("a", "A", ("s", "s"))], {"s": True})
    assert _indices(lex, lex.get_rules_by_start_conditions())["s"] == [0]


def test_undeclared_condition_is_rejected():
    with pytest.raises(ValueError, match="undeclared start condition"):
        LexGrammar([LexRule("a", "A", ("nope",))])


def test_wildcard_cannot_be_declared():
    with pytest.raises(ValueError):
        LexGrammar([], {"*": True})
