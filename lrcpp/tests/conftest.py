from __future__ import annotations
import copy
import json
from pathlib import Path

import pytest

from lrcpp.grammar.loader import build_artifacts

DATA = Path(__file__).with_name("data")
TINY = DATA / "tiny.json"
CALC = DATA / "calc.json"


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def tiny_doc() -> dict:
    return copy.deepcopy(_read(TINY))


@pytest.fixture
def calc_doc() -> dict:
    return copy.deepcopy(_read(CALC))


@pytest.fixture
def tiny(tiny_doc):
    return build_artifacts(tiny_doc)


@pytest.fixture
def calc(calc_doc):
    return build_artifacts(calc_doc)


def _grammar_doc(productions, terminals, nonterminals, start=None, tokens=(), include="using Value = int;"):
    return {
        "start": start or nonterminals[0],
        "terminals": list(terminals),
        "nonterminals": list(nonterminals),
        "tokens": list(tokens),
        "productions": [
            {"lhs": lhs, "rhs": list(rhs), "action": action}
            for lhs, rhs, action in productions
        ],
        "table": {"0": {}},
        "moduleInclude": include,
    }


@pytest.fixture
def make_artifacts():
    """테이블 없이 액션 변환만 확인할 때 쓰는 최소 산출물 팩토리."""
    def _make(productions, terminals, nonterminals, **kw):
        return build_artifacts(_grammar_doc(productions, terminals, nonterminals, **kw))
    return _make
