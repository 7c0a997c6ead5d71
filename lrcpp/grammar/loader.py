"""상위 도구 산출물(JSON) 로더.

문법 파싱과 테이블 생성은 lrcpp 밖의 도구가 끝내 두었다고 보고,
그 결과(심볼, 프로덕션, 파싱 테이블, 렉서 규칙, 모듈 include)를 읽어
Grammar / ParseTable 로 만든다.
"""

from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib    import Path
from typing     import Any, Dict, List

from ..lalr.symbols import SymbolTable
from ..lalr.table   import ParseTable
from ..lex          import LexGrammar, LexRule
from .model         import Grammar, Production


@dataclass
class Artifacts:
    grammar: Grammar
    table: ParseTable


def load_grammar_text(path: str) -> str:
    """
    Load Artifact Text (개행 정규화)
    """
    text = Path(path).read_text(encoding="utf-8")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _require(doc: Dict[str, Any], key: str, kind: type):
    if key not in doc:
        raise ValueError(f"loader: missing required key {key!r}")
    value = doc[key]
    if not isinstance(value, kind):
        raise ValueError(f"loader: {key!r} must be {kind.__name__}, got {type(value).__name__}")
    return value


def _column_code(key: str, sym: SymbolTable, state: str) -> int:
    """열 키는 심볼 코드(숫자 문자열) 또는 심볼 이름."""
    if sym.has(key):
        return sym.id_of(key)
    if key.lstrip("-").isdigit():
        return int(key)
    raise ValueError(f"loader: table state {state}: unknown column {key!r}")


def _handler_text(handler: Any) -> str:
    """null 핸들러는 빈 핸들러(스킵)."""
    return "" if handler is None else str(handler)


def _lex_rule(raw: Any, i: int) -> LexRule:
    """
    ["regex", "handler"] 또는 [["cond", ...], "regex", "handler"]
    """
    if not isinstance(raw, list) or len(raw) not in (2, 3):
        raise ValueError(f"loader: lex rule #{i} must be [matcher, handler] or [conditions, matcher, handler]")
    if len(raw) == 3:
        conds, matcher, handler = raw
        if not isinstance(conds, list):
            raise ValueError(f"loader: lex rule #{i}: start conditions must be a list")
        return LexRule(str(matcher), _handler_text(handler), tuple(str(c) for c in conds))
    matcher, handler = raw
    return LexRule(str(matcher), _handler_text(handler))


def build_artifacts(doc: Dict[str, Any]) -> Artifacts:
    start = _require(doc, "start", str)
    terminals: List[str] = list(_require(doc, "terminals", list))
    nonterminals: List[str] = list(_require(doc, "nonterminals", list))
    if start not in nonterminals:
        raise ValueError(f"loader: start symbol {start!r} is not a nonterminal")

    sym = SymbolTable()
    sym.freeze(terminals, nonterminals, start)

    prods: List[Production] = []
    for i, p in enumerate(_require(doc, "productions", list)):
        if not isinstance(p, dict) or "lhs" not in p:
            raise ValueError(f"loader: production #{i + 1} must be an object with 'lhs'")
        prods.append(Production(lhs=p["lhs"], rhs=list(p.get("rhs", [])), action=p.get("action")))

    lex_doc = doc.get("lex", {}) or {}
    rules = [_lex_rule(r, i) for i, r in enumerate(lex_doc.get("rules", []))]
    conditions = {str(k): bool(v) for k, v in (lex_doc.get("startConditions", {}) or {}).items()}
    lex = LexGrammar(rules, conditions)

    grammar = Grammar(
        sym, prods, lex,
        tokens=list(doc.get("tokens", [])),
        module_include=doc.get("moduleInclude", ""),
    )

    rows: Dict[int, Dict[int, str]] = {}
    for state, row in _require(doc, "table", dict).items():
        if not str(state).isdigit():
            raise ValueError(f"loader: table state {state!r} is not a number")
        if not isinstance(row, dict):
            raise ValueError(f"loader: table state {state}: row must be an object")
        rows[int(state)] = {_column_code(str(k), sym, state): str(v) for k, v in row.items()}

    return Artifacts(grammar=grammar, table=ParseTable(rows))


def load_artifacts(path: str) -> Artifacts:
    try:
        doc = json.loads(load_grammar_text(path))
    except json.JSONDecodeError as e:
        raise ValueError(f"loader: {path}: invalid JSON ({e})")
    if not isinstance(doc, dict):
        raise ValueError(f"loader: {path}: top-level value must be an object")
    return build_artifacts(doc)
