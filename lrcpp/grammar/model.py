# lrcpp/grammar/model.py
"""Grammar 모델 (읽기 전용 조회용)
- Production: 좌변/우변/세만틱 액션 원문
- Grammar   : 프로덕션 목록(0번 = 증강), 심볼 분류, 렉시컬 문법, 모듈 include
"""

from __future__     import annotations
from dataclasses    import dataclass
from typing         import Dict, List, Optional, Set

import regex as re

from ..lalr.symbols import SymbolTable
from ..lex          import LexGrammar

AUGMENTED_LHS = "$accept"

# 값을 바꾸지 않는 액션: `$$ = $1` (끝의 `;` 는 선택)
_PASS_THROUGH_RE = re.compile(r"\s*\$\$\s*=\s*\$1\s*;?\s*")


@dataclass
class Production:
    """
    프로덕션 1개.
    - lhs   : 좌변 비단말 이름
    - rhs   : 우변 심볼 이름 리스트(ε는 빈 리스트)
    - action: 세만틱 액션 원문(없으면 None). `$$`, `$1`.. 플레이스홀더 사용
    - number: 문법 내 위치(0 = 증강 프로덕션). 테이블의 'r<N>' 이 이 값을 가리킨다.
    """
    lhs: str
    rhs: List[str]
    action: Optional[str] = None
    number: int = -1

    def is_epsilon(self) -> bool:
        return not self.rhs

    def is_augmented(self) -> bool:
        return self.number == 0

    def get_rhs(self) -> List[str]:
        return list(self.rhs)

    def raw_action(self) -> Optional[str]:
        if self.action is None or not self.action.strip():
            return None
        return self.action

    def __str__(self) -> str:
        rhs = " ".join(self.rhs) if self.rhs else "ε"
        return f"{self.lhs} -> {rhs}"


class Grammar:
    """
    방출기가 소비하는 문법 뷰.

    Parameters
    ----------
    symbols : SymbolTable
        고정(freeze)된 심볼 테이블. 단말 분류/코드 조회에 사용.
    productions : List[Production]
        증강 프로덕션을 **제외한** 사용자 프로덕션(선언 순서). 0번 증강
        프로덕션 `$accept -> start` 은 생성자가 앞에 붙인다.
    lex_grammar : LexGrammar
    tokens : 명시적으로 선언된 이름 토큰(예: NUMBER)
    module_include : 사용자 C++ prologue 원문
    """

    def __init__(self,
                 symbols: SymbolTable,
                 productions: List[Production],
                 lex_grammar: LexGrammar,
                 tokens: Optional[List[str]] = None,
                 module_include: str = ""):
        self.symbols = symbols
        augmented = Production(AUGMENTED_LHS, [symbols.start], None)
        self._productions = [augmented] + list(productions)
        for i, p in enumerate(self._productions):
            p.number = i
        self._lex_grammar = lex_grammar
        self._tokens: Set[str] = set(tokens or [])
        self._module_include = module_include or ""
        self._propagates: Dict[str, bool] = {}

        for p in self._productions[1:]:
            for s in [p.lhs] + p.rhs:
                if not symbols.has(s):
                    raise ValueError(f"grammar: unknown symbol {s!r} in production '{p}'")
            if symbols.is_term(p.lhs):
                raise ValueError(f"grammar: terminal {p.lhs!r} on the left-hand side of '{p}'")

    # ----- 조회 -----
    def get_productions(self) -> List[Production]:
        return list(self._productions)

    def get_augmented_production(self) -> Production:
        return self._productions[0]

    def get_lex_grammar(self) -> LexGrammar:
        return self._lex_grammar

    def get_module_include(self) -> str:
        return self._module_include

    def is_token_symbol(self, name: str) -> bool:
        return self.symbols.is_term(name)

    def is_declared_token(self, name: str) -> bool:
        return name in self._tokens

    def productions_of(self, lhs: str) -> List[Production]:
        return [p for p in self._productions if p.lhs == lhs]

    # ----- 토큰 전파 판정 -----
    def derives_propagating_token(self, production: Production) -> bool:
        """
        프로덕션의 결과가 **토큰 그대로** 전달되는지 여부.
        같은 좌변의 프로덕션들은 결과를 같은 스택에 올려야 하므로
        판정은 좌변 비단말 단위로 한다. 좌변의 모든 프로덕션이
          - ε
          - 단말 1개
          - 토큰을 전파하는 비단말 1개
        중 하나이고, 액션이 없거나 `$$ = $1` 일 때만 True
        (`$$ = std::stoi($1)` 처럼 값을 계산하면 값 스택).
        순환(A -> B, B -> A)은 False 로 본다.
        """
        if production.is_augmented():
            return self._propagates_prod(production, set())
        return self._propagates_nonterm(production.lhs, set())

    def _propagates_prod(self, p: Production, visiting: Set[str]) -> bool:
        if p.is_epsilon():
            return True
        if len(p.rhs) != 1:
            return False
        action = p.raw_action()
        if action is not None and not _PASS_THROUGH_RE.fullmatch(action):
            return False
        sym = p.rhs[0]
        if self.is_token_symbol(sym):
            return True
        return self._propagates_nonterm(sym, visiting)

    def _propagates_nonterm(self, name: str, visiting: Set[str]) -> bool:
        if name in self._propagates:
            return self._propagates[name]
        if name in visiting:
            return False
        visiting.add(name)
        prods = self.productions_of(name)
        result = bool(prods) and all(self._propagates_prod(p, visiting) for p in prods)
        visiting.discard(name)
        if not visiting:
            # 최상위 호출에서만 캐시(순환 중간 결과는 불완전)
            self._propagates[name] = result
        return result

    def __repr__(self) -> str:
        return (f"Grammar(start={self.symbols.start}, prods={len(self._productions)}, "
                f"lex_rules={len(self._lex_grammar)})")
