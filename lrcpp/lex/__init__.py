# lrcpp/lex/__init__.py
"""lrcpp 렉시컬 문법 모델: 상위 도구가 넘겨준 렉서 규칙의 읽기 전용 뷰.

특징
----
- 규칙은 (매처 정규식 원문, 핸들러 원문, 시작 조건 목록) 으로 구성된다.
- 규칙의 **정규 인덱스**(0-based, 선언 순서)는 `get_rule_index()` 하나로만 얻는다.
  방출기는 평탄 규칙 배열과 시작 조건별 그룹 양쪽에서 이 값을 공유한다.
- 시작 조건(start condition)
    * `INITIAL` 은 항상 존재하며 inclusive.
    * 선언된 조건은 inclusive(%s) 또는 exclusive(%x).
    * 조건을 명시하지 않은 규칙 → 모든 inclusive 조건에 속함
    * 조건을 명시한 규칙 → 명시한 조건에만 속함
    * `*` → 모든 조건

API
---
- `LexRule(matcher, handler, start_conditions)`
- `LexGrammar(rules, start_conditions)`
    - `get_rules()`
    - `get_rule_index(rule) -> int`
    - `get_rules_by_start_conditions() -> Dict[str, List[LexRule]]`
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

INITIAL = "INITIAL"
ANY_CONDITION = "*"


@dataclass(frozen=True, eq=False)
class LexRule:
    matcher: str                          # 정규식 원문(C++ std::regex 로 그대로 삽입)
    handler: str                          # 핸들러 원문(의사 언어)
    start_conditions: Tuple[str, ...] = ()

    def get_raw_matcher(self) -> str:
        return self.matcher

    def get_raw_handler(self) -> str:
        return self.handler


class LexGrammar:
    """
    렉서 규칙 목록 + 시작 조건 선언.

    `start_conditions` 는 이름 → exclusive 여부. `INITIAL` 은 자동으로 추가된다.
    """

    def __init__(self, rules: List[LexRule],
                 start_conditions: Optional[Dict[str, bool]] = None):
        conds: Dict[str, bool] = {INITIAL: False}
        for name, exclusive in (start_conditions or {}).items():
            if name == ANY_CONDITION:
                raise ValueError("lex: '*' cannot be declared as a start condition")
            conds[name] = bool(exclusive)
        self._conditions = conds
        self._rules = list(rules)
        self._index = {id(r): i for i, r in enumerate(self._rules)}

        for i, r in enumerate(self._rules):
            for c in r.start_conditions:
                if c != ANY_CONDITION and c not in conds:
                    raise ValueError(
                        f"lex: rule #{i} /{r.matcher}/ uses undeclared start condition {c!r}"
                    )

    def get_rules(self) -> List[LexRule]:
        return list(self._rules)

    def get_rule_index(self, rule: LexRule) -> int:
        """규칙의 정규 인덱스(0-based). 이 문법에 없는 규칙이면 KeyError."""
        try:
            return self._index[id(rule)]
        except KeyError:
            raise KeyError(f"lex: rule /{rule.matcher}/ does not belong to this grammar")

    def get_start_conditions(self) -> List[str]:
        """선언 순서(INITIAL 먼저)대로 조건 이름을 반환."""
        return list(self._conditions)

    def is_exclusive(self, condition: str) -> bool:
        return self._conditions[condition]

    def get_rules_by_start_conditions(self) -> Dict[str, List[LexRule]]:
        out: Dict[str, List[LexRule]] = {c: [] for c in self._conditions}
        for r in self._rules:
            if ANY_CONDITION in r.start_conditions:
                targets = list(self._conditions)
            elif r.start_conditions:
                targets = list(dict.fromkeys(r.start_conditions))
            else:
                targets = [c for c, excl in self._conditions.items() if not excl]
            for c in targets:
                out[c].append(r)
        return out

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"LexGrammar(rules={len(self._rules)}, conditions={list(self._conditions)})"
