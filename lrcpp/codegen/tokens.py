# lrcpp/codegen/tokens.py
"""TokenType enum 멤버 배정.

모든 단말(코드 순서)에 대해 정확히 하나의 enum 멤버 이름을 만든다.
  - 선언된 이름 토큰(NUMBER 등)  → `NUMBER = 3`
  - EOF('$')                     → `__EOF = 0`
  - 그 외(리터럴 단말 '+', 'a')   → `TOKEN_TYPE_5 = 5`
리터럴 단말은 **따옴표를 벗긴 문자열 → 멤버 이름** 역매핑에 기록해 두고,
핸들러 코드의 `return "+";` 를 `return TokenType::TOKEN_TYPE_5;` 로 바꿀 때 쓴다.
"""

from __future__ import annotations
from typing import Dict, List, Tuple

from ..grammar.model import Grammar
from ..lalr.symbols import EOF_NAME
from .ir import GenerationError

EOF_MEMBER = "__EOF"
EMPTY_MEMBER = "__EMPTY"

# 핸들러가 "토큰 없음(스킵)"을 뜻하려고 쓰는 값들
_EMPTY_SPELLINGS = ("%empty", "nullptr", "NULL")


def strip_quotes(text: str) -> str:
    """양 끝의 따옴표(' 또는 ")를 하나씩 벗긴다."""
    if text[:1] in ("'", '"'):
        text = text[1:]
    if text[-1:] in ("'", '"'):
        text = text[:-1]
    return text


class TokenRegistry:
    """
    단말 → enum 멤버 배정 결과와 리터럴 역매핑.
    생성 1회마다 새로 만든다(이전 문법의 역매핑이 섞이지 않도록).
    """

    def __init__(self) -> None:
        self.members: List[Tuple[str, int]] = []
        self.literals: Dict[str, str] = {}
        self.codes: Dict[str, int] = {}

    @classmethod
    def from_grammar(cls, grammar: Grammar) -> "TokenRegistry":
        reg = cls()
        for reserved in (EOF_NAME, EOF_MEMBER, EMPTY_MEMBER):
            if grammar.is_declared_token(reserved):
                raise GenerationError(f"tokens: {reserved!r} is reserved and cannot be declared as a token")
        for code, token in enumerate(grammar.symbols.terminals()):
            reg.codes[token] = code
            if grammar.is_declared_token(token):
                reg._add_member(token, code)
                continue
            if token == EOF_NAME:
                name = EOF_MEMBER
            else:
                name = f"TOKEN_TYPE_{code}"
            reg._add_member(name, code)
            reg.literals[strip_quotes(token)] = name
        return reg

    def _add_member(self, name: str, code: int) -> None:
        if name == EMPTY_MEMBER or any(n == name for n, _ in self.members):
            raise GenerationError(f"tokens: duplicate TokenType member {name!r} (code {code})")
        self.members.append((name, code))

    # ----- 조회 -----
    def member_names(self) -> List[str]:
        return [n for n, _ in self.members]

    def resolve_return(self, value: str) -> str:
        """
        `return <value>;` 의 value 를 TokenType 멤버 이름으로 해석한다.
        - %empty / nullptr / NULL → __EMPTY
        - 알려진 리터럴          → 배정된 멤버(TOKEN_TYPE_N / __EOF)
        - 그 외                  → 선언 토큰 이름으로 간주(그대로)
        """
        value = strip_quotes(value.strip())
        if value in _EMPTY_SPELLINGS:
            return EMPTY_MEMBER
        if value in self.literals:
            return self.literals[value]
        return value

    # ----- C++ 조각 -----
    def enum_body(self) -> str:
        return ",\n  ".join(f"{name} = {code}" for name, code in self.members)

    def tokens_map(self) -> str:
        """토큰 이름(원문) → 코드 표. `{{"NUMBER", 3}, {"'+'", 4}}`"""
        items = []
        for token, code in self.codes.items():
            key = token.replace("\\", "\\\\").replace('"', '\\"')
            items.append(f'{{"{key}", {code}}}')
        return "{" + ", ".join(items) + "}"
