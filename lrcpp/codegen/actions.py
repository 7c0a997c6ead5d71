# lrcpp/codegen/actions.py
"""세만틱 액션 → C++ 함수 본문 변환.

개요
----
사용자 핸들러 원문은 작은 스택 기반 의사 언어로 쓰여 있다.
  * `$$`      : 프로덕션 결과
  * `$1..$N`  : 우변 N번째 심볼의 값(또는 토큰 문자열)
  * `yytext`  : 현재 매치 텍스트
  * `return X;` (렉서 핸들러) : 토큰 종류 반환

변환은 두 단계다.
1) ActionRewriter: 치환 표를 순서대로 적용하는 **순수 텍스트 변환**.
2) ActionTranslator: 프로덕션 핸들러에는 스택 prologue/epilogue 를 붙이고,
   렉서 핸들러에는 `return` 을 보충한 뒤 HandlerList 에 등록한다.

스택 규약(템플릿의 매크로)
-------------------------
- POP_T() / POP_V() : 토큰 스택 / 값 스택에서 하나 꺼내 돌려줌
- PUSH_TR() / PUSH_VR() : `__` 를 토큰 스택 / 값 스택에 넣음
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional

import regex as re

from ..grammar.model import Grammar, Production
from .ir import GenerationError
from .slots import HandlerList
from .tokens import TokenRegistry, EMPTY_MEMBER

PRODUCTION_HANDLER_PARAMS = "yyparse& parser"
LEX_HANDLER_PARAMS = "const Tokenizer& tokenizer, const std::string& yytext"

TOKEN_STACK_TYPE = "std::string"

_RETURN_RE = re.compile(
    r"""\breturn\s+("(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])*'|%empty|[A-Za-z_]\w*)\s*;"""
)
_RETURN_WORD_RE = re.compile(r"\breturn\b")
_RESULT_ASSIGN_RE = re.compile(r"(?<![\w.>])__\s*=(?!=)")
# 문자열/문자 리터럴과 주석 (왼쪽부터 하나의 패턴으로 소비)
_OPAQUE_RE = re.compile(
    r'"(?:\\.|[^"\\\n])*"|' r"'(?:\\.|[^'\\\n])*'|//[^\n]*|/\*.*?\*/", re.S
)


def _mask(code: str) -> str:
    """
    리터럴 내용과 주석을 공백으로 가린 같은 길이의 사본.
    리터럴은 따옴표만 남긴다(`"}"` → `" "`).
    """
    def blank(m) -> str:
        text = m.group(0)
        if text[0] in "\"'":
            return text[0] + re.sub(r"[^\n]", " ", text[1:-1]) + text[-1]
        return re.sub(r"[^\n]", " ", text)
    return _OPAQUE_RE.sub(blank, code)


def _is_blank(code: str) -> bool:
    return not _mask(code).strip()


def _indent(code: str, prefix: str = "  ") -> str:
    return "\n".join(prefix + line if line.strip() else "" for line in code.splitlines())


def _brace_depth(code: str, end: int) -> int:
    return code.count("{", 0, end) - code.count("}", 0, end)


# ---------- 1) 치환 표 ----------

@dataclass(frozen=True)
class Substitution:
    name: str
    pattern: "re.Pattern"
    replace: Callable


class ActionRewriter:
    """
    핸들러 원문에 적용하는 치환 표.

    순서
    ----
    0. 끝에 `;` 가 없으면 보충(꼬리 주석 앞에 넣는다. 아래 return 패턴이 `;` 로 끝나는 문장만 본다)
    1. `$$`      → `__`
    2. `$N`      → `_N`
    3. `yytext` / `yyleng` → `<accessor>.yytext` / `<accessor>.yyleng`
    4. `return <리터럴|이름|%empty>;` → `return TokenType::<멤버>;`

    accessor 는 렉서 핸들러에서는 `tokenizer`, 프로덕션 핸들러에서는
    `parser.tokenizer` 이다.
    """

    def __init__(self, tokens: TokenRegistry, accessor: str = "tokenizer"):
        self.tokens = tokens
        self.accessor = accessor
        self.table: List[Substitution] = [
            Substitution("result", re.compile(r"\$\$"), lambda m: "__"),
            Substitution("position", re.compile(r"\$(\d+)"), lambda m: "_" + m.group(1)),
            Substitution("match-text",
                         re.compile(r"(?<![\w.>])(yytext|yyleng)\b"),
                         lambda m: f"{self.accessor}.{m.group(1)}"),
            Substitution("return-token", _RETURN_RE, self._rewrite_return),
        ]

    def _rewrite_return(self, m) -> str:
        member = self.tokens.resolve_return(m.group(1))
        return f"return TokenType::{member};"

    def rewrite(self, code: str) -> str:
        code = code.strip()
        end = len(_mask(code).rstrip())
        if end and not code[:end].endswith(";"):
            code = code[:end] + ";" + code[end:]
        for sub in self.table:
            code = sub.pattern.sub(sub.replace, code)
        return code


# ---------- 2) 핸들러 조립 ----------

@dataclass(frozen=True)
class ParamInfo:
    name: str
    is_used: bool
    is_token: bool


class ActionTranslator:
    """
    프로덕션/렉서 핸들러를 만들어 HandlerList 에 등록한다.

    Parameters
    ----------
    grammar : Grammar
    tokens : TokenRegistry
    production_handlers / lex_handlers : HandlerList
        호출자(CppEmitter)가 소유한 목록. 이 클래스는 append 만 한다.
    """

    def __init__(self, grammar: Grammar, tokens: TokenRegistry,
                 production_handlers: HandlerList, lex_handlers: HandlerList):
        self.grammar = grammar
        self.tokens = tokens
        self.production_handlers = production_handlers
        self.lex_handlers = lex_handlers
        self.lex_rewriter = ActionRewriter(tokens, accessor="tokenizer")
        self.production_rewriter = ActionRewriter(tokens, accessor="parser.tokenizer")

    # ----- 프로덕션 -----
    def params_info(self, production: Production, action: str) -> List[ParamInfo]:
        if production.is_epsilon():
            return []
        propagates = self.grammar.derives_propagating_token(production)
        info = []
        code = _mask(action)
        for index, symbol in enumerate(production.get_rhs()):
            name = f"_{index + 1}"
            info.append(ParamInfo(
                name=name,
                is_used=re.search(rf"(?<!\w){name}\b", code) is not None,
                is_token=propagates or self.grammar.is_token_symbol(symbol),
            ))
        return info

    def _prologue(self, info: List[ParamInfo]) -> List[str]:
        lines = []
        for p in reversed(info):
            if p.is_token:
                lines.append(f"auto {p.name} = POP_T();" if p.is_used
                             else "parser.tokensStack.pop_back();")
            else:
                lines.append(f"auto {p.name} = POP_V();" if p.is_used
                             else "parser.valuesStack.pop_back();")
        return lines

    def _declare_result(self, action: str, propagates: bool) -> str:
        """첫 최상위 `__ =` 를 `auto __ =` 로, 없으면 기본값 선언을 앞에 붙인다."""
        masked = _mask(action)
        for m in _RESULT_ASSIGN_RE.finditer(masked):
            if _brace_depth(masked, m.start()) == 0:
                return action[:m.start()] + "auto " + action[m.start():]
            break
        result_type = TOKEN_STACK_TYPE if propagates else "Value"
        decl = f"{result_type} __{{}};"
        return f"{decl}\n{action}" if action else decl

    def _assemble(self, production: Production, action: str) -> str:
        propagates = self.grammar.derives_propagating_token(production)
        info = self.params_info(production, action)
        action = self._declare_result(action, propagates)
        push = "PUSH_TR();" if propagates else "PUSH_VR();"

        parts = ["// Semantic action prologue."]
        parts.extend(self._prologue(info))
        parts.append("")
        parts.append(action)
        parts.append("")
        parts.append("// Semantic action epilogue.")
        parts.append(push)
        return _indent("\n".join(parts))

    def translate_production(self, production: Production) -> Optional[str]:
        """액션 원문이 없으면 None. 있으면 prologue/본문/epilogue 가 붙은 함수 본문."""
        raw = production.raw_action()
        if raw is None:
            return None
        return self._assemble(production, self.production_rewriter.rewrite(raw))

    def default_reducer(self, production: Production) -> str:
        """
        액션이 없는 프로덕션용 기본 핸들러. 스택 정리만 한다.
        - 첫 심볼이 결과와 같은 스택에 있으면 `$$ = $1`
        - 아니면 기본 생성된 결과값을 push
        """
        propagates = self.grammar.derives_propagating_token(production)
        action = ""
        if not production.is_epsilon():
            first = production.get_rhs()[0]
            first_is_token = propagates or self.grammar.is_token_symbol(first)
            if first_is_token == propagates:
                action = "__ = _1;"
        return self._assemble(production, action)

    def build_production_handler(self, production: Production) -> int:
        """
        핸들러를 등록하고 1-based 인덱스를 돌려준다.
        인덱스는 반드시 프로덕션 번호와 같아야 한다(테이블 'r<N>' 과 일치).
        """
        if production.is_augmented():
            raise GenerationError("actions: the augmented production has no handler")
        body = self.translate_production(production)
        if body is None:
            body = self.default_reducer(production)
        index = self.production_handlers.add(PRODUCTION_HANDLER_PARAMS, body)
        if index != production.number:
            raise GenerationError(
                f"actions: handler index {index} does not match production #{production.number} '{production}'"
            )
        return index

    # ----- 렉서 -----
    def translate_lex_handler(self, raw: str) -> str:
        """return 이 없으면 앞에 `return ` 을 붙인다. 빈 핸들러는 __EMPTY(스킵) 반환."""
        raw = raw or ""
        if _is_blank(raw):
            body = f"return TokenType::{EMPTY_MEMBER};"
            if raw.strip():
                body = raw.strip() + "\n" + body
            return _indent(body)
        if not _RETURN_WORD_RE.search(_mask(raw)):
            raw = "return " + raw.strip()
        return _indent(self.lex_rewriter.rewrite(raw))

    def build_lex_handler(self, raw: str, expected_index: int) -> int:
        index = self.lex_handlers.add(LEX_HANDLER_PARAMS, self.translate_lex_handler(raw))
        if index != expected_index:
            raise GenerationError(
                f"actions: lex handler index {index} does not match rule index {expected_index}"
            )
        return index

