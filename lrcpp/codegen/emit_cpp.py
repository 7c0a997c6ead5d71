# lrcpp/codegen/emit_cpp.py
"""C++ Code Emit (단일 헤더 파일 생성; 토크나이저 + LR 런타임 포함).

개요
----
- Grammar / ParseTable 을 받아 C++ 헤더를 **문자열로** 생성한다.
- 고정 스켈레톤(templates/lr.template.h + tokenizer.template.h)의 `{{{SLOT}}}`
  자리를 생성 조각으로 채운다.
  * TABLE / ROWS_COUNT         : std::array<Row, N> 파싱 테이블
  * TOKEN_TYPES / TOKENS       : TokenType enum 본문, 토큰 이름 → 코드 맵
  * PRODUCTIONS(_COUNT)        : {opcode, rhsLength, &_handlerN}
  * PRODUCTION_HANDLERS        : void _handlerN(yyparse& parser)
  * LEX_RULES(_COUNT)          : {std::regex(R"(...)"), &_lexRuleN}
  * LEX_RULE_HANDLERS          : inline TokenType _lexRuleN(...)
  * TOKENIZER_STATES / LEX_RULES_BY_START_CONDITIONS
  * PARSED_RESULT / ON_PARSE_BEGIN_CALL / ON_PARSE_END_CALL / MODULE_INCLUDE
  * PARSER_CLASS_NAME

파이프라인
----------
모듈 include 검증 → 토큰 enum → 테이블 → 프로덕션/핸들러 → 렉서 규칙 → 조립.
어느 단계든 실패하면 예외를 던지고 출력은 만들지 않는다.

상태
----
CppEmitter 인스턴스가 SlotRegistry, HandlerList 2개, TokenRegistry 를 소유한다.
`generate()` 는 시작할 때 `reset()` 으로 셋 다 새로 만든다.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Optional

import regex as re

from ..grammar.model import Grammar
from ..lalr.table import ParseTable
from .actions import ActionTranslator
from .include import ModuleInclude
from .ir import GenerationError, TE, decode_table
from .slots import HandlerList, SlotRegistry, slot_marker
from .tokens import TokenRegistry


# ---------- 템플릿(상수) ----------

_TEMPLATES_DIR = Path(__file__).with_name("templates")

LR_TEMPLATE = (_TEMPLATES_DIR / "lr.template.h").read_text(encoding="utf-8")
TOKENIZER_TEMPLATE = (_TEMPLATES_DIR / "tokenizer.template.h").read_text(encoding="utf-8")

# 토크나이저 스켈레톤은 슬롯이 아니라 고정 조각이므로 미리 끼워 둔다.
SKELETON = LR_TEMPLATE.replace(slot_marker("TOKENIZER"), TOKENIZER_TEMPLATE)

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# 스켈레톤이 이미 쓰는 이름(클래스 이름으로 쓰면 재정의 충돌)
RESERVED_NAMES = frozenset({
    "yyparse", "Value", "Tokenizer", "Token", "TokenType", "TokenizerState",
    "TE", "TableEntry", "Production", "Row", "LexRule", "LexRuleHandler",
    "SemanticActionFn",
})


# ---------- 유틸 ----------

def validate_class_name(name: str) -> str:
    if not _IDENT_RE.fullmatch(name or ""):
        raise ValueError(f"emit_cpp: parser class name {name!r} is not a C++ identifier")
    if name in RESERVED_NAMES:
        raise ValueError(f"emit_cpp: parser class name {name!r} clashes with a generated type")
    return name


def _fmt_row(row) -> str:
    """`Row {{0, {TE::Shift, 4}}, {5, {TE::Transit, 2}}}`"""
    cells = ", ".join(f"{{{col}, {entry.to_cpp()}}}" for col, entry in row)
    return f"Row {{{cells}}}"


def _preflight_check(grammar: Grammar, rows) -> None:
    """테이블이 문법과 맞물리는지 조기 검증(생성 일관성)."""
    sym = grammar.symbols
    n_states = len(rows)
    n_prods = len(grammar.get_productions())
    n_symbols = sym.term_count + sym.nonterm_count

    for s, row in enumerate(rows):
        for col, entry in row:
            if not (0 <= col < n_symbols):
                raise GenerationError(f"emit_cpp: state {s}: unknown symbol code {col}")
            name = sym.name_of(col)
            if entry.kind == TE.TRANSIT:
                if not sym.is_nonterm_id(col):
                    raise GenerationError(f"emit_cpp: state {s}: goto on terminal {name!r}")
            elif not sym.is_term_id(col):
                raise GenerationError(
                    f"emit_cpp: state {s}: {entry.kind} on nonterminal {name!r}"
                )
            if entry.kind in (TE.SHIFT, TE.TRANSIT) and not (0 <= entry.number < n_states):
                raise GenerationError(
                    f"emit_cpp: state {s}: {entry.kind} to missing state {entry.number}"
                )
            if entry.kind == TE.REDUCE and not (1 <= entry.number < n_prods):
                raise GenerationError(
                    f"emit_cpp: state {s}: reduce by missing production {entry.number}"
                )


# ---------- 메인 방출기 ----------

class CppEmitter:
    """
    Grammar + ParseTable → C++ 헤더.

    1회용: `generate()` 를 다시 부르면 모든 레지스트리를 새로 만든 뒤 처음부터 생성한다.
    """

    def __init__(self, grammar: Grammar, table: ParseTable, class_name: str = "Parser"):
        self.grammar = grammar
        self.table = table
        self.class_name = validate_class_name(class_name)
        self.include = ModuleInclude(grammar.get_module_include())
        self.reset()

    def reset(self) -> None:
        self.slots = SlotRegistry()
        self.production_handlers = HandlerList("_handler", "void")
        self.lex_handlers = HandlerList("_lexRule", "inline TokenType")
        self.tokens = TokenRegistry()
        self.translator: Optional[ActionTranslator] = None
        self.rows = []

    # ----- 개별 조각 -----
    def generate_module_include(self) -> None:
        self.include.require_value_type()
        self.slots.write("ON_PARSE_BEGIN_CALL", self.include.hook_call("onParseBegin", "str"))
        self.slots.write("ON_PARSE_END_CALL", self.include.hook_call("onParseEnd", "result"))
        self.slots.write("MODULE_INCLUDE", self.include.text)

    def generate_parser_class_name(self) -> None:
        # 전방 선언 / 클래스 정의 / yyparse 별칭: 세 곳 모두 같은 값
        for _site in ("forward", "class", "alias"):
            self.slots.write("PARSER_CLASS_NAME", self.class_name)

    def generate_token_types(self) -> None:
        self.tokens = TokenRegistry.from_grammar(self.grammar)
        self.translator = ActionTranslator(
            self.grammar, self.tokens, self.production_handlers, self.lex_handlers
        )
        self.slots.write("TOKEN_TYPES", self.tokens.enum_body())

    def generate_tokens_table(self) -> None:
        self.slots.write("TOKENS", self.tokens.tokens_map())

    def generate_parse_table(self) -> None:
        self.rows = decode_table(self.table)
        _preflight_check(self.grammar, self.rows)
        entries = [_fmt_row(row) for row in self.rows]
        self.slots.write("ROWS_COUNT", len(entries))
        self.slots.write("TABLE", "{\n    " + ",\n    ".join(entries) + "\n}")

    def generate_productions(self) -> None:
        """프로덕션 메타 배열. 0번(증강)은 reduce 되지 않으므로 nullptr."""
        prods = self.grammar.get_productions()
        sym = self.grammar.symbols
        self.slots.write("PRODUCTIONS_COUNT", len(prods))

        data: List[str] = []
        for p in prods:
            if p.is_augmented():
                opcode, ref = sym.start_id, "nullptr"
            else:
                opcode = sym.id_of(p.lhs)
                ref = self.production_handlers.ref(self.translator.build_production_handler(p))
            data.append(f"{{{opcode}, {len(p.rhs)}, {ref}}}")
        self.slots.write("PRODUCTIONS", "{{\n  " + ",\n  ".join(data) + "\n}}")

    def generate_lex_rules(self) -> None:
        lex = self.grammar.get_lex_grammar()
        out: List[str] = []
        for rule in lex.get_rules():
            matcher = rule.get_raw_matcher()
            if ')"' in matcher:
                raise GenerationError(
                    f"emit_cpp: lex rule /{matcher}/ cannot be embedded in a raw string literal"
                )
            index = lex.get_rule_index(rule) + 1
            self.translator.build_lex_handler(rule.get_raw_handler(), index)
            out.append(f'{{std::regex(R"({matcher})"), {self.lex_handlers.ref(index)}}}')

        self.slots.write("LEX_RULES_COUNT", len(out))
        self.slots.write("LEX_RULES", "{{\n  " + ",\n  ".join(out) + "\n}}")

    def generate_lex_rules_by_start_conditions(self) -> None:
        lex = self.grammar.get_lex_grammar()
        by_condition = lex.get_rules_by_start_conditions()
        self.slots.write("TOKENIZER_STATES", ",\n  ".join(by_condition))

        items = []
        for condition, rules in by_condition.items():
            indices = ", ".join(str(lex.get_rule_index(r)) for r in rules)
            items.append(f"{{TokenizerState::{condition}, {{{indices}}}}}")
        self.slots.write("LEX_RULES_BY_START_CONDITIONS", "{" + ", ".join(items) + "}")

    def generate_production_handlers(self) -> None:
        self.slots.write("PRODUCTION_HANDLERS", "\n\n".join(self.production_handlers.declarations()))

    def generate_lex_handlers(self) -> None:
        self.slots.write("LEX_RULE_HANDLERS", "\n\n".join(self.lex_handlers.declarations()))

    def generate_parsed_result(self) -> None:
        augmented = self.grammar.get_augmented_production()
        stack = ("tokensStack" if self.grammar.derives_propagating_token(augmented)
                 else "valuesStack")
        self.slots.write("PARSED_RESULT", f"auto result = {stack}.back(); {stack}.pop_back();")

    # ----- 전체 -----
    def generate(self) -> str:
        self.reset()
        self.generate_module_include()
        self.generate_parser_class_name()
        self.generate_token_types()
        self.generate_tokens_table()
        self.generate_parse_table()
        self.generate_productions()
        self.generate_lex_rules()
        self.generate_lex_rules_by_start_conditions()
        self.generate_production_handlers()
        self.generate_lex_handlers()
        self.generate_parsed_result()
        return self.slots.assemble(SKELETON)


def emit_cpp_to_string(grammar: Grammar, table: ParseTable, class_name: str = "Parser") -> str:
    """
    emit_cpp_to_string(grammar, table, class_name) -> str
    -----------------------------------------------------
    Grammar / ParseTable 로부터 **하나의 C++ 헤더 문자열**을 생성한다.
    """
    return CppEmitter(grammar, table, class_name).generate()
