# lrcpp/lrcppc.py
"""lrcppc – lrcpp CLI

사용 예)
    $ python -m lrcpp.lrcppc check tests/data/calc.json -D
    $ python -m lrcpp.lrcppc build tests/data/calc.json -o tests/tmp/CalcParser.h -D
    $ python -m lrcpp.lrcppc dump  tests/data/calc.json

기능
----
- check : 산출물(JSON)을 읽어 테이블/프로덕션/렉서 규칙의 일관성을 검사하고 요약 출력
- build : C++ 헤더(토크나이저 + LR 파서)를 방출
- dump  : 해석된 파싱 테이블을 사람이 읽기 좋게 출력

디버그 모드(-D/--debug)를 켜면 산출물 요약, 슬롯 덮어쓰기 경고, 방출 크기를 출력합니다.
"""

from __future__ import annotations
import argparse
import pathlib
import re
import sys
from typing import Optional

# ------------------------------
# 헬퍼
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _sanitize_class_name(name: str) -> str:
    """출력 파일명에서 C++ 클래스 이름을 유도한다. (CalcParser.h → CalcParser)"""
    stem = pathlib.Path(name).stem
    stem = re.sub(r"[^A-Za-z0-9_]", "_", stem)
    if not stem or not re.match(r"[A-Za-z_]", stem[0]):
        stem = "Parser_" + (stem or "out")
    return stem

# ------------------------------
# 파이프라인 로딩
# ------------------------------

def _load(path: str, debug: bool):
    from .grammar.loader import load_artifacts

    art = load_artifacts(path)
    if debug:
        g = art.grammar
        _eprint("[DEBUG] artifacts ready | terms=%d nonterms=%d prods=%d states=%d lex_rules=%d" %
                (g.symbols.term_count, g.symbols.nonterm_count, len(g.get_productions()),
                 art.table.n_states, len(g.get_lex_grammar())))
    return art

# ------------------------------
# 디버그 출력 헬퍼
# ------------------------------

def _print_summary(art) -> None:
    g = art.grammar
    _eprint("\n[Symbols]")
    _eprint(repr(g.symbols))
    _eprint("\n[Productions]")
    for p in g.get_productions():
        flag = " (token)" if g.derives_propagating_token(p) else ""
        _eprint(f"  {p.number:>3}: {p}{flag}")
    _eprint("\n[Lex start conditions]")
    lex = g.get_lex_grammar()
    for cond, rules in lex.get_rules_by_start_conditions().items():
        _eprint(f"  {cond}: {[lex.get_rule_index(r) for r in rules]}")
    _eprint("\n[Parsing Table]")
    _eprint(art.table.pretty(g.symbols.name_of))


def _print_overwrites(emitter) -> None:
    for slot, old, new in emitter.slots.overwrites:
        _eprint(f"[WARN] slot {slot} rewritten with a different value ({old!r} -> {new!r})")

# ------------------------------
# 커맨드 구현
# ------------------------------

def cmd_check(args) -> int:
    from .codegen.emit_cpp import CppEmitter

    try:
        art = _load(args.file, debug=args.debug)
        emitter = CppEmitter(art.grammar, art.table)
        emitter.generate()
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _print_summary(art)
        _print_overwrites(emitter)

    print(f"[CHECK OK] states={art.table.n_states} prods={len(art.grammar.get_productions())} "
          f"lex_rules={len(art.grammar.get_lex_grammar())}")
    return 0


def cmd_build(args) -> int:
    from .codegen.emit_cpp import CppEmitter

    out_path = pathlib.Path(args.output)
    class_name = args.class_name or _sanitize_class_name(out_path.name)

    try:
        art = _load(args.file, debug=args.debug)
        emitter = CppEmitter(art.grammar, art.table, class_name=class_name)
        src = emitter.generate()
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _print_summary(art)
        _print_overwrites(emitter)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(src, encoding="utf-8")
    print(f"[EMIT] lang=c++ class={class_name} -> {out_path}")
    if args.debug:
        _eprint(f"[DEBUG] handlers={len(emitter.production_handlers)} "
                f"lex_handlers={len(emitter.lex_handlers)} bytes={len(src)}")
    return 0


def cmd_dump(args) -> int:
    from .codegen.ir import decode_table

    try:
        art = _load(args.file, debug=False)
        rows = decode_table(art.table)
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    name_of = art.grammar.symbols.name_of
    for state, row in enumerate(rows):
        print(f"state {state}:")
        for col, entry in row:
            print(f"  on {name_of(col):<12} {entry.kind:<8} {entry.number}")
    return 0


# ------------------------------
# 엔트리포인트
# ------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="lrcppc", description="lrcpp C++ parser backend CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="산출물을 검사하고 생성이 가능한지 확인합니다")
    p_check.add_argument("file", help="산출물 JSON 파일")
    p_check.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_check.set_defaults(func=cmd_check)

    p_build = sub.add_parser("build", help="C++ 파서 헤더를 생성합니다")
    p_build.add_argument("file", help="산출물 JSON 파일")
    p_build.add_argument("-o", "--output", required=True, help="출력 파일 경로")
    p_build.add_argument("-c", "--class-name", help="파서 클래스 이름(미지정시 출력 파일명에서 유도)")
    p_build.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_build.set_defaults(func=cmd_build)

    p_dump = sub.add_parser("dump", help="해석된 파싱 테이블을 출력합니다")
    p_dump.add_argument("file", help="산출물 JSON 파일")
    p_dump.set_defaults(func=cmd_dump)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
