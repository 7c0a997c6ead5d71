"""
lrcpp 코드 생성용 IR
=======

원본 파싱 테이블(ParseTable)의 디렉티브 문자열('s3', 'r2', 'acc', '7')을
**태그가 붙은 엔트리**(TableEntry)로 한 번만 해석한다.
이후 방출기는 문자열을 다시 들여다보지 않고 `entry.kind` 로만 분기한다.

설계 포인트
-----------
- kind 는 C++ 템플릿의 `enum class TE` 멤버 이름과 동일한 문자열을 쓴다.
  * Shift   : arg = 다음 상태
  * Reduce  : arg = 프로덕션 번호
  * Accept  : arg = 0 (런타임은 이 값을 읽지 않는다)
  * Transit : arg = goto 다음 상태
- 각 행 안에서는 열(심볼 코드) 오름차순으로 정렬한다.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple

from ..lalr.table import ParseTable


class GenerationError(RuntimeError):
    """생성 일관성 오류(미해결 슬롯, 핸들러 인덱스 불일치, 잘못된 디렉티브 등)."""


class TE:
    SHIFT   = "Shift"
    REDUCE  = "Reduce"
    ACCEPT  = "Accept"
    TRANSIT = "Transit"


@dataclass(frozen=True)
class TableEntry:
    kind: str
    number: int

    def to_cpp(self) -> str:
        return f"{{TE::{self.kind}, {self.number}}}"


def _parse_operand(raw: str, text: str) -> int:
    if not text.isdigit():
        raise GenerationError(f"ir: malformed table directive {raw!r}")
    return int(text)


def decode_directive(raw: str) -> TableEntry:
    """
    decode_directive('s7') -> TableEntry('Shift', 7)
    ------------------------------------------------
    's<N>' → Shift, 'r<N>' → Reduce, 'acc' → Accept(0), 그 외 정수 → Transit.
    """
    raw = str(raw).strip()
    if raw == "acc":
        return TableEntry(TE.ACCEPT, 0)
    if raw.startswith("s"):
        return TableEntry(TE.SHIFT, _parse_operand(raw, raw[1:]))
    if raw.startswith("r"):
        return TableEntry(TE.REDUCE, _parse_operand(raw, raw[1:]))
    return TableEntry(TE.TRANSIT, _parse_operand(raw, raw))


def decode_table(tbl: ParseTable) -> List[List[Tuple[int, TableEntry]]]:
    """
    decode_table(tbl) -> rows
    -------------------------
    상태 0..n-1 순서의 행 리스트. 각 행은 (열, TableEntry) 의 오름차순 리스트.
    상태 번호에 빈틈이 있으면 GenerationError.
    """
    states = tbl.states()
    if states != list(range(len(states))):
        missing = sorted(set(range(max(states, default=-1) + 1)) - set(states))
        raise GenerationError(
            f"ir: table states must be contiguous from 0 (missing: {missing[:5]})"
        )

    rows: List[List[Tuple[int, TableEntry]]] = []
    for s in states:
        row = [(col, decode_directive(d)) for col, d in tbl.row(s).items()]
        row.sort(key=lambda t: t[0])
        rows.append(row)
    return rows
