# lrcpp/codegen/slots.py
"""명명 슬롯 레지스트리 + 핸들러 레코드 목록 + 템플릿 조립.

- SlotRegistry : 슬롯 이름 → 마지막으로 기록된 텍스트. 조립 시 한 번만 소비된다.
- HandlerList  : (인자 목록, 본문) 의 append-only 목록. 1-based 위치가 곧 식별자.

둘 다 생성 1회(CppEmitter 인스턴스 1개)에 묶여 있고, 모듈 전역 상태는 없다.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Tuple

import regex as re

from .ir import GenerationError

# {{{SLOT_NAME}}}
SLOT_RE = re.compile(r"\{\{\{([A-Z][A-Z0-9_]*)\}\}\}")


def slot_marker(name: str) -> str:
    return "{{{" + name + "}}}"


class SlotRegistry:
    """
    write(slot, value) 는 무조건 덮어쓴다(같은 값이면 멱등, 다른 값이면 마지막 값).
    다른 값으로 덮어쓴 경우는 `overwrites` 에 (slot, old, new) 로 남긴다.
    """

    def __init__(self) -> None:
        self._slots: Dict[str, str] = {}
        self.overwrites: List[Tuple[str, str, str]] = []

    def write(self, slot: str, value) -> None:
        text = str(value)
        old = self._slots.get(slot)
        if old is not None and old != text:
            self.overwrites.append((slot, old, text))
        self._slots[slot] = text

    def get(self, slot: str) -> str:
        return self._slots[slot]

    def __contains__(self, slot: str) -> bool:
        return slot in self._slots

    def names(self) -> List[str]:
        return list(self._slots)

    def missing_in(self, skeleton: str) -> List[str]:
        seen = dict.fromkeys(m.group(1) for m in SLOT_RE.finditer(skeleton))
        return [name for name in seen if name not in self._slots]

    def assemble(self, skeleton: str) -> str:
        """
        skeleton 의 모든 `{{{NAME}}}` 을 기록된 값으로 치환한다.
        - 한 번의 패스로 치환하므로, 삽입된 사용자 코드 안의 `{{{..}}}` 는 다시 해석하지 않는다.
        - 기록되지 않은 슬롯이 하나라도 있으면 GenerationError (출력 없음).
        """
        missing = self.missing_in(skeleton)
        if missing:
            raise GenerationError(
                "slots: unresolved template slots: " + ", ".join(missing)
            )
        return SLOT_RE.sub(lambda m: self._slots[m.group(1)], skeleton)


@dataclass(frozen=True)
class HandlerRecord:
    params: str
    body: str


class HandlerList:
    """
    append-only 핸들러 목록. `add()` 가 돌려주는 1-based 인덱스는
    방출된 뒤 절대 바뀌지 않는다(테이블/규칙 배열이 이 번호로 참조).
    """

    def __init__(self, prefix: str, return_type: str) -> None:
        self.prefix = prefix
        self.return_type = return_type
        self._records: List[HandlerRecord] = []

    def add(self, params: str, body: str) -> int:
        self._records.append(HandlerRecord(params, body))
        return len(self._records)

    def name(self, index: int) -> str:
        if not 1 <= index <= len(self._records):
            raise GenerationError(
                f"slots: {self.prefix} handler index {index} out of range 1..{len(self._records)}"
            )
        return f"{self.prefix}{index}"

    def ref(self, index: int) -> str:
        return "&" + self.name(index)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> HandlerRecord:
        """1-based 조회."""
        return self._records[index - 1]

    def declarations(self) -> List[str]:
        return [
            f"{self.return_type} {self.prefix}{i}({rec.params}) {{\n{rec.body}\n}}"
            for i, rec in enumerate(self._records, start=1)
        ]
