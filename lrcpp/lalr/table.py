# table.py
"""
상위 도구(LR 테이블 생성기)가 넘겨주는 **원본 파싱 테이블** 컨테이너.
디렉티브 문자열의 해석은 codegen.ir 에서 한 번만 수행한다.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Callable


@dataclass
class ParseTable:
    """
    ParseTable
    ==========
    상태 번호 → 행(Row) 매핑. 행은 열 키(심볼 코드) → 원본 디렉티브 문자열.

    디렉티브 규약
    ------------
    - 's<N>' : shift 후 상태 N
    - 'r<N>' : 프로덕션 N으로 reduce
    - 'acc'  : accept
    - 그 외   : 비단말 열의 goto(상태 번호 그대로, 예: '12')

    주의
    ----
    - 방출되는 C++ 테이블은 std::array 이고 인덱스가 곧 상태 번호이므로,
      상태 번호는 0..n-1 로 **빈틈없이** 이어져야 한다(검증은 emit 단계).
    """
    rows: Dict[int, Dict[int, str]] = field(default_factory=dict)

    @property
    def n_states(self) -> int:
        return len(self.rows)

    def states(self) -> List[int]:
        return sorted(self.rows)

    def row(self, state: int) -> Dict[int, str]:
        return self.rows[state]

    def pretty(self, id_to_name: Callable[[int], str]) -> str:
        """
        디버그용 덤프. 상태별로 `on <심볼> -> <디렉티브>` 를 한 줄씩 나열한다.
        """
        lines: List[str] = []
        for st in self.states():
            lines.append(f"state {st}:")
            for col in sorted(self.rows[st]):
                try:
                    name = id_to_name(col)
                except IndexError:
                    name = f"#{col}"
                lines.append(f"  on {name} -> {self.rows[st][col]}")
        return "\n".join(lines)
