"""심볼에 정수 코드를 부여해 테이블/토큰 enum에서 사용하기 쉽게 합니다."""
from __future__     import annotations
from dataclasses    import dataclass
from typing         import Dict, List, Iterable, Optional

EOF_NAME = "$"


@dataclass
class SymbolTable:
    """
    SymbolTable
    ===========
    단말/비단말 **이름 ↔ 정수 코드 매핑**을 관리하는 테이블입니다.
    상위 도구가 계산한 테이블의 열(column) 키와, 방출되는 `TokenType` enum의
    값이 모두 이 코드를 사용하므로, 한 번 '고정(freeze)'한 뒤에는 바뀌지 않습니다.

    설계 원칙
    --------
    - 단말 코드: 0 .. T-1, **EOF('$')는 항상 0번**으로 예약합니다.
    - 비단말 코드: T .. T+N-1
    - 나머지 순서는 상위 도구가 넘겨준 순서를 **그대로** 유지합니다
      (테이블의 열 번호와 일치해야 하므로 정렬하지 않습니다).
    """

    _name_to_id: Dict[str, int] = None
    _id_to_name: List[str] = None
    _term_count: int = 0
    _nonterm_count: int = 0
    _frozen: bool = False
    _start: Optional[str] = None

    def freeze(self, terms: Iterable[str], nonterms: Iterable[str], start: str) -> None:
        """
        단말/비단말 목록으로 심볼 테이블을 '고정'합니다.
        - '$'가 없으면 0번으로 추가하고, 있으면 0번으로 옮깁니다.
        - 중복 이름은 ValueError.
        """
        if self._frozen:
            return

        term_names = [t for t in terms if t != EOF_NAME]
        term_names.insert(0, EOF_NAME)
        nonterm_names = list(nonterms)

        self._name_to_id = {}
        self._id_to_name = []

        for nm in term_names + nonterm_names:
            if nm in self._name_to_id:
                raise ValueError(f"symbols: duplicate symbol name {nm!r}")
            self._name_to_id[nm] = len(self._id_to_name)
            self._id_to_name.append(nm)

        self._term_count = len(term_names)
        self._nonterm_count = len(nonterm_names)
        self._start = start
        self._frozen = True

    # ----- 조회 / 유틸 -----
    def id_of(self, name: str) -> int:
        """심볼 이름을 코드로 변환합니다. 존재하지 않으면 KeyError."""
        return self._name_to_id[name]

    def name_of(self, id_: int) -> str:
        """심볼 코드를 이름으로 변환합니다. 범위를 벗어나면 IndexError."""
        return self._id_to_name[id_]

    def has(self, name: str) -> bool:
        return name in self._name_to_id

    def is_term_id(self, id_: int) -> bool:
        return 0 <= id_ < self._term_count

    def is_nonterm_id(self, id_: int) -> bool:
        return self._term_count <= id_ < (self._term_count + self._nonterm_count)

    def is_term(self, name: str) -> bool:
        """이름이 단말이면 True (모르는 이름은 False)."""
        id_ = self._name_to_id.get(name)
        return id_ is not None and self.is_term_id(id_)

    def terminals(self) -> List[str]:
        """단말 이름을 코드 순서대로 반환합니다."""
        return self._id_to_name[:self._term_count]

    @property
    def eof_id(self) -> int:
        """EOF 단말('$')의 코드 (항상 0)."""
        return 0

    @property
    def term_count(self) -> int:
        return self._term_count

    @property
    def nonterm_count(self) -> int:
        return self._nonterm_count

    @property
    def start(self) -> str:
        return self._start

    @property
    def start_id(self) -> int:
        return self.id_of(self._start)

    def __repr__(self) -> str:
        terms = self._id_to_name[:self._term_count]
        nonterms = self._id_to_name[self._term_count:]
        return f"SymbolTable(terms={terms}, nonterms={nonterms}, start={self._start})"
