# lrcpp/codegen/include.py
"""사용자 모듈 include(C++ prologue) 검사.

include 원문은 구조가 없는 외부 텍스트이므로, 문자열 검사는 여기서만 한다.
나머지 방출 코드는 `declares_value_type()` / `has_hook()` 만 사용한다.
"""

from __future__ import annotations

import regex as re

VALUE_TYPE = "Value"

_VALUE_TYPE_RE = re.compile(
    r"\b(?:using|class|struct)\s+Value\b"
    r"|\btypedef\b[^;]*\bValue\s*;"
)

VALUE_TYPE_EXAMPLE = "using Value = <...>;"


class ModuleIncludeError(ValueError):
    """모듈 include 가 필수 선언(Value 타입)을 빠뜨렸을 때."""

    def __init__(self, missing: str = VALUE_TYPE, example: str = VALUE_TYPE_EXAMPLE):
        self.missing = missing
        self.example = example
        super().__init__(
            f"C++ backend requires a module include that defines at least "
            f"the `{missing}` type. Example:\n\n    {example}\n"
        )


class ModuleInclude:
    def __init__(self, text: str):
        self.text = text or ""

    def declares_value_type(self) -> bool:
        return bool(_VALUE_TYPE_RE.search(self.text))

    def require_value_type(self) -> None:
        if not self.declares_value_type():
            raise ModuleIncludeError()

    def has_hook(self, name: str) -> bool:
        """`void <name>(` 형태의 함수 정의가 있으면 True."""
        return re.search(r"\bvoid\s+" + re.escape(name) + r"\s*\(", self.text) is not None

    def hook_call(self, name: str, args: str) -> str:
        """훅이 있으면 호출문, 없으면 빈 문자열."""
        return f"{name}({args});" if self.has_hook(name) else ""
