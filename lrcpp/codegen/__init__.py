"""C++ 코드 생성: 토큰 enum, 테이블 인코딩, 세만틱 액션 변환, 템플릿 조립."""

from .ir import GenerationError, TE, TableEntry, decode_directive, decode_table
from .include import ModuleInclude, ModuleIncludeError
from .slots import SlotRegistry, HandlerList, HandlerRecord
from .tokens import TokenRegistry, EOF_MEMBER, EMPTY_MEMBER
