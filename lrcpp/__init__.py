"""lrcpp: C++ backend for an LR parser generator.

Grammar artifacts (symbols, productions, LR table, lex rules, module include)
go in; one self-contained C++ header (tokenizer + shift-reduce parser) comes out.
"""

__version__ = "0.1.0"

from .codegen.emit_cpp import CppEmitter, emit_cpp_to_string
from .grammar.loader import load_artifacts
