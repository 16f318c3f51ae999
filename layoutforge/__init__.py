"""LayoutForge -- compiles JSON layout trees into SwiftUI views or UIKit
binding classes.

Usage::

    from layoutforge import CompilerConfig, LayoutCompiler, OutputMode

    compiler = LayoutCompiler(CompilerConfig(mode=OutputMode.DECLARATIVE))
    layout = compiler.compile_file("Layouts/profile.json")
    print(layout.text)
"""

from layoutforge.compiler import CompiledLayout, FileResult, FileStatus, LayoutCompiler
from layoutforge.config import CompilerConfig, OutputMode
from layoutforge.context import CompilationContext
from layoutforge.diagnostics import Diagnostic, DiagnosticCode
from layoutforge.errors import CompileError, LayoutForgeError, LayoutParseError

__version__ = "0.1.0"

__all__ = [
    "CompilationContext",
    "CompileError",
    "CompiledLayout",
    "CompilerConfig",
    "Diagnostic",
    "DiagnosticCode",
    "FileResult",
    "FileStatus",
    "LayoutCompiler",
    "LayoutForgeError",
    "LayoutParseError",
    "OutputMode",
]
