# Script Preprocessor - Core Components
"""
Core modules for the script preprocessor:
- errors: Error types raised while preprocessing
- grammar: Lark grammar for '#name argument' directive lines
- filesystem: File reading and path resolution
- context: Parse accumulator and result models
- processors: Line processors for usings, '#load' and '#r'
- preprocessor: Recursive '#load' resolution into one merged buffer
- options: Configurable settings and their JSON loader
"""

from .errors import PreprocessError, InvalidDirectiveUseError, ScriptNotFoundError, ScriptReadError
from .grammar import directive_grammar, parse_directive
from .filesystem import FileSystem
from .context import ParseContext, PreprocessResult
from .processors import (
    BehaviorAfterCode,
    LineProcessor,
    DirectiveLineProcessor,
    UsingLineProcessor,
    ReferenceLineProcessor,
    LoadLineProcessor,
    default_line_processors,
)
from .preprocessor import FilePreProcessor
from .options import ScriptOptions, load_options, DEFAULT_NAMESPACES

__all__ = [
    'PreprocessError',
    'InvalidDirectiveUseError',
    'ScriptNotFoundError',
    'ScriptReadError',
    'directive_grammar',
    'parse_directive',
    'FileSystem',
    'ParseContext',
    'PreprocessResult',
    'BehaviorAfterCode',
    'LineProcessor',
    'DirectiveLineProcessor',
    'UsingLineProcessor',
    'ReferenceLineProcessor',
    'LoadLineProcessor',
    'default_line_processors',
    'FilePreProcessor',
    'ScriptOptions',
    'load_options',
    'DEFAULT_NAMESPACES',
]
