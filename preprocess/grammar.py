"""
Directive line grammar.

This module contains the Lark grammar used to recognize preprocessor
directive lines such as '#r "System.Net.Http"' and '#load "lib/helper.csx"'.
"""
from functools import lru_cache

from lark import Lark
from lark.exceptions import UnexpectedInput


directive_grammar = r"""
    start: DIRECTIVE (_SEP ARGUMENT?)?

    // The directive token runs up to the first whitespace: '#r"x.dll"' is one token
    DIRECTIVE: /#[^\s]*/
    _SEP: /\s+/
    ARGUMENT: /\S[\s\S]*/
"""

_parser = Lark(directive_grammar, parser='lalr', lexer='contextual')


@lru_cache(maxsize=4096)
def parse_directive(line):
    """
    Split a directive line into its name and raw argument.

    Args:
        line: A single source line

    Returns:
        (name, argument) where name excludes the leading '#' and argument is the
        untrimmed rest of the line ('' when absent), or None if the line does
        start with a directive token once indentation is removed.
    """
    line = line.lstrip()
    if not line.startswith('#'):
        return None
    try:
        tree = _parser.parse(line)
    except UnexpectedInput:
        return None

    name = None
    argument = ''
    for token in tree.children:
        if token.type == 'DIRECTIVE':
            name = str(token)[1:]
        elif token.type == 'ARGUMENT':
            argument = str(token)
    return name, argument


def clean_argument(argument):
    """Trim an argument, drop quote characters and trailing statement terminators."""
    return argument.strip().replace('"', '').rstrip(';').strip()
