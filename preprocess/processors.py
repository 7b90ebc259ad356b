"""
Line processors.

Each processor looks at one source line and decides whether it consumes it.
The preprocessor tries them in order; the first one that claims a line wins
and unclaimed lines become part of the compiled body.
"""
from enum import Enum

from .errors import InvalidDirectiveUseError, ScriptNotFoundError
from .grammar import clean_argument, parse_directive

USING_KEYWORD = "using "


class BehaviorAfterCode(str, Enum):
    """What a directive does when it shows up after the first line of code."""
    ALLOW = "allow"
    IGNORE = "ignore"
    THROW = "throw"


def is_using_statement(line):
    """Loose using check, aliases included. Used to find where code starts."""
    return line.lstrip().startswith(USING_KEYWORD) and "{" not in line and ";" in line


class LineProcessor:
    """Base class for anything that can consume a source line."""

    def process_line(self, parser, context, line, is_before_code, base_directory):
        """
        Args:
            parser: The FilePreProcessor driving this run (used to recurse)
            context: The ParseContext being filled
            line: The raw source line
            is_before_code: False once the line is at or past the first line of code
            base_directory: Directory that relative paths on this line resolve against

        Returns:
            True if the line was consumed and must not reach the body
        """
        raise NotImplementedError


class UsingLineProcessor(LineProcessor):
    """Collects 'using Namespace;' lines. Aliases ('using X = Y;') stay in the body."""

    def process_line(self, parser, context, line, is_before_code, base_directory):
        if not self.is_using_line(line):
            return False

        context.add_namespace(self.get_namespace(line))
        return True

    @staticmethod
    def is_using_line(line):
        return is_using_statement(line) and "=" not in line

    @staticmethod
    def get_namespace(line):
        return (line.strip()
                .replace(USING_KEYWORD, "", 1)
                .replace('"', "")
                .replace(";", "")
                .strip())


class DirectiveLineProcessor(LineProcessor):
    """
    Base class for '#<name> argument' directives.

    Subclasses set directive_name and implement process_directive(). The
    placement policy decides what happens when the directive is found after
    code has started.
    """
    directive_name = None
    behavior_after_code = BehaviorAfterCode.IGNORE

    @property
    def directive_string(self):
        return f"#{self.directive_name}"

    def matches(self, line):
        parsed = parse_directive(line)
        return parsed is not None and parsed[0] == self.directive_name

    def get_directive_argument(self, line):
        parsed = parse_directive(line)
        if parsed is None:
            return ""
        return clean_argument(parsed[1])

    def process_line(self, parser, context, line, is_before_code, base_directory):
        if not self.matches(line):
            return False

        if not is_before_code:
            if self.behavior_after_code == BehaviorAfterCode.THROW:
                raise InvalidDirectiveUseError(self.directive_string, context=line.strip())
            if self.behavior_after_code == BehaviorAfterCode.IGNORE:
                return True

        return self.process_directive(parser, context, line, base_directory)

    def process_directive(self, parser, context, line, base_directory):
        raise NotImplementedError


class ReferenceLineProcessor(DirectiveLineProcessor):
    """'#r <path-or-name>': records a resolved file path, or the bare name as written."""
    directive_name = "r"
    behavior_after_code = BehaviorAfterCode.THROW

    def __init__(self, file_system, expand_variables=True):
        self.file_system = file_system
        self.expand_variables = expand_variables

    def process_directive(self, parser, context, line, base_directory):
        argument = self.get_directive_argument(line)
        if not argument:
            return True

        assembly_path = self.file_system.expand_variables(argument) if self.expand_variables else argument
        reference_path = self.file_system.get_full_path(assembly_path, base_directory)
        if self.file_system.file_exists(reference_path):
            context.add_reference(reference_path)
        else:
            context.add_reference(argument)
        return True


class LoadLineProcessor(DirectiveLineProcessor):
    """'#load <path>': inlines another script into the same context."""
    directive_name = "load"
    behavior_after_code = BehaviorAfterCode.THROW

    def __init__(self, file_system, strict=False, expand_variables=True):
        self.file_system = file_system
        self.strict = strict
        self.expand_variables = expand_variables

    def process_directive(self, parser, context, line, base_directory):
        argument = self.get_directive_argument(line)
        if not argument:
            return True

        file_path = self.file_system.expand_variables(argument) if self.expand_variables else argument
        full_path = self.file_system.get_full_path(file_path, base_directory)

        if context.is_loaded(full_path):
            return True

        if not self.file_system.file_exists(full_path):
            if self.strict:
                raise ScriptNotFoundError(full_path, context=line.strip())
            context.add_missing(full_path)
            return True

        parser.parse_file(full_path, context)
        return True


def default_line_processors(file_system, options=None):
    """The standard chain: usings, then #load, then #r."""
    strict = options.strict_loads if options is not None else False
    expand = options.expand_environment_variables if options is not None else True
    return [
        UsingLineProcessor(),
        LoadLineProcessor(file_system, strict=strict, expand_variables=expand),
        ReferenceLineProcessor(file_system, expand_variables=expand),
    ]
