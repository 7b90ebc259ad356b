"""
Script preprocessor.

Turns an entry script and everything it reaches through '#load' into one
compilable buffer, collecting namespaces from 'using' lines and references
from '#r' lines on the way. Works like a C preprocessor, one line at a time.
"""
import os

from .context import ParseContext, PreprocessResult
from .errors import PreprocessError, ScriptNotFoundError, ScriptReadError
from .filesystem import FileSystem
from .options import ScriptOptions
from .processors import DirectiveLineProcessor, default_line_processors, is_using_statement


class FilePreProcessor:
    """
    Resolves a script's '#load' graph into a single PreprocessResult.

    The working directory is passed down explicitly: every file's lines resolve
    relative paths against that file's own directory.
    """

    def __init__(self, file_system=None, line_processors=None, options=None):
        self.options = options or ScriptOptions()
        self.file_system = file_system or FileSystem()
        if line_processors is None:
            line_processors = default_line_processors(self.file_system, self.options)
        self.line_processors = list(line_processors)

    @property
    def directive_processors(self):
        return [lp for lp in self.line_processors if isinstance(lp, DirectiveLineProcessor)]

    def process_file(self, path, base_directory=None):
        """Preprocess a script file and everything it loads."""
        return self._process(lambda context: self.parse_file(path, context, base_directory))

    def process_script(self, script, base_directory=None):
        """Preprocess in-memory script text. '#load' paths resolve against base_directory."""
        if base_directory is None:
            base_directory = os.getcwd()
        script_lines = self.file_system.split_lines(script)
        return self._process(lambda context: self.parse_script(script_lines, context, base_directory))

    def _process(self, parse_action):
        context = ParseContext()
        parse_action(context)
        return PreprocessResult.from_context(context, self.generate_code(context))

    def generate_code(self, context):
        return self.file_system.new_line.join(context.body_lines)

    def parse_file(self, path, context, base_directory=None):
        """
        Parse one file into the context. A file already in the context is skipped,
        which keeps diamond and circular '#load' graphs finite.

        Raises:
            ScriptNotFoundError: If the file does not exist
            InvalidDirectiveUseError: If a directive follows code in this file or one it loads
            ScriptReadError: If the file is not valid UTF-8
        """
        full_path = self.file_system.get_full_path(path, base_directory)

        if context.is_loaded(full_path):
            return

        if not self.file_system.file_exists(full_path):
            raise ScriptNotFoundError(full_path)

        # Mark before parsing so a file that loads itself back stops here
        context.mark_loaded(full_path)

        try:
            script_lines = self.file_system.read_file_lines(full_path)
        except UnicodeDecodeError as e:
            raise ScriptReadError(full_path, e) from e

        directive_index = -1
        if self.options.emit_line_directives:
            directive_index = self.insert_line_directive(full_path, script_lines)

        working_directory = self.file_system.get_working_directory(full_path)
        try:
            self.parse_script(script_lines, context, working_directory)
        except PreprocessError as e:
            if e.path is None:
                line_number = e.line_number
                # Undo the shift from the injected #line marker
                if line_number is not None and 0 <= directive_index < line_number - 1:
                    line_number -= 1
                e.with_location(full_path, line_number)
            raise

    def parse_script(self, script_lines, context, base_directory=None):
        """Classify each line: processors consume directives and usings, the rest is body."""
        if base_directory is None:
            base_directory = os.getcwd()

        code_index = self._find_index(script_lines, self.is_code_line)

        for index, line in enumerate(script_lines):
            is_before_code = code_index < 0 or index < code_index

            try:
                was_processed = any(
                    lp.process_line(self, context, line, is_before_code, base_directory)
                    for lp in self.line_processors
                )
            except PreprocessError as e:
                if e.path is None and e.line_number is None:
                    e.with_location(None, index + 1)
                raise

            if not was_processed:
                context.body_lines.append(line)

    def insert_line_directive(self, path, script_lines):
        """
        Insert '#line N "path"' before the first line of code so positions in the
        merged buffer map back to the original file.

        Returns:
            The index the marker was inserted at, or -1 when the file has no code
        """
        body_index = self._find_index(script_lines, self.is_code_line)
        if body_index == -1:
            return -1

        script_lines.insert(body_index, f'#line {body_index + 1} "{path}"')
        return body_index

    def is_directive_line(self, line):
        return any(dp.matches(line) for dp in self.directive_processors)

    def is_code_line(self, line):
        """A non-blank line that is neither a known directive nor a using statement."""
        return bool(line.strip()) and not self.is_directive_line(line) and not is_using_statement(line)

    @staticmethod
    def _find_index(lines, predicate):
        for index, line in enumerate(lines):
            if predicate(line):
                return index
        return -1
