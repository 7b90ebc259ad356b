"""
Error types for the script preprocessor.
"""


class PreprocessError(Exception):
    """Base error for script preprocessing, with file, line number and hints."""
    def __init__(self, message, path=None, line_number=None, context=None, suggestion=None):
        self.message = message
        self.path = path
        self.line_number = line_number
        self.context = context  # The offending line
        self.suggestion = suggestion  # How to fix it
        super().__init__(self._format_error())

    def _format_error(self):
        """Format the error message with location, context and suggestion."""
        lines = ["Preprocessing Error"]
        if self.path:
            lines.append(f" in {self.path}")
        if self.line_number:
            lines.append(f" at line {self.line_number}")
        lines.append(":\n")

        lines.append(f"   {self.message}\n")

        if self.context:
            lines.append(f"   > {self.context}\n")

        if self.suggestion:
            lines.append(f"   hint: {self.suggestion}\n")

        return "".join(lines)

    def with_location(self, path, line_number=None):
        """Attach the script and line the error belongs to and refresh the message."""
        self.path = path
        if line_number is not None:
            self.line_number = line_number
        self.args = (self._format_error(),)
        return self


class InvalidDirectiveUseError(PreprocessError):
    """A directive appeared after the first line of code in a script."""
    def __init__(self, directive, path=None, line_number=None, context=None):
        self.directive = directive
        super().__init__(
            f"Encountered directive '{directive}' after the start of code. "
            "Please move this directive to the beginning of the file.",
            path=path,
            line_number=line_number,
            context=context,
            suggestion=f"Place '{directive}' lines above the first statement of the script",
        )


class ScriptNotFoundError(PreprocessError, FileNotFoundError):
    """An entry script, or a #load target in strict mode, does not exist."""
    def __init__(self, script_path, path=None, line_number=None, context=None):
        self.script_path = script_path
        super().__init__(
            f"Script not found: {script_path}",
            path=path,
            line_number=line_number,
            context=context,
            suggestion="Check the path; relative paths resolve against the directory of the loading script",
        )


class ScriptReadError(PreprocessError):
    """A script exists but its content cannot be decoded."""
    def __init__(self, path, reason):
        super().__init__(
            f"Cannot read script: {reason}",
            path=path,
            suggestion="Save the script as UTF-8",
        )
