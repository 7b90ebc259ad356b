"""
File system access for the preprocessor.

Every path operation takes an explicit base directory instead of reading or
changing the process working directory, so independent scripts can be
preprocessed side by side.
"""
import glob
import os
import re

_LINE_BREAK = re.compile(r'\r\n|\n')


class FileSystem:
    """Narrow read/resolve surface over the real file system."""

    new_line = os.linesep

    def read_file_lines(self, path):
        """Read a file as a list of lines without line terminators."""
        with open(path, 'r', encoding='utf-8-sig') as f:
            content = f.read()
        lines = self.split_lines(content)
        # A trailing line break terminates the last line, it does not open a new one
        if lines and lines[-1] == '':
            lines.pop()
        return lines

    def split_lines(self, value):
        return _LINE_BREAK.split(value)

    def file_exists(self, path):
        return os.path.isfile(path)

    def directory_exists(self, path):
        return os.path.isdir(path)

    def is_path_rooted(self, path):
        return os.path.isabs(path)

    def get_full_path(self, path, base_directory=None):
        """Resolve a path to its absolute form, relative to base_directory when given."""
        if not os.path.isabs(path):
            path = os.path.join(base_directory or os.getcwd(), path)
        return os.path.normpath(path)

    def get_working_directory(self, path, base_directory=None):
        """Return the directory relative paths inside 'path' should resolve against."""
        if not path or not path.strip():
            return base_directory or os.getcwd()

        full_path = self.get_full_path(path, base_directory)
        if self.directory_exists(full_path):
            return full_path
        return os.path.dirname(full_path)

    def expand_variables(self, value):
        """Expand $VAR / ${VAR} references, and %VAR% on Windows."""
        return os.path.expandvars(value)

    def enumerate_files(self, directory, pattern, recursive=False):
        """List files under directory whose name matches a glob pattern, sorted."""
        if recursive:
            candidates = glob.glob(os.path.join(directory, '**', pattern), recursive=True)
        else:
            candidates = glob.glob(os.path.join(directory, pattern))
        return sorted(os.path.abspath(p) for p in candidates if os.path.isfile(p))
