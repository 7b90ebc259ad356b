"""
Unit tests for the line processors.
"""
import os
import tempfile
import pytest
from preprocess.context import ParseContext
from preprocess.errors import InvalidDirectiveUseError
from preprocess.filesystem import FileSystem
from preprocess.preprocessor import FilePreProcessor
from preprocess.processors import (
    BehaviorAfterCode,
    DirectiveLineProcessor,
    ReferenceLineProcessor,
    LoadLineProcessor,
    UsingLineProcessor,
)


class RecordingDirective(DirectiveLineProcessor):
    """Test directive that records its argument as a namespace."""
    directive_name = "trace"

    def __init__(self, behavior):
        self.behavior_after_code = behavior
        self.seen = []

    def process_directive(self, parser, context, line, base_directory):
        self.seen.append(self.get_directive_argument(line))
        return True


class TestUsingLineProcessor:
    """Tests for namespace extraction."""

    @pytest.fixture
    def processor(self):
        return UsingLineProcessor()

    def test_plain_using(self, processor):
        context = ParseContext()
        assert processor.process_line(None, context, 'using System.Linq;', True, '/') is True
        assert context.namespaces == ['System.Linq']

    def test_indented_using(self, processor):
        context = ParseContext()
        assert processor.process_line(None, context, '    using System.IO;', True, '/') is True
        assert context.namespaces == ['System.IO']

    def test_alias_is_not_a_namespace(self, processor):
        context = ParseContext()
        assert processor.process_line(None, context, 'using x = System.Linq;', True, '/') is False
        assert context.namespaces == []

    def test_using_block_is_not_a_namespace(self, processor):
        context = ParseContext()
        line = 'using (var s = File.OpenRead("a")) { }'
        assert processor.process_line(None, context, line, False, '/') is False

    def test_missing_terminator(self, processor):
        context = ParseContext()
        assert processor.process_line(None, context, 'using System', True, '/') is False

    def test_duplicates_suppressed(self, processor):
        context = ParseContext()
        processor.process_line(None, context, 'using System;', True, '/')
        processor.process_line(None, context, 'using System;', True, '/')
        assert context.namespaces == ['System']


class TestDirectiveMatching:
    """Tests for directive recognition and argument extraction."""

    def test_matches_own_keyword_only(self):
        fs = FileSystem()
        reference = ReferenceLineProcessor(fs)
        load = LoadLineProcessor(fs)

        assert reference.matches('#r "a.dll"')
        assert not reference.matches('#load "a.csx"')
        assert load.matches('#load "a.csx"')
        assert not load.matches('#loader "a.csx"')
        assert reference.matches('  #r "a.dll"')

    def test_directive_argument(self):
        load = LoadLineProcessor(FileSystem())
        assert load.get_directive_argument('#load "lib/helper.csx";') == 'lib/helper.csx'
        assert load.get_directive_argument('#load lib/helper.csx') == 'lib/helper.csx'

    def test_default_policy_is_ignore(self):
        assert DirectiveLineProcessor.behavior_after_code == BehaviorAfterCode.IGNORE

    def test_builtin_directives_throw_after_code(self):
        fs = FileSystem()
        assert ReferenceLineProcessor(fs).behavior_after_code == BehaviorAfterCode.THROW
        assert LoadLineProcessor(fs).behavior_after_code == BehaviorAfterCode.THROW


class TestPlacementPolicy:
    """Tests for what directives do after the start of code."""

    def test_throw(self):
        processor = ReferenceLineProcessor(FileSystem())
        with pytest.raises(InvalidDirectiveUseError) as exc_info:
            processor.process_line(None, ParseContext(), '#r "a.dll"', False, '/')
        assert exc_info.value.directive == '#r'
        assert "Please move this directive to the beginning of the file" in str(exc_info.value)

    def test_ignore_consumes_without_effect(self):
        processor = RecordingDirective(BehaviorAfterCode.IGNORE)
        assert processor.process_line(None, ParseContext(), '#trace on', False, '/') is True
        assert processor.seen == []

    def test_allow_processes_after_code(self):
        processor = RecordingDirective(BehaviorAfterCode.ALLOW)
        assert processor.process_line(None, ParseContext(), '#trace on', False, '/') is True
        assert processor.seen == ['on']

    def test_custom_directive_in_chain(self):
        """A new directive kind plugs into the preprocessor without changing it."""
        trace = RecordingDirective(BehaviorAfterCode.IGNORE)
        preprocessor = FilePreProcessor(line_processors=[UsingLineProcessor(), trace])

        result = preprocessor.process_script('#trace first\nvar x = 1;\n#trace second', base_directory='/')

        assert trace.seen == ['first']
        assert result.code.splitlines() == ['var x = 1;']


class TestReferenceLineProcessor:
    """Tests for '#r' resolution."""

    def test_existing_file_records_absolute_path(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            dll = os.path.join(tmpdir, 'Extra.dll')
            open(dll, 'w').close()

            context = ParseContext()
            ReferenceLineProcessor(FileSystem()).process_line(None, context, '#r "Extra.dll"', True, tmpdir)

            assert context.references == [os.path.normpath(dll)]

    def test_unresolved_records_bare_name(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            context = ParseContext()
            ReferenceLineProcessor(FileSystem()).process_line(None, context, '#r "System.Net.Http"', True, tmpdir)

            assert context.references == ['System.Net.Http']

    def test_environment_variables_expanded(self, monkeypatch):
        with tempfile.TemporaryDirectory() as tmpdir:
            dll = os.path.join(tmpdir, 'Native.dll')
            open(dll, 'w').close()
            monkeypatch.setenv('CSXPREP_LIB', tmpdir)

            context = ParseContext()
            processor = ReferenceLineProcessor(FileSystem())
            processor.process_line(None, context, '#r "$CSXPREP_LIB/Native.dll"', True, '/')
            processor.process_line(None, context, '#r "$CSXPREP_LIB/Missing.dll"', True, '/')

            assert context.references == [os.path.normpath(dll), '$CSXPREP_LIB/Missing.dll']

    def test_empty_argument_records_nothing(self):
        context = ParseContext()
        assert ReferenceLineProcessor(FileSystem()).process_line(None, context, '#r ""', True, '/') is True
        assert context.references == []
