"""
Unit tests for the CSV output plugin.

These tests cover:
- CSV escaping (enclosing, quote doubling, line break entity)
- The rendering of each event type
- Plugin lifecycle hooks
- End-to-end rendering through a session
"""

import io
import pytest

from scoped_output.core.formats import EventType
from scoped_output.core.registry import FormatRegistry
from scoped_output.core.session import OutputSession
from scoped_output.plugins import csv as csv_plugin
from scoped_output.plugins.csv import CsvFormat, FORMAT_ID, FORMAT_NAME


class TestCsvEscape:
    """Test CSV escaping."""

    def setup_method(self):
        """Set up test fixtures."""
        self.fmt = CsvFormat()

    def test_identity(self):
        """The CSV format is registered as id 1, name csv."""
        assert self.fmt.id == FORMAT_ID == 1
        assert self.fmt.name == FORMAT_NAME == 'csv'

    def test_plain_value_unchanged(self):
        """Values without comma, quote or line break are not enclosed."""
        assert self.fmt.escape('header') == 'header'
        assert self.fmt.escape('0x00400000') == '0x00400000'
        assert self.fmt.escape('') == ''

    def test_none_stays_none(self):
        """An absent value escapes to None."""
        assert self.fmt.escape(None) is None

    def test_comma_encloses(self):
        assert self.fmt.escape('a,b') == '"a,b"'

    def test_quote_doubled_and_enclosed(self):
        assert self.fmt.escape('he said "hi"') == '"he said ""hi"""'

    def test_newline_replaced_and_enclosed(self):
        """A line break becomes backslash-n inside quotes."""
        assert self.fmt.escape('line1\nline2') == '"line1\\nline2"'

    def test_carriage_return_passes_through(self):
        """Only the three trigger characters have special handling."""
        assert self.fmt.escape('a\rb') == 'a\rb'
        assert self.fmt.escape('a;b\tc') == 'a;b\tc'


class TestCsvEmit:
    """Test rendering of each event type."""

    def setup_method(self):
        """Set up test fixtures."""
        self.fmt = CsvFormat()
        self.out = io.StringIO()

    def render(self, event, level=0, key=None, value=None):
        self.fmt.emit(self.out, event, level, key, value)
        return self.out.getvalue()

    def test_document_events_render_nothing(self):
        assert self.render(EventType.DOCUMENT_OPEN, key='doc') == ''
        assert self.render(EventType.DOCUMENT_CLOSE) == ''

    def test_scope_open(self):
        assert self.render(EventType.SCOPE_OPEN, 1, 'Sections') == '\nSections\n'

    def test_scope_open_escapes_name(self):
        assert self.render(EventType.SCOPE_OPEN, 1, 'a,b') == '\n"a,b"\n'

    def test_scope_close(self):
        assert self.render(EventType.SCOPE_CLOSE, 1, 'Sections') == '\n'

    def test_attribute_key_and_value(self):
        assert self.render(EventType.ATTRIBUTE, 2, 'Name', 'header') == 'Name,header\n'

    def test_attribute_key_only(self):
        assert self.render(EventType.ATTRIBUTE, 2, 'Name') == '\nName\n'

    def test_attribute_value_only(self):
        assert self.render(EventType.ATTRIBUTE, 2, value='header') == ',header\n'

    def test_attribute_empty_strings_are_present(self):
        """Empty text is a present field, unlike None."""
        assert self.render(EventType.ATTRIBUTE, 0, '', '') == ',\n'

    def test_attribute_neither(self):
        assert self.render(EventType.ATTRIBUTE, 2) == ''

    @pytest.mark.parametrize('level', [0, 1, 5, 40])
    def test_level_ignored(self, level):
        """CSV output does not indent."""
        assert self.render(EventType.ATTRIBUTE, level, 'k', 'v') == 'k,v\n'


class TestCsvPluginHooks:
    """Test the plugin lifecycle hooks."""

    def setup_method(self):
        """Set up test fixtures."""
        self.registry = FormatRegistry()

    def test_loaded_and_unloaded(self):
        assert csv_plugin.plugin_loaded() == 0
        assert csv_plugin.plugin_unloaded() is None

    def test_initialize_registers(self):
        assert csv_plugin.plugin_initialize(self.registry) == 0
        assert self.registry.lookup_by_name('csv') is csv_plugin.FORMAT
        assert self.registry.lookup_by_id(1) is csv_plugin.FORMAT

    def test_shutdown_unregisters_idempotently(self):
        csv_plugin.plugin_initialize(self.registry)

        csv_plugin.plugin_shutdown(self.registry)
        csv_plugin.plugin_shutdown(self.registry)

        assert self.registry.lookup_by_name('csv') is None
        assert len(self.registry) == 0


class TestCsvSession:
    """End-to-end rendering through a session."""

    def setup_method(self):
        """Set up test fixtures."""
        self.registry = FormatRegistry()
        csv_plugin.plugin_initialize(self.registry)
        self.session = OutputSession(self.registry)
        self.session.set_active_format_by_name('csv')

    def test_document_with_scope(self, capsys):
        self.session.open_document()
        self.session.open_scope('Sections')
        self.session.emit_attribute('Name', 'header')
        self.session.close_scope()
        self.session.close_document()

        assert capsys.readouterr().out == '\nSections\nName,header\n\n'

    def test_value_with_comma(self, capsys):
        self.session.emit_attribute('Note', 'a,b')

        assert capsys.readouterr().out == 'Note,"a,b"\n'

    def test_value_with_quotes(self, capsys):
        self.session.emit_attribute('Note', 'he said "hi"')

        assert capsys.readouterr().out == 'Note,"he said ""hi"""\n'

    def test_absent_key_and_value(self, capsys):
        self.session.emit_attribute(None, None)

        assert capsys.readouterr().out == ''

    def test_nested_scopes_and_mixed_attributes(self):
        out = io.StringIO()
        session = OutputSession(self.registry, stream=out)
        session.set_active_format_by_name('csv')

        with session.document('image.exe'):
            with session.scope('Imported functions'):
                session.emit_attribute('Library')
                with session.scope('KERNEL32.dll'):
                    session.emit_attribute(value='CreateFileA')
                    session.emit_attribute('Hint', '0x88')

        assert out.getvalue() == (
            '\nImported functions\n'
            '\nLibrary\n'
            '\nKERNEL32.dll\n'
            ',CreateFileA\n'
            'Hint,0x88\n'
            '\n'
            '\n'
        )
