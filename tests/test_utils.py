"""Unit tests for console helpers (ncgen.utils)."""

from __future__ import annotations

import pytest

from ncgen.utils import (
    print_error,
    print_success,
    print_summary_table,
    print_usage_instructions,
    print_warning,
    write_raw,
)


class TestRichHelpers:
    @pytest.mark.unit
    def test_print_summary_table(self, capsys):
        print_summary_table({"Key1": "Value1", "Key2": "Value2"}, title="Test Summary")
        err = capsys.readouterr().err
        assert "Test Summary" in err
        assert "Value2" in err

    @pytest.mark.unit
    def test_print_success(self, capsys):
        print_success("Script written")
        assert "Script written" in capsys.readouterr().err

    @pytest.mark.unit
    def test_print_error_escapes_markup(self, capsys):
        print_error("instances.0.domain: [bold]bad[/bold]")
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "[bold]bad[/bold]" in err

    @pytest.mark.unit
    def test_print_warning(self, capsys):
        print_warning("Check your config")
        assert "Check your config" in capsys.readouterr().err

    @pytest.mark.unit
    def test_print_usage_instructions(self, capsys):
        print_usage_instructions("setup.sh")
        err = capsys.readouterr().err
        assert "How to use" in err
        assert "chmod +x setup.sh" in err
        assert "./setup.sh" in err

    @pytest.mark.unit
    def test_write_raw_is_untouched(self, capsys):
        write_raw("[red]not markup[/red] ${NC}\n")
        assert capsys.readouterr().out == "[red]not markup[/red] ${NC}\n"
