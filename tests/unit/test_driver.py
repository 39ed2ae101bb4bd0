"""
Unit tests for TypstDriver.
All invocations are mocked — no typst binary needed.
"""
import json

import pytest
from unittest.mock import patch, MagicMock

from typstrun.compiler.driver import TypstDriver, CompileResult
from typstrun.compiler.options import CompileOptions, FontOptions, QueryOptions
from typstrun.errors import CompileError, QueryDecodeError, ToolError, ToolNotFound
from typstrun.parsing import Severity, Span
from typstrun.utils.config import ConfigManager
from typstrun.utils.formats import OutputFormat, QueryFormat


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.delenv("TYPSTRUN_BINARY", raising=False)
    return ConfigManager(config_dir=tmp_path / ".typstrun")


@pytest.fixture
def driver(config):
    with patch("shutil.which", return_value="/usr/bin/typst"):
        return TypstDriver(config)


def _completed(returncode=0, stdout="", stderr=""):
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestDriverDiscovery:
    def test_discovers_typst(self, driver):
        assert driver.binary == "typst"
        assert driver.binary_path == "/usr/bin/typst"

    def test_missing_binary_warns(self, config, capsys):
        config.config["typst"] = "typst-nightly"
        with patch("shutil.which", return_value=None):
            driver = TypstDriver(config)
        assert driver.binary_path is None
        assert "Warning" in capsys.readouterr().out

    def test_missing_binary_raises_on_use(self, config):
        config.config["typst"] = "typst-nightly"
        with patch("shutil.which", return_value=None):
            driver = TypstDriver(config)
        with pytest.raises(ToolNotFound):
            driver.compile("main.typ")

    def test_set_binary(self, driver):
        with patch("shutil.which", return_value="/opt/typst/bin/typst"):
            driver.set_binary("/opt/typst/bin/typst")
        assert driver.binary_path == "/opt/typst/bin/typst"

    def test_discover_binaries(self):
        with patch("shutil.which", return_value="/usr/bin/typst"):
            assert "typst" in TypstDriver.discover_binaries()
        with patch("shutil.which", return_value=None):
            assert TypstDriver.discover_binaries() == []

    def test_version(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(stdout="typst 0.11.0 (2bf9f95d)\n")
            assert driver.version() == "typst 0.11.0 (2bf9f95d)"
            assert mock_run.call_args[0][0] == ["/usr/bin/typst", "--version"]


class TestDriverCompile:
    def test_command_layout(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed()
            driver.compile("doc.typ", "doc.pdf")
            cmd = mock_run.call_args[0][0]
            assert cmd[:2] == ["/usr/bin/typst", "compile"]
            assert cmd[-2:] == ["doc.typ", "doc.pdf"]
            assert "--diagnostic-format" in cmd
            assert cmd[cmd.index("--diagnostic-format") + 1] == "short"

    def test_success_without_warnings(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed()
            result = driver.compile("doc.typ", "doc.pdf")
            assert result == CompileResult("doc.pdf", [], "")

    def test_success_with_warnings(self, driver):
        output = "warning: no text within stars\nwarning: no text within underscores\n"
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(stdout=output)
            result = driver.compile("doc.typ", "doc.pdf")
            assert [d.message for d in result.warnings] == [
                "no text within stars",
                "no text within underscores",
            ]

    def test_default_output_follows_format(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed()
            result = driver.compile("dir/doc.typ", options=CompileOptions(format=OutputFormat.SVG))
            assert result.output_path.endswith("doc.svg")
            assert mock_run.call_args[0][0][-1] == result.output_path

    def test_default_output_is_pdf(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed()
            result = driver.compile("doc.typ")
            assert result.output_path == "doc.pdf"

    def test_exit_one_raises_compile_error(self, driver):
        output = 'test/samples/err.typ:1:1: error: panicked with: "Oh no!"\n'
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(returncode=1, stdout=output)
            with pytest.raises(CompileError) as exc_info:
                driver.compile("test/samples/err.typ", "err.pdf")
        err = exc_info.value
        assert len(err.diagnostics) == 1
        assert err.diagnostics[0].severity == Severity.ERROR
        assert err.diagnostics[0].span == Span("test/samples/err.typ", 1, 1)
        assert err.errors == err.diagnostics
        assert "Oh no!" in str(err)

    def test_compile_error_keeps_warnings_and_preamble(self, driver):
        output = "downloading @preview/foo:0.1.0\nwarning: w\nerror: e\n"
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(returncode=1, stdout=output)
            with pytest.raises(CompileError) as exc_info:
                driver.compile("doc.typ", "doc.pdf")
        err = exc_info.value
        assert err.preamble == "downloading @preview/foo:0.1.0"
        assert [d.severity for d in err.diagnostics] == [Severity.WARNING, Severity.ERROR]
        assert [d.message for d in err.errors] == ["e"]

    def test_compile_error_without_diagnostics(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(returncode=1, stdout="")
            with pytest.raises(CompileError) as exc_info:
                driver.compile("doc.typ", "doc.pdf")
        assert exc_info.value.diagnostics == []
        assert "without reporting an error" in str(exc_info.value)

    def test_other_exit_codes_are_not_parsed(self, driver):
        output = "error: this looks like a diagnostic\n"
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(returncode=2, stdout=output)
            with pytest.raises(ToolError) as exc_info:
                driver.compile("doc.typ", "doc.pdf")
        assert not isinstance(exc_info.value, CompileError)
        assert exc_info.value.exit_code == 2
        assert exc_info.value.output == output

    def test_stdin_input_needs_compile_source(self, driver):
        with patch("subprocess.run") as mock_run:
            with pytest.raises(ValueError):
                driver.compile("-")
            mock_run.assert_not_called()

    def test_compile_source_pipes_stdin(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed()
            driver.compile_source("= Title", "out.png")
            cmd = mock_run.call_args[0][0]
            assert cmd[-2:] == ["-", "out.png"]
            assert cmd[cmd.index("--format") + 1] == "png"
            assert mock_run.call_args.kwargs["input"] == "= Title"

    def test_config_font_paths_applied(self, driver, config):
        config.config["font_paths"] = ["/fonts"]
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed()
            driver.compile("doc.typ", "doc.pdf")
            cmd = mock_run.call_args[0][0]
            assert cmd[cmd.index("--font-path") + 1] == "/fonts"

    def test_explicit_options_beat_config(self, driver, config):
        config.config["root"] = "/config-root"
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed()
            driver.compile("doc.typ", "doc.pdf", CompileOptions(root="/mine"))
            cmd = mock_run.call_args[0][0]
            assert cmd[cmd.index("--root") + 1] == "/mine"


class TestDriverQuery:
    def test_query_decodes_json(self, driver):
        payload = [{"func": "heading", "level": 1}]
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(stdout=json.dumps(payload), stderr="warning: w\n")
            assert driver.query("doc.typ", "heading") == payload
            cmd = mock_run.call_args[0][0]
            assert cmd[1] == "query"
            assert cmd[-2:] == ["doc.typ", "heading"]

    def test_query_forces_json(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(stdout="1")
            driver.query("doc.typ", "<x>", QueryOptions(format=QueryFormat.YAML, one=True))
            cmd = mock_run.call_args[0][0]
            assert cmd[cmd.index("--format") + 1] == "json"
            assert "--one" in cmd

    def test_query_raw_yaml(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(stdout="- 1\n")
            out = driver.query_raw("doc.typ", "<x>", QueryOptions(format=QueryFormat.YAML))
            assert out == "- 1\n"

    def test_query_bad_json(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(stdout="not json")
            with pytest.raises(QueryDecodeError):
                driver.query("doc.typ", "<x>")

    def test_query_failure_parses_stderr(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(
                returncode=1, stderr="doc.typ:1:1: error: unknown label\n"
            )
            with pytest.raises(CompileError) as exc_info:
                driver.query("doc.typ", "<missing>")
        assert exc_info.value.errors[0].message == "unknown label"


class TestDriverFonts:
    def test_lists_families(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(stdout="DejaVu Sans\nLibertinus Serif\n")
            assert driver.fonts() == ["DejaVu Sans", "Libertinus Serif"]
            assert mock_run.call_args[0][0] == ["/usr/bin/typst", "fonts"]

    def test_font_options(self, driver):
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = _completed(stdout="Inter\n- Style: Normal, Weight: 400\n")
            families = driver.fonts(FontOptions(font_paths=["fonts"], variants=True))
            assert families == ["Inter"]
            cmd = mock_run.call_args[0][0]
            assert cmd[1:] == ["fonts", "--font-path", "fonts", "--variants"]
