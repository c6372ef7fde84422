"""
Command line pipeline tests

Tests the individual pipeline stages (env_check, compressor_build,
files_compress, results_report) on a temporary directory tree.
"""

from argparse import Namespace

import pytest

from markupmin.__main__ import (
    compressor_build,
    env_check,
    files_compress,
    htmlOptions_fromNamespace,
    results_report,
    xmlOptions_fromNamespace,
)
from markupmin.lib import HtmlCompressor, XmlCompressor
from markupmin.models import ProgramState, pipeline


@pytest.fixture
def site(tmp_path):
    """Input tree with two html files (one nested) and a text file"""
    inputdir = tmp_path / "in"
    (inputdir / "sub").mkdir(parents=True)
    (inputdir / "index.html").write_text("<!-- c -->\n<p>  a  </p>\n")
    (inputdir / "sub" / "page.html").write_text("<div>\n  <pre> x  y </pre>\n</div>")
    (inputdir / "notes.txt").write_text("  keep  ")
    return inputdir, tmp_path / "out"


class TestOptions:
    """Test translation of command line flags"""

    def test_defaults(self):
        options = htmlOptions_fromNamespace(Namespace())
        assert options.remove_comments
        assert options.remove_multi_spaces
        assert not options.remove_quotes
        assert options.preserve_patterns == ()

    def test_flags(self):
        options = htmlOptions_fromNamespace(
            Namespace(preserve_comments=True, remove_quotes=True, compress_js=True, remove_surrounding_spaces="max")
        )
        assert not options.remove_comments
        assert options.remove_quotes
        assert options.compress_javascript
        assert options.remove_surrounding_spaces == "max"

    def test_builtin_and_file_patterns(self, tmp_path):
        path = tmp_path / "patterns.txt"
        path.write_text("\\{\\{.*?\\}\\}\n")
        options = htmlOptions_fromNamespace(Namespace(preserve_php=True, preserve_ssi=True, preserve=str(path)))
        assert len(options.preserve_patterns) == 3
        assert options.preserve_patterns[2].pattern == "\\{\\{.*?\\}\\}"

    def test_xml(self):
        options = xmlOptions_fromNamespace(Namespace(preserve_intertag_spaces=True))
        assert options.remove_comments
        assert not options.remove_intertag_spaces


class TestEnvCheck:
    """Test input file selection"""

    def test_flat(self, site):
        inputdir, outputdir = site
        state = env_check(ProgramState(inputdir=inputdir, outputdir=outputdir))
        assert state.envOK
        assert state.inputFiles == [inputdir / "index.html"]
        assert state.mask == "*.html"
        assert state.charset == "utf-8"

    def test_recursive(self, site):
        inputdir, outputdir = site
        state = env_check(ProgramState(inputdir=inputdir, outputdir=outputdir, recursive=True))
        assert state.inputFiles == [inputdir / "index.html", inputdir / "sub" / "page.html"]

    def test_mask(self, site):
        inputdir, outputdir = site
        state = env_check(ProgramState(inputdir=inputdir, outputdir=outputdir, mask="*.txt"))
        assert state.inputFiles == [inputdir / "notes.txt"]

    def test_missing_inputdir(self, tmp_path):
        with pytest.raises(SystemExit):
            env_check(ProgramState(inputdir=tmp_path / "nope", outputdir=tmp_path))


class TestCompressorBuild:
    """Test compressor selection"""

    def test_html(self):
        state = compressor_build(ProgramState(cliOptions=Namespace(remove_quotes=True)))
        assert isinstance(state.compressor, HtmlCompressor)
        assert state.compressor.options.remove_quotes

    def test_xml(self):
        state = compressor_build(ProgramState(type="xml", cliOptions=Namespace()))
        assert isinstance(state.compressor, XmlCompressor)

    def test_bad_pattern_file_exits(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("(unclosed\n")
        with pytest.raises(SystemExit):
            compressor_build(ProgramState(cliOptions=Namespace(preserve=str(path))))


class TestFilesCompress:
    """Test the full pipeline on a directory tree"""

    def test_output_mirrors_input(self, site):
        inputdir, outputdir = site
        state = pipeline(
            ProgramState(inputdir=inputdir, outputdir=outputdir, recursive=True, cliOptions=Namespace()),
            env_check,
            compressor_build,
            files_compress,
            results_report,
        )

        assert (outputdir / "index.html").read_text() == "<p> a </p>"
        assert (outputdir / "sub" / "page.html").read_text() == "<div> <pre> x  y </pre> </div>"
        assert not (outputdir / "notes.txt").exists()
        assert len(state.results) == 2
        assert state.results[0]["original_size"] > state.results[0]["compressed_size"]

    def test_statistics_recorded(self, site):
        inputdir, outputdir = site
        state = pipeline(
            ProgramState(
                inputdir=inputdir, outputdir=outputdir, statistics=True,
                cliOptions=Namespace(statistics=True),
            ),
            env_check,
            compressor_build,
            files_compress,
        )
        assert state.results[0]["statistics"].original_metrics.filesize == len("<!-- c -->\n<p>  a  </p>\n")
