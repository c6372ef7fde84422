#!/usr/bin/env python3
"""
markupmin - HTML/XML minifier with block preservation

Compresses every document matching a file mask in an input directory and
writes the results, mirroring the directory tree, into an output directory.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Philosophy:
    - Never touch what must be preserved: <pre>, <textarea>, <script>,
      <style>, conditional comments and user-marked blocks are restored
      byte-for-byte (or minified by a dedicated JS/CSS compressor)
    - Safe by default: only comments and repeated whitespace are removed
      unless more aggressive rewrites are switched on

Usage:
    markupmin inputdir/ outputdir/ [--mask '*.html'] [options]

Examples:
    # Default compression of all .html files
    markupmin site/ dist/

    # Aggressive compression, recursing into subdirectories
    markupmin site/ dist/ --recursive --remove-intertag-spaces --remove-quotes \\
        --compress-js --compress-css --simple-doctype

    # XML documents
    markupmin feeds/ out/ --type xml --mask '*.xml'

    # Keep PHP blocks and patterns from a file, report statistics
    markupmin site/ dist/ --preserve-php --preserve patterns.yaml --statistics -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import HtmlCompressor, XmlCompressor, __version__, LOG, state_connectToLogger
from .lib.patterns import (
    PreservePatternError,
    PHP_TAG_PATTERN,
    SERVER_SCRIPT_TAG_PATTERN,
    SERVER_SIDE_INCLUDE_PATTERN,
    patterns_load,
)
from .models import CompressorOptions, XmlCompressorOptions, ProgramState, pipeline


DISPLAY_TITLE = r"""
                       _
  _ __ ___   __ _ _ __| | ___   _ _ __  _ __ ___ (_)_ __
 | '_ ` _ \ / _` | '__| |/ / | | | '_ \| '_ ` _ \| | '_ \
 | | | | | | (_| | |  |   <| |_| | |_) | | | | | | | | | |
 |_| |_| |_|\__,_|_|  |_|\_\\__,_| .__/|_| |_| |_|_|_| |_|
                                 |_|
  HTML/XML minifier with block preservation
"""

# Define CLI arguments
parser = ArgumentParser(
    description="markupmin - HTML/XML minifier with block preservation",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument("--type", default="html", choices=["html", "xml"], help="Document type")
parser.add_argument(
    "--mask", default="", type=str, help=f"Input file glob (default from settings: {appsettings.default_mask})"
)
parser.add_argument("-r", "--recursive", action="store_true", help="Descend into subdirectories of inputdir")
parser.add_argument(
    "--charset", default="", type=str, help=f"Document encoding (default from settings: {appsettings.default_charset})"
)
parser.add_argument(
    "-p", "--preserve", default=None, type=str,
    help="File of preserve patterns (one regex per line, or YAML list)",
)
parser.add_argument("--statistics", action="store_true", help="Report compression statistics per file")

# xml and html
parser.add_argument("--preserve-comments", action="store_true", help="Preserve comments")
parser.add_argument("--preserve-intertag-spaces", action="store_true", help="Preserve intertag spaces (xml)")

# html
parser.add_argument("--preserve-multi-spaces", action="store_true", help="Preserve multiple spaces")
parser.add_argument("--preserve-line-breaks", action="store_true", help="Preserve line breaks")
parser.add_argument("--remove-intertag-spaces", action="store_true", help="Remove intertag spaces")
parser.add_argument("--remove-quotes", action="store_true", help="Remove unneeded quotes")
parser.add_argument("--simple-doctype", action="store_true", help="Change doctype to <!DOCTYPE html>")
parser.add_argument("--remove-script-attr", action="store_true", help="Remove default attributes from <script>")
parser.add_argument("--remove-style-attr", action="store_true", help="Remove default attributes from <style>")
parser.add_argument("--remove-link-attr", action="store_true", help="Remove default attributes from <link>")
parser.add_argument("--remove-form-attr", action="store_true", help="Remove default attributes from <form>")
parser.add_argument("--remove-input-attr", action="store_true", help="Remove default attributes from <input>")
parser.add_argument("--simple-bool-attr", action="store_true", help="Remove values from boolean attributes")
parser.add_argument("--remove-js-protocol", action="store_true", help="Remove 'javascript:' from inline handlers")
parser.add_argument("--remove-http-protocol", action="store_true", help="Remove 'http:' from tag attributes")
parser.add_argument("--remove-https-protocol", action="store_true", help="Remove 'https:' from tag attributes")
parser.add_argument(
    "--remove-surrounding-spaces", default=None, type=str,
    help="Remove spaces around tags: min, max, all, or a comma separated tag list",
)
parser.add_argument("--compress-js", action="store_true", help="Compress inline javascript (rjsmin)")
parser.add_argument("--compress-css", action="store_true", help="Compress inline css (rcssmin)")

# custom block preservation
parser.add_argument("--preserve-php", action="store_true", help="Preserve <?php ... ?> tags")
parser.add_argument("--preserve-server-script", action="store_true", help="Preserve <% ... %> tags")
parser.add_argument("--preserve-ssi", action="store_true", help="Preserve <!--# ... --> tags")

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def htmlOptions_fromNamespace(options: Namespace) -> CompressorOptions:
    """
    Translate command line flags into CompressorOptions.

    Missing attributes fall back to the flag defaults, so a partial
    Namespace is accepted.

    Raises:
        PreservePatternError: If the --preserve file is unreadable or invalid
    """

    def flag(name: str) -> bool:
        return bool(getattr(options, name, False))

    preserve_patterns = []
    if flag("preserve_php"):
        preserve_patterns.append(PHP_TAG_PATTERN)
    if flag("preserve_server_script"):
        preserve_patterns.append(SERVER_SCRIPT_TAG_PATTERN)
    if flag("preserve_ssi"):
        preserve_patterns.append(SERVER_SIDE_INCLUDE_PATTERN)

    patterns_file = getattr(options, "preserve", None)
    if patterns_file:
        charset = getattr(options, "charset", "") or appsettings.default_charset
        preserve_patterns.extend(patterns_load(Path(patterns_file), encoding=charset))

    return CompressorOptions(
        remove_comments=not flag("preserve_comments"),
        remove_multi_spaces=not flag("preserve_multi_spaces"),
        remove_intertag_spaces=flag("remove_intertag_spaces"),
        remove_quotes=flag("remove_quotes"),
        preserve_line_breaks=flag("preserve_line_breaks"),
        simple_doctype=flag("simple_doctype"),
        remove_script_attributes=flag("remove_script_attr"),
        remove_style_attributes=flag("remove_style_attr"),
        remove_link_attributes=flag("remove_link_attr"),
        remove_form_attributes=flag("remove_form_attr"),
        remove_input_attributes=flag("remove_input_attr"),
        simple_boolean_attributes=flag("simple_bool_attr"),
        remove_javascript_protocol=flag("remove_js_protocol"),
        remove_http_protocol=flag("remove_http_protocol"),
        remove_https_protocol=flag("remove_https_protocol"),
        remove_surrounding_spaces=getattr(options, "remove_surrounding_spaces", None),
        preserve_patterns=tuple(preserve_patterns),
        compress_javascript=flag("compress_js"),
        compress_css=flag("compress_css"),
        generate_statistics=flag("statistics"),
    )


def xmlOptions_fromNamespace(options: Namespace) -> XmlCompressorOptions:
    """Translate command line flags into XmlCompressorOptions"""
    return XmlCompressorOptions(
        remove_comments=not getattr(options, "preserve_comments", False),
        remove_intertag_spaces=not getattr(options, "preserve_intertag_spaces", False),
    )


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and select the input files.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputFiles: Files under inputdir matching the mask
            - envOK: True if environment is valid

    Exits:
        1 if inputdir does not exist
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if state.inputdir is None or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.mask = state.mask or appsettings.default_mask
    state.charset = state.charset or appsettings.default_charset

    candidates = state.inputdir.rglob(state.mask) if state.recursive else state.inputdir.glob(state.mask)
    state.inputFiles = sorted(path for path in candidates if path.is_file())
    LOG(f"Found {len(state.inputFiles)} file(s) matching {state.mask} in {state.inputdir}", level=2)

    state.envOK = True
    return state


def compressor_build(inputstate: ProgramState) -> ProgramState:
    """
    Configure the HTML or XML compressor from the command line flags.

    Returns:
        ProgramState with added field:
            - compressor: HtmlCompressor or XmlCompressor

    Exits:
        1 if the preserve pattern configuration is invalid
    """

    state = inputstate.copy()
    cli_options = state.cliOptions or Namespace()

    if state.type == "xml":
        state.compressor = XmlCompressor(xmlOptions_fromNamespace(cli_options))
        LOG("Using XML compressor", level=2)
        return state

    try:
        options = htmlOptions_fromNamespace(cli_options)
    except PreservePatternError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    state.compressor = HtmlCompressor(options)
    LOG(f"Using HTML compressor with {len(options.preserve_patterns)} preserve pattern(s)", level=2)
    return state


def files_compress(inputstate: ProgramState) -> ProgramState:
    """
    Compress every selected file into outputdir.

    Output paths mirror the input paths relative to inputdir.

    Returns:
        ProgramState with added field:
            - results: One dict per file with input/output paths, sizes and
                       (when enabled) statistics

    Exits:
        1 if a file cannot be read or written
    """

    state = inputstate.copy()
    state.results = []

    if state.compressor is None:
        print("Error: No compressor configured", file=sys.stderr)
        sys.exit(1)

    for input_file in state.inputFiles:
        output_file = state.outputdir / input_file.relative_to(state.inputdir)
        LOG(f"Compressing {input_file}", level=2)

        try:
            source = input_file.read_text(encoding=state.charset)
            compressed = state.compressor.compress(source)
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(compressed, encoding=state.charset)
        except (OSError, UnicodeError) as e:
            print(f"Error processing {input_file}: {e}", file=sys.stderr)
            sys.exit(1)

        state.results.append(
            {
                "input": input_file,
                "output": output_file,
                "original_size": len(source),
                "compressed_size": len(compressed),
                "statistics": getattr(state.compressor, "statistics", None),
            }
        )

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display per-file and total compression results.

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()

    if not state.results:
        LOG("No files compressed", level=1)
        return state

    for result in state.results:
        LOG(f"  {result['input']} -> {result['output']}: "
            f"{result['original_size']} -> {result['compressed_size']} characters", level=1)
        if state.statistics and result["statistics"] is not None:
            LOG(f"    {result['statistics']}", level=1)

    original = sum(result["original_size"] for result in state.results)
    compressed = sum(result["compressed_size"] for result in state.results)
    ratio = (1 - compressed / original) * 100 if original else 0.0
    LOG(f"\n✓ Compressed {len(state.results)} file(s): {original} -> {compressed} characters ({ratio:.1f}% saved)", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="markupmin - HTML/XML minifier",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - compress markup documents from inputdir into outputdir.

    Orchestrates the full pipeline:
        1. env_check: Validate inputdir and select files
        2. compressor_build: Configure HTML or XML compressor
        3. files_compress: Compress and write each file
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing documents to compress
        outputdir: Directory where compressed documents will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, compressor_build, files_compress, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
