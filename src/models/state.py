"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the command line pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, type, mask, recursive,
          charset, preserve, statistics, cliOptions
        - env_check: inputFiles, envOK
        - compressor_build: compressor
        - files_compress: results
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing documents to compress
        outputdir: Directory receiving compressed documents
        verbosity: Logging verbosity level (1-3)
        type: Document type, "html" or "xml"
        mask: Glob selecting input files (settings default when empty)
        recursive: Descend into subdirectories of inputdir
        charset: Encoding of input and output files (settings default when empty)
        preserve: Optional preserve pattern file
        statistics: Report compression statistics per file
        cliOptions: Full argparse Namespace (compression toggles)
        envOK: Environment validation passed
        inputFiles: Documents selected for compression
        compressor: Configured HtmlCompressor or XmlCompressor
        results: One dict per file (input, output, original_size,
                 compressed_size, statistics)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    type: str = field(default="html")
    mask: str = field(default="")
    recursive: bool = field(default=False)
    charset: str = field(default="")
    preserve: Optional[str] = field(default=None)
    statistics: bool = field(default=False)
    cliOptions: Optional[Namespace] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputFiles: List[Path] = field(default_factory=list)
    compressor: Optional[Any] = field(default=None)  # HtmlCompressor | XmlCompressor at runtime
    results: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Merges CLI options with explicitly provided directories to create
        the initial program state for the pipeline. The whole Namespace is
        kept in cliOptions for the compressor_build stage.

        Args:
            options: Parsed CLI arguments
            inputdir: Directory containing source files
            outputdir: Directory for compressed output

        Returns:
            ProgramState instance with all matching CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Filter options_dict to only include fields that exist in ProgramState
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {
            **filtered_options,
            "inputdir": inputdir,
            "outputdir": outputdir,
            "cliOptions": options,
        }

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            compressor_build,
            files_compress,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
