from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from coda_inspector.analysis.filters import InstrumentFilter
from coda_inspector.config import DEFAULT_MAX_FILES_SCANNED, DEFAULT_RESULT_LIMIT
from coda_inspector.ingest.discovery import ProposalLocator, ScanOrder, list_bounded_files
from coda_inspector.ingest.readers_nexus import NexusInspector
from coda_inspector.models.records import InspectionOutcome, InspectionReport

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[InspectionOutcome], None]


@dataclass(frozen=True)
class PipelineOptions:
    """
    result_limit: stop after this many matching files were reported.
    max_files_scanned: bound on the files taken from a scanned directory.
    instrument_filter: optional instrument token (see InstrumentFilter).
    proposal / year: override the proposal lookup when no paths are given.
    scan_order: truncation policy for directory scans ("name" or "mtime").
    """
    result_limit: int = DEFAULT_RESULT_LIMIT
    max_files_scanned: int = DEFAULT_MAX_FILES_SCANNED
    instrument_filter: Optional[str] = None
    proposal: Optional[str] = None
    year: Optional[int] = None
    scan_order: ScanOrder = "name"


@dataclass
class InspectionPipeline:
    """
    Resolve inputs, inspect files in order and report matches.

    Input resolution:
      - no paths: the raw folder of the given or the active proposal (directory mode)
      - a single existing directory: directory mode
      - anything else: the paths as given, not bounded by max_files_scanned
    """
    options: PipelineOptions = field(default_factory=PipelineOptions)
    locator: ProposalLocator = field(default_factory=ProposalLocator)
    inspector: NexusInspector = field(default_factory=NexusInspector)
    instrument_filter: InstrumentFilter = field(default_factory=InstrumentFilter)

    def resolve_inputs(self, paths: Sequence[str | Path]) -> Tuple[List[Path], str]:
        """Return (paths, mode). Raises NotFoundError when no proposal can be located."""
        input_paths = [Path(p) for p in paths]
        if not input_paths:
            opts = self.options
            proposal = opts.proposal
            if proposal is None:
                proposal = self.locator.find_active_proposal(opts.year)
            raw = self.locator.raw_dir(proposal, opts.year)
            logger.info("Using raw folder of proposal %s: %s", proposal, raw)
            return [raw], "directory"
        if len(input_paths) == 1 and input_paths[0].is_dir():
            return input_paths, "directory"
        return input_paths, "files"

    def candidate_files(self, paths: Sequence[str | Path]) -> Tuple[List[Path], str]:
        resolved, mode = self.resolve_inputs(paths)
        if mode == "directory":
            opts = self.options
            return list_bounded_files(resolved[0], opts.max_files_scanned, opts.scan_order), mode
        return resolved, mode

    def run(self, paths: Sequence[str | Path] = (), on_outcome: Optional[OutcomeCallback] = None) -> InspectionReport:
        """
        Inspect candidates until ``result_limit`` matches were reported.

        Failures are reported but not counted. Records whose instrument does not
        match the filter are dropped without being reported.
        """
        opts = self.options
        if opts.result_limit < 0:
            raise ValueError(f"result_limit must be >= 0, got {opts.result_limit}")

        candidates, mode = self.candidate_files(paths)
        reported: List[InspectionOutcome] = []
        attempted: List[Path] = []
        n_matched = 0

        for path in candidates:
            if n_matched >= opts.result_limit:
                break
            attempted.append(path)
            outcome = self.inspector.try_inspect(path)
            if outcome.ok:
                if not self.instrument_filter.matches(outcome.record.instrument, opts.instrument_filter):
                    continue
                n_matched += 1
            else:
                logger.debug("%s: %s", path, outcome.error)
            reported.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)

        return InspectionReport(outcomes=tuple(reported), attempted=tuple(attempted), mode=mode)
