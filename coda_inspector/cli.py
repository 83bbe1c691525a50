from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from coda_inspector.analysis.pipeline import InspectionPipeline, PipelineOptions
from coda_inspector.analysis.report import format_outcome, outcomes_to_frame
from coda_inspector.config import DEFAULT_DATA_ROOT, DEFAULT_MAX_FILES_SCANNED, DEFAULT_RESULT_LIMIT
from coda_inspector.errors import NotFoundError
from coda_inspector.ingest.discovery import ProposalLocator
from coda_inspector.models.records import InspectionOutcome

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="coda-inspector",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Show the instrument and timing metadata of NeXus files written to CODA storage.

            Without paths, the raw folder of the most recently active proposal of the
            year is scanned (<data-root>/<year>/<proposal>/raw).
            """
        ),
    )
    p.add_argument("paths", nargs="*", help="Files to inspect, or a single folder of files")
    p.add_argument("-n", "--limit", type=int, default=DEFAULT_RESULT_LIMIT,
                   help="Maximum number of matching files to report (default: %(default)s)")
    p.add_argument("--max-files", type=int, default=DEFAULT_MAX_FILES_SCANNED,
                   help="Maximum number of files taken from a folder (default: %(default)s)")
    p.add_argument("-i", "--instrument", default=None,
                   help="Only report files from this instrument (case-insensitive, aliases such as 'tbl' allowed)")
    p.add_argument("--proposal", default=None, help="Proposal number to scan instead of the active one")
    p.add_argument("--year", type=int, default=None, help="Year of the proposal (default: current year)")
    p.add_argument("--data-root", default=str(DEFAULT_DATA_ROOT),
                   help="Root of the CODA data tree (default: %(default)s)")
    p.add_argument("--sort", choices=("name", "mtime"), default="name",
                   help="Which files of a folder count as the latest: by file name or by modification time")
    p.add_argument("--csv", default=None, help="Also write a summary table of reported files to this CSV path")
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="Show timestamps and sizes; repeat for debug logging")

    ns = p.parse_args(list(argv) if argv is not None else None)

    if ns.limit < 0:
        p.error("--limit must be >= 0")
    if ns.max_files < 0:
        p.error("--max-files must be >= 0")

    logging.basicConfig(
        level=logging.DEBUG if ns.verbose >= 2 else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    options = PipelineOptions(
        result_limit=ns.limit,
        max_files_scanned=ns.max_files,
        instrument_filter=ns.instrument,
        proposal=ns.proposal,
        year=ns.year,
        scan_order=ns.sort,
    )
    pipeline = InspectionPipeline(options=options, locator=ProposalLocator(data_root=Path(ns.data_root)))

    def emit(outcome: InspectionOutcome) -> None:
        lines = format_outcome(outcome, verbose=ns.verbose >= 1)
        print(lines[0])
        stream = sys.stdout if outcome.ok else sys.stderr
        for line in lines[1:]:
            print(line, file=stream)

    try:
        report = pipeline.run(ns.paths, on_outcome=emit)
    except NotFoundError as e:
        print(f"Failed to find a CODA proposal directory: {e}.", file=sys.stderr)
        print("Unable to deduce paths to CODA data. Please provide a path or list of files.", file=sys.stderr)
        return 1

    if not report.attempted:
        logger.warning("No files to inspect.")

    if ns.csv:
        outcomes_to_frame(report.outcomes).to_csv(ns.csv, index=False)
        print(f"[info] wrote summary: {ns.csv}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
