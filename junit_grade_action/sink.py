"""Encode grading reports for the autograding result sink."""

import base64
import json
import logging
import sys
from pathlib import Path
from typing import Any

from junit_grade_action.models.report import GradingReport

log = logging.getLogger(__name__)

OUTPUT_NAME = "result"


def _b64encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _b64decode(blob: str) -> str:
    return base64.b64decode(blob.encode("ascii"), validate=True).decode("utf-8")


def report_payload(report: GradingReport) -> dict[str, Any]:
    """Build the wire payload, with the markdown body base64-encoded."""
    payload = report.model_dump(mode="json")
    payload["markdown"] = _b64encode(report.markdown)
    payload["tests"] = [
        test.model_dump(mode="json", exclude_none=True) for test in report.tests
    ]
    return payload


def encode_report(report: GradingReport) -> str:
    """Serialize a report to compact JSON, then base64 the whole document."""
    document = json.dumps(report_payload(report), separators=(",", ":"))
    return _b64encode(document)


def decode_report(blob: str) -> GradingReport:
    """Inverse of :func:`encode_report`."""
    payload = json.loads(_b64decode(blob))
    payload["markdown"] = _b64decode(payload["markdown"])
    return GradingReport.model_validate(payload)


def publish(blob: str, output_path: Path | None = None) -> None:
    """Hand the encoded report to the sink.

    With a GitHub Actions output file the blob is appended as the ``result``
    output, otherwise it is written to stdout.
    """
    line = f"{OUTPUT_NAME}={blob}\n"
    if output_path is None:
        sys.stdout.write(line)
        return

    with output_path.open("a", encoding="utf-8") as output:
        output.write(line)
    log.info("Wrote %s output to %s", OUTPUT_NAME, output_path)
