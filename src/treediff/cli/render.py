"""Text and JSON rendering of a DiffReport."""

from __future__ import annotations

import json

from treediff.config.models import CompareConfig
from treediff.diff.models import DiffReport, DiffStatus
from treediff.git.models import RefSpec


def status_label(status: DiffStatus, config: CompareConfig) -> str:
    if status is DiffStatus.ONLY_IN_LEFT:
        return f"Only in {config.left_label}"
    if status is DiffStatus.ONLY_IN_RIGHT:
        return f"Only in {config.right_label}"
    return "Modified"


def render_text(report: DiffReport, left: RefSpec, right: RefSpec, config: CompareConfig) -> str:
    if report.is_empty:
        return f"No changes between {left} and {right}\n"

    lines = [f"Changes between {left} and {right}:"]
    for entry in report:
        lines.append(f"  {entry.path} -> {status_label(entry.status, config)}")
        if entry.patch:
            lines.append(f"--- {entry.path} ---")
            lines.append(entry.patch.rstrip("\n"))
    lines.append(f"Number of changed files: {report.count}")
    return "\n".join(lines) + "\n"


def render_json(report: DiffReport, left: RefSpec, right: RefSpec, config: CompareConfig) -> str:
    data = {
        "left": {"repo": str(left.repo_path), "ref": left.ref, "label": config.left_label},
        "right": {"repo": str(right.repo_path), "ref": right.ref, "label": config.right_label},
        **report.to_dict(),
    }
    return json.dumps(data, indent=2)
