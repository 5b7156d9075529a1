"""Output formatting for canvas inspections and job results."""

import json
from dataclasses import dataclass, field
from typing import Literal

from ..generation.controller import JobResult


@dataclass
class NodeReport:
    """What the CLI knows about one generation node before running it."""

    name: str
    kind: str
    model: str
    prompt: str
    inputs: list[str] = field(default_factory=list)
    problem: str | None = None

    @property
    def ready(self) -> bool:
        return self.problem is None


def format_inspection(
    media: list[str],
    reports: list[NodeReport],
    format: Literal["text", "json"] = "text",
) -> str:
    """Format the result of inspecting a recipe.

    Args:
        media: Names of the media entries.
        reports: One report per generation node.
        format: Output format ("text" or "json").

    Returns:
        Formatted string representation.
    """
    if format == "json":
        data = {
            "media": media,
            "nodes": [
                {
                    "name": r.name,
                    "kind": r.kind,
                    "model": r.model,
                    "prompt": r.prompt,
                    "inputs": r.inputs,
                    "ready": r.ready,
                    "problem": r.problem,
                }
                for r in reports
            ],
        }
        return json.dumps(data, indent=2)

    lines: list[str] = ["MEDIA:"]
    if media:
        lines.extend(f"  {name}" for name in media)
    else:
        lines.append("  (none)")

    lines.append("")
    lines.append("NODES:")
    if not reports:
        lines.append("  (none)")
    for report in reports:
        symbol = "✔" if report.ready else "✘"
        lines.append(f"  {symbol} {report.name} [{report.kind}] {report.model}")
        inputs = ", ".join(report.inputs) if report.inputs else "(no inputs)"
        lines.append(f"      inputs: {inputs}")
        if report.problem:
            lines.append(f"      problem: {report.problem}")

    ready = sum(1 for r in reports if r.ready)
    lines.append("")
    lines.append(f"{ready} of {len(reports)} node(s) ready to generate")
    return "\n".join(lines)


def format_job_results(
    results: list[tuple[str, JobResult]],
    format: Literal["text", "json"] = "text",
) -> str:
    """Format generation job outcomes keyed by node name."""
    if format == "json":
        data = {
            "succeeded": sum(1 for _, r in results if r.succeeded),
            "failed": sum(1 for _, r in results if not r.succeeded),
            "jobs": [
                {
                    "name": name,
                    "state": result.state.value,
                    "output_url": result.output_url,
                    "error": result.error,
                }
                for name, result in results
            ],
        }
        return json.dumps(data, indent=2)

    lines: list[str] = []
    for name, result in results:
        if result.succeeded:
            lines.append(f"✔ {name}: {result.output_url}")
        else:
            lines.append(f"✘ {name}: {result.error}")

    failed = sum(1 for _, r in results if not r.succeeded)
    lines.append("")
    if failed:
        lines.append(f"Generation failed: {failed} of {len(results)} job(s)")
    else:
        lines.append(f"Generated {len(results)} video(s)")
    return "\n".join(lines)
