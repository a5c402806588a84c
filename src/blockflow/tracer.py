"""
Debug tracing infrastructure for blockflow.

This module provides data structures for capturing detailed traces of the
layout pipeline. When debug mode is enabled, the generator records a snapshot
of every pipeline stage, and a TracedSurface records every draw call issued
while painting.

This is primarily useful for:
1. Debugging layout issues (why a block landed in a given row)
2. Understanding the pipeline flow (seeing intermediate states)
3. Writing targeted tests (verifying specific drawing decisions)

Usage:
    >>> generator = DiagramGenerator()
    >>> diagram = generator.layout(graph, debug=True)
    >>> trace = generator.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("layout_trace.txt")
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class DrawCall:
    """
    Record of a single call made on a drawing surface.

    Attributes:
        method: Surface method name (e.g. "draw_cubic_curve")
        args: Positional arguments of the call
        source: What part of the diagram the call draws (e.g. "edge 3")
    """

    method: str
    args: Tuple[Any, ...]
    source: str = ""

    def __str__(self) -> str:
        return f"{self.method} [{self.source}]"


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    The layout pipeline has four stages:
    1. layering - Assign blocks to rows and collect edges
    2. sizing - Compute box sizes
    3. placement - Compute box rectangles
    4. routing - Compute edge curves and arrowheads

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class LayoutTrace:
    """
    Complete trace of a layout (and optionally paint) operation.

    Attributes:
        label: Label of the diagram being traced
        stages: List of pipeline stages with their data
        draw_calls: List of all recorded draw calls
    """

    label: str = ""
    stages: List[PipelineStage] = field(default_factory=list)
    draw_calls: List[DrawCall] = field(default_factory=list)

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """Add a pipeline stage snapshot."""
        self.stages.append(PipelineStage(name, data.copy()))

    def add_draw_call(self, method: str, args: Tuple[Any, ...], source: str) -> None:
        """Record a draw call."""
        self.draw_calls.append(DrawCall(method, args, source))

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def get_draw_calls(self, method: str) -> List[DrawCall]:
        """Get all draw calls of one surface method."""
        return [call for call in self.draw_calls if call.method == method]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with the pipeline stages and draw call counts.
        """
        lines = [
            "=" * 60,
            "LAYOUT TRACE SUMMARY",
            "=" * 60,
            "",
            f"Diagram: {self.label or '(unnamed)'}",
            f"Pipeline stages: {len(self.stages)}",
        ]
        for stage in self.stages:
            lines.append(f"  {stage.name}")

        lines.extend(["", f"Total draw calls: {len(self.draw_calls)}"])

        method_counts: Dict[str, int] = {}
        for call in self.draw_calls:
            method_counts[call.method] = method_counts.get(call.method, 0) + 1
        for method, count in sorted(method_counts.items(), key=lambda x: -x[1]):
            lines.append(f"  {method}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """Generate a complete human-readable dump of the trace."""
        lines = [self.summary(), "", "PIPELINE STAGES:", "-" * 40]
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")

        lines.append("DRAW CALLS:")
        lines.append("-" * 40)
        for call in self.draw_calls:
            lines.append(str(call))

        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
