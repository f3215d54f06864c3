"""
Per-layer diagnostics for the forward pass.

The forward-pass driver reports one `LayerReport` per applied layer to an
injected sink instead of printing. A sink is any callable accepting a
`LayerReport`; this module provides a few ready-made ones:

- `null_sink`: discard everything
- `CollectingSink`: keep reports in a list (tests, inspection tooling)
- `logging_sink`: forward formatted rows to a `logging.Logger`

Rendering is a pure function (`format_layer_row`), so tooling can reuse it
without running a network.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerReport:
    """
    Static description of one applied layer.

    Attributes
    ----------
    name : str
        Layer identifier.
    output_shape : Tuple[int, ...]
        Shape produced by the layer.
    num_params : int
        Learnable scalar parameters owned by the layer.
    num_muls : int
        Multiplications performed by one application.
    """

    name: str
    output_shape: Tuple[int, ...]
    num_params: int
    num_muls: int


DiagnosticsSink = Callable[[LayerReport], None]


def format_shape(shape: Tuple[int, ...]) -> str:
    return "[" + ", ".join(str(int(d)) for d in shape) + "]"


def format_layer_row(report: LayerReport) -> str:
    """
    Render a report as a fixed-width inspection row.

    Format: ``name (20 chars) | output shape | params | muls``.

    Parameters
    ----------
    report : LayerReport
        Report to render.

    Returns
    -------
    str
        Single-line row without a trailing newline.
    """
    return (
        f"{report.name:<20} | {format_shape(report.output_shape)}{'':<5} "
        f"| {report.num_params:<5} | {report.num_muls:<5}"
    )


def null_sink(report: LayerReport) -> None:
    _ = report


class CollectingSink:
    """
    Sink that stores every report it receives, in arrival order.
    """

    def __init__(self) -> None:
        self.reports: List[LayerReport] = []

    def __call__(self, report: LayerReport) -> None:
        self.reports.append(report)

    def __len__(self) -> int:
        return len(self.reports)

    def __iter__(self) -> Iterator[LayerReport]:
        return iter(self.reports)

    def rows(self) -> List[str]:
        """Return the collected reports rendered with `format_layer_row`."""
        return [format_layer_row(r) for r in self.reports]

    def total_muls(self) -> int:
        return sum(r.num_muls for r in self.reports)

    def clear(self) -> None:
        self.reports.clear()


def logging_sink(
    log: Optional[logging.Logger] = None, level: int = logging.INFO
) -> DiagnosticsSink:
    """
    Build a sink that logs each report as a formatted row.

    Parameters
    ----------
    log : Optional[logging.Logger], optional
        Destination logger. Defaults to this module's logger.
    level : int, optional
        Logging level used for every row. Default is `logging.INFO`.

    Returns
    -------
    DiagnosticsSink
        Callable suitable for `Network(sink=...)` or `Network.apply(sink=...)`.
    """
    target = log if log is not None else logger

    def _sink(report: LayerReport) -> None:
        target.log(level, "%s", format_layer_row(report))

    return _sink
