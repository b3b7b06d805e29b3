"""Summary cards and data preview for the analysis page."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

from csv_insight.analysis.statistics import (
    ColumnSummary,
    NumericSummary,
    format_stat,
)
from csv_insight.core.dataset import Dataset


class SortOrder(str, Enum):
    """Card ordering modes."""

    DEFAULT = "default"
    TYPE = "type"


@dataclass(frozen=True)
class SummaryCard:
    """One column's statistics as display-ready label/value pairs."""

    column: str
    data_type: str
    items: tuple[tuple[str, str], ...]
    top_values: tuple[tuple[str, int], ...] = field(default_factory=tuple)

    @property
    def is_numeric(self) -> bool:
        return self.data_type == "Numeric"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "column": self.column,
            "dataType": self.data_type,
            "items": [{"label": k, "value": v} for k, v in self.items],
            "topValues": [{"value": v, "count": c} for v, c in self.top_values],
        }


def order_columns(
    summaries: Mapping[str, ColumnSummary],
    headers: Sequence[str],
    sort_order: SortOrder | str = SortOrder.DEFAULT,
) -> list[str]:
    """Order columns for display.

    DEFAULT keeps header order. TYPE puts numeric columns first; each group
    keeps header order.
    """
    columns = [h for h in headers if h in summaries]
    if SortOrder(sort_order) == SortOrder.TYPE:
        numeric = [c for c in columns if summaries[c].is_numeric]
        text = [c for c in columns if not summaries[c].is_numeric]
        return numeric + text
    return columns


def build_card(summary: ColumnSummary) -> SummaryCard:
    items = [
        ("Total Count", str(summary.count)),
        ("Null Values", str(summary.null_count)),
    ]

    if isinstance(summary, NumericSummary):
        items += [
            ("Mean", format_stat(summary.mean)),
            ("Median", format_stat(summary.median)),
            ("Standard Deviation", format_stat(summary.std_dev)),
            ("Min", format_stat(summary.min)),
            ("Max", format_stat(summary.max)),
        ]
        return SummaryCard(summary.column, "Numeric", tuple(items))

    items.append(("Unique Values", str(summary.unique_count)))
    return SummaryCard(
        summary.column,
        "Text",
        tuple(items),
        top_values=tuple((tv.value, tv.count) for tv in summary.top_values),
    )


def build_cards(
    summaries: Mapping[str, ColumnSummary],
    headers: Sequence[str],
    sort_order: SortOrder | str = SortOrder.DEFAULT,
) -> list[SummaryCard]:
    """Project column summaries into cards in the requested order."""
    return [build_card(summaries[c]) for c in order_columns(summaries, headers, sort_order)]


def render_cards_html(cards: Sequence[SummaryCard]) -> str:
    """Render cards as an HTML fragment."""
    parts = []
    for card in cards:
        badge = "numeric-badge" if card.is_numeric else "text-badge"
        items = "".join(
            f"<li>{html.escape(label)}: {html.escape(value)}</li>"
            for label, value in card.items
        )
        if card.top_values:
            entries = "".join(
                f'<div class="top-value-item"><span>{html.escape(value)}</span>'
                f"<span>{count} times</span></div>"
                for value, count in card.top_values
            )
            items += (
                f'<li class="top-values">Top Values:'
                f'<div class="top-values-list">{entries}</div></li>'
            )
        parts.append(
            '<div class="stat-card">'
            f'<div class="stat-card-header"><h4>{html.escape(card.column)}</h4>'
            f'<span class="data-type-badge {badge}">{card.data_type}</span></div>'
            f'<div class="stat-card-content"><ul class="list-unstyled">{items}</ul></div>'
            "</div>"
        )
    return "\n".join(parts)


def render_preview_html(dataset: Dataset, n_rows: int | None = None) -> str:
    """Render the first rows of the dataset as an HTML table."""
    head = "".join(f"<th>{html.escape(h)}</th>" for h in dataset.headers)
    body = "".join(
        "<tr>"
        + "".join(
            f"<td>{html.escape('' if row.get(h) is None else str(row.get(h)))}</td>"
            for h in dataset.headers
        )
        + "</tr>"
        for row in dataset.preview(n_rows)
    )
    return (
        '<table class="table table-striped" id="dataPreview">'
        f"<thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"
    )
