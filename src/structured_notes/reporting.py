"""
Payment Table Reporting.

Renders a computed payment table for people (console, Markdown) and for
machines (JSON, CSV). Document exports (docx, HTML) are downstream
consumers of these outputs and are not generated here.

Design Principles:
- **Read-only**: reporters never recompute payments, they format rows
- **Multi Format**: console and Markdown for humans, JSON and CSV for tools
- **Analysis**: short summary of threshold, coupon and protected scenarios
"""

import json
import numbers
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

from structured_notes.data.schemas import (
    DEFAULT_PARAMETERS,
    FinancialParameters,
    PaymentRow,
)
from structured_notes.table import TableSummary, summarize_table, table_to_dataframe


# =============================================================================
# Report Configuration
# =============================================================================


@dataclass
class ReportConfig:
    """
    Configuration for report generation.

    Attributes
    ----------
    title : str
        Report title
    include_analysis : bool
        Include the analysis section
    include_advisories : bool
        List advisories raised while computing rows
    label_width : int
        Width the return label is padded to in console output
    rule_width : int
        Width of the console separator rules
    """

    title: str = "Structured Notes Payment Table"
    include_analysis: bool = True
    include_advisories: bool = True
    label_width: int = 15
    rule_width: int = 48


# =============================================================================
# Reporter
# =============================================================================


class PaymentTableReporter:
    """
    Generates payment table reports.

    Examples
    --------
    >>> from structured_notes.table import generate_payment_table
    >>> rows = generate_payment_table()
    >>> reporter = PaymentTableReporter()
    >>> print(reporter.to_console(rows))
    """

    def __init__(
        self,
        params: FinancialParameters = DEFAULT_PARAMETERS,
        config: ReportConfig | None = None,
    ):
        """
        Initialize reporter.

        Parameters
        ----------
        params : FinancialParameters
            Parameters the table was computed with
        config : ReportConfig, optional
            Report configuration. If None, uses defaults.
        """
        self.params = params
        self.config = config or ReportConfig()

    @property
    def _rate_label(self) -> str:
        return f"{self.params.contingent_interest_rate * 100:.2f}%"

    def generate_analysis(
        self,
        rows: Sequence[PaymentRow],
        summary: TableSummary | None = None,
    ) -> list[str]:
        """
        Generate the analysis bullet lines.

        Parameters
        ----------
        rows : Sequence[PaymentRow]
            Computed table
        summary : TableSummary, optional
            Precomputed summary

        Returns
        -------
        list[str]
            One line per finding, without bullet markers
        """
        if summary is None:
            summary = summarize_table(rows, self.params)

        lines = [
            f"Buffer Threshold: {self.params.buffer_threshold * 100:.2f}%",
            f"Contingent Interest Rate: {self._rate_label} per annum",
            f"Monthly Interest Payment: ${self.params.contingent_interest_payment}",
            f"{summary.n_protected} out of {summary.n_rows} scenarios provide "
            f"full protection with interest",
        ]
        if summary.n_errors:
            lines.append(f"{summary.n_errors} scenarios could not be computed")
        return lines

    def _advisories(self, rows: Sequence[PaymentRow]) -> list[str]:
        return [f"{row.return_label}: {row.advisory}" for row in rows if row.advisory]

    def to_console(self, rows: Sequence[PaymentRow]) -> str:
        """
        Render the table as tab-aligned console text.

        Parameters
        ----------
        rows : Sequence[PaymentRow]
            Computed table

        Returns
        -------
        str
            Console table, followed by the analysis if enabled
        """
        rule = "=" * self.config.rule_width
        pad = " " * (self.config.label_width + 1)

        lines = [
            "",
            f"=== {self.config.title.upper()} ===",
            "Underlying Return\t\tPayment at Maturity",
            f"{pad}\t\t(assuming {self._rate_label} per annum",
            f"{pad}\t\tContingent Interest Rate)",
            rule,
        ]

        for row in rows:
            lines.append(
                f"{row.return_label.ljust(self.config.label_width)}\t\t{row.payment_label}"
            )

        lines.append(rule)
        lines.append("")

        if self.config.include_analysis:
            lines.append("ANALYSIS:")
            lines.extend(f"- {line}" for line in self.generate_analysis(rows))

        if self.config.include_advisories:
            advisories = self._advisories(rows)
            if advisories:
                lines.append("")
                lines.append("ADVISORIES:")
                lines.extend(f"- {a}" for a in advisories)

        return "\n".join(lines)

    def _format_payment_table(self, rows: Sequence[PaymentRow]) -> str:
        """Format rows as Markdown table."""
        lines = [
            "| Underlying Return | Payment at Maturity |",
            "|-------------------|---------------------|",
        ]
        for row in rows:
            lines.append(f"| {row.return_label} | {row.payment_label} |")
        return "\n".join(lines)

    def _format_parameters(self) -> str:
        """Format the parameter set as Markdown table."""
        lines = [
            "| Parameter | Value |",
            "|-----------|-------|",
        ]
        for name, value in self.params.to_dict().items():
            lines.append(f"| {name} | {value} |")
        return "\n".join(lines)

    def to_markdown(
        self,
        rows: Sequence[PaymentRow],
        title: str | None = None,
    ) -> str:
        """
        Generate complete Markdown report.

        Parameters
        ----------
        rows : Sequence[PaymentRow]
            Computed table
        title : str, optional
            Override report title

        Returns
        -------
        str
            Complete Markdown report
        """
        report_title = title or self.config.title
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        sections = [
            f"# {report_title}",
            "",
            f"**Generated**: {timestamp}",
            f"**Contingent Interest Rate**: {self._rate_label} per annum",
            "",
            "## Payment at Maturity",
            "",
            self._format_payment_table(rows),
            "",
            "## Parameters",
            "",
            self._format_parameters(),
            "",
        ]

        if self.config.include_analysis:
            sections.append("## Analysis")
            sections.append("")
            sections.extend(f"- {line}" for line in self.generate_analysis(rows))
            sections.append("")

        if self.config.include_advisories:
            advisories = self._advisories(rows)
            if advisories:
                sections.append("## Advisories")
                sections.append("")
                sections.extend(f"- {a}" for a in advisories)
                sections.append("")

        errors = [row for row in rows if row.is_error]
        if errors:
            sections.append("## Errors")
            sections.append("")
            for row in errors:
                sections.append(f"- **{row.return_label}**: {row.error}")
            sections.append("")

        return "\n".join(sections)

    def _row_to_dict(self, row: PaymentRow) -> dict[str, Any]:
        """Convert PaymentRow to JSON-serializable dict."""
        underlying = row.underlying_return
        if isinstance(underlying, numbers.Real) and not isinstance(underlying, bool):
            underlying = float(underlying)
        else:
            underlying = repr(underlying)
        return {
            "underlying_return": underlying,
            "underlying_return_percent": row.return_label,
            "payment_at_maturity": row.payment_at_maturity,
            "payment_formatted": row.payment_label,
            "protected": row.protected,
            "error": row.error,
            "advisory": row.advisory,
        }

    def _summary_to_dict(self, s: TableSummary) -> dict[str, Any]:
        """Convert TableSummary to JSON-serializable dict."""
        return {
            "n_rows": s.n_rows,
            "n_protected": s.n_protected,
            "n_downside": s.n_downside,
            "n_errors": s.n_errors,
            "n_advisories": s.n_advisories,
        }

    def to_dict(self, rows: Sequence[PaymentRow]) -> dict[str, Any]:
        """Convert the report to a JSON-serializable dict."""
        return {
            "title": self.config.title,
            "generated_at": datetime.now().isoformat(),
            "parameters": self.params.to_dict(),
            "summary": self._summary_to_dict(summarize_table(rows, self.params)),
            "rows": [self._row_to_dict(row) for row in rows],
        }

    def to_json(self, rows: Sequence[PaymentRow], indent: int = 2) -> str:
        """
        Generate JSON report.

        Parameters
        ----------
        rows : Sequence[PaymentRow]
            Computed table
        indent : int
            JSON indentation

        Returns
        -------
        str
            JSON string
        """
        return json.dumps(self.to_dict(rows), indent=indent)

    def to_csv(self, rows: Sequence[PaymentRow]) -> str:
        """Generate CSV of the table (one line per row, header included)."""
        return table_to_dataframe(rows).to_csv(index=False)

    def render(self, rows: Sequence[PaymentRow], fmt: str = "console") -> str:
        """
        Render in the named format.

        Parameters
        ----------
        rows : Sequence[PaymentRow]
            Computed table
        fmt : str
            'console', 'markdown', 'json', or 'csv'

        Returns
        -------
        str
            Rendered report

        Raises
        ------
        ValueError
            If fmt is not a known format
        """
        renderers = {
            "console": self.to_console,
            "markdown": self.to_markdown,
            "json": self.to_json,
            "csv": self.to_csv,
        }
        fmt = fmt.lower()
        if fmt not in renderers:
            raise ValueError(
                f"CRITICAL: Unknown report format '{fmt}'. "
                f"Valid formats: {', '.join(renderers)}"
            )
        return renderers[fmt](rows)

    def save(
        self,
        rows: Sequence[PaymentRow],
        path: Path | str,
        fmt: str = "console",
    ) -> Path:
        """
        Render and write the report to a file.

        Returns
        -------
        Path
            Path written
        """
        path = Path(path)
        path.write_text(self.render(rows, fmt))
        return path


# =============================================================================
# Convenience Functions
# =============================================================================


def display_payment_table(
    rows: Sequence[PaymentRow],
    params: FinancialParameters = DEFAULT_PARAMETERS,
) -> str:
    """
    Render the console table for rows computed with params.

    Examples
    --------
    >>> from structured_notes.table import generate_payment_table
    >>> print(display_payment_table(generate_payment_table()))
    """
    return PaymentTableReporter(params).to_console(rows)
