"""
End-to-end payment table workflow tests.

Covers the full path: resolve parameters (file or environment), validate,
tabulate, summarize and report.
"""

import json

import numpy as np
import pandas as pd
import pytest

from structured_notes.config.settings import PARAMS_PATH_ENV_VAR
from structured_notes.data.loader import load_parameters, resolve_parameters
from structured_notes.errors import InvalidParameterError
from structured_notes.payoffs.note import NotePayoff
from structured_notes.reporting import PaymentTableReporter
from structured_notes.table import (
    generate_payment_table,
    rows_as_pairs,
    summarize_table,
    table_to_dataframe,
)
from structured_notes.validation.gates import GateStatus, run_parameter_gates, validate_parameters


# =============================================================================
# Default Workflow
# =============================================================================

class TestDefaultWorkflow:
    """Default term sheet from resolve to report."""

    def test_resolve_validate_tabulate(self, monkeypatch):
        monkeypatch.delenv(PARAMS_PATH_ENV_VAR, raising=False)

        params = resolve_parameters()
        assert validate_parameters(params)

        rows = generate_payment_table(params=params)
        summary = summarize_table(rows, params)

        assert summary.n_rows == 14
        assert summary.n_protected == 7
        assert summary.n_downside == 7
        assert summary.n_errors == 0

    def test_table_agrees_with_vectorized(self, default_params, sample_returns):
        """Rows must match the vectorized payoff over the same inputs."""
        rows = generate_payment_table(sample_returns, default_params)
        vectorized = NotePayoff(default_params).calculate_vectorized(np.array(sample_returns))

        np.testing.assert_array_equal(
            np.array([row.payment_at_maturity for row in rows]),
            vectorized,
        )

    def test_all_formats_render(self, default_params):
        rows = generate_payment_table(params=default_params)
        reporter = PaymentTableReporter(default_params)

        for fmt in ("console", "markdown", "json", "csv"):
            assert reporter.render(rows, fmt)


# =============================================================================
# Override Workflow
# =============================================================================

class TestOverrideWorkflow:
    """Parameter override files flowing through the pipeline."""

    def test_deep_buffer_file(self, write_params_file, tolerances):
        path = write_params_file(
            {
                "principal_amount": 10000.0,
                "buffer_threshold": 0.80,
                "buffer_amount": 0.20,
                "contingent_interest_payment": 75.0,
            }
        )
        params = load_parameters(path)
        rows = generate_payment_table([0.0, -0.15, -0.30, -1.0], params)

        payments = [row.payment_at_maturity for row in rows]
        assert payments[0] == 10_075.0
        assert payments[1] == 10_075.0
        assert payments[2] == pytest.approx(9_000.0, abs=tolerances.payment * 10)
        assert payments[3] == pytest.approx(2_000.0, abs=tolerances.payment * 10)

    def test_env_var_override(self, write_params_file, monkeypatch):
        path = write_params_file({"CONTINGENT_INTEREST_PAYMENT": 20.0})
        monkeypatch.setenv(PARAMS_PATH_ENV_VAR, str(path))

        params = resolve_parameters()
        rows = generate_payment_table([0.0], params)

        assert rows[0].payment_label == "$1020.0000"

    def test_invalid_override_halts_before_table(self, write_params_file):
        path = write_params_file({"buffer_threshold": 1.5})
        params = load_parameters(path)

        report = run_parameter_gates(params)
        assert report.overall_status == GateStatus.HALT

        with pytest.raises(InvalidParameterError, match="between 0 and 1"):
            generate_payment_table(params=params)

    def test_inconsistent_buffer_warns_but_tabulates(self, write_params_file, caplog):
        path = write_params_file({"buffer_amount": 0.05})
        params = load_parameters(path)

        rows = generate_payment_table([-0.20], params)

        assert rows[0].payment_at_maturity == pytest.approx(850.0)
        assert any("buffer_consistency" in r.message for r in caplog.records)


# =============================================================================
# Report Artifacts
# =============================================================================

class TestReportArtifacts:
    """Saved reports are readable by downstream tools."""

    def test_json_report_round_trips(self, default_params, tmp_path):
        rows = generate_payment_table(params=default_params)
        path = PaymentTableReporter(default_params).save(rows, tmp_path / "t.json", "json")

        data = json.loads(path.read_text())

        assert data["summary"]["n_protected"] == 7
        assert [r["underlying_return_percent"] for r in data["rows"]][:2] == [
            "60.00%",
            "40.00%",
        ]

    def test_csv_report_matches_dataframe(self, default_params, tmp_path):
        rows = generate_payment_table(params=default_params)
        path = PaymentTableReporter(default_params).save(rows, tmp_path / "t.csv", "csv")

        loaded = pd.read_csv(path)
        expected = table_to_dataframe(rows)

        assert list(loaded.columns) == list(expected.columns)
        np.testing.assert_allclose(
            loaded["payment_at_maturity"].to_numpy(),
            expected["payment_at_maturity"].to_numpy(dtype=float),
        )


# =============================================================================
# Parallel Execution
# =============================================================================

@pytest.mark.slow
class TestParallelWorkflow:
    """Process-pool tabulation must match the sequential result."""

    def test_parallel_matches_sequential(self, default_params, sample_returns):
        sequential = generate_payment_table(sample_returns, default_params)
        parallel = generate_payment_table(
            sample_returns, default_params, parallel=True, n_workers=2
        )

        assert parallel == sequential

    def test_parallel_preserves_error_rows(self, default_params):
        returns = [0.1, "bad", -0.2]

        rows = generate_payment_table(returns, default_params, parallel=True, n_workers=2)

        assert rows_as_pairs(rows)[0] == ("10.00%", "$1010.1667")
        assert rows[1].is_error
        assert rows[1].payment_label == "ERROR"
        assert rows[2].payment_at_maturity == pytest.approx(900.0)
