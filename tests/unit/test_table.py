"""
Tests for the payment table generator.

Rows must preserve input order, and a failure computing one row must be
isolated to that row.
"""

import logging

import numpy as np
import pandas as pd
import pytest

from structured_notes.data.schemas import FinancialParameters, PaymentResult, PaymentRow
from structured_notes.errors import InvalidParameterError
from structured_notes.payoffs.note import calculate_payment
from structured_notes.table import (
    DEFAULT_SAMPLE_RETURNS,
    build_row,
    format_payment_label,
    format_return_label,
    generate_payment_table,
    rows_as_pairs,
    summarize_table,
    table_to_dataframe,
)

REFERENCE_TABLE = [
    ("60.00%", "$1010.1667"),
    ("40.00%", "$1010.1667"),
    ("20.00%", "$1010.1667"),
    ("5.00%", "$1010.1667"),
    ("0.00%", "$1010.1667"),
    ("-5.00%", "$1010.1667"),
    ("-10.00%", "$1010.1667"),
    ("-10.01%", "$999.9000"),
    ("-20.00%", "$900.0000"),
    ("-30.00%", "$800.0000"),
    ("-40.00%", "$700.0000"),
    ("-60.00%", "$500.0000"),
    ("-80.00%", "$300.0000"),
    ("-100.00%", "$100.0000"),
]


def _fail_on_minus_twenty(underlying_return, params):
    """Calculator that fails for exactly one return."""
    if underlying_return == -0.20:
        raise RuntimeError("forced failure")
    return calculate_payment(underlying_return, params)


class TestLabels:
    """Tests for label formatting."""

    @pytest.mark.parametrize(
        "value, expected",
        [(0.60, "60.00%"), (0.0, "0.00%"), (-0.1001, "-10.01%"), (-1.0, "-100.00%")],
    )
    def test_return_label(self, value, expected):
        assert format_return_label(value) == expected

    def test_return_label_non_numeric(self):
        assert format_return_label("abc") == "abc"
        assert format_return_label(None) == "None"

    def test_payment_label(self):
        assert format_payment_label(999.9000000000001) == "$999.9000"
        assert format_payment_label(0.0) == "$0.0000"

    def test_custom_decimals(self):
        assert format_payment_label(1010.1667, decimals=2) == "$1010.17"
        assert format_return_label(-0.1001, decimals=1) == "-10.0%"


class TestGeneratePaymentTable:
    """Tests for generate_payment_table()."""

    def test_reference_table(self):
        """The default table reproduces the reference rendering."""
        rows = generate_payment_table()

        assert rows_as_pairs(rows) == REFERENCE_TABLE

    def test_default_sample_returns(self):
        assert len(DEFAULT_SAMPLE_RETURNS) == 14
        assert DEFAULT_SAMPLE_RETURNS[7] == -0.1001

    def test_preserves_input_order(self, default_params):
        returns = [-0.5, 0.3, -0.95, 0.0, -0.2]

        rows = generate_payment_table(returns, default_params)

        assert [row.underlying_return for row in rows] == returns

    def test_isolates_forced_failure(self, default_params):
        """Exactly one row fails; every other row is computed."""
        rows = generate_payment_table(
            DEFAULT_SAMPLE_RETURNS, default_params, calculator=_fail_on_minus_twenty
        )

        errors = [row for row in rows if row.is_error]
        assert len(errors) == 1
        assert errors[0].underlying_return == -0.20
        assert errors[0].payment_label == "ERROR"
        assert errors[0].payment_at_maturity is None
        assert errors[0].return_label == "-20.00%"
        assert "forced failure" in errors[0].error

        ok = [row for row in rows if not row.is_error]
        assert len(ok) == 13
        assert rows[9].payment_label == "$800.0000"

    def test_non_numeric_return_becomes_error_row(self, default_params):
        rows = generate_payment_table([0.1, "bad", -0.2], default_params)

        assert [row.is_error for row in rows] == [False, True, False]
        assert rows[1].return_label == "bad"
        assert "must be a number" in rows[1].error

    def test_failure_is_logged(self, default_params, caplog):
        with caplog.at_level(logging.WARNING, logger="structured_notes.table"):
            generate_payment_table([0.1, None], default_params)

        messages = [r.message for r in caplog.records]
        assert any("Error calculating payment for return None" in m for m in messages)
        assert any("1 of 2 rows failed" in m for m in messages)

    def test_invalid_parameters_raise_before_any_row(self):
        calls = []

        def recording_calculator(r, params):
            calls.append(r)
            return calculate_payment(r, params)

        with pytest.raises(InvalidParameterError):
            generate_payment_table(
                [0.1], FinancialParameters(buffer_threshold=1.5), recording_calculator
            )

        assert calls == []

    def test_advisory_carried_to_row(self, default_params):
        rows = generate_payment_table([-1.2], default_params)

        assert rows[0].advisory is not None
        assert not rows[0].is_error

    def test_float_returning_calculator(self, default_params):
        rows = generate_payment_table([0.1, 0.2], default_params, calculator=lambda r, p: r * 10)

        assert [row.payment_label for row in rows] == ["$1.0000", "$2.0000"]

    def test_empty_returns(self, default_params):
        assert generate_payment_table([], default_params) == []

    def test_numpy_array_input(self, default_params):
        rows = generate_payment_table(np.array([0.1, -0.5]), default_params)

        assert rows_as_pairs(rows) == [("10.00%", "$1010.1667"), ("-50.00%", "$600.0000")]


class TestBuildRow:
    """Tests for single-row construction."""

    def test_build_row_success(self, default_params):
        row = build_row(-0.30, default_params)

        assert row.payment_at_maturity == pytest.approx(800.0)
        assert row.error is None

    def test_build_row_catches_any_exception(self, default_params):
        def broken(r, params):
            raise ZeroDivisionError("division by zero")

        row = build_row(0.5, default_params, broken)

        assert row.is_error
        assert row.return_label == "50.00%"

    def test_non_finite_payment_becomes_error_row(self):
        """Unvalidated inf principal yields an ERROR row, not a NaN payment."""
        params = FinancialParameters(principal_amount=float("inf"))

        row = build_row(-0.50, params)

        assert row.is_error
        assert row.payment_label == "ERROR"
        assert row.payment_at_maturity is None


class TestSummaries:
    """Tests for summaries and conversions."""

    def test_reference_summary(self, default_params):
        summary = summarize_table(generate_payment_table(), default_params)

        assert summary.n_rows == 14
        assert summary.n_protected == 7
        assert summary.n_downside == 7
        assert summary.n_errors == 0
        assert summary.n_advisories == 0

    def test_summary_counts_errors(self, default_params):
        rows = generate_payment_table(
            DEFAULT_SAMPLE_RETURNS, default_params, calculator=_fail_on_minus_twenty
        )
        summary = summarize_table(rows, default_params)

        assert summary.n_errors == 1
        assert summary.n_downside == 6

    def test_summary_uses_branch_flag_not_payment_value(self, default_params):
        """A downside row that happens to pay principal + coupon is not protected."""
        coincidental = PaymentRow(
            underlying_return=-0.14,
            return_label="-14.00%",
            payment_at_maturity=default_params.protected_payment,
            payment_label="$1010.1667",
            protected=False,
        )
        rows = generate_payment_table([0.0], default_params) + [coincidental]

        summary = summarize_table(rows, default_params)

        assert summary.n_protected == 1
        assert summary.n_downside == 1

    def test_rows_carry_protected_flag(self, default_params):
        rows = generate_payment_table([-0.10, -0.1001, "bad"], default_params)

        assert [row.protected for row in rows] == [True, False, False]

    def test_float_calculator_classified_by_threshold(self, default_params):
        """Plain float calculators are classified by 1 + r >= threshold."""
        rows = generate_payment_table(
            [0.0, -0.5],
            default_params,
            calculator=lambda r, p: p.protected_payment,
        )

        assert [row.protected for row in rows] == [True, False]
        assert summarize_table(rows, default_params).n_protected == 1

    def test_dataframe_conversion(self):
        rows = generate_payment_table([0.1, "bad", -0.2])

        df = table_to_dataframe(rows)

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == [
            "underlying_return",
            "return_label",
            "payment_at_maturity",
            "payment_label",
            "protected",
            "error",
            "advisory",
        ]
        assert len(df) == 3
        assert pd.isna(df.loc[1, "payment_at_maturity"])
        assert df.loc[2, "payment_at_maturity"] == pytest.approx(900.0)

    def test_dataframe_empty(self):
        df = table_to_dataframe([])

        assert df.empty
        assert "payment_label" in df.columns
