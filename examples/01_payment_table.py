#!/usr/bin/env python3
"""
Payment Table Demo - Buffered Contingent-Coupon Note.

This example tabulates the payment at maturity of a $1,000 note across a
range of underlying returns, then compares the reference term sheet with a
deeper 80% / 20% buffer.

Key Concepts:
- At or above the 90% threshold the holder receives principal + coupon
- Below it the holder takes the loss net of the 10% buffer
- The jump between -10.00% and -10.01% is part of the contract

Usage:
    python examples/01_payment_table.py                 # Reference table
    python examples/01_payment_table.py --compare       # Add 80% threshold note
    python examples/01_payment_table.py --save-report   # Write Markdown report
"""

import argparse
import sys

# Add src to path if running as script
sys.path.insert(0, "src")

import numpy as np

from structured_notes import (
    DEFAULT_PARAMETERS,
    FinancialParameters,
    NotePayoff,
    PaymentTableReporter,
    generate_payment_table,
    summarize_table,
)


def print_comparison(reference: FinancialParameters, alternative: FinancialParameters) -> None:
    """Print both notes side by side over a fine return grid."""
    grid = np.round(np.arange(0.20, -1.01, -0.10), 2)
    ref_payments = NotePayoff(reference).calculate_vectorized(grid)
    alt_payments = NotePayoff(alternative).calculate_vectorized(grid)

    print("\n" + "=" * 60)
    print("THRESHOLD COMPARISON")
    print("=" * 60)
    print("\n  {:>10} {:>18} {:>18}".format(
        "Return",
        f"{reference.buffer_threshold:.0%} threshold",
        f"{alternative.buffer_threshold:.0%} threshold",
    ))
    print("  " + "-" * 48)
    for r, p_ref, p_alt in zip(grid, ref_payments, alt_payments):
        print(f"  {r:>10.0%} {p_ref:>18,.4f} {p_alt:>18,.4f}")


def main() -> None:
    """Run payment table demo."""
    parser = argparse.ArgumentParser(description="Structured Note Payment Table Demo")
    parser.add_argument("--compare", action="store_true", help="Compare with an 80%% threshold note")
    parser.add_argument("--save-report", action="store_true", help="Save markdown report")
    args = parser.parse_args()

    params = DEFAULT_PARAMETERS
    rows = generate_payment_table(params=params)
    reporter = PaymentTableReporter(params)

    print(reporter.to_console(rows))

    summary = summarize_table(rows, params)
    print(f"\nDownside scenarios: {summary.n_downside}")
    print(f"Breakeven return:   {params.breakeven_return:.2%}")

    if args.compare:
        deep_buffer = params.with_overrides(buffer_threshold=0.80, buffer_amount=0.20)
        print_comparison(params, deep_buffer)

    if args.save_report:
        report_path = "examples/payment_table_report.md"
        reporter.save(rows, report_path, fmt="markdown")
        print(f"\nReport saved to: {report_path}")


if __name__ == "__main__":
    main()
