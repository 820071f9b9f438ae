#!/usr/bin/env python3
"""Batch-price a book of vanilla options.

Usage
-----
    python scripts/price_book.py --input book.csv --output prices.csv
    python scripts/price_book.py --input book.csv --output prices.json

Input CSV format
----------------
    id,spot,strike,rate,vol,dividend,kind,exercise,valuation_date,maturity,method
    1,100,95,0.05,0.20,0.0,call,european,2023-08-02,2023-08-15,analytic
    2,100,105,0.05,0.25,0.01,put,american,2023-08-02,2024-02-15,baw
    3,100,105,0.05,0.25,0.01,put,american,2023-08-02,2024-02-15,crr

``dividend`` and ``method`` may be left empty (zero yield, default method).

Output
------
    CSV or JSON with columns: id, price, delta, gamma, theta, vega, rho, method
"""

from __future__ import annotations
import argparse
import csv
import json
import logging
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from flatpricer import (
    AmericanExercise, EuropeanExercise, FlatVolatilityCurve, FlatYieldCurve,
    MarketQuote, OptionContract, Payoff, PricingError, method_from_name, price,
)

logger = logging.getLogger("price_book")


def _contract(row: dict) -> OptionContract:
    today = date.fromisoformat(row["valuation_date"].strip())
    maturity = date.fromisoformat(row["maturity"].strip())
    exercise_style = row.get("exercise", "european").strip().lower()
    if exercise_style == "american":
        exercise = AmericanExercise(today, maturity)
    elif exercise_style == "european":
        exercise = EuropeanExercise(maturity)
    else:
        raise ValueError(f"Unknown exercise: {exercise_style!r}")
    dividend = float(row.get("dividend") or 0.0)
    return OptionContract(
        payoff=Payoff(row["kind"].strip().lower(), float(row["strike"])),
        exercise=exercise,
        spot=MarketQuote(float(row["spot"]), "spot"),
        risk_free=FlatYieldCurve(today, MarketQuote(float(row["rate"]), "rate")),
        volatility=FlatVolatilityCurve(today, MarketQuote(float(row["vol"]), "volatility")),
        valuation_date=today,
        dividend=FlatYieldCurve(today, MarketQuote(dividend, "dividend")),
    )


def _price_row(row: dict) -> dict:
    """Price a single book row and return result dict."""
    contract = _contract(row)
    method_name = (row.get("method") or "").strip()
    method = method_from_name(method_name) if method_name else None
    res = price(contract, method)
    out = {"id": row.get("id", ""), "price": res.value}
    for key in ("delta", "gamma", "theta", "vega", "rho"):
        out[key] = getattr(res, key)
    out["method"] = res.method
    return out


def main():
    parser = argparse.ArgumentParser(description="Batch-price a book of vanilla options.")
    parser.add_argument("--input", required=True, help="Path to book CSV")
    parser.add_argument("--output", required=True, help="Output path (.csv or .json)")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    with open(args.input, newline="") as f:
        rows = list(csv.DictReader(f))

    logger.info("Pricing %d positions...", len(rows))

    results = []
    for i, row in enumerate(rows):
        try:
            results.append(_price_row(row))
        except (PricingError, ValueError, KeyError) as e:
            logger.error("Row %d (id=%s): %s", i, row.get("id", "?"), e)
            results.append({"id": row.get("id", ""), "price": None, "error": str(e)})

    output_path = Path(args.output)
    if output_path.suffix == ".json":
        with open(output_path, "w") as f:
            json.dump(results, f, indent=2, default=str)
    else:
        if not results:
            logger.warning("No results to write.")
            return
        fieldnames = list(results[0].keys())
        for r in results:
            for k in r:
                if k not in fieldnames:
                    fieldnames.append(k)
        with open(output_path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
            writer.writeheader()
            writer.writerows(results)

    priced = sum(1 for r in results if r.get("price") is not None)
    logger.info("Results written to %s (priced %d, failed %d)",
                args.output, priced, len(results) - priced)


if __name__ == "__main__":
    main()
