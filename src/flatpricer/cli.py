import argparse
import logging
import sys
from datetime import date

from .calendar import BusinessDayConvention, NullCalendar, WeekendsOnly
from .core import (
    CALL, PUT, AmericanExercise, EuropeanExercise, OptionContract, Payoff,
    PricingResult,
)
from .curves import FlatVolatilityCurve, FlatYieldCurve, MarketQuote
from .daycount import get_day_counter
from .errors import PricingError
from .fixed_income import ZeroCouponBond, annuity_pv, day_count, zero_coupon_bond_npv
from .interest_rate import Compounding, Frequency, InterestRate
from .pricer import method_from_name, price_american, price_european

logger = logging.getLogger(__name__)

_GREEK_LABELS = (("delta", "Delta"), ("gamma", "Gamma"), ("theta", "Theta"),
                 ("vega", "Vega"), ("rho", "Rho"))


# ---------------------------------------------------------------------------
# argument parsing helpers
# ---------------------------------------------------------------------------
def _kind(s: str):
    s = s.lower()
    if s in {"call", "c"}:
        return CALL
    if s in {"put", "p"}:
        return PUT
    raise argparse.ArgumentTypeError("kind must be 'call' or 'put'")


def _date(s: str) -> date:
    try:
        return date.fromisoformat(s)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {s!r}") from exc


def _frequency(s: str) -> Frequency:
    try:
        return Frequency[s.strip().upper()]
    except KeyError as exc:
        choices = ", ".join(f.name.lower() for f in Frequency)
        raise argparse.ArgumentTypeError(f"frequency must be one of {choices}") from exc


def _compounding(s: str) -> Compounding:
    try:
        return Compounding(s.strip().lower().replace("-", "_"))
    except ValueError as exc:
        choices = ", ".join(c.value for c in Compounding)
        raise argparse.ArgumentTypeError(f"compounding must be one of {choices}") from exc


def add_option_args(parser: argparse.ArgumentParser):
    parser.add_argument("--spot", type=float, required=True)
    parser.add_argument("--strike", type=float, required=True)
    parser.add_argument("--rate", type=float, required=True, help="flat cont. risk-free")
    parser.add_argument("--vol", type=float, required=True, help="flat Black vol")
    parser.add_argument("--dividend", type=float, default=0.0, help="flat cont. dividend yield")
    parser.add_argument("--kind", type=_kind, default=CALL, help="call|put")
    parser.add_argument("--valuation-date", dest="valuation_date", type=_date, required=True)
    parser.add_argument("--maturity", type=_date, required=True)
    parser.add_argument("--day-counter", dest="day_counter", default="ACT/365F")
    parser.add_argument("--method", default=None,
                        help="analytic|baw|crr|fd (default: analytic / baw)")
    parser.add_argument("--steps", type=int, default=801, help="tree steps (crr)")
    parser.add_argument("--tolerance", type=float, default=None,
                        help="tree convergence tolerance (crr)")
    parser.add_argument("--grid-points", dest="grid_points", type=int, default=400)
    parser.add_argument("--time-steps", dest="time_steps", type=int, default=400)


def add_rate_args(parser: argparse.ArgumentParser, compounding: str, frequency: str):
    parser.add_argument("--day-counter", dest="day_counter", default="ACT/365F")
    parser.add_argument("--compounding", type=_compounding, default=compounding)
    parser.add_argument("--frequency", type=_frequency, default=frequency)


def _method(args):
    if args.method is None:
        return None
    name = args.method.strip().lower()
    params = {}
    if name in ("crr", "lattice"):
        params = {"steps": args.steps, "tolerance": args.tolerance}
    elif name in ("fd", "finite-difference"):
        params = {"grid_points": args.grid_points, "time_steps": args.time_steps}
    return method_from_name(name, **params)


def _contract(args, american: bool) -> OptionContract:
    dc = get_day_counter(args.day_counter)
    today = args.valuation_date
    exercise = (AmericanExercise(today, args.maturity) if american
                else EuropeanExercise(args.maturity))
    return OptionContract(
        payoff=Payoff(args.kind, args.strike),
        exercise=exercise,
        spot=MarketQuote(args.spot, "spot"),
        risk_free=FlatYieldCurve(today, MarketQuote(args.rate, "rate"), dc),
        volatility=FlatVolatilityCurve(today, MarketQuote(args.vol, "volatility"), dc),
        valuation_date=today,
        dividend=FlatYieldCurve(today, MarketQuote(args.dividend, "dividend"), dc),
    )


def _print_result(label: str, res: PricingResult):
    print(f"{label} Option Price: {res.value}")
    for key, name in _GREEK_LABELS:
        value = getattr(res, key)
        if value is not None:
            print(f"{name}: {value}")


# ---------------------------------------------------------------------------
# commands
# ---------------------------------------------------------------------------
def cmd_european(args):
    contract = _contract(args, american=False)
    logger.debug("pricing European %s K=%s T=%s", contract.kind,
                 contract.payoff.strike, contract.exercise.maturity)
    _print_result("European", price_european(contract, _method(args)))


def cmd_american(args):
    contract = _contract(args, american=True)
    logger.debug("pricing American %s K=%s T=%s", contract.kind,
                 contract.payoff.strike, contract.exercise.maturity)
    _print_result("American", price_american(contract, _method(args)))


def cmd_bond(args):
    calendar = NullCalendar() if args.calendar == "null" else WeekendsOnly(args.holiday)
    dc = get_day_counter(args.day_counter)
    bond = ZeroCouponBond(
        face_amount=args.face,
        maturity=args.maturity,
        issue_date=args.issue_date,
        settlement_days=args.settlement_days,
        redemption=args.redemption,
        convention=BusinessDayConvention(args.convention),
    )
    curve = FlatYieldCurve(args.issue_date, MarketQuote(args.yield_, "yield"), dc,
                           args.compounding, args.frequency)
    npv = zero_coupon_bond_npv(bond, curve, calendar, args.trade_date)
    print(f"Zero Coupon Bond NPV: {npv}")


def cmd_annuity(args):
    rate = InterestRate(args.rate, get_day_counter(args.day_counter),
                        args.compounding, args.frequency)
    pv = annuity_pv(args.payment, rate, args.periods,
                    include_initial=args.include_initial)
    print(f"Present Annuity for {args.periods} Years: {pv}")


def cmd_compound(args):
    rate = InterestRate(args.rate, get_day_counter(args.day_counter),
                        args.compounding, args.frequency)
    span = "one year" if args.years == 1 else f"{args.years:g} years"
    print(f"Compound factor for {span}: {rate.compound_factor(args.years)}")


def cmd_daycount(args):
    days = day_count(args.start, args.end, args.convention)
    print(f"Day count from {args.start} to {args.end}: {days:g}")


def cmd_examples(args):
    """Run the preliminaries, the European example and the American example."""
    dc = get_day_counter("ACT/365F")

    # compounding, bond, annuity, day count
    quarterly = InterestRate(0.05, dc, Compounding.COMPOUNDED, Frequency.QUARTERLY)
    print(f"Compound factor for one year: {quarterly.compound_factor(1)}")

    issue = date(2021, 12, 31)
    bond = ZeroCouponBond(100.0, date(2023, 12, 31), issue, settlement_days=2)
    curve = FlatYieldCurve(issue, MarketQuote(0.05, "yield"), dc)
    print(f"Zero Coupon Bond NPV: {zero_coupon_bond_npv(bond, curve, WeekendsOnly())}")

    pv = annuity_pv(1.0, quarterly, 5, include_initial=True)
    print(f"Present Annuity for 5 Years: {pv}")

    start, end = date(2023, 1, 1), date(2023, 12, 31)
    print(f"Day count from {start} to {end}: {day_count(start, end, dc):g}")

    # vanilla options on the same market
    today, maturity = date(2023, 8, 2), date(2023, 8, 15)
    market = dict(
        spot=MarketQuote(100.0, "spot"),
        risk_free=FlatYieldCurve(today, MarketQuote(0.05, "rate"), dc),
        volatility=FlatVolatilityCurve(today, MarketQuote(0.2, "volatility"), dc),
        valuation_date=today,
    )
    payoff = Payoff(CALL, 95.0)
    euro = OptionContract(payoff, EuropeanExercise(maturity), **market)
    print(f"European Option Price: {price_european(euro).value}")
    amer = OptionContract(payoff, AmericanExercise(today, maturity), **market)
    _print_result("American", price_american(amer))


# ---------------------------------------------------------------------------
# entry point
# ---------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="flatpricer",
                                description="Vanilla option and flat-curve valuation")
    p.add_argument("--log-level", dest="log_level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="cmd", required=True)

    p_eu = sub.add_parser("european", help="European option price and Greeks")
    add_option_args(p_eu)
    p_eu.set_defaults(func=cmd_european)

    p_am = sub.add_parser("american", help="American option price and Greeks")
    add_option_args(p_am)
    p_am.set_defaults(func=cmd_american)

    p_bond = sub.add_parser("bond", help="Zero coupon bond NPV")
    p_bond.add_argument("--face", type=float, default=100.0)
    p_bond.add_argument("--yield", dest="yield_", type=float, required=True)
    p_bond.add_argument("--maturity", type=_date, required=True)
    p_bond.add_argument("--issue-date", dest="issue_date", type=_date, required=True)
    p_bond.add_argument("--trade-date", dest="trade_date", type=_date, default=None)
    p_bond.add_argument("--settlement-days", dest="settlement_days", type=int, default=2)
    p_bond.add_argument("--redemption", type=float, default=100.0, help="percent of face")
    p_bond.add_argument("--convention", default="following",
                        choices=[c.value for c in BusinessDayConvention])
    p_bond.add_argument("--calendar", default="weekends", choices=["weekends", "null"])
    p_bond.add_argument("--holiday", type=_date, action="append", default=[])
    add_rate_args(p_bond, "continuous", "annual")
    p_bond.set_defaults(func=cmd_bond)

    p_ann = sub.add_parser("annuity", help="Level annuity present value")
    p_ann.add_argument("--payment", type=float, default=1.0)
    p_ann.add_argument("--rate", type=float, required=True)
    p_ann.add_argument("--periods", type=int, required=True)
    p_ann.add_argument("--include-initial", dest="include_initial", action="store_true",
                       help="add an undiscounted payment at time zero")
    add_rate_args(p_ann, "compounded", "annual")
    p_ann.set_defaults(func=cmd_annuity)

    p_cf = sub.add_parser("compound", help="Compound factor of a rate")
    p_cf.add_argument("--rate", type=float, required=True)
    p_cf.add_argument("--years", type=float, default=1.0)
    add_rate_args(p_cf, "compounded", "annual")
    p_cf.set_defaults(func=cmd_compound)

    p_dc = sub.add_parser("daycount", help="Days between two dates")
    p_dc.add_argument("--from", dest="start", type=_date, required=True)
    p_dc.add_argument("--to", dest="end", type=_date, required=True)
    p_dc.add_argument("--convention", default="ACT/365F")
    p_dc.set_defaults(func=cmd_daycount)

    p_ex = sub.add_parser("examples", help="Run the bundled example valuations")
    p_ex.set_defaults(func=cmd_examples)
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except PricingError as e:
        field = f" [{e.field}]" if e.field else ""
        logger.error("Error%s: %s", field, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
