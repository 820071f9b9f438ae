import math

from flatpricer.cli import build_parser, main

EURO = ["european", "--spot", "100", "--strike", "95", "--rate", "0.05",
        "--vol", "0.2", "--valuation-date", "2023-08-02", "--maturity", "2023-08-15"]


def _lines(capsys):
    return capsys.readouterr().out.strip().splitlines()


def test_examples(capsys):
    assert main(["examples"]) == 0
    lines = _lines(capsys)
    assert lines[0].startswith("Compound factor for one year: ")
    assert abs(float(lines[0].split(": ")[1]) - 1.0125 ** 4) < 1e-12
    assert lines[1].startswith("Zero Coupon Bond NPV: ")
    assert lines[2].startswith("Present Annuity for 5 Years: ")
    assert lines[3] == "Day count from 2023-01-01 to 2023-12-31: 364"
    assert lines[4].startswith("European Option Price: ")
    assert lines[5].startswith("American Option Price: ")
    assert [l.split(":")[0] for l in lines[6:]] == ["Delta", "Gamma", "Theta", "Vega", "Rho"]
    assert float(lines[5].split(": ")[1]) >= float(lines[4].split(": ")[1])


def test_european_with_greeks(capsys):
    assert main(EURO) == 0
    lines = _lines(capsys)
    assert lines[0].startswith("European Option Price: ")
    assert len(lines) == 6


def test_american_tree(capsys):
    argv = ["american"] + EURO[1:] + ["--kind", "put", "--method", "crr", "--steps", "200"]
    assert main(argv) == 0
    assert _lines(capsys)[0].startswith("American Option Price: ")


def test_bond(capsys):
    argv = ["bond", "--yield", "0.05", "--maturity", "2023-12-31",
            "--issue-date", "2021-12-31"]
    assert main(argv) == 0
    npv = float(_lines(capsys)[0].split(": ")[1])
    assert abs(npv - 100.0 * math.exp(-0.05 * 727 / 365)) < 1e-10


def test_compound_and_daycount(capsys):
    assert main(["compound", "--rate", "0.05", "--frequency", "quarterly"]) == 0
    assert main(["daycount", "--from", "2023-01-31", "--to", "2023-02-28",
                 "--convention", "30/360"]) == 0
    lines = _lines(capsys)
    assert lines[1] == "Day count from 2023-01-31 to 2023-02-28: 28"


def test_annuity(capsys):
    assert main(["annuity", "--rate", "0.05", "--periods", "3"]) == 0
    pv = float(_lines(capsys)[0].split(": ")[1])
    assert abs(pv - sum(1.05 ** -i for i in (1, 2, 3))) < 1e-12


def test_invalid_input_returns_error(capsys):
    argv = list(EURO)
    argv[argv.index("95")] = "-95"
    assert main(argv) == 1
    assert _lines(capsys) == []


def test_maturity_before_valuation_returns_error():
    argv = list(EURO)
    argv[argv.index("2023-08-15")] = "2023-07-01"
    assert main(argv) == 1


def test_parser_defaults():
    args = build_parser().parse_args(EURO)
    assert args.method is None
    assert args.steps == 801
    assert args.dividend == 0.0
