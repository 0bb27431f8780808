import math
from decimal import Decimal

import pytest

from finmath import exact, floating
from finmath.errors import (
    DegenerateIterationError,
    FinancialError,
    InvalidArgumentError,
    MalformedCashFlowsError,
    NonConvergenceError,
)
from finmath.finance import irr as irr_mod
from finmath.finance.irr import SolveResult, SolveStatus, solve_irr, solve_rate
from finmath.finance.numeric import DECIMAL, FLOAT
from finmath.types import DueDate

BOTH = pytest.mark.parametrize("fin", [exact, floating], ids=["decimal", "float"])
NUMS = pytest.mark.parametrize("num", [FLOAT, DECIMAL], ids=["float", "decimal"])

# semiannual cash flows quoted as an annual yield of 12.53%
BOND = [-91045.53, 3692.25, 52110, 2287.5, 49822.5]


# ---------- IRR ----------
@BOTH
def test_irr_semiannual_quote(fin):
    r = fin.irr(BOND, 0.001)
    annual = (1 + float(r)) ** 2 - 1
    assert round(annual * 100, 2) == 12.53


@BOTH
def test_irr_simple_project(fin):
    r = float(fin.irr([-100, 60, 60]))
    # closed form: 1/(1+r) = (-60 + sqrt(60^2 + 4*60*100)) / 120
    x = (-60 + math.sqrt(60 ** 2 + 4 * 60 * 100)) / 120
    assert r == pytest.approx(1 / x - 1, abs=1e-7)


@BOTH
def test_irr_root_zeroes_npv(fin):
    flows = [-1000, 300, 420, 680]
    r = fin.irr(flows)
    assert abs(float(fin.npv(r, flows))) < 1e-4


@BOTH
def test_irr_ignores_leading_zero_flows(fin):
    assert float(fin.irr([0, 0, -100, 60, 60])) == pytest.approx(float(fin.irr([-100, 60, 60])), abs=1e-7)


def test_irr_decimal_returns_decimal():
    assert isinstance(exact.irr([-100, 60, 60]), Decimal)
    assert isinstance(floating.irr([-100, 60, 60]), float)


@BOTH
@pytest.mark.parametrize("guess", [-1, -2])
def test_irr_guess_must_exceed_minus_one(fin, guess):
    with pytest.raises(InvalidArgumentError) as ei:
        fin.irr([-100, 60, 60], guess)
    assert ei.value.argument == "guess"


@BOTH
@pytest.mark.parametrize("flows", [[], [-100], None, [[-100, 60], [60, 0]]])
def test_irr_needs_two_flat_flows(fin, flows):
    with pytest.raises(MalformedCashFlowsError):
        fin.irr(flows)


@BOTH
def test_irr_all_zero_flows_is_degenerate(fin):
    with pytest.raises(DegenerateIterationError):
        fin.irr([0, 0, 0])


def test_irr_without_sign_change_fails():
    with pytest.raises((NonConvergenceError, DegenerateIterationError)):
        floating.irr([100, 100, 100])


@NUMS
def test_solve_irr_reports_convergence(num):
    res = solve_irr(BOND, 0.001, num=num)
    assert isinstance(res, SolveResult)
    assert res.status is SolveStatus.CONVERGED
    assert res.converged
    assert 1 <= res.iterations <= irr_mod.MAX_ITERATIONS
    assert res.unwrap() == res.value


@NUMS
def test_solve_irr_degenerate_does_not_raise(num):
    res = solve_irr([0, 0], num=num)
    assert res.status is SolveStatus.DEGENERATE
    assert not res.converged
    assert res.value is None


@NUMS
def test_iteration_cap_reports_non_convergence(num, monkeypatch):
    monkeypatch.setattr(irr_mod, "MAX_ITERATIONS", 1)
    res = solve_irr(BOND, 0.001, num=num)
    assert res.status is SolveStatus.NON_CONVERGENCE
    assert res.iterations == 1
    with pytest.raises(NonConvergenceError):
        res.unwrap()


def test_solver_errors_share_a_base_and_builtin():
    assert issubclass(NonConvergenceError, FinancialError)
    assert issubclass(NonConvergenceError, ArithmeticError)
    assert issubclass(DegenerateIterationError, ZeroDivisionError)
    assert issubclass(MalformedCashFlowsError, InvalidArgumentError)


# ---------- RATE ----------
@BOTH
@pytest.mark.parametrize("r", [0.005, 0.01, 0.025, 0.05])
@pytest.mark.parametrize("n", [12, 36, 60])
@pytest.mark.parametrize("principal", [-1000, -100000])
def test_rate_recovers_pmt_rate(fin, r, n, principal):
    payment = fin.pmt(r, n, principal)
    assert float(fin.rate(n, payment, principal)) == pytest.approx(r, abs=1e-7)


@BOTH
def test_rate_with_balloon_and_in_advance(fin):
    begin = DueDate.BEGINNING_OF_PERIOD
    payment = fin.pmt(0.0075, 48, 30000, -5000, begin)
    assert float(fin.rate(48, payment, 30000, -5000, begin)) == pytest.approx(0.0075, abs=1e-7)


@BOTH
def test_rate_zero_when_payments_just_return_principal(fin):
    assert float(fin.rate(10, -100, 1000)) == pytest.approx(0, abs=1e-7)


@BOTH
@pytest.mark.parametrize("n", [0, -12])
def test_rate_nper_must_be_positive(fin, n):
    with pytest.raises(InvalidArgumentError) as ei:
        fin.rate(n, -100, 1000)
    assert ei.value.argument == "nper"


@BOTH
def test_rate_guess_must_exceed_minus_one(fin):
    with pytest.raises(InvalidArgumentError):
        fin.rate(12, -100, 1000, 0, "end", -1)


@BOTH
def test_rate_flat_equation_is_degenerate(fin):
    with pytest.raises(DegenerateIterationError, match="division by zero"):
        fin.rate(12, 0, 0, 0)


def test_rate_without_solution_fails():
    # every flow is a receipt, so the residual never crosses zero
    with pytest.raises((NonConvergenceError, DegenerateIterationError)):
        floating.rate(10, 100, 1000)


@NUMS
def test_solve_rate_result(num):
    res = solve_rate(12, 88.84878867834166, -1000, num=num)
    assert res.converged
    assert float(res.value) == pytest.approx(0.01, abs=1e-7)


@NUMS
def test_solve_rate_converges_at_zero_interest(num):
    res = solve_rate(10, -100, 1000, num=num)
    assert res.status is SolveStatus.CONVERGED
    assert abs(float(res.value)) < 1e-9


@BOTH
def test_rate_starting_at_zero(fin):
    assert fin.rate(10, -100, 1000, 0, "end", 0) == 0


@pytest.mark.parametrize("r", [0.0001, 0.001])
def test_rate_agrees_between_representations_for_small_rates(r):
    payment = floating.pmt(r, 36, 5000)
    d = exact.rate(36, payment, 5000)
    f = floating.rate(36, payment, 5000)
    assert float(d) == pytest.approx(f, abs=1e-9)
    assert f == pytest.approx(r, abs=1e-9)


@BOTH
def test_rate_seed_stays_above_minus_one(fin):
    # doubling a guess of -0.6 would leave the domain; the flat residual is then degenerate
    with pytest.raises(DegenerateIterationError):
        fin.rate(12, 0, 0, -5, "end", -0.6)


@BOTH
def test_irr_second_seed_at_minus_one_is_invalid(fin):
    with pytest.raises(InvalidArgumentError) as ei:
        fin.irr([100, -60, -60], -0.999995)
    assert ei.value.argument == "guess"


@BOTH
def test_irr_nudge_toward_minus_one_is_degenerate(fin):
    # constant present value; nudging the older point lands on -1
    with pytest.raises(DegenerateIterationError):
        fin.irr([5, 0], Decimal("-0.99999"))
