"""Cross-check the float functions against numpy-financial."""
import pytest

from finmath import floating

npf = pytest.importorskip("numpy_financial")

RATES = [0.001, 0.0075, 0.03, 0.1]
NPERS = [1, 12, 36, 360]
WHENS = ["end", "begin"]


@pytest.mark.parametrize("rate", RATES)
@pytest.mark.parametrize("nper", NPERS)
@pytest.mark.parametrize("when", WHENS)
def test_pmt_pv_fv(rate, nper, when):
    assert floating.pmt(rate, nper, 25000, -1000, when) == pytest.approx(float(npf.pmt(rate, nper, 25000, -1000, when)))
    assert floating.pv(rate, nper, -250, 1000, when) == pytest.approx(float(npf.pv(rate, nper, -250, 1000, when)))
    assert floating.fv(rate, nper, -250, -1000, when) == pytest.approx(float(npf.fv(rate, nper, -250, -1000, when)))


@pytest.mark.parametrize("rate", RATES)
@pytest.mark.parametrize("when", WHENS)
@pytest.mark.parametrize("per", [1, 2, 7, 24])
def test_ipmt_ppmt(rate, when, per):
    got_i = floating.ipmt(rate, per, 24, 10000, 0, when)
    got_p = floating.ppmt(rate, per, 24, 10000, 0, when)
    assert got_i == pytest.approx(float(npf.ipmt(rate, per, 24, 10000, 0, when)), rel=1e-9, abs=1e-9)
    assert got_p == pytest.approx(float(npf.ppmt(rate, per, 24, 10000, 0, when)), rel=1e-9, abs=1e-9)


@pytest.mark.parametrize("rate", [0.005, 0.01, 0.05])
@pytest.mark.parametrize("when", WHENS)
def test_nper(rate, when):
    assert floating.nper(rate, -500, 8000, 0, when) == pytest.approx(float(npf.nper(rate, -500, 8000, 0, when)))


@pytest.mark.parametrize("rate", [0.0, 0.05, 0.12])
def test_npv_matches_numpy_financial(rate):
    flows = [-5000, 1200, 1500, 1800, 2100]
    assert floating.npv(rate, flows) == pytest.approx(float(npf.npv(rate, flows)))


@pytest.mark.parametrize(
    "flows",
    [
        [-100, 39, 59, 55, 20],
        [-5000, 1200, 1500, 1800, 2100],
        [-91045.53, 3692.25, 52110, 2287.5, 49822.5],
    ],
)
def test_irr(flows):
    assert floating.irr(flows) == pytest.approx(float(npf.irr(flows)), abs=1e-7)


@pytest.mark.parametrize("nper,pmt,pv,fv", [(12, -88.85, 1000, 0), (48, -620, 25000, 0), (10, -200, 2000, -500)])
def test_rate(nper, pmt, pv, fv):
    assert floating.rate(nper, pmt, pv, fv) == pytest.approx(float(npf.rate(nper, pmt, pv, fv)), abs=1e-6)
