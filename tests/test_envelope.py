import numpy as np
import pytest

from conftest import make_samples
from xsecfit.analysis.envelope import (
    build_envelope,
    envelope_at,
    envelope_frame,
    ratio_points,
)
from xsecfit.analysis.fitting import FitCollection, fit_all
from xsecfit.analysis.windows import WindowPartition
from xsecfit.errors import ArithmeticDegeneracy, ConfigurationError, FitError
from xsecfit.types.fitting import FittedCurve, Sample, SeriesVariant


@pytest.fixture
def fits(standard_series, standard_partition):
    return fit_all(standard_series, standard_partition)


def test_envelope_is_one_sided_maximum(fits):
    for mass in np.arange(100.0, 2000.0, 7.0):
        window = fits.partition.locate(mass)
        nom = fits.curve(SeriesVariant.NOMINAL, window.index).eval(mass)
        up = fits.curve(SeriesVariant.UP, window.index).eval(mass)
        down = fits.curve(SeriesVariant.DOWN, window.index).eval(mass)

        absolute, fraction = envelope_at(fits, mass)

        assert fraction >= 0
        assert absolute >= up - nom
        assert absolute >= nom - down
        assert absolute == pytest.approx(max(up - nom, nom - down))
        assert fraction == pytest.approx(absolute / nom)


def test_envelope_reproduces_input_uncertainty(fits):
    # Inputs carry a 5 % uncertainty on every point
    _, fraction = envelope_at(fits, 730.0)
    assert fraction == pytest.approx(0.05, rel=1e-3)


def test_envelope_outside_windows(fits):
    with pytest.raises(FitError, match="outside all fit windows"):
        envelope_at(fits, 2500.0)


def test_vanishing_nominal_fit_raises():
    partition = WindowPartition([100.0, 200.0])
    fits = FitCollection(partition=partition)
    window = partition[0]
    for variant in SeriesVariant:
        # exp(-1e4) underflows to exactly 0
        a = -1e4 if variant is SeriesVariant.NOMINAL else 5.0
        fits.curves[(variant, 0)] = FittedCurve(
            variant=variant, window=window, a=a, b=0.0, c=0.0
        )

    with pytest.raises(ArithmeticDegeneracy, match="Nominal fit vanishes"):
        envelope_at(fits, 150.0)


def test_fine_grid_covers_partition(fits):
    envelope = build_envelope(fits)
    assert len(envelope) == 190
    assert envelope[0].mass == 100.0
    assert envelope[-1].mass == 1990.0
    assert all(e.half_width == 10.0 for e in envelope)
    assert all(e.fraction >= 0 for e in envelope)

    frame = envelope_frame(envelope)
    assert list(frame.columns) == ["mass", "half_width", "absolute", "fraction"]
    assert len(frame) == 190


def test_fine_grid_step(fits):
    assert len(build_envelope(fits, step=50.0)) == 38
    with pytest.raises(ConfigurationError):
        build_envelope(fits, step=0.0)


def test_ratio_points(fits, standard_samples):
    samples = standard_samples + [Sample(2500.0, 1.0, 0.1), Sample(0.0, 0.0, 0.0)]
    ratios = ratio_points(fits, samples)

    assert len(ratios) == len(samples)
    inside = ratios.iloc[: len(standard_samples)]
    assert np.allclose(inside["ratio"], 1.0, atol=0.02)
    expected_err = np.array([s.xsec_unc for s in standard_samples]) / inside["xsec_fit"]
    np.testing.assert_allclose(inside["ratio_err"], expected_err)
    assert ratios["ratio"].iloc[-2:].isna().all()


def test_exact_data_has_flat_ratio(standard_partition):
    from xsecfit.analysis.uncertainty import expand_series

    samples = make_samples(np.arange(100.0, 2001.0, 25.0), rel_unc=0.0)
    fits = fit_all(expand_series(samples), standard_partition)
    ratios = ratio_points(fits, samples)
    np.testing.assert_allclose(ratios["ratio"], 1.0, rtol=1e-6)
    assert (ratios["ratio_err"] == 0).all()
