import numpy as np
import pytest

from xsecfit.analysis.uncertainty import expand_series, to_absolute_uncertainties
from xsecfit.errors import ArithmeticDegeneracy
from xsecfit.types.fitting import Sample, SeriesVariant


def test_up_nominal_down_ordering(standard_samples):
    series = expand_series(standard_samples)
    nom = series[SeriesVariant.NOMINAL].value
    assert np.all(series[SeriesVariant.UP].value >= nom)
    assert np.all(nom >= series[SeriesVariant.DOWN].value)


def test_shifted_series_keep_nominal_fraction():
    samples = [Sample(100.0, 200.0, 20.0), Sample(150.0, 50.0, 10.0)]
    series = expand_series(samples)
    up = series[SeriesVariant.UP]
    down = series[SeriesVariant.DOWN]

    np.testing.assert_allclose(up.value, [220.0, 60.0])
    np.testing.assert_allclose(down.value, [180.0, 40.0])
    np.testing.assert_allclose(up.value_unc, [22.0, 12.0])
    np.testing.assert_allclose(down.value_unc, [18.0, 8.0])
    np.testing.assert_allclose(series[SeriesVariant.NOMINAL].value_unc, [20.0, 10.0])


def test_zero_uncertainty_gives_identical_series():
    samples = [Sample(100.0, 3.0, 0.0), Sample(200.0, 2.0, 0.0)]
    series = expand_series(samples)
    np.testing.assert_array_equal(
        series[SeriesVariant.UP].value, series[SeriesVariant.DOWN].value
    )
    np.testing.assert_array_equal(series[SeriesVariant.UP].value_unc, [0.0, 0.0])


def test_zero_cross_section_raises():
    samples = [Sample(100.0, 3.0, 0.1), Sample(125.0, 0.0, 0.1)]
    with pytest.raises(ArithmeticDegeneracy, match="125"):
        expand_series(samples)


def test_placeholder_rows_propagate_nan():
    samples = [Sample(100.0, 3.0, 0.3), Sample(0.0, 0.0, 0.0)]
    series = expand_series(samples)
    assert np.isnan(series[SeriesVariant.UP].value_unc[1])
    assert series[SeriesVariant.UP].value_unc[0] == pytest.approx(0.33)


def test_fractional_to_absolute():
    samples = [Sample(50.0, 400.0, 0.05), Sample(100.0, 80.0, 0.1)]
    converted = to_absolute_uncertainties(samples)
    assert [s.xsec_unc for s in converted] == pytest.approx([20.0, 8.0])
    assert [s.xsec for s in converted] == [400.0, 80.0]
    # Input is left untouched
    assert samples[0].xsec_unc == 0.05
