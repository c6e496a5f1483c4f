from pathlib import Path

import pytest
import yaml

from xsecfit.analysis.fitting import fit_all
from xsecfit.errors import InputFormatError
from xsecfit.io.results_yaml import (
    default_results_path,
    load_fit_results_yaml,
    save_fit_results_yaml,
)
from xsecfit.types.fitting import SeriesVariant


@pytest.fixture
def saved(tmp_path: Path, standard_series, standard_partition, standard_samples):
    fits = fit_all(standard_series, standard_partition)
    path = save_fit_results_yaml(
        default_results_path(tmp_path, "C1N2", "wino"),
        fits,
        standard_samples,
        grid="C1N2",
        composition="wino",
    )
    return path, fits


def test_default_name(tmp_path: Path):
    assert default_results_path(tmp_path, "C1C1", "hino").name == "C1C1_hino_13TeV.yaml"


def test_field_names(saved):
    path, _ = saved
    data = yaml.safe_load(path.read_text())

    assert list(data) == ["nFits", "grid", "composition", "model", "fits", "parameters"]
    assert data["nFits"] == 10
    assert len(data["fits"]) == 30
    first = data["fits"][0]
    assert first["name"] == "fit_nom_0"
    assert first["title"] == "fit_nom_100_150"
    assert (first["lo"], first["hi"]) == (100.0, 150.0)
    assert len(first["params"]) == 3
    assert set(data["parameters"]) == {"mass", "massUnc", "xsec", "xsecUnc"}
    assert len(data["parameters"]["mass"]) == 77
    assert set(data["parameters"]["massUnc"]) == {0.0}


def test_round_trip(saved, standard_samples):
    path, fits = saved
    loaded = load_fit_results_yaml(path)

    assert loaded.n_fits == 10
    assert (loaded.grid, loaded.composition) == ("C1N2", "wino")
    assert loaded.samples == standard_samples
    assert loaded.fits.partition.boundaries == fits.partition.boundaries
    for curve in fits:
        restored = loaded.fits.curve(curve.variant, curve.window.index)
        assert restored.params == pytest.approx(curve.params, rel=1e-12)
        assert restored.window == curve.window
        assert restored.n_points == curve.n_points


def test_reloaded_fits_evaluate_like_originals(saved):
    path, fits = saved
    loaded = load_fit_results_yaml(path)
    for mass in (100.0, 512.0, 1999.0, 2000.0):
        assert loaded.fits.evaluate(SeriesVariant.DOWN, mass) == pytest.approx(
            fits.evaluate(SeriesVariant.DOWN, mass)
        )


def test_missing_file(tmp_path: Path):
    with pytest.raises(InputFormatError, match="not found"):
        load_fit_results_yaml(tmp_path / "missing.yaml")


@pytest.mark.parametrize("section", ["nFits", "fits", "parameters"])
def test_missing_section(saved, section):
    path, _ = saved
    data = yaml.safe_load(path.read_text())
    del data[section]
    path.write_text(yaml.safe_dump(data))
    with pytest.raises(InputFormatError, match=section):
        load_fit_results_yaml(path)


def test_incomplete_fit_set(saved):
    path, _ = saved
    data = yaml.safe_load(path.read_text())
    data["fits"] = [f for f in data["fits"] if f["variant"] != "dn"]
    path.write_text(yaml.safe_dump(data))
    with pytest.raises(InputFormatError, match="Expected 30 fits, found 20"):
        load_fit_results_yaml(path)


@pytest.mark.parametrize("key, value", [("params", ["a", 1.0, 2.0]), ("lo", "low")])
def test_non_numeric_fit_entry(saved, key, value):
    path, _ = saved
    data = yaml.safe_load(path.read_text())
    data["fits"][0][key] = value
    path.write_text(yaml.safe_dump(data))
    with pytest.raises(InputFormatError, match="Malformed fit results"):
        load_fit_results_yaml(path)
