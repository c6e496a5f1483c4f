import pytest

from xsecfit.analysis.windows import WindowPartition
from xsecfit.errors import ConfigurationError
from xsecfit.io.registry import SLEPSLEP_BOUNDARIES


def test_windows_are_contiguous(standard_partition):
    windows = list(standard_partition)
    assert len(windows) == 10
    for left, right in zip(windows[:-1], windows[1:]):
        assert left.hi == right.lo
        assert right.index == left.index + 1
    assert standard_partition.lo == 100.0
    assert standard_partition.hi == 2000.0


def test_slepslep_partition_has_ten_windows():
    partition = WindowPartition(SLEPSLEP_BOUNDARIES)
    assert len(partition) == 10
    assert (partition[9].lo, partition[9].hi) == (500.0, 2000.0)


@pytest.mark.parametrize("boundaries", [[100.0], [100.0, 100.0], [100.0, 300.0, 200.0]])
def test_invalid_boundaries(boundaries):
    with pytest.raises(ConfigurationError):
        WindowPartition(boundaries)


class TestLocate:
    def test_half_open_membership(self, standard_partition):
        assert standard_partition.locate(100.0).index == 0
        assert standard_partition.locate(149.999).index == 0
        assert standard_partition.locate(150.0).index == 1
        assert standard_partition.locate(1999.0).index == 9

    def test_outer_edge_belongs_to_last_window(self, standard_partition):
        assert standard_partition.locate(2000.0).index == 9

    def test_outside_and_placeholder(self, standard_partition):
        assert standard_partition.locate(99.0) is None
        assert standard_partition.locate(2000.5) is None
        assert standard_partition.locate(0.0) is None
