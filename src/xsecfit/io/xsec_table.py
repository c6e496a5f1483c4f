"""
Reader for tabulated cross-section files.

Format
------
Plain text, whitespace separated numbers read as consecutive
(mass [GeV], cross-section [fb], uncertainty) triples. Line breaks carry no
meaning. Reading stops at the first token that is not a number; an
incomplete trailing triple is dropped.
"""

import logging
from pathlib import Path

from xsecfit.constants import DEFAULT_INPUT_DIR
from xsecfit.errors import InputFormatError
from xsecfit.io.registry import get_grid_entry
from xsecfit.types.fitting import Sample

logger = logging.getLogger(__name__)


def read_xsec_table(path: Path) -> list[Sample]:
    """Parse a cross-section table into an ordered list of samples."""
    path = Path(path)
    if not path.exists():
        raise InputFormatError(f"Cross-section file not found: {path}")

    # Undecodable bytes end reading like any other malformed token
    with open(path, "rb") as f:
        tokens = f.read().split()

    values: list[float] = []
    for token in tokens:
        try:
            values.append(float(token.decode("ascii")))
        except ValueError:
            logger.debug("Stopped reading %s at malformed token %r", path.name, token)
            break

    n_records = len(values) // 3
    samples = [
        Sample(mass=values[3 * i], xsec=values[3 * i + 1], xsec_unc=values[3 * i + 2])
        for i in range(n_records)
    ]
    if not samples:
        raise InputFormatError(f"No cross-section records found in {path}")
    return samples


def load_cross_sections(
    grid: str, composition: str, input_dir: Path = Path(DEFAULT_INPUT_DIR)
) -> list[Sample]:
    """Load the tabulated cross-sections for a registered grid/composition.

    Args:
        grid: Grid name, e.g. "C1N2"
        composition: Composition name, e.g. "wino"
        input_dir: Directory holding the xsec_<grid>_<composition>.txt files

    Returns:
        Samples in file order

    Raises:
        ConfigurationError: If the pair is not registered (checked before I/O)
        InputFormatError: If the file is missing or holds no records
    """
    entry = get_grid_entry(grid, composition)
    path = Path(input_dir) / entry.file_name
    samples = read_xsec_table(path)

    if len(samples) != entry.n_points:
        logger.warning(
            "%s has %d records, expected %d", path.name, len(samples), entry.n_points
        )
    logger.info("Loaded %d cross-sections from %s", len(samples), path)
    return samples
