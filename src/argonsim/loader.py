"""
Cross-Section Data Files

Reading and writing tabulated cross-sections as delimited text.

File Format:
    One header row followed by one row per energy sample:

        Energy,1S,2P,HIGH,IZ
        11.6,1.2e-22,0,0,0
        ...

    - Delimiter: comma, semicolon, tab or whitespace (detected from the header)
    - Header labels are matched case-insensitively, in any column order:
        energy:     ENERGY, E
        1s level:   1S, EXCITATION_1S, EXC1S
        2p level:   2P, EXCITATION_2P, EXC2P
        high level: HIGH, EXCITATION_HIGH, EXCHIGH
        ionization: IZ, IONIZATION, ION
        elastic:    ELASTIC, EL (optional; derived when absent)
      A trailing unit such as "Energy (eV)" or "IZ [m^2]" is ignored.
    - Cross-sections in m^2, energies in eV.

Rows with the wrong number of fields are skipped with a warning; anything
else malformed raises DataFormatError.
"""

import csv
import io
import logging
import re

import numpy as np

from .constants import ARGON, GasSpecies
from .errors import DataFormatError
from .mcc.channels import CHANNEL_ORDER, Channel
from .mcc.cross_sections import CrossSectionTable

logger = logging.getLogger(__name__)

ENERGY_LABELS = ('ENERGY', 'E')

# Header written by table_to_csv()
CSV_HEADER = ('Energy', '1S', '2P', 'HIGH', 'IZ')

_UNIT_SUFFIX = re.compile(r"\s*[\(\[].*[\)\]]\s*$")


def parse_cross_section_csv(text: str, gas: GasSpecies = ARGON) -> CrossSectionTable:
    """
    Parse delimited cross-section text into a validated table.

    Args:
        text: File contents
        gas: Gas the data describes

    Returns:
        table: CrossSectionTable

    Raises:
        DataFormatError: If required columns are missing, no valid data row
            remains or a value is not numeric
    """
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if len(lines) < 2:
        raise DataFormatError("Cross-section file is empty or has no data rows")

    delimiter = _detect_delimiter(lines[0])
    rows = [_split(line, delimiter) for line in lines]
    header, data = rows[0], rows[1:]

    columns = _map_header(header)

    values = {key: [] for key in columns}
    for line_number, row in enumerate(data, start=2):
        if len(row) != len(header):
            logger.warning(
                "Line %d: expected %d fields, found %d; row skipped",
                line_number, len(header), len(row),
            )
            continue
        for key, index in columns.items():
            field = row[index]
            try:
                values[key].append(float(field))
            except ValueError:
                raise DataFormatError(
                    f"Line {line_number}: non-numeric value {field!r} in column {header[index]!r}"
                ) from None

    if not values['energy']:
        raise DataFormatError("Cross-section file has no valid data rows")

    return CrossSectionTable(
        values['energy'],
        values[Channel.EXCITATION_LOW_1],
        values[Channel.EXCITATION_LOW_2],
        values[Channel.EXCITATION_HIGH],
        values[Channel.IONIZATION],
        elastic=values.get(Channel.ELASTIC),
        gas=gas,
    )


def load_cross_section_csv(path, gas: GasSpecies = ARGON) -> CrossSectionTable:
    """
    Load a cross-section table from a delimited text file.

    Args:
        path: File path
        gas: Gas the data describes

    Returns:
        table: CrossSectionTable
    """
    with open(path, 'r', encoding='utf-8-sig') as f:
        text = f.read()
    table = parse_cross_section_csv(text, gas)
    logger.info("Loaded %d cross-section samples from %s", len(table), path)
    return table


def table_to_csv(table: CrossSectionTable, include_elastic: bool = False) -> str:
    """
    Write a table as comma-separated text.

    Args:
        table: CrossSectionTable
        include_elastic: Append an ELASTIC column

    Returns:
        text: 'Energy,1S,2P,HIGH,IZ' header plus one row per sample
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')

    header = list(CSV_HEADER)
    rows = [table.sigma[CHANNEL_ORDER.index(c)] for c in CHANNEL_ORDER[1:]]
    if include_elastic:
        header.append('ELASTIC')
        rows.append(table.sigma[0])

    writer.writerow(header)
    for i, energy in enumerate(table.energy):
        writer.writerow([repr(float(energy))] + [repr(float(row[i])) for row in rows])

    return buffer.getvalue()


def save_cross_section_csv(table: CrossSectionTable, path, include_elastic: bool = False):
    """Write table_to_csv() output to a file."""
    with open(path, 'w', newline='', encoding='utf-8') as f:
        f.write(table_to_csv(table, include_elastic))


def generate_sample_table(gas: GasSpecies = ARGON, n_points: int = 100) -> CrossSectionTable:
    """
    Synthetic argon-like cross-sections for demos and tests.

    Energies E_i = 0.1 * 10^(i / 33.33) eV (0.1 to about 93 eV for 100
    points), with simple exponential excitation curves above each level
    and a ln(E/I)/E ionization curve above the ionization threshold.
    Elastic is derived.

    Args:
        gas: Gas providing the thresholds
        n_points: Number of energy samples

    Returns:
        table: CrossSectionTable
    """
    energy = 0.1 * 10.0 ** (np.arange(n_points) / 33.33)

    def above(threshold, values):
        return np.where(energy > threshold, values, 0.0)

    E_1 = gas.excitation_low_1
    E_2 = gas.excitation_low_2
    E_h = gas.excitation_high
    E_iz = gas.ionization_energy

    sigma_1s = above(E_1, 1e-20 * np.exp(-(energy - E_1) / 10.0))
    sigma_2p = above(E_2, 8e-21 * np.exp(-(energy - E_2) / 15.0))
    sigma_high = above(E_h, 5e-21 * np.exp(-(energy - E_h) / 20.0))
    sigma_iz = above(E_iz, 3e-20 * np.log(energy / E_iz) / energy)

    return CrossSectionTable(energy, sigma_1s, sigma_2p, sigma_high, sigma_iz, gas=gas)


# ==================== PARSING HELPERS ====================

def _detect_delimiter(header_line):
    for delimiter in (',', ';', '\t'):
        if delimiter in header_line:
            return delimiter
    return None


def _split(line, delimiter):
    if delimiter is None:
        return line.split()
    row = next(csv.reader([line], delimiter=delimiter))
    return [field.strip() for field in row]


def _normalise_label(label):
    return _UNIT_SUFFIX.sub('', label).strip().upper()


def _map_header(header):
    """Map 'energy' and each Channel to its column index."""
    columns = {}
    for index, label in enumerate(header):
        key = _normalise_label(label)
        if not key:
            continue
        if key in ENERGY_LABELS:
            target = 'energy'
        else:
            try:
                target = Channel.from_label(key)
            except ValueError:
                logger.warning("Ignoring unrecognised column %r", label)
                continue
        if target in columns:
            raise DataFormatError(f"Duplicate column for {_describe(target)}: {label!r}")
        columns[target] = index

    if 'energy' not in columns:
        raise DataFormatError("Required column not found for energy")
    for channel in CHANNEL_ORDER[1:]:
        if channel not in columns:
            raise DataFormatError(f"Required column not found for {channel.value}")

    return columns


def _describe(target):
    return target if isinstance(target, str) else target.value
