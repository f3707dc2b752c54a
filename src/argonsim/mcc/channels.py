"""
Electron-Neutral Collision Channels

The channel set is closed: every cross-section source produces exactly these
five values and every channel has one energy-transfer rule.

CHANNEL_ORDER is the order used for cumulative channel selection and for the
rows of every cross-section vector in the package.
"""

from enum import Enum

from ..constants import GasSpecies


class Channel(Enum):
    """Collision channels of an electron with a rare-gas atom."""

    ELASTIC = "elastic"
    EXCITATION_LOW_1 = "excitation_low_1"
    EXCITATION_LOW_2 = "excitation_low_2"
    EXCITATION_HIGH = "excitation_high"
    IONIZATION = "ionization"

    @property
    def is_excitation(self):
        return self in EXCITATION_CHANNELS

    @property
    def is_inelastic(self):
        return self is not Channel.ELASTIC

    def threshold(self, gas: GasSpecies):
        """
        Threshold (and energy loss) of this channel for the given gas.

        Returns:
            Threshold energy [eV], or None for elastic scattering
        """
        if self is Channel.ELASTIC:
            return None
        if self is Channel.EXCITATION_LOW_1:
            return gas.excitation_low_1
        if self is Channel.EXCITATION_LOW_2:
            return gas.excitation_low_2
        if self is Channel.EXCITATION_HIGH:
            return gas.excitation_high
        return gas.ionization_energy

    @classmethod
    def from_label(cls, label: str) -> "Channel":
        """
        Look up a channel by name, value or data-file column label.

        Matching is case-insensitive, so 'IZ', 'ionization' and 'IONIZATION'
        all give Channel.IONIZATION.

        Raises:
            ValueError: If the label names no channel
        """
        key = label.strip().upper()
        try:
            return _LABELS[key]
        except KeyError:
            raise ValueError(f"Unknown collision channel: {label!r}") from None


CHANNEL_ORDER = (
    Channel.ELASTIC,
    Channel.EXCITATION_LOW_1,
    Channel.EXCITATION_LOW_2,
    Channel.EXCITATION_HIGH,
    Channel.IONIZATION,
)

EXCITATION_CHANNELS = frozenset({
    Channel.EXCITATION_LOW_1,
    Channel.EXCITATION_LOW_2,
    Channel.EXCITATION_HIGH,
})

# Column labels used by tabulated data files, and older channel names
_LABELS = {channel.value.upper(): channel for channel in Channel}
_LABELS.update({channel.name: channel for channel in Channel})
_LABELS.update({
    'EL': Channel.ELASTIC,
    '1S': Channel.EXCITATION_LOW_1,
    'EXCITATION_1S': Channel.EXCITATION_LOW_1,
    'EXC1S': Channel.EXCITATION_LOW_1,
    '2P': Channel.EXCITATION_LOW_2,
    'EXCITATION_2P': Channel.EXCITATION_LOW_2,
    'EXC2P': Channel.EXCITATION_LOW_2,
    'HIGH': Channel.EXCITATION_HIGH,
    'EXCHIGH': Channel.EXCITATION_HIGH,
    'IZ': Channel.IONIZATION,
    'ION': Channel.IONIZATION,
})
