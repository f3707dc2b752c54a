"""
Tests for the Collision Channel Set

Validates:
- Fixed enumeration order
- Threshold lookup per gas
- Label parsing for data-file columns
"""

import pytest

from argonsim.constants import ARGON
from argonsim.mcc.channels import CHANNEL_ORDER, EXCITATION_CHANNELS, Channel


class TestChannelOrder:
    """Test the enumeration order used for cumulative selection."""

    def test_order_starts_elastic_ends_ionization(self):
        """Test selection order runs elastic to ionization."""
        assert CHANNEL_ORDER[0] is Channel.ELASTIC
        assert CHANNEL_ORDER[-1] is Channel.IONIZATION
        assert len(CHANNEL_ORDER) == len(Channel) == 5

    def test_excitation_flags(self):
        """Test is_excitation and is_inelastic flags."""
        assert EXCITATION_CHANNELS == {
            Channel.EXCITATION_LOW_1, Channel.EXCITATION_LOW_2, Channel.EXCITATION_HIGH
        }
        assert not Channel.ELASTIC.is_inelastic
        assert Channel.IONIZATION.is_inelastic
        assert not Channel.IONIZATION.is_excitation


class TestThresholds:
    """Test per-channel threshold energies."""

    def test_elastic_has_no_threshold(self):
        """Test elastic scattering has no threshold."""
        assert Channel.ELASTIC.threshold(ARGON) is None

    def test_argon_thresholds(self):
        """Test argon level and ionization energies."""
        assert Channel.EXCITATION_LOW_1.threshold(ARGON) == pytest.approx(11.55)
        assert Channel.EXCITATION_LOW_2.threshold(ARGON) == pytest.approx(12.91)
        assert Channel.EXCITATION_HIGH.threshold(ARGON) == pytest.approx(13.5)
        assert Channel.IONIZATION.threshold(ARGON) == pytest.approx(15.76)

    def test_thresholds_increase_along_order(self):
        """Test thresholds increase along the channel order."""
        thresholds = [c.threshold(ARGON) for c in CHANNEL_ORDER[1:]]
        assert thresholds == sorted(thresholds)


class TestLabels:
    """Test lookup from names and column labels."""

    @pytest.mark.parametrize("label, expected", [
        ("1S", Channel.EXCITATION_LOW_1),
        ("excitation_1s", Channel.EXCITATION_LOW_1),
        ("2p", Channel.EXCITATION_LOW_2),
        ("HIGH", Channel.EXCITATION_HIGH),
        ("iz", Channel.IONIZATION),
        ("Ionization", Channel.IONIZATION),
        (" elastic ", Channel.ELASTIC),
        ("EXCITATION_LOW_2", Channel.EXCITATION_LOW_2),
    ])
    def test_known_labels(self, label, expected):
        """Test data-file labels map to channels in any case."""
        assert Channel.from_label(label) is expected

    def test_unknown_label_raises(self):
        """Test unknown labels raise ValueError."""
        with pytest.raises(ValueError, match="Unknown collision channel"):
            Channel.from_label("3d")
