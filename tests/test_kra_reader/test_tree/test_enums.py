"""Tests for CompositeOp, Colorspace and InTimeline."""

import pytest

from kra_reader.errors import UnknownColorspace, UnknownCompositeOp
from kra_reader.tree import Colorspace, CompositeOp, InTimeline


class TestCompositeOp:
    """Tests for the blend mode table."""

    def test_table_size(self):
        """Test that the full table is present."""
        assert len(CompositeOp) == 142

    @pytest.mark.parametrize("op", list(CompositeOp))
    def test_every_identifier_parses_to_its_member(self, op):
        """Test that each identifier maps back to its own member."""
        assert CompositeOp.from_string(op.value) is op

    def test_identifiers_with_spaces(self):
        """Test identifiers that contain spaces and dots."""
        assert CompositeOp.from_string("hard mix") is CompositeOp.HARD_MIX
        assert CompositeOp.from_string("lambert_lighting_gamma2.2") is CompositeOp.LAMBERT_LIGHTING_GAMMA_2_2

    @pytest.mark.parametrize("value", ["Normal", "normal ", "", "hard_mix", "NORMAL", "bogus"])
    def test_unlisted_strings_fail(self, value):
        """Test that near misses are rejected."""
        with pytest.raises(UnknownCompositeOp) as excinfo:
            CompositeOp.from_string(value)
        assert excinfo.value.value == value

    def test_str(self):
        """Test that str() gives the identifier."""
        assert str(CompositeOp.MULTIPLY) == "multiply"


class TestColorspace:
    """Tests for Colorspace."""

    def test_default(self):
        """Test the default colorspace."""
        assert Colorspace.default() is Colorspace.RGBA

    def test_from_string(self):
        """Test lookup by name."""
        assert Colorspace.from_string("RGBA") is Colorspace.RGBA

    def test_unknown(self):
        """Test that unsupported colorspaces are rejected."""
        with pytest.raises(UnknownColorspace) as excinfo:
            Colorspace.from_string("CMYKA")
        assert excinfo.value.value == "CMYKA"


class TestInTimeline:
    """Tests for InTimeline."""

    def test_hidden(self):
        """Test a node not shown in the timeline."""
        state = InTimeline.hidden()
        assert not state.is_shown
        assert not state
        assert state.onionskin is None
        assert str(state) == "not in timeline"

    def test_shown(self):
        """Test a node shown in the timeline with and without onionskin."""
        with_onionskin = InTimeline.shown(True)
        assert with_onionskin.is_shown
        assert with_onionskin.onionskin is True
        assert str(with_onionskin) == "in timeline, onionskin on"

        without = InTimeline.shown(False)
        assert without
        assert without.onionskin is False

    def test_equality(self):
        """Test value semantics."""
        assert InTimeline.shown(True) == InTimeline.shown(True)
        assert InTimeline.shown(False) != InTimeline.hidden()
