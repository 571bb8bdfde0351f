"""Tests for RoadmapSession."""

from unittest.mock import MagicMock

import pytest

from pillarmap.core.errors import EmptySourceText, SchemaViolation, UpstreamFailure
from pillarmap.core.session import RoadmapSession
from pillarmap.stages.roadmap_parser import RoadmapParser


@pytest.fixture
def mock_parser(roadmap):
    """Create a mock parser returning the sample roadmap."""
    parser = MagicMock(spec=RoadmapParser)
    parser.parse.return_value = roadmap
    return parser


class TestGenerate:
    """Tests for RoadmapSession.generate."""

    def test_success(self, mock_parser, roadmap):
        """Test that a parse result becomes the record."""
        session = RoadmapSession(mock_parser)

        assert session.generate("# Roadmap") == roadmap
        assert session.data == roadmap
        assert session.source_text == "# Roadmap"
        assert session.error is None

    def test_blank_text(self, mock_parser):
        """Test that blank text sets the prompt message."""
        session = RoadmapSession(mock_parser)

        with pytest.raises(EmptySourceText):
            session.generate("   ")

        assert session.error == "Please paste some roadmap text."
        mock_parser.parse.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [UpstreamFailure("model unavailable"), SchemaViolation("missing: pillars")],
    )
    def test_failure_keeps_previous_record(self, mock_parser, small_roadmap, error):
        """Test that a failed parse leaves the current record in place."""
        session = RoadmapSession(mock_parser, data=small_roadmap)
        mock_parser.parse.side_effect = error

        with pytest.raises(type(error)):
            session.generate("# Roadmap")

        assert session.data == small_roadmap
        assert session.error.startswith("Failed to generate roadmap.")
        assert str(error) in session.error

    def test_success_clears_error(self, mock_parser):
        """Test that a later successful parse clears the error."""
        session = RoadmapSession(mock_parser)
        mock_parser.parse.side_effect = UpstreamFailure("boom")
        with pytest.raises(UpstreamFailure):
            session.generate("# Roadmap")

        mock_parser.parse.side_effect = None
        session.generate("# Roadmap")
        assert session.error is None


class TestOnEdit:
    """Tests for RoadmapSession.on_edit."""

    def test_commit_replaces_record(self, mock_parser, small_roadmap):
        """Test that an edit swaps in a new record."""
        session = RoadmapSession(mock_parser, data=small_roadmap)

        session.on_edit("t1", "p1", 0, "  A2  ")

        assert session.data is not small_roadmap
        assert session.data.find_timeframe("t1").group_for("p1").tasks == ["A2", "B"]
        assert small_roadmap.find_timeframe("t1").group_for("p1").tasks == ["A", "B"]

    def test_blank_edit_ignored(self, mock_parser, small_roadmap):
        """Test that a blank edit keeps the same record."""
        session = RoadmapSession(mock_parser, data=small_roadmap)
        session.on_edit("t1", "p1", 0, "   ")
        assert session.data is small_roadmap

    def test_no_record(self, mock_parser):
        """Test that editing before generating does nothing."""
        session = RoadmapSession(mock_parser)
        session.on_edit("t1", "p1", 0, "A2")
        assert session.data is None

    def test_stale_edit_absorbed(self, mock_parser, small_roadmap):
        """Test that a stale address does not raise."""
        session = RoadmapSession(mock_parser, data=small_roadmap)
        session.on_edit("t9", "p1", 0, "A2")
        assert session.data == small_roadmap

    def test_malformed_index_absorbed(self, mock_parser, small_roadmap):
        """Test that a non-integer index from the caller does not raise."""
        session = RoadmapSession(mock_parser, data=small_roadmap)
        session.on_edit("t1", "p1", None, "A2")
        assert session.data == small_roadmap

    def test_views_follow_edits(self, mock_parser, small_roadmap):
        """Test that both views and the prompt see the edited record."""
        session = RoadmapSession(mock_parser, data=small_roadmap)
        session.on_edit("t1", "p1", 1, "B2")

        assert session.pillar_view().column("p1").tasks_for("t1") == ("A", "B2")
        assert session.timeline_view().column("t1").entries[0].tasks == ("A", "B2")
        assert "  - B2" in session.image_prompt()


class TestResetAndRetry:
    """Tests for reset and try_again."""

    def test_reset_keeps_source_text(self, mock_parser):
        """Test that reset drops the record but keeps the text."""
        session = RoadmapSession(mock_parser)
        session.generate("# Roadmap")

        session.reset()

        assert session.data is None
        assert session.error is None
        assert session.source_text == "# Roadmap"

    def test_try_again_clears_error(self, mock_parser):
        """Test that try_again only clears the error."""
        session = RoadmapSession(mock_parser)
        mock_parser.parse.side_effect = UpstreamFailure("boom")
        with pytest.raises(UpstreamFailure):
            session.generate("# Roadmap")

        session.try_again()

        assert session.error is None
        assert session.source_text == "# Roadmap"

    def test_views_require_record(self, mock_parser):
        """Test that views need a record."""
        session = RoadmapSession(mock_parser)
        with pytest.raises(RuntimeError, match="No roadmap loaded"):
            session.pillar_view()
        with pytest.raises(RuntimeError, match="No roadmap loaded"):
            session.image_prompt()
