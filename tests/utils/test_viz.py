import pytest
from pathlib import Path
from csim.utils.viz import export_outcome_chart, export_outcome_ascii


@pytest.fixture
def sample_timeline():
    """Provides a sample timeline for testing."""
    return [
        {'set': 0, 'tag': 0, 'op': 'L', 'outcome': 'cold miss'},
        {'set': 0, 'tag': 0, 'op': 'L', 'outcome': 'hit'},
        {'set': 0, 'tag': 0, 'op': 'S', 'outcome': 'hit'},
        {'set': 3, 'tag': 1, 'op': 'L', 'outcome': 'cold miss'},
        {'set': 3, 'tag': 2, 'op': 'L', 'outcome': 'miss'},
        {'set': 3, 'tag': 3, 'op': 'L', 'outcome': 'miss eviction'},
    ]


class TestExportOutcomeHTML:
    def test_export_chart_empty_timeline(self, tmp_path: Path):
        """Tests that an HTML file is created for an empty timeline."""
        # given
        output_path = tmp_path / "outcomes.html"

        # when
        export_outcome_chart([], str(output_path))

        # then
        assert output_path.exists()
        assert "No data to display" in output_path.read_text()

    def test_export_chart_with_data(self, tmp_path: Path, sample_timeline):
        """Tests that a valid HTML file is created for a sample timeline."""
        # given
        output_path = tmp_path / "outcomes.html"

        # when
        export_outcome_chart(sample_timeline, str(output_path))

        # then
        content = output_path.read_text()
        assert "Cache Access Outcomes per Set" in content
        assert "cdn.plot.ly" in content
        assert "miss eviction" in content

    def test_export_chart_drops_bad_rows(self, tmp_path: Path):
        """Rows without a usable set index are ignored."""
        timeline = [
            {'set': 0, 'outcome': 'hit'},
            {'set': None, 'outcome': 'hit'},
            {'set': 'bogus', 'outcome': 'miss'},
        ]
        output_path = tmp_path / "outcomes.html"

        export_outcome_chart(timeline, str(output_path))

        assert output_path.exists()
        assert "Cache Access Outcomes per Set" in output_path.read_text()


class TestExportOutcomeASCII:
    def test_export_ascii_empty_timeline(self):
        assert "Timeline is empty" in export_outcome_ascii([])

    def test_export_ascii_with_data(self, sample_timeline):
        # when
        chart = export_outcome_ascii(sample_timeline, width=30)

        # then
        lines = chart.splitlines()
        set0 = next(line for line in lines if line.startswith("set      0"))
        set3 = next(line for line in lines if line.startswith("set      3"))
        assert set0.endswith("| 3")
        assert "HH" in set0 and "C" in set0
        assert "E" in set3 and "M" in set3
        assert "H=hit" in chart
