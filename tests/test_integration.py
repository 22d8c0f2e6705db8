"""End-to-end tests: import, edit, view, export."""
import numpy as np

from sensor_log_editor.config.settings import ViewConfig
from sensor_log_editor.core import (
    EditPolicy,
    EditSession,
    SelectionSpace,
    apply_selection_to_all,
    apply_trim_to_all,
    export_all,
    export_selection,
    import_file,
    import_files,
)
from sensor_log_editor.view import LODRenderer


class TestFullWorkflow:
    def test_import_trim_export(self, write_log, log_text, ramp, tmp_path):
        """Test a batch of files trimmed with one keep selection and exported."""
        paths = [
            write_log("long.txt", log_text(ramp(3000))),
            write_log("short.txt", log_text(ramp(1000))),
            write_log("broken.txt", "garbage\n"),
        ]

        result = import_files(paths)
        session = EditSession()
        session.add_all(result.series)

        assert len(session) == 2
        assert result.num_rejected == 1

        apply_selection_to_all(session.series, 500, 1499, EditPolicy.KEEP)
        assert [len(s) for s in session] == [1000, 500]
        assert session[1].removed_original_ranges() == [(0, 499)]

        outputs = export_all(session.series, tmp_path / "out")
        reimported = [import_file(p) for p in outputs]

        np.testing.assert_array_equal(reimported[0].z, np.arange(500, 1500))
        np.testing.assert_array_equal(reimported[1].z, np.arange(500, 1000))

    def test_view_follows_edits(self, write_log, log_text, ramp):
        series = import_file(write_log("long.txt", log_text(ramp(20_000))))
        renderer = LODRenderer(series, ViewConfig(max_display_points=500, min_points_on_screen=50, max_points_on_screen=800))

        before = renderer.get_render_data(0, len(series) - 1, "z")
        assert len(before) <= 2 * 250 + 2
        assert before[-1, 1] == 19_999.0

        apply_trim_to_all([series], head_count=0, tail_count=10_000)
        after = renderer.get_render_data(0, len(series) - 1, "z")

        assert after[-1, 0] == 9_999.0
        assert after[-1, 1] == 9_999.0

    def test_time_selection_and_selection_export(self, write_log, log_text, ramp, tmp_path):
        series = import_file(write_log("walk.txt", log_text(ramp(200))))

        apply_selection_to_all(
            [series],
            np.datetime64("2024-01-01T00:00:00.500"),
            np.datetime64("2024-01-01T00:00:01.000"),
            EditPolicy.CUT,
            SelectionSpace.TIME,
        )
        assert len(series) == 149
        assert series.removed_ranges == [(50, 100)]

        output = export_selection(series, 0, 9, tmp_path)
        assert len(import_file(output)) == 10
