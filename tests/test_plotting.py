"""
Tests for plotting
"""

import shutil
import tempfile
import unittest
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

from roastpred.overlay import ActualReadings  # noqa: E402
from roastpred.params import RoastParameters  # noqa: E402
from roastpred.phases import segment_phases  # noqa: E402
from roastpred.plotting import plot_prediction  # noqa: E402
from roastpred.synthesizer import synthesize  # noqa: E402


class TestPlotPrediction(unittest.TestCase):

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())
        self.curve = synthesize(RoastParameters())

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_saves_plot_with_overlay(self):
        path = self.tmpdir / "curve.png"
        actuals = ActualReadings([(120, 118.0), (240, 158.0)])
        phases = segment_phases(self.curve, 150, 188)
        fig = plot_prediction(self.curve, actuals=actuals, phases=phases,
                              title="Test", save_path=str(path))
        self.assertTrue(path.exists())
        self.assertGreater(path.stat().st_size, 0)
        labels = [line.get_label() for ax in fig.axes for line in ax.get_lines()]
        self.assertIn("Predicted BT", labels)

    def test_saves_plot_without_extras(self):
        path = self.tmpdir / "bare.png"
        plot_prediction(self.curve, save_path=str(path))
        self.assertTrue(path.exists())


if __name__ == '__main__':
    unittest.main()
