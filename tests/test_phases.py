"""
Tests for phase segmentation and curve summary
"""

import unittest

import pandas as pd

from roastpred.params import RoastParameters
from roastpred.phases import find_crossing_time, segment_phases, summarize_curve
from roastpred.synthesizer import synthesize


def make_curve(bt, start=60):
    n = len(bt)
    return pd.DataFrame({
        "time": [start + i for i in range(n)],
        "offset": list(range(n)),
        "bt": bt,
        "ror": [0.0] * n,
    })


class TestFindCrossingTime(unittest.TestCase):

    def setUp(self):
        self.curve = make_curve([100.0, 110.0, 120.0])

    def test_interpolates(self):
        self.assertAlmostEqual(find_crossing_time(self.curve, 115.0, 2), 1.5)

    def test_exact_match(self):
        self.assertEqual(find_crossing_time(self.curve, 100.0, 2), 0.0)
        self.assertEqual(find_crossing_time(self.curve, 110.0, 2), 1.0)

    def test_never_reached(self):
        self.assertIsNone(find_crossing_time(self.curve, 130.0, 2))
        self.assertIsNone(find_crossing_time(self.curve, 90.0, 2))

    def test_capped(self):
        self.assertEqual(find_crossing_time(self.curve, 115.0, 1), 1.0)

    def test_flat_segment(self):
        curve = make_curve([100.0, 105.0, 105.0, 110.0])
        self.assertEqual(find_crossing_time(curve, 105.0, 3), 1.0)


class TestSegmentPhases(unittest.TestCase):

    def setUp(self):
        self.params = RoastParameters()
        self.curve = synthesize(self.params)

    def test_partition(self):
        phases = segment_phases(self.curve, 150, 188)
        total = phases["drying_time"] + phases["maillard_time"] + phases["development_time"]
        self.assertEqual(total, 390)
        pct = phases["drying_pct"] + phases["maillard_pct"] + phases["development_pct"]
        self.assertAlmostEqual(pct, 100.0)

    def test_boundaries_in_order(self):
        phases = segment_phases(self.curve, 150, 188)
        self.assertGreater(phases["yellowing_offset"], 0)
        self.assertGreater(phases["first_crack_offset"], phases["yellowing_offset"])
        self.assertLess(phases["first_crack_offset"], 390)
        self.assertEqual(phases["yellowing_time"], 60 + phases["yellowing_offset"])
        self.assertEqual(phases["dev_ratio"], phases["development_pct"])

    def test_boundary_temperatures(self):
        phases = segment_phases(self.curve, 150, 188)
        bt = self.curve["bt"]
        self.assertAlmostEqual(bt.iloc[phases["yellowing_offset"]], 150.0, delta=0.5)
        self.assertAlmostEqual(bt.iloc[phases["first_crack_offset"]], 188.0, delta=0.5)
        rise = phases["drying_temp_rise"] + phases["maillard_temp_rise"] + phases["development_temp_rise"]
        self.assertAlmostEqual(rise, 104.0, places=1)

    def test_targets_beyond_curve(self):
        phases = segment_phases(self.curve, 250, 260)
        self.assertEqual(phases["drying_time"], 390)
        self.assertEqual(phases["maillard_time"], 0)
        self.assertEqual(phases["development_time"], 0)

    def test_targets_below_curve(self):
        phases = segment_phases(self.curve, 80, 90)
        self.assertEqual(phases["drying_time"], 0)
        self.assertEqual(phases["development_time"], 390)


class TestSummarizeCurve(unittest.TestCase):

    def test_summary(self):
        summary = summarize_curve(synthesize(RoastParameters()))
        self.assertEqual(summary["duration"], 390)
        self.assertAlmostEqual(summary["temp_gain"], 104.0)
        self.assertAlmostEqual(summary["ror_drift"], -10.0)
        self.assertEqual(summary["peak_ror"], 20.0)

    def test_empty(self):
        self.assertEqual(summarize_curve(pd.DataFrame())["duration"], 0)


if __name__ == '__main__':
    unittest.main()
