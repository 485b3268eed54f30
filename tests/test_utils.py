"""Tests for result I/O, plotting helpers and the command line."""

import contextlib
import io
import os
import tempfile
import unittest

import pandas as pd
import yaml

import run_simulation
from flowsim.core.result import SimulationResult
from flowsim.statistics.time_based_metric import TimeBasedMetric
from flowsim.utils.io import load_json, save_json, save_results_csv
from flowsim.utils.visualization import plot_results


def make_result(run_id="r1", **metrics):
    return SimulationResult(
        run_id=run_id,
        profile_name="demo, first",
        model_id=1,
        model_name="mmck",
        final_clock_time=10.0,
        executed_event_count=42,
        real_time_duration_ms=1.5,
        metrics=metrics,
    )


class TestResultIO(unittest.TestCase):
    """Test cases for JSON and CSV output."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()

    def test_json_round_trip_creates_directories(self):
        """Test JSON is written under new directories and read back."""
        path = os.path.join(self.temp_dir, "nested", "out.json")
        save_json({'runs': [make_result(completed=3).to_dict()]}, path)

        data = load_json(path)
        self.assertEqual(data['runs'][0]['metrics']['completed'], 3)

    def test_csv_rows(self):
        """Test one header plus one row per result, with commas quoted."""
        path = os.path.join(self.temp_dir, "runs.csv")
        save_results_csv([make_result("a"), make_result("b")], path)

        with open(path) as f:
            lines = f.read().splitlines()
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[0], SimulationResult.csv_header())
        self.assertIn('"demo, first"', lines[1])
        self.assertTrue(lines[2].startswith("b,"))


class TestVisualization(unittest.TestCase):
    """Test cases for plot generation."""

    def test_plot_results_writes_files(self):
        """Test timeline, histogram and summary images are written."""
        metric = TimeBasedMetric(enable_history=True)
        for time, count in ((0.0, 0), (1.0, 2), (3.0, 1), (6.0, 0)):
            metric.observe_count(count, time)
        quiet = TimeBasedMetric()

        output_dir = tempfile.mkdtemp()
        plot_results({'generated': 5, 'completed': 4}, {'queue': metric, 'idle': quiet}, output_dir)

        files = set(os.listdir(output_dir))
        self.assertIn("queue_timeline.png", files)
        self.assertIn("queue_histogram.png", files)
        self.assertIn("idle_histogram.png", files)
        self.assertNotIn("idle_timeline.png", files)
        self.assertIn("summary.png", files)


class TestCommandLine(unittest.TestCase):
    """Test cases for run_simulation.main."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.temp_dir, "short.yaml")
        with open(self.config_path, 'w') as f:
            yaml.safe_dump({
                'run_strategy': {'type': 'duration', 'run_duration': 30.0, 'warmup_duration': 5.0},
                'model': {'servers': 1, 'system_capacity': 3},
            }, f)

    def _main(self, *extra):
        argv = ["--config", self.config_path, "--replications", "2", "--seed", "3", *extra]
        with contextlib.redirect_stdout(io.StringIO()) as stdout:
            output = run_simulation.main(argv)
        return output, stdout.getvalue()

    def test_trace_reaches_disk(self):
        """Test --trace writes the records to JSON and to a CSV beside the output."""
        json_path = os.path.join(self.temp_dir, "out", "results.json")
        output, _ = self._main("--trace", "--output", json_path)

        data = load_json(json_path)
        self.assertEqual(len(data['runs']), 2)
        self.assertGreater(len(data['trace']), 0)
        self.assertEqual(data['trace'][0]['point'], 'scheduled')
        self.assertEqual(len(data['trace']), len(output['trace']))

        trace_path = os.path.join(self.temp_dir, "out", "results_trace.csv")
        frame = pd.read_csv(trace_path)
        self.assertEqual(len(frame), len(data['trace']))
        self.assertEqual(
            set(frame['point']),
            {'scheduled', 'executing', 'completed'},
        )

    def test_explicit_trace_csv(self):
        """Test --trace-csv alone enables tracing and writes to the given path."""
        trace_path = os.path.join(self.temp_dir, "events.csv")
        self._main("--trace-csv", trace_path)

        frame = pd.read_csv(trace_path)
        self.assertGreater(len(frame), 0)
        self.assertIn('event_type', frame.columns)

    def test_no_trace_by_default(self):
        """Test nothing is traced unless asked for."""
        csv_path = os.path.join(self.temp_dir, "runs.csv")
        output, stdout = self._main("--csv", csv_path)

        self.assertNotIn('trace', output)
        self.assertFalse(os.path.exists(os.path.join(self.temp_dir, "runs_trace.csv")))
        self.assertIn("Simulation results:", stdout)
        self.assertEqual(set(output['aggregate']['completed']), {'mean', 'std'})


if __name__ == '__main__':
    unittest.main()
