"""
PitchMind v1 Determinism Tests

Same input + same config → identical output, including intermediate
spectra.
"""

import numpy as np

from pitchmind.config import PipelineConfig
from pitchmind.contracts import StageContext
from pitchmind.pipeline import STAGE_ORDER, run_pipeline
from pitchmind.report import result_to_dict
from pitchmind.utils import serialize_json
from tests.conftest import int16_stream, sine


def _spectrum(stream, config):
    ctx = StageContext(config=config, values={"audio/stream": stream})
    for stage in STAGE_ORDER:
        ctx = ctx.extend(stage.run(ctx))
        if stage.contract.name == "spectrum":
            return ctx.get("spectrum/magnitude").magnitudes
    raise AssertionError("spectrum stage not reached")


class TestDeterminism:

    def test_repeated_runs_identical(self, a4_stream):
        first = run_pipeline(a4_stream)
        second = run_pipeline(a4_stream)
        assert first == second

    def test_serialized_output_identical(self, a4_stream):
        config = PipelineConfig(decimation_factor=2, search_range=0.5)
        first = serialize_json(result_to_dict(run_pipeline(a4_stream, config)))
        second = serialize_json(result_to_dict(run_pipeline(a4_stream, config)))
        assert first == second

    def test_spectra_bit_identical(self):
        stream = int16_stream(sine(523.25, duration_sec=0.5))
        config = PipelineConfig()
        np.testing.assert_array_equal(_spectrum(stream, config), _spectrum(stream, config))

    def test_stream_not_mutated_by_run(self, a4_stream):
        before = a4_stream.samples.copy()
        run_pipeline(a4_stream, PipelineConfig(decimation_factor=3))
        np.testing.assert_array_equal(a4_stream.samples, before)
