"""
PitchMind v1 Report Rendering Tests
"""

from pitchmind.report import render_text, result_to_dict
from pitchmind.types import NoteName, PitchResult


IN_RANGE = PitchResult(frequency_hz=440.0859, note=NoteName("A", 4), in_range=True, cents=0.34)
OUT_OF_RANGE = PitchResult(frequency_hz=5000.0, note=None, in_range=False)


class TestRenderText:

    def test_in_range(self):
        assert render_text(IN_RANGE) == [
            "Dominant frequency: 440.09 Hz",
            "Closest musical note: A4",
        ]

    def test_out_of_range(self):
        assert render_text(OUT_OF_RANGE) == [
            "Dominant frequency: 5000.00 Hz",
            "Dominant frequency out of expected range: 5000.00 Hz",
        ]

    def test_sharp_note(self):
        result = PitchResult(277.18, NoteName("C#", 4), True, 0.0)
        assert render_text(result)[1] == "Closest musical note: C#4"


class TestResultToDict:

    def test_in_range(self):
        assert result_to_dict(IN_RANGE) == {
            "frequency_hz": 440.0859,
            "in_range": True,
            "note": {"letter": "A", "octave": 4, "midi": 69, "label": "A4"},
            "cents": 0.34,
        }

    def test_out_of_range(self):
        data = result_to_dict(OUT_OF_RANGE)
        assert data["note"] is None
        assert data["cents"] is None
        assert data["in_range"] is False
