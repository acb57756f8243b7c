"""
Stage 8: Note Mapper

Maps the peak frequency to the nearest equal-tempered note (MIDI octave
numbering) inside the configured acceptance band.
"""

from pitchmind import notes
from pitchmind.contracts import Stage, StageContract, StageContext


CONTRACT = StageContract(
    name="note",
    requires=frozenset({"peak/frequency"}),
    produces=frozenset({"result/pitch"}),
    version="1.0.0",
)


class NoteStage(Stage):
    """Stage 8: Frequency → note name."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict:
        peak = ctx.get("peak/frequency")
        config = ctx.config
        result = notes.frequency_to_note(
            peak.frequency_hz,
            reference_hz=config.reference_hz,
            min_hz=config.min_hz,
            max_hz=config.max_hz,
        )
        return {"result/pitch": result}

    def describe(self, outputs: dict) -> dict:
        result = outputs["result/pitch"]
        return {
            "in_range": result.in_range,
            "note": result.note.label if result.note else None,
        }
