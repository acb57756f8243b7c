"""
Stage 5: Windowing

Applies a symmetric Hann window when config.apply_window is set (default).
With windowing off the signal passes through and leaks more across bins.
"""

from pitchmind import audio
from pitchmind.contracts import Stage, StageContract, StageContext
from pitchmind.types import NormalizedSignal


CONTRACT = StageContract(
    name="window",
    requires=frozenset({"signal/decimated"}),
    produces=frozenset({"signal/windowed"}),
    version="1.0.0",
)


class WindowStage(Stage):
    """Stage 5: Hann window."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict:
        signal = ctx.get("signal/decimated")
        if not ctx.config.apply_window:
            return {"signal/windowed": signal}

        windowed = audio.apply_hann(signal.samples)
        return {"signal/windowed": NormalizedSignal(samples=windowed, sample_rate=signal.sample_rate)}

    def describe(self, outputs: dict) -> dict:
        return {"num_samples": int(len(outputs["signal/windowed"].samples))}
