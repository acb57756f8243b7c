"""
PitchMind v1 — Single-Note Pitch Detection Pipeline

Pipeline Stages (fixed order):
    1. ingest      — stream validation
    2. normalize   — raw sample words → float32 in [-1, 1]
    3. downmix     — interleaved channels → mono
    4. decimate    — strided subsampling + optional duration cap
    5. window      — Hann window
    6. spectrum    — zero-padded DFT magnitude spectrum
    7. peak        — dominant bin → Hz
    8. note        — Hz → equal-tempered note name

Invariants:
    - Same input + same config = identical output
    - No console output from the core (logging + observer hook only)
    - Either a complete PitchResult is produced or the run fails
"""

__version__ = "1.0.0"
