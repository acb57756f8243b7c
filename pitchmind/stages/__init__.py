"""
PitchMind v1 Pipeline Stages

Fixed order — each stage consumes only what earlier stages produced:
    1. ingest     — Stream validation
    2. normalize  — Sample Normalizer
    3. downmix    — Channel Reducer
    4. decimate   — Decimator
    5. window     — Windowing Stage
    6. spectrum   — Spectral Analyzer
    7. peak       — Peak Frequency Estimator
    8. note       — Note Mapper
"""
