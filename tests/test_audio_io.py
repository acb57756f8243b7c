"""
PitchMind v1 Decoder Tests

WAV subtype → AudioStream mapping via soundfile, and detect_pitch on files.
"""

import numpy as np
import pytest
import soundfile as sf

from pitchmind import audio
from pitchmind.pipeline import detect_pitch
from pitchmind.stages.base import UnsupportedEncoding
from pitchmind.types import NoteName, SampleEncoding
from tests.conftest import SAMPLE_RATE, create_test_wav


class TestReadWav:
    """Test subtype → (bits, format) mapping."""

    @pytest.mark.parametrize("subtype,bits,fmt,dtype", [
        ("PCM_16", 16, "int", np.int16),
        ("PCM_24", 24, "int", np.int32),
        ("PCM_32", 32, "int", np.int32),
        ("FLOAT", 32, "float", np.float32),
    ])
    def test_supported_subtypes(self, tmp_path, subtype, bits, fmt, dtype):
        path = tmp_path / f"{subtype}.wav"
        create_test_wav(path, duration_sec=0.1, subtype=subtype)

        stream = audio.read_wav(path)

        assert stream.bits_per_sample == bits
        assert stream.sample_format == fmt
        assert stream.samples.dtype == dtype
        assert stream.channels == 1
        assert stream.sample_rate == SAMPLE_RATE
        assert len(stream.samples) == int(SAMPLE_RATE * 0.1)

    def test_pcm24_words_are_left_justified(self, tmp_path):
        path = tmp_path / "pcm24.wav"
        create_test_wav(path, duration_sec=0.05, subtype="PCM_24")

        stream = audio.read_wav(path)
        normalized = audio.normalize_samples(stream.samples, stream.encoding)

        assert np.all(stream.samples % 256 == 0)
        assert np.max(np.abs(normalized)) == pytest.approx(0.5, abs=1e-3)

    def test_stereo_is_interleaved(self, tmp_path):
        path = tmp_path / "stereo.wav"
        frames = np.zeros((4, 2))
        frames[:, 0] = 0.5
        frames[:, 1] = -0.5
        audio.write_wav(path, frames, 8000)

        stream = audio.read_wav(path)

        assert stream.channels == 2
        assert len(stream.samples) == 8
        assert stream.samples[0] > 0 > stream.samples[1]
        assert stream.samples[2] > 0 > stream.samples[3]

    def test_8bit_decodes_but_pipeline_rejects(self, tmp_path):
        path = tmp_path / "u8.wav"
        create_test_wav(path, duration_sec=0.1, subtype="PCM_U8")

        stream = audio.read_wav(path)
        assert stream.bits_per_sample == 8

        with pytest.raises(UnsupportedEncoding, match="8-bit int"):
            detect_pitch(path)

    def test_double_rejected(self, tmp_path):
        path = tmp_path / "double.wav"
        create_test_wav(path, duration_sec=0.1, subtype="DOUBLE")

        with pytest.raises(UnsupportedEncoding, match="64-bit float"):
            detect_pitch(path)

    def test_unknown_subtype_rejected_at_decode(self, tmp_path):
        path = tmp_path / "ulaw.wav"
        create_test_wav(path, duration_sec=0.1, subtype="ULAW")

        with pytest.raises(UnsupportedEncoding) as exc_info:
            audio.read_wav(path)

        assert exc_info.value.stage == "decode"
        assert "ULAW" in str(exc_info.value)

    def test_garbage_file_raises_runtime_error(self, tmp_path):
        path = tmp_path / "garbage.wav"
        path.write_bytes(b"not a wav file at all")

        with pytest.raises(RuntimeError):
            audio.read_wav(path)


class TestWriteWav:

    def test_clips_to_unit_range(self, tmp_path):
        path = tmp_path / "clipped.wav"
        audio.write_wav(path, np.array([2.0, -2.0, 0.0]), 8000, subtype="FLOAT")

        data, _ = sf.read(path, dtype="float32")
        np.testing.assert_allclose(data, [1.0, -1.0, 0.0])


class TestDetectPitch:

    def test_a4_file(self, tone_wav_path):
        result = detect_pitch(tone_wav_path)
        assert result.note == NoteName("A", 4)
        assert abs(result.frequency_hz - 440.0) <= SAMPLE_RATE / 65536

    @pytest.mark.parametrize("subtype", ["PCM_16", "PCM_24", "PCM_32", "FLOAT"])
    def test_every_supported_depth_agrees(self, tmp_path, subtype):
        path = tmp_path / f"e4_{subtype}.wav"
        create_test_wav(path, frequency=329.63, subtype=subtype)

        result = detect_pitch(path)
        assert result.note == NoteName("E", 4)

    def test_stereo_file(self, tmp_path):
        path = tmp_path / "stereo.wav"
        create_test_wav(path, frequency=196.0, channels=2)

        assert detect_pitch(path).note == NoteName("G", 3)

    def test_encoding_matches_subtype(self, tone_wav_path):
        assert audio.read_wav(tone_wav_path).encoding is SampleEncoding.INT16
