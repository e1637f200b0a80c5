"""
Tests for env-driven configuration and adapter factories.
"""

import os

import pytest

from adapters.energy.diarization import EnergyDiarizationAdapter
from adapters.ffmpeg.audio import FFmpegAudioAdapter
from adapters.local.log_progress import LogProgressAdapter
from config import create_audio_adapter, create_diarization_adapter, create_infra_adapters


class TestConfig:
    def test_defaults(self, fresh_config):
        cfg = fresh_config()
        assert cfg.sample_rate == 16000
        assert cfg.frame_ms == 20
        assert cfg.vad_multiplier == 1.5
        assert cfg.kmeans_seed == 0
        assert cfg.merge_word_level is True
        assert os.path.isdir(cfg.temp_dir)

    def test_env_overrides(self, fresh_config):
        cfg = fresh_config(
            FRAME_MS="25",
            NUM_SPEAKERS="3",
            MERGE_MAX_GAP_MS="900",
            MERGE_WORD_LEVEL="false",
            KMEANS_SEED="",
        )
        assert cfg.frame_ms == 25
        assert cfg.num_speakers == 3
        assert cfg.merge_max_gap_ms == 900
        assert cfg.merge_word_level is False
        assert cfg.kmeans_seed is None

    def test_singleton(self, fresh_config):
        from config import Config
        cfg = fresh_config()
        assert Config() is cfg

    def test_diarization_options_from_env(self, fresh_config):
        opts = fresh_config(NUM_SPEAKERS="12", FRAME_MS="30").diarization_options()
        assert opts.num_speakers == 6
        assert opts.frame_ms == 30

    def test_overrides_skip_none(self, fresh_config):
        opts = fresh_config(NUM_SPEAKERS="2").diarization_options(num_speakers=None, vad_threshold=-4.0)
        assert opts.num_speakers == 2
        assert opts.vad_threshold == -4.0

    def test_invalid_frame_ms_rejected(self, fresh_config):
        cfg = fresh_config()
        with pytest.raises(ValueError):
            cfg.diarization_options(frame_ms=-5)

    def test_merge_options(self, fresh_config):
        opts = fresh_config(MERGE_MAX_CHARS="100").merge_options(max_gap_ms=250)
        assert opts.max_chars_per_segment == 100
        assert opts.max_gap_ms == 250


class TestFactories:
    def test_diarization_adapter(self, fresh_config):
        adapter = create_diarization_adapter(fresh_config())
        assert isinstance(adapter, EnergyDiarizationAdapter)
        assert adapter.name() == "energy-kmeans"

    def test_audio_adapter(self, fresh_config):
        assert isinstance(create_audio_adapter(fresh_config()), FFmpegAudioAdapter)

    def test_local_infra(self, fresh_config):
        adapters = create_infra_adapters(fresh_config())
        assert isinstance(adapters["progress"], LogProgressAdapter)

    def test_unknown_infra(self, fresh_config):
        with pytest.raises(ValueError, match="Unknown INFRA"):
            create_infra_adapters(fresh_config(INFRA="redis"))
