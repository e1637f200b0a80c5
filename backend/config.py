import os
import logging
from typing import Dict, Optional, Any
from pathlib import Path

from dotenv import load_dotenv

from domain.models import (
    DEFAULT_FRAME_MS,
    DEFAULT_MAX_CHARS_PER_SEGMENT,
    DEFAULT_MAX_GAP_MS,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_VAD_MULTIPLIER,
    DiarizationOptions,
    MergeOptions,
)

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8001
DEFAULT_TEMP_DIR = "/tmp/echo-diarizer"
DEFAULT_MAX_PCM_MB = 500
DEFAULT_LARGE_FILE_WARN_MB = 100


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


def _env_optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name, "").strip()
    return int(value) if value else None


class Config:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self.host = os.environ.get("HOST", DEFAULT_HOST)
        self.port = int(os.environ.get("PORT", DEFAULT_PORT))
        self.debug = os.environ.get("DEBUG", "0") == "1"
        self.temp_dir = os.environ.get("TEMP_DIR", DEFAULT_TEMP_DIR)
        self.infra = os.environ.get("INFRA", "local").lower()
        self.ffmpeg_binary = os.environ.get("FFMPEG_BINARY", "ffmpeg")
        self.sample_rate = int(os.environ.get("SAMPLE_RATE", DEFAULT_SAMPLE_RATE))
        self.max_pcm_mb = float(os.environ.get("MAX_PCM_MB", DEFAULT_MAX_PCM_MB))
        self.large_file_warn_mb = float(os.environ.get("LARGE_FILE_WARN_MB", DEFAULT_LARGE_FILE_WARN_MB))

        # Diarization defaults; NUM_SPEAKERS unset means estimate per file
        self.frame_ms = int(os.environ.get("FRAME_MS", DEFAULT_FRAME_MS))
        self.vad_multiplier = float(os.environ.get("VAD_MULTIPLIER", DEFAULT_VAD_MULTIPLIER))
        self.num_speakers = _env_optional_int("NUM_SPEAKERS")
        self.kmeans_max_iter = int(os.environ.get("KMEANS_MAX_ITER", "300"))
        self.kmeans_n_init = int(os.environ.get("KMEANS_N_INIT", "10"))
        # Empty KMEANS_SEED gives non-deterministic seeding
        seed = os.environ.get("KMEANS_SEED", "0").strip()
        self.kmeans_seed = int(seed) if seed else None
        self.elbow_tolerance = float(os.environ.get("ELBOW_TOLERANCE", "0.05"))

        # Word-level transcript merging
        self.merge_word_level = _env_bool("MERGE_WORD_LEVEL", "true")
        self.merge_max_gap_ms = int(os.environ.get("MERGE_MAX_GAP_MS", DEFAULT_MAX_GAP_MS))
        self.merge_max_chars = int(os.environ.get("MERGE_MAX_CHARS", DEFAULT_MAX_CHARS_PER_SEGMENT))

        Path(self.temp_dir).mkdir(parents=True, exist_ok=True)

    def diarization_options(self, **overrides) -> DiarizationOptions:
        """Build validated diarization options; None overrides are ignored."""
        values = {
            "num_speakers": self.num_speakers,
            "frame_ms": self.frame_ms,
            "vad_multiplier": self.vad_multiplier,
            "max_iter": self.kmeans_max_iter,
            "n_init": self.kmeans_n_init,
            "random_state": self.kmeans_seed,
            "elbow_tolerance": self.elbow_tolerance,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return DiarizationOptions(**values)

    def merge_options(self, **overrides) -> MergeOptions:
        values = {
            "max_gap_ms": self.merge_max_gap_ms,
            "max_chars_per_segment": self.merge_max_chars,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return MergeOptions(**values)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "infra": self.infra,
            "sample_rate": self.sample_rate,
            "frame_ms": self.frame_ms,
            "vad_multiplier": self.vad_multiplier,
            "num_speakers": self.num_speakers,
            "max_pcm_mb": self.max_pcm_mb,
            "merge_word_level": self.merge_word_level,
            "merge_max_gap_ms": self.merge_max_gap_ms,
            "merge_max_chars": self.merge_max_chars,
        }


config = Config()


def get_config() -> Config:
    return config


def create_diarization_adapter(cfg: Config):
    """Create the diarization adapter with config-derived default options."""
    from adapters.energy.diarization import EnergyDiarizationAdapter

    adapter = EnergyDiarizationAdapter(default_options=cfg.diarization_options())
    logger.info(f"Diarization adapter: {type(adapter).__name__} ({adapter.name()})")
    return adapter


def create_audio_adapter(cfg: Config):
    """Create the audio decoding adapter (always FFmpeg)."""
    from adapters.ffmpeg.audio import FFmpegAudioAdapter

    return FFmpegAudioAdapter(
        ffmpeg_binary=cfg.ffmpeg_binary,
        temp_dir=cfg.temp_dir,
        max_pcm_mb=cfg.max_pcm_mb,
        warn_mb=cfg.large_file_warn_mb,
    )


def create_infra_adapters(cfg: Config):
    """Create infrastructure adapters based on INFRA env var."""
    from adapters.local.log_progress import LogProgressAdapter

    infra = cfg.infra

    if infra == "local":
        adapters = {
            "progress": LogProgressAdapter(),
        }
    else:
        raise ValueError(f"Unknown INFRA: {infra!r}. Valid options: local")

    logger.info(f"Infra adapters: {infra} -> {', '.join(type(v).__name__ for v in adapters.values())}")
    return adapters
