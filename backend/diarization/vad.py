"""Energy-based voice activity detection over fixed-length frames."""

import numpy as np

from domain.models import (
    DEFAULT_FRAME_MS,
    DEFAULT_VAD_MULTIPLIER,
    MIN_ENERGY_OFFSET,
    Frame,
    VoicedFrame,
)


def compute_frame_energies(
    samples: np.ndarray,
    sample_rate: int,
    frame_ms: int = DEFAULT_FRAME_MS,
    epsilon: float = MIN_ENERGY_OFFSET,
) -> list[Frame]:
    """Slice PCM into non-overlapping frames and compute per-frame log-energy.

    Each frame holds floor(sample_rate * frame_ms / 1000) samples; a trailing
    partial frame is dropped, never padded. Energy is
    log10(epsilon + mean(sample^2)).

    Args:
        samples: 1-D array of normalized samples in [-1, 1].
        sample_rate: Samples per second, must be positive.
        frame_ms: Frame duration in milliseconds, must be positive.
        epsilon: Additive offset guarding log10(0).

    Returns:
        Frames ordered by start time.

    Raises:
        ValueError: If samples is None or not 1-D, or the rate/frame size is
            not usable.
    """
    if samples is None:
        raise ValueError("samples must not be None")
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")
    if frame_ms <= 0:
        raise ValueError(f"frame_ms must be positive, got {frame_ms}")

    pcm = np.asarray(samples, dtype=np.float64)
    if pcm.ndim != 1:
        raise ValueError(f"samples must be a 1-D mono buffer, got shape {pcm.shape}")

    hop = int(sample_rate * frame_ms // 1000)
    if hop < 1:
        raise ValueError(f"frame of {frame_ms}ms at {sample_rate}Hz holds no samples")

    num_frames = len(pcm) // hop
    if num_frames == 0:
        return []

    windows = pcm[:num_frames * hop].reshape(num_frames, hop)
    energies = np.log10(epsilon + np.mean(windows ** 2, axis=1))

    duration = frame_ms / 1000
    frames = []
    for i, energy in enumerate(energies):
        t0 = (i * hop) / sample_rate
        frames.append(Frame(start=t0, end=t0 + duration, energy=float(energy)))
    return frames


def median(values) -> float:
    """Median of a sequence; even counts average the two middle values."""
    ordered = sorted(values)
    n = len(ordered)
    if n == 0:
        raise ValueError("median of empty sequence")
    mid = n // 2
    if n % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def compute_vad_threshold(
    frames: list[Frame],
    multiplier: float = DEFAULT_VAD_MULTIPLIER,
) -> float:
    """Voice/silence threshold as median(energy) * multiplier; +inf when empty."""
    if not frames:
        return float("inf")
    return median(f.energy for f in frames) * multiplier


def filter_voiced_frames(frames: list[Frame], threshold: float) -> list[VoicedFrame]:
    """Keep frames with energy >= threshold, tagging each with its original index."""
    return [
        VoicedFrame(start=f.start, end=f.end, energy=f.energy, idx=i)
        for i, f in enumerate(frames)
        if f.energy >= threshold
    ]
