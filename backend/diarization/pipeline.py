"""Naive energy-based speaker diarization.

- Per-frame log-energy over 16 kHz mono PCM
- VAD by energy threshold (median * multiplier unless given)
- [energy, delta-energy] features for voiced frames, clustered with k-means
- Consecutive same-speaker frames merged into contiguous segments
"""

import logging
from typing import Optional

import numpy as np

from diarization.clustering import build_features, cluster_features, estimate_num_speakers
from diarization.segments import merge_segments
from diarization.vad import compute_frame_energies, compute_vad_threshold, filter_voiced_frames
from domain.models import DEFAULT_SAMPLE_RATE, DiarizationOptions, DiarizationResult

logger = logging.getLogger(__name__)


def diarize(
    samples: np.ndarray,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    options: Optional[DiarizationOptions] = None,
) -> DiarizationResult:
    """Turn a complete in-memory waveform into speaker-labeled segments.

    Empty audio and audio without voiced frames give an empty result rather
    than an error. Invalid buffers or rates raise ValueError.
    """
    opts = options or DiarizationOptions()
    logger.info(
        f"Starting diarization: {0 if samples is None else len(samples)} samples @ {sample_rate}Hz, "
        f"num_speakers={opts.num_speakers}, frame_ms={opts.frame_ms}"
    )

    frames = compute_frame_energies(samples, sample_rate, opts.frame_ms)
    if not frames:
        logger.warning("No frames extracted from audio")
        return DiarizationResult()

    if opts.vad_threshold is not None:
        threshold = opts.vad_threshold
    else:
        threshold = compute_vad_threshold(frames, opts.vad_multiplier)
    voiced = filter_voiced_frames(frames, threshold)
    logger.debug(f"Voice activity: {len(voiced)} voiced of {len(frames)} frames, threshold={threshold:.4f}")

    if not voiced:
        logger.warning("No voiced frames detected")
        return DiarizationResult()

    features = build_features(voiced)
    if opts.num_speakers is None:
        k = estimate_num_speakers(
            features,
            tolerance=opts.elbow_tolerance,
            max_iter=opts.max_iter,
            n_init=opts.n_init,
            random_state=opts.random_state,
        )
        logger.info(f"Estimated {k} speakers")
    else:
        k = opts.num_speakers

    logger.debug(f"Running k-means clustering: k={k}, points={len(features)}")
    clustering = cluster_features(
        features,
        k,
        max_iter=opts.max_iter,
        n_init=opts.n_init,
        random_state=opts.random_state,
    )

    segments = merge_segments(voiced, clustering.labels, opts.frame_ms)
    num_speakers = len({seg.speaker for seg in segments})
    logger.info(f"Diarization completed: {len(segments)} segments, {num_speakers} speakers")
    return DiarizationResult(segments=segments, num_speakers=num_speakers)
