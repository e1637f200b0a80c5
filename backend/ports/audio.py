"""AudioProcessingPort — abstract interface for audio decoding."""

from abc import ABC, abstractmethod

import numpy as np


class AudioProcessingPort(ABC):
    @abstractmethod
    def decode_pcm(self, input_path: str, sample_rate: int = 16000) -> np.ndarray:
        """Decode audio to mono float32 samples in [-1, 1] at sample_rate.

        Any temporary storage must be released before returning or raising.
        """
