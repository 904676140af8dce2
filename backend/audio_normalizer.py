"""Audio normalization into the canonical transcription format.

Any decodable input is re-encoded as uncompressed 16-bit little-endian PCM
WAV, channels interleaved, with the standard 44-byte header.
"""

import logging
import struct
from typing import Optional

import numpy as np

from domain.errors import UnsupportedFormatError
from domain.models import AudioAsset, PcmBuffer
from ports.audio import AudioProcessingPort

logger = logging.getLogger(__name__)

WAV_MIME_TYPE = "audio/wav"
WAV_EXTENSION = ".wav"
WAV_HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8

# RIFF/WAVE header, all fields little-endian.
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def quantize(samples: np.ndarray) -> np.ndarray:
    """Convert float samples to signed 16-bit.

    Clamps to [-1, 1], scales negatives by 32768 and the rest by 32767,
    then truncates toward zero.
    """
    clipped = np.clip(np.nan_to_num(samples.astype(np.float64), nan=0.0), -1.0, 1.0)
    scaled = np.where(clipped < 0, clipped * 32768.0, clipped * 32767.0)
    return np.clip(scaled, -32768, 32767).astype("<i2")


def encode_wav(pcm: PcmBuffer) -> bytes:
    """Encode a PCM buffer as a canonical WAV container."""
    channels = pcm.num_channels
    sample_rate = pcm.sample_rate
    if channels <= 0 or sample_rate <= 0:
        raise UnsupportedFormatError(
            f"Cannot encode audio with {channels} channels at {sample_rate} Hz"
        )

    # frames x channels, row-major gives interleaved samples
    interleaved = np.stack([np.asarray(ch) for ch in pcm.channel_data], axis=1)
    data = quantize(interleaved).tobytes()

    header = _HEADER.pack(
        b"RIFF",
        36 + len(data),
        b"WAVE",
        b"fmt ",
        16,
        1,
        channels,
        sample_rate,
        sample_rate * channels * BYTES_PER_SAMPLE,
        channels * BYTES_PER_SAMPLE,
        BITS_PER_SAMPLE,
        b"data",
        len(data),
    )
    return header + data


class AudioNormalizer:
    """Decodes arbitrary input audio and re-encodes it as canonical WAV."""

    def __init__(self, audio: AudioProcessingPort):
        self._audio = audio

    def normalize(self, raw_audio: bytes, declared_mime_type: Optional[str] = None) -> AudioAsset:
        pcm = self._audio.decode(raw_audio, declared_mime_type)
        if pcm.num_channels <= 0 or pcm.sample_rate <= 0:
            raise UnsupportedFormatError(
                f"Could not determine channel count ({pcm.num_channels}) "
                f"or sample rate ({pcm.sample_rate})"
            )

        content = encode_wav(pcm)
        logger.info(
            f"Normalized {len(raw_audio)} bytes ({declared_mime_type or 'unknown type'}) "
            f"to {len(content)} bytes WAV: {pcm.num_channels}ch @ {pcm.sample_rate}Hz, "
            f"{pcm.duration:.2f}s"
        )
        return AudioAsset(
            content=content,
            mime_type=WAV_MIME_TYPE,
            extension=WAV_EXTENSION,
            duration=pcm.duration,
            sample_rate=pcm.sample_rate,
            channels=pcm.num_channels,
        )
