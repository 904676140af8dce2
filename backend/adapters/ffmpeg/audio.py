"""FFmpegAudioAdapter: audio decoding via libsndfile, with ffmpeg for everything else."""

import io
import os
import logging
import mimetypes
import tempfile
import subprocess
from typing import Optional

import numpy as np
import soundfile

from domain.errors import DecodeError, UnsupportedFormatError
from domain.models import PcmBuffer
from ports.audio import AudioProcessingPort

logger = logging.getLogger(__name__)

# Browsers and some providers report these; mimetypes does not know them all.
_EXTRA_EXTENSIONS = {
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/m4a": ".m4a",
    "audio/x-m4a": ".m4a",
    "audio/mp4": ".m4a",
    "audio/ogg": ".ogg",
    "audio/webm": ".webm",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
}


def _suffix_for(mime_type: Optional[str]) -> str:
    if not mime_type:
        return ""
    mime = mime_type.split(";")[0].strip().lower()
    return _EXTRA_EXTENSIONS.get(mime) or mimetypes.guess_extension(mime) or ""


class FFmpegAudioAdapter(AudioProcessingPort):
    def decode(self, raw_audio: bytes, mime_type: Optional[str] = None) -> PcmBuffer:
        if not raw_audio:
            raise DecodeError("Audio input is empty")

        try:
            samples, sample_rate = self._read(io.BytesIO(raw_audio))
        except RuntimeError as e:
            # libsndfile cannot parse MP3/M4A/WebM reliably; let ffmpeg convert.
            logger.info(f"soundfile could not decode input ({e}), converting with ffmpeg")
            samples, sample_rate = self._decode_with_ffmpeg(raw_audio, mime_type)

        if sample_rate <= 0 or samples.ndim != 2 or samples.shape[1] == 0:
            raise UnsupportedFormatError("Could not determine channel count or sample rate")

        channel_data = tuple(np.ascontiguousarray(samples[:, i]) for i in range(samples.shape[1]))
        return PcmBuffer(channel_data=channel_data, sample_rate=int(sample_rate))

    @staticmethod
    def _read(source) -> tuple[np.ndarray, int]:
        return soundfile.read(source, dtype="float32", always_2d=True)

    def _decode_with_ffmpeg(self, raw_audio: bytes, mime_type: Optional[str]) -> tuple[np.ndarray, int]:
        input_file = tempfile.NamedTemporaryFile(suffix=_suffix_for(mime_type), delete=False)
        output_file = tempfile.NamedTemporaryFile(suffix=".wav", delete=False)
        input_file.close()
        output_file.close()

        try:
            with open(input_file.name, "wb") as f:
                f.write(raw_audio)

            # Keep the source channel layout and sample rate; only the container changes.
            cmd = [
                "ffmpeg", "-y",
                "-hide_banner", "-loglevel", "error",
                "-i", input_file.name,
                "-c:a", "pcm_f32le",
                output_file.name,
            ]
            try:
                result = subprocess.run(cmd, capture_output=True, text=True)
            except FileNotFoundError as e:
                raise DecodeError("Unsupported audio container and ffmpeg is not installed") from e

            if result.returncode != 0:
                logger.error(f"Error converting audio: {result.stderr}")
                raise DecodeError(f"Failed to decode audio: {result.stderr.strip()}")

            try:
                return self._read(output_file.name)
            except RuntimeError as e:
                raise DecodeError(f"Failed to read converted audio: {e}") from e

        finally:
            for path in (input_file.name, output_file.name):
                if os.path.exists(path):
                    os.unlink(path)
