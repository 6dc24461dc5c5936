import io
import os
from functools import lru_cache
from typing import List

import numpy as np
from faster_whisper import WhisperModel

from .audio.wav import RATE, read_wav
from .common.errors import ModelError, TranscriptionError
from .common.events import emit
from .common.types import Segment

MODEL_NAME = os.getenv("WAV2TEXT_MODEL", "tiny.en")
MODELS_DIR = os.getenv("WAV2TEXT_MODELS_DIR", "models/asr")
DEVICE = os.getenv("WAV2TEXT_DEVICE", "cpu")
COMPUTE_TYPE = os.getenv("WAV2TEXT_COMPUTE_TYPE", "int8")
LANGUAGE = os.getenv("WAV2TEXT_LANGUAGE") or None


@lru_cache()
def get_model(model: str = MODEL_NAME) -> WhisperModel:
    """Load and cache the ASR model.

    ``model`` is either a local CTranslate2 model directory or a model size
    name such as ``tiny.en``.
    """
    emit("asr.model", model=model, device=DEVICE, compute_type=COMPUTE_TYPE)
    try:
        return WhisperModel(
            model, device=DEVICE, compute_type=COMPUTE_TYPE, download_root=MODELS_DIR
        )
    except Exception as exc:
        raise ModelError(f"failed to load model {model}: {exc}") from exc


def transcribe(samples: np.ndarray, model: str = MODEL_NAME) -> List[Segment]:
    """Run greedy decoding over ``samples`` and return the segments in order."""

    whisper = get_model(model)
    try:
        segments, _ = whisper.transcribe(
            samples, beam_size=1, best_of=1, language=LANGUAGE
        )
        # the generator is lazy; decoding happens while iterating
        result = [
            Segment(start=seg.start, end=seg.end, text=seg.text.strip())
            for seg in segments
        ]
    except Exception as exc:
        raise TranscriptionError(f"failed to run model: {exc}") from exc
    emit("asr.done", segments=len(result), seconds=len(samples) / RATE)
    return result


def decode_audio(audio_bytes: bytes) -> np.ndarray:
    """Decode in-memory WAV bytes into a float32 mono buffer."""
    return read_wav(io.BytesIO(audio_bytes))
