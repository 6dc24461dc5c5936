"""WAV decoding into the float32 mono buffers the speech model expects."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Union

import numpy as np
import soundfile as sf

from ..common.errors import AudioFormatError
from ..common.events import emit
from ..common.types import WavFormat

RATE = 16000
CONTAINERS = {"WAV", "WAVEX"}
INT16 = "PCM_16"
FLOAT32 = "FLOAT"

# libsndfile subtype -> (bits, sample format) for error messages
SUBTYPE_LAYOUT = {
    "PCM_S8": (8, "Int"),
    "PCM_U8": (8, "Int"),
    "PCM_16": (16, "Int"),
    "PCM_24": (24, "Int"),
    "PCM_32": (32, "Int"),
    "FLOAT": (32, "Float"),
    "DOUBLE": (64, "Float"),
}

Source = Union[str, Path, BinaryIO]


def _name(source: Source) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, "name", "<memory>")


def _open(source: Source) -> sf.SoundFile:
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"No such audio file: {source}")
        if not path.is_file():
            raise AudioFormatError(f"Not a regular file: {source}")
    try:
        return sf.SoundFile(source)
    except RuntimeError as exc:  # sf.LibsndfileError
        raise AudioFormatError(f"Failed to parse WAV file {_name(source)}: {exc}") from exc


def _format_of(snd: sf.SoundFile) -> WavFormat:
    return WavFormat(
        container=snd.format,
        subtype=snd.subtype,
        sample_rate=snd.samplerate,
        channels=snd.channels,
        frames=snd.frames,
    )


def _is_truncated(snd: sf.SoundFile) -> bool:
    # libsndfile shrinks frames to the bytes on disk and only notes the
    # header mismatch in its log, e.g. "data : 32000 (should be 1956)"
    for line in snd.extra_info.splitlines():
        key = line.split(":", 1)[0].strip()
        if key in ("RIFF", "data") and "(should be" in line:
            return True
    return False


def validate(fmt: WavFormat, name: str = "<memory>") -> None:
    """Reject anything other than 16 kHz, 1 or 2 channels, int16 or float32."""

    if fmt.container not in CONTAINERS:
        raise AudioFormatError(f"Unsupported container {fmt.container} in file: {name}")
    if fmt.sample_rate != RATE:
        raise AudioFormatError(
            f"Unsupported sample rate: {fmt.sample_rate} Hz. Only {RATE} Hz is supported."
        )
    if fmt.channels not in (1, 2):
        raise AudioFormatError(f"Unsupported number of channels: {fmt.channels}")
    if fmt.subtype not in (INT16, FLOAT32):
        bits, kind = SUBTYPE_LAYOUT.get(fmt.subtype, ("?", fmt.subtype))
        raise AudioFormatError(
            f"Unsupported combination of bits ({bits}) and format ({kind}) in file: {name}"
        )
    if fmt.frames == 0:
        raise AudioFormatError(f"No samples in file: {name}")


def describe_wav(source: Source) -> WavFormat:
    with _open(source) as snd:
        return _format_of(snd)


def read_wav(source: Source) -> np.ndarray:
    """Decode ``source`` into a read-only float32 mono buffer at 16 kHz.

    16-bit integer samples are scaled by 1/32768, 32-bit float samples are
    passed through unchanged and stereo frames are averaged into one channel.
    """

    name = _name(source)
    with _open(source) as snd:
        fmt = _format_of(snd)
        emit("audio.format", file=name, **fmt.model_dump())
        validate(fmt, name)
        if _is_truncated(snd):
            raise AudioFormatError(f"Truncated WAV file: {name}")
        try:
            data = snd.read(dtype="float32", always_2d=True)
        except RuntimeError as exc:  # sf.LibsndfileError
            raise AudioFormatError(f"Failed to read WAV file {name}: {exc}") from exc

    if fmt.channels == 2:
        samples = (data[:, 0] + data[:, 1]) / np.float32(2.0)
    else:
        samples = data[:, 0]
    samples = np.ascontiguousarray(samples, dtype=np.float32)
    samples.setflags(write=False)
    return samples
