"""Exceptions raised by the wav2text pipeline."""

from __future__ import annotations


class Wav2TextError(Exception):
    """Base class for all pipeline failures."""


class AudioFormatError(Wav2TextError, ValueError):
    """The input is not a WAV file the model can consume."""


class TranscodeError(Wav2TextError):
    """The external transcoder could not be run or exited with an error."""


class ModelError(Wav2TextError):
    """The speech model could not be loaded."""


class TranscriptionError(Wav2TextError):
    """The speech model failed while decoding audio."""
