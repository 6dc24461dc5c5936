import sys
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

sys.path.append(str(Path(__file__).resolve().parents[1]))


@pytest.fixture
def make_wav(tmp_path):
    """Write ``data`` to a WAV file under ``tmp_path`` and return its path."""

    def _make(data, rate=16000, subtype="PCM_16", name="in.wav"):
        path = tmp_path / name
        sf.write(str(path), np.asarray(data), rate, subtype=subtype, format="WAV")
        return path

    return _make
