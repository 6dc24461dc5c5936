"""Audio normalization through an external ffmpeg process."""

from __future__ import annotations

import contextlib
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Iterator, List, Sequence

from ..common.errors import TranscodeError
from ..common.events import emit

FFMPEG = os.getenv("WAV2TEXT_FFMPEG", "ffmpeg")


def run_command(args: Sequence[str]) -> bytes:
    """Run ``args`` and return its stdout, raising on any failure."""

    args = [str(a) for a in args]
    emit("transcode.run", cmd=args)
    try:
        proc = subprocess.run(args, capture_output=True, check=False)
    except OSError as exc:
        raise TranscodeError(f"Failed to start '{args[0]}': {exc}") from exc
    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        emit("transcode.fail", cmd=args, rc=proc.returncode, stderr=stderr)
        raise TranscodeError(
            f"Failure in '{' '.join(args)}' (exit status {proc.returncode}): {stderr}"
        )
    return proc.stdout


def ffmpeg_args(in_path: Path, out_path: Path) -> List[str]:
    # Option order matters: output options must precede the output path.
    return [
        FFMPEG,
        "-y",
        "-i", str(in_path),
        "-ar:a", "16000",
        "-ac:a", "1",
        "-codec:a", "pcm_s16le",
        "-f", "wav",
        str(out_path),
    ]


def normalize(in_path: Path, out_path: Path) -> Path:
    """Transcode ``in_path`` into 16 kHz mono 16-bit PCM WAV at ``out_path``."""
    run_command(ffmpeg_args(in_path, out_path))
    return out_path


@contextlib.contextmanager
def normalized(in_path: Path) -> Iterator[Path]:
    """Yield a temporary normalized copy of ``in_path``; it is removed on exit."""

    fd, tmp = tempfile.mkstemp(prefix="wav2text-", suffix=".wav")
    os.close(fd)
    out_path = Path(tmp)
    try:
        yield normalize(in_path, out_path)
    finally:
        out_path.unlink(missing_ok=True)
