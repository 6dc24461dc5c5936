"""Command-line tool transcribing an audio file with a local Whisper model."""

from __future__ import annotations

import argparse
import contextlib
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, TextIO

from .audio.transcode import normalized
from .audio.wav import read_wav
from .common.errors import Wav2TextError
from .common.events import emit
from .service import transcribe


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wav2text", description="Transcribe an audio file to text"
    )
    parser.add_argument(
        "-m", "--in-model", dest="model", required=True,
        help="CTranslate2 Whisper model directory or model size name",
    )
    parser.add_argument(
        "-a", "--in-audio", dest="audio", type=Path, required=True,
        help="input audio; a 16kHz 16-bit or float mono/stereo WAV unless --normalize is set",
    )
    parser.add_argument(
        "-o", "--out-text", dest="text", type=Path, default=None,
        help="output text file (default: stdout)",
    )
    parser.add_argument(
        "-n", "--normalize", action="store_true",
        help="convert the input to 16kHz mono 16-bit WAV with ffmpeg first",
    )
    return parser


@contextlib.contextmanager
def _audio_path(path: Path, normalize: bool) -> Iterator[Path]:
    if normalize:
        with normalized(path) as out:
            yield out
    else:
        yield path


@contextlib.contextmanager
def _output(path: Optional[Path]) -> Iterator[TextIO]:
    if path is None:
        yield sys.stdout
        return
    with path.open("w", encoding="utf-8") as f:
        yield f


def write_segments(lines: List[str], out: TextIO) -> None:
    for line in lines:
        out.write(line + "\n")
    out.flush()


def run(args: argparse.Namespace) -> None:
    with _audio_path(args.audio, args.normalize) as audio_path:
        samples = read_wav(audio_path)
    segments = transcribe(samples, args.model)
    with _output(args.text) as out:
        write_segments([seg.text for seg in segments], out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    emit("cli.args", **vars(args))
    try:
        run(args)
    except (Wav2TextError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
