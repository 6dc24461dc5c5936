import tempfile
from pathlib import Path

import numpy as np
from fastapi import FastAPI, File, HTTPException, UploadFile

from .audio.transcode import normalized
from .audio.wav import read_wav
from .common.errors import AudioFormatError, TranscodeError, Wav2TextError
from .common.types import TranscribeResponse
from .service import MODEL_NAME, decode_audio, transcribe

app = FastAPI(title="wav2text")


def _normalized_audio(audio_bytes: bytes, suffix: str) -> np.ndarray:
    with tempfile.TemporaryDirectory(prefix="wav2text-") as tmp:
        src = Path(tmp) / f"upload{suffix}"
        src.write_bytes(audio_bytes)
        with normalized(src) as path:
            return read_wav(path)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/transcribe", response_model=TranscribeResponse)
def transcribe_upload(file: UploadFile = File(...), normalize: bool = False) -> TranscribeResponse:
    """Transcribe an uploaded audio file.

    Runs in the threadpool since decoding and the model call block.
    """
    audio_bytes = file.file.read()
    try:
        if normalize:
            audio = _normalized_audio(audio_bytes, Path(file.filename or "").suffix)
        else:
            audio = decode_audio(audio_bytes)
        segments = transcribe(audio, MODEL_NAME)
    except AudioFormatError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except TranscodeError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except Wav2TextError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    text = " ".join(seg.text for seg in segments if seg.text)
    return TranscribeResponse(text=text, segments=segments)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)
