import subprocess
from pathlib import Path

import pytest

import wav2text.audio.transcode as transcode
from wav2text.common.errors import TranscodeError


class FakeRun:
    def __init__(self, returncode=0, stdout=b"", stderr=b""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.calls = []

    def __call__(self, args, capture_output, check):
        self.calls.append(list(args))
        assert capture_output is True
        return subprocess.CompletedProcess(args, self.returncode, self.stdout, self.stderr)


def test_ffmpeg_args_order():
    args = transcode.ffmpeg_args(Path("in.mp3"), Path("/tmp/out.wav"))
    assert args[1:] == [
        "-y",
        "-i", "in.mp3",
        "-ar:a", "16000",
        "-ac:a", "1",
        "-codec:a", "pcm_s16le",
        "-f", "wav",
        "/tmp/out.wav",
    ]


def test_run_command_returns_stdout(monkeypatch):
    fake = FakeRun(stdout=b"ok\n")
    monkeypatch.setattr(transcode.subprocess, "run", fake)
    assert transcode.run_command(["echo", Path("x")]) == b"ok\n"
    assert fake.calls == [["echo", "x"]]


def test_run_command_failure_carries_stderr(monkeypatch):
    monkeypatch.setattr(transcode.subprocess, "run",
                        FakeRun(returncode=1, stderr=b"in.mp3: No such file or directory\n"))
    with pytest.raises(TranscodeError) as err:
        transcode.run_command(["ffmpeg", "-i", "in.mp3"])
    msg = str(err.value)
    assert "ffmpeg -i in.mp3" in msg
    assert "exit status 1" in msg
    assert "No such file or directory" in msg


def test_run_command_missing_executable(monkeypatch):
    def boom(*args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", "ffmpeg")

    monkeypatch.setattr(transcode.subprocess, "run", boom)
    with pytest.raises(TranscodeError, match="Failed to start 'ffmpeg'"):
        transcode.run_command(["ffmpeg"])


def test_normalized_removes_temp_file(monkeypatch):
    fake = FakeRun()
    monkeypatch.setattr(transcode.subprocess, "run", fake)
    with transcode.normalized(Path("talk.ogg")) as out:
        assert out.exists()
        assert out.suffix == ".wav"
        assert fake.calls[0][-1] == str(out)
        assert fake.calls[0][3] == "talk.ogg"
    assert not out.exists()


def test_normalized_removes_temp_file_on_failure(monkeypatch, tmp_path):
    monkeypatch.setattr(transcode.subprocess, "run", FakeRun(returncode=1, stderr=b"bad"))
    created = []
    real_mkstemp = transcode.tempfile.mkstemp

    def mkstemp(**kwargs):
        fd, name = real_mkstemp(dir=tmp_path, **kwargs)
        created.append(Path(name))
        return fd, name

    monkeypatch.setattr(transcode.tempfile, "mkstemp", mkstemp)
    with pytest.raises(TranscodeError):
        with transcode.normalized(Path("talk.ogg")):
            pass
    assert created and not created[0].exists()
