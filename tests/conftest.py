import os
import pathlib
import signal
import stat
import sys
import textwrap

import psutil
import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from notifyd.config import Settings  # noqa: E402


ENGINE_SCRIPT = """\
out=""
text=""
while [ $# -gt 0 ]; do
  case "$1" in
    -w) out="$2"; shift 2 ;;
    -l|-v) shift 2 ;;
    *) text="$1"; shift ;;
  esac
done
case "$text" in
  *FAIL*) echo "engine exploded on purpose" >&2; exit 3 ;;
  *SILENT*) exit 0 ;;
  *PARTIAL*) printf "RIFF" > "$out"; echo "engine died halfway" >&2; exit 4 ;;
esac
printf 'RIFF fake wave data' > "$out"
"""

PLAYER_SCRIPT = """\
for last; do :; done
if [ ! -f "$last" ]; then
  echo "cannot open $last" >&2
  exit 1
fi
"""

CAST_SCRIPT = """\
if [ "$1" = "load" ] && [ "$4" = "ghost" ]; then
  echo "unable to find device with uuid ghost" >&2
  exit 1
fi
"""


class StubBin:
    """Directory of fake executables placed alone on PATH."""

    def __init__(self, root: pathlib.Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.log = root / "calls.log"

    def install(self, name: str, body: str = "") -> pathlib.Path:
        script = self.root / name
        script.write_text(
            "#!/bin/sh\n"
            f'printf "%s\\n" "{name} $*" >> "{self.log}"\n'
            + textwrap.dedent(body)
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    def remove(self, name: str) -> None:
        (self.root / name).unlink()

    def calls(self) -> list[str]:
        if not self.log.exists():
            return []
        return self.log.read_text().splitlines()

    def engine(self, name: str = "pico2wave") -> pathlib.Path:
        return self.install(name, ENGINE_SCRIPT)

    def player(self, name: str = "paplay") -> pathlib.Path:
        return self.install(name, PLAYER_SCRIPT)

    def caster(self, name: str = "go-chromecast") -> pathlib.Path:
        return self.install(name, CAST_SCRIPT)


@pytest.fixture
def stub_bin(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> StubBin:
    stubs = StubBin(tmp_path / "bin")
    monkeypatch.setenv("PATH", str(stubs.root))
    return stubs


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        values = {
            "engine": "auto",
            "playback": "external",
            "advertise_host": "127.0.0.1",
            "port": 8080,
            "target": "local",
            "locale": "en_US.UTF-8",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)  # pyright: ignore[reportCallIssue]

    return _make


@pytest.fixture(scope="session", autouse=True)
def cleanup_processes():
    """Kill any lingering child processes after all tests complete."""
    yield

    current_process = psutil.Process(os.getpid())
    for child in current_process.children(recursive=True):
        try:
            print(f"[CLEANUP] Terminating process {child.pid} ({child.name()})")
            child.send_signal(signal.SIGTERM)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            pass
