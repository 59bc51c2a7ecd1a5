"""Shared fixtures: a scripted stand-in for the credential command."""
import json
import logging
import sys
import tempfile
from pathlib import Path

import pytest
import yaml

from rbwchain.secrets.domains.models import CredentialCommand

FAKE_RBW_TEMPLATE = """\
import json
import sys

with open({calls_path!r}, "a") as f:
    f.write(json.dumps(sys.argv[1:]) + "\\n")

sys.stdout.buffer.write({stdout!r})
sys.stderr.write({stderr!r})
sys.exit({exit_code})
"""


class FakeRbw:
    """Writes a Python script that behaves like ``rbw get``."""

    def __init__(self, root: Path):
        self.root = root
        self.script = root / "fake_rbw.py"
        self.calls_path = root / "fake_rbw_calls.jsonl"

    def configure(self, stdout=b"", stderr="", exit_code=0) -> CredentialCommand:
        if isinstance(stdout, str):
            stdout = stdout.encode("utf-8")
        self.script.write_text(FAKE_RBW_TEMPLATE.format(
            calls_path=str(self.calls_path),
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
        ))
        return self.command

    @property
    def command(self) -> CredentialCommand:
        return CredentialCommand(program=sys.executable, args=[str(self.script), "get"])

    @property
    def calls(self):
        if not self.calls_path.exists():
            return []
        return [json.loads(line) for line in self.calls_path.read_text().splitlines()]

    def write_config(self, path: Path, debug: bool = False) -> Path:
        """Config file pointing the wrapper at this fake."""
        path.write_text(yaml.dump({
            "credential_command": {
                "program": self.command.program,
                "args": self.command.args,
            },
            "debug": debug,
        }))
        return path


@pytest.fixture
def fake_rbw(tmp_path):
    """Scripted credential command rooted in a temporary directory."""
    root = tmp_path / "fake_rbw"
    root.mkdir()
    return FakeRbw(root)


@pytest.fixture
def temp_home(tmp_path, monkeypatch):
    """Isolate HOME and RBWCHAIN_CONFIG so no real config is picked up."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setattr(Path, "home", lambda: fake_home)
    monkeypatch.delenv("RBWCHAIN_CONFIG", raising=False)
    return fake_home


@pytest.fixture
def private_tempdir(tmp_path, monkeypatch):
    """Point tempfile at an empty directory so leftover files are visible."""
    directory = tmp_path / "tmp"
    directory.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(directory))
    return directory


@pytest.fixture(autouse=True)
def reset_rbwchain_logger():
    """Drop handlers main() attached to captured streams."""
    yield
    logger = logging.getLogger("rbwchain")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def run_logger():
    """A logger that propagates to caplog."""
    logger = logging.getLogger("tests.rbwchain")
    logger.setLevel(logging.DEBUG)
    return logger
