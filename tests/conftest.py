from __future__ import annotations

import io
import subprocess
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import httpx
import pytest
from rich.console import Console

from imagemagick_installer import preflight
from imagemagick_installer.lib import host
from imagemagick_installer.lib import command
from imagemagick_installer.lib.releases import build_client


@dataclass
class Call:
    argv: List[str]
    cwd: Optional[str]
    env: Dict[str, str]
    to_log: bool


@dataclass
class Rule:
    match: Callable[[Call], bool]
    returncode: int
    output: str


class FakeRunner:
    """Stands in for ``subprocess.run`` and records every command."""

    def __init__(self) -> None:
        self.calls: List[Call] = []
        self.rules: List[Rule] = []

    def on(self, match: Callable[[Call], bool], *, returncode: int = 0, output: str = "") -> "FakeRunner":
        self.rules.insert(0, Rule(match=match, returncode=returncode, output=output))
        return self

    def on_program(self, program: str, *, returncode: int = 0, output: str = "") -> "FakeRunner":
        return self.on(lambda c: c.argv[0] == program, returncode=returncode, output=output)

    def programs(self) -> List[str]:
        return [c.argv[0] for c in self.calls]

    def find(self, match: Callable[[Call], bool]) -> List[Call]:
        return [c for c in self.calls if match(c)]

    def __call__(self, argv, text=True, stdout=None, stderr=None, cwd=None, env=None):
        call = Call(argv=list(argv), cwd=cwd, env=dict(env or {}), to_log=hasattr(stdout, "write"))
        self.calls.append(call)

        returncode, output = 0, ""
        for rule in self.rules:
            if rule.match(call):
                returncode, output = rule.returncode, rule.output
                break

        if call.to_log:
            stdout.write(output or f"fake output of {' '.join(call.argv)}\n")
            return subprocess.CompletedProcess(call.argv, returncode, None, None)
        return subprocess.CompletedProcess(call.argv, returncode, output, "")


@pytest.fixture
def fake_run(monkeypatch) -> FakeRunner:
    runner = FakeRunner()
    runner.on_program("lsb_release", output="Debian GNU/Linux 12 (bookworm)\n")
    monkeypatch.setattr(command.subprocess, "run", runner)
    return runner


class FakeReleases:
    """Routes for `httpx.MockTransport` plus a request log."""

    def __init__(self) -> None:
        self.requests: List[str] = []
        self.routes: Dict[str, httpx.Response] = {
            "/repos/ImageMagick/ImageMagick/releases/latest": httpx.Response(200, json={"tag_name": "7.1.1-29"}),
            "/repos/jbeich/aom/tags": httpx.Response(200, json=[{"name": "v3.8.1"}, {"name": "v3.8.0"}]),
            "/repos/strukturag/libheif/releases/latest": httpx.Response(200, json={"tag_name": "v1.17.6"}),
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(str(request.url))
        return self.routes.get(request.url.path, httpx.Response(404, text="not found"))

    def client(self) -> httpx.Client:
        return build_client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def releases() -> FakeReleases:
    return FakeReleases()


@pytest.fixture
def host_ok(monkeypatch):
    """Root on a Debian-family host with lsb_release present."""

    monkeypatch.setattr(preflight, "is_root", lambda: True)
    monkeypatch.setattr(preflight, "command_exists", lambda name: True)
    monkeypatch.setattr(host, "command_exists", lambda name: True)


@pytest.fixture
def paths(tmp_path):
    apt_dir = tmp_path / "apt"
    (apt_dir / "sources.list.d").mkdir(parents=True)
    (apt_dir / "sources.list").write_text(
        "deb http://deb.debian.org/debian bookworm main\n# deb-src http://deb.debian.org/debian bookworm main\n",
        encoding="utf-8",
    )
    config = tmp_path / "installer.yaml"
    config.write_text(
        "\n".join(
            [
                "start_delay: 0",
                "paths:",
                f"  pin_file: {tmp_path / 'preferences.d' / 'imagemagick.pref'}",
                "apt:",
                f"  sources_list: {apt_dir / 'sources.list'}",
                f"  sources_dir: {apt_dir / 'sources.list.d'}",
                "",
            ]
        ),
        encoding="utf-8",
    )
    return {
        "config": str(config),
        "log": str(tmp_path / "log" / "install-imagemagick.log"),
        "work_dir": str(tmp_path / "work"),
        "pin_file": str(tmp_path / "preferences.d" / "imagemagick.pref"),
        "sources_list": str(apt_dir / "sources.list"),
    }


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=300, color_system=None, force_terminal=False)
