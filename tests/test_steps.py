from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from imagemagick_installer.config import InstallConfig
from imagemagick_installer.errors import DependencyError, VerificationError
from imagemagick_installer.steps import FinalizeStep, InstallDependenciesStep
from imagemagick_installer.steps.step_90_finalize import PIN_CONTENTS


@pytest.fixture
def cfg(tmp_path):
    log = tmp_path / "install.log"
    log.write_text("", encoding="utf-8")
    sources = tmp_path / "sources.list"
    sources.write_text("# deb-src http://deb.debian.org/debian bookworm main\n", encoding="utf-8")
    return InstallConfig(
        imagemagick_version="7.1.1-29",
        aom_version="3.8.1",
        libheif_version="1.17.6",
        work_dir=str(tmp_path / "work"),
        log_path=str(log),
        pin_file=str(tmp_path / "preferences.d" / "imagemagick.pref"),
        sources_list=str(sources),
        sources_dir=str(tmp_path / "sources.list.d"),
    )


def test_dependencies_refresh_index_and_remove_distro_imagemagick(fake_run, cfg):
    fake_run.on(
        lambda c: c.argv[:2] == ["dpkg-query", "-W"] and c.argv[-1] in {"imagemagick", "make"},
        output="install ok installed",
    )

    InstallDependenciesStep().run(cfg)

    argvs = [c.argv for c in fake_run.calls]
    assert argvs[0] == ["apt-get", "update", "-qq"]
    assert ["apt-get", "remove", "-y", "--autoremove", "--purge", "imagemagick"] in argvs
    assert ["apt-get", "build-dep", "-y", "imagemagick"] in argvs

    install = [a for a in argvs if a[0] == "apt-get" and "install" in a][-1]
    assert "Dpkg::Options::=--force-confold" in install
    assert "make" not in install
    assert {"lsb-release", "wget", "jq", "cmake", "yasm", "g++", "pkg-config"} <= set(install)

    assert Path(cfg.sources_list).read_text(encoding="utf-8").startswith("deb-src ")


def test_dependencies_ci_mode_skips_refresh_and_removal(fake_run, cfg):
    fake_run.on(lambda c: c.argv[:2] == ["dpkg-query", "-W"], output="install ok installed")

    InstallDependenciesStep().run(replace(cfg, ci=True))

    argvs = [c.argv for c in fake_run.calls]
    assert ["apt-get", "update", "-qq"] not in argvs
    assert not [a for a in argvs if "remove" in a]
    # everything already installed: nothing left to install
    assert not [a for a in argvs if a[0] == "apt-get" and "install" in a]


def test_dependency_failure(fake_run, cfg):
    fake_run.on(lambda c: c.argv[:2] == ["apt-get", "build-dep"], returncode=100, output="E: no deb-src\n")

    with pytest.raises(DependencyError):
        InstallDependenciesStep().run(cfg)

    assert "E: no deb-src" in Path(cfg.log_path).read_text(encoding="utf-8")


def test_finalize_writes_pin_and_verifies(fake_run, cfg):
    fake_run.on_program("identify", output="Version: ImageMagick 7.1.1-29 Q16-HDRI x86_64 https://imagemagick.org\n")

    FinalizeStep().run(cfg)

    assert Path(cfg.pin_file).read_text(encoding="utf-8") == PIN_CONTENTS
    assert PIN_CONTENTS == "Package: imagemagick*\nPin: release *\nPin-Priority: -1\n"


def test_finalize_version_mismatch(fake_run, cfg):
    fake_run.on_program("identify", output="Version: ImageMagick 6.9.11-60 Q16 x86_64\n")

    with pytest.raises(VerificationError, match="6.9.11-60"):
        FinalizeStep().run(cfg)

    assert Path(cfg.pin_file).exists()


def test_finalize_missing_identify(fake_run, cfg):
    fake_run.on_program("identify", returncode=127)

    with pytest.raises(VerificationError):
        FinalizeStep().run(cfg)


def test_undecodable_sources_file_is_a_dependency_error(fake_run, cfg):
    Path(cfg.sources_list).write_bytes(b"# deb-src http://deb.debian.org/debian \xff\xfe main\n")

    with pytest.raises(DependencyError):
        InstallDependenciesStep().run(replace(cfg, ci=True))

    assert not fake_run.find(lambda c: c.argv[:2] == ["apt-get", "build-dep"])
