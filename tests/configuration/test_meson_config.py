import logging
from pathlib import Path

import pytest

import meson_ext
from meson_ext.config import MesonConfig
from meson_ext.errors import ConfigConsumedError, OutDirNotSetError
from meson_ext.version import SemanticVersion


def _make_config(env=None) -> MesonConfig:
    return MesonConfig("meson", SemanticVersion(1, 4, 0), env=env or {})


def test_find_meson_resolves_path_and_version(fake_meson):
    meson = fake_meson(version="1.3.2")
    config = meson_ext.find_meson(env={"MESON": str(meson.path)})

    assert config.meson_path == str(meson.path)
    assert config.meson_version() == "1.3.2"
    assert config.version == SemanticVersion(1, 3, 2)


def test_version_is_queried_once(fake_meson, source_dir, out_dir):
    meson = fake_meson()
    config = meson_ext.find_meson(env={"MESON": str(meson.path)})
    config.set_out_path(out_dir).set_profile("release")
    config.meson_version()
    config.build(source_dir)

    assert meson.subcommands().count("--version") == 1


def test_explicit_out_path_wins():
    config = _make_config({"OUT_DIR": "/from/env"})
    config.set_out_path("/explicit")

    assert config.out_path() == Path("/explicit")
    assert config.build_dir() == Path("/explicit/build")
    assert config.install_dir() == Path("/explicit/install")


def test_out_path_from_environment():
    config = _make_config({"OUT_DIR": "/from/env"})

    assert config.build_dir() == Path("/from/env/build")
    assert config.install_dir() == Path("/from/env/install")


def test_missing_out_dir_is_fatal():
    config = _make_config({})

    with pytest.raises(OutDirNotSetError, match="OUT_DIR is not set"):
        config.out_path()


def test_build_without_out_dir_fails_before_running(fake_meson, source_dir):
    meson = fake_meson()
    config = meson_ext.find_meson(env={"MESON": str(meson.path)})

    with pytest.raises(OutDirNotSetError):
        config.build(source_dir)

    assert meson.subcommands() == ["--version"]


def test_explicit_profile_is_used_verbatim():
    config = _make_config({"PROFILE": "debug"})
    config.set_profile("debugoptimized")

    assert config.profile() == "debugoptimized"


@pytest.mark.parametrize("value", ["debug", "release"])
def test_known_profiles_from_environment(value, caplog):
    config = _make_config({"PROFILE": value})

    with caplog.at_level(logging.WARNING, logger="meson_ext"):
        assert config.profile() == value
    assert not caplog.records


def test_unknown_profile_warns_and_uses_release(capsys, caplog):
    config = _make_config({"PROFILE": "bench"})

    with caplog.at_level(logging.WARNING, logger="meson_ext"):
        assert config.profile() == "release"

    assert any("PROFILE 'bench' is unknown" in r.getMessage() for r in caplog.records)
    out = capsys.readouterr().out
    assert "meson_ext:warning=PROFILE 'bench' is unknown. Using release as default." in out


def test_absent_profile_defaults_to_release_without_warning(capsys, caplog):
    # Unlike an unrecognized value, a missing PROFILE is not reported
    config = _make_config({})

    with caplog.at_level(logging.WARNING, logger="meson_ext"):
        assert config.profile() == "release"

    assert not caplog.records
    assert "meson_ext:warning" not in capsys.readouterr().out


def test_setters_chain_and_overwrite():
    config = _make_config()
    result = config.set_option("a", "1").set_option("b", "2").set_option("a", "3")

    assert result is config
    assert config.options == {"a": "3", "b": "2"}


def test_config_is_consumed_by_build(fake_meson, source_dir, out_dir):
    meson = fake_meson()
    config = meson_ext.find_meson(env={"MESON": str(meson.path)})
    config.set_out_path(out_dir).set_profile("release")
    config.build(source_dir)

    with pytest.raises(ConfigConsumedError):
        config.build(source_dir)
    with pytest.raises(ConfigConsumedError):
        config.set_option("a", "1")

    assert meson.subcommands() == ["--version", "setup", "build", "install"]


def test_config_is_consumed_even_when_build_fails(fake_meson, source_dir, out_dir):
    meson = fake_meson(exit_codes={"build": 1})
    config = meson_ext.find_meson(env={"MESON": str(meson.path)})
    config.set_out_path(out_dir).set_profile("release")

    with pytest.raises(meson_ext.BuildUnsuccessful):
        config.build(source_dir)
    with pytest.raises(ConfigConsumedError):
        config.build(source_dir)
