from pathlib import Path

from seda.core import env
from seda.repo import config


def test_defaults_without_config_file(isolated_home):
    settings = config.load()
    assert settings.cache_dir == isolated_home
    assert settings.download_timeout == 30.0
    assert settings.ls_remote_timeout == 60.0
    assert settings.max_redirects == 10
    assert settings.editor == "code"


def test_save_then_load(tmp_path):
    settings = config.create_default(tmp_path)
    settings.max_redirects = 4
    settings.editor = "subl -n"
    fp = config.save(settings, tmp_path)

    assert fp == tmp_path / "config.toml"
    loaded = config.load(tmp_path)
    assert loaded == settings


def test_partial_config_keeps_defaults(tmp_path):
    (tmp_path / "config.toml").write_text(
        '[network]\ndownload_timeout = 5\n\n[cache]\ndir = "~/elsewhere"\n'
    )
    settings = config.load(tmp_path)
    assert settings.download_timeout == 5.0
    assert settings.max_redirects == 10
    assert settings.cache_dir == Path("~/elsewhere").expanduser()


def test_editor_env_overrides_file(tmp_path, monkeypatch):
    (tmp_path / "config.toml").write_text('[editor]\ncommand = "vim"\n')
    monkeypatch.setenv("VSCODE_ALTERNATIVE", "cursor")
    assert config.load(tmp_path).editor == "cursor"


def test_read_env_file(tmp_path):
    fp = tmp_path / ".env"
    fp.write_text(
        "# comment\n"
        "export SEDA_A=one\n"
        "SEDA_B='two words'\n"
        'SEDA_C="three"\n'
        "not a pair\n"
        "SEDA_A=ignored\n"
    )
    assert env.read_env_file(fp) == {"SEDA_A": "one", "SEDA_B": "two words", "SEDA_C": "three"}
    assert env.read_env_file(tmp_path / "missing") == {}


def test_env_files_respect_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("SEDA_ENV_FILE", str(tmp_path / "custom.env"))
    files = env.env_files()
    assert files[0] == tmp_path / "custom.env"
    assert files[1] == tmp_path / "seda-home" / ".env"
