import os

import pytest
import yaml

from companion.core.config import DEFAULT_CONFIG, Config


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "config.yaml"


def write(path, data):
    path.write_text(yaml.dump(data, sort_keys=False))


def test_default_config_is_written_when_missing(config_file):
    config = Config(str(config_file), watch=False)

    assert config_file.exists()
    assert yaml.safe_load(config_file.read_text())["server"] == DEFAULT_CONFIG["server"]
    assert config.data["location"]["city"] == "Dhaka"


def test_env_vars_are_substituted(config_file, monkeypatch):
    monkeypatch.setenv("COMPANION_TEST_KEY", "secret")
    write(config_file, {"coach": {"api_key": "${COMPANION_TEST_KEY}"}, "location": {"city": "$COMPANION_TEST_KEY"}})

    config = Config(str(config_file), watch=False)

    assert config.data["coach"]["api_key"] == "secret"
    assert config.data["location"]["city"] == "secret"


def test_unset_env_var_is_left_as_is(config_file, monkeypatch):
    monkeypatch.delenv("COMPANION_UNSET_KEY", raising=False)
    write(config_file, {"coach": {"api_key": "${COMPANION_UNSET_KEY}"}})

    config = Config(str(config_file), watch=False)

    assert config.data["coach"]["api_key"] == "${COMPANION_UNSET_KEY}"


def test_dotenv_file_is_loaded(config_file, monkeypatch):
    # register the variable with monkeypatch so it is removed again afterwards
    monkeypatch.setenv("COMPANION_DOTENV_KEY", "placeholder")
    monkeypatch.delenv("COMPANION_DOTENV_KEY")
    (config_file.parent / ".env").write_text('# local secrets\nCOMPANION_DOTENV_KEY="from-dotenv"\n')
    write(config_file, {"coach": {"api_key": "${COMPANION_DOTENV_KEY}"}})

    config = Config(str(config_file), watch=False)

    assert os.environ["COMPANION_DOTENV_KEY"] == "from-dotenv"
    assert config.data["coach"]["api_key"] == "from-dotenv"


def test_real_environment_wins_over_dotenv(config_file, monkeypatch):
    monkeypatch.setenv("COMPANION_DOTENV_KEY", "real")
    (config_file.parent / ".env").write_text("COMPANION_DOTENV_KEY=from-dotenv\n")

    Config(str(config_file), watch=False)

    assert os.environ["COMPANION_DOTENV_KEY"] == "real"


def test_section_merges_over_defaults(config_file):
    write(config_file, {"prayer": {"timeout": 3}})

    section = Config(str(config_file), watch=False).section("prayer")

    assert section["timeout"] == 3
    assert section["refresh_time"] == "00:05"
    assert section["sehri_alert_minutes"] == 15


def test_invalid_root_falls_back_to_defaults(config_file):
    config_file.write_text("- just\n- a list\n")

    config = Config(str(config_file), watch=False)

    assert config.data["server"]["port"] == 3000


def test_reload_notifies_callbacks(config_file):
    write(config_file, {"prayer": {"sehri_alert_minutes": 15}})
    config = Config(str(config_file), watch=False)
    seen = []
    config.register_change_callback(seen.append)

    write(config_file, {"prayer": {"sehri_alert_minutes": 25}})
    config.reload()

    assert seen[-1]["prayer"]["sehri_alert_minutes"] == 25
    assert config.section("prayer")["sehri_alert_minutes"] == 25


def test_broken_reload_keeps_previous_config(config_file):
    write(config_file, {"location": {"city": "Cairo"}})
    config = Config(str(config_file), watch=False)

    config_file.write_text("location: [unclosed\n")
    config.reload()

    assert config.data["location"]["city"] == "Cairo"


def test_config_change_updates_running_app(companion_app):
    config_file = companion_app.config.config_file
    data = yaml.safe_load(config_file.read_text())
    data["prayer"]["sehri_alert_minutes"] = 40
    write(config_file, data)

    companion_app.config.reload()

    assert companion_app.prayer_monitor.reminder.lead_minutes == 40
