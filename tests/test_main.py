from notifyd.main import build_parser, load_settings
from notifyd.services.engines import EngineChoice


def test_flags_override_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("NOTIFYD_PORT", "9000")
    monkeypatch.setenv("NOTIFYD_TARGET", "living-room")

    args = build_parser().parse_args(["--port", "9100", "--engine", "espeak"])
    settings = load_settings(args)

    assert settings.port == 9100
    assert settings.engine is EngineChoice.ESPEAK
    assert settings.target == "living-room"
    assert settings.casts_by_default


def test_config_file_is_loaded(monkeypatch, tmp_path) -> None:
    for name in ("NOTIFYD_TARGET", "NOTIFYD_ENGINE", "NOTIFYD_PLAYBACK"):
        monkeypatch.delenv(name, raising=False)
    config = tmp_path / "notifyd.env"
    config.write_text("NOTIFYD_TARGET=bedroom\nNOTIFYD_ENGINE=pico2wave\nNOTIFYD_PLAYBACK=external\n")

    settings = load_settings(build_parser().parse_args(["--config", str(config)]))

    assert settings.target == "bedroom"
    assert settings.engine is EngineChoice.PICO2WAVE
    assert settings.playback == "external"


def test_blank_target_means_local(monkeypatch) -> None:
    monkeypatch.setenv("NOTIFYD_TARGET", "  ")

    settings = load_settings(build_parser().parse_args([]))

    assert settings.target == "local"
    assert not settings.casts_by_default
