import pytest

from mdns_responder import cli


def test_parse_args_defaults_defer_to_config():
    args = cli.parse_args([])
    assert args.config == "config.yaml"
    assert args.interface is None
    assert args.port is None
    assert args.cache_window_ms is None
    assert args.log_level is None


def test_parse_args_overrides():
    args = cli.parse_args(
        ["--config", "x.yaml", "--interface", "10.0.0.1", "--port", "15353", "--cache-window-ms", "1000", "--log-level", "DEBUG"]
    )
    assert (args.config, args.interface, args.port, args.cache_window_ms, args.log_level) == (
        "x.yaml", "10.0.0.1", 15353, 1000, "DEBUG"
    )


def test_main_runs_serve_with_cli_values(monkeypatch):
    calls = []

    async def fake_serve(*args):
        calls.append(args)

    monkeypatch.setattr(cli, "serve", fake_serve)
    monkeypatch.setattr("sys.argv", ["mdns-responder", "--port", "15353"])
    cli.main()
    assert calls == [("config.yaml", None, 15353, None, None)]


@pytest.mark.parametrize("value", ["0", "-5", "soon"])
def test_cache_window_must_be_positive(value, capsys):
    with pytest.raises(SystemExit):
        cli.parse_args(["--cache-window-ms", value])
    assert "--cache-window-ms" in capsys.readouterr().err
