import pytest

from chatapi.cli import build_parser, main


@pytest.mark.unit
def test_parser_subcommands():
    parser = build_parser()
    args = parser.parse_args(["send", "3", "hello", "--type", "bot"])
    assert (args.cmd, args.thread_id, args.content, args.type) == ("send", 3, "hello", "bot")
    args = parser.parse_args(["new", "first message"])
    assert args.title is None
    with pytest.raises(SystemExit) as exc:
        parser.parse_args(["send", "3", "hello", "--type", "system"])
    assert exc.value.code == 2


@pytest.mark.unit
def test_logout_without_session(tmp_path, monkeypatch, capsys):
    from chatapi.core import config

    monkeypatch.setenv("CHATAPI_SESSION_FILE", str(tmp_path / "session.json"))
    config.get_client_settings.cache_clear()
    try:
        assert main(["logout"]) == 0
    finally:
        config.get_client_settings.cache_clear()
    assert "Not signed in." in capsys.readouterr().out


@pytest.mark.unit
def test_commands_without_session_report_expiry(tmp_path, monkeypatch, capsys):
    """No cached token: the API answers 401 and the CLI asks for a new login."""
    import httpx
    from chatapi.core import config

    def handler(request):
        assert "Authorization" not in request.headers
        return httpx.Response(401, json={"error": "Authentication required. Please provide a valid token."})

    original = httpx.AsyncClient.__init__

    def patched(self, *args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        original(self, *args, **kwargs)

    monkeypatch.setattr(httpx.AsyncClient, "__init__", patched)
    monkeypatch.setenv("CHATAPI_SESSION_FILE", str(tmp_path / "session.json"))
    config.get_client_settings.cache_clear()
    try:
        assert main(["threads"]) == 3
    finally:
        config.get_client_settings.cache_clear()
    assert "chatapi login" in capsys.readouterr().err
