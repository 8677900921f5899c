from typer.testing import CliRunner

from post_feed import main

from conftest import FakeClient, make_comment, make_post, make_user


runner = CliRunner()


def _client():
    return FakeClient(
        users=[make_user(7, "Ada")],
        posts={7: [make_post(1, 7), make_post(2, 7)]},
        comments={1: [make_comment(10, 1)]},
    )


def test_show_writes_page_with_expanded_post(tmp_path, monkeypatch):
    monkeypatch.setattr(main, "build_client", lambda api_url: _client())
    output = tmp_path / "feed.html"

    result = runner.invoke(main.app, ["show", "7", "--expand", "1", "--output", str(output)])

    assert result.exit_code == 0
    html = output.read_text(encoding="utf-8")
    assert "Hide Comments" in html
    assert "Commenter 10" in html
    assert html.index("Title 1") < html.index("Title 2")


def test_show_exits_nonzero_when_cycle_fails(tmp_path, monkeypatch):
    monkeypatch.setattr(main, "build_client", lambda api_url: _client())
    output = tmp_path / "feed.html"

    result = runner.invoke(main.app, ["show", "9", "--output", str(output)])

    assert result.exit_code == 1
    assert not output.exists()


def test_users_lists_selection_options(monkeypatch):
    monkeypatch.setattr(main, "build_client", lambda api_url: _client())
    result = runner.invoke(main.app, ["users"])
    assert result.exit_code == 0


def test_browse_skips_non_ascii_post_id(tmp_path, monkeypatch):
    monkeypatch.setattr(main, "build_client", lambda api_url: _client())
    output = tmp_path / "feed.html"

    result = runner.invoke(main.app, ["browse", "--output", str(output)], input="7\n²\n1\n\n\n")

    assert result.exit_code == 0
    assert "Hide Comments" in output.read_text(encoding="utf-8")
