"""Tests for the ucjs CLI commands using fakes."""

import tomllib
from pathlib import Path

from click.testing import CliRunner

from tests.test_utils.script_tree import PRIMARY_URL, header, write_script
from ucjs_loader.cli.cli import cli
from ucjs_loader.core.config import LoaderConfig
from ucjs_loader.core.context import LoaderContext
from ucjs_loader.integrations.host.console import ConsoleHost

BOOKMARKS = "chrome://browser/content/bookmarks/bookmarksPanel.xul"


def _populate(chrome_dir: Path) -> None:
    files = chrome_dir / "UCJS_files"
    write_script(files / "a.uc.js", "alert(1);\n")
    write_script(
        files / "panel.uc.js",
        header(name="Panel", include="chrome://browser/content/bookmarks/*", version="1.0"),
    )
    write_script(files / "b.uc.xul", header(include="main", exclude=BOOKMARKS))
    write_script(chrome_dir / "UCJS_tmp" / "nested" / "c.uc.js", header(include="*"))


def _console_context(chrome_dir: Path, host_version: str = "128.0") -> LoaderContext:
    config = LoaderConfig.defaults(chrome_dir)
    host = ConsoleHost(
        primary_url=config.primary_url,
        host_name=config.host_name,
        host_version=host_version,
        required_host_name=config.host_name,
    )
    return LoaderContext.for_test(host=host, config=config)


def test_init_writes_default_config(tmp_path: Path) -> None:
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["init"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Wrote" in result.output
    data = tomllib.loads((tmp_path / "ucjs.toml").read_text(encoding="utf-8"))
    assert data["script_folders"] == ["UCJS_files", "UCJS_tmp/"]


def test_init_refuses_to_overwrite(tmp_path: Path) -> None:
    (tmp_path / "ucjs.toml").write_text("# mine\n", encoding="utf-8")
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["init"], obj=ctx)

    assert result.exit_code == 1
    assert "already exists" in result.output
    assert (tmp_path / "ucjs.toml").read_text(encoding="utf-8") == "# mine\n"


def test_init_force_overwrites(tmp_path: Path) -> None:
    (tmp_path / "ucjs.toml").write_text("# mine\n", encoding="utf-8")
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["init", "--force"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "script_folders" in (tmp_path / "ucjs.toml").read_text(encoding="utf-8")


def test_list_shows_units_in_scan_order(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["list"], obj=ctx)

    assert result.exit_code == 0, result.output
    positions = [result.output.index(name) for name in ("a.uc.js", "panel.uc.js", "c.uc.js")]
    assert positions == sorted(positions)
    assert "b.uc.xul" in result.output
    assert ctx.pool.references("ucjs-list") == 0


def test_list_filters_by_kind(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["list", "--kind", "overlay"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "b.uc.xul" in result.output
    assert "a.uc.js" not in result.output


def test_list_verbose_shows_metadata(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["list", "-v"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "UCJS_files/panel.uc.js [executable]" in result.output
    assert "@name: Panel" in result.output
    assert "@version: 1.0" in result.output
    assert "[No meta data]" in result.output


def test_list_without_scripts(tmp_path: Path) -> None:
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["list"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "No scripts found" in result.output


def test_show_by_file_name(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["show", "c.uc.js"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "UCJS_tmp/nested/c.uc.js" in result.output
    assert "folder: UCJS_tmp/nested/" in result.output
    assert "name: c.uc.js" in result.output
    assert "@include: *" in result.output


def test_show_prints_declared_name(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["show", "panel.uc.js"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "name: Panel" in result.output


def test_show_unknown_script_fails(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["show", "missing.uc.js"], obj=ctx)

    assert result.exit_code == 1
    assert "No script named missing.uc.js" in result.output


def test_match_primary_url(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["match", PRIMARY_URL], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Execute (2):" in result.output
    assert "UCJS_files/a.uc.js" in result.output
    assert "UCJS_tmp/nested/c.uc.js" in result.output
    assert "Overlay (1):" in result.output
    assert "<?xul-overlay href=" in result.output


def test_match_sidebar_url(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["match", BOOKMARKS], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Execute (2):" in result.output
    assert "UCJS_files/panel.uc.js" in result.output
    assert "Overlay (0):" in result.output
    assert "<overlay" not in result.output


def test_match_data_url_prints_encoded_overlay(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["match", "--data-url", PRIMARY_URL], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "data:application/vnd.mozilla.xul+xml;charset=utf-8,%3C%3Fxml" in result.output
    assert "<?xul-overlay" not in result.output


def test_match_without_applicable_scripts(tmp_path: Path) -> None:
    write_script(tmp_path / "UCJS_files" / "a.uc.js", "alert(1);\n")
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["match", BOOKMARKS], obj=ctx)

    assert result.exit_code == 0, result.output
    assert f"No scripts apply to {BOOKMARKS}" in result.output
    assert "Execute" not in result.output


def test_match_blocked_url(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(
        cli, ["match", "chrome://browser/content/preferences/main.xul"], obj=ctx
    )

    assert result.exit_code == 0, result.output
    assert "Blocked URL" in result.output
    assert ctx.pool.scan_count == 0


def test_simulate_window_and_sidebar(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = _console_context(tmp_path)

    result = CliRunner().invoke(
        cli, ["simulate", "--window", PRIMARY_URL, "--sidebar", BOOKMARKS], obj=ctx
    )

    assert result.exit_code == 0, result.output
    assert "a.uc.js?" in result.output
    assert f"-> {BOOKMARKS}" in result.output
    assert "overlay 1 unit(s)" in result.output
    assert "Scans performed: 1" in result.output
    assert ctx.pool.references("main") == 0


def test_simulate_two_windows_share_one_scan(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = _console_context(tmp_path)

    result = CliRunner().invoke(
        cli, ["simulate", "--window", PRIMARY_URL, "--window", PRIMARY_URL], obj=ctx
    )

    assert result.exit_code == 0, result.output
    assert "Scans performed: 1" in result.output


def test_simulate_old_host_skips_window(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = _console_context(tmp_path, host_version="3.6")

    result = CliRunner().invoke(cli, ["simulate"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "skipped:" in result.output
    assert "Scans performed: 0" in result.output


def test_simulate_sidebar_without_ready_window_fails(tmp_path: Path) -> None:
    _populate(tmp_path)
    ctx = _console_context(tmp_path, host_version="3.6")

    result = CliRunner().invoke(cli, ["simulate", "--sidebar", BOOKMARKS], obj=ctx)

    assert result.exit_code == 1
    assert "No window accepted the loader" in result.output


def test_simulate_requires_console_host(tmp_path: Path) -> None:
    ctx = LoaderContext.for_test(chrome_dir=tmp_path)

    result = CliRunner().invoke(cli, ["simulate"], obj=ctx)

    assert result.exit_code == 1
    assert "console host" in result.output
