"""Tests for the command line interface."""

from pathlib import Path

from click.testing import CliRunner

from svmd.cli import cli

PAGE = '---\ntitle: Hi\n---\n# Hello\n<Foo bar="1" />\n'


def test_render_prints_component():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("page.svelte.md").write_text(PAGE)
        result = runner.invoke(cli, ["render", "page.svelte.md"])
        assert result.exit_code == 0
        assert "<h1>Hello</h1>" in result.output
        assert '<Foo bar="1" />' in result.output


def test_render_to_file_with_map():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("page.svelte.md").write_text(PAGE)
        result = runner.invoke(cli, ["render", "page.svelte.md", "--out", "out/page.svelte", "--map"])
        assert result.exit_code == 0
        assert Path("out/page.svelte").read_text().startswith("<script>")
        assert Path("out/page.svelte.map").exists()


def test_render_fails_on_unbalanced_component():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("bad.svelte.md").write_text("<Box>no end\n")
        result = runner.invoke(cli, ["render", "bad.svelte.md"])
        assert result.exit_code == 1


def test_render_declines_other_files():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("page.md").write_text(PAGE)
        result = runner.invoke(cli, ["render", "page.md"])
        assert result.exit_code == 1


def test_inspect_resolves_props():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("page.svelte.md").write_text(PAGE)
        result = runner.invoke(cli, ["inspect", "page.svelte.md", "--prop", "title=Override"])
        assert result.exit_code == 0
        assert "Override" in result.output
        assert "Foo" in result.output


def test_inspect_rejects_malformed_prop():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("page.svelte.md").write_text(PAGE)
        result = runner.invoke(cli, ["inspect", "page.svelte.md", "--prop", "novalue"])
        assert result.exit_code != 0


def test_build_directory():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("pages/blog").mkdir(parents=True)
        Path("pages/blog/post.svelte.md").write_text(PAGE)
        Path("pages/index.svelte.md").write_text("# Home\n")
        result = runner.invoke(cli, ["build", "pages", "--out", "dist"])
        assert result.exit_code == 0
        assert Path("dist/blog/post.svelte").exists()
        assert Path("dist/index.svelte").exists()
        assert Path("dist/index.svelte.map").exists()

        again = runner.invoke(cli, ["build", "pages", "--out", "dist"])
        assert again.exit_code == 0
        assert "skipped" in again.output


def test_build_exits_nonzero_on_failure():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("pages").mkdir()
        Path("pages/good.svelte.md").write_text("# Good\n")
        Path("pages/bad.svelte.md").write_text("</Stray>\n")
        result = runner.invoke(cli, ["build", "pages", "--out", "dist", "--no-maps"])
        assert result.exit_code == 1
        assert Path("dist/good.svelte").exists()
        assert not Path("dist/bad.svelte").exists()


def test_init_writes_config():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        text = Path("svmd.yaml").read_text()
        assert "hostname: localhost" in text
        assert "extension: .svelte.md" in text


def test_invalid_config_exits_nonzero():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("svmd.yaml").write_text('extension: ""\n')
        Path("page.svelte.md").write_text(PAGE)
        result = runner.invoke(cli, ["render", "page.svelte.md"])
        assert result.exit_code == 1
        assert "Invalid config" in result.output
