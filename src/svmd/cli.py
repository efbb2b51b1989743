"""CLI entry point for svmd."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import load_config, DEFAULT_CONFIG

console = Console()


@click.group()
@click.option("--config", "-c", "config_path", default=None, help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, config_path, verbose):
    """svmd - render markdown with embedded Svelte components."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _get_config(ctx) -> dict:
    try:
        return load_config(ctx.obj.get("config_path"))
    except ValueError as e:
        console.print(f"[red]Invalid config: {escape(str(e))}[/]")
        ctx.exit(1)


@cli.command()
@click.option("--path", default=".", help="Directory to write svmd.yaml into")
def init(path):
    """Write a default svmd.yaml configuration."""
    import yaml

    config_file = Path(path).expanduser().resolve() / "svmd.yaml"
    if config_file.exists():
        console.print(f"[yellow]Config already exists: {config_file}[/]")
        return

    config_text = yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False)
    header = (
        "# Links to this host are internal; other http(s) links open in a new tab.\n"
        "# Override per document with a `hostname:` front matter key.\n"
        "# markdown_options are passed straight to markdown-it\n"
        "#   (e.g. breaks: true, typographer: false).\n\n"
    )
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(header + config_text)
    console.print(f"[bold green]✓ Created config: {config_file}[/]")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--hostname", default=None, help="Hostname for internal link detection")
@click.option("--out", "-o", "out_path", default=None, type=click.Path(path_type=Path), help="Write output here instead of stdout")
@click.option("--map", "write_map", is_flag=True, help="Also write <out>.map (requires --out)")
@click.pass_context
def render(ctx, file, hostname, out_path, write_map):
    """Transform a single .svelte.md file."""
    from .transform.preprocessor import process_markup

    config = _get_config(ctx)
    if hostname:
        config["hostname"] = hostname

    try:
        result = process_markup(file.read_text(encoding="utf-8"), str(file), config)
    except Exception as e:
        console.print(f"[red]✗ Failed to process {file.name}: {e}[/]")
        ctx.exit(1)

    if result is None:
        console.print(f"[yellow]Not a {config['extension']} file: {file}[/]")
        ctx.exit(1)

    if out_path is None:
        click.echo(result.code)
        return

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(result.code, encoding="utf-8")
    console.print(f"[green]✓ Wrote {out_path}[/]")
    if write_map:
        map_path = out_path.with_name(out_path.name + ".map")
        map_path.write_text(result.source_map.to_json(), encoding="utf-8")
        console.print(f"  → {map_path}")


@cli.command("inspect")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--prop", "-p", "props", multiple=True, help="Caller prop as key=value (repeatable)")
@click.pass_context
def inspect_file(ctx, file, props):
    """Show front matter, resolved bindings and components of a file."""
    from .transform.assembler import binding_names, resolve_bindings
    from .transform.components import extract_components
    from .transform.frontmatter import extract_frontmatter

    prop_values = {}
    for item in props:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected key=value, got {item!r}", param_hint="--prop")
        prop_values[key.strip()] = value

    metadata, body = extract_frontmatter(file.read_text(encoding="utf-8"))

    table = Table(title="Front Matter")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("Binding", style="green")
    resolved = resolve_bindings(metadata, prop_values)
    bound = set(binding_names(metadata))
    for key, value in metadata.items():
        binding = escape(str(resolved[key])) if key in bound else "[dim]frontMatter only[/]"
        table.add_row(escape(key), escape(value), binding)
    console.print(table)

    try:
        extracted = extract_components(body)
    except ValueError as e:
        console.print(f"[red]✗ {e}[/]")
        ctx.exit(1)

    table = Table(title="Components")
    table.add_column("#", style="dim", width=3)
    table.add_column("Tag", style="cyan")
    table.add_column("Placeholder")
    table.add_column("Paired", justify="center")
    table.add_column("Attributes", max_width=50)
    for occ in extracted.occurrences:
        table.add_row(str(occ.index), occ.tag_name, occ.placeholder, "yes" if occ.is_paired else "no", escape(occ.attributes_text))
    console.print(table)


@cli.command()
@click.argument("source", required=False, type=click.Path(file_okay=False, path_type=Path))
@click.option("--out", "-o", "out_dir", default=None, type=click.Path(file_okay=False, path_type=Path), help="Output directory")
@click.option("--force", is_flag=True, help="Rebuild files even if unchanged")
@click.option("--maps/--no-maps", default=True, help="Write .map files next to the output")
@click.pass_context
def build(ctx, source, out_dir, force, maps):
    """Transform every .svelte.md file under SOURCE."""
    from .writer import OutputWriter, find_sources

    config = _get_config(ctx)
    source_dir = source or Path(config["source_dir"])
    output_dir = out_dir or Path(config["output_dir"])

    if not source_dir.exists():
        console.print(f"[red]Source directory not found: {source_dir}[/]")
        ctx.exit(1)

    sources = find_sources(source_dir, config["extension"])
    if not sources:
        console.print(f"[yellow]No {config['extension']} files in {source_dir}.[/]")
        return

    console.print(f"[blue]Processing {len(sources)} file(s)...[/]")
    writer = OutputWriter(source_dir, output_dir, config, write_maps=maps)
    stats = writer.write_many(sources, force=force)

    console.print(f"[green]✓ Wrote {len(stats['written'])} file(s) to {output_dir}[/]")
    for p in stats["written"]:
        console.print(f"  → {p}")
    if stats["skipped"]:
        console.print(f"  [dim]({stats['skipped']} unchanged file(s) skipped)[/]")

    if stats["failed"]:
        for path, error in stats["failed"]:
            console.print(f"[red]✗ {path}: {error}[/]")
        ctx.exit(1)


@cli.command()
@click.option("--debounce", default=None, type=float, help="Seconds to wait after last change before rebuilding")
@click.option("--maps/--no-maps", default=True, help="Write .map files next to the output")
@click.pass_context
def watch(ctx, debounce, maps):
    """Watch the source directory and rebuild on change."""
    from .watcher import FileWatcher

    config = _get_config(ctx)
    watcher = FileWatcher(config, debounce=debounce, write_maps=maps)
    watcher.run()


if __name__ == "__main__":
    cli()
