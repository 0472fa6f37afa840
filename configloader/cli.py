# configloader/cli.py

import json
import dataclasses
import click

from .exceptions import ConfigLoadError, MockFileError, UnknownFieldError
from .loader import MockLoader, load_mock_file
from .resolver import iter_paths, resolve_field
from .utils import import_object


def _parse_overrides(overrides: str) -> dict:
    """Parse `key:json_val,key2:json_val` into a dict; non-JSON values stay strings."""
    overrides_dict = {}
    if not overrides:
        return overrides_dict
    for pair in overrides.split(","):
        if ":" in pair:
            k, raw = pair.split(":", 1)
            try:
                overrides_dict[k.strip()] = json.loads(raw.strip())
            except json.JSONDecodeError:
                overrides_dict[k.strip()] = raw.strip()
    return overrides_dict


def _fail(ctx, message, fg="red"):
    click.secho(f"Error: {message}", fg=fg, err=True)
    ctx.exit(1)


def _load(ctx):
    """Load the mock data into a fresh instance of the target type."""
    loader = ctx.obj["loader"]
    try:
        return loader.load(ctx.obj["target_type"]())
    except ConfigLoadError as e:
        _fail(ctx, e)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-t", "--target",   "target_path", required=True,
              help="Dataclass to load into, as `module:Class`")
@click.option("-m", "--mock",     "mock_files", multiple=True,
              help="JSON/TOML/.env mock data file (repeatable, later files win)")
@click.option("--overrides",      help="Comma-sep `key:json_val` pairs")
@click.option("--alias-tag",      help="Field metadata key holding external names")
@click.option("--parse-strings",  is_flag=True,
              help="Parse string values for non-string fields")
@click.pass_context
def cli(ctx, target_path, mock_files, overrides, alias_tag, parse_strings):
    """
    configloader CLI: check mock configuration data against a dataclass.

    Point `-t` at the configuration class and `-m` at mock data, then run:
      • check
      • dump      [--flat]
      • get       PATH
      • explain
    """
    # 1) resolve the target type
    try:
        target_type = import_object(target_path)
    except (ImportError, AttributeError, ValueError) as e:
        _fail(ctx, f"cannot import target '{target_path}': {e}")
    if not (isinstance(target_type, type) and dataclasses.is_dataclass(target_type)):
        _fail(ctx, f"target '{target_path}' is not a dataclass")

    # 2) collect mock data from files
    mock_data = {}
    for fp in mock_files:
        try:
            mock_data.update(load_mock_file(fp))
        except (FileNotFoundError, MockFileError) as e:
            _fail(ctx, e)

    # 3) build the loader and register overrides
    loader = MockLoader(mock_data, alias_tag=alias_tag, parse_strings=parse_strings)
    for key, value in _parse_overrides(overrides).items():
        loader.override(key, value)

    ctx.obj = {
        "loader": loader,
        "target_type": target_type,
    }

@cli.command()
@click.pass_context
def check(ctx):
    """Exit 0 if every mock path resolves and fits its field, 1 otherwise."""
    target = _load(ctx)
    count = len(ctx.obj["loader"].provenance)
    click.secho(f"OK: {count} field(s) loaded into {type(target).__name__}", fg="green")

@cli.command()
@click.option("--flat", is_flag=True, help="Print qualified dotted paths instead of nested objects")
@click.pass_context
def dump(ctx, flat):
    """Pretty-print the loaded structure as JSON."""
    target = _load(ctx)
    if flat:
        data = {p: resolve_field(target, p).get() for p in iter_paths(target, promoted=False)}
    else:
        data = dataclasses.asdict(target)
    click.echo(json.dumps(data, indent=2, default=str))

@cli.command()
@click.argument("path")
@click.pass_context
def get(ctx, path):
    """Print the value of PATH (dotted) as JSON."""
    target = _load(ctx)
    try:
        val = resolve_field(target, path, ctx.obj["loader"].alias_tag).get()
    except UnknownFieldError:
        _fail(ctx, f"Key not found: {path}", fg="yellow")
    click.echo(json.dumps(val, indent=2, default=str))

@cli.command()
@click.pass_context
def explain(ctx):
    """Show which layer and path spelling set each field."""
    _load(ctx)
    entries = ctx.obj["loader"].provenance.all_entries()
    if not entries:
        click.echo("No fields loaded")
        return
    for key in sorted(entries):
        click.echo(repr(entries[key]))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
