"""Command-line interface for inspecting tag libraries."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from loguru import logger

from taglookup.errors import TaglibError
from taglookup.lookup import TaglibLookup

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    taglib_files: list[Path]
    list_tags: bool
    tag: str | None
    attr: str | None
    log_level: str
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="taglookup",
        description="Merge tag-library descriptors and query the result",
    )
    p.add_argument("taglibs", nargs="*", help="Tag-library descriptor files (.toml)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover taglookup.toml)",
    )
    p.add_argument("--list", action="store_true", help="List all tags, sorted by name")
    p.add_argument("--tag", metavar="NAME", help="Show a tag and its rewrite chain")
    p.add_argument("--attr", metavar="NAME", help="Resolve an attribute of --tag")
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level for stderr output (default: WARNING)",
    )
    p.add_argument("--debug", action="store_true", help="Dump the merged lookup to stderr")
    return p


def load_config(config_path: Path | None, base_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else base_dir / "taglookup.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace, base_dir: Path | None = None) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    if base_dir is None:
        base_dir = Path(".")
    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, base_dir)
    config_dir = config_path.parent if config_path is not None else base_dir

    if args.attr and not args.tag:
        raise argparse.ArgumentTypeError("--attr requires --tag")

    # Tag libraries: config paths (relative to the config file) then CLI files
    taglib_files: list[Path] = []
    cfg_taglibs = config.get("taglibs")
    if isinstance(cfg_taglibs, dict):
        cfg_paths = cfg_taglibs.get("paths")
        if isinstance(cfg_paths, list):
            taglib_files.extend(config_dir / str(p) for p in cfg_paths)
    taglib_files.extend(Path(p) for p in args.taglibs)

    # Log level: config < CLI
    log_level = "WARNING"
    cfg_log = config.get("log")
    if isinstance(cfg_log, dict):
        cfg_level = cfg_log.get("level")
        if isinstance(cfg_level, str):
            if cfg_level.upper() not in LOG_LEVELS:
                raise argparse.ArgumentTypeError(f"invalid log level in config: {cfg_level}")
            log_level = cfg_level.upper()
    if args.log_level is not None:
        log_level = args.log_level

    return CliOptions(
        taglib_files=taglib_files,
        list_tags=args.list,
        tag=args.tag,
        attr=args.attr,
        log_level=log_level,
        debug=args.debug,
    )


def configure_logging(level: str) -> None:
    """Send taglookup log records to stderr at *level*."""
    logger.remove()
    logger.add(sys.stderr, level=level, format="{level}: {message}")
    logger.enable("taglookup")


def build_lookup(options: CliOptions) -> TaglibLookup:
    """Load every configured descriptor and register it, in order."""
    from taglookup.descriptor import load_library

    lookup = TaglibLookup()
    for path in options.taglib_files:
        logger.info(f"Loading tag library {path}")
        lookup.register(load_library(path))
    return lookup


def print_tag(lookup: TaglibLookup, name: str, out: TextIO) -> bool:
    """Print a tag summary and its rewrite chain. Returns False if unknown."""
    tag = lookup.get_tag(name)
    if tag is None:
        return False
    out.write(f"<{tag.name}>\n")
    if tag.description:
        out.write(f"  {tag.description}\n")
    if tag.parent_tag_name:
        out.write(f"  parent: <{tag.parent_tag_name}>\n")
    if tag.taglib_id:
        out.write(f"  library: {tag.taglib_id}\n")

    names: list[str] = []
    lookup.for_each_applicable_attribute(
        name, lambda attr, _tag: names.append(_attribute_label(attr))
    )
    if names:
        out.write(f"  attributes: {', '.join(names)}\n")

    lookup.for_each_tag_transformer(
        name, lambda t: out.write(f"  transformer: {t.path} (priority {t.priority})\n")
    )
    lookup.for_each_tag_migrator(
        name, lambda m: out.write(f"  migrator: {getattr(m, '__qualname__', m)}\n")
    )
    return True


def print_attribute(lookup: TaglibLookup, tag: str, attr: str, out: TextIO) -> bool:
    """Print the resolved attribute definition. Returns False if unresolved."""
    attribute = lookup.resolve_attribute(tag, attr)
    if attribute is None:
        return False
    out.write(f"<{tag} {attr}> -> {_attribute_label(attribute)}\n")
    if attribute.type:
        out.write(f"  type: {attribute.type}\n")
    if attribute.description:
        out.write(f"  {attribute.description}\n")
    if attribute.required:
        out.write("  required\n")
    if attribute.default_value is not None:
        out.write(f"  default: {attribute.default_value!r}\n")
    return True


def _attribute_label(attribute: Any) -> str:
    if attribute.pattern is not None:
        return f"/{attribute.pattern.pattern}/"
    return str(attribute.name)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    configure_logging(options.log_level)

    try:
        lookup = build_lookup(options)
    except (TaglibError, tomllib.TOMLDecodeError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.debug:
        from taglookup.debug import dump_lookup

        dump_lookup(lookup, file=sys.stderr)

    out = sys.stdout
    try:
        if options.list_tags:
            for tag in lookup.get_sorted_tags():
                out.write(f"{tag.name}\n")

        if options.tag is not None:
            if options.attr is not None:
                found = print_attribute(lookup, options.tag, options.attr, out)
                what = f"attribute '{options.attr}' on <{options.tag}>"
            else:
                found = print_tag(lookup, options.tag, out)
                what = f"tag <{options.tag}>"
            if not found:
                print(f"error: unknown {what}", file=sys.stderr)
                return 1
    except TaglibError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if not options.list_tags and options.tag is None and not options.debug:
        out.write(f"{lookup.describe()}\n")

    return 0
