"""Command line interface for applying sound change rules."""

import logging
import pathlib
import pprint

import click

from . import config
from .engine import SoundChangeEngine
from .lexicon import read_lexicon, rewrite_lexicon, write_lexicon
from .constants import LEX_PREFIX, LEX_SOURCE_COLUMN, LEX_TARGET_COLUMN
from .utils import (
    ensure_path_exists,
    flatten_results,
    load_config,
    read_rules,
    set_logging_config,
    time_process,
)

CFG = {
    "rules_file": config.RULES_FILE,
    "output_dir": config.OUTPUT_DIR,
    "categories": config.CATEGORIES,
    "max_match_steps": config.MAX_MATCH_STEPS,
    "log_file": config.LOG_FILE,
}
CONTEXT_SETTINGS = dict(
    help_option_names=['-h', '--help'],
)


def update_config(ctx, param, config_file):
    """Merge the values of a user config file into CFG."""
    if config_file is not None:
        CFG.update(load_config(config_file))
    return config_file


def configure_logging(ctx, param, verbose):
    """Configure logging level and destination based on user input."""
    output_dir = ensure_path_exists(CFG.get("output_dir"))
    return set_logging_config(verbose, logfile=(output_dir / CFG.get("log_file")))


def build_engine(ctx) -> SoundChangeEngine:
    """Create an engine with the configured categories and rules.

    Exits with status 1 if the rules don't compile.
    """
    engine = SoundChangeEngine(
        CFG.get("categories"), max_steps=CFG.get("max_match_steps"))
    rules_file = ctx.obj["rules_file"]
    try:
        script = read_rules(rules_file)
    except FileNotFoundError:
        click.secho(f"Rules file not found: {rules_file}", fg="red", err=True)
        ctx.exit(1)
    result = engine.set_rules(script)
    if not result["success"]:
        click.secho(f"{rules_file}: {result['message']} ({result['kind']})", fg="red", err=True)
        ctx.exit(1)
    return engine


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-c",
    "--config-file",
    type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path),
    callback=update_config,
    is_eager=True,
    help="Python file with upper case variables that override the default config.",
)
@click.option(
    "-r",
    "--rules-file",
    type=click.Path(dir_okay=False, path_type=pathlib.Path),
    help="Text file with the sound change rules, one rule per line.",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    callback=configure_logging,
    help="Print logging messages to the console in addition to the log file. "
         "-v is informative, -vv is detailed (for debugging)."
)
@click.pass_context
def main(ctx, config_file, rules_file, verbose):
    """Apply sound change rules to words.

    Default values for the rules file, the categories and the output
    directory are specified in chronosca/config.py, and may be overridden
    by a config file. CLI arguments override both.
    """
    logging.info("START LOG")
    if rules_file is not None:
        CFG["rules_file"] = rules_file
    ctx.obj = {"rules_file": pathlib.Path(CFG.get("rules_file"))}
    if verbose:
        click.secho("Configuration values:", fg="yellow")
        click.echo(pprint.pformat(CFG))
        click.echo(f"Invoked command: {ctx.invoked_subcommand}")


@main.command("apply")
@click.argument("words", nargs=-1, required=True)
@click.pass_context
def apply_words(ctx, words):
    """Apply the rules to WORDS and print the results."""
    engine = build_engine(ctx)
    for word, result, error in flatten_results(words, engine.apply_many(words)):
        if error is None:
            click.echo(f"{word} > {result}")
        else:
            click.secho(f"{word}: {error}", fg="red")


@main.command("check")
@click.pass_context
def check_rules(ctx):
    """Check that the rules file compiles."""
    engine = build_engine(ctx)
    click.secho(f"{ctx.obj['rules_file']}: {len(engine.ruleset)} rules OK", fg="green")


@main.command("lexicon")
@click.argument(
    "csv_file",
    type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path),
)
@click.option(
    "-o", "--outfile",
    type=click.Path(dir_okay=False, path_type=pathlib.Path),
    help="File name where the rewritten lexicon will be saved. "
         "Defaults to a file in the output directory.",
)
@click.option(
    "-s", "--source-column",
    default=LEX_SOURCE_COLUMN,
    show_default=True,
    help="Column with the words to rewrite.",
)
@click.option(
    "-t", "--target-column",
    default=LEX_TARGET_COLUMN,
    show_default=True,
    help="Column that receives the rewritten words.",
)
@click.pass_context
@time_process
def rewrite_csv(ctx, csv_file, outfile, source_column, target_column):
    """Rewrite every entry of a dictionary CSV_FILE."""
    engine = build_engine(ctx)
    if outfile is None:
        outfile = ensure_path_exists(CFG.get("output_dir")) / f"{LEX_PREFIX}_{csv_file.name}"
    click.secho(f"Rewrite column '{source_column}' of {csv_file}", fg="cyan")
    lexicon = read_lexicon(csv_file)
    if source_column not in lexicon.columns:
        raise click.BadParameter(
            f"No column named '{source_column}' in {csv_file}", param_hint="--source-column")
    rewritten = rewrite_lexicon(lexicon, engine, source_column, target_column)
    write_lexicon(outfile, rewritten)
    click.secho(f"Done processing. Output is in {outfile}", fg="cyan")
