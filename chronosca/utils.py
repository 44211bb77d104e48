"""Utility functions for chronosca"""

import functools
import importlib.util
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Union, Iterable, List, Dict, Tuple

import click
import regex
from schema import Schema, SchemaError

from .exceptions import InputError

GRAPHEME_PATTERN = regex.compile(r"\X")
"""Extended grapheme clusters, i.e. user-perceived characters."""


def split_graphemes(text: Union[str, bytes]) -> Tuple[str, ...]:
    """Split a text into grapheme clusters.

    Combining marks stay attached to their base character,
    so "ã" is a single element.

    Raises
    ------
    InputError
        If the text is not a string, is bytes that aren't valid UTF-8,
        or contains code points that can't be encoded (lone surrogates).
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as error:
            raise InputError(f"Invalid input encoding: {error.reason}") from error
    if not isinstance(text, str):
        raise InputError(f"Invalid input type: {type(text).__name__}")
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as error:
        raise InputError(f"Invalid input encoding: {error.reason}") from error
    return tuple(GRAPHEME_PATTERN.findall(text))


def ensure_path_exists(path):
    """Make sure a directory exists and is a Path object."""
    path_obj = Path(path)
    path_obj.mkdir(exist_ok=True, parents=True)
    return path_obj


def make_list(value):
    """Turn a string, list or other collection into a list.

    Split a string on comma or newline.
    """
    if isinstance(value, list):
        return value
    elif isinstance(value, str):
        if "," in value:
            return [v.strip(" ") for v in value.split(",")]
        if "\n" in value:
            return value.strip("\n").split("\n")
        return [value]
    return list(value)


def validate_objects(obj_list: Iterable, obj_schema: Schema) -> list:
    """Use a Schema to validate a list of objects.

    Raises
    ------
    ValueError
        With the index of the first invalid object.
    """
    validated = []
    for idx, obj in enumerate(obj_list):
        try:
            validated.append(obj_schema.validate(obj))
        except SchemaError as error:
            logging.error("Couldn't validate object %s: %s", idx, obj)
            raise ValueError(f"Invalid object at index {idx}: {error}") from error
    return validated


def resolve_rel_path(file_rel_path: Union[str, Path]) -> Path:
    """Resolve the full path from a potential relative path to the local or parent directory."""

    full_path = Path(file_rel_path).resolve()
    if not full_path.exists():
        full_path = Path.cwd().parent / file_rel_path
    return full_path


def load_module_from_path(file_path):
    """Use importlib to load a module from a .py file path."""
    module_path = resolve_rel_path(file_path)
    assert module_path.suffix == ".py", (
            f"Inappropriate file type: {module_path.suffix} ({file_path})")
    module_name = module_path.stem

    spec = importlib.util.spec_from_file_location(module_name, module_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


def load_module_dict(module_path) -> Dict:
    """Load a dict of the public variables defined in a python module, ``{var_name:value}``."""
    module = load_module_from_path(module_path)
    module_dict = module.__dict__
    return {
        key: value for key, value in module_dict.items()
        if key.isupper() and not key.startswith("_")
    }


def load_config(filename) -> Dict:
    """Load variable names (lower case) and their values as a dict from a .py file."""
    try:
        return {k.lower(): v for k, v in load_module_dict(filename).items()}
    except FileNotFoundError:
        logging.debug("No config file found at %s", filename)
        return {}


def read_rules(file_path: Union[str, Path]) -> str:
    """Read a rule script from a text file."""
    return Path(file_path).read_text(encoding="utf-8")


def time_process(f):
    """Take the time of the process and print it."""
    def new_func(*args, **kwargs):

        start = datetime.now()
        result = f(*args, **kwargs)
        end = datetime.now()
        click.secho(f"Processing time: {str(end - start)}", fg="blue")
        return result

    functools.update_wrapper(new_func, f)
    return new_func


def log_level(verbosity: int):
    """Calculate the log level given by the number of -v flags.

    0 = logging.WARNING (30)
    1 = logging.INFO (20)
    2 = logging.DEBUG (10)
    """
    return (3 - verbosity) * 10 if verbosity in (0, 1, 2) else 10


def set_logging_config(verbose=0, logfile="log.txt"):
    """Configure logging level and destination based on user input."""
    logging.basicConfig(
        level=logging.DEBUG,
        format=(
            "%(asctime)s | %(levelname)s "
            "| %(module)s-%(funcName)s-%(lineno)04d | %(message)s"),
        datefmt='%Y-%m-%d %H:%M',
        filename=logfile,
        filemode='a')

    if verbose:
        # define a Handler which writes log messages to stderr
        console = logging.StreamHandler()
        console.setLevel(log_level(verbose))
        # set a format which is simpler for console use
        formatter = logging.Formatter(
            '%(asctime)-10s | %(levelname)s | %(message)s')
        console.setFormatter(formatter)
        logging.getLogger('').addHandler(console)

    return verbose


def flatten_results(words: Iterable[str], results: Iterable[dict]) -> List[tuple]:
    """Pair each word with its result or error message, for printing."""
    rows = []
    for word, result in zip(words, results):
        if result["success"]:
            rows.append((word, result["result"], None))
        else:
            rows.append((word, None, result["message"]))
    return rows
