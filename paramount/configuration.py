"""
Project configuration source.

What this module provides
- locate(root, filename): walk a repository root and yield every configuration
  file named `filename`, in a deterministic order (directories sorted, dot
  directories skipped, a directory's own file before its children's).
- flatten(document): turn a JSON object into a flat key → value mapping; nested
  objects join their keys with '_' so {"Docker": {"Tag": "x"}} yields "Docker_Tag",
  the same shape the resolver uses for extension-qualified names.
- load(root, filename): parse, flatten and merge every located file; later files
  overwrite earlier ones key by key.

Values are wrapped into argument values (see paramount.values); JSON null
entries are skipped.
"""
import json
import os
import os.path

from .faults import ConfigurationFormatError, trigger
from .values import Absent, wrap

CONFIGURATION_FILENAME = "build.json"


def locate(root, /, filename=CONFIGURATION_FILENAME):
    """
    yield the paths of every `filename` under `root`, deterministically ordered.

    raises
    - TypeError when root or filename is not a string/path-like.
    - NotADirectoryError when root is not an existing directory.
    """
    if not isinstance(root, str | os.PathLike):
        raise TypeError("locate() argument must be a string or a path-like object")
    if not isinstance(filename, str) or not filename:
        raise TypeError("locate() filename must be a non-empty string")
    if not os.path.isdir(root):
        raise NotADirectoryError("locate() argument %r is not a directory" % os.fspath(root))

    for directory, directories, files in os.walk(root):
        # os.walk honours in-place edits of `directories`
        directories[:] = sorted(name for name in directories if not name.startswith("."))
        if filename in files:
            yield os.path.join(directory, filename)


def flatten(document, /, prefix=""):
    """
    flatten a JSON object into {key: argument value}.

    raises
    - TypeError when a value cannot be represented as an argument value
      (e.g., a list holding objects).
    """
    result = {}
    for key, value in document.items():
        name = f"{prefix}_{key}" if prefix else key
        if isinstance(value, dict):
            result |= flatten(value, name)
        elif (value := wrap(value)) is not Absent:
            result[name] = value
    return result


def _parse(path, /):
    try:
        with open(path, encoding="utf-8") as stream:
            document = json.load(stream)
    except json.JSONDecodeError as error:
        return trigger(ConfigurationFormatError(
            "configuration file %r is not valid json (line %d, column %d)" % (path, error.lineno, error.colno),
            path=path,
        ))
    except UnicodeDecodeError as error:
        return trigger(ConfigurationFormatError(
            "configuration file %r is not valid utf-8 (byte %d)" % (path, error.start),
            path=path,
            hint="save the file with utf-8 encoding",
        ))

    if not isinstance(document, dict):
        return trigger(ConfigurationFormatError(
            "configuration file %r must hold a json object, not %s" % (path, type(document).__name__),
            path=path,
        ))

    try:
        return flatten(document)
    except TypeError as error:
        return trigger(ConfigurationFormatError(
            "configuration file %r holds an unsupported value: %s" % (path, error),
            path=path,
            hint="values must be strings, numbers, booleans, null, objects or lists of scalars",
        ))


def load(root, /, filename=CONFIGURATION_FILENAME):
    """
    load and merge every configuration file found under `root`.

    returns
    - dict[str, ArgumentValue]; an empty dict when no file exists or root is None.

    raises
    - ConfigurationFormatError naming the offending file.
    """
    configuration = {}
    if root is None:
        return configuration
    for path in locate(root, filename):
        configuration |= _parse(path)
    return configuration


__all__ = (
    "CONFIGURATION_FILENAME",
    "locate",
    "flatten",
    "load",
)
