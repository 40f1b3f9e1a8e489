"""
Argument store: the explicitly owned state of one command resolution.

Fields
- configuration: {key: ArgumentValue} loaded from the repository's configuration files.
- named:         {parameter name: ArgumentValue} registered or resolved by name.
- positional:    [str] tokens classified as positional (append-only until reset).
- unknown:       [str] tokens not yet classified; the head is always a parameter
                 token (or the list is empty) once extraction ran.

Lifecycle
    store = ArgumentStore()
    store.set_command_argument_set(root, {"Configuration": "Release"}, sys.argv[1:])
    ...  resolutions mutate named/positional/unknown in place ...
    store.reset()

Invariant
- every token handed to set_command_argument_set lives in exactly one of
  named (as a consumed name/value pair), positional or unknown.

Options
- prefix:   namespace token used to qualify candidate names (default "Build").
- filename: configuration file name searched under the repository root.
- environ:  mapping consulted as the environment source (default os.environ).
- shell/fancy/colorful: fault rendering options merged by trigger().
- trace:    log every resolution step on the rich stderr console.
"""
import copy
import os
from collections.abc import Iterable, Mapping
from contextlib import contextmanager

from rich.text import Text as RichText

from . import configuration as _configuration
from .faults import (
    ConfigurationFormatError,
    DuplicateArgumentError,
    OverriddenArgumentWarning,
    console,
    trigger,
)
from .tokens import classify
from .utils import Unset, UnsetType, coalesce, mirror, pluralize
from .values import Absent, wrap

DEFAULT_PREFIX = "Build"


class ArgumentStore:
    """
    Resolution context threaded through every resolver call.

    Fields are exposed read-only (copies); mutation happens only through the
    methods below and the resolver in paramount.resolution.
    """
    configuration = mirror("configuration")
    named = mirror("named")
    positional = mirror("positional")
    unknown = mirror("unknown")

    prefix = mirror("prefix")
    filename = mirror("filename")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    trace = mirror("trace")

    def __init__(
            self,
            *,
            prefix=DEFAULT_PREFIX,
            filename=_configuration.CONFIGURATION_FILENAME,
            environ=Unset,
            shell=False,
            fancy=False,
            colorful=True,
            trace=False,
    ):
        if not isinstance(prefix, str):
            raise TypeError("ArgumentStore() 'prefix' must be a string")
        if not isinstance(filename, str) or not filename:
            raise TypeError("ArgumentStore() 'filename' must be a non-empty string")
        if not isinstance(environ, Mapping | UnsetType):
            raise TypeError("ArgumentStore() 'environ' must be a mapping")
        for option, value in (("shell", shell), ("fancy", fancy), ("colorful", colorful), ("trace", trace)):
            if not isinstance(value, bool):
                raise TypeError(f"ArgumentStore() {option!r} must be a boolean")

        self._prefix = prefix
        self._filename = filename
        self._environ = coalesce(environ, os.environ)
        self._shell = shell
        self._fancy = fancy
        self._colorful = colorful
        self._trace = trace

        self._configuration = {}
        self._named = {}
        self._positional = []
        self._unknown = []

    @property
    def environ(self):
        return self._environ

    def reset(self):
        """
        clear configuration, named, positional and unknown arguments.
        """
        self._configuration.clear()
        self._named.clear()
        self._positional.clear()
        self._unknown.clear()
        self.log("store reset")

    def set_command_argument_set(self, root, /, named=Unset, unknown=()):
        """
        reinitialize the store for a new invocation.

        parameters
        - root: repository root searched for configuration files (None skips them).
        - named: mapping of already-known arguments (plain values or argument values).
        - unknown: iterable of raw command-line tokens.

        behavior
        - reloads configuration, replaces named, seeds unknown, clears positional,
          then runs positional extraction once.

        raises
        - ConfigurationFormatError (through trigger) for malformed configuration.
        - TypeError for ill-typed named/unknown arguments.
        """
        named = coalesce(named, {})
        if not isinstance(named, Mapping):
            raise TypeError("set_command_argument_set() 'named' must be a mapping")
        if isinstance(unknown, str) or not isinstance(unknown, Iterable):
            raise TypeError("set_command_argument_set() 'unknown' must be an iterable of strings")
        unknown = list(unknown)
        if not all(isinstance(token, str) for token in unknown):
            raise TypeError("set_command_argument_set() 'unknown' must be an iterable of strings")
        # None entries carry no value
        named = {key: value for key in named if (value := wrap(named[key])) is not Absent}

        try:
            configuration = _configuration.load(root, self._filename)
        except ConfigurationFormatError as fault:
            return self.trigger(fault)

        self._configuration = configuration
        self._named = named
        self._positional = []
        self._unknown = unknown
        self.log("loaded %d configuration %s from %r" % (
            len(configuration), "key" if len(configuration) == 1 else pluralize("key"), root
        ))
        self.extract_leading_positionals()

    def add_command_argument(self, name, value, /, force=False):
        """
        register a named argument.

        raises
        - DuplicateArgumentError (through trigger) when `name` already holds a
          value and force is False; the store is left untouched.

        a value of None registers nothing.
        """
        if not isinstance(name, str) or not name:
            raise TypeError("add_command_argument() 'name' must be a non-empty string")
        value = wrap(value)
        if (current := self._named.get(name, Absent)) is not Absent:
            if not force:
                return self.trigger(DuplicateArgumentError(
                    "argument %r is already set to %r" % (name, current),
                    name=name,
                ))
            if current != value:
                self.trigger(OverriddenArgumentWarning(
                    "argument %r replaced %r with %r" % (name, current, value),
                    name=name,
                ))
        if value is Absent:
            # None registers nothing and clears a forced entry
            self._named.pop(name, None)
            return
        self._named[name] = value
        self.log("registered %s = %r" % (name, value))

    def extract_leading_positionals(self):
        """
        move leading non-parameter tokens from unknown to positional.

        stops at the first parameter token or when unknown is exhausted.
        returns the number of tokens moved.
        """
        moved = 0
        while moved < len(self._unknown) and classify(self._unknown[moved]) is None:
            moved += 1
        if moved:
            self._positional.extend(self._unknown[:moved])
            del self._unknown[:moved]
            self.log("extracted %d positional %s" % (moved, "token" if moved == 1 else pluralize("token")))
        return moved

    def lookup_named(self, name, /):
        return self._named.get(name, Absent)

    def lookup_configuration(self, name, /):
        return self._configuration.get(name, Absent)

    def lookup_environment(self, name, /):
        try:
            return wrap(self._environ[name])
        except KeyError:
            return Absent

    def consume(self, indices, name, value, /):
        """
        commit a match against unknown tokens in one step.

        records `value` under `name`, deletes the tokens at `indices` and, when
        the head token was consumed, re-runs positional extraction.
        """
        indices = sorted(indices)
        self._named[name] = value
        for index in reversed(indices):
            del self._unknown[index]
        self.log("consumed %r for %s = %r" % ([f"#{index}" for index in indices], name, value))
        if indices and indices[0] == 0:
            self.extract_leading_positionals()

    @contextmanager
    def transaction(self):
        """
        snapshot named/positional/unknown; restore them if the block raises.
        """
        snapshot = (copy.copy(self._named), list(self._positional), list(self._unknown))
        try:
            yield self
        except BaseException:
            self._named, self._positional, self._unknown = snapshot
            self.log("rolled back")
            raise

    def trigger(self, fault, /, **options):
        """
        surface a fault with this store's rendering options merged in.
        """
        return trigger(fault, **options, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def log(self, message, /):
        if self._trace:
            console.log(RichText(message, "dim"))

    def __rich_repr__(self):
        yield "configuration", self._configuration
        yield "named", self._named
        yield "positional", self._positional
        yield "unknown", self._unknown

    def __repr__(self):
        return "ArgumentStore(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


__all__ = (
    "DEFAULT_PREFIX",
    "ArgumentStore",
)
