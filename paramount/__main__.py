"""
Command line entry point: resolve the arguments of a task and print them.

Usage
    python -m paramount DESCRIPTOR [-Root DIR] [-Extension NAME] [-Trace] [-Fancy] -- TOKENS...

- DESCRIPTOR is a JSON task descriptor (see paramount.descriptors.load_parameter_sets).
- everything after '--' is resolved against the task's parameter sets, using the
  configuration files under -Root (default: current directory) and the
  environment.
- the interface's own options are resolved with the same engine, so they may
  also come from environment variables such as Paramount_Root.
"""
import sys

from rich.pretty import pprint

from .descriptors import ParameterDescriptor, ParameterSet, load_parameter_sets
from .faults import ConfigurationFormatError, ParameterException, UnparsedArgumentsWarning
from .resolution import select_command_argument_set
from .store import ArgumentStore
from .utils import Unset, coalesce, pluralize

INTERFACE = (
    ParameterSet("resolve", [
        ParameterDescriptor("Descriptor", mandatory=True, position=0),
        ParameterDescriptor("Root", "r"),
        ParameterDescriptor("Extension", "e"),
        ParameterDescriptor("Trace", switch=True),
        ParameterDescriptor("Fancy", switch=True),
    ]),
)


def _warn_unparsed(store, what, /):
    if leftover := store.unknown:
        store.trigger(UnparsedArgumentsWarning(
            "%d %s left unparsed: %s" % (
                len(leftover), "token was" if len(leftover) == 1 else pluralize("token") + " were", " ".join(leftover)
            ),
            leftover=leftover,
            hint="remove the extra inputs or declare them in the %s" % what,
        ))


def main(argv=Unset, /):
    """
    run the command line; returns the process exit status.
    """
    argv = list(coalesce(argv, sys.argv[1:]))
    try:
        separator = argv.index("--")
    except ValueError:
        separator = len(argv)
    own, tokens = argv[:separator], argv[separator + 1:]

    interface = ArgumentStore(prefix="Paramount", shell=True)
    interface.set_command_argument_set(None, {}, own)
    options = select_command_argument_set(interface, INTERFACE).bind()
    _warn_unparsed(interface, "command line of paramount itself")

    store = ArgumentStore(
        shell=True,
        trace=bool(options.get("Trace", False)),
        fancy=bool(options.get("Fancy", False)),
    )
    root = options.get("Root") or "."
    try:
        store.set_command_argument_set(root, {}, tokens)
    except NotADirectoryError as error:
        return store.trigger(ConfigurationFormatError(
            str(error),
            path=root,
            title="missing configuration root",
            hint="pass -Root with an existing directory",
        ))
    try:
        candidates = load_parameter_sets(options["Descriptor"])
    except ParameterException as fault:
        return store.trigger(fault)

    result = select_command_argument_set(store, candidates, extension=options.get("Extension"))
    _warn_unparsed(store, "task's parameter sets")

    pprint({
        "set": result.name,
        "arguments": result.bind(),
        "positional": list(result.positional),
    }, expand_all=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
