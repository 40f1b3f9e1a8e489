r"""
Parameter descriptors and parameter sets.

Overview
- ParameterDescriptor: one declared parameter of a task.
  • name: primary identifier; the key results are stored under.
  • aliases: alternative identifiers probed during resolution.
  • switch: boolean-valued, may appear without a value token.
  • mandatory: resolution must find a value (by name or by position).
  • position: 0-based slot for positional binding; negative means “named only”.
- ParameterSet: an ordered, named list of descriptors (one overload of a task).
  ALL_PARAMETER_SETS is the distinguished set name shared by every overload.
- load_parameter_sets(path): read task descriptors from a JSON document.

Validation highlights
- Names and aliases must match r"(?!\d)\w+" and be unique within a descriptor,
  compared case-insensitively since command-line tokens match names that way.
- Primary names must be unique within a parameter set.
- Descriptors are immutable: fields are exposed through read-only properties.

Quick example:
    >>> ParameterSet("Build", [
    ...     ParameterDescriptor("TaskName", mandatory=True, position=0),
    ...     ParameterDescriptor("Verbose", "v", switch=True),
    ... ])
"""
import functools
import json
import operator
import re
from collections.abc import Iterable

from .faults import ConfigurationFormatError, trigger
from .utils import mirror

ALL_PARAMETER_SETS = "__AllParameterSets"

_IDENTIFIER = re.compile(r"(?!\d)\w+")


def _validate_identifier(owner, kind, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{owner} {kind} must be a string")
    if not _IDENTIFIER.fullmatch(name):
        raise ValueError(f"{owner} {kind} {name!r} is not a valid identifier")
    return name


def _repr(self, /):
    fields = ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
    return "%s(%s)" % (type(self).__name__, fields)


class ParameterDescriptor:
    """
    Immutable declaration of one task parameter.

    Parameters
    - name: str, the primary name.
    - *aliases: str, alternative names in probing order.
    - switch: bool (keyword-only), boolean-valued parameter.
    - mandatory: bool (keyword-only), a value must be resolved.
    - position: int (keyword-only), positional slot; negative for named-only.
    """
    __slots__ = ("_name", "_aliases", "_switch", "_mandatory", "_position")

    name = mirror("name")
    aliases = mirror("aliases")
    switch = mirror("switch")
    mandatory = mirror("mandatory")
    position = mirror("position")

    def __init__(self, name, /, *aliases, switch=False, mandatory=False, position=-1):
        self._name = _validate_identifier("parameter", "name", name)
        for alias in aliases:
            _validate_identifier("parameter", "alias", alias)
        if len({name.casefold(), *(alias.casefold() for alias in aliases)}) != len(aliases) + 1:
            raise ValueError(f"parameter {name!r} has duplicated aliases")
        self._aliases = tuple(aliases)

        if not isinstance(switch, bool):
            raise TypeError("parameter 'switch' must be a boolean")
        if not isinstance(mandatory, bool):
            raise TypeError("parameter 'mandatory' must be a boolean")
        if not isinstance(position, int) or isinstance(position, bool):
            raise TypeError("parameter 'position' must be an integer")
        self._switch = switch
        self._mandatory = mandatory
        self._position = position

    @property
    def names(self):
        """
        the primary name followed by the aliases (resolution probing order).
        """
        return (self._name, *self._aliases)

    @property
    def positional(self):
        return self._position >= 0

    def __eq__(self, other):
        if not isinstance(other, ParameterDescriptor):
            return NotImplemented
        return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())

    def __hash__(self):
        return hash(tuple(self.__rich_repr__()))

    def __rich_repr__(self):
        yield "name", self._name
        yield "aliases", self._aliases
        yield "switch", self._switch
        yield "mandatory", self._mandatory
        yield "position", self._position

    __repr__ = _repr


class ParameterSet:
    """
    One overload of a task: a name plus an ordered list of descriptors.

    Behaves as a read-only sequence of ParameterDescriptor.
    """
    __slots__ = ("_name", "_parameters")

    name = mirror("name")
    parameters = mirror("parameters")

    def __init__(self, name=ALL_PARAMETER_SETS, parameters=(), /):
        if not isinstance(name, str):
            raise TypeError("parameter set name must be a string")
        if not (name := name.strip()):
            raise ValueError("parameter set name cannot be empty")
        if not isinstance(parameters, Iterable):
            raise TypeError("parameter set parameters must be an iterable of descriptors")

        parameters = tuple(parameters)
        seen = set()
        for parameter in parameters:
            if not isinstance(parameter, ParameterDescriptor):
                raise TypeError("parameter set parameters must be an iterable of descriptors")
            if parameter.name in seen:
                raise ValueError(f"parameter {parameter.name!r} is declared twice in parameter set {name!r}")
            seen.add(parameter.name)

        self._name = name
        self._parameters = parameters

    @property
    def names(self):
        """
        the primary parameter names of this set (used to compare coverage).
        """
        return frozenset(parameter.name for parameter in self._parameters)

    @property
    def universal(self):
        """
        whether this is the distinguished “all parameter sets” marker.
        """
        return self._name == ALL_PARAMETER_SETS

    def __iter__(self):
        return iter(self._parameters)

    def __len__(self):
        return len(self._parameters)

    def __getitem__(self, index):
        return self._parameters[index]

    def __eq__(self, other):
        if not isinstance(other, ParameterSet):
            return NotImplemented
        return (self._name, self._parameters) == (other._name, other._parameters)

    def __hash__(self):
        return hash((self._name, self._parameters))

    def __rich_repr__(self):
        yield "name", self._name
        yield "parameters", self._parameters

    __repr__ = _repr


def _descriptor_from_mapping(entry, /):
    if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
        raise ValueError("each parameter must be an object with a 'name'")
    if not isinstance(entry.get("aliases", []), list):
        raise ValueError("parameter 'aliases' must be a list")
    return ParameterDescriptor(
        entry["name"],
        *entry.get("aliases", ()),
        switch=entry.get("switch", False),
        mandatory=entry.get("mandatory", False),
        position=entry.get("position", -1),
    )


def load_parameter_sets(path, /):
    """
    read the parameter sets of a task from a JSON descriptor file.

    format
        {"sets": [{"name": "Build",
                   "parameters": [{"name": "TaskName", "mandatory": true, "position": 0},
                                  {"name": "Verbose", "aliases": ["v"], "switch": true}]}]}

    a set without "name" is the ALL_PARAMETER_SETS marker.

    raises
    - ConfigurationFormatError when the file is not valid JSON or does not follow
      the format above (the message names the file).
    """
    try:
        with open(path, encoding="utf-8") as stream:
            document = json.load(stream)
    except json.JSONDecodeError as error:
        return trigger(ConfigurationFormatError(
            "task descriptor %r is not valid json (line %d, column %d)" % (str(path), error.lineno, error.colno),
            path=str(path),
        ))
    except UnicodeDecodeError as error:
        return trigger(ConfigurationFormatError(
            "task descriptor %r is not valid utf-8 (byte %d)" % (str(path), error.start),
            path=str(path),
            hint="save the file with utf-8 encoding",
        ))
    except OSError as error:
        return trigger(ConfigurationFormatError(
            "task descriptor %r cannot be read: %s" % (str(path), error.strerror or error),
            path=str(path),
            hint="check the path of the task descriptor",
        ))

    try:
        if not isinstance(document, dict) or not isinstance(sets := document.get("sets"), list):
            raise ValueError("the document must be an object with a 'sets' list")
        result = []
        for entry in sets:
            if not isinstance(entry, dict) or not isinstance(entry.get("parameters", []), list):
                raise ValueError("each set must be an object with a 'parameters' list")
            result.append(ParameterSet(
                entry.get("name", ALL_PARAMETER_SETS),
                [_descriptor_from_mapping(parameter) for parameter in entry.get("parameters", [])],
            ))
    except (TypeError, ValueError) as error:
        return trigger(ConfigurationFormatError(
            "task descriptor %r is malformed: %s" % (str(path), error),
            path=str(path),
            hint="see the 'sets'/'parameters' layout in the paramount documentation",
        ))

    return result


__all__ = (
    "ALL_PARAMETER_SETS",
    "ParameterDescriptor",
    "ParameterSet",
    "load_parameter_sets",
)
