"""
Argument resolution: single parameters, parameter sets and overloads.

What this module provides
- candidate_names(name, extension, prefix): the qualified names probed for one parameter.
- find_command_argument(store, name, ...): resolve one parameter through the
  precedence chain (additional → store → configuration → environment).
- match_parameter_set(store, parameters, ...): resolve a whole parameter set,
  validating mandatory named and positional requirements.
- select_command_argument_set(store, candidates, ...): run the matcher over every
  overload of a task and keep the widest unambiguous match.
- ArgumentSet: the outcome of a match (named values plus the positional slice).

Precedence (per candidate name, first hit wins)
1. the `additional` mapping (exact key),
2. the store's named arguments (exact key), then the unknown tokens
   (a matching '-Name value' pair is consumed and recorded),
3. the store's configuration (exact key),
4. the store's environment (exact variable name).

Failure model
- matching runs inside store.transaction(): a failed match leaves the store
  exactly as it was before the attempt.
- faults are surfaced through store.trigger(), so a store built with shell=True
  renders them on the console and exits instead of raising.
"""
import itertools
from collections.abc import Iterable, Mapping

from .descriptors import ALL_PARAMETER_SETS, ParameterDescriptor, ParameterSet
from .faults import (
    AmbiguousParameterSetError,
    InsufficientPositionalArgumentsError,
    MissingMandatoryArgumentError,
    NoMatchingParameterSetError,
    ParameterException,
)
from .store import ArgumentStore
from .tokens import classify
from .utils import Unset, mirror, ordinal, pluralize
from .values import Absent, Flag, Text, convert, unwrap, wrap

# switch value tokens accepted after a colon-terminated switch ('-Verbose: False')
_SWITCH_VALUES = {"true": True, "false": False}


def _validate_store(function, store, /):
    if not isinstance(store, ArgumentStore):
        raise TypeError(f"{function}() first argument must be an argument store")


def _validate_extension(function, extension, /):
    if extension is not Unset and extension is not None and not isinstance(extension, str):
        raise TypeError(f"{function}() 'extension' must be a string")


def _validate_additional(function, additional, /):
    if additional is not Unset and additional is not None and not isinstance(additional, Mapping):
        raise TypeError(f"{function}() 'additional' must be a mapping")


def candidate_names(name, /, extension=Unset, prefix=""):
    """
    build the ordered, duplicate-free list of names probed for `name`.

    with an extension "Docker.Tasks" and prefix "Build", for name "Tag":
        BuildDockerTasks_Tag, DockerTasks_Tag, Build_Tag, Tag
    with an extension that already carries the prefix, "BuildTools":
        BuildBuildTools_Tag, Tools_Tag, BuildTools_Tag, Build_Tag, Tag
    """
    names = []
    if extension:
        sanitized = extension.replace(".", "")
        names.append(f"{prefix}{sanitized}_{name}")
        if prefix and sanitized.startswith(prefix) and (stripped := sanitized[len(prefix):]):
            names.append(f"{stripped}_{name}")
        names.append(f"{sanitized}_{name}")
    if prefix:
        names.append(f"{prefix}_{name}")
    names.append(name)
    return tuple(dict.fromkeys(names))


def _scan_unknown(tokens, name, switch, /):
    """
    find the first unknown token naming `name`.

    returns (indices, value) for the tokens to consume, or None when there is
    no usable match. the token list is never modified here.
    """
    for index, token in enumerate(tokens):
        parameter = classify(token)
        if parameter is None or parameter.name.casefold() != name.casefold():
            continue
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        if switch:
            if parameter.colon and following is not None and following.casefold() in _SWITCH_VALUES:
                return (index, index + 1), Flag(_SWITCH_VALUES[following.casefold()])
            return (index,), Flag(True)
        if following is None:
            # a trailing value-bearing token without its value is not a match
            continue
        return (index, index + 1), Text(following)
    return None


def _resolve(store, names, extension, switch, additional, /):
    """
    walk the precedence chain for every candidate of every name in `names`.

    a consumed unknown pair is recorded under names[0] (the primary name).
    returns the coerced value or Absent.
    """
    candidates = dict.fromkeys(itertools.chain.from_iterable(
        candidate_names(name, extension, store.prefix) for name in names
    ))
    for candidate in candidates:
        if additional and candidate in additional and (value := wrap(additional[candidate])) is not Absent:
            source = "additional arguments"
        elif (value := store.lookup_named(candidate)) is not Absent:
            source = "named arguments"
        elif match := _scan_unknown(store.unknown, candidate, switch):
            indices, value = match
            store.consume(indices, names[0], value)
            source = "command line"
        elif (value := store.lookup_configuration(candidate)) is not Absent:
            source = "configuration"
        elif (value := store.lookup_environment(candidate)) is not Absent:
            source = "environment"
        else:
            continue
        store.log("resolved %s from %s as %r" % (names[0], source, candidate))
        return convert(value, switch)
    store.log("no value for %s" % names[0])
    return Absent


def find_command_argument(
        store,
        name,
        /,
        extension=Unset,
        default=Unset,
        switch=False,
        additional=Unset,
        aliases=(),
):
    """
    resolve a single parameter.

    parameters
    - store: ArgumentStore consulted (and possibly mutated when a token is consumed).
    - name: str, the parameter name.
    - extension: str, namespace qualifier of the declaring provider (dots are ignored).
    - default: any, returned when nothing resolves; an explicitly supplied default
      is always honoured, including False and "".
    - switch: bool, apply the switch coercion rule.
    - additional: mapping probed before every other source.
    - aliases: iterable of alternative names, probed after `name`.

    returns
    - ArgumentValue (Absent when nothing resolved and no default was supplied).
    """
    _validate_store("find_command_argument", store)
    if not isinstance(name, str) or not name:
        raise TypeError("find_command_argument() 'name' must be a non-empty string")
    _validate_extension("find_command_argument", extension)
    _validate_additional("find_command_argument", additional)
    if not isinstance(switch, bool):
        raise TypeError("find_command_argument() 'switch' must be a boolean")

    value = _resolve(store, (name, *aliases), extension, switch, additional)
    if value is Absent and default is not Unset:
        return convert(wrap(default), switch)
    return value


class ArgumentSet:
    """
    Outcome of a successful parameter-set match.

    Fields
    - parameters: the matched ParameterSet.
    - named: {primary name: ArgumentValue} for every parameter resolved by name.
    - positional: tuple of the positional tokens the set consumes.
    """
    __slots__ = ("_parameters", "_named", "_positional")

    parameters = mirror("parameters")
    named = mirror("named")
    positional = mirror("positional")

    def __init__(self, parameters, named, positional, /):
        self._parameters = parameters
        self._named = dict(named)
        self._positional = tuple(positional)

    @property
    def name(self):
        return self._parameters.name

    def bind(self):
        """
        merge named values and positional tokens into plain Python values.

        positional parameters without a named value take the token at their
        position when the slice holds one.
        """
        result = {name: unwrap(value) for name, value in self._named.items()}
        for parameter in self._parameters:
            if parameter.name in result or not parameter.positional:
                continue
            if parameter.position < len(self._positional):
                value = convert(Text(self._positional[parameter.position]), parameter.switch)
                result[parameter.name] = unwrap(value)
        return result

    def __eq__(self, other):
        if not isinstance(other, ArgumentSet):
            return NotImplemented
        return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())

    __hash__ = None

    def __rich_repr__(self):
        yield "name", self.name
        yield "named", self._named
        yield "positional", self._positional

    def __repr__(self):
        return "ArgumentSet(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def _as_parameter_set(function, parameters, /):
    if isinstance(parameters, ParameterSet):
        return parameters
    if isinstance(parameters, Iterable):
        parameters = tuple(parameters)
        if all(isinstance(parameter, ParameterDescriptor) for parameter in parameters):
            return ParameterSet(ALL_PARAMETER_SETS, parameters)
    raise TypeError(f"{function}() 'parameters' must be a parameter set")


def _missing_hint(store, parameter, extension, /):
    names = candidate_names(parameter.name, extension, store.prefix)
    return "pass -%s <value>, set %r in %s or export %s" % (
        parameter.name, names[-1], store.filename, names[0]
    )


def _match(store, parameters, extension, additional, /):
    """
    match one parameter set; raises raw faults (never through store.trigger).
    """
    with store.transaction():
        named = {}
        mandatory = 0
        optional = 0

        for parameter in parameters:
            value = _resolve(store, parameter.names, extension, parameter.switch, additional)
            if value is not Absent:
                named[parameter.name] = value
                continue
            if parameter.mandatory and not parameter.positional:
                raise MissingMandatoryArgumentError(
                    "missing mandatory argument %r" % parameter.name,
                    parameter=parameter.name,
                    set=parameters.name,
                    hint=_missing_hint(store, parameter, extension),
                )
            if parameter.positional and parameter.mandatory:
                mandatory = max(mandatory, parameter.position + 1)
            elif parameter.positional:
                optional = max(optional, parameter.position + 1)

        available = store.positional
        if mandatory > len(available):
            deficit = mandatory - len(available)
            raise InsufficientPositionalArgumentsError(
                "missing %d positional %s" % (deficit, "argument" if deficit == 1 else pluralize("argument")),
                deficit=deficit,
                set=parameters.name,
                hint="the %s positional slot is the last mandatory one, %d %s given" % (
                    ordinal(mandatory), len(available), "was" if len(available) == 1 else "were"
                ),
            )

        count = mandatory if optional > len(available) else max(mandatory, optional)
        store.log("matched %s with %d named and %d positional" % (parameters.name, len(named), count))
        return ArgumentSet(parameters, named, available[:count])


def match_parameter_set(store, parameters, /, extension=Unset, additional=Unset):
    """
    resolve every parameter of one parameter set.

    behavior
    - each descriptor is resolved through its name then its aliases; hits are
      stored under the primary name.
    - an unresolved mandatory named parameter fails immediately.
    - unresolved positional parameters raise the required positional counts;
      the result takes the optional slice when the store holds enough
      positional tokens, otherwise the mandatory slice.

    returns
    - ArgumentSet

    raises (through store.trigger)
    - MissingMandatoryArgumentError naming the parameter.
    - InsufficientPositionalArgumentsError carrying the deficit.
    """
    _validate_store("match_parameter_set", store)
    parameters = _as_parameter_set("match_parameter_set", parameters)
    _validate_extension("match_parameter_set", extension)
    _validate_additional("match_parameter_set", additional)
    try:
        return _match(store, parameters, extension, additional)
    except ParameterException as fault:
        return store.trigger(fault)


def _tag(parameters, fault, /):
    return str(fault) if parameters.universal else "[%s] %s" % (parameters.name, fault)


def _select(store, candidates, extension, additional, /):
    with store.transaction():
        failures = []
        widest = None

        for parameters in candidates:
            try:
                result = _match(store, parameters, extension, additional)
            except (MissingMandatoryArgumentError, InsufficientPositionalArgumentsError) as fault:
                failures.append((parameters, fault))
                continue

            if widest is None:
                widest = result
                continue

            union = widest.parameters.names | parameters.names
            if len(union) > max(len(widest.parameters.names), len(parameters.names)):
                raise AmbiguousParameterSetError(
                    "parameter sets %r and %r both match the arguments" % (widest.name, parameters.name),
                    sets=(widest.name, parameters.name),
                )
            if len(parameters.names) > len(widest.parameters.names):
                widest = result

        if widest is None:
            if not failures:
                raise NoMatchingParameterSetError("no parameter sets were declared")
            raise NoMatchingParameterSetError(
                "no parameter set matches the arguments: %s" % "; ".join(
                    _tag(parameters, fault) for parameters, fault in failures
                ),
                exceptions=tuple(fault for _, fault in failures),
                hint=failures[0][1].hint,
            )

        store.log("selected parameter set %s" % widest.name)
        return widest


def select_command_argument_set(store, candidates, /, extension=Unset, additional=Unset):
    """
    pick the best-matching overload among several parameter sets.

    behavior
    - every candidate is matched in order; failures are collected.
    - among successful matches the widest (most parameter names) wins; two
      successful sets whose names are not nested are ambiguous.
    - the whole selection is transactional.

    returns
    - ArgumentSet of the widest match.

    raises (through store.trigger)
    - AmbiguousParameterSetError naming both sets.
    - NoMatchingParameterSetError carrying every per-set failure (.exceptions).
    """
    _validate_store("select_command_argument_set", store)
    if isinstance(candidates, ParameterSet) or not isinstance(candidates, Iterable):
        raise TypeError("select_command_argument_set() 'candidates' must be an iterable of parameter sets")
    candidates = [_as_parameter_set("select_command_argument_set", parameters) for parameters in candidates]
    _validate_extension("select_command_argument_set", extension)
    _validate_additional("select_command_argument_set", additional)
    try:
        return _select(store, candidates, extension, additional)
    except ParameterException as fault:
        return store.trigger(fault)


__all__ = (
    "ArgumentSet",
    "candidate_names",
    "find_command_argument",
    "match_parameter_set",
    "select_command_argument_set",
)
