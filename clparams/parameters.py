r"""
clparams parameter definitions.

Overview
- Kinds
  • ParameterKind: discriminant naming the concrete variant (CHOICE, FLAG, INTEGER,
    STRING, STRING_LIST).

- Abstract bases
  • Parameter[_T]: identity (long name, optional short name, description), the value
    slot and the injection hook used by the parser.
  • ParameterWithArgument[_T]: adds the optional argument name, i.e. the placeholder
    shown in help for parameters that consume a following token ("--count NUMBER").

- Concrete kinds
  • FlagParameter: presence-only, bool value.
  • IntegerParameter / StringParameter / StringListParameter: int / str / list[str].
  • ChoiceParameter: str value restricted to a closed list of alternatives, with an
    optional default.

Metadata (validated on construction)
- long_name: required, must match r"-(-[a-z0-9]+)+" (e.g. "--do-a-thing").
- short_name: Unset | str, must match r"-[a-zA-Z0-9]" when provided (e.g. "-a").
- description: free text, stored as given.
- argument_name: Unset | str; when provided it must be non-empty, upper-case and made
  of [A-Z0-9_] only. An empty string is an error, not a request for the default.
- alternatives/default_value (choices only): at least two distinct strings; the
  default, when provided, must be one of them.

Every check runs at construction: a definition that is wrong fails when the program
registers it, not when a user happens to type it. There is no partially built
parameter and nothing is printed.

Value lifecycle
- value is Unset until the parser injects one through _set_value(); each parse pass
  injects at most once and _reset_value() starts a new pass.
- Injection is typed per kind (bool, int, str, list[str]); argument-bearing kinds
  also accept None, meaning the command line did not supply the parameter.

Quick example:
    >>> from clparams.parameters import IntegerParameter
    >>> count = IntegerParameter("--max-count", "-m", description="stop after N", argument_name="NUMBER")
    >>> count.argument_name
    'NUMBER'
    >>> count._set_value(3)
    >>> count.value
    3
"""
import functools
import itertools
import operator
import re
from collections.abc import Iterable, Sequence, Set
from enum import IntEnum

from .faults import *
from .utils import *


class ParameterKind(IntEnum):
    """
    Identifies the concrete variant of a parameter.
    """
    CHOICE      = 0
    FLAG        = 1
    INTEGER     = 2
    STRING      = 3
    STRING_LIST = 4


_LONG_NAME = re.compile(r"-(-[a-z0-9]+)+")
_SHORT_NAME = re.compile(r"-[a-zA-Z0-9]")
_INVALID_ARGUMENT_CHARACTER = re.compile(r"[^A-Z_0-9]")

# process-wide source of correlation keys; next() on a count is atomic in CPython
_keys = itertools.count(1)


def _is_string_list(data):
    return (
        isinstance(data, Sequence) and
        not isinstance(data, str) and
        all(isinstance(item, str) for item in data)
    )


# payload shape accepted by each kind on injection
_ACCEPTORS = {
    ParameterKind.CHOICE: lambda data: isinstance(data, str),
    ParameterKind.FLAG: lambda data: isinstance(data, bool),
    ParameterKind.INTEGER: lambda data: isinstance(data, int) and not isinstance(data, bool),
    ParameterKind.STRING: lambda data: isinstance(data, str),
    ParameterKind.STRING_LIST: _is_string_list,
}

_DESCRIPTIONS = {
    ParameterKind.CHOICE: "a string",
    ParameterKind.FLAG: "a boolean",
    ParameterKind.INTEGER: "an integer",
    ParameterKind.STRING: "a string",
    ParameterKind.STRING_LIST: "a sequence of strings",
}


class ParameterType(type):
    """
    Metaclass that wires introspection and the kind discriminant into parameter classes.

    Responsibilities
    - Expose every name listed in a class' own __introspectable__ as a read-only
      property (via mirror()), unless the class body defines it explicitly.
    - Accumulate __introspectable__ along the bases so reprs show inherited fields.
    - Record the fixed kind passed as a class keyword
      (class FlagParameter(Parameter[bool], kind=ParameterKind.FLAG)) and seal that
      class against subclassing: a concrete kind is a leaf.
    - Provide stable __repr__/__rich_repr__ implementations.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages and reprs ("string-list-parameter").
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__.
    """

    def __new__(cls, name, bases, namespace, *, kind=Unset, **options):
        if kind is not Unset and not isinstance(kind, ParameterKind):
            raise TypeError(f"{name} 'kind' must be a parameter-kind")

        own = namespace.get("__introspectable__", ())
        inherited = itertools.chain.from_iterable(getattr(base, "__introspectable__", ()) for base in bases)

        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
                "__introspectable__": tuple(dict.fromkeys((*inherited, *own))),
            } | {
                name: mirror(name) for name in own if name not in namespace
            },
            **options
        )

        if kind is not Unset:
            self.__kind__ = kind

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag-parameter(long_name='--verbose', short_name='-v', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers such as rich.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if kind is not Unset:
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                """
                Disallow subclassing of concrete parameter kinds.
                """
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate the long and short names of any parameter.

    Rules
    - long_name: required string, must fully match r"-(-[a-z0-9]+)+".
    - short_name: Unset or a string fully matching r"-[a-zA-Z0-9]".

    Raises
    - TypeError: when a name is not a string.
    - MalformedLongNameError / MalformedShortNameError: when a name breaks its grammar.
      The long name is checked first.
    """
    if not isinstance(long_name := metadata["long_name"], str):
        raise TypeError(f"{cls.__typename__} long name must be a string")
    if not _LONG_NAME.fullmatch(long_name):
        raise MalformedLongNameError(
            f'{cls.__typename__} long name "{long_name}" is invalid; '
            f'it must be lower-case and use dash delimiters (e.g. "--do-a-thing")',
            hint="use two leading dashes and lower-case words joined by single dashes",
        )

    if not isinstance(short_name := metadata["short_name"], str | Unset):
        raise TypeError(f"{cls.__typename__} short name must be a string")
    if isinstance(short_name, str) and not _SHORT_NAME.fullmatch(short_name):
        raise MalformedShortNameError(
            f'{cls.__typename__} short name "{short_name}" is invalid; '
            f'it must be a dash followed by a single letter or digit (e.g. "-a")',
            hint="omit the short name if no single-character alias fits",
        )


def _sanitize_argument_name(cls, metadata, /):
    """
    Internal: validate the optional argument name of value-bearing parameters.

    Checks, in order, when a name is provided
    - non-empty (Unset is how callers ask for the default display name);
    - equal to its own upper-cased form (a check, never a correction);
    - made of [A-Z0-9_] only; the first offending character is reported.
    """
    if (argument_name := metadata["argument_name"]) is Unset:
        return
    if not isinstance(argument_name, str):
        raise TypeError(f"{cls.__typename__} argument name must be a string")
    if argument_name == "":
        raise EmptyArgumentNameError(
            f"{cls.__typename__} argument name cannot be an empty string",
            hint="leave the argument name out to get the default one",
        )
    if argument_name.upper() != argument_name:
        raise LowercaseArgumentNameError(
            f'{cls.__typename__} argument name "{argument_name}" is invalid; it must be all upper case',
            hint=f'try "{argument_name.upper()}"',
        )
    if match := _INVALID_ARGUMENT_CHARACTER.search(argument_name):
        raise InvalidArgumentCharacterError(
            f'{cls.__typename__} argument name "{argument_name}" contains an invalid character "{match[0]}"; '
            f'only upper-case letters, numbers, and underscores are allowed',
            hint="replace it with an underscore",
        )


def _sanitize_alternatives(cls, metadata, /):
    """
    Internal: validate and normalize the alternatives and default of a choice.

    - alternatives: iterable of strings (a bare string is rejected). Non-set
      iterables must not contain duplicates. Normalized to a tuple keeping the
      given order, which is also the display order.
    - at least two alternatives are required.
    - default_value: Unset, or one of the alternatives (the empty string is a
      value like any other and must be listed to be accepted).
    """
    if isinstance(alternatives := metadata["alternatives"], str) or not isinstance(alternatives, Iterable):
        raise TypeError(f"{cls.__typename__} alternatives must be an iterable of strings")

    sanitized = []
    for alternative in alternatives:
        if not isinstance(alternative, str):
            raise TypeError(f"{cls.__typename__} alternatives must be strings")
        if alternative in sanitized:
            if isinstance(alternatives, Set):
                continue
            raise DuplicateAlternativeError(
                f'{cls.__typename__} alternatives cannot contain duplicates ("{alternative}")',
                hint="list each alternative once",
            )
        sanitized.append(alternative)

    if len(sanitized) < 2:
        raise InsufficientAlternativesError(
            f"{cls.__typename__} alternatives must contain at least two values",
            hint="use a flag or a string parameter for a single fixed value",
        )
    metadata["alternatives"] = tuple(sanitized)

    if (default_value := metadata["default_value"]) is not Unset and default_value not in sanitized:
        raise InvalidDefaultValueError(
            f'{cls.__typename__} default value "{default_value}" is not one of the available '
            f'alternatives: {", ".join(sanitized)}',
            hint="pick the default from the alternatives or leave it out",
        )


class Parameter[_T](metaclass=ParameterType):
    """
    Base of every command-line parameter.

    A Parameter owns its identity (long name, optional short name, description),
    answers a fixed kind, and holds a single value slot filled in by the parser.
    It cannot be instantiated directly; use one of the concrete kinds.

    Properties
    - long_name, short_name, description: validated definition, read-only.
    - kind: the ParameterKind of the concrete class.
    - value: Unset until the parser injects a value; read after parsing.

    Parser protocol (internal)
    - _parser_key: opaque, unique key the parser uses to find this parameter's raw
      value in its own data.
    - _set_value(data): store the parsed value; at most once per parse pass.
    - _reset_value(): forget the value before a new parse pass.
    """
    __kind__ = Unset
    __displayable__ = Unset

    __introspectable__ = (
        "kind",
        "long_name",
        "short_name",
        "description",
        "value",
    )

    def __init__(self, long_name, short_name=Unset, /, *, description):
        if (cls := type(self)).__kind__ is Unset:
            raise TypeError(f"cannot instantiate abstract {cls.__typename__} {cls.__name__!r}")

        metadata = {
            "long_name": long_name,
            "short_name": short_name,
            "description": description,
        }
        _sanitize_names(cls, metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._value = Unset
        self._parser_key = "%s_%d" % (long_name.lstrip("-").replace("-", "_"), next(_keys))

    @property
    def kind(self):
        """
        The fixed discriminant of this parameter's concrete class.
        """
        return type(self).__kind__

    def _set_value(self, data, /):
        """
        Inject the parsed value (called by the parser only).

        The payload must already have the kind's value type; argument-bearing
        kinds also accept None for "not supplied". String lists are stored as a
        list in the given order.

        Raises
        - RuntimeError: a value was already injected during this parse pass.
        - TypeError: the payload does not match the kind's value type.
        """
        cls = type(self)
        if self._value is not Unset:
            raise RuntimeError(f'{cls.__typename__} "{self._long_name}" already received a value in this parse pass')

        if data is None and isinstance(self, ParameterWithArgument):
            self._value = None
            return
        if not _ACCEPTORS[self.kind](data):
            raise TypeError(
                f'{cls.__typename__} "{self._long_name}" expects {_DESCRIPTIONS[self.kind]}, '
                f'got {type(data).__name__}'
            )

        self._value = list(data) if self.kind is ParameterKind.STRING_LIST else data

    def _reset_value(self):
        self._value = Unset


class ParameterWithArgument[_T](Parameter[_T]):
    """
    Base of parameters that consume an accompanying token, such as "123" in
    "--max-count 123".

    Adds argument_name, the placeholder displayed for that token. Unset means
    the renderer picks its own default.
    """
    __introspectable__ = (
        "argument_name",
    )

    def __init__(self, long_name, short_name=Unset, /, *, description, argument_name=Unset):
        super().__init__(long_name, short_name, description=description)

        metadata = {"argument_name": argument_name}
        _sanitize_argument_name(type(self), metadata)
        self._argument_name = metadata["argument_name"]


class FlagParameter(Parameter[bool], kind=ParameterKind.FLAG):
    """
    Presence-only parameter; its value tells whether the switch was given.
    """


class IntegerParameter(ParameterWithArgument[int], kind=ParameterKind.INTEGER):
    """
    Parameter whose argument is an integer ("--max-count 123").
    """


class StringParameter(ParameterWithArgument[str], kind=ParameterKind.STRING):
    """
    Parameter whose argument is a free string ("--title TEXT").
    """


class StringListParameter(ParameterWithArgument[list[str]], kind=ParameterKind.STRING_LIST):
    """
    Repeatable parameter collecting its arguments in command-line order.
    """


class ChoiceParameter(ParameterWithArgument[str], kind=ParameterKind.CHOICE):
    """
    String parameter restricted to a closed list of alternatives.

    Parameters
    - alternatives: Iterable[str]
      At least two distinct strings, kept in the given order for display.
    - default_value: Unset | str
      Value the parser substitutes when the parameter is not supplied. Must be
      one of the alternatives.
    """
    __introspectable__ = (
        "alternatives",
        "default_value",
    )

    def __init__(
            self,
            long_name,
            short_name=Unset,
            /,
            *,
            description,
            alternatives,
            default_value=Unset,
            argument_name=Unset
    ):
        super().__init__(long_name, short_name, description=description, argument_name=argument_name)

        metadata = {
            "alternatives": alternatives,
            "default_value": default_value,
        }
        _sanitize_alternatives(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)


__all__ = (
    # Discriminant
    "ParameterKind",

    # Abstract bases
    "Parameter",
    "ParameterWithArgument",

    # Concrete kinds
    "FlagParameter",
    "IntegerParameter",
    "StringParameter",
    "StringListParameter",
    "ChoiceParameter",
)

# The metaclass is an implementation detail; keep it out of star-imports and docs.
del ParameterType
