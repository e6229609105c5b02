"""
clparams provider: define parameters and feed parsed data back into them.

What this module provides
- ParameterProvider: a registry that
  • builds each concrete parameter through define_*_parameter(...),
  • rejects long or short names that are already taken,
  • looks parameters up by long name (with typed getters),
  • runs a parse pass over the raw data an argument parser produced, injecting
    one value per parameter with the usual defaults for missing entries.

What it does not do
- It does not read argv, split tokens, or render help. The argument parser
  that walks the command line is expected to key its raw values by each
  parameter's _parser_key and hand the resulting mapping to process_parsed_data().

Fault handling
- Every fault goes through ParameterProvider.trigger(), which merges the
  provider's shell/colorful/fancy options: outside shell mode errors are raised
  and warnings emitted; in shell mode they are printed to stderr with rich and
  errors exit with status 1.

Quick start
    from clparams import ParameterProvider

    provider = ParameterProvider()
    verbose = provider.define_flag_parameter("--verbose", "-v", description="chatty output")
    mode = provider.define_choice_parameter(
        "--mode", description="build mode", alternatives=["debug", "release"], default_value="debug"
    )
    provider.process_parsed_data({verbose._parser_key: True})
    assert verbose.value is True and mode.value == "debug"
"""
import difflib
import functools
import operator
from collections.abc import Mapping

from .faults import *
from .parameters import *
from .utils import *

# value injected when the parsed data has nothing (or None) for a parameter
_FALLBACKS = {
    ParameterKind.FLAG: lambda parameter: False,
    ParameterKind.STRING_LIST: lambda parameter: [],
    ParameterKind.CHOICE: lambda parameter: coalesce(parameter.default_value),
}


class ParameterProvider:
    """
    Registry of parameters for one command line.

    Options
    - shell: bool
      Print faults with rich instead of raising them (errors then exit with 1).
    - colorful: bool
      Colorize rendered faults.
    - fancy: bool
      Render faults inside a titled panel.

    Properties
    - parameters: registered parameters, in definition order.
    - shell, colorful, fancy: the rendering options above.
    """

    __introspectable__ = (
        "parameters",
        "shell",
        "colorful",
        "fancy",
    )

    shell = mirror("shell")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    def __init__(self, *, shell=False, colorful=True, fancy=False):
        self._parameters = {}
        self._names = {}
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

    @property
    def parameters(self):
        return tuple(self._parameters.values())

    def __repr__(self):
        return f"parameter-provider({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this provider's rendering options merged in.
        """
        trigger(fault, **options, shell=self._shell, colorful=self._colorful, fancy=self._fancy)

    def _define(self, cls, /, *args, **kwargs):
        """
        Build a parameter of the given kind and register it under its names.
        """
        try:
            parameter = cls(*args, **kwargs)
        except ParameterException as fault:
            return self.trigger(fault)

        for name in (parameter.long_name, parameter.short_name):
            if name is Unset:
                continue
            if (other := self._names.get(name)) is not None:
                return self.trigger(DuplicateParameterError(
                    f'{cls.__typename__} name "{name}" is already used by {other.long_name!r}',
                    hint="each long and short name can be defined only once",
                ))

        self._parameters[parameter.long_name] = parameter
        self._names[parameter.long_name] = parameter
        if parameter.short_name is not Unset:
            self._names[parameter.short_name] = parameter
        return parameter

    def define_flag_parameter(self, long_name, short_name=Unset, /, *, description):
        """
        Define a presence-only switch (value: bool).
        """
        return self._define(FlagParameter, long_name, short_name, description=description)

    def define_integer_parameter(self, long_name, short_name=Unset, /, *, description, argument_name=Unset):
        """
        Define a parameter taking an integer argument (value: int | None).
        """
        return self._define(
            IntegerParameter, long_name, short_name, description=description, argument_name=argument_name
        )

    def define_string_parameter(self, long_name, short_name=Unset, /, *, description, argument_name=Unset):
        """
        Define a parameter taking a string argument (value: str | None).
        """
        return self._define(
            StringParameter, long_name, short_name, description=description, argument_name=argument_name
        )

    def define_string_list_parameter(self, long_name, short_name=Unset, /, *, description, argument_name=Unset):
        """
        Define a repeatable parameter collecting string arguments (value: list[str]).
        """
        return self._define(
            StringListParameter, long_name, short_name, description=description, argument_name=argument_name
        )

    def define_choice_parameter(
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
        """
        Define a parameter restricted to a list of alternatives (value: str | None).

        When the parsed data has no value for it, the default value (if any) is injected.
        """
        return self._define(
            ChoiceParameter,
            long_name,
            short_name,
            description=description,
            alternatives=alternatives,
            default_value=default_value,
            argument_name=argument_name,
        )

    def get_parameter(self, long_name, /):
        """
        Return the parameter registered under a long name.

        Raises UnknownParameterError (through trigger) with a close-match hint
        when nothing is registered under that name.
        """
        if (parameter := self._parameters.get(long_name)) is not None:
            return parameter

        suggestions = difflib.get_close_matches(str(long_name), self._parameters.keys(), 5)
        try:
            hint = "did you mean %r?" % suggestions[0]
        except IndexError:
            hint = "define it first with one of the define_*_parameter() methods"
        return self.trigger(UnknownParameterError(f'no parameter is defined with the long name "{long_name}"', hint=hint))

    def _get_typed(self, long_name, kind, /):
        parameter = self.get_parameter(long_name)
        if parameter.kind is not kind:
            return self.trigger(MismatchedKindError(
                f'parameter "{long_name}" is a {parameter.kind.name.lower().replace("_", " ")} parameter, '
                f'not a {kind.name.lower().replace("_", " ")} parameter',
                hint=f"use get_{parameter.kind.name.lower()}_parameter() instead",
            ))
        return parameter

    def get_flag_parameter(self, long_name, /):
        return self._get_typed(long_name, ParameterKind.FLAG)

    def get_integer_parameter(self, long_name, /):
        return self._get_typed(long_name, ParameterKind.INTEGER)

    def get_string_parameter(self, long_name, /):
        return self._get_typed(long_name, ParameterKind.STRING)

    def get_string_list_parameter(self, long_name, /):
        return self._get_typed(long_name, ParameterKind.STRING_LIST)

    def get_choice_parameter(self, long_name, /):
        return self._get_typed(long_name, ParameterKind.CHOICE)

    def process_parsed_data(self, data, /):
        """
        Run one parse pass: inject a value into every registered parameter.

        Behavior
        - Every parameter is reset first, so a provider can process several passes.
        - data maps parser keys to raw values already shaped for each kind.
        - Missing or None entries are replaced: flags get False, string lists get [],
          choices get their default value (or None), other kinds get None.
        - Keys that belong to no parameter are reported with an UnclaimedDataWarning.
        - If any value is rejected, every parameter keeps the value it had before the call.

        Raises
        - TypeError: data is not a mapping, or a value does not fit its parameter's kind.
        """
        if not isinstance(data, Mapping):
            raise TypeError("process_parsed_data() argument must be a mapping")

        previous = {name: parameter._value for name, parameter in self._parameters.items()}
        for parameter in self._parameters.values():
            parameter._reset_value()

        keys = set()
        try:
            for parameter in self._parameters.values():
                keys.add(key := parameter._parser_key)
                if (value := data.get(key)) is None:
                    value = _FALLBACKS.get(parameter.kind, lambda parameter: None)(parameter)
                parameter._set_value(value)
        except Exception:
            # a failed pass leaves the previous pass's values in place
            for name, parameter in self._parameters.items():
                parameter._value = previous[name]
            raise

        if unclaimed := [key for key in data if key not in keys]:
            self.trigger(UnclaimedDataWarning(
                f"parsed data contains keys that belong to no parameter: {", ".join(map(str, unclaimed))}",
                hint="make sure the parser and the provider were built from the same definitions",
            ))


__all__ = (
    "ParameterProvider",
)
