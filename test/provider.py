# python
"""
Provider module behavioral tests (definition, lookup, parse passes, fault routing).

Scope
- Validate define_*_parameter() for every kind and duplicate-name detection.
- Validate lookups, typed getters and their faults.
- Validate process_parsed_data(): defaults, resets between passes, unclaimed keys.
- Validate shell mode: faults are printed to stderr and errors exit with status 1.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
import warnings
from unittest import TestCase, mock

from rich.console import Console

from clparams import (
    ParameterProvider,
    ParameterKind,
    FlagParameter,
    IntegerParameter,
    StringParameter,
    StringListParameter,
    ChoiceParameter,
    Unset,
    MalformedLongNameError,
    DuplicateParameterError,
    UnknownParameterError,
    MismatchedKindError,
    UnclaimedDataWarning,
)
from clparams import faults


def _provider():
    provider = ParameterProvider()
    provider.define_flag_parameter("--verbose", "-v", description="chatty output")
    provider.define_integer_parameter("--max-count", "-n", description="stop after N", argument_name="NUMBER")
    provider.define_string_parameter("--title", description="window title")
    provider.define_string_list_parameter("--tag", "-t", description="tags to apply", argument_name="TAG")
    provider.define_choice_parameter(
        "--mode", description="build mode", alternatives=["debug", "release"], default_value="debug"
    )
    return provider


class TestDefinition(TestCase):
    """Behavioral tests for define_*_parameter()."""

    def testDefinesEveryKind(self):
        provider = _provider()
        self.assertEqual(
            [type(parameter) for parameter in provider.parameters],
            [FlagParameter, IntegerParameter, StringParameter, StringListParameter, ChoiceParameter],
        )
        self.assertEqual(provider.get_integer_parameter("--max-count").argument_name, "NUMBER")
        self.assertEqual(provider.get_choice_parameter("--mode").default_value, "debug")

    def testDefinitionReturnsRegisteredParameter(self):
        provider = ParameterProvider()
        verbose = provider.define_flag_parameter("--verbose", description="d")
        self.assertIs(provider.get_parameter("--verbose"), verbose)

    def testDuplicateLongNameRejected(self):
        provider = _provider()
        with self.assertRaises(DuplicateParameterError) as context:
            provider.define_string_parameter("--title", description="again")
        self.assertIn('"--title"', str(context.exception))

    def testDuplicateShortNameRejected(self):
        provider = _provider()
        with self.assertRaises(DuplicateParameterError) as context:
            provider.define_flag_parameter("--version", "-v", description="d")
        self.assertIn("'--verbose'", str(context.exception))
        with self.assertRaises(UnknownParameterError):
            provider.get_parameter("--version")

    def testInvalidDefinitionRaises(self):
        provider = ParameterProvider()
        with self.assertRaises(MalformedLongNameError):
            provider.define_flag_parameter("--Verbose", description="d")
        self.assertEqual(provider.parameters, ())

    def testParametersIsReadOnly(self):
        provider = _provider()
        self.assertIsInstance(provider.parameters, tuple)
        with self.assertRaises(AttributeError):
            provider.parameters = ()

    def testRepr(self):
        provider = ParameterProvider(fancy=True)
        self.assertEqual(repr(provider), "parameter-provider(parameters=(), shell=False, colorful=True, fancy=True)")


class TestLookup(TestCase):
    """Behavioral tests for get_parameter() and the typed getters."""

    def testUnknownParameterSuggestsCloseMatch(self):
        provider = _provider()
        with self.assertRaises(UnknownParameterError) as context:
            provider.get_parameter("--max-cont")
        self.assertEqual(context.exception.options["hint"], "did you mean '--max-count'?")

    def testUnknownParameterWithoutMatches(self):
        with self.assertRaises(UnknownParameterError) as context:
            ParameterProvider().get_parameter("--anything")
        self.assertIn("define", context.exception.options["hint"])

    def testLookupIsByLongNameOnly(self):
        with self.assertRaises(UnknownParameterError):
            _provider().get_parameter("-v")

    def testTypedGetters(self):
        provider = _provider()
        self.assertIs(provider.get_flag_parameter("--verbose").kind, ParameterKind.FLAG)
        self.assertIs(provider.get_string_parameter("--title").kind, ParameterKind.STRING)
        self.assertIs(provider.get_string_list_parameter("--tag").kind, ParameterKind.STRING_LIST)

    def testTypedGetterMismatch(self):
        with self.assertRaises(MismatchedKindError) as context:
            _provider().get_integer_parameter("--title")
        self.assertIn("string parameter", str(context.exception))
        self.assertEqual(context.exception.options["hint"], "use get_string_parameter() instead")


class TestParsedData(TestCase):
    """Behavioral tests for process_parsed_data()."""

    def testInjectsParsedValues(self):
        provider = _provider()
        data = {
            provider.get_parameter("--verbose")._parser_key: True,
            provider.get_parameter("--max-count")._parser_key: 5,
            provider.get_parameter("--title")._parser_key: "hello",
            provider.get_parameter("--tag")._parser_key: ["x", "y"],
            provider.get_parameter("--mode")._parser_key: "release",
        }
        provider.process_parsed_data(data)
        self.assertIs(provider.get_parameter("--verbose").value, True)
        self.assertEqual(provider.get_parameter("--max-count").value, 5)
        self.assertEqual(provider.get_parameter("--title").value, "hello")
        self.assertEqual(provider.get_parameter("--tag").value, ["x", "y"])
        self.assertEqual(provider.get_parameter("--mode").value, "release")

    def testSubstitutesDefaults(self):
        provider = _provider()
        provider.process_parsed_data({})
        self.assertIs(provider.get_parameter("--verbose").value, False)
        self.assertIsNone(provider.get_parameter("--max-count").value)
        self.assertIsNone(provider.get_parameter("--title").value)
        self.assertEqual(provider.get_parameter("--tag").value, [])
        self.assertEqual(provider.get_parameter("--mode").value, "debug")

    def testChoiceWithoutDefaultGetsNone(self):
        provider = ParameterProvider()
        color = provider.define_choice_parameter("--color", description="d", alternatives=["auto", "never"])
        provider.process_parsed_data({color._parser_key: None})
        self.assertIsNone(color.value)

    def testValuesUnsetBeforeFirstPass(self):
        for parameter in _provider().parameters:
            with self.subTest(parameter=parameter.long_name):
                self.assertIs(parameter.value, Unset)

    def testSeveralPasses(self):
        provider = _provider()
        title = provider.get_parameter("--title")
        provider.process_parsed_data({title._parser_key: "first"})
        provider.process_parsed_data({title._parser_key: "second"})
        self.assertEqual(title.value, "second")
        provider.process_parsed_data({})
        self.assertIsNone(title.value)

    def testMismatchedValueRaises(self):
        provider = _provider()
        count = provider.get_parameter("--max-count")
        with self.assertRaises(TypeError):
            provider.process_parsed_data({count._parser_key: "5"})

    def testFailedPassKeepsPreviousValues(self):
        provider = _provider()
        verbose = provider.get_parameter("--verbose")
        count = provider.get_parameter("--max-count")
        title = provider.get_parameter("--title")
        provider.process_parsed_data({verbose._parser_key: True, count._parser_key: 1, title._parser_key: "a"})
        with self.assertRaises(TypeError):
            provider.process_parsed_data({verbose._parser_key: False, count._parser_key: "5", title._parser_key: "b"})
        self.assertEqual((verbose.value, count.value, title.value), (True, 1, "a"))

        provider.process_parsed_data({title._parser_key: "c"})
        self.assertEqual((verbose.value, count.value, title.value), (False, None, "c"))

    def testFailedFirstPassLeavesValuesUnset(self):
        provider = _provider()
        count = provider.get_parameter("--max-count")
        with self.assertRaises(TypeError):
            provider.process_parsed_data({count._parser_key: 2.5})
        for parameter in provider.parameters:
            with self.subTest(parameter=parameter.long_name):
                self.assertIs(parameter.value, Unset)

    def testChoiceStoresUnlistedString(self):
        provider = _provider()
        mode = provider.get_parameter("--mode")
        provider.process_parsed_data({mode._parser_key: "zzz"})
        self.assertEqual(mode.value, "zzz")

    def testDataMustBeMapping(self):
        with self.assertRaises(TypeError):
            _provider().process_parsed_data([("key", 1)])

    def testUnclaimedKeysWarn(self):
        provider = _provider()
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            provider.process_parsed_data({"stray_key": 1})
        self.assertTrue(any(isinstance(w.message, UnclaimedDataWarning) for w in caught))
        self.assertTrue(any("stray_key" in str(w.message) for w in caught))
        self.assertIs(provider.get_parameter("--verbose").value, False)


class TestShellMode(TestCase):
    """Shell mode prints faults on stderr instead of raising them."""

    def setUp(self):
        self.stream = io.StringIO()
        patcher = mock.patch.object(faults, "console", Console(file=self.stream, width=100, color_system=None))
        patcher.start()
        self.addCleanup(patcher.stop)

    def testErrorsExitWithStatusOne(self):
        provider = ParameterProvider(shell=True, colorful=False)
        with self.assertRaises(SystemExit) as context:
            provider.define_flag_parameter("verbose", description="d")
        self.assertEqual(context.exception.code, 1)
        output = self.stream.getvalue()
        self.assertIn(str(faults.FaultCode.MALFORMED_LONG_NAME.value), output)
        self.assertIn("Malformed Long Name", output)
        self.assertIn('"verbose"', output)

    def testFancyPanel(self):
        provider = ParameterProvider(shell=True, colorful=False, fancy=True)
        with self.assertRaises(SystemExit):
            provider.get_parameter("--missing")
        self.assertIn("Unknown Parameter", self.stream.getvalue())
        self.assertIn("╭", self.stream.getvalue())

    def testWarningsArePrinted(self):
        provider = ParameterProvider(shell=True, colorful=False)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            provider.process_parsed_data({"stray_key": 1})
        self.assertEqual(caught, [])
        self.assertIn("Unclaimed Data", self.stream.getvalue())


if __name__ == "__main__":
    unittest.main()
