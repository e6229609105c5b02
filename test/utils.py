"""
Tests for the Unset sentinel and the small helpers in clparams.utils.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from rich.text import Text

from clparams.utils import *


class UnsetTest(TestCase):
    """
    Unset is a falsy, final, process-wide singleton distinct from None.
    """

    def testSingleton(self) -> None:
        self.assertIs(Unset, UnsetType())

    def testFalsyButNotNone(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, "")

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testRich(self) -> None:
        self.assertEqual(Unset.__rich__(), Text("Unset", style="dim"))

    def testCopiesKeepIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-841
                pass

    def testUnion(self) -> None:
        self.assertTrue(isinstance("x", str | Unset))
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(1, str | Unset))


class CoalesceTest(TestCase):

    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalseyValues(self) -> None:
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):

    def testFunctionForm(self) -> None:
        def work(): ...
        self.assertIs(rename(work, "do_work"), work)
        self.assertEqual((work.__name__, work.__qualname__), ("do_work", "do_work"))

    def testDecoratorForm(self) -> None:
        @rename("do_work")
        def work(): ...
        self.assertEqual(work.__name__, "do_work")

    def testRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "x")
        with self.assertRaises(TypeError):
            rename()


class MirrorTest(TestCase):

    def testReadOnlyDetachedCopy(self) -> None:
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ("a", "b")

        holder = Holder()
        self.assertEqual(holder.items, ["a", "b"])
        holder.items.append("c")
        self.assertEqual(holder.items, ["a", "b"])
        with self.assertRaises(AttributeError):
            holder.items = []

    def testUnsetPassesThrough(self) -> None:
        class Holder:
            value = mirror("value")
            _value = Unset

        self.assertIs(Holder().value, Unset)


if __name__ == "__main__":
    unittest.main()
