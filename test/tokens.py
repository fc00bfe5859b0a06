# python
"""
Token helper tests.

Scope
- split_args(): bare words, quoted strings, unquoted mode.
- prepend_args(): comments, line numbers in errors, paths and streams,
  missing files.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import os
import tempfile
import unittest
from unittest import TestCase

from argmatch import ArgumentFileError, FaultCode, ScanError, prepend_args, split_args


class TestSplitArgs(TestCase):
    """Tokenizing one line of text."""

    def testWordsAndQuotedStrings(self):
        self.assertEqual(split_args('  -a 1 "b c"\t-d '), ["-a", "1", "b c", "-d"])

    def testEscapesInQuotedStrings(self):
        self.assertEqual(split_args(r'"say \"hi\"\n"'), ['say "hi"\n'])

    def testUnquotedMode(self):
        self.assertEqual(split_args('a "b c"', quoted=False), ["a", '"b', 'c"'])

    def testUnterminatedQuote(self):
        with self.assertRaises(ScanError):
            split_args('a "b')

    def testEmptyText(self):
        self.assertEqual(split_args("   "), [])


class TestPrependArgs(TestCase):
    """Argument files."""

    def testStreamTokensComeFirst(self):
        stream = io.StringIO('-a 1 # trailing comment\n\n# whole line\n"x y"\n')
        self.assertEqual(prepend_args(stream, ["-b"]), ["-a", "1", "x y", "-b"])

    def testMalformedLineNumber(self):
        stream = io.StringIO('ok\n"bad\n')
        with self.assertRaises(ArgumentFileError) as context:
            prepend_args(stream)
        self.assertEqual(str(context.exception), "malformed string, line 2")
        self.assertEqual(context.exception.line, 2)
        self.assertEqual(context.exception.code, FaultCode.MALFORMED_ARGUMENT_FILE)

    def testMissingFileReturnsArgs(self):
        missing = os.path.join(tempfile.gettempdir(), "argmatch-missing-file.rc")
        self.assertEqual(prepend_args(missing, ("-x",)), ["-x"])

    def testPathSource(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "options.rc")
            with open(path, "w", encoding="utf-8") as stream:
                stream.write("-size 4\n-file \"my file.txt\"  # comment\n")
            self.assertEqual(prepend_args(path, ["-v"]), ["-size", "4", "-file", "my file.txt", "-v"])

    def testPathErrorNamesFile(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "broken.rc")
            with open(path, "w", encoding="utf-8") as stream:
                stream.write('"unterminated\n')
            with self.assertRaises(ArgumentFileError) as context:
                prepend_args(path)
            self.assertEqual(str(context.exception), "file broken.rc: malformed string, line 1")
            self.assertEqual(context.exception.file, "broken.rc")

    def testUndecodableFileNamesFile(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "latin.rc")
            with open(path, "wb") as stream:
                stream.write(b"-name caf\xe9\n")
            with self.assertRaises(ArgumentFileError) as context:
                prepend_args(path, ["-x"])
            self.assertTrue(str(context.exception).startswith("file latin.rc: "))
            self.assertEqual(context.exception.file, "latin.rc")
            self.assertEqual(context.exception.code, FaultCode.MALFORMED_ARGUMENT_FILE)


if __name__ == "__main__":
    unittest.main()
