"""
Test suite for strict-mode reader errors.

Every failure surfaces as a ParseError carrying a message, the position
where the problem was detected and the offending source line.
"""

import pickle
import unittest
from unittest import mock

from hql.reader import (
    LineIndex,
    ParseError,
    ParseErrorKind,
    Position,
    ReaderOptions,
    parse,
    parse_document,
)
from hql.reader.reader import MAX_DEPTH


def error_for(source):
    try:
        parse(source)
    except ParseError as e:
        return e
    raise AssertionError(f"No error for {source!r}")


class TestDelimiterErrors(unittest.TestCase):
    """Test unbalanced and mismatched delimiters."""

    def test_unclosed_list(self):
        err = error_for("(a b")
        self.assertEqual(err.message, "Unclosed list")
        self.assertEqual(err.position, Position(1, 1, 0))
        self.assertEqual(err.kind, ParseErrorKind.STRUCTURAL)

    def test_unclosed_reports_innermost_opener(self):
        err = error_for("(a\n  (b c)\n  (d")
        self.assertEqual(err.message, "Unclosed list")
        self.assertEqual(err.position, Position(3, 3, 13))

    def test_unexpected_closer(self):
        err = error_for("(a))")
        self.assertEqual(err.message, "Unexpected ')'")
        self.assertEqual(err.position.column, 4)
        self.assertEqual(err.position.offset, 3)

    def test_other_stray_closers(self):
        self.assertEqual(error_for("]").message, "Unexpected ']'")
        self.assertEqual(error_for("x }").message, "Unexpected '}'")

    def test_mismatched_closer(self):
        err = error_for("(a]")
        self.assertEqual(err.message, "Unexpected ']'")
        self.assertEqual(err.position.offset, 2)

    def test_unclosed_collections(self):
        cases = {
            "[1 2": "Unclosed vector",
            "{a: 1": "Unclosed map",
            "#[1": "Unclosed set",
            "[": "Unclosed vector",
        }
        for source, message in cases.items():
            with self.subTest(source=source):
                err = error_for(source)
                self.assertEqual(err.message, message)
                self.assertEqual(err.position.offset, 0)


class TestLiteralErrors(unittest.TestCase):
    """Test malformed literals and incomplete forms."""

    def test_map_missing_colon(self):
        err = error_for("{a 1}")
        self.assertEqual(err.message, "Expected ':' in map literal")
        self.assertEqual(err.position, Position(1, 4, 3))

    def test_map_missing_colon_at_end(self):
        err = error_for("{a")
        self.assertEqual(err.message, "Expected ':' in map literal")
        self.assertEqual(err.position, Position(1, 1, 0))

    def test_dangling_quote(self):
        for source in ["'", "(a `", "~@"]:
            with self.subTest(source=source):
                self.assertEqual(error_for(source).message, "Unexpected end of input")

    def test_map_missing_value(self):
        self.assertEqual(error_for("{a:").message, "Unexpected end of input")

    def test_unterminated_string(self):
        err = error_for('(print "hello)')
        self.assertEqual(err.message, "Unterminated string")
        self.assertEqual(err.kind, ParseErrorKind.LEXICAL)
        self.assertEqual(err.position, Position(1, 8, 7))

    def test_first_error_wins(self):
        err = error_for("(a))\n(b")
        self.assertEqual(err.message, "Unexpected ')'")


class TestErrorReporting(unittest.TestCase):
    """Test the ParseError object itself."""

    SOURCE = "(a\n  b))"

    def test_is_syntax_error(self):
        err = error_for(self.SOURCE)
        self.assertIsInstance(err, SyntaxError)
        self.assertEqual(err.lineno, 2)
        self.assertEqual(err.offset, 5)

    def test_str(self):
        err = error_for(self.SOURCE)
        self.assertEqual(str(err), "Unexpected ')' at line 2, column 5")

    def test_excerpt_is_offending_line(self):
        err = error_for(self.SOURCE)
        self.assertEqual(err.source_excerpt, "  b))")
        self.assertEqual(err.text, "  b))")

    def test_format_message_points_at_column(self):
        err = error_for(self.SOURCE)
        self.assertEqual(
            err.format_message(),
            "Unexpected ')' at line 2, column 5\n\n  b))\n    ^\n",
        )

    def test_format_message_without_excerpt(self):
        err = ParseError("Unclosed list", Position(1, 1, 0))
        self.assertEqual(err.format_message(), "Unclosed list at line 1, column 1")

    def test_suggestions(self):
        self.assertIn("closing delimiter", error_for("(a))").suggestion)
        self.assertEqual(
            error_for("(a").suggestion, "Add the missing closing delimiter."
        )
        self.assertIn("incomplete", error_for("'").suggestion)
        self.assertIn("incomplete", error_for('"abc').suggestion)
        self.assertIn("Review your syntax", error_for("{a 1}").suggestion)

    def test_pickle(self):
        err = error_for(self.SOURCE)
        copy = pickle.loads(pickle.dumps(err))
        self.assertEqual(copy.message, err.message)
        self.assertEqual(copy.position, err.position)
        self.assertEqual(copy.source_excerpt, err.source_excerpt)
        self.assertEqual(str(copy), str(err))

    def test_interpolation_error_has_document_excerpt(self):
        err = error_for('(x)\n(print "a \\(b c)")')
        self.assertEqual(
            err.message, "Expected a single expression in string interpolation"
        )
        self.assertEqual(err.position, Position(2, 15, 18))
        self.assertEqual(err.source_excerpt, '(print "a \\(b c)")')


class TestNestingLimit(unittest.TestCase):
    """Test that deep nesting is a ParseError, not a crash."""

    def test_deep_but_allowed(self):
        depth = MAX_DEPTH - 1
        form = parse("(" * depth + "x" + ")" * depth)[0]
        levels = 0
        while form.elements and not hasattr(form.elements[0], "name"):
            form = form.elements[0]
            levels += 1
        self.assertEqual(levels, depth - 1)
        self.assertEqual(form[0].name, "x")

    def test_too_deep_lists(self):
        err = error_for("(" * 600 + "x" + ")" * 600)
        self.assertEqual(err.message, "Nesting too deep")
        self.assertEqual(err.position.offset, MAX_DEPTH)

    def test_too_deep_quotes(self):
        err = error_for("'" * 1200 + "x")
        self.assertEqual(err.message, "Nesting too deep")
        self.assertEqual(err.position.offset, MAX_DEPTH)

    def test_too_deep_vectors(self):
        self.assertEqual(error_for("[" * 600).message, "Nesting too deep")

    def test_interpolation_counts_toward_depth(self):
        depth = MAX_DEPTH + 10
        source = '"\\(' + "(" * depth + "x" + ")" * depth + ')"'
        self.assertEqual(error_for(source).message, "Nesting too deep")

    def test_tolerant_recovers(self):
        source = "(" * 600 + "x" + ")" * 600 + "\n(ok)"
        self.assertEqual(len(parse(source, tolerant=True)), 1)
        result = parse_document(source, ReaderOptions(tolerant=True))
        self.assertEqual([e.message for e in result.errors], ["Nesting too deep"])
        self.assertEqual(result.forms[0][0].name, "ok")


class TestManyErrors(unittest.TestCase):
    """Test error excerpts when a document has many errors."""

    def test_excerpts_without_reindexing_document(self):
        source = "(a)\n" + ")\n" * 500 + "(b  ]\n"
        with mock.patch.object(LineIndex, "__init__", side_effect=AssertionError):
            result = parse_document(source, ReaderOptions(tolerant=True))
        self.assertEqual(len(result.errors), 501)
        self.assertTrue(all(e.source_excerpt == ")" for e in result.errors[:-1]))
        last = result.errors[-1]
        self.assertEqual(last.message, "Unexpected ']'")
        self.assertEqual(last.source_excerpt, "(b  ]")
        self.assertEqual(last.position.line, 502)
        self.assertEqual(last.position.column, 5)


if __name__ == "__main__":
    unittest.main()
