"""Tests for values, symbol resolution and ordering."""

from biblint.bib import Database, Entry, Value, ValueType
from biblint.bib.database import SORT_SYMBOL_DEPTH


class TestValue:
    """Tests for the tagged value type."""

    def test_equals_requires_same_tag(self):
        """Test that a number never equals a symbol or string."""
        assert Value.integer(2020) != Value.symbol("2020")
        assert Value.integer(2020) != Value.string("2020")
        assert Value.string("a") != Value.symbol("a")

    def test_equals_same_payload(self):
        assert Value.integer(7) == Value.integer(7)
        assert Value.string("{A}") == Value.string("{A}")
        # braces count for equality
        assert Value.string("{A}") != Value.string("A")

    def test_to_bibtex(self):
        assert Value.string("The Title").to_bibtex() == "{The Title}"
        assert Value.integer(12).to_bibtex() == "12"
        assert Value.symbol("jan").to_bibtex() == "jan"

    def test_copy_is_independent(self):
        v = Value.string("x")
        c = v.copy()
        c.text = "y"
        assert v.text == "x"
        assert c.type is ValueType.STRING

    def test_repr(self):
        assert repr(Value.integer(3)) == "Value.integer(3)"
        assert repr(Value.symbol("jan")) == "Value.symbol('jan')"


class TestSymbolResolution:
    """Tests for Database.symbol_value."""

    def test_chain(self):
        """Test that a -> b -> c -> "X" resolves to the string."""
        db = Database(symbols={
            "a": Value.symbol("b"),
            "b": Value.symbol("C"),
            "c": Value.string("X"),
        })
        assert db.symbol_value(Value.symbol("a"), 10) == Value.string("X")

    def test_undefined_unchanged(self):
        db = Database()
        v = Value.symbol("nowhere")
        assert db.symbol_value(v, 10) is v

    def test_non_symbol_unchanged(self):
        db = Database(symbols={"a": Value.string("X")})
        v = Value.string("a")
        assert db.symbol_value(v, 10) is v

    def test_cycle_stops_at_depth(self):
        """Test that a cycle ends on one of its own values."""
        db = Database(symbols={"a": Value.symbol("b"), "b": Value.symbol("a")})
        result = db.symbol_value(Value.symbol("a"), 10)
        assert result.is_symbol
        assert result.text in ("a", "b")

    def test_depth_limit_returns_partial(self):
        db = Database(symbols={"a": Value.symbol("b"), "b": Value.string("X")})
        assert db.symbol_value(Value.symbol("a"), 1) == Value.symbol("b")

    def test_predefined_month(self):
        """Test that months end the chain as full names."""
        db = Database(symbols={"m": Value.symbol("feb")})
        assert db.symbol_value(Value.symbol("Jan"), 10) == Value.string("January")
        assert db.symbol_value(Value.symbol("m"), 10) == Value.string("February")

    def test_user_symbol_shadows_month(self):
        db = Database(symbols={"jan": Value.string("Janvier")})
        assert db.symbol_value(Value.symbol("jan"), 10) == Value.string("Janvier")


class TestLess:
    """Tests for the sort order between values."""

    def test_number_vs_symbol_ordering_equivalent(self):
        """Test that Number(2020) and Symbol("2020") sort as equal."""
        db = Database()
        n, s = Value.integer(2020), Value.symbol("2020")
        assert not db.less(n, s)
        assert not db.less(s, n)
        assert not n.equals(s)

    def test_numbers_numeric(self):
        db = Database()
        assert db.less(Value.integer(9), Value.integer(10))
        assert not db.less(Value.integer(10), Value.integer(9))

    def test_strings_ignore_braces(self):
        db = Database()
        assert db.less(Value.string("Alpha"), Value.string("{B}eta"))
        assert not db.less(Value.string("{A}lpha"), Value.string("Alpha"))

    def test_mixed_compares_as_text(self):
        db = Database()
        assert db.less(Value.integer(10), Value.string("9"))

    def test_symbols_resolved_first(self):
        db = Database(symbols={"late": Value.string("Zeta")})
        assert db.less(Value.string("Alpha"), Value.symbol("late"))
        assert db.less(Value.symbol("jan"), Value.string("July"))
        assert SORT_SYMBOL_DEPTH == 10


class TestSortByField:
    """Tests for sorting publications."""

    def _db(self):
        return Database(pubs=[
            Entry(key="y2001", fields={"year": Value.integer(2001)}),
            Entry(key="b", fields={}),
            Entry(key="y1999", fields={"year": Value.string("1999")}),
            Entry(key="a", fields={}),
        ])

    def test_missing_first_then_values(self):
        db = self._db()
        db.sort_by_field("year")
        assert [e.key for e in db.pubs] == ["a", "b", "y1999", "y2001"]

    def test_reverse(self):
        db = self._db()
        db.sort_by_field("year", reverse=True)
        assert [e.key for e in db.pubs] == ["y2001", "y1999", "b", "a"]
