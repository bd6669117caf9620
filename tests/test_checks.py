"""Tests for the semantic checks."""

from biblint.bib import checks, parse_string
from biblint.bib.transforms import normalize_authors


def messages(db):
    return [(e.key, e.tag, e.msg) for e in db.errors]


def run(check, text):
    db, errors = parse_string(text)
    assert errors == []
    check(db)
    return messages(db)


class TestFieldChecks:
    """Tests for checks of individual field values."""

    def test_years_are_int(self):
        assert run(checks.check_years_are_int,
                   "@misc{a, year = {MMXX}}\n@misc{b, year = 2020}") == [
            ("a", "year", 'year is not an integer "MMXX"'),
        ]

    def test_quoted_value_escapes(self):
        """Test that control characters are escaped and accents are kept."""
        assert run(checks.check_years_are_int,
                   "@misc{a, year = {MM\tXX}}\n@misc{b, year = {Zwölf\x07 \"x\"}}") == [
            ("a", "year", 'year is not an integer "MM\\tXX"'),
            ("b", "year", 'year is not an integer "Zwölf\\x07 \\"x\\""'),
        ]

    def test_et_al(self):
        assert run(checks.check_et_al, "@misc{a, author = {Smith Et  Al.}}") == [
            ("a", "author", "author contains et al"),
        ]

    def test_ascii(self):
        assert run(checks.check_ascii, "@misc{a, title = {Café}, note = {fine}}") == [
            ("a", "title", "contains non-ascii character 'é' at position 3"),
        ]

    def test_lone_hyphen_in_title(self):
        assert run(checks.check_lone_hyphen_in_title,
                   "@misc{a, title = {Part one - the beginning}}\n"
                   "@misc{b, title = {Part two --- the end}}") == [
            ("a", "title", 'title contains lone " - " when --- is probably needed'),
        ]

    def test_page_ranges(self):
        assert run(checks.check_page_ranges,
                   "@misc{a, pages = {20--10}}\n@misc{b, pages = {10--20}}") == [
            ("a", "pages", "page range is empty 20--10"),
        ]

    def test_undefined_symbols(self):
        text = "@string{jacm = {J. ACM}}\n@misc{a, journal = jacm, month = jan, note = nope}"
        assert run(checks.check_undefined_symbols, text) == [
            ("a", "note", 'symbol "nope" is undefined'),
        ]

    def test_unmatched_dollar_signs(self):
        text = (
            "@misc{a, title = {$x$ and $y}}\n"
            "@misc{b, title = {costs \\$5 and $n$}}\n"
            "@misc{c, title = {double \\\\$x$}}"
        )
        assert run(checks.check_unmatched_dollar_signs, text) == [
            ("a", "title", "contains unbalanced $"),
        ]


class TestDatabaseChecks:
    """Tests for checks across entries and symbols."""

    def test_duplicate_keys(self):
        text = "@misc{Smith, note = {1}}\n@misc{smith, note = {2}}\n@misc{other, note = {3}}"
        assert run(checks.check_duplicate_keys, text) == [
            ("smith", "", 'key "smith" is defined more than once'),
        ]

    def test_required_fields(self):
        text = "@article{a, title = {T}, year = 2000}"
        assert run(checks.check_required_fields, text) == [
            ("a", "author", 'missing required field "author" in article'),
            ("a", "journal", 'missing required field "journal" in article'),
            ("a", "volume", 'missing required field "volume" in article'),
        ]

    def test_required_alternatives(self):
        """Test that one of author/editor is enough for a book."""
        text = "@book{a, editor = {E}, title = {T}, publisher = {P}, year = 1}\n@book{b, title = {T}, publisher = {P}, year = 1}"
        assert run(checks.check_required_fields, text) == [
            ("b", "author/editor", 'missing required field "author/editor" in book'),
        ]

    def test_other_kind_has_no_requirements(self):
        assert run(checks.check_required_fields, "@webpage{a, url = {x}}") == []

    def test_redundant_symbols(self):
        text = "@string{zeta = {Same}}\n@string{alpha = {Same}}\n@string{solo = {Other}}"
        assert run(checks.check_redundant_symbols, text) == [
            ("<none>", "", 'symbols all define "Same": alpha,zeta'),
        ]

    def test_deleted_entries_not_checked(self):
        db, _ = parse_string("@misc{a, year = {MMXX}}")
        db.pubs[0].mark_deleted()
        checks.check_years_are_int(db)
        assert db.errors == []


class TestAuthorLast:
    """Tests for suspicious last names."""

    def test_no_op_without_normalized_authors(self):
        assert run(checks.check_author_last, "@misc{a, author = {SMITH, John}}") == []

    def test_suspicious_names(self):
        db, _ = parse_string(
            "@misc{a, author = {SMITH, John and Henry mooney and Knuth, Donald and others}}"
        )
        normalize_authors(db)
        checks.check_author_last(db)
        assert messages(db) == [
            ("a", "author", "name SMITH, John has no lowercase in last name"),
            ("a", "author", "last name in mooney is all lowercase"),
        ]

    def test_empty_last_name(self):
        db, _ = parse_string("@misc{a, author = {{}, Jane}}")
        normalize_authors(db)
        db.pubs[0].author_list[0].last = ""
        checks.check_author_last(db)
        assert messages(db) == [("a", "author", "name Jane has empty last name")]
