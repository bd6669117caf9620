"""Lint engine: runs the clean, check and dups pipelines over a database."""

import time
from typing import Any, Dict, List, Optional, Tuple

from biblint.audit.logger import AuditLogger, get_audit_logger
from biblint.bib import checks, dups, transforms
from biblint.bib.database import Database
from biblint.bib.entry import Entry
from biblint.bib.parser import ParserError, parse_file


class LintEngine:
    """Applies the fixed sequence of clean-ups and checks."""

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None,
                 audit: Optional[AuditLogger] = None):
        """Initialize lint engine."""
        self.config = config_dict or {}
        self.audit = audit or get_audit_logger(self.config.get('audit_log', {}))

    def load(self, file_path: str) -> Tuple[Database, List[ParserError]]:
        """Parse a .bib file and log what was read."""
        db, errors = parse_file(file_path)
        self.audit.log_parse(
            source_path=str(file_path),
            num_entries=len(db.pubs),
            num_symbols=len(db.symbols),
            num_syntax_errors=len(errors)
        )
        return db, errors

    def clean(self, db: Database, sort_by: Optional[str] = None,
              reverse: Optional[bool] = None,
              blessed: Optional[List[str]] = None,
              by_title: Optional[bool] = None) -> Dict[str, int]:
        """
        Normalise a database in place.

        Args:
            db: Database to clean
            sort_by: Field to sort entries by
            reverse: Reverse the sort order
            blessed: Extra fields that survive pruning
            by_title: Also remove contained entries grouped by title fingerprint

        Returns:
            Number of entries removed by each duplicate pass
        """
        clean_cfg = self.config.get('clean', {})
        sort_by = sort_by if sort_by is not None else clean_cfg.get('sort_by', 'year')
        reverse = reverse if reverse is not None else clean_cfg.get('reverse', True)
        if blessed is None:
            blessed = clean_cfg.get('blessed', [])
        if by_title is None:
            by_title = clean_cfg.get('remove_dups_by_title', False)

        start = time.time()

        db.transform_each_field(transforms.normalize_whitespace)
        db.transform_each_field(transforms.remove_whole_field_braces)
        db.transform_each_field(transforms.canonical_brace)
        db.transform_each_field(transforms.convert_titles_to_min_braces)
        db.transform_each_field(transforms.convert_int_strings_to_int)
        transforms.replace_symbols(db)
        db.transform_field("month", transforms.replace_abbr_months)
        transforms.remove_non_blessed_fields(db, [b.strip().lower() for b in blessed])
        transforms.remove_empty_fields(db)
        db.transform_field("author", transforms.replace_author_et_al)
        transforms.normalize_authors(db)
        db.transform_field("title", transforms.remove_period_from_titles)
        db.transform_field("pages", transforms.fix_hyphens_in_pages)
        db.transform_field("pages", transforms.fix_truncated_page_numbers)
        db.transform_field("journal", transforms.title_case_journal_names)

        removed = {'contained': dups.remove_contained_entries(db)}
        if by_title:
            removed['by_title'], _ = dups.remove_dups_by_title(db)
        removed['exact'] = dups.remove_exact_dups(db)

        db.sort_by_field(sort_by, reverse)

        self.audit.log_clean(
            num_entries=len(db.pubs),
            removed=removed,
            execution_time_ms=(time.time() - start) * 1000
        )
        return removed

    def check(self, db: Database) -> int:
        """
        Run every check, appending diagnostics to `db.errors`.

        Returns:
            Number of diagnostics recorded by this pass
        """
        start = time.time()
        before = len(db.errors)

        checks.check_years_are_int(db)
        checks.check_et_al(db)
        checks.check_ascii(db)
        checks.check_lone_hyphen_in_title(db)
        checks.check_page_ranges(db)
        checks.check_undefined_symbols(db)
        checks.check_duplicate_keys(db)
        checks.check_required_fields(db)
        checks.check_unmatched_dollar_signs(db)
        checks.check_redundant_symbols(db)

        transforms.normalize_authors(db)
        checks.check_author_last(db)

        found = len(db.errors) - before
        self.audit.log_check(
            num_entries=len(db.pubs),
            num_diagnostics=found,
            execution_time_ms=(time.time() - start) * 1000
        )
        return found

    def find_duplicates(self, db: Database) -> Dict[str, List[Entry]]:
        """Groups of entries whose titles share a fingerprint."""
        groups = dups.duplicate_candidates(db)
        self.audit.log_duplicates(
            num_groups=len(groups),
            num_entries=sum(len(g) for g in groups.values())
        )
        return groups
