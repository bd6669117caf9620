"""
Audit logging for lint runs.

Each pipeline step writes one JSON event per line, so a run can be
reviewed or diffed later. Nothing is written unless the audit log is
enabled in the configuration.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


class AuditLogger:
    """
    Structured audit logger.

    Features:
    - JSON event logging
    - Counts for parse, clean, check and duplicate passes
    - Append-only log file
    """

    def __init__(self, log_file: Optional[str] = "./biblint-audit.log", level: str = "INFO"):
        """
        Initialize audit logger.

        Args:
            log_file: Path to audit log; None discards all events
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        self.logger = logging.getLogger("biblint_audit")
        self.logger.setLevel(getattr(logging, level))
        self.logger.propagate = False

        # Remove existing handlers to avoid duplicates
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers = []

        if log_file is None:
            self.log_file = None
            self.logger.addHandler(logging.NullHandler())
            return

        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        # File handler, each line is a JSON event
        fh = logging.FileHandler(self.log_file, mode='a')
        fh.setLevel(getattr(logging, level))
        fh.setFormatter(logging.Formatter('%(message)s'))
        self.logger.addHandler(fh)

    def _log_event(self, event_dict: Dict[str, Any], level: int = logging.INFO):
        """
        Log a structured event as JSON.

        Args:
            event_dict: Event data to log
            level: logging level for the event
        """
        event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
        self.logger.log(level, json.dumps(event_dict))

    def log_parse(self, source_path: str, num_entries: int, num_symbols: int,
                  num_syntax_errors: int, **kwargs):
        """
        Log a parsed input file.

        Args:
            source_path: File that was parsed
            num_entries: Entries read
            num_symbols: @string symbols defined
            num_syntax_errors: Syntax errors recorded by the parser
            **kwargs: Additional metadata
        """
        event = {
            "event": "parse",
            "source_path": source_path,
            "num_entries": num_entries,
            "num_symbols": num_symbols,
            "num_syntax_errors": num_syntax_errors,
            **kwargs
        }
        self._log_event(event)

    def log_clean(self, num_entries: int, removed: Dict[str, int],
                  execution_time_ms: float, **kwargs):
        """
        Log a finished clean pass.

        Args:
            num_entries: Entries left after cleaning
            removed: Entries removed per duplicate pass
            execution_time_ms: Duration of the pass
            **kwargs: Additional metadata
        """
        event = {
            "event": "clean",
            "num_entries": num_entries,
            "removed": removed,
            "execution_time_ms": execution_time_ms,
            **kwargs
        }
        self._log_event(event)

    def log_check(self, num_entries: int, num_diagnostics: int,
                  execution_time_ms: float, **kwargs):
        """
        Log a finished check pass.

        Args:
            num_entries: Entries checked
            num_diagnostics: Diagnostics recorded
            execution_time_ms: Duration of the pass
            **kwargs: Additional metadata
        """
        event = {
            "event": "check",
            "num_entries": num_entries,
            "num_diagnostics": num_diagnostics,
            "execution_time_ms": execution_time_ms,
            **kwargs
        }
        self._log_event(event)

    def log_duplicates(self, num_groups: int, num_entries: int, **kwargs):
        """
        Log a duplicate-candidate search.

        Args:
            num_groups: Title groups with more than one entry
            num_entries: Entries in those groups
            **kwargs: Additional metadata
        """
        event = {
            "event": "duplicates",
            "num_groups": num_groups,
            "num_entries": num_entries,
            **kwargs
        }
        self._log_event(event)

    def log_error(self, error_type: str, message: str, context: Optional[Dict] = None):
        """
        Log system error.

        Args:
            error_type: Type of error
            message: Error message
            context: Optional context dictionary
        """
        event = {
            "event": "error",
            "error_type": error_type,
            "message": message,
            **(context or {})
        }
        self._log_event(event, logging.ERROR)

    def close(self):
        for handler in self.logger.handlers:
            handler.close()


def get_audit_logger(config: Optional[Dict[str, Any]] = None) -> AuditLogger:
    """
    Get configured audit logger instance.

    Args:
        config: Audit config dict with 'enabled', 'file' and 'level' keys

    Returns:
        AuditLogger instance
    """
    if config is None:
        config = {'enabled': False}

    log_file = config.get('file', './biblint-audit.log') if config.get('enabled') else None
    return AuditLogger(
        log_file=log_file,
        level=config.get('level', 'INFO')
    )
