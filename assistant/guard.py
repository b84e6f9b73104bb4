"""
Input sanitization for incoming queries.

Runs before anything else in the pipeline; rejected input never reaches
preprocessing or the conversation context.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

logger = logging.getLogger(__name__)

LENGTH_EXCEEDED = "length_exceeded"
SCRIPT_INJECTION = "script_injection"
SQL_INJECTION = "sql_injection"
INVALID_INPUT = "invalid_input"


@dataclass
class SecurityCheckResult:
    """Result of input sanitization."""
    is_valid: bool = True
    sanitized: str = ""
    threats: List[str] = field(default_factory=list)
    original: Any = ""


class SecurityGuard:
    """
    Sanitizes and validates user input.

    Checks:
    1. Length cap (truncates, not a rejection on its own)
    2. Script injection (stripped, rejects)
    3. HTML tags (stripped unless allowed)
    4. SQL injection patterns (flagged, rejects; blanked in strict mode)
    5. Control characters (removed)
    """

    SCRIPT_PATTERN = re.compile(
        r"<script\b[^>]*>([\s\S]*?)</script>|javascript:|on\w+=",
        re.IGNORECASE,
    )

    TAG_PATTERN = re.compile(r"<[^>]*>")

    SQL_PATTERNS = [
        re.compile(
            r"\b(union|select|insert|update|delete|drop|alter)\b.*\b(from|into|table|database)\b",
            re.IGNORECASE,
        ),
        re.compile(r"\b1\s*=\s*1\b"),
        re.compile(r"--"),
    ]

    CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

    def __init__(
        self,
        max_length: int = 500,
        block_scripts: bool = True,
        block_sql_patterns: bool = True,
        allowed_tags: Optional[Sequence[str]] = None,
        strict_mode: bool = False,
    ):
        self.max_length = max_length
        self.block_scripts = block_scripts
        self.block_sql_patterns = block_sql_patterns
        self.allowed_tags = list(allowed_tags or [])
        self.strict_mode = strict_mode

        if self.allowed_tags:
            allowed = "|".join(re.escape(t) for t in self.allowed_tags)
            self._tag_pattern = re.compile(rf"<(?!/?({allowed})\b)[^>]*>", re.IGNORECASE)
        else:
            self._tag_pattern = self.TAG_PATTERN

    def process(self, text: Any) -> SecurityCheckResult:
        """
        Sanitize one input.

        Args:
            text: Raw user input

        Returns:
            SecurityCheckResult; ``is_valid`` is False for any threat other
            than an over-long input
        """
        if not isinstance(text, str) or not text:
            return SecurityCheckResult(is_valid=False, threats=[INVALID_INPUT], original=text)

        threats: List[str] = []
        sanitized = text

        if len(text) > self.max_length:
            threats.append(LENGTH_EXCEEDED)
            sanitized = sanitized[:self.max_length]

        if self.block_scripts and self.SCRIPT_PATTERN.search(sanitized):
            threats.append(SCRIPT_INJECTION)
            sanitized = self.SCRIPT_PATTERN.sub("", sanitized)

        sanitized = self._tag_pattern.sub("", sanitized)

        if self.block_sql_patterns:
            for pattern in self.SQL_PATTERNS:
                if pattern.search(sanitized):
                    threats.append(SQL_INJECTION)
                    if self.strict_mode:
                        sanitized = ""
                    break

        sanitized = self.CONTROL_CHARS.sub("", sanitized)

        is_valid = all(t == LENGTH_EXCEEDED for t in threats)
        if not is_valid:
            logger.warning(f"Input rejected, threats: {threats}")

        return SecurityCheckResult(
            is_valid=is_valid,
            sanitized=sanitized.strip(),
            threats=threats,
            original=text,
        )

    def is_safe(self, text: Any) -> bool:
        return self.process(text).is_valid
