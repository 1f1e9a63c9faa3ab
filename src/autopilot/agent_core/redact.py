"""Mask API keys, tokens and passwords before text reaches a log sink."""

import re
from typing import Iterable, List, Optional, Pattern

REDACT_MIN_LENGTH = 18
REDACT_KEEP_START = 6
REDACT_KEEP_END = 4

DEFAULT_REDACT_PATTERNS: List[str] = [
    # ENV-style assignments
    r"\b[A-Z0-9_]*(?:KEY|TOKEN|SECRET|PASSWORD|PASSWD)\b\s*[=:]\s*([\"']?)([^\s\"'\\]+)\1",
    # JSON fields
    r"\"(?:api_?key|apiKey|token|secret|password|passwd|access_?token|refresh_?token)\"\s*:\s*\"([^\"]+)\"",
    # CLI flags
    r"--(?:api[-_]?key|token|secret|password|passwd)\s+([\"']?)([^\s\"']+)\1",
    # Authorization headers
    r"Authorization\s*[:=]\s*Bearer\s+([A-Za-z0-9._\-+=]+)",
    r"\bBearer\s+([A-Za-z0-9._\-+=]{18,})\b",
    r"-----BEGIN [A-Z ]*PRIVATE KEY-----[\s\S]+?-----END [A-Z ]*PRIVATE KEY-----",
    # Well-known token prefixes
    r"\b(sk-[A-Za-z0-9_-]{8,})\b",
    r"\b(ghp_[A-Za-z0-9]{20,})\b",
    r"\b(github_pat_[A-Za-z0-9_]{20,})\b",
    r"\b(xox[baprs]-[A-Za-z0-9-]{10,})\b",
    r"\b(gsk_[A-Za-z0-9_-]{10,})\b",
    r"\b(AIza[0-9A-Za-z\-_]{20,})\b",
]


def _compile(patterns: Iterable[str]) -> List[Pattern[str]]:
    compiled = []
    for raw in patterns:
        if not raw.strip():
            continue
        try:
            compiled.append(re.compile(raw, re.IGNORECASE))
        except re.error:
            continue
    return compiled


_DEFAULT_COMPILED = _compile(DEFAULT_REDACT_PATTERNS)


def mask_token(token: str) -> str:
    """Mask a secret, keeping a short prefix and suffix of long values.

    Args:
        token: The secret to mask.

    Returns:
        ``***`` for short secrets, otherwise ``<first 6>…<last 4>``.
    """
    if len(token) < REDACT_MIN_LENGTH:
        return "***"
    return f"{token[:REDACT_KEEP_START]}…{token[-REDACT_KEEP_END:]}"


def _redact_match(match: "re.Match[str]") -> str:
    text = match.group(0)
    if "PRIVATE KEY-----" in text:
        lines = [line for line in text.splitlines() if line]
        if len(lines) < 2:
            return "***"
        return f"{lines[0]}\n…redacted…\n{lines[-1]}"

    groups = [g for g in match.groups() if g]
    token = groups[-1] if groups else text
    masked = mask_token(token)
    if token == text:
        return masked
    return text.replace(token, masked)


def redact_sensitive_text(text: str, patterns: Optional[Iterable[str]] = None) -> str:
    """Redact sensitive data (API keys, tokens, secrets) from text.

    Args:
        text: The text to scrub.
        patterns: Optional replacement for the default pattern list.

    Returns:
        The text with every matched secret masked.
    """
    if not text:
        return text
    compiled = _compile(patterns) if patterns is not None else _DEFAULT_COMPILED
    result = text
    for pattern in compiled:
        result = pattern.sub(_redact_match, result)
    return result
