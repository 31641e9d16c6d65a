"""
JSON schema validation for ordering-lint findings.

This module provides JSON schema definitions and validation helpers to ensure
findings conform to a well-defined contract for downstream tools.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import jsonschema

# Current protocol version
PROTOCOL_VERSION = "1"
ENGINE_VERSION = "0.1.0"
PROTOCOL_KEY = "ordering-lint.protocol"

_RANGE_SCHEMA = {
    "type": "object",
    "properties": {
        "startLine": {"type": "integer", "minimum": 1},
        "startCol": {"type": "integer", "minimum": 0},
        "endLine": {"type": "integer", "minimum": 1},
        "endCol": {"type": "integer", "minimum": 0}
    },
    "required": ["startLine", "startCol", "endLine", "endCol"],
    "additionalProperties": False
}

# JSON Schema for a single Finding
FINDING_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "rule_id": {
            "type": "string",
            "description": "Rule identifier that generated this finding"
        },
        "message": {
            "type": "string",
            "description": "Human-readable description of the issue"
        },
        "file_path": {
            "type": "string",
            "description": "Absolute native file path where the issue was found"
        },
        "uri": {
            "type": "string",
            "description": "File URI for editor integrations"
        },
        "start_byte": {
            "type": "integer",
            "minimum": 0,
            "description": "Start byte offset of the issue"
        },
        "end_byte": {
            "type": "integer",
            "minimum": 0,
            "description": "End byte offset of the issue"
        },
        "range": dict(_RANGE_SCHEMA, description="Line/column range (1-based lines, 0-based columns)"),
        "severity": {
            "type": "string",
            "enum": ["info", "warn", "error"],
            "description": "Severity level of the finding"
        },
        "autofix": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "file_path": {"type": "string"},
                    "start_byte": {"type": "integer", "minimum": 0},
                    "end_byte": {"type": "integer", "minimum": 0},
                    "replacement": {"type": "string"},
                    "range": _RANGE_SCHEMA
                },
                "required": ["file_path", "start_byte", "end_byte", "replacement", "range"],
                "additionalProperties": False
            },
            "description": "Optional list of edits to fix the issue"
        },
        "meta": {
            "type": "object",
            "description": "Optional metadata about the finding"
        }
    },
    "required": ["rule_id", "message", "file_path", "uri", "start_byte", "end_byte", "range", "severity"],
    "additionalProperties": False
}

# JSON Schema for the full runner output
RUNNER_OUTPUT_SCHEMA = {
    "type": "object",
    "properties": {
        PROTOCOL_KEY: {
            "type": "string",
            "description": "Protocol version"
        },
        "engine_version": {
            "type": "string",
            "description": "Engine version"
        },
        "files_scanned": {
            "type": "integer",
            "minimum": 0,
            "description": "Number of files that were scanned"
        },
        "rules_run": {
            "type": "integer",
            "minimum": 0,
            "description": "Number of rules that were executed"
        },
        "findings": {
            "type": "array",
            "items": FINDING_JSON_SCHEMA,
            "description": "List of all findings"
        },
        "metrics": {
            "type": "object",
            "properties": {
                "parse_ms": {"type": "number", "minimum": 0},
                "rules_ms": {"type": "number", "minimum": 0},
                "total_ms": {"type": "number", "minimum": 0}
            },
            "required": ["parse_ms", "rules_ms", "total_ms"],
            "additionalProperties": False,
            "description": "Performance metrics"
        }
    },
    "required": [PROTOCOL_KEY, "engine_version", "files_scanned", "rules_run", "findings", "metrics"],
    "additionalProperties": False
}


def normalize_path_for_protocol(file_path: str) -> Tuple[str, str]:
    """
    Normalize a file path for protocol output.

    Args:
        file_path: File path (relative or absolute)

    Returns:
        Tuple of (absolute_native_path, file_uri)
    """
    path = Path(file_path).resolve()
    return str(path), path.as_uri()


def byte_to_line_col(text: str, byte_offset: int) -> Tuple[int, int]:
    """
    Convert a UTF-8 byte offset to 1-based line, 0-based byte column.

    Args:
        text: Source text
        byte_offset: Byte offset (0-based)

    Returns:
        Tuple of (line, col) where line is 1-based, col is 0-based
    """
    data = text.encode('utf-8')
    byte_offset = max(0, min(byte_offset, len(data)))

    line = data.count(b'\n', 0, byte_offset) + 1
    last_newline = data.rfind(b'\n', 0, byte_offset)
    col = byte_offset - last_newline - 1 if last_newline != -1 else byte_offset

    return line, col


def create_range_from_bytes(text: str, start_byte: int, end_byte: int) -> Dict[str, int]:
    """Create a protocol range object from byte offsets."""
    start_line, start_col = byte_to_line_col(text, start_byte)
    end_line, end_col = byte_to_line_col(text, end_byte)

    return {
        "startLine": start_line,
        "startCol": start_col,
        "endLine": end_line,
        "endCol": end_col
    }


def validate_runner_output(output: Dict[str, Any]) -> List[str]:
    """
    Validate runner output against the schema.

    Returns:
        List of validation errors (empty if valid)
    """
    validator = jsonschema.Draft7Validator(RUNNER_OUTPUT_SCHEMA)
    return [
        f"Output validation: {'/'.join(str(p) for p in error.absolute_path) or '<root>'}: {error.message}"
        for error in validator.iter_errors(output)
    ]


def validate_rule_options(options: Any, options_schema: List[Dict[str, Any]]) -> List[str]:
    """
    Validate the options configured for a rule against its options schema.

    The schema is a list with one JSON schema per positional option. An
    empty list means the rule accepts no options at all.
    """
    if options is None or options == {} or options == []:
        return []

    if not options_schema:
        return ["rule does not accept options"]

    values = options if isinstance(options, list) else [options]
    if len(values) > len(options_schema):
        return [f"expected at most {len(options_schema)} option(s), got {len(values)}"]

    errors = []
    for i, (value, schema) in enumerate(zip(values, options_schema)):
        try:
            jsonschema.validate(value, schema)
        except jsonschema.ValidationError as e:
            errors.append(f"option {i}: {e.message}")
    return errors


def findings_to_json(findings: List[Any], text_cache: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
    """
    Convert Finding objects to JSON-serializable dictionaries.

    Args:
        findings: List of Finding objects
        text_cache: Optional cache of absolute file_path -> text content for range conversion

    Returns:
        List of finding dictionaries conforming to protocol v1
    """
    if text_cache is None:
        text_cache = {}

    result = []
    for finding in findings:
        abs_path, uri = normalize_path_for_protocol(finding.file)
        text = text_cache.get(abs_path, "")

        finding_dict = {
            "rule_id": finding.rule,
            "message": finding.message,
            "file_path": abs_path,
            "uri": uri,
            "start_byte": finding.start_byte,
            "end_byte": finding.end_byte,
            "range": create_range_from_bytes(text, finding.start_byte, finding.end_byte),
            "severity": finding.severity
        }

        # Add autofix with both byte and range info
        if finding.autofix:
            finding_dict["autofix"] = [
                {
                    "file_path": abs_path,
                    "start_byte": edit.start_byte,
                    "end_byte": edit.end_byte,
                    "replacement": edit.replacement,
                    "range": create_range_from_bytes(text, edit.start_byte, edit.end_byte)
                }
                for edit in finding.autofix
            ]

        if finding.meta:
            finding_dict["meta"] = finding.meta

        result.append(finding_dict)

    return result
