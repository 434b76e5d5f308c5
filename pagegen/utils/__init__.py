from .page_json import extract_object_span, parse_page_json, strip_code_fence
from .sanitize import clip_text, sanitize_page, sanitize_section
from .validation import to_page_document, validate_layout, validate_page, validate_section

__all__ = [
    "parse_page_json",
    "strip_code_fence",
    "extract_object_span",
    "clip_text",
    "sanitize_page",
    "sanitize_section",
    "validate_page",
    "validate_section",
    "validate_layout",
    "to_page_document",
]
