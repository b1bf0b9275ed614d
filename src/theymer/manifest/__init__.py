"""Content-hash manifest of generated files."""

from theymer.manifest.index import Entry, Index, hash_scheme, hash_template, hash_theme
from theymer.manifest.manifest import Manifest, check_status, hash_bytes, hash_file, hash_text

__all__ = [
    "Entry",
    "Index",
    "Manifest",
    "check_status",
    "hash_bytes",
    "hash_file",
    "hash_scheme",
    "hash_template",
    "hash_text",
    "hash_theme",
]
