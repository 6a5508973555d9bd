"""Path, slug and template helpers.

Entry path and asset folder resolution live in ``entry_path`` and
``asset_folder``; they depend on the resolved collection config and are not
re-exported here.
"""

from inkstone.core.paths.utils import (
    create_path,
    encode_file_path,
    get_dirname,
    resolve_path,
    split_file_name,
    strip_slashes,
)
from inkstone.core.paths.slug import (
    format_file_name,
    rename_if_needed,
    sanitize_file_name,
    short_id,
    slugify,
)
from inkstone.core.paths.template import (
    TemplateContext,
    TemplateType,
    fill_template,
    get_entry_summary,
    get_localized_key_paths,
    uses_localized_fields,
)

__all__ = [
    # Paths
    "create_path",
    "encode_file_path",
    "get_dirname",
    "resolve_path",
    "split_file_name",
    "strip_slashes",
    # Slugs and file names
    "format_file_name",
    "rename_if_needed",
    "sanitize_file_name",
    "short_id",
    "slugify",
    # Templates
    "TemplateContext",
    "TemplateType",
    "fill_template",
    "get_entry_summary",
    "get_localized_key_paths",
    "uses_localized_fields",
]
