"""Resolution of asset folder templates into concrete directories."""

from __future__ import annotations

import re
from dataclasses import dataclass

from inkstone.core.config.folders import AssetFolder
from inkstone.core.config.models import I18nStructure
from inkstone.core.paths.template import TemplateContext, fill_template
from inkstone.core.paths.utils import create_path, resolve_path

_FIRST_PART_RE = re.compile(r"(?P<path>.+?)(?:/[^/]+)?$")
_DOT_ONLY_RE = re.compile(r"^\.?$")


@dataclass(frozen=True)
class ResolvedAssetFolderPaths:
    internal_path: str
    public_path: str


def resolve_asset_folder_paths(
    folder: AssetFolder,
    context: TemplateContext,
    *,
    structure: I18nStructure = I18nStructure.SINGLE_FILE,
    sub_path: str | None = None,
) -> ResolvedAssetFolderPaths:
    """Fill an asset folder's templates for one entry.

    Entry-relative folders live next to the entry file, so the entry's own
    sub-path directory is added to the internal path, and the public path
    climbs out of the locale folder when locales have their own folders.

    Args:
        folder: Folder descriptor
        context: Template values; ``context.type`` should be ``MEDIA_FOLDER``
        structure: I18n structure of the entry's collection
        sub_path: Sub-path template of the entry's collection, e.g. ``{{slug}}/index``

    Returns:
        Internal (repository) and public (URL) directories
    """
    if not folder.entry_relative:
        return ResolvedAssetFolderPaths(
            internal_path=fill_template(folder.internal_path, context),
            public_path=fill_template(folder.public_path, context),
        )

    is_multi_folders = structure.is_multi_folder
    match = _FIRST_PART_RE.match(sub_path or "")
    sub_path_first_part = match.group("path") if match else ""

    internal_path = resolve_path(
        fill_template(
            create_path(
                [
                    folder.internal_path,
                    sub_path_first_part if is_multi_folders or "/" in (sub_path or "") else None,
                    folder.internal_sub_path,
                ]
            ),
            context,
        )
    )

    if not is_multi_folders and _DOT_ONLY_RE.match(folder.public_path):
        # Stored as `./image.png` (or `image.png`) relative to the entry file
        public_path = folder.public_path
    elif is_multi_folders:
        depth = (sub_path or "").count("/") + 1
        public_path = resolve_path(
            fill_template(
                create_path([*[".."] * depth, folder.public_path, sub_path_first_part]),
                context,
            )
        )
    else:
        public_path = resolve_path(fill_template(folder.public_path, context))

    return ResolvedAssetFolderPaths(internal_path=internal_path, public_path=public_path)
