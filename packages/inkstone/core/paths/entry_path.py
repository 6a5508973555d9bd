"""Entry file path resolution."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from inkstone.core.config.collections import I18nSettings
from inkstone.core.config.models import I18nStructure
from inkstone.core.paths.template import TemplateContext, fill_template
from inkstone.core.paths.utils import create_path, strip_slashes

if TYPE_CHECKING:
    from inkstone.core.drafts.models import Draft

logger = logging.getLogger(__name__)

LOCALE_TAG = "{{locale}}"

# `{{locale}}` as a whole directory segment
_LOCALE_SEGMENT_RE = re.compile(r"(^|/)\{\{locale\}\}/")
# `{{locale}}` joined by a separator to the end of a non-empty name
_LOCALE_IN_NAME_RE = re.compile(r"(?<=[^/])[._-]\{\{locale\}\}")


def build_path_by_structure(
    *,
    base_path: str,
    path: str,
    extension: str,
    locale: str,
    omit_locale: bool,
    structure: I18nStructure,
) -> str:
    """Place an entry file according to the i18n structure.

    Args:
        base_path: Collection folder
        path: Slug or filled sub-path of the entry
        extension: File extension without the dot
        locale: Target locale
        omit_locale: Leave the locale out of the path (default locale only)
        structure: I18n file structure

    Returns:
        Path; may start with a slash when ``base_path`` is empty
    """
    match structure:
        case I18nStructure.SINGLE_FILE:
            return f"{base_path}/{path}.{extension}"
        case I18nStructure.MULTIPLE_FILES:
            if omit_locale:
                return f"{base_path}/{path}.{extension}"
            return f"{base_path}/{path}.{locale}.{extension}"
        case I18nStructure.MULTIPLE_FOLDERS:
            if omit_locale:
                return f"{base_path}/{path}.{extension}"
            return f"{base_path}/{locale}/{path}.{extension}"
        case I18nStructure.MULTIPLE_FOLDERS_I18N_ROOT:
            if omit_locale:
                return f"{base_path}/{path}.{extension}"
            return f"{locale}/{base_path}/{path}.{extension}"


def get_locale_path(i18n: I18nSettings, locale: str, path: str) -> str:
    """Fill the ``{{locale}}`` placeholders of a file collection's path template.

    When the default locale is omitted from file paths, a placeholder that
    is a whole directory, or that follows a name after a separator, is
    removed. A placeholder that is the whole file name is kept.

    Example:
        >>> get_locale_path(settings, "en", "pages/{{locale}}/about.md")  # en omitted
        'pages/about.md'
        >>> get_locale_path(settings, "ja", "pages/{{locale}}/about.md")
        'pages/ja/about.md'
    """
    if i18n.enabled and i18n.omits_locale(locale):
        path = _LOCALE_SEGMENT_RE.sub(r"\1", path)
        path = _LOCALE_IN_NAME_RE.sub("", path)

    return path.replace(LOCALE_TAG, locale)


def create_entry_path(draft: Draft, locale: str, slug: str) -> str:
    """Determine the file path of one locale of a draft.

    An existing entry whose slug in this locale did not change keeps its
    stored path.
    """
    target = draft.target
    i18n = target.i18n

    if target.collection_file is not None:
        return get_locale_path(i18n, locale, strip_slashes(target.collection_file.file))

    original = draft.original_entry
    if original is not None:
        localized = original.locales.get(locale)
        if localized is not None and localized.slug == slug:
            return localized.path

    file = target.file
    index_file = target.index_file

    if draft.is_index_file and index_file is not None:
        path = index_file.name.removesuffix(f".{file.extension}")
    elif file.sub_path:
        path = fill_template(
            file.sub_path,
            TemplateContext(
                content=draft.current_values.get(i18n.default_locale, {}),
                current_slug=slug,
                locale=locale,
                identifier_field=target.collection.identifier_field,
                slug_config=draft.site.slug,
            ),
        )
    else:
        path = slug

    full_path = build_path_by_structure(
        base_path=file.base_path or "",
        path=path,
        extension=file.extension,
        locale=locale,
        omit_locale=i18n.omits_locale(locale),
        structure=i18n.structure,
    )

    # Drop empty segments left by an empty base path
    return create_path(full_path.split("/"))
