"""Slug resolution for a draft being saved."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from inkstone.core.config.models import I18nStructure
from inkstone.core.drafts.models import Draft, SlugVariants
from inkstone.core.paths.template import TemplateContext, fill_template, get_localized_key_paths

logger = logging.getLogger(__name__)

# Key used in ``Draft.current_slugs`` for a slug shared by every locale
ALL_LOCALES_KEY = "_"
CANONICAL_SLUG_DEFAULT = "{{slug}}"


def _slug_context(
    draft: Draft,
    content: dict[str, Any],
    *,
    locale: str | None = None,
    current_slug: str | None = None,
    existing_slugs: Sequence[str] = (),
) -> TemplateContext:
    return TemplateContext(
        content=content,
        current_slug=current_slug,
        locale=locale,
        identifier_field=draft.target.collection.identifier_field,
        is_index_file=draft.is_index_file,
        slug_config=draft.site.slug,
        existing_slugs=existing_slugs,
    )


def _get_localized_slugs(
    draft: Draft, default_locale_slug: str, existing_slugs: Sequence[str]
) -> dict[str, str] | None:
    """Per-locale slugs when the slug template localizes field values.

    Only multi-file structures have one slug per locale.
    """
    i18n = draft.target.i18n
    template = draft.target.collection.slug_template
    key_paths = get_localized_key_paths(template)

    if i18n.structure == I18nStructure.SINGLE_FILE or not key_paths:
        return None

    default_content = draft.current_values.get(i18n.default_locale, {})
    slugs: dict[str, str] = {}

    for locale in draft.current_locales:
        if locale == i18n.default_locale:
            slugs[locale] = default_locale_slug
            continue

        explicit = draft.current_slugs.get(locale) or draft.current_slugs.get(ALL_LOCALES_KEY)
        if explicit:
            slugs[locale] = explicit
            continue

        localized_values = draft.current_values.get(locale, {})
        content = {
            **default_content,
            **{key_path: localized_values.get(key_path) for key_path in key_paths},
        }
        slugs[locale] = fill_template(
            template,
            _slug_context(draft, content, locale=locale, existing_slugs=existing_slugs),
        )

    return slugs


def get_slugs(draft: Draft, *, existing_slugs: Sequence[str] = ()) -> SlugVariants:
    """Determine the slugs of a draft.

    Precedence for the default locale: the index file name, the file name of
    a file collection, a slug typed in for the default locale (or for every
    locale), then the collection's slug template.

    Args:
        draft: Draft being saved
        existing_slugs: Slugs of the collection's other entries; a slug
            generated from the template is made unique against them

    Returns:
        Default, localized and canonical slugs
    """
    target = draft.target
    index_file = target.index_file

    if draft.is_index_file and index_file is not None:
        return SlugVariants(default_locale_slug=index_file.name)

    default_locale = target.i18n.default_locale
    default_locale_slug = (
        draft.file_name
        or draft.current_slugs.get(default_locale)
        or draft.current_slugs.get(ALL_LOCALES_KEY)
        or fill_template(
            target.collection.slug_template,
            _slug_context(
                draft,
                draft.current_values.get(default_locale, {}),
                existing_slugs=existing_slugs,
            ),
        )
    )

    localized_slugs = _get_localized_slugs(draft, default_locale_slug, existing_slugs)
    canonical_slug = None

    if localized_slugs is not None:
        canonical_template = target.i18n.canonical_slug.value
        if canonical_template == CANONICAL_SLUG_DEFAULT:
            canonical_slug = default_locale_slug
        else:
            canonical_slug = fill_template(
                canonical_template,
                _slug_context(
                    draft,
                    draft.current_values.get(default_locale, {}),
                    current_slug=default_locale_slug,
                ),
            )

    logger.debug(
        "Resolved slugs for %s: %s (localized=%s)",
        draft.collection_name,
        default_locale_slug,
        localized_slugs,
    )
    return SlugVariants(
        default_locale_slug=default_locale_slug,
        localized_slugs=localized_slugs,
        canonical_slug=canonical_slug,
    )
