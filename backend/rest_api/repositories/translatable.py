"""
Translatable Repository - entities with one translation row per locale.

Reads attach either a single translation (requested locale, falling back
once to the configured default locale) or every translation keyed by
locale. Writes keep at most one translation per (entity, locale).
"""

from abc import abstractmethod
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import delete, inspect, select

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.db import safe_flush
from shared.query.pagination import PaginatedRequest, PaginatedResponse
from shared.query.relations import RelationMap
from shared.utils.exceptions import UnknownFieldError, ValidationError
from shared.utils.validators import validate_locale

from rest_api.models import Base
from .base import READ_ONLY_COLUMNS, BaseRepository, ModelT

logger = get_logger(__name__)

TranslationT = TypeVar("TranslationT", bound=Base)


@dataclass
class TranslatableView(Generic[ModelT, TranslationT]):
    """
    An entity plus the translation(s) selected for the caller.

    ``translation`` is the resolved single translation (or None);
    ``translations`` is only set when all translations were requested.
    """

    entity: ModelT
    translation: TranslationT | None = None
    translations: dict[str, TranslationT] | None = field(default=None)


def resolve_translation(
    by_locale: Mapping[str, TranslationT],
    locale: str | None,
    default_locale: str | None = None,
) -> TranslationT | None:
    """
    Pick the translation for ``locale``.

    One fallback hop: requested locale, then the default locale, then None.
    """
    default_locale = default_locale or settings.default_locale
    if locale and locale in by_locale:
        return by_locale[locale]
    return by_locale.get(default_locale)


class TranslatableRepository(BaseRepository[ModelT], Generic[ModelT, TranslationT]):
    """
    Repository for entities with a *_translation child table.

    Subclasses must implement, in addition to BaseRepository:
    - translation_model: the translation model class
    - translation_foreign_key: column on the translation table pointing at the entity
    """

    @property
    @abstractmethod
    def translation_model(self) -> type[TranslationT]:
        ...

    @property
    @abstractmethod
    def translation_foreign_key(self) -> str:
        ...

    @property
    def _fk_column(self) -> Any:
        return getattr(self.translation_model, self.translation_foreign_key)

    # =========================================================================
    # Translation reads
    # =========================================================================

    def load_translations(self, entity_id: int) -> list[TranslationT]:
        """All translations for one entity, ordered by locale."""
        query = (
            select(self.translation_model)
            .where(self._fk_column == entity_id)
            .order_by(self.translation_model.locale)
        )
        return list(self._db.execute(query).scalars().all())

    def load_translations_for(self, entity_ids: Iterable[int]) -> dict[int, list[TranslationT]]:
        """Batch-load translations for several entities (one query)."""
        ids = list(entity_ids)
        grouped: dict[int, list[TranslationT]] = defaultdict(list)
        if not ids:
            return grouped

        query = (
            select(self.translation_model)
            .where(self._fk_column.in_(ids))
            .order_by(self.translation_model.locale)
        )
        for translation in self._db.execute(query).scalars():
            grouped[getattr(translation, self.translation_foreign_key)].append(translation)
        return grouped

    def load_translation(self, entity_id: int, locale: str) -> TranslationT | None:
        """Translation for exactly this locale (no fallback)."""
        query = select(self.translation_model).where(
            self._fk_column == entity_id,
            self.translation_model.locale == locale,
        )
        return self._db.scalar(query)

    def _view(
        self,
        entity: ModelT,
        translations: Sequence[TranslationT],
        locale: str | None,
        include_all_translations: bool,
    ) -> TranslatableView[ModelT, TranslationT]:
        by_locale = {t.locale: t for t in translations}
        return TranslatableView(
            entity=entity,
            translation=resolve_translation(by_locale, locale),
            translations=by_locale if include_all_translations else None,
        )

    def find_by_id(
        self,
        entity_id: int,
        relations: RelationMap | Iterable[Any] | None = None,
        *,
        locale: str | None = None,
        include_all_translations: bool = False,
    ) -> TranslatableView[ModelT, TranslationT]:
        """
        Find entity by ID with its translation(s) attached.

        Raises:
            NotFoundError: no row with this ID
        """
        entity = self.require(entity_id, relations)
        translations = self.load_translations(entity_id)
        view = self._view(entity, translations, locale, include_all_translations)

        if locale and view.translation is not None and view.translation.locale != locale:
            logger.debug(
                "Translation fallback",
                entity=self.entity_name,
                entity_id=entity_id,
                requested=locale,
                served=view.translation.locale,
            )
        return view

    def paginate(self, request: PaginatedRequest) -> PaginatedResponse:
        """
        Paginated query whose data items are TranslatableView objects.
        """
        page = super().paginate(request)
        translations = self.load_translations_for(entity.id for entity in page.data)
        views = [
            self._view(
                entity,
                translations.get(entity.id, []),
                request.locale,
                request.include_all_translations,
            )
            for entity in page.data
        ]
        return PaginatedResponse.build(views, page.total, page.page, page.limit)

    # =========================================================================
    # Translation writes
    # =========================================================================

    def _translation_values(self, data: Mapping[str, Any]) -> dict[str, Any]:
        writable = (
            {attr.key for attr in inspect(self.translation_model).column_attrs}
            - READ_ONLY_COLUMNS
            - {self.translation_foreign_key}
        )
        for key in data:
            if key not in writable:
                raise UnknownFieldError(f"translations.{key}", entity=self.entity_name)

        values = dict(data)
        locale = validate_locale(values.get("locale"), field="translations.locale")
        if locale is None:
            raise ValidationError("Translation locale is required", field="translations.locale")
        values["locale"] = locale
        return values

    def _check_unique_locales(self, items: list[dict[str, Any]]) -> None:
        seen: set[str] = set()
        for item in items:
            if item["locale"] in seen:
                raise ValidationError(
                    f"Duplicate translation for locale '{item['locale']}'",
                    field="translations.locale",
                )
            seen.add(item["locale"])

    def _after_translation_write(self, entity_id: int, operation: str) -> None:
        safe_flush(self._db, operation)
        entity = self._db.get(self.model, entity_id)
        if entity is not None:
            self._db.expire(entity, ["translations"])

    def save_translations(
        self, entity_id: int, translations: Iterable[Mapping[str, Any]]
    ) -> list[TranslationT]:
        """
        Insert new translations. An existing (entity, locale) pair raises
        ConflictError on flush.
        """
        items = [self._translation_values(t) for t in translations]
        self._check_unique_locales(items)

        created = []
        for values in items:
            translation = self.translation_model(**values)
            setattr(translation, self.translation_foreign_key, entity_id)
            self._db.add(translation)
            created.append(translation)

        self._after_translation_write(entity_id, f"save {self.entity_name} translations")
        return created

    def upsert_translations(
        self, entity_id: int, translations: Iterable[Mapping[str, Any]]
    ) -> list[TranslationT]:
        """Update translations whose locale exists, insert the rest."""
        items = [self._translation_values(t) for t in translations]
        self._check_unique_locales(items)
        existing = {t.locale: t for t in self.load_translations(entity_id)}

        result = []
        for values in items:
            translation = existing.get(values["locale"])
            if translation is None:
                translation = self.translation_model(**values)
                setattr(translation, self.translation_foreign_key, entity_id)
                self._db.add(translation)
            else:
                for key, value in values.items():
                    setattr(translation, key, value)
            result.append(translation)

        self._after_translation_write(entity_id, f"upsert {self.entity_name} translations")
        return result

    def delete_translation(self, entity_id: int, locale: str) -> bool:
        """Delete one locale's translation. Returns False if there was none."""
        translation = self.load_translation(entity_id, locale)
        if translation is None:
            return False
        self._db.delete(translation)
        self._after_translation_write(entity_id, f"delete {self.entity_name} translation")
        return True

    def delete_translations(self, entity_id: int) -> int:
        """Delete every translation of an entity. Returns the number removed."""
        result = self._db.execute(
            delete(self.translation_model).where(self._fk_column == entity_id)
        )
        self._after_translation_write(entity_id, f"delete {self.entity_name} translations")
        return result.rowcount or 0
