"""Editing and uploading localized "What's New" text.

The editor works on the release note that was newest when the
AppDetail was loaded.
Each locale carries its own edit state:

    IDLE ──set_text──▶ PENDING_CHANGES ──upload──▶ UPLOADING
      ▲                                              │
      └──────── reset / merge ◀── SUCCESS | FAILURE ◀┘

Only versions in PREPARE_FOR_SUBMISSION can be edited; every mutating
call on any other version raises ReadOnlyEditorError.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from release_desk.core.catalog.client import RemoteCatalogClient
from release_desk.core.state import StatePublisher
from release_desk.domain.locales import locale_display_name
from release_desk.domain.models import (
    AppDetail,
    LocalizedReleaseNote,
    ReleaseNote,
)
from release_desk.domain.results import BatchResult
from release_desk.exceptions import ReadOnlyEditorError
from release_desk.logger import get_logger

logger = get_logger(__name__)


class UploadStatus(Enum):
    """Upload state of one locale."""

    IDLE = "idle"
    PENDING_CHANGES = "pending_changes"
    UPLOADING = "uploading"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True, slots=True)
class LocaleEditState:
    """Edit state of one localization."""

    id: str
    locale: str
    display_name: str
    original_text: str
    text: str
    status: UploadStatus = UploadStatus.IDLE
    error: str | None = None

    @property
    def has_changes(self) -> bool:
        """True when the edited text differs from the server text."""
        return self.text != self.original_text

    @classmethod
    def from_note(cls, note: LocalizedReleaseNote) -> LocaleEditState:
        """Fresh, unmodified state for a server localization."""
        return cls(
            id=note.id,
            locale=note.locale,
            display_name=locale_display_name(note.locale),
            original_text=note.notes,
            text=note.notes,
        )


@dataclass(frozen=True, slots=True)
class EditorSnapshot:
    """Observable state of the editor."""

    app_id: str
    version: str | None
    is_editable: bool
    locales: tuple[LocaleEditState, ...] = ()

    @property
    def is_uploading(self) -> bool:
        """True while any locale is being uploaded."""
        return any(
            state.status is UploadStatus.UPLOADING for state in self.locales
        )

    @property
    def pending_count(self) -> int:
        """Number of locales with unsaved edits."""
        return sum(1 for state in self.locales if state.has_changes)


class ReleaseNoteEditor:
    """Edits the localized notes of an app's current release note."""

    def __init__(
        self, detail: AppDetail, client: RemoteCatalogClient
    ) -> None:
        """Initialize the editor.

        Args:
            detail: Loaded app detail; its first release note is edited
            client: Catalog API client used for uploads and lookups

        """
        self.client = client
        self._detail = detail
        self._release_notes: list[ReleaseNote] = list(detail.release_notes)
        self._current_id: str | None = (
            detail.release_notes[0].id if detail.release_notes else None
        )
        self._states: dict[str, LocaleEditState] = {}
        current = self.current_release_note
        if current is not None:
            for note in current.localized_notes:
                self._states[note.locale] = LocaleEditState.from_note(note)
        self.state: StatePublisher[EditorSnapshot] = StatePublisher(
            self._build_snapshot()
        )

    @property
    def is_editable(self) -> bool:
        """True when the app's newest version accepts edits."""
        return self._detail.status.is_editable

    @property
    def current_release_note(self) -> ReleaseNote | None:
        """Release note being edited, with uploads applied."""
        index = self._current_index()
        return None if index is None else self._release_notes[index]

    def _current_index(self) -> int | None:
        for index, note in enumerate(self._release_notes):
            if note.id == self._current_id:
                return index
        return None

    @property
    def release_notes(self) -> tuple[ReleaseNote, ...]:
        """All known release notes in server order."""
        return tuple(self._release_notes)

    @property
    def snapshot(self) -> EditorSnapshot:
        """Latest published state."""
        return self.state.snapshot

    def subscribe(
        self, listener: Callable[[EditorSnapshot], None]
    ) -> Callable[[], None]:
        """Subscribe to state changes; returns the unsubscribe function."""
        return self.state.subscribe(listener)

    def locale_state(self, locale: str) -> LocaleEditState:
        """Return the edit state of ``locale``.

        Raises:
            KeyError: If the locale is not part of the release note

        """
        return self._states[locale]

    def locales(self) -> list[str]:
        """Locales in release-note order."""
        return list(self._states)

    def _build_snapshot(self) -> EditorSnapshot:
        current = self.current_release_note
        return EditorSnapshot(
            app_id=self._detail.id,
            version=current.version if current else None,
            is_editable=self.is_editable,
            locales=tuple(self._states.values()),
        )

    def _publish(self) -> None:
        self.state.publish(self._build_snapshot())

    def _require_editable(self) -> None:
        if not self.is_editable:
            raise ReadOnlyEditorError(
                self._detail.status.description, target=self._detail.name
            )

    def _update(self, locale: str, **changes: object) -> LocaleEditState:
        state = dataclasses.replace(self._states[locale], **changes)
        self._states[locale] = state
        return state

    def _edit(self, locale: str, text: str) -> None:
        state = self._states[locale]
        status = (
            UploadStatus.PENDING_CHANGES
            if text != state.original_text
            else UploadStatus.IDLE
        )
        self._update(locale, text=text, status=status, error=None)

    def set_text(self, locale: str, text: str) -> None:
        """Replace the edited text of one locale."""
        self._require_editable()
        self._edit(locale, text)
        self._publish()

    def has_changes(self, locale: str) -> bool:
        """True when ``locale`` has an unsaved edit."""
        return self._states[locale].has_changes

    def pending_locales(self) -> list[str]:
        """Locales with unsaved edits, in release-note order."""
        return [
            locale
            for locale, state in self._states.items()
            if state.has_changes
        ]

    def apply_template_to_all(self, template: str) -> None:
        """Set the same text for every locale."""
        self._require_editable()
        for locale in self._states:
            self._edit(locale, template)
        self._publish()

    def reset(self, locale: str) -> None:
        """Discard the edit of one locale."""
        state = self._states[locale]
        self._update(
            locale,
            text=state.original_text,
            status=UploadStatus.IDLE,
            error=None,
        )
        self._publish()

    def reset_all(self) -> None:
        """Discard every edit."""
        for locale, state in list(self._states.items()):
            self._update(
                locale,
                text=state.original_text,
                status=UploadStatus.IDLE,
                error=None,
            )
        self._publish()

    def _replace_localization(self, updated: LocalizedReleaseNote) -> None:
        index = self._current_index()
        if index is None:
            return
        current = self._release_notes[index]
        notes = tuple(
            updated if note.locale == updated.locale else note
            for note in current.localized_notes
        )
        self._release_notes[index] = dataclasses.replace(
            current, localized_notes=notes
        )

    async def upload(self, locale: str) -> None:
        """Upload the edited text of one locale.

        Does nothing when the locale has no changes.

        Raises:
            ReadOnlyEditorError: If the version is not editable
            KeyError: If the locale is unknown
            Exception: Whatever the upload raised, after the locale was
                marked FAILURE

        """
        self._require_editable()
        state = self._states[locale]
        if not state.has_changes:
            logger.debug("No changes to upload for %s", locale)
            return

        text = state.text
        self._update(locale, status=UploadStatus.UPLOADING, error=None)
        self._publish()
        try:
            updated = await self.client.update_localized_note(state.id, text)
        except Exception as e:
            logger.error("Upload of %s notes failed: %s", locale, e)
            self._update(locale, status=UploadStatus.FAILURE, error=str(e))
            self._publish()
            raise

        # Text may have been edited again while the upload was in flight.
        latest = self._states[locale]
        self._update(
            locale,
            original_text=text,
            status=(
                UploadStatus.SUCCESS
                if latest.text == text
                else UploadStatus.PENDING_CHANGES
            ),
            error=None,
        )
        self._replace_localization(updated)
        logger.info("Uploaded release notes for %s", locale)
        self._publish()

    async def upload_all(self) -> BatchResult[str]:
        """Upload every pending locale, one after another.

        Every pending locale is attempted even after a failure.

        Returns:
            Uploaded locales plus per-locale failures

        """
        self._require_editable()
        result: BatchResult[str] = BatchResult()
        for locale in self.pending_locales():
            try:
                await self.upload(locale)
            except Exception as e:  # noqa: BLE001
                result.add_failure(locale, e)
            else:
                result.items.append(locale)

        if result.failures:
            logger.warning(
                "Uploaded %d locales, %d failed: %s",
                len(result.items),
                len(result.failures),
                ", ".join(result.failed_keys()),
            )
        else:
            logger.info("Uploaded %d locales", len(result.items))
        return result

    async def fetch_previous_version_notes(self) -> int:
        """Copy notes from the version before the current one.

        Only locales present in both versions are touched. Localizations
        of the previous version are fetched when they were not loaded.

        Returns:
            Number of locales whose text was copied

        """
        self._require_editable()
        index = self._current_index()
        if index is None or index + 1 >= len(self._release_notes):
            logger.info("No previous version to copy notes from")
            return 0

        previous = self._release_notes[index + 1]
        if not previous.localized_notes:
            fetched = await self.client.fetch_localized_notes(previous.id)
            previous = dataclasses.replace(
                previous, localized_notes=tuple(fetched)
            )
            self._release_notes[index + 1] = previous

        copied = 0
        for locale in self._states:
            note = previous.for_locale(locale)
            if note is None or not note.notes:
                continue
            self._edit(locale, note.notes)
            copied += 1

        logger.info(
            "Copied notes of %d locales from version %s",
            copied,
            previous.version,
        )
        self._publish()
        return copied

    def merge_server_notes(self, release_notes: Sequence[ReleaseNote]) -> None:
        """Adopt freshly loaded server notes without losing local edits.

        Locales that just uploaded successfully or have no edits take the
        server text. Locales with pending edits keep them. Locales new on
        the server are added. The note list keeps the server order.
        """
        if not release_notes:
            return
        current = self.current_release_note
        incoming = release_notes[0]
        if current is not None:
            incoming = next(
                (note for note in release_notes if note.id == current.id),
                incoming,
            )

        for note in incoming.localized_notes:
            state = self._states.get(note.locale)
            if state is None:
                self._states[note.locale] = LocaleEditState.from_note(note)
            elif state.status is UploadStatus.SUCCESS or not state.has_changes:
                self._update(
                    note.locale,
                    id=note.id,
                    original_text=note.notes,
                    text=note.notes,
                    status=UploadStatus.IDLE,
                    error=None,
                )
            else:
                self._update(note.locale, id=note.id)

        self._current_id = incoming.id
        self._release_notes = list(release_notes)
        self._publish()
