from release_desk.core.release_notes.editor import (
    EditorSnapshot,
    LocaleEditState,
    ReleaseNoteEditor,
    UploadStatus,
)

__all__ = [
    "EditorSnapshot",
    "LocaleEditState",
    "ReleaseNoteEditor",
    "UploadStatus",
]
