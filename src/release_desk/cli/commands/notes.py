"""Notes command handler: view, edit and upload "What's New" text."""

from argparse import Namespace

from release_desk.cli.commands.base import BaseCommandHandler
from release_desk.cli.commands.helpers import parse_platform, truncate
from release_desk.core.release_notes import ReleaseNoteEditor
from release_desk.logger import get_logger

logger = get_logger(__name__)

PREVIEW_WIDTH = 60


class NotesHandler(BaseCommandHandler):
    """Handler for the notes command."""

    async def execute(self, args: Namespace) -> None:
        """Load the current release note and apply the requested action."""
        result = await self.container.detail_loader.load_detail(
            args.app_id, parse_platform(args.platform)
        )
        editor = self.container.create_editor(result.detail)
        current = editor.current_release_note
        if current is None:
            logger.info("❌ %s has no release notes", result.detail.name)
            return

        logger.info(
            "📝 %s %s (%s)",
            result.detail.name,
            current.version,
            result.detail.status.description,
        )

        if args.show:
            self._show(editor)
            return

        if not await self._apply_edits(editor, args):
            return

        pending = editor.pending_locales()
        if not pending:
            logger.info("✨ Nothing changed")
            return
        for locale in pending:
            state = editor.locale_state(locale)
            logger.info(
                "  %-8s %s", locale, truncate(state.text, PREVIEW_WIDTH)
            )

        if not args.upload:
            logger.info("")
            logger.info(
                "💡 %d locales changed; add --upload to save them",
                len(pending),
            )
            return

        batch = await editor.upload_all()
        logger.info("✅ Uploaded %d locales", len(batch.items))
        for failure in batch.failures:
            logger.error("❌ %s: %s", failure.key, failure.message)

    @staticmethod
    def _show(editor: ReleaseNoteEditor) -> None:
        for locale in editor.locales():
            state = editor.locale_state(locale)
            logger.info("")
            logger.info("[%s] %s", locale, state.display_name)
            for line in (state.text or "(empty)").splitlines():
                logger.info("  %s", line)

    @staticmethod
    async def _apply_edits(
        editor: ReleaseNoteEditor, args: Namespace
    ) -> bool:
        if args.set:
            for locale, text in args.set:
                try:
                    editor.set_text(locale, text)
                except KeyError:
                    logger.info(
                        "❌ Unknown locale '%s'. Available: %s",
                        locale,
                        ", ".join(editor.locales()),
                    )
                    return False
        elif args.template is not None:
            editor.apply_template_to_all(args.template)
        elif args.copy_previous:
            copied = await editor.fetch_previous_version_notes()
            logger.info("📋 Copied notes of %d locales", copied)
        return True
