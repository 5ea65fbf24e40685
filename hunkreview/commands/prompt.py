"""
hunkreview prompt - Synthesize the feedback prompt without the TUI.

Reads annotations from a JSON file (see schemas/annotations.schema.json),
applies them to the current diff and prints the prompt, or writes it to
--output.
"""

import logging
from pathlib import Path

from hunkreview.lib.annotations import AnnotationStore, load_annotations
from hunkreview.lib.config import ReviewConfig
from hunkreview.lib.progress import iter_hunk_keys
from hunkreview.lib.prompts import synthesize_prompt
from hunkreview.lib.source import DiffSource, load_files
from hunkreview.lib.types import DiffFile, HunkKey

logger = logging.getLogger(__name__)


def warn_orphaned(files: list[DiffFile], store: AnnotationStore) -> list[HunkKey]:
    """Log annotation keys that address no hunk of the current diff.

    Keys are positional, so annotations written against an older diff can
    point at hunks that no longer exist. They are ignored by the
    synthesizer; this only makes the drop visible.
    """
    known = {key for key, _hunk in iter_hunk_keys(files)}
    orphaned = [key for key in store.keys() if key not in known]
    for key in orphaned:
        logger.warning(f"Annotations for {key.path} hunk {key.index} match no hunk in the diff; ignoring")
    return orphaned


def cmd_prompt(args, source: DiffSource, config: ReviewConfig) -> int:
    """Build the prompt from an annotations file."""
    store = load_annotations(Path(args.annotations))
    files = load_files(source, config)

    warn_orphaned(files, store)
    prompt = synthesize_prompt(files, store)

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(prompt + "\n")
        logger.info(f"Wrote prompt to {output_path}")
        print(f"Prompt written to {output_path}")
    else:
        print(prompt)
    return 0
