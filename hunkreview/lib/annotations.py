"""
Annotation store for hunkreview.

Maps a HunkKey to the ordered list of independent judgments recorded for
that hunk. A key is present only while it has at least one annotation, so
"key present" and "hunk has been annotated" mean the same thing.

The store holds no lock. Hosts with more than one actor must serialize
mutations themselves.
"""

import logging
from pathlib import Path

from hunkreview.lib import validate
from hunkreview.lib.types import Annotation, Decision, HunkKey, LineRange, RejectMode

logger = logging.getLogger(__name__)


class AnnotationStore:
    """Multi-map from hunk key to annotations, in insertion order."""

    def __init__(self) -> None:
        self._entries: dict[HunkKey, list[Annotation]] = {}

    def add(self, key: HunkKey, annotation: Annotation) -> Annotation:
        """Append an annotation. Never replaces or deduplicates."""
        self._entries.setdefault(key, []).append(annotation)
        logger.debug(f"Added {annotation.decision.value} annotation {annotation.id} to {key.path}#{key.index}")
        return annotation

    def remove(self, key: HunkKey, annotation_id: str) -> bool:
        """Remove one annotation by id.

        Drops the key when its last annotation goes. Unknown keys or ids are
        a no-op.

        Returns:
            True if an annotation was removed.
        """
        annotations = self._entries.get(key)
        if not annotations:
            return False

        remaining = [a for a in annotations if a.id != annotation_id]
        if len(remaining) == len(annotations):
            return False

        if remaining:
            self._entries[key] = remaining
        else:
            del self._entries[key]
        return True

    def clear(self, key: HunkKey) -> None:
        """Remove every annotation for a hunk."""
        self._entries.pop(key, None)

    def get(self, key: HunkKey) -> list[Annotation]:
        """Annotations for a hunk, oldest first (a copy)."""
        return list(self._entries.get(key, ()))

    def keys(self) -> list[HunkKey]:
        return list(self._entries)

    def effectively_approved(self, key: HunkKey) -> bool:
        """True if the hunk was never annotated or only ever approved.

        Unreviewed hunks count as approved. Scope does not matter: an
        approval of a single line is still an approval.
        """
        annotations = self._entries.get(key)
        if not annotations:
            return True
        return all(a.decision == Decision.APPROVED for a in annotations)

    def is_actionable(self, key: HunkKey) -> bool:
        return not self.effectively_approved(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def annotation_from_dict(data: dict) -> tuple[HunkKey, Annotation]:
    """Build a (key, annotation) pair from one validated JSON record."""
    key = HunkKey(data["path"], data["hunk"])

    selected_lines = None
    if data.get("selected_lines") is not None:
        selected_lines = LineRange(data["selected_lines"]["start"], data["selected_lines"]["end"])

    reject_mode = None
    if data.get("reject_mode") is not None:
        reject_mode = RejectMode(data["reject_mode"])

    kwargs = {}
    if data.get("id"):
        kwargs["id"] = data["id"]

    annotation = Annotation(
        decision=Decision(data["decision"]),
        comment=data.get("comment"),
        reject_mode=reject_mode,
        selected_text=data.get("selected_text"),
        selected_lines=selected_lines,
        **kwargs,
    )
    return key, annotation


def load_annotations(filepath: Path) -> AnnotationStore:
    """Build a store from an annotations JSON file.

    The file is validated against the 'annotations' schema first, then each
    record is turned into an Annotation. Records are added in file order.

    Raises:
        validate.ValidationError: if the file is unreadable, not JSON, does
            not match the schema, or a record breaks the annotation rules
            (e.g. a comment on an approval), or two records share an id.
    """
    data = validate.validate_file(filepath, "annotations")

    store = AnnotationStore()
    seen_ids = set()
    for index, record in enumerate(data["annotations"]):
        try:
            key, annotation = annotation_from_dict(record)
        except ValueError as e:
            raise validate.ValidationError("annotations", str(e), f"annotations.{index}") from None
        if annotation.id in seen_ids:
            raise validate.ValidationError(
                "annotations", f"Duplicate annotation id '{annotation.id}'", f"annotations.{index}"
            )
        seen_ids.add(annotation.id)
        store.add(key, annotation)

    logger.debug(f"Loaded {len(data['annotations'])} annotations from {filepath}")
    return store
