"""Study type compatibility between a learner and a chapter.

Study type labels are free-form Arabic strings entered by teachers, so two
labels are treated as compatible when they are equal after trimming, or when
both mention the same delivery mode.
"""

from typing import Iterable

# Delivery-mode markers; two labels sharing a marker are compatible.
# "أون لاين" and "أونلاين" are spelling variants of "online", "سنتر" is "center".
STUDY_TYPE_MARKERS = ("أون لاين", "أونلاين", "سنتر")


def study_type_matches(chapter_study_type: str, user_study_type: str) -> bool:
    """Check one chapter label against the learner's study type."""
    chapter_label = chapter_study_type.strip()
    user_label = user_study_type.strip()

    if chapter_label == user_label:
        return True

    return any(
        marker in chapter_label and marker in user_label
        for marker in STUDY_TYPE_MARKERS
    )


def is_study_type_allowed(
    chapter_study_types: Iterable[str], user_study_type: str | None
) -> bool:
    """Check whether a learner may open a chapter restricted by study type.

    Chapters without study types are open to everyone, and learners without a
    study type are not restricted.
    """
    labels = [label for label in chapter_study_types if label is not None]
    if not labels or not (user_study_type or "").strip():
        return True

    return any(study_type_matches(label, user_study_type) for label in labels)
