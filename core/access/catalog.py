"""Merge a course's chapters and quizzes into one ordered content sequence."""

from sqlalchemy.ext.asyncio import AsyncConnection

from ..queries.content import list_published_chapters, list_published_quizzes
from ..types import CatalogItem, Chapter, Quiz

# Equal positions: chapters come before quizzes
_KIND_RANK = {"chapter": 0, "quiz": 1}


def catalog_sort_key(item: CatalogItem) -> tuple[int, int, str]:
    """Order by position, then chapters before quizzes, then id."""
    return (item.position, _KIND_RANK[item.kind], item.id)


def merge_catalog(
    chapters: list[Chapter], quizzes: list[Quiz]
) -> list[CatalogItem]:
    """Merge chapters and quizzes into a single ascending sequence.

    The order is a pure function of the items, so repeated calls over the
    same data always agree.
    """
    return sorted([*chapters, *quizzes], key=catalog_sort_key)


class ContentCatalogBuilder:
    """Builds the published content sequence of a course."""

    def __init__(self, conn: AsyncConnection):
        self.conn = conn

    async def build(self, course_id: str) -> list[CatalogItem]:
        chapters = await list_published_chapters(self.conn, course_id)
        quizzes = await list_published_quizzes(self.conn, course_id)
        return merge_catalog(chapters, quizzes)


def find_index(catalog: list[CatalogItem], item_id: str, kind: str) -> int | None:
    """Find an item's index in the catalog by id and kind."""
    for index, item in enumerate(catalog):
        if item.id == item_id and item.kind == kind:
            return index
    return None


def neighbours(
    catalog: list[CatalogItem], index: int
) -> tuple[CatalogItem | None, CatalogItem | None]:
    """Get the (previous, next) items around an index."""
    previous_item = catalog[index - 1] if index > 0 else None
    next_item = catalog[index + 1] if index + 1 < len(catalog) else None
    return previous_item, next_item
