from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    total_pages: int


def total_pages(total: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return (total + page_size - 1) // page_size


def paginate(sequence: Sequence[T], page: int, page_size: int) -> Page[T]:
    pages = total_pages(len(sequence), page_size)
    if page < 1:
        return Page(items=[], total_pages=pages)
    start = (page - 1) * page_size
    return Page(items=list(sequence[start : start + page_size]), total_pages=pages)


def clamp_page(page: int, pages: int) -> int:
    return min(max(page, 1), max(pages, 1))
