"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field


# Records
@dataclass(frozen=True, slots=True)
class Book:
    id: str
    name: str
    page_count: int
    author_id: str


@dataclass(frozen=True, slots=True)
class Author:
    id: str
    first_name: str
    last_name: str


# Fake DB
@dataclass(slots=True)
class FakeLibrary:
    books: dict[str, Book] = field(default_factory=lambda: {
        "book-1": Book("book-1", "Effective Java", 416, "author-1"),
        "book-2": Book("book-2", "Hitchhiker's Guide to the Galaxy", 208, "author-2"),
        "book-3": Book("book-3", "Down Under", 436, "author-3"),
    })
    authors: dict[str, Author] = field(default_factory=lambda: {
        "author-1": Author("author-1", "Joshua", "Bloch"),
        "author-2": Author("author-2", "Douglas", "Adams"),
        "author-3": Author("author-3", "Bill", "Bryson"),
    })

    async def book(self, book_id: str | None) -> Book | None:
        await asyncio.sleep(0.01)
        return self.books.get(book_id) if book_id is not None else None

    async def author(self, author_id: str) -> Author | None:
        await asyncio.sleep(0.01)
        return self.authors.get(author_id)


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
