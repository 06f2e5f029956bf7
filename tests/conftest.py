"""Shared fixtures: the book/author schema used across test modules."""

import asyncio

import pytest
import structlog

from resolvent import schema as S
from resolvent import query as Q


BOOKS = {
    "book-1": {"id": "book-1", "name": "Effective Java", "pageCount": 416, "authorId": "author-1"},
    "book-2": {"id": "book-2", "name": "Hitchhiker's Guide to the Galaxy", "pageCount": 208, "authorId": "author-2"},
    "book-3": {"id": "book-3", "name": "Down Under", "pageCount": 436, "authorId": "author-3"},
}

AUTHORS = {
    "author-1": {"id": "author-1", "firstName": "Joshua", "lastName": "Bloch"},
    "author-2": {"id": "author-2", "firstName": "Douglas", "lastName": "Adams"},
    "author-3": {"id": "author-3", "firstName": "Bill", "lastName": "Bryson"},
}


async def book_by_id(_, id):
    await asyncio.sleep(0)
    return BOOKS.get(id) if id is not None else None


async def book_author(book):
    await asyncio.sleep(0)
    return AUTHORS.get(book["authorId"])


def book_types() -> S.SchemaBuilder:
    """Types only, no resolvers."""
    return (
        S.builder()
        .register_type(S.object_type(
            "Query",
            S.field("bookById", "Book", S.argument("id", "String")),
            S.field("books", "[Book!]"),
        ))
        .register_type(S.object_type(
            "Book",
            S.field("id", "ID"),
            S.field("name", "String"),
            S.field("pageCount", "Int"),
            S.field("author", "Author"),
        ))
        .register_type(S.object_type(
            "Author",
            S.field("id", "ID"),
            S.field("firstName", "String"),
            S.field("lastName", "String"),
        ))
    )


@pytest.fixture
def book_schema() -> S.Schema:
    """Book schema with explicit lookups and default property access."""
    return (
        book_types()
        .register_resolver("Query", "bookById", book_by_id)
        .register_resolver("Query", "books", lambda _: list(BOOKS.values()))
        .register_resolver("Book", "author", book_author)
        .default_resolver()
        .compile()
    )


@pytest.fixture
def silent_probe():
    """Probe that records nothing."""
    from unittest.mock import create_autospec

    return create_autospec(Q.ExecutionProbe, instance=True)


@pytest.fixture
def run_query(book_schema, silent_probe) -> Q.Executor:
    return Q.executor(book_schema).probe(silent_probe).build()


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
