"""
Book details: the classic tutorial query, resolved field by field.

    query bookDetails {
      bookById(id: "book-1") {
        id name pageCount
        author { firstName lastName }
      }
    }

Level 2: resolvent.schema (types + resolver bindings)
Level 1: resolvent.query (selection + execution)
"""

import json

from resolvent import schema as S
from resolvent import query as Q
from resolvent.logging import configure_logging
from examples._infra import banner, run, Book, Author, FakeLibrary


library = FakeLibrary()


# ═══════════════════════════════════════════════════════════════════════════════
# Resolvers: plain (async) functions of (parent, **arguments)
# ═══════════════════════════════════════════════════════════════════════════════


async def book_by_id(_: None, id: str | None) -> Book | None:
    return await library.book(id)


async def book_author(book: Book) -> Author | None:
    return await library.author(book.author_id)


# ═══════════════════════════════════════════════════════════════════════════════
# Schema: registered once, compiled, read-only afterwards
# ═══════════════════════════════════════════════════════════════════════════════

schema = (
    S.builder()
    .register_type(S.object_type(
        "Query",
        S.field("bookById", "Book", S.argument("id", "String")),
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
    .register_resolver("Query", "bookById", book_by_id)
    .register_resolver("Book", "pageCount", lambda book: book.page_count)
    .register_resolver("Book", "author", book_author)
    .register_resolver("Author", "firstName", lambda author: author.first_name)
    .register_resolver("Author", "lastName", lambda author: author.last_name)
    .default_resolver()
    .compile()
)

run_query = Q.executor(schema).policy(Q.policy.timeout(2.0)).build()


def book_details(book_id: object) -> Q.SelectionNode:
    return Q.selection(
        "bookById",
        "id",
        "name",
        "pageCount",
        Q.selection("author", "firstName", "lastName"),
        id=book_id,
    )


def render(result: Q.ExecutionResult) -> str:
    payload: dict[str, object] = {"data": result.data}
    if result.errors:
        payload["errors"] = [
            {"message": e.message, "kind": e.kind.name, "path": list(e.path)}
            for e in result.errors
        ]
    return json.dumps(payload, indent=2)


async def main() -> None:
    configure_logging()

    banner("1. Known book")
    print(render(await run_query.run(book_details("book-1"))))

    banner("2. Unknown book is null, not an error")
    print(render(await run_query.run(book_details("book-404"))))

    banner("3. Object field without sub-selection")
    print(render(await run_query.run(
        Q.selection("bookById", "id", "author", id="book-1")
    )))

    banner("4. Wrong argument type")
    print(render(await run_query.run(book_details(123))))


if __name__ == "__main__":
    run(main)
