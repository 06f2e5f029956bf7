"""Tests for query execution: resolution, shapes and failure containment."""

import json
from datetime import date
from decimal import Decimal
from dataclasses import dataclass

import pytest
from kungfu import Ok, Error

from resolvent import schema as S
from resolvent import query as Q
from tests.conftest import book_types, book_by_id, book_author

Kind = Q.FieldErrorKind


def book_details(book_id: object) -> Q.SelectionNode:
    return Q.selection(
        "bookById",
        "id",
        "name",
        "pageCount",
        Q.selection("author", "firstName", "lastName"),
        id=book_id,
    )


class TestScenarios:
    """The book/author walkthrough."""

    @pytest.mark.asyncio
    async def test_book_with_author(self, run_query):
        result = await run_query.run(book_details("book-1"))

        assert result.ok
        assert json.dumps(result.data, separators=(",", ":")) == (
            '{"bookById":{"id":"book-1","name":"Effective Java","pageCount":416,'
            '"author":{"firstName":"Joshua","lastName":"Bloch"}}}'
        )

    @pytest.mark.asyncio
    async def test_unknown_book_is_null_without_error(self, run_query):
        result = await run_query.run(Q.selection("bookById", "id", id="book-404"))

        assert result.data == {"bookById": None}
        assert result.errors == ()

    @pytest.mark.asyncio
    async def test_object_field_without_sub_selection(self, run_query):
        result = await run_query.run(
            Q.selection("bookById", "id", "author", "name", id="book-1")
        )

        assert result.data == {"bookById": {"id": "book-1", "author": None, "name": "Effective Java"}}
        assert len(result.errors) == 1
        assert result.errors[0].kind is Kind.SHAPE_MISMATCH
        assert result.errors[0].path == ("bookById", "author")

    @pytest.mark.asyncio
    async def test_wrong_argument_type(self, run_query):
        result = await run_query.run(book_details(123))

        assert result.data == {"bookById": None}
        assert [e.kind for e in result.errors] == [Kind.ARGUMENT_TYPE]
        assert result.errors[0].path == ("bookById",)
        assert "String" in result.errors[0].message


class TestResolution:
    """Tests for how fields are resolved."""

    @pytest.mark.asyncio
    async def test_result_follows_selection_order(self, run_query):
        result = await run_query.run(
            Q.selection("bookById", "pageCount", Q.selection("author", "lastName", "firstName"), "id", id="book-2")
        )

        book = result.data["bookById"]
        assert list(book) == ["pageCount", "author", "id"]
        assert list(book["author"]) == ["lastName", "firstName"]

    @pytest.mark.asyncio
    async def test_multiple_root_fields(self, run_query):
        result = await run_query.run([
            Q.selection("bookById", "name", id="book-3"),
            Q.selection("books", "id"),
        ])

        assert list(result.data) == ["bookById", "books"]
        assert result.data["books"] == [{"id": "book-1"}, {"id": "book-2"}, {"id": "book-3"}]

    @pytest.mark.asyncio
    async def test_root_value_is_passed_to_root_resolvers(self, silent_probe):
        schema = (
            S.builder()
            .register_type(S.object_type("Query", S.field("greeting", "String")))
            .register_resolver("Query", "greeting", lambda root: f"hello {root['who']}")
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run(
            Q.selection("greeting"), {"who": "reader"}
        )

        assert result.data == {"greeting": "hello reader"}

    @pytest.mark.asyncio
    async def test_sync_and_result_returning_resolvers(self, silent_probe):
        schema = (
            book_types()
            .register_resolver("Query", "bookById", lambda _, id: Ok({"id": id, "name": "N"}))
            .register_resolver("Book", "name", lambda book: book["name"].lower())
            .default_resolver()
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run(
            Q.selection("bookById", "id", "name", id="x")
        )

        assert result.data == {"bookById": {"id": "x", "name": "n"}}

    @pytest.mark.asyncio
    async def test_resolver_returning_error_result(self, silent_probe):
        schema = (
            book_types()
            .register_resolver("Query", "bookById", lambda _, id: Error(f"no access to {id}"))
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run(
            Q.selection("bookById", "id", id="book-1")
        )

        assert result.data == {"bookById": None}
        assert result.errors[0].kind is Kind.RESOLVER_FAILURE
        assert result.errors[0].message == "no access to book-1"

    @pytest.mark.asyncio
    async def test_attribute_records_with_default_resolver(self, silent_probe):
        @dataclass
        class Author:
            firstName: str
            lastName: str

        schema = (
            book_types()
            .register_resolver("Query", "bookById", lambda _, id: {"id": id, "author": Author("Bill", "Bryson")})
            .default_resolver()
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run(
            Q.selection("bookById", Q.selection("author", "lastName"), id="book-3")
        )

        assert result.data == {"bookById": {"author": {"lastName": "Bryson"}}}

    @pytest.mark.asyncio
    async def test_leaf_values_are_serialized(self, silent_probe):
        schema = (
            book_types()
            .register_resolver("Query", "bookById", lambda _, id: {"id": 1, "pageCount": 416.0})
            .default_resolver()
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run(
            Q.selection("bookById", "id", "pageCount", id="book-1")
        )

        assert result.data == {"bookById": {"id": "1", "pageCount": 416}}

    @pytest.mark.asyncio
    async def test_lazy_call(self, run_query):
        match await run_query(Q.selection("bookById", "name", id="book-1")):
            case Ok(result):
                assert result.data == {"bookById": {"name": "Effective Java"}}
            case Error(e):
                pytest.fail(str(e))

    @pytest.mark.asyncio
    async def test_one_shot_execute(self, book_schema):
        result = await Q.execute(book_schema, Q.selection("bookById", "name", id="book-2"))
        assert result.data == {"bookById": {"name": "Hitchhiker's Guide to the Galaxy"}}

    @pytest.mark.asyncio
    async def test_execution_is_idempotent(self, run_query):
        query = [book_details("book-1"), Q.selection("books", "name", Q.selection("author", "lastName"))]

        first = await run_query.run(query)
        second = await run_query.run(query)

        assert first == second
        assert json.dumps(first.data) == json.dumps(second.data)


class TestLists:
    """Tests for list-typed fields."""

    @pytest.mark.asyncio
    async def test_list_of_objects(self, run_query):
        result = await run_query.run(Q.selection("books", "name", Q.selection("author", "firstName")))

        assert result.ok
        assert result.data["books"] == [
            {"name": "Effective Java", "author": {"firstName": "Joshua"}},
            {"name": "Hitchhiker's Guide to the Galaxy", "author": {"firstName": "Douglas"}},
            {"name": "Down Under", "author": {"firstName": "Bill"}},
        ]

    @pytest.mark.asyncio
    async def test_null_item_in_non_null_list_position(self, silent_probe):
        schema = (
            book_types()
            .register_resolver("Query", "books", lambda _: [{"id": "a"}, None, {"id": "c"}])
            .default_resolver()
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run(Q.selection("books", "id"))

        assert result.data == {"books": [{"id": "a"}, None, {"id": "c"}]}
        assert [(e.kind, e.path) for e in result.errors] == [(Kind.NULL_VIOLATION, ("books", 1))]

    @pytest.mark.asyncio
    async def test_non_iterable_for_list(self, silent_probe):
        schema = (
            book_types()
            .register_resolver("Query", "books", lambda _: {"id": "a"})
            .default_resolver()
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run(Q.selection("books", "id"))

        assert result.data == {"books": None}
        assert result.errors[0].kind is Kind.SHAPE_MISMATCH

    @pytest.mark.asyncio
    async def test_list_of_objects_without_sub_selection_reports_once(self, run_query):
        result = await run_query.run(Q.selection("books"))

        assert result.data == {"books": None}
        assert [(e.kind, e.path) for e in result.errors] == [(Kind.SHAPE_MISMATCH, ("books",))]

    @pytest.mark.asyncio
    async def test_empty_list(self, silent_probe):
        schema = book_types().register_resolver("Query", "books", lambda _: []).compile()
        result = await Q.executor(schema).probe(silent_probe).build().run(Q.selection("books", "id"))

        assert result.data == {"books": []}
        assert result.ok


class TestFailureContainment:
    """Field-level errors never abort siblings."""

    @pytest.mark.asyncio
    async def test_unknown_field(self, run_query):
        result = await run_query.run(Q.selection("bookById", "isbn", "name", id="book-1"))

        assert result.data == {"bookById": {"isbn": None, "name": "Effective Java"}}
        assert [(e.kind, e.path) for e in result.errors] == [(Kind.UNKNOWN_FIELD, ("bookById", "isbn"))]

    @pytest.mark.asyncio
    async def test_field_without_resolver_and_default_off(self, silent_probe):
        schema = (
            book_types()
            .register_resolver("Query", "bookById", book_by_id)
            .register_resolver("Book", "author", book_author)
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run(
            Q.selection("bookById", "name", id="book-1")
        )

        assert result.data == {"bookById": {"name": None}}
        assert result.errors[0].kind is Kind.UNKNOWN_FIELD
        assert "no resolver bound to Book.name" in result.errors[0].message

    @pytest.mark.asyncio
    async def test_unknown_argument(self, run_query):
        result = await run_query.run(Q.selection("bookById", "id", isbn="123"))

        assert result.data == {"bookById": None}
        assert result.errors[0].kind is Kind.UNKNOWN_ARGUMENT

    @pytest.mark.asyncio
    async def test_one_failing_sibling(self, silent_probe):
        def explode(book):
            raise RuntimeError("catalog offline")

        schema = (
            book_types()
            .register_resolver("Query", "bookById", book_by_id)
            .register_resolver("Book", "name", explode)
            .default_resolver()
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run(
            Q.selection("bookById", "id", "name", "pageCount", id="book-1")
        )

        assert result.data == {"bookById": {"id": "book-1", "name": None, "pageCount": 416}}
        assert len(result.errors) == 1
        assert result.errors[0].kind is Kind.RESOLVER_FAILURE
        assert result.errors[0].message == "catalog offline"
        silent_probe.resolver_raised.assert_called_once()

    @pytest.mark.asyncio
    async def test_failure_in_one_list_item(self, silent_probe):
        async def author(book):
            if book["id"] == "book-2":
                raise LookupError()
            return await book_author(book)

        schema = (
            book_types()
            .register_resolver("Query", "books", lambda _: [{"id": "book-1", "authorId": "author-1"}, {"id": "book-2"}])
            .register_resolver("Book", "author", author)
            .default_resolver()
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run(
            Q.selection("books", "id", Q.selection("author", "lastName"))
        )

        assert result.data == {"books": [
            {"id": "book-1", "author": {"lastName": "Bloch"}},
            {"id": "book-2", "author": None},
        ]}
        assert result.errors[0].path == ("books", 1, "author")
        assert result.errors[0].message == "LookupError"

    @pytest.mark.asyncio
    async def test_non_null_field_resolving_to_null(self, silent_probe):
        schema = (
            S.builder()
            .register_type(S.object_type(
                "Query",
                S.field("requiredBook", "Book!", S.argument("id", "String")),
                S.field("motto", "String"),
            ))
            .register_type(S.object_type("Book", S.field("id", "ID")))
            .register_resolver("Query", "requiredBook", lambda _, id: None)
            .register_resolver("Query", "motto", lambda _: "read more")
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run([
            Q.selection("requiredBook", "id", id="book-404"),
            Q.selection("motto"),
        ])

        assert result.data == {"requiredBook": None, "motto": "read more"}
        assert [e.kind for e in result.errors] == [Kind.NULL_VIOLATION]

    @pytest.mark.asyncio
    async def test_scalar_field_with_sub_selection(self, run_query):
        result = await run_query.run(Q.selection("bookById", Q.selection("name", "length"), id="book-1"))

        assert result.data == {"bookById": {"name": None}}
        assert result.errors[0].kind is Kind.SHAPE_MISMATCH

    @pytest.mark.asyncio
    async def test_unserializable_leaf(self, silent_probe):
        schema = (
            book_types()
            .register_resolver("Query", "bookById", lambda _, id: {"pageCount": "many"})
            .default_resolver()
            .compile()
        )
        result = await Q.executor(schema).probe(silent_probe).build().run(
            Q.selection("bookById", "pageCount", id="book-1")
        )

        assert result.data == {"bookById": {"pageCount": None}}
        assert result.errors[0].kind is Kind.SHAPE_MISMATCH
        assert result.errors[0].path == ("bookById", "pageCount")

    @pytest.mark.asyncio
    async def test_errors_listed_in_selection_order(self, run_query):
        result = await run_query.run([
            Q.selection("bookById", "isbn", "author", id="book-1"),
            Q.selection("magazines"),
        ])

        assert [e.path for e in result.errors] == [
            ("bookById", "isbn"),
            ("bookById", "author"),
            ("magazines",),
        ]

    def test_field_error_str(self):
        error = Q.FieldError(Kind.NULL_VIOLATION, "boom", ("books", 1, "id"))
        assert str(error) == "NULL_VIOLATION at books.1.id: boom"


class TestUserCodeContainment:
    """Exceptions from custom scalars and result iterables stay within their field."""

    @staticmethod
    def dated_schema() -> S.Schema:
        date_scalar = S.ScalarDefinition("Date", parse=date.fromisoformat, serialize=lambda d: d.isoformat())
        return (
            S.builder()
            .register_scalar(date_scalar)
            .register_type(S.object_type("Query", S.field("edition", "Edition")))
            .register_type(S.object_type("Edition", S.field("id", "ID"), S.field("published", "Date")))
            .register_resolver("Query", "edition", lambda _: {"id": "ed-1", "published": "2020-01-01"})
            .default_resolver()
            .compile()
        )

    @staticmethod
    def priced_schema() -> S.Schema:
        return (
            S.builder()
            .register_scalar(S.ScalarDefinition("Decimal", parse=Decimal, serialize=str))
            .register_type(S.object_type(
                "Query",
                S.field("price", "String", S.argument("amount", "Decimal")),
                S.field("motto", "String"),
            ))
            .register_resolver("Query", "price", lambda _, amount: f"{amount:.2f}")
            .register_resolver("Query", "motto", lambda _: "read more")
            .compile()
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("policy", [Q.policy.parallel_max(4), Q.policy.sequential()])
    async def test_serializer_raising_attribute_error(self, silent_probe, policy):
        run = Q.executor(self.dated_schema()).policy(policy).probe(silent_probe).build()

        result = await run.run(Q.selection("edition", "id", "published"))

        assert result.data == {"edition": {"id": "ed-1", "published": None}}
        assert len(result.errors) == 1
        assert result.errors[0].kind is Kind.SHAPE_MISMATCH
        assert result.errors[0].path == ("edition", "published")
        assert "isoformat" in result.errors[0].message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("policy", [Q.policy.parallel_max(4), Q.policy.sequential()])
    async def test_parser_raising_invalid_operation(self, silent_probe, policy):
        run = Q.executor(self.priced_schema()).policy(policy).probe(silent_probe).build()

        result = await run.run([Q.selection("price", amount="lots"), Q.selection("motto")])

        assert result.data == {"price": None, "motto": "read more"}
        assert len(result.errors) == 1
        assert result.errors[0].kind is Kind.ARGUMENT_TYPE
        assert result.errors[0].path == ("price",)

    @pytest.mark.asyncio
    async def test_custom_scalars_on_the_happy_path(self, silent_probe):
        run = Q.executor(self.priced_schema()).probe(silent_probe).build()

        result = await run.run(Q.selection("price", amount="9.5"))

        assert result.data == {"price": "9.50"}
        assert result.ok

    @pytest.mark.asyncio
    @pytest.mark.parametrize("policy", [Q.policy.parallel_max(4), Q.policy.sequential()])
    async def test_list_iterable_raising_midway(self, silent_probe, policy):
        def cursor(_):
            yield {"id": "book-1"}
            raise RuntimeError("cursor closed")

        schema = (
            book_types()
            .register_resolver("Query", "bookById", book_by_id)
            .register_resolver("Query", "books", cursor)
            .default_resolver()
            .compile()
        )
        run = Q.executor(schema).policy(policy).probe(silent_probe).build()

        result = await run.run([
            Q.selection("books", "id"),
            Q.selection("bookById", "name", id="book-1"),
        ])

        assert result.data == {"books": None, "bookById": {"name": "Effective Java"}}
        assert len(result.errors) == 1
        assert result.errors[0].kind is Kind.RESOLVER_FAILURE
        assert result.errors[0].path == ("books",)
        assert result.errors[0].message == "cursor closed"
        silent_probe.resolver_raised.assert_called_once()
