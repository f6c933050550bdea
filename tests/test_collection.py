import pytest

import atrium
from atrium import Collection, Page


class Item(atrium.Resource):
    plural_name = "items"
    name = atrium.Field()


def test_page_unpacks():
    content, cursor = Page([{"gid": "1"}], "abc")
    assert content == [{"gid": "1"}]
    assert cursor == "abc"
    assert Page([]).cursor is None


class TestCollection:
    def test_pagination(self, client, session):
        session.reply([{"gid": "A"}, {"gid": "B"}], next_page="x")
        session.reply([{"gid": "C"}])

        items = Collection.fetch(client, "/items", Item, {"limit": 2})

        assert len(session.requests) == 1
        result = list(items)
        assert [i.gid for i in result] == ["A", "B", "C"]
        assert all(isinstance(i, Item) for i in result)
        assert len(session.requests) == 2
        first, second = session.requests
        assert first.url == client.base_url + "/items"
        assert first.params == {"limit": "2"}
        assert second.url == client.base_url + "/items"
        assert second.params == {"limit": "2", "offset": "x"}

    def test_lazy(self, client, session):
        session.reply([{"gid": "A"}], next_page="x")
        session.reply([{"gid": "B"}])

        items = Collection.fetch(client, "/items", Item)

        assert next(items).gid == "A"
        assert len(session.requests) == 1
        assert next(items).gid == "B"
        assert len(session.requests) == 2
        with pytest.raises(StopIteration):
            next(items)
        assert len(session.requests) == 2

    def test_not_restartable(self, client, session):
        session.reply([{"gid": "A"}, {"gid": "B"}])

        items = Collection.fetch(client, "/items", Item)

        assert iter(items) is items
        assert [i.gid for i in items] == ["A", "B"]
        assert list(items) == []

    def test_empty_terminal_page(self, client, session):
        session.reply([])
        assert list(Collection.fetch(client, "/items", Item)) == []

    def test_empty_page_with_cursor(self, client, session):
        session.reply([], next_page="x")
        session.reply([{"gid": "A"}])
        items = Collection.fetch(client, "/items", Item)
        assert [i.gid for i in items] == ["A"]

    def test_error_on_next_page(self, client, session):
        session.reply([{"gid": "A"}], next_page="x")
        session.reply_error(500, "oops")

        items = Collection.fetch(client, "/items", Item)

        assert next(items).gid == "A"
        with pytest.raises(atrium.ServerError):
            next(items)

    def test_options_reused(self, client, session):
        session.reply([{"gid": "A"}], next_page="x")
        session.reply([{"gid": "B"}])

        options = {"fields": ["name"], "params": {"archived": False}}
        list(Collection.fetch(client, "/items", Item, {"limit": 1}, options))

        expect = {"limit": "1", "archived": "false", "opt_fields": "name"}
        assert session.requests[0].params == expect
        assert session.requests[1].params == dict(expect, offset="x")

    def test_malformed_record(self, client, session):
        session.reply([{"name": "no gid"}])
        items = Collection.fetch(client, "/items", Item)
        with pytest.raises(atrium.MalformedResponse):
            next(items)

    def test_page_and_cursor(self, client, session):
        session.reply([{"gid": "A"}, {"gid": "B"}], next_page="x")
        items = Collection.fetch(client, "/items", Item)

        assert items.cursor == "x"
        assert [i.gid for i in items.page] == ["A", "B"]
        assert [i.gid for i in items.page] == ["A", "B"]
        assert "more pages" in repr(items)

    def test_take(self, client, session):
        session.reply([{"gid": "A"}, {"gid": "B"}], next_page="x")
        items = Collection.fetch(client, "/items", Item)

        assert [i.gid for i in items.take(1)] == ["A"]
        assert [i.gid for i in items.page] == ["B"]
        assert len(session.requests) == 1

    def test_repr(self, client, session):
        session.reply([])
        assert repr(Collection.fetch(client, "/items", Item)) == (
            "<Collection of Item: /items>"
        )
