import json
import logging
import urllib.request

import pytest

import atrium


class TestConfiguration:
    def test_defaults(self):
        client = atrium.Client()
        assert client.base_url == atrium.DEFAULT_BASE_URL
        assert client.page_size == 20
        assert client.options == {}
        assert isinstance(client.session, urllib.request.OpenerDirector)

    def test_trailing_slash_stripped(self, session):
        client = atrium.Client(session, base_url="https://example.com/api/")
        assert client.base_url == "https://example.com/api"

    def test_repr(self, client):
        assert repr(client) == "<Client: {}>".format(client.base_url)

    def test_access_token(self, session):
        client = atrium.Client.access_token(
            "s3cret", session=session, base_url="https://x.test"
        )
        session.reply({"gid": "1"})
        client.get("/users/me")
        assert session.last.headers["Authorization"] == "Bearer s3cret"

    def test_basic_auth_tuple(self, session):
        client = atrium.Client(
            session, base_url="https://x.test", auth=("user", "pass")
        )
        session.reply({"gid": "1"})
        client.get("/users/me")
        assert session.last.headers["Authorization"].startswith("Basic ")

    def test_auth_callable(self, session):
        client = atrium.Client(
            session,
            base_url="https://x.test",
            auth=lambda req: req.with_headers({"X-Auth": "yes"}),
        )
        session.reply({"gid": "1"})
        client.get("/users/me")
        assert session.last.headers["X-Auth"] == "yes"

    def test_extra_headers(self, session):
        client = atrium.Client(
            session,
            base_url="https://x.test",
            headers={"Asana-Enable": "new_goals"},
        )
        session.reply({"gid": "1"})
        client.get("/users/me")
        assert session.last.headers["Asana-Enable"] == "new_goals"


class TestFromEnv:
    def test_all_variables(self, session):
        client = atrium.Client.from_env(
            {
                "ATRIUM_ACCESS_TOKEN": "tok",
                "ATRIUM_BASE_URL": "https://staging.test/api",
                "ATRIUM_PAGE_SIZE": "50",
            },
            session=session,
        )
        assert client.base_url == "https://staging.test/api"
        assert client.page_size == 50
        session.reply({"gid": "1"})
        client.get("/users/me")
        assert session.last.headers["Authorization"] == "Bearer tok"

    def test_token_only(self, session):
        client = atrium.Client.from_env(
            {"ATRIUM_ACCESS_TOKEN": "tok"}, session=session
        )
        assert client.base_url == atrium.DEFAULT_BASE_URL
        assert client.page_size == atrium.DEFAULT_PAGE_SIZE

    def test_explicit_arguments_win(self, session):
        client = atrium.Client.from_env(
            {"ATRIUM_ACCESS_TOKEN": "tok", "ATRIUM_PAGE_SIZE": "50"},
            session=session,
            page_size=5,
        )
        assert client.page_size == 5

    def test_missing_token(self):
        with pytest.raises(atrium.MissingRequiredArgument) as exc_info:
            atrium.Client.from_env({"ATRIUM_BASE_URL": "https://x.test"})
        assert exc_info.value.names == ("ATRIUM_ACCESS_TOKEN",)

    def test_os_environ(self, mocker, session):
        mocker.patch.dict("os.environ", {"ATRIUM_ACCESS_TOKEN": "from-os"})
        client = atrium.Client.from_env(session=session)
        session.reply({"gid": "1"})
        client.get("/users/me")
        assert session.last.headers["Authorization"] == "Bearer from-os"


class TestRequests:
    def test_get(self, client, session):
        session.reply({"gid": "1"})
        response = client.get("/tasks/1", params={"limit": 5, "x": None})
        assert response.status_code == 200
        assert session.last.method == "GET"
        assert session.last.url == client.base_url + "/tasks/1"
        assert session.last.params == {"limit": "5"}
        assert session.last.content is None

    def test_param_dumping(self, client, session):
        session.reply([])
        client.get("/tasks", params={"archived": False, "ids": ["1", "2"]})
        assert session.last.params == {"archived": "false", "ids": "1,2"}

    def test_post_wraps_body(self, client, session):
        session.reply({"gid": "1"})
        client.post("/tasks", {"name": "Buy milk"})
        assert session.last.method == "POST"
        assert session.last.headers["Content-Type"] == "application/json"
        assert json.loads(session.last.content) == {
            "data": {"name": "Buy milk"}
        }

    def test_put(self, client, session):
        session.reply({"gid": "1"})
        client.put("/tasks/1", {"completed": True})
        assert session.last.method == "PUT"
        assert session.body() == {"completed": True}

    def test_delete(self, client, session):
        session.reply({})
        client.delete("/tasks/1")
        assert session.last.method == "DELETE"
        assert session.last.content is None

    def test_error_raised(self, client, session):
        session.reply_error(401, "Not Authorized")
        with pytest.raises(atrium.NoAuthorization) as exc_info:
            client.get("/users/me")
        assert exc_info.value.messages == ("Not Authorized",)

    def test_logged(self, client, session, caplog):
        caplog.set_level(logging.DEBUG, logger="atrium")
        session.reply({"gid": "1"})
        client.get("/tasks/1")
        assert "GET {}/tasks/1".format(client.base_url) in caplog.text


class TestOptions:
    def test_recognized_options(self, client, session):
        session.reply({"gid": "1"})
        client.get(
            "/tasks/1",
            options={
                "fields": ["name", "assignee.name"],
                "expand": ["assignee"],
                "pretty": True,
            },
        )
        assert session.last.params == {
            "opt_fields": "name,assignee.name",
            "opt_expand": "assignee",
            "opt_pretty": "true",
        }

    def test_pretty_false_omitted(self, client, session):
        session.reply({"gid": "1"})
        client.get("/tasks/1", options={"pretty": False})
        assert session.last.params == {}

    def test_params_option(self, client, session):
        session.reply([])
        client.get(
            "/tasks",
            params={"limit": 20},
            options={"params": {"limit": 100, "text": "milk"}},
        )
        assert session.last.params == {"limit": "20", "text": "milk"}

    def test_with_options(self, client, session):
        verbose = client.with_options(pretty=True)
        assert client.options == {}
        assert verbose.session is client.session

        session.reply({"gid": "1"})
        verbose.get("/tasks/1", options={"fields": ["name"]})
        assert session.last.params == {
            "opt_pretty": "true",
            "opt_fields": "name",
        }

    def test_per_call_overrides_default(self, session):
        client = atrium.Client(
            session, base_url="https://x.test", options={"fields": ["name"]}
        )
        session.reply({"gid": "1"})
        client.get("/tasks/1", options={"fields": ["notes"]})
        assert session.last.params == {"opt_fields": "notes"}


class TestParse:
    def test_single_record(self, client):
        response = atrium.Response(200, b'{"data": {"gid": "1"}}')
        assert client.parse(response) == atrium.Page([{"gid": "1"}], None)

    def test_list(self, client):
        response = atrium.Response(
            200,
            json.dumps(
                {
                    "data": [{"gid": "1"}, {"gid": "2"}],
                    "next_page": {"offset": "eyJ0", "path": "/tasks"},
                }
            ).encode(),
        )
        records, cursor = client.parse(response)
        assert records == [{"gid": "1"}, {"gid": "2"}]
        assert cursor == "eyJ0"

    def test_null_next_page(self, client):
        response = atrium.Response(200, b'{"data": [], "next_page": null}')
        assert client.parse(response) == ([], None)

    @pytest.mark.parametrize(
        "content", [b'{"errors": []}', b"[1, 2]", b"", b"not json"]
    )
    def test_malformed(self, client, content):
        with pytest.raises(atrium.MalformedResponse):
            client.parse(atrium.Response(200, content))
