"""Tests for Instance and ObtainToken."""

import pytest

from masto_tools.client.config import MastoConfig
from masto_tools.client.connection import Connection
from masto_tools.client.exceptions import MastoConfigurationError
from masto_tools.client.instance import Instance, ObtainToken

NODEINFO_LINKS = (
    '{"links":['
    '{"rel":"http://nodeinfo.diaspora.software/ns/schema/2.1","href":"https://example.com/nodeinfo/2.1"},'
    '{"rel":"http://nodeinfo.diaspora.software/ns/schema/2.0","href":"https://example.com/nodeinfo/2.0"}'
    ']}'
)


class TestInstance:
    """Tests for Instance."""

    def test_baseuri(self, instance):
        """Test the base URI is https:// + hostname."""
        assert instance.hostname == "example.com"
        assert instance.baseuri == "https://example.com"
        assert instance.access_token == "test-token"

    def test_from_config(self, config, recorder):
        """Test creation from configuration."""
        config.useragent = "bot/2.0"
        with Instance.from_config(config, transport=recorder.transport) as inst:
            assert inst.hostname == "example.com"
            assert inst.access_token == "test-token"
            assert inst.useragent == "bot/2.0"

    def test_from_config_requires_hostname(self):
        """Test a missing hostname is rejected."""
        with pytest.raises(ValueError):
            Instance.from_config(MastoConfig(_env_file=None))

    def test_setters(self, instance):
        """Test setters update the instance."""
        instance.set_access_token("new")
        instance.set_useragent("ua/1")
        assert instance.access_token == "new"
        assert instance.useragent == "ua/1"


class TestMaxChars:
    """Tests for get_max_chars()."""

    def test_max_toot_chars(self, instance, recorder):
        """Test the Pleroma/Glitch field."""
        recorder.routes["/api/v1/instance"] = (200, '{"uri":"example.com","max_toot_chars":5000}')
        assert instance.get_max_chars() == 5000

    def test_max_characters(self, instance, recorder):
        """Test the Mastodon field."""
        recorder.routes["/api/v1/instance"] = (
            200,
            '{"configuration":{"statuses":{"max_characters":1000}}}',
        )
        assert instance.get_max_chars() == 1000

    def test_cached(self, instance, recorder):
        """Test the value is only queried once."""
        recorder.routes["/api/v1/instance"] = (200, '{"max_toot_chars":5000}')
        instance.get_max_chars()
        instance.get_max_chars()
        assert len(recorder.requests) == 1

    def test_missing_field(self, instance, recorder):
        """Test the default is used and cached when the field is missing."""
        recorder.routes["/api/v1/instance"] = (200, '{"uri":"example.com"}')
        assert instance.get_max_chars() == 500
        assert instance.get_max_chars() == 500
        assert len(recorder.requests) == 1

    def test_request_failure(self, instance, recorder):
        """Test a failed request gives the default without caching it."""
        assert instance.get_max_chars() == 500
        recorder.routes["/api/v1/instance"] = (200, '{"max_toot_chars":5000}')
        assert instance.get_max_chars() == 5000


class TestNodeInfo:
    """Tests for get_nodeinfo() and get_post_formats()."""

    def test_newest_schema(self, instance, recorder):
        """Test the link that sorts last is fetched."""
        recorder.routes["/.well-known/nodeinfo"] = (200, NODEINFO_LINKS)
        recorder.routes["/nodeinfo/2.1"] = (200, '{"version":"2.1"}')
        answer = instance.get_nodeinfo()
        assert answer
        assert answer.body == '{"version":"2.1"}'
        assert str(recorder.last.url) == "https://example.com/nodeinfo/2.1"

    def test_discovery_failure(self, instance):
        """Test a failed discovery is returned as it is."""
        answer = instance.get_nodeinfo()
        assert not answer
        assert answer.http_status == 404

    def test_no_links(self, instance, recorder):
        """Test a discovery document without links."""
        recorder.routes["/.well-known/nodeinfo"] = (200, '{"links":[]}')
        answer = instance.get_nodeinfo()
        assert not answer
        assert answer.error_message == "No NodeInfo link found."
        assert answer.body == '{"links":[]}'

    def test_post_formats(self, instance, recorder):
        """Test post formats are read from the metadata."""
        recorder.routes["/.well-known/nodeinfo"] = (200, NODEINFO_LINKS)
        recorder.routes["/nodeinfo/2.1"] = (
            200,
            '{"metadata":{"postFormats":["text/plain","text/html","text/markdown"]}}',
        )
        assert instance.get_post_formats() == ["text/plain", "text/html", "text/markdown"]
        assert instance.get_post_formats() == ["text/plain", "text/html", "text/markdown"]
        assert len(recorder.requests) == 2

    def test_post_formats_default(self, instance, recorder):
        """Test the default when the metadata has no formats."""
        recorder.routes["/.well-known/nodeinfo"] = (200, NODEINFO_LINKS)
        recorder.routes["/nodeinfo/2.1"] = (200, '{"metadata":{}}')
        assert instance.get_post_formats() == ["text/plain"]

    def test_post_formats_request_failure(self, instance):
        """Test the default when NodeInfo cannot be fetched."""
        assert instance.get_post_formats() == ["text/plain"]


class TestObtainToken:
    """Tests for ObtainToken."""

    @pytest.fixture
    def token(self, recorder):
        inst = Instance("example.com", transport=recorder.transport)
        obtain = ObtainToken(inst)
        yield obtain
        obtain.close()
        inst.close()

    def test_register_application(self, token, recorder):
        """Test step 1 returns the authorization URI."""
        recorder.routes["/api/v1/apps"] = (
            200,
            '{"id":"1","name":"Test","client_id":"abc","client_secret":"def"}',
        )
        answer = token.register_application("Test", "read write")

        assert answer
        assert answer.body == (
            "https://example.com/oauth/authorize"
            "?scope=read%20write&response_type=code"
            "&redirect_uri=urn%3Aietf%3Awg%3Aoauth%3A2.0%3Aoob"
            "&client_id=abc"
        )
        content = recorder.last.content
        assert b'name="client_name"' in content
        assert b"urn:ietf:wg:oauth:2.0:oob" in content
        assert b"read write" in content

    def test_register_application_with_website(self, token, recorder):
        """Test the website is appended to the URI."""
        recorder.routes["/api/v1/apps"] = (200, '{"client_id":"abc","client_secret":"def"}')
        answer = token.step_1("Test", website="https://example.org")
        assert answer.body.endswith("&website=https%3A%2F%2Fexample.org")
        assert "scope=read&" in answer.body

    def test_register_application_missing_credentials(self, token, recorder):
        """Test the answer is returned unchanged without client credentials."""
        recorder.routes["/api/v1/apps"] = (200, '{"id":"1"}')
        answer = token.register_application("Test")
        assert answer.body == '{"id":"1"}'

    def test_register_application_failure(self, token):
        """Test a failed registration is returned as it is."""
        answer = token.register_application("Test")
        assert not answer
        assert answer.http_status == 404

    def test_exchange_code(self, token, recorder):
        """Test step 2 returns the token and sets it in the instance."""
        recorder.routes["/api/v1/apps"] = (200, '{"client_id":"abc","client_secret":"def"}')
        recorder.routes["/oauth/token"] = (
            200,
            '{"access_token":"tok123","token_type":"Bearer","scope":"read"}',
        )
        token.register_application("Test")
        answer = token.step_2("the-code")

        assert answer
        assert answer.body == "tok123"
        assert token._instance.access_token == "tok123"
        content = recorder.last.content
        assert b"authorization_code" in content
        assert b"the-code" in content
        assert b"def" in content

    def test_exchange_code_missing_token(self, token, recorder):
        """Test the answer is returned unchanged without a token."""
        recorder.routes["/oauth/token"] = (200, '{"error":"invalid_grant"}')
        answer = token.exchange_code("bad")
        assert answer.body == '{"error":"invalid_grant"}'


class TestSettings:
    """Tests for rejected settings."""

    def test_failed_cainfo_is_not_stored(self, instance, recorder, tmp_path):
        """Test a rejected CA bundle leaves the instance usable."""
        recorder.routes["/api/v1/instance"] = (200, '{"max_toot_chars":5000}')
        with pytest.raises(MastoConfigurationError):
            instance.set_cainfo(str(tmp_path / "missing.pem"))

        assert instance.cainfo == ""
        assert instance.get_max_chars() == 5000
        with Connection(instance) as connection:
            assert connection.get("/api/v1/instance")
