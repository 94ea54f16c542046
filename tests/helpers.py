import json

import httpx

from simple_auth_web import ProviderConfig, ProviderKind

TOKEN_URL = "https://idp.example.com/oauth2/token"
PROFILE_URL = "https://idp.example.com/userinfo"
AUTHORIZE_URL = "https://idp.example.com/oauth2/authorize"
REDIRECT_URI = "https://app.example.com/oauth2/callback"


def make_config(kind: ProviderKind = ProviderKind.GOOGLE, **overrides) -> ProviderConfig:
    values = dict(
        kind=kind,
        client_id="client id",
        client_secret="s3cr/t",
        redirect_uri=REDIRECT_URI,
        authorization_endpoint=AUTHORIZE_URL,
        token_endpoint=TOKEN_URL,
        profile_endpoint=PROFILE_URL,
        scopes=("openid", "email", "profile"),
    )
    values.update(overrides)
    return ProviderConfig(**values)


def json_response(status_code: int, payload, content_type: str = "application/json") -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode(), headers={"Content-Type": content_type})


class FakeProvider:
    """Serves canned responses per URL and records every request it receives."""

    def __init__(self):
        self.requests = []
        self.routes = {}

    def respond(self, url: str, status_code: int, payload=None, content_type: str = "application/json", text=None):
        if text is not None:
            self.routes[url] = lambda: httpx.Response(status_code, text=text, headers={"Content-Type": content_type})
        else:
            self.routes[url] = lambda: json_response(status_code, payload, content_type)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url).split("?", 1)[0]
        if url not in self.routes:
            return httpx.Response(404, text="not found")
        return self.routes[url]()

    def requests_to(self, url: str):
        return [r for r in self.requests if str(r.url).split("?", 1)[0] == url]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)
