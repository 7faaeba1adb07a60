"""App identity holder and an HTTP fetch wrapper that follows it."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Union

import httpx

logger = logging.getLogger(__name__)

TokenAccessor = Callable[[], Awaitable[Union[str, None]]]
Unregister = Callable[[], None]


class IdentityNotReadyError(RuntimeError):
    """Raised when identity is read before a sign-in result was set."""

    def __init__(self, attribute: str):
        self.attribute = attribute
        super().__init__(f"Tried to access identity {attribute} before sign-in")


@dataclass(frozen=True)
class ProfileInfo:
    email: str | None = None
    display_name: str | None = None
    picture: str | None = None


@dataclass(frozen=True)
class SignInResult:
    """What a sign-in flow hands over to the app."""

    user_id: str
    profile: ProfileInfo | None
    get_id_token: TokenAccessor | None = None
    sign_out: Callable[[], Awaitable[None]] | None = None


class AppIdentity:
    """Holds the signed-in user for the lifetime of the app.

    The first sign-in result wins; later ones are ignored until sign-out.
    Listeners registered with on_sign_in/on_sign_out are called
    synchronously, in registration order.
    """

    def __init__(self) -> None:
        self._result: SignInResult | None = None
        self._sign_in_listeners: list[Callable[[SignInResult], None]] = []
        self._sign_out_listeners: list[Callable[[], None]] = []

    @property
    def is_signed_in(self) -> bool:
        return self._result is not None

    def _require(self, attribute: str) -> SignInResult:
        if self._result is None:
            raise IdentityNotReadyError(attribute)
        return self._result

    @property
    def user_id(self) -> str:
        return self._require("user_id").user_id

    @property
    def profile(self) -> ProfileInfo | None:
        return self._require("profile").profile

    async def get_id_token(self) -> str | None:
        result = self._require("id token")
        if result.get_id_token is None:
            return None
        return await result.get_id_token()

    def set_sign_in_result(self, result: SignInResult) -> None:
        if self._result is not None:
            return
        if not result.user_id:
            raise ValueError("Invalid sign-in result, user_id not set")
        if result.profile is None:
            raise ValueError("Invalid sign-in result, profile not set")
        self._result = result
        logger.info("Signed in as %s", result.user_id)
        for listener in list(self._sign_in_listeners):
            listener(result)

    async def sign_out(self) -> None:
        result = self._require("sign out")
        if result.sign_out is not None:
            await result.sign_out()
        self._result = None
        logger.info("Signed out %s", result.user_id)
        for listener in list(self._sign_out_listeners):
            listener()

    def on_sign_in(self, listener: Callable[[SignInResult], None]) -> Unregister:
        self._sign_in_listeners.append(listener)
        return lambda: _discard(self._sign_in_listeners, listener)

    def on_sign_out(self, listener: Callable[[], None]) -> Unregister:
        self._sign_out_listeners.append(listener)
        return lambda: _discard(self._sign_out_listeners, listener)


def _discard(listeners: list[Any], listener: Any) -> None:
    if listener in listeners:
        listeners.remove(listener)


# ── Fetch wrapper ───────────────────────────────────────────────────


@dataclass(frozen=True)
class Anonymous:
    """Requests go out without an identity header."""


@dataclass(frozen=True)
class Authenticated:
    """Each request resolves a token first and sends it as a bearer header."""

    get_id_token: TokenAccessor


FetchState = Union[Anonymous, Authenticated]


class IdentityAwareFetch:
    """HTTP fetch that attaches the current user's token when there is one.

    The state is read once when ``fetch`` is called; switching state while a
    call is resolving its token does not affect that call.
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient()
        self._state: FetchState = Anonymous()

    @property
    def state(self) -> FetchState:
        return self._state

    def sign_in(self, get_id_token: TokenAccessor | None) -> None:
        self._state = Authenticated(get_id_token) if get_id_token is not None else Anonymous()

    def sign_out(self) -> None:
        self._state = Anonymous()

    def bind(self, identity: AppIdentity) -> Unregister:
        """Follow ``identity`` sign-in/sign-out. Returns a function that stops following."""
        if identity.is_signed_in:
            self.sign_in(identity.get_id_token)
        stop_in = identity.on_sign_in(lambda result: self.sign_in(result.get_id_token))
        stop_out = identity.on_sign_out(self.sign_out)

        def unregister() -> None:
            stop_in()
            stop_out()

        return unregister

    async def fetch(self, method: str, url: str | httpx.URL, **kwargs: Any) -> httpx.Response:
        state = self._state
        if isinstance(state, Authenticated):
            token = await state.get_id_token()
            if token:
                headers = httpx.Headers(kwargs.pop("headers", None))
                headers["Authorization"] = f"Bearer {token}"
                kwargs["headers"] = headers
        return await self._http.request(method, url, **kwargs)

    async def aclose(self) -> None:
        """Close the HTTP client if this wrapper created it."""
        if self._owns_http:
            await self._http.aclose()
