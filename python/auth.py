"""
Browser-delegated login for the review CLI.

The CLI never sees provider secrets. It binds a throwaway HTTP listener on the
loopback interface, sends the user's browser to the server's CLI login page
with the listener's port, and waits for the server to redirect the browser
back to ``/callback?token=...&name=...``.
"""

import concurrent.futures
import threading
import webbrowser
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Optional, Tuple
from urllib.parse import parse_qs, urlencode, urlparse

from colored_logger import get_colored_logger
from credentials import CredentialStore, StoredCredential
from settings import Settings

logger = get_colored_logger(__name__)

CALLBACK_PATH = "/callback"

SUCCESS_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Mockup Review</title></head>
<body><p>Login successful! You can close this tab.</p></body>
</html>
"""


class LoginError(Exception):
    """The handshake failed before a token arrived."""

    pass


class LoginTimeoutError(LoginError):
    """No valid callback arrived before the deadline."""

    pass


@dataclass
class LoginResult:
    server: str
    token: str
    name: str = ""

    @property
    def message(self) -> str:
        if self.name:
            return f"Logged in successfully as {self.name}"
        return "Logged in successfully"


class _CallbackHandler(BaseHTTPRequestHandler):
    server_version = "MockupReviewLogin/1.0"

    def do_GET(self):
        session: "HandshakeSession" = self.server.session
        url = urlparse(self.path)

        if url.path != CALLBACK_PATH:
            self._respond(404, "not found")
            return

        if session.cancelled.is_set():
            self._respond(410, "login session expired")
            return

        query = parse_qs(url.query)
        token = query.get("token", [""])[0]
        if not token:
            # Keep waiting; a later callback may still carry the token
            self._respond(400, "missing token")
            return

        published = session.publish(token, query.get("name", [""])[0])
        if not published and session.cancelled.is_set():
            self._respond(410, "login session expired")
            return

        self._respond(200, SUCCESS_PAGE, content_type="text/html; charset=utf-8")

    def _respond(self, status: int, body: str, content_type: str = "text/plain; charset=utf-8"):
        payload = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        logger.debug("callback %s - %s", self.address_string(), format % args)


class _CallbackServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, server_address, session: "HandshakeSession"):
        self.session = session
        super().__init__(server_address, _CallbackHandler)


class HandshakeSession:
    """
    One login attempt: a loopback listener and a one-shot result.

    The listener thread is the only producer of ``result``; the caller of
    wait() is its only consumer. ``cancelled`` is set when the deadline
    passes so late callbacks are turned away.
    """

    def __init__(self, host: str = "127.0.0.1"):
        self.result: concurrent.futures.Future = concurrent.futures.Future()
        self.cancelled = threading.Event()
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        try:
            self._httpd = _CallbackServer((host, 0), self)
        except OSError as e:
            raise LoginError(f"failed to start local server: {e}") from e

    @property
    def port(self) -> int:
        return self._httpd.server_address[1]

    def start(self) -> None:
        self._thread = threading.Thread(
            target=self._serve, name="login-callback", daemon=True
        )
        self._thread.start()

    def _serve(self) -> None:
        try:
            self._httpd.serve_forever(poll_interval=0.1)
        except Exception as e:
            logger.debug("Login listener stopped: %s", e)
            with self._lock:
                if not self.result.done():
                    self.result.set_exception(e)

    def publish(self, token: str, name: str) -> bool:
        """Deliver the token; only the first call has any effect."""
        with self._lock:
            if self.result.done() or self.cancelled.is_set():
                return False
            self.result.set_result((token, name))
            return True

    def wait(self, timeout: float) -> Tuple[str, str]:
        concurrent.futures.wait([self.result], timeout=timeout)

        with self._lock:
            if not self.result.done():
                self.cancelled.set()
                raise LoginTimeoutError(
                    f"login timed out (no callback received within {_describe(timeout)})"
                )

        error = self.result.exception()
        if error is not None:
            raise LoginError(f"local login server failed: {error}") from error
        return self.result.result()

    def close(self) -> None:
        if self._thread is not None:
            self._httpd.shutdown()
            self._thread.join()
        self._httpd.server_close()


def _describe(seconds: float) -> str:
    if seconds >= 60 and seconds % 60 == 0:
        minutes = int(seconds // 60)
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    return f"{seconds:g} seconds"


class LoopbackAuthClient:
    def __init__(
        self,
        store: CredentialStore,
        settings: Optional[Settings] = None,
        open_browser: Callable[[str], object] = webbrowser.open,
        timeout: Optional[float] = None,
    ):
        self.store = store
        self.settings = settings or Settings()
        self.open_browser = open_browser
        self.timeout = self.settings.login_timeout if timeout is None else timeout

    def login_url(self, server_url: str, port: int) -> str:
        query = urlencode({"port": port})
        return f"{server_url}/auth/{self.settings.provider}/cli-login?{query}"

    def login(self, server: Optional[str] = None) -> LoginResult:
        """
        Run the handshake and store the token on success.

        Raises LoginTimeoutError if no callback with a token arrives in time
        and LoginError if the local listener fails.
        """
        credential = self.store.load()
        server_url = self.settings.resolve_server(server, credential.server)

        session = HandshakeSession()
        try:
            session.start()
            url = self.login_url(server_url, session.port)
            logger.notice("Open this URL in your browser:\n%s", url)
            self._try_open_browser(url)

            token, name = session.wait(self.timeout)
        finally:
            session.close()

        self.store.save(StoredCredential(server=server_url, token=token))
        return LoginResult(server=server_url, token=token, name=name)

    def _try_open_browser(self, url: str) -> None:
        # Best effort: the URL has already been shown to the user
        try:
            self.open_browser(url)
        except Exception as e:
            logger.debug("Could not open browser: %s", e)


def logout(store: CredentialStore) -> StoredCredential:
    """Forget the token, keep the server URL."""
    return store.clear_token()
