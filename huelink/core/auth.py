"""Link button authentication for Hue Bridge.

The bridge hands out credentials only after its physical link button has been
pressed. Authenticator.request() keeps asking the bridge until that happens or
a deadline passes:

- the poll loop runs in a worker thread, POSTing to https://{host}/api and
  waiting poll_interval between attempts while the bridge answers 101
- the calling thread waits for the loop's result no longer than the deadline
- if the deadline wins, the loop is told to stop and its result is discarded
"""

import concurrent.futures
import logging
import threading
import time
from dataclasses import dataclass

import requests
from pydantic import BaseModel, ConfigDict, SecretStr, TypeAdapter, ValidationError, model_validator

from huelink.core.config import REQUEST_TIMEOUT
from huelink.core.errors import (
    LINK_BUTTON_NOT_PRESSED,
    AuthenticationOtherError,
    AuthenticationTimedOut,
    TransportError,
)
from huelink.models.bridge import Bridge

logger = logging.getLogger(__name__)


class Authenticator(BaseModel):
    """Credentials of a device/app authenticated with the bridge.

    Both values are secrets: repr() and str() mask them, use
    get_secret_value() to read them.
    """
    model_config = ConfigDict(frozen=True)

    username: SecretStr
    clientkey: SecretStr

    @classmethod
    def request(cls, bridge: Bridge, session: requests.Session, device_type: str,
                deadline: float, poll_interval: float,
                *, request_timeout: float = REQUEST_TIMEOUT) -> 'Authenticator':
        """Ask the bridge for credentials until the link button is pressed.

        The first request is sent immediately. While the bridge answers with
        error 101 (link button not pressed), the request is repeated every
        poll_interval seconds.

        Example:
            >>> session = bridge_session()
            >>> bridge = next(iter(discover(session)))
            >>> auth = Authenticator.request(bridge, session, 'my_app#laptop',
            ...                              deadline_after(30), 1.0)

        Args:
            bridge: Bridge to authenticate against
            session: requests session (or anything with a compatible post())
            device_type: Identifies this app/device to the bridge
            deadline: Absolute time.monotonic() instant, see deadline_after()
            poll_interval: Seconds to wait between attempts
            request_timeout: Upper bound in seconds for a single POST

        Returns:
            Authenticator holding username and clientkey

        Raises:
            AuthenticationTimedOut: deadline reached before the button was pressed
            AuthenticationOtherError: bridge returned an error code other than 101
            TransportError: HTTP request failed or the response was malformed
        """
        if deadline - time.monotonic() <= 0:
            raise AuthenticationTimedOut()

        stop = threading.Event()
        poller = _LinkButtonPoller(bridge, session, device_type, poll_interval,
                                   deadline, request_timeout, stop)

        executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix='hue-auth')
        try:
            future = executor.submit(poller.run)
            try:
                result = future.result(timeout=max(0.0, deadline - time.monotonic()))
            except concurrent.futures.TimeoutError:
                stop.set()
                logger.info(f"Link button was not pressed on bridge {bridge.id} before the deadline")
                raise AuthenticationTimedOut() from None
        finally:
            executor.shutdown(wait=False)

        return result


@dataclass(frozen=True)
class Success:
    """The bridge granted credentials."""
    credentials: Authenticator


@dataclass(frozen=True)
class Pending:
    """The bridge answered with an error record."""
    code: int

    @property
    def link_button_not_pressed(self) -> bool:
        return self.code == LINK_BUTTON_NOT_PRESSED


AttemptResult = Success | Pending


class _SuccessRecord(BaseModel):
    username: SecretStr
    clientkey: SecretStr


class _ErrorRecord(BaseModel):
    # address and description are sent as well but not used
    type: int


class _ResponseRecord(BaseModel):
    success: _SuccessRecord | None = None
    error: _ErrorRecord | None = None

    @model_validator(mode='after')
    def _exactly_one(self):
        if (self.success is None) == (self.error is None):
            raise ValueError("expected exactly one of 'success' or 'error'")
        return self


# The bridge wraps its answer in a single-element array
_RESPONSE_ADAPTER = TypeAdapter(tuple[_ResponseRecord])


def parse_response(body: str | bytes) -> AttemptResult:
    """Parse the bridge's answer to an authentication request.

    Args:
        body: Raw JSON body, e.g. '[{"success": {"username": ..., "clientkey": ...}}]'

    Returns:
        Success with credentials, or Pending with the bridge's error type

    Raises:
        TransportError: If the body is not a single-element array holding
            a success or error record
    """
    try:
        (record,) = _RESPONSE_ADAPTER.validate_json(body)
    except ValidationError as e:
        # Validation messages can echo input values, which may be secrets
        raise TransportError(f"unexpected authentication response ({e.error_count()} errors)") from None

    if record.success is not None:
        return Success(Authenticator(
            username=record.success.username,
            clientkey=record.success.clientkey,
        ))
    return Pending(record.error.type)


def deadline_after(seconds: float) -> float:
    """Return the time.monotonic() instant `seconds` from now."""
    return time.monotonic() + seconds


class _LinkButtonPoller:
    """The poll loop; runs in the worker thread until a terminal result or stop."""

    def __init__(self, bridge: Bridge, session, device_type: str, poll_interval: float,
                 deadline: float, request_timeout: float, stop: threading.Event):
        self.bridge = bridge
        self.session = session
        self.device_type = device_type
        self.poll_interval = poll_interval
        self.deadline = deadline
        self.request_timeout = request_timeout
        self.stop = stop

    def run(self) -> Authenticator | None:
        attempt = 0
        while True:
            attempt += 1
            result = self._attempt()

            if self.stop.is_set():
                return None

            if isinstance(result, Success):
                logger.info(f"Bridge {self.bridge.id} granted credentials after {attempt} attempt(s)")
                return result.credentials

            if not result.link_button_not_pressed:
                raise AuthenticationOtherError(result.code)

            logger.debug(f"Link button not pressed yet (attempt {attempt}), retrying in {self.poll_interval}s")
            if self.stop.wait(self.poll_interval):
                return None

    def _attempt(self) -> AttemptResult:
        payload = {
            'devicetype': self.device_type,
            'generateclientkey': True,
        }
        # Never wait on a single request past the deadline
        timeout = max(0.1, min(self.request_timeout, self.deadline - time.monotonic()))

        try:
            response = self.session.post(self.bridge.api_url, json=payload, timeout=timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            if time.monotonic() >= self.deadline:
                raise AuthenticationTimedOut() from e
            raise TransportError(f"request to bridge {self.bridge.id} timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"request to bridge {self.bridge.id} failed: {e}") from e

        return parse_response(response.content)
