"""
Delivery of survey responses to the storage service.

Two strategies are used:

- primary: multipart/form-data POST with a single `data` field holding the
  JSON-encoded response; any network error or non-2xx status is a failure.
- alternate: the raw JSON text as a text/plain body. The response is never
  read; the POST call completing is taken as success.

RetryPolicy decides which strategy each attempt uses and when to give up.
"""

import json
import time
import uuid

import requests

MAX_RETRIES = 3
RETRY_DELAY = 1000  # milliseconds
TIMEOUT = 10  # seconds

PRIMARY = 'primary'
ALTERNATE = 'alternate'
SUCCESS = 'success'
EXHAUSTED = 'exhausted'

# Primary attempts allowed before switching to the alternate strategy.
PRIMARY_ATTEMPTS = 2


class TransportError(Exception):
    def __init__(self, message, attempts=0, last_error=None):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class RetryPolicy:
    """
    Finite-state retry policy.

    States: primary -> alternate -> exhausted, with success reachable from
    either sending state. Attempt 1 always uses the primary strategy; at most
    PRIMARY_ATTEMPTS attempts are primary, and whenever max_attempts >= 2 the
    last attempt is left to the alternate strategy.
    """

    def __init__(self, max_attempts=MAX_RETRIES, primary_attempts=PRIMARY_ATTEMPTS):
        self.max_attempts = max(1, int(max_attempts))
        self.primary_attempts = max(1, min(primary_attempts, self.max_attempts - 1))
        self.attempt = 1
        self.state = PRIMARY

    @property
    def done(self):
        return self.state in (SUCCESS, EXHAUSTED)

    def record_success(self):
        self.state = SUCCESS

    def record_failure(self):
        if self.done:
            return
        if self.attempt >= self.max_attempts:
            self.state = EXHAUSTED
            return
        self.attempt += 1
        self.state = PRIMARY if self.attempt <= self.primary_attempts else ALTERNATE


def encode(record):
    return json.dumps(record, ensure_ascii=False)


def send_primary(http, url, payload, timeout):
    response = http.post(url, files={'data': (None, payload)}, timeout=timeout)
    response.raise_for_status()
    return response


def send_alternate(http, url, payload, timeout):
    response = http.post(
        url,
        data=payload.encode('utf-8'),
        headers={'Content-Type': 'text/plain'},
        timeout=timeout,
        stream=True,
    )
    response.close()
    return response


STRATEGIES = {
    PRIMARY: send_primary,
    ALTERNATE: send_alternate,
}


def submit(record, url, max_retries=MAX_RETRIES, retry_delay=RETRY_DELAY, timeout=TIMEOUT,
           session=None, sleep=time.sleep):
    """
    Send a validated response to the storage service at `url`.

    A submission_id is attached first (when missing) so every retry of the same
    submission carries the same identifier. Attempts are sequential, separated
    by a constant `retry_delay` milliseconds.

    Returns the record as sent. Raises TransportError after `max_retries`
    failed attempts across both strategies.
    """
    if not url:
        raise TransportError("storage service URL is not configured")

    record = dict(record)
    record.setdefault('submission_id', uuid.uuid4().hex)
    payload = encode(record)

    http = session or requests
    policy = RetryPolicy(max_retries)
    last_error = None

    while not policy.done:
        strategy = policy.state
        try:
            print(f"  [submit] attempt {policy.attempt}/{policy.max_attempts} ({strategy})")
            STRATEGIES[strategy](http, url, payload, timeout)
        except requests.RequestException as e:
            last_error = e
            print(f"  [submit] {strategy} attempt failed: {e}")
            policy.record_failure()
            if not policy.done:
                sleep(retry_delay / 1000)
        else:
            policy.record_success()

    if policy.state == EXHAUSTED:
        raise TransportError(
            f"submission failed after {policy.max_attempts} attempts",
            attempts=policy.max_attempts,
            last_error=last_error,
        ) from last_error

    print(f"  [submit] delivered {record['submission_id']} on attempt {policy.attempt}")
    return record
