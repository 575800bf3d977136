#!/usr/bin/env python3
"""Lightweight smoke tests for the Study Buddy HTTP API.

Usage:
  ./venv/bin/python scripts/smoke_test.py
  ./venv/bin/python scripts/smoke_test.py --base-url https://your-domain.com --include-ai
"""

from __future__ import annotations

import argparse
import json
import os
import time
import urllib.error
import urllib.request
from typing import Any, Dict, Optional, Tuple


def _request(
    method: str,
    url: str,
    *,
    json_body: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 10.0,
) -> Tuple[int, str, Dict[str, str]]:
    payload = None
    request_headers: Dict[str, str] = dict(headers or {})
    if json_body is not None:
        payload = json.dumps(json_body).encode("utf-8")
        request_headers.setdefault("Content-Type", "application/json")
    req = urllib.request.Request(url=url, data=payload, method=method.upper(), headers=request_headers)
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            body = response.read().decode("utf-8", errors="replace")
            status = int(response.getcode())
            response_headers = {k: v for k, v in response.getheaders()}
            return status, body, response_headers
    except urllib.error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace")
        response_headers = {k: v for k, v in exc.headers.items()}
        return int(exc.code), body, response_headers


class SmokeRunner:
    def __init__(self, base_url: str, timeout: float, bearer_token: str = "", include_ai: bool = False) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.bearer_token = bearer_token.strip()
        self.include_ai = include_ai
        self.failures = 0
        self.total = 0

    def _print_result(self, ok: bool, label: str, detail: str = "") -> None:
        prefix = "PASS" if ok else "FAIL"
        print(f"[{prefix}] {label}")
        if detail:
            print(f"       {detail}")
        if not ok:
            self.failures += 1

    def _expect_status(self, label: str, method: str, path: str, expected_status: int, **kwargs: Any) -> Tuple[int, str, Dict[str, str]]:
        self.total += 1
        url = f"{self.base_url}{path}"
        started = time.time()
        try:
            status, body, headers = _request(method, url, timeout=self.timeout, **kwargs)
        except Exception as exc:
            self._print_result(False, label, f"request error: {exc}")
            return 0, "", {}
        elapsed_ms = int((time.time() - started) * 1000)
        ok = status == expected_status
        body_preview = body.strip().replace("\n", " ")[:140]
        detail = f"expected {expected_status}, got {status} ({elapsed_ms}ms)"
        if body_preview:
            detail += f" | body: {body_preview}"
        self._print_result(ok, label, detail)
        return status, body, headers

    def _check_json(self, label: str, body: str, predicate) -> None:
        self.total += 1
        try:
            parsed = json.loads(body or "{}")
            self._print_result(bool(predicate(parsed)), label)
        except Exception as exc:
            self._print_result(False, label, f"invalid json: {exc}")

    def run(self) -> int:
        print(f"Running smoke tests against: {self.base_url}")
        print(f"Timeout per request: {self.timeout:.1f}s")
        print("")

        _status, body, _headers = self._expect_status("Health endpoint reachable", "GET", "/api/health", 200)
        self._check_json("Health reports prompt inventory", body, lambda data: data.get("prompts", {}).get("count", 0) > 0)

        # Registration validation (no auth)
        _status, body, _headers = self._expect_status(
            "Register rejects weak password",
            "POST",
            "/api/auth/register",
            400,
            json_body={"name": "Smoke", "email": "smoke@example.com", "password": "short"},
        )
        self._check_json("Weak password message mentions length", body, lambda data: "8 characters" in data.get("error", ""))

        # Unauthorized guardrails
        self._expect_status("Profile requires auth", "GET", "/api/auth/user", 401)
        self._expect_status("Chat requires auth", "POST", "/api/chats/global/messages", 401, json_body={"message": "hi"})
        self._expect_status("Flashcards require auth", "POST", "/api/flashcards/generate", 401, json_body={"topic": "Cells"})
        self._expect_status("Quiz requires auth", "POST", "/api/quiz/generate", 401, json_body={"topic": "Cells"})
        self._expect_status("Summarizer requires auth", "POST", "/api/summarize", 401, json_body={"text": "abc"})
        self._expect_status("History requires auth", "GET", "/api/history", 401)

        if self.bearer_token:
            auth_headers = {"Authorization": f"Bearer {self.bearer_token}"}
            self._expect_status("Authenticated /api/auth/user", "GET", "/api/auth/user", 200, headers=auth_headers)
            self._expect_status("Authenticated analytics", "GET", "/api/analytics", 200, headers=auth_headers)
            self._expect_status("Authenticated history", "GET", "/api/history", 200, headers=auth_headers)
            if self.include_ai:
                _status, body, _headers = self._expect_status(
                    "Global chat round trip",
                    "POST",
                    "/api/chats/global/messages",
                    200,
                    json_body={"message": "Say hello in one word."},
                    headers=auth_headers,
                )
                self._check_json("Chat reply has no error kind", body, lambda data: data.get("error_kind") is None)
        else:
            print("")
            print("Note: Skipped authenticated smoke checks (set FIREBASE_TEST_BEARER to enable).")

        print("")
        passed = self.total - self.failures
        print(f"Summary: {passed}/{self.total} checks passed.")
        if self.failures:
            print("Smoke test status: FAILED")
            return 1
        print("Smoke test status: PASSED")
        return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Run API smoke tests.")
    parser.add_argument("--base-url", default="http://127.0.0.1:5000", help="Base URL for the API (default: http://127.0.0.1:5000)")
    parser.add_argument("--timeout", default=30.0, type=float, help="Request timeout in seconds")
    parser.add_argument("--bearer-token", default="", help="Optional Firebase bearer token for authenticated checks")
    parser.add_argument("--include-ai", action="store_true", help="Also run a live chat completion (uses API quota)")
    args = parser.parse_args()

    token = args.bearer_token.strip() or os.getenv("FIREBASE_TEST_BEARER", "").strip()

    runner = SmokeRunner(base_url=args.base_url, timeout=args.timeout, bearer_token=token, include_ai=args.include_ai)
    return runner.run()


if __name__ == "__main__":
    raise SystemExit(main())
