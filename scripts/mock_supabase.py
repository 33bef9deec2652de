#!/usr/bin/env python3
"""Local stand-in for the Supabase auth and storage endpoints the API calls."""

from __future__ import annotations

import argparse
import json
import threading
import uuid
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

SERVICE_ROLE_KEY = "service-role-key"

_LOCK = threading.Lock()
_USERS: dict[str, dict[str, object]] = {
    "11111111-1111-1111-1111-111111111111": {
        "id": "11111111-1111-1111-1111-111111111111",
        "email": "admin@example.com",
        "user_metadata": {"name": "Admin"},
    },
    "33333333-3333-3333-3333-333333333333": {
        "id": "33333333-3333-3333-3333-333333333333",
        "email": "user@example.com",
        "user_metadata": {},
    },
}
_TOKENS = {
    "admin-token": "11111111-1111-1111-1111-111111111111",
    "user-token": "33333333-3333-3333-3333-333333333333",
}
_OBJECTS: dict[str, tuple[str, bytes]] = {}


class MockSupabaseHandler(BaseHTTPRequestHandler):
    server_version = "MockSupabase/1.0"

    def do_GET(self) -> None:  # noqa: N802 - stdlib handler signature
        if self.path == "/healthz":
            self._write_json(HTTPStatus.OK, {"status": "ok"})
            return

        if self.path == "/auth/v1/user":
            user_id = _TOKENS.get(self._bearer_token() or "")
            if user_id is None:
                self._write_json(HTTPStatus.UNAUTHORIZED, {"msg": "invalid token"})
                return
            with _LOCK:
                self._write_json(HTTPStatus.OK, _USERS[user_id])
            return

        if self.path.startswith("/auth/v1/admin/users/"):
            if not self._require_service_role():
                return
            with _LOCK:
                user = _USERS.get(self.path.rsplit("/", maxsplit=1)[1])
            if user is None:
                self._write_json(HTTPStatus.NOT_FOUND, {"msg": "User not found"})
                return
            self._write_json(HTTPStatus.OK, user)
            return

        if self.path.startswith("/storage/v1/object/public/"):
            stored = _OBJECTS.get(self.path.removeprefix("/storage/v1/object/public/"))
            if stored is None:
                self._write_json(HTTPStatus.NOT_FOUND, {"message": "Object not found"})
                return
            content_type, data = stored
            self.send_response(HTTPStatus.OK.value)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(data)))
            self.end_headers()
            self.wfile.write(data)
            return

        self._write_json(HTTPStatus.NOT_FOUND, {"detail": "not found"})

    def do_PUT(self) -> None:  # noqa: N802 - stdlib handler signature
        if not self.path.startswith("/auth/v1/admin/users/"):
            self._write_json(HTTPStatus.NOT_FOUND, {"detail": "not found"})
            return
        if not self._require_service_role():
            return

        payload = self._read_json()
        with _LOCK:
            user = _USERS.get(self.path.rsplit("/", maxsplit=1)[1])
            if user is None:
                self._write_json(HTTPStatus.NOT_FOUND, {"msg": "User not found"})
                return
            if isinstance(payload.get("user_metadata"), dict):
                user["user_metadata"] = payload["user_metadata"]
            self._write_json(HTTPStatus.OK, user)

    def do_POST(self) -> None:  # noqa: N802 - stdlib handler signature
        if self.path == "/auth/v1/admin/users":
            if not self._require_service_role():
                return
            self._create_user(self._read_json())
            return

        if self.path.startswith("/storage/v1/object/"):
            if not self._require_service_role():
                return
            object_path = self.path.removeprefix("/storage/v1/object/")
            length = int(self.headers.get("Content-Length", "0"))
            data = self.rfile.read(length)
            with _LOCK:
                if object_path in _OBJECTS and self.headers.get("x-upsert", "false") != "true":
                    self._write_json(HTTPStatus.CONFLICT, {"message": "The resource already exists"})
                    return
                _OBJECTS[object_path] = (self.headers.get("Content-Type", "application/octet-stream"), data)
            self._write_json(HTTPStatus.OK, {"Key": object_path})
            return

        self._write_json(HTTPStatus.NOT_FOUND, {"detail": "not found"})

    def log_message(self, _: str, *args: object) -> None:
        # Keep logs terse for test runs.
        if args:
            print("mock-supabase:", *args)

    def _create_user(self, payload: dict[str, object]) -> None:
        email = payload.get("email")
        password = payload.get("password")
        if not isinstance(email, str) or not isinstance(password, str) or len(password) < 6:
            self._write_json(HTTPStatus.UNPROCESSABLE_ENTITY, {"msg": "email and password (min 6 chars) required"})
            return
        with _LOCK:
            if any(user["email"] == email for user in _USERS.values()):
                self._write_json(
                    HTTPStatus.UNPROCESSABLE_ENTITY,
                    {"msg": "A user with this email address has already been registered"},
                )
                return
            user_id = str(uuid.uuid4())
            metadata = payload.get("user_metadata")
            _USERS[user_id] = {
                "id": user_id,
                "email": email,
                "user_metadata": metadata if isinstance(metadata, dict) else {},
            }
            self._write_json(HTTPStatus.OK, _USERS[user_id])

    def _bearer_token(self) -> str | None:
        authorization = self.headers.get("Authorization", "")
        if not authorization.lower().startswith("bearer "):
            return None
        return authorization.split(" ", maxsplit=1)[1].strip()

    def _require_service_role(self) -> bool:
        if self._bearer_token() != SERVICE_ROLE_KEY:
            self._write_json(HTTPStatus.UNAUTHORIZED, {"msg": "service role required"})
            return False
        return True

    def _read_json(self) -> dict[str, object]:
        length = int(self.headers.get("Content-Length", "0"))
        if length <= 0:
            return {}
        try:
            payload = json.loads(self.rfile.read(length))
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    def _write_json(self, status: HTTPStatus, payload: dict[str, object]) -> None:
        raw = json.dumps(payload).encode("utf-8")
        self.send_response(status.value)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(raw)))
        self.end_headers()
        self.wfile.write(raw)


def main() -> None:
    parser = argparse.ArgumentParser(description="Mock Supabase auth and storage endpoints.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=54321)
    args = parser.parse_args()

    server = ThreadingHTTPServer((args.host, args.port), MockSupabaseHandler)
    print(f"mock-supabase listening on http://{args.host}:{args.port}", flush=True)
    print(f"tokens: {', '.join(sorted(_TOKENS))}; service role key: {SERVICE_ROLE_KEY}", flush=True)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
