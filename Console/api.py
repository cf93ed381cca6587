from __future__ import annotations

import logging
import os
from pathlib import Path
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
import streamlit as st
from dotenv import load_dotenv
load_dotenv()
load_dotenv(Path(__file__).resolve().parents[1] / ".env")
load_dotenv(Path(__file__).resolve().parent / ".env")

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3333"


class ApiError(RuntimeError):
    """A backend call failed, either in transport or with a non-2xx status."""

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status = status
        self.body = body

    @property
    def server_message(self) -> Optional[str]:
        """The ``mensagem`` field of the error body, if the server sent one."""
        if isinstance(self.body, dict):
            msg = self.body.get("mensagem")
            if msg not in (None, ""):
                return str(msg)
        return None


_local_secrets_cache: Optional[Dict[str, Any]] = None


def _load_local_secrets() -> Optional[Dict[str, Any]]:
    """Load secrets from Console/.streamlit/secrets.toml if st.secrets is empty."""
    global _local_secrets_cache
    if _local_secrets_cache is not None:
        return _local_secrets_cache
    secrets_path = Path(__file__).resolve().parent / ".streamlit" / "secrets.toml"
    if secrets_path.exists():
        try:
            _local_secrets_cache = tomllib.loads(secrets_path.read_text())
        except tomllib.TOMLDecodeError:
            logger.warning("Ignoring malformed %s", secrets_path)
            _local_secrets_cache = {}
        return _local_secrets_cache
    return None


def _get_secret(name: str, default: Optional[str] = None) -> Optional[str]:
    """Fetch a setting from st.secrets, console-local secrets, or env vars."""
    try:
        val = st.secrets.get(name)  # type: ignore[attr-defined]
        if val not in (None, ""):
            return val
        # Namespaced under [api] in st.secrets
        api_secrets = st.secrets.get("api")  # type: ignore[attr-defined]
        if isinstance(api_secrets, Mapping):
            val = api_secrets.get(name)
            if val not in (None, ""):
                return val
    except Exception:
        # st.secrets raises when no secrets file exists at all
        pass

    local = _load_local_secrets() or {}
    if local.get(name) not in (None, ""):
        return local.get(name)  # type: ignore[return-value]
    if isinstance(local.get("api"), dict):
        val = local["api"].get(name)
        if val not in (None, ""):
            return val  # type: ignore[return-value]

    return os.getenv(name, default)


def _as_flag(value: Optional[str]) -> bool:
    return str(value).lower() in {"1", "true", "yes", "on"}


def configured_log_level() -> str:
    return str(_get_secret("LOG_LEVEL", "INFO") or "INFO").upper()


@dataclass
class ApiConfig:
    base_url: str = DEFAULT_API_URL
    timeout: float = 30.0
    enable_user_create: bool = False

    @classmethod
    def from_env(cls) -> "ApiConfig":
        return cls(
            base_url=_get_secret("API_BASE_URL", DEFAULT_API_URL) or DEFAULT_API_URL,
            timeout=float(_get_secret("API_TIMEOUT_SECONDS", "30") or 30),
            enable_user_create=_as_flag(_get_secret("ENABLE_USER_CREATE", "false")),
        )


class ConsoleApi:
    """
    Client for the platform backend used by the user administration pages.

    Usage:
        api = ConsoleApi()
        users = api.list_users()
        api.delete_user(42)
    """

    def __init__(self, cfg: Optional[ApiConfig] = None, session: Optional[requests.Session] = None):
        self.cfg = cfg or ApiConfig.from_env()
        self.base_url = self.cfg.base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{endpoint}"
        kwargs.setdefault("timeout", self.cfg.timeout)
        try:
            response = self.session.request(method, url, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as e:
            body = _json_or_none(e.response)
            status = e.response.status_code if e.response is not None else None
            raise ApiError(f"{method} {endpoint} failed with status {status}", status=status, body=body) from e
        except requests.RequestException as e:
            raise ApiError(f"{method} {endpoint} failed: {e}") from e
        return response

    def _get_json(self, endpoint: str) -> Any:
        response = self._request("GET", endpoint)
        if not response.text:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"GET {endpoint} returned invalid JSON", status=response.status_code) from e

    def list_access_levels(self) -> List[Dict[str, Any]]:
        return self._get_json("/niveis-acesso") or []

    def list_modules(self) -> List[Dict[str, Any]]:
        return self._get_json("/modulos") or []

    def list_users(self) -> Any:
        """Raw ``/usuarios`` payload; its shape varies, see users.extract_user_rows."""
        return self._get_json("/usuarios")

    def delete_user(self, user_id: int) -> requests.Response:
        return self._request("POST", "/usuario/delete", json={"id": user_id})

    def create_user(self, payload: Dict[str, Any]) -> requests.Response:
        return self._request("POST", "/usuarios/create", json=payload)

    def set_password(self, token: str, password: str) -> int:
        """Set a user's password from a reset token. Returns the HTTP status."""
        response = self._request("POST", "/usuarios/definir-senha", json={"token": token, "senha": password})
        return response.status_code


def _json_or_none(response: Optional[requests.Response]) -> Optional[Dict[str, Any]]:
    if response is None:
        return None
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
