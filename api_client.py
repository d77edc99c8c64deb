# api_client.py - minimal OpenAI client wrapper around requests
import json
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import requests

from utils.payloads import ChatParams, CompletionParams, EditParams, get_logger

logger = get_logger("openai-client")

BASE_URI = "https://api.openai.com"

ENDPOINTS = {
    "models": "/v1/models/{}",
    "completion": "/v1/completions",
    "chat": "/v1/chat/completions",
    "edits": "/v1/edits",
}


class APIClientError(Exception):
    pass


class ConfigError(APIClientError):
    pass


class TransportError(APIClientError):
    pass


class DecodeError(APIClientError):
    def __init__(self, message, raw=""):
        super().__init__(message)
        self.raw = raw


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    organization: str = ""
    completion_model: str = "text-davinci-003"
    chat_model: str = "gpt-3.5-turbo"
    edit_model: str = "text-davinci-edit-001"
    timeout: Optional[float] = None
    base_uri: str = BASE_URI


class APIClient:
    """
    Thin synchronous client for the OpenAI HTTP API.

    Every public call returns the decoded JSON document as-is. Errors reported
    by the API (bad key, rate limit, invalid request) are NOT raised: they
    come back as a dict with an "error" key, so callers must check for it.
    """

    def __init__(
        self,
        api_key,
        organization="",
        completion_model="text-davinci-003",
        chat_model="gpt-3.5-turbo",
        edit_model="text-davinci-edit-001",
        timeout=None,
    ):
        self.config = ClientConfig(
            api_key=api_key,
            organization=organization,
            completion_model=completion_model,
            chat_model=chat_model,
            edit_model=edit_model,
            timeout=timeout,
        )

    @classmethod
    def from_env(cls, **overrides):
        """Build a client from OPENAI_API_KEY / OPENAI_ORGANIZATION / OPENAI_TIMEOUT."""
        if "api_key" in overrides:
            api_key = overrides.pop("api_key")
        else:
            api_key = os.environ.get("OPENAI_API_KEY")
        if api_key is None:
            raise ConfigError("OPENAI_API_KEY is not set")

        if "organization" not in overrides:
            overrides["organization"] = os.environ.get("OPENAI_ORGANIZATION", "")

        if "timeout" not in overrides:
            raw_timeout = os.environ.get("OPENAI_TIMEOUT")
            if raw_timeout:
                try:
                    overrides["timeout"] = float(raw_timeout)
                except ValueError as exc:
                    raise ConfigError(f"Invalid float for OPENAI_TIMEOUT: {raw_timeout}") from exc

        return cls(api_key, **overrides)

    # ---------- request building ----------

    def resolve_url(self, endpoint: str, *args: Optional[str]) -> str:
        try:
            template = ENDPOINTS[endpoint]
        except KeyError:
            raise ConfigError(f"Unknown endpoint: {endpoint}") from None

        slots = template.count("{}")
        values = [a if a is not None else "" for a in args[:slots]]
        values += [""] * (slots - len(values))
        return (self.config.base_uri + template.format(*values)).rstrip("/")

    def build_headers(self, extra: Sequence[str] = ()) -> list:
        return [
            "Content-Type: application/json",
            f"Authorization: Bearer {self.config.api_key}",
            f"OpenAI-Organization: {self.config.organization}",
            *extra,
        ]

    # ---------- transport ----------

    def execute(self, url: str, headers: Sequence[str], body: Optional[Dict[str, Any]] = None) -> Any:
        header_map = {}
        for line in headers:
            name, _, value = line.partition(":")
            header_map[name.strip()] = value.strip()

        method = "GET" if body is None else "POST"
        logger.debug("%s %s", method, url)
        for k, v in header_map.items():
            if k == "Authorization":
                v = v.split(" ", 1)[0] + " [REDACTED]"
            logger.debug("REQ-HEADER %s: %s", k, v)

        try:
            with requests.Session() as session:
                t0 = time.time()
                if body is None:
                    resp = session.get(url, headers=header_map, timeout=self.config.timeout)
                else:
                    resp = session.post(
                        url,
                        data=json.dumps(body),
                        headers=header_map,
                        timeout=self.config.timeout,
                    )
                elapsed = time.time() - t0
                raw = resp.text
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, str(e))
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug("%s %s -> status %s (elapsed %.3fs)", method, url, resp.status_code, elapsed)

        if not isinstance(raw, str):
            raise TransportError(f"response body is not a string: {type(raw).__name__}")

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning("Response from %s is not valid JSON: %s", url, raw[:200])
            raise DecodeError(f"invalid JSON from {url}: {e}", raw=raw) from e

        if isinstance(data, dict) and "error" in data:
            logger.warning("API returned an error payload: %s", data["error"])
        return data

    # ---------- endpoints ----------

    def list_models(self, name: Optional[str] = None) -> Any:
        return self.execute(self.resolve_url("models", name), self.build_headers())

    def completion(self, prompt: str, model: Optional[str] = None, *, logit_bias=None, user=None) -> Any:
        params = CompletionParams(
            model=model if model is not None else self.config.completion_model,
            prompt=prompt,
            logit_bias=logit_bias,
            user=user,
        )
        return self.execute(self.resolve_url("completion"), self.build_headers(), params.to_payload())

    def chat(self, message: str, model: Optional[str] = None, *, logit_bias=None, user=None) -> Any:
        params = ChatParams.system(
            model if model is not None else self.config.chat_model,
            message,
            logit_bias=logit_bias,
            user=user,
        )
        return self.execute(self.resolve_url("chat"), self.build_headers(), params.to_payload())

    def edit(self, input: str, instruction: str, model: Optional[str] = None) -> Any:
        params = EditParams(
            model=model if model is not None else self.config.edit_model,
            input=input,
            instruction=instruction,
        )
        return self.execute(self.resolve_url("edits"), self.build_headers(), params.to_payload())
