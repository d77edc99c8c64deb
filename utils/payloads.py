# utils/payloads.py - request bodies for the OpenAI endpoints + shared logger
import logging
from dataclasses import dataclass, field, fields
from typing import Optional


def get_logger(name: str = "openai-client"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


class _Payload:
    # fields listed here are left out of the body while they are None
    OPTIONAL = ()

    def to_payload(self):
        """Return the request body as a dict, keeping declaration order."""
        body = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None and f.name in self.OPTIONAL:
                continue
            body[f.name] = value
        return body


@dataclass
class CompletionParams(_Payload):
    OPTIONAL = ("logit_bias", "user")

    model: str
    prompt: str
    max_tokens: int = 1000
    temperature: float = 0.7
    top_p: int = 1
    n: int = 1
    stream: bool = False
    logprobs: object = None
    echo: bool = False
    stop: object = "\n"
    presence_penalty: int = 0
    frequency_penalty: int = 0
    best_of: int = 1
    logit_bias: Optional[dict] = None
    user: Optional[str] = None


@dataclass
class ChatParams(_Payload):
    OPTIONAL = ("logit_bias", "user")

    model: str
    messages: list = field(default_factory=list)
    temperature: float = 0.7
    top_p: int = 1
    n: int = 1
    stream: bool = False
    stop: object = None
    max_tokens: int = 1000
    presence_penalty: int = 0
    frequency_penalty: int = 0
    logit_bias: Optional[dict] = None
    user: Optional[str] = None

    @classmethod
    def system(cls, model, message, **kwargs):
        return cls(model=model, messages=[{"role": "system", "content": message}], **kwargs)


@dataclass
class EditParams(_Payload):
    model: str
    input: str
    instruction: str
    n: int = 1
    temperature: float = 0.7
    top_p: int = 1
