import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Protocol

from openai import OpenAI, OpenAIError

from .config import Settings
from .errors import GenerationError

logger = logging.getLogger(__name__)

# a newline, or a "2. " style marker that starts a new item mid-line
_ITEM_SPLIT_RE = re.compile(r"\r?\n|(?<!\S)(?=\d+[.)]\s)")
_LEADING_MARKER_RE = re.compile(r"^(?:[-*•·]+|\d+[.)])(?:\s+|$)")
_FENCE_RE = re.compile(r"^```[A-Za-z]*\s*(.*?)\s*```$", re.DOTALL)
_QUOTES = "\"'“”‘’「」"


@dataclass(frozen=True)
class Structured:
    items: list[str]


@dataclass(frozen=True)
class Unstructured:
    text: str


ParsedResponse = Structured | Unstructured


class TextGenerator(Protocol):
    def complete(self, system: str, prompt: str, temperature: float) -> str:
        ...


class OpenAITextGenerator:
    def __init__(self, settings: Settings, client: OpenAI | None = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.settings.openai_api_key:
                raise RuntimeError("OPENAI_API_KEY environment variable not set")
            self._client = OpenAI(api_key=self.settings.openai_api_key)
        return self._client

    def complete(self, system: str, prompt: str, temperature: float) -> str:
        kwargs = {}
        if self.settings.max_tokens:
            kwargs["max_tokens"] = self.settings.max_tokens
        try:
            response = self.client.chat.completions.create(
                model=self.settings.model_name,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                **kwargs,
            )
        except OpenAIError as e:
            logger.error("OpenAI request failed: %s", e)
            raise GenerationError() from e
        return response.choices[0].message.content or ""


def clamp_count(value, settings: Settings) -> int:
    """Coerce a requested count into [min_count, max_count]; junk means the default."""
    try:
        n = float(value)
    except (TypeError, ValueError, OverflowError):
        n = settings.default_count
    if math.isnan(n):
        n = settings.default_count
    # infinities clamp to the nearest bound
    return int(max(settings.min_count, min(settings.max_count, n)))


def build_prompt(caption: str, n: int, prompt_format: str = "json", language: str = "Korean") -> tuple[str, str]:
    if prompt_format == "json":
        system = (
            f"You are a {language} social media copywriter.\n"
            "Return ONLY a JSON array of strings, no extra text."
        )
        prompt = (
            "Instagram caption:\n"
            f"{caption}\n\n"
            "Task:\n"
            f"- Write {n} natural {language} comments that reflect the mood and content of the caption.\n"
            "- Each comment is 1-2 sentences in a polite register, 20-90 characters.\n"
            "- No hashtags, no emoji, no question marks.\n"
            "- Vary wording, vocabulary and rhythm so no two comments sound alike.\n"
            '- Output only the JSON array (e.g. ["comment 1", "comment 2", ...]).\n'
        )
    else:
        system = f"You are a friendly {language} social media user who writes short, warm comments."
        prompt = (
            f"Here is the caption of an Instagram post:\n{caption}\n\n"
            f"Write {n} different {language} comments someone might leave on this post. "
            "Put each comment on its own line, numbered like \"1. \", and write nothing else."
        )
    return system, prompt


def parse_llm_response(response_text: str) -> ParsedResponse:
    """
    Parse the LLM response as a JSON array of strings, else keep it as text.
    The whole response, optionally inside a code fence, must be the array.
    """
    body = response_text.strip()
    fenced = _FENCE_RE.match(body)
    if fenced:
        body = fenced.group(1)
    if body.startswith("[") and body.endswith("]"):
        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, list) and all(isinstance(item, str) for item in data):
            return Structured(data)
    return Unstructured(response_text)


def _clean_item(piece: str) -> str:
    piece = _LEADING_MARKER_RE.sub("", piece.strip()).strip()
    if len(piece) >= 2 and piece[0] in _QUOTES and piece[-1] in _QUOTES:
        piece = piece[1:-1].strip()
    return piece


def split_comments(text: str) -> list[str]:
    pieces = (_clean_item(p) for p in _ITEM_SPLIT_RE.split(text))
    return [p for p in pieces if p]


def comments_from_response(response_text: str, n: int) -> list[str]:
    parsed = parse_llm_response(response_text.strip())
    if isinstance(parsed, Structured):
        comments = [item.strip() for item in parsed.items if item.strip()]
    else:
        logger.warning("LLM response is not a JSON array, falling back to line parsing")
        comments = split_comments(parsed.text)
    return comments[:n]


def generate_comments(caption: str, count, llm: TextGenerator, settings: Settings) -> list[str]:
    n = clamp_count(count, settings)
    system, prompt = build_prompt(caption, n, settings.prompt_format, settings.comment_language)
    raw = llm.complete(system, prompt, settings.temperature)
    comments = comments_from_response(raw, n)
    logger.info("Generated %d of %d requested comments", len(comments), n)
    return comments
