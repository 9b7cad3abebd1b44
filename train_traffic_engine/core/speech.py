"""Speech payload types and construction rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union


class SpeechOutputType(str, Enum):
    """Rendering modes understood by the voice platform."""

    PLAIN_TEXT = "PlainText"
    SSML = "SSML"


@dataclass(frozen=True, slots=True)
class SpeechOutput:
    """Text to speak, either plain or as SSML markup."""

    speech: str
    type: SpeechOutputType = SpeechOutputType.PLAIN_TEXT

    @classmethod
    def plain(cls, text: str) -> "SpeechOutput":
        return cls(speech=text, type=SpeechOutputType.PLAIN_TEXT)

    @classmethod
    def ssml(cls, markup: str) -> "SpeechOutput":
        return cls(speech=markup, type=SpeechOutputType.SSML)

    @classmethod
    def coerce(cls, value: "SpeechInput") -> "SpeechOutput":
        """Accept a raw string or a ``{speech, type}`` shape.

        Only an exact ``"SSML"`` type selects SSML; a missing or unrecognised
        type falls back to plain text.
        """
        if isinstance(value, SpeechOutput):
            return value
        if isinstance(value, str):
            return cls.plain(value)
        if isinstance(value, Mapping):
            speech = value.get("speech")
            kind = value.get("type")
        else:
            speech = getattr(value, "speech", None)
            kind = getattr(value, "type", None)
        text = "" if speech is None else str(speech)
        if kind == SpeechOutputType.SSML.value:
            return cls.ssml(text)
        return cls.plain(text)

    def to_payload(self) -> dict[str, str]:
        """Render the platform ``outputSpeech`` object."""
        if self.type is SpeechOutputType.SSML:
            return {"type": SpeechOutputType.SSML.value, "ssml": self.speech}
        return {"type": SpeechOutputType.PLAIN_TEXT.value, "text": self.speech}


SpeechInput = Union[str, SpeechOutput, Mapping[str, Any]]


def speak(body: str) -> SpeechOutput:
    """Wrap SSML body markup in an outer ``<speak>`` tag.

    The markup itself is not validated.
    """
    stripped = body.strip()
    if stripped.startswith("<speak>") and stripped.endswith("</speak>"):
        return SpeechOutput.ssml(stripped)
    return SpeechOutput.ssml(f"<speak>{body}</speak>")


def build_speech_payload(value: SpeechInput) -> dict[str, str]:
    """Shortcut for ``SpeechOutput.coerce(value).to_payload()``."""
    return SpeechOutput.coerce(value).to_payload()


__all__ = ["SpeechInput", "SpeechOutput", "SpeechOutputType", "build_speech_payload", "speak"]
