"""Conversion of submitted documents into model-ready content units."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Literal

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class SubmittedFile:
    """An uploaded file as received from the client."""

    filename: str
    content_type: str
    data: bytes


@dataclass(frozen=True)
class ContentUnit:
    """A piece of material ready for the generative model.

    Blob units carry base64-encoded bytes plus their media type; text units
    carry plain text.
    """

    kind: Literal["text", "blob"]
    text: str | None = None
    data: str | None = None
    mime_type: str | None = None

    @classmethod
    def from_text(cls, text: str) -> ContentUnit:
        return cls(kind="text", text=text)

    @classmethod
    def from_file(cls, file: SubmittedFile) -> ContentUnit:
        return cls(
            kind="blob",
            data=base64.b64encode(file.data).decode("ascii"),
            mime_type=file.content_type or DEFAULT_MIME_TYPE,
        )


@dataclass(frozen=True)
class DocumentSide:
    """The material submitted for one logical role, e.g. "reference"."""

    role: str
    file: SubmittedFile | None = None
    text: str | None = None

    @property
    def has_content(self) -> bool:
        return self.file is not None or bool(self.text and self.text.strip())

    @property
    def label(self) -> str:
        """Filename shown in history, or "Text" when only text was sent."""
        return self.file.filename if self.file is not None else "Text"

    def prompt_text(self) -> str:
        """Literal text, or a pointer to the attached file when there is none."""
        if self.text and self.text.strip():
            return self.text
        return f"See attached {self.role} file"


def normalize(sides: list[DocumentSide], instruction: str) -> list[ContentUnit]:
    """Return the ordered content units for a submission.

    File units come first, in the order of ``sides``, followed by the
    instruction text that refers to them.
    """
    units = [ContentUnit.from_file(side.file) for side in sides if side.file is not None]
    units.append(ContentUnit.from_text(instruction))
    return units
