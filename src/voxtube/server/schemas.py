"""Request bodies for the HTTP API.

Fields are optional at the schema level so missing values produce the
API's own 400 messages rather than a generic validation error.
"""

from pydantic import BaseModel


class TranscriptRequest(BaseModel):
    url: str | None = None


class SummarizeRequest(BaseModel):
    videoId: str | None = None
    transcript: str | None = None
    title: str | None = None
    channel: str | None = None
    duration: str | None = None


class SynthesizeRequest(BaseModel):
    videoId: str | None = None
    text: str | None = None
    voice: str | None = None
