"""ansi-segments FastAPI server: ANSI text to styled runs."""

from __future__ import annotations

import hashlib
import logging
import os
import re
import socket
import sys
from typing import Literal

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, model_validator

from ansi_parser import get_segments, parse_lines, to_run
from ansi_style import BUILDERS, ClassNameStyle

log = logging.getLogger(__name__)

app = FastAPI(title="ansi-segments", version="1.0.0")
_security = HTTPBearer()

TOKEN = os.environ.get("ANSI_TOKEN", "changeme")
MAX_TEXT_LEN = int(os.environ.get("ANSI_MAX_TEXT_LEN", "1000000"))
HOST = os.environ.get("ANSI_HOST", "127.0.0.1")
PORT = int(os.environ.get("ANSI_PORT", "8787"))

_SURROGATE_RE = re.compile("[\ud800-\udfff]")


def check_token() -> None:
    """Refuse to serve with the placeholder token."""
    if TOKEN == "changeme":
        print(
            "\n\033[1;31mFATAL: ANSI_TOKEN is set to 'changeme'.\033[0m\n"
            "Generate a secure token:  python3 -c \"import secrets; print(secrets.token_urlsafe(32))\"\n"
            "Then set it:  export ANSI_TOKEN=<your-token>\n",
            file=sys.stderr,
        )
        sys.exit(1)


def _verify(creds: HTTPAuthorizationCredentials = Depends(_security)) -> str:
    if creds.credentials != TOKEN:
        raise HTTPException(status_code=401, detail="Invalid token")
    return creds.credentials


class SegmentsRequest(BaseModel):
    text: str
    builder: Literal["inline", "class"] = "inline"
    lines: bool = False

    @model_validator(mode="after")
    def text_within_limit(self):
        if len(self.text) > MAX_TEXT_LEN:
            raise ValueError(f"text exceeds {MAX_TEXT_LEN} characters")
        # JSON allows unpaired surrogate escapes; they can not be encoded as UTF-8
        self.text = _SURROGATE_RE.sub("\ufffd", self.text)
        return self


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "hostname": socket.gethostname(),
    }


@app.post("/segments")
def segments(
    body: SegmentsRequest,
    _: str = Depends(_verify),
):
    builder = BUILDERS[body.builder]
    content_hash = hashlib.sha256(body.text.encode()).hexdigest()[:16]
    log.debug("Parsing %d characters with %s builder", len(body.text), body.builder)

    if body.lines:
        return {"hash": content_hash, "lines": parse_lines(body.text, builder)}

    return {
        "hash": content_hash,
        "segments": [to_run(style, text) for style, text in get_segments(body.text, builder)],
    }


@app.get("/stylesheet", response_class=PlainTextResponse)
async def stylesheet(_: str = Depends(_verify)):
    return ClassNameStyle.stylesheet()


def serve(host: str = HOST, port: int = PORT) -> None:
    import uvicorn

    check_token()
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    serve()
