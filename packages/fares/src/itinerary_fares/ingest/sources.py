from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import httpx
import structlog
from itinerary_fares.core.errors import InputDataError, SourceError

from .tabular import ParsedRows, RawRow, parse_alias_rows, parse_fare_rows

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SourceText:
    location: str
    name: str
    text: str


def is_url(location: str) -> bool:
    return location.lower().startswith(("http://", "https://"))


def source_name(location: str) -> str:
    return location.rstrip("/").split("/")[-1].split("?")[0] or location


def make_http_client(
    *,
    timeout_s: float = 10.0,
    user_agent: str = "itinerary-fares/0.1",
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    return httpx.Client(
        timeout=httpx.Timeout(timeout_s),
        follow_redirects=True,
        headers={"User-Agent": user_agent},
        transport=transport,
    )


def _fetch_url(url: str, *, client: httpx.Client) -> str:
    try:
        resp = client.get(url)
    except httpx.HTTPError as e:
        raise SourceError(f"GET {url} failed: {e}") from e
    if resp.status_code != 200:
        raise SourceError(f"HTTP {resp.status_code} for GET {url}")
    return resp.text


def load_source_text(
    location: str | Path,
    *,
    timeout_s: float = 10.0,
    client: httpx.Client | None = None,
) -> SourceText:
    """
    Read a table from a local path or an http(s) URL. One attempt only.
    """
    loc = str(location)
    if is_url(loc):
        if client is not None:
            text = _fetch_url(loc, client=client)
        else:
            with make_http_client(timeout_s=timeout_s) as c:
                text = _fetch_url(loc, client=c)
    else:
        p = Path(loc)
        try:
            text = p.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as e:
            raise InputDataError(
                f"{p} is not UTF-8 text ({e.reason} at byte {e.start}); "
                "re-export the sheet as UTF-8 CSV/TSV"
            ) from e
        except OSError as e:
            raise SourceError(f"cannot read {p}: {e}") from e

    log.debug("source.loaded", location=loc, chars=len(text))
    return SourceText(location=loc, name=source_name(loc), text=text)


def load_fare_rows(
    location: str | Path,
    *,
    timeout_s: float = 10.0,
    client: httpx.Client | None = None,
) -> tuple[SourceText, ParsedRows]:
    src = load_source_text(location, timeout_s=timeout_s, client=client)
    return src, parse_fare_rows(src.text, src.name)


def load_alias_rows(
    location: str | Path | None,
    *,
    timeout_s: float = 10.0,
    client: httpx.Client | None = None,
) -> list[RawRow]:
    """
    The alias sheet is optional: a missing, unreachable, undecodable or HTML
    source yields no rows.
    """
    if not location:
        return []
    try:
        src = load_source_text(location, timeout_s=timeout_s, client=client)
    except SourceError as e:
        log.info("aliases.unavailable", location=str(location), error=str(e))
        return []
    except InputDataError as e:
        log.warning("aliases.unreadable", location=str(location), error=str(e))
        return []
    rows = parse_alias_rows(src.text, src.name)
    if not rows:
        log.warning("aliases.empty", location=src.location)
    return rows
