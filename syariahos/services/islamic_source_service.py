"""Quran and Hadith reference proxy with a 24h read-through cache.

Upstream 404s become NotFoundError; any other failure becomes
UpstreamServiceError. Only successful responses are cached.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from syariahos.core import cache
from syariahos.core.config import settings
from syariahos.core.errors import NotFoundError, UpstreamServiceError
from syariahos.db.enums import HADITH_BOOKS, SourceType
from syariahos.services import http_client

logger = logging.getLogger(__name__)

SURAH_COUNT = 114
UNAVAILABLE = "Reference service is temporarily unavailable"


async def _fetch_json(url: str, not_found_message: str) -> Any:
    try:
        async with http_client.create_client(settings.REFERENCE_TIMEOUT) as client:
            response = await client.get(url)
    except httpx.RequestError as exc:
        logger.warning("Reference API connection error: %s", type(exc).__name__)
        raise UpstreamServiceError(UNAVAILABLE) from exc

    if response.status_code == 404:
        raise NotFoundError(not_found_message)
    if not response.is_success:
        logger.warning("Reference API error: status=%s", response.status_code)
        raise UpstreamServiceError(UNAVAILABLE)
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamServiceError(UNAVAILABLE) from exc


def _validate_surah_number(surah_number: int) -> None:
    if not 1 <= surah_number <= SURAH_COUNT:
        raise NotFoundError("Surah not found")


def is_valid_hadith_book(book: str) -> bool:
    return book in HADITH_BOOKS


async def get_surahs() -> list[dict[str, Any]]:
    async def load():
        data = await _fetch_json(f"{settings.QURAN_API_URL}/surat", "Surah list not found")
        return data.get("data") or []

    return await cache.remember("quran_surahs", settings.REFERENCE_CACHE_SECONDS, load)


async def get_surah(surah_number: int) -> dict[str, Any]:
    """Full surah including its ayat."""
    _validate_surah_number(surah_number)

    async def load():
        data = await _fetch_json(
            f"{settings.QURAN_API_URL}/surat/{surah_number}", "Surah not found"
        )
        surah = data.get("data")
        if not surah:
            raise NotFoundError("Surah not found")
        return surah

    return await cache.remember(
        f"quran_surah_{surah_number}", settings.REFERENCE_CACHE_SECONDS, load
    )


async def get_verse(surah_number: int, verse_number: int) -> dict[str, Any]:
    surah = await get_surah(surah_number)
    for verse in surah.get("ayat") or []:
        if verse.get("nomorAyat") == verse_number:
            return {
                "surah_number": surah_number,
                "surah_name": surah.get("namaLatin") or surah.get("nama") or "",
                "surah_name_arabic": surah.get("nama") or "",
                "verse_number": verse_number,
                "arabic": verse.get("teksArab") or "",
                "translation": verse.get("teksIndonesia") or "",
            }
    raise NotFoundError("Verse not found")


async def get_hadith_books() -> list[dict[str, Any]]:
    async def load():
        data = await _fetch_json(f"{settings.HADITH_API_URL}/books", "Hadith books not found")
        return data.get("data") or []

    return await cache.remember("hadith_books", settings.REFERENCE_CACHE_SECONDS, load)


async def get_hadith(book: str, number: int) -> dict[str, Any]:
    """
    Fetch one hadith.

    The book name is checked against a fixed whitelist before any request
    is built, so arbitrary upstream paths are never reached.
    """
    if not is_valid_hadith_book(book):
        raise NotFoundError("Hadith book not found")
    if number < 1:
        raise NotFoundError("Hadith not found")

    async def load():
        data = await _fetch_json(
            f"{settings.HADITH_API_URL}/books/{book}/{number}", "Hadith not found"
        )
        payload = data.get("data") or {}
        contents = payload.get("contents") or {}
        if not contents:
            raise NotFoundError("Hadith not found")
        return {
            "book": book,
            "book_name": payload.get("name") or book.capitalize(),
            "number": contents.get("number", number),
            "arabic": contents.get("arab") or "",
            "translation": contents.get("id") or "",
        }

    return await cache.remember(
        f"hadith_{book}_{number}", settings.REFERENCE_CACHE_SECONDS, load
    )


async def resolve_source(source: dict[str, Any]) -> dict[str, Any]:
    """
    Expand a tool citation into displayable text.

    A citation that cannot be resolved keeps only its type.
    """
    source_type = source.get("type")
    resolved: dict[str, Any] = {"type": source_type}

    try:
        if source_type == SourceType.QURAN.value and source.get("surah") and source.get("verse"):
            resolved.update(await get_verse(int(source["surah"]), int(source["verse"])))
        elif source_type == SourceType.HADITH.value and source.get("book") and source.get("number"):
            resolved.update(await get_hadith(str(source["book"]), int(source["number"])))
        elif source_type == SourceType.WEBSITE.value:
            resolved["title"] = source.get("title") or ""
            resolved["url"] = source.get("url") or ""
    except NotFoundError:
        logger.info("Citation could not be resolved: type=%s", source_type)

    return resolved


async def resolve_sources(sources: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [await resolve_source(source) for source in sources]
