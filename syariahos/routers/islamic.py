"""Quran and Hadith reference router (cached upstream proxy)."""

from fastapi import APIRouter, Depends

from syariahos.core.deps import get_current_user
from syariahos.services import islamic_source_service

router = APIRouter(
    prefix="/islamic", tags=["Islamic Sources"], dependencies=[Depends(get_current_user)]
)


@router.get("/surahs")
async def list_surahs():
    return {"data": await islamic_source_service.get_surahs()}


@router.get("/surahs/{surah_number}")
async def get_surah(surah_number: int):
    return {"data": await islamic_source_service.get_surah(surah_number)}


@router.get("/surahs/{surah_number}/verses/{verse_number}")
async def get_verse(surah_number: int, verse_number: int):
    return {"data": await islamic_source_service.get_verse(surah_number, verse_number)}


@router.get("/hadith-books")
async def list_hadith_books():
    return {"data": await islamic_source_service.get_hadith_books()}


@router.get("/hadith/{book}/{number}")
async def get_hadith(book: str, number: int):
    """Unknown book names are rejected before any upstream request."""
    return {"data": await islamic_source_service.get_hadith(book, number)}
