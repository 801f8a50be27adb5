import asyncio
import json
import logging
import os

import aiofiles
from fastapi import APIRouter, File, HTTPException, UploadFile
from pydantic import BaseModel, Field

from minbar.database import get_async_conn
from minbar.services.cards import CardService
from minbar.services.extraction import ExtractionService
from minbar.services.segments import load_cards
from minbar.services.storage import StorageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["khutbahs"])


# ------------------------------------------------------------------
# Request bodies
# ------------------------------------------------------------------


class KhutbahCreate(BaseModel):
    title: str
    author: str = ""
    topic: str = ""
    content: str = ""


class CardIn(BaseModel):
    section_label: str = ""
    title: str
    bullet_points: list[str] = []
    script: str = ""
    arabic_text: str | None = None
    key_quote: str | None = None
    quote_source: str | None = None
    transition_text: str | None = None
    notes: str | None = None
    time_estimate_seconds: int = Field(default=0, ge=0)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


async def _get_khutbah_or_404(conn, khutbah_id: int) -> dict:
    row = await conn.execute("SELECT * FROM khutbahs WHERE id = ?", (khutbah_id,))
    khutbah = await row.fetchone()
    if not khutbah:
        raise HTTPException(
            status_code=404, detail=f"Khutbah {khutbah_id} not found"
        )
    return dict(khutbah)


async def _replace_cards(conn, khutbah_id: int, cards: list[dict]) -> None:
    """Swap the khutbah's card set for *cards*, numbered in list order."""
    await conn.execute("DELETE FROM khutbah_cards WHERE khutbah_id = ?", (khutbah_id,))
    for number, card in enumerate(cards, start=1):
        await conn.execute(
            """INSERT INTO khutbah_cards
               (khutbah_id, card_number, section_label, title, bullet_points_json,
                script, arabic_text, key_quote, quote_source, transition_text,
                notes, time_estimate_seconds)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                khutbah_id,
                number,
                card.get("section_label", ""),
                card["title"],
                json.dumps(card.get("bullet_points", []), ensure_ascii=False),
                card.get("script", ""),
                card.get("arabic_text") or None,
                card.get("key_quote") or None,
                card.get("quote_source") or None,
                card.get("transition_text") or None,
                card.get("notes") or None,
                max(0, int(card.get("time_estimate_seconds") or 0)),
            ),
        )
    await conn.commit()


# ------------------------------------------------------------------
# Khutbah endpoints
# ------------------------------------------------------------------


@router.post("/khutbahs")
async def create_khutbah(body: KhutbahCreate) -> dict:
    conn = await get_async_conn()
    try:
        cursor = await conn.execute(
            "INSERT INTO khutbahs (title, author, topic, content) VALUES (?, ?, ?, ?)",
            (body.title, body.author, body.topic, body.content),
        )
        await conn.commit()
        return await _get_khutbah_or_404(conn, cursor.lastrowid)
    finally:
        await conn.close()


@router.get("/khutbahs")
async def list_khutbahs(limit: int = 50) -> list[dict]:
    conn = await get_async_conn()
    try:
        rows = await conn.execute(
            "SELECT id, title, author, topic, created_at FROM khutbahs "
            "ORDER BY created_at DESC, id DESC LIMIT ?",
            (limit,),
        )
        return [dict(row) for row in await rows.fetchall()]
    finally:
        await conn.close()


@router.get("/khutbahs/{khutbah_id}")
async def get_khutbah(khutbah_id: int) -> dict:
    conn = await get_async_conn()
    try:
        return await _get_khutbah_or_404(conn, khutbah_id)
    finally:
        await conn.close()


@router.post("/khutbahs/{khutbah_id}/upload")
async def upload_document(khutbah_id: int, file: UploadFile = File(...)) -> dict:
    """Upload a PDF or PPTX sermon, extract its text into the khutbah content."""
    conn = await get_async_conn()
    try:
        await _get_khutbah_or_404(conn, khutbah_id)

        filename = os.path.basename(file.filename or "upload")
        ext = os.path.splitext(filename)[1].lower()
        if ext not in ExtractionService.SUPPORTED:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported file type: {ext}. Use .pdf or .pptx",
            )

        khutbah_dir = StorageService.khutbah_dir(khutbah_id)
        StorageService.ensure_dirs(khutbah_dir)
        saved_path = os.path.join(khutbah_dir, "uploads", filename)
        async with aiofiles.open(saved_path, "wb") as f:
            content = await file.read()
            await f.write(content)

        # Parsing is CPU-bound; offload to thread pool
        try:
            extracted = await asyncio.to_thread(ExtractionService.extract, saved_path)
        except Exception as e:
            logger.error(
                "Text extraction failed for %s: %s: %s", saved_path, type(e).__name__, e
            )
            raise HTTPException(
                status_code=400, detail=f"Could not read document: {e}"
            )

        if not extracted["text"]:
            logger.warning("No text extracted from %s", saved_path)

        await conn.execute(
            "UPDATE khutbahs SET content = ?, source_path = ? WHERE id = ?",
            (extracted["text"], saved_path, khutbah_id),
        )
        await conn.commit()

        return {
            "khutbah_id": khutbah_id,
            "file": filename,
            "pages": len(extracted["pages"]),
            "characters": len(extracted["text"]),
        }
    finally:
        await conn.close()


# ------------------------------------------------------------------
# Card endpoints
# ------------------------------------------------------------------


@router.get("/khutbahs/{khutbah_id}/cards")
async def list_cards(khutbah_id: int) -> list[dict]:
    conn = await get_async_conn()
    try:
        await _get_khutbah_or_404(conn, khutbah_id)
        return [card.to_dict() for card in await load_cards(conn, khutbah_id)]
    finally:
        await conn.close()


@router.put("/khutbahs/{khutbah_id}/cards")
async def replace_cards(khutbah_id: int, cards: list[CardIn]) -> list[dict]:
    """Replace the khutbah's presentation cards.  Order of the list is delivery order."""
    conn = await get_async_conn()
    try:
        await _get_khutbah_or_404(conn, khutbah_id)
        await _replace_cards(conn, khutbah_id, [c.model_dump() for c in cards])
        return [card.to_dict() for card in await load_cards(conn, khutbah_id)]
    finally:
        await conn.close()


@router.post("/khutbahs/{khutbah_id}/cards/generate")
async def generate_cards(khutbah_id: int) -> dict:
    """Generate presentation cards from the khutbah content with Groq."""
    conn = await get_async_conn()
    try:
        khutbah = await _get_khutbah_or_404(conn, khutbah_id)
        if not khutbah["content"].strip():
            raise HTTPException(
                status_code=400,
                detail="Khutbah has no content. Upload a document first.",
            )

        try:
            cards = await CardService().generate_cards(khutbah["content"])
        except Exception as e:
            logger.error(
                "Card generation failed for khutbah %s: %s: %s", khutbah_id, type(e).__name__, e
            )
            raise HTTPException(
                status_code=502, detail=f"Card generation failed: {type(e).__name__}"
            )

        await _replace_cards(conn, khutbah_id, cards)

        khutbah_dir = StorageService.khutbah_dir(khutbah_id)
        StorageService.ensure_dirs(khutbah_dir)
        StorageService.write_json(
            os.path.join(khutbah_dir, "cards", "generated.json"), cards
        )

        return {"khutbah_id": khutbah_id, "cards": len(cards), "status": "generated"}
    finally:
        await conn.close()
