from pathlib import Path

import fitz  # PyMuPDF
from pptx import Presentation


class ExtractionService:
    """Pull plain sermon text out of uploaded PDF and PPTX documents."""

    SUPPORTED = (".pdf", ".pptx")

    @staticmethod
    def extract(file_path: str) -> dict:
        """Dispatch to the correct extractor based on file extension.

        Returns::

            {
                "text": str,                          # pages joined by blank lines
                "pages": [{"page": int, "text": str}, ...],
            }
        """
        ext = Path(file_path).suffix.lower()
        if ext == ".pdf":
            pages = ExtractionService._pdf_pages(file_path)
        elif ext == ".pptx":
            pages = ExtractionService._pptx_pages(file_path)
        else:
            raise ValueError(f"Unsupported document format: {ext}")

        text = "\n\n".join(p["text"] for p in pages if p["text"])
        return {"text": text, "pages": pages}

    # ------------------------------------------------------------------
    # PDF
    # ------------------------------------------------------------------
    @staticmethod
    def _pdf_pages(file_path: str) -> list[dict]:
        doc = fitz.open(file_path)
        try:
            return [
                {"page": page_idx + 1, "text": doc[page_idx].get_text().strip()}
                for page_idx in range(len(doc))
            ]
        finally:
            doc.close()

    # ------------------------------------------------------------------
    # PPTX
    # ------------------------------------------------------------------
    @staticmethod
    def _pptx_pages(file_path: str) -> list[dict]:
        prs = Presentation(file_path)
        pages: list[dict] = []
        for slide_idx, slide in enumerate(prs.slides):
            texts: list[str] = []
            for shape in slide.shapes:
                if not shape.has_text_frame:
                    continue
                frame_text = shape.text_frame.text.strip()
                if frame_text:
                    texts.append(frame_text)
            # Speaker notes often hold the actual script
            if slide.has_notes_slide:
                notes = slide.notes_slide.notes_text_frame.text.strip()
                if notes:
                    texts.append(notes)
            pages.append({"page": slide_idx + 1, "text": "\n".join(texts)})
        return pages
