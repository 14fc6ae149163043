"""Answer selection: wrap a stored answer or fall back to a canned reply.

When no corpus entry clears the confidence floor the responder picks a
canned reply from the query's intent category. Within a category the
phrasing is chosen by query length (longer questions get the more
detailed variant), which keeps output deterministic.

Stored answers are polished per category before they are returned:

- price_inquiry: bare amounts get an "Rp" prefix
- payment: a safety note is appended
- greeting, goodbye: the answer ends with an exclamation

Every answer then ends with sentence punctuation.
"""

from __future__ import annotations

import re
from types import MappingProxyType

from tanya.search.types import RankedMatch

GENERIC = "generic"

FALLBACK_RESPONSES = MappingProxyType({
    "greeting": (
        "Halo! Ada yang bisa saya bantu?",
        "Halo, selamat datang! Silakan sampaikan pertanyaan Anda.",
        "Halo! Terima kasih sudah menghubungi kami. Ceritakan apa yang Anda butuhkan dan saya bantu carikan jawabannya.",
    ),
    "price_inquiry": (
        "Harga tergantung produk yang dipilih. Produk mana yang Anda maksud?",
        "Untuk info harga, mohon sebutkan nama produk atau paket yang Anda minati.",
        "Harga setiap paket berbeda sesuai durasi dan fitur. Sebutkan produk dan durasi yang Anda inginkan, nanti saya cek harganya.",
    ),
    "available": (
        "Produk mana yang ingin Anda cek ketersediaannya?",
        "Saya bisa cek stoknya. Mohon sebutkan nama produknya.",
        "Ketersediaan bisa berubah sewaktu-waktu. Sebutkan produk dan jumlah yang Anda butuhkan supaya saya bisa cek stok terbaru.",
    ),
    "payment": (
        "Kami menerima transfer bank dan e-wallet.",
        "Pembayaran bisa lewat transfer bank, DANA, OVO, atau GoPay.",
        "Pembayaran bisa lewat transfer bank maupun e-wallet seperti DANA, OVO, dan GoPay. Metode mana yang ingin Anda gunakan?",
    ),
    "help": (
        "Tentu, apa yang bisa saya bantu?",
        "Saya siap membantu. Bisa dijelaskan kendalanya?",
        "Saya siap membantu. Mohon jelaskan kendala Anda sedetail mungkin, termasuk produk dan langkah yang sudah dicoba.",
    ),
    "goodbye": (
        "Sama-sama, sampai jumpa!",
        "Terima kasih kembali! Semoga harinya menyenangkan.",
        "Terima kasih sudah menghubungi kami. Jangan ragu kembali kalau ada pertanyaan lain!",
    ),
    GENERIC: (
        "Maaf, saya belum menemukan jawabannya. Bisa diperjelas pertanyaannya?",
        "Maaf, saya belum yakin maksud Anda. Bisa dijelaskan dengan kata lain?",
        "Maaf, saya belum menemukan jawaban yang pas. Coba jelaskan lebih rinci produk atau masalah yang Anda maksud.",
    ),
})

INTENT_CATEGORIES = MappingProxyType({
    "greeting": "greeting",
    "price_inquiry": "price_inquiry",
    "available": "available",
    "payment": "payment",
    "help": "help",
    "goodbye": "goodbye",
})

# (minimum confidence, lead-in) checked top-down.
CONFIDENCE_LEADS = (
    (0.8, ""),
    (0.6, "Baik, "),
    (0.4, "Berdasarkan pertanyaan serupa, "),
    (0.0, "Mungkin ini yang Anda maksud: "),
)


PAYMENT_ASSURANCE = "Semua transaksi dijamin aman dan terpercaya."

# Bare amounts such as 50000 or 50.000; small counts ("3 bulan") are left alone.
_AMOUNT = re.compile(r"(?<![\w.])(?<!Rp )(\d{1,3}(?:\.\d{3})+|\d{4,})(?!\w)(?!\.\d)")
_ANDA = re.compile(r"\banda\b", re.IGNORECASE)
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([.,!?])")
_WHITESPACE = re.compile(r"\s+")


def _exclaim(text: str) -> str:
    return text.rstrip(".") + "!"


def _close(text: str) -> str:
    return text if not text or text[-1] in ".!?" else text + "."


def refine(text: str, category: str | None) -> str:
    """Category polish plus spacing, ``Anda`` capitalization and a closing stop."""
    if category == "greeting" and "!" not in text and "?" not in text:
        text = _exclaim(text)
    elif category == "goodbye" and "!" not in text:
        text = _exclaim(text)
    elif category == "price_inquiry" and ("harga" in text.lower() or "biaya" in text.lower()):
        text = _AMOUNT.sub(r"Rp \1", text)
    elif category == "payment" and "pembayaran" in text.lower() and "aman" not in text.lower():
        text = f"{_close(text.rstrip())} {PAYMENT_ASSURANCE}"

    text = _ANDA.sub("Anda", text)
    text = _SPACE_BEFORE_PUNCT.sub(r"\1", _WHITESPACE.sub(" ", text)).strip()
    return _close(text)


def fallback_category(intent: str) -> str:
    return INTENT_CATEGORIES.get(intent, GENERIC)


def phrasing_index(word_count: int) -> int:
    if word_count > 10:
        return 2
    if word_count > 5:
        return 1
    return 0


class FallbackResponder:
    """Builds the user-facing answer text for a scored query."""

    def fallback(self, intent: str, word_count: int) -> tuple[str, str]:
        """Return ``(category, text)`` for a query without a reliable match."""
        category = fallback_category(intent)
        return category, FALLBACK_RESPONSES[category][phrasing_index(word_count)]

    def wrap(self, match: RankedMatch, confidence: float, category: str | None = None) -> str:
        """Stored answer of ``match`` prefixed according to ``confidence`` and refined for ``category``."""
        text = match.entry.answer_text.strip()
        for minimum, lead in CONFIDENCE_LEADS:
            if confidence > minimum or minimum == 0.0:
                if lead:
                    text = lead + text[:1].lower() + text[1:] if text else lead.strip()
                break
        return refine(text, category)
