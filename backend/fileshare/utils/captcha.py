import base64
import hashlib
import random
import threading
from datetime import datetime, timedelta
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFilter

from fileshare.core.config import settings

CAPTCHA_ALPHABET = "23456789ABCDEFGHJKLMNPQRSTUVWXYZ"


# Simple in-memory storage for challenges (single process only)
class VerificationStore:
    _store = {}
    _lock = threading.Lock()

    @staticmethod
    def _is_expired(entry: dict, now: datetime) -> bool:
        return now - entry["timestamp"] > timedelta(seconds=entry["expires_in"])

    @classmethod
    def add(cls, v_id: str, code: str, expires_in: Optional[int] = None) -> None:
        now = datetime.utcnow()
        with cls._lock:
            # Unanswered challenges are dropped here once they expire
            for stale_id in [k for k, v in cls._store.items() if cls._is_expired(v, now)]:
                del cls._store[stale_id]
            cls._store[v_id] = {
                "code": code,
                "verified": False,
                "timestamp": now,
                "expires_in": expires_in or settings.CAPTCHA_EXPIRE_SECONDS,
            }

    @classmethod
    def get(cls, v_id: str) -> Optional[dict]:
        with cls._lock:
            entry = cls._store.get(v_id)
            if entry is None:
                return None
            if cls._is_expired(entry, datetime.utcnow()):
                del cls._store[v_id]
                return None
            return entry

    @classmethod
    def delete(cls, v_id: str) -> None:
        with cls._lock:
            cls._store.pop(v_id, None)

    @classmethod
    def clear(cls) -> None:
        with cls._lock:
            cls._store.clear()

    @classmethod
    def verify(cls, v_id: str, code: str) -> bool:
        entry = cls.get(v_id)
        if not entry or entry["code"].upper() != code.strip().upper():
            return False
        entry["verified"] = True
        return True

    @classmethod
    def is_verified(cls, v_id: str) -> bool:
        entry = cls.get(v_id)
        return bool(entry and entry["verified"])


def generate_server_sign(v_id: str, timestamp: int, nonce: str) -> str:
    raw = f"{v_id}{timestamp}{nonce}{settings.CAPTCHA_SALT}"
    return hashlib.sha256(raw.encode()).hexdigest()

BACKGROUND = (250, 250, 250)


def _draw_glyph(char: str, size: int) -> Image.Image:
    """Render one character on a transparent tile, tilted at random."""
    tile = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    color = (random.randint(0, 100), random.randint(0, 100), random.randint(150, 255), 255)
    ImageDraw.Draw(tile).text((size // 4, size // 8), char, fill=color, font_size=int(size * 0.6))
    return tile.rotate(random.uniform(-25, 25), resample=Image.Resampling.BICUBIC)


def generate_captcha_image(length: Optional[int] = None) -> Tuple[str, str]:
    """Return the challenge code and a base64 PNG showing it."""
    length = length or settings.CAPTCHA_LENGTH
    width, height = settings.CAPTCHA_WIDTH, settings.CAPTCHA_HEIGHT
    code = "".join(random.choice(CAPTCHA_ALPHABET) for _ in range(length))

    img = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(img)
    for _ in range(width * height // 100):
        draw.point((random.randrange(width), random.randrange(height)), fill=(180, 180, 180))

    slot = width // (length + 1)
    glyph_size = min(height, slot * 2)
    for i, char in enumerate(code):
        glyph = _draw_glyph(char, glyph_size)
        x = slot // 2 + i * slot + random.randint(-2, 2)
        y = (height - glyph_size) // 2 + random.randint(-3, 3)
        img.paste(glyph, (x, y), glyph)

    # strike-through curves over the text
    for _ in range(2):
        points = [(x, random.randint(height // 4, height * 3 // 4)) for x in range(0, width + slot, slot)]
        draw.line(points, fill=(150, 150, 200), width=1)

    buf = BytesIO()
    img.filter(ImageFilter.SMOOTH).save(buf, format="PNG")
    return code, base64.b64encode(buf.getvalue()).decode()
