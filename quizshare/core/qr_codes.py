"""QR code strategies for share links.

``ScannableQrEncoder`` produces a real code through the ``qrcode`` package.
``PlaceholderQrEncoder`` reproduces the cosmetic grid of the early web client:
a 20x20 pattern picked by a 32-bit string hash, plus three corner markers.
It cannot be scanned and has no image output.
"""

from __future__ import annotations

from io import BytesIO
from typing import Protocol

import qrcode
import qrcode.constants
import qrcode.image.svg

from quizshare.constants.storage_constants import (
    PLACEHOLDER_GRID_SIZE,
    QR_STRATEGY_PLACEHOLDER,
    QR_STRATEGY_SCANNABLE,
)

ModuleMatrix = list[list[bool]]


class QrEncoder(Protocol):
    name: str

    def encode(self, text: str) -> ModuleMatrix: ...

    def render_svg(self, text: str) -> bytes | None: ...


class ScannableQrEncoder:
    name = QR_STRATEGY_SCANNABLE

    def __init__(self, box_size: int = 10, border: int = 4) -> None:
        self._box_size = box_size
        self._border = border

    def _build(self, text: str) -> qrcode.QRCode:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=self._box_size,
            border=self._border,
        )
        qr.add_data(text)
        qr.make(fit=True)
        return qr

    def encode(self, text: str) -> ModuleMatrix:
        return [list(row) for row in self._build(text).get_matrix()]

    def render_svg(self, text: str) -> bytes:
        image = self._build(text).make_image(image_factory=qrcode.image.svg.SvgPathImage)
        buffer = BytesIO()
        image.save(buffer)
        return buffer.getvalue()


def string_hash(text: str) -> int:
    """Signed 32-bit ``hash * 31 + code unit`` over the characters of ``text``.

    Each character contributes its first UTF-16 code unit, so a character
    outside the BMP adds only its high surrogate.
    """
    value = 0
    for char in text:
        code_unit = int.from_bytes(char.encode("utf-16-le")[:2], "little")
        value = ((value << 5) - value + code_unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


class PlaceholderQrEncoder:
    name = QR_STRATEGY_PLACEHOLDER

    def __init__(self, grid_size: int = PLACEHOLDER_GRID_SIZE) -> None:
        if grid_size < 7:
            raise ValueError("Placeholder grid must be at least 7 cells wide.")
        self._grid_size = grid_size

    def encode(self, text: str) -> ModuleMatrix:
        size = self._grid_size
        offset = abs(string_hash(text))
        grid = [[(row + col + offset) % 3 == 0 for col in range(size)] for row in range(size)]
        last = size - 3
        for top, left in ((0, 0), (0, last), (last, 0)):
            for row in range(top, top + 3):
                for col in range(left, left + 3):
                    grid[row][col] = True
            grid[top + 1][left + 1] = False
        return grid

    def render_svg(self, text: str) -> None:
        return None


def create_qr_encoder(strategy: str) -> QrEncoder:
    if strategy == QR_STRATEGY_SCANNABLE:
        return ScannableQrEncoder()
    if strategy == QR_STRATEGY_PLACEHOLDER:
        return PlaceholderQrEncoder()
    raise ValueError(f"Unknown QR strategy '{strategy}'.")
