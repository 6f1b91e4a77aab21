"""
Typed signatures rendered to PNG data URLs.
"""
from __future__ import annotations

import io

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from domain.contracts import png_data_url


def typed_signature_png(text: str, width: float = 4.0, height: float = 1.2) -> bytes:
    fig = plt.figure(figsize=(width, height), dpi=100)
    fig.patch.set_alpha(0.0)
    fig.text(0.5, 0.5, text, ha="center", va="center", fontsize=28,
             fontstyle="italic", family="serif", color="#0d1b2a")
    buf = io.BytesIO()
    fig.savefig(buf, format="png", transparent=True)
    plt.close(fig)
    return buf.getvalue()


def typed_signature_data_url(text: str) -> str:
    if not text or not text.strip():
        raise ValueError("Type your name to create a signature")
    return png_data_url(typed_signature_png(text.strip()))
