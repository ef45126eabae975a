from __future__ import annotations

from io import BytesIO

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

CHRISTMAS_PACK_FILENAME = "saltaire-christmas-mini-plan.pdf"

_CHRISTMAS_PACK_LINES = (
    "Thanks for supporting Saltaire Guide.",
    "Your full PDF pack will be uploaded here shortly.",
    "If you need it emailed manually, reply to your receipt email.",
)


def render_christmas_pack_pdf() -> bytes:
    # Placeholder until the finished pack is uploaded.
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle("Saltaire Guide Christmas Mini Plan")
    pdf.setFont("Helvetica", 16)
    pdf.drawString(50, 780, "Saltaire Guide: Christmas Mini Plan (Placeholder)")
    pdf.setFont("Helvetica", 12)
    y = 750
    for line in _CHRISTMAS_PACK_LINES:
        pdf.drawString(50, y, line)
        y -= 20
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
