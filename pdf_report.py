"""
pdf_report.py
=============
Printable birth chart data report.
Renders the document produced by BirthChart.to_dict() as ReportLab tables.
"""

import io
from datetime import datetime

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import (HRFlowable, Paragraph, SimpleDocTemplate,
                                Spacer, Table, TableStyle)

# ── Color palette ──────────────────────────────────────────────
VOID      = HexColor("#0B0B0F")
GOLD      = HexColor("#C9A96E")
SURFACE   = HexColor("#1E1C28")
MUTED     = HexColor("#6E6A7C")
LIGHT     = HexColor("#FAFAFA")
RULE      = HexColor("#DDDDDD")
WHITE     = HexColor("#FFFFFF")

_styles = getSampleStyleSheet()

TITLE = ParagraphStyle("Title", parent=_styles["Normal"], fontSize=26,
                       fontName="Helvetica", textColor=VOID,
                       alignment=TA_CENTER, spaceAfter=6)
SUBTITLE = ParagraphStyle("Subtitle", parent=_styles["Normal"], fontSize=11,
                          fontName="Helvetica", textColor=MUTED,
                          alignment=TA_CENTER, spaceAfter=20)
SECTION = ParagraphStyle("Section", parent=_styles["Normal"], fontSize=11,
                         fontName="Helvetica-Bold", textColor=VOID,
                         spaceBefore=10, spaceAfter=6)
BAR = ParagraphStyle("Bar", parent=_styles["Normal"], fontSize=11,
                     fontName="Helvetica-Bold", textColor=WHITE, alignment=TA_LEFT)
BODY = ParagraphStyle("Body", parent=_styles["Normal"], fontSize=9,
                      fontName="Helvetica", textColor=VOID, leading=14)
FOOTER = ParagraphStyle("Footer", parent=_styles["Normal"], fontSize=7,
                        fontName="Helvetica-Oblique", textColor=MUTED,
                        alignment=TA_CENTER, spaceBefore=20)


def _bar(text: str) -> Table:
    return Table([[Paragraph(text, BAR)]], colWidths=[17*cm], style=TableStyle([
        ("BACKGROUND",    (0,0), (-1,-1), VOID),
        ("TOPPADDING",    (0,0), (-1,-1), 8),
        ("BOTTOMPADDING", (0,0), (-1,-1), 8),
        ("LEFTPADDING",   (0,0), (-1,-1), 12),
    ]))


def _grid(rows, widths, header: bool = True) -> Table:
    table = Table(rows, colWidths=[w*cm for w in widths])
    style = [
        ("FONTNAME",       (0,0), (-1,-1), "Helvetica"),
        ("FONTSIZE",       (0,0), (-1,-1), 8.5),
        ("GRID",           (0,0), (-1,-1), 0.3, RULE),
        ("TOPPADDING",     (0,0), (-1,-1), 4),
        ("BOTTOMPADDING",  (0,0), (-1,-1), 4),
        ("LEFTPADDING",    (0,0), (-1,-1), 6),
    ]
    if header:
        style += [
            ("FONTNAME",       (0,0), (-1,0), "Helvetica-Bold"),
            ("BACKGROUND",     (0,0), (-1,0), SURFACE),
            ("TEXTCOLOR",      (0,0), (-1,0), GOLD),
            ("ROWBACKGROUNDS", (0,1), (-1,-1), [LIGHT, WHITE]),
        ]
    else:
        style += [
            ("FONTNAME",       (0,0), (0,-1), "Helvetica-Bold"),
            ("FONTNAME",       (2,0), (2,-1), "Helvetica-Bold"),
            ("TEXTCOLOR",      (0,0), (0,-1), MUTED),
            ("TEXTCOLOR",      (2,0), (2,-1), MUTED),
            ("ROWBACKGROUNDS", (0,0), (-1,-1), [LIGHT, WHITE]),
        ]
    table.setStyle(TableStyle(style))
    return table


def format_degree(d: dict) -> str:
    if not d:
        return "—"
    return f"{d.get('degrees', 0)}°{d.get('minutes', 0):02d}'{d.get('seconds', 0):02d}\""


def _details(chart: dict, name: str):
    meta = chart.get("meta", {})
    inp = meta.get("input", {})
    asc = chart.get("ascendant", {})
    moon = chart.get("planets", {}).get("Moon", {})
    zone = inp.get("timezone") or f"UTC{(inp.get('utc_offset') or 0):+.2f}"
    rows = [
        ["Name", name, "Date", inp.get("date", "—")],
        ["Ascendant", f"{asc.get('sign', '—')} {format_degree(asc.get('degree'))}",
         "Time", inp.get("time", "—")],
        ["Moon", f"{moon.get('sign', '—')} · {moon.get('nakshatra', '—')} "
                 f"(Pada {moon.get('nakshatra_pada', '—')})", "Zone", zone],
        ["Ayanamsa", f"{inp.get('ayanamsa', '—').replace('_', ' ').title()} "
                     f"({meta.get('ayanamsa', '—')}°)",
         "Latitude", str(inp.get("latitude", "—"))],
        ["House System", inp.get("house_system", "—").replace("_", " ").title(),
         "Longitude", str(inp.get("longitude", "—"))],
        ["UTC", meta.get("utc", "—"), "Julian Day", str(meta.get("julian_day_ut", "—"))],
    ]
    out = [_bar("BIRTH DETAILS"), Spacer(1, 0.3*cm), _grid(rows, [3.5, 6, 2.5, 5], header=False)]
    if meta.get("houses_degraded"):
        out += [Spacer(1, 0.2*cm), Paragraph(
            f"<b>Note:</b> house cusps are approximate equal houses "
            f"({meta.get('degraded_reason') or 'house system unavailable'}).", BODY)]
    return out


def _planets(chart: dict):
    rows = [["Planet", "Sign", "Degree", "Nakshatra", "Pada", "House", "Lord", "Flags"]]
    for pname, p in chart.get("planets", {}).items():
        flags = []
        if p.get("is_retrograde"):
            flags.append("R")
        if p.get("is_exalted"):
            flags.append("Ex")
        if p.get("is_debilitated"):
            flags.append("Db")
        rows.append([pname, p.get("sign", "—"), format_degree(p.get("degree")),
                     p.get("nakshatra", "—"), str(p.get("nakshatra_pada", "—")),
                     str(p.get("house", "—")), p.get("dispositor", "—"), " ".join(flags)])
    return [_bar("PLANETARY POSITIONS  (Sidereal)"), Spacer(1, 0.3*cm),
            _grid(rows, [2.2, 2.4, 2.2, 3.4, 1.1, 1.2, 2.1, 2.4])]


def _houses(chart: dict):
    rows = [["House", "Sign", "Cusp", "Ruler", "Planets"]]
    for h in chart.get("houses", []):
        rows.append([str(h.get("house")), h.get("sign", "—"), format_degree(h.get("degree")),
                     h.get("ruler", "—"), ", ".join(h.get("planets", [])) or "—"])
    return [_bar("HOUSES"), Spacer(1, 0.3*cm), _grid(rows, [1.5, 3, 2.5, 2.5, 7.5])]


def _lunar(chart: dict):
    lunar = chart.get("lunar_calendar")
    if not lunar:
        return []
    rows = [
        ["Tithi", f"{lunar.get('tithi')} · {lunar.get('tithi_name', '—')}",
         "Paksha", lunar.get("paksha", "—")],
        ["Yoga", lunar.get("yoga", "—"), "Karana", lunar.get("karana", "—")],
    ]
    return [_bar("LUNAR CALENDAR"), Spacer(1, 0.3*cm), _grid(rows, [3.5, 5, 3.5, 5], header=False)]


def _dasha(chart: dict):
    dasha = chart.get("dasha")
    if not dasha:
        return []
    out = [_bar("VIMSHOTTARI DASHA TIMELINE"), Spacer(1, 0.3*cm)]
    current = dasha.get("current")
    if current:
        maha = current["maha_dasha"]
        out.append(Paragraph(f"<b>Active Maha Dasha:</b> {maha['lord']} "
                             f"({maha['start'][:10]} to {maha['end'][:10]})", BODY))
        if current.get("antardasha"):
            sub = current["antardasha"]
            out.append(Paragraph(f"<b>Antardasha:</b> {sub['lord']} "
                                 f"({sub['start'][:10]} to {sub['end'][:10]})", BODY))
        out.append(Spacer(1, 0.2*cm))
    rows = [["Maha Dasha Lord", "Start", "End", "Years"]]
    rows += [[p.get("lord", "—"), p.get("start", "—")[:10], p.get("end", "—")[:10],
              f"{p.get('duration_years', 0):.2f}"] for p in dasha.get("periods", [])]
    out.append(_grid(rows, [5, 4, 4, 4]))
    return out


def _divisional(chart: dict):
    charts = chart.get("divisional_charts", {})
    if not charts:
        return []
    out = [_bar("DIVISIONAL CHARTS")]
    for div_name, div in charts.items():
        out.append(Paragraph(f"{div_name} · {div.get('label', '')}", SECTION))
        asc = div.get("ascendant", {})
        rows = [["Point", "Sign", "Degree", "House"],
                ["Ascendant", asc.get("sign", "—"), format_degree(asc.get("degree")),
                 str(asc.get("house", "—"))]]
        rows += [[p, d.get("sign", "—"), format_degree(d.get("degree")), str(d.get("house", "—"))]
                 for p, d in div.get("planets", {}).items()]
        out.append(_grid(rows, [4.5, 4.5, 4, 4]))
    return out


def generate_pdf_report(chart: dict, name: str = "Native") -> bytes:
    """
    Generate a birth chart data PDF.
    Returns PDF as bytes.
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=A4,
        rightMargin=2*cm, leftMargin=2*cm, topMargin=2*cm, bottomMargin=2*cm,
        title=f"Birth Chart — {name}",
        author="Jataka Engine",
    )

    story = [
        Paragraph("JATAKA", TITLE),
        Paragraph("Sidereal Birth Chart", SUBTITLE),
        HRFlowable(width="100%", thickness=0.5, color=GOLD),
        Spacer(1, 0.4*cm),
    ]
    for section in (_details, _planets, _houses, _lunar, _dasha, _divisional):
        flowables = section(chart) if section is not _details else section(chart, name)
        if flowables:
            story += flowables
            story.append(Spacer(1, 0.5*cm))

    story.append(HRFlowable(width="100%", thickness=0.5, color=GOLD))
    story.append(Paragraph(
        f"Generated by Jataka Engine · {datetime.now().strftime('%d %B %Y')} · "
        "positions from low-precision analytic series unless Swiss Ephemeris is configured",
        FOOTER,
    ))

    doc.build(story)
    buffer.seek(0)
    return buffer.read()
