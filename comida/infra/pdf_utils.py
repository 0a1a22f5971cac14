import io
from xml.sax.saxutils import escape
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from comida.domain.Menu import MenuPlan, sorted_days
from comida.logic.planning.dates import format_date_range, format_display_date


def _cell(meal, style):
    if meal is None:
        return "-"
    return Paragraph(f"<b>{escape(meal.name)}</b><br/><font size=8 color='#6b7280'>{escape(meal.category)}</font>", style)


def generate_pdf_for_menu(plan: MenuPlan) -> bytes:
    """PDF table: Día / Desayuno / Comida / Cena for every day of the plan.
    The breakfast column only appears when some day has one."""
    days = sorted_days(plan)
    if not days:
        raise ValueError("Cannot export an empty menu")
    with_breakfast = any(plan[d].breakfast is not None for d in days)

    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20,
        title="Tu Menú Personalizado",
    )

    styles = getSampleStyleSheet()
    body = styles["BodyText"]
    elements = [
        Paragraph("Tu Menú Personalizado", styles["Title"]),
        Paragraph(format_date_range(days[0], days[-1]).capitalize(), styles["Normal"]),
        Spacer(1, 16),
    ]

    header = ["Día"] + (["Desayuno"] if with_breakfast else []) + ["Comida", "Cena"]
    data = [header]
    for day in days:
        meals = plan[day]
        row = [Paragraph(format_display_date(day).capitalize(), body)]
        if with_breakfast:
            row.append(_cell(meals.breakfast, body))
        row += [_cell(meals.lunch, body), _cell(meals.dinner, body)]
        data.append(row)

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4F46E5")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 12),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 10),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()
