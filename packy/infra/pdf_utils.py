import io
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from packy.logic.ordering.reorder import sort_by_order
from packy.state.selectors import (
    get_effective_bag_id, get_item_quantity, get_packing_progress, get_stage_progress
)
from packy.utilities.dates import get_date_range_string, get_duration_string

_HEADER_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#65b8e0")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTSIZE", (0, 0), (-1, 0), 11),
    ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
]


def _subtitle(document) -> str:
    trip = document.get("trip") or {}
    if not trip.get("departureDate") or not trip.get("returnDate"):
        return ""
    dates = get_date_range_string(trip["departureDate"], trip["returnDate"])
    return f"{dates} ({get_duration_string(trip.get('calculatedDays') or 1)})"


def generate_pdf_for_list(state):
    """Printable checklist: one table of items (Category / Item / Qty / Bag / Packed) and one of stage tasks."""
    document = state.get("currentList") or {}
    trip = document.get("trip") or {}
    days = trip.get("calculatedDays") or 1
    bags = {b.get("id"): b.get("name") for b in document.get("bags") or []}

    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20)
    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"Packing List – {trip.get('name') or 'Untitled trip'}", styles["Title"]),
        Paragraph(_subtitle(document), styles["Normal"]),
        Paragraph(f"Packed: {get_packing_progress(state)}%", styles["Normal"]),
        Spacer(1, 12),
    ]

    data = [["Category", "Item", "Qty", "Bag", "Packed"]]
    for category in document.get("categories") or []:
        items = [i for i in document.get("items") or [] if i.get("categoryId") == category.get("id")]
        for item in sort_by_order(items):
            data.append([
                category.get("name", ""),
                item.get("name", ""),
                str(get_item_quantity(item, days)),
                bags.get(get_effective_bag_id(state, item), "-"),
                "[x]" if item.get("packed") else "[ ]",
            ])
    items_table = Table(data, repeatRows=1)
    items_table.setStyle(TableStyle(_HEADER_STYLE))
    elements.append(items_table)

    stages = sort_by_order(document.get("stages") or [])
    if stages:
        elements.extend([Spacer(1, 16), Paragraph("Preparation", styles["Heading2"])])
        task_rows = [["Stage", "Task", "Done"]]
        for stage in stages:
            for task in sort_by_order(stage.get("tasks") or []):
                task_rows.append([
                    f"{stage.get('name', '')} ({get_stage_progress(state, stage.get('id'))}%)",
                    task.get("description", ""),
                    "[x]" if task.get("completed") else "[ ]",
                ])
        tasks_table = Table(task_rows, repeatRows=1)
        tasks_table.setStyle(TableStyle(_HEADER_STYLE))
        elements.append(tasks_table)

    doc.build(elements)
    return buf.getvalue()
