from datetime import datetime
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from eventplanner.materials import line_total


def build_summary_pdf(day, materials, total, currency='PHP', username=None):
    """
    Render the daily materials receipt as PDF bytes:
      - a title with the day (and owner, when given)
      - one row per merged material with its line total
      - a "Total Cost" row
      - a footer timestamp
    """
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        topMargin=40, bottomMargin=40,
        leftMargin=30, rightMargin=30,
        title=f'Daily Materials {day.isoformat()}',
    )
    styles = getSampleStyleSheet()
    flowables = []

    flowables.append(Paragraph('<b>Daily Materials</b>', styles['Title']))
    flowables.append(Paragraph(f'Date: {day.strftime("%m/%d/%Y")}', styles['Normal']))
    if username:
        flowables.append(Paragraph(f'Prepared for: {escape(username)}', styles['Normal']))
    flowables.append(Spacer(1, 12))

    if not materials:
        flowables.append(Paragraph('No Materials', styles['Normal']))
    else:
        table_data = [['Material', 'Quantity', 'Unit Cost', 'Amount']]
        for item in materials:
            table_data.append([
                str(item.get('materialName', '')),
                str(item.get('quantity', '')),
                f'{currency} {float(item.get("cost") or 0):.2f}',
                f'{currency} {line_total(item):.2f}',
            ])
        table_data.append(['', '', 'Total Cost:', f'{currency} {total:.2f}'])

        data_table = Table(table_data, colWidths=[200, 70, 110, 110], hAlign='LEFT', repeatRows=1)
        data_table.setStyle(TableStyle([
            ('BOX', (0, 0), (-1, -1), 1, colors.black),
            ('INNERGRID', (0, 0), (-1, -2), 0.5, colors.grey),
            ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
            ('ALIGN', (1, 1), (-1, -1), 'RIGHT'),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
        ]))
        flowables.append(data_table)

    flowables.append(Spacer(1, 12))
    flowables.append(HRFlowable(width='100%', color=colors.black, thickness=1))
    flowables.append(Spacer(1, 6))
    flowables.append(Paragraph(datetime.now().strftime('Receipt Generated: %d/%m/%Y %H:%M:%S'),
                               styles['Normal']))

    doc.build(flowables)
    return buf.getvalue()
