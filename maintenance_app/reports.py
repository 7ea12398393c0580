# maintenance_app/reports.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, Response

from maintenance_app import report_service
from maintenance_app.database import get_conn
from maintenance_app.dependencies import get_current_user
from maintenance_app.pdf_generator import get_pdf_renderer

logger = logging.getLogger(__name__)

router = APIRouter()


def output_format_param(
    output_format: str = Query("pdf", alias="format", pattern="^(pdf|html)$", description="pdf or an html preview"),
):
    return output_format


def report_response(html: str, filename: str, output_format: str, render_pdf):
    if output_format == "html":
        return HTMLResponse(content=html)

    pdf = render_pdf(html)
    logger.info("Rendered %s (%d bytes)", filename, len(pdf))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


# --- Equipment Status Report ---
@router.get("/equipment-status")
def equipment_status_report(
    output_format: str = Depends(output_format_param),
    user=Depends(get_current_user),
    conn=Depends(get_conn),
    render_pdf=Depends(get_pdf_renderer),
):
    html = report_service.build_equipment_status_report(conn)
    return report_response(html, "equipment-status-report.pdf", output_format, render_pdf)


# --- Work Order Summary Report ---
@router.get("/work-order-summary")
def work_order_summary_report(
    status: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    output_format: str = Depends(output_format_param),
    user=Depends(get_current_user),
    conn=Depends(get_conn),
    render_pdf=Depends(get_pdf_renderer),
):
    html = report_service.build_work_order_summary_report(
        conn, status=status, start_date=start_date, end_date=end_date
    )
    return report_response(html, "work-order-summary-report.pdf", output_format, render_pdf)


# --- Technician Workload Report ---
@router.get("/technician-workload")
def technician_workload_report(
    output_format: str = Depends(output_format_param),
    user=Depends(get_current_user),
    conn=Depends(get_conn),
    render_pdf=Depends(get_pdf_renderer),
):
    html = report_service.build_technician_workload_report(conn)
    return report_response(html, "technician-workload-report.pdf", output_format, render_pdf)
