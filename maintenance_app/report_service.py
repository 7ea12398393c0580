# maintenance_app/report_service.py
"""
Report assembly: fetch current data through the services, project it into
the Jinja2 templates under templates/ and hand back HTML ready for the PDF
renderer.
"""
import base64
import io
import logging
from datetime import date, datetime, time, timezone

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape
from matplotlib.figure import Figure

from maintenance_app import config, equipment_service, user_service, work_order_service
from maintenance_app.errors import RenderFailure, ValidationFailure
from maintenance_app.models import ACTIVE_WORK_ORDER_STATUSES, EquipmentStatus, Role

logger = logging.getLogger(__name__)

STATUS_COLORS = {
    EquipmentStatus.OPERATIONAL: "#2e7d32",
    EquipmentStatus.MAINTENANCE: "#f9a825",
    EquipmentStatus.BROKEN: "#c62828",
}


def shortdate(value):
    """Server-locale short date in server local time, "N/A" when missing."""
    if value is None:
        return "N/A"
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime("%x")


def longdatetime(value):
    return value.strftime("%c")


env = Environment(
    loader=PackageLoader("maintenance_app", "templates"),
    autoescape=select_autoescape(["html"]),
)
env.filters["shortdate"] = shortdate
env.filters["longdatetime"] = longdatetime


def render_template(name, generated_at=None, **context):
    context.setdefault("company", config.REPORT_COMPANY_NAME)
    context["generated_at"] = generated_at or datetime.now()
    try:
        return env.get_template(name).render(**context)
    except TemplateError as e:
        logger.exception("Template %s failed", name)
        raise RenderFailure(f"Report template error: {e}")


def parse_report_date(value: str) -> datetime:
    """
    Accepts ISO 8601 dates or datetimes. A bare date means midnight UTC of
    that day; a datetime without offset is taken as UTC.
    """
    try:
        if len(value) == 10:
            return datetime.combine(date.fromisoformat(value), time.min, tzinfo=timezone.utc)
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationFailure(f"Invalid date: {value}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# --- Equipment status ---
def count_by_status(equipment):
    counts = {status.value: 0 for status in EquipmentStatus}
    for eq in equipment:
        counts[EquipmentStatus(eq["status"]).value] += 1
    return counts


def build_status_chart(status_counts: dict):
    """Bar chart of equipment per status as a data URI, None when there is nothing to plot."""
    if not sum(status_counts.values()):
        return None

    labels = list(status_counts)
    fig = Figure(figsize=(6, 2.5))
    ax = fig.subplots()
    ax.bar(
        labels,
        [status_counts[label] for label in labels],
        color=[STATUS_COLORS[EquipmentStatus(label)] for label in labels],
    )
    ax.set_ylabel("Equipment", fontweight="bold")
    ax.set_title("Equipment by Status", fontweight="bold")
    ax.yaxis.get_major_locator().set_params(integer=True)
    ax.grid(True, axis="y", alpha=0.3)

    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=150, bbox_inches="tight")
    encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{encoded}"


def render_equipment_status(equipment, generated_at=None):
    status_counts = count_by_status(equipment)
    return render_template(
        "equipment_status.html",
        title="Equipment Status Report",
        equipment=equipment,
        status_counts=status_counts,
        chart=build_status_chart(status_counts),
        generated_at=generated_at,
    )


def build_equipment_status_report(conn):
    equipment = equipment_service.list_equipment(conn, newest_first=False)
    logger.info("Equipment status report: %d records", len(equipment))
    return render_equipment_status(equipment)


# --- Work order summary ---
def describe_filters(status=None, start=None, end=None):
    filters = []
    if status:
        filters.append(f"Status: {status}")
    if start is not None and end is not None:
        filters.append(f"Created: {shortdate(start)} - {shortdate(end)}")
    return filters


def render_work_order_summary(work_orders, filters=None, generated_at=None):
    return render_template(
        "work_order_summary.html",
        title="Work Order Summary Report",
        work_orders=work_orders,
        filters=filters or [],
        generated_at=generated_at,
    )


def build_work_order_summary_report(conn, status=None, start_date=None, end_date=None):
    # The createdAt range only applies when both ends are given
    start = end = None
    if start_date and end_date:
        start = parse_report_date(start_date)
        end = parse_report_date(end_date)

    work_orders = work_order_service.query_work_orders(
        conn, status=status, created_from=start, created_to=end, newest_first=False
    )
    logger.info("Work order summary report: %d records (status=%s, range=%s..%s)",
                len(work_orders), status, start, end)
    return render_work_order_summary(work_orders, describe_filters(status, start, end))


# --- Technician workload ---
def collect_technician_workload(conn):
    """
    One entry per technician, including those with nothing active. Each
    technician is a separate query, so the report is not a single snapshot.
    """
    workload = []
    for technician in user_service.list_users(conn, role=Role.TECHNICIAN):
        work_orders = work_order_service.query_work_orders(
            conn,
            technician=technician["id"],
            statuses=ACTIVE_WORK_ORDER_STATUSES,
            newest_first=False,
        )
        workload.append({
            "technician": technician,
            "active_work_orders": len(work_orders),
            "work_orders": work_orders,
        })
    return workload


def render_technician_workload(workload, generated_at=None):
    return render_template(
        "technician_workload.html",
        title="Technician Workload Report",
        workload=workload,
        generated_at=generated_at,
    )


def build_technician_workload_report(conn):
    workload = collect_technician_workload(conn)
    logger.info("Technician workload report: %d technicians", len(workload))
    return render_technician_workload(workload)
