"""HTML content for the shared map popup."""

from __future__ import annotations

from html import escape

from core.models import LocationRecord

NOT_AVAILABLE = "N/A"
NO_ADDRESS = "No address available"

# (label, SessionCounts attribute, color)
SESSION_ROWS: list[tuple[str, str, str]] = [
    ("Online", "active", "#22c55e"),
    ("Offline", "offline", "#f59e0b"),
    ("Inactive", "inactive", "#6b7280"),
    ("Blocked", "blocked", "#ef4444"),
    ("Not Found", "not_found", "#8b5cf6"),
]

_LINE = '<div style="font-size: 12px; color: #6b7280; margin-bottom: 4px;">{}</div>'
_SEPARATED = (
    '<div style="margin-top: 8px; padding-top: 8px; border-top: 1px solid #e5e7eb;">{}</div>'
)


def format_address(record: LocationRecord) -> str:
    """Comma-joined address, or a placeholder when no part is known."""
    parts = record.address_parts
    return ", ".join(parts) if parts else NO_ADDRESS


def render_popup_html(record: LocationRecord) -> str:
    """Render the popup body for `record`; all values are HTML-escaped."""
    lcp = record.sub_group_names[0] if len(record.sub_group_names) > 0 else NOT_AVAILABLE
    nap = record.sub_group_names[1] if len(record.sub_group_names) > 1 else NOT_AVAILABLE

    lines = [
        '<h3 style="margin: 0 0 8px 0; font-size: 14px; font-weight: 600; color: #1f2937;">'
        f"{escape(record.group_name)}</h3>",
        _LINE.format(f"<strong>LCP:</strong> {escape(lcp or NOT_AVAILABLE)}"),
        _LINE.format(f"<strong>NAP:</strong> {escape(nap or NOT_AVAILABLE)}"),
    ]
    if record.port_total:
        lines.append(_LINE.format(f"<strong>Ports:</strong> {int(record.port_total)}"))

    sessions = "".join(
        '<div style="font-size: 12px; margin-bottom: 4px;">'
        f'<strong style="color: {color};">{label}:</strong> '
        f'<span style="color: {color}; font-weight: 600;">'
        f"{int(getattr(record.sessions, attr) or 0)}</span></div>"
        for label, attr, color in SESSION_ROWS
    )
    lines.append(_SEPARATED.format(sessions))
    lines.append(_SEPARATED.format(_LINE.format(escape(format_address(record)))))

    return '<div style="padding: 8px; min-width: 200px;">' + "".join(lines) + "</div>"
