"""Render lead records on an interactive Leaflet map via folium."""
from __future__ import annotations

import html
from pathlib import Path
from typing import Iterable, List, Optional

import folium

from ..models import BusinessRecord, Coordinates

DEFAULT_CENTER = Coordinates(latitude=34.0522, longitude=-118.2437)
DEFAULT_ZOOM = 10
MARKER_COLOR = "blue"
SELECTED_MARKER_COLOR = "purple"


def mappable_records(records: Iterable[BusinessRecord]) -> List[BusinessRecord]:
    return [record for record in records if record.coordinates is not None]


def popup_html(record: BusinessRecord) -> str:
    """Build popup markup with every record value escaped."""

    parts = [
        f"<div style=\"font-weight:700;font-size:1.1rem;margin-bottom:4px\">{html.escape(record.name)}</div>",
        f"<div style=\"font-size:0.9rem;color:#4B5563\">{html.escape(record.address)}</div>",
    ]
    if record.website_url:
        href = html.escape(record.website_url, quote=True)
        parts.append(
            f"<a href=\"{href}\" target=\"_blank\" rel=\"noopener noreferrer\" "
            "style=\"font-size:0.9rem;color:#2563EB;display:block;margin-top:4px\">Website</a>"
        )
    return "<div>" + "".join(parts) + "</div>"


def build_map(
    records: Iterable[BusinessRecord],
    *,
    selected_id: Optional[str] = None,
    center: Optional[Coordinates] = None,
) -> folium.Map:
    """Return a map with one marker per record that has coordinates.

    The view fits all markers; without markers it centres on ``center`` (the
    user's location) or a default city.
    """

    located = mappable_records(records)
    origin = center or DEFAULT_CENTER
    fmap = folium.Map(location=[origin.latitude, origin.longitude], zoom_start=DEFAULT_ZOOM)

    for record in located:
        selected = record.id == selected_id
        folium.Marker(
            location=[record.latitude, record.longitude],
            popup=folium.Popup(popup_html(record), max_width=300),
            tooltip=record.name,
            icon=folium.Icon(color=SELECTED_MARKER_COLOR if selected else MARKER_COLOR),
            z_index_offset=1000 if selected else 0,
        ).add_to(fmap)

    if located:
        latitudes = [record.latitude for record in located]
        longitudes = [record.longitude for record in located]
        fmap.fit_bounds([[min(latitudes), min(longitudes)], [max(latitudes), max(longitudes)]], padding=(20, 20))
    return fmap


def save_map(
    records: Iterable[BusinessRecord],
    path: str | Path,
    *,
    selected_id: Optional[str] = None,
    center: Optional[Coordinates] = None,
) -> Path:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    build_map(records, selected_id=selected_id, center=center).save(str(destination))
    return destination
