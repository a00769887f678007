"""Known race locations: static city coordinates and map grouping.

The table covers the cities that appear in the race history; unknown
locations simply have no coordinates.
"""

CITY_COORDINATES = {
    "severna park, md": (39.0857, -76.5516),
    "columbia, md": (39.2037, -76.8610),
    "gaithersburg, md": (39.1434, -77.2014),
    "alexandria, va": (38.8048, -77.0469),
    "boyds, md": (39.1852, -77.3190),
    "montgomery county, md": (39.1547, -77.2405),
    "rockville, md": (39.0840, -77.1528),
    "sparks, md": (39.5359, -76.6666),
    "bristow, va": (38.7214, -77.5376),
    "germantown, md": (39.1732, -77.2717),
    "bethesda, md": (38.9847, -77.0947),
    "washington, dc": (38.9072, -77.0369),
    "washington, d. c., dc": (38.9072, -77.0369),
    "erie, pa": (42.1292, -80.0850),
    "baltimore, md": (39.2904, -76.6122),
    "rehoboth beach, de": (38.7209, -75.0760),
    "damascus, md": (39.2893, -77.2030),
    "east hampton, ny": (40.9634, -72.1848),
    "york, pa": (39.9626, -76.7277),
    "olney, md": (39.1532, -77.0669),
    "allentown, pa": (40.6023, -75.4714),
    "ellicott city, md": (39.2673, -76.7983),
    "baltimore county, md": (39.4609, -76.6713),
    "laurel, md": (39.0993, -76.8483),
    "howard county, md": (39.2475, -76.9286),
    "triangle, va": (38.5457, -77.3044),
    "upper marlboro, md": (38.8159, -76.7497),
    "flintstone, md": (39.7023, -78.5728),
    "west windsor township, vt": (43.4687, -72.4975),
    "derwood, md": (39.1234, -77.1628),
    "capon, wv": (39.3000, -78.5000),  # approx
    "clifton, va": (38.7796, -77.3872),
    "westminster, md": (39.5754, -76.9959),
    "richmond, va": (37.5407, -77.4360),
    "forest city, pa": (41.6506, -75.4666),
    "west ocean city, md": (38.3365, -75.1054),
    "elkridge, md": (39.2140, -76.7077),
    "mechanicsville, md": (38.4357, -76.7328),
    "manassas, va": (38.7509, -77.4753),
    "potomac, md": (39.0180, -77.2090),
    "great falls, va": (38.9959, -77.2889),
    "mt. airy, md": (39.3768, -77.1547),
    "corning, ny": (42.1428, -77.0547),
    "annapolis, md": (38.9784, -76.4922),
    "poolesville, md": (39.1462, -77.4172),
    "montgomery, md": (39.1547, -77.2405),
    "college park, md": (38.9897, -76.9378),
    "beltsville, md": (39.0348, -76.9075),
    "boonsboro, md": (39.5068, -77.6536),
    "rockville to bethesda, md": (39.0350, -77.1250),  # midpoint
}


def get_coordinates(location: str) -> tuple[float, float] | None:
    """Look up (lat, lon) for a 'City, ST' string; None if unknown."""
    if not location:
        return None
    normalized = location.lower().replace(", usa", "").strip()
    return CITY_COORDINATES.get(normalized)


def map_points(records) -> list[dict]:
    """Group races by known coordinates.

    Returns a list of {location, lat, lon, count, events}, most raced first.
    Races at unknown locations are left out.
    """
    points: dict[tuple[float, float], dict] = {}
    for r in records:
        coords = get_coordinates(r.location)
        if coords is None:
            continue
        point = points.setdefault(coords, {
            "location": r.location,
            "lat": coords[0],
            "lon": coords[1],
            "count": 0,
            "events": [],
        })
        point["count"] += 1
        point["events"].append(r.event)

    return sorted(points.values(), key=lambda p: (-p["count"], p["location"]))
