"""Internal constants shared across the library."""

DEFAULT_SOURCE_URL = (
    "https://docs.google.com/spreadsheets/d/1x8jI4RYM6nvhydMfxBn68x7shxyEuf_KWNC0iDq8mzw/export?format=csv&gid=0"
)
USER_AGENT = "townsync/1.0"
DEFAULT_POLL_INTERVAL: float = 5.0

#: Canonical placeholder for "no URL provided".
URL_SENTINEL = "#"

DEFAULT_ADVISORY_LOCAL = "Información no disponible"
DEFAULT_ADVISORY_FOREIGN = "Information not available"
DEFAULT_DISTANCE_LABEL = "N/A"

# ------------------------------------------------------------------
# Security infographics (shipped alongside the map as static images)
# ------------------------------------------------------------------

INFOGRAPHIC_TOWNS: frozenset[str] = frozenset(
    {
        "Ajijic",
        "Cocula",
        "Lagos de Moreno",
        "Mascota",
        "Mazamitla",
        "San Sebastián del Oeste",
        "Sayula",
        "Talpa de Allende",
        "Tapalpa",
        "Temacapulín",
        "Tequila",
        "Tlaquepaque",
    }
)
INFOGRAPHIC_TEMPLATE = "Infografia_Seguridad_{name}_{suffix}.png"
