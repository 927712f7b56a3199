from __future__ import annotations

from dataclasses import dataclass, field

LOGIN = "login"
HOME = "home"
MATERIALS = "materials"
MATERIAL_DETAIL = "material_detail"
IMPORT = "import"
EXCEL_OPERATIONS = "excel_operations"
SETTINGS = "settings"

PUBLIC_PAGES = frozenset({LOGIN})

ROUTES: dict[str, str] = {
    "/login": LOGIN,
    "/": HOME,
    "/materials": MATERIALS,
    "/import": IMPORT,
    "/excelOperations": EXCEL_OPERATIONS,
    "/settings": SETTINGS,
}

NAV_ITEMS: list[tuple[str, str]] = [
    ("Home", "/"),
    ("Materials", "/materials"),
    ("Import material", "/import"),
    ("Excel operations", "/excelOperations"),
    ("Settings", "/settings"),
]


@dataclass(frozen=True)
class RouteMatch:
    path: str
    page: str
    params: dict[str, int] = field(default_factory=dict)
    redirected: bool = False


def _normalize(path: str | None) -> str:
    cleaned = (path or "/").strip()
    if not cleaned.startswith("/"):
        cleaned = f"/{cleaned}"
    if len(cleaned) > 1:
        cleaned = cleaned.rstrip("/")
    return cleaned or "/"


def _match(path: str) -> RouteMatch | None:
    if path in ROUTES:
        return RouteMatch(path=path, page=ROUTES[path])
    prefix, _, tail = path.rpartition("/")
    if prefix == "/materials" and tail:
        if tail.isdigit():
            return RouteMatch(path=path, page=MATERIAL_DETAIL, params={"id": int(tail)})
        return RouteMatch(path="/materials", page=MATERIALS, redirected=True)
    return None


def resolve_route(path: str | None, authenticated: bool) -> RouteMatch:
    """Resolve a client path, applying the sign-in guard.

    Unknown paths fall back to ``/``; protected pages without a session go to
    ``/login``; a signed-in user asking for ``/login`` lands on ``/``.
    """
    requested = _normalize(path)
    match = _match(requested)
    if match is None:
        match = RouteMatch(path="/", page=HOME, redirected=True)
    if match.page not in PUBLIC_PAGES and not authenticated:
        return RouteMatch(path="/login", page=LOGIN, redirected=True)
    if match.page == LOGIN and authenticated:
        return RouteMatch(path="/", page=HOME, redirected=True)
    return match


def material_path(material_id: int) -> str:
    return f"/materials/{int(material_id)}"
