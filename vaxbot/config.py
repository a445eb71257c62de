from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

BASE_URL = "https://www.doctolib.fr"

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/90.0.4430.212 Safari/537.36"
)

DEFAULT_CENTERS: tuple[str, ...] = (
    "centre-de-vaccination-covid-19-ville-de-paris",
    "centre-covid19-paris-5",
    "centre-de-vaccination-covid-19-mairie-du-6eme-arrondissement-de-paris",
    "centre-de-vaccination-mairie-du-7eme-paris",
    "centre-de-vaccination-covid-19-paris-8e",
    "centre-de-vaccination-covid-mairie-du-9eme-arrondissement",
    "centre-de-vaccination-paris-14e",
    "centre-de-vaccination-covid-paris-15e",
    "vaccinodrome-covid-19-porte-de-versailles",
    "centre-de-vaccination-covid-19-mairie-du-16eme-arrondissement",
    "centre-de-vaccination-covid-19-paris-17eme",
    "centre-de-vaccination-covid-19-stade-de-france",
)

# Doctolib naming convention for first-dose motives.
FIRST_DOSE_MARKER = "1re injection"
EXCLUDED_BRAND = "AstraZeneca"


def _parse_centers(raw: str) -> tuple[str, ...]:
    # VAXBOT_CENTERS is a comma-separated list of booking slugs.
    parts = [p.strip() for p in raw.split(",")]
    parts = [p for p in parts if p]

    seen: set[str] = set()
    result: list[str] = []
    for p in parts:
        if "/" in p:
            raise RuntimeError(f"Invalid VAXBOT_CENTERS value: {p!r}. Expected a booking slug.")
        if p in seen:
            continue
        seen.add(p)
        result.append(p)

    if not result:
        raise RuntimeError("VAXBOT_CENTERS is empty. Provide at least one center.")

    return tuple(result)


@dataclass(frozen=True)
class Settings:
    marker_substring: str = FIRST_DOSE_MARKER
    excluded_substring: str = EXCLUDED_BRAND
    centers: tuple[str, ...] = DEFAULT_CENTERS

    # Courtesy pacing between outbound calls
    place_pause_ms: int = 100
    center_pause_ms: int = 100

    verbose: bool = False

    base_url: str = BASE_URL
    user_agent: str = USER_AGENT

    # When set, a center whose booking data can't be fetched is logged and skipped
    # instead of aborting the whole run.
    isolate_center_failures: bool = False


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in {"0", "false", "no"}


def _pause_ms(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid {name} value: {raw!r}. Expected integer milliseconds.") from e
    if value < 0:
        raise RuntimeError(f"{name} must be >= 0")
    return value


def load_settings(dotenv_path: str | None = None) -> Settings:
    # Everything is optional: without any VAXBOT_* variables we get the built-in defaults.
    load_dotenv(dotenv_path=dotenv_path, override=False)

    defaults = Settings()

    centers_raw = os.getenv("VAXBOT_CENTERS")
    centers = _parse_centers(centers_raw) if centers_raw is not None else defaults.centers

    marker = os.getenv("VAXBOT_MARKER") or defaults.marker_substring
    excluded = os.getenv("VAXBOT_EXCLUDED") or defaults.excluded_substring

    return Settings(
        marker_substring=marker,
        excluded_substring=excluded,
        centers=centers,
        place_pause_ms=_pause_ms("VAXBOT_PLACE_PAUSE_MS", defaults.place_pause_ms),
        center_pause_ms=_pause_ms("VAXBOT_CENTER_PAUSE_MS", defaults.center_pause_ms),
        verbose=_flag("VAXBOT_VERBOSE", defaults.verbose),
        base_url=os.getenv("VAXBOT_BASE_URL") or defaults.base_url,
        user_agent=defaults.user_agent,
        isolate_center_failures=_flag("VAXBOT_ISOLATE_CENTER_FAILURES", defaults.isolate_center_failures),
    )
