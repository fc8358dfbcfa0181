"""Location token classification and resolution to a station code or coordinates."""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import urlencode

from pydantic import ValidationError

from .exceptions import FetchError, InputRejected
from .http import HttpFetcher, RateLimiter
from .weather.models import Coordinates, StationCode

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"

_TOKEN_RE = re.compile(r"^[A-Za-z0-9 _-]+$")
_IATA_RE = re.compile(r"^[A-Za-z]{3}$")
_ICAO_RE = re.compile(r"^[A-Za-z]{4}$")
_US_ZIP_RE = re.compile(r"^\d{5}$")
_CA_POSTAL_RE = re.compile(r"^([A-Z]\d[A-Z])\s?(\d[A-Z]\d)$", re.IGNORECASE)

ICAO_REGION_PREFIXES = frozenset("ABCDEFGHIJKLMNOPQRSTUVWYZ")

# Major world airports whose ICAO code is not simply "K" + IATA.
IATA_TO_ICAO: dict[str, str] = {
    # North America (non-K or irregular)
    "ANC": "PANC", "FAI": "PAFA", "JNU": "PAJN", "HNL": "PHNL", "OGG": "PHOG",
    "KOA": "PHKO", "LIH": "PHLI", "ITO": "PHTO", "SJU": "TJSJ", "STT": "TIST",
    "YYZ": "CYYZ", "YVR": "CYVR", "YUL": "CYUL", "YYC": "CYYC", "YEG": "CYEG",
    "YOW": "CYOW", "YWG": "CYWG", "YHZ": "CYHZ", "YQB": "CYQB", "YXE": "CYXE",
    "YYJ": "CYYJ", "YQR": "CYQR", "YXY": "CYXY", "YZF": "CYZF",
    "MEX": "MMMX", "CUN": "MMUN", "GDL": "MMGL", "MTY": "MMMY", "SJD": "MMSD",
    "PVR": "MMPR", "TIJ": "MMTJ",
    # US airports listed so the table also covers the common domestic hubs
    "JFK": "KJFK", "LGA": "KLGA", "EWR": "KEWR", "LAX": "KLAX", "SFO": "KSFO",
    "ORD": "KORD", "ATL": "KATL", "DFW": "KDFW", "DEN": "KDEN", "SEA": "KSEA",
    "BOS": "KBOS", "MIA": "KMIA", "IAH": "KIAH", "PHX": "KPHX", "LAS": "KLAS",
    "MSP": "KMSP", "DTW": "KDTW", "PHL": "KPHL", "CLT": "KCLT", "IAD": "KIAD",
    "DCA": "KDCA",
    # Europe
    "LHR": "EGLL", "LGW": "EGKK", "STN": "EGSS", "MAN": "EGCC", "EDI": "EGPH",
    "DUB": "EIDW", "CDG": "LFPG", "ORY": "LFPO", "NCE": "LFMN", "FRA": "EDDF",
    "MUC": "EDDM", "BER": "EDDB", "HAM": "EDDH", "DUS": "EDDL", "AMS": "EHAM",
    "BRU": "EBBR", "ZRH": "LSZH", "GVA": "LSGG", "VIE": "LOWW", "MAD": "LEMD",
    "BCN": "LEBL", "LIS": "LPPT", "FCO": "LIRF", "MXP": "LIMC", "VCE": "LIPZ",
    "ATH": "LGAV", "IST": "LTFM", "CPH": "EKCH", "ARN": "ESSA", "OSL": "ENGM",
    "HEL": "EFHK", "KEF": "BIKF", "WAW": "EPWA", "PRG": "LKPR", "BUD": "LHBP",
    "SVO": "UUEE", "DME": "UUDD",
    # Middle East and Africa
    "DXB": "OMDB", "AUH": "OMAA", "DOH": "OTHH", "TLV": "LLBG", "RUH": "OERK",
    "JED": "OEJN", "CAI": "HECA", "JNB": "FAOR", "CPT": "FACT", "NBO": "HKJK",
    "ADD": "HAAB", "LOS": "DNMM", "CMN": "GMMN",
    # Asia and Pacific
    "NRT": "RJAA", "HND": "RJTT", "KIX": "RJBB", "ICN": "RKSI", "PEK": "ZBAA",
    "PVG": "ZSPD", "CAN": "ZGGG", "HKG": "VHHH", "TPE": "RCTP", "SIN": "WSSS",
    "BKK": "VTBS", "KUL": "WMKK", "CGK": "WIII", "MNL": "RPLL", "DEL": "VIDP",
    "BOM": "VABB", "SYD": "YSSY", "MEL": "YMML", "BNE": "YBBN", "PER": "YPPH",
    "AKL": "NZAA", "CHC": "NZCH", "WLG": "NZWN",
    # South America
    "GRU": "SBGR", "GIG": "SBGL", "EZE": "SAEZ", "SCL": "SCEL", "LIM": "SPJC",
    "BOG": "SKBO", "UIO": "SEQM", "CCS": "SVMI",
}

# Polar stations, remote islands and DXpedition sites with no usable postal code.
SPECIAL_LOCATIONS: dict[str, tuple[float, float]] = {
    # Antarctica
    "SOUTHPOLE": (-90.0, 0.0),
    "MCMURDO": (-77.85, 166.67),
    "PALMER": (-64.77, -64.05),
    "VOSTOK": (-78.46, 106.84),
    "CASEY": (-66.28, 110.53),
    "MAWSON": (-67.60, 62.87),
    "DAVIS": (-68.58, 77.97),
    "SCOTTBASE": (-77.85, 166.76),
    "SYOWA": (-69.00, 39.58),
    "CONCORDIA": (-75.10, 123.33),
    "HALLEY": (-75.58, -26.66),
    "DUMONT": (-66.66, 140.01),
    "SANAE": (-71.67, -2.84),
    # Arctic
    "ALERT": (82.50, -62.35),
    "EUREKA": (79.99, -85.93),
    "THULE": (76.53, -68.70),
    "LONGYEARBYEN": (78.22, 15.65),
    "BARROW": (71.29, -156.79),
    "RESOLUTE": (74.72, -94.83),
    "GRISE": (76.42, -82.90),
    # Atlantic and Southern Ocean islands
    "ASCENSION": (-7.95, -14.36),
    "STHELENA": (-15.97, -5.72),
    "TRISTAN": (-37.11, -12.28),
    "BOUVET": (-54.42, 3.38),
    "HEARD": (-53.10, 73.51),
    "KERGUELEN": (-49.35, 70.22),
    "CROZET": (-46.43, 51.86),
    "AMSTERDAM": (-37.83, 77.57),
    "MACQUARIE": (-54.62, 158.86),
    # Pacific islands
    "MIDWAY": (28.21, -177.38),
    "WAKE": (19.28, 166.65),
    "JOHNSTON": (16.73, -169.53),
    "PALMYRA": (5.89, -162.08),
    "JARVIS": (-0.37, -159.99),
    "HOWLAND": (0.81, -176.62),
    "BAKER": (0.19, -176.48),
    "KINGMAN": (6.38, -162.42),
    # Indian Ocean
    "DIEGO": (-7.26, 72.40),
    "CHAGOS": (-7.26, 72.40),
    "COCOS": (-12.19, 96.83),
    "CHRISTMAS": (-10.49, 105.62),
    # South Atlantic
    "FALKLANDS": (-51.70, -59.52),
    "SOUTHGEORGIA": (-54.28, -36.51),
    "SOUTHSANDWICH": (-59.43, -26.35),
    # Polynesia and eastern Pacific
    "MARQUESAS": (-9.00, -140.00),
    "EASTER": (-27.11, -109.36),
    "PITCAIRN": (-25.07, -130.10),
    "CLIPPERTON": (10.30, -109.22),
    "GALAPAGOS": (-0.95, -90.97),
    # Mountain observatories
    "MAUNA": (19.54, -155.58),
    "JUNGFRAUJOCH": (46.55, 7.98),
    # Deserts
    "MCMURDODRY": (-77.85, 163.00),
    "ATACAMA": (-24.50, -69.25),
    # Sub-Antarctic and remote New Zealand
    "GOUGH": (-40.35, -9.88),
    "MARION": (-46.88, 37.86),
    "PRINCE": (-46.77, 37.86),
    "CAMPBELL": (-52.55, 169.15),
    "AUCKLAND": (-50.73, 166.09),
    "KERMADEC": (-29.25, -177.92),
    "CHATHAM": (-43.95, -176.55),
}


def validate_token(token: str | None) -> str:
    """Trim a raw location token, raising InputRejected when it is malformed."""
    if token is None:
        raise InputRejected("Location token is required.")
    trimmed = token.strip()
    if not trimmed or not _TOKEN_RE.match(trimmed):
        raise InputRejected(
            "Invalid location format. Only alphanumeric characters, spaces, hyphens, "
            f"and underscores are allowed. Provided: {token!r}"
        )
    return trimmed


def is_icao_code(token: str) -> bool:
    return bool(_ICAO_RE.match(token)) and token[0].upper() in ICAO_REGION_PREFIXES


def iata_to_icao(token: str) -> str:
    """Look up an IATA code, defaulting to the US domestic `K` + IATA convention."""
    code = token.upper()
    return IATA_TO_ICAO.get(code, f"K{code}")


def special_location_key(token: str) -> str:
    return re.sub(r"[^A-Z0-9]", "", token.upper())


def normalize_canadian_postal(token: str) -> str | None:
    """Return a Canadian postal code in `A1A 1A1` form, or None if it is not one."""
    match = _CA_POSTAL_RE.match(token.strip())
    if match is None:
        return None
    return f"{match.group(1).upper()} {match.group(2).upper()}"


class NominatimGeocoder:
    """Postal-code geocoding against OpenStreetMap Nominatim.

    Nominatim's usage policy allows at most one request per second, so every
    call waits on a shared :class:`RateLimiter`.
    """

    def __init__(
        self,
        fetcher: HttpFetcher,
        settings: Any,
        logger: logging.Logger,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.settings = settings
        self.logger = logger
        self.rate_limiter = rate_limiter or RateLimiter(settings.geocode_min_interval_seconds)

    def build_url(self, query: str, country: str | None) -> str:
        params: dict[str, Any] = {"postalcode": query}
        if country:
            params["country"] = country
        params.update({"format": "json", "limit": 1})
        return f"{NOMINATIM_SEARCH_URL}?{urlencode(params)}"

    def geocode(self, query: str, country: str | None = None) -> tuple[float, float] | None:
        """Return `(lat, lon)` for a postal query, or None when nothing usable comes back."""
        url = self.build_url(query, country)
        self.rate_limiter.wait()
        try:
            payload = self.fetcher.fetch_json(
                url,
                timeout=self.settings.geocode_timeout_seconds,
            )
        except FetchError as exc:
            self.logger.info("Geocoding %r failed: %s", query, exc)
            return None

        if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
            return None
        first = payload[0]
        try:
            lat = float(first["lat"])
            lon = float(first["lon"])
        except (KeyError, TypeError, ValueError):
            self.logger.info("Geocoding %r returned no usable coordinates.", query)
            return None
        self.logger.debug(
            "Geocoded %r to (%s, %s): %s", query, lat, lon, first.get("display_name", query)
        )
        return lat, lon


class LocationResolver:
    """Classifies a location token and resolves it.

    Order, first match wins: IATA (3 letters), ICAO (4 letters with a valid
    region prefix), named special location, postal code. Airport codes are
    returned unvalidated; the METAR fetch is their validation.
    """

    def __init__(
        self,
        geocoder: NominatimGeocoder,
        default_country: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self.geocoder = geocoder
        self.default_country = default_country.lower()
        self.logger = logger or logging.getLogger("saytime_weather.location")

    def resolve(self, token: str) -> StationCode | Coordinates | None:
        """Resolve ``token``; None means not found."""
        token = token.strip()
        if not token:
            return None

        if _IATA_RE.match(token):
            return self._station(iata_to_icao(token))

        if is_icao_code(token):
            return self._station(token.upper())

        special = SPECIAL_LOCATIONS.get(special_location_key(token))
        if special is not None:
            return Coordinates(lat=special[0], lon=special[1])

        query, country = self.postal_query(token)
        coords = self.geocoder.geocode(query, country)
        if coords is None:
            return None
        return self._coordinates(*coords)

    def postal_query(self, token: str) -> tuple[str, str | None]:
        """Return the geocoder query and country scope for a postal token."""
        if _US_ZIP_RE.match(token):
            return token, self.default_country
        canadian = normalize_canadian_postal(token)
        if canadian is not None:
            return canadian, "ca"
        return token, None

    def _station(self, code: str) -> StationCode | None:
        try:
            return StationCode(code=code)
        except ValidationError:
            self.logger.info("Discarding invalid station code %r", code)
            return None

    def _coordinates(self, lat: float, lon: float) -> Coordinates | None:
        try:
            return Coordinates(lat=lat, lon=lon)
        except ValidationError:
            self.logger.info("Discarding out-of-range coordinates (%s, %s)", lat, lon)
            return None
