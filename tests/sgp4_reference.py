"""Element sets and python-sgp4 reference helpers shared by the SGP4 tests.

Element sets are parsed by python-sgp4 and converted back into
:class:`OrbitalElements`, so both implementations start from identical
inputs.

The pure-Python ``sgp4.model.Satrec`` is used rather than the compiled
``sgp4.api`` class because the tests compare intermediate record fields
(``no_unkozai``, ``cc1``, ``d2201``, ...) that only the Python record
exposes. Its ``sgp4()`` output is the same.
"""

from sgp4.model import WGS72 as SGP4_WGS72
from sgp4.model import WGS72OLD as SGP4_WGS72OLD
from sgp4.model import WGS84 as SGP4_WGS84
from sgp4.model import Satrec

from astroprop.constants import MINUTES_PER_DAY, RAD2DEG, XPDOTP
from astroprop.sgp4 import OrbitalElements

SGP4_GRAVITY = {
    "wgs72old": SGP4_WGS72OLD,
    "wgs72": SGP4_WGS72,
    "wgs84": SGP4_WGS84,
}

# ISS, near-earth LEO (period ~92 min)
ISS = (
    "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927",
    "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537",
)

# Vanguard 1 test case from the Vallado verification set, near-earth
VANGUARD = (
    "1 00005U 58002B   00179.78495062  .00000023  00000-0  28098-4 0  4753",
    "2 00005  34.2682 348.7242 1859667 331.7664  19.3264 10.82419157413667",
)

# Low perigee (< 220 km), simplified drag model
LOW_PERIGEE = (
    "1 28350U 04020A   06167.21788666  .16154492  76267-5  18678-3 0  8894",
    "2 28350  64.9977 345.6130 0024870 260.7578  99.9590 16.47856722116490",
)

# Molniya 2-14, half-day resonance (deep space)
MOLNIYA = (
    "1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813",
    "2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656",
)

# Molniya, half-day resonance, 12-hour period
MOLNIYA_2 = (
    "1 09880U 77021A   06176.56157475  .00000421  00000-0  10000-3 0  9814",
    "2 09880  64.5968 349.3786 7069051 270.0229  16.3320  2.00813614112380",
)

# GPS, 12-hour near-circular: deep space without resonance (e < 0.5)
GPS = (
    "1 28129U 03058A   06175.57071136 -.00000104  00000-0  10000-3 0   459",
    "2 28129  54.7298 324.8098 0048506 266.2640  93.1663  2.00562768 18443",
)

# Geostationary, synchronous resonance with near-zero inclination
GEO = (
    "1 28626U 05008A   06176.46683397 -.00000205  00000-0  10000-3 0  2190",
    "2 28626   0.0019 286.9433 0000335  13.7918  55.6504  1.00270176  4891",
)

# Decays within a few days
DECAYING = (
    "1 29141U 85108AA  06170.26783845  .99999999  00000-0  13519-0 0   718",
    "2 29141  82.4288 273.4882 0015848 277.2124  83.9133 15.93343074  6828",
)


def satrec(tle: tuple[str, str], gravity: str = "wgs72") -> Satrec:
    """Parse an element set with python-sgp4 (improved mode)."""
    return Satrec.twoline2rv(tle[0], tle[1], SGP4_GRAVITY[gravity])


def reference_satrec(
    tle: tuple[str, str], gravity: str = "wgs72", opsmode: str = "i"
) -> Satrec:
    """Initialize a python-sgp4 record with an explicit gravity model and opsmode."""
    parsed = satrec(tle, gravity)
    sat = Satrec()
    sat.sgp4init(
        SGP4_GRAVITY[gravity],
        opsmode,
        parsed.satnum_str,
        parsed.jdsatepoch + parsed.jdsatepochF - 2433281.5,
        parsed.bstar,
        parsed.ndot,
        parsed.nddot,
        parsed.ecco,
        parsed.argpo,
        parsed.inclo,
        parsed.mo,
        parsed.no_kozai,
        parsed.nodeo,
    )
    return sat


def elements_from_tle(tle: tuple[str, str]) -> OrbitalElements:
    """Build :class:`OrbitalElements` from an element set via python-sgp4."""
    sat = satrec(tle)
    return OrbitalElements(
        satnum=sat.satnum,
        epoch_year=sat.epochyr,
        epoch_days=sat.epochdays,
        mean_motion=sat.no_kozai * XPDOTP,
        eccentricity=sat.ecco,
        inclination=sat.inclo * RAD2DEG,
        raan=sat.nodeo * RAD2DEG,
        arg_perigee=sat.argpo * RAD2DEG,
        mean_anomaly=sat.mo * RAD2DEG,
        ndot=sat.ndot * XPDOTP * MINUTES_PER_DAY,
        nddot=sat.nddot * XPDOTP * MINUTES_PER_DAY * MINUTES_PER_DAY,
        bstar=sat.bstar,
    )


def reference_state(sat: Satrec, tsince: float) -> tuple[int, tuple, tuple]:
    """Propagate a python-sgp4 record; returns ``(error, r, v)``."""
    return sat.sgp4_tsince(tsince)


def reference_from_elements(
    elements: OrbitalElements, gravity: str = "wgs72", opsmode: str = "i"
) -> Satrec:
    """Initialize a python-sgp4 record directly from :class:`OrbitalElements`."""
    ep = elements.to_epoch_elements()
    sat = Satrec()
    sat.sgp4init(
        SGP4_GRAVITY[gravity],
        opsmode,
        "%05d" % elements.satnum,
        elements.epoch_since_1950,
        ep.bstar,
        ep.ndot,
        ep.nddot,
        ep.ecco,
        ep.argpo,
        ep.inclo,
        ep.mo,
        ep.no_kozai,
        ep.nodeo,
    )
    return sat
