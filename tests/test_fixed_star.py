"""Tests for fixed stars and the shared engine star slot."""

from __future__ import annotations

import threading

import astronomy
import pytest

from astrokit.engine.common import get_star_slot
from astrokit.errors import InitializationFailure
from astrokit.fixed_star import FixedStar


def test_equatorial_binds_star_to_slot(fake_engine) -> None:
    """Each query redefines the shared slot with the star's catalog values."""

    star = FixedStar('Regulus', 10.1395, 11.9672, 79.3, fake_engine)
    FixedStar('Spica', 13.4199, -11.1613, 250.0, fake_engine).equatorial(astronomy.Time(0.0))

    eq = star.equatorial(astronomy.Time(0.0))

    assert eq.ra_hours == pytest.approx(10.1395)
    assert fake_engine.slot == (10.1395, 11.9672, 79.3)
    assert not get_star_slot().lock.locked()
    assert str(star) == 'Regulus'


def test_ecliptic_longitude_matches_ecliptic(fake_engine) -> None:
    """The longitude accessor is the ecliptic() longitude."""

    star = FixedStar('Spica', 13.4199, -11.1613, 250.0, fake_engine)
    t = astronomy.Time(100.0)

    ecl = star.ecliptic(t)

    assert star.ecliptic_longitude(t) == ecl.longitude_deg
    # Spica lies close to the ecliptic near longitude 204
    assert ecl.longitude_deg == pytest.approx(203.8, abs=0.5)
    assert abs(ecl.latitude_deg) < 3.0


def test_horizon_uses_bound_coordinates(fake_engine) -> None:
    """Horizon converts the star's equatorial coordinates for the observer."""

    star = FixedStar('Vega', 18.6156, 38.7837, 25.0, fake_engine)
    observer = astronomy.Observer(52.0, 0.0, 0.0)

    hor = star.horizon(astronomy.Time(0.0), observer)

    assert fake_engine.horizon_calls == [(18.6156, 38.7837)]
    assert hor.dec_deg == pytest.approx(38.7837)


def test_invalid_star_definition_raises(fake_engine) -> None:
    """A distance below one light-year is refused; the lock is released afterwards."""

    star = FixedStar('Too close', 1.0, 0.0, 0.5, fake_engine)

    with pytest.raises(InitializationFailure):
        star.equatorial(astronomy.Time(0.0))
    assert not get_star_slot().lock.locked()


def test_concurrent_stars_do_not_interfere(fake_engine) -> None:
    """Threads using different stars each see their own star in the slot."""

    stars = [FixedStar(f'S{k}', float(k), 5.0 * k - 20.0, 10.0 + k, fake_engine) for k in range(8)]
    errors: list[str] = []

    def _worker(star: FixedStar) -> None:
        for _ in range(10):
            eq = star.equatorial(astronomy.Time(0.0))
            if eq.ra_hours != star.ra_hours or eq.dec_deg != star.dec_deg:
                errors.append(f'{star.name} saw {eq.ra_hours}, {eq.dec_deg}')

    threads = [threading.Thread(target=_worker, args=(s,)) for s in stars]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert fake_engine.slot_mismatches == 0
