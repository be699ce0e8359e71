"""Reference place names and the default trending dataset."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .models import GazetteerEntry, TrendingEntry


@dataclass(frozen=True)
class Gazetteer:
    cities: Tuple[GazetteerEntry, ...]
    countries: Tuple[GazetteerEntry, ...]


def _city(name: str, country: str, *aliases: str) -> GazetteerEntry:
    return GazetteerEntry(name=name, code=country, aliases=tuple(aliases))


def _build_cities() -> List[GazetteerEntry]:
    return [
        # France
        _city("Paris", "FR", "paname", "paris france"),
        _city("Lyon", "FR", "lyonnais"),
        _city("Marseille", "FR", "marseilles"),
        _city("Toulouse", "FR"),
        _city("Nice", "FR", "nizza"),
        _city("Bordeaux", "FR"),
        _city("Rennes", "FR"),
        _city("Nantes", "FR"),
        # Germany
        _city("Berlin", "DE"),
        _city("Munich", "DE", "munchen", "muenchen", "monaco di baviera"),
        _city("Hamburg", "DE", "hambourg"),
        _city("Frankfurt", "DE", "francfort"),
        _city("Cologne", "DE", "koln", "koeln"),
        # Spain
        _city("Barcelona", "ES", "barcelone", "barna"),
        _city("Madrid", "ES"),
        _city("Valencia", "ES", "valence"),
        _city("Seville", "ES", "sevilla"),
        # Italy
        _city("Rome", "IT", "roma"),
        _city("Milan", "IT", "milano"),
        _city("Florence", "IT", "firenze", "florenz"),
        _city("Venice", "IT", "venezia", "venise", "venedig"),
        _city("Naples", "IT", "napoli", "napels"),
        # Netherlands
        _city("Amsterdam", "NL", "ams", "a-dam"),
        _city("Rotterdam", "NL"),
        _city("Utrecht", "NL"),
        # Belgium
        _city("Brussels", "BE", "bruxelles", "brussel", "bruessel"),
        _city("Antwerp", "BE", "anvers", "antwerpen"),
        # Portugal
        _city("Lisbon", "PT", "lisboa", "lisbonne"),
        _city("Porto", "PT", "oporto"),
        # Austria
        _city("Vienna", "AT", "wien", "vienne"),
        _city("Salzburg", "AT", "salzbourg"),
        _city("Prague", "CZ", "praha", "prag"),
        _city("Warsaw", "PL", "varsovie", "warszawa", "warschau"),
        _city("Krakow", "PL", "cracovie", "krakau", "cracow"),
        _city("Budapest", "HU"),
        _city("Dublin", "IE"),
        _city("Geneva", "CH", "geneve", "genf"),
        _city("Zurich", "CH", "zuerich", "zurigo"),
        _city("Copenhagen", "DK", "kobenhavn", "copenhague"),
        _city("Stockholm", "SE"),
        _city("Zagreb", "HR"),
        _city("Split", "HR"),
    ]


def _build_countries() -> List[GazetteerEntry]:
    rows = [
        ("France", "FR", ("francia", "frankreich")),
        ("Germany", "DE", ("allemagne", "alemania", "deutschland")),
        ("Spain", "ES", ("espagne", "espana", "spanien")),
        ("Italy", "IT", ("italie", "italia", "italien")),
        ("Netherlands", "NL", ("pays-bas", "paises bajos", "niederlande", "holland")),
        ("Belgium", "BE", ("belgique", "belgica", "belgien")),
        ("Portugal", "PT", ()),
        ("Austria", "AT", ("autriche", "osterreich")),
        ("Czech Republic", "CZ", ("republique tcheque", "tschechien", "czechia")),
        ("Poland", "PL", ("pologne", "polonia", "polen")),
        ("Hungary", "HU", ("hongrie", "hungria", "ungarn")),
        ("Ireland", "IE", ("irlande", "irlanda")),
        ("Switzerland", "CH", ("suisse", "suiza", "schweiz")),
        ("Denmark", "DK", ("danemark", "dinamarca")),
        ("Sweden", "SE", ("suede", "suecia", "schweden")),
        ("Croatia", "HR", ("croatie", "croacia", "kroatien")),
    ]
    return [GazetteerEntry(name=name, code=code, aliases=aliases) for name, code, aliases in rows]


def load_gazetteer() -> Gazetteer:
    return Gazetteer(cities=tuple(_build_cities()), countries=tuple(_build_countries()))


def default_trending() -> List[TrendingEntry]:
    """Seed trending dataset used until analytics provide a real one."""

    return [
        TrendingEntry("Paris vers Lyon", 1250, "up"),
        TrendingEntry("Berlin vers Prague", 980, "up"),
        TrendingEntry("Amsterdam vers Bruxelles", 875, "stable"),
        TrendingEntry("Barcelone vers Madrid", 720, "up"),
        TrendingEntry("Munich vers Vienne", 650, "down"),
        TrendingEntry("aire de repos A1", 540, "up"),
        TrendingEntry("station service autoroute", 480, "stable"),
        TrendingEntry("meilleur spot monde", 420, "up"),
    ]
