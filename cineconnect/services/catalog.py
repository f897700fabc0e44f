"""Static public movie catalog.

Read-only stand-in for an external movie database, keyed by TMDB id. Films
are copied into the store the first time they are used.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

POSTER_BASE = "https://image.tmdb.org/t/p/w500"


@dataclass(frozen=True)
class CatalogMovie:
    tmdb_id: int
    title: str
    original_title: str
    synopsis: str
    release_date: date
    poster_path: str
    public_rating: float
    public_votes: int
    genres: tuple[str, ...] = ()
    director: str | None = None
    cast: tuple[str, ...] = field(default_factory=tuple)
    runtime: int | None = None

    @property
    def poster_url(self) -> str:
        return f"{POSTER_BASE}{self.poster_path}"


CATALOG: tuple[CatalogMovie, ...] = (
    CatalogMovie(
        tmdb_id=550,
        title="Fight Club",
        original_title="Fight Club",
        synopsis="An insomniac office worker and a soap salesman form an underground fight club that becomes much more.",
        release_date=date(1999, 10, 15),
        poster_path="/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg",
        public_rating=8.4,
        public_votes=25000,
        genres=("Drama", "Thriller"),
        director="David Fincher",
        cast=("Brad Pitt", "Edward Norton", "Helena Bonham Carter"),
        runtime=139,
    ),
    CatalogMovie(
        tmdb_id=278,
        title="The Shawshank Redemption",
        original_title="The Shawshank Redemption",
        synopsis="Two imprisoned men bond over a number of years, finding solace and eventual redemption through acts of common decency.",
        release_date=date(1994, 9, 23),
        poster_path="/q6y0Go1tsGEsmtFryDOJo3dEmqu.jpg",
        public_rating=9.3,
        public_votes=28000,
        genres=("Drama", "Crime"),
        director="Frank Darabont",
        cast=("Tim Robbins", "Morgan Freeman"),
        runtime=142,
    ),
    CatalogMovie(
        tmdb_id=238,
        title="The Godfather",
        original_title="The Godfather",
        synopsis="The epic story of the Corleone family and their crime empire.",
        release_date=date(1972, 3, 24),
        poster_path="/rSPw7tgCH9c6NqICZef4kZjFOQ5.jpg",
        public_rating=9.2,
        public_votes=19000,
        genres=("Drama", "Crime"),
        director="Francis Ford Coppola",
        cast=("Marlon Brando", "Al Pacino", "James Caan"),
        runtime=175,
    ),
    CatalogMovie(
        tmdb_id=424,
        title="Schindler's List",
        original_title="Schindler's List",
        synopsis="The true story of Oskar Schindler, a German businessman who saved more than a thousand Jewish refugees during the Holocaust.",
        release_date=date(1993, 12, 15),
        poster_path="/sF1U4EUQS8YHUYjNl3pMGNIQyr0.jpg",
        public_rating=8.9,
        public_votes=15000,
        genres=("Drama", "History"),
        director="Steven Spielberg",
        cast=("Liam Neeson", "Ben Kingsley", "Ralph Fiennes"),
        runtime=195,
    ),
    CatalogMovie(
        tmdb_id=13,
        title="Forrest Gump",
        original_title="Forrest Gump",
        synopsis="A simple man lives through extraordinary adventures across several decades of American history.",
        release_date=date(1994, 7, 6),
        poster_path="/arw2vcBvePOVTg9NVXQBbq2pvPo.jpg",
        public_rating=8.8,
        public_votes=22000,
        genres=("Comedy", "Drama"),
        director="Robert Zemeckis",
        cast=("Tom Hanks", "Robin Wright"),
        runtime=142,
    ),
    CatalogMovie(
        tmdb_id=155,
        title="The Dark Knight",
        original_title="The Dark Knight",
        synopsis="Batman faces one of the greatest psychological and physical tests of his ability to fight injustice.",
        release_date=date(2008, 7, 18),
        poster_path="/qJ2tW6WMUDux911r6m7haRef0WH.jpg",
        public_rating=9.0,
        public_votes=30000,
        genres=("Action", "Crime", "Drama"),
        director="Christopher Nolan",
        cast=("Christian Bale", "Heath Ledger", "Aaron Eckhart"),
        runtime=152,
    ),
    CatalogMovie(
        tmdb_id=27205,
        title="Inception",
        original_title="Inception",
        synopsis="A thief who enters the dreams of others to steal secrets from their subconscious.",
        release_date=date(2010, 7, 16),
        poster_path="/oYuLEt3zVCKq57qu2F8dT7NIa6f.jpg",
        public_rating=8.8,
        public_votes=35000,
        genres=("Action", "Science Fiction", "Thriller"),
        director="Christopher Nolan",
        cast=("Leonardo DiCaprio", "Joseph Gordon-Levitt", "Elliot Page"),
        runtime=148,
    ),
    CatalogMovie(
        tmdb_id=680,
        title="Pulp Fiction",
        original_title="Pulp Fiction",
        synopsis="The lives of two hitmen, a boxer, a gangster and his wife, and a pair of diner bandits intertwine.",
        release_date=date(1994, 10, 14),
        poster_path="/d5iIlFn5s0ImszYzBPb8JPIfbXD.jpg",
        public_rating=8.9,
        public_votes=27000,
        genres=("Crime", "Drama"),
        director="Quentin Tarantino",
        cast=("John Travolta", "Uma Thurman", "Samuel L. Jackson"),
        runtime=154,
    ),
    CatalogMovie(
        tmdb_id=429,
        title="The Good, the Bad and the Ugly",
        original_title="Il buono, il brutto, il cattivo",
        synopsis="During the American Civil War, three men compete to find a hidden fortune in gold.",
        release_date=date(1966, 12, 23),
        poster_path="/bX2xnavhMYjWDoZp1VM6VnU1xwe.jpg",
        public_rating=8.8,
        public_votes=8000,
        genres=("Western",),
        director="Sergio Leone",
        cast=("Clint Eastwood", "Eli Wallach", "Lee Van Cleef"),
        runtime=161,
    ),
    CatalogMovie(
        tmdb_id=497,
        title="The Green Mile",
        original_title="The Green Mile",
        synopsis="A death row guard in the 1930s meets John Coffey, a prisoner with a mysterious gift.",
        release_date=date(1999, 12, 10),
        poster_path="/velWPhVMQeQKcxggNEU8YmIo52R.jpg",
        public_rating=8.6,
        public_votes=16000,
        genres=("Fantasy", "Drama", "Crime"),
        director="Frank Darabont",
        cast=("Tom Hanks", "Michael Clarke Duncan"),
        runtime=189,
    ),
    CatalogMovie(
        tmdb_id=11216,
        title="Cinema Paradiso",
        original_title="Nuovo Cinema Paradiso",
        synopsis="A filmmaker recalls his childhood, when he fell in love with the pictures at the village cinema.",
        release_date=date(1988, 11, 17),
        poster_path="/8SRUfRUi6x4O68n0VCbDNRa6iGL.jpg",
        public_rating=8.5,
        public_votes=4000,
        genres=("Drama",),
        director="Giuseppe Tornatore",
        cast=("Philippe Noiret", "Salvatore Cascio"),
        runtime=155,
    ),
    CatalogMovie(
        tmdb_id=129,
        title="Spirited Away",
        original_title="Sen to Chihiro no Kamikakushi",
        synopsis="A ten-year-old girl wanders into a world ruled by gods, witches and spirits.",
        release_date=date(2001, 7, 20),
        poster_path="/39wmItIWsg5sZMyRUHLkWBcuVCM.jpg",
        public_rating=8.6,
        public_votes=18000,
        genres=("Animation", "Family", "Fantasy"),
        director="Hayao Miyazaki",
        cast=("Rumi Hiiragi", "Miyu Irino"),
        runtime=125,
    ),
)

_BY_TMDB_ID = {movie.tmdb_id: movie for movie in CATALOG}


def get_catalog_movie(tmdb_id: int) -> CatalogMovie | None:
    return _BY_TMDB_ID.get(tmdb_id)


def search_catalog(query: str) -> list[CatalogMovie]:
    """Case-insensitive substring match on title and original title."""
    needle = query.strip().lower()
    if not needle:
        return []
    return [
        movie
        for movie in CATALOG
        if needle in movie.title.lower() or needle in movie.original_title.lower()
    ]
