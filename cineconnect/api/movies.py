"""Film catalog endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cineconnect.db.session import get_db
from cineconnect.schemas.film import FilmDetails, FilmOut
from cineconnect.services.catalog import CatalogMovie
from cineconnect.services.film_service import film_details, latest_films, search_films

router = APIRouter(prefix="/movies", tags=["movies"])


def _catalog_out(movie: CatalogMovie) -> FilmOut:
    return FilmOut(
        tmdb_id=movie.tmdb_id,
        title=movie.title,
        original_title=movie.original_title,
        synopsis=movie.synopsis,
        release_date=movie.release_date,
        runtime=movie.runtime,
        poster_url=movie.poster_url,
        public_rating=movie.public_rating,
        public_votes=movie.public_votes,
        genres=list(movie.genres),
        director=movie.director,
        cast=list(movie.cast),
    )


@router.get("/latest", response_model=list[FilmOut])
def latest(db: Session = Depends(get_db)):
    """Catalog films with this site's average rating."""
    return latest_films(db)


@router.get("/search", response_model=list[FilmOut])
def search(
    q: str = Query(min_length=1),
    db: Session = Depends(get_db),
):
    """Search stored films, then catalog films not imported yet (no id)."""
    return [
        _catalog_out(film) if isinstance(film, CatalogMovie) else FilmOut.model_validate(film)
        for film in search_films(db, q)
    ]


@router.get("/{film_ref}", response_model=FilmDetails)
def details(film_ref: int, db: Session = Depends(get_db)):
    """Film by local id or catalog tmdb id, with its reviews and replies."""
    result = film_details(db, film_ref)
    film = FilmOut.model_validate(result["film"])
    return FilmDetails(**film.model_dump(), reviews=result["reviews"])
